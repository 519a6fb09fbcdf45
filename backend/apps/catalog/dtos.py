from dataclasses import dataclass, field
from typing import Any, Dict, List


@dataclass
class ProductDTO:
    id: int
    name: str
    slug: str
    sku: str
    description: str
    price: str
    stock: int
    in_stock: bool
    images: List[str]
    category: str
    brand: str
    tags: List[str]
    specifications: Dict[str, Any]
    is_active: bool
    featured: bool
    created_at: str
    updated_at: str


@dataclass
class ProductSummaryDTO:
    """Compact product shape embedded in cart lines."""

    id: int
    name: str
    slug: str
    price: str
    image: str
    stock: int
    is_active: bool


@dataclass
class ProductPageDTO:
    products: List[ProductDTO] = field(default_factory=list)
    pagination: Dict[str, Any] = field(default_factory=dict)


"""DTO dataclasses only. Mapping logic lives in mappers.py."""
