from dataclasses import dataclass, field
from typing import List, Optional

from apps.catalog.dtos import ProductSummaryDTO


@dataclass
class CartLineDTO:
    product: ProductSummaryDTO
    quantity: int
    line_total: str


@dataclass
class CartTotalsDTO:
    item_count: int
    subtotal: str
    shipping: str
    vat: str
    total: str


@dataclass
class CartDTO:
    owner: str
    items: List[CartLineDTO] = field(default_factory=list)
    total_item_count: int = 0
    totals: Optional[CartTotalsDTO] = None
    updated_at: Optional[str] = None


@dataclass(frozen=True)
class CartLine:
    """Product id and quantity as stored, before any product is looked up."""

    product_id: int
    quantity: int
