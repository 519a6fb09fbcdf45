from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, Dict, List, Optional

from apps.common.pagination import PageRequest

SORT_ORDERINGS = {
    "newest": ("-created_at", "-id"),
    "price-low": ("price", "id"),
    "price-high": ("-price", "id"),
    "name-asc": ("name", "id"),
    "name-desc": ("-name", "id"),
}

UPDATABLE_FIELDS = (
    "name",
    "description",
    "price",
    "stock",
    "images",
    "category",
    "brand",
    "tags",
    "specifications",
    "is_active",
    "featured",
    "sku",
)


@dataclass(frozen=True)
class ProductSearchCommand:
    query: Optional[str] = None
    category: Optional[str] = None
    min_price: Optional[Decimal] = None
    max_price: Optional[Decimal] = None
    in_stock: bool = False
    featured: bool = False
    sort_by: str = "newest"
    page: PageRequest = PageRequest(page=1, limit=12)

    @property
    def ordering(self):
        return SORT_ORDERINGS.get(self.sort_by, SORT_ORDERINGS["newest"])

    def filters(self) -> Dict[str, Any]:
        filters: Dict[str, Any] = {"is_active": True}
        if self.category and self.category != "all":
            filters["category"] = self.category
        if self.min_price is not None:
            filters["price__gte"] = self.min_price
        if self.max_price is not None:
            filters["price__lte"] = self.max_price
        if self.in_stock:
            filters["stock__gt"] = 0
        if self.featured:
            filters["featured"] = True
        return filters

    def cache_fragment(self) -> str:
        parts = [
            self.query or "",
            self.category or "all",
            "" if self.min_price is None else str(self.min_price),
            "" if self.max_price is None else str(self.max_price),
            "1" if self.in_stock else "0",
            "1" if self.featured else "0",
            self.sort_by,
            str(self.page.page),
            str(self.page.limit),
        ]
        return ":".join(parts)

    @staticmethod
    def from_validated(data: Dict[str, Any]) -> "ProductSearchCommand":
        return ProductSearchCommand(
            query=(data.get("query") or "").strip() or None,
            category=data.get("category") or None,
            min_price=data.get("minPrice"),
            max_price=data.get("maxPrice"),
            in_stock=bool(data.get("inStock", False)),
            featured=bool(data.get("featured", False)),
            sort_by=data.get("sortBy") or "newest",
            page=PageRequest(page=data.get("page", 1), limit=data.get("limit", 12)),
        )


@dataclass
class ProductCreateCommand:
    name: str
    sku: str
    description: str
    price: Decimal
    category: str
    images: List[str]
    stock: int = 0
    brand: str = ""
    tags: List[str] = field(default_factory=list)
    specifications: Dict[str, Any] = field(default_factory=dict)
    is_active: bool = True
    featured: bool = False

    @staticmethod
    def from_validated(data: Dict[str, Any]) -> "ProductCreateCommand":
        return ProductCreateCommand(
            name=data["name"].strip(),
            sku=data["sku"].strip().upper(),
            description=data["description"].strip(),
            price=data["price"],
            category=data["category"],
            images=list(data["images"]),
            stock=data.get("stock", 0),
            brand=(data.get("brand") or "").strip(),
            tags=list(data.get("tags") or []),
            specifications=dict(data.get("specifications") or {}),
            is_active=data.get("is_active", True),
            featured=data.get("featured", False),
        )


@dataclass
class ProductUpdateCommand:
    product_id: int
    changes: Dict[str, Any] = field(default_factory=dict)

    @staticmethod
    def from_validated(product_id: int, data: Dict[str, Any]) -> "ProductUpdateCommand":
        changes = {key: data[key] for key in UPDATABLE_FIELDS if key in data}
        if "sku" in changes:
            changes["sku"] = changes["sku"].strip().upper()
        if "name" in changes:
            changes["name"] = changes["name"].strip()
        return ProductUpdateCommand(product_id=product_id, changes=changes)
