from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, Dict, List, Optional


@dataclass(frozen=True)
class OrderLineSnapshot:
    """Product facts captured at the moment of purchase."""

    product_id: int
    product_name: str
    product_image: str
    quantity: int
    price: Decimal
    total: Decimal

    def as_fields(self) -> Dict[str, Any]:
        return {
            "product_id": self.product_id,
            "product_name": self.product_name,
            "product_image": self.product_image,
            "quantity": self.quantity,
            "price": self.price,
            "total": self.total,
        }


@dataclass
class OrderItemDTO:
    id: int
    product_id: Optional[int]
    product_name: str
    product_image: str
    quantity: int
    price: str
    total: str


@dataclass
class OrderDTO:
    id: int
    order_number: str
    user_id: int
    items: List[OrderItemDTO]
    subtotal: str
    shipping: str
    vat: str
    total: str
    status: str
    payment_status: str
    shipping_address: Dict[str, Any]
    billing_address: Dict[str, Any]
    payment_method: str
    notes: str
    created_at: str
    updated_at: str
    contact_email: str = ""


@dataclass
class OrderPageDTO:
    orders: List[OrderDTO] = field(default_factory=list)
    pagination: Dict[str, Any] = field(default_factory=dict)


@dataclass
class CheckoutResultDTO:
    order_id: int
    order_number: str


@dataclass
class AdminStatsDTO:
    products: Dict[str, int]
    orders: Dict[str, Any]
    recent_orders: List[OrderDTO] = field(default_factory=list)
