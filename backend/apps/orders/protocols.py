from decimal import Decimal
from typing import Any, Dict, Iterable, List, Optional, Protocol, Sequence, Tuple

from apps.auth.identity import ShopperIdentity
from apps.carts.dtos import CartLine
from .dtos import OrderLineSnapshot
from .models import Order, OrderItem
from .payments import PaymentResult


class OrderRepositoryProtocol(Protocol):
    def create_order(self, *, lines: Sequence[OrderLineSnapshot], **data: Any) -> Order: ...
    def update(self, obj: Order, **data: Any) -> Order: ...
    def get(self, **filters: Any) -> Optional[Order]: ...
    def get_for_update(self, order_id: int) -> Optional[Order]: ...
    def items_of(self, order: Order) -> List[OrderItem]: ...
    def page(
        self, *, offset: int, limit: int, ordering: Optional[Sequence[str]] = None, **filters: Any
    ) -> Tuple[List[Order], int]: ...
    def count(self, **filters: Any) -> int: ...
    def revenue(self) -> Decimal: ...
    def recent(self, limit: int) -> Iterable[Order]: ...


class StockRepositoryProtocol(Protocol):
    def get_many(self, product_ids: Iterable[int]) -> Dict[int, Any]: ...
    def decrement_stock(self, product_id: int, quantity: int) -> bool: ...
    def increment_stock(self, product_id: int, quantity: int) -> None: ...
    def count(self, **filters: Any) -> int: ...


class CartGatewayProtocol(Protocol):
    def lines(self, identity: ShopperIdentity) -> List[CartLine]: ...
    def clear_cart(self, identity: ShopperIdentity) -> None: ...


class ListingCacheProtocol(Protocol):
    def invalidate_listing_cache(self) -> None: ...


class PaymentGatewayProtocol(Protocol):
    def charge(self, *, reference: str, amount: Decimal, method: str) -> PaymentResult: ...
