from __future__ import annotations

from typing import Any, List, Optional, Protocol

from .models import Cart, CartItem


class CartRepositoryProtocol(Protocol):
    def get_for_owner(self, **owner) -> Optional[Cart]:
        ...

    def get_or_create_for_owner(self, **owner) -> Cart:
        ...

    def touch(self, cart: Cart) -> None:
        ...

    def delete(self, cart: Cart) -> None:
        ...

    def purge_expired(self, now) -> int:
        ...


class CartItemRepositoryProtocol(Protocol):
    def list_for_cart(self, cart_id: int) -> List[CartItem]:
        ...

    def get_line(self, cart_id: int, product_id: int) -> Optional[CartItem]:
        ...

    def add_line(self, cart: Cart, product_id: int, quantity: int) -> CartItem:
        ...

    def set_quantity(self, item: CartItem, quantity: int) -> CartItem:
        ...

    def delete_line(self, cart_id: int, product_id: int) -> int:
        ...


class ProductLookupProtocol(Protocol):
    def get(self, **filters) -> Optional[Any]:
        ...

