from __future__ import annotations

from typing import List

from django.db import transaction
from django.utils import timezone

from apps.auth.identity import ShopperIdentity
from apps.common import get_logger
from apps.common.errors import NotFoundError, ValidationError
from .commands import CartItemCommand, CartQuantityCommand
from .dtos import CartDTO, CartLine, CartTotalsDTO
from .mappers import CartMapper
from .models import MAX_LINE_QUANTITY
from .protocols import (
    CartItemRepositoryProtocol,
    CartRepositoryProtocol,
    ProductLookupProtocol,
)

logger = get_logger(__name__).bind(component="carts", layer="service")


class CartService:
    """
    Cart aggregate for one shopper identity.

    Mutations never check stock; availability is enforced at checkout. Prices
    are read live from the product on every projection.
    """

    def __init__(
        self,
        carts: CartRepositoryProtocol,
        cart_items: CartItemRepositoryProtocol,
        products: ProductLookupProtocol,
        cart_mapper: CartMapper,
        max_item_quantity: int = MAX_LINE_QUANTITY,
    ):
        self.carts = carts
        self.cart_items = cart_items
        self.products = products
        self.cart_mapper = cart_mapper
        self.max_item_quantity = max_item_quantity
        self.logger = logger.bind(service="CartService")

    def _items(self, cart) -> list:
        return self.cart_items.list_for_cart(cart.id) if cart is not None else []

    def _project(self, identity: ShopperIdentity) -> CartDTO:
        cart = self.carts.get_for_owner(**identity.owner_filter())
        return self.cart_mapper.to_dto(str(identity), cart, self._items(cart))

    def _require_quantity(self, quantity: int, *, product_id: int) -> None:
        if quantity < 1:
            raise ValidationError(
                "quantity must be at least 1",
                details={"productId": product_id, "quantity": quantity},
            )
        if quantity > self.max_item_quantity:
            raise ValidationError(
                f"quantity cannot exceed {self.max_item_quantity}",
                details={"productId": product_id, "quantity": quantity},
            )

    def _require_product(self, product_id: int) -> None:
        if self.products.get(id=product_id, is_active=True) is None:
            self.logger.info("Cart add rejected: product not found", product_id=product_id)
            raise NotFoundError("Product not found", details={"productId": product_id})

    def get_cart(self, identity: ShopperIdentity) -> CartDTO:
        self.logger.debug("Fetching cart", owner=str(identity))
        return self._project(identity)

    def get_totals(self, identity: ShopperIdentity) -> CartTotalsDTO:
        cart = self.carts.get_for_owner(**identity.owner_filter())
        return self.cart_mapper.totals_for(self._items(cart))

    def lines(self, identity: ShopperIdentity) -> List[CartLine]:
        """Stored lines in insertion order, without touching product rows."""
        cart = self.carts.get_for_owner(**identity.owner_filter())
        return [
            CartLine(product_id=item.product_id, quantity=item.quantity)
            for item in self._items(cart)
        ]

    def add_item(self, identity: ShopperIdentity, command: CartItemCommand) -> CartDTO:
        self._require_quantity(command.quantity, product_id=command.product_id)
        self._require_product(command.product_id)
        with transaction.atomic():
            cart = self.carts.get_or_create_for_owner(**identity.owner_filter())
            existing = self.cart_items.get_line(cart.id, command.product_id)
            if existing is None:
                self.cart_items.add_line(cart, command.product_id, command.quantity)
                new_quantity = command.quantity
            else:
                new_quantity = existing.quantity + command.quantity
                self._require_quantity(new_quantity, product_id=command.product_id)
                self.cart_items.set_quantity(existing, new_quantity)
            self.carts.touch(cart)
        self.logger.info(
            "Cart item added",
            owner=str(identity),
            product_id=command.product_id,
            quantity=new_quantity,
        )
        return self._project(identity)

    def update_quantity(
        self, identity: ShopperIdentity, command: CartQuantityCommand
    ) -> CartDTO:
        if command.quantity <= 0:
            return self.remove_item(identity, command.product_id)
        self._require_quantity(command.quantity, product_id=command.product_id)
        cart = self.carts.get_for_owner(**identity.owner_filter())
        existing = self.cart_items.get_line(cart.id, command.product_id) if cart else None
        if existing is None:
            self.logger.debug(
                "Quantity update for a product not in the cart ignored",
                owner=str(identity),
                product_id=command.product_id,
            )
            return self._project(identity)
        with transaction.atomic():
            self.cart_items.set_quantity(existing, command.quantity)
            self.carts.touch(cart)
        self.logger.info(
            "Cart item quantity set",
            owner=str(identity),
            product_id=command.product_id,
            quantity=command.quantity,
        )
        return self._project(identity)

    def remove_item(self, identity: ShopperIdentity, product_id: int) -> CartDTO:
        cart = self.carts.get_for_owner(**identity.owner_filter())
        if cart is not None and self.cart_items.delete_line(cart.id, product_id):
            self.carts.touch(cart)
            self.logger.info("Cart item removed", owner=str(identity), product_id=product_id)
        else:
            self.logger.debug(
                "Cart item removal was a no-op", owner=str(identity), product_id=product_id
            )
        return self._project(identity)

    def clear_cart(self, identity: ShopperIdentity) -> None:
        cart = self.carts.get_for_owner(**identity.owner_filter())
        if cart is None:
            return
        self.carts.delete(cart)
        self.logger.info("Cart cleared", owner=str(identity))

    def purge_expired(self) -> int:
        removed = self.carts.purge_expired(timezone.now())
        self.logger.info("Expired carts purged", removed=removed)
        return removed
