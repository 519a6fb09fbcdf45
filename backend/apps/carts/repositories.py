from typing import List, Optional

from apps.common.repository import GenericRepository
from .models import Cart, CartItem, default_expiry


class CartRepository(GenericRepository[Cart]):
    def __init__(self):
        super().__init__(Cart)

    def get_for_owner(self, **owner) -> Optional[Cart]:
        return self.model.objects.filter(**owner).first()

    def get_or_create_for_owner(self, **owner) -> Cart:
        cart, _created = self.model.objects.get_or_create(**owner)
        return cart

    def touch(self, cart: Cart) -> None:
        cart.expires_at = default_expiry()
        cart.save(update_fields=["expires_at", "updated_at"])

    def purge_expired(self, now) -> int:
        expired = self.model.objects.filter(expires_at__lt=now)
        count = expired.count()
        expired.delete()
        return count


class CartItemRepository(GenericRepository[CartItem]):
    default_ordering = ("id",)

    def __init__(self):
        super().__init__(CartItem)

    def list_for_cart(self, cart_id: int) -> List[CartItem]:
        return list(
            self.model.objects.filter(cart_id=cart_id)
            .select_related("product")
            .order_by(*self.default_ordering)
        )

    def get_line(self, cart_id: int, product_id: int) -> Optional[CartItem]:
        return self.model.objects.filter(cart_id=cart_id, product_id=product_id).first()

    def add_line(self, cart: Cart, product_id: int, quantity: int) -> CartItem:
        return self.model.objects.create(cart=cart, product_id=product_id, quantity=quantity)

    def set_quantity(self, item: CartItem, quantity: int) -> CartItem:
        item.quantity = quantity
        item.save(update_fields=["quantity"])
        return item

    def delete_line(self, cart_id: int, product_id: int) -> int:
        deleted, _ = self.model.objects.filter(
            cart_id=cart_id, product_id=product_id
        ).delete()
        return deleted
