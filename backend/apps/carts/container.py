from __future__ import annotations

from django.conf import settings

from apps.catalog.repositories import ProductRepository
from apps.orders.pricing import PricingPolicy

from .mappers import CartMapper
from .models import MAX_LINE_QUANTITY
from .repositories import CartItemRepository, CartRepository
from .services import CartService


def build_cart_service() -> CartService:
    return CartService(
        carts=CartRepository(),
        cart_items=CartItemRepository(),
        products=ProductRepository(),
        cart_mapper=CartMapper(PricingPolicy.from_settings()),
        max_item_quantity=getattr(
            settings, "STOREFRONT_MAX_ITEM_QUANTITY", MAX_LINE_QUANTITY
        ),
    )
