from __future__ import annotations

from apps.carts.container import build_cart_service
from apps.catalog.container import build_product_service
from apps.catalog.repositories import ProductRepository

from .numbering import get_order_number_generator
from .payments import AlwaysApprovePaymentGateway
from .pricing import PricingPolicy
from .repositories import OrderRepository
from .services import AdminOrderService, CheckoutService, OrderService


def build_checkout_service() -> CheckoutService:
    return CheckoutService(
        orders=OrderRepository(),
        products=ProductRepository(),
        cart=build_cart_service(),
        payments=AlwaysApprovePaymentGateway(),
        pricing=PricingPolicy.from_settings(),
        number_generator=get_order_number_generator(),
        listing_cache=build_product_service(),
    )


def build_order_service() -> OrderService:
    return OrderService(orders=OrderRepository())


def build_admin_order_service() -> AdminOrderService:
    return AdminOrderService(
        orders=OrderRepository(),
        products=ProductRepository(),
        listing_cache=build_product_service(),
    )
