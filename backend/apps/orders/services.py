from __future__ import annotations

from operator import attrgetter
from typing import Callable, Dict, List, Optional, Sequence

from django.db import DatabaseError, transaction

from apps.auth.identity import ShopperIdentity
from apps.carts.dtos import CartLine
from apps.common import get_logger
from apps.common.errors import NotFoundError
from apps.common.pagination import pagination_payload
from .commands import AdminOrderListCommand, CheckoutCommand, OrderListCommand, OrderStatusCommand
from .dtos import AdminStatsDTO, CheckoutResultDTO, OrderDTO, OrderLineSnapshot, OrderPageDTO
from .exceptions import (
    DuplicateOrderNumberError,
    EmptyCartError,
    InsufficientStockError,
    InvalidStatusTransitionError,
    OrderCreationError,
    PaymentDeclinedError,
    ProductUnavailableError,
)
from .mappers import OrderMapper
from .models import Order, OrderStatus, PaymentStatus, can_transition
from .pricing import OrderTotals, PricingPolicy, line_total, subtotal_of
from .protocols import (
    CartGatewayProtocol,
    ListingCacheProtocol,
    OrderRepositoryProtocol,
    PaymentGatewayProtocol,
    StockRepositoryProtocol,
)

logger = get_logger(__name__).bind(component="orders", layer="service")

RECENT_ORDERS_LIMIT = 5


class CheckoutService:
    """
    Turns the signed-in shopper's cart into a confirmed, price-locked order.

    Availability and stock are re-read from the catalog at checkout time, never
    trusted from the cart. Stock leaves the catalog through a conditional
    decrement, so two shoppers racing for the last unit cannot both win.
    """

    def __init__(
        self,
        orders: OrderRepositoryProtocol,
        products: StockRepositoryProtocol,
        cart: CartGatewayProtocol,
        payments: PaymentGatewayProtocol,
        pricing: PricingPolicy,
        number_generator: Callable[[], str],
        listing_cache: Optional[ListingCacheProtocol] = None,
    ):
        self.orders = orders
        self.products = products
        self.cart = cart
        self.payments = payments
        self.pricing = pricing
        self.number_generator = number_generator
        self.listing_cache = listing_cache
        self.logger = logger.bind(service="CheckoutService")

    def _validate_lines(self, lines: Sequence[CartLine], products: Dict[int, object]) -> None:
        for line in lines:
            product = products.get(line.product_id)
            if product is None or not product.is_active:
                name = getattr(product, "name", None)
                self.logger.warning(
                    "Checkout rejected: product unavailable", product_id=line.product_id
                )
                raise ProductUnavailableError(
                    f"{name} is no longer available" if name else None,
                    details={"productId": line.product_id},
                )
            if product.stock < line.quantity:
                self.logger.warning(
                    "Checkout rejected: insufficient stock",
                    product_id=line.product_id,
                    requested=line.quantity,
                    available=product.stock,
                )
                raise InsufficientStockError(
                    f"Insufficient stock for {product.name}",
                    details={
                        "productId": line.product_id,
                        "requested": line.quantity,
                        "available": product.stock,
                    },
                    hint="Reduce the quantity in your cart and try again.",
                )

    @staticmethod
    def _snapshot(line: CartLine, product) -> OrderLineSnapshot:
        images = product.images or []
        return OrderLineSnapshot(
            product_id=line.product_id,
            product_name=product.name,
            product_image=images[0] if images else "",
            quantity=line.quantity,
            price=product.price,
            total=line_total(product.price, line.quantity),
        )

    def _take_stock(self, snapshots: Sequence[OrderLineSnapshot], taken: List[OrderLineSnapshot]) -> None:
        # Fixed id order keeps concurrent checkouts from deadlocking on row locks.
        for snap in sorted(snapshots, key=attrgetter("product_id")):
            if not self.products.decrement_stock(snap.product_id, snap.quantity):
                self.logger.warning(
                    "Stock decrement lost a race", product_id=snap.product_id
                )
                raise InsufficientStockError(
                    f"Insufficient stock for {snap.product_name}",
                    details={"productId": snap.product_id, "requested": snap.quantity},
                    hint="Reduce the quantity in your cart and try again.",
                )
            taken.append(snap)

    def _restore_stock(self, taken: Sequence[OrderLineSnapshot]) -> None:
        # Rolling back the enclosing atomic() also undoes the decrements; these
        # increments keep stock right when no real transaction surrounds the block.
        for snap in taken:
            try:
                self.products.increment_stock(snap.product_id, snap.quantity)
            except DatabaseError:
                self.logger.exception(
                    "Stock restore failed, leaving it to the transaction rollback",
                    product_id=snap.product_id,
                    quantity=snap.quantity,
                )

    def _collect_payment(self, order: Order, command: CheckoutCommand) -> Order:
        result = self.payments.charge(
            reference=order.order_number,
            amount=order.total,
            method=command.payment_method,
        )
        if not result.approved:
            raise PaymentDeclinedError(
                result.reason, details={"orderNumber": order.order_number}
            )
        return self.orders.update(
            order, status=OrderStatus.CONFIRMED, payment_status=PaymentStatus.PAID
        )

    def _after_commit(self) -> None:
        if self.listing_cache is not None:
            self.listing_cache.invalidate_listing_cache()

    def _place_order(
        self,
        identity: ShopperIdentity,
        command: CheckoutCommand,
        snapshots: Sequence[OrderLineSnapshot],
        totals: OrderTotals,
    ) -> Order:
        order_number = self.number_generator()
        with transaction.atomic():
            taken: List[OrderLineSnapshot] = []
            try:
                self._take_stock(snapshots, taken)
                order = self.orders.create_order(
                    lines=snapshots,
                    order_number=order_number,
                    user_id=identity.user_id,
                    subtotal=totals.subtotal,
                    shipping=totals.shipping,
                    vat=totals.vat,
                    total=totals.total,
                    status=OrderStatus.PENDING,
                    payment_status=PaymentStatus.PENDING,
                    shipping_address=command.shipping_address.snapshot(),
                    billing_address=command.billing_address.snapshot(),
                    payment_method=command.payment_method,
                    notes=command.notes,
                    contact_email=command.email,
                )
                order = self._collect_payment(order, command)
                self.cart.clear_cart(identity)
            except Exception:
                self._restore_stock(taken)
                raise
            transaction.on_commit(self._after_commit)
        return order

    def checkout(self, user_id: int, command: CheckoutCommand) -> CheckoutResultDTO:
        identity = ShopperIdentity(user_id=user_id)
        lines = self.cart.lines(identity)
        if not lines:
            self.logger.warning("Checkout rejected: cart is empty", user_id=user_id)
            raise EmptyCartError(hint="Add products to your cart before checking out.")

        products = self.products.get_many([line.product_id for line in lines])
        self._validate_lines(lines, products)
        snapshots = [self._snapshot(line, products[line.product_id]) for line in lines]
        totals = self.pricing.totals(subtotal_of((s.price, s.quantity) for s in snapshots))
        self.logger.debug(
            "Checkout validated",
            user_id=user_id,
            lines=len(snapshots),
            total=totals.total,
        )

        try:
            try:
                order = self._place_order(identity, command, snapshots, totals)
            except DuplicateOrderNumberError:
                self.logger.warning("Order number collision, retrying", user_id=user_id)
                order = self._place_order(identity, command, snapshots, totals)
        except DatabaseError as exc:
            self.logger.exception("Order persistence failed", user_id=user_id)
            raise OrderCreationError(details={"reason": type(exc).__name__}) from exc

        self.logger.info(
            "Order placed",
            user_id=user_id,
            order_id=order.id,
            order_number=order.order_number,
            total=order.total,
        )
        return CheckoutResultDTO(order_id=order.id, order_number=order.order_number)


class OrderService:
    def __init__(self, orders: OrderRepositoryProtocol):
        self.orders = orders
        self.logger = logger.bind(service="OrderService")

    def get_order(self, user_id: int, order_id: int) -> OrderDTO:
        # Someone else's order is reported exactly like a missing one.
        order = self.orders.get(pk=order_id, user_id=user_id)
        if order is None:
            self.logger.info("Order not found for user", order_id=order_id, user_id=user_id)
            raise NotFoundError("Order not found", details={"orderId": order_id})
        return OrderMapper.to_dto(order)

    def list_orders(self, command: OrderListCommand) -> OrderPageDTO:
        self.logger.debug(
            "Listing orders", user_id=command.user_id, page=command.page.page
        )
        rows, total = self.orders.page(
            offset=command.page.offset,
            limit=command.page.limit,
            user_id=command.user_id,
        )
        return OrderPageDTO(
            orders=OrderMapper.many_to_dto(rows),
            pagination=pagination_payload(command.page, total),
        )


class AdminOrderService:
    def __init__(
        self,
        orders: OrderRepositoryProtocol,
        products: StockRepositoryProtocol,
        listing_cache: Optional[ListingCacheProtocol] = None,
    ):
        self.orders = orders
        self.products = products
        self.listing_cache = listing_cache
        self.logger = logger.bind(service="AdminOrderService")

    def list_orders(self, command: AdminOrderListCommand) -> OrderPageDTO:
        rows, total = self.orders.page(
            offset=command.page.offset,
            limit=command.page.limit,
            **command.filters(),
        )
        return OrderPageDTO(
            orders=OrderMapper.many_to_dto(rows),
            pagination=pagination_payload(command.page, total),
        )

    def _restock(self, order: Order) -> None:
        for item in self.orders.items_of(order):
            if item.product_id is None:
                continue
            self.products.increment_stock(item.product_id, item.quantity)

    def _after_commit(self) -> None:
        if self.listing_cache is not None:
            self.listing_cache.invalidate_listing_cache()

    def update_status(self, command: OrderStatusCommand) -> OrderDTO:
        with transaction.atomic():
            order = self.orders.get_for_update(command.order_id)
            if order is None:
                raise NotFoundError("Order not found", details={"orderId": command.order_id})
            current = order.status
            if command.status == current:
                raise InvalidStatusTransitionError(
                    f"Order is already {current}",
                    details={"from": current, "to": command.status},
                )
            if not can_transition(current, command.status):
                self.logger.warning(
                    "Status transition rejected",
                    order_id=order.id,
                    current=current,
                    target=command.status,
                )
                raise InvalidStatusTransitionError(
                    f"Cannot move an order from {current} to {command.status}",
                    details={"from": current, "to": command.status},
                )
            changes = {"status": command.status}
            if command.notes is not None:
                changes["notes"] = command.notes
            if command.status == OrderStatus.CANCELLED:
                self._restock(order)
                if order.payment_status == PaymentStatus.PAID:
                    changes["payment_status"] = PaymentStatus.REFUNDED
                transaction.on_commit(self._after_commit)
            order = self.orders.update(order, **changes)
        self.logger.info(
            "Order status changed",
            order_id=order.id,
            previous=current,
            status=command.status,
        )
        return OrderMapper.to_dto(order, self.orders.items_of(order))

    def stats(self) -> AdminStatsDTO:
        total_products = self.products.count()
        active_products = self.products.count(is_active=True)
        return AdminStatsDTO(
            products={
                "total": total_products,
                "active": active_products,
                "inactive": total_products - active_products,
            },
            orders={
                "total": self.orders.count(),
                "revenue": str(self.orders.revenue()),
            },
            recent_orders=OrderMapper.many_to_dto(self.orders.recent(RECENT_ORDERS_LIMIT)),
        )
