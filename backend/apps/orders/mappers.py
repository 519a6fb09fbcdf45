from typing import Iterable, List, Optional

from .dtos import OrderDTO, OrderItemDTO
from .models import Order, OrderItem


def _iso(value) -> str:
    return value.isoformat() if value is not None else ""


class OrderMapper:
    @staticmethod
    def item_to_dto(item: OrderItem) -> OrderItemDTO:
        return OrderItemDTO(
            id=item.id,
            product_id=item.product_id,
            product_name=item.product_name,
            product_image=item.product_image or "",
            quantity=item.quantity,
            price=str(item.price),
            total=str(item.total),
        )

    @staticmethod
    def to_dto(order: Order, items: Optional[Iterable[OrderItem]] = None) -> OrderDTO:
        if items is None:
            items = order.items.all()
        return OrderDTO(
            id=order.id,
            order_number=order.order_number,
            user_id=order.user_id,
            items=[OrderMapper.item_to_dto(i) for i in items],
            subtotal=str(order.subtotal),
            shipping=str(order.shipping),
            vat=str(order.vat),
            total=str(order.total),
            status=order.status,
            payment_status=order.payment_status,
            shipping_address=dict(order.shipping_address or {}),
            billing_address=dict(order.billing_address or {}),
            payment_method=order.payment_method,
            notes=order.notes or "",
            created_at=_iso(getattr(order, "created_at", None)),
            updated_at=_iso(getattr(order, "updated_at", None)),
            contact_email=order.contact_email or "",
        )

    @staticmethod
    def many_to_dto(orders: Iterable[Order]) -> List[OrderDTO]:
        return [OrderMapper.to_dto(o) for o in orders]
