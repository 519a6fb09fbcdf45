from decimal import Decimal
from typing import Any, Iterable, List, Optional, Sequence

from django.db import IntegrityError, transaction
from django.db.models import Sum

from apps.common.repository import GenericRepository
from .dtos import OrderLineSnapshot
from .exceptions import DuplicateOrderNumberError
from .models import Order, OrderItem, OrderStatus
from .pricing import ZERO, to_money


class OrderRepository(GenericRepository[Order]):
    default_ordering = ("-created_at", "-id")

    def __init__(self):
        super().__init__(Order)

    def _base_queryset(self):
        return self.model.objects.prefetch_related("items")

    def create_order(self, *, lines: Sequence[OrderLineSnapshot], **data: Any) -> Order:
        """
        Insert the order and its line snapshots inside a savepoint.

        A clash on ``order_number`` surfaces as DuplicateOrderNumberError so the
        caller can retry with a fresh number; the enclosing transaction stays
        usable either way.
        """
        try:
            with transaction.atomic():
                order = self.model.objects.create(**data)
                OrderItem.objects.bulk_create(
                    [OrderItem(order=order, **line.as_fields()) for line in lines]
                )
        except IntegrityError as exc:
            number = data.get("order_number")
            if number and self.model.objects.filter(order_number=number).exists():
                raise DuplicateOrderNumberError(
                    details={"orderNumber": number}
                ) from exc
            raise
        return order

    def get_for_update(self, order_id: int) -> Optional[Order]:
        return self.model.objects.select_for_update().filter(pk=order_id).first()

    def items_of(self, order: Order) -> List[OrderItem]:
        return list(OrderItem.objects.filter(order_id=order.pk).order_by("id"))

    def revenue(self) -> Decimal:
        result = self.model.objects.exclude(status=OrderStatus.CANCELLED).aggregate(
            revenue=Sum("total")
        )
        return to_money(result["revenue"] or ZERO)

    def recent(self, limit: int) -> Iterable[Order]:
        return self._base_queryset().order_by(*self.default_ordering)[:limit]
