"""In-memory stand-ins for the order, stock and cart collaborators."""
import contextlib
import itertools
import threading
import types
from datetime import datetime, timedelta, timezone
from decimal import Decimal

from apps.orders.exceptions import DuplicateOrderNumberError
from apps.orders.payments import PaymentResult
from apps.orders.pricing import ZERO


class FakeTransaction:
    """Replaces ``django.db.transaction`` in the service module."""

    def __init__(self):
        self.committed = 0

    def atomic(self):
        return contextlib.nullcontext()

    def on_commit(self, func):
        self.committed += 1
        func()


def make_product(product_id, **overrides):
    data = dict(
        id=product_id,
        name=f"Product {product_id}",
        price=Decimal("10.00"),
        stock=10,
        images=[f"/images/{product_id}.jpg"],
        is_active=True,
    )
    data.update(overrides)
    return types.SimpleNamespace(**data)


class FakeStock:
    def __init__(self, products=()):
        self.products = {p.id: p for p in products}
        self.lock = threading.Lock()
        self.decrement_calls = []

    def get_many(self, product_ids):
        return {pid: self.products[pid] for pid in product_ids if pid in self.products}

    def decrement_stock(self, product_id, quantity):
        with self.lock:
            self.decrement_calls.append(product_id)
            product = self.products.get(product_id)
            if product is None or not product.is_active or product.stock < quantity:
                return False
            product.stock -= quantity
            return True

    def increment_stock(self, product_id, quantity):
        with self.lock:
            product = self.products.get(product_id)
            if product is not None:
                product.stock += quantity

    def count(self, **filters):
        return sum(
            1
            for p in self.products.values()
            if all(getattr(p, k) == v for k, v in filters.items())
        )


class FakeCart:
    def __init__(self):
        self.carts = {}
        self.lock = threading.Lock()

    def put(self, user_id, *lines):
        from apps.carts.dtos import CartLine

        self.carts[user_id] = [CartLine(product_id=pid, quantity=qty) for pid, qty in lines]

    def lines(self, identity):
        with self.lock:
            return list(self.carts.get(identity.user_id, []))

    def clear_cart(self, identity):
        with self.lock:
            self.carts.pop(identity.user_id, None)


class FakeItemSet:
    def __init__(self, items):
        self._items = list(items)

    def all(self):
        return list(self._items)


class FakeOrders:
    def __init__(self):
        self.orders = {}
        self.lock = threading.Lock()
        self.fail_with = None
        self._ids = itertools.count(1)
        self._item_ids = itertools.count(1)
        self._clock = datetime(2024, 1, 1, tzinfo=timezone.utc)

    def create_order(self, *, lines, **data):
        with self.lock:
            if self.fail_with is not None:
                raise self.fail_with
            number = data["order_number"]
            if any(o.order_number == number for o in self.orders.values()):
                raise DuplicateOrderNumberError(details={"orderNumber": number})
            order_id = next(self._ids)
            self._clock += timedelta(minutes=1)
            items = [
                types.SimpleNamespace(id=next(self._item_ids), **line.as_fields())
                for line in lines
            ]
            order = types.SimpleNamespace(
                id=order_id,
                created_at=self._clock,
                updated_at=self._clock,
                items=FakeItemSet(items),
                **data,
            )
            self.orders[order_id] = order
            return order

    def seed(self, **data):
        defaults = dict(
            order_number=f"ORD-SEED-{len(self.orders):06d}",
            user_id=1,
            subtotal=Decimal("10.00"),
            shipping=Decimal("50.00"),
            vat=Decimal("2.00"),
            total=Decimal("62.00"),
            status="confirmed",
            payment_status="paid",
            shipping_address={},
            billing_address={},
            payment_method="paypal",
            notes="",
            contact_email="",
        )
        defaults.update(data)
        lines = defaults.pop("lines", [])
        return self.create_order(lines=lines, **defaults)

    def update(self, obj, **data):
        for key, value in data.items():
            setattr(obj, key, value)
        return obj

    def _matches(self, order, filters):
        for key, value in filters.items():
            attr = "id" if key == "pk" else key
            if getattr(order, attr) != value:
                return False
        return True

    def get(self, **filters):
        for order in self.orders.values():
            if self._matches(order, filters):
                return order
        return None

    def get_for_update(self, order_id):
        return self.orders.get(order_id)

    def items_of(self, order):
        return order.items.all()

    def _newest_first(self, rows):
        return sorted(rows, key=lambda o: (o.created_at, o.id), reverse=True)

    def page(self, *, offset, limit, ordering=None, **filters):
        rows = self._newest_first(
            o for o in self.orders.values() if self._matches(o, filters)
        )
        return rows[offset : offset + limit], len(rows)

    def count(self, **filters):
        return sum(1 for o in self.orders.values() if self._matches(o, filters))

    def revenue(self):
        return sum(
            (o.total for o in self.orders.values() if o.status != "cancelled"), ZERO
        )

    def recent(self, limit):
        return self._newest_first(self.orders.values())[:limit]


class FakePayments:
    def __init__(self, approve=True):
        self.approve = approve
        self.charges = []

    def charge(self, *, reference, amount, method):
        self.charges.append((reference, amount, method))
        if self.approve:
            return PaymentResult(approved=True, transaction_id="txn_test")
        return PaymentResult(approved=False, reason="Card declined")


class FakeListingCache:
    def __init__(self):
        self.invalidations = 0

    def invalidate_listing_cache(self):
        self.invalidations += 1


def sequence_generator(*numbers):
    values = iter(numbers)
    return lambda: next(values)
