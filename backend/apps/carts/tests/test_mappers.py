import types
import unittest
from datetime import datetime, timezone
from decimal import Decimal

from apps.carts.mappers import CartMapper
from apps.orders.pricing import PricingPolicy


def make_item(product_id, price, quantity, images=None):
    product = types.SimpleNamespace(
        id=product_id,
        name=f"Product {product_id}",
        slug=f"product-{product_id}",
        price=Decimal(price),
        stock=4,
        images=images if images is not None else [f"/img/{product_id}.jpg"],
        is_active=True,
    )
    return types.SimpleNamespace(product=product, product_id=product_id, quantity=quantity)


class CartMapperTests(unittest.TestCase):
    def test_line_to_dto(self):
        dto = CartMapper().line_to_dto(make_item(1, "19.99", 3))
        self.assertEqual(dto.quantity, 3)
        self.assertEqual(dto.line_total, "59.97")
        self.assertEqual(dto.product.image, "/img/1.jpg")
        self.assertEqual(dto.product.price, "19.99")

    def test_line_without_images(self):
        dto = CartMapper().line_to_dto(make_item(1, "1.00", 1, images=[]))
        self.assertEqual(dto.product.image, "")

    def test_totals_for_reference_basket(self):
        totals = CartMapper().totals_for([make_item(1, "100", 2), make_item(2, "50", 1)])
        self.assertEqual(totals.item_count, 3)
        self.assertEqual(totals.subtotal, "250.00")
        self.assertEqual(totals.shipping, "50.00")
        self.assertEqual(totals.vat, "50.00")
        self.assertEqual(totals.total, "350.00")

    def test_totals_honour_pricing_policy(self):
        mapper = CartMapper(PricingPolicy(shipping_fee=Decimal("0.00"), vat_rate=Decimal("0")))
        totals = mapper.totals_for([make_item(1, "10", 1)])
        self.assertEqual(totals.total, "10.00")

    def test_to_dto(self):
        cart = types.SimpleNamespace(updated_at=datetime(2024, 5, 1, tzinfo=timezone.utc))
        dto = CartMapper().to_dto("user:1", cart, [make_item(1, "10", 2)])
        self.assertEqual(dto.owner, "user:1")
        self.assertEqual(dto.total_item_count, 2)
        self.assertEqual(dto.totals.subtotal, "20.00")
        self.assertEqual(dto.updated_at, "2024-05-01T00:00:00+00:00")

    def test_to_dto_without_cart(self):
        dto = CartMapper().to_dto("session:abc", None, [])
        self.assertEqual(dto.items, [])
        self.assertEqual(dto.totals.total, "0.00")
        self.assertIsNone(dto.updated_at)
