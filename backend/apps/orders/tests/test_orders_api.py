from decimal import Decimal

from django.urls import reverse
from rest_framework import status
from rest_framework.test import APITestCase

from apps.carts.models import Cart
from apps.catalog.models import Product
from apps.catalog.repositories import ProductRepository
from apps.orders.models import Order
from apps.users.models import User

ADDRESS = {
    "firstName": "Ada",
    "lastName": "Lovelace",
    "address1": "12 Analytical Row",
    "city": "London",
    "state": "Greater London",
    "zipCode": "N1 9GU",
    "country": "UK",
}

CHECKOUT = {
    "email": "ada@example.com",
    "shippingAddress": ADDRESS,
    "sameAsShipping": True,
    "paymentMethod": "credit-card",
    "cardNumber": "4242424242424242",
    "expiryDate": "12/30",
    "cvv": "123",
    "cardholderName": "Ada Lovelace",
    "notes": "Leave with neighbour",
}


def make_product(sku, price, stock, **extra):
    return Product.objects.create(
        name=extra.pop("name", f"Product {sku}"),
        slug=sku.lower(),
        sku=sku,
        description="Test product",
        price=Decimal(price),
        stock=stock,
        images=[f"/images/{sku.lower()}.jpg"],
        category="headphones",
        **extra,
    )


class CheckoutApiTests(APITestCase):
    def setUp(self):
        self.user = User.objects.create_user(
            username="shopper", email="shopper@example.com", password="Shopper123"
        )
        self.product_a = make_product("HP-A", "100.00", 5, name="XX99 Mark II")
        self.product_b = make_product("SP-B", "50.00", 3, name="ZX9 Speaker")
        self.checkout_url = reverse("api-orders-checkout")
        self.client.force_authenticate(self.user)

    def add(self, product, quantity):
        response = self.client.post(
            reverse("api-cart-items"),
            {"productId": product.id, "quantity": quantity},
            format="json",
        )
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        return response

    def test_checkout_places_confirmed_order(self):
        self.add(self.product_a, 2)
        cart = self.add(self.product_b, 1)
        self.assertEqual(cart.data["totals"]["total"], "350.00")

        response = self.client.post(self.checkout_url, CHECKOUT, format="json")
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertRegex(response.data["orderNumber"], r"^ORD-[0-9A-Z]+-[0-9A-Z]{6}$")

        order = Order.objects.get(pk=response.data["orderId"])
        self.assertEqual(order.order_number, response.data["orderNumber"])
        self.assertEqual(order.user_id, self.user.id)
        self.assertEqual(order.subtotal, Decimal("250.00"))
        self.assertEqual(order.shipping, Decimal("50.00"))
        self.assertEqual(order.vat, Decimal("50.00"))
        self.assertEqual(order.total, Decimal("350.00"))
        self.assertEqual(order.status, "confirmed")
        self.assertEqual(order.payment_status, "paid")
        self.assertEqual(order.billing_address["type"], "billing")
        self.assertEqual(order.notes, "Leave with neighbour")
        self.assertEqual(order.contact_email, "ada@example.com")
        self.assertNotIn("4242", str(order.shipping_address) + str(order.billing_address))
        self.assertEqual(order.items.count(), 2)
        first = order.items.order_by("id").first()
        self.assertEqual(first.product_name, "XX99 Mark II")
        self.assertEqual(first.product_image, "/images/hp-a.jpg")
        self.assertEqual(first.total, Decimal("200.00"))

        self.product_a.refresh_from_db()
        self.product_b.refresh_from_db()
        self.assertEqual(self.product_a.stock, 3)
        self.assertEqual(self.product_b.stock, 2)
        self.assertFalse(Cart.objects.filter(user=self.user).exists())

        cart = self.client.get(reverse("api-cart"))
        self.assertEqual(cart.data["totalItemCount"], 0)

    def test_order_prices_locked_after_product_edit(self):
        self.add(self.product_a, 1)
        response = self.client.post(self.checkout_url, CHECKOUT, format="json")
        Product.objects.filter(pk=self.product_a.pk).update(
            price=Decimal("999.00"), name="Renamed"
        )
        detail = self.client.get(
            reverse("api-order-detail", kwargs={"order_id": response.data["orderId"]})
        )
        self.assertEqual(detail.status_code, status.HTTP_200_OK)
        self.assertEqual(detail.data["items"][0]["price"], "100.00")
        self.assertEqual(detail.data["items"][0]["product_name"], "XX99 Mark II")
        self.assertEqual(detail.data["total"], "170.00")
        self.assertEqual(detail.data["contact_email"], "ada@example.com")

    def test_cart_price_follows_product_until_checkout(self):
        self.add(self.product_a, 1)
        Product.objects.filter(pk=self.product_a.pk).update(price=Decimal("80.00"))
        response = self.client.post(self.checkout_url, CHECKOUT, format="json")
        order = Order.objects.get(pk=response.data["orderId"])
        self.assertEqual(order.subtotal, Decimal("80.00"))

    def test_empty_cart_rejected(self):
        response = self.client.post(self.checkout_url, CHECKOUT, format="json")
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data["error"]["code"], "EMPTY_CART")
        self.assertEqual(Order.objects.count(), 0)

    def test_insufficient_stock_changes_nothing(self):
        self.add(self.product_a, 1)
        self.add(self.product_b, 4)
        response = self.client.post(self.checkout_url, CHECKOUT, format="json")
        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT)
        self.assertEqual(response.data["error"]["code"], "INSUFFICIENT_STOCK")
        self.assertEqual(response.data["error"]["details"]["productId"], self.product_b.id)
        self.product_a.refresh_from_db()
        self.product_b.refresh_from_db()
        self.assertEqual((self.product_a.stock, self.product_b.stock), (5, 3))
        self.assertEqual(Order.objects.count(), 0)
        self.assertEqual(self.client.get(reverse("api-cart")).data["totalItemCount"], 5)

    def test_inactive_product_rejected(self):
        self.add(self.product_a, 1)
        Product.objects.filter(pk=self.product_a.pk).update(is_active=False)
        response = self.client.post(self.checkout_url, CHECKOUT, format="json")
        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT)
        self.assertEqual(response.data["error"]["code"], "PRODUCT_UNAVAILABLE")

    def test_anonymous_checkout_unauthorized(self):
        self.client.force_authenticate(None)
        response = self.client.post(self.checkout_url, CHECKOUT, format="json")
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_credit_card_without_details_rejected(self):
        self.add(self.product_a, 1)
        payload = {k: v for k, v in CHECKOUT.items() if k != "cvv"}
        response = self.client.post(self.checkout_url, payload, format="json")
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.product_a.refresh_from_db()
        self.assertEqual(self.product_a.stock, 5)


class OrderHistoryApiTests(APITestCase):
    def setUp(self):
        self.user = User.objects.create_user(
            username="shopper", email="shopper@example.com", password="Shopper123"
        )
        self.other = User.objects.create_user(
            username="someone", email="someone@example.com", password="Someone123"
        )
        self.product = make_product("HP-A", "10.00", 50)

    def place_order(self, user):
        self.client.force_authenticate(user)
        self.client.post(
            reverse("api-cart-items"), {"productId": self.product.id}, format="json"
        )
        response = self.client.post(
            reverse("api-orders-checkout"),
            dict(CHECKOUT, paymentMethod="paypal"),
            format="json",
        )
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        return response.data["orderId"]

    def test_list_is_paginated_and_scoped_to_user(self):
        ids = [self.place_order(self.user) for _ in range(3)]
        self.place_order(self.other)
        self.client.force_authenticate(self.user)
        response = self.client.get(reverse("api-orders"), {"page": 1, "limit": 2})
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual([o["id"] for o in response.data["orders"]], ids[::-1][:2])
        self.assertEqual(
            response.data["pagination"],
            {
                "currentPage": 1,
                "totalPages": 2,
                "totalCount": 3,
                "hasNextPage": True,
                "hasPrevPage": False,
            },
        )

    def test_other_users_order_is_not_found(self):
        order_id = self.place_order(self.other)
        self.client.force_authenticate(self.user)
        response = self.client.get(reverse("api-order-detail", kwargs={"order_id": order_id}))
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(response.data["error"]["code"], "NOT_FOUND")


class AdminOrderApiTests(APITestCase):
    def setUp(self):
        self.shopper = User.objects.create_user(
            username="shopper", email="shopper@example.com", password="Shopper123"
        )
        self.staff = User.objects.create_user(
            username="staffer", email="staff@example.com", password="Staff1234", is_staff=True
        )
        self.product = make_product("HP-A", "100.00", 5)
        self.client.force_authenticate(self.shopper)
        self.client.post(
            reverse("api-cart-items"),
            {"productId": self.product.id, "quantity": 2},
            format="json",
        )
        response = self.client.post(
            reverse("api-orders-checkout"), dict(CHECKOUT, paymentMethod="paypal"), format="json"
        )
        self.order_id = response.data["orderId"]
        self.status_url = reverse("api-admin-order-status", kwargs={"order_id": self.order_id})

    def test_shopper_cannot_use_admin_endpoints(self):
        response = self.client.patch(self.status_url, {"status": "processing"}, format="json")
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        self.assertEqual(self.client.get(reverse("api-admin-stats")).status_code, 403)

    def test_status_lifecycle(self):
        self.client.force_authenticate(self.staff)
        for target in ("processing", "shipped", "delivered"):
            response = self.client.patch(self.status_url, {"status": target}, format="json")
            self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
            self.assertEqual(response.data["status"], target)
        response = self.client.patch(self.status_url, {"status": "cancelled"}, format="json")
        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT)
        self.assertEqual(response.data["error"]["code"], "INVALID_STATUS_TRANSITION")

    def test_shipped_order_cancelled_restocks(self):
        self.client.force_authenticate(self.staff)
        for target in ("processing", "shipped", "cancelled"):
            response = self.client.patch(self.status_url, {"status": target}, format="json")
            self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        self.assertEqual(response.data["payment_status"], "refunded")
        self.product.refresh_from_db()
        self.assertEqual(self.product.stock, 5)
        response = self.client.patch(self.status_url, {"status": "processing"}, format="json")
        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT)

    def test_cancel_restocks_and_refunds(self):
        self.client.force_authenticate(self.staff)
        self.product.refresh_from_db()
        self.assertEqual(self.product.stock, 3)
        response = self.client.patch(
            self.status_url, {"status": "cancelled", "notes": "Out of area"}, format="json"
        )
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["payment_status"], "refunded")
        self.assertEqual(response.data["notes"], "Out of area")
        self.product.refresh_from_db()
        self.assertEqual(self.product.stock, 5)

    def test_admin_list_and_stats(self):
        self.client.force_authenticate(self.staff)
        listing = self.client.get(reverse("api-admin-orders"), {"status": "confirmed"})
        self.assertEqual(listing.status_code, status.HTTP_200_OK)
        self.assertEqual(listing.data["pagination"]["totalCount"], 1)
        make_product("SP-B", "10.00", 0, is_active=False)
        stats = self.client.get(reverse("api-admin-stats"))
        self.assertEqual(stats.status_code, status.HTTP_200_OK)
        self.assertEqual(stats.data["products"], {"total": 2, "active": 1, "inactive": 1})
        self.assertEqual(stats.data["orders"], {"total": 1, "revenue": "290.00"})
        self.assertEqual(stats.data["recentOrders"][0]["id"], self.order_id)


class StockDecrementTests(APITestCase):
    def test_conditional_decrement_never_oversells(self):
        product = make_product("HP-A", "10.00", 1)
        repo = ProductRepository()
        self.assertTrue(repo.decrement_stock(product.id, 1))
        self.assertFalse(repo.decrement_stock(product.id, 1))
        product.refresh_from_db()
        self.assertEqual(product.stock, 0)

    def test_inactive_product_is_not_decremented(self):
        product = make_product("HP-A", "10.00", 5, is_active=False)
        self.assertFalse(ProductRepository().decrement_stock(product.id, 1))
        product.refresh_from_db()
        self.assertEqual(product.stock, 5)
