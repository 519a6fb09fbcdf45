import types
import unittest
from unittest.mock import Mock, patch

from rest_framework import status
from rest_framework.test import APIRequestFactory, force_authenticate

from apps.auth.identity import ShopperIdentity
from apps.carts.dtos import CartDTO, CartLineDTO, CartTotalsDTO
from apps.carts.views import CartItemDetailView, CartItemsView, CartTotalsView, CartView
from apps.catalog.dtos import ProductSummaryDTO
from apps.common.errors import NotFoundError, ValidationError

SESSION = "guest-session-0001"


def make_user(user_id=1):
    return types.SimpleNamespace(id=user_id, pk=user_id, is_authenticated=True, is_staff=False)


def make_totals(count=3):
    return CartTotalsDTO(
        item_count=count, subtotal="250.00", shipping="50.00", vat="50.00", total="350.00"
    )


def make_cart(owner="user:1"):
    product = ProductSummaryDTO(
        id=1,
        name="XX99 Mark II",
        slug="xx99-mark-ii",
        price="100.00",
        image="/img/1.jpg",
        stock=5,
        is_active=True,
    )
    return CartDTO(
        owner=owner,
        items=[CartLineDTO(product=product, quantity=2, line_total="200.00")],
        total_item_count=2,
        totals=make_totals(2),
        updated_at="2024-01-01T00:00:00+00:00",
    )


class CartViewTests(unittest.TestCase):
    def setUp(self):
        self.factory = APIRequestFactory()

    def test_get_for_signed_in_user(self):
        with patch.object(CartView, "service", Mock()) as svc:
            svc.get_cart.return_value = make_cart()
            request = self.factory.get("/api/cart/")
            force_authenticate(request, user=make_user(1))
            response = CartView.as_view()(request)
            self.assertEqual(response.status_code, status.HTTP_200_OK)
            self.assertEqual(response.data["owner"], "user:1")
            self.assertEqual(response.data["totalItemCount"], 2)
            self.assertEqual(response.data["items"][0]["lineTotal"], "200.00")
            svc.get_cart.assert_called_once_with(ShopperIdentity(user_id=1))

    def test_get_with_session_header(self):
        with patch.object(CartView, "service", Mock()) as svc:
            svc.get_cart.return_value = make_cart(owner=f"session:{SESSION}")
            request = self.factory.get("/api/cart/", HTTP_X_CART_SESSION=SESSION)
            response = CartView.as_view()(request)
            self.assertEqual(response.status_code, status.HTTP_200_OK)
            svc.get_cart.assert_called_once_with(ShopperIdentity(session_key=SESSION))

    def test_user_wins_over_session_header(self):
        with patch.object(CartView, "service", Mock()) as svc:
            svc.get_cart.return_value = make_cart()
            request = self.factory.get("/api/cart/", HTTP_X_CART_SESSION=SESSION)
            force_authenticate(request, user=make_user(3))
            CartView.as_view()(request)
            svc.get_cart.assert_called_once_with(ShopperIdentity(user_id=3))

    def test_missing_identity_is_unauthorized(self):
        with patch.object(CartView, "service", Mock()) as svc:
            response = CartView.as_view()(self.factory.get("/api/cart/"))
            self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)
            self.assertEqual(response.data["error"]["code"], "UNAUTHORIZED")
            svc.get_cart.assert_not_called()

    def test_malformed_session_header(self):
        with patch.object(CartView, "service", Mock()) as svc:
            request = self.factory.get("/api/cart/", HTTP_X_CART_SESSION="short")
            response = CartView.as_view()(request)
            self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
            svc.get_cart.assert_not_called()

    def test_delete_clears(self):
        with patch.object(CartView, "service", Mock()) as svc:
            request = self.factory.delete("/api/cart/")
            force_authenticate(request, user=make_user(1))
            response = CartView.as_view()(request)
            self.assertEqual(response.status_code, status.HTTP_204_NO_CONTENT)
            svc.clear_cart.assert_called_once_with(ShopperIdentity(user_id=1))


class CartTotalsViewTests(unittest.TestCase):
    def test_totals(self):
        with patch.object(CartTotalsView, "service", Mock()) as svc:
            svc.get_totals.return_value = make_totals()
            request = APIRequestFactory().get("/api/cart/totals/", HTTP_X_CART_SESSION=SESSION)
            response = CartTotalsView.as_view()(request)
            self.assertEqual(response.status_code, status.HTTP_200_OK)
            self.assertEqual(
                response.data,
                {
                    "itemCount": 3,
                    "subtotal": "250.00",
                    "shipping": "50.00",
                    "vat": "50.00",
                    "total": "350.00",
                },
            )


class CartItemsViewTests(unittest.TestCase):
    def setUp(self):
        self.factory = APIRequestFactory()

    def post(self, payload):
        request = self.factory.post("/api/cart/items/", payload, format="json")
        force_authenticate(request, user=make_user(1))
        return CartItemsView.as_view()(request)

    def test_add_item(self):
        with patch.object(CartItemsView, "service", Mock()) as svc:
            svc.add_item.return_value = make_cart()
            response = self.post({"productId": 1, "quantity": 2})
            self.assertEqual(response.status_code, status.HTTP_200_OK)
            identity, command = svc.add_item.call_args[0]
            self.assertEqual(identity, ShopperIdentity(user_id=1))
            self.assertEqual((command.product_id, command.quantity), (1, 2))

    def test_quantity_defaults_to_one(self):
        with patch.object(CartItemsView, "service", Mock()) as svc:
            svc.add_item.return_value = make_cart()
            self.post({"productId": 1})
            self.assertEqual(svc.add_item.call_args[0][1].quantity, 1)

    def test_invalid_payload(self):
        with patch.object(CartItemsView, "service", Mock()) as svc:
            response = self.post({"productId": "abc"})
            self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
            self.assertEqual(response.data["error"]["code"], "VALIDATION_ERROR")
            svc.add_item.assert_not_called()

    def test_service_errors_are_rendered(self):
        with patch.object(CartItemsView, "service", Mock()) as svc:
            svc.add_item.side_effect = NotFoundError("Product not found")
            response = self.post({"productId": 404})
            self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
            svc.add_item.side_effect = ValidationError("Quantity cannot exceed 99")
            response = self.post({"productId": 1, "quantity": 120})
            self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)


class CartItemDetailViewTests(unittest.TestCase):
    def setUp(self):
        self.factory = APIRequestFactory()

    def test_patch_sets_quantity(self):
        with patch.object(CartItemDetailView, "service", Mock()) as svc:
            svc.update_quantity.return_value = make_cart()
            request = self.factory.patch("/api/cart/items/1/", {"quantity": 0}, format="json")
            force_authenticate(request, user=make_user(1))
            response = CartItemDetailView.as_view()(request, product_id=1)
            self.assertEqual(response.status_code, status.HTTP_200_OK)
            command = svc.update_quantity.call_args[0][1]
            self.assertEqual((command.product_id, command.quantity), (1, 0))

    def test_patch_requires_quantity(self):
        with patch.object(CartItemDetailView, "service", Mock()) as svc:
            request = self.factory.patch("/api/cart/items/1/", {}, format="json")
            force_authenticate(request, user=make_user(1))
            response = CartItemDetailView.as_view()(request, product_id=1)
            self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
            svc.update_quantity.assert_not_called()

    def test_delete_removes_line(self):
        with patch.object(CartItemDetailView, "service", Mock()) as svc:
            svc.remove_item.return_value = make_cart()
            request = self.factory.delete("/api/cart/items/7/", HTTP_X_CART_SESSION=SESSION)
            response = CartItemDetailView.as_view()(request, product_id=7)
            self.assertEqual(response.status_code, status.HTTP_200_OK)
            svc.remove_item.assert_called_once_with(ShopperIdentity(session_key=SESSION), 7)
