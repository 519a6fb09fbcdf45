from django.http import Http404
from rest_framework import status
from rest_framework.exceptions import NotAuthenticated, ValidationError
from rest_framework.test import APIRequestFactory

from apps.api.exceptions import global_exception_handler
from apps.common.errors import ConflictError, NotFoundError
from apps.orders.exceptions import InsufficientStockError, OrderCreationError

factory = APIRequestFactory()


class DummyView:
    pass


def _context(request):
    return {"request": request, "view": DummyView()}


def test_storefront_error_returns_structured_response():
    request = factory.post("/api/orders/checkout/")
    exc = InsufficientStockError(
        "Insufficient stock for Speaker",
        details={"productId": 2, "requested": 4, "available": 3},
        hint="Reduce the quantity in your cart and try again.",
    )
    response = global_exception_handler(exc, _context(request))
    payload = response.data["error"]
    assert response.status_code == status.HTTP_409_CONFLICT
    assert payload["code"] == "INSUFFICIENT_STOCK"
    assert payload["message"] == "Insufficient stock for Speaker"
    assert payload["details"] == {"productId": 2, "requested": 4, "available": 3}
    assert payload["hint"].startswith("Reduce")


def test_default_messages_are_used():
    request = factory.get("/api/orders/1/")
    response = global_exception_handler(NotFoundError(), _context(request))
    assert response.status_code == status.HTTP_404_NOT_FOUND
    assert response.data["error"]["message"] == "Resource not found"
    assert "details" not in response.data["error"]


def test_conflict_error():
    request = factory.post("/api/products/")
    response = global_exception_handler(
        ConflictError("SKU already exists", details={"sku": "XX99"}), _context(request)
    )
    assert response.status_code == status.HTTP_409_CONFLICT
    assert response.data["error"]["code"] == "CONFLICT"


def test_order_creation_error_is_500():
    request = factory.post("/api/orders/checkout/")
    response = global_exception_handler(OrderCreationError(), _context(request))
    assert response.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
    assert response.data["error"]["code"] == "ORDER_CREATION_FAILED"


def test_validation_error_preserves_details():
    request = factory.post("/api/example/", data={})
    exc = ValidationError({"field": ["This field is required."]})
    response = global_exception_handler(exc, _context(request))
    payload = response.data["error"]
    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert payload["code"] == "VALIDATION_ERROR"
    assert payload["message"] == "Validation failed"
    assert payload["details"] == {"field": ["This field is required."]}


def test_not_authenticated_maps_to_unauthorized():
    request = factory.get("/api/orders/")
    response = global_exception_handler(NotAuthenticated(), _context(request))
    assert response.status_code == status.HTTP_401_UNAUTHORIZED
    assert response.data["error"]["code"] == "UNAUTHORIZED"


def test_http404_maps_to_not_found():
    request = factory.get("/api/missing/")
    response = global_exception_handler(Http404(), _context(request))
    assert response.status_code == status.HTTP_404_NOT_FOUND
    assert response.data["error"]["code"] == "NOT_FOUND"


def test_unhandled_exception_returns_generic_message():
    request = factory.get("/api/example/")
    response = global_exception_handler(RuntimeError("boom"), _context(request))
    payload = response.data["error"]
    assert response.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
    assert payload["code"] == "SERVER_ERROR"
    assert payload["message"] == "Something went wrong"
    assert "details" not in payload
