from apps.common.errors import StorefrontError


class EmptyCartError(StorefrontError):
    code = "EMPTY_CART"
    message = "Your cart is empty"
    status_code = 400


class ProductUnavailableError(StorefrontError):
    code = "PRODUCT_UNAVAILABLE"
    message = "A product in your cart is no longer available"
    status_code = 409


class InsufficientStockError(StorefrontError):
    code = "INSUFFICIENT_STOCK"
    message = "Insufficient stock"
    status_code = 409


class OrderCreationError(StorefrontError):
    code = "ORDER_CREATION_FAILED"
    message = "Failed to create order"
    status_code = 500


class DuplicateOrderNumberError(StorefrontError):
    code = "DUPLICATE_ORDER_NUMBER"
    message = "Order number already exists"
    status_code = 409


class PaymentDeclinedError(StorefrontError):
    code = "PAYMENT_DECLINED"
    message = "Payment was declined"
    status_code = 402


class InvalidStatusTransitionError(StorefrontError):
    code = "INVALID_STATUS_TRANSITION"
    message = "Order status cannot be changed this way"
    status_code = 409


__all__ = [
    "EmptyCartError",
    "ProductUnavailableError",
    "InsufficientStockError",
    "OrderCreationError",
    "DuplicateOrderNumberError",
    "PaymentDeclinedError",
    "InvalidStatusTransitionError",
]
