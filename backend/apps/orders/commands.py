from dataclasses import asdict, dataclass, replace
from typing import Any, Dict, Optional

from apps.common.errors import ValidationError
from apps.common.pagination import PageRequest
from .models import OrderStatus, PaymentMethod

ADDRESS_FIELDS = {
    "firstName": "first_name",
    "lastName": "last_name",
    "company": "company",
    "address1": "address1",
    "address2": "address2",
    "city": "city",
    "state": "state",
    "zipCode": "zip_code",
    "country": "country",
    "phone": "phone",
}


@dataclass(frozen=True)
class AddressCommand:
    type: str
    first_name: str
    last_name: str
    address1: str
    city: str
    state: str
    zip_code: str
    country: str
    company: str = ""
    address2: str = ""
    phone: str = ""

    @staticmethod
    def from_validated(data: Dict[str, Any], address_type: str) -> "AddressCommand":
        values = {
            attr: (data.get(key) or "").strip()
            for key, attr in ADDRESS_FIELDS.items()
        }
        return AddressCommand(type=address_type, **values)

    def retagged(self, address_type: str) -> "AddressCommand":
        return replace(self, type=address_type)

    def snapshot(self) -> Dict[str, str]:
        return asdict(self)


@dataclass(frozen=True)
class CheckoutCommand:
    email: str
    shipping_address: AddressCommand
    billing_address: AddressCommand
    payment_method: str
    notes: str = ""

    @staticmethod
    def from_validated(data: Dict[str, Any]) -> "CheckoutCommand":
        shipping = AddressCommand.from_validated(data["shippingAddress"], "shipping")
        if data.get("sameAsShipping"):
            billing = shipping.retagged("billing")
        elif data.get("billingAddress"):
            billing = AddressCommand.from_validated(data["billingAddress"], "billing")
        else:
            raise ValidationError(
                "billingAddress is required unless sameAsShipping is set",
                details={"billingAddress": None},
            )
        method = data["paymentMethod"]
        if method not in PaymentMethod.values:
            raise ValidationError(
                "Unsupported payment method", details={"paymentMethod": method}
            )
        return CheckoutCommand(
            email=data["email"].strip().lower(),
            shipping_address=shipping,
            billing_address=billing,
            payment_method=method,
            notes=(data.get("notes") or "").strip(),
        )


@dataclass(frozen=True)
class OrderListCommand:
    user_id: int
    page: PageRequest = PageRequest(page=1, limit=10)

    @staticmethod
    def from_validated(user_id: int, data: Dict[str, Any]) -> "OrderListCommand":
        return OrderListCommand(
            user_id=user_id,
            page=PageRequest(page=data.get("page", 1), limit=data.get("limit", 10)),
        )


@dataclass(frozen=True)
class AdminOrderListCommand:
    status: Optional[str] = None
    page: PageRequest = PageRequest(page=1, limit=20)

    def filters(self) -> Dict[str, Any]:
        return {"status": self.status} if self.status else {}

    @staticmethod
    def from_validated(data: Dict[str, Any]) -> "AdminOrderListCommand":
        return AdminOrderListCommand(
            status=data.get("status") or None,
            page=PageRequest(page=data.get("page", 1), limit=data.get("limit", 20)),
        )


@dataclass(frozen=True)
class OrderStatusCommand:
    order_id: int
    status: str
    notes: Optional[str] = None

    @staticmethod
    def from_validated(order_id: int, data: Dict[str, Any]) -> "OrderStatusCommand":
        status = data.get("status")
        if status not in OrderStatus.values:
            raise ValidationError("Unknown order status", details={"status": status})
        notes = data.get("notes")
        return OrderStatusCommand(
            order_id=order_id,
            status=status,
            notes=notes.strip() if isinstance(notes, str) else None,
        )
