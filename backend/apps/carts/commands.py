from dataclasses import dataclass
from typing import Any, Dict

from apps.common.errors import ValidationError


def _as_int(value: Any, field: str) -> int:
    if isinstance(value, bool):
        raise ValidationError(f"{field} must be an integer", details={field: value})
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field} must be an integer", details={field: value})


@dataclass(frozen=True)
class CartItemCommand:
    product_id: int
    quantity: int = 1

    @staticmethod
    def from_raw(raw: Dict[str, Any]) -> "CartItemCommand":
        if not isinstance(raw, dict):
            raise ValidationError("Payload must be an object")
        pid = raw.get("productId", raw.get("product_id"))
        if pid is None:
            raise ValidationError("productId is required", details={"productId": None})
        return CartItemCommand(
            product_id=_as_int(pid, "productId"),
            quantity=_as_int(raw.get("quantity", 1), "quantity"),
        )


@dataclass(frozen=True)
class CartQuantityCommand:
    """Absolute quantity for one line; zero or less removes the line."""

    product_id: int
    quantity: int

    @staticmethod
    def from_raw(product_id: int, raw: Dict[str, Any]) -> "CartQuantityCommand":
        if not isinstance(raw, dict) or "quantity" not in raw:
            raise ValidationError("quantity is required", details={"quantity": None})
        return CartQuantityCommand(
            product_id=product_id, quantity=_as_int(raw["quantity"], "quantity")
        )
