"""
Order totals.

Every monetary value is quantized to cents with ROUND_HALF_UP before it is
combined with another one, so ``total == subtotal + shipping + vat`` holds
exactly for the stored values.
"""
from __future__ import annotations

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Dict, Iterable, Tuple

CENT = Decimal("0.01")
ZERO = Decimal("0.00")
DEFAULT_SHIPPING_FEE = Decimal("50.00")
DEFAULT_VAT_RATE = Decimal("0.20")


def to_money(value: Any) -> Decimal:
    """Quantize ``value`` to two decimal places (half-up)."""
    if not isinstance(value, Decimal):
        # Decimal(0.1) != Decimal("0.1")
        value = Decimal(str(value))
    return value.quantize(CENT, rounding=ROUND_HALF_UP)


def line_total(unit_price: Any, quantity: int) -> Decimal:
    return to_money(to_money(unit_price) * quantity)


def subtotal_of(lines: Iterable[Tuple[Any, int]]) -> Decimal:
    """Sum ``(unit_price, quantity)`` pairs into a rounded subtotal."""
    return to_money(sum((line_total(price, qty) for price, qty in lines), ZERO))


@dataclass(frozen=True)
class OrderTotals:
    subtotal: Decimal
    shipping: Decimal
    vat: Decimal
    total: Decimal

    def as_dict(self) -> Dict[str, str]:
        return {
            "subtotal": str(self.subtotal),
            "shipping": str(self.shipping),
            "vat": str(self.vat),
            "total": str(self.total),
        }


def compute_totals(
    subtotal: Any,
    *,
    shipping_fee: Any = DEFAULT_SHIPPING_FEE,
    vat_rate: Any = DEFAULT_VAT_RATE,
) -> OrderTotals:
    """
    Derive shipping, VAT and grand total from a subtotal.

    Shipping is a flat fee charged only when there is something to ship.
    Deterministic and side-effect free.
    """
    sub = to_money(subtotal)
    if sub < ZERO:
        raise ValueError("subtotal cannot be negative")
    rate = vat_rate if isinstance(vat_rate, Decimal) else Decimal(str(vat_rate))
    shipping = to_money(shipping_fee) if sub > ZERO else ZERO
    vat = to_money(sub * rate)
    total = to_money(sub + shipping + vat)
    return OrderTotals(subtotal=sub, shipping=shipping, vat=vat, total=total)


@dataclass(frozen=True)
class PricingPolicy:
    shipping_fee: Decimal = DEFAULT_SHIPPING_FEE
    vat_rate: Decimal = DEFAULT_VAT_RATE

    @classmethod
    def from_settings(cls) -> "PricingPolicy":
        from django.conf import settings

        return cls(
            shipping_fee=to_money(
                getattr(settings, "STOREFRONT_SHIPPING_FEE", DEFAULT_SHIPPING_FEE)
            ),
            vat_rate=Decimal(
                str(getattr(settings, "STOREFRONT_VAT_RATE", DEFAULT_VAT_RATE))
            ),
        )

    def totals(self, subtotal: Any) -> OrderTotals:
        return compute_totals(
            subtotal, shipping_fee=self.shipping_fee, vat_rate=self.vat_rate
        )
