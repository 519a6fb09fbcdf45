"""
Payment gateway seam.

Checkout charges through whatever object the container wires in. The bundled
gateway approves every charge; card details never reach it.
"""
import secrets
from dataclasses import dataclass
from decimal import Decimal
from typing import Optional

from apps.common import get_logger

logger = get_logger(__name__).bind(component="orders", layer="payments")


@dataclass(frozen=True)
class PaymentResult:
    approved: bool
    transaction_id: Optional[str] = None
    reason: Optional[str] = None


class AlwaysApprovePaymentGateway:
    def charge(self, *, reference: str, amount: Decimal, method: str) -> PaymentResult:
        transaction_id = f"txn_{secrets.token_hex(8)}"
        logger.info(
            "Payment approved",
            reference=reference,
            amount=amount,
            method=method,
            transaction_id=transaction_id,
        )
        return PaymentResult(approved=True, transaction_id=transaction_id)
