from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Optional

from apps.common.errors import AuthenticationRequiredError, ValidationError

CART_SESSION_HEADER = "HTTP_X_CART_SESSION"

_SESSION_KEY_PATTERN = re.compile(r"^[A-Za-z0-9_-]{16,64}$")


@dataclass(frozen=True)
class ShopperIdentity:
    """Owner of a cart: a signed-in user or an anonymous session token."""

    user_id: Optional[int] = None
    session_key: Optional[str] = None

    @property
    def is_authenticated(self) -> bool:
        return self.user_id is not None

    def owner_filter(self) -> dict:
        if self.user_id is not None:
            return {"user_id": self.user_id}
        return {"session_key": self.session_key}

    def __str__(self) -> str:
        if self.user_id is not None:
            return f"user:{self.user_id}"
        return f"session:{self.session_key}"


def _authenticated_user_id(request) -> Optional[int]:
    user = getattr(request, "user", None)
    if user is None or not getattr(user, "is_authenticated", False):
        return None
    return getattr(user, "id", None)


def resolve_shopper(request) -> ShopperIdentity:
    """
    Return who owns the cart for this request.

    Signed-in users always win over the anonymous ``X-Cart-Session`` header.
    """
    user_id = _authenticated_user_id(request)
    if user_id is not None:
        return ShopperIdentity(user_id=user_id)
    meta = getattr(request, "META", None) or {}
    session_key = (meta.get(CART_SESSION_HEADER) or "").strip()
    if not session_key:
        raise AuthenticationRequiredError(
            hint="Sign in or send an X-Cart-Session header to keep an anonymous cart."
        )
    if not _SESSION_KEY_PATTERN.match(session_key):
        raise ValidationError(
            "Invalid cart session token",
            details={"X-Cart-Session": "16-64 characters of letters, digits, '-' or '_'"},
        )
    return ShopperIdentity(session_key=session_key)


def require_user_id(request) -> int:
    user_id = _authenticated_user_id(request)
    if user_id is None:
        raise AuthenticationRequiredError()
    return user_id
