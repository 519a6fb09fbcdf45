from __future__ import annotations

from typing import Any, Mapping, Optional


class StorefrontError(Exception):
    """
    Base class for errors raised by services and rendered by the API layer.

    Subclasses pin a machine readable ``code`` and default ``message``; the
    global exception handler turns any instance into the standard error
    envelope, so services can raise without knowing about HTTP.
    """

    code: str = "SERVER_ERROR"
    message: str = "Something went wrong"
    status_code: Optional[int] = None

    def __init__(
        self,
        message: Optional[str] = None,
        *,
        details: Optional[Mapping[str, Any]] = None,
        hint: Optional[str] = None,
    ):
        self.message = message or self.message
        self.details = dict(details) if details is not None else None
        self.hint = hint
        super().__init__(self.message)


class ValidationError(StorefrontError):
    code = "VALIDATION_ERROR"
    message = "Invalid input"
    status_code = 400


class NotFoundError(StorefrontError):
    code = "NOT_FOUND"
    message = "Resource not found"
    status_code = 404


class AuthenticationRequiredError(StorefrontError):
    code = "UNAUTHORIZED"
    message = "Authentication required"
    status_code = 401


class PermissionDeniedError(StorefrontError):
    code = "FORBIDDEN"
    message = "You do not have permission to perform this action"
    status_code = 403


class ConflictError(StorefrontError):
    code = "CONFLICT"
    message = "Resource conflict"
    status_code = 409


__all__ = [
    "StorefrontError",
    "ValidationError",
    "NotFoundError",
    "AuthenticationRequiredError",
    "PermissionDeniedError",
    "ConflictError",
]
