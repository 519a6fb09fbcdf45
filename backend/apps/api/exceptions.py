from __future__ import annotations

from typing import Any, Dict, Optional, Tuple

from django.core.exceptions import (
    PermissionDenied as DjangoPermissionDenied,
    ValidationError as DjangoValidationError,
)
from django.http import Http404
from rest_framework import status
from rest_framework.exceptions import (
    AuthenticationFailed,
    MethodNotAllowed,
    NotAuthenticated,
    NotFound,
    ParseError,
    PermissionDenied,
    Throttled,
    ValidationError,
)
from rest_framework.response import Response
from rest_framework.views import exception_handler as drf_exception_handler

from apps.api.utils import error_response
from apps.common import get_logger
from apps.common.errors import StorefrontError

logger = get_logger(__name__).bind(component="api", layer="exception")

GENERIC_SERVER_MESSAGE = "Something went wrong"

STATUS_CODE_DEFAULTS: Dict[int, Tuple[str, str]] = {
    status.HTTP_400_BAD_REQUEST: ("VALIDATION_ERROR", "Validation failed"),
    status.HTTP_401_UNAUTHORIZED: ("UNAUTHORIZED", "Authentication required"),
    status.HTTP_403_FORBIDDEN: ("FORBIDDEN", "You do not have permission to perform this action"),
    status.HTTP_404_NOT_FOUND: ("NOT_FOUND", "Resource not found"),
    status.HTTP_405_METHOD_NOT_ALLOWED: ("METHOD_NOT_ALLOWED", "Method not allowed"),
    status.HTTP_409_CONFLICT: ("CONFLICT", "Resource conflict"),
    status.HTTP_415_UNSUPPORTED_MEDIA_TYPE: ("UNSUPPORTED_MEDIA_TYPE", "Unsupported media type"),
    status.HTTP_429_TOO_MANY_REQUESTS: ("TOO_MANY_REQUESTS", "Request was throttled"),
    status.HTTP_500_INTERNAL_SERVER_ERROR: ("SERVER_ERROR", GENERIC_SERVER_MESSAGE),
    status.HTTP_503_SERVICE_UNAVAILABLE: ("SERVICE_UNAVAILABLE", "Service temporarily unavailable"),
}

# First matching row wins; the flag says whether the DRF payload is echoed as details.
FRAMEWORK_ERRORS = (
    (ValidationError, "VALIDATION_ERROR", "Validation failed", True),
    (ParseError, "VALIDATION_ERROR", "Malformed request", True),
    (AuthenticationFailed, "UNAUTHORIZED", "Authentication failed", False),
    (NotAuthenticated, "UNAUTHORIZED", "Authentication required", False),
    ((PermissionDenied, DjangoPermissionDenied), "FORBIDDEN",
     "You do not have permission to perform this action", False),
    ((NotFound, Http404), "NOT_FOUND", "Resource not found", False),
    (MethodNotAllowed, "METHOD_NOT_ALLOWED", "Method not allowed", False),
    (Throttled, "TOO_MANY_REQUESTS", "Request was throttled", False),
)


def storefront_error_response(exc: StorefrontError) -> Response:
    return error_response(
        exc.code,
        exc.message,
        exc.details,
        http_status=exc.status_code,
        hint=exc.hint,
    )


def global_exception_handler(exc: Exception, context: Dict[str, Any]) -> Response:
    """
    DRF ``EXCEPTION_HANDLER``: every failure leaves the API as the error envelope.

    Storefront errors carry their own code and status. Framework errors are
    mapped through ``FRAMEWORK_ERRORS``; anything else is logged with its
    traceback and hidden behind a generic 500.
    """
    log = _request_logger(context)

    if isinstance(exc, StorefrontError):
        status_code = exc.status_code or status.HTTP_500_INTERNAL_SERVER_ERROR
        emit = log.error if status_code >= 500 else log.info
        emit("Handled storefront error", code=exc.code, status=status_code)
        return storefront_error_response(exc)

    if isinstance(exc, DjangoValidationError):
        exc = ValidationError(_django_validation_detail(exc))

    response = drf_exception_handler(exc, context)
    if response is None:
        log.exception("Unhandled exception bubbled to global handler")
        return error_response(
            "SERVER_ERROR",
            GENERIC_SERVER_MESSAGE,
            http_status=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )

    code, message, details, hint = _describe(exc, response.data, response.status_code)
    if response.status_code >= 500:
        log.error("Converted server error", code=code, status=response.status_code)
    else:
        log.info("Converted API exception", code=code, status=response.status_code)
    headers = dict(response.headers) if getattr(response, "headers", None) else None
    return error_response(
        code,
        message,
        details,
        http_status=response.status_code,
        hint=hint,
        headers=headers,
    )


def _request_logger(context: Dict[str, Any]):
    log = logger
    view = context.get("view")
    if view:
        log = log.bind(view=type(view).__name__)
    request = context.get("request")
    if request is not None:
        log = log.bind(
            method=getattr(request, "method", None),
            path=getattr(request, "path", None),
        )
    return log


def _django_validation_detail(exc: DjangoValidationError):
    if hasattr(exc, "message_dict"):
        return exc.message_dict
    if hasattr(exc, "messages"):
        return list(exc.messages)
    return {"detail": getattr(exc, "message", "Validation failed")}


def _describe(exc: Exception, payload: Any, status_code: int):
    for types, code, fallback, echo_payload in FRAMEWORK_ERRORS:
        if isinstance(exc, types):
            details: Optional[Any] = payload if echo_payload else None
            hint = None
            if isinstance(exc, Throttled) and exc.wait is not None:
                details = {"retryAfter": exc.wait}
                hint = "Wait before retrying this request."
            return code, _message_from(payload, fallback, status_code), details, hint

    if status_code >= 500:
        code, fallback = STATUS_CODE_DEFAULTS[status.HTTP_500_INTERNAL_SERVER_ERROR]
    else:
        code, fallback = STATUS_CODE_DEFAULTS.get(
            status_code, ("UNKNOWN_ERROR", "Request failed")
        )
    details = None
    if status_code < 500 and isinstance(payload, (dict, list)) and payload:
        details = payload
    return code, _message_from(payload, fallback, status_code), details, None


def _message_from(payload: Any, fallback: str, status_code: int) -> str:
    if status_code >= 500:
        return GENERIC_SERVER_MESSAGE
    if isinstance(payload, str):
        return payload
    if isinstance(payload, dict) and isinstance(payload.get("detail"), str):
        return payload["detail"]
    if isinstance(payload, list) and payload and isinstance(payload[0], str):
        return payload[0]
    return fallback


__all__ = ["global_exception_handler", "storefront_error_response"]
