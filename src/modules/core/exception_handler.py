"""DRF exception handler rendering every error into the API envelope."""

from __future__ import annotations

from typing import Any, Dict, List, Optional

import structlog
from django.core.exceptions import PermissionDenied
from django.http import Http404
from pydantic import ValidationError as PydanticValidationError
from rest_framework import exceptions as drf_exceptions
from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import exception_handler as drf_exception_handler

from modules.core.exceptions import DomainError

logger = structlog.get_logger(__name__)


def api_exception_handler(exc: Exception, context: Dict[str, Any]) -> Optional[Response]:
    """Translate domain, pydantic and DRF errors into ``{success: false, ...}``.

    Anything else is logged with its traceback and answered with a generic 500
    so internals never leak to clients.
    """
    view = context.get("view")
    log = logger.bind(view=view.__class__.__name__ if view else None)

    if isinstance(exc, DomainError):
        if exc.status_code >= 500:
            log.error("api.domain_error", error=exc.message, exc_info=exc)
        else:
            log.info(
                "api.domain_error",
                error_type=exc.__class__.__name__,
                status_code=exc.status_code,
            )
        return _envelope(exc.message, exc.status_code, exc.errors)

    if isinstance(exc, PydanticValidationError):
        errors = [
            {
                "field": ".".join(str(part) for part in err["loc"]),
                "message": err["msg"],
            }
            for err in exc.errors()
        ]
        return _envelope("Validation failed", status.HTTP_400_BAD_REQUEST, errors)

    if isinstance(exc, (Http404, PermissionDenied, drf_exceptions.APIException)):
        response = drf_exception_handler(exc, context)
        if response is None:
            return None
        if isinstance(exc, drf_exceptions.ValidationError):
            response.data = {
                "success": False,
                "message": "Validation failed",
                "errors": _flatten_drf_errors(exc.detail),
            }
        else:
            detail = response.data.get("detail") if isinstance(response.data, dict) else None
            response.data = {"success": False, "message": str(detail or exc)}
        return response

    log.error("api.unhandled_exception", exc_info=exc)
    return _envelope("Internal server error", status.HTTP_500_INTERNAL_SERVER_ERROR)


def _envelope(
    message: str, status_code: int, errors: Optional[List[Dict[str, Any]]] = None
) -> Response:
    body: Dict[str, Any] = {"success": False, "message": message}
    if errors:
        body["errors"] = errors
    return Response(body, status=status_code)


def _flatten_drf_errors(detail: Any, prefix: str = "") -> List[Dict[str, str]]:
    """Turn DRF's nested ``{"field": ["msg"]}`` structure into a flat list."""
    errors: List[Dict[str, str]] = []
    if isinstance(detail, dict):
        for key, value in detail.items():
            field = f"{prefix}.{key}" if prefix else str(key)
            errors.extend(_flatten_drf_errors(value, field))
    elif isinstance(detail, list):
        for index, value in enumerate(detail):
            if isinstance(value, (dict, list)):
                field = f"{prefix}.{index}" if prefix else str(index)
                errors.extend(_flatten_drf_errors(value, field))
            else:
                errors.append({"field": prefix or "non_field_errors", "message": str(value)})
    else:
        errors.append({"field": prefix or "non_field_errors", "message": str(detail)})
    return errors
