"""Domain error hierarchy shared by every module.

Services raise these; views let them propagate and the DRF exception
handler (``modules.core.exception_handler``) renders them as
``{"success": false, "message": ..., "errors": [...]}`` with ``status_code``.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional


class DomainError(Exception):
    """Base class for business errors that map onto an HTTP status."""

    status_code: int = 400
    default_message: str = "Request could not be processed"

    def __init__(
        self,
        message: Optional[str] = None,
        errors: Optional[List[Dict[str, Any]]] = None,
    ) -> None:
        self.message = message or self.default_message
        self.errors = errors or []
        super().__init__(self.message)


class ValidationError(DomainError):
    """Structurally invalid input; ``errors`` lists every offending field."""

    status_code = 400
    default_message = "Validation failed"


class NotFound(DomainError):
    status_code = 404
    default_message = "Resource not found"


class Forbidden(DomainError):
    status_code = 403
    default_message = "Access denied"


class InvalidTransition(DomainError):
    """The requested operation is not allowed in the current state."""

    status_code = 400
    default_message = "Operation not allowed in the current state"


class InsufficientStock(DomainError):
    """Not enough stock to satisfy a requested quantity."""

    status_code = 400
    default_message = "Insufficient stock"

    def __init__(
        self,
        product_name: str,
        available: int,
        requested: int,
        message: Optional[str] = None,
    ) -> None:
        self.product_name = product_name
        self.available = available
        self.requested = requested
        super().__init__(
            message
            or (
                f"Insufficient stock for product: {product_name}. "
                f"Available: {available}, Requested: {requested}"
            )
        )


class InternalError(DomainError):
    status_code = 500
    default_message = "Internal server error"
