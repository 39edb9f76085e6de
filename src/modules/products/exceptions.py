"""Product domain exceptions."""

from __future__ import annotations

from modules.core.exceptions import NotFound


class ProductNotFound(NotFound):
    """The product does not exist or has been soft-deleted."""

    default_message = "Product not found"
