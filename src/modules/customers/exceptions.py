"""Customer domain exceptions."""

from __future__ import annotations

from modules.core.exceptions import NotFound


class CustomerNotFound(NotFound):
    """No account with this id, or the account is not a ``user``."""

    default_message = "Customer not found"
