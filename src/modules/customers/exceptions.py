"""Customer domain exceptions."""

from __future__ import annotations

from modules.core.exceptions import NotFound


class CustomerNotFound(NotFound):
    """The requested customer does not exist."""

    code = "customer_not_found"
