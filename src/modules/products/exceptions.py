"""Product domain exceptions."""

from __future__ import annotations

from modules.core.exceptions import NotFound


class ProductNotFound(NotFound):
    """The requested product does not exist or has been deleted."""

    code = "product_not_found"
