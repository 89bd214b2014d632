"""Order domain exceptions.

Raised by the Service Layer when business rules are violated.  Each one is
a ``BadRequest`` (400) or ``NotFound`` (404) so the API layer can map it
without knowing the concrete class.
"""

from __future__ import annotations

from modules.core.exceptions import BadRequest, NotFound
from modules.customers.exceptions import CustomerNotFound
from modules.products.exceptions import ProductNotFound

__all__ = [
    "CustomerNotFound",
    "InsufficientStock",
    "InvalidOrderRequest",
    "InvalidOrderStatus",
    "OrderNotFound",
    "ProductNotFound",
]


class InvalidOrderRequest(BadRequest):
    """The order request is malformed (missing customer, no items, bad quantity, bad filter)."""

    code = "invalid_order_request"


class InsufficientStock(BadRequest):
    """Not enough stock to fulfil an order item."""

    code = "insufficient_stock"


class InvalidOrderStatus(BadRequest):
    """A status transition was attempted from a state that does not allow it."""

    code = "invalid_order_status"


class OrderNotFound(NotFound):
    """The requested order does not exist."""

    code = "order_not_found"
