"""Order domain constants.

Defines the status choices and the order state machine:
``PENDING`` is the only non-terminal state and may move to ``COMPLETED``
or ``CANCELLED``; nothing leaves a terminal state.
"""

from __future__ import annotations

from decimal import Decimal

from django.db import models


class OrderStatus(models.TextChoices):
    PENDING = "PENDING", "Pending"
    COMPLETED = "COMPLETED", "Completed"
    CANCELLED = "CANCELLED", "Cancelled"

    @classmethod
    def parse(cls, value: str) -> "OrderStatus":
        """Parse the external string form, ignoring case and whitespace.

        Raises ``ValueError`` for anything that is not a known status.
        """
        normalized = (value or "").strip().upper()
        try:
            return cls(normalized)
        except ValueError:
            raise ValueError(f"Unknown order status: {value!r}") from None


VALID_TRANSITIONS: dict[str, set[str]] = {
    OrderStatus.PENDING: {OrderStatus.COMPLETED, OrderStatus.CANCELLED},
    OrderStatus.COMPLETED: set(),
    OrderStatus.CANCELLED: set(),
}

TERMINAL_STATES: set[str] = {OrderStatus.COMPLETED, OrderStatus.CANCELLED}

# Largest amount the total_amount and subtotal columns hold (12 digits, 2 places)
MAX_ORDER_AMOUNT = Decimal("9999999999.99")

# Lifecycle order used when sorting by status
STATUS_RANK: dict[str, int] = {
    OrderStatus.PENDING: 0,
    OrderStatus.COMPLETED: 1,
    OrderStatus.CANCELLED: 2,
}

SORT_FIELDS: dict[str, str] = {
    "created_at": "created_at",
    "total_amount": "total_amount",
    "status": "status_rank",
}
DEFAULT_SORT = "created_at"

# Random order generation
GENERATION_MAX_QUANTITY = 3
GENERATION_COMPLETE_THRESHOLD = 60
GENERATION_CANCEL_THRESHOLD = 80
