"""Order DTOs for the Service Layer.

Framework-agnostic data transfer objects using Pydantic v2.
These are the contracts between the API layer (DRF Serializers)
and the Service layer.  DTOs are immutable (``frozen=True``).

- ``CreateOrderItemDTO``: input for a single order line item.
- ``CreateOrderDTO``: input for order creation (nested items).
- ``OrderItemOutputDTO``: output for a single line item.
- ``OrderOutputDTO``: output with items.
- ``OrderSummaryDTO``: aggregated counts and revenue per status.
"""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import TYPE_CHECKING, Any, List, Mapping, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, ValidationError, field_validator

from modules.orders.exceptions import InvalidOrderRequest

if TYPE_CHECKING:
    from modules.orders.models import Order, OrderItem

NIL_UUID = UUID(int=0)


# ---------------------------------------------------------------------------
# Input DTOs
# ---------------------------------------------------------------------------


class CreateOrderItemDTO(BaseModel):
    """Immutable DTO for a single order item in a creation request.

    The caller sends ``product_id`` and ``quantity``.
    ``unit_price`` is resolved by the Service Layer from the product catalog.
    """

    model_config = ConfigDict(frozen=True)

    product_id: UUID
    quantity: int

    @field_validator("quantity")
    @classmethod
    def quantity_must_be_positive(cls, v: int) -> int:
        if v < 1:
            raise ValueError("Quantity must be at least 1.")
        return v


class CreateOrderDTO(BaseModel):
    """Immutable DTO for order creation requests.

    Validates:
    - ``customer_id`` is present and not the nil UUID.
    - ``items`` must contain at least one item.
    - Each item quantity must be positive.

    The same product may appear on several lines.
    """

    model_config = ConfigDict(frozen=True)

    customer_id: UUID
    items: List[CreateOrderItemDTO]

    @field_validator("customer_id")
    @classmethod
    def customer_must_be_given(cls, v: UUID) -> UUID:
        if v == NIL_UUID:
            raise ValueError("Customer is required.")
        return v

    @field_validator("items")
    @classmethod
    def items_must_not_be_empty(
        cls, v: List[CreateOrderItemDTO]
    ) -> List[CreateOrderItemDTO]:
        if not v:
            raise ValueError("Order must have at least one item.")
        return v


def parse_create_order(payload: Mapping[str, Any]) -> CreateOrderDTO:
    """Build a ``CreateOrderDTO`` from a raw payload.

    Raises:
        InvalidOrderRequest: with the first validation message.
    """
    try:
        return CreateOrderDTO.model_validate(payload)
    except ValidationError as exc:
        first = exc.errors()[0]
        message = first.get("msg", "Invalid order request.")
        if message.startswith("Value error, "):
            message = message[len("Value error, ") :]
        location = ".".join(str(part) for part in first.get("loc", ()))
        raise InvalidOrderRequest(
            f"{location}: {message}" if location else message
        ) from exc


# ---------------------------------------------------------------------------
# Output DTOs
# ---------------------------------------------------------------------------


class OrderItemOutputDTO(BaseModel):
    """Immutable DTO for a single order item in API responses."""

    model_config = ConfigDict(frozen=True)

    id: UUID
    product_id: UUID
    product_name: str
    product_sku: str
    quantity: int
    unit_price: Decimal
    subtotal: Decimal

    @classmethod
    def from_entity(cls, item: OrderItem) -> OrderItemOutputDTO:
        return cls(
            id=item.id,
            product_id=item.product_id,
            product_name=item.product.name,
            product_sku=item.product.sku,
            quantity=item.quantity,
            unit_price=item.unit_price,
            subtotal=item.subtotal,
        )


class OrderOutputDTO(BaseModel):
    """Immutable DTO for order API responses.

    Built from an order whose ``customer`` and ``items__product`` relations
    were loaded by the repository.
    """

    model_config = ConfigDict(frozen=True)

    id: UUID
    customer_id: UUID
    customer_name: str
    status: str
    total_amount: Decimal
    created_at: datetime
    completed_at: Optional[datetime] = None
    items: List[OrderItemOutputDTO] = []

    @classmethod
    def from_entity(cls, order: Order) -> OrderOutputDTO:
        return cls(
            id=order.id,
            customer_id=order.customer_id,
            customer_name=order.customer.full_name,
            status=order.status,
            total_amount=order.total_amount,
            created_at=order.created_at,
            completed_at=order.completed_at,
            items=[OrderItemOutputDTO.from_entity(i) for i in order.items.all()],
        )


class OrderSummaryDTO(BaseModel):
    """Counts and revenue grouped by status."""

    model_config = ConfigDict(frozen=True)

    total_orders: int = 0
    pending_orders: int = 0
    completed_orders: int = 0
    cancelled_orders: int = 0
    total_revenue: Decimal = Decimal("0.00")
    pending_revenue: Decimal = Decimal("0.00")
