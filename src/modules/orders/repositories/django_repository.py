"""Django ORM implementation of the Order repository.

Satisfies ``IOrderRepository`` using Django's QuerySet API.  The unit of
work is a ``transaction.atomic()`` block opened by the service through
``begin_transaction()``; status changes lock the order row with
``select_for_update()``.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Any, ContextManager, Dict, List, Optional
from uuid import UUID

import structlog
from django.core.exceptions import ValidationError
from django.db import transaction
from django.db.models import (
    Case,
    Count,
    IntegerField,
    Prefetch,
    QuerySet,
    Sum,
    Value,
    When,
)

from modules.core.pagination import is_descending, resolve_sort_key
from modules.orders.constants import DEFAULT_SORT, SORT_FIELDS, STATUS_RANK, OrderStatus
from modules.orders.dtos import OrderSummaryDTO
from modules.orders.models import Order, OrderItem
from modules.orders.repositories.interfaces import IOrderRepository

logger = structlog.get_logger(__name__)

ZERO = Decimal("0.00")


class OrderDjangoRepository(IOrderRepository):
    """Concrete Order repository backed by Django ORM."""

    def begin_transaction(self) -> ContextManager[Any]:
        return transaction.atomic()

    # ------------------------------------------------------------------
    # Create (aggregate root + children)
    # ------------------------------------------------------------------

    @transaction.atomic
    def create(self, data: Dict[str, Any]) -> Order:
        """Create an order with its items.

        ``data`` keys:
        - ``customer_id`` (required)
        - ``items`` (required): list of dicts with ``product_id``,
          ``quantity``, ``unit_price``
        - ``total_amount`` (optional): recomputed from the items when absent
        """
        items = data.get("items", [])
        order = Order(
            customer_id=data["customer_id"],
            status=OrderStatus.PENDING,
            completed_at=None,
            total_amount=data.get("total_amount", ZERO),
        )
        order.save()

        total = ZERO
        for item_data in items:
            item = OrderItem(
                order=order,
                product_id=item_data["product_id"],
                quantity=item_data["quantity"],
                unit_price=item_data["unit_price"],
            )
            item.save()
            total += item.subtotal

        if order.total_amount != total:
            order.total_amount = total
            order.save(update_fields=["total_amount"])

        logger.debug("order.persisted", order_id=str(order.id), item_count=len(items))
        return order

    # ------------------------------------------------------------------
    # Read
    # ------------------------------------------------------------------

    def _with_relations(self) -> QuerySet:
        return Order.objects.select_related("customer").prefetch_related(
            "items__product"
        )

    def get_by_id(self, id: UUID | str) -> Optional[Order]:
        """Retrieve an order with eager-loaded relations.

        Uses ``select_related`` for the customer FK and ``prefetch_related``
        for items and their products, so callers never hit lazy loads.

        Returns ``None`` for non-existent or invalid IDs.
        """
        try:
            return self._with_relations().filter(id=id).first()
        except (ValueError, ValidationError):
            return None

    def get_for_update(self, id: UUID | str) -> Optional[Order]:
        """Retrieve an order with a row-level lock.

        Must be called inside ``begin_transaction()``.  Items are loaded
        in product-id order so stock is restored in the same order it is
        locked at creation.
        """
        try:
            return (
                Order.objects.select_for_update()
                .prefetch_related(
                    Prefetch("items", queryset=OrderItem.objects.order_by("product_id", "id"))
                )
                .filter(id=id)
                .first()
            )
        except (ValueError, ValidationError):
            return None

    def list(self, filters: Optional[Dict[str, Any]] = None) -> List[Order]:
        queryset = self._with_relations()
        if filters:
            queryset = queryset.filter(**filters)
        return list(queryset)

    def count(self, status: Optional[str] = None) -> int:
        queryset = Order.objects.all()
        if status:
            queryset = queryset.filter(status=status)
        return queryset.count()

    def get_paged(
        self,
        skip: int,
        take: int,
        status: Optional[str] = None,
        sort_by: Optional[str] = None,
        sort_direction: Optional[str] = None,
    ) -> List[Order]:
        """Slice of orders sorted by ``sort_by`` then ``id``.

        ``status`` sorts by lifecycle rank rather than alphabetically.
        """
        queryset = self._with_relations()
        if status:
            queryset = queryset.filter(status=status)

        field = resolve_sort_key(sort_by, SORT_FIELDS, SORT_FIELDS[DEFAULT_SORT])
        if field == "status_rank":
            queryset = queryset.annotate(
                status_rank=Case(
                    *[When(status=s, then=Value(rank)) for s, rank in STATUS_RANK.items()],
                    output_field=IntegerField(),
                )
            )
        prefix = "-" if is_descending(sort_direction) else ""
        queryset = queryset.order_by(f"{prefix}{field}", f"{prefix}id")
        return list(queryset[skip : skip + take])

    def get_summary(self) -> OrderSummaryDTO:
        """One grouped query: ``SELECT status, COUNT(*), SUM(total_amount)``."""
        rows = (
            Order.objects.order_by()
            .values("status")
            .annotate(count=Count("id"), revenue=Sum("total_amount"))
        )
        counts: Dict[str, int] = {}
        revenue: Dict[str, Decimal] = {}
        for row in rows:
            counts[row["status"]] = row["count"]
            revenue[row["status"]] = row["revenue"] or ZERO

        return OrderSummaryDTO(
            total_orders=sum(counts.values()),
            pending_orders=counts.get(OrderStatus.PENDING, 0),
            completed_orders=counts.get(OrderStatus.COMPLETED, 0),
            cancelled_orders=counts.get(OrderStatus.CANCELLED, 0),
            total_revenue=revenue.get(OrderStatus.COMPLETED, ZERO),
            pending_revenue=revenue.get(OrderStatus.PENDING, ZERO),
        )

    # ------------------------------------------------------------------
    # Save / Delete (IRepository contract)
    # ------------------------------------------------------------------

    @transaction.atomic
    def save(self, entity: Order) -> Order:
        """Persist (create or update) an order."""
        entity.save()
        return entity

    def delete(self, id: UUID | str) -> bool:
        """Orders are never deleted; they are cancelled."""
        raise NotImplementedError(
            "Orders cannot be deleted. Cancel the order instead."
        )
