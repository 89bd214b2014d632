"""Order repository interface.

Extends ``IRepository[Order]`` with the methods the order engine needs:
atomic creation with items, row locking for status changes, filtered
paging and the status summary.

The Service Layer depends exclusively on this contract (DIP).
"""

from __future__ import annotations

from abc import abstractmethod
from typing import TYPE_CHECKING, Any, ContextManager, Dict, List, Optional
from uuid import UUID

from modules.core.repositories.interfaces import IRepository

if TYPE_CHECKING:
    from modules.orders.dtos import OrderSummaryDTO
    from modules.orders.models import Order


class IOrderRepository(IRepository["Order"]):
    """Repository contract for the Order aggregate root.

    The Order aggregate includes its OrderItem children.  Mutations must
    run inside ``begin_transaction()``.
    """

    @abstractmethod
    def begin_transaction(self) -> ContextManager[Any]:
        """Open a unit of work.

        Commits on normal exit and rolls back when an exception escapes.
        Nested calls become savepoints.
        """

    @abstractmethod
    def create(self, data: Dict[str, Any]) -> Order:
        """Create an order with its items.

        ``data`` must include ``customer_id`` and ``items`` (list of dicts
        with ``product_id``, ``quantity``, ``unit_price``).
        """

    @abstractmethod
    def get_for_update(self, id: UUID | str) -> Optional[Order]:
        """Retrieve an order with a row-level lock (SELECT FOR UPDATE)."""

    @abstractmethod
    def count(self, status: Optional[str] = None) -> int:
        """Number of orders, optionally restricted to one status."""

    @abstractmethod
    def get_paged(
        self,
        skip: int,
        take: int,
        status: Optional[str] = None,
        sort_by: Optional[str] = None,
        sort_direction: Optional[str] = None,
    ) -> List[Order]:
        """Return a sorted slice of orders with customer and items loaded."""

    @abstractmethod
    def get_summary(self) -> OrderSummaryDTO:
        """Order counts and revenue grouped by status."""
