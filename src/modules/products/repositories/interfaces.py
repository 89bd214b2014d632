"""Product repository interface.

Besides catalog look-ups this is the only mutation path for stock:
``deduct_stock`` and ``restore_stock`` must run inside the caller's unit of
work so they commit or roll back together with the order.
"""

from __future__ import annotations

from abc import abstractmethod
from typing import TYPE_CHECKING, Dict, Iterable, Optional
from uuid import UUID

from modules.core.repositories.interfaces import IPagedRepository

if TYPE_CHECKING:
    from modules.products.models import Product


class IProductRepository(IPagedRepository["Product"]):
    """Repository contract for the Product aggregate."""

    @abstractmethod
    def get_by_sku(self, sku: str) -> Optional[Product]:
        """Retrieve a product by SKU."""

    @abstractmethod
    def lock_for_update(self, ids: Iterable[UUID]) -> Dict[UUID, Product]:
        """Lock the given product rows (SELECT FOR UPDATE) in primary-key order.

        Returns the live products keyed by ID; missing or deleted IDs are
        simply absent from the result.
        """

    @abstractmethod
    def deduct_stock(self, id: UUID, quantity: int) -> bool:
        """Subtract ``quantity`` if at least that much stock is available.

        Returns ``False`` (and changes nothing) when stock is insufficient
        or the product does not exist.
        """

    @abstractmethod
    def restore_stock(self, id: UUID, quantity: int) -> bool:
        """Add ``quantity`` back.  Returns ``False`` if the product is gone."""
