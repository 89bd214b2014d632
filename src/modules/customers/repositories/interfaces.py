"""Customer repository interface."""

from __future__ import annotations

from abc import abstractmethod
from typing import TYPE_CHECKING, Optional
from uuid import UUID

from modules.core.repositories.interfaces import IPagedRepository

if TYPE_CHECKING:
    from modules.customers.models import Customer


class ICustomerRepository(IPagedRepository["Customer"]):
    """Repository contract for the Customer aggregate."""

    @abstractmethod
    def exists(self, id: UUID | str) -> bool:
        """Return ``True`` if a customer with this ID exists."""

    @abstractmethod
    def get_by_email(self, email: str) -> Optional[Customer]:
        """Retrieve a customer by email address."""
