"""Generic repository interface (Dependency Inversion Principle).

Provides ``IRepository[T]``, the base abstract class that all
domain-specific repository interfaces extend.  Service-layer code
depends on this abstraction, never on Django ORM directly.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Dict, Generic, List, Optional, TypeVar
from uuid import UUID

T = TypeVar("T")


class IRepository(ABC, Generic[T]):
    """Base generic repository contract.

    Type parameter ``T`` represents the domain entity managed by the
    repository (e.g. ``Customer``, ``Product``, ``Order``).  Look-ups
    return ``None`` for missing or malformed IDs; the service layer
    decides how to report absence.
    """

    @abstractmethod
    def get_by_id(self, id: UUID | str) -> Optional[T]:
        """Retrieve an entity by its primary key."""

    @abstractmethod
    def list(self, filters: Optional[Dict[str, Any]] = None) -> List[T]:
        """List entities with optional filters."""

    @abstractmethod
    def save(self, entity: T) -> T:
        """Persist (create or update) an entity."""

    @abstractmethod
    def delete(self, id: UUID | str) -> bool:
        """Remove an entity by ID (soft or hard delete)."""


class IPagedRepository(IRepository[T]):
    """Repository that also serves paged, sorted listings."""

    @abstractmethod
    def count(self) -> int:
        """Total number of visible entities."""

    @abstractmethod
    def get_paged(
        self,
        skip: int,
        take: int,
        sort_by: Optional[str] = None,
        sort_direction: Optional[str] = None,
    ) -> List[T]:
        """Return ``take`` entities after skipping ``skip``, sorted."""

    @abstractmethod
    def list_ids(self) -> List[UUID]:
        """Primary keys of every visible entity."""
