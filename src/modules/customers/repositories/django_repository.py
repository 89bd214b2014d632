"""Django ORM implementation of the Customer repository.

Satisfies ``ICustomerRepository`` using Django's QuerySet API.
Error handling follows the Null Object pattern: methods return ``None``
instead of raising, and the Service Layer decides how to translate a
missing entity into an API response.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional
from uuid import UUID

import structlog
from django.core.exceptions import ValidationError
from django.db import transaction

from modules.core.pagination import is_descending, resolve_sort_key
from modules.customers.models import Customer
from modules.customers.repositories.interfaces import ICustomerRepository

logger = structlog.get_logger(__name__)

SORT_FIELDS = {
    "last_name": "last_name",
    "first_name": "first_name",
    "email": "email",
}
DEFAULT_SORT = "last_name"


class CustomerDjangoRepository(ICustomerRepository):
    """Concrete Customer repository backed by Django ORM."""

    def get_by_id(self, id: UUID | str) -> Optional[Customer]:
        """Retrieve a customer by primary key.

        Returns ``None`` for non-existent or invalid IDs (e.g. malformed UUID).
        """
        try:
            return Customer.objects.filter(id=id).first()
        except (ValueError, ValidationError):
            return None

    def exists(self, id: UUID | str) -> bool:
        try:
            return Customer.objects.filter(id=id).exists()
        except (ValueError, ValidationError):
            return False

    def get_by_email(self, email: str) -> Optional[Customer]:
        return Customer.objects.filter(email=email.strip().lower()).first()

    def list(self, filters: Optional[Dict[str, Any]] = None) -> List[Customer]:
        queryset = Customer.objects.all()
        if filters:
            queryset = queryset.filter(**filters)
        return list(queryset)

    def list_ids(self) -> List[UUID]:
        return list(Customer.objects.values_list("id", flat=True))

    def count(self) -> int:
        return Customer.objects.count()

    def get_paged(
        self,
        skip: int,
        take: int,
        sort_by: Optional[str] = None,
        sort_direction: Optional[str] = None,
    ) -> List[Customer]:
        field = resolve_sort_key(sort_by, SORT_FIELDS, DEFAULT_SORT)
        prefix = "-" if is_descending(sort_direction) else ""
        queryset = Customer.objects.order_by(f"{prefix}{field}", f"{prefix}id")
        return list(queryset[skip : skip + take])

    @transaction.atomic
    def save(self, entity: Customer) -> Customer:
        """Persist (create or update) a customer."""
        is_new = entity._state.adding
        entity.save()
        logger.info("customer.saved", customer_id=str(entity.id), is_new=is_new)
        return entity

    @transaction.atomic
    def delete(self, id: UUID | str) -> bool:
        """Hard-delete a customer with no orders.

        Customers referenced by orders are protected at the database level
        (``on_delete=PROTECT``) and raise ``ProtectedError``.
        """
        customer = self.get_by_id(id)
        if not customer:
            return False
        customer.delete()
        logger.info("customer.deleted", customer_id=str(id))
        return True
