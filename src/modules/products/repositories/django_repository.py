"""Django ORM implementation of the Product repository.

Stock mutations are single conditional ``UPDATE`` statements using ``F()``
expressions, so the non-negative invariant holds even on backends without
row locking: a deduction only matches the row while
``stock_quantity >= quantity``.
"""

from __future__ import annotations

from typing import Any, Dict, Iterable, List, Optional
from uuid import UUID

import structlog
from django.core.exceptions import ValidationError
from django.db import transaction
from django.db.models import F
from django.utils import timezone

from modules.core.pagination import is_descending, resolve_sort_key
from modules.products.models import Product
from modules.products.repositories.interfaces import IProductRepository

logger = structlog.get_logger(__name__)

SORT_FIELDS = {
    "name": "name",
    "price": "price",
    "stock_quantity": "stock_quantity",
    "sku": "sku",
}
DEFAULT_SORT = "name"


class ProductDjangoRepository(IProductRepository):
    """Concrete Product repository backed by Django ORM."""

    def get_by_id(self, id: UUID | str) -> Optional[Product]:
        """Retrieve a live product by primary key.

        Returns ``None`` for non-existent, deleted or invalid IDs.
        """
        try:
            return Product.objects.alive().filter(id=id).first()
        except (ValueError, ValidationError):
            return None

    def get_by_sku(self, sku: str) -> Optional[Product]:
        """Retrieve a product by SKU (case-insensitive via upper normalisation)."""
        return Product.objects.alive().filter(sku=sku.strip().upper()).first()

    def list(self, filters: Optional[Dict[str, Any]] = None) -> List[Product]:
        queryset = Product.objects.alive()
        if filters:
            queryset = queryset.filter(**filters)
        return list(queryset)

    def list_ids(self) -> List[UUID]:
        return list(Product.objects.alive().values_list("id", flat=True))

    def count(self) -> int:
        return Product.objects.alive().count()

    def get_paged(
        self,
        skip: int,
        take: int,
        sort_by: Optional[str] = None,
        sort_direction: Optional[str] = None,
    ) -> List[Product]:
        field = resolve_sort_key(sort_by, SORT_FIELDS, DEFAULT_SORT)
        prefix = "-" if is_descending(sort_direction) else ""
        queryset = Product.objects.alive().order_by(f"{prefix}{field}", f"{prefix}id")
        return list(queryset[skip : skip + take])

    # ------------------------------------------------------------------
    # Stock (must run inside the caller's transaction)
    # ------------------------------------------------------------------

    def lock_for_update(self, ids: Iterable[UUID]) -> Dict[UUID, Product]:
        unique_ids = sorted({str(i) for i in ids})
        if not unique_ids:
            return {}
        try:
            rows = (
                Product.objects.alive()
                .select_for_update()
                .filter(id__in=unique_ids)
                .order_by("id")
            )
            return {product.id: product for product in rows}
        except (ValueError, ValidationError):
            return {}

    def deduct_stock(self, id: UUID, quantity: int) -> bool:
        updated = (
            Product.objects.alive()
            .filter(id=id, stock_quantity__gte=quantity)
            .update(
                stock_quantity=F("stock_quantity") - quantity,
                updated_at=timezone.now(),
            )
        )
        return updated == 1

    def restore_stock(self, id: UUID, quantity: int) -> bool:
        updated = (
            Product.objects.alive()
            .filter(id=id)
            .update(
                stock_quantity=F("stock_quantity") + quantity,
                updated_at=timezone.now(),
            )
        )
        return updated == 1

    # ------------------------------------------------------------------
    # Save / Delete (IRepository contract)
    # ------------------------------------------------------------------

    @transaction.atomic
    def save(self, entity: Product) -> Product:
        """Persist (create or update) a product."""
        entity.save()
        logger.info("product.saved", product_id=str(entity.id), sku=entity.sku)
        return entity

    @transaction.atomic
    def delete(self, id: UUID | str) -> bool:
        """Soft-delete a product by ID.

        Returns ``True`` if the product was found and soft-deleted,
        ``False`` if no live product exists with the given ID.
        """
        product = self.get_by_id(id)
        if not product:
            return False
        product.delete()
        logger.info("product.soft_deleted", product_id=str(id))
        return True
