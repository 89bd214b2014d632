"""Product service layer (read-side use cases).

Stock is deliberately absent here: it changes only through the order
engine's unit of work.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional

import structlog

from modules.core.pagination import ASCENDING, PagedResultDTO, normalize_page
from modules.products.dtos import ProductOutputDTO
from modules.products.exceptions import ProductNotFound

if TYPE_CHECKING:
    from modules.products.models import Product
    from modules.products.repositories.interfaces import IProductRepository

logger = structlog.get_logger(__name__)


class ProductService:
    """Application service for Product use-cases.

    Receives an ``IProductRepository`` via constructor injection (DIP).
    """

    def __init__(self, repository: IProductRepository) -> None:
        self._repo = repository

    def get_product(self, id: str) -> Product:
        """Retrieve a single product by ID.

        Raises:
            ProductNotFound: if the product does not exist.
        """
        product = self._repo.get_by_id(id)
        if not product:
            raise ProductNotFound(f"Product {id} not found.")
        return product

    def get_paged(
        self,
        page_number: int = 1,
        page_size: int = 10,
        sort_by: Optional[str] = None,
        sort_direction: Optional[str] = ASCENDING,
    ) -> PagedResultDTO[ProductOutputDTO]:
        page_number, page_size = normalize_page(page_number, page_size)
        skip = (page_number - 1) * page_size

        total_count = self._repo.count()
        products = self._repo.get_paged(skip, page_size, sort_by, sort_direction)

        logger.debug(
            "product.page_listed",
            page_number=page_number,
            page_size=page_size,
            total_count=total_count,
        )
        return PagedResultDTO[ProductOutputDTO](
            items=[ProductOutputDTO.from_entity(p) for p in products],
            total_count=total_count,
            page_number=page_number,
            page_size=page_size,
        )
