"""Customer service layer (read-side use cases)."""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional

import structlog

from modules.core.pagination import ASCENDING, PagedResultDTO, normalize_page
from modules.customers.dtos import CustomerOutputDTO
from modules.customers.exceptions import CustomerNotFound

if TYPE_CHECKING:
    from modules.customers.models import Customer
    from modules.customers.repositories.interfaces import ICustomerRepository

logger = structlog.get_logger(__name__)


class CustomerService:
    """Application service for Customer use-cases.

    Receives an ``ICustomerRepository`` via constructor injection (DIP).
    """

    def __init__(self, repository: ICustomerRepository) -> None:
        self._repo = repository

    def get_customer(self, id: str) -> Customer:
        """Retrieve a single customer by ID.

        Raises:
            CustomerNotFound: if the customer does not exist.
        """
        customer = self._repo.get_by_id(id)
        if not customer:
            raise CustomerNotFound(f"Customer {id} not found.")
        return customer

    def get_paged(
        self,
        page_number: int = 1,
        page_size: int = 10,
        sort_by: Optional[str] = None,
        sort_direction: Optional[str] = ASCENDING,
    ) -> PagedResultDTO[CustomerOutputDTO]:
        page_number, page_size = normalize_page(page_number, page_size)
        skip = (page_number - 1) * page_size

        total_count = self._repo.count()
        customers = self._repo.get_paged(skip, page_size, sort_by, sort_direction)

        logger.debug(
            "customer.page_listed",
            page_number=page_number,
            page_size=page_size,
            total_count=total_count,
        )
        return PagedResultDTO[CustomerOutputDTO](
            items=[CustomerOutputDTO.from_entity(c) for c in customers],
            total_count=total_count,
            page_number=page_number,
            page_size=page_size,
        )
