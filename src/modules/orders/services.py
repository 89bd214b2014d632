"""Order service layer (Use Cases).

Orchestrates the order engine: creation with atomic stock reservation,
completion, cancellation with stock release, reads, and bulk random
generation.  The service owns the unit-of-work boundary; every write
runs inside ``order_repository.begin_transaction()``.

Business rules enforced:
- An order references an existing customer and at least one line.
- Stock is reserved for every line or for none (all-or-nothing).
- Stock never goes negative, even under concurrent orders.
- Unit prices are snapshotted at creation.
- Only PENDING orders may be completed or cancelled.
- Cancelling returns every reserved unit to stock.
"""

from __future__ import annotations

import random
from dataclasses import dataclass, field
from decimal import Decimal
from typing import TYPE_CHECKING, List, Optional
from uuid import UUID

import structlog
from django.utils import timezone

from modules.core.pagination import PagedResultDTO, normalize_page
from modules.orders.constants import (
    GENERATION_CANCEL_THRESHOLD,
    GENERATION_COMPLETE_THRESHOLD,
    GENERATION_MAX_QUANTITY,
    MAX_ORDER_AMOUNT,
    OrderStatus,
)
from modules.orders.dtos import (
    CreateOrderDTO,
    CreateOrderItemDTO,
    OrderOutputDTO,
    OrderSummaryDTO,
)
from modules.orders.exceptions import (
    CustomerNotFound,
    InsufficientStock,
    InvalidOrderRequest,
    InvalidOrderStatus,
    OrderNotFound,
    ProductNotFound,
)

if TYPE_CHECKING:
    from modules.customers.repositories.interfaces import ICustomerRepository
    from modules.orders.models import Order
    from modules.orders.repositories.interfaces import IOrderRepository
    from modules.products.repositories.interfaces import IProductRepository

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class GenerationAttempt:
    """Outcome of one iteration of ``generate_random_orders``."""

    order_id: Optional[UUID] = None
    status: Optional[str] = None
    error: Optional[Exception] = None

    @property
    def succeeded(self) -> bool:
        return self.error is None and self.order_id is not None


@dataclass
class GenerationReport:
    requested_count: int
    attempts: List[GenerationAttempt] = field(default_factory=list)

    @property
    def created_count(self) -> int:
        return sum(1 for a in self.attempts if a.order_id is not None)

    @property
    def failed_count(self) -> int:
        return sum(1 for a in self.attempts if a.error is not None)

    def to_response(self) -> dict:
        return {
            "requested_count": self.requested_count,
            "created_count": self.created_count,
            "failed_count": self.failed_count,
        }


class OrderService:
    """Application service for Order use-cases.

    Receives repositories via constructor injection (DIP).
    """

    def __init__(
        self,
        order_repository: IOrderRepository,
        customer_repository: ICustomerRepository,
        product_repository: IProductRepository,
    ) -> None:
        self._order_repo = order_repository
        self._customer_repo = customer_repository
        self._product_repo = product_repository

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    def create_order(self, dto: CreateOrderDTO) -> UUID:
        """Create a new order with atomic stock reservation.

        Steps:
        1. Validate the customer exists.
        2. Lock every referenced product row in primary-key order.
        3. For each item, in request order:
           - Validate the product exists.
           - Validate sufficient stock.
           - Deduct stock with a guarded conditional update.
           - Snapshot the current price.
        4. Persist order + items.

        Any failure rolls back every deduction made so far.

        Raises:
            InvalidOrderRequest: no items, a bad quantity, or a total above
                ``MAX_ORDER_AMOUNT``.
            CustomerNotFound: customer does not exist.
            ProductNotFound: a product does not exist.
            InsufficientStock: not enough stock for a line.
        """
        if not dto.items:
            raise InvalidOrderRequest("Order must have at least one item.")

        log = logger.bind(customer_id=str(dto.customer_id))
        log.info("order.creation_started", item_count=len(dto.items))

        if not self._customer_repo.exists(dto.customer_id):
            raise CustomerNotFound(f"Customer {dto.customer_id} not found.")

        with self._order_repo.begin_transaction():
            products = self._product_repo.lock_for_update(
                item.product_id for item in dto.items
            )

            repo_items = []
            total = Decimal("0.00")
            for item_dto in dto.items:
                if item_dto.quantity < 1:
                    raise InvalidOrderRequest("Quantity must be at least 1.")

                product = products.get(item_dto.product_id)
                if product is None:
                    raise ProductNotFound(f"Product {item_dto.product_id} not found.")

                # Lines for the same product see the stock left by earlier lines
                if product.stock_quantity < item_dto.quantity:
                    raise InsufficientStock(
                        f"Insufficient stock for {product.name} ({product.sku}): "
                        f"requested {item_dto.quantity}, "
                        f"available {product.stock_quantity}."
                    )
                line_total = product.price * item_dto.quantity
                if total + line_total > MAX_ORDER_AMOUNT:
                    raise InvalidOrderRequest(
                        f"Order total exceeds the maximum of {MAX_ORDER_AMOUNT}."
                    )
                if not self._product_repo.deduct_stock(product.id, item_dto.quantity):
                    raise InsufficientStock(
                        f"Insufficient stock for {product.name} ({product.sku})."
                    )
                product.stock_quantity -= item_dto.quantity

                log.info(
                    "order.stock_reserved",
                    product_id=str(product.id),
                    quantity=item_dto.quantity,
                    remaining=product.stock_quantity,
                )

                repo_items.append(
                    {
                        "product_id": product.id,
                        "quantity": item_dto.quantity,
                        "unit_price": product.price,
                    }
                )
                total += line_total

            order = self._order_repo.create(
                {
                    "customer_id": dto.customer_id,
                    "items": repo_items,
                    "total_amount": total,
                }
            )

        log.info("order.created", order_id=str(order.id), total_amount=str(total))
        return order.id

    def complete_order(self, order_id: UUID | str) -> None:
        """Move a PENDING order to COMPLETED and stamp ``completed_at``.

        Raises:
            OrderNotFound: order does not exist.
            InvalidOrderStatus: the order is not pending.
        """
        with self._order_repo.begin_transaction():
            order = self._order_repo.get_for_update(order_id)
            if not order:
                raise OrderNotFound(f"Order {order_id} not found.")

            log = logger.bind(order_id=str(order.id), current_status=order.status)
            if not order.can_transition_to(OrderStatus.COMPLETED):
                log.warning("order.complete_not_allowed")
                raise InvalidOrderStatus("Only pending orders can be completed.")

            order.status = OrderStatus.COMPLETED
            order.completed_at = timezone.now()
            self._order_repo.save(order)

        log.info("order.completed")

    def cancel_order(self, order_id: UUID | str) -> None:
        """Cancel a PENDING order and release its reserved stock.

        Locks the order row **first** so concurrent cancellations cannot
        release stock twice.  Lines whose product has since been deleted
        are skipped.

        Raises:
            OrderNotFound: order does not exist.
            InvalidOrderStatus: the order is not pending.
        """
        with self._order_repo.begin_transaction():
            order = self._order_repo.get_for_update(order_id)
            if not order:
                raise OrderNotFound(f"Order {order_id} not found.")

            log = logger.bind(order_id=str(order.id), current_status=order.status)
            if not order.can_transition_to(OrderStatus.CANCELLED):
                log.warning("order.cancel_not_allowed")
                raise InvalidOrderStatus("Only pending orders can be cancelled.")

            for item in order.items.all():
                if self._product_repo.restore_stock(item.product_id, item.quantity):
                    log.info(
                        "order.stock_released",
                        product_id=str(item.product_id),
                        quantity=item.quantity,
                    )
                else:
                    log.warning(
                        "order.stock_release_skipped",
                        product_id=str(item.product_id),
                        quantity=item.quantity,
                    )

            order.status = OrderStatus.CANCELLED
            self._order_repo.save(order)

        log.info("order.cancelled")

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get_order(self, order_id: UUID | str) -> Order:
        """Retrieve a single order with customer and items loaded.

        Raises:
            OrderNotFound: order does not exist or the id is malformed.
        """
        order = self._order_repo.get_by_id(order_id)
        if not order:
            raise OrderNotFound(f"Order {order_id} not found.")
        return order

    def get_summary(self) -> OrderSummaryDTO:
        return self._order_repo.get_summary()

    def get_paged(
        self,
        page_number: int = 1,
        page_size: int = 10,
        status: Optional[str] = None,
        sort_by: Optional[str] = None,
        sort_direction: Optional[str] = "desc",
    ) -> PagedResultDTO[OrderOutputDTO]:
        """Paged, filtered and sorted order listing.

        Out-of-range paging values are normalised, never rejected.

        Raises:
            InvalidOrderRequest: ``status`` is not a known order status.
        """
        page_number, page_size = normalize_page(page_number, page_size)

        status_filter: Optional[str] = None
        if status and status.strip():
            try:
                status_filter = OrderStatus.parse(status).value
            except ValueError:
                raise InvalidOrderRequest("Invalid order status filter.") from None

        skip = (page_number - 1) * page_size
        total_count = self._order_repo.count(status_filter)
        orders = self._order_repo.get_paged(
            skip, page_size, status_filter, sort_by, sort_direction
        )

        logger.debug(
            "order.page_listed",
            page_number=page_number,
            page_size=page_size,
            status=status_filter,
            total_count=total_count,
        )
        return PagedResultDTO[OrderOutputDTO](
            items=[OrderOutputDTO.from_entity(o) for o in orders],
            total_count=total_count,
            page_number=page_number,
            page_size=page_size,
        )

    # ------------------------------------------------------------------
    # Bulk generation
    # ------------------------------------------------------------------

    def generate_random_orders(
        self, count: int, rng: Optional[random.Random] = None
    ) -> GenerationReport:
        """Create ``count`` single-line orders for random customers/products.

        Each new order is then completed (60%), cancelled (20%) or left
        pending (20%).  A failed iteration is recorded in the report and
        the loop moves on.
        """
        rng = rng or random.Random()
        report = GenerationReport(requested_count=count)

        customer_ids = self._customer_repo.list_ids()
        product_ids = self._product_repo.list_ids()
        if not customer_ids or not product_ids:
            logger.info(
                "order.generation_skipped",
                customers=len(customer_ids),
                products=len(product_ids),
            )
            return report

        for _ in range(count):
            report.attempts.append(
                self._generate_one(rng, customer_ids, product_ids)
            )

        logger.info(
            "order.generation_finished",
            requested_count=count,
            created_count=report.created_count,
            failed_count=report.failed_count,
        )
        return report

    def _generate_one(
        self,
        rng: random.Random,
        customer_ids: List[UUID],
        product_ids: List[UUID],
    ) -> GenerationAttempt:
        order_id: Optional[UUID] = None
        try:
            dto = CreateOrderDTO(
                customer_id=rng.choice(customer_ids),
                items=[
                    CreateOrderItemDTO(
                        product_id=rng.choice(product_ids),
                        quantity=rng.randint(1, GENERATION_MAX_QUANTITY),
                    )
                ],
            )
            order_id = self.create_order(dto)

            roll = rng.randint(1, 100)
            if roll <= GENERATION_COMPLETE_THRESHOLD:
                self.complete_order(order_id)
                status = OrderStatus.COMPLETED
            elif roll <= GENERATION_CANCEL_THRESHOLD:
                self.cancel_order(order_id)
                status = OrderStatus.CANCELLED
            else:
                status = OrderStatus.PENDING
        except Exception as exc:
            logger.warning(
                "order.generation_attempt_failed",
                order_id=str(order_id) if order_id else None,
                error=exc.__class__.__name__,
                detail=str(exc),
            )
            return GenerationAttempt(order_id=order_id, error=exc)

        return GenerationAttempt(order_id=order_id, status=status.value)
