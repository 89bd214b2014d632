"""Asynchronous tasks for the orders module."""

import structlog
from celery import shared_task

from modules.customers.repositories.django_repository import CustomerDjangoRepository
from modules.orders.repositories.django_repository import OrderDjangoRepository
from modules.orders.services import OrderService
from modules.products.repositories.django_repository import ProductDjangoRepository

logger = structlog.get_logger(__name__)


@shared_task(name="orders.generate_random_orders")
def generate_random_orders_task(count: int) -> dict:
    """Run the bulk random-order generator outside the request cycle."""
    service = OrderService(
        order_repository=OrderDjangoRepository(),
        customer_repository=CustomerDjangoRepository(),
        product_repository=ProductDjangoRepository(),
    )
    report = service.generate_random_orders(count)
    logger.info("generate_random_orders_task.executed", **report.to_response())
    return report.to_response()
