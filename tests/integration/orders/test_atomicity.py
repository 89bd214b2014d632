"""All-or-nothing order creation, observed through the API.

A request whose last line cannot be fulfilled must leave every product's
stock untouched and create no order rows.
"""

from __future__ import annotations

from decimal import Decimal

import pytest

from modules.orders.models import Order, OrderItem
from modules.products.models import Product

pytestmark = pytest.mark.integration


@pytest.fixture()
def shelf():
    return [
        Product.objects.create(
            sku=f"SHELF-{i}", name=f"Shelf {i}", price=Decimal("5.00"), stock_quantity=10
        )
        for i in range(3)
    ]


class TestCreateAtomicity:
    def test_failure_on_last_line_rolls_back_everything(self, auth_client, customer, shelf):
        Product.objects.filter(id=shelf[2].id).update(stock_quantity=1)

        response = auth_client.post(
            "/api/v1/orders/",
            {
                "customer_id": str(customer.id),
                "items": [
                    {"product_id": str(shelf[0].id), "quantity": 5},
                    {"product_id": str(shelf[1].id), "quantity": 5},
                    {"product_id": str(shelf[2].id), "quantity": 2},
                ],
            },
            format="json",
        )

        assert response.status_code == 400
        stocks = list(
            Product.objects.filter(id__in=[p.id for p in shelf])
            .order_by("sku")
            .values_list("stock_quantity", flat=True)
        )
        assert stocks == [10, 10, 1]
        assert Order.objects.count() == 0
        assert OrderItem.objects.count() == 0

    def test_database_error_rolls_back(self, order_service, customer, shelf, monkeypatch):
        from django.db import DatabaseError

        from modules.orders.dtos import CreateOrderDTO, CreateOrderItemDTO

        def failing_create(data):
            raise DatabaseError("disk full")

        monkeypatch.setattr(order_service._order_repo, "create", failing_create)
        dto = CreateOrderDTO(
            customer_id=customer.id,
            items=[CreateOrderItemDTO(product_id=shelf[0].id, quantity=3)],
        )
        with pytest.raises(DatabaseError):
            order_service.create_order(dto)

        shelf[0].refresh_from_db()
        assert shelf[0].stock_quantity == 10

    def test_sequential_orders_never_oversell(self, auth_client, customer, shelf):
        results = []
        for _ in range(4):
            response = auth_client.post(
                "/api/v1/orders/",
                {
                    "customer_id": str(customer.id),
                    "items": [{"product_id": str(shelf[0].id), "quantity": 3}],
                },
                format="json",
            )
            results.append(response.status_code)

        assert results == [201, 201, 201, 400]
        shelf[0].refresh_from_db()
        assert shelf[0].stock_quantity == 1
