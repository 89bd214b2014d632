"""Unit tests for OrderService commands and single-order reads.

Covers:
- Order creation with atomic stock reservation.
- Customer / product existence checks.
- Price snapshot and total correctness.
- Complete / cancel transitions and stock release.
- Atomicity: a failing line rolls back every deduction.
"""

from __future__ import annotations

import uuid
from decimal import Decimal

import pytest

from modules.orders.constants import OrderStatus
from modules.orders.dtos import CreateOrderDTO, CreateOrderItemDTO
from modules.orders.exceptions import (
    CustomerNotFound,
    InsufficientStock,
    InvalidOrderRequest,
    InvalidOrderStatus,
    OrderNotFound,
    ProductNotFound,
)
from modules.orders.models import Order, OrderItem
from modules.products.models import Product

pytestmark = pytest.mark.unit


def order_dto(customer, *lines):
    return CreateOrderDTO(
        customer_id=customer.id,
        items=[CreateOrderItemDTO(product_id=p.id, quantity=q) for p, q in lines],
    )


# ---------------------------------------------------------------------------
# create_order
# ---------------------------------------------------------------------------


class TestCreateOrder:
    def test_creates_pending_order(self, order_service, customer, product_a, product_b):
        order_id = order_service.create_order(
            order_dto(customer, (product_a, 2), (product_b, 1))
        )

        order = Order.objects.get(id=order_id)
        assert order.status == OrderStatus.PENDING
        assert order.completed_at is None
        assert order.customer_id == customer.id
        assert order.total_amount == Decimal("45.50")
        assert order.items.count() == 2

    def test_deducts_stock(self, order_service, customer, product_a, product_b):
        order_service.create_order(order_dto(customer, (product_a, 2), (product_b, 5)))

        product_a.refresh_from_db()
        product_b.refresh_from_db()
        assert product_a.stock_quantity == 98
        assert product_b.stock_quantity == 45

    def test_unit_price_is_snapshot(self, order_service, customer, product_a):
        order_id = order_service.create_order(order_dto(customer, (product_a, 1)))

        product_a.price = Decimal("99.99")
        product_a.save()

        item = OrderItem.objects.get(order_id=order_id)
        assert item.unit_price == Decimal("10.00")
        assert Order.objects.get(id=order_id).total_amount == Decimal("10.00")

    def test_total_equals_sum_of_subtotals(self, order_service, customer, product_a, product_b):
        order_id = order_service.create_order(
            order_dto(customer, (product_a, 3), (product_b, 2))
        )
        order = Order.objects.get(id=order_id)
        subtotals = sum(i.quantity * i.unit_price for i in order.items.all())
        assert order.total_amount == subtotals == Decimal("81.00")

    def test_exact_stock_succeeds(self, order_service, customer, low_stock_product):
        order_service.create_order(order_dto(customer, (low_stock_product, 2)))
        low_stock_product.refresh_from_db()
        assert low_stock_product.stock_quantity == 0

    def test_duplicate_lines_deduct_separately(self, order_service, customer, product_a):
        order_id = order_service.create_order(
            order_dto(customer, (product_a, 3), (product_a, 4))
        )
        product_a.refresh_from_db()
        assert product_a.stock_quantity == 93
        assert Order.objects.get(id=order_id).items.count() == 2

    def test_duplicate_lines_exceeding_stock_fail(self, order_service, customer, low_stock_product):
        with pytest.raises(InsufficientStock):
            order_service.create_order(
                order_dto(customer, (low_stock_product, 1), (low_stock_product, 2))
            )
        low_stock_product.refresh_from_db()
        assert low_stock_product.stock_quantity == 2

    def test_returns_uuid(self, order_service, customer, product_a):
        assert isinstance(order_service.create_order(order_dto(customer, (product_a, 1))), uuid.UUID)


class TestCreateOrderFailures:
    def test_customer_not_found(self, order_service, product_a):
        dto = CreateOrderDTO(
            customer_id=uuid.uuid4(),
            items=[CreateOrderItemDTO(product_id=product_a.id, quantity=1)],
        )
        with pytest.raises(CustomerNotFound):
            order_service.create_order(dto)
        product_a.refresh_from_db()
        assert product_a.stock_quantity == 100
        assert Order.objects.count() == 0

    def test_product_not_found(self, order_service, customer):
        dto = CreateOrderDTO(
            customer_id=customer.id,
            items=[CreateOrderItemDTO(product_id=uuid.uuid4(), quantity=1)],
        )
        with pytest.raises(ProductNotFound):
            order_service.create_order(dto)
        assert Order.objects.count() == 0

    def test_deleted_product_not_found(self, order_service, customer, product_a):
        product_a.delete()
        with pytest.raises(ProductNotFound):
            order_service.create_order(order_dto(customer, (product_a, 1)))

    def test_insufficient_stock_names_product(self, order_service, customer, low_stock_product):
        with pytest.raises(InsufficientStock) as exc_info:
            order_service.create_order(order_dto(customer, (low_stock_product, 3)))
        assert "Low Stock Product" in exc_info.value.detail
        assert "PROD-LOW" in exc_info.value.detail
        low_stock_product.refresh_from_db()
        assert low_stock_product.stock_quantity == 2

    def test_empty_items_rejected(self, order_service, customer):
        dto = CreateOrderDTO.model_construct(customer_id=customer.id, items=[])
        with pytest.raises(InvalidOrderRequest):
            order_service.create_order(dto)

    def test_zero_quantity_rejected(self, order_service, customer, product_a):
        item = CreateOrderItemDTO.model_construct(product_id=product_a.id, quantity=0)
        dto = CreateOrderDTO.model_construct(customer_id=customer.id, items=[item])
        with pytest.raises(InvalidOrderRequest):
            order_service.create_order(dto)
        product_a.refresh_from_db()
        assert product_a.stock_quantity == 100

    def test_total_above_column_maximum_rejected(self, order_service, customer):
        pricey = Product.objects.create(
            sku="PROD-MAX", name="Pricey", price=Decimal("99999999.99"), stock_quantity=100000
        )
        with pytest.raises(InvalidOrderRequest, match="maximum"):
            order_service.create_order(order_dto(customer, (pricey, 50000)))
        pricey.refresh_from_db()
        assert pricey.stock_quantity == 100000
        assert Order.objects.count() == 0

    def test_running_total_above_maximum_rolls_back(self, order_service, customer, product_a):
        pricey = Product.objects.create(
            sku="PROD-MAX", name="Pricey", price=Decimal("99999999.99"), stock_quantity=200
        )
        # 100 units alone fit; the earlier line pushes the total over
        with pytest.raises(InvalidOrderRequest):
            order_service.create_order(order_dto(customer, (product_a, 1), (pricey, 100)))
        product_a.refresh_from_db()
        assert product_a.stock_quantity == 100
        assert Order.objects.count() == 0

    def test_total_near_maximum_is_readable(self, order_service, customer):
        pricey = Product.objects.create(
            sku="PROD-MAX", name="Pricey", price=Decimal("99999999.99"), stock_quantity=200
        )
        order_id = order_service.create_order(order_dto(customer, (pricey, 100)))
        assert order_service.get_order(order_id).total_amount == Decimal("9999999999.00")


class TestCreateOrderAtomicity:
    def test_later_line_failure_rolls_back_earlier_deductions(
        self, order_service, customer, product_a, low_stock_product
    ):
        with pytest.raises(InsufficientStock):
            order_service.create_order(
                order_dto(customer, (product_a, 5), (low_stock_product, 10))
            )

        product_a.refresh_from_db()
        low_stock_product.refresh_from_db()
        assert product_a.stock_quantity == 100
        assert low_stock_product.stock_quantity == 2
        assert Order.objects.count() == 0
        assert OrderItem.objects.count() == 0

    def test_missing_product_after_valid_lines_rolls_back(
        self, order_service, customer, product_a, product_b
    ):
        dto = CreateOrderDTO(
            customer_id=customer.id,
            items=[
                CreateOrderItemDTO(product_id=product_a.id, quantity=1),
                CreateOrderItemDTO(product_id=product_b.id, quantity=1),
                CreateOrderItemDTO(product_id=uuid.uuid4(), quantity=1),
            ],
        )
        with pytest.raises(ProductNotFound):
            order_service.create_order(dto)

        product_a.refresh_from_db()
        product_b.refresh_from_db()
        assert (product_a.stock_quantity, product_b.stock_quantity) == (100, 50)

    def test_lost_race_on_guarded_update(self, order_service, customer, product_a, monkeypatch):
        monkeypatch.setattr(
            order_service._product_repo, "deduct_stock", lambda id, quantity: False
        )
        with pytest.raises(InsufficientStock):
            order_service.create_order(order_dto(customer, (product_a, 1)))
        assert Order.objects.count() == 0


# ---------------------------------------------------------------------------
# complete_order / cancel_order
# ---------------------------------------------------------------------------


@pytest.fixture()
def pending_order_id(order_service, customer, product_a, product_b):
    return order_service.create_order(order_dto(customer, (product_a, 2), (product_b, 3)))


class TestCompleteOrder:
    def test_completes_and_stamps_completed_at(self, order_service, pending_order_id):
        order_service.complete_order(pending_order_id)
        order = Order.objects.get(id=pending_order_id)
        assert order.status == OrderStatus.COMPLETED
        assert order.completed_at is not None

    def test_keeps_stock_deducted(self, order_service, pending_order_id, product_a):
        order_service.complete_order(pending_order_id)
        product_a.refresh_from_db()
        assert product_a.stock_quantity == 98

    def test_not_found(self, order_service):
        with pytest.raises(OrderNotFound):
            order_service.complete_order(uuid.uuid4())

    def test_malformed_id_not_found(self, order_service):
        with pytest.raises(OrderNotFound):
            order_service.complete_order("nope")

    def test_complete_twice_fails(self, order_service, pending_order_id):
        order_service.complete_order(pending_order_id)
        with pytest.raises(InvalidOrderStatus, match="Only pending orders can be completed."):
            order_service.complete_order(pending_order_id)

    def test_cancelled_cannot_complete(self, order_service, pending_order_id):
        order_service.cancel_order(pending_order_id)
        with pytest.raises(InvalidOrderStatus):
            order_service.complete_order(pending_order_id)
        order = Order.objects.get(id=pending_order_id)
        assert order.status == OrderStatus.CANCELLED
        assert order.completed_at is None


class TestCancelOrder:
    def test_cancel_restores_stock(self, order_service, pending_order_id, product_a, product_b):
        order_service.cancel_order(pending_order_id)

        order = Order.objects.get(id=pending_order_id)
        product_a.refresh_from_db()
        product_b.refresh_from_db()
        assert order.status == OrderStatus.CANCELLED
        assert order.completed_at is None
        assert product_a.stock_quantity == 100
        assert product_b.stock_quantity == 50

    def test_cancel_twice_fails_without_double_restore(
        self, order_service, pending_order_id, product_a
    ):
        order_service.cancel_order(pending_order_id)
        with pytest.raises(InvalidOrderStatus, match="Only pending orders can be cancelled."):
            order_service.cancel_order(pending_order_id)
        product_a.refresh_from_db()
        assert product_a.stock_quantity == 100

    def test_completed_cannot_cancel(self, order_service, pending_order_id, product_a):
        order_service.complete_order(pending_order_id)
        with pytest.raises(InvalidOrderStatus):
            order_service.cancel_order(pending_order_id)
        product_a.refresh_from_db()
        assert product_a.stock_quantity == 98

    def test_deleted_product_is_skipped(
        self, order_service, pending_order_id, product_a, product_b
    ):
        product_b.delete()
        order_service.cancel_order(pending_order_id)

        product_a.refresh_from_db()
        product_b.refresh_from_db()
        assert product_a.stock_quantity == 100
        assert product_b.stock_quantity == 47
        assert Order.objects.get(id=pending_order_id).status == OrderStatus.CANCELLED

    def test_duplicate_lines_restored_in_full(self, order_service, customer, product_a):
        order_id = order_service.create_order(
            order_dto(customer, (product_a, 3), (product_a, 4))
        )
        order_service.cancel_order(order_id)
        product_a.refresh_from_db()
        assert product_a.stock_quantity == 100

    def test_not_found(self, order_service):
        with pytest.raises(OrderNotFound):
            order_service.cancel_order(uuid.uuid4())


class TestStockConservation:
    def test_stock_accounts_for_every_live_order(
        self, order_service, customer, product_a
    ):
        ids = [order_service.create_order(order_dto(customer, (product_a, q))) for q in (1, 2, 3, 4)]
        order_service.complete_order(ids[0])
        order_service.cancel_order(ids[1])

        product_a.refresh_from_db()
        reserved = sum(
            i.quantity
            for i in OrderItem.objects.filter(product=product_a).exclude(
                order__status=OrderStatus.CANCELLED
            )
        )
        assert product_a.stock_quantity + reserved == 100


class TestGetOrder:
    def test_get_order(self, order_service, pending_order_id):
        order = order_service.get_order(pending_order_id)
        assert order.id == pending_order_id
        assert len(order.items.all()) == 2

    def test_not_found(self, order_service):
        with pytest.raises(OrderNotFound):
            order_service.get_order(uuid.uuid4())

    def test_malformed_id(self, order_service):
        with pytest.raises(OrderNotFound):
            order_service.get_order("definitely-not-a-uuid")
