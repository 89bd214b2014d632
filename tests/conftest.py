from decimal import Decimal

import pytest
from django.contrib.auth import get_user_model
from rest_framework.test import APIClient

from modules.customers.models import Customer
from modules.customers.repositories.django_repository import CustomerDjangoRepository
from modules.orders.repositories.django_repository import OrderDjangoRepository
from modules.orders.services import OrderService
from modules.products.models import Product
from modules.products.repositories.django_repository import ProductDjangoRepository

User = get_user_model()


@pytest.fixture(autouse=True)
def _use_db(db):
    """Automatically use the test database for all tests."""


@pytest.fixture()
def api_client():
    """DRF APIClient for testing API endpoints."""
    return APIClient()


@pytest.fixture()
def auth_client():
    """APIClient with a force-authenticated regular user."""
    client = APIClient()
    user = User.objects.create_user(username="orderuser", password="testpass123")
    client.force_authenticate(user=user)
    return client


@pytest.fixture()
def admin_client():
    """APIClient with a force-authenticated staff user (Admin role)."""
    client = APIClient()
    user = User.objects.create_user(
        username="adminuser", password="testpass123", is_staff=True
    )
    client.force_authenticate(user=user)
    return client


@pytest.fixture()
def api_client_with_correlation(api_client):
    """APIClient pre-configured with a known correlation ID header."""
    cid = "test-correlation-id-fixture"
    api_client.defaults["HTTP_X_REQUEST_ID"] = cid
    return api_client, cid


@pytest.fixture()
def customer():
    return Customer.objects.create(
        first_name="Grace",
        last_name="Hopper",
        email="grace@example.com",
    )


@pytest.fixture()
def product_a():
    return Product.objects.create(
        sku="PROD-A",
        name="Product A",
        price=Decimal("10.00"),
        stock_quantity=100,
    )


@pytest.fixture()
def product_b():
    return Product.objects.create(
        sku="PROD-B",
        name="Product B",
        price=Decimal("25.50"),
        stock_quantity=50,
    )


@pytest.fixture()
def low_stock_product():
    return Product.objects.create(
        sku="PROD-LOW",
        name="Low Stock Product",
        price=Decimal("15.00"),
        stock_quantity=2,
    )


@pytest.fixture()
def order_service():
    return OrderService(
        order_repository=OrderDjangoRepository(),
        customer_repository=CustomerDjangoRepository(),
        product_repository=ProductDjangoRepository(),
    )
