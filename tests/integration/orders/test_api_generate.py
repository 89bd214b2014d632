"""POST /api/v1/orders/generate/ (Admin only)"""

import pytest
from django.test import override_settings

from modules.orders.models import Order

pytestmark = pytest.mark.integration

URL = "/api/v1/orders/generate/"


class TestGenerateAPI:
    def test_admin_can_generate(self, admin_client, customer, product_a, product_b):
        response = admin_client.post(URL, {"count": 5}, format="json")
        assert response.status_code == 200
        body = response.json()
        assert body["requested_count"] == 5
        assert body["created_count"] == 5
        assert body["failed_count"] == 0
        assert Order.objects.count() == body["created_count"]

    def test_user_role_can_generate(self, auth_client, customer, product_a):
        response = auth_client.post(URL, {"count": 2}, format="json")
        assert response.status_code == 200
        assert response.json()["created_count"] == 2

    def test_anonymous_unauthorized(self, api_client):
        assert api_client.post(URL, {"count": 1}, format="json").status_code == 401

    @pytest.mark.parametrize("count", [0, -1, 1001, "many"])
    def test_count_bounds(self, admin_client, count):
        response = admin_client.post(URL, {"count": count}, format="json")
        assert response.status_code == 400
        body = response.json()
        assert body["type"] == "validation_error"
        assert body["errors"][0]["attr"] == "count"

    @override_settings(ORDER_GENERATION_MAX_COUNT=3)
    def test_max_count_is_configurable(self, admin_client):
        response = admin_client.post(URL, {"count": 4}, format="json")
        assert response.status_code == 400

    def test_empty_catalog_creates_nothing(self, admin_client):
        body = admin_client.post(URL, {"count": 3}, format="json").json()
        assert body == {"requested_count": 3, "created_count": 0, "failed_count": 0}
