"""GET /api/v1/products/ and /api/v1/products/{id}/"""

import uuid

import pytest

pytestmark = pytest.mark.integration

URL = "/api/v1/products/"


class TestProductAPI:
    def test_list_sorted_by_name(self, auth_client, product_a, product_b, low_stock_product):
        body = auth_client.get(URL).json()
        assert [p["sku"] for p in body["items"]] == ["PROD-LOW", "PROD-A", "PROD-B"]

    def test_list_sorted_by_stock_desc(self, auth_client, product_a, product_b, low_stock_product):
        body = auth_client.get(
            URL, {"sort_by": "stock_quantity", "sort_direction": "desc"}
        ).json()
        assert [p["stock_quantity"] for p in body["items"]] == [100, 50, 2]

    def test_list_hides_deleted(self, auth_client, product_a, product_b):
        product_b.delete()
        body = auth_client.get(URL).json()
        assert body["total_count"] == 1

    def test_retrieve(self, auth_client, product_a):
        response = auth_client.get(f"{URL}{product_a.id}/")
        assert response.status_code == 200
        body = response.json()
        assert body["sku"] == "PROD-A"
        assert body["price"] == "10.00"
        assert body["stock_quantity"] == 100

    def test_retrieve_deleted_is_404(self, auth_client, product_a):
        product_a.delete()
        response = auth_client.get(f"{URL}{product_a.id}/")
        assert response.status_code == 404
        assert response.json()["errors"][0]["code"] == "product_not_found"

    def test_retrieve_unknown_is_404(self, auth_client):
        assert auth_client.get(f"{URL}{uuid.uuid4()}/").status_code == 404
