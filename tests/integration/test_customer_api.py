"""GET /api/v1/customers/ and /api/v1/customers/{id}/"""

import uuid

import pytest

from modules.customers.models import Customer

pytestmark = pytest.mark.integration

URL = "/api/v1/customers/"


@pytest.fixture()
def customers():
    return [
        Customer.objects.create(
            first_name=f"First{i:02d}", last_name=f"Last{i:02d}", email=f"c{i:02d}@example.com"
        )
        for i in range(12)
    ]


class TestCustomerAPI:
    def test_list_default_page(self, auth_client, customers):
        body = auth_client.get(URL).json()
        assert body["total_count"] == 12
        assert body["page_size"] == 10
        assert body["total_pages"] == 2
        assert body["items"][0]["last_name"] == "Last00"

    def test_list_sorted_desc(self, auth_client, customers):
        body = auth_client.get(URL, {"sort_by": "email", "sort_direction": "desc"}).json()
        assert body["items"][0]["email"] == "c11@example.com"

    def test_list_normalises_paging(self, auth_client, customers):
        body = auth_client.get(URL, {"page_number": 0, "page_size": 0}).json()
        assert (body["page_number"], body["page_size"]) == (1, 10)

    def test_list_huge_page_number(self, auth_client, customers):
        response = auth_client.get(URL, {"page_number": 10**19, "page_size": 10**19})
        assert response.status_code == 200
        assert response.json()["items"] == []

    def test_retrieve(self, auth_client, customer):
        response = auth_client.get(f"{URL}{customer.id}/")
        assert response.status_code == 200
        assert response.json()["email"] == "grace@example.com"

    def test_retrieve_not_found(self, auth_client):
        response = auth_client.get(f"{URL}{uuid.uuid4()}/")
        assert response.status_code == 404
        assert response.json()["errors"][0]["code"] == "customer_not_found"

    def test_read_only(self, auth_client):
        response = auth_client.post(URL, {"first_name": "X"}, format="json")
        assert response.status_code == 405
