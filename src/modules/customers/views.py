"""Customer API views.

Read-only: customers are created by import/seed tooling.  Domain
exceptions propagate to the standardized exception handler.
"""

from __future__ import annotations

from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.viewsets import ViewSet

from modules.core.serializers import PageQuerySerializer
from modules.customers.repositories.django_repository import CustomerDjangoRepository
from modules.customers.serializers import CustomerSerializer
from modules.customers.services import CustomerService


class CustomerViewSet(ViewSet):
    """ViewSet for Customer read operations."""

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self._service = CustomerService(repository=CustomerDjangoRepository())

    def list(self, request: Request) -> Response:
        """GET /api/v1/customers/"""
        query = PageQuerySerializer(data=request.query_params)
        query.is_valid(raise_exception=True)
        page = self._service.get_paged(**query.validated_data)
        return Response(page.to_response())

    def retrieve(self, request: Request, pk: str | None = None) -> Response:
        """GET /api/v1/customers/{pk}/"""
        customer = self._service.get_customer(pk)
        return Response(CustomerSerializer(customer).data)
