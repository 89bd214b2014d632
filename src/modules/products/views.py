"""Product API views.

Read-only: products are created by import/seed tooling and their stock
changes only through orders.
"""

from __future__ import annotations

from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.viewsets import ViewSet

from modules.core.serializers import PageQuerySerializer
from modules.products.repositories.django_repository import ProductDjangoRepository
from modules.products.serializers import ProductSerializer
from modules.products.services import ProductService


class ProductViewSet(ViewSet):
    """ViewSet for Product read operations."""

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self._service = ProductService(repository=ProductDjangoRepository())

    def list(self, request: Request) -> Response:
        """GET /api/v1/products/"""
        query = PageQuerySerializer(data=request.query_params)
        query.is_valid(raise_exception=True)
        page = self._service.get_paged(**query.validated_data)
        return Response(page.to_response())

    def retrieve(self, request: Request, pk: str | None = None) -> Response:
        """GET /api/v1/products/{pk}/"""
        product = self._service.get_product(pk)
        return Response(ProductSerializer(product).data)
