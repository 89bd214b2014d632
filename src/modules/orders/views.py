"""Order API views.

Exposes the ``OrderService`` via HTTP using a DRF ViewSet.  Domain
exceptions are not caught here; the standardized exception handler maps
them to HTTP responses.
"""

from __future__ import annotations

from drf_spectacular.utils import OpenApiParameter, extend_schema
from rest_framework import status
from rest_framework.decorators import action
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.throttling import BaseThrottle
from rest_framework.viewsets import ViewSet

from modules.customers.repositories.django_repository import CustomerDjangoRepository
from modules.orders.dtos import parse_create_order
from modules.orders.repositories.django_repository import OrderDjangoRepository
from modules.orders.serializers import (
    CreateOrderSerializer,
    GenerateOrdersSerializer,
    OrderPageQuerySerializer,
    OrderSerializer,
    OrderSummarySerializer,
)
from modules.orders.services import OrderService
from modules.products.repositories.django_repository import ProductDjangoRepository


class OrderViewSet(ViewSet):
    """ViewSet for Order operations.

    Uses ``OrderService`` with injected repositories (DIP).
    Does **not** extend ``ModelViewSet``; all ORM access goes through
    the service/repository layer.
    """

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self._service = OrderService(
            order_repository=OrderDjangoRepository(),
            customer_repository=CustomerDjangoRepository(),
            product_repository=ProductDjangoRepository(),
        )

    def get_throttles(self) -> list[BaseThrottle]:
        """Throttle scope per action."""
        throttle_scope: str | None
        if self.action in {"create", "generate"}:
            throttle_scope = "order_creation"
        elif self.action in {"list", "retrieve", "summary"}:
            throttle_scope = "order_listing"
        else:
            throttle_scope = None
        self.throttle_scope = throttle_scope
        return super().get_throttles()

    # ------------------------------------------------------------------
    # Create
    # ------------------------------------------------------------------

    @extend_schema(request=CreateOrderSerializer)
    def create(self, request: Request) -> Response:
        """POST /api/v1/orders/"""
        serializer = CreateOrderSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        dto = parse_create_order(serializer.validated_data)
        order_id = self._service.create_order(dto)
        return Response({"order_id": str(order_id)}, status=status.HTTP_201_CREATED)

    # ------------------------------------------------------------------
    # List / Retrieve
    # ------------------------------------------------------------------

    @extend_schema(
        parameters=[
            OpenApiParameter("page_number", int),
            OpenApiParameter("page_size", int),
            OpenApiParameter("status", str, enum=["PENDING", "COMPLETED", "CANCELLED"]),
            OpenApiParameter("sort_by", str, enum=["created_at", "total_amount", "status"]),
            OpenApiParameter("sort_direction", str, enum=["asc", "desc"]),
        ]
    )
    def list(self, request: Request) -> Response:
        """GET /api/v1/orders/"""
        query = OrderPageQuerySerializer(data=request.query_params)
        query.is_valid(raise_exception=True)
        page = self._service.get_paged(**query.validated_data)
        return Response(page.to_response())

    def retrieve(self, request: Request, pk: str | None = None) -> Response:
        """GET /api/v1/orders/{pk}/"""
        order = self._service.get_order(pk)
        return Response(OrderSerializer(order).data)

    # ------------------------------------------------------------------
    # Status transitions
    # ------------------------------------------------------------------

    @extend_schema(request=None, responses={204: None})
    @action(detail=True, methods=["post"])
    def complete(self, request: Request, pk: str | None = None) -> Response:
        """POST /api/v1/orders/{pk}/complete/"""
        self._service.complete_order(pk)
        return Response(status=status.HTTP_204_NO_CONTENT)

    @extend_schema(request=None, responses={204: None})
    @action(detail=True, methods=["post"])
    def cancel(self, request: Request, pk: str | None = None) -> Response:
        """POST /api/v1/orders/{pk}/cancel/

        Cancels a pending order and releases its reserved stock.
        """
        self._service.cancel_order(pk)
        return Response(status=status.HTTP_204_NO_CONTENT)

    # ------------------------------------------------------------------
    # Reporting / bulk generation
    # ------------------------------------------------------------------

    @extend_schema(responses=OrderSummarySerializer)
    @action(detail=False, methods=["get"])
    def summary(self, request: Request) -> Response:
        """GET /api/v1/orders/summary/"""
        summary = self._service.get_summary()
        return Response(OrderSummarySerializer(summary.model_dump()).data)

    @extend_schema(request=GenerateOrdersSerializer)
    @action(detail=False, methods=["post"])
    def generate(self, request: Request) -> Response:
        """POST /api/v1/orders/generate/"""
        serializer = GenerateOrdersSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        report = self._service.generate_random_orders(
            serializer.validated_data["count"]
        )
        return Response(report.to_response())
