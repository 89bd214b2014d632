"""Order DRF serializers for API input/output.

The serializer operates at the Interface layer (API Views) and checks
only the shape of the payload.  Business rules (nil customer, empty
order, quantity >= 1) live in the Pydantic DTOs from ``dtos.py`` so every
caller of the service gets the same ``InvalidOrderRequest``.
"""

from __future__ import annotations

from django.conf import settings
from rest_framework import serializers

from modules.core.serializers import PageQuerySerializer
from modules.orders.models import Order, OrderItem

# ---------------------------------------------------------------------------
# Input Serializers
# ---------------------------------------------------------------------------


class CreateOrderItemSerializer(serializers.Serializer):
    product_id = serializers.UUIDField()
    quantity = serializers.IntegerField()


class CreateOrderSerializer(serializers.Serializer):
    """Validates the order creation request payload."""

    customer_id = serializers.UUIDField()
    items = CreateOrderItemSerializer(many=True, allow_empty=True)


class OrderPageQuerySerializer(PageQuerySerializer):
    """Listing parameters for orders: newest first unless asked otherwise."""

    status = serializers.CharField(required=False, allow_blank=True, default=None)
    sort_direction = serializers.CharField(
        required=False, allow_blank=True, default="desc"
    )


class GenerateOrdersSerializer(serializers.Serializer):
    count = serializers.IntegerField(min_value=1)

    def validate_count(self, value: int) -> int:
        maximum = settings.ORDER_GENERATION_MAX_COUNT
        if value > maximum:
            raise serializers.ValidationError(
                f"Ensure this value is less than or equal to {maximum}."
            )
        return value


# ---------------------------------------------------------------------------
# Output Serializers (Read)
# ---------------------------------------------------------------------------


class OrderItemSerializer(serializers.ModelSerializer):
    """Read serializer for order items with product snapshot."""

    product_name = serializers.CharField(source="product.name", read_only=True)
    product_sku = serializers.CharField(source="product.sku", read_only=True)

    class Meta:
        model = OrderItem
        fields = [
            "id",
            "product_id",
            "product_name",
            "product_sku",
            "quantity",
            "unit_price",
            "subtotal",
        ]
        read_only_fields = fields


class OrderSerializer(serializers.ModelSerializer):
    """Read serializer for orders with nested items."""

    customer_name = serializers.CharField(source="customer.full_name", read_only=True)
    items = OrderItemSerializer(many=True, read_only=True)

    class Meta:
        model = Order
        fields = [
            "id",
            "customer_id",
            "customer_name",
            "status",
            "total_amount",
            "created_at",
            "completed_at",
            "items",
        ]
        read_only_fields = fields


class OrderSummarySerializer(serializers.Serializer):
    total_orders = serializers.IntegerField()
    pending_orders = serializers.IntegerField()
    completed_orders = serializers.IntegerField()
    cancelled_orders = serializers.IntegerField()
    total_revenue = serializers.DecimalField(max_digits=14, decimal_places=2)
    pending_revenue = serializers.DecimalField(max_digits=14, decimal_places=2)
