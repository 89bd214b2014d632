"""Product DRF serializers (read-only resource)."""

from __future__ import annotations

from rest_framework import serializers

from modules.products.models import Product


class ProductSerializer(serializers.ModelSerializer):
    class Meta:
        model = Product
        fields = ["id", "sku", "name", "price", "stock_quantity", "created_at"]
        read_only_fields = fields
