"""Shared DRF serializers for listing query parameters."""

from __future__ import annotations

from rest_framework import serializers

from modules.core.pagination import ASCENDING, DEFAULT_PAGE_SIZE


class PageQuerySerializer(serializers.Serializer):
    """Validates paging/sorting query parameters.

    Only the types are checked here; out-of-range values are normalised by
    the service layer rather than rejected.
    """

    page_number = serializers.IntegerField(required=False, default=1)
    page_size = serializers.IntegerField(required=False, default=DEFAULT_PAGE_SIZE)
    sort_by = serializers.CharField(required=False, allow_blank=True, default=None)
    sort_direction = serializers.CharField(
        required=False, allow_blank=True, default=ASCENDING
    )
