"""Page-number pagination shared by every listing service.

Listings are paged in the service layer (not by a DRF paginator) so the
normalisation rules hold for any caller: ``page_number`` below 1 becomes 1,
``page_size`` outside ``(0, MAX_PAGE_SIZE]`` becomes ``DEFAULT_PAGE_SIZE``.
Page numbers above ``MAX_PAGE_NUMBER`` are capped, which yields an empty page.
"""

from __future__ import annotations

import math
from typing import Generic, List, Tuple, TypeVar

from pydantic import BaseModel, ConfigDict

DEFAULT_PAGE_SIZE = 10
MAX_PAGE_SIZE = 50
# Keeps the computed OFFSET inside a 64-bit database integer
MAX_PAGE_NUMBER = 2**31 - 1

ASCENDING = "asc"
DESCENDING = "desc"

T = TypeVar("T")


def normalize_page(page_number: int, page_size: int) -> Tuple[int, int]:
    """Clamp the requested page to valid values."""
    if page_number is None or page_number <= 0:
        page_number = 1
    elif page_number > MAX_PAGE_NUMBER:
        page_number = MAX_PAGE_NUMBER
    if page_size is None or page_size <= 0 or page_size > MAX_PAGE_SIZE:
        page_size = DEFAULT_PAGE_SIZE
    return page_number, page_size


def is_descending(sort_direction: str | None) -> bool:
    """Only an explicit ``desc`` sorts descending; anything else is ascending."""
    return (sort_direction or "").strip().lower() == DESCENDING


def resolve_sort_key(sort_by: str | None, fields: dict[str, str], default: str) -> str:
    """Map a caller-supplied sort key to a model field.

    Keys are matched case-insensitively with underscores ignored, so
    ``totalAmount``, ``total_amount`` and ``TOTALAMOUNT`` are equivalent.
    Unknown keys fall back to ``default``.
    """
    if not sort_by:
        return default
    normalized = sort_by.replace("_", "").strip().lower()
    for key, field in fields.items():
        if key.replace("_", "").lower() == normalized:
            return field
    return default


class PagedResultDTO(BaseModel, Generic[T]):
    """Immutable page of results plus the metadata needed to navigate."""

    model_config = ConfigDict(frozen=True)

    items: List[T]
    total_count: int
    page_number: int
    page_size: int

    @property
    def total_pages(self) -> int:
        return math.ceil(self.total_count / self.page_size) if self.page_size else 0

    def to_response(self) -> dict:
        """JSON-ready payload for the API layer."""
        data = self.model_dump(mode="json")
        data["total_pages"] = self.total_pages
        return data
