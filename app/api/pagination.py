"""
Pagination helpers shared by list endpoints.

`page` and `size` are parsed leniently: anything that is not a positive
integer falls back to the default, and `size` is clamped to MAX_PAGE_SIZE.
A `page` whose offset would not fit in a signed 64-bit integer is treated as
invalid too. `search` is passed through as given.
"""

import math
from dataclasses import dataclass
from typing import Any, Optional, Sequence

from fastapi import Query

from app.schemas.common import PageMetadata

DEFAULT_PAGE = 1
DEFAULT_PAGE_SIZE = 50
MAX_PAGE_SIZE = 1000
# Offsets are bound as signed 64-bit integers by the database drivers
MAX_OFFSET = 2 ** 63 - 1


@dataclass(frozen=True)
class PaginationParams:
    page: int = DEFAULT_PAGE
    size: int = DEFAULT_PAGE_SIZE
    search: str = ""

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.size

    @property
    def limit(self) -> int:
        return self.size


def _positive_int(raw: Optional[str]) -> Optional[int]:
    if raw is None:
        return None
    try:
        value = int(raw)
    except (TypeError, ValueError):
        return None
    return value if value > 0 else None


def parse_pagination(
    page: Optional[str] = None,
    size: Optional[str] = None,
    search: Optional[str] = None,
) -> PaginationParams:
    parsed_size = min(_positive_int(size) or DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE)
    parsed_page = _positive_int(page) or DEFAULT_PAGE
    if (parsed_page - 1) * parsed_size > MAX_OFFSET:
        parsed_page = DEFAULT_PAGE
    return PaginationParams(page=parsed_page, size=parsed_size, search=search or "")


def get_pagination(
    page: Optional[str] = Query(None, description="Page number (1-based)"),
    size: Optional[str] = Query(None, description=f"Items per page (max {MAX_PAGE_SIZE})"),
    search: Optional[str] = Query(None, description="Partial match filter"),
) -> PaginationParams:
    """FastAPI dependency wrapping parse_pagination."""
    return parse_pagination(page, size, search)


def build_page(items: Sequence[Any], params: PaginationParams, total: int) -> dict:
    """Build the `{"data": ..., "metadata": ...}` envelope for a page of results."""
    return {
        "data": list(items),
        "metadata": PageMetadata(
            current_page=params.page,
            page_size=params.size,
            total_count=total,
            total_pages=math.ceil(total / params.size) if params.size else 0,
        ),
    }
