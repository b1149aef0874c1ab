"""
Pagination helpers shared by every search.

Two modes exist:
- server-side: DailyMed pages the results and reports metadata.total_elements
- manual: the full result set is collected locally and sliced (drug-name
  fan-out search)
"""

import math
from dataclasses import dataclass, field
from typing import Any, Generic, Sequence, TypeVar

from dailymed_mcp.errors import ValidationError

T = TypeVar("T")

DEFAULT_MAX_PAGE_SIZE = 200


@dataclass
class Page(Generic[T]):
    """One page of results plus the numbers needed to navigate."""
    data: list[T] = field(default_factory=list)
    page: int = 1
    page_size: int = 25
    total_results: int = 0
    total_pages: int = 0

    @property
    def has_next_page(self) -> bool:
        return self.page < self.total_pages

    @property
    def has_previous_page(self) -> bool:
        return self.page > 1

    def to_dict(self) -> dict:
        return {
            "data": [_serialize(item) for item in self.data],
            "pagination": {
                "page": self.page,
                "pageSize": self.page_size,
                "totalResults": self.total_results,
                "totalPages": self.total_pages,
                "hasNextPage": self.has_next_page,
                "hasPreviousPage": self.has_previous_page,
            },
        }


def _serialize(item: Any) -> Any:
    to_dict = getattr(item, "to_dict", None)
    return to_dict() if callable(to_dict) else item


def validate_pagination_params(
    page: int, page_size: int, max_page_size: int = DEFAULT_MAX_PAGE_SIZE
) -> None:
    """
    Check page and page size before any request is made.

    Raises:
        ValidationError: If page < 1 or page_size is outside 1..max_page_size
    """
    if page < 1:
        raise ValidationError("Page number must be 1 or greater")
    if page_size < 1 or page_size > max_page_size:
        raise ValidationError(f"Page size must be between 1 and {max_page_size}")


def paginate(items: Sequence[T], page: int, page_size: int) -> Page[T]:
    """
    Slice a locally collected result set.

    Example:
        >>> result = paginate(list(range(205)), page=3, page_size=100)
        >>> len(result.data), result.total_pages, result.has_next_page
        (5, 3, False)
    """
    start = (page - 1) * page_size
    return Page(
        data=list(items[start:start + page_size]),
        page=page,
        page_size=page_size,
        total_results=len(items),
        total_pages=math.ceil(len(items) / page_size),
    )


def page_from_metadata(
    items: list[T], page: int, page_size: int, total_elements: int | None
) -> Page[T]:
    """Wrap one server-side page; falls back to the item count without metadata."""
    total_results = total_elements or len(items)
    return Page(
        data=items,
        page=page,
        page_size=page_size,
        total_results=total_results,
        total_pages=math.ceil(total_results / page_size),
    )
