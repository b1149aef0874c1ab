"""Tests for pagination helpers."""

import pytest

from dailymed_mcp.api.pagination import (
    Page,
    page_from_metadata,
    paginate,
    validate_pagination_params,
)
from dailymed_mcp.errors import ValidationError


def test_paginate_last_partial_page():
    page = paginate(list(range(205)), page=3, page_size=100)

    assert page.data == [200, 201, 202, 203, 204]
    assert page.total_results == 205
    assert page.total_pages == 3
    assert page.has_next_page is False
    assert page.has_previous_page is True


def test_paginate_past_the_end_is_empty():
    page = paginate(list(range(10)), page=5, page_size=5)

    assert page.data == []
    assert page.total_pages == 2
    assert page.has_next_page is False


def test_paginate_empty():
    page = paginate([], page=1, page_size=25)

    assert page.total_pages == 0
    assert page.has_next_page is False
    assert page.has_previous_page is False


def test_page_from_metadata():
    page = page_from_metadata(["a", "b"], page=1, page_size=2, total_elements=5)

    assert page.total_results == 5
    assert page.total_pages == 3
    assert page.has_next_page is True


def test_page_from_metadata_without_total():
    page = page_from_metadata(["a", "b"], page=1, page_size=25, total_elements=None)

    assert page.total_results == 2
    assert page.total_pages == 1


def test_to_dict():
    page = Page(data=["x"], page=2, page_size=1, total_results=3, total_pages=3)

    assert page.to_dict() == {
        "data": ["x"],
        "pagination": {
            "page": 2,
            "pageSize": 1,
            "totalResults": 3,
            "totalPages": 3,
            "hasNextPage": True,
            "hasPreviousPage": True,
        },
    }


@pytest.mark.parametrize("page, page_size, max_page_size, message", [
    (0, 25, 200, "Page number must be 1 or greater"),
    (1, 0, 200, "Page size must be between 1 and 200"),
    (1, 201, 200, "Page size must be between 1 and 200"),
    (1, 101, 100, "Page size must be between 1 and 100"),
])
def test_validate_pagination_params_rejects(page, page_size, max_page_size, message):
    with pytest.raises(ValidationError, match=message):
        validate_pagination_params(page, page_size, max_page_size)


def test_validate_pagination_params_accepts_bounds():
    validate_pagination_params(1, 1)
    validate_pagination_params(1, 200)
    validate_pagination_params(7, 100, max_page_size=100)
