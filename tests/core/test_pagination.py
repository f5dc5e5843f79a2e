"""Pagination — verifies offset windowing arithmetic.

Tests:
    - skip = (page - 1) * take; page < 1 clamped to 1
    - take defaults, and non-positive take is rejected
    - page_count ceil, current_page recomputed from skip
"""

import pytest

from storefront.core.errors import InvalidPaginationError
from storefront.core.pagination import current_page, page_count, resolve_window


@pytest.mark.parametrize("page,take,expected", [
    (1, 10, (0, 10)),
    (3, 10, (20, 10)),
    (2, 7, (7, 7)),
])
def test_resolve_window(page, take, expected):
    assert resolve_window(page, take) == expected


@pytest.mark.parametrize("page", [0, -4, None])
def test_page_below_one_is_clamped(page):
    assert resolve_window(page, 5) == (0, 5)


def test_take_defaults_when_missing():
    assert resolve_window(2, None) == (10, 10)
    assert resolve_window(2, None, default_take=25) == (25, 25)


@pytest.mark.parametrize("take", [0, -1, True, 2.5])
def test_invalid_take_rejected(take):
    with pytest.raises(InvalidPaginationError):
        resolve_window(1, take)


def test_page_count_rounds_up():
    assert page_count(0, 10) == 0
    assert page_count(10, 10) == 1
    assert page_count(11, 10) == 2


def test_current_page_from_skip():
    assert current_page(0, 10) == 1
    assert current_page(20, 10) == 3
