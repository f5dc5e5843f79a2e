"""Pagination — offset windowing arithmetic for paginated search.

Invariants:
    - page < 1 is clamped to 1 (never produces a negative skip)
    - take must be a positive integer; None falls back to the default page size
    - page_count is computed from the unfiltered total, current_page from skip

Design Decisions:
    - Pure functions: SearchEngine does the IO, this module does the numbers
    - current_page recomputed from skip rather than echoed, so the reported
      page always describes the window actually fetched
"""

import math

from storefront.core.domain_types import DEFAULT_PAGE_SIZE
from storefront.core.errors import InvalidPaginationError


def resolve_window(
    page: int | None, take: int | None, default_take: int = DEFAULT_PAGE_SIZE,
) -> tuple[int, int]:
    """Return (skip, take) for a 1-based page."""
    if take is None:
        take = default_take
    if isinstance(take, bool) or not isinstance(take, int) or take < 1:
        raise InvalidPaginationError(take)
    page = max(page or 1, 1)
    return (page - 1) * take, take


def page_count(total: int, take: int) -> int:
    return math.ceil(total / take) if take else 0


def current_page(skip: int, take: int) -> int:
    return skip // take + 1
