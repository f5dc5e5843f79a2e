"""Search Engine — exact-match and fuzzy paginated search on top of EntityRepository.

Invariants:
    - Non-empty predicate: OR-combined substring match across every supplied field
    - Empty predicate: matches everything
    - skip = (page - 1) * take, page clamped to >= 1
    - page_count derives from the unfiltered total, current_page from skip
    - Offset windowing, no snapshot isolation: concurrent writes between page
      fetches can duplicate or skip rows

Design Decisions:
    - Non-text columns cast to text before the substring test, so numeric fields
      stay searchable; uuid columns match the whole identifier instead
    - Exact search is a pass-through to the repository
    - Pages default to (created_at, id) ordering so windows are stable while data is unchanged
"""

from dataclasses import dataclass
from typing import Any, Generic, Iterable
from uuid import UUID

from sqlalchemy import String, Uuid, cast, or_

from storefront.core.errors import ValidationError
from storefront.core.pagination import current_page, page_count, resolve_window
from storefront.services.entity_repository import (
    STABLE_ORDER, EntityRepository, ModelT, OrderBy, Predicate,
)


@dataclass
class Page(Generic[ModelT]):
    """One window of a paginated search."""
    records: list[ModelT]
    matching_count: int
    total_count: int
    page_count: int
    current_page: int


class SearchEngine(Generic[ModelT]):
    """Paginated fuzzy search for one entity."""

    def __init__(self, repository: EntityRepository[ModelT], default_take: int = 10):
        self.repository = repository
        self.default_take = default_take

    def fuzzy_clauses(self, predicate: Predicate | None) -> list:
        if not predicate:
            return []
        return [or_(*(
            self._fuzzy_match(self.repository.column(field_name), value)
            for field_name, value in predicate.items()
        ))]

    @staticmethod
    def _fuzzy_match(col, value: Any):
        # Uuid storage differs per dialect (hex on SQLite), so identifiers match exactly
        if isinstance(col.type, Uuid):
            try:
                return col == (value if isinstance(value, UUID) else UUID(str(value)))
            except ValueError as e:
                raise ValidationError(
                    f"'{value}' is not a valid identifier", "INVALID_FILTER",
                ) from e
        if not isinstance(col.type, String):
            col = cast(col, String)
        return col.contains(str(value), autoescape=True)

    async def paginated_search(
        self,
        predicate: Predicate | None = None,
        *,
        page: int | None = 1,
        take: int | None = None,
        order_by: OrderBy | None = None,
        include: Iterable[str] | None = None,
    ) -> Page[ModelT]:
        skip, take = resolve_window(page, take, self.default_take)
        clauses = self.fuzzy_clauses(predicate)
        order_by = order_by or STABLE_ORDER
        records = await self.repository.query(
            clauses, take=take, skip=skip, order_by=order_by, include=include,
        )
        matching = await self.repository.count_where(clauses)
        total = await self.repository.count_where()
        return Page(
            records=records,
            matching_count=matching,
            total_count=total,
            page_count=page_count(total, take),
            current_page=current_page(skip, take),
        )

    async def search(
        self,
        predicate: Predicate | None = None,
        **options: Any,
    ) -> list[ModelT]:
        return await self.repository.search(predicate, **options)
