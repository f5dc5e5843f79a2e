"""Common Schemas — pagination envelope and the base for per-entity filters.

Invariants:
    - EntityFilter rejects unknown keys: only enumerated fields reach a predicate
    - to_predicate() drops unset (None) fields; an empty filter matches everything
"""

from datetime import datetime
from typing import Any, Generic, TypeVar
from uuid import UUID

from pydantic import BaseModel, ConfigDict

T = TypeVar("T")


class EntityFilter(BaseModel):
    """Base for typed per-entity filters (exact or fuzzy predicates)."""
    model_config = ConfigDict(extra="forbid")

    id: UUID | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    def to_predicate(self) -> dict[str, Any]:
        return self.model_dump(exclude_none=True)


class PageResponse(BaseModel, Generic[T]):
    """One page of a fuzzy search."""
    records: list[T]
    matching_count: int
    total_count: int
    page_count: int
    current_page: int
