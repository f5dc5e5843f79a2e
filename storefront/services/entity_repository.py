"""Entity Repository — generic CRUD and predicate queries over one ORM model.

Invariants:
    - Stateless between calls: holds only the storage handle and the model class
    - Predicates are field -> value equality maps, AND-combined
    - Field names in predicates, order_by, include and omit are checked against the
      model; unknown names raise InvalidFilterError before any IO
    - get_by_id raises NotFoundError; find returns None on a miss
    - Storage failures surface as PersistenceError (mapped by the session manager);
      any other untagged failure becomes InternalError exactly once

Design Decisions:
    - One class parametrized by model, composed per entity (no subclass per entity)
    - Every operation accepts an optional session: callers that need several writes
      in one unit of work pass the session from storage.transaction(); otherwise
      the repository opens and commits its own
    - Relationships are never loaded implicitly; include names them explicitly
"""

import functools
import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncGenerator, Generic, Iterable, Mapping, Sequence, TypeVar
from uuid import UUID

from sqlalchemy import delete as sql_delete, func, select, update as sql_update
from sqlalchemy import inspect as sa_inspect
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from storefront.core.domain_types import DEFAULT_EXPORT_OMIT, SortDirection
from storefront.core.errors import (
    ErrorContext, InvalidFilterError, NotFoundError, StorefrontError,
    ValidationError, as_storefront_error,
)
from storefront.core.repository_protocols import StorageHandle
from storefront.db.base import Base, utcnow

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=Base)

GENERATED_FIELDS = frozenset({"id", "created_at", "updated_at"})

Predicate = Mapping[str, Any]
OrderBy = Mapping[str, str]

# Insertion order with id as tiebreaker; offset windows and exports stay stable
STABLE_ORDER: OrderBy = {"created_at": "asc", "id": "asc"}


def tagged(operation: str):
    """Re-raise storage and domain errors as-is; tag anything else as InternalError."""
    def decorator(fn):
        @functools.wraps(fn)
        async def wrapper(self, *args, **kwargs):
            try:
                return await fn(self, *args, **kwargs)
            except (StorefrontError, SQLAlchemyError):
                raise
            except Exception as e:
                ctx = ErrorContext(entity=self.name, operation=operation)
                raise as_storefront_error(e, ctx) from e
        return wrapper
    return decorator


class EntityRepository(Generic[ModelT]):
    """CRUD + query surface for a single entity type."""

    def __init__(
        self, storage: StorageHandle, model: type[ModelT], name: str | None = None,
    ):
        self.storage = storage
        self.model = model
        self.name = name or model.__name__
        mapper = sa_inspect(model)
        self.fields: tuple[str, ...] = tuple(attr.key for attr in mapper.column_attrs)
        self.relationships: frozenset[str] = frozenset(mapper.relationships.keys())

    # ─── Query building ─────────────────────────────────────────

    def column(self, field_name: str):
        if field_name not in self.fields:
            raise InvalidFilterError(self.name, field_name)
        return getattr(self.model, field_name)

    def equality_clauses(self, predicate: Predicate | None) -> list:
        clauses = []
        for field_name, value in (predicate or {}).items():
            col = self.column(field_name)
            clauses.append(col.is_(None) if value is None else col == value)
        return clauses

    def _ordering(self, order_by: OrderBy | None) -> list:
        ordering = []
        for field_name, direction in (order_by or {}).items():
            col = self.column(field_name)
            try:
                direction = SortDirection(str(direction).lower())
            except ValueError:
                raise ValidationError(
                    f"Invalid sort direction '{direction}' for {field_name}",
                    "INVALID_SORT",
                )
            ordering.append(col.asc() if direction is SortDirection.ASC else col.desc())
        return ordering

    def _loaders(self, include: Iterable[str] | None) -> list:
        loaders = []
        for rel in include or ():
            if rel not in self.relationships:
                raise InvalidFilterError(self.name, rel)
            loaders.append(selectinload(getattr(self.model, rel)))
        return loaders

    def _check_writable(self, data: Mapping[str, Any], allow_generated: bool = False):
        for field_name in data:
            if field_name not in self.fields:
                raise InvalidFilterError(self.name, field_name)
            if not allow_generated and field_name in GENERATED_FIELDS:
                raise ValidationError(
                    f"{self.name}.{field_name} is generated by storage",
                    "READ_ONLY_FIELD",
                )

    def _coerce_id(self, record_id: UUID | str) -> UUID:
        if isinstance(record_id, UUID):
            return record_id
        try:
            return UUID(str(record_id))
        except ValueError:
            raise NotFoundError(self.name, str(record_id))

    @asynccontextmanager
    async def _session(self, db: AsyncSession | None) -> AsyncGenerator[AsyncSession, None]:
        if db is not None:
            yield db
            return
        async with self.storage.session() as session:
            yield session

    async def _persist(self, session: AsyncSession, db: AsyncSession | None) -> None:
        """Commit when the repository owns the session, flush inside a caller's unit of work."""
        if db is None:
            await session.commit()
        else:
            await session.flush()

    # ─── Reads ──────────────────────────────────────────────────

    @tagged("query")
    async def query(
        self,
        clauses: Sequence = (),
        *,
        take: int | None = None,
        skip: int | None = None,
        order_by: OrderBy | None = None,
        include: Iterable[str] | None = None,
        db: AsyncSession | None = None,
    ) -> list[ModelT]:
        """Run a select with prebuilt where-clauses (AND-combined)."""
        stmt = select(self.model).where(*clauses)
        stmt = stmt.order_by(*self._ordering(order_by)).options(*self._loaders(include))
        if skip:
            stmt = stmt.offset(skip)
        if take is not None:
            stmt = stmt.limit(take)
        async with self._session(db) as session:
            result = await session.execute(stmt)
            return list(result.scalars().all())

    @tagged("count")
    async def count_where(
        self, clauses: Sequence = (), db: AsyncSession | None = None,
    ) -> int:
        stmt = select(func.count()).select_from(self.model).where(*clauses)
        async with self._session(db) as session:
            result = await session.execute(stmt)
            return int(result.scalar_one())

    @tagged("get")
    async def get_by_id(
        self,
        record_id: UUID | str,
        include: Iterable[str] | None = None,
        db: AsyncSession | None = None,
    ) -> ModelT:
        record_id = self._coerce_id(record_id)
        records = await self.query(
            [self.model.id == record_id], include=include, take=1, db=db,
        )
        if not records:
            raise NotFoundError(self.name, str(record_id))
        return records[0]

    async def get_all(
        self,
        order_by: OrderBy | None = None,
        include: Iterable[str] | None = None,
    ) -> list[ModelT]:
        return await self.query(order_by=order_by, include=include)

    async def find(
        self,
        predicate: Predicate,
        include: Iterable[str] | None = None,
        db: AsyncSession | None = None,
    ) -> ModelT | None:
        """First match or None; a miss is not an error."""
        records = await self.query(
            self.equality_clauses(predicate), include=include, take=1, db=db,
        )
        return records[0] if records else None

    async def search(
        self,
        predicate: Predicate | None = None,
        *,
        take: int | None = None,
        skip: int | None = None,
        order_by: OrderBy | None = None,
        include: Iterable[str] | None = None,
    ) -> list[ModelT]:
        """Exact-match filter, AND-combined across predicate fields."""
        return await self.query(
            self.equality_clauses(predicate),
            take=take, skip=skip, order_by=order_by, include=include,
        )

    async def count(self, predicate: Predicate | None = None) -> int:
        return await self.count_where(self.equality_clauses(predicate))

    # ─── Writes ─────────────────────────────────────────────────

    @tagged("create")
    async def create(
        self, data: Mapping[str, Any], db: AsyncSession | None = None,
    ) -> ModelT:
        """Insert one record; id and timestamps are generated by storage."""
        self._check_writable(data)
        async with self._session(db) as session:
            record = self.model(**data)
            session.add(record)
            await self._persist(session, db)
            return record

    @tagged("create")
    async def create_default(
        self, data: Mapping[str, Any], db: AsyncSession | None = None,
    ) -> ModelT:
        """Insert one record with caller-provided id/timestamps (seeding)."""
        self._check_writable(data, allow_generated=True)
        async with self._session(db) as session:
            record = self.model(**data)
            session.add(record)
            await self._persist(session, db)
            return record

    @tagged("create_many")
    async def create_many(
        self, rows: Sequence[Mapping[str, Any]], db: AsyncSession | None = None,
    ) -> list[ModelT]:
        """Bulk insert in one round trip."""
        for row in rows:
            self._check_writable(row)
        async with self._session(db) as session:
            records = [self.model(**row) for row in rows]
            session.add_all(records)
            await self._persist(session, db)
            return records

    @tagged("update")
    async def update(
        self,
        record_id: UUID | str,
        data: Mapping[str, Any],
        db: AsyncSession | None = None,
    ) -> ModelT:
        self._check_writable(data)
        async with self._session(db) as session:
            record = await self.get_by_id(record_id, db=session)
            for field_name, value in data.items():
                setattr(record, field_name, value)
            await self._persist(session, db)
            return record

    @tagged("update_many")
    async def update_many(
        self,
        predicate: Predicate,
        data: Mapping[str, Any],
        db: AsyncSession | None = None,
    ) -> int:
        """Update every match; returns the number of affected rows."""
        self._check_writable(data)
        stmt = (
            sql_update(self.model)
            .where(*self.equality_clauses(predicate))
            .values(**data, updated_at=utcnow())
        )
        async with self._session(db) as session:
            result = await session.execute(stmt)
            await self._persist(session, db)
            return result.rowcount

    @tagged("delete")
    async def delete(
        self, record_id: UUID | str, db: AsyncSession | None = None,
    ) -> ModelT:
        """Delete one record and return it as it was."""
        async with self._session(db) as session:
            record = await self.get_by_id(record_id, db=session)
            await session.delete(record)
            await self._persist(session, db)
            return record

    @tagged("delete_many")
    async def delete_many(
        self, predicate: Predicate, db: AsyncSession | None = None,
    ) -> int:
        stmt = sql_delete(self.model).where(*self.equality_clauses(predicate))
        async with self._session(db) as session:
            result = await session.execute(stmt)
            await self._persist(session, db)
            return result.rowcount

    # ─── Serialization ──────────────────────────────────────────

    def to_dict(self, record: ModelT, omit: Iterable[str] = ()) -> dict[str, Any]:
        """Column values in model order, minus omitted fields."""
        skipped = set(omit)
        return {
            field_name: getattr(record, field_name)
            for field_name in self.fields
            if field_name not in skipped
        }

    async def fetch_rows(
        self,
        predicate: Predicate | None = None,
        *,
        take: int | None = None,
        skip: int | None = None,
        order_by: OrderBy | None = None,
        omit: Iterable[str] | None = None,
    ) -> list[dict[str, Any]]:
        """Plain dict rows for export in stable order; id and timestamps omitted unless overridden."""
        omit = tuple(DEFAULT_EXPORT_OMIT if omit is None else omit)
        for field_name in omit:
            self.column(field_name)
        records = await self.search(
            predicate, take=take, skip=skip, order_by=order_by or STABLE_ORDER,
        )
        return [self.to_dict(record, omit) for record in records]
