"""Entity Routes — the generic CRUD / search / export surface shared by every entity.

Invariants:
    - Fixed paths (/search, /find, /count, /export/{format}) registered before /{record_id}
    - Every response is validated through the entity's response schema
    - include names the relationships loaded for every read (e.g. order items)

Design Decisions:
    - One builder called by each resource module instead of a router subclass:
      each module still owns its APIRouter (prefix, tags, auth dependency)
    - POST omitted when create_schema is None (orders are created by the workflow)
"""

from typing import Any, Callable
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from pydantic import BaseModel

from storefront.api.deps import get_services, query_filter
from storefront.api.responses import ResponseSink
from storefront.core.domain_types import SortDirection
from storefront.schemas.common import EntityFilter, PageResponse
from storefront.services.container import EntityServices, Services


def add_entity_routes(
    router: APIRouter,
    *,
    select: Callable[[Services], EntityServices],
    response_schema: type[BaseModel],
    filter_schema: type[EntityFilter],
    update_schema: type[BaseModel],
    create_schema: type[BaseModel] | None = None,
    include: tuple[str, ...] = (),
    max_page_size: int = 100,
) -> APIRouter:
    """Attach the standard entity endpoints to router."""

    def entity(services: Services = Depends(get_services)) -> EntityServices:
        return select(services)

    def ordering(
        order_by: str | None = Query(None),
        direction: SortDirection = Query(SortDirection.ASC),
    ) -> dict[str, str] | None:
        return {order_by: direction.value} if order_by else None

    def render(record: Any) -> BaseModel:
        return response_schema.model_validate(record)

    @router.get("", response_model=PageResponse[response_schema])
    async def paginated_search(
        filters: EntityFilter = Depends(query_filter(filter_schema)),
        page: int = Query(1),
        take: int | None = Query(None, le=max_page_size),
        order_by: dict[str, str] | None = Depends(ordering),
        svc: EntityServices = Depends(entity),
    ):
        """Fuzzy (substring, OR-combined) search, one page at a time."""
        result = await svc.search.paginated_search(
            filters.to_predicate(), page=page, take=take,
            order_by=order_by, include=include,
        )
        return {
            "records": [render(r) for r in result.records],
            "matching_count": result.matching_count,
            "total_count": result.total_count,
            "page_count": result.page_count,
            "current_page": result.current_page,
        }

    @router.get("/search", response_model=list[response_schema])
    async def exact_search(
        filters: EntityFilter = Depends(query_filter(filter_schema)),
        take: int | None = Query(None, ge=1, le=max_page_size),
        skip: int | None = Query(None, ge=0),
        order_by: dict[str, str] | None = Depends(ordering),
        svc: EntityServices = Depends(entity),
    ):
        records = await svc.search.search(
            filters.to_predicate(), take=take, skip=skip,
            order_by=order_by, include=include,
        )
        return [render(r) for r in records]

    @router.get("/find", response_model=response_schema | None)
    async def find(
        filters: EntityFilter = Depends(query_filter(filter_schema)),
        svc: EntityServices = Depends(entity),
    ):
        """First exact match, or null."""
        record = await svc.repository.find(filters.to_predicate(), include=include)
        return render(record) if record is not None else None

    @router.get("/count")
    async def count(
        filters: EntityFilter = Depends(query_filter(filter_schema)),
        svc: EntityServices = Depends(entity),
    ):
        return {"count": await svc.repository.count(filters.to_predicate())}

    @router.get("/export/{export_format}")
    async def export(
        export_format: str,
        filters: EntityFilter = Depends(query_filter(filter_schema)),
        order_by: dict[str, str] | None = Depends(ordering),
        svc: EntityServices = Depends(entity),
    ):
        """Download the filtered records as csv, json, xlsx or pdf."""
        sink = ResponseSink()
        await svc.exporter.export(
            export_format, sink, filters.to_predicate(), order_by=order_by,
        )
        return sink.to_response()

    @router.get("/{record_id}", response_model=response_schema)
    async def get_by_id(record_id: UUID, svc: EntityServices = Depends(entity)):
        return render(await svc.repository.get_by_id(record_id, include=include))

    if create_schema is not None:
        @router.post(
            "", response_model=response_schema, status_code=status.HTTP_201_CREATED,
        )
        async def create(
            body: create_schema,  # type: ignore[valid-type]
            svc: EntityServices = Depends(entity),
        ):
            record = await svc.repository.create(body.model_dump())
            if include:
                record = await svc.repository.get_by_id(record.id, include=include)
            return render(record)

    @router.put("/{record_id}", response_model=response_schema)
    async def update(
        record_id: UUID,
        body: update_schema,  # type: ignore[valid-type]
        svc: EntityServices = Depends(entity),
    ):
        await svc.repository.update(record_id, body.model_dump(exclude_none=True))
        return render(await svc.repository.get_by_id(record_id, include=include))

    @router.delete("/{record_id}", response_model=response_schema)
    async def delete(record_id: UUID, svc: EntityServices = Depends(entity)):
        """Delete and return the record as it was."""
        record = await svc.repository.get_by_id(record_id, include=include)
        await svc.repository.delete(record_id)
        return render(record)

    return router
