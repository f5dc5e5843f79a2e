"""Product Routes — catalogue CRUD, search and export.

Invariants:
    - Every endpoint requires a valid access code
"""

from fastapi import APIRouter, Depends

from storefront.api.deps import get_current_code
from storefront.api.routes.entity_routes import add_entity_routes
from storefront.config import get_settings
from storefront.schemas.product import (
    ProductCreate, ProductFilter, ProductResponse, ProductUpdate,
)

router = APIRouter(
    prefix="/api/v1/products", tags=["products"],
    dependencies=[Depends(get_current_code)],
)

add_entity_routes(
    router,
    select=lambda services: services.products,
    response_schema=ProductResponse,
    filter_schema=ProductFilter,
    update_schema=ProductUpdate,
    create_schema=ProductCreate,
    max_page_size=get_settings().max_page_size,
)
