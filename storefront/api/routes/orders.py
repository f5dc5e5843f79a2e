"""Order Routes — checkout plus order CRUD, search and export.

Invariants:
    - POST /orders runs OrderWorkflow.create_order with the caller's access code
    - Order reads always include line items
"""

from fastapi import APIRouter, Depends, status

from storefront.api.deps import get_current_code, get_services
from storefront.api.routes.entity_routes import add_entity_routes
from storefront.config import get_settings
from storefront.models import AccessCode
from storefront.schemas.order import (
    OrderCreate, OrderCreated, OrderFilter, OrderResponse, OrderUpdate,
)
from storefront.services.container import Services

router = APIRouter(
    prefix="/api/v1/orders", tags=["orders"],
    dependencies=[Depends(get_current_code)],
)


@router.post("", response_model=OrderCreated, status_code=status.HTTP_201_CREATED)
async def create_order(
    body: OrderCreate,
    code: AccessCode = Depends(get_current_code),
    services: Services = Depends(get_services),
):
    """Validate the cart, persist the order and notify customer and operator."""
    order = await services.workflow.create_order(body.to_draft(), code)
    return OrderCreated(order_id=order.id, order=OrderResponse.model_validate(order))


add_entity_routes(
    router,
    select=lambda services: services.orders,
    response_schema=OrderResponse,
    filter_schema=OrderFilter,
    update_schema=OrderUpdate,
    include=("items",),
    max_page_size=get_settings().max_page_size,
)
