"""Access Code Routes — code login plus code CRUD, search and export.

Invariants:
    - POST /codes/login is the only unauthenticated endpoint besides health
    - Login failure is 401 "Invalid code"
"""

from fastapi import APIRouter, Depends

from storefront.api.deps import get_current_code, get_services
from storefront.api.routes.entity_routes import add_entity_routes
from storefront.config import get_settings
from storefront.schemas.access_code import (
    AccessCodeCreate, AccessCodeFilter, AccessCodeResponse, AccessCodeUpdate,
    LoginRequest, LoginResponse,
)
from storefront.services.container import Services

login_router = APIRouter(prefix="/api/v1/codes", tags=["codes"])
router = APIRouter(
    prefix="/api/v1/codes", tags=["codes"],
    dependencies=[Depends(get_current_code)],
)


@login_router.post("/login", response_model=LoginResponse)
async def login(body: LoginRequest, services: Services = Depends(get_services)):
    """Exchange a code for a bearer credential (the code itself)."""
    access_code = await services.code_auth.login(body.code)
    return LoginResponse(
        access_token=access_code.code,
        assigned_to=access_code.assigned_to,
        discount=access_code.discount,
    )


add_entity_routes(
    router,
    select=lambda services: services.access_codes,
    response_schema=AccessCodeResponse,
    filter_schema=AccessCodeFilter,
    update_schema=AccessCodeUpdate,
    create_schema=AccessCodeCreate,
    max_page_size=get_settings().max_page_size,
)
