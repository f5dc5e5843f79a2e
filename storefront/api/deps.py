"""API Dependencies — services container, query filters and access-code authentication.

Invariants:
    - Services are read from app.state (built once in the lifespan)
    - Authorization: Bearer <code> resolved through AccessCodeService.login;
      a missing header is AuthError, never an anonymous principal
    - With auth disabled the default access code (seeded at startup) is the principal
    - Query filters accept only the fields the entity's filter model enumerates
"""

from typing import Callable

from fastapi import Depends, Request
from fastapi.exceptions import RequestValidationError
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from pydantic import ValidationError as PydanticValidationError

from storefront.config import Settings, get_settings
from storefront.core.errors import AuthError
from storefront.models import AccessCode
from storefront.schemas.common import EntityFilter
from storefront.services.container import Services

# Query parameters that control windowing/ordering, never part of a predicate
RESERVED_PARAMS = frozenset({"page", "take", "skip", "order_by", "direction"})

bearer = HTTPBearer(auto_error=False)


def get_services(request: Request) -> Services:
    return request.app.state.services


async def get_current_code(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer),
    services: Services = Depends(get_services),
    settings: Settings = Depends(get_settings),
) -> AccessCode:
    if not settings.auth_enabled:
        # seeded by the lifespan; lookup only
        return await services.code_auth.login(settings.default_access_code)
    if credentials is None:
        raise AuthError("Missing code")
    return await services.code_auth.login(credentials.credentials)


def query_filter(
    filter_model: type[EntityFilter],
) -> Callable[[Request], EntityFilter]:
    """Dependency parsing the non-reserved query string into filter_model."""

    def parse(request: Request) -> EntityFilter:
        params = {
            key: value
            for key, value in request.query_params.items()
            if key not in RESERVED_PARAMS
        }
        try:
            return filter_model.model_validate(params)
        except PydanticValidationError as e:
            raise RequestValidationError(
                [{**err, "loc": ("query", *err["loc"])} for err in e.errors()],
            )

    return parse
