"""Access Codes — login by code and idempotent seeding of the default code.

Invariants:
    - login() returns the matching AccessCode or raises AuthError("Invalid code")
    - ensure_default() creates the default code at most once
"""

import logging

from storefront.core.errors import AuthError
from storefront.models import AccessCode
from storefront.services.entity_repository import EntityRepository

logger = logging.getLogger(__name__)


class AccessCodeService:
    """Resolves access codes, the authentication principal of the storefront."""

    def __init__(self, repository: EntityRepository[AccessCode]):
        self.repository = repository

    async def get_by_code(self, code: str) -> AccessCode | None:
        return await self.repository.find({"code": code})

    async def login(self, code: str | None) -> AccessCode:
        if not code:
            raise AuthError("Missing code")
        access_code = await self.get_by_code(code)
        if access_code is None:
            logger.warning("Login attempt with unknown code")
            raise AuthError()
        return access_code

    async def ensure_default(
        self, code: str, discount: float = 0.0, assigned_to: str = "public",
    ) -> AccessCode:
        existing = await self.get_by_code(code)
        if existing is not None:
            return existing
        created = await self.repository.create(
            {"code": code, "discount": discount, "assigned_to": assigned_to},
        )
        logger.info(f"Default access code seeded (assigned to {assigned_to})")
        return created
