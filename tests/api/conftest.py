"""API test fixtures — FastAPI test client around an isolated Services container.

Invariants:
    - app.state.services replaced by the per-test container (lifespan not run)
    - get_settings overridden with the test Settings
    - auth_headers carry the seeded default code as bearer credential
"""

import pytest
from httpx import ASGITransport, AsyncClient

from storefront.config import get_settings
from storefront.main import app


@pytest.fixture
async def client(services, settings, default_code):
    previous = getattr(app.state, "services", None)
    app.state.services = services
    app.dependency_overrides[get_settings] = lambda: settings

    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
    ) as c:
        yield c

    app.dependency_overrides.clear()
    app.state.services = previous


@pytest.fixture
def auth_headers(default_code):
    return {"Authorization": f"Bearer {default_code.code}"}
