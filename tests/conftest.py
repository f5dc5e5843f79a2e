"""Root conftest — shared test configuration and storage/service fixtures.

Invariants:
    - Environment defaults set before any storefront module reads Settings
    - Every test gets a fresh in-memory SQLite database (foreign keys enforced)
    - Mail never leaves the process: services are built around FakeMailer
"""

import os

os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("SMTP_HOST", "localhost")
os.environ.setdefault("LOG_FORMAT", "text")

import pytest  # noqa: E402
from sqlalchemy.ext.asyncio import create_async_engine  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from storefront.config import Settings  # noqa: E402
from storefront.infrastructure.database import DatabaseSessionManager  # noqa: E402
from storefront.services.container import build_services  # noqa: E402
from tests.fakes import FakeMailer, product_data  # noqa: E402


@pytest.fixture
async def storage():
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:", echo=False, poolclass=StaticPool,
    )
    manager = DatabaseSessionManager.from_engine(engine)
    await manager.create_schema()
    yield manager
    await manager.dispose()


@pytest.fixture
def mailer():
    return FakeMailer()


@pytest.fixture
def settings():
    return Settings(
        _env_file=None,
        database_url="sqlite+aiosqlite:///:memory:",
        shop_name="Test Shop",
        operator_email="ops@shop.test",
        default_access_code="333333",
        default_access_assigned_to="public",
        mail_retry_attempts=1,
    )


@pytest.fixture
def services(storage, settings, mailer):
    return build_services(storage, settings, mailer)


@pytest.fixture
async def default_code(services, settings):
    return await services.code_auth.ensure_default(
        settings.default_access_code,
        settings.default_access_discount,
        settings.default_access_assigned_to,
    )


@pytest.fixture
async def partner_code(services):
    return await services.access_codes.repository.create(
        {"code": "PARTNER-42", "discount": 10.0, "assigned_to": "partner"},
    )


@pytest.fixture
async def product(services):
    return await services.products.repository.create(product_data())
