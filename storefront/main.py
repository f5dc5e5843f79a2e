"""Storefront API — FastAPI application entry point.

Invariants:
    - Routes registered explicitly (no auto-discovery)
    - Global error handlers map StorefrontError → structured JSON responses
    - CORS configured from settings (not hardcoded)
    - Database, schema, default access code and the Services container are
      initialized on startup via the lifespan context manager
    - In-flight notifications are drained before the engine is disposed

Design Decisions:
    - Lifespan over @app.on_event: FastAPI recommended pattern, cleaner cleanup
    - Services container on app.state: one explicit instance per process,
      tests install their own
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from storefront.api.error_handlers import register_error_handlers
from storefront.api.routes import access_codes, health, orders, products
from storefront.config import get_settings
from storefront.infrastructure.database import init_db
from storefront.infrastructure.mailer import SmtpConfig, SmtpMailer
from storefront.infrastructure.observability import setup_logging
from storefront.services.container import build_services

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle."""
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_format)
    storage = init_db(
        settings.database_url,
        pool_size=settings.database_pool_size,
        max_overflow=settings.database_max_overflow,
    )
    if settings.database_create_schema:
        await storage.create_schema()

    services = build_services(
        storage, settings, SmtpMailer(SmtpConfig.from_settings(settings)),
    )
    await services.code_auth.ensure_default(
        settings.default_access_code,
        settings.default_access_discount,
        settings.default_access_assigned_to,
    )
    app.state.services = services
    logger.info("Storefront API started")
    yield
    logger.info("Storefront API shutting down")
    await services.dispatcher.drain()
    await storage.dispose()


app = FastAPI(title="Storefront API", version="1.0.0", lifespan=lifespan)

settings = get_settings()
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Routes: explicit registration; login before the authenticated codes router
app.include_router(health.router)
app.include_router(access_codes.login_router)
app.include_router(access_codes.router)
app.include_router(products.router)
app.include_router(orders.router)

register_error_handlers(app)
