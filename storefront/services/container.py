"""Service Container — explicit, process-wide instances wired once at startup.

Invariants:
    - Every repository, engine, exporter and the dispatcher are built here exactly
      once per container; nothing is instantiated lazily or globally
    - Tests build isolated containers around their own storage and mail transport

Design Decisions:
    - Plain dataclass over a DI framework: FastAPI reads it from app.state
    - Per-entity bundle (EntityServices) so routers are generated uniformly
"""

from dataclasses import dataclass
from typing import Generic

from storefront.config import Settings
from storefront.core.repository_protocols import MailTransport, StorageHandle
from storefront.infrastructure.email_templates import OrderEmailRenderer
from storefront.models import AccessCode, Order, OrderLineItem, Product
from storefront.services.access_codes import AccessCodeService
from storefront.services.entity_repository import EntityRepository, ModelT
from storefront.services.exporter import Exporter
from storefront.services.notification_dispatcher import (
    NotificationDispatcher, RetryPolicy,
)
from storefront.services.order_workflow import OrderWorkflow
from storefront.services.search_engine import SearchEngine


@dataclass
class EntityServices(Generic[ModelT]):
    """Repository, search engine and exporter for one entity."""
    repository: EntityRepository[ModelT]
    search: SearchEngine[ModelT]
    exporter: Exporter[ModelT]


@dataclass
class Services:
    storage: StorageHandle
    products: EntityServices[Product]
    access_codes: EntityServices[AccessCode]
    orders: EntityServices[Order]
    line_items: EntityRepository[OrderLineItem]
    code_auth: AccessCodeService
    dispatcher: NotificationDispatcher
    workflow: OrderWorkflow


def entity_services(
    storage: StorageHandle, model: type[ModelT], default_take: int,
) -> EntityServices[ModelT]:
    repository = EntityRepository(storage, model)
    return EntityServices(
        repository=repository,
        search=SearchEngine(repository, default_take),
        exporter=Exporter(repository),
    )


def build_services(
    storage: StorageHandle, settings: Settings, transport: MailTransport,
) -> Services:
    products = entity_services(storage, Product, settings.default_page_size)
    access_codes = entity_services(storage, AccessCode, settings.default_page_size)
    orders = entity_services(storage, Order, settings.default_page_size)
    line_items = EntityRepository(storage, OrderLineItem)

    dispatcher = NotificationDispatcher(
        transport,
        RetryPolicy(
            max_attempts=settings.mail_retry_attempts,
            delay_ms=settings.mail_retry_delay_ms,
        ),
    )
    workflow = OrderWorkflow(
        orders=orders.repository,
        line_items=line_items,
        storage=storage,
        dispatcher=dispatcher,
        renderer=OrderEmailRenderer(settings.shop_name, settings.default_access_code),
        shop_name=settings.shop_name,
        operator_email=settings.operator_email,
    )
    return Services(
        storage=storage,
        products=products,
        access_codes=access_codes,
        orders=orders,
        line_items=line_items,
        code_auth=AccessCodeService(access_codes.repository),
        dispatcher=dispatcher,
        workflow=workflow,
    )
