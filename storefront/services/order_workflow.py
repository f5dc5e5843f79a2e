"""Order Workflow — validate a cart, persist order + line items, notify customer and operator.

Invariants:
    - Validation (empty cart, quantities, total) runs before any IO; a rejected
      cart persists nothing
    - Order header is written strictly before its line items, both inside one
      storage transaction: a line-item failure rolls the header back
    - Notifications are dispatched only after commit, detached: their outcome
      never reaches the caller and never rolls back the order
    - The returned order is re-read with its line items populated

Design Decisions:
    - Payment metadata left empty; code and assigned_to copied from the access code
    - Line items carry product reference and quantity only; title/price stay in
      the submitted cart for totals and email bodies
    - Email body rendering failures are logged like delivery failures
"""

import logging

from storefront.core.domain_types import OrderDraft
from storefront.core.order_messages import (
    customer_subject, customer_text, operator_subject, operator_text,
)
from storefront.core.order_rules import validate_cart
from storefront.core.repository_protocols import StorageHandle
from storefront.infrastructure.email_templates import OrderEmailRenderer
from storefront.models import AccessCode, Order, OrderLineItem
from storefront.services.entity_repository import EntityRepository
from storefront.services.notification_dispatcher import NotificationDispatcher

logger = logging.getLogger(__name__)


class OrderWorkflow:
    """Creates orders. One instance per process, shared across requests."""

    def __init__(
        self,
        orders: EntityRepository[Order],
        line_items: EntityRepository[OrderLineItem],
        storage: StorageHandle,
        dispatcher: NotificationDispatcher,
        renderer: OrderEmailRenderer,
        shop_name: str,
        operator_email: str,
    ):
        self.orders = orders
        self.line_items = line_items
        self.storage = storage
        self.dispatcher = dispatcher
        self.renderer = renderer
        self.shop_name = shop_name
        self.operator_email = operator_email

    async def create_order(self, draft: OrderDraft, code: AccessCode) -> Order:
        validate_cart(draft)

        async with self.storage.transaction() as db:
            order = await self.orders.create(
                {
                    "customer_name": draft.customer_name,
                    "customer_email": draft.customer_email,
                    "card_number": None,
                    "expiry": None,
                    "cvv": None,
                    "phone_number": None,
                    "payment_method": None,
                    "code": code.code,
                    "total_amount": draft.total_amount,
                    "assigned_to": code.assigned_to,
                },
                db=db,
            )
            await self.line_items.create_many(
                [
                    {
                        "order_id": order.id,
                        "product_id": item.product_id,
                        "quantity": int(item.quantity),
                    }
                    for item in draft.items
                ],
                db=db,
            )

        logger.info(
            f"Order {order.id} created with {len(draft.items)} line item(s)",
            extra={"order_id": str(order.id), "entity": "Order"},
        )
        self._notify(order, draft)
        return await self.orders.get_by_id(order.id, include=("items",))

    def _notify(self, order: Order, draft: OrderDraft) -> None:
        """Fire customer and operator mails; never raises."""
        order_id = str(order.id)
        try:
            self.dispatcher.dispatch(
                draft.customer_email,
                customer_subject(self.shop_name),
                customer_text(order_id, draft.items, order.total_amount),
                self.renderer.render_customer(
                    order_id, draft.customer_name, draft.items, order.total_amount,
                ),
                order_id=order_id,
            )
        except Exception as e:
            logger.error(
                f"Customer notification for order {order_id} not dispatched: {e}",
                extra={"order_id": order_id, "recipient": draft.customer_email},
            )

        try:
            self.dispatcher.dispatch(
                self.operator_email,
                operator_subject(self.shop_name),
                operator_text(
                    order_id, draft.customer_name, draft.customer_email,
                    draft.items, order.total_amount,
                ),
                self.renderer.render_operator(
                    order_id, draft.customer_name, draft.customer_email,
                    order.code, draft.items, order.total_amount, order.created_at,
                ),
                order_id=order_id,
            )
        except Exception as e:
            logger.error(
                f"Operator notification for order {order_id} not dispatched: {e}",
                extra={"order_id": order_id, "recipient": self.operator_email},
            )
