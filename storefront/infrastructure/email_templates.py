"""Email Templates — jinja2 rendering of the HTML order notifications.

Invariants:
    - Templates ship inside the package (infrastructure/templates/)
    - Autoescaping on: customer-supplied names never inject markup
    - Amounts rendered with two decimals; the operator mail hides the default code
"""

from datetime import datetime

from jinja2 import Environment, PackageLoader, select_autoescape

from storefront.core.domain_types import CartLine
from storefront.core.order_messages import line_total


class OrderEmailRenderer:
    """Renders customer confirmation and operator notification HTML bodies."""

    def __init__(self, shop_name: str, default_code: str):
        self.shop_name = shop_name
        self.default_code = default_code
        self.env = Environment(
            loader=PackageLoader("storefront.infrastructure", "templates"),
            autoescape=select_autoescape(["html"]),
        )

    def _lines(self, items: list[CartLine]) -> list[dict]:
        return [
            {
                "title": item.title,
                "quantity": item.quantity,
                "line_total": f"{line_total(item):.2f}",
            }
            for item in items
        ]

    def render_customer(
        self, order_id: str, customer_name: str,
        items: list[CartLine], total_amount: float,
    ) -> str:
        template = self.env.get_template("order_confirmation.html")
        return template.render(
            shop_name=self.shop_name,
            order_id=order_id,
            customer_name=customer_name,
            items=self._lines(items),
            total_amount=f"{total_amount:.2f}",
        )

    def render_operator(
        self,
        order_id: str,
        customer_name: str,
        customer_email: str,
        code: str,
        items: list[CartLine],
        total_amount: float,
        created_at: datetime,
    ) -> str:
        template = self.env.get_template("order_notification.html")
        return template.render(
            shop_name=self.shop_name,
            order_id=order_id,
            customer_name=customer_name,
            customer_email=customer_email,
            code=code if code != self.default_code else None,
            items=self._lines(items),
            total_amount=f"{total_amount:.2f}",
            placed_at=created_at.strftime("%d %B %Y %H:%M"),
        )
