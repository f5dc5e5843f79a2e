"""Email Templates — verifies jinja2 rendering of the order notification bodies."""

from datetime import datetime, timezone
from uuid import uuid4

from storefront.core.domain_types import CartLine
from storefront.infrastructure.email_templates import OrderEmailRenderer

ITEMS = [CartLine(uuid4(), "Space Odyssey", 29.99, 2)]


def test_customer_confirmation():
    html = OrderEmailRenderer("Test Shop", "333333").render_customer(
        "order-1", "Ada", ITEMS, 59.98,
    )
    assert "Hello Ada," in html
    assert "order-1" in html
    assert "€59.98" in html
    assert "The Test Shop team" in html


def test_customer_name_is_escaped():
    html = OrderEmailRenderer("Test Shop", "333333").render_customer(
        "order-1", "<script>x</script>", ITEMS, 59.98,
    )
    assert "<script>" not in html
    assert "&lt;script&gt;" in html


def test_operator_notification_shows_non_default_code():
    html = OrderEmailRenderer("Test Shop", "333333").render_operator(
        "order-1", "Ada", "ada@example.com", "PARTNER-42", ITEMS, 59.98,
        datetime(2026, 3, 1, 14, 30, tzinfo=timezone.utc),
    )
    assert "Promo code:" in html
    assert "PARTNER-42" in html
    assert "01 March 2026 14:30" in html


def test_operator_notification_hides_default_code():
    html = OrderEmailRenderer("Test Shop", "333333").render_operator(
        "order-1", "Ada", "ada@example.com", "333333", ITEMS, 59.98,
        datetime(2026, 3, 1, 14, 30, tzinfo=timezone.utc),
    )
    assert "Promo code:" not in html
