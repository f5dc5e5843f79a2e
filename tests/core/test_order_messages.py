"""Order Messages — verifies plain-text notification bodies and subjects."""

from uuid import uuid4

from storefront.core.domain_types import CartLine
from storefront.core.order_messages import (
    customer_subject, customer_text, operator_subject, operator_text,
)

ITEMS = [
    CartLine(uuid4(), "Space Odyssey", 29.99, 2),
    CartLine(uuid4(), "Puzzle Box", 5.0, 1),
]


def test_subjects_name_the_shop():
    assert customer_subject("Test Shop") == "Order confirmation - Test Shop"
    assert operator_subject("Test Shop") == "New order - Test Shop"


def test_customer_text_lists_items_and_total():
    text = customer_text("order-1", ITEMS, 64.98)
    assert "order-1" in text
    assert "2 x Space Odyssey" in text
    assert "1 x Puzzle Box" in text
    assert text.endswith("Total: €64.98")


def test_operator_text_adds_customer_and_line_totals():
    text = operator_text("order-1", "Ada", "ada@example.com", ITEMS, 64.98)
    assert "Customer: Ada (ada@example.com)" in text
    assert "2 x Space Odyssey - €59.98" in text
    assert "1 x Puzzle Box - €5.00" in text
