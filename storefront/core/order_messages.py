"""Order Messages — plain-text notification bodies and subjects for a created order.

Invariants:
    - Bodies are built from the persisted order id/total and the submitted cart
    - Amounts always rendered with two decimals and the € sign
    - No IO: HTML rendering lives in infrastructure (jinja2 templates)
"""

from storefront.core.domain_types import CartLine


def customer_subject(shop_name: str) -> str:
    return f"Order confirmation - {shop_name}"


def operator_subject(shop_name: str) -> str:
    return f"New order - {shop_name}"


def line_total(item: CartLine) -> float:
    return item.price * item.quantity


def customer_text(order_id: str, items: list[CartLine], total_amount: float) -> str:
    lines = "\n".join(f"{item.quantity} x {item.title}" for item in items)
    return (
        f"Order created successfully with id {order_id}.\n\n"
        f"Your items:\n{lines}\n\n"
        f"Total: €{total_amount:.2f}"
    )


def operator_text(
    order_id: str,
    customer_name: str,
    customer_email: str,
    items: list[CartLine],
    total_amount: float,
) -> str:
    lines = "\n".join(
        f"{item.quantity} x {item.title} - €{line_total(item):.2f}" for item in items
    )
    return (
        f"New order with id {order_id}.\n\n"
        f"Customer: {customer_name} ({customer_email})\n\n"
        f"Items:\n{lines}\n\n"
        f"Total: €{total_amount:.2f}"
    )
