"""Order Schemas — verifies checkout payload validation and draft conversion.

Tests:
    - Email format and finite, non-negative amounts enforced at the boundary
    - Empty carts pass the schema (the workflow reports "Cart cannot be empty")
    - Quantities must be numbers; strings and booleans rejected
    - to_draft preserves every cart line
"""

from uuid import uuid4

import pytest
from pydantic import ValidationError

from storefront.core.domain_types import OrderDraft
from storefront.schemas.order import OrderCreate


def _payload(**overrides):
    payload = {
        "customer_name": "Ada Lovelace",
        "customer_email": "ada@example.com",
        "items": [
            {"product_id": str(uuid4()), "title": "Space Odyssey", "price": 29.99, "quantity": 2},
        ],
        "total_amount": 59.98,
    }
    payload.update(overrides)
    return payload


def test_valid_payload_converts_to_draft():
    body = OrderCreate.model_validate(_payload())
    draft = body.to_draft()
    assert isinstance(draft, OrderDraft)
    assert draft.customer_email == "ada@example.com"
    assert len(draft.items) == 1
    assert draft.items[0].quantity == 2
    assert draft.items[0].price == 29.99


def test_invalid_email_rejected():
    with pytest.raises(ValidationError):
        OrderCreate.model_validate(_payload(customer_email="not-an-email"))


def test_blank_name_rejected():
    with pytest.raises(ValidationError):
        OrderCreate.model_validate(_payload(customer_name="   "))


def test_negative_price_rejected():
    items = [{"product_id": str(uuid4()), "title": "X", "price": -1, "quantity": 1}]
    with pytest.raises(ValidationError):
        OrderCreate.model_validate(_payload(items=items))


def test_negative_total_rejected():
    with pytest.raises(ValidationError):
        OrderCreate.model_validate(_payload(total_amount=-0.5))


@pytest.mark.parametrize("quantity", ["2", True])
def test_non_numeric_quantity_rejected(quantity):
    items = [{"product_id": str(uuid4()), "title": "X", "price": 1, "quantity": quantity}]
    with pytest.raises(ValidationError):
        OrderCreate.model_validate(_payload(items=items))


def test_empty_cart_left_to_workflow():
    body = OrderCreate.model_validate(_payload(items=[], total_amount=0))
    assert body.to_draft().items == []


def test_fractional_quantity_left_to_workflow():
    items = [{"product_id": str(uuid4()), "title": "X", "price": 1, "quantity": 1.5}]
    body = OrderCreate.model_validate(_payload(items=items, total_amount=1.5))
    assert body.to_draft().items[0].quantity == 1.5


def test_infinite_amounts_rejected_from_json():
    product_id = uuid4()
    raw = (
        '{"customer_name": "Ada", "customer_email": "ada@example.com", '
        f'"items": [{{"product_id": "{product_id}", "title": "X", "price": Infinity, "quantity": 1}}], '
        '"total_amount": Infinity}'
    )
    with pytest.raises(ValidationError):
        OrderCreate.model_validate_json(raw)


@pytest.mark.parametrize("field", ["total_amount", "price"])
def test_nan_amount_rejected(field):
    payload = _payload()
    if field == "price":
        payload["items"][0]["price"] = float("nan")
    else:
        payload["total_amount"] = float("nan")
    with pytest.raises(ValidationError):
        OrderCreate.model_validate(payload)
