"""Entity Filters — verifies the typed, explicitly enumerated predicates.

Tests:
    - Unknown keys rejected (extra="forbid")
    - Unset fields dropped from the predicate
    - Query-string values coerced to the column types
"""

from uuid import uuid4

import pytest
from pydantic import ValidationError

from storefront.schemas.access_code import AccessCodeFilter
from storefront.schemas.order import OrderFilter
from storefront.schemas.product import ProductFilter


def test_unknown_field_rejected():
    with pytest.raises(ValidationError):
        ProductFilter.model_validate({"colour": "red"})


def test_empty_filter_is_empty_predicate():
    assert ProductFilter().to_predicate() == {}


def test_predicate_keeps_only_set_fields():
    predicate = ProductFilter.model_validate({"genre": "Adventure", "price": "29.99"}).to_predicate()
    assert predicate == {"genre": "Adventure", "price": 29.99}


def test_id_coerced_to_uuid():
    record_id = uuid4()
    predicate = OrderFilter.model_validate({"id": str(record_id)}).to_predicate()
    assert predicate == {"id": record_id}


def test_payment_details_not_filterable():
    with pytest.raises(ValidationError):
        OrderFilter.model_validate({"card_number": "4111"})


def test_access_code_filter_fields():
    predicate = AccessCodeFilter.model_validate({"assigned_to": "partner"}).to_predicate()
    assert predicate == {"assigned_to": "partner"}
