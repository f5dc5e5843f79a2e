"""Order Rules — pure cart validation and total reconciliation.

Invariants:
    - An order with zero lines is rejected before any IO (EmptyCartError)
    - Every quantity is a positive integral number (InvalidQuantityError)
    - Prices and the claimed total are finite and non-negative (InvalidAmountError)
    - |sum(price * quantity) - claimed total| <= TOTAL_TOLERANCE (TotalMismatchError)
    - Checks run in that order; the first failure wins

Design Decisions:
    - Integral floats (2.0) are accepted as integers, booleans are not
    - Client-submitted prices are authoritative: no live product-price lookup here
"""

import math

from storefront.core.domain_types import CartLine, OrderDraft, TOTAL_TOLERANCE
from storefront.core.errors import (
    EmptyCartError, InvalidAmountError, InvalidQuantityError, TotalMismatchError,
)


def is_positive_integer(value: object) -> bool:
    """True for ints (and integral floats) >= 1; False for bools and everything else."""
    if isinstance(value, bool):
        return False
    if isinstance(value, int):
        return value >= 1
    if isinstance(value, float):
        return value.is_integer() and value >= 1
    return False


def calculate_total(items: list[CartLine]) -> float:
    return sum(item.price * item.quantity for item in items)


def validate_cart(draft: OrderDraft) -> float:
    """Validate a draft and return the calculated total. Raises on the first violation."""
    if not draft.items:
        raise EmptyCartError()

    for item in draft.items:
        if not is_positive_integer(item.quantity):
            raise InvalidQuantityError(item.quantity)
        if not math.isfinite(item.price) or item.price < 0:
            raise InvalidAmountError("price", item.price)

    if not math.isfinite(draft.total_amount) or draft.total_amount < 0:
        raise InvalidAmountError("total_amount", draft.total_amount)

    calculated = calculate_total(draft.items)
    if abs(calculated - draft.total_amount) > TOTAL_TOLERANCE:
        raise TotalMismatchError(calculated, draft.total_amount)
    return calculated
