"""ORM Models — SQLAlchemy declarative models for all storefront entities.

Invariants:
    - All models inherit from Base (db/base.py) and TimestampedEntity
    - Order owns its OrderLineItems by composition

Design Decisions:
    - One file per entity for locality
    - All models imported here so SQLAlchemy resolves string-based relationship()
      references before any query runs
"""

from storefront.models.product import Product  # noqa: F401
from storefront.models.access_code import AccessCode  # noqa: F401
from storefront.models.order import Order  # noqa: F401
from storefront.models.order_line_item import OrderLineItem  # noqa: F401
