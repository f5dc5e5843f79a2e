"""AccessCode ORM — the authentication principal attached to every order.

Invariants:
    - code is unique (a duplicate insert fails with PersistenceError)
    - assigned_to is copied onto each order created with this code
"""

from sqlalchemy import String, Float
from sqlalchemy.orm import Mapped, mapped_column

from storefront.db.base import Base, TimestampedEntity


class AccessCode(TimestampedEntity, Base):
    """Access code that logs in and is stamped on orders."""
    __tablename__ = "access_codes"

    code: Mapped[str] = mapped_column(String(64), nullable=False, unique=True)
    discount: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    assigned_to: Mapped[str] = mapped_column(String(100), nullable=False)
