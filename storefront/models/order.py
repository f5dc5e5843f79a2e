"""Order ORM — order header created together with its line items.

Invariants:
    - Never persisted without at least one OrderLineItem (enforced by OrderWorkflow)
    - total_amount equals sum(price * quantity) of the submitted cart at creation
    - Payment metadata columns are nullable and left empty by the workflow

Design Decisions:
    - items loaded only on request (lazy="raise"): the repository's include option
      decides when the line items are read, no implicit IO in async code
    - cascade delete for line items (ORM cascade + ON DELETE CASCADE)
"""

from sqlalchemy import String, Float
from sqlalchemy.orm import Mapped, mapped_column, relationship

from storefront.db.base import Base, TimestampedEntity


class Order(TimestampedEntity, Base):
    """Order header, owns OrderLineItems by composition."""
    __tablename__ = "orders"

    customer_name: Mapped[str] = mapped_column(String(200), nullable=False)
    customer_email: Mapped[str] = mapped_column(String(320), nullable=False)
    card_number: Mapped[str | None] = mapped_column(String(32), nullable=True)
    expiry: Mapped[str | None] = mapped_column(String(8), nullable=True)
    cvv: Mapped[str | None] = mapped_column(String(8), nullable=True)
    phone_number: Mapped[str | None] = mapped_column(String(32), nullable=True)
    payment_method: Mapped[str | None] = mapped_column(String(50), nullable=True)
    code: Mapped[str] = mapped_column(String(64), nullable=False)
    total_amount: Mapped[float] = mapped_column(Float, nullable=False)
    assigned_to: Mapped[str] = mapped_column(String(100), nullable=False)

    # Relationships
    items: Mapped[list["OrderLineItem"]] = relationship(
        "OrderLineItem", back_populates="order",
        cascade="all, delete-orphan", passive_deletes=True, lazy="raise",
    )
