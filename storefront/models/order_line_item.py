"""OrderLineItem ORM — join record binding one Order to one Product with a quantity.

Invariants:
    - Always belongs to an Order (order_id FK, cascade on delete)
    - quantity is a positive integer (CHECK constraint)
    - price/title are not stored: they exist only transiently in the submitted cart
"""

import uuid

from sqlalchemy import Integer, ForeignKey, Uuid, CheckConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from storefront.db.base import Base, TimestampedEntity


class OrderLineItem(TimestampedEntity, Base):
    """Line item of an order."""
    __tablename__ = "order_line_items"
    __table_args__ = (
        CheckConstraint("quantity >= 1", name="ck_order_line_items_quantity_positive"),
    )

    order_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("orders.id", ondelete="CASCADE"), nullable=False,
    )
    product_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("products.id"), nullable=False,
    )
    quantity: Mapped[int] = mapped_column(Integer, nullable=False)

    # Relationships
    order: Mapped["Order"] = relationship(
        "Order", back_populates="items", lazy="raise",
    )
