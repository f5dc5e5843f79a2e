"""Product ORM — catalogue entry that orders reference through line items.

Invariants:
    - price is non-negative (CHECK constraint)
    - title, genre, category, description, support and image are non-nullable

Design Decisions:
    - Float price: the order workflow reconciles totals with a 0.01 tolerance,
      client-submitted prices are authoritative at order time
"""

from sqlalchemy import String, Text, Float, CheckConstraint
from sqlalchemy.orm import Mapped, mapped_column

from storefront.db.base import Base, TimestampedEntity


class Product(TimestampedEntity, Base):
    """Catalogue product."""
    __tablename__ = "products"
    __table_args__ = (
        CheckConstraint("price >= 0", name="ck_products_price_non_negative"),
    )

    title: Mapped[str] = mapped_column(String(200), nullable=False)
    price: Mapped[float] = mapped_column(Float, nullable=False)
    rating: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    genre: Mapped[str] = mapped_column(String(100), nullable=False)
    category: Mapped[str] = mapped_column(String(100), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    support: Mapped[str] = mapped_column(String(50), nullable=False)
    image: Mapped[str] = mapped_column(String(500), nullable=False)
