"""Domain Types — rich types that replace bare primitives across the codebase.

Invariants:
    - Export formats and sort directions encoded as Enums, no raw string matching
    - CartLine price is the client-submitted price at order time (authoritative for totals)

Design Decisions:
    - str Enums: serialize to JSON without custom encoders
    - Frozen dataclasses for the order draft: the workflow never mutates its input
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any
from uuid import UUID


# ─── Constants ───────────────────────────────────────────────────

TOTAL_TOLERANCE = 0.01
DEFAULT_PAGE_SIZE = 10
DEFAULT_EXPORT_OMIT: tuple[str, ...] = ("id", "created_at", "updated_at")


# ─── Enums ───────────────────────────────────────────────────────

class ExportFormat(str, Enum):
    """Output formats produced by the exporter."""
    CSV = "csv"
    JSON = "json"
    XLSX = "xlsx"
    PDF = "pdf"


class SortDirection(str, Enum):
    """Ordering direction for list queries."""
    ASC = "asc"
    DESC = "desc"


class OrderStatus(str, Enum):
    """Order lifecycle: a single terminal state, no further transitions."""
    CREATED = "created"


# ─── Order Input ─────────────────────────────────────────────────

@dataclass(frozen=True)
class CartLine:
    """One submitted cart entry. title and price are transient (email + total only)."""
    product_id: UUID
    title: str
    price: float
    quantity: Any


@dataclass(frozen=True)
class OrderDraft:
    """Validated-at-the-edge order submission handed to the workflow."""
    customer_name: str
    customer_email: str
    total_amount: float
    items: list[CartLine] = field(default_factory=list)
