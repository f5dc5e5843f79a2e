"""Error Hierarchy — typed, categorized exceptions for every storefront failure mode.

Invariants:
    - Every error has a code (str), category (ErrorCategory), severity (ErrorSeverity)
      and an http_status classification (400/401/404/500-equivalent)
    - Validation errors (400-level) are raised immediately by the core
    - Storage failures are wrapped once at the boundary; untagged errors become InternalError
    - to_response() produces the REST envelope; no internal details leaked

Design Decisions:
    - Single hierarchy with StorefrontError base: FastAPI global handler catches all
    - ErrorContext as dataclass: rich observability without coupling to logging framework
    - Notification failures have their own class so callers can absorb them explicitly
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any
from datetime import datetime, timezone


class ErrorSeverity(str, Enum):
    """Error severity for observability and client handling."""
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class ErrorCategory(str, Enum):
    """High-level error categories for routing and handling."""
    VALIDATION = "validation"
    AUTHENTICATION = "authentication"
    RESOURCE_NOT_FOUND = "resource_not_found"
    NO_DATA = "no_data"
    DATABASE = "database"
    EXTERNAL_API = "external_api"
    INTERNAL = "internal"


@dataclass
class ErrorContext:
    """Rich context for error observability and debugging."""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    entity: str | None = None
    record_id: str | None = None
    operation: str | None = None
    debug_info: dict[str, Any] | None = None


class StorefrontError(Exception):
    """Base exception for all storefront errors."""

    def __init__(
        self,
        message: str,
        code: str,
        category: ErrorCategory,
        severity: ErrorSeverity = ErrorSeverity.ERROR,
        context: ErrorContext | None = None,
        http_status: int = 500,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.category = category
        self.severity = severity
        self.context = context or ErrorContext()
        self.http_status = http_status

    def to_response(self) -> dict:
        """Convert to standardized REST error response."""
        return {
            "error": {
                "code": self.code,
                "message": self.message,
                "category": self.category.value,
                "severity": self.severity.value,
                "status": self.http_status,
                "timestamp": self.context.timestamp.isoformat(),
                "context": {
                    "entity": self.context.entity,
                    "record_id": self.context.record_id,
                    "operation": self.context.operation,
                },
            }
        }


# ─── Validation Errors (400-level) ──────────────────────────────

class ValidationError(StorefrontError):
    """Malformed or inconsistent input."""
    def __init__(
        self,
        message: str,
        code: str = "VALIDATION_ERROR",
        context: ErrorContext | None = None,
    ):
        super().__init__(
            message, code, ErrorCategory.VALIDATION,
            ErrorSeverity.ERROR, context, 400,
        )


class EmptyCartError(ValidationError):
    """Order submitted without any line item."""
    def __init__(self, context: ErrorContext | None = None):
        super().__init__("Cart cannot be empty", "EMPTY_CART", context)


class InvalidQuantityError(ValidationError):
    """A cart line carries a quantity that is not a positive integer."""
    def __init__(self, quantity: Any = None, context: ErrorContext | None = None):
        super().__init__(
            "All quantities must be positive integers",
            "INVALID_QUANTITY", context,
        )
        self.quantity = quantity


class InvalidAmountError(ValidationError):
    """A price or claimed total is negative, infinite or NaN."""
    def __init__(self, field_name: str, value: Any = None, context: ErrorContext | None = None):
        super().__init__(
            f"{field_name} must be a finite, non-negative amount",
            "INVALID_AMOUNT", context,
        )
        self.field_name = field_name
        self.value = value


class TotalMismatchError(ValidationError):
    """Claimed total differs from the sum of line totals beyond tolerance."""
    def __init__(
        self, expected: float, received: float, context: ErrorContext | None = None,
    ):
        super().__init__(
            f"Total amount mismatch. Expected €{expected:.2f}, received €{received:.2f}",
            "TOTAL_MISMATCH", context,
        )
        self.expected = expected
        self.received = received


class UnsupportedFormatError(ValidationError):
    """Export requested in a format the exporter does not produce."""
    def __init__(self, export_format: str, context: ErrorContext | None = None):
        super().__init__(
            f"Unsupported export format: {export_format}",
            "UNSUPPORTED_FORMAT", context,
        )
        self.export_format = export_format


class InvalidFilterError(ValidationError):
    """Predicate, ordering, include or omit names a field the entity lacks."""
    def __init__(self, entity: str, field_name: str, context: ErrorContext | None = None):
        ctx = context or ErrorContext()
        ctx.entity = entity
        super().__init__(
            f"{entity} has no field '{field_name}'", "INVALID_FILTER", ctx,
        )
        self.field_name = field_name


class InvalidPaginationError(ValidationError):
    """Page size is not a positive integer."""
    def __init__(self, take: int, context: ErrorContext | None = None):
        super().__init__(
            f"Page size must be a positive integer, got {take}",
            "INVALID_PAGINATION", context,
        )


# ─── Access Errors (401/404-level) ──────────────────────────────

class AuthError(StorefrontError):
    """Missing or invalid access code."""
    def __init__(self, message: str = "Invalid code", context: ErrorContext | None = None):
        super().__init__(
            message, "UNAUTHORIZED", ErrorCategory.AUTHENTICATION,
            ErrorSeverity.WARNING, context, 401,
        )


class NotFoundError(StorefrontError):
    """Requested record does not exist."""
    def __init__(self, entity: str, record_id: str, context: ErrorContext | None = None):
        ctx = context or ErrorContext()
        ctx.entity = entity
        ctx.record_id = record_id
        super().__init__(
            f"{entity} '{record_id}' not found",
            "RESOURCE_NOT_FOUND", ErrorCategory.RESOURCE_NOT_FOUND,
            ErrorSeverity.ERROR, ctx, 404,
        )


class NoDataError(StorefrontError):
    """Export over an empty result set."""
    def __init__(self, entity: str, context: ErrorContext | None = None):
        ctx = context or ErrorContext()
        ctx.entity = entity
        ctx.operation = "export"
        super().__init__(
            "No data to export", "NO_DATA", ErrorCategory.NO_DATA,
            ErrorSeverity.WARNING, ctx, 404,
        )


# ─── Infrastructure Errors (500-level) ──────────────────────────

class PersistenceError(StorefrontError):
    """Storage collaborator rejected or failed an operation."""
    def __init__(self, message: str, operation: str, context: ErrorContext | None = None):
        ctx = context or ErrorContext()
        ctx.operation = operation
        super().__init__(
            f"Database {operation} failed: {message}",
            "PERSISTENCE_ERROR", ErrorCategory.DATABASE,
            ErrorSeverity.CRITICAL, ctx, 500,
        )


class InternalError(StorefrontError):
    """Any failure not otherwise classified."""
    def __init__(self, message: str, context: ErrorContext | None = None):
        super().__init__(
            message, "INTERNAL_ERROR", ErrorCategory.INTERNAL,
            ErrorSeverity.CRITICAL, context, 500,
        )


class NotificationError(StorefrontError):
    """Mail collaborator failed to deliver a message."""
    def __init__(self, recipient: str, message: str, context: ErrorContext | None = None):
        super().__init__(
            f"Mail delivery to {recipient} failed: {message}",
            "NOTIFICATION_ERROR", ErrorCategory.EXTERNAL_API,
            ErrorSeverity.ERROR, context, 502,
        )
        self.recipient = recipient


def as_storefront_error(
    exc: BaseException, context: ErrorContext | None = None,
) -> StorefrontError:
    """Tag an exception exactly once. Already-tagged errors pass through unchanged."""
    if isinstance(exc, StorefrontError):
        return exc
    return InternalError(str(exc) or exc.__class__.__name__, context)
