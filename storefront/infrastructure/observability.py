"""Structured Logging — JSON formatter and one-shot logging setup for the storefront.

Invariants:
    - Every JSON line carries timestamp (record creation time, UTC), level, logger, message
    - Only the known storefront extras (entity, order_id, recipient, ...) are surfaced
    - setup_logging replaces the handler it installed before; repeated calls never duplicate output

Design Decisions:
    - stdlib logging + JSONFormatter: no extra dependency, extras passed via `extra={...}`
    - log_format "text" for local development, "json" everywhere else
"""

import json
import logging
from datetime import datetime, timezone

_EXTRA_KEYS = (
    "entity", "record_id", "order_id", "error_code", "path",
    "recipient", "export_format", "attempt",
)
_TEXT_FORMAT = "%(asctime)s %(levelname)-8s [%(name)s] %(message)s"

_handler: logging.Handler | None = None


class JSONFormatter(logging.Formatter):
    """One JSON object per log record."""

    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        payload.update(
            (key, getattr(record, key))
            for key in _EXTRA_KEYS
            if getattr(record, key, None) is not None
        )
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=False, default=str)


def setup_logging(level: str = "INFO", fmt: str = "json") -> None:
    """Install the storefront handler on the root logger."""
    global _handler
    root = logging.getLogger()
    if _handler is not None:
        root.removeHandler(_handler)

    _handler = logging.StreamHandler()
    _handler.setFormatter(
        JSONFormatter() if fmt == "json" else logging.Formatter(_TEXT_FORMAT),
    )
    root.addHandler(_handler)
    root.setLevel(logging.getLevelNamesMapping().get(level.upper(), logging.INFO))
