"""Notification Dispatcher — best-effort async email delivery, detached from the request.

Invariants:
    - send() awaits delivery and raises NotificationError on failure
    - dispatch() never raises and never blocks the caller: delivery runs as a
      detached asyncio task whose outcome is only logged
    - In-flight tasks are strongly referenced until done (no GC mid-delivery)
    - No retry unless a RetryPolicy with max_attempts > 1 is supplied

Design Decisions:
    - Retry is a separate, explicit policy (exponential backoff, capped) instead
      of a hidden loop inside the transport
    - drain() gives shutdown and tests a join point without changing dispatch()
"""

import asyncio
import functools
import logging
from dataclasses import dataclass
from typing import Any

from storefront.core.errors import NotificationError, as_storefront_error
from storefront.core.repository_protocols import MailTransport

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RetryPolicy:
    """How many times to attempt a delivery, and how long to wait in between."""
    max_attempts: int = 1
    delay_ms: int = 1000
    max_delay_ms: int = 30_000

    def delay_for(self, attempt: int) -> float:
        """Seconds to wait after the given (0-based) failed attempt."""
        delay = min(self.max_delay_ms, (2 ** attempt) * self.delay_ms)
        return delay / 1000


NO_RETRY = RetryPolicy()


class NotificationDispatcher:
    """Sends mail through a MailTransport, inline or fire-and-forget."""

    def __init__(self, transport: MailTransport, retry_policy: RetryPolicy = NO_RETRY):
        self.transport = transport
        self.retry_policy = retry_policy
        self._in_flight: set[asyncio.Task] = set()

    @property
    def pending(self) -> int:
        return len(self._in_flight)

    async def send(
        self, to: str, subject: str, text: str, html: str | None = None,
    ) -> None:
        attempts = max(1, self.retry_policy.max_attempts)
        for attempt in range(attempts):
            try:
                await self.transport.send(to, subject, text, html)
                return
            except Exception as e:
                error = e if isinstance(e, NotificationError) else NotificationError(to, str(e))
                if attempt + 1 >= attempts:
                    raise error from e
                delay = self.retry_policy.delay_for(attempt)
                logger.warning(
                    f"Mail to {to} failed, retry in {delay:.1f}s: {e}",
                    extra={"recipient": to, "attempt": attempt + 1},
                )
                await asyncio.sleep(delay)

    def dispatch(
        self,
        to: str,
        subject: str,
        text: str,
        html: str | None = None,
        **log_context: Any,
    ) -> asyncio.Task:
        """Start delivery in the background and return immediately."""
        task = asyncio.create_task(self.send(to, subject, text, html))
        self._in_flight.add(task)
        task.add_done_callback(
            functools.partial(self._on_done, log_context={"recipient": to, **log_context}),
        )
        return task

    def _on_done(self, task: asyncio.Task, log_context: dict[str, Any]) -> None:
        self._in_flight.discard(task)
        if task.cancelled():
            logger.warning(
                f"Mail to {log_context['recipient']} cancelled", extra=log_context,
            )
            return
        error = task.exception()
        if error is not None:
            error = as_storefront_error(error)
            logger.error(
                f"Notification failed: {error.message}",
                extra={**log_context, "error_code": error.code},
            )

    async def drain(self) -> None:
        """Wait for every in-flight delivery to finish (outcomes already logged)."""
        if self._in_flight:
            await asyncio.gather(*list(self._in_flight), return_exceptions=True)
