"""Notification Dispatcher — verifies inline send, detached dispatch and retry policy.

Invariants:
    - send() raises NotificationError on failure (single attempt by default)
    - dispatch() returns immediately; failures are logged, never raised
    - drain() waits for in-flight deliveries
    - RetryPolicy retries up to max_attempts with backoff
"""

import asyncio
import logging
from unittest.mock import AsyncMock, patch

import pytest

from storefront.core.errors import NotificationError
from storefront.services.notification_dispatcher import (
    NotificationDispatcher, RetryPolicy,
)
from tests.fakes import FakeMailer


async def test_send_delivers_through_transport():
    mailer = FakeMailer()
    dispatcher = NotificationDispatcher(mailer)
    await dispatcher.send("ada@example.com", "Hi", "text", "<p>html</p>")
    assert mailer.sent[0].to == "ada@example.com"
    assert mailer.sent[0].html == "<p>html</p>"


async def test_send_raises_without_retry_by_default():
    mailer = FakeMailer(fail_for=("ada@example.com",))
    dispatcher = NotificationDispatcher(mailer)
    with pytest.raises(NotificationError):
        await dispatcher.send("ada@example.com", "Hi", "text")
    assert mailer.attempts == 1


async def test_untagged_transport_failure_becomes_notification_error():
    transport = AsyncMock()
    transport.send.side_effect = ConnectionRefusedError("refused")
    dispatcher = NotificationDispatcher(transport)
    with pytest.raises(NotificationError) as exc:
        await dispatcher.send("ada@example.com", "Hi", "text")
    assert exc.value.recipient == "ada@example.com"


async def test_dispatch_does_not_wait_for_delivery():
    release = asyncio.Event()

    class SlowMailer(FakeMailer):
        async def send(self, to, subject, text, html=None):
            await release.wait()
            await super().send(to, subject, text, html)

    mailer = SlowMailer()
    dispatcher = NotificationDispatcher(mailer)
    dispatcher.dispatch("ada@example.com", "Hi", "text")

    assert dispatcher.pending == 1
    assert mailer.sent == []
    release.set()
    await dispatcher.drain()
    assert len(mailer.sent) == 1
    assert dispatcher.pending == 0


async def test_dispatch_failure_is_logged_not_raised(caplog):
    dispatcher = NotificationDispatcher(FakeMailer(fail_for=("ada@example.com",)))
    with caplog.at_level(logging.ERROR):
        dispatcher.dispatch("ada@example.com", "Hi", "text", order_id="o-1")
        await dispatcher.drain()

    records = [r for r in caplog.records if "Notification failed" in r.getMessage()]
    assert len(records) == 1
    assert records[0].recipient == "ada@example.com"
    assert records[0].order_id == "o-1"


async def test_retry_policy_retries_until_success():
    transport = AsyncMock()
    transport.send.side_effect = [NotificationError("a@b.c", "busy"), None]
    dispatcher = NotificationDispatcher(transport, RetryPolicy(max_attempts=3, delay_ms=10))
    with patch("storefront.services.notification_dispatcher.asyncio.sleep", new=AsyncMock()) as sleep:
        await dispatcher.send("a@b.c", "Hi", "text")
    assert transport.send.await_count == 2
    sleep.assert_awaited_once_with(0.01)


async def test_retry_policy_gives_up_after_max_attempts():
    mailer = FakeMailer(fail_for=("a@b.c",))
    dispatcher = NotificationDispatcher(mailer, RetryPolicy(max_attempts=3, delay_ms=10))
    with patch("storefront.services.notification_dispatcher.asyncio.sleep", new=AsyncMock()):
        with pytest.raises(NotificationError):
            await dispatcher.send("a@b.c", "Hi", "text")
    assert mailer.attempts == 3


def test_backoff_doubles_and_caps():
    policy = RetryPolicy(max_attempts=5, delay_ms=1000, max_delay_ms=3000)
    assert policy.delay_for(0) == 1.0
    assert policy.delay_for(1) == 2.0
    assert policy.delay_for(2) == 3.0
