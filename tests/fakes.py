"""Test Fakes — in-memory MailTransport and record payload builders.

Invariants:
    - FakeMailer records every delivered message in order
    - fail_for makes delivery to the listed recipients raise NotificationError
"""

from dataclasses import dataclass

from storefront.core.errors import NotificationError


@dataclass
class SentMail:
    to: str
    subject: str
    text: str
    html: str | None


class FakeMailer:
    """MailTransport double; optionally fails for chosen recipients."""

    def __init__(self, fail_for: tuple[str, ...] = ()):
        self.sent: list[SentMail] = []
        self.fail_for = set(fail_for)
        self.attempts = 0

    async def send(self, to, subject, text, html=None):
        self.attempts += 1
        if to in self.fail_for:
            raise NotificationError(to, "mailbox unavailable")
        self.sent.append(SentMail(to, subject, text, html))

    def to(self, recipient: str) -> list[SentMail]:
        return [mail for mail in self.sent if mail.to == recipient]


def product_data(**overrides) -> dict:
    data = {
        "title": "Space Odyssey",
        "price": 29.99,
        "rating": 4.5,
        "genre": "Adventure",
        "category": "Games",
        "description": "A long trip through the stars.",
        "support": "PC",
        "image": "space.png",
    }
    data.update(overrides)
    return data
