"""Boundary Protocols — contracts between core services and their collaborators.

Invariants:
    - Services depend on these Protocols, never on concrete SMTP/HTTP classes
    - Implementations provided by infrastructure or the routing layer via construction

Design Decisions:
    - Protocol over ABC: structural subtyping, no inheritance hierarchy
    - Async where the implementation does IO (storage, mail); the output sink is
      synchronous because it only buffers headers and bytes for the routing layer
"""

from contextlib import AbstractAsyncContextManager
from typing import Any, Protocol


class StorageHandle(Protocol):
    """Storage collaborator: one session per call, or one per explicit transaction."""
    def session(self) -> AbstractAsyncContextManager[Any]: ...
    def transaction(self) -> AbstractAsyncContextManager[Any]: ...
    async def health_check(self) -> bool: ...


class MailTransport(Protocol):
    """Mail collaborator: stateless per call, raises on delivery failure."""
    async def send(
        self, to: str, subject: str, text: str, html: str | None = None,
    ) -> None: ...


class OutputSink(Protocol):
    """Wire-level response channel supplied by the routing layer."""
    def set_header(self, name: str, value: str) -> None: ...
    def write(self, payload: bytes) -> None: ...
