from __future__ import annotations

from typing import Protocol

from pageauditor.app.events.models import AuditEvent


class AuditEventEmitter(Protocol):
    """
    Sink for run, page and audit progress events.

    An emitter only observes. Audits never read anything back from it, and
    a sink that fails must not change any page result.
    """

    async def emit(self, event: AuditEvent) -> None:
        ...


class NullEventEmitter:
    """Discards every event. Default when nobody is listening."""

    async def emit(self, event: AuditEvent) -> None:
        return None
