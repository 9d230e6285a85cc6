"""
In-memory event capture for lifecycle assertions.
"""

from __future__ import annotations

from typing import List

from pageauditor.app.events.models import AuditEvent, AuditEventType


class ListEmitter:
    def __init__(self) -> None:
        self.events: List[AuditEvent] = []

    async def emit(self, event: AuditEvent) -> None:
        self.events.append(event)

    def of_type(self, event_type: AuditEventType) -> List[AuditEvent]:
        return [e for e in self.events if e.event_type == event_type]

    def types(self) -> List[AuditEventType]:
        return [e.event_type for e in self.events]


class BrokenEmitter:
    """Emitter whose every emit fails."""

    async def emit(self, event: AuditEvent) -> None:
        raise ConnectionError("event sink unavailable")
