from __future__ import annotations

import math
from typing import AsyncIterator

import anyio

from pageauditor.app.events.models import AuditEvent, AuditEventType

TERMINAL_EVENTS = frozenset(
    {
        AuditEventType.RUN_COMPLETED,
        AuditEventType.RUN_FAILED,
    }
)


class MemoryQueueEventEmitter:
    """
    Buffers events in memory for a single SSE consumer.

    The buffer is unbounded, so ``emit`` never waits on a slow client.
    The stream ends after a terminal run event or an explicit ``close``;
    anything emitted afterwards is dropped.
    """

    def __init__(self) -> None:
        self._send, self._receive = anyio.create_memory_object_stream(math.inf)
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    async def emit(self, event: AuditEvent) -> None:
        if self._closed:
            return

        try:
            self._send.send_nowait(event)
        except (anyio.BrokenResourceError, anyio.ClosedResourceError):
            # consumer went away; the run carries on
            self._closed = True
            return

        if event.event_type in TERMINAL_EVENTS:
            await self.close()

    async def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        await self._send.aclose()

    async def stream(self) -> AsyncIterator[AuditEvent]:
        """Yield events in emission order until the stream is closed."""
        async with self._receive:
            async for event in self._receive:
                yield event
