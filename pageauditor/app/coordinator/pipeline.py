"""
Per-page audit pipeline.

Runs an ordered list of audits against one AuditContext.

IMPORTANT:
- Audits run strictly sequentially; the page handles one command at a
  time and each audit is awaited to completion before the next starts.
- Every audit is wrapped in exactly one SafeAudit at construction time,
  so nothing raised by an audit escapes ``run``.
- Ordering is exactly the order supplied by the caller; the pipeline does
  not infer dependencies between audits.
"""

from __future__ import annotations

import logging
from typing import List, Sequence

from pageauditor.app.audits.base import Audit, SafeAudit, safe
from pageauditor.app.audits.context import AuditContext
from pageauditor.app.events import AuditEventType

logger = logging.getLogger(__name__)


class AuditPipeline:
    """
    Deterministic orchestrator for the audits of one page visit.

    This pipeline owns:
    - audit ordering (as provided at construction time)
    - execution sequencing
    - audit lifecycle events

    It does NOT own:
    - scoring or merging of results
    - navigation (that is the 'http' audit's job)
    """

    def __init__(self, audits: Sequence[Audit]) -> None:
        self._audits: List[SafeAudit] = [safe(a) for a in audits]  # freeze order

    @property
    def audit_names(self) -> List[str]:
        return [a.name for a in self._audits]

    async def run(self, context: AuditContext) -> AuditContext:
        for audit in self._audits:
            await context.emit(
                AuditEventType.AUDIT_STARTED,
                {"audit": audit.name},
            )

            await audit.run(context)

            await context.emit(
                AuditEventType.AUDIT_COMPLETED,
                {
                    "audit": audit.name,
                    "failed": audit.name in context.errors,
                },
            )

        logger.info(
            "Pipeline finished for %s: %d audits, %d failed",
            context.url,
            len(self._audits),
            len(context.errors),
        )
        return context
