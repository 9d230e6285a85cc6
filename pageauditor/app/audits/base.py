"""
Audit contract and the error-isolation wrapper.

SafeAudit is the only containment boundary in the audit core. Every audit
handed to the pipeline is wrapped exactly once; a failing audit is recorded
in ``context.errors`` under its name and the run continues with the next one.
"""

from __future__ import annotations

import logging
import traceback
from typing import Protocol

from pageauditor.app.audits.context import AuditContext
from pageauditor.app.events import AuditEventType

logger = logging.getLogger(__name__)

TRACE_SUMMARY_LINES = 5


class Audit(Protocol):
    """
    Interface for a single page check.

    An audit:
    - reads any context field
    - writes only the field(s) it owns
    - signals failure by raising
    - MUST NOT assume another audit has run unless documented
    """

    name: str  # stable identifier, used as the error / event key

    async def run(self, context: AuditContext) -> None:
        ...


def describe_error(exc: BaseException) -> str:
    message = str(exc)
    if not message:
        return type(exc).__name__
    return f"{type(exc).__name__}: {message}"


class SafeAudit:
    """
    Wraps exactly one audit; ``run`` never raises for ordinary exceptions.

    Re-running after a second failure overwrites the error entry.
    """

    def __init__(self, audit: Audit) -> None:
        self._audit = audit

    @property
    def name(self) -> str:
        return self._audit.name

    @property
    def wrapped(self) -> Audit:
        return self._audit

    async def run(self, context: AuditContext) -> None:
        logger.info("Running audit '%s' for %s", self.name, context.url)
        try:
            await self._audit.run(context)
        except Exception as exc:
            error = describe_error(exc)
            context.errors[self.name] = error

            trace = "".join(
                traceback.format_exception(type(exc), exc, exc.__traceback__)
            ).splitlines()[:TRACE_SUMMARY_LINES]
            logger.error(
                "Audit '%s' failed for %s: %s\n%s",
                self.name,
                context.url,
                error,
                "\n".join(trace),
            )

            await context.emit(
                AuditEventType.AUDIT_FAILED,
                {"audit": self.name, "error": error},
            )
            return

        logger.info("Completed audit '%s' for %s", self.name, context.url)


def safe(audit: Audit) -> SafeAudit:
    """
    Wrap an audit in SafeAudit, never double-wrapping.
    """
    if isinstance(audit, SafeAudit):
        return audit
    return SafeAudit(audit)
