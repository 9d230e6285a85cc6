"""
Page audit coordinator.

IMPORTANT:
The coordinator is a traffic controller only.

It MUST NOT:
- inspect page content
- interpret findings or scores

Its sole responsibilities are:
- building the audit list from configuration
- opening one isolated browser page per URL
- bounding how many pages are audited at once
- collecting one PageAuditReport per URL, in input order
"""

from __future__ import annotations

import logging
from typing import AsyncContextManager, List, Optional, Protocol, Sequence
from uuid import uuid4

import anyio

from pageauditor.app.audits.base import Audit, describe_error
from pageauditor.app.audits.content_weight import ContentWeightAudit
from pageauditor.app.audits.context import AuditContext
from pageauditor.app.audits.http import HttpAudit
from pageauditor.app.audits.mobile import MobileAudit
from pageauditor.app.audits.performance import PerformanceAudit
from pageauditor.app.audits.wcag_complete import WcagCompleteAudit
from pageauditor.app.browser.evaluator import PageEvaluator
from pageauditor.app.config import AuditorConfig
from pageauditor.app.coordinator.pipeline import AuditPipeline
from pageauditor.app.events import (
    AuditEvent,
    AuditEventEmitter,
    AuditEventType,
    NullEventEmitter,
)
from pageauditor.app.schemas.page_report import PageAuditReport

logger = logging.getLogger(__name__)

PAGE_ERROR_KEY = "page"


class PageFactory(Protocol):
    """Hands out one isolated page per call; closes it on exit."""

    def open_page(self) -> AsyncContextManager[PageEvaluator]:
        ...


def build_audits(config: AuditorConfig) -> List[Audit]:
    """
    Build the audit sequence for one page.

    HTTP/navigation always runs first; in-page checks follow in a fixed
    order, each gated by configuration.
    """
    audits: List[Audit] = [
        HttpAudit(
            wait_until=config.NAVIGATION_WAIT_UNTIL,
            timeout_ms=config.NAVIGATION_TIMEOUT_MS,
        )
    ]

    if config.ENABLE_PERFORMANCE:
        audits.append(PerformanceAudit())

    if config.ENABLE_CONTENT_WEIGHT:
        audits.append(ContentWeightAudit())

    if config.ENABLE_MOBILE:
        audits.append(MobileAudit())

    if config.ENABLE_WCAG:
        audits.append(
            WcagCompleteAudit(
                level_a=config.WCAG_LEVEL_A,
                level_aa=config.WCAG_LEVEL_AA,
                level_aaa=config.WCAG_LEVEL_AAA,
                experimental=config.WCAG_EXPERIMENTAL,
                screenshots=config.WCAG_SCREENSHOTS,
                max_screenshots=config.MAX_VIOLATION_SCREENSHOTS,
            )
        )

    return audits


class AuditCoordinator:
    """
    Runs the audit pipeline for one or many URLs.
    """

    def __init__(
        self,
        config: AuditorConfig,
        page_factory: PageFactory,
        audits: Optional[Sequence[Audit]] = None,
    ) -> None:
        """
        Direct constructor.

        Intended for tests and explicit wiring: inject a fake page
        factory and, optionally, an explicit audit list.
        """
        self._config = config
        self._page_factory = page_factory
        self._pipeline = AuditPipeline(
            audits if audits is not None else build_audits(config)
        )

    # ------------------------------------------------------------------
    # Integration constructor (composition root)
    # ------------------------------------------------------------------

    @classmethod
    def from_config(cls, config: AuditorConfig) -> "AuditCoordinator":
        """
        Construct a coordinator backed by a real Chromium browser.
        """
        from pageauditor.app.browser.playwright_evaluator import (
            PlaywrightPageFactory,
        )

        return cls(
            config=config,
            page_factory=PlaywrightPageFactory(headless=config.BROWSER_HEADLESS),
        )

    @property
    def page_factory(self) -> PageFactory:
        return self._page_factory

    @property
    def audit_names(self) -> List[str]:
        return self._pipeline.audit_names

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    async def audit_page(
        self,
        url: str,
        *,
        run_id: Optional[str] = None,
        emitter: Optional[AuditEventEmitter] = None,
    ) -> PageAuditReport:
        """
        Audit one URL on its own page and return its report.

        A page that cannot even be opened still yields a report, with the
        failure recorded under the "page" key of ``errors``.
        """
        context = AuditContext(url=url, run_id=run_id or uuid4().hex)
        context._emitter = emitter

        await context.emit(AuditEventType.PAGE_STARTED)

        try:
            async with self._page_factory.open_page() as page:
                context._page = page
                await self._pipeline.run(context)
        except Exception as exc:
            context.errors[PAGE_ERROR_KEY] = describe_error(exc)
            logger.error("Page %s could not be audited: %s", url, exc)
            await context.emit(
                AuditEventType.PAGE_FAILED,
                {"error": context.errors[PAGE_ERROR_KEY]},
            )
        finally:
            context._page = None

        report = context.build_report()

        if PAGE_ERROR_KEY not in report.errors:
            await context.emit(
                AuditEventType.PAGE_COMPLETED,
                {
                    "status_code": report.http.status_code,
                    "failed_audits": sorted(report.errors),
                },
            )
        return report

    async def audit_urls(
        self,
        urls: Sequence[str],
        *,
        run_id: Optional[str] = None,
        emitter: Optional[AuditEventEmitter] = None,
    ) -> List[PageAuditReport]:
        """
        Audit many URLs concurrently, one page per URL.

        At most ``CONCURRENCY`` pages are open at once. Reports are
        returned in input order regardless of completion order.
        """
        run_id = run_id or uuid4().hex
        emitter = emitter or NullEventEmitter()

        await emitter.emit(
            AuditEvent(
                run_id=run_id,
                event_type=AuditEventType.RUN_STARTED,
                details={"urls": list(urls)},
            )
        )

        reports: List[Optional[PageAuditReport]] = [None] * len(urls)
        limiter = anyio.CapacityLimiter(self._config.CONCURRENCY)

        async def _worker(index: int, url: str) -> None:
            async with limiter:
                reports[index] = await self.audit_page(
                    url, run_id=run_id, emitter=emitter
                )

        try:
            async with anyio.create_task_group() as tg:
                for index, url in enumerate(urls):
                    tg.start_soon(_worker, index, url)
        except Exception as exc:
            await emitter.emit(
                AuditEvent(
                    run_id=run_id,
                    event_type=AuditEventType.RUN_FAILED,
                    details={
                        "error": str(exc),
                        "exception_type": type(exc).__name__,
                    },
                )
            )
            raise

        completed = [r for r in reports if r is not None]

        await emitter.emit(
            AuditEvent(
                run_id=run_id,
                event_type=AuditEventType.RUN_COMPLETED,
                details={
                    "pages": len(completed),
                    "pages_with_errors": sum(1 for r in completed if r.errors),
                    "reports": [r.model_dump(mode="json") for r in completed],
                },
            )
        )

        return completed
