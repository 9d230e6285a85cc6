from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field, ConfigDict, PrivateAttr

from pageauditor.app.browser.evaluator import PageEvaluator
from pageauditor.app.events import (
    AuditEvent,
    AuditEventEmitter,
    AuditEventType,
    NullEventEmitter,
)
from pageauditor.app.schemas.page_report import (
    HttpSection,
    PageAuditReport,
    TimingSection,
)
from pageauditor.app.schemas.results import (
    AdvancedResult,
    AggregateComplianceReport,
    ContentWeightResult,
    LevelResult,
    MobileResult,
    PerformanceResult,
    RedirectHop,
    TlsInfo,
)

logger = logging.getLogger(__name__)


def utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


class AuditContext(BaseModel):
    """
    Mutable blackboard shared by every audit of one page visit.

    Each declared field is owned (written) by exactly one audit and may be
    read by any other. New check outputs are added by declaring a field
    here, never by attaching attributes at runtime.

    IMPORTANT:
    - Absent measurements stay ``None``; audits never default them.
    - ``errors`` only ever gains entries through SafeAudit.
    - The page evaluator and the event emitter are runtime plumbing and
      are not part of the serialized report.
    """

    # ------------------------------------------------------------------
    # Identity
    # ------------------------------------------------------------------

    url: str = Field(..., description="Target URL requested by the caller")
    run_id: str = Field(..., description="Run identifier shared by all pages")

    status_code: Optional[int] = Field(
        None,
        description="Final main-document status code (owned by 'http')",
    )

    redirected_to: Optional[str] = Field(
        None,
        description="Final resolved URL when it differs from the target",
    )

    # ------------------------------------------------------------------
    # Network (owned by 'http')
    # ------------------------------------------------------------------

    redirect_count: int = 0
    redirect_chain: List[RedirectHop] = Field(default_factory=list)
    headers: Dict[str, str] = Field(default_factory=dict)
    response_time_ms: Optional[int] = None
    navigation_error: Optional[str] = None
    tls_info: Optional[TlsInfo] = None

    # ------------------------------------------------------------------
    # Timing (owned by 'perf')
    # ------------------------------------------------------------------

    ttfb_ms: Optional[float] = None
    fcp_ms: Optional[float] = None
    lcp_ms: Optional[float] = None
    cls: Optional[float] = None
    inp_ms: Optional[float] = None
    dom_content_loaded_ms: Optional[float] = None
    load_complete_ms: Optional[float] = None

    # ------------------------------------------------------------------
    # Result blobs (one per check family)
    # ------------------------------------------------------------------

    performance: Optional[PerformanceResult] = None
    content_weight: Optional[ContentWeightResult] = None
    mobile: Optional[MobileResult] = None
    wcag_level_a: Optional[LevelResult] = None
    wcag_level_aa: Optional[LevelResult] = None
    wcag_advanced: Optional[AdvancedResult] = None
    wcag_complete: Optional[AggregateComplianceReport] = None

    # ------------------------------------------------------------------
    # Error map (owned by SafeAudit)
    # ------------------------------------------------------------------

    errors: Dict[str, str] = Field(
        default_factory=dict,
        description="Audit name -> error description; absent means clean",
    )

    started_at: str = Field(default_factory=utc_now_iso)

    # ------------------------------------------------------------------
    # Runtime-only plumbing (NOT model fields)
    # ------------------------------------------------------------------

    _page: Optional[PageEvaluator] = PrivateAttr(default=None)
    _emitter: Optional[AuditEventEmitter] = PrivateAttr(default=None)

    model_config = ConfigDict(
        extra="forbid",
        arbitrary_types_allowed=True,
    )

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------

    @classmethod
    def for_page(
        cls,
        *,
        url: str,
        run_id: str,
        page: PageEvaluator,
        emitter: Optional[AuditEventEmitter] = None,
    ) -> "AuditContext":
        context = cls(url=url, run_id=run_id)
        context._page = page
        context._emitter = emitter
        return context

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------

    @property
    def page(self) -> PageEvaluator:
        if self._page is None:
            raise RuntimeError("No page evaluator attached to this context")
        return self._page

    @property
    def emitter(self) -> AuditEventEmitter:
        return self._emitter or NullEventEmitter()

    async def emit(
        self,
        event_type: AuditEventType,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        """
        Emit a page-scoped event.

        Emission is observational: failures are logged and dropped.
        """
        try:
            await self.emitter.emit(
                AuditEvent(
                    run_id=self.run_id,
                    url=self.url,
                    event_type=event_type,
                    details=details,
                )
            )
        except Exception:
            logger.debug(
                "Dropped %s event for %s", event_type.value, self.url,
                exc_info=True,
            )

    # ------------------------------------------------------------------
    # Report extraction
    # ------------------------------------------------------------------

    def build_report(self) -> PageAuditReport:
        """
        Snapshot the context into the stable, serializable page report.
        """
        return PageAuditReport(
            run_id=self.run_id,
            url=self.url,
            http=HttpSection(
                status_code=self.status_code,
                headers=dict(self.headers),
                redirected_to=self.redirected_to,
                navigation_error=self.navigation_error,
                response_time_ms=self.response_time_ms,
                redirect_count=self.redirect_count,
                redirect_chain=list(self.redirect_chain),
                tls=self.tls_info,
            ),
            timing=TimingSection(
                ttfb_ms=self.ttfb_ms,
                fcp_ms=self.fcp_ms,
                lcp_ms=self.lcp_ms,
                cls=self.cls,
                inp_ms=self.inp_ms,
                dom_content_loaded_ms=self.dom_content_loaded_ms,
                load_complete_ms=self.load_complete_ms,
            ),
            performance=self.performance,
            content_weight=self.content_weight,
            mobile=self.mobile,
            wcag_level_a=self.wcag_level_a,
            wcag_level_aa=self.wcag_level_aa,
            wcag_advanced=self.wcag_advanced,
            accessibility=self.wcag_complete,
            errors=dict(self.errors),
            started_at=self.started_at,
            finished_at=utc_now_iso(),
        )
