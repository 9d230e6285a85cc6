"""
PageAuditReport schema.

Defines the per-page report handed to the report-writing layer once every
wrapped audit has run. Field names are stable keys consumed by downstream
renderers; absent measurements stay ``None`` rather than being defaulted.
"""

from __future__ import annotations

from typing import Dict, List, Optional

from pydantic import BaseModel, Field, ConfigDict

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


REPORT_SCHEMA_VERSION = "1.0.0"


class HttpSection(BaseModel):
    status_code: Optional[int] = None
    headers: Dict[str, str] = Field(default_factory=dict)
    redirected_to: Optional[str] = None
    navigation_error: Optional[str] = None
    response_time_ms: Optional[int] = None
    redirect_count: int = 0
    redirect_chain: List[RedirectHop] = Field(default_factory=list)
    tls: Optional[TlsInfo] = None

    model_config = ConfigDict(frozen=True, extra="forbid")


class TimingSection(BaseModel):
    ttfb_ms: Optional[float] = None
    fcp_ms: Optional[float] = None
    lcp_ms: Optional[float] = None
    cls: Optional[float] = None
    inp_ms: Optional[float] = None
    dom_content_loaded_ms: Optional[float] = None
    load_complete_ms: Optional[float] = None

    model_config = ConfigDict(frozen=True, extra="forbid")


class PageAuditReport(BaseModel):
    """
    Immutable snapshot of one page visit.
    """

    schema_version: str = REPORT_SCHEMA_VERSION
    run_id: str
    url: str
    http: HttpSection
    timing: TimingSection
    performance: Optional[PerformanceResult] = None
    content_weight: Optional[ContentWeightResult] = None
    mobile: Optional[MobileResult] = None
    wcag_level_a: Optional[LevelResult] = None
    wcag_level_aa: Optional[LevelResult] = None
    wcag_advanced: Optional[AdvancedResult] = None
    accessibility: Optional[AggregateComplianceReport] = None
    errors: Dict[str, str] = Field(default_factory=dict)
    started_at: str
    finished_at: str

    model_config = ConfigDict(frozen=True, extra="forbid")
