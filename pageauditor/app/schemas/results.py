"""
Per-check result schemas.

Each check family writes exactly one of these self-contained records into
the audit context. Records are never merged into a flat namespace; the
accessibility suite builds its aggregate from the per-level records.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field, ConfigDict

from pageauditor.app.schemas.findings import Finding


# ----------------------------------------------------------------------
# Network
# ----------------------------------------------------------------------
class RedirectHop(BaseModel):
    """One 3xx response observed while navigating."""

    from_url: str
    to_url: str
    status: int
    timestamp: str

    model_config = ConfigDict(frozen=True, extra="forbid")


class TlsInfo(BaseModel):
    """Security scheme observed on the final document."""

    protocol: str
    is_secure: bool
    error: Optional[str] = None

    model_config = ConfigDict(frozen=True, extra="forbid")


# ----------------------------------------------------------------------
# Performance
# ----------------------------------------------------------------------
class CoreWebVitals(BaseModel):
    largest_contentful_paint: Optional[int] = None
    first_contentful_paint: Optional[int] = None
    cumulative_layout_shift: Optional[float] = None
    interaction_to_next_paint: Optional[int] = None
    time_to_first_byte: Optional[int] = None

    model_config = ConfigDict(frozen=True, extra="forbid")


class PerformanceMetrics(BaseModel):
    dom_content_loaded: Optional[int] = None
    load_complete: Optional[int] = None
    first_paint: Optional[int] = None
    redirect_time: Optional[int] = None
    dns_time: Optional[int] = None
    connect_time: Optional[int] = None

    model_config = ConfigDict(frozen=True, extra="forbid")


class PerformanceResult(BaseModel):
    """
    Core Web Vitals assessment for one page.
    """

    score: int = Field(..., ge=0, le=100)
    grade: str
    core_web_vitals: CoreWebVitals
    metrics: PerformanceMetrics
    issues: List[Finding] = Field(default_factory=list)

    model_config = ConfigDict(frozen=True, extra="forbid")


# ----------------------------------------------------------------------
# Content weight
# ----------------------------------------------------------------------
class ResourceEntry(BaseModel):
    url: str
    type: str
    size: int
    duration: int
    cached: bool = False

    model_config = ConfigDict(frozen=True, extra="forbid")


class ResourceTypeSummary(BaseModel):
    count: int = 0
    total_size: int = 0
    avg_duration: int = 0

    model_config = ConfigDict(frozen=True, extra="forbid")


class ContentWeightSummary(BaseModel):
    total_size: int
    total_size_formatted: str
    total_requests: int
    avg_request_size: str

    model_config = ConfigDict(frozen=True, extra="forbid")


class Recommendation(BaseModel):
    """Static, table-driven optimisation advice."""

    category: str
    priority: str
    message: str
    suggestions: List[str] = Field(default_factory=list)

    model_config = ConfigDict(frozen=True, extra="forbid")


class ContentWeightResult(BaseModel):
    """
    Transferred resource weight assessment for one page.
    """

    summary: ContentWeightSummary
    resources_by_type: Dict[str, ResourceTypeSummary] = Field(default_factory=dict)
    large_resources: List[ResourceEntry] = Field(default_factory=list)
    slow_resources: List[ResourceEntry] = Field(default_factory=list)
    navigation_timing: Dict[str, Optional[int]] = Field(default_factory=dict)
    issues: List[Finding] = Field(default_factory=list)
    recommendations: List[Recommendation] = Field(default_factory=list)
    score: int = Field(..., ge=0, le=100)
    grade: str
    timestamp: str

    model_config = ConfigDict(frozen=True, extra="forbid")


# ----------------------------------------------------------------------
# Mobile
# ----------------------------------------------------------------------
class ViewportCheck(BaseModel):
    exists: bool = False
    content: Optional[str] = None
    is_responsive: bool = False
    user_scalable: bool = True

    model_config = ConfigDict(frozen=True, extra="forbid")


class MobileResult(BaseModel):
    """
    Mobile friendliness assessment for one page.

    The nested count blocks keep the raw measurements next to the
    findings derived from them.
    """

    viewport: ViewportCheck
    touch_targets: Dict[str, Any] = Field(default_factory=dict)
    text_readability: Dict[str, Any] = Field(default_factory=dict)
    layout: Dict[str, Any] = Field(default_factory=dict)
    images: Dict[str, int] = Field(default_factory=dict)
    inputs: Dict[str, int] = Field(default_factory=dict)
    plugins: int = 0
    issues: List[Finding] = Field(default_factory=list)
    recommendations: List[Recommendation] = Field(default_factory=list)
    score: int = Field(..., ge=0, le=100)
    grade: str
    timestamp: str

    model_config = ConfigDict(frozen=True, extra="forbid")


# ----------------------------------------------------------------------
# Accessibility levels
# ----------------------------------------------------------------------
class LevelResult(BaseModel):
    """
    Result of scoring one conformance level.

    IMPORTANT:
    - score never increases when violations are added
    - grade is derived from score by the shared step function
    """

    level: str
    standard: str = "WCAG 2.2"
    violations: List[Finding] = Field(default_factory=list)
    warnings: List[Finding] = Field(default_factory=list)
    passes: List[Finding] = Field(default_factory=list)
    score: int = Field(..., ge=0, le=100)
    grade: str
    violations_by_criterion: Dict[str, int] = Field(default_factory=dict)

    model_config = ConfigDict(frozen=True, extra="forbid")


class CriterionCheck(BaseModel):
    """Outcome of one newly introduced success criterion."""

    passed: bool
    issues: List[str] = Field(default_factory=list)
    score: int = Field(100, ge=0, le=100)

    model_config = ConfigDict(frozen=True, extra="forbid")


class AdvancedResult(BaseModel):
    """
    Output of the advanced accessibility audit.

    Carries two scored tiers (AAA and experimental) plus the outcome
    of each newly introduced WCAG 2.2 criterion.
    """

    new_criteria: Dict[str, CriterionCheck] = Field(default_factory=dict)
    level_aaa: LevelResult
    experimental: LevelResult

    model_config = ConfigDict(frozen=True, extra="forbid")


class ComplianceSummary(BaseModel):
    total_violations: int = 0
    total_warnings: int = 0
    total_passes: int = 0
    violations_by_level: Dict[str, int] = Field(default_factory=dict)
    violations_by_criterion: Dict[str, int] = Field(default_factory=dict)
    priority_issues: List[Finding] = Field(default_factory=list)
    compliance_level: str = "Non-Compliant"
    recommendations: List[str] = Field(default_factory=list)

    model_config = ConfigDict(frozen=True, extra="forbid")


class AggregateComplianceReport(BaseModel):
    """
    Composite accessibility report built from the per-level results.

    compliance_flags["<version>_<level>"] is true only when that level and
    every lower level were scored and carry zero violations.
    """

    levels: Dict[str, LevelResult] = Field(default_factory=dict)
    violations: List[Finding] = Field(default_factory=list)
    warnings: List[Finding] = Field(default_factory=list)
    passes: List[Finding] = Field(default_factory=list)
    new_criteria: Dict[str, CriterionCheck] = Field(default_factory=dict)
    compliance_flags: Dict[str, bool] = Field(default_factory=dict)
    compliance_score: int = Field(0, ge=0, le=100)
    summary: ComplianceSummary = Field(default_factory=ComplianceSummary)
    unscored_levels: List[str] = Field(default_factory=list)
    timestamp: str

    model_config = ConfigDict(frozen=True, extra="forbid")
