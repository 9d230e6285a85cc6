"""
Core Web Vitals performance audit.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional, Tuple

from pageauditor.app.audits.context import AuditContext
from pageauditor.app.audits.scoring import PenaltyLedger, ThresholdBand, grade_for_score
from pageauditor.app.audits.scripts import PERFORMANCE_SCRIPT
from pageauditor.app.schemas.findings import Finding, Severity
from pageauditor.app.schemas.results import (
    CoreWebVitals,
    PerformanceMetrics,
    PerformanceResult,
)

logger = logging.getLogger(__name__)


# ----------------------------------------------------------------------
# Threshold tables
# ----------------------------------------------------------------------
LCP_BAND = ThresholdBand(2500, 4000, warning_penalty=20, error_penalty=40)
FCP_BAND = ThresholdBand(1800, 3000, warning_penalty=15, error_penalty=30)
CLS_BAND = ThresholdBand(0.1, 0.25, warning_penalty=8, error_penalty=15)
TTFB_BAND = ThresholdBand(800, 1800, warning_penalty=8, error_penalty=15)

# Reported, never scored.
INP_BAND = ThresholdBand(200, 500)


@dataclass(frozen=True)
class _Metric:
    category: str
    label: str
    band: ThresholdBand
    unit: str = "ms"
    poor: str = "is too slow"
    scored: bool = True

    def fmt(self, value: float) -> str:
        if self.unit == "ms":
            return f"{round(value)}ms"
        return f"{value:.3f}"

    def fmt_threshold(self) -> str:
        if self.unit == "ms":
            return f"{round(self.band.good)}ms"
        return f"{self.band.good:.1f}"


METRICS: Dict[str, _Metric] = {
    "lcp": _Metric("lcp-slow", "Largest Contentful Paint", LCP_BAND),
    "fcp": _Metric("fcp-slow", "First Contentful Paint", FCP_BAND),
    "cls": _Metric(
        "cls-high", "Cumulative Layout Shift", CLS_BAND, unit="", poor="is too high"
    ),
    "ttfb": _Metric("ttfb-slow", "Time to First Byte", TTFB_BAND),
    "inp": _Metric("inp-slow", "Interaction to Next Paint", INP_BAND, scored=False),
}


def _num(raw: Mapping[str, Any], key: str) -> Optional[float]:
    value = raw.get(key)
    if value is None:
        return None
    return float(value)


def _rounded(value: Optional[float]) -> Optional[int]:
    return None if value is None else int(round(value))


def score_vitals(
    values: Mapping[str, Optional[float]],
) -> Tuple[int, List[Finding]]:
    """
    Apply the metric bands to the measured values.

    Missing values are never penalised.
    """
    ledger = PenaltyLedger()
    findings: List[Finding] = []

    for key, metric in METRICS.items():
        value = values.get(key)
        severity = metric.band.classify(value)
        if severity is None:
            continue

        verdict = (
            metric.poor if severity is Severity.ERROR else "needs improvement"
        )

        findings.append(
            Finding(
                category=metric.category,
                severity=severity,
                message=(
                    f"{metric.label} {verdict} ({metric.fmt(value)}). "
                    f"Should be under {metric.fmt_threshold()} for good performance."
                ),
                value=value,
                threshold=metric.band.good,
            )
        )
        if metric.scored:
            ledger.charge(metric.category, metric.band.penalty_for(severity))

    return ledger.score(), findings


class PerformanceAudit:
    name = "perf"

    async def run(self, context: AuditContext) -> None:
        raw = await context.page.evaluate(PERFORMANCE_SCRIPT) or {}

        context.ttfb_ms = _num(raw, "ttfb")
        context.fcp_ms = _num(raw, "fcp")
        context.lcp_ms = _num(raw, "lcp")
        context.cls = _num(raw, "cls")
        context.inp_ms = _num(raw, "inp")
        context.dom_content_loaded_ms = _num(raw, "dcl")
        context.load_complete_ms = _num(raw, "load_end")

        score, issues = score_vitals(
            {
                "lcp": context.lcp_ms,
                "fcp": context.fcp_ms,
                "cls": context.cls,
                "ttfb": context.ttfb_ms,
                "inp": context.inp_ms,
            }
        )

        context.performance = PerformanceResult(
            score=score,
            grade=grade_for_score(score),
            core_web_vitals=CoreWebVitals(
                largest_contentful_paint=_rounded(context.lcp_ms),
                first_contentful_paint=_rounded(context.fcp_ms),
                cumulative_layout_shift=context.cls,
                interaction_to_next_paint=_rounded(context.inp_ms),
                time_to_first_byte=_rounded(context.ttfb_ms),
            ),
            metrics=PerformanceMetrics(
                dom_content_loaded=_rounded(context.dom_content_loaded_ms),
                load_complete=_rounded(context.load_complete_ms),
                first_paint=_rounded(_num(raw, "first_paint")),
                redirect_time=_rounded(_num(raw, "redirect_time")),
                dns_time=_rounded(_num(raw, "dns_time")),
                connect_time=_rounded(_num(raw, "connect_time")),
            ),
            issues=issues,
        )

        logger.info(
            "Performance for %s: score=%d grade=%s issues=%d",
            context.url,
            score,
            context.performance.grade,
            len(issues),
        )
