"""
Content weight audit.

Classifies the page's resource timing entries by type and scores the
transferred weight. A page that reports no timing data (for example after
a failed navigation) yields a result with every count at zero.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Mapping

from pageauditor.app.audits.context import AuditContext
from pageauditor.app.audits.scoring import PenaltyLedger, grade_for_score
from pageauditor.app.audits.scripts import CONTENT_WEIGHT_SCRIPT
from pageauditor.app.schemas.findings import Finding, Severity
from pageauditor.app.schemas.results import (
    ContentWeightResult,
    ContentWeightSummary,
    Recommendation,
    ResourceEntry,
    ResourceTypeSummary,
)

logger = logging.getLogger(__name__)

KB = 1024
MB = 1024 * KB

TOTAL_SIZE_WARNING = 2 * MB
TOTAL_SIZE_ERROR = 5 * MB
REQUEST_COUNT_WARNING = 50
REQUEST_COUNT_ERROR = 100
LARGE_RESOURCE_BYTES = 500 * KB
SLOW_RESOURCE_MS = 2000

PENALTIES: Dict[str, Dict[Severity, int]] = {
    "total_size": {Severity.WARNING: 15, Severity.ERROR: 30},
    "request_count": {Severity.WARNING: 10, Severity.ERROR: 20},
    "large_resources": {Severity.WARNING: 10},
    "slow_resources": {Severity.ERROR: 15},
}

IMAGE_BUDGET_BYTES = 1 * MB
JS_FILE_BUDGET = 10
CSS_FILE_BUDGET = 5


def format_bytes(size: int) -> str:
    if size <= 0:
        return "0 B"
    units = ("B", "KB", "MB", "GB")
    index = min((int(size).bit_length() - 1) // 10, len(units) - 1)
    return f"{size / (1 << (index * 10)):.1f} {units[index]}"


def _entries(raw: Mapping[str, Any]) -> List[ResourceEntry]:
    return [
        ResourceEntry(
            url=str(item.get("url", "")),
            type=str(item.get("type", "other")),
            size=int(item.get("size") or 0),
            duration=int(item.get("duration") or 0),
            cached=bool(item.get("cached", False)),
        )
        for item in raw.get("resources") or []
    ]


def _by_type(entries: List[ResourceEntry]) -> Dict[str, ResourceTypeSummary]:
    grouped: Dict[str, List[ResourceEntry]] = {}
    for entry in entries:
        grouped.setdefault(entry.type, []).append(entry)

    return {
        kind: ResourceTypeSummary(
            count=len(items),
            total_size=sum(e.size for e in items),
            avg_duration=round(sum(e.duration for e in items) / len(items)),
        )
        for kind, items in grouped.items()
    }


def _recommendations(
    by_type: Mapping[str, ResourceTypeSummary],
) -> List[Recommendation]:
    recommendations: List[Recommendation] = []

    images = by_type.get("image")
    if images is not None and images.total_size > IMAGE_BUDGET_BYTES:
        recommendations.append(
            Recommendation(
                category="images",
                priority="high",
                message=f"Optimize images ({format_bytes(images.total_size)} total)",
                suggestions=[
                    "Use modern formats like WebP or AVIF",
                    "Implement responsive images with srcset",
                    "Compress images without quality loss",
                    "Consider lazy loading for below-fold images",
                ],
            )
        )

    scripts = by_type.get("javascript")
    if scripts is not None and scripts.count > JS_FILE_BUDGET:
        recommendations.append(
            Recommendation(
                category="javascript",
                priority="medium",
                message=f"Many JavaScript files ({scripts.count})",
                suggestions=[
                    "Bundle and minify JavaScript files",
                    "Implement code splitting",
                    "Remove unused JavaScript",
                ],
            )
        )

    styles = by_type.get("css")
    if styles is not None and styles.count > CSS_FILE_BUDGET:
        recommendations.append(
            Recommendation(
                category="css",
                priority="medium",
                message=f"Many CSS files ({styles.count})",
                suggestions=[
                    "Combine and minify CSS files",
                    "Remove unused CSS",
                    "Inline critical CSS",
                ],
            )
        )

    return recommendations


class ContentWeightAudit:
    name = "content_weight"

    async def run(self, context: AuditContext) -> None:
        raw = await context.page.evaluate(CONTENT_WEIGHT_SCRIPT) or {}

        entries = _entries(raw)
        total_size = sum(e.size for e in entries)
        total_requests = len(entries)
        large = [e for e in entries if e.size > LARGE_RESOURCE_BYTES]
        slow = [e for e in entries if e.duration > SLOW_RESOURCE_MS]

        ledger = PenaltyLedger()
        issues: List[Finding] = []

        def record(category: str, severity: Severity, message: str, **extra: Any) -> None:
            issues.append(
                Finding(category=category, severity=severity, message=message, **extra)
            )
            ledger.charge(category, PENALTIES[category].get(severity, 0))

        if total_size > TOTAL_SIZE_ERROR:
            record(
                "total_size",
                Severity.ERROR,
                f"Total page size exceeds 5MB ({format_bytes(total_size)})",
                value=total_size,
                threshold=TOTAL_SIZE_ERROR,
                impact="Very slow loading, especially on mobile connections",
            )
        elif total_size > TOTAL_SIZE_WARNING:
            record(
                "total_size",
                Severity.WARNING,
                f"Total page size exceeds 2MB ({format_bytes(total_size)})",
                value=total_size,
                threshold=TOTAL_SIZE_WARNING,
                impact="May cause slow loading on mobile connections",
            )

        if total_requests > REQUEST_COUNT_ERROR:
            record(
                "request_count",
                Severity.ERROR,
                f"Too many HTTP requests ({total_requests})",
                value=total_requests,
                threshold=REQUEST_COUNT_ERROR,
                impact="High latency due to connection overhead",
            )
        elif total_requests > REQUEST_COUNT_WARNING:
            record(
                "request_count",
                Severity.WARNING,
                f"Many HTTP requests ({total_requests})",
                value=total_requests,
                threshold=REQUEST_COUNT_WARNING,
                impact="Could benefit from resource bundling",
            )

        if large:
            record(
                "large_resources",
                Severity.WARNING,
                f"{len(large)} large resources (>500KB) found",
                value=len(large),
                elements=[e.url for e in large],
                impact="Large resources delay page rendering",
            )

        if slow:
            record(
                "slow_resources",
                Severity.ERROR,
                f"{len(slow)} slow-loading resources (>2s) found",
                value=len(slow),
                elements=[e.url for e in slow],
                impact="Slow resources block page completion",
            )

        by_type = _by_type(entries)
        score = ledger.score()

        context.content_weight = ContentWeightResult(
            summary=ContentWeightSummary(
                total_size=total_size,
                total_size_formatted=format_bytes(total_size),
                total_requests=total_requests,
                avg_request_size=(
                    format_bytes(round(total_size / total_requests))
                    if total_requests
                    else "0 B"
                ),
            ),
            resources_by_type=by_type,
            large_resources=large,
            slow_resources=slow,
            navigation_timing=dict(raw.get("navigation_timing") or {}),
            issues=issues,
            recommendations=_recommendations(by_type),
            score=score,
            grade=grade_for_score(score),
            timestamp=datetime.now(timezone.utc).isoformat(),
        )

        logger.info(
            "Content weight for %s: %s in %d requests, score=%d",
            context.url,
            format_bytes(total_size),
            total_requests,
            score,
        )
