"""
Complete accessibility suite.

Runs the enabled per-level audits, merges their findings under their
source level and derives cumulative compliance flags, a compliance score
and a summary.

IMPORTANT:
- Each sub-audit runs under its own SafeAudit. A level whose result is
  missing afterwards is recorded as unscored, never as a suite failure.
- Merging is a pure function of the per-level results; the order in
  which levels were produced does not affect the merged output.
- A level-L compliance flag requires every level up to L to have been
  enabled and scored, with zero violations tagged at any of those levels.
"""

from __future__ import annotations

import base64
import logging
from collections import Counter
from datetime import datetime, timezone
from typing import Dict, Iterable, List, Mapping, Optional, Sequence, Set, Tuple

from pageauditor.app.audits.base import safe
from pageauditor.app.audits.context import AuditContext
from pageauditor.app.audits.criteria import (
    COMPLIANCE_LABELS,
    COMPLIANCE_VERSIONS,
    CUMULATIVE_LEVELS,
    FALLBACK_RECOMMENDATION,
    LEVEL_A,
    LEVEL_AA,
    LEVEL_AAA,
    LEVEL_EXPERIMENTAL,
    LEVEL_ORDER,
    LEVEL_UNKNOWN,
    NON_COMPLIANT_LABEL,
    PRIORITY_ISSUE_LIMIT,
    RECOMMENDATIONS,
    flag_key,
    level_for_new_criterion,
)
from pageauditor.app.audits.scripts import HIGHLIGHT_SCRIPT
from pageauditor.app.audits.wcag_levels import (
    WcagAdvancedAudit,
    WcagLevelAAAudit,
    WcagLevelAAudit,
)
from pageauditor.app.events import AuditEventType
from pageauditor.app.schemas.findings import Finding, Severity
from pageauditor.app.schemas.results import (
    AggregateComplianceReport,
    ComplianceSummary,
    CriterionCheck,
    LevelResult,
)

logger = logging.getLogger(__name__)


# ----------------------------------------------------------------------
# Pure merge / compliance / summary functions
# ----------------------------------------------------------------------
def _level_rank(level: str) -> Tuple[int, str]:
    if level in LEVEL_ORDER:
        return LEVEL_ORDER.index(level), level
    return len(LEVEL_ORDER), level


def _stamp(findings: Iterable[Finding], level: str) -> List[Finding]:
    return [f.model_copy(update={"level": level}) for f in findings]


def merge_levels(
    levels: Mapping[str, LevelResult],
    new_criteria: Mapping[str, CriterionCheck],
) -> Tuple[List[Finding], List[Finding], List[Finding]]:
    """
    Stamp every finding with its source level and concatenate.

    Failing new criteria become violations tagged through the static
    criterion -> level table ("Unknown" when absent).
    Returns ``(violations, warnings, passes)``.
    """
    violations: List[Finding] = []
    warnings: List[Finding] = []
    passes: List[Finding] = []

    for level in sorted(levels, key=_level_rank):
        result = levels[level]
        violations.extend(_stamp(result.violations, level))
        warnings.extend(_stamp(result.warnings, level))
        passes.extend(_stamp(result.passes, level))

    for criterion in sorted(new_criteria):
        check = new_criteria[criterion]
        if check.passed:
            continue
        violations.append(
            Finding(
                category="wcag22-new-criterion",
                criterion=criterion,
                severity=Severity.ERROR,
                message=f"WCAG 2.2 new criterion {criterion} not met",
                elements=list(check.issues),
                level=level_for_new_criterion(criterion),
            )
        )

    return violations, warnings, passes


def compliance_flags(
    scored_levels: Iterable[str],
    violations: Sequence[Finding],
) -> Dict[str, bool]:
    """
    Cumulative flags per WCAG version and level.

    With no scored levels every flag is false.
    """
    scored: Set[str] = set(scored_levels)
    violated: Set[str] = {v.level for v in violations if v.level}

    flags: Dict[str, bool] = {}
    for index, level in enumerate(CUMULATIVE_LEVELS):
        required = CUMULATIVE_LEVELS[: index + 1]
        clean = all(r in scored for r in required) and not any(
            r in violated for r in required
        )
        for version in COMPLIANCE_VERSIONS:
            flags[flag_key(version, level)] = clean
    return flags


def compliance_score(violations: int, warnings: int, passes: int) -> int:
    total = violations + warnings + passes
    if total == 0:
        return 0
    # round half up: 1 of 8 scores 13
    return (passes * 200 + total) // (2 * total)


def compliance_label(flags: Mapping[str, bool]) -> str:
    for key, label in COMPLIANCE_LABELS:
        if flags.get(key):
            return label
    return NON_COMPLIANT_LABEL


def recommendations_for(by_criterion: Mapping[str, int]) -> List[str]:
    advice = [
        text for criterion, text in RECOMMENDATIONS.items()
        if criterion in by_criterion
    ]
    if not advice and by_criterion:
        # scanning in reverse makes the last maximal entry win ties
        criterion, count = max(
            reversed(list(by_criterion.items())), key=lambda kv: kv[1]
        )
        advice.append(
            FALLBACK_RECOMMENDATION.format(criterion=criterion, count=count)
        )
    return advice


def build_summary(
    violations: Sequence[Finding],
    warnings: Sequence[Finding],
    passes: Sequence[Finding],
    flags: Mapping[str, bool],
) -> ComplianceSummary:
    by_criterion: Dict[str, int] = dict(
        Counter(v.criterion or LEVEL_UNKNOWN for v in violations)
    )

    by_level: Dict[str, int] = {LEVEL_A: 0, LEVEL_AA: 0, LEVEL_AAA: 0}
    for violation in violations:
        key = violation.level or LEVEL_UNKNOWN
        by_level[key] = by_level.get(key, 0) + 1

    priority = [v for v in violations if v.level == LEVEL_A][:PRIORITY_ISSUE_LIMIT]

    return ComplianceSummary(
        total_violations=len(violations),
        total_warnings=len(warnings),
        total_passes=len(passes),
        violations_by_level=by_level,
        violations_by_criterion=by_criterion,
        priority_issues=priority,
        compliance_level=compliance_label(flags),
        recommendations=recommendations_for(by_criterion),
    )


# ----------------------------------------------------------------------
# Suite audit
# ----------------------------------------------------------------------
class WcagCompleteAudit:
    name = "wcag_complete"

    def __init__(
        self,
        *,
        level_a: bool = True,
        level_aa: bool = True,
        level_aaa: bool = False,
        experimental: bool = False,
        screenshots: bool = False,
        max_screenshots: int = 10,
    ) -> None:
        self.level_a = level_a
        self.level_aa = level_aa
        self.level_aaa = level_aaa
        self.experimental = experimental
        self.screenshots = screenshots
        self.max_screenshots = max_screenshots

    @property
    def enabled_levels(self) -> List[str]:
        enabled = []
        if self.level_a:
            enabled.append(LEVEL_A)
        if self.level_aa:
            enabled.append(LEVEL_AA)
        if self.level_aaa:
            enabled.append(LEVEL_AAA)
        if self.experimental:
            enabled.append(LEVEL_EXPERIMENTAL)
        return enabled

    async def run(self, context: AuditContext) -> None:
        logger.info(
            "Running accessibility suite for %s (levels=%s)",
            context.url,
            self.enabled_levels or "none",
        )

        levels, new_criteria = await self._run_levels(context)
        unscored = [lvl for lvl in self.enabled_levels if lvl not in levels]

        violations, warnings, passes = merge_levels(levels, new_criteria)

        if self.screenshots and violations:
            violations = await self._attach_screenshots(context, violations)

        flags = compliance_flags(levels, violations)
        summary = build_summary(violations, warnings, passes, flags)

        context.wcag_complete = AggregateComplianceReport(
            levels=levels,
            violations=violations,
            warnings=warnings,
            passes=passes,
            new_criteria=dict(new_criteria),
            compliance_flags=flags,
            compliance_score=compliance_score(
                len(violations), len(warnings), len(passes)
            ),
            summary=summary,
            unscored_levels=unscored,
            timestamp=datetime.now(timezone.utc).isoformat(),
        )

        logger.info(
            "Accessibility for %s: %s, score=%d%%, violations=%d "
            "warnings=%d passes=%d unscored=%s",
            context.url,
            summary.compliance_level,
            context.wcag_complete.compliance_score,
            summary.total_violations,
            summary.total_warnings,
            summary.total_passes,
            unscored or "none",
        )

    # ------------------------------------------------------------------
    # Sub-audits
    # ------------------------------------------------------------------
    async def _run_levels(
        self, context: AuditContext
    ) -> Tuple[Dict[str, LevelResult], Dict[str, CriterionCheck]]:
        levels: Dict[str, LevelResult] = {}
        new_criteria: Dict[str, CriterionCheck] = {}

        if self.level_a:
            context.wcag_level_a = None
            await safe(WcagLevelAAudit()).run(context)
            await self._collect(context, levels, LEVEL_A, context.wcag_level_a)

        if self.level_aa:
            context.wcag_level_aa = None
            await safe(WcagLevelAAAudit()).run(context)
            await self._collect(context, levels, LEVEL_AA, context.wcag_level_aa)

        if self.level_aaa or self.experimental:
            context.wcag_advanced = None
            await safe(WcagAdvancedAudit()).run(context)
            advanced = context.wcag_advanced
            if advanced is not None:
                new_criteria.update(advanced.new_criteria)
            if self.level_aaa:
                await self._collect(
                    context, levels, LEVEL_AAA,
                    advanced.level_aaa if advanced else None,
                )
            if self.experimental:
                await self._collect(
                    context, levels, LEVEL_EXPERIMENTAL,
                    advanced.experimental if advanced else None,
                )

        return levels, new_criteria

    @staticmethod
    async def _collect(
        context: AuditContext,
        levels: Dict[str, LevelResult],
        level: str,
        result: Optional[LevelResult],
    ) -> None:
        if result is None:
            logger.warning("Level %s unscored for %s", level, context.url)
            await context.emit(AuditEventType.LEVEL_UNSCORED, {"level": level})
            return

        levels[level] = result
        await context.emit(
            AuditEventType.LEVEL_SCORED,
            {
                "level": level,
                "score": result.score,
                "grade": result.grade,
                "violations": len(result.violations),
            },
        )

    # ------------------------------------------------------------------
    # Screenshots
    # ------------------------------------------------------------------
    async def _attach_screenshots(
        self,
        context: AuditContext,
        violations: List[Finding],
    ) -> List[Finding]:
        annotated: List[Finding] = []
        for index, violation in enumerate(violations):
            if index >= self.max_screenshots:
                annotated.append(violation)
                continue
            try:
                if violation.elements:
                    await context.page.evaluate(
                        HIGHLIGHT_SCRIPT, violation.elements[0]
                    )
                png = await context.page.screenshot(full_page=False)
            except Exception as exc:
                logger.warning(
                    "Screenshot for %s violation on %s failed: %s",
                    violation.criterion,
                    context.url,
                    exc,
                )
                annotated.append(violation)
                continue

            annotated.append(
                violation.model_copy(
                    update={"screenshot": base64.b64encode(png).decode("ascii")}
                )
            )
        return annotated
