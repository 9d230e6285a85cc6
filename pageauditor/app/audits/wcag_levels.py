"""
Per-level accessibility audits.

Each audit runs one in-page criteria script and converts its raw output
into a LevelResult. Scoring is heuristic: 10 points per distinct violated
criterion and 2 per distinct warned criterion, clamped once.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Iterable, List, Mapping, Optional

from pageauditor.app.audits.context import AuditContext
from pageauditor.app.audits.criteria import (
    LEVEL_A,
    LEVEL_AA,
    LEVEL_AAA,
    LEVEL_EXPERIMENTAL,
)
from pageauditor.app.audits.scoring import PenaltyLedger, grade_for_score
from pageauditor.app.audits.scripts import (
    WCAG_ADVANCED_SCRIPT,
    WCAG_LEVEL_A_SCRIPT,
    WCAG_LEVEL_AA_SCRIPT,
)
from pageauditor.app.schemas.findings import Finding, Severity
from pageauditor.app.schemas.results import (
    AdvancedResult,
    CriterionCheck,
    LevelResult,
)

logger = logging.getLogger(__name__)

VIOLATION_PENALTY = 10
WARNING_PENALTY = 2

STANDARD_WCAG22 = "WCAG 2.2"
STANDARD_WCAG30 = "WCAG 3.0 (draft)"


# ----------------------------------------------------------------------
# Raw -> typed conversion
# ----------------------------------------------------------------------
def _findings(entries: Optional[Iterable[Mapping[str, Any]]], severity: Severity) -> List[Finding]:
    return [
        Finding(
            category="wcag",
            criterion=str(entry.get("criterion") or "") or None,
            severity=severity,
            message=str(entry.get("description") or ""),
            elements=[str(e) for e in entry.get("elements") or []],
        )
        for entry in entries or []
    ]


def _distinct_criteria(findings: Iterable[Finding]) -> List[str]:
    seen: Dict[str, None] = {}
    for finding in findings:
        seen.setdefault(finding.criterion or finding.message, None)
    return list(seen)


def score_level(
    level: str,
    raw: Optional[Mapping[str, Any]],
    *,
    standard: str = STANDARD_WCAG22,
) -> LevelResult:
    """
    Build a LevelResult from a level script's raw output.

    IMPORTANT:
    - adding a violation never raises the score
    - repeated findings for one criterion are charged once
    """
    raw = raw or {}
    violations = _findings(raw.get("violations"), Severity.ERROR)
    warnings = _findings(raw.get("warnings"), Severity.WARNING)
    passes = _findings(raw.get("passes"), Severity.INFO)

    ledger = PenaltyLedger()
    for criterion in _distinct_criteria(violations):
        ledger.charge(f"violation:{criterion}", VIOLATION_PENALTY)
    for criterion in _distinct_criteria(warnings):
        ledger.charge(f"warning:{criterion}", WARNING_PENALTY)

    by_criterion: Dict[str, int] = {}
    for violation in violations:
        key = violation.criterion or "Unknown"
        by_criterion[key] = by_criterion.get(key, 0) + 1

    score = ledger.score()
    return LevelResult(
        level=level,
        standard=standard,
        violations=violations,
        warnings=warnings,
        passes=passes,
        score=score,
        grade=grade_for_score(score),
        violations_by_criterion=by_criterion,
    )


def _log_level(url: str, result: LevelResult) -> None:
    logger.info(
        "Level %s for %s: violations=%d warnings=%d passes=%d score=%d",
        result.level,
        url,
        len(result.violations),
        len(result.warnings),
        len(result.passes),
        result.score,
    )


# ----------------------------------------------------------------------
# Audits
# ----------------------------------------------------------------------
class WcagLevelAAudit:
    name = "wcag22_level_a"

    async def run(self, context: AuditContext) -> None:
        raw = await context.page.evaluate(WCAG_LEVEL_A_SCRIPT)
        context.wcag_level_a = score_level(LEVEL_A, raw)
        _log_level(context.url, context.wcag_level_a)


class WcagLevelAAAudit:
    name = "wcag22_level_aa"

    async def run(self, context: AuditContext) -> None:
        raw = await context.page.evaluate(WCAG_LEVEL_AA_SCRIPT)
        context.wcag_level_aa = score_level(LEVEL_AA, raw)
        _log_level(context.url, context.wcag_level_aa)


class WcagAdvancedAudit:
    """
    New WCAG 2.2 criteria, the AAA tier and experimental outcome checks.
    """

    name = "wcag_advanced"

    async def run(self, context: AuditContext) -> None:
        raw = await context.page.evaluate(WCAG_ADVANCED_SCRIPT) or {}

        new_criteria = {
            str(criterion): CriterionCheck(
                passed=bool(check.get("passed")),
                issues=[str(i) for i in check.get("issues") or []],
                score=int(check.get("score", 100)),
            )
            for criterion, check in (raw.get("new_criteria") or {}).items()
        }

        context.wcag_advanced = AdvancedResult(
            new_criteria=new_criteria,
            level_aaa=score_level(LEVEL_AAA, raw.get("level_aaa")),
            experimental=score_level(
                LEVEL_EXPERIMENTAL,
                raw.get("experimental"),
                standard=STANDARD_WCAG30,
            ),
        )

        failed = sorted(c for c, check in new_criteria.items() if not check.passed)
        logger.info(
            "Advanced accessibility for %s: new criteria failing=%s",
            context.url,
            failed or "none",
        )
        _log_level(context.url, context.wcag_advanced.level_aaa)
        _log_level(context.url, context.wcag_advanced.experimental)
