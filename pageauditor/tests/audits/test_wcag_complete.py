"""
Composite accessibility suite tests.

Covers level stamping, cumulative compliance flags, order-independent
merging, unscored levels and violation screenshots.
"""

from __future__ import annotations

import base64

import pytest

from pageauditor.app.audits.context import AuditContext
from pageauditor.app.audits.criteria import LEVEL_A, LEVEL_AA, LEVEL_AAA
from pageauditor.app.audits.scripts import (
    HIGHLIGHT_SCRIPT,
    WCAG_ADVANCED_SCRIPT,
    WCAG_LEVEL_A_SCRIPT,
    WCAG_LEVEL_AA_SCRIPT,
)
from pageauditor.app.audits.wcag_complete import (
    WcagCompleteAudit,
    build_summary,
    compliance_flags,
    compliance_score,
    merge_levels,
    recommendations_for,
)
from pageauditor.app.audits.wcag_levels import score_level
from pageauditor.app.events import AuditEventType
from pageauditor.app.schemas.results import CriterionCheck
from pageauditor.tests.fixtures.emitters import ListEmitter
from pageauditor.tests.fixtures.fake_page import FakePageEvaluator, level_raw

pytestmark = pytest.mark.anyio


ALL_FLAGS = (
    "wcag21_A", "wcag21_AA", "wcag21_AAA",
    "wcag22_A", "wcag22_AA", "wcag22_AAA",
)


def _context(page: FakePageEvaluator, emitter=None) -> AuditContext:
    return AuditContext.for_page(
        url="https://example.com", run_id="r", page=page, emitter=emitter
    )


# ---------------------------------------------------------------------------
# Pure functions
# ---------------------------------------------------------------------------

def test_merge_stamps_source_level():
    levels = {
        LEVEL_A: score_level(LEVEL_A, level_raw(violations=("1.1.1",), passes=("2.4.2",))),
        LEVEL_AA: score_level(LEVEL_AA, level_raw(violations=("1.4.10",), warnings=("2.4.6",))),
    }

    violations, warnings, passes = merge_levels(levels, {})

    assert [(v.criterion, v.level) for v in violations] == [
        ("1.1.1", "A"),
        ("1.4.10", "AA"),
    ]
    assert [w.level for w in warnings] == ["AA"]
    assert [p.level for p in passes] == ["A"]
    # source findings stay untouched
    assert levels[LEVEL_A].violations[0].level is None


def test_merge_is_order_independent():
    a = score_level(LEVEL_A, level_raw(violations=("1.1.1",)))
    aa = score_level(LEVEL_AA, level_raw(violations=("1.4.10",)))
    new = {
        "3.3.8": CriterionCheck(passed=False, issues=["#login"]),
        "2.4.11": CriterionCheck(passed=False),
    }

    forward = merge_levels({LEVEL_A: a, LEVEL_AA: aa}, new)
    backward = merge_levels(
        {LEVEL_AA: aa, LEVEL_A: a},
        {"2.4.11": new["2.4.11"], "3.3.8": new["3.3.8"]},
    )

    assert forward == backward


def test_failing_new_criteria_become_violations():
    new = {
        "2.4.11": CriterionCheck(passed=False, issues=["#sticky-header"]),
        "3.2.6": CriterionCheck(passed=True),
        "9.9.9": CriterionCheck(passed=False),
    }

    violations, _, _ = merge_levels({}, new)

    assert [(v.criterion, v.level, v.category) for v in violations] == [
        ("2.4.11", "AA", "wcag22-new-criterion"),
        ("9.9.9", "Unknown", "wcag22-new-criterion"),
    ]
    assert violations[0].message == "WCAG 2.2 new criterion 2.4.11 not met"
    assert violations[0].elements == ["#sticky-header"]


def test_flags_are_cumulative():
    a = score_level(LEVEL_A, level_raw(violations=("1.1.1",)))
    aa = score_level(LEVEL_AA, level_raw())
    violations, _, _ = merge_levels({LEVEL_A: a, LEVEL_AA: aa}, {})

    flags = compliance_flags([LEVEL_A, LEVEL_AA], violations)

    # AA alone is clean but A is not, so AA cannot be compliant
    assert flags["wcag22_A"] is False
    assert flags["wcag22_AA"] is False
    assert flags["wcag21_AA"] is False


def test_flags_require_every_lower_level_scored():
    assert compliance_flags([LEVEL_AA], []) == {k: False for k in ALL_FLAGS}

    flags = compliance_flags([LEVEL_A, LEVEL_AA], [])
    assert flags["wcag22_A"] is True
    assert flags["wcag22_AA"] is True
    assert flags["wcag22_AAA"] is False


def test_zero_scored_levels_give_all_flags_false():
    assert compliance_flags([], []) == {k: False for k in ALL_FLAGS}


def test_compliance_score():
    assert compliance_score(0, 0, 0) == 0
    assert compliance_score(1, 1, 2) == 50
    assert compliance_score(0, 0, 7) == 100
    assert compliance_score(2, 0, 1) == 33


def test_compliance_score_rounds_halves_up():
    assert compliance_score(7, 0, 1) == 13
    assert compliance_score(2, 1, 5) == 63
    assert compliance_score(0, 7, 1) == 13


def test_recommendations_table_then_fallback():
    assert recommendations_for({"1.1.1": 3, "4.1.2": 1}) == [
        "Add alt text to all informative images",
        "Ensure custom controls have proper ARIA attributes",
    ]
    assert recommendations_for({"2.5.8": 2, "1.4.10": 4, "2.4.7": 4}) == [
        "Priority: Fix 2.4.7 violations (4 issues)"
    ]
    assert recommendations_for({"1.4.10": 5, "2.4.7": 4}) == [
        "Priority: Fix 1.4.10 violations (5 issues)"
    ]
    assert recommendations_for({}) == []


def test_summary_counts_and_priority_issues():
    criteria = ("1.1.1", "1.2.2", "1.3.1", "1.4.2", "2.1.1", "2.2.2")
    levels = {
        LEVEL_A: score_level(LEVEL_A, level_raw(violations=criteria)),
        LEVEL_AA: score_level(LEVEL_AA, level_raw(violations=("1.4.10",))),
    }
    violations, warnings, passes = merge_levels(levels, {})
    flags = compliance_flags(levels, violations)

    summary = build_summary(violations, warnings, passes, flags)

    assert summary.total_violations == 7
    assert summary.violations_by_level == {"A": 6, "AA": 1, "AAA": 0}
    assert len(summary.priority_issues) == 5
    assert all(v.level == "A" for v in summary.priority_issues)
    assert summary.compliance_level == "Non-Compliant"


# ---------------------------------------------------------------------------
# Suite audit
# ---------------------------------------------------------------------------

async def test_clean_page_is_compliant():
    page = FakePageEvaluator(
        results={
            WCAG_LEVEL_A_SCRIPT: level_raw(passes=("1.1.1", "2.4.2")),
            WCAG_LEVEL_AA_SCRIPT: level_raw(passes=("1.4.10",)),
        }
    )
    emitter = ListEmitter()
    context = _context(page, emitter)

    await WcagCompleteAudit().run(context)

    report = context.wcag_complete
    assert set(report.levels) == {"A", "AA"}
    assert report.compliance_flags["wcag22_AA"] is True
    assert report.compliance_flags["wcag22_AAA"] is False
    assert report.compliance_score == 100
    assert report.summary.compliance_level == "WCAG 2.2 Level AA Compliant"
    assert report.unscored_levels == []
    assert [e.details["level"] for e in emitter.of_type(AuditEventType.LEVEL_SCORED)] == [
        "A",
        "AA",
    ]


async def test_failed_sub_audit_leaves_level_unscored():
    page = FakePageEvaluator(
        results={WCAG_LEVEL_A_SCRIPT: level_raw(passes=("1.1.1",))},
        failures={WCAG_LEVEL_AA_SCRIPT: RuntimeError("script crashed")},
    )
    emitter = ListEmitter()
    context = _context(page, emitter)

    await WcagCompleteAudit().run(context)

    report = context.wcag_complete
    assert context.errors == {"wcag22_level_aa": "RuntimeError: script crashed"}
    assert "wcag_complete" not in context.errors
    assert report.unscored_levels == ["AA"]
    assert report.compliance_flags["wcag22_A"] is True
    assert report.compliance_flags["wcag22_AA"] is False
    unscored = emitter.of_type(AuditEventType.LEVEL_UNSCORED)
    assert [e.details for e in unscored] == [{"level": "AA"}]


async def test_no_levels_enabled():
    context = _context(FakePageEvaluator())

    await WcagCompleteAudit(level_a=False, level_aa=False).run(context)

    report = context.wcag_complete
    assert report.levels == {}
    assert report.compliance_flags == {k: False for k in ALL_FLAGS}
    assert report.compliance_score == 0
    assert report.summary.compliance_level == "Non-Compliant"
    assert report.summary.priority_issues == []


async def test_advanced_tiers_and_new_criteria():
    page = FakePageEvaluator(
        results={
            WCAG_LEVEL_A_SCRIPT: level_raw(passes=("1.1.1",)),
            WCAG_LEVEL_AA_SCRIPT: level_raw(passes=("1.4.10",)),
            WCAG_ADVANCED_SCRIPT: {
                "new_criteria": {
                    "3.3.7": {"passed": False, "issues": ["form#checkout"], "score": 60},
                    "2.5.8": {"passed": True, "issues": [], "score": 100},
                },
                "level_aaa": level_raw(passes=("2.4.9",)),
                "experimental": level_raw(violations=("clear-language",)),
            },
        }
    )
    context = _context(page)

    await WcagCompleteAudit(level_aaa=True, experimental=True).run(context)

    report = context.wcag_complete
    assert set(report.levels) == {"A", "AA", "AAA", "experimental"}
    by_criterion = {v.criterion: v.level for v in report.violations}
    assert by_criterion == {"clear-language": "experimental", "3.3.7": "A"}
    # 3.3.7 is a level A criterion, so nothing is compliant
    assert report.compliance_flags["wcag22_A"] is False
    assert report.summary.violations_by_level["experimental"] == 1


async def test_suite_is_idempotent():
    results = {
        WCAG_LEVEL_A_SCRIPT: level_raw(violations=("1.1.1",), passes=("2.4.2",)),
        WCAG_LEVEL_AA_SCRIPT: level_raw(warnings=("2.4.6",)),
    }
    audit = WcagCompleteAudit()

    reports = []
    for _ in range(2):
        context = _context(FakePageEvaluator(results=results))
        await audit.run(context)
        reports.append(context.wcag_complete)

    # rerunning on the same context gives the same report as well
    await audit.run(context)
    reports.append(context.wcag_complete)

    first, second, third = reports
    assert first.compliance_score == second.compliance_score == third.compliance_score
    assert third.violations == first.violations

    assert first.model_dump(exclude={"timestamp"}) == second.model_dump(
        exclude={"timestamp"}
    )


async def test_screenshots_are_attached_and_capped():
    page = FakePageEvaluator(
        results={
            WCAG_LEVEL_A_SCRIPT: level_raw(violations=("1.1.1", "1.3.1", "2.4.4")),
            WCAG_LEVEL_AA_SCRIPT: level_raw(),
        }
    )
    context = _context(page)

    await WcagCompleteAudit(screenshots=True, max_screenshots=2).run(context)

    violations = context.wcag_complete.violations
    expected = base64.b64encode(b"\x89PNG-fake").decode("ascii")
    assert [v.screenshot for v in violations] == [expected, expected, None]
    assert page.screenshots_taken == 2
    highlights = [arg for script, arg in page.evaluations if script == HIGHLIGHT_SCRIPT]
    assert highlights == ["#el-1-1-1", "#el-1-3-1"]


async def test_screenshot_failure_keeps_violation():
    page = FakePageEvaluator(
        results={WCAG_LEVEL_A_SCRIPT: level_raw(violations=("1.1.1",))},
        screenshot_error=RuntimeError("target closed"),
    )
    context = _context(page)

    await WcagCompleteAudit(level_aa=False, screenshots=True).run(context)

    violations = context.wcag_complete.violations
    assert len(violations) == 1
    assert violations[0].screenshot is None
    assert context.errors == {}
