"""
Audit pipeline sequencing tests.

The pipeline runs every audit in the supplied order, even after an earlier
audit has failed, and brackets each one with lifecycle events.
"""

from __future__ import annotations

import anyio

from pageauditor.app.audits.content_weight import ContentWeightAudit
from pageauditor.app.audits.context import AuditContext
from pageauditor.app.audits.http import HttpAudit
from pageauditor.app.audits.mobile import MobileAudit
from pageauditor.app.audits.performance import PerformanceAudit
from pageauditor.app.browser.evaluator import NavigationTimeoutError
from pageauditor.app.coordinator.pipeline import AuditPipeline
from pageauditor.app.events import AuditEventType
from pageauditor.tests.fixtures.emitters import ListEmitter
from pageauditor.tests.fixtures.fake_page import FakePageEvaluator


class RecordingAudit:
    def __init__(self, name: str, log: list, fail: bool = False) -> None:
        self.name = name
        self._log = log
        self._fail = fail

    async def run(self, context: AuditContext) -> None:
        self._log.append(self.name)
        if self._fail:
            raise RuntimeError(f"{self.name} failed")


def test_audits_run_in_order_despite_failures():
    async def _run():
        log: list = []
        emitter = ListEmitter()
        pipeline = AuditPipeline(
            [
                RecordingAudit("first", log),
                RecordingAudit("second", log, fail=True),
                RecordingAudit("third", log),
            ]
        )
        context = AuditContext.for_page(
            url="https://example.com",
            run_id="run-7",
            page=FakePageEvaluator(),
            emitter=emitter,
        )

        returned = await pipeline.run(context)

        assert returned is context
        assert log == ["first", "second", "third"]
        assert pipeline.audit_names == ["first", "second", "third"]
        assert context.errors == {"second": "RuntimeError: second failed"}

        assert emitter.types() == [
            AuditEventType.AUDIT_STARTED,
            AuditEventType.AUDIT_COMPLETED,
            AuditEventType.AUDIT_STARTED,
            AuditEventType.AUDIT_FAILED,
            AuditEventType.AUDIT_COMPLETED,
            AuditEventType.AUDIT_STARTED,
            AuditEventType.AUDIT_COMPLETED,
        ]
        completed = emitter.of_type(AuditEventType.AUDIT_COMPLETED)
        assert [e.details["failed"] for e in completed] == [False, True, False]
        assert all(e.run_id == "run-7" for e in emitter.events)

    anyio.run(_run)


def test_navigation_timeout_does_not_stop_later_audits():
    async def _run():
        page = FakePageEvaluator(
            navigation_error=NavigationTimeoutError("Timeout 30000ms exceeded")
        )
        context = AuditContext.for_page(
            url="https://slow.example.com", run_id="r", page=page
        )

        await AuditPipeline([HttpAudit(), PerformanceAudit()]).run(context)

        assert set(context.errors) == {"http"}
        assert context.status_code is None
        assert context.navigation_error is not None
        # perf still ran against whatever the page holds
        assert context.performance is not None
        assert context.performance.score == 100

    anyio.run(_run)


def test_unloaded_page_gives_deterministic_degenerate_results():
    async def _run():
        outcomes = []
        for _ in range(2):
            page = FakePageEvaluator(
                navigation_error=NavigationTimeoutError("Timeout 30000ms exceeded")
            )
            context = AuditContext.for_page(
                url="https://slow.example.com", run_id="r", page=page
            )
            await AuditPipeline(
                [HttpAudit(), ContentWeightAudit(), MobileAudit()]
            ).run(context)
            outcomes.append(context)

        first, second = outcomes
        assert first.content_weight.summary.total_requests == 0
        assert first.content_weight.summary.total_size == 0
        assert first.mobile.touch_targets == {}
        assert first.errors == second.errors == {
            "http": "NavigationTimeoutError: Timeout 30000ms exceeded"
        }
        assert first.mobile.score == second.mobile.score
        assert first.content_weight.issues == second.content_weight.issues

    anyio.run(_run)
