"""
AuditContext and page report extraction tests.
"""

from __future__ import annotations

import anyio
import pytest

from pageauditor.app.audits.context import AuditContext
from pageauditor.app.events import AuditEventType
from pageauditor.app.schemas.page_report import PageAuditReport
from pageauditor.tests.fixtures.emitters import BrokenEmitter


def test_context_without_page_refuses_access():
    context = AuditContext(url="https://example.com", run_id="r")

    with pytest.raises(RuntimeError):
        context.page


def test_context_rejects_undeclared_fields():
    with pytest.raises(Exception):
        AuditContext(url="https://example.com", run_id="r", seo_score=10)


def test_report_snapshot_keeps_absent_measurements_null():
    context = AuditContext(url="https://example.com", run_id="r")
    context.status_code = 200
    context.headers = {"server": "nginx"}
    context.lcp_ms = 1234.5
    context.errors["mobile"] = "ValueError: bad"

    report = context.build_report()

    assert isinstance(report, PageAuditReport)
    assert report.http.status_code == 200
    assert report.http.headers == {"server": "nginx"}
    assert report.timing.lcp_ms == 1234.5
    assert report.timing.fcp_ms is None
    assert report.performance is None
    assert report.accessibility is None
    assert report.errors == {"mobile": "ValueError: bad"}
    assert report.finished_at is not None

    # the snapshot is detached from later context mutation
    context.errors["perf"] = "late"
    assert "perf" not in report.errors


def test_report_serializes_to_json():
    context = AuditContext(url="https://example.com", run_id="r")
    payload = context.build_report().model_dump(mode="json")

    assert payload["url"] == "https://example.com"
    assert payload["http"]["redirect_chain"] == []
    assert "_page" not in payload


def test_emit_swallows_emitter_failures():
    async def _run():
        context = AuditContext(url="https://example.com", run_id="r")
        context._emitter = BrokenEmitter()

        await context.emit(AuditEventType.PAGE_STARTED)

    anyio.run(_run)
