"""
Content weight audit tests.
"""

from __future__ import annotations

import pytest

from pageauditor.app.audits.content_weight import (
    ContentWeightAudit,
    KB,
    MB,
    format_bytes,
)
from pageauditor.app.audits.context import AuditContext
from pageauditor.app.audits.scripts import CONTENT_WEIGHT_SCRIPT
from pageauditor.app.schemas.findings import Severity
from pageauditor.tests.fixtures.fake_page import FakePageEvaluator

pytestmark = pytest.mark.anyio


def _resource(name: str, kind: str, size: int, duration: int = 100) -> dict:
    return {
        "url": f"https://cdn.example.com/{name}",
        "type": kind,
        "size": size,
        "duration": duration,
        "cached": False,
    }


async def _run(raw) -> AuditContext:
    page = FakePageEvaluator(results={CONTENT_WEIGHT_SCRIPT: raw})
    context = AuditContext.for_page(url="https://example.com", run_id="r", page=page)
    await ContentWeightAudit().run(context)
    return context


def test_format_bytes():
    assert format_bytes(0) == "0 B"
    assert format_bytes(512) == "512.0 B"
    assert format_bytes(1536) == "1.5 KB"
    assert format_bytes(MB) == "1.0 MB"


async def test_no_timing_data_yields_zero_counts():
    context = await _run(None)

    result = context.content_weight
    assert result.summary.total_size == 0
    assert result.summary.total_requests == 0
    assert result.summary.avg_request_size == "0 B"
    assert result.resources_by_type == {}
    assert result.issues == []
    assert result.score == 100
    assert result.grade == "A"


async def test_light_page_is_clean():
    context = await _run(
        {
            "resources": [
                _resource("app.js", "javascript", 40 * KB),
                _resource("site.css", "css", 10 * KB),
            ],
            "navigation_timing": {"dom_content_loaded": 300},
        }
    )

    result = context.content_weight
    assert result.summary.total_requests == 2
    assert result.resources_by_type["javascript"].count == 1
    assert result.navigation_timing == {"dom_content_loaded": 300}
    assert result.score == 100


async def test_heavy_page_penalties():
    resources = [_resource(f"img{i}.png", "image", 600 * KB) for i in range(10)]
    resources.append(_resource("slow.js", "javascript", 5 * KB, duration=2500))

    context = await _run({"resources": resources})

    result = context.content_weight
    by_category = {i.category: i for i in result.issues}

    assert by_category["total_size"].severity is Severity.ERROR
    assert by_category["large_resources"].value == 10
    assert by_category["slow_resources"].elements == [
        "https://cdn.example.com/slow.js"
    ]
    assert "request_count" not in by_category
    assert result.score == 100 - 30 - 10 - 15
    assert result.grade == "F"
    assert [r.category for r in result.recommendations] == ["images"]


async def test_request_count_thresholds():
    many = [_resource(f"r{i}.js", "javascript", 1 * KB) for i in range(60)]
    context = await _run({"resources": many})

    issue = context.content_weight.issues[0]
    assert issue.category == "request_count"
    assert issue.severity is Severity.WARNING
    assert context.content_weight.score == 90

    too_many = [_resource(f"r{i}.css", "css", 1 * KB) for i in range(101)]
    context = await _run({"resources": too_many})

    issue = context.content_weight.issues[0]
    assert issue.severity is Severity.ERROR
    assert context.content_weight.score == 80
    assert [r.category for r in context.content_weight.recommendations] == ["css"]
