"""
HTTP / navigation audit tests.
"""

from __future__ import annotations

import pytest

from pageauditor.app.audits.base import safe
from pageauditor.app.audits.context import AuditContext
from pageauditor.app.audits.http import HttpAudit, tracked_headers
from pageauditor.app.audits.scripts import TLS_PROBE_SCRIPT
from pageauditor.app.browser.evaluator import NavigationTimeoutError
from pageauditor.tests.fixtures.fake_page import FakePageEvaluator, response

pytestmark = pytest.mark.anyio


def _context(page: FakePageEvaluator, url: str = "https://example.com/") -> AuditContext:
    return AuditContext.for_page(url=url, run_id="r", page=page)


def test_tracked_headers_lowercases_and_drops_empty():
    headers = tracked_headers(
        {
            "Content-Type": "text/html",
            "Server": "",
            "X-Frame-Options": "DENY",
            "X-Powered-By": "PHP",
        }
    )

    assert headers == {"content-type": "text/html", "x-frame-options": "DENY"}


async def test_plain_navigation():
    page = FakePageEvaluator(
        responses=[
            response("https://example.com/", 200, {"Content-Type": "text/html"}),
            response("https://example.com/app.js", 404, is_navigation=False),
        ],
        results={TLS_PROBE_SCRIPT: {"protocol": "https:", "is_secure": True}},
    )
    context = _context(page)

    await HttpAudit(wait_until="load", timeout_ms=5000).run(context)

    assert page.navigations == [("https://example.com/", "load", 5000)]
    assert context.status_code == 200
    assert context.headers == {"content-type": "text/html"}
    assert context.redirect_count == 0
    assert context.redirected_to is None
    assert context.navigation_error is None
    assert context.response_time_ms is not None
    assert context.tls_info.protocol == "https:"
    assert context.tls_info.error is None
    assert page.listener_count == 0


async def test_redirect_chain_is_recorded():
    page = FakePageEvaluator(
        responses=[
            response("http://example.com/", 301, {"Location": "https://example.com/"}),
            response("https://example.com/", 302, {"location": "https://example.com/home"}),
            response("https://example.com/home", 200, {"Server": "nginx"}),
        ],
        final_url="https://example.com/home",
        results={TLS_PROBE_SCRIPT: {"protocol": "https:", "is_secure": True}},
    )
    context = _context(page, url="http://example.com/")

    await HttpAudit().run(context)

    assert context.status_code == 200
    assert context.redirect_count == 2
    assert [(h.from_url, h.to_url, h.status) for h in context.redirect_chain] == [
        ("http://example.com/", "https://example.com/", 301),
        ("https://example.com/", "https://example.com/home", 302),
    ]
    assert context.redirected_to == "https://example.com/home"
    assert context.headers == {"server": "nginx"}


async def test_status_falls_back_to_navigation_result():
    page = FakePageEvaluator(navigation_status=503)
    context = _context(page, url="http://example.com/")

    await HttpAudit().run(context)

    assert context.status_code == 503
    assert context.tls_info is None


async def test_tls_probe_failure_falls_back():
    page = FakePageEvaluator(
        failures={TLS_PROBE_SCRIPT: RuntimeError("execution context destroyed")}
    )
    context = _context(page)

    await HttpAudit().run(context)

    assert context.tls_info.is_secure is True
    assert context.tls_info.error == "Could not retrieve detailed TLS info"
    assert context.errors == {}


async def test_navigation_timeout_is_isolated():
    page = FakePageEvaluator(
        navigation_error=NavigationTimeoutError("Timeout 30000ms exceeded")
    )
    context = _context(page)

    await safe(HttpAudit()).run(context)

    assert context.errors == {"http": "NavigationTimeoutError: Timeout 30000ms exceeded"}
    assert context.navigation_error == "NavigationTimeoutError: Timeout 30000ms exceeded"
    assert context.status_code is None
    assert context.response_time_ms is not None
    assert page.listener_count == 0
