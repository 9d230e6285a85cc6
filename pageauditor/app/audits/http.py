"""
HTTP / navigation audit.

Navigates the page and records what the network layer observed: final
status, tracked response headers, the redirect chain, response time and
the transport security scheme.

IMPORTANT:
- Only main-document responses update status and headers; the last one
  observed is the final document.
- A navigation failure records timing and the error, then re-raises so
  that SafeAudit isolates it. Later audits still run against whatever the
  page holds.
"""

from __future__ import annotations

import logging
import time
from typing import Dict, List, Optional, Tuple

from pageauditor.app.audits.base import describe_error
from pageauditor.app.audits.context import AuditContext
from pageauditor.app.audits.scripts import TLS_PROBE_SCRIPT
from pageauditor.app.browser.evaluator import ResponseEvent
from pageauditor.app.schemas.results import RedirectHop, TlsInfo

logger = logging.getLogger(__name__)


TRACKED_HEADERS: Tuple[str, ...] = (
    "content-type",
    "server",
    "x-frame-options",
    "x-content-type-options",
    "strict-transport-security",
    "content-security-policy",
    "x-xss-protection",
    "referrer-policy",
    "location",
    "cache-control",
    "expires",
    "etag",
    "last-modified",
    "content-encoding",
    "content-length",
)


def tracked_headers(raw: Dict[str, str]) -> Dict[str, str]:
    """Keep tracked headers only, dropping empty values."""
    lowered = {k.lower(): v for k, v in raw.items()}
    return {
        name: lowered[name]
        for name in TRACKED_HEADERS
        if lowered.get(name, "").strip()
    }


def elapsed_ms(started: float) -> int:
    return int(round((time.perf_counter() - started) * 1000))


class _ResponseRecorder:
    def __init__(self) -> None:
        self.status: Optional[int] = None
        self.headers: Dict[str, str] = {}
        self.redirects: List[RedirectHop] = []

    def __call__(self, event: ResponseEvent) -> None:
        if not event.is_navigation:
            return

        if 300 <= event.status < 400:
            location = {k.lower(): v for k, v in event.headers.items()}.get(
                "location", ""
            )
            self.redirects.append(
                RedirectHop(
                    from_url=event.url,
                    to_url=location,
                    status=event.status,
                    timestamp=event.timestamp,
                )
            )

        self.status = event.status
        self.headers = tracked_headers(event.headers)


class HttpAudit:
    name = "http"

    def __init__(
        self,
        *,
        wait_until: str = "networkidle",
        timeout_ms: int = 30_000,
    ) -> None:
        self.wait_until = wait_until
        self.timeout_ms = timeout_ms

    async def run(self, context: AuditContext) -> None:
        page = context.page
        recorder = _ResponseRecorder()
        page.add_response_listener(recorder)

        started = time.perf_counter()
        try:
            try:
                navigated_status = await page.navigate(
                    context.url,
                    wait_until=self.wait_until,
                    timeout_ms=self.timeout_ms,
                )
            except Exception as exc:
                context.response_time_ms = elapsed_ms(started)
                context.navigation_error = describe_error(exc)
                raise

            context.response_time_ms = elapsed_ms(started)
        finally:
            page.remove_response_listener(recorder)

        context.status_code = (
            recorder.status if recorder.status is not None else navigated_status
        )
        context.headers = recorder.headers
        context.redirect_count = len(recorder.redirects)
        context.redirect_chain = recorder.redirects

        final_url = page.url
        if final_url and final_url != context.url:
            context.redirected_to = final_url

        if final_url and final_url.startswith("https://"):
            context.tls_info = await self._probe_tls(context)

        logger.info(
            "Navigated to %s: status=%s redirects=%d in %d ms",
            context.url,
            context.status_code,
            context.redirect_count,
            context.response_time_ms,
        )

    async def _probe_tls(self, context: AuditContext) -> TlsInfo:
        try:
            probe = await context.page.evaluate(TLS_PROBE_SCRIPT)
            return TlsInfo(
                protocol=str(probe.get("protocol", "https:")),
                is_secure=bool(probe.get("is_secure", True)),
            )
        except Exception as exc:
            logger.debug("TLS probe failed for %s: %s", context.url, exc)
            return TlsInfo(
                protocol="https:",
                is_secure=True,
                error="Could not retrieve detailed TLS info",
            )
