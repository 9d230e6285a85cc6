"""
Fake page evaluator for audit testing.

Simulates navigation, script evaluation and screenshots without a
browser. Script results are keyed by the script constant the audit
evaluates, so each test scripts exactly the raw data it needs.

IMPORTANT:
- Deterministic
- CI-safe
- Records every call for assertions
"""

from __future__ import annotations

import copy
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Any, AsyncIterator, Callable, Dict, List, Optional, Tuple

import anyio

from pageauditor.app.browser.evaluator import ResponseEvent, ResponseListener


def response(
    url: str,
    status: int = 200,
    headers: Optional[Dict[str, str]] = None,
    *,
    is_navigation: bool = True,
) -> ResponseEvent:
    return ResponseEvent(
        url=url,
        status=status,
        headers=headers or {},
        timestamp=datetime(2024, 1, 1, tzinfo=timezone.utc).isoformat(),
        is_navigation=is_navigation,
    )


def level_raw(
    violations: Tuple[str, ...] = (),
    warnings: Tuple[str, ...] = (),
    passes: Tuple[str, ...] = (),
) -> Dict[str, List[Dict[str, Any]]]:
    """Raw level-script output with one entry per criterion given."""

    def entries(criteria: Tuple[str, ...], label: str) -> List[Dict[str, Any]]:
        return [
            {
                "criterion": c,
                "description": f"{label} {c}",
                "elements": [f"#el-{c.replace('.', '-')}"],
            }
            for c in criteria
        ]

    return {
        "violations": entries(violations, "violation"),
        "warnings": entries(warnings, "warning"),
        "passes": entries(passes, "pass"),
    }


class FakePageEvaluator:
    def __init__(
        self,
        *,
        results: Optional[Dict[str, Any]] = None,
        failures: Optional[Dict[str, Exception]] = None,
        responses: Optional[List[ResponseEvent]] = None,
        final_url: Optional[str] = None,
        navigation_status: Optional[int] = 200,
        navigation_error: Optional[Exception] = None,
        navigation_delay: float = 0.0,
        screenshot_bytes: bytes = b"\x89PNG-fake",
        screenshot_error: Optional[Exception] = None,
    ) -> None:
        self._results = dict(results or {})
        self._failures = dict(failures or {})
        self._responses = list(responses or [])
        self._final_url = final_url
        self._navigation_status = navigation_status
        self._navigation_error = navigation_error
        self._navigation_delay = navigation_delay
        self._screenshot_bytes = screenshot_bytes
        self._screenshot_error = screenshot_error
        self._listeners: List[ResponseListener] = []
        self._url = "about:blank"

        # Observability for tests
        self.navigations: List[Tuple[str, str, int]] = []
        self.evaluations: List[Tuple[str, Any]] = []
        self.screenshots_taken = 0

    @property
    def url(self) -> str:
        return self._url

    @property
    def listener_count(self) -> int:
        return len(self._listeners)

    def add_response_listener(self, listener: ResponseListener) -> None:
        self._listeners.append(listener)

    def remove_response_listener(self, listener: ResponseListener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    async def navigate(
        self,
        url: str,
        *,
        wait_until: str,
        timeout_ms: int,
    ) -> Optional[int]:
        self.navigations.append((url, wait_until, timeout_ms))

        if self._navigation_delay:
            await anyio.sleep(self._navigation_delay)

        if self._navigation_error is not None:
            raise self._navigation_error

        for event in self._responses:
            for listener in list(self._listeners):
                listener(event)

        self._url = self._final_url or url
        return self._navigation_status

    async def evaluate(self, script: str, arg: Any = None) -> Any:
        self.evaluations.append((script, arg))
        if script in self._failures:
            raise self._failures[script]
        return copy.deepcopy(self._results.get(script))

    async def screenshot(self, *, full_page: bool = False) -> bytes:
        if self._screenshot_error is not None:
            raise self._screenshot_error
        self.screenshots_taken += 1
        return self._screenshot_bytes


class FakePageFactory:
    """
    Hands out fake pages built by ``page_builder``.

    ``open_error`` makes every ``open_page`` call fail before a page exists.
    """

    def __init__(
        self,
        page_builder: Callable[[], FakePageEvaluator] = FakePageEvaluator,
        *,
        open_error: Optional[Exception] = None,
    ) -> None:
        self._page_builder = page_builder
        self._open_error = open_error
        self.opened = 0
        self.closed = 0
        self.max_open = 0
        self._open_now = 0
        self.factory_closed = False

    @asynccontextmanager
    async def open_page(self) -> AsyncIterator[FakePageEvaluator]:
        if self._open_error is not None:
            raise self._open_error

        page = self._page_builder()
        self.opened += 1
        self._open_now += 1
        self.max_open = max(self.max_open, self._open_now)
        try:
            yield page
        finally:
            self._open_now -= 1
            self.closed += 1

    async def close(self) -> None:
        self.factory_closed = True
