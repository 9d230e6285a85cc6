"""
Playwright-backed page evaluator.

Adapts a ``playwright.async_api.Page`` to the PageEvaluator interface and
owns the browser lifecycle for a run. Each concurrently audited page gets
its own browser context and page; nothing is shared between pages.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Any, AsyncIterator, List, Optional

import anyio
from playwright.async_api import (
    Browser,
    Error as PlaywrightError,
    Page,
    Playwright,
    Response,
    TimeoutError as PlaywrightTimeoutError,
    async_playwright,
)

from pageauditor.app.browser.evaluator import (
    NavigationError,
    NavigationTimeoutError,
    PageEvaluator,
    PageEvaluatorError,
    ResponseEvent,
    ResponseListener,
)

logger = logging.getLogger(__name__)


class PlaywrightPageEvaluator:
    """
    PageEvaluator over a single Playwright page.
    """

    def __init__(self, page: Page) -> None:
        self._page = page
        self._listeners: List[ResponseListener] = []
        page.on("response", self._on_response)

    @property
    def url(self) -> str:
        return self._page.url

    def add_response_listener(self, listener: ResponseListener) -> None:
        self._listeners.append(listener)

    def remove_response_listener(self, listener: ResponseListener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def _on_response(self, response: Response) -> None:
        request = response.request
        event = ResponseEvent(
            url=response.url,
            status=response.status,
            headers=dict(response.headers),
            timestamp=datetime.now(timezone.utc).isoformat(),
            is_navigation=(
                request.is_navigation_request()
                and request.frame == self._page.main_frame
            ),
        )
        for listener in list(self._listeners):
            listener(event)

    async def navigate(
        self,
        url: str,
        *,
        wait_until: str,
        timeout_ms: int,
    ) -> Optional[int]:
        try:
            response = await self._page.goto(
                url,
                wait_until=wait_until,
                timeout=timeout_ms,
            )
        except PlaywrightTimeoutError as exc:
            raise NavigationTimeoutError(
                f"Navigation to {url} timed out after {timeout_ms} ms"
            ) from exc
        except PlaywrightError as exc:
            raise NavigationError(
                f"Navigation to {url} failed: {exc.message}"
            ) from exc

        return response.status if response is not None else None

    async def evaluate(self, script: str, arg: Any = None) -> Any:
        try:
            if arg is None:
                return await self._page.evaluate(script)
            return await self._page.evaluate(script, arg)
        except PlaywrightError as exc:
            raise PageEvaluatorError(
                f"Script evaluation failed: {exc.message}"
            ) from exc

    async def screenshot(self, *, full_page: bool = False) -> bytes:
        try:
            return await self._page.screenshot(full_page=full_page, type="png")
        except PlaywrightError as exc:
            raise PageEvaluatorError(
                f"Screenshot failed: {exc.message}"
            ) from exc


class PlaywrightPageFactory:
    """
    Owns one Chromium instance and hands out isolated pages.

    Usage::

        async with PlaywrightPageFactory(headless=True) as factory:
            async with factory.open_page() as page:
                ...
    """

    def __init__(self, *, headless: bool = True) -> None:
        self._headless = headless
        self._playwright: Optional[Playwright] = None
        self._browser: Optional[Browser] = None
        self._start_lock = anyio.Lock()

    async def start(self) -> None:
        # concurrent first pages share one launch
        async with self._start_lock:
            if self._browser is not None:
                return
            self._playwright = await async_playwright().start()
            self._browser = await self._playwright.chromium.launch(
                headless=self._headless
            )
            logger.info("Browser started (headless=%s)", self._headless)

    async def close(self) -> None:
        if self._browser is not None:
            await self._browser.close()
            self._browser = None
        if self._playwright is not None:
            await self._playwright.stop()
            self._playwright = None
            logger.info("Browser stopped")

    async def __aenter__(self) -> "PlaywrightPageFactory":
        await self.start()
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()

    @asynccontextmanager
    async def open_page(self) -> AsyncIterator[PageEvaluator]:
        await self.start()
        assert self._browser is not None

        browser_context = await self._browser.new_context()
        try:
            page = await browser_context.new_page()
            yield PlaywrightPageEvaluator(page)
        finally:
            await browser_context.close()
