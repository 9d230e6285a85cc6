"""
Page evaluator boundary.

The audit core depends on the browser through this narrow capability
interface only: run a script in page scope, navigate, observe response
events and capture screenshots. Timeouts are enforced here and surface as
ordinary exceptions so that the per-audit safety wrapper can isolate them.
"""

from __future__ import annotations

from typing import Any, Callable, Dict, Optional, Protocol

from pydantic import BaseModel, ConfigDict, Field


# ----------------------------------------------------------------------
# Errors
# ----------------------------------------------------------------------
class PageEvaluatorError(RuntimeError):
    """A script evaluation or screenshot could not be completed."""


class NavigationError(PageEvaluatorError):
    """Navigation to the target URL failed."""


class NavigationTimeoutError(NavigationError):
    """Navigation did not settle within the configured wait."""


# ----------------------------------------------------------------------
# Response events
# ----------------------------------------------------------------------
class ResponseEvent(BaseModel):
    """
    One HTTP response observed by the page.

    is_navigation marks main-document responses (including each hop of a
    redirect chain); sub-resource responses carry False.
    """

    url: str
    status: int
    headers: Dict[str, str] = Field(default_factory=dict)
    timestamp: str
    is_navigation: bool = False

    model_config = ConfigDict(frozen=True, extra="forbid")


ResponseListener = Callable[[ResponseEvent], None]


class PageEvaluator(Protocol):
    """
    Capability interface over one live browser page.

    A page processes one command at a time; callers must await each call
    before issuing the next.
    """

    @property
    def url(self) -> str:
        """Current (final) URL of the page."""
        ...

    def add_response_listener(self, listener: ResponseListener) -> None:
        ...

    def remove_response_listener(self, listener: ResponseListener) -> None:
        ...

    async def navigate(
        self,
        url: str,
        *,
        wait_until: str,
        timeout_ms: int,
    ) -> Optional[int]:
        """
        Navigate and return the final document status, if any.

        Raises NavigationTimeoutError or NavigationError.
        """
        ...

    async def evaluate(self, script: str, arg: Any = None) -> Any:
        """Run a script in page scope and return its JSON-compatible result."""
        ...

    async def screenshot(self, *, full_page: bool = False) -> bytes:
        ...
