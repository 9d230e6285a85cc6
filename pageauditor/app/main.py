"""
FastAPI entrypoint for the Page Auditor service.

This module defines the public HTTP interface for page audits. It accepts
one or more URLs, invokes the coordinator, and returns one PageAuditReport
per URL in request order.

Each URL is audited on its own isolated browser page; a failure on one
page never affects the others.
"""

from __future__ import annotations

import asyncio
import json
import logging
import sys
from typing import Any, List, Optional, Set
from uuid import uuid4

from fastapi import FastAPI, HTTPException
from fastapi.responses import JSONResponse, StreamingResponse
from pydantic import BaseModel, Field
from starlette.responses import Response

from pageauditor.app.config import AuditorConfig
from pageauditor.app.coordinator.coordinator import AuditCoordinator
from pageauditor.app.events import MemoryQueueEventEmitter
from pageauditor.app.schemas.page_report import PageAuditReport

logger = logging.getLogger(__name__)

ALLOWED_SCHEMES = ("http://", "https://")

# Streaming runs still in flight.
_background_runs: Set["asyncio.Task[None]"] = set()


# ---------------------------------------------------------------------------
# Presentation helpers (presentation-only)
# ---------------------------------------------------------------------------

def pretty_json(data: Any) -> str:
    """
    Pretty-print JSON for human-readable output.
    """
    return json.dumps(
        data,
        ensure_ascii=False,
        allow_nan=False,
        indent=2,
        separators=(", ", ": "),
    )


class PrettyJSONResponse(Response):
    """
    Pretty-printed JSON response for human-readable console output.
    """

    media_type = "application/json"

    def render(self, content: Any) -> bytes:
        return pretty_json(content).encode("utf-8")


# ---------------------------------------------------------------------------
# Request model
# ---------------------------------------------------------------------------

class AuditRequest(BaseModel):
    """
    Either a single ``url`` or a list of ``urls``.
    """

    url: Optional[str] = Field(None, description="Single page to audit")
    urls: List[str] = Field(
        default_factory=list,
        description="Pages to audit; reports are returned in this order",
    )

    def targets(self) -> List[str]:
        targets = list(self.urls)
        if self.url:
            targets.insert(0, self.url)
        return targets


def validate_targets(request: AuditRequest, config: AuditorConfig) -> List[str]:
    targets = [t.strip() for t in request.targets() if t and t.strip()]

    if not targets:
        raise HTTPException(
            status_code=400,
            detail="Provide 'url' or a non-empty 'urls' list",
        )

    if len(targets) > config.MAX_URLS_PER_REQUEST:
        raise HTTPException(
            status_code=413,
            detail=(
                f"At most {config.MAX_URLS_PER_REQUEST} URLs may be audited "
                "per request"
            ),
        )

    invalid = [t for t in targets if not t.lower().startswith(ALLOWED_SCHEMES)]
    if invalid:
        raise HTTPException(
            status_code=400,
            detail=f"Only http(s) URLs are supported: {invalid[0]}",
        )

    return targets


# ---------------------------------------------------------------------------
# Application setup
# ---------------------------------------------------------------------------

app = FastAPI(
    title="Page Auditor Service",
    description=(
        "Heuristic accessibility, performance, mobile and content weight "
        "audits for live web pages"
    ),
    version="0.1.0",
)


# ---------------------------------------------------------------------------
# Startup / Shutdown
# ---------------------------------------------------------------------------

@app.on_event("startup")
def startup_event() -> None:
    """
    Application startup hook.

    Configuration is loaded once and treated as immutable for the lifetime
    of the process. The browser itself starts lazily with the first page.
    """
    config = AuditorConfig.from_env()

    logging.basicConfig(
        level=config.LOG_LEVEL,
        stream=sys.stderr,
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )

    app.state.config = config
    app.state.coordinator = AuditCoordinator.from_config(config)

    logger.info(
        "Page auditor started: audits=%s concurrency=%d",
        app.state.coordinator.audit_names,
        config.CONCURRENCY,
    )


@app.on_event("shutdown")
async def shutdown_event() -> None:
    """Close the browser if one was started."""
    coordinator: Optional[AuditCoordinator] = getattr(
        app.state, "coordinator", None
    )
    if coordinator is None:
        return

    close = getattr(coordinator.page_factory, "close", None)
    if close is not None:
        await close()


# ---------------------------------------------------------------------------
# API Routes
# ---------------------------------------------------------------------------

@app.post(
    "/audit",
    response_model=List[PageAuditReport],
    response_class=PrettyJSONResponse,
    summary="Audit one or more web pages",
)
async def audit_pages(request: AuditRequest) -> List[PageAuditReport]:
    """
    Audit every requested URL and return the reports in request order.
    """
    config: AuditorConfig = app.state.config
    targets = validate_targets(request, config)

    coordinator: AuditCoordinator = app.state.coordinator
    return await coordinator.audit_urls(targets, run_id=uuid4().hex)


# ---------------------------------------------------------------------------
# Streaming Audit (SSE)
# ---------------------------------------------------------------------------

@app.post(
    "/audit/stream",
    summary="Audit one or more web pages (streaming progress)",
)
async def audit_pages_stream(request: AuditRequest):
    """
    Audit pages while streaming progress events.

    This endpoint is observational only:
    - Client disconnects do NOT cancel the run
    - Events do NOT influence execution
    - The final RUN_COMPLETED event carries every PageAuditReport
    """
    config: AuditorConfig = app.state.config
    targets = validate_targets(request, config)

    coordinator: AuditCoordinator = app.state.coordinator
    run_id = uuid4().hex
    emitter = MemoryQueueEventEmitter()

    # --------------------------------------------------------------
    # Background run execution
    # --------------------------------------------------------------
    async def run_task() -> None:
        try:
            await coordinator.audit_urls(targets, run_id=run_id, emitter=emitter)
        except Exception:
            # Coordinator already emitted RUN_FAILED
            logger.exception("Streaming run %s failed", run_id)
        finally:
            await emitter.close()

    task = asyncio.create_task(run_task())
    _background_runs.add(task)
    task.add_done_callback(_background_runs.discard)

    # --------------------------------------------------------------
    # SSE event stream
    # --------------------------------------------------------------
    async def event_stream():
        try:
            async for event in emitter.stream():
                yield event.to_sse_payload()
        except asyncio.CancelledError:
            # Client disconnected; run continues
            pass

    return StreamingResponse(
        event_stream(),
        media_type="text/event-stream",
        headers={
            "Cache-Control": "no-cache",
            "X-Accel-Buffering": "no",
        },
    )


# ---------------------------------------------------------------------------
# Health Check
# ---------------------------------------------------------------------------

@app.get(
    "/health",
    summary="Service health check",
)
def health_check() -> JSONResponse:
    """Simple health check endpoint."""
    return JSONResponse(
        content={
            "status": "ok",
            "service": "pageauditor",
        }
    )
