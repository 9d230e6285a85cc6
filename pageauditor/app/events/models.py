from __future__ import annotations

import json
from typing import Any, Dict, Optional
from enum import Enum
from datetime import datetime, timezone
from uuid import uuid4, UUID

from pydantic import BaseModel, Field, ConfigDict


# ----------------------------------------------------------------------
# Event Types (Finite and Versioned)
# ----------------------------------------------------------------------
class AuditEventType(str, Enum):
    """
    Progression events emitted while pages are audited.

    NOTE:
    This enum is finite and versioned.
    New entries must preserve observational semantics.
    """

    # ------------------------------------------------------------------
    # Run lifecycle (one run may cover many pages)
    # ------------------------------------------------------------------
    RUN_STARTED = "run_started"
    RUN_COMPLETED = "run_completed"
    RUN_FAILED = "run_failed"

    # ------------------------------------------------------------------
    # Page lifecycle
    # ------------------------------------------------------------------
    PAGE_STARTED = "page_started"
    PAGE_COMPLETED = "page_completed"
    PAGE_FAILED = "page_failed"

    # ------------------------------------------------------------------
    # Individual checks
    # ------------------------------------------------------------------
    AUDIT_STARTED = "audit_started"
    AUDIT_COMPLETED = "audit_completed"
    AUDIT_FAILED = "audit_failed"

    # ------------------------------------------------------------------
    # Accessibility suite levels
    # ------------------------------------------------------------------
    LEVEL_SCORED = "level_scored"
    LEVEL_UNSCORED = "level_unscored"


# ----------------------------------------------------------------------
# Event Model
# ----------------------------------------------------------------------
class AuditEvent(BaseModel):
    """
    An immutable observation of a phase transition within a run.

    Events are:
    - strictly observational
    - transport-agnostic
    - not part of the page report
    """

    event_id: UUID = Field(default_factory=uuid4)
    run_id: str = Field(..., description="The run identifier")
    url: Optional[str] = Field(
        None,
        description="Page the event refers to (absent for run-level events)",
    )
    timestamp: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc)
    )
    event_type: AuditEventType

    # Optional contextual metadata (audit name, level, counts, etc.)
    details: Optional[Dict[str, Any]] = None

    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
    )

    def to_sse_payload(self) -> str:
        """
        Render the event as a single Server-Sent Events frame.
        """
        data = json.dumps(self.model_dump(mode="json"), ensure_ascii=False)
        return f"event: {self.event_type.value}\ndata: {data}\n\n"
