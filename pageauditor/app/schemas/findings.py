"""
Standardized finding schema.

Defines the canonical structure used to report issues and passed checks
detected on a page by any audit (performance, content weight, mobile,
accessibility levels).

This schema is:
- immutable once produced
- severity-graded
- check-traceable through its category and optional criterion

All findings included in a page report MUST conform to this schema.
"""

from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field
from pydantic import ConfigDict


# ---------------------------------------------------------------------------
# Enumerations (FROZEN CONTRACTS)
# ---------------------------------------------------------------------------


class Severity(str, Enum):
    """
    Severity level of a finding.

    Severity is check-agnostic and comparable across audits.
    Ordering is intentional and MUST remain stable.
    """

    ERROR = "error"
    WARNING = "warning"
    INFO = "info"


# ---------------------------------------------------------------------------
# Canonical Finding Object (PUBLIC, FROZEN)
# ---------------------------------------------------------------------------


class Finding(BaseModel):
    """
    Canonical audit finding.

    Represents a single detected issue or passed check. Findings are
    append-only within one check's run and never mutated afterwards;
    derived copies are produced with ``model_copy(update=...)``.
    """

    category: str = Field(
        ...,
        description=(
            "Check-specific issue class (e.g. 'lcp-slow', 'viewport', 'wcag'). "
            "Penalties are deduplicated by this value."
        ),
    )

    criterion: Optional[str] = Field(
        None,
        description="WCAG success criterion identifier (e.g. '1.1.1')",
    )

    severity: Severity = Field(
        ...,
        description="Severity level of the finding",
    )

    message: str = Field(
        ...,
        description="Short human-readable description",
    )

    value: Optional[float] = Field(
        None,
        description="Measured value that triggered the finding",
    )

    threshold: Optional[float] = Field(
        None,
        description="Threshold the measured value was compared against",
    )

    elements: List[str] = Field(
        default_factory=list,
        description="Affected elements (CSS selectors or short descriptions)",
    )

    impact: Optional[str] = Field(
        None,
        description="Optional explanation of the user-facing consequence",
    )

    level: Optional[str] = Field(
        None,
        description=(
            "Conformance level the finding was merged under "
            "(stamped by the accessibility suite)"
        ),
    )

    screenshot: Optional[str] = Field(
        None,
        description="Base64-encoded PNG highlighting the first affected element",
    )

    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
    )
