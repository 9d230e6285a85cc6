"""
Runtime configuration for the Page Auditor service.

This module centralizes environment-driven configuration and feature flags.
It defines which checks are enabled, which conformance levels the
accessibility suite scores, and how the browser is driven.

Configuration is read-only at runtime and is parsed once at startup.
"""

from __future__ import annotations

import logging
import os
from pydantic import BaseModel, Field, field_validator, ValidationInfo


ALLOWED_WAIT_POLICIES = {"load", "domcontentloaded", "networkidle", "commit"}


class AuditorConfig(BaseModel):
    """
    Runtime configuration for the Page Auditor service.

    Configuration is environment-driven and immutable once loaded.
    """

    # ------------------------------------------------------------------
    # Check gates
    # ------------------------------------------------------------------

    ENABLE_PERFORMANCE: bool = Field(
        True,
        description="Enable Core Web Vitals performance scoring",
    )

    ENABLE_CONTENT_WEIGHT: bool = Field(
        True,
        description="Enable transferred resource weight analysis",
    )

    ENABLE_MOBILE: bool = Field(
        True,
        description="Enable mobile friendliness checks",
    )

    ENABLE_WCAG: bool = Field(
        True,
        description="Enable the complete WCAG accessibility suite",
    )

    # ------------------------------------------------------------------
    # WCAG suite configuration
    # ------------------------------------------------------------------

    WCAG_LEVEL_A: bool = Field(
        True,
        description="Score WCAG 2.2 Level A criteria",
    )

    WCAG_LEVEL_AA: bool = Field(
        True,
        description="Score WCAG 2.2 Level AA criteria",
    )

    WCAG_LEVEL_AAA: bool = Field(
        False,
        description="Score Level AAA criteria (advanced audit)",
    )

    WCAG_EXPERIMENTAL: bool = Field(
        False,
        description="Score experimental WCAG 3.0 heuristics (advanced audit)",
    )

    WCAG_SCREENSHOTS: bool = Field(
        False,
        description="Capture one highlighted screenshot per violation",
    )

    MAX_VIOLATION_SCREENSHOTS: int = Field(
        10,
        ge=0,
        description="Upper bound on violation screenshots per page",
    )

    # ------------------------------------------------------------------
    # Browser / navigation
    # ------------------------------------------------------------------

    NAVIGATION_TIMEOUT_MS: int = Field(
        30_000,
        gt=0,
        description="Bounded navigation wait in milliseconds",
    )

    NAVIGATION_WAIT_UNTIL: str = Field(
        "networkidle",
        description="Navigation wait policy passed to the browser",
    )

    BROWSER_HEADLESS: bool = Field(
        True,
        description="Run the browser without a visible window",
    )

    # ------------------------------------------------------------------
    # Multi-page runs
    # ------------------------------------------------------------------

    CONCURRENCY: int = Field(
        2,
        gt=0,
        description="Number of pages audited concurrently",
    )

    MAX_URLS_PER_REQUEST: int = Field(
        50,
        gt=0,
        description="Maximum number of URLs accepted by one API request",
    )

    # ------------------------------------------------------------------
    # Logging
    # ------------------------------------------------------------------

    LOG_LEVEL: str = Field(
        "INFO",
        description="Root logging level applied at startup",
    )

    # ------------------------------------------------------------------
    # Validators (Pydantic v2)
    # ------------------------------------------------------------------

    @field_validator("NAVIGATION_WAIT_UNTIL")
    @classmethod
    def validate_wait_policy(cls, v: str) -> str:
        if v not in ALLOWED_WAIT_POLICIES:
            raise ValueError(
                f"Unsupported NAVIGATION_WAIT_UNTIL '{v}'. "
                f"Allowed values: {sorted(ALLOWED_WAIT_POLICIES)}"
            )
        return v

    @field_validator("WCAG_SCREENSHOTS")
    @classmethod
    def screenshots_require_wcag(
        cls, v: bool, info: ValidationInfo
    ) -> bool:
        if v and not info.data.get("ENABLE_WCAG"):
            raise ValueError(
                "WCAG_SCREENSHOTS is set but ENABLE_WCAG is disabled."
            )
        return v

    @field_validator("LOG_LEVEL")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        level = v.upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"Unknown LOG_LEVEL '{v}'.")
        return level

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------

    @classmethod
    def from_env(cls) -> "AuditorConfig":
        """
        Load configuration from environment variables.

        All values are parsed once at startup and must remain immutable.
        """

        def env_bool(name: str, default: bool) -> bool:
            raw = os.getenv(name)
            if raw is None:
                return default
            return raw.lower() in {"1", "true", "yes", "on"}

        return cls(
            ENABLE_PERFORMANCE=env_bool(
                "PAGEAUDITOR_ENABLE_PERFORMANCE", True
            ),
            ENABLE_CONTENT_WEIGHT=env_bool(
                "PAGEAUDITOR_ENABLE_CONTENT_WEIGHT", True
            ),
            ENABLE_MOBILE=env_bool(
                "PAGEAUDITOR_ENABLE_MOBILE", True
            ),
            ENABLE_WCAG=env_bool(
                "PAGEAUDITOR_ENABLE_WCAG", True
            ),
            WCAG_LEVEL_A=env_bool(
                "PAGEAUDITOR_WCAG_LEVEL_A", True
            ),
            WCAG_LEVEL_AA=env_bool(
                "PAGEAUDITOR_WCAG_LEVEL_AA", True
            ),
            WCAG_LEVEL_AAA=env_bool(
                "PAGEAUDITOR_WCAG_LEVEL_AAA", False
            ),
            WCAG_EXPERIMENTAL=env_bool(
                "PAGEAUDITOR_WCAG_EXPERIMENTAL", False
            ),
            WCAG_SCREENSHOTS=env_bool(
                "PAGEAUDITOR_WCAG_SCREENSHOTS", False
            ),
            MAX_VIOLATION_SCREENSHOTS=int(
                os.getenv("PAGEAUDITOR_MAX_VIOLATION_SCREENSHOTS", "10")
            ),
            NAVIGATION_TIMEOUT_MS=int(
                os.getenv("PAGEAUDITOR_NAVIGATION_TIMEOUT_MS", "30000")
            ),
            NAVIGATION_WAIT_UNTIL=os.getenv(
                "PAGEAUDITOR_NAVIGATION_WAIT_UNTIL", "networkidle"
            ),
            BROWSER_HEADLESS=env_bool(
                "PAGEAUDITOR_BROWSER_HEADLESS", True
            ),
            CONCURRENCY=int(
                os.getenv("PAGEAUDITOR_CONCURRENCY", "2")
            ),
            MAX_URLS_PER_REQUEST=int(
                os.getenv("PAGEAUDITOR_MAX_URLS_PER_REQUEST", "50")
            ),
            LOG_LEVEL=os.getenv(
                "PAGEAUDITOR_LOG_LEVEL", "INFO"
            ),
        )

    model_config = {
        "frozen": True,
    }
