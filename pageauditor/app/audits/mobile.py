"""
Mobile friendliness audit.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Mapping

from pageauditor.app.audits.context import AuditContext
from pageauditor.app.audits.scoring import PenaltyLedger, grade_for_score
from pageauditor.app.audits.scripts import MOBILE_SCRIPT
from pageauditor.app.schemas.findings import Finding, Severity
from pageauditor.app.schemas.results import (
    MobileResult,
    Recommendation,
    ViewportCheck,
)

logger = logging.getLogger(__name__)

MIN_TOUCH_TARGET_PX = 44
MIN_FONT_SIZE_PX = 16

SMALL_TOUCH_TARGET_ERROR_COUNT = 5
SMALL_TEXT_RATIO = 0.3
NON_RESPONSIVE_IMAGE_RATIO = 0.5
SMALL_TEXT_RECOMMENDATION_COUNT = 5


def _count(block: Mapping[str, Any], key: str) -> int:
    return int(block.get(key) or 0)


class MobileAudit:
    name = "mobile"

    async def run(self, context: AuditContext) -> None:
        raw = await context.page.evaluate(
            MOBILE_SCRIPT,
            {"min_touch": MIN_TOUCH_TARGET_PX, "min_font": MIN_FONT_SIZE_PX},
        ) or {}

        viewport = ViewportCheck(**(raw.get("viewport") or {}))
        touch = dict(raw.get("touch_targets") or {})
        text = dict(raw.get("text_readability") or {})
        layout = dict(raw.get("layout") or {})
        images = dict(raw.get("images") or {})
        inputs = dict(raw.get("inputs") or {})
        plugins = int(raw.get("plugins") or 0)

        ledger = PenaltyLedger()
        issues: List[Finding] = []

        def record(
            category: str,
            severity: Severity,
            penalty: int,
            message: str,
            **extra: Any,
        ) -> None:
            issues.append(
                Finding(category=category, severity=severity, message=message, **extra)
            )
            ledger.charge(category, penalty)

        # --------------------------------------------------------------
        # Viewport
        # --------------------------------------------------------------
        if not viewport.exists:
            record(
                "viewport", Severity.ERROR, 30,
                "Viewport meta tag is missing",
                impact="Page will not display correctly on mobile devices",
            )
        else:
            if not viewport.is_responsive:
                record(
                    "viewport", Severity.ERROR, 25,
                    "Viewport meta tag missing width=device-width",
                    impact="Page will not be responsive on mobile devices",
                )
            if not viewport.user_scalable:
                record(
                    "zoom", Severity.WARNING, 10,
                    "User scaling is disabled",
                    impact="Users cannot zoom for better readability",
                )

        # --------------------------------------------------------------
        # Touch targets
        # --------------------------------------------------------------
        small_targets = _count(touch, "too_small")
        if small_targets > 0:
            severe = small_targets > SMALL_TOUCH_TARGET_ERROR_COUNT
            record(
                "touch_targets",
                Severity.ERROR if severe else Severity.WARNING,
                20 if severe else 10,
                f"{small_targets} touch targets smaller than {MIN_TOUCH_TARGET_PX}px",
                value=small_targets,
                threshold=MIN_TOUCH_TARGET_PX,
                elements=[
                    str(d.get("element", "")) for d in touch.get("details") or []
                ],
                impact="Small touch targets are difficult to tap on mobile",
            )

        # --------------------------------------------------------------
        # Text readability
        # --------------------------------------------------------------
        small_text = _count(text, "small_text_elements")
        total_text = _count(text, "total_elements")
        if total_text and small_text > total_text * SMALL_TEXT_RATIO:
            record(
                "text_size", Severity.WARNING, 15,
                f"{small_text} elements with text smaller than {MIN_FONT_SIZE_PX}px",
                value=small_text,
                threshold=MIN_FONT_SIZE_PX,
                impact="Small text is hard to read on mobile devices",
            )

        # --------------------------------------------------------------
        # Layout, plugins, images, inputs
        # --------------------------------------------------------------
        horizontal_scroll = bool(layout.get("has_horizontal_scroll"))
        if horizontal_scroll:
            record(
                "horizontal_scroll", Severity.WARNING, 10,
                "Page has horizontal scrolling",
                value=layout.get("page_width"),
                threshold=layout.get("viewport_width"),
                impact="Horizontal scrolling creates poor mobile UX",
            )

        if plugins > 0:
            record(
                "plugins", Severity.ERROR, 20,
                f"{plugins} Flash/Plugin elements found",
                value=plugins,
                impact="Flash and plugins are not supported on mobile devices",
            )

        total_images = _count(images, "total")
        non_responsive = _count(images, "non_responsive")
        if total_images and non_responsive / total_images > NON_RESPONSIVE_IMAGE_RATIO:
            record(
                "responsive_images", Severity.WARNING, 8,
                f"{non_responsive}/{total_images} images may not be responsive",
                value=non_responsive,
                impact="Non-responsive images can cause horizontal scrolling",
            )

        non_optimized = _count(inputs, "non_optimized")
        if non_optimized > 0:
            record(
                "input_types", Severity.INFO, 5,
                f"{non_optimized} inputs could use mobile-optimized types",
                value=non_optimized,
                impact="Proper input types show better mobile keyboards",
            )

        score = ledger.score()
        context.mobile = MobileResult(
            viewport=viewport,
            touch_targets=touch,
            text_readability=text,
            layout=layout,
            images={k: _count(images, k) for k in images},
            inputs={k: _count(inputs, k) for k in inputs},
            plugins=plugins,
            issues=issues,
            recommendations=self._recommendations(
                viewport, small_targets, small_text, horizontal_scroll
            ),
            score=score,
            grade=grade_for_score(score),
            timestamp=datetime.now(timezone.utc).isoformat(),
        )

        logger.info(
            "Mobile for %s: score=%d issues=%d", context.url, score, len(issues)
        )

    @staticmethod
    def _recommendations(
        viewport: ViewportCheck,
        small_targets: int,
        small_text: int,
        horizontal_scroll: bool,
    ) -> List[Recommendation]:
        out: List[Recommendation] = []
        if not viewport.exists or not viewport.is_responsive:
            out.append(
                Recommendation(
                    category="viewport",
                    priority="critical",
                    message="Add responsive viewport meta tag",
                    suggestions=[
                        '<meta name="viewport" content="width=device-width, initial-scale=1">'
                    ],
                )
            )
        if small_targets > 0:
            out.append(
                Recommendation(
                    category="touch_targets",
                    priority="high",
                    message=f"Increase touch target sizes to at least {MIN_TOUCH_TARGET_PX}px",
                    suggestions=["Use CSS padding or min-width/min-height properties"],
                )
            )
        if small_text > SMALL_TEXT_RECOMMENDATION_COUNT:
            out.append(
                Recommendation(
                    category="typography",
                    priority="medium",
                    message="Increase text size for better mobile readability",
                    suggestions=[f"Use font-size: {MIN_FONT_SIZE_PX}px or larger for body text"],
                )
            )
        if horizontal_scroll:
            out.append(
                Recommendation(
                    category="layout",
                    priority="high",
                    message="Eliminate horizontal scrolling",
                    suggestions=["Use flexible layouts, CSS Grid, or Flexbox"],
                )
            )
        return out
