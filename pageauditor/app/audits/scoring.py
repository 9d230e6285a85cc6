"""
Shared threshold-to-score-to-grade primitives.

Every scoring audit starts from 100, charges one fixed penalty per detected
issue category, clamps once after all penalties and derives its grade
through ``grade_for_score``. No other grade function exists in the package.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Optional

from pageauditor.app.schemas.findings import Severity


MAX_SCORE = 100
MIN_SCORE = 0

GRADE_STEPS = (
    (90, "A"),
    (80, "B"),
    (70, "C"),
    (60, "D"),
)


def grade_for_score(score: float) -> str:
    """
    Fixed step function: >=90 A, >=80 B, >=70 C, >=60 D, else F.
    """
    for floor, grade in GRADE_STEPS:
        if score >= floor:
            return grade
    return "F"


def clamp_score(raw: float) -> int:
    return int(max(MIN_SCORE, min(MAX_SCORE, round(raw))))


@dataclass(frozen=True)
class ThresholdBand:
    """
    Static good / needs-improvement boundaries for one metric.

    Values at or below ``good`` are good, at or below
    ``needs_improvement`` need improvement, everything above is poor.
    """

    good: float
    needs_improvement: float
    warning_penalty: int = 0
    error_penalty: int = 0

    def classify(self, value: Optional[float]) -> Optional[Severity]:
        if value is None or value <= self.good:
            return None
        if value <= self.needs_improvement:
            return Severity.WARNING
        return Severity.ERROR

    def penalty_for(self, severity: Optional[Severity]) -> int:
        if severity is Severity.ERROR:
            return self.error_penalty
        if severity is Severity.WARNING:
            return self.warning_penalty
        return 0


class PenaltyLedger:
    """
    Category-deduplicated penalty accumulator.

    Charging the same category twice keeps the larger penalty, so clustered
    problems of one kind are deducted once.
    """

    def __init__(self) -> None:
        self._penalties: Dict[str, int] = {}

    def charge(self, category: str, penalty: int) -> None:
        if penalty <= 0:
            return
        current = self._penalties.get(category, 0)
        self._penalties[category] = max(current, penalty)

    @property
    def total(self) -> int:
        return sum(self._penalties.values())

    def categories(self) -> Dict[str, int]:
        return dict(self._penalties)

    def score(self) -> int:
        # clamp once, after every penalty
        return clamp_score(MAX_SCORE - self.total)
