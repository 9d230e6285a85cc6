"""
Static accessibility lookup tables.

These tables are configuration data, not logic: merge and scoring code
read them but never branch on specific criteria.
"""

from types import MappingProxyType
from typing import Mapping, Tuple


# ----------------------------------------------------------------------
# Conformance levels
# ----------------------------------------------------------------------
LEVEL_A = "A"
LEVEL_AA = "AA"
LEVEL_AAA = "AAA"
LEVEL_EXPERIMENTAL = "experimental"
LEVEL_UNKNOWN = "Unknown"

# Merge order. Levels outside the cumulative chain sort last.
LEVEL_ORDER: Tuple[str, ...] = (
    LEVEL_A,
    LEVEL_AA,
    LEVEL_AAA,
    LEVEL_EXPERIMENTAL,
    LEVEL_UNKNOWN,
)

# Cumulative chain: each level implies every level before it.
CUMULATIVE_LEVELS: Tuple[str, ...] = (LEVEL_A, LEVEL_AA, LEVEL_AAA)

# WCAG versions for which compliance flags are reported.
COMPLIANCE_VERSIONS: Tuple[str, ...] = ("wcag21", "wcag22")


def flag_key(version: str, level: str) -> str:
    return f"{version}_{level}"


# ----------------------------------------------------------------------
# Criteria introduced in WCAG 2.2 -> conformance level
# ----------------------------------------------------------------------
NEW_CRITERIA_LEVELS: Mapping[str, str] = MappingProxyType(
    {
        "2.4.11": LEVEL_AA,
        "2.4.12": LEVEL_AAA,
        "2.4.13": LEVEL_AA,
        "2.5.7": LEVEL_AA,
        "2.5.8": LEVEL_AA,
        "3.2.6": LEVEL_A,
        "3.3.7": LEVEL_A,
        "3.3.8": LEVEL_AA,
    }
)


def level_for_new_criterion(criterion: str) -> str:
    return NEW_CRITERIA_LEVELS.get(criterion, LEVEL_UNKNOWN)


# ----------------------------------------------------------------------
# Criterion -> remediation advice (checked in this order)
# ----------------------------------------------------------------------
RECOMMENDATIONS: Mapping[str, str] = MappingProxyType(
    {
        "1.1.1": "Add alt text to all informative images",
        "1.3.1": "Ensure all form inputs have associated labels",
        "1.4.3": "Improve color contrast ratios for text elements",
        "2.1.1": "Ensure all interactive elements are keyboard accessible",
        "2.4.1": "Implement skip navigation links or landmarks",
        "2.4.4": "Make link text more descriptive",
        "3.1.1": "Specify the page language in the HTML element",
        "4.1.2": "Ensure custom controls have proper ARIA attributes",
    }
)

FALLBACK_RECOMMENDATION = "Priority: Fix {criterion} violations ({count} issues)"


# ----------------------------------------------------------------------
# Human-readable compliance labels, strongest first
# ----------------------------------------------------------------------
COMPLIANCE_LABELS: Tuple[Tuple[str, str], ...] = (
    ("wcag22_AA", "WCAG 2.2 Level AA Compliant"),
    ("wcag22_A", "WCAG 2.2 Level A Compliant"),
    ("wcag21_AA", "WCAG 2.1 Level AA Compliant"),
    ("wcag21_A", "WCAG 2.1 Level A Compliant"),
)

NON_COMPLIANT_LABEL = "Non-Compliant"

PRIORITY_ISSUE_LIMIT = 5
