"""Enums shared across the rule, scoring and presentation layers."""

from __future__ import annotations

from enum import Enum


class Severity(str, Enum):
    """Issue severity.

    Unordered; the weight of each level is a scoring
    concern and lives in ``insights/scoring.py``.
    """

    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class Category(str, Enum):
    """Scoring bucket every rule declares membership in.

    Values double as the keys accepted in ``custom_weights``.
    """

    SECURITY = "security"
    PERFORMANCE = "performance"
    GAS_EFFICIENCY = "gas_efficiency"
    CODE_QUALITY = "code_quality"


class RiskLevel(str, Enum):
    """User-facing tier derived from the overall score."""

    GREEN = "green"
    YELLOW = "yellow"
    RED = "red"
