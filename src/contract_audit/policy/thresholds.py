"""Overall score → risk tier → CLI exit code.

``contract-audit analyze`` and its stderr summary both read the tier
from here; nothing else compares scores against literals.

    score >= green_min   green   exit 0
    score >= yellow_min  yellow  exit 1
    otherwise            red     exit 2
"""

from __future__ import annotations

from dataclasses import dataclass

from contract_audit.model import RiskLevel
from contract_audit.utils.exit_codes import ExitCode

_EXIT_BY_TIER: dict[RiskLevel, ExitCode] = {
    RiskLevel.GREEN: ExitCode.SUCCESS,
    RiskLevel.YELLOW: ExitCode.VIOLATION,
    RiskLevel.RED: ExitCode.ERROR,
}


@dataclass(frozen=True, slots=True)
class ScoreThresholds:
    """Lower bounds (inclusive) of the green and yellow tiers."""

    green_min: int = 75
    yellow_min: int = 55

    def __post_init__(self) -> None:
        if not 0 <= self.yellow_min <= self.green_min <= 100:
            raise ValueError(
                f"thresholds must satisfy 0 <= yellow_min <= green_min <= 100, "
                f"got yellow_min={self.yellow_min} green_min={self.green_min}"
            )


DEFAULT_THRESHOLDS = ScoreThresholds()


def tier_from_score(
    score: int,
    *,
    thresholds: ScoreThresholds = DEFAULT_THRESHOLDS,
) -> RiskLevel:
    if score >= thresholds.green_min:
        return RiskLevel.GREEN
    return RiskLevel.YELLOW if score >= thresholds.yellow_min else RiskLevel.RED


def exit_code_from_tier(tier: RiskLevel) -> int:
    return _EXIT_BY_TIER[tier]


def exit_code_from_score(
    score: int,
    *,
    thresholds: ScoreThresholds = DEFAULT_THRESHOLDS,
) -> int:
    return exit_code_from_tier(tier_from_score(score, thresholds=thresholds))
