"""AnalysisResults: the terminal value returned by ``Analyzer.analyze``."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from . import Category, Severity
from .issue import Issue


@dataclass(frozen=True, slots=True)
class Metrics:
    """Four independent 0-100 scores, one per ``Category``."""

    performance: int = 100
    security: int = 100
    gas_efficiency: int = 100
    code_quality: int = 100

    def for_category(self, category: Category) -> int:
        return getattr(self, category.value)

    def as_dict(self) -> dict[str, int]:
        return {
            "performance": self.performance,
            "security": self.security,
            "gas_efficiency": self.gas_efficiency,
            "code_quality": self.code_quality,
        }


@dataclass(frozen=True, slots=True)
class AnalysisResults:
    """Score, metrics and the issue sequence of one analysis run.

    ``issues`` keeps rule-execution order; the order carries no meaning
    beyond being stable for a given configuration.
    """

    score: int
    metrics: Metrics
    issues: tuple[Issue, ...] = field(default_factory=tuple)

    def severity_counts(self) -> dict[str, int]:
        counts = {s.value: 0 for s in Severity}
        for issue in self.issues:
            counts[issue.severity.value] += 1
        return counts

    # ── serialisation ───────────────────────────────────────────────

    def to_dict(self) -> dict[str, Any]:
        """Flat response shape: ``{score, metrics, issues}``."""
        return {
            "score": self.score,
            "metrics": self.metrics.as_dict(),
            "issues": [i.to_dict() for i in self.issues],
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> AnalysisResults:
        return cls(
            score=int(data["score"]),
            metrics=Metrics(**data["metrics"]),
            issues=tuple(Issue.from_dict(i) for i in data.get("issues", [])),
        )
