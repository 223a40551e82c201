"""Issue: a single finding reported by one rule."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping

from . import Severity


@dataclass(frozen=True, slots=True)
class Issue:
    """Immutable value object produced by ``Rule.analyze``.

    Two issues are equal when all four fields match; the scoring layer
    relies on that to attribute issues back to the rules that emit them.
    ``line`` is 1-based; ``None`` means the rule could not locate it.
    """

    severity: Severity
    message: str
    line: int | None = None
    recommendation: str | None = None

    # ── serialisation ───────────────────────────────────────────────

    def to_dict(self) -> dict[str, Any]:
        d: dict[str, Any] = {
            "severity": self.severity.value,
            "message": self.message,
        }
        if self.line is not None:
            d["line"] = self.line
        if self.recommendation is not None:
            d["recommendation"] = self.recommendation
        return d

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Issue:
        return cls(
            severity=Severity(data["severity"]),
            message=data["message"],
            line=data.get("line"),
            recommendation=data.get("recommendation"),
        )
