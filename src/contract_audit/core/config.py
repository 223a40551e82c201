"""Analyzer configuration dataclass."""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Iterable, Mapping

from contract_audit.model import Category
from contract_audit.rules import ALL_RULES_SENTINEL

WEIGHT_KEYS: frozenset[str] = frozenset(c.value for c in Category)


@dataclass(frozen=True)
class AnalyzerConfig:
    """Immutable analyzer configuration.

    ``enabled_rules`` holds rule IDs or the ``"all"`` sentinel.
    ``custom_weights`` maps category names to weights; missing keys fall
    back to the defaults in ``insights.scoring``. Weights are applied as
    given and are not required to sum to 1.
    """

    enabled_rules: tuple[str, ...] = (ALL_RULES_SENTINEL,)
    custom_weights: Mapping[str, float] | None = field(default=None)

    def __post_init__(self) -> None:
        if isinstance(self.enabled_rules, str):
            raise TypeError("enabled_rules must be a sequence of rule IDs, not a string")
        object.__setattr__(self, "enabled_rules", tuple(self.enabled_rules))
        if self.custom_weights is not None:
            frozen = MappingProxyType({str(k): float(v) for k, v in self.custom_weights.items()})
            object.__setattr__(self, "custom_weights", frozen)

    @property
    def all_enabled(self) -> bool:
        return ALL_RULES_SENTINEL in self.enabled_rules

    def is_enabled(self, rule_id: str) -> bool:
        """Explicit membership; ``"all"`` is resolved by the registry."""
        return rule_id in self.enabled_rules

    def unknown_weight_keys(self) -> list[str]:
        if not self.custom_weights:
            return []
        return sorted(k for k in self.custom_weights if k not in WEIGHT_KEYS)

    # ── serialisation ───────────────────────────────────────────────

    @classmethod
    def from_dict(cls, data: Mapping[str, Any] | None) -> AnalyzerConfig:
        """Build from the request form ``{"enabled_rules": [...], "custom_weights": {...}}``."""
        if not data:
            return cls()
        rules: Iterable[str] | None = data.get("enabled_rules")
        if rules is None:
            rules = (ALL_RULES_SENTINEL,)
        weights = data.get("custom_weights")
        return cls(enabled_rules=tuple(rules), custom_weights=weights)

    def to_dict(self) -> dict[str, Any]:
        d: dict[str, Any] = {"enabled_rules": list(self.enabled_rules)}
        if self.custom_weights is not None:
            d["custom_weights"] = dict(self.custom_weights)
        return d
