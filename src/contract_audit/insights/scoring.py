"""Aggregator: issues in, four metrics and one overall score out.

Formulas:
    performance    = 100 − min(30, 10 × performance_count)
    security       = 100 − min(30, 15 × high + 7 × medium + 2 × low)
    gas_efficiency = 100 − min(30, 10 × gas_count)
    code_quality   = 100 − min(30, 5 × quality_count)

    score = max(0, int(Σ metric × weight) − 5 × high)

``high``/``medium``/``low`` are global severity tallies over every issue.
The per-category counts are rule-centric: each registered rule is re-run
and every collected issue it reproduces is credited to that rule's
category (see ``category_counts``).
"""

from __future__ import annotations

import logging
import math
from typing import TYPE_CHECKING, Iterable, Mapping, Sequence

from contract_audit.model import Category, Severity
from contract_audit.model.analysis_result import Metrics
from contract_audit.model.issue import Issue

if TYPE_CHECKING:
    from contract_audit.analyzers import Rule

_logger = logging.getLogger(__name__)

# ── metric bounds ────────────────────────────────────────────────────
_BASE = 100
_MAX_DEDUCTION = 30

# ── security deduction per issue, by severity ───────────────────────
SECURITY_PENALTY: dict[Severity, int] = {
    Severity.HIGH: 15,
    Severity.MEDIUM: 7,
    Severity.LOW: 2,
}

# ── per-issue deduction for the count-based categories ──────────────
CATEGORY_PENALTY: dict[Category, int] = {
    Category.PERFORMANCE: 10,
    Category.GAS_EFFICIENCY: 10,
    Category.CODE_QUALITY: 5,
}

# ── overall score ────────────────────────────────────────────────────
DEFAULT_WEIGHTS: dict[str, float] = {
    Category.SECURITY.value: 0.4,
    Category.PERFORMANCE.value: 0.2,
    Category.GAS_EFFICIENCY.value: 0.3,
    Category.CODE_QUALITY.value: 0.1,
}
HIGH_SEVERITY_PENALTY = 5

# Digits kept before truncating the weighted sum (drops float noise such
# as 69.99999999999999 without rounding genuine fractions up).
_WEIGHT_PRECISION = 6


def _clamp(value: float, lo: int, hi: int) -> int:
    """Truncate *value* into [lo, hi]; +inf saturates high, -inf and NaN low."""
    if not math.isfinite(value):
        return hi if value > 0 else lo
    return max(lo, min(hi, int(value)))


def severity_counts(issues: Iterable[Issue]) -> dict[Severity, int]:
    counts = {s: 0 for s in Severity}
    for issue in issues:
        counts[issue.severity] += 1
    return counts


def category_counts(
    issues: Sequence[Issue],
    rules: Iterable["Rule"],
    source: str,
) -> dict[Category, int]:
    """Count (rule, issue) membership pairs per rule category.

    For every rule, each collected issue that also appears in the rule's
    own output for *source* adds one to the rule's category. An issue
    reproducible by two rules of one category counts twice.
    """
    counts = {c: 0 for c in Category}
    for rule in rules:
        reproduced = rule.analyze(source)
        if not reproduced:
            continue
        hits = sum(1 for issue in issues if issue in reproduced)
        counts[rule.category] += hits
        _logger.debug("rule %s credits %d issue(s) to %s", rule.id, hits, rule.category.value)
    return counts


def compute_metrics(
    issues: Sequence[Issue],
    rules: Iterable["Rule"],
    source: str,
) -> Metrics:
    """Return the four 0-100 category metrics."""
    by_severity = severity_counts(issues)
    by_category = category_counts(issues, rules, source)

    security_deduction = sum(
        SECURITY_PENALTY[sev] * n for sev, n in by_severity.items()
    )

    def _deduct(category: Category) -> int:
        deduction = CATEGORY_PENALTY[category] * by_category[category]
        return _clamp(_BASE - min(_MAX_DEDUCTION, deduction), 0, 100)

    return Metrics(
        performance=_deduct(Category.PERFORMANCE),
        security=_clamp(_BASE - min(_MAX_DEDUCTION, security_deduction), 0, 100),
        gas_efficiency=_deduct(Category.GAS_EFFICIENCY),
        code_quality=_deduct(Category.CODE_QUALITY),
    )


def resolve_weights(custom: Mapping[str, float] | None = None) -> dict[str, float]:
    """Defaults overlaid with *custom*, key by key. No normalisation."""
    weights = dict(DEFAULT_WEIGHTS)
    if custom:
        for key in DEFAULT_WEIGHTS:
            if key in custom:
                weights[key] = float(custom[key])
    return weights


def compute_score(
    metrics: Metrics,
    issues: Sequence[Issue],
    weights: Mapping[str, float] | None = None,
) -> int:
    """Return the 0-100 overall score.

    Weighted sum of the metrics (truncated), capped to [0, 100], minus
    ``HIGH_SEVERITY_PENALTY`` per High issue, floored at 0.
    """
    w = resolve_weights(weights)
    weighted = sum(metrics.for_category(c) * w[c.value] for c in Category)
    weighted_int = _clamp(round(weighted, _WEIGHT_PRECISION), 0, 100)

    high = sum(1 for i in issues if i.severity is Severity.HIGH)
    return max(0, weighted_int - HIGH_SEVERITY_PENALTY * high)
