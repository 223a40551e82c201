"""Registry: owns the active rule set, runs it, hands issues to scoring."""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from types import MappingProxyType
from typing import Mapping

from contract_audit.analyzers import Rule, get_default_rules, get_experimental_rules
from contract_audit.core.config import AnalyzerConfig
from contract_audit.insights.scoring import compute_metrics, compute_score
from contract_audit.model.analysis_result import AnalysisResults
from contract_audit.model.issue import Issue
from contract_audit.rules import ALL_RULE_IDS, ALL_RULES_SENTINEL

_logger = logging.getLogger(__name__)


def _select_rules(config: AnalyzerConfig) -> list[Rule]:
    """Instantiate the rules *config* enables, in catalog order.

    ``"all"`` enables the public catalog; opt-in rules must be named.
    """
    selected: list[Rule] = []
    for rule in get_default_rules():
        if config.all_enabled or config.is_enabled(rule.id):
            selected.append(rule)
    for rule in get_experimental_rules():
        if config.is_enabled(rule.id):
            selected.append(rule)

    unknown = [
        r for r in config.enabled_rules
        if r not in ALL_RULE_IDS and r != ALL_RULES_SENTINEL
    ]
    if unknown:
        _logger.warning("Ignoring unknown rule id(s): %s", ", ".join(sorted(set(unknown))))
    return selected


class Analyzer:
    """Runs the enabled rules over contract source and scores the result.

    The configuration is fixed at construction. ``analyze`` holds no state
    between calls, so one instance may serve concurrent callers.

    ``max_workers`` > 1 fans rules out over a thread pool; issues are
    still merged in registration order.
    """

    def __init__(
        self,
        config: AnalyzerConfig | None = None,
        *,
        max_workers: int | None = None,
    ):
        self._config = config or AnalyzerConfig()
        self._max_workers = max_workers
        self._rules: dict[str, Rule] = {}
        for rule in _select_rules(self._config):
            self.register_rule(rule)
        ignored = self._config.unknown_weight_keys()
        if ignored:
            _logger.warning("Ignoring unknown weight key(s): %s", ", ".join(ignored))
        _logger.debug("analyzer ready with %d rule(s): %s", len(self._rules), list(self._rules))

    @property
    def config(self) -> AnalyzerConfig:
        return self._config

    @property
    def rules(self) -> Mapping[str, Rule]:
        """Read-only view of the registered rules, keyed by id."""
        return MappingProxyType(self._rules)

    def register_rule(self, rule: Rule) -> None:
        """Add *rule*, replacing any rule already registered under its id."""
        if not isinstance(rule, Rule):
            raise TypeError(f"{type(rule).__name__} does not implement the Rule protocol")
        self._rules[rule.id] = rule

    def _collect(self, source: str) -> list[Issue]:
        rules = list(self._rules.values())
        if self._max_workers and self._max_workers > 1 and len(rules) > 1:
            with ThreadPoolExecutor(max_workers=self._max_workers) as pool:
                batches = list(pool.map(lambda r: r.analyze(source), rules))
        else:
            batches = [rule.analyze(source) for rule in rules]

        issues: list[Issue] = []
        for rule, batch in zip(rules, batches):
            if batch:
                _logger.debug("rule %s reported %d issue(s)", rule.id, len(batch))
            issues.extend(batch)
        return issues

    def analyze(self, source: str) -> AnalysisResults:
        """Run every registered rule over *source* and score the issues."""
        issues = self._collect(source)
        metrics = compute_metrics(issues, self._rules.values(), source)
        score = compute_score(metrics, issues, self._config.custom_weights)
        return AnalysisResults(score=score, metrics=metrics, issues=tuple(issues))


def analyze_contract(source: str, config: AnalyzerConfig | None = None) -> AnalysisResults:
    """Analyze *source* with a throwaway analyzer (default catalog unless configured)."""
    return Analyzer(config).analyze(source)
