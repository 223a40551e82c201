"""Tests for the model value objects: Issue and AnalysisResults."""

from __future__ import annotations

import json

import pytest

from contract_audit.core.config import AnalyzerConfig
from contract_audit.core.registry import Analyzer
from contract_audit.model import Severity
from contract_audit.model.analysis_result import AnalysisResults, Metrics
from contract_audit.model.issue import Issue
from contract_audit.utils.json_norm import stable_json_dumps


CONTRACT = "\n".join([
    "pragma solidity ^0.8.0;",
    "contract Bank {",
    "    mapping(address => uint) balances;",
    "    function withdraw(uint amount) public {",
    "        msg.sender.transfer(amount);",
    "        balances[msg.sender] -= amount;",
    "    }",
    "}",
])


class TestIssue:

    @pytest.mark.parametrize(
        "issue",
        [
            Issue(severity=Severity.HIGH, message="m", line=4, recommendation="r"),
            Issue(severity=Severity.MEDIUM, message="m", line=2),
            Issue(severity=Severity.LOW, message="m", recommendation="r"),
            Issue(severity=Severity.LOW, message="m"),
        ],
    )
    def test_from_dict_inverts_to_dict(self, issue: Issue) -> None:
        assert Issue.from_dict(issue.to_dict()) == issue

    def test_absent_fields_read_as_none(self) -> None:
        issue = Issue.from_dict({"severity": "medium", "message": "m"})
        assert issue.line is None
        assert issue.recommendation is None
        assert issue.severity is Severity.MEDIUM

    def test_unknown_severity_rejected(self) -> None:
        with pytest.raises(ValueError):
            Issue.from_dict({"severity": "critical", "message": "m"})


class TestAnalysisResults:

    def test_from_dict_inverts_to_dict(self) -> None:
        result = AnalysisResults(
            score=71,
            metrics=Metrics(security=78, gas_efficiency=90),
            issues=(
                Issue(severity=Severity.HIGH, message="a", line=5, recommendation="fix"),
                Issue(severity=Severity.LOW, message="b"),
            ),
        )
        assert AnalysisResults.from_dict(result.to_dict()) == result

    def test_analyzer_output_survives_json(self) -> None:
        config = AnalyzerConfig(enabled_rules=["reentrancy", "floating_pragma", "event_emission"])
        result = Analyzer(config).analyze(CONTRACT)
        assert result.issues
        decoded = json.loads(stable_json_dumps(result))
        assert AnalysisResults.from_dict(decoded) == result

    def test_missing_issues_key_means_none(self) -> None:
        data = {"score": 100, "metrics": Metrics().as_dict()}
        assert AnalysisResults.from_dict(data) == AnalysisResults(score=100, metrics=Metrics())

    def test_severity_counts(self) -> None:
        result = AnalysisResults(
            score=0,
            metrics=Metrics(),
            issues=(Issue(severity=Severity.HIGH, message="x"), Issue(severity=Severity.HIGH, message="y")),
        )
        assert result.severity_counts() == {"high": 2, "medium": 0, "low": 0}
