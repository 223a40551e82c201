"""Shared fixtures for the contract_audit test suite."""

from __future__ import annotations

import pytest

from contract_audit.model import Category
from contract_audit.model.issue import Issue


class FixedRule:
    """Rule double that always reports the same issues."""

    description = "fixed"

    def __init__(self, rule_id: str, category: Category, issues: list[Issue]):
        self.id = rule_id
        self.category = category
        self._issues = issues

    def analyze(self, source: str) -> list[Issue]:
        return list(self._issues)


@pytest.fixture
def fixed_rule() -> type[FixedRule]:
    """Factory: ``fixed_rule(rule_id, category, issues)``."""
    return FixedRule
