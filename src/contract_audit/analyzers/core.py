"""Core rules: reentrancy, storage layout, events, loop gas, best practices."""

from __future__ import annotations

from typing import Iterable

from contract_audit.model import Category, Severity
from contract_audit.model.issue import Issue
from contract_audit.rules import (
    EVENT_EMISSION,
    GAS_OPTIMIZATION,
    REENTRANCY,
    SECURITY_BEST_PRACTICES,
    STORAGE_EFFICIENCY,
)

from ._text import (
    OWNER_CHECK_TOKENS,
    contains_all,
    contains_any,
    first_line,
    first_line_with,
    split_lines,
)

# ── Token defaults ───────────────────────────────────────────────────

EXTERNAL_TRANSFER_TOKENS: tuple[str, ...] = ("transfer", ".call")
STATE_MUTATION_TOKENS: tuple[str, ...] = ("=", "[]", "balances")


class ReentrancyRule:
    """Flags state mutation that follows an external transfer.

    Fires when some line strictly after the first external-transfer line
    assigns or touches balances. One issue, located at the transfer.
    """

    id: str = REENTRANCY
    category: Category = Category.SECURITY
    description: str = "Detects potential reentrancy vulnerabilities in contract functions"

    def __init__(
        self,
        call_tokens: Iterable[str] = EXTERNAL_TRANSFER_TOKENS,
        mutation_tokens: Iterable[str] = STATE_MUTATION_TOKENS,
    ):
        self.call_tokens = tuple(call_tokens)
        self.mutation_tokens = tuple(mutation_tokens)

    def analyze(self, source: str) -> list[Issue]:
        lines = split_lines(source)
        call_idx = next(
            (i for i, line in enumerate(lines) if contains_any(line, self.call_tokens)),
            None,
        )
        if call_idx is None:
            return []

        mutated_after = any(
            contains_any(line, self.mutation_tokens) for line in lines[call_idx + 1:]
        )
        if not mutated_after:
            return []

        return [
            Issue(
                severity=Severity.HIGH,
                message="Potential reentrancy vulnerability: state is modified after an external call",
                line=call_idx + 1,
                recommendation=(
                    "Implement checks-effects-interactions pattern: perform all "
                    "state changes before making external calls"
                ),
            )
        ]


class StorageEfficiencyRule:
    """``storage`` used without any packed layout."""

    id: str = STORAGE_EFFICIENCY
    category: Category = Category.GAS_EFFICIENCY
    description: str = "Checks for efficient storage usage patterns"

    def __init__(self, storage_token: str = "storage", packed_token: str = "packed"):
        self.storage_token = storage_token
        self.packed_token = packed_token

    def analyze(self, source: str) -> list[Issue]:
        if self.storage_token not in source or self.packed_token in source:
            return []
        return [
            Issue(
                severity=Severity.MEDIUM,
                message="Inefficient storage usage",
                line=first_line_with(source, (self.storage_token,)),
                recommendation="Consider using packed storage or a more efficient data structure",
            )
        ]


class EventEmissionRule:
    id: str = EVENT_EMISSION
    category: Category = Category.CODE_QUALITY
    description: str = "Checks for event emissions after state changes"

    def __init__(self, state_token: str = "state", emit_token: str = "emit"):
        self.state_token = state_token
        self.emit_token = emit_token

    def analyze(self, source: str) -> list[Issue]:
        if self.state_token not in source or self.emit_token in source:
            return []
        return [
            Issue(
                severity=Severity.LOW,
                message="Missing event emission after state change",
                line=first_line_with(source, (self.state_token,)),
                recommendation=(
                    "Emit events after significant state changes for better "
                    "off-chain tracking"
                ),
            )
        ]


class GasOptimizationRule:
    """Expensive work inside loops, and uncached repeated storage reads."""

    id: str = GAS_OPTIMIZATION
    category: Category = Category.GAS_EFFICIENCY
    description: str = "Identifies patterns that could be optimized for gas efficiency"

    def __init__(
        self,
        loop_token: str = "for",
        expensive_tokens: Iterable[str] = ("storage", "call"),
        cached_read_tokens: Iterable[str] = ("storage", "read", "loop"),
    ):
        self.loop_token = loop_token
        self.expensive_tokens = tuple(expensive_tokens)
        self.cached_read_tokens = tuple(cached_read_tokens)

    def analyze(self, source: str) -> list[Issue]:
        issues: list[Issue] = []

        if self.loop_token in source and contains_any(source, self.expensive_tokens):
            issues.append(
                Issue(
                    severity=Severity.MEDIUM,
                    message="Expensive operation inside loop",
                    line=first_line_with(source, (self.loop_token,)),
                    recommendation="Move expensive operations outside of loops when possible",
                )
            )

        if contains_all(source, self.cached_read_tokens):
            # Located on the first line that both touches storage and reads it.
            line_tokens = self.cached_read_tokens[:2]
            issues.append(
                Issue(
                    severity=Severity.LOW,
                    message="Multiple storage reads that could be cached",
                    line=first_line(source, lambda line: contains_all(line, line_tokens)),
                    recommendation="Cache storage values in memory when reading multiple times",
                )
            )

        return issues


class SecurityBestPracticesRule:
    """Unchecked external calls and functions without an owner check."""

    id: str = SECURITY_BEST_PRACTICES
    category: Category = Category.SECURITY
    description: str = "Checks for adherence to security best practices"

    def __init__(
        self,
        call_token: str = "call",
        check_token: str = "require",
        function_token: str = "function",
        owner_tokens: Iterable[str] = OWNER_CHECK_TOKENS,
    ):
        self.call_token = call_token
        self.check_token = check_token
        self.function_token = function_token
        self.owner_tokens = tuple(owner_tokens)

    def analyze(self, source: str) -> list[Issue]:
        issues: list[Issue] = []

        if self.call_token in source and self.check_token not in source:
            issues.append(
                Issue(
                    severity=Severity.HIGH,
                    message="Unchecked external call result",
                    line=first_line_with(source, (self.call_token,)),
                    recommendation="Always check the return value of external calls",
                )
            )

        if self.function_token in source and not contains_any(source, self.owner_tokens):
            fn = self.function_token
            issues.append(
                Issue(
                    severity=Severity.MEDIUM,
                    message="Function may lack proper access control",
                    line=first_line(source, lambda line: fn in line and "private" not in line),
                    recommendation="Implement access control for sensitive functions",
                )
            )

        return issues
