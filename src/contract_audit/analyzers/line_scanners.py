"""Opt-in line scanners: one issue per triggering line.

These rules report far more issues than the whole-source catalog, so
they are registered as experimental and never enabled by ``"all"``.
Name them explicitly in ``enabled_rules`` to run them.
"""

from __future__ import annotations

from typing import Iterable

from contract_audit.model import Category, Severity
from contract_audit.model.issue import Issue
from contract_audit.rules import GAS_ANALYSIS, SECURITY_ANALYSIS

from ._text import LOOP_TOKENS, contains_any, declared_name, split_lines

# Solidity and ink!/Rust declarations.
FUNCTION_MARKERS: tuple[str, ...] = ("function ", "fn ")

# Rough per-operation gas costs quoted in messages.
_STORAGE_GAS = "20,000"
_EXTERNAL_CALL_GAS = "2,600"


class GasAnalysisRule:
    """Per-function gas cost report.

    Scan state: ``in_function`` opens on a declaration line and closes on
    the next line containing ``}``; ``in_assembly`` opens on a line
    whose code (outside a ``//`` comment) has ``assembly`` followed by
    ``{`` on the same line, and closes on the next ``}``. An ``assembly``
    keyword with its brace on the following line is not recognised.
    Lines inside an assembly block are not reported and their brace does
    not close the enclosing function.
    """

    id: str = GAS_ANALYSIS
    category: Category = Category.GAS_EFFICIENCY
    description: str = "Analyzes gas costs for each function in the contract"

    def __init__(
        self,
        function_markers: Iterable[str] = FUNCTION_MARKERS,
        storage_token: str = "storage",
        call_tokens: Iterable[str] = (".call", "transfer"),
        loop_tokens: Iterable[str] = LOOP_TOKENS,
        assembly_token: str = "assembly",
    ):
        self.function_markers = tuple(function_markers)
        self.storage_token = storage_token
        self.call_tokens = tuple(call_tokens)
        self.loop_tokens = tuple(loop_tokens)
        self.assembly_token = assembly_token

    def analyze(self, source: str) -> list[Issue]:
        issues: list[Issue] = []
        in_function = False
        in_assembly = False
        function_name = ""

        for idx, raw in enumerate(split_lines(source), start=1):
            line = raw.strip()

            if in_assembly:
                if "}" in line:
                    in_assembly = False
                continue
            tail = self._assembly_tail(line)
            if tail is not None:
                # A one-line block closes on its own line.
                in_assembly = "}" not in tail
                continue

            if contains_any(line, self.function_markers) and "(" in line:
                in_function = True
                function_name = declared_name(line, self.function_markers)

            if in_function:
                issues.extend(self._scan_line(line, idx, function_name))

            if in_function and "}" in line:
                in_function = False

        return issues

    def _assembly_tail(self, line: str) -> str | None:
        """Code after ``assembly {`` on *line*, or ``None`` if no block opens."""
        code = line.split("//", 1)[0]
        if code.startswith(("/*", "*")) or self.assembly_token not in code:
            return None
        tail = code.split(self.assembly_token, 1)[1]
        if "{" not in tail:
            return None
        return tail.split("{", 1)[1]

    def _scan_line(self, line: str, idx: int, function_name: str) -> list[Issue]:
        found: list[Issue] = []
        if self.storage_token in line:
            found.append(
                Issue(
                    severity=Severity.LOW,
                    message=(
                        f"Storage operation in function '{function_name}' "
                        f"costs ~{_STORAGE_GAS} gas"
                    ),
                    line=idx,
                    recommendation=(
                        "Consider caching storage values in memory if accessed multiple times"
                    ),
                )
            )
        if contains_any(line, self.call_tokens):
            found.append(
                Issue(
                    severity=Severity.MEDIUM,
                    message=(
                        f"External call in function '{function_name}' "
                        f"costs ~{_EXTERNAL_CALL_GAS} gas"
                    ),
                    line=idx,
                    recommendation="Batch external calls when possible to save gas",
                )
            )
        if contains_any(line, self.loop_tokens):
            found.append(
                Issue(
                    severity=Severity.MEDIUM,
                    message=f"Loop in function '{function_name}' has variable gas cost",
                    line=idx,
                    recommendation="Consider implementing gas limits for loops",
                )
            )
        return found


class SecurityAnalysisRule:
    """Line-by-line security sweep.

    Each check looks at one line in isolation, so a guard on a
    neighbouring line does not suppress the issue.
    """

    id: str = SECURITY_ANALYSIS
    category: Category = Category.SECURITY
    description: str = "Analyzes common security vulnerabilities in smart contracts"

    def __init__(
        self,
        call_tokens: Iterable[str] = (".call", "transfer"),
        check_tokens: Iterable[str] = ("require", "assert"),
        arithmetic_tokens: Iterable[str] = ("+", "-", "*"),
        checked_tokens: Iterable[str] = ("checked_", "SafeMath"),
        public_fn_token: str = "pub fn",
        access_tokens: Iterable[str] = ("#[access_control]", "onlyOwner"),
        timestamp_tokens: Iterable[str] = ("block.timestamp", "now"),
    ):
        self.call_tokens = tuple(call_tokens)
        self.check_tokens = tuple(check_tokens)
        self.arithmetic_tokens = tuple(arithmetic_tokens)
        self.checked_tokens = tuple(checked_tokens)
        self.public_fn_token = public_fn_token
        self.access_tokens = tuple(access_tokens)
        self.timestamp_tokens = tuple(timestamp_tokens)

    def analyze(self, source: str) -> list[Issue]:
        issues: list[Issue] = []
        for idx, raw in enumerate(split_lines(source), start=1):
            line = raw.strip()

            if contains_any(line, self.call_tokens) and not contains_any(line, self.check_tokens):
                issues.append(Issue(
                    severity=Severity.HIGH,
                    message="Unchecked return value from external call",
                    line=idx,
                    recommendation="Always check return values from external calls",
                ))

            if contains_any(line, self.arithmetic_tokens) and not contains_any(
                line, self.checked_tokens
            ):
                issues.append(Issue(
                    severity=Severity.HIGH,
                    message="Potential integer overflow/underflow",
                    line=idx,
                    recommendation="Use checked arithmetic operations or SafeMath library",
                ))

            if self.public_fn_token in line and not contains_any(line, self.access_tokens):
                issues.append(Issue(
                    severity=Severity.MEDIUM,
                    message="Unprotected public function",
                    line=idx,
                    recommendation="Consider adding access control to sensitive functions",
                ))

            if contains_any(line, self.timestamp_tokens):
                issues.append(Issue(
                    severity=Severity.MEDIUM,
                    message="Timestamp dependency",
                    line=idx,
                    recommendation="Be aware that timestamps can be manipulated by miners",
                ))

            if "for" in line and "transfer" in line:
                issues.append(Issue(
                    severity=Severity.HIGH,
                    message="Potential DoS vector in loop with transfers",
                    line=idx,
                    recommendation=(
                        "Implement pull payment pattern instead of push payments in loops"
                    ),
                ))
        return issues
