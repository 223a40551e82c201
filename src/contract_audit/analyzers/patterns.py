"""Pattern rules: code-quality anti-patterns and risky idioms."""

from __future__ import annotations

from typing import Iterable

from contract_audit.model import Category, Severity
from contract_audit.model.issue import Issue
from contract_audit.rules import (
    ASSEMBLY_USAGE,
    DEPRECATED_PATTERNS,
    FLOATING_PRAGMA,
    MISSING_VISIBILITY,
    TX_ORIGIN_AUTH,
)

from ._text import COMMENT_TOKENS, contains_any, first_line_with, split_lines

VISIBILITY_KEYWORDS: tuple[str, ...] = ("public", "private", "internal", "external")
PRAGMA_TOKEN = "pragma solidity"
RANGE_OPERATORS: tuple[str, ...] = ("^", ">", "<", "~")
DEPRECATED_TOKENS: tuple[str, ...] = (
    "suicide",
    "block.blockhash",
    "sha3",
    "throw",
    "msg.gas",
)


class MissingVisibilityRule:
    """One issue per function declaration line without a visibility keyword."""

    id: str = MISSING_VISIBILITY
    category: Category = Category.CODE_QUALITY
    description: str = "Detects functions missing explicit visibility specifiers"

    def __init__(
        self,
        function_token: str = "function",
        visibility_keywords: Iterable[str] = VISIBILITY_KEYWORDS,
    ):
        self.function_token = function_token
        self.visibility_keywords = tuple(visibility_keywords)

    def analyze(self, source: str) -> list[Issue]:
        issues: list[Issue] = []
        for idx, line in enumerate(split_lines(source), start=1):
            if self.function_token not in line:
                continue
            if contains_any(line, self.visibility_keywords):
                continue
            issues.append(
                Issue(
                    severity=Severity.LOW,
                    message="Function missing explicit visibility specifier",
                    line=idx,
                    recommendation=(
                        "Always specify function visibility (public, private, "
                        "internal, or external)"
                    ),
                )
            )
        return issues


class FloatingPragmaRule:
    """Compiler pragma that accepts a version range instead of one version."""

    id: str = FLOATING_PRAGMA
    category: Category = Category.SECURITY
    description: str = "Detects floating pragma versions"

    def __init__(
        self,
        pragma_token: str = PRAGMA_TOKEN,
        range_operators: Iterable[str] = RANGE_OPERATORS,
    ):
        self.pragma_token = pragma_token
        self.range_operators = tuple(range_operators)

    def analyze(self, source: str) -> list[Issue]:
        for idx, line in enumerate(split_lines(source), start=1):
            if self.pragma_token in line and contains_any(line, self.range_operators):
                return [
                    Issue(
                        severity=Severity.MEDIUM,
                        message="Floating pragma version",
                        line=idx,
                        recommendation=(
                            "Lock pragma to specific compiler version for consistency "
                            "and security"
                        ),
                    )
                ]
        return []


class DeprecatedPatternsRule:
    """One issue per deprecated token present anywhere in the source."""

    id: str = DEPRECATED_PATTERNS
    category: Category = Category.CODE_QUALITY
    description: str = "Detects use of deprecated functions or patterns"

    def __init__(self, deprecated_tokens: Iterable[str] = DEPRECATED_TOKENS):
        self.deprecated_tokens = tuple(deprecated_tokens)

    def analyze(self, source: str) -> list[Issue]:
        return [
            Issue(
                severity=Severity.MEDIUM,
                message=f"Use of deprecated function or pattern: {token}",
                line=first_line_with(source, (token,)),
                recommendation=(
                    "Replace with recommended alternative according to Solidity documentation"
                ),
            )
            for token in self.deprecated_tokens
            if token in source
        ]


class TxOriginAuthRule:
    id: str = TX_ORIGIN_AUTH
    category: Category = Category.SECURITY
    description: str = "Detects use of tx.origin for authorization"

    def __init__(self, origin_token: str = "tx.origin"):
        self.origin_token = origin_token

    def analyze(self, source: str) -> list[Issue]:
        if self.origin_token not in source:
            return []
        return [
            Issue(
                severity=Severity.HIGH,
                message="Use of tx.origin for authorization",
                line=first_line_with(source, (self.origin_token,)),
                recommendation="Use msg.sender instead of tx.origin for authorization checks",
            )
        ]


class AssemblyUsageRule:
    """Inline assembly blocks that carry no comment before they close.

    A block opens on a line containing ``assembly`` and closes on the
    next later line containing ``}``. Comments on the opening line count.
    Nested braces are not tracked.
    """

    id: str = ASSEMBLY_USAGE
    category: Category = Category.CODE_QUALITY
    description: str = "Detects assembly usage without proper documentation"

    def __init__(
        self,
        open_token: str = "assembly",
        close_token: str = "}",
        comment_tokens: Iterable[str] = COMMENT_TOKENS,
    ):
        self.open_token = open_token
        self.close_token = close_token
        self.comment_tokens = tuple(comment_tokens)

    def analyze(self, source: str) -> list[Issue]:
        issues: list[Issue] = []
        in_assembly = False
        start_line = 0
        documented = False

        for idx, line in enumerate(split_lines(source), start=1):
            if not in_assembly:
                if self.open_token in line:
                    in_assembly = True
                    start_line = idx
                    documented = contains_any(line, self.comment_tokens)
                continue

            if self.close_token in line:
                if not documented:
                    issues.append(
                        Issue(
                            severity=Severity.MEDIUM,
                            message="Assembly block without documentation",
                            line=start_line,
                            recommendation=(
                                "Document assembly blocks with detailed comments "
                                "explaining the purpose and behavior"
                            ),
                        )
                    )
                in_assembly = False
            elif contains_any(line, self.comment_tokens):
                documented = True

        return issues
