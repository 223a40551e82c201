"""Vulnerability rules: arithmetic, self-destruct, timestamps, ordering, calls."""

from __future__ import annotations

from typing import Iterable

from contract_audit.model import Category, Severity
from contract_audit.model.issue import Issue
from contract_audit.rules import (
    DOS_VULNERABILITY,
    FRONT_RUNNING,
    INTEGER_OVERFLOW,
    TIMESTAMP_DEPENDENCE,
    UNCHECKED_RETURN,
    UNPROTECTED_SELFDESTRUCT,
)

from ._text import OWNER_CHECK_TOKENS, contains_any, first_line_with

ARITHMETIC_TOKENS: tuple[str, ...] = ("+", "-", "*", "/")
CHECKED_ARITHMETIC_TOKENS: tuple[str, ...] = (
    "SafeMath",
    "checked_add",
    "checked_sub",
    "checked_mul",
    "checked_div",
)
DESTRUCT_TOKENS: tuple[str, ...] = ("selfdestruct", "self-destruct", "suicide")
TIMESTAMP_TOKENS: tuple[str, ...] = ("block.timestamp", "now")
ORDER_SENSITIVE_TOKENS: tuple[str, ...] = ("price", "rate", "swap")
ORDER_PROTECTION_TOKENS: tuple[str, ...] = ("commit-reveal", "timelock")
LOW_LEVEL_CALL_TOKENS: tuple[str, ...] = (".call{", ".call(")
SEND_TOKENS: tuple[str, ...] = (".send(", ".transfer(")


class _PresenceRule:
    """One issue when trigger tokens are present and guard tokens absent.

    Subclasses only declare metadata and token defaults; the issue is
    located on the first line containing a trigger token.
    """

    id: str
    category: Category = Category.SECURITY
    description: str
    severity: Severity
    message: str
    recommendation: str

    def __init__(
        self,
        triggers: Iterable[str] = (),
        guards: Iterable[str] = (),
    ):
        self.triggers = tuple(triggers)
        self.guards = tuple(guards)

    def analyze(self, source: str) -> list[Issue]:
        if not contains_any(source, self.triggers) or contains_any(source, self.guards):
            return []
        return [
            Issue(
                severity=self.severity,
                message=self.message,
                line=first_line_with(source, self.triggers),
                recommendation=self.recommendation,
            )
        ]


class IntegerOverflowRule(_PresenceRule):
    id = INTEGER_OVERFLOW
    description = "Detects potential integer overflow/underflow vulnerabilities"
    severity = Severity.HIGH
    message = "Potential integer overflow/underflow vulnerability"
    recommendation = "Use SafeMath library or checked arithmetic operations"

    def __init__(
        self,
        triggers: Iterable[str] = ARITHMETIC_TOKENS,
        guards: Iterable[str] = CHECKED_ARITHMETIC_TOKENS,
    ):
        super().__init__(triggers, guards)


class SelfDestructRule(_PresenceRule):
    id = UNPROTECTED_SELFDESTRUCT
    description = "Detects unprotected self-destruct functionality"
    severity = Severity.HIGH
    message = "Unprotected self-destruct functionality"
    recommendation = "Add proper access control to self-destruct functionality"

    def __init__(
        self,
        triggers: Iterable[str] = DESTRUCT_TOKENS,
        guards: Iterable[str] = OWNER_CHECK_TOKENS,
    ):
        super().__init__(triggers, guards)


class TimestampDependenceRule(_PresenceRule):
    id = TIMESTAMP_DEPENDENCE
    description = "Detects timestamp dependence vulnerabilities"
    severity = Severity.MEDIUM
    message = "Contract logic depends on block timestamp"
    recommendation = (
        "Avoid using block.timestamp for critical logic as it can be manipulated by miners"
    )

    def __init__(self, triggers: Iterable[str] = TIMESTAMP_TOKENS):
        super().__init__(triggers, ())


class FrontRunningRule(_PresenceRule):
    id = FRONT_RUNNING
    description = "Detects potential front-running vulnerabilities"
    severity = Severity.MEDIUM
    message = "Potential front-running vulnerability"
    recommendation = "Consider implementing commit-reveal pattern or timelock mechanisms"

    def __init__(
        self,
        triggers: Iterable[str] = ORDER_SENSITIVE_TOKENS,
        guards: Iterable[str] = ORDER_PROTECTION_TOKENS,
    ):
        super().__init__(triggers, guards)


class UncheckedReturnRule:
    """Low-level calls and sends whose result is never checked.

    Emits up to two issues: a High one for ``.call`` without
    ``require(``/``assert(``, a Medium one for ``.send(``/``.transfer(``
    without ``require(``.
    """

    id: str = UNCHECKED_RETURN
    category: Category = Category.SECURITY
    description: str = "Detects unchecked return values from external calls"

    def __init__(
        self,
        call_tokens: Iterable[str] = LOW_LEVEL_CALL_TOKENS,
        send_tokens: Iterable[str] = SEND_TOKENS,
        check_tokens: Iterable[str] = ("require(", "assert("),
        send_check_tokens: Iterable[str] = ("require(",),
    ):
        self.call_tokens = tuple(call_tokens)
        self.send_tokens = tuple(send_tokens)
        self.check_tokens = tuple(check_tokens)
        self.send_check_tokens = tuple(send_check_tokens)

    def analyze(self, source: str) -> list[Issue]:
        issues: list[Issue] = []

        if contains_any(source, self.call_tokens) and not contains_any(source, self.check_tokens):
            issues.append(
                Issue(
                    severity=Severity.HIGH,
                    message="Unchecked return value from low-level call",
                    line=first_line_with(source, self.call_tokens),
                    recommendation="Always check return values from low-level calls",
                )
            )

        if contains_any(source, self.send_tokens) and not contains_any(
            source, self.send_check_tokens
        ):
            issues.append(
                Issue(
                    severity=Severity.MEDIUM,
                    message="Potential unchecked send/transfer",
                    line=first_line_with(source, self.send_tokens),
                    recommendation=(
                        "Check return value of .send() or use .transfer() with proper "
                        "error handling"
                    ),
                )
            )

        return issues


class DoSVulnerabilityRule:
    id: str = DOS_VULNERABILITY
    category: Category = Category.SECURITY
    description: str = "Detects potential DoS vulnerabilities"

    def __init__(
        self,
        loop_token: str = "for",
        call_tokens: Iterable[str] = ("transfer", ".call"),
    ):
        self.loop_token = loop_token
        self.call_tokens = tuple(call_tokens)

    def analyze(self, source: str) -> list[Issue]:
        if self.loop_token not in source or not contains_any(source, self.call_tokens):
            return []
        return [
            Issue(
                severity=Severity.HIGH,
                message="DoS vulnerability: unbounded loop with external calls",
                line=first_line_with(source, (self.loop_token,)),
                recommendation="Use pull payment pattern instead of push payments in loops",
            )
        ]
