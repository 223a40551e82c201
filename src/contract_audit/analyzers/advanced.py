"""Advanced rules: loop DoS, gas-limit exhaustion, forced ether, signatures, entropy."""

from __future__ import annotations

from typing import Iterable

from contract_audit.model import Category, Severity
from contract_audit.model.issue import Issue
from contract_audit.rules import (
    BLOCK_GAS_LIMIT,
    DOS_WITH_REVERT,
    FORCE_SEND_ETHER,
    SIGNATURE_MALLEABILITY,
    WEAK_RANDOMNESS,
)

from ._text import LOOP_TOKENS, contains_any, first_line, first_line_with

PUSH_PAYMENT_TOKENS: tuple[str, ...] = (".transfer", ".send", ".call")
COLLECTION_TOKENS: tuple[str, ...] = ("array", "mapping", "[]")
# Per-line variant: an indexing bracket is enough to place the issue.
COLLECTION_LINE_TOKENS: tuple[str, ...] = ("array", "mapping", "[")
FORCE_SEND_TOKENS: tuple[str, ...] = ("selfdestruct", "suicide")
WEAK_ENTROPY_TOKENS: tuple[str, ...] = (
    "block.timestamp",
    "now",
    "block.number",
    "blockhash",
    "block.difficulty",
    "block.coinbase",
    "block.gaslimit",
    "msg.gas",
    "tx.gasprice",
)
RANDOMNESS_USE_TOKENS: tuple[str, ...] = ("random", "lottery", "select", "winner")


def _loop_with(source: str, loops: tuple[str, ...], others: tuple[str, ...]) -> bool:
    return contains_any(source, loops) and contains_any(source, others)


class DosWithRevertRule:
    """Push payments made from inside a loop; one reverting payee blocks all."""

    id: str = DOS_WITH_REVERT
    category: Category = Category.SECURITY
    description: str = "Detects potential DoS with unexpected revert vulnerabilities"

    def __init__(
        self,
        loop_tokens: Iterable[str] = LOOP_TOKENS,
        payment_tokens: Iterable[str] = PUSH_PAYMENT_TOKENS,
    ):
        self.loop_tokens = tuple(loop_tokens)
        self.payment_tokens = tuple(payment_tokens)

    def analyze(self, source: str) -> list[Issue]:
        if not _loop_with(source, self.loop_tokens, self.payment_tokens):
            return []
        return [
            Issue(
                severity=Severity.HIGH,
                message="Potential DoS with unexpected revert vulnerability",
                line=first_line(
                    source,
                    lambda line: _loop_with(line, self.loop_tokens, self.payment_tokens),
                ),
                recommendation="Use pull payment pattern instead of pushing payments in loops",
            )
        ]


class BlockGasLimitRule:
    id: str = BLOCK_GAS_LIMIT
    category: Category = Category.GAS_EFFICIENCY
    description: str = "Detects operations that might hit block gas limit"

    def __init__(
        self,
        loop_tokens: Iterable[str] = LOOP_TOKENS,
        collection_tokens: Iterable[str] = COLLECTION_TOKENS,
        collection_line_tokens: Iterable[str] = COLLECTION_LINE_TOKENS,
    ):
        self.loop_tokens = tuple(loop_tokens)
        self.collection_tokens = tuple(collection_tokens)
        self.collection_line_tokens = tuple(collection_line_tokens)

    def analyze(self, source: str) -> list[Issue]:
        if not _loop_with(source, self.loop_tokens, self.collection_tokens):
            return []
        return [
            Issue(
                severity=Severity.MEDIUM,
                message="Potential block gas limit vulnerability with unbounded operation",
                line=first_line(
                    source,
                    lambda line: _loop_with(line, self.loop_tokens, self.collection_line_tokens),
                ),
                recommendation=(
                    "Implement pagination or limit the number of iterations to avoid "
                    "hitting block gas limit"
                ),
            )
        ]


class ForceSendEtherRule:
    """Any destruct call, regardless of access control."""

    id: str = FORCE_SEND_ETHER
    category: Category = Category.SECURITY
    description: str = "Detects force-sending ether vulnerabilities"

    def __init__(self, destruct_tokens: Iterable[str] = FORCE_SEND_TOKENS):
        self.destruct_tokens = tuple(destruct_tokens)

    def analyze(self, source: str) -> list[Issue]:
        if not contains_any(source, self.destruct_tokens):
            return []
        return [
            Issue(
                severity=Severity.MEDIUM,
                message="Contract uses selfdestruct which can force-send ether",
                line=first_line_with(source, self.destruct_tokens),
                recommendation=(
                    "Be aware that contracts can receive ether via selfdestruct even "
                    "without fallback or receive functions"
                ),
            )
        ]


class SignatureMalleabilityRule:
    id: str = SIGNATURE_MALLEABILITY
    category: Category = Category.SECURITY
    description: str = "Detects potential signature malleability vulnerabilities"

    def __init__(
        self,
        recover_token: str = "ecrecover",
        qualified_call: str = "ecrecover(hash, v, r, s)",
    ):
        self.recover_token = recover_token
        self.qualified_call = qualified_call

    def analyze(self, source: str) -> list[Issue]:
        if self.recover_token not in source or self.qualified_call in source:
            return []
        return [
            Issue(
                severity=Severity.MEDIUM,
                message="Potential signature malleability vulnerability",
                line=first_line_with(source, (self.recover_token,)),
                recommendation=(
                    "Ensure signatures are properly validated and consider using "
                    "OpenZeppelin's ECDSA library"
                ),
            )
        ]


class WeakRandomnessRule:
    """One issue per weak entropy source when the contract draws randomness."""

    id: str = WEAK_RANDOMNESS
    category: Category = Category.SECURITY
    description: str = "Detects weak sources of randomness"

    def __init__(
        self,
        entropy_tokens: Iterable[str] = WEAK_ENTROPY_TOKENS,
        usage_tokens: Iterable[str] = RANDOMNESS_USE_TOKENS,
    ):
        self.entropy_tokens = tuple(entropy_tokens)
        self.usage_tokens = tuple(usage_tokens)

    def analyze(self, source: str) -> list[Issue]:
        if not contains_any(source, self.usage_tokens):
            return []
        return [
            Issue(
                severity=Severity.HIGH,
                message=f"Weak randomness using {token}",
                line=first_line_with(source, (token,)),
                recommendation=(
                    "Use a secure source of randomness such as Chainlink VRF or "
                    "commit-reveal schemes"
                ),
            )
            for token in self.entropy_tokens
            if token in source
        ]
