"""Rules turn raw contract source into issues.

Every rule exposes ``id``, ``category``, ``description`` and
``analyze(source) -> list[Issue]``. Rules are total (never raise),
pure (no I/O, no state surviving a call) and independent of each other,
so the registry may run them in any order or in parallel.

Rule modules:
    - core: reentrancy, storage, events, loop gas, best practices
    - vulnerabilities: overflow, self-destruct, timestamp, front-running, ...
    - patterns: visibility, pragma, deprecated tokens, tx.origin, assembly
    - advanced: revert-in-loop DoS, gas limit, force-send, ecrecover, randomness
    - line_scanners: opt-in per-line/per-function scanners
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from contract_audit.model import Category
from contract_audit.model.issue import Issue


@runtime_checkable
class Rule(Protocol):
    """Capability set every rule must satisfy."""

    id: str
    category: Category
    description: str

    def analyze(self, source: str) -> list[Issue]:
        """Scan *source* and return the issues found by this rule alone."""
        ...


def get_default_rules() -> list[Rule]:
    """Fresh instances of the public catalog, in registration order."""
    from .advanced import (
        BlockGasLimitRule,
        DosWithRevertRule,
        ForceSendEtherRule,
        SignatureMalleabilityRule,
        WeakRandomnessRule,
    )
    from .core import (
        EventEmissionRule,
        GasOptimizationRule,
        ReentrancyRule,
        SecurityBestPracticesRule,
        StorageEfficiencyRule,
    )
    from .patterns import (
        AssemblyUsageRule,
        DeprecatedPatternsRule,
        FloatingPragmaRule,
        MissingVisibilityRule,
        TxOriginAuthRule,
    )
    from .vulnerabilities import (
        DoSVulnerabilityRule,
        FrontRunningRule,
        IntegerOverflowRule,
        SelfDestructRule,
        TimestampDependenceRule,
        UncheckedReturnRule,
    )

    return [
        ReentrancyRule(),
        StorageEfficiencyRule(),
        EventEmissionRule(),
        GasOptimizationRule(),
        SecurityBestPracticesRule(),
        IntegerOverflowRule(),
        SelfDestructRule(),
        TimestampDependenceRule(),
        FrontRunningRule(),
        UncheckedReturnRule(),
        DoSVulnerabilityRule(),
        MissingVisibilityRule(),
        FloatingPragmaRule(),
        DeprecatedPatternsRule(),
        TxOriginAuthRule(),
        AssemblyUsageRule(),
        DosWithRevertRule(),
        BlockGasLimitRule(),
        ForceSendEtherRule(),
        SignatureMalleabilityRule(),
        WeakRandomnessRule(),
    ]


def get_experimental_rules() -> list[Rule]:
    """Fresh instances of the opt-in rules (never enabled by ``"all"``)."""
    from .line_scanners import GasAnalysisRule, SecurityAnalysisRule

    return [GasAnalysisRule(), SecurityAnalysisRule()]
