"""Canonical rule ID registry.

Single source of truth for every rule identifier the analyzer accepts in
``AnalyzerConfig.enabled_rules``. IDs are a public contract: once
published they never change.

Structure:
  PUBLIC_RULE_IDS       - default catalog, enabled by the ``"all"`` sentinel
  EXPERIMENTAL_RULE_IDS - opt-in only, enabled by naming them explicitly
  DEPRECATED_RULE_IDS   - scheduled for removal, do not add new usage
  ALL_RULE_IDS          - union of all buckets (internal use only)
"""

from __future__ import annotations

import re

ALL_RULES_SENTINEL = "all"

# ── Core catalog (public) ───────────────────────────────────────────
REENTRANCY = "reentrancy"
STORAGE_EFFICIENCY = "storage_efficiency"
EVENT_EMISSION = "event_emission"
GAS_OPTIMIZATION = "gas_optimization"
SECURITY_BEST_PRACTICES = "security_best_practices"

# ── Vulnerabilities (public) ────────────────────────────────────────
INTEGER_OVERFLOW = "integer_overflow"
UNPROTECTED_SELFDESTRUCT = "unprotected_selfdestruct"
TIMESTAMP_DEPENDENCE = "timestamp_dependence"
FRONT_RUNNING = "front_running"
UNCHECKED_RETURN = "unchecked_return"
DOS_VULNERABILITY = "dos_vulnerability"

# ── Patterns (public) ───────────────────────────────────────────────
MISSING_VISIBILITY = "missing_visibility"
FLOATING_PRAGMA = "floating_pragma"
DEPRECATED_PATTERNS = "deprecated_patterns"
TX_ORIGIN_AUTH = "tx_origin_auth"
ASSEMBLY_USAGE = "assembly_usage"

# ── Advanced vulnerabilities (public) ───────────────────────────────
DOS_WITH_REVERT = "dos_with_revert"
BLOCK_GAS_LIMIT = "block_gas_limit"
FORCE_SEND_ETHER = "force_send_ether"
SIGNATURE_MALLEABILITY = "signature_malleability"
WEAK_RANDOMNESS = "weak_randomness"

# ── Line-level scanners (experimental) ──────────────────────────────
GAS_ANALYSIS = "gas_analysis"
SECURITY_ANALYSIS = "security_analysis"

# ── Buckets ─────────────────────────────────────────────────────────

PUBLIC_RULE_IDS: list[str] = sorted([
    # Core
    REENTRANCY,
    STORAGE_EFFICIENCY,
    EVENT_EMISSION,
    GAS_OPTIMIZATION,
    SECURITY_BEST_PRACTICES,
    # Vulnerabilities
    INTEGER_OVERFLOW,
    UNPROTECTED_SELFDESTRUCT,
    TIMESTAMP_DEPENDENCE,
    FRONT_RUNNING,
    UNCHECKED_RETURN,
    DOS_VULNERABILITY,
    # Patterns
    MISSING_VISIBILITY,
    FLOATING_PRAGMA,
    DEPRECATED_PATTERNS,
    TX_ORIGIN_AUTH,
    ASSEMBLY_USAGE,
    # Advanced
    DOS_WITH_REVERT,
    BLOCK_GAS_LIMIT,
    FORCE_SEND_ETHER,
    SIGNATURE_MALLEABILITY,
    WEAK_RANDOMNESS,
])

EXPERIMENTAL_RULE_IDS: list[str] = sorted([
    GAS_ANALYSIS,
    SECURITY_ANALYSIS,
])

DEPRECATED_RULE_IDS: list[str] = sorted([
    # Add deprecated rules here before removal
])

# Union of all buckets (internal use only)
ALL_RULE_IDS: list[str] = sorted(set(
    PUBLIC_RULE_IDS
    + EXPERIMENTAL_RULE_IDS
    + DEPRECATED_RULE_IDS
))


def stability_of(rule_id: str) -> str | None:
    """Return the bucket name (``public``/``experimental``/``deprecated``)."""
    if rule_id in PUBLIC_RULE_IDS:
        return "public"
    if rule_id in EXPERIMENTAL_RULE_IDS:
        return "experimental"
    if rule_id in DEPRECATED_RULE_IDS:
        return "deprecated"
    return None


_RULE_ID_RE = re.compile(r"^[a-z][a-z0-9_]*[a-z0-9]$")


def _assert_rule_registry_invariants() -> None:
    """Checked at import: sorted, unique, snake_case, disjoint buckets."""
    buckets = {
        "PUBLIC_RULE_IDS": PUBLIC_RULE_IDS,
        "EXPERIMENTAL_RULE_IDS": EXPERIMENTAL_RULE_IDS,
        "DEPRECATED_RULE_IDS": DEPRECATED_RULE_IDS,
    }
    seen: dict[str, str] = {}
    for name, ids in buckets.items():
        if ids != sorted(set(ids)):
            raise AssertionError(f"{name} must be sorted and free of duplicates")
        malformed = [rid for rid in ids if not _RULE_ID_RE.match(rid)]
        if malformed:
            raise AssertionError(f"{name} has malformed rule IDs: {malformed}")
        for rid in ids:
            if rid == ALL_RULES_SENTINEL:
                raise AssertionError(f"{name} must not list the {ALL_RULES_SENTINEL!r} sentinel")
            if rid in seen:
                raise AssertionError(f"{rid!r} is in both {seen[rid]} and {name}")
            seen[rid] = name
    if sorted(seen) != ALL_RULE_IDS:
        raise AssertionError("ALL_RULE_IDS is out of sync with the buckets")


_assert_rule_registry_invariants()
