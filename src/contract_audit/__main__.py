"""CLI entry-point for contract_audit.

Usage:
    python -m contract_audit                      < request.json
    python -m contract_audit -                    < request.json
    python -m contract_audit analyze <file|-> [--rules ID,ID] [--weight KEY=VALUE ...]
                                              [--config FILE] [--json] [--workers N]
    python -m contract_audit rules [--all]
    python -m contract_audit validate <instance.json> <schema_name>

With no command the CLI speaks the request channel: one JSON request
``{"code": ..., "config": {...}}`` on stdin, one compact JSON response
``{"score", "metrics", "issues"}`` on stdout.
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Any

import jsonschema

from contract_audit import __version__
from contract_audit.api import (
    RequestError,
    analyze_source as _api_analyze_source,
    describe_rules as _api_describe_rules,
    process_request as _api_process_request,
)
from contract_audit.contracts.load import validate_file as _validate_file
from contract_audit.core.config import WEIGHT_KEYS, AnalyzerConfig
from contract_audit.model.analysis_result import AnalysisResults
from contract_audit.policy.thresholds import (
    exit_code_from_score as _exit_code_from_score,
    tier_from_score,
)
from contract_audit.utils.exit_codes import ExitCode
from contract_audit.utils.json_norm import stable_json_dump, strict_json_loads

_logger = logging.getLogger(__name__)

_KNOWN_COMMANDS = {"analyze", "rules", "validate"}

_TIER_MARK = {"green": "[OK]", "yellow": "[WARN]", "red": "[FAIL]"}


# ── human output ────────────────────────────────────────────────────


def _print_human(results: AnalysisResults, *, source_name: str) -> None:
    """Pretty-print a human-readable summary to stderr."""
    tier = tier_from_score(results.score).value
    mark = _TIER_MARK.get(tier, "[?]")

    print(f"\n{mark}  {source_name}: {results.score}/100  ({tier.upper()})", file=sys.stderr)
    metrics = results.metrics.as_dict()
    print(
        "   Metrics  : " + ", ".join(f"{k}={v}" for k, v in metrics.items()),
        file=sys.stderr,
    )
    counts = results.severity_counts()
    parts = [f"{k}={v}" for k, v in counts.items() if v]
    print(f"   Issues   : {len(results.issues)}", file=sys.stderr)
    if parts:
        print(f"   Severity : {', '.join(parts)}", file=sys.stderr)

    for issue in results.issues[:10]:
        loc = f"line {issue.line}" if issue.line is not None else "-"
        print(f"      {issue.severity.value:<6} {loc:<9} {issue.message}", file=sys.stderr)
    if len(results.issues) > 10:
        print(f"      ... and {len(results.issues) - 10} more", file=sys.stderr)

    print("", file=sys.stderr)


# ── argument helpers ────────────────────────────────────────────────


def _parse_weights(pairs: list[str]) -> dict[str, float]:
    """``["security=0.5", ...]`` → ``{"security": 0.5}``."""
    weights: dict[str, float] = {}
    for pair in pairs:
        key, sep, value = pair.partition("=")
        if not sep or not key:
            raise ValueError(f"--weight expects KEY=VALUE, got {pair!r}")
        try:
            weights[key.strip()] = float(value)
        except ValueError:
            raise ValueError(f"--weight {key}: not a number: {value!r}") from None
    return weights


def _build_config(args: argparse.Namespace) -> AnalyzerConfig:
    """Merge ``--config`` file with ``--rules`` / ``--weight`` overrides."""
    data: dict[str, Any] = {}
    if args.config is not None:
        loaded = strict_json_loads(Path(args.config).read_text(encoding="utf-8"))
        if not isinstance(loaded, dict):
            raise ValueError(f"{args.config}: config must be a JSON object")
        data.update(loaded)
    if args.rules:
        data["enabled_rules"] = [r.strip() for r in args.rules.split(",") if r.strip()]
    if args.weights:
        weights = dict(data.get("custom_weights") or {})
        weights.update(_parse_weights(args.weights))
        data["custom_weights"] = weights
    return AnalyzerConfig.from_dict(data)


def _read_source(target: str) -> tuple[str, str]:
    if target == "-":
        return sys.stdin.read(), "<stdin>"
    path = Path(target)
    return path.read_text(encoding="utf-8"), path.name


# ── parsers ─────────────────────────────────────────────────────────


def _build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="contract-audit",
        description="Heuristic smart-contract linter with weighted scoring.",
    )
    p.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    p.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        default=False,
        help="Log rule selection and per-rule issue counts to stderr.",
    )
    sub = p.add_subparsers(dest="command")

    # ── analyze subcommand ──────────────────────────────────────────
    an_p = sub.add_parser(
        "analyze",
        help="Analyze a contract source file.",
    )
    an_p.add_argument("source", help="Contract source file, or '-' for stdin.")
    an_p.add_argument(
        "--rules",
        default=None,
        metavar="ID,ID",
        help="Comma-separated rule IDs to enable (default: all).",
    )
    an_p.add_argument(
        "--weight",
        dest="weights",
        action="append",
        default=[],
        metavar="KEY=VALUE",
        help=f"Override a category weight ({', '.join(sorted(WEIGHT_KEYS))}).",
    )
    an_p.add_argument(
        "--config",
        type=Path,
        default=None,
        help="JSON file with enabled_rules / custom_weights.",
    )
    an_p.add_argument(
        "--json",
        dest="json_out",
        action="store_true",
        default=False,
        help="Print the result JSON to stdout.",
    )
    an_p.add_argument(
        "--workers",
        type=int,
        default=None,
        help="Run rules on a thread pool of this size.",
    )

    # ── rules subcommand ────────────────────────────────────────────
    rules_p = sub.add_parser(
        "rules",
        help="List the rule catalog.",
    )
    rules_p.add_argument(
        "--all",
        dest="include_experimental",
        action="store_true",
        default=False,
        help="Include opt-in experimental rules.",
    )
    rules_p.add_argument(
        "--json",
        dest="json_out",
        action="store_true",
        default=False,
        help="Print the catalog as JSON.",
    )

    # ── validate subcommand ─────────────────────────────────────────
    val_p = sub.add_parser(
        "validate",
        help="Validate a JSON instance against a bundled schema.",
    )
    val_p.add_argument("instance", type=Path, help="Path to the JSON file to validate.")
    val_p.add_argument("schema_name", help="Schema filename, e.g. analysis_result.schema.json")
    return p


# ── handlers ────────────────────────────────────────────────────────


def _handle_request_channel() -> int:
    """stdin JSON request → stdout JSON response."""
    try:
        response = _api_process_request(sys.stdin.read())
    except RequestError as e:
        print(f"error: {e}", file=sys.stderr)
        return ExitCode.ERROR
    sys.stdout.write(response + "\n")
    return ExitCode.SUCCESS


def _handle_analyze(args: argparse.Namespace) -> int:
    try:
        config = _build_config(args)
    except (OSError, TypeError, ValueError) as e:
        print(f"error: {e}", file=sys.stderr)
        return ExitCode.ERROR

    try:
        source, name = _read_source(args.source)
    except OSError as e:
        print(f"error: cannot read {args.source}: {e}", file=sys.stderr)
        return ExitCode.ERROR

    results = _api_analyze_source(source, config, max_workers=args.workers)

    # Always show human summary on stderr
    _print_human(results, source_name=name)

    if args.json_out:
        stable_json_dump(results, sys.stdout)

    return _exit_code_from_score(results.score)


def _handle_rules(args: argparse.Namespace) -> int:
    rules = _api_describe_rules(include_experimental=args.include_experimental)
    if args.json_out:
        stable_json_dump(rules, sys.stdout)
        return ExitCode.SUCCESS
    width = max(len(r["id"]) for r in rules)
    for r in rules:
        print(f"{r['id']:<{width}}  {r['category']:<14}  {r['stability']:<12}  {r['description']}")
    return ExitCode.SUCCESS


def _handle_validate(args: argparse.Namespace) -> int:
    # Exit code contract:
    #   1 = schema violation
    #   2 = unreadable instance / schema not found
    try:
        _validate_file(args.instance, args.schema_name)
    except jsonschema.ValidationError as e:
        print(f"FAIL: {e.message}", file=sys.stderr)
        return ExitCode.VIOLATION
    except (OSError, ValueError) as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return ExitCode.ERROR
    print("OK")
    return ExitCode.SUCCESS


def main(argv: list[str] | None = None) -> int:
    """Entry-point; returns an exit code (0 = green, 1 = yellow, 2 = red)."""
    effective_argv = list(argv) if argv is not None else sys.argv[1:]

    # A bare "-" selects the request channel, same as no command at all.
    if effective_argv and effective_argv[-1] == "-" and not any(
        a in _KNOWN_COMMANDS for a in effective_argv
    ):
        effective_argv = effective_argv[:-1]

    args = _build_parser().parse_args(effective_argv)

    if args.verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(levelname)s %(name)s: %(message)s",
            stream=sys.stderr,
        )

    if args.command == "analyze":
        return _handle_analyze(args)
    if args.command == "rules":
        return _handle_rules(args)
    if args.command == "validate":
        return _handle_validate(args)
    return _handle_request_channel()


if __name__ == "__main__":
    raise SystemExit(main())
