"""
contract_audit.api
==================

Programmatic entrypoints for using contract_audit as a backend engine.

Goals:
  - No argparse / web-framework dependencies
  - Stable, JSON-friendly outputs matching the bundled schemas

Non-goals:
  - Owning transport (HTTP, stdin); callers decide how bytes arrive
  - Owning presentation; callers render results

Usage::

    from contract_audit.api import analyze_source, process_request

    results = analyze_source(code)
    response_json = process_request('{"code": "..."}')
"""

from __future__ import annotations

import logging
from typing import Any, Optional

import jsonschema

from contract_audit.analyzers import get_default_rules, get_experimental_rules
from contract_audit.contracts.load import REQUEST_SCHEMA, RESULT_SCHEMA, validate_instance
from contract_audit.core.config import AnalyzerConfig
from contract_audit.core.registry import Analyzer
from contract_audit.model.analysis_result import AnalysisResults
from contract_audit.rules import stability_of
from contract_audit.utils.json_norm import stable_json_dumps, strict_json_loads

_logger = logging.getLogger(__name__)


class RequestError(ValueError):
    """A request could not be decoded or does not match the request schema."""


# ── analyze_source ──────────────────────────────────────────────────


def analyze_source(
    source: str,
    config: Optional[AnalyzerConfig] = None,
    *,
    max_workers: Optional[int] = None,
) -> AnalysisResults:
    """Analyze contract *source* with *config* (default catalog when omitted)."""
    return Analyzer(config, max_workers=max_workers).analyze(source)


# ── analyze_request ─────────────────────────────────────────────────


def analyze_request(
    payload: dict[str, Any],
    *,
    max_workers: Optional[int] = None,
) -> dict[str, Any]:
    """Run an already-decoded request and return the flat response dict.

    Parameters
    ----------
    payload:
        ``{"code": str, "config": {"enabled_rules": [...],
        "custom_weights": {...}}}``; ``config`` is optional.

    Returns
    -------
    ``{"score": int, "metrics": {...}, "issues": [...]}``

    Raises
    ------
    RequestError
        If *payload* does not match ``analysis_request.schema.json``.
    """
    try:
        validate_instance(payload, REQUEST_SCHEMA)
    except jsonschema.ValidationError as exc:
        raise RequestError(f"Failed to parse request: {exc.message}") from exc

    config = AnalyzerConfig.from_dict(payload.get("config"))
    results = analyze_source(payload["code"], config, max_workers=max_workers)
    response = results.to_dict()
    validate_instance(response, RESULT_SCHEMA)
    return response


# ── process_request ─────────────────────────────────────────────────


def process_request(request: str, *, max_workers: Optional[int] = None) -> str:
    """JSON request text in, compact JSON response text out.

    Raises
    ------
    RequestError
        If *request* is not valid JSON or not a valid request.
    """
    try:
        payload = strict_json_loads(request)
    except ValueError as exc:
        raise RequestError(f"Failed to parse request: {exc}") from exc
    if not isinstance(payload, dict):
        raise RequestError("Failed to parse request: expected a JSON object")

    response = analyze_request(payload, max_workers=max_workers)
    _logger.debug(
        "processed request: score=%s issues=%d", response["score"], len(response["issues"])
    )
    return stable_json_dumps(response, indent=None)


# ── describe_rules ──────────────────────────────────────────────────


def describe_rules(*, include_experimental: bool = False) -> list[dict[str, str]]:
    """List catalog rules with their category, description and stability."""
    rules = get_default_rules()
    if include_experimental:
        rules += get_experimental_rules()
    return [
        {
            "id": rule.id,
            "category": rule.category.value,
            "description": rule.description,
            "stability": stability_of(rule.id) or "unknown",
        }
        for rule in rules
    ]
