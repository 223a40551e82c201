"""Canonical JSON serialization for CLI and API output.

Guarantees:
  - Stable key ordering (``sort_keys=True``)
  - Trailing newline at EOF (pretty mode only)
  - Enums → their values
  - Objects exposing ``to_dict()`` (issues, results, configs) → dicts
"""

from __future__ import annotations

import json
from enum import Enum
from typing import IO, Any, Mapping


def _to_builtin(obj: Any) -> Any:
    """Convert model objects into JSON-safe builtins."""
    if obj is None or isinstance(obj, (bool, int, float)):
        return obj
    if isinstance(obj, Enum):
        return obj.value
    if isinstance(obj, str):
        return obj
    to_dict = getattr(obj, "to_dict", None)
    if callable(to_dict):
        return _to_builtin(to_dict())
    if isinstance(obj, Mapping):
        return {str(k): _to_builtin(v) for k, v in obj.items()}
    if isinstance(obj, (list, tuple, set, frozenset)):
        return [_to_builtin(v) for v in obj]
    return str(obj)


def stable_json_dumps(obj: Any, *, indent: int | None = 2) -> str:
    """Serialize *obj* deterministically.

    ``indent=None`` produces the compact single-line form used on the
    stdin/stdout request channel.
    """
    built = _to_builtin(obj)
    if indent is None:
        return json.dumps(built, sort_keys=True, ensure_ascii=False, separators=(",", ":"))
    return json.dumps(built, indent=indent, sort_keys=True, ensure_ascii=False) + "\n"


def stable_json_dump(obj: Any, fp: IO[str], *, indent: int | None = 2) -> None:
    fp.write(stable_json_dumps(obj, indent=indent))


def _reject_constant(name: str) -> Any:
    raise ValueError(f"non-finite number {name} is not valid JSON")


def strict_json_loads(text: str) -> Any:
    """``json.loads`` that refuses the ``NaN``/``Infinity`` extensions."""
    return json.loads(text, parse_constant=_reject_constant)
