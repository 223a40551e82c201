"""Exit-code contract for every CLI command.

Code  Meaning
----  -------
  0   Success: green score, valid instance
  1   Violation: yellow score, schema violation
  2   Error: red score, malformed request, missing file
"""

from __future__ import annotations

from enum import IntEnum


class ExitCode(IntEnum):
    SUCCESS = 0
    VIOLATION = 1
    ERROR = 2
