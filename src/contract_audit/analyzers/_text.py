"""Raw-text helpers shared by the rule catalog.

Rules work on two granularities only: substring presence in the whole
source, and substring presence per line. Nothing here tokenizes.
"""

from __future__ import annotations

from typing import Callable, Iterable

LinePredicate = Callable[[str], bool]

# Access-control markers shared by several rules.
OWNER_CHECK_TOKENS: tuple[str, ...] = ("onlyOwner", "require(msg.sender")

# Comment openers recognised inside assembly blocks.
COMMENT_TOKENS: tuple[str, ...] = ("//", "/*")

LOOP_TOKENS: tuple[str, ...] = ("for", "while")


def split_lines(source: str) -> list[str]:
    r"""Split *source* on ``\n`` only, dropping one trailing ``\r`` per line.

    Other separators that ``str.splitlines`` honours (lone ``\r``, form
    feed, ``\u2028`` ...) stay inside the line. A final empty segment after
    a trailing newline is not a line.
    """
    lines = source.split("\n")
    if lines[-1] == "":
        lines.pop()
    return [line[:-1] if line.endswith("\r") else line for line in lines]


def contains_any(text: str, tokens: Iterable[str]) -> bool:
    return any(tok in text for tok in tokens)


def contains_all(text: str, tokens: Iterable[str]) -> bool:
    return all(tok in text for tok in tokens)


def first_line(source: str, predicate: LinePredicate) -> int:
    """1-based index of the first line satisfying *predicate*.

    Falls back to line 1 when no single line matches, e.g. when the
    whole-source condition was satisfied by tokens spread over several
    lines.
    """
    for idx, line in enumerate(split_lines(source), start=1):
        if predicate(line):
            return idx
    return 1


def first_line_with(source: str, tokens: Iterable[str]) -> int:
    """``first_line`` for the common "line contains any of *tokens*" case."""
    toks = tuple(tokens)
    return first_line(source, lambda line: contains_any(line, toks))


def declared_name(line: str, markers: Iterable[str]) -> str:
    """Extract the identifier following a declaration marker.

    ``"function withdraw(uint a) public {"`` -> ``"withdraw"``
    """
    for marker in markers:
        if marker in line:
            tail = line.split(marker, 1)[1]
            return tail.split("(", 1)[0].strip()
    return ""
