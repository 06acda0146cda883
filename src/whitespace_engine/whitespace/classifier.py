"""Per-line predicates: trailing whitespace, blank lines, bare comment markers.

Every function here takes a single line without its ``\\n``. A final ``\\r``
(from CRLF content) is treated as part of the line terminator, never as
whitespace.
"""

from __future__ import annotations

import re
from functools import lru_cache
from typing import Optional, Pattern, Tuple

WHITESPACE_CHARS = " \t"
DEFAULT_COMMENT_DELIMITERS = "#*/"


def _body(line: str) -> str:
    return line[:-1] if line.endswith("\r") else line


def trailing_whitespace_span(line: str) -> Optional[Tuple[int, int]]:
    """Columns ``(start, end)`` of the space/tab run that ends the line.

    ``end`` stops before a final ``\\r``. ``None`` when there is no such run.
    """

    body = _body(line)
    stripped = body.rstrip(WHITESPACE_CHARS)
    if len(stripped) == len(body):
        return None
    return len(stripped), len(body)


def trailing_whitespace_start(line: str) -> Optional[int]:
    """Column where trailing whitespace starts, e.g. ``1`` for ``"a  \\t "``."""

    span = trailing_whitespace_span(line)
    return None if span is None else span[0]


def is_whitespace_only(line: str) -> bool:
    return not _body(line) or trailing_whitespace_start(line) == 0


def is_blank(line: str) -> bool:
    """True when the line has no visible character at all."""

    return not line.strip()


@lru_cache(maxsize=32)
def comment_only_pattern(delimiters: str = DEFAULT_COMMENT_DELIMITERS) -> Pattern[str]:
    """Regex for a line made of delimiter characters, spaces and tabs only."""

    markers = [char for char in dict.fromkeys(delimiters) if char not in WHITESPACE_CHARS]
    if not markers:
        raise ValueError(f"no comment delimiter besides whitespace in {delimiters!r}")
    marker = "[" + "".join(re.escape(char) for char in markers) + "]"
    return re.compile(rf"^[ \t]*{marker}(?:[ \t]*{marker})*[ \t]*\r?$")


def is_comment_only_line(line: str, delimiters: str = DEFAULT_COMMENT_DELIMITERS) -> bool:
    """Heuristic: does the line look like a bare comment marker with no code?

    ``"  # "``, ``" * "`` and ``"// //"`` qualify; ``"# note"`` does not. This is
    a character-class match, not a tokenizer, so languages with other comment
    syntaxes are not recognised unless their markers are added to
    ``delimiters``.
    """

    return comment_only_pattern(delimiters).match(line) is not None


__all__ = [
    "DEFAULT_COMMENT_DELIMITERS",
    "comment_only_pattern",
    "is_blank",
    "is_comment_only_line",
    "is_whitespace_only",
    "trailing_whitespace_span",
    "trailing_whitespace_start",
]
