"""Statement normalization: comment stripping, whitespace folding, batching."""

from __future__ import annotations

import re
from dataclasses import dataclass, field

_LINE_COMMENT_RE = re.compile(r"--[^\n]*")
_WHITESPACE_RE = re.compile(r"\s+")


@dataclass(frozen=True)
class NormalizedStatement:
    """Canonical, upper-cased form of a submitted query.

    ``statements`` holds the non-empty parts of the comment-stripped text split
    on ``;``, before upper-casing. ``raw`` is the submitted text with comments
    kept, whitespace folded and upper-cased; comment stripping does not know
    about string literals, so both forms are checked.
    """

    text: str
    statements: tuple[str, ...]
    source: str = field(default="", repr=False)
    raw: str = field(default="", repr=False)

    @property
    def statement_count(self) -> int:
        return len(self.statements)

    @property
    def is_empty(self) -> bool:
        return not self.text

    @property
    def raw_statement_count(self) -> int:
        return len(_split(self.raw))

    @property
    def is_stacked(self) -> bool:
        return self.statement_count > 1 or self.raw_statement_count > 1


def _coerce(sql: object) -> str:
    if sql is None:
        return ""
    if isinstance(sql, bytes | bytearray):
        return bytes(sql).decode("utf-8", errors="replace")
    return sql if isinstance(sql, str) else str(sql)


def strip_block_comments(sql: str) -> str:
    """Replace each ``/* ... */`` with a single space.

    Pairs the leftmost ``/*`` with the next ``*/``, the same as a non-greedy
    regex, but in one linear pass. An unterminated comment is left as is.
    """
    parts: list[str] = []
    pos = 0
    while True:
        start = sql.find("/*", pos)
        if start == -1:
            break
        end = sql.find("*/", start + 2)
        if end == -1:
            break
        parts.append(sql[pos:start])
        parts.append(" ")
        pos = end + 2
    parts.append(sql[pos:])
    return "".join(parts)


def strip_comments(sql: str) -> str:
    """Remove block comments, then ``--`` line comments, each replaced by a space."""
    return _LINE_COMMENT_RE.sub(" ", strip_block_comments(sql))


def normalize(sql: object) -> NormalizedStatement:
    """Normalize a raw query for pattern matching.

    Total over any input: None and bytes are accepted, nothing is raised.
    ``statements`` is split after comment stripping. A ``;`` inside a comment
    still makes the query stacked through ``raw``, since the client that runs
    the query may not agree on where a comment ends.
    """
    source = _coerce(sql)
    stripped = _fold(strip_comments(source))
    return NormalizedStatement(
        text=stripped.upper(),
        statements=_split(stripped),
        source=source,
        raw=_fold(source).upper(),
    )


def _fold(sql: str) -> str:
    return _WHITESPACE_RE.sub(" ", sql).strip()


def _split(sql: str) -> tuple[str, ...]:
    return tuple(part.strip() for part in sql.split(";") if part.strip())
