"""Trailing-whitespace removal with configurable exceptions."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, AbstractSet, List, Sequence

from whitespace_engine.buffer import Edit, Range
from whitespace_engine.config import ScopeConfiguration
from whitespace_engine.runtime import telemetry

from .classifier import (
    DEFAULT_COMMENT_DELIMITERS,
    is_comment_only_line,
    trailing_whitespace_span,
)

if TYPE_CHECKING:  # pragma: no cover
    from whitespace_engine.editor import TextEditor

MARKDOWN_SCOPES = frozenset({"source.gfm", "text.md"})
MARKDOWN_LINE_BREAK_MIN_RUN = 2


def is_markdown_scope(scope_name: str | None) -> bool:
    return (scope_name or "").lstrip(".") in MARKDOWN_SCOPES


@dataclass(frozen=True, slots=True)
class RemovalPolicy:
    """Which rows the remover must leave alone."""

    ignore_current_line: bool = False
    ignore_whitespace_only_lines: bool = False
    ignore_comment_only_lines: bool = False
    keep_markdown_line_breaks: bool = False
    comment_delimiters: str = DEFAULT_COMMENT_DELIMITERS

    @classmethod
    def from_config(
        cls, config: ScopeConfiguration, scope_name: str | None = None
    ) -> "RemovalPolicy":
        scope = scope_name if scope_name is not None else config.scope
        return cls(
            ignore_current_line=config.ignore_whitespace_on_current_line,
            ignore_whitespace_only_lines=config.ignore_whitespace_only_lines,
            ignore_comment_only_lines=config.ignore_comment_only_lines,
            keep_markdown_line_breaks=(
                config.keep_markdown_line_break_whitespace and is_markdown_scope(scope)
            ),
            comment_delimiters=config.comment_delimiters,
        )

    def keeps(self, row: int, line: str, start: int, end: int, cursor_rows: AbstractSet[int]) -> bool:
        """True when any exception applies to the trailing run ``start..end``."""

        if self.ignore_current_line and row in cursor_rows:
            return True
        if self.ignore_whitespace_only_lines and start == 0:
            return True
        if self.ignore_comment_only_lines and is_comment_only_line(
            line, self.comment_delimiters
        ):
            return True
        if (
            self.keep_markdown_line_breaks
            and start > 0
            and end - start >= MARKDOWN_LINE_BREAK_MIN_RUN
        ):
            return True
        return False


def trailing_whitespace_edits(
    lines: Sequence[str],
    policy: RemovalPolicy = RemovalPolicy(),
    cursor_rows: AbstractSet[int] = frozenset(),
) -> List[Edit]:
    """Deletions for every row whose trailing whitespace no exception protects.

    The edits are single-row and disjoint, computed from ``lines`` as given.
    """

    edits: List[Edit] = []
    for row, line in enumerate(lines):
        span = trailing_whitespace_span(line)
        if span is None:
            continue
        start, end = span
        if policy.keeps(row, line, start, end, cursor_rows):
            continue
        edits.append(Edit(Range.from_coords(row, start, row, end)))
    return edits


def strip_trailing_whitespace(text: str, policy: RemovalPolicy = RemovalPolicy()) -> str:
    """String-in, string-out variant for callers without an editor."""

    lines = text.split("\n")
    for edit in trailing_whitespace_edits(lines, policy):
        row = edit.range.start.row
        line = lines[row]
        lines[row] = line[: edit.range.start.column] + line[edit.range.end.column :]
    return "\n".join(lines)


def remove_trailing_whitespace(
    editor: "TextEditor", config: ScopeConfiguration
) -> List[Edit]:
    """Strip trailing whitespace from ``editor`` as one undoable change."""

    policy = RemovalPolicy.from_config(config, editor.scope_name)
    cursor_rows = editor.cursor_rows()
    with telemetry.span(
        "whitespace::remove_trailing",
        component="whitespace",
        metadata={"editor": editor.id, "scope": editor.scope_name},
    ) as handle:
        edits = trailing_whitespace_edits(editor.buffer.lines(), policy, cursor_rows)
        handle.add_metadata("edits", len(edits))
        if edits:
            editor.buffer.apply_edits(edits, label="remove_trailing_whitespace")
    return edits


__all__ = [
    "MARKDOWN_SCOPES",
    "RemovalPolicy",
    "is_markdown_scope",
    "remove_trailing_whitespace",
    "strip_trailing_whitespace",
    "trailing_whitespace_edits",
]
