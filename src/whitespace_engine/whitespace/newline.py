"""End-of-file normalization: exactly one trailing newline."""

from __future__ import annotations

from typing import TYPE_CHECKING, List, Sequence

from whitespace_engine.buffer import Edit, Point, Range
from whitespace_engine.runtime import telemetry

if TYPE_CHECKING:  # pragma: no cover
    from whitespace_engine.editor import TextEditor


def _is_empty(line: str) -> bool:
    return line in ("", "\r")


def surplus_blank_rows(lines: Sequence[str]) -> range:
    """Rows to delete so the document ends in a single empty line.

    Row 0 is never part of the result, so a document made only of empty lines
    keeps its first line plus the final empty one.
    """

    if not lines or lines[-1] != "":
        return range(0)
    last = len(lines) - 1
    row = last - 1
    while row > 0 and _is_empty(lines[row]):
        row -= 1
    return range(row + 1, last)


def trailing_newline_edits(lines: Sequence[str], line_ending: str = "\n") -> List[Edit]:
    if not lines:
        return []
    last = len(lines) - 1
    if lines[last] != "":
        return [Edit(Range.caret((last, len(lines[last]))), line_ending)]
    surplus = surplus_blank_rows(lines)
    if not surplus:
        return []
    return [Edit(Range(Point(surplus.start, 0), Point(surplus.stop, 0)))]


def ensure_single_trailing_newline(editor: "TextEditor") -> bool:
    """Trim surplus blank lines or append one newline; returns whether it edited.

    When a newline is appended the editor's selections are restored afterwards
    so the insertion does not move them.
    """

    buffer = editor.buffer
    with telemetry.span(
        "whitespace::trailing_newline",
        component="whitespace",
        metadata={"editor": editor.id},
    ) as handle:
        last_row = buffer.last_row
        if buffer.line_for_row(last_row) == "":
            surplus = surplus_blank_rows(buffer.lines())
            handle.add_metadata("deleted_rows", len(surplus))
            with buffer.transact("ensure_single_trailing_newline"):
                for row in reversed(surplus):
                    buffer.delete_row(row)
            return bool(surplus)

        selected = editor.get_selected_ranges()
        buffer.append(buffer.line_ending)
        editor.set_selected_ranges(selected)
        handle.add_metadata("appended", True)
        return True


__all__ = [
    "ensure_single_trailing_newline",
    "surplus_blank_rows",
    "trailing_newline_edits",
]
