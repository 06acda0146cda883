"""Text editor: a buffer plus selections, indentation settings, and scope."""

from __future__ import annotations

import itertools
import re
from dataclasses import dataclass
from typing import Callable, Iterable, List, Tuple

from whitespace_engine.buffer import Buffer, BufferChange, Point, Range, clip_point
from whitespace_engine.runtime.events import CompositeDisposable, Disposable, Emitter

_EDITOR_IDS = itertools.count(1)
_LEADING_WHITESPACE = re.compile(r"^[ \t]*")

DEFAULT_SCOPE = "text.plain"


@dataclass(frozen=True, slots=True)
class InsertTextEvent:
    text: str
    range: Range


def _translate(point: Point, change: BufferChange) -> Point:
    old_start, old_end = change.old_range.start, change.old_range.end
    new_end = change.new_range.end
    if point < old_start:
        return point
    if point >= old_end:
        if point.row == old_end.row:
            return Point(new_end.row, new_end.column + point.column - old_end.column)
        return Point(point.row + new_end.row - old_end.row, point.column)
    return old_start


class TextEditor:
    """Editor view over a ``Buffer``; cursors follow edits made to the buffer."""

    def __init__(
        self,
        buffer: Buffer,
        *,
        scope_name: str = DEFAULT_SCOPE,
        tab_length: int = 2,
        soft_tabs: bool = True,
    ) -> None:
        self.id = next(_EDITOR_IDS)
        self.buffer = buffer
        self.scope_name = scope_name
        self.tab_length = tab_length
        self.soft_tabs = soft_tabs
        self.destroyed = False
        self.emitter = Emitter()
        self._selections: List[Range] = [Range.caret((0, 0))]
        self._subscriptions = CompositeDisposable(
            buffer.on_did_change(self._on_buffer_change),
            buffer.on_did_reset(self._on_buffer_reset),
        )

    def __repr__(self) -> str:
        return f"TextEditor(id={self.id}, buffer={self.buffer.name!r}, scope={self.scope_name!r})"

    @property
    def root_scope_descriptor(self) -> str:
        return self.scope_name

    # -- selections --------------------------------------------------------

    def get_selected_ranges(self) -> List[Range]:
        return list(self._selections)

    def set_selected_ranges(self, ranges: Iterable[Range]) -> None:
        document = self.buffer.document
        clipped = [
            Range(clip_point(document, rng.start), clip_point(document, rng.end))
            for rng in ranges
        ]
        self._selections = clipped or [Range.caret((0, 0))]

    def set_cursor(self, point: Tuple[int, int]) -> None:
        self.set_selected_ranges([Range.caret(point)])

    def add_cursor(self, point: Tuple[int, int]) -> None:
        self.set_selected_ranges([*self._selections, Range.caret(point)])

    def get_cursor_positions(self) -> List[Point]:
        return [selection.end for selection in self._selections]

    def cursor_rows(self) -> frozenset[int]:
        return frozenset(point.row for point in self.get_cursor_positions())

    def move_cursors(self, rows: int = 0, columns: int = 0) -> None:
        self.set_selected_ranges(
            Range.caret(point.translate(rows, columns))
            for point in self.get_cursor_positions()
        )

    # -- indentation -------------------------------------------------------

    def set_tab_length(self, tab_length: int) -> None:
        if tab_length < 1:
            raise ValueError("tab_length must be positive")
        self.tab_length = tab_length

    def set_soft_tabs(self, soft_tabs: bool) -> None:
        self.soft_tabs = bool(soft_tabs)

    def get_tab_text(self) -> str:
        return " " * self.tab_length if self.soft_tabs else "\t"

    def set_indentation_for_row(self, row: int, level: int) -> None:
        line = self.buffer.line_for_row(row)
        leading = _LEADING_WHITESPACE.match(line)
        width = leading.end() if leading else 0
        self.buffer.set_text_in_range(
            Range.from_coords(row, 0, row, width), self.get_tab_text() * level
        )

    # -- editing -----------------------------------------------------------

    def insert_text(self, text: str) -> List[Range]:
        """Replace every selection with ``text``, last selection first."""

        inserted: List[Range] = []
        with self.buffer.transact("insert_text"):
            for index in sorted(
                range(len(self._selections)),
                key=lambda i: self._selections[i].start,
                reverse=True,
            ):
                new_range = self.buffer.set_text_in_range(self._selections[index], text)
                inserted.append(new_range)
                self.emitter.emit("did-insert-text", InsertTextEvent(text, new_range))
        self.set_selected_ranges(Range.caret(rng.end) for rng in self._selections)
        return inserted

    def save(self) -> None:
        self.buffer.save()

    def destroy(self) -> None:
        if self.destroyed:
            return
        self.destroyed = True
        self.emitter.emit("did-destroy", self)
        self._subscriptions.dispose()
        self.emitter.clear()

    # -- events ------------------------------------------------------------

    def on_did_insert_text(self, callback: Callable[[InsertTextEvent], object]) -> Disposable:
        return self.emitter.on("did-insert-text", callback)  # type: ignore[arg-type]

    def on_did_destroy(self, callback: Callable[["TextEditor"], object]) -> Disposable:
        return self.emitter.on("did-destroy", callback)  # type: ignore[arg-type]

    def _on_buffer_change(self, change: BufferChange) -> None:
        self._selections = [
            Range(_translate(rng.start, change), _translate(rng.end, change))
            for rng in self._selections
        ]

    def _on_buffer_reset(self, _buffer: object) -> None:
        self.set_selected_ranges(self._selections)


__all__ = ["DEFAULT_SCOPE", "InsertTextEvent", "TextEditor"]
