"""Text buffer façade combining document, state, undo, and change events."""

from __future__ import annotations

import re
from contextlib import AbstractContextManager
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, ContextManager, Iterable, List, Optional, Pattern, Sequence

from whitespace_engine.runtime import telemetry
from whitespace_engine.runtime.events import Disposable, Emitter

from .document import BufferDocument
from .state import BufferState, Edit, Point, Range
from .sync import BufferMirror, ReadOnlyBufferError
from .undo import UndoEntry, UndoTimeline
from .validation import ensure_point


@dataclass(frozen=True, slots=True)
class BufferChange:
    old_range: Range
    new_range: Range
    old_text: str
    new_text: str


class ScanMatch:
    """One regex hit reported by ``Buffer.scan``."""

    __slots__ = ("range", "match_text", "groups", "replacement")

    def __init__(self, range: Range, match: "re.Match[str]") -> None:
        self.range = range
        self.match_text = match.group(0)
        self.groups = match.groups()
        self.replacement: Optional[str] = None

    def replace(self, text: str) -> None:
        self.replacement = text


class Buffer:
    def __init__(
        self,
        *,
        name: str = "untitled",
        document: Optional[BufferDocument] = None,
        state: Optional[BufferState] = None,
        history: Optional[UndoTimeline] = None,
    ) -> None:
        self.name = name
        self.document = document or BufferDocument()
        self.state = state or BufferState()
        self.history = history if history is not None else UndoTimeline()
        self.emitter = Emitter()
        self._transaction: Optional[Transaction] = None

    @classmethod
    def from_text(
        cls, text: str, *, name: str = "untitled", path: Optional[Path] = None
    ) -> "Buffer":
        return cls(
            name=name,
            document=BufferDocument.from_text(text),
            state=BufferState(path=path),
        )

    @classmethod
    def load(cls, path: Path | str) -> "Buffer":
        file_path = Path(path)
        text = ""
        if file_path.exists():
            with file_path.open("r", encoding="utf-8", newline="") as handle:
                text = handle.read()
        return cls.from_text(text, name=file_path.name, path=file_path)

    # -- reading -----------------------------------------------------------

    @property
    def line_count(self) -> int:
        return self.document.line_count

    @property
    def last_row(self) -> int:
        return self.document.last_row

    @property
    def line_ending(self) -> str:
        return self.document.line_ending

    @property
    def path(self) -> Optional[Path]:
        return self.state.path

    @property
    def read_only(self) -> bool:
        return self.state.read_only

    def lines(self) -> Sequence[str]:
        return self.document.snapshot()

    def line_for_row(self, row: int) -> str:
        return self.document.get_line(ensure_point(self.document, (row, 0)).row)

    def get_text(self) -> str:
        return self.document.text

    def get_end_position(self) -> Point:
        return Point(self.last_row, len(self.document.get_line(self.last_row)))

    def get_range(self) -> Range:
        return Range(Point(0, 0), self.get_end_position())

    def get_text_in_range(self, range: Range) -> str:
        start = ensure_point(self.document, range.start)
        end = ensure_point(self.document, range.end)
        lines = self.document.snapshot()
        if start.row == end.row:
            return lines[start.row][start.column : end.column]
        parts = [lines[start.row][start.column :]]
        parts.extend(lines[start.row + 1 : end.row])
        parts.append(lines[end.row][: end.column])
        return "\n".join(parts)

    def is_row_blank(self, row: int) -> bool:
        return not self.line_for_row(row).strip()

    def find_all(self, pattern: str | Pattern[str]) -> List[Range]:
        """Ranges of every line-local match of ``pattern``."""

        regex = re.compile(pattern) if isinstance(pattern, str) else pattern
        return [
            Range.from_coords(row, match.start(), row, match.end())
            for row, line in enumerate(self.document.snapshot())
            for match in regex.finditer(line)
        ]

    def mirror(self, *, selections: Sequence[Range] = ()) -> BufferMirror:
        return BufferMirror(
            text=self.get_text(),
            selections=tuple(selections),
            modified=self.state.modified,
            attributes={"buffer": self.name, "version": str(self.document.version)},
        )

    # -- writing -----------------------------------------------------------

    def transact(self, label: str = "transaction") -> "Transaction":
        """Group edits into one undo step; the outermost block rolls back on error."""

        return Transaction(self, label)

    def set_text_in_range(self, range: Range, text: str) -> Range:
        if self.state.read_only:
            raise ReadOnlyBufferError(self.name)
        start = ensure_point(self.document, range.start)
        end = ensure_point(self.document, range.end)
        with self.transact("edit"):
            old_text = self.get_text_in_range(Range(start, end))
            prefix = self.document.get_line(start.row)[: start.column]
            suffix = self.document.get_line(end.row)[end.column :]
            replacement = (prefix + text + suffix).split("\n")
            self.document = self.document.update_lines(
                start.row, end.row + 1, replacement
            )
            self.state.mark_changed(self.document.version)
            inserted = text.split("\n")
            if len(inserted) == 1:
                new_end = Point(start.row, start.column + len(text))
            else:
                new_end = Point(start.row + len(inserted) - 1, len(inserted[-1]))
            new_range = Range(start, new_end)
            if self._transaction is not None:
                self._transaction.record()
            self.emitter.emit(
                "did-change",
                BufferChange(
                    old_range=Range(start, end),
                    new_range=new_range,
                    old_text=old_text,
                    new_text=text,
                ),
            )
        return new_range

    def set_text(self, text: str) -> Range:
        return self.set_text_in_range(self.get_range(), text)

    def insert_text(self, point: Point, text: str) -> Range:
        return self.set_text_in_range(Range(point, point), text)

    def delete_range(self, range: Range) -> Range:
        return self.set_text_in_range(range, "")

    def append(self, text: str) -> Range:
        return self.insert_text(self.get_end_position(), text)

    def delete_row(self, row: int) -> Range:
        """Remove ``row`` together with one adjoining line break."""

        ensure_point(self.document, (row, 0))
        if self.line_count == 1:
            return self.delete_range(Range(Point(0, 0), self.get_end_position()))
        if row < self.last_row:
            return self.delete_range(Range.from_coords(row, 0, row + 1, 0))
        previous = len(self.document.get_line(row - 1))
        return self.delete_range(
            Range.from_coords(row - 1, previous, row, len(self.document.get_line(row)))
        )

    def apply_edits(self, edits: Iterable[Edit], *, label: str = "apply_edits") -> int:
        """Apply edits computed against the current text, last position first."""

        ordered = sorted(edits, key=lambda edit: edit.range.start, reverse=True)
        with self.transact(label):
            for edit in ordered:
                self.set_text_in_range(edit.range, edit.text)
        return len(ordered)

    def scan(
        self,
        pattern: str | Pattern[str],
        callback: Callable[[ScanMatch], object],
    ) -> int:
        """Report every line-local match to ``callback``, then apply replacements.

        All matches are collected from one snapshot before any replacement is
        written, so callbacks always see pre-edit coordinates.
        """

        regex = re.compile(pattern) if isinstance(pattern, str) else pattern
        matches: List[ScanMatch] = []
        for row, line in enumerate(self.document.snapshot()):
            for match in regex.finditer(line):
                scan_match = ScanMatch(
                    Range.from_coords(row, match.start(), row, match.end()), match
                )
                callback(scan_match)
                matches.append(scan_match)
        edits = [
            Edit(item.range, item.replacement)
            for item in matches
            if item.replacement is not None and item.replacement != item.match_text
        ]
        if edits:
            self.apply_edits(edits, label="scan")
        return len(edits)

    def undo(self) -> bool:
        entry = self.history.undo()
        if entry is None:
            return False
        self._reset_document(entry.before_text)
        return True

    def redo(self) -> bool:
        if not self.history.can_redo():
            return False
        entry = self.history.redo()
        self._reset_document(entry.after_text)
        return True

    def save(self) -> None:
        """Run will-save hooks, persist to ``path`` if set, then notify."""

        with telemetry.span(
            "buffer::save", component="buffer", metadata={"buffer": self.name}
        ):
            self.emitter.emit("will-save", self)
            if self.state.path is not None:
                with self.state.path.open("w", encoding="utf-8", newline="") as handle:
                    handle.write(self.get_text())
            self.state.mark_saved()
            self.emitter.emit("did-save", self)

    # -- events ------------------------------------------------------------

    def on_did_change(self, callback: Callable[[BufferChange], object]) -> Disposable:
        return self.emitter.on("did-change", callback)  # type: ignore[arg-type]

    def on_did_reset(self, callback: Callable[["Buffer"], object]) -> Disposable:
        return self.emitter.on("did-reset", callback)  # type: ignore[arg-type]

    def on_will_save(self, callback: Callable[["Buffer"], object]) -> Disposable:
        return self.emitter.on("will-save", callback)  # type: ignore[arg-type]

    def on_did_save(self, callback: Callable[["Buffer"], object]) -> Disposable:
        return self.emitter.on("did-save", callback)  # type: ignore[arg-type]

    def _reset_document(self, text: str) -> None:
        self.document = BufferDocument.from_text(
            text, version=self.document.version + 1
        )
        self.state.mark_changed(self.document.version)
        self.emitter.emit("did-reset", self)


class Transaction(AbstractContextManager["Transaction"]):
    def __init__(self, buffer: Buffer, label: str) -> None:
        self.buffer = buffer
        self.label = label
        self.change_count = 0
        self._outermost = False
        self._before: Optional[BufferDocument] = None
        self._modified_before = False
        self._span_cm: Optional[ContextManager[object]] = None

    def __enter__(self) -> "Transaction":
        if self.buffer._transaction is not None:
            return self.buffer._transaction
        self._outermost = True
        self._before = self.buffer.document
        self._modified_before = self.buffer.state.modified
        self.buffer._transaction = self
        self._span_cm = telemetry.span(
            name=f"buffer::{self.label}",
            component="buffer",
            metadata={"buffer": self.buffer.name},
        )
        self._span_cm.__enter__()
        return self

    def record(self) -> None:
        self.change_count += 1

    def __exit__(self, exc_type, exc, tb) -> bool:
        if not self._outermost:
            return False
        self.buffer._transaction = None
        try:
            if exc_type is not None:
                self._rollback()
            elif self.change_count and self._before is not None:
                self.buffer.history.push(
                    UndoEntry(
                        label=self.label,
                        before_text=self._before.text,
                        after_text=self.buffer.get_text(),
                        change_count=self.change_count,
                    )
                )
        finally:
            if self._span_cm is not None:
                self._span_cm.__exit__(exc_type, exc, tb)
        return False

    def _rollback(self) -> None:
        if self._before is None or not self.change_count:
            return
        self.buffer.document = self._before.replace(lines=self._before.snapshot())
        self.buffer.state.modified = self._modified_before
        self.buffer.emitter.emit("did-reset", self.buffer)
