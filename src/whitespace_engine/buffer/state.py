"""Points, ranges, edits, and per-buffer flags."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import NamedTuple, Optional, Tuple


class Point(NamedTuple):
    """(row, column) position; ordered the way rows read top to bottom."""

    row: int
    column: int

    def translate(self, rows: int = 0, columns: int = 0) -> "Point":
        return Point(self.row + rows, self.column + columns)


@dataclass(frozen=True, slots=True)
class Range:
    """Span between two points, always stored with ``start <= end``."""

    start: Point
    end: Point

    def __post_init__(self) -> None:
        start, end = Point(*self.start), Point(*self.end)
        if end < start:
            start, end = end, start
        object.__setattr__(self, "start", start)
        object.__setattr__(self, "end", end)

    @classmethod
    def from_coords(
        cls, start_row: int, start_column: int, end_row: int, end_column: int
    ) -> "Range":
        return cls(Point(start_row, start_column), Point(end_row, end_column))

    @classmethod
    def caret(cls, point: Tuple[int, int]) -> "Range":
        return cls(Point(*point), Point(*point))

    @property
    def is_empty(self) -> bool:
        return self.start == self.end

    @property
    def is_single_line(self) -> bool:
        return self.start.row == self.end.row


@dataclass(frozen=True, slots=True)
class Edit:
    """Replace ``range`` with ``text``; an empty ``text`` deletes."""

    range: Range
    text: str = ""

    @property
    def is_deletion(self) -> bool:
        return not self.text


@dataclass(slots=True)
class BufferState:
    """Mutable file-level flags that travel with a buffer."""

    path: Optional[Path] = None
    read_only: bool = False
    modified: bool = False
    last_change_tick: int = 0

    def mark_changed(self, tick: int) -> None:
        self.modified = True
        self.last_change_tick = tick

    def mark_saved(self) -> None:
        self.modified = False
