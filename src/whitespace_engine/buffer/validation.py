"""Validation helpers shared across buffer services."""

from __future__ import annotations

from typing import Tuple

from .document import BufferDocument
from .state import Point
from .sync import BufferValidationError


def ensure_point(document: BufferDocument, point: Tuple[int, int]) -> Point:
    row, col = point
    if row < 0 or row >= document.line_count:
        raise BufferValidationError("Row out of range", point=Point(row, col))
    line = document.get_line(row)
    if col < 0 or col > len(line):
        raise BufferValidationError("Column out of range", point=Point(row, col))
    return Point(row, col)


def clip_point(document: BufferDocument, point: Tuple[int, int]) -> Point:
    """Clamp ``point`` into the document instead of raising."""

    row = min(max(point[0], 0), document.last_row)
    col = min(max(point[1], 0), len(document.get_line(row)))
    return Point(row, col)
