"""Buffer abstractions: points, ranges, transactions, and undo history."""

from .buffer import Buffer, BufferChange, ScanMatch, Transaction
from .document import BufferDocument
from .state import BufferState, Edit, Point, Range
from .sync import BufferMirror, BufferSync, BufferValidationError, ReadOnlyBufferError
from .undo import UndoEntry, UndoTimeline
from .validation import clip_point, ensure_point

__all__ = [
    "Buffer",
    "BufferChange",
    "BufferDocument",
    "BufferMirror",
    "BufferState",
    "BufferSync",
    "BufferValidationError",
    "Edit",
    "Point",
    "Range",
    "ReadOnlyBufferError",
    "ScanMatch",
    "Transaction",
    "UndoEntry",
    "UndoTimeline",
    "clip_point",
    "ensure_point",
]
