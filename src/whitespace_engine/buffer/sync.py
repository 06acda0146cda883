"""Adapter boundary types and buffer-level errors."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional, Protocol, Sequence

from .state import Point, Range


@dataclass(slots=True)
class BufferMirror:
    """Host-friendly snapshot describing what a front end should render."""

    text: str
    selections: Sequence[Range]
    modified: bool = False
    attributes: dict[str, str] = field(default_factory=dict)


class BufferSync(Protocol):
    """Protocol describing how adapters exchange data with the buffer layer."""

    def pull_buffer(self) -> BufferMirror:
        """Return the latest buffer snapshot that the host should render."""
        ...


class BufferValidationError(RuntimeError):
    """Raised when a caller addresses a point outside the buffer."""

    def __init__(self, message: str, *, point: Optional[Point] = None) -> None:
        super().__init__(message)
        self.point = point


class ReadOnlyBufferError(RuntimeError):
    """Raised when an edit targets a buffer flagged read-only."""

    def __init__(self, name: str) -> None:
        super().__init__(f"Buffer '{name}' is read-only")
        self.name = name
