"""Line storage behind a buffer: an immutable list of rows plus a version."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, List, Sequence


@dataclass(slots=True)
class BufferDocument:
    """Rows of text; every edit produces a new document with a bumped version.

    Lines are split on ``\\n`` only, so a CRLF document keeps the ``\\r`` at the
    end of each line. Joining the lines with ``\\n`` reproduces the text.
    """

    _lines: List[str] = field(default_factory=lambda: [""])
    version: int = 0

    @classmethod
    def from_text(cls, text: str, *, version: int = 0) -> "BufferDocument":
        return cls(_lines=text.split("\n"), version=version)

    def snapshot(self) -> Sequence[str]:
        """Rows as a tuple, safe to hold across later edits."""

        return tuple(self._lines)

    @property
    def text(self) -> str:
        return "\n".join(self._lines)

    @property
    def line_count(self) -> int:
        return len(self._lines)

    @property
    def last_row(self) -> int:
        return len(self._lines) - 1

    @property
    def line_ending(self) -> str:
        if any(line.endswith("\r") for line in self._lines[:-1]):
            return "\r\n"
        return "\n"

    def get_line(self, index: int) -> str:
        return self._lines[index]

    def replace(self, *, lines: Iterable[str]) -> "BufferDocument":
        """New document holding ``lines``; an empty iterable becomes one empty row."""

        new_lines = list(lines) or [""]
        return BufferDocument(_lines=new_lines, version=self.version + 1)

    def update_lines(
        self, start: int, end: int, new_lines: Iterable[str]
    ) -> "BufferDocument":
        """Return a document with ``[start:end]`` replaced by ``new_lines``."""

        lines = list(self._lines)
        lines[start:end] = list(new_lines)
        return self.replace(lines=lines)
