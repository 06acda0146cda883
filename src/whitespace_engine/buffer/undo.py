"""Snapshot-based undo history; one step per outermost buffer transaction."""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass
from typing import Deque, List, Optional

DEFAULT_HISTORY_LIMIT = 500


@dataclass(frozen=True, slots=True)
class UndoEntry:
    """Full text before and after one transaction, plus how many edits it held."""

    label: str
    before_text: str
    after_text: str
    change_count: int = 1


class UndoTimeline:
    """Two stacks: steps that can be undone and steps that can be redone.

    Pushing a new step discards the redo stack. The oldest steps fall off once
    ``limit`` is reached.
    """

    def __init__(self, limit: int = DEFAULT_HISTORY_LIMIT) -> None:
        if limit < 1:
            raise ValueError("history limit must be positive")
        self._done: Deque[UndoEntry] = deque(maxlen=limit)
        self._undone: List[UndoEntry] = []

    def __len__(self) -> int:
        return len(self._done)

    def push(self, entry: UndoEntry) -> None:
        self._done.append(entry)
        self._undone.clear()

    def peek(self) -> Optional[UndoEntry]:
        return self._done[-1] if self._done else None

    def can_undo(self) -> bool:
        return bool(self._done)

    def can_redo(self) -> bool:
        return bool(self._undone)

    def undo(self) -> Optional[UndoEntry]:
        if not self._done:
            return None
        entry = self._done.pop()
        self._undone.append(entry)
        return entry

    def redo(self) -> Optional[UndoEntry]:
        if not self._undone:
            return None
        entry = self._undone.pop()
        self._done.append(entry)
        return entry
