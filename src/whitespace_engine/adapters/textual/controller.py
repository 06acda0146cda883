"""Textual-facing adapter: key presses in, buffer snapshots and status out."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Dict, Mapping, Optional, Tuple

from whitespace_engine.buffer import BufferMirror, Range
from whitespace_engine.editor import TextEditor
from whitespace_engine.runtime.events import CompositeDisposable, Disposable
from whitespace_engine.whitespace import Whitespace

SAVE = "core:save"
UNDO = "core:undo"

DEFAULT_SHORTCUTS: Mapping[str, str] = {
    "ctrl+s": SAVE,
    "ctrl+z": UNDO,
    "ctrl+r": "whitespace:remove-trailing-whitespace",
    "ctrl+k": "whitespace:save-with-trailing-whitespace",
    "ctrl+l": "whitespace:save-without-trailing-whitespace",
    "ctrl+t": "whitespace:convert-tabs-to-spaces",
    "ctrl+y": "whitespace:convert-spaces-to-tabs",
    "ctrl+a": "whitespace:convert-all-tabs-to-spaces",
}

_MOTIONS: Dict[str, tuple[int, int]] = {
    "left": (0, -1),
    "right": (0, 1),
    "up": (-1, 0),
    "down": (1, 0),
}


def _noop(*_args, **_kwargs) -> None:  # pragma: no cover - default hook
    return None


@dataclass(slots=True)
class TextualUIHooks:
    """Callbacks invoked by the adapter to update Textual widgets."""

    update_buffer: Callable[[BufferMirror], None]
    update_status: Callable[[str], None] = _noop
    handle_event: Callable[[str, object | None], None] = _noop
    log: Callable[[str], None] = _noop


class TextualWhitespaceAdapter:
    """Bridges the active editor and the whitespace commands to a Textual surface."""

    def __init__(
        self,
        package: Whitespace,
        hooks: TextualUIHooks,
        *,
        shortcuts: Optional[Mapping[str, str]] = None,
    ) -> None:
        self.package = package
        self.hooks = hooks
        self.shortcuts = dict(DEFAULT_SHORTCUTS if shortcuts is None else shortcuts)
        self._subscriptions = CompositeDisposable()
        self._watched: Dict[int, Tuple[Disposable, ...]] = {}
        self._subscriptions.add(
            package.workspace.observe_text_editors(self._watch_editor)
        )
        self._refresh_buffer()

    @property
    def editor(self) -> Optional[TextEditor]:
        return self.package.workspace.active_editor

    def dispose(self) -> None:
        self._subscriptions.dispose()
        self._watched.clear()

    def handle_key(self, key: str, *, text: Optional[str] = None) -> str:
        """Apply one key press to the active editor and return the status shown."""

        editor = self.editor
        if editor is None:
            return self._status("no_editor")
        self._log_state("key ->", key=key, text=text)

        if key in self.shortcuts:
            status = self.run_command(self.shortcuts[key])
        elif key == "enter":
            editor.insert_text("\n")
            status = "insert"
        elif key == "tab":
            editor.insert_text(editor.get_tab_text())
            status = "insert"
        elif key == "backspace":
            status = self._backspace(editor)
        elif key in _MOTIONS:
            editor.move_cursors(*_MOTIONS[key])
            status = "move"
        elif text and text.isprintable():
            editor.insert_text(text)
            status = "insert"
        else:
            status = "ignored"

        self._refresh_buffer()
        return self._status(status)

    def run_command(self, name: str) -> str:
        editor = self.editor
        if editor is None:
            return "no_editor"
        if name == SAVE:
            editor.save()
            return "saved"
        if name == UNDO:
            return "undo" if editor.buffer.undo() else "nothing_to_undo"
        self.package.commands.dispatch(name)
        self.hooks.handle_event(name, None)
        return name.split(":", 1)[1]

    def _backspace(self, editor: TextEditor) -> str:
        ranges = []
        for point in editor.get_cursor_positions():
            if point.column > 0:
                ranges.append(Range.from_coords(point.row, point.column - 1, point.row, point.column))
            elif point.row > 0:
                previous = len(editor.buffer.line_for_row(point.row - 1))
                ranges.append(Range.from_coords(point.row - 1, previous, point.row, 0))
        if not ranges:
            return "ignored"
        with editor.buffer.transact("backspace"):
            for rng in sorted(ranges, key=lambda item: item.start, reverse=True):
                editor.buffer.delete_range(rng)
        return "delete"

    def _watch_editor(self, editor: TextEditor) -> None:
        if editor.id in self._watched:
            return
        handles = (
            editor.buffer.on_did_save(
                lambda buffer: self.hooks.handle_event("buffer.saved", buffer.name)
            ),
            editor.on_did_destroy(lambda _editor: self._forget_editor(editor)),
        )
        self._watched[editor.id] = handles
        self._subscriptions.add(*handles)

    def _forget_editor(self, editor: TextEditor) -> None:
        for handle in self._watched.pop(editor.id, ()):
            handle.dispose()
            self._subscriptions.remove(handle)

    def pull_buffer(self) -> BufferMirror:
        editor = self.editor
        if editor is None:
            return BufferMirror(text="", selections=())
        mirror = editor.buffer.mirror(selections=editor.get_selected_ranges())
        mirror.attributes.update(
            {
                "scope": editor.scope_name,
                "tab_length": str(editor.tab_length),
                "indent": "spaces" if editor.soft_tabs else "tabs",
            }
        )
        return mirror

    def _refresh_buffer(self) -> None:
        self.hooks.update_buffer(self.pull_buffer())

    def _status(self, status: str) -> str:
        self.hooks.update_status(status)
        self._log_state("status <-", status=status)
        return status

    def _log_state(self, prefix: str, **fields: object) -> None:
        editor = self.editor
        snapshot: Dict[str, object] = {}
        if editor is not None:
            snapshot = {
                "editor": editor.id,
                "cursors": tuple(editor.get_cursor_positions()),
                "version": editor.buffer.document.version,
                "modified": editor.buffer.state.modified,
            }
        snapshot.update({k: v for k, v in fields.items() if v is not None})
        parts = [prefix, *(f"{key}={value!r}" for key, value in snapshot.items())]
        self.hooks.log(" ".join(parts))


__all__ = ["DEFAULT_SHORTCUTS", "TextualUIHooks", "TextualWhitespaceAdapter"]
