"""Workspace tracking open editors and which one is active."""

from __future__ import annotations

from pathlib import Path
from typing import Callable, Dict, List, Optional

from whitespace_engine.buffer import Buffer
from whitespace_engine.runtime import telemetry
from whitespace_engine.runtime.events import Disposable, Emitter

from .text_editor import DEFAULT_SCOPE, TextEditor

SCOPES_BY_SUFFIX: Dict[str, str] = {
    ".md": "source.gfm",
    ".markdown": "source.gfm",
    ".py": "source.python",
    ".js": "source.js",
    ".ts": "source.ts",
    ".rb": "source.ruby",
    ".sh": "source.shell",
    ".c": "source.c",
    ".h": "source.c",
    ".go": "source.go",
    ".yaml": "source.yaml",
    ".yml": "source.yaml",
    ".json": "source.json",
    ".txt": DEFAULT_SCOPE,
}


def scope_for_path(path: Path | str) -> str:
    name = Path(path).name
    if name == "Makefile":
        return "source.makefile"
    return SCOPES_BY_SUFFIX.get(Path(path).suffix.lower(), DEFAULT_SCOPE)


class Workspace:
    def __init__(self) -> None:
        self.emitter = Emitter()
        self._editors: List[TextEditor] = []
        self._active: Optional[TextEditor] = None

    @property
    def editors(self) -> tuple[TextEditor, ...]:
        return tuple(self._editors)

    @property
    def active_editor(self) -> Optional[TextEditor]:
        return self._active

    def set_active_editor(self, editor: TextEditor) -> None:
        if editor not in self._editors:
            raise ValueError(f"{editor!r} is not open in this workspace")
        self._active = editor

    def observe_text_editors(self, callback: Callable[[TextEditor], object]) -> Disposable:
        """Call ``callback`` for every open editor now and every editor added later."""

        for editor in list(self._editors):
            callback(editor)
        return self.emitter.on("did-add-text-editor", callback)  # type: ignore[arg-type]

    def add_editor(self, editor: TextEditor, *, activate: bool = True) -> TextEditor:
        self._editors.append(editor)
        editor.on_did_destroy(self._forget)
        if activate or self._active is None:
            self._active = editor
        telemetry.record_event(
            "workspace.open",
            data={"editor": editor.id, "buffer": editor.buffer.name, "scope": editor.scope_name},
        )
        self.emitter.emit("did-add-text-editor", editor)
        return editor

    def open(
        self,
        text: str = "",
        *,
        name: str = "untitled",
        scope_name: str = DEFAULT_SCOPE,
        tab_length: int = 2,
        soft_tabs: bool = True,
        activate: bool = True,
    ) -> TextEditor:
        editor = TextEditor(
            Buffer.from_text(text, name=name),
            scope_name=scope_name,
            tab_length=tab_length,
            soft_tabs=soft_tabs,
        )
        return self.add_editor(editor, activate=activate)

    def open_file(
        self,
        path: Path | str,
        *,
        scope_name: Optional[str] = None,
        tab_length: int = 2,
        soft_tabs: bool = True,
        activate: bool = True,
    ) -> TextEditor:
        editor = TextEditor(
            Buffer.load(path),
            scope_name=scope_name or scope_for_path(path),
            tab_length=tab_length,
            soft_tabs=soft_tabs,
        )
        return self.add_editor(editor, activate=activate)

    def close(self, editor: TextEditor) -> None:
        editor.destroy()

    def _forget(self, editor: TextEditor) -> None:
        if editor in self._editors:
            self._editors.remove(editor)
        if self._active is editor:
            self._active = self._editors[-1] if self._editors else None
        telemetry.record_event("workspace.close", data={"editor": editor.id})


__all__ = ["SCOPES_BY_SUFFIX", "Workspace", "scope_for_path"]
