"""Wires the whitespace passes to editor lifecycle events and commands."""

from __future__ import annotations

from typing import Dict, List, Optional, Tuple

from whitespace_engine.buffer import Edit
from whitespace_engine.commands import CommandRegistry, load_whitespace_commands
from whitespace_engine.config import ConfigStore, ScopeConfiguration
from whitespace_engine.editor import InsertTextEvent, TextEditor, Workspace
from whitespace_engine.runtime import telemetry
from whitespace_engine.runtime.events import CompositeDisposable, Disposable

from . import indentation, newline, trailing


class Whitespace:
    """Watches every editor in a workspace and cleans whitespace on save.

    Each watched editor holds three subscriptions (will-save, did-insert-text,
    did-destroy). They are stored per editor id and released together when
    the editor is destroyed.
    """

    def __init__(
        self,
        workspace: Workspace,
        config: Optional[ConfigStore] = None,
        commands: Optional[CommandRegistry] = None,
        *,
        logger_name: str | None = None,
    ) -> None:
        self.workspace = workspace
        self.config = config or ConfigStore()
        self.commands = commands or CommandRegistry(logger_name=logger_name)
        self.logger_name = logger_name or "whitespace_engine.whitespace"
        self.subscriptions = CompositeDisposable()
        self._watched: Dict[int, Tuple[Disposable, ...]] = {}
        self._ignore_next_save = False

        self.subscriptions.add(workspace.observe_text_editors(self.handle_events))
        self.subscriptions.add(load_whitespace_commands(self.commands, self))

    def destroy(self) -> None:
        self.subscriptions.dispose()
        self._watched.clear()

    # -- lifecycle ---------------------------------------------------------

    def is_watching(self, editor: TextEditor) -> bool:
        return editor.id in self._watched

    def handle_events(self, editor: TextEditor) -> None:
        if editor.id in self._watched:
            return

        will_save = editor.buffer.on_will_save(lambda _buffer: self._on_will_save(editor))
        inserted = editor.on_did_insert_text(
            lambda event: self._on_did_insert_text(editor, event)
        )
        destroyed = editor.on_did_destroy(lambda _editor: self._release(editor))

        handles = (will_save, inserted, destroyed)
        self._watched[editor.id] = handles
        self.subscriptions.add(*handles)
        telemetry.record_event(
            "whitespace.watch", data={"editor": editor.id}, logger_name=self.logger_name
        )

    def _release(self, editor: TextEditor) -> None:
        handles = self._watched.pop(editor.id, ())
        for handle in handles:
            handle.dispose()
            self.subscriptions.remove(handle)
        if handles:
            telemetry.record_event(
                "whitespace.unwatch", data={"editor": editor.id}, logger_name=self.logger_name
            )

    def scope_config(self, editor: TextEditor) -> ScopeConfiguration:
        return ScopeConfiguration.resolve(self.config, editor.root_scope_descriptor)

    def _on_will_save(self, editor: TextEditor) -> None:
        config = self.scope_config(editor)
        with editor.buffer.transact("will_save"):
            if config.remove_trailing_whitespace and not self._ignore_next_save:
                trailing.remove_trailing_whitespace(editor, config)
            if config.ensure_single_trailing_newline:
                newline.ensure_single_trailing_newline(editor)

    def _on_did_insert_text(self, editor: TextEditor, event: InsertTextEvent) -> None:
        if event.text != "\n":
            return
        row = event.range.start.row
        if not editor.buffer.is_row_blank(row):
            return
        config = self.scope_config(editor)
        if config.remove_trailing_whitespace and not config.ignore_whitespace_only_lines:
            editor.set_indentation_for_row(row, 0)

    # -- commands ----------------------------------------------------------

    def remove_trailing_whitespace(self, editor: TextEditor) -> List[Edit]:
        return trailing.remove_trailing_whitespace(editor, self.scope_config(editor))

    def ensure_single_trailing_newline(self, editor: TextEditor) -> bool:
        return newline.ensure_single_trailing_newline(editor)

    def save_with_trailing_whitespace(self, editor: TextEditor) -> None:
        self._ignore_next_save = True
        try:
            editor.save()
        finally:
            self._ignore_next_save = False

    def save_without_trailing_whitespace(self, editor: TextEditor) -> None:
        self.remove_trailing_whitespace(editor)
        editor.save()

    def convert_tabs_to_spaces(self, editor: TextEditor, convert_all_tabs: bool = False) -> int:
        return indentation.convert_tabs_to_spaces(editor, convert_all_tabs)

    def convert_spaces_to_tabs(self, editor: TextEditor) -> int:
        return indentation.convert_spaces_to_tabs(editor, self.scope_config(editor))


__all__ = ["Whitespace"]
