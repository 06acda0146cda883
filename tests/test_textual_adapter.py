from __future__ import annotations

from typing import List

from whitespace_engine.adapters.textual import TextualUIHooks, TextualWhitespaceAdapter
from whitespace_engine.buffer import BufferMirror, BufferSync, Range
from whitespace_engine.commands import CommandRegistry
from whitespace_engine.config import ConfigStore
from whitespace_engine.editor import Workspace
from whitespace_engine.whitespace import Whitespace


def make_package() -> Whitespace:
    store = ConfigStore()
    store.set("ignoreWhitespaceOnCurrentLine", False)
    return Whitespace(Workspace(), store, CommandRegistry())


def test_adapter_updates_buffer_and_status() -> None:
    package = make_package()
    package.workspace.open("")
    mirrors: List[BufferMirror] = []
    statuses: List[str] = []
    events: List[tuple[str, object | None]] = []
    hooks = TextualUIHooks(
        update_buffer=mirrors.append,
        update_status=statuses.append,
        handle_event=lambda name, payload: events.append((name, payload)),
    )
    adapter = TextualWhitespaceAdapter(package, hooks)

    for char in "x  ":
        adapter.handle_key(char, text=char)
    assert mirrors[-1].text == "x  "

    assert adapter.handle_key("ctrl+s") == "saved"
    assert mirrors[-1].text == "x\n"
    assert mirrors[-1].modified is False
    assert statuses[-1] == "saved"
    assert ("buffer.saved", adapter.editor.buffer.name) in events


def test_shortcut_dispatches_whitespace_command() -> None:
    package = make_package()
    editor = package.workspace.open("a  \nb\t")
    events: List[str] = []
    hooks = TextualUIHooks(
        update_buffer=lambda mirror: None,
        handle_event=lambda name, _payload: events.append(name),
    )
    adapter = TextualWhitespaceAdapter(package, hooks)

    assert adapter.handle_key("ctrl+r") == "remove-trailing-whitespace"
    assert editor.buffer.get_text() == "a\nb"
    assert events == ["whitespace:remove-trailing-whitespace"]


def test_tab_key_and_conversion_update_indent_attribute() -> None:
    package = make_package()
    package.workspace.open("x", tab_length=4, soft_tabs=False)
    mirrors: List[BufferMirror] = []
    adapter = TextualWhitespaceAdapter(package, TextualUIHooks(update_buffer=mirrors.append))

    adapter.handle_key("tab")
    assert mirrors[-1].text == "\tx"
    assert mirrors[-1].attributes["indent"] == "tabs"

    adapter.handle_key("ctrl+t")
    assert mirrors[-1].text == "    x"
    assert mirrors[-1].attributes["indent"] == "spaces"
    assert mirrors[-1].attributes["tab_length"] == "4"


def test_backspace_joins_lines_and_undo_restores() -> None:
    package = make_package()
    editor = package.workspace.open("ab\ncd")
    editor.set_cursor((1, 0))
    adapter = TextualWhitespaceAdapter(package, TextualUIHooks(update_buffer=lambda _: None))

    assert adapter.handle_key("backspace") == "delete"
    assert editor.buffer.get_text() == "abcd"
    assert editor.get_cursor_positions() == [(0, 2)]

    assert adapter.handle_key("ctrl+z") == "undo"
    assert editor.buffer.get_text() == "ab\ncd"
    assert adapter.handle_key("ctrl+z") == "nothing_to_undo"


def test_arrow_keys_move_and_clamp() -> None:
    package = make_package()
    editor = package.workspace.open("ab")
    adapter = TextualWhitespaceAdapter(package, TextualUIHooks(update_buffer=lambda _: None))

    assert adapter.handle_key("left") == "move"
    assert editor.get_cursor_positions() == [(0, 0)]
    adapter.handle_key("right")
    adapter.handle_key("right")
    adapter.handle_key("right")
    assert editor.get_cursor_positions() == [(0, 2)]
    assert adapter.handle_key("f5") == "ignored"


def test_adapter_without_editor() -> None:
    package = make_package()
    mirrors: List[BufferMirror] = []
    adapter = TextualWhitespaceAdapter(package, TextualUIHooks(update_buffer=mirrors.append))

    assert adapter.handle_key("ctrl+r") == "no_editor"
    assert mirrors[-1].text == ""


def test_adapter_emits_log_lines() -> None:
    package = make_package()
    package.workspace.open("")
    logs: List[str] = []
    hooks = TextualUIHooks(update_buffer=lambda _: None, log=logs.append)
    adapter = TextualWhitespaceAdapter(package, hooks)

    adapter.handle_key("a", text="a")

    assert any(line.startswith("key ->") for line in logs)
    assert any(line.startswith("status <-") and "'insert'" in line for line in logs)


def test_dispose_stops_save_notifications() -> None:
    package = make_package()
    editor = package.workspace.open("a")
    events: List[str] = []
    hooks = TextualUIHooks(
        update_buffer=lambda _: None,
        handle_event=lambda name, _payload: events.append(name),
    )
    adapter = TextualWhitespaceAdapter(package, hooks)

    adapter.dispose()
    editor.save()

    assert events == []


def test_adapter_satisfies_buffer_sync() -> None:
    package = make_package()
    package.workspace.open("a\tb", scope_name="source.python")
    adapter: BufferSync = TextualWhitespaceAdapter(
        package, TextualUIHooks(update_buffer=lambda _: None)
    )

    mirror = adapter.pull_buffer()

    assert mirror.text == "a\tb"
    assert mirror.attributes["scope"] == "source.python"
    assert mirror.selections == (Range.caret((0, 0)),)


def test_closed_editors_release_adapter_subscriptions() -> None:
    package = make_package()
    adapter = TextualWhitespaceAdapter(package, TextualUIHooks(update_buffer=lambda _: None))
    baseline = len(adapter._subscriptions)

    editors = [package.workspace.open(f"{index} ") for index in range(5)]
    assert len(adapter._subscriptions) == baseline + 10
    for editor in editors:
        package.workspace.close(editor)

    assert len(adapter._subscriptions) == baseline
    assert all(e.buffer.emitter.listener_count("did-save") == 0 for e in editors)
