from typing import Optional

import pytest

from whitespace_engine.commands import CommandRegistry
from whitespace_engine.config import ConfigStore
from whitespace_engine.editor import TextEditor, Workspace
from whitespace_engine.whitespace import Whitespace


def make_package(config: Optional[ConfigStore] = None) -> Whitespace:
    store = config or ConfigStore()
    return Whitespace(Workspace(), store, CommandRegistry())


def open_editor(package: Whitespace, text: str, **kwargs) -> TextEditor:
    return package.workspace.open(text, **kwargs)


def test_save_removes_whitespace_and_fixes_newline_in_one_step() -> None:
    package = make_package()
    editor = open_editor(package, "a  \nb \n\n\n")
    editor.set_cursor((0, 0))
    package.config.set("ignoreWhitespaceOnCurrentLine", False)

    editor.save()

    assert editor.buffer.get_text() == "a\nb\n"
    assert len(editor.buffer.history) == 1
    editor.buffer.undo()
    assert editor.buffer.get_text() == "a  \nb \n\n\n"


def test_save_respects_disabled_options() -> None:
    store = ConfigStore()
    store.set("removeTrailingWhitespace", False)
    store.set("ensureSingleTrailingNewline", False)
    package = make_package(store)
    editor = open_editor(package, "a  ")

    editor.save()

    assert editor.buffer.get_text() == "a  "


def test_save_uses_scoped_configuration() -> None:
    store = ConfigStore()
    store.set("removeTrailingWhitespace", False, scope="source.gfm")
    package = make_package(store)
    markdown = open_editor(package, "x \ny ", scope_name="source.gfm")
    plain = open_editor(package, "x \ny ")
    plain.set_cursor((1, 0))

    markdown.save()
    plain.save()

    assert markdown.buffer.get_text() == "x \ny \n"
    assert plain.buffer.get_text() == "x\ny \n"


def test_existing_editors_are_watched_once() -> None:
    workspace = Workspace()
    editor = workspace.open("a ")
    package = Whitespace(workspace, ConfigStore(), CommandRegistry())

    package.handle_events(editor)
    package.handle_events(editor)

    assert package.is_watching(editor)
    assert editor.buffer.emitter.listener_count("will-save") == 1


def test_destroy_releases_editor_subscriptions() -> None:
    package = make_package()
    editor = open_editor(package, "a ")
    baseline = len(package.subscriptions)

    package.workspace.close(editor)

    assert not package.is_watching(editor)
    assert len(package.subscriptions) == baseline - 3
    assert editor.buffer.emitter.listener_count("will-save") == 0
    assert editor not in package.workspace.editors


def test_package_destroy_disposes_everything() -> None:
    package = make_package()
    editor = open_editor(package, "a ")

    package.destroy()
    editor.save()

    assert editor.buffer.get_text() == "a "
    assert "whitespace:remove-trailing-whitespace" not in package.commands


def test_save_with_trailing_whitespace_skips_exactly_one_save() -> None:
    package = make_package()
    package.config.set("ignoreWhitespaceOnCurrentLine", False)
    editor = open_editor(package, "a  ")

    package.commands.dispatch("whitespace:save-with-trailing-whitespace")
    assert editor.buffer.get_text() == "a  \n"

    editor.save()
    assert editor.buffer.get_text() == "a\n"


def test_ignore_flag_resets_when_save_fails() -> None:
    package = make_package()
    package.config.set("ignoreWhitespaceOnCurrentLine", False)
    editor = open_editor(package, "a  ")
    editor.buffer.state.read_only = True

    with pytest.raises(RuntimeError):
        package.save_with_trailing_whitespace(editor)

    editor.buffer.state.read_only = False
    editor.save()
    assert editor.buffer.get_text() == "a\n"


def test_save_without_trailing_whitespace_command() -> None:
    package = make_package()
    package.config.set("ensureSingleTrailingNewline", False)
    editor = open_editor(package, "a  \nb\t")
    editor.set_cursor((1, 2))
    package.config.set("ignoreWhitespaceOnCurrentLine", False)
    saved = []
    editor.buffer.on_did_save(lambda buffer: saved.append(buffer.get_text()))

    package.commands.dispatch("whitespace:save-without-trailing-whitespace")

    assert saved == ["a\nb"]


def test_remove_command_ignores_cursor_line_by_default() -> None:
    package = make_package()
    editor = open_editor(package, "a  \nb  ")
    editor.set_cursor((1, 1))

    package.commands.dispatch("whitespace:remove-trailing-whitespace")

    assert editor.buffer.get_text() == "a\nb  "


def test_conversion_commands_target_active_editor() -> None:
    package = make_package()
    package.config.set("editor.tabLength", 4)
    first = open_editor(package, "\tx", tab_length=4)
    second = open_editor(package, "\ty\tz", tab_length=4)

    package.commands.dispatch("whitespace:convert-all-tabs-to-spaces")
    assert second.buffer.get_text() == "    y    z"
    assert first.buffer.get_text() == "\tx"

    package.workspace.set_active_editor(first)
    package.commands.dispatch("whitespace:convert-tabs-to-spaces")
    assert first.buffer.get_text() == "    x"

    package.commands.dispatch("whitespace:convert-spaces-to-tabs")
    assert first.buffer.get_text() == "\tx"
    assert first.soft_tabs is False


def test_commands_without_active_editor_are_noops() -> None:
    package = make_package()

    for name in (
        "whitespace:remove-trailing-whitespace",
        "whitespace:save-with-trailing-whitespace",
        "whitespace:convert-spaces-to-tabs",
    ):
        assert package.commands.dispatch(name) is None


def test_newline_on_blank_row_clears_indentation() -> None:
    package = make_package()
    editor = open_editor(package, "def f():\n    ")
    editor.set_cursor((1, 4))

    editor.insert_text("\n")

    assert editor.buffer.get_text() == "def f():\n\n"
    assert editor.get_cursor_positions() == [(2, 0)]


def test_newline_keeps_indentation_when_whitespace_only_lines_are_ignored() -> None:
    store = ConfigStore()
    store.set("ignoreWhitespaceOnlyLines", True)
    package = make_package(store)
    editor = open_editor(package, "    ")
    editor.set_cursor((0, 4))

    editor.insert_text("\n")

    assert editor.buffer.get_text() == "    \n"


def test_newline_after_text_is_left_alone() -> None:
    package = make_package()
    editor = open_editor(package, "  x")
    editor.set_cursor((0, 3))

    editor.insert_text("\n")

    assert editor.buffer.get_text() == "  x\n"


def test_whitespace_delimiter_does_not_protect_blank_lines() -> None:
    store = ConfigStore()
    store.set("ignoreCommentOnlyLines", True)
    store.set("ignoreWhitespaceOnCurrentLine", False)
    store.set("commentOnlyLineDelimiters", "# ")
    package = make_package(store)
    editor = open_editor(package, "a\n   \n  # \nb\n")

    editor.save()

    assert editor.buffer.get_text() == "a\n\n  # \nb\n"
