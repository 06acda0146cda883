from whitespace_engine.buffer import Range
from whitespace_engine.config import ConfigStore, ScopeConfiguration
from whitespace_engine.editor import Workspace
from whitespace_engine.whitespace.trailing import (
    RemovalPolicy,
    remove_trailing_whitespace,
    strip_trailing_whitespace,
    trailing_whitespace_edits,
)


def make_config(scope: str | None = None, **options: object) -> ScopeConfiguration:
    store = ConfigStore()
    store.set("ignoreWhitespaceOnCurrentLine", False)
    for key, value in options.items():
        store.set(key, value)
    return ScopeConfiguration.resolve(store, scope)


def test_strips_trailing_spaces() -> None:
    assert strip_trailing_whitespace("foo   ") == "foo"


def test_line_without_trailing_whitespace_is_untouched() -> None:
    assert trailing_whitespace_edits(["foo", "  bar"]) == []


def test_removal_is_idempotent() -> None:
    text = "a \nb\t\n  \n # \nc"
    once = strip_trailing_whitespace(text)
    assert strip_trailing_whitespace(once) == once
    assert once == "a\nb\n\n #\nc"


def test_edits_are_single_row_and_disjoint() -> None:
    edits = trailing_whitespace_edits(["a  ", "b", "c\t", "   "])
    assert [edit.range for edit in edits] == [
        Range.from_coords(0, 1, 0, 3),
        Range.from_coords(2, 1, 2, 2),
        Range.from_coords(3, 0, 3, 3),
    ]
    assert all(edit.is_deletion and edit.range.is_single_line for edit in edits)


def test_whitespace_only_lines_respect_flag() -> None:
    keep = RemovalPolicy(ignore_whitespace_only_lines=True)
    assert strip_trailing_whitespace("   ", keep) == "   "
    assert strip_trailing_whitespace("   ", RemovalPolicy()) == ""


def test_current_line_exception_uses_cursor_rows() -> None:
    policy = RemovalPolicy(ignore_current_line=True)
    edits = trailing_whitespace_edits(["a ", "b ", "c "], policy, frozenset({1}))
    assert [edit.range.start.row for edit in edits] == [0, 2]


def test_comment_only_lines_respect_flag() -> None:
    policy = RemovalPolicy(ignore_comment_only_lines=True)
    assert strip_trailing_whitespace("  # ", policy) == "  # "
    assert strip_trailing_whitespace("x = 1 # ", policy) == "x = 1 #"
    assert strip_trailing_whitespace("  # ", RemovalPolicy()) == "  #"


def test_markdown_line_break_needs_two_spaces() -> None:
    policy = RemovalPolicy(keep_markdown_line_breaks=True)
    assert strip_trailing_whitespace("text  ", policy) == "text  "
    assert strip_trailing_whitespace("text ", policy) == "text"
    assert strip_trailing_whitespace("    ", policy) == ""


def test_exceptions_combine_as_independent_filters() -> None:
    policy = RemovalPolicy(
        ignore_whitespace_only_lines=True,
        ignore_comment_only_lines=True,
        keep_markdown_line_breaks=True,
    )
    lines = ["text  ", "  ", " # ", "word "]
    edits = trailing_whitespace_edits(lines, policy)
    assert [edit.range.start.row for edit in edits] == [3]


def test_policy_enables_markdown_only_for_markdown_scopes() -> None:
    config = make_config()
    assert RemovalPolicy.from_config(config, "source.gfm").keep_markdown_line_breaks
    assert not RemovalPolicy.from_config(config, "source.python").keep_markdown_line_breaks


def test_policy_respects_disabled_markdown_option() -> None:
    config = make_config(keepMarkdownLineBreakWhitespace=False)
    assert not RemovalPolicy.from_config(config, "source.gfm").keep_markdown_line_breaks


def test_remove_from_editor_is_one_undo_step() -> None:
    workspace = Workspace()
    editor = workspace.open("a  \nb\t\nc ")
    config = make_config()

    edits = remove_trailing_whitespace(editor, config)

    assert len(edits) == 3
    assert editor.buffer.get_text() == "a\nb\nc"
    assert editor.buffer.undo()
    assert editor.buffer.get_text() == "a  \nb\t\nc "


def test_remove_from_editor_skips_cursor_rows_when_configured() -> None:
    workspace = Workspace()
    editor = workspace.open("a  \nb  ")
    editor.set_cursor((1, 3))
    store = ConfigStore()

    remove_trailing_whitespace(editor, ScopeConfiguration.resolve(store))

    assert editor.buffer.get_text() == "a\nb  "


def test_remove_from_editor_keeps_crlf_terminators() -> None:
    workspace = Workspace()
    editor = workspace.open("a  \r\nb\t\r\n")

    remove_trailing_whitespace(editor, make_config())

    assert editor.buffer.get_text() == "a\r\nb\r\n"


def test_markdown_editor_keeps_hard_breaks() -> None:
    workspace = Workspace()
    editor = workspace.open("line one  \nline two \n", scope_name="source.gfm")

    remove_trailing_whitespace(editor, make_config("source.gfm"))

    assert editor.buffer.get_text() == "line one  \nline two\n"
