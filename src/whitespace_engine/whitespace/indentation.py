"""Tab/space indentation conversion."""

from __future__ import annotations

import re
from typing import TYPE_CHECKING

from whitespace_engine.buffer import ScanMatch
from whitespace_engine.config import ScopeConfiguration
from whitespace_engine.runtime import telemetry

if TYPE_CHECKING:  # pragma: no cover
    from whitespace_engine.editor import TextEditor

LEADING_TABS = re.compile(r"^\t+")
ANY_TAB = re.compile(r"\t")
LEADING_INDENT = re.compile(r"^[ \t]+")
SPACES_BEFORE_TAB = re.compile(r" +\t")


def _require_width(tab_length: int) -> int:
    if tab_length < 1:
        raise ValueError(f"tab length must be positive, got {tab_length}")
    return tab_length


def expand_leading_tabs(line: str, tab_length: int) -> str:
    """``"\\t\\tfoo"`` with width 4 -> eight spaces + ``"foo"``; later tabs stay."""

    spaces = " " * _require_width(tab_length)
    return LEADING_TABS.sub(lambda match: spaces * len(match.group(0)), line)


def expand_all_tabs(line: str, tab_length: int) -> str:
    return line.replace("\t", " " * _require_width(tab_length))


def tabify_run(indent: str, tab_length: int) -> str:
    """Turn each group of ``tab_length`` spaces into a tab, then let tabs absorb stray spaces."""

    tabbed = indent.replace(" " * _require_width(tab_length), "\t")
    return SPACES_BEFORE_TAB.sub("\t", tabbed)


def tabify_indentation(line: str, tab_length: int) -> str:
    return LEADING_INDENT.sub(lambda match: tabify_run(match.group(0), tab_length), line)


def convert_tabs_to_spaces(editor: "TextEditor", convert_all_tabs: bool = False) -> int:
    """Rewrite tabs as spaces (leading runs only unless ``convert_all_tabs``).

    Leaves the editor in soft-tab mode. Returns the number of replaced runs.
    """

    tab_length = _require_width(editor.tab_length)
    pattern = ANY_TAB if convert_all_tabs else LEADING_TABS
    spaces = " " * tab_length

    def _expand(match: ScanMatch) -> None:
        match.replace(spaces * len(match.match_text))

    with telemetry.span(
        "whitespace::tabs_to_spaces",
        component="whitespace",
        metadata={"editor": editor.id, "all": convert_all_tabs, "tab_length": tab_length},
    ) as handle:
        with editor.buffer.transact("convert_tabs_to_spaces"):
            replaced = editor.buffer.scan(pattern, _expand)
        handle.add_metadata("replaced", replaced)

    editor.set_soft_tabs(True)
    return replaced


def convert_spaces_to_tabs(editor: "TextEditor", config: ScopeConfiguration) -> int:
    """Rewrite leading indentation with tabs using the editor's own tab width.

    Leaves the editor in hard-tab mode, then resets its tab width to the
    configured ``editor.tabLength`` when the two differ.
    """

    file_tab_length = _require_width(editor.tab_length)
    user_tab_length = config.tab_length

    def _tabify(match: ScanMatch) -> None:
        match.replace(tabify_run(match.match_text, file_tab_length))

    with telemetry.span(
        "whitespace::spaces_to_tabs",
        component="whitespace",
        metadata={"editor": editor.id, "tab_length": file_tab_length},
    ) as handle:
        with editor.buffer.transact("convert_spaces_to_tabs"):
            replaced = editor.buffer.scan(LEADING_INDENT, _tabify)
        handle.add_metadata("replaced", replaced)

    editor.set_soft_tabs(False)
    if file_tab_length != user_tab_length:
        editor.set_tab_length(user_tab_length)
    return replaced


__all__ = [
    "convert_spaces_to_tabs",
    "convert_tabs_to_spaces",
    "expand_all_tabs",
    "expand_leading_tabs",
    "tabify_indentation",
    "tabify_run",
]
