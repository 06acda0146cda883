"""Per-operation snapshot of the options that apply to one scope."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .store import ConfigStore


@dataclass(frozen=True, slots=True)
class ScopeConfiguration:
    scope: Optional[str] = None
    remove_trailing_whitespace: bool = True
    keep_markdown_line_break_whitespace: bool = True
    ignore_whitespace_on_current_line: bool = True
    ignore_whitespace_only_lines: bool = False
    ignore_comment_only_lines: bool = False
    comment_delimiters: str = "#*/"
    ensure_single_trailing_newline: bool = True
    tab_length: int = 2

    @classmethod
    def resolve(cls, store: ConfigStore, scope: Optional[str] = None) -> "ScopeConfiguration":
        def get(key: str):
            return store.get(key, scope=scope)

        return cls(
            scope=scope,
            remove_trailing_whitespace=get("removeTrailingWhitespace"),
            keep_markdown_line_break_whitespace=get("keepMarkdownLineBreakWhitespace"),
            ignore_whitespace_on_current_line=get("ignoreWhitespaceOnCurrentLine"),
            ignore_whitespace_only_lines=get("ignoreWhitespaceOnlyLines"),
            ignore_comment_only_lines=get("ignoreCommentOnlyLines"),
            comment_delimiters=get("commentOnlyLineDelimiters"),
            ensure_single_trailing_newline=get("ensureSingleTrailingNewline"),
            tab_length=get("editor.tabLength"),
        )
