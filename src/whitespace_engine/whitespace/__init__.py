"""Whitespace normalization: line classification, cleanup passes, and wiring."""

from .classifier import (
    DEFAULT_COMMENT_DELIMITERS,
    is_blank,
    is_comment_only_line,
    is_whitespace_only,
    trailing_whitespace_span,
    trailing_whitespace_start,
)
from .indentation import (
    convert_spaces_to_tabs,
    convert_tabs_to_spaces,
    expand_all_tabs,
    expand_leading_tabs,
    tabify_indentation,
)
from .newline import ensure_single_trailing_newline, trailing_newline_edits
from .package import Whitespace
from .trailing import (
    MARKDOWN_SCOPES,
    RemovalPolicy,
    remove_trailing_whitespace,
    strip_trailing_whitespace,
    trailing_whitespace_edits,
)

__all__ = [
    "DEFAULT_COMMENT_DELIMITERS",
    "MARKDOWN_SCOPES",
    "RemovalPolicy",
    "Whitespace",
    "convert_spaces_to_tabs",
    "convert_tabs_to_spaces",
    "ensure_single_trailing_newline",
    "expand_all_tabs",
    "expand_leading_tabs",
    "is_blank",
    "is_comment_only_line",
    "is_whitespace_only",
    "remove_trailing_whitespace",
    "strip_trailing_whitespace",
    "tabify_indentation",
    "trailing_newline_edits",
    "trailing_whitespace_edits",
    "trailing_whitespace_span",
    "trailing_whitespace_start",
]
