"""Declarative option schema with per-option coercion."""

from __future__ import annotations

import re
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Mapping, Optional

NAMESPACE = "whitespace"

_TRUE = {"1", "true", "yes", "on"}
_FALSE = {"0", "false", "no", "off"}


def _snake(name: str) -> str:
    return re.sub(r"(?<!^)(?=[A-Z])", "_", name).upper()


@dataclass(frozen=True, slots=True)
class OptionSpec:
    """One configurable value: where it lives, its type, and its default."""

    key: str
    type: type
    default: Any
    description: str = ""
    minimum: Optional[int] = None

    def __post_init__(self) -> None:
        if "." not in self.key:
            raise ValueError("option keys are namespaced, e.g. 'editor.tabLength'")
        if self.type not in (bool, int, str):
            raise TypeError(f"unsupported option type {self.type!r}")

    @property
    def name(self) -> str:
        return self.key.split(".", 1)[1]

    @property
    def env_var(self) -> str:
        return _snake(self.name)

    def coerce(self, value: Any) -> Any:
        """Return ``value`` as this option's type or raise ``ValueError``."""

        if self.type is bool:
            if isinstance(value, bool):
                return value
            if isinstance(value, str) and value.strip().lower() in _TRUE | _FALSE:
                return value.strip().lower() in _TRUE
            raise ValueError(f"{self.key} expects a boolean, got {value!r}")

        if self.type is int:
            if isinstance(value, bool):
                raise ValueError(f"{self.key} expects an integer, got {value!r}")
            try:
                number = int(value)
            except (TypeError, ValueError):
                raise ValueError(f"{self.key} expects an integer, got {value!r}") from None
            if self.minimum is not None and number < self.minimum:
                raise ValueError(f"{self.key} must be >= {self.minimum}, got {number}")
            return number

        if not isinstance(value, str) or not value.strip(" \t"):
            raise ValueError(f"{self.key} expects a non-blank string, got {value!r}")
        return value


def _option(name: str, default: Any, description: str) -> OptionSpec:
    return OptionSpec(
        key=f"{NAMESPACE}.{name}",
        type=type(default),
        default=default,
        description=description,
    )


DEFAULT_OPTIONS: tuple[OptionSpec, ...] = (
    _option(
        "removeTrailingWhitespace",
        True,
        "Automatically remove whitespace characters at ends of lines when the "
        "buffer is saved.",
    ),
    _option(
        "keepMarkdownLineBreakWhitespace",
        True,
        "Keep two or more trailing spaces after text in Markdown documents; "
        "they render as a hard line break.",
    ),
    _option(
        "ignoreWhitespaceOnCurrentLine",
        True,
        "Skip removing trailing whitespace on lines that hold a cursor.",
    ),
    _option(
        "ignoreWhitespaceOnlyLines",
        False,
        "Skip removing trailing whitespace on lines which consist only of "
        "whitespace characters.",
    ),
    _option(
        "ignoreCommentOnlyLines",
        False,
        "Skip removing trailing whitespace on lines which hold only a bare "
        "comment marker such as '#' or ' * '.",
    ),
    _option(
        "commentOnlyLineDelimiters",
        "#*/",
        "Characters treated as comment markers by the comment-only line check.",
    ),
    _option(
        "ensureSingleTrailingNewline",
        True,
        "Make sure the buffer ends with exactly one newline when it is saved.",
    ),
    OptionSpec(
        key="editor.tabLength",
        type=int,
        default=2,
        description="Number of columns a tab character occupies.",
        minimum=1,
    ),
)


def build_schema(options: tuple[OptionSpec, ...] = DEFAULT_OPTIONS) -> Mapping[str, OptionSpec]:
    schema: dict[str, OptionSpec] = {}
    for option in options:
        if option.key in schema:
            raise ValueError(f"duplicate option '{option.key}'")
        option.coerce(option.default)
        schema[option.key] = option
    return MappingProxyType(schema)


DEFAULT_SCHEMA = build_schema()

__all__ = ["DEFAULT_OPTIONS", "DEFAULT_SCHEMA", "NAMESPACE", "OptionSpec", "build_schema"]
