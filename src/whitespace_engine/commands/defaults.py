"""Built-in whitespace commands bound to the active editor."""

from __future__ import annotations

from functools import partial
from typing import TYPE_CHECKING, Iterable, Optional

from .models import CommandRef
from .registry import CommandRegistry

if TYPE_CHECKING:  # pragma: no cover
    from whitespace_engine.whitespace.package import Whitespace

# (command name, package method, method kwargs, description)
COMMAND_TABLE: tuple[tuple[str, str, dict, str], ...] = (
    (
        "whitespace:remove-trailing-whitespace",
        "remove_trailing_whitespace",
        {},
        "Remove trailing whitespace from the active editor",
    ),
    (
        "whitespace:save-with-trailing-whitespace",
        "save_with_trailing_whitespace",
        {},
        "Save once without stripping trailing whitespace",
    ),
    (
        "whitespace:save-without-trailing-whitespace",
        "save_without_trailing_whitespace",
        {},
        "Strip trailing whitespace, then save",
    ),
    (
        "whitespace:convert-tabs-to-spaces",
        "convert_tabs_to_spaces",
        {},
        "Convert leading tabs to spaces",
    ),
    (
        "whitespace:convert-spaces-to-tabs",
        "convert_spaces_to_tabs",
        {},
        "Convert leading spaces to tabs",
    ),
    (
        "whitespace:convert-all-tabs-to-spaces",
        "convert_tabs_to_spaces",
        {"convert_all_tabs": True},
        "Convert every tab to spaces",
    ),
)


def _on_active_editor(package: "Whitespace", method: str, **kwargs: object) -> object:
    editor = package.workspace.active_editor
    if editor is None:
        return None
    return getattr(package, method)(editor, **kwargs)


def build_whitespace_commands(package: "Whitespace") -> tuple[CommandRef, ...]:
    return tuple(
        CommandRef(
            name=name,
            handler=partial(_on_active_editor, package, method, **kwargs),
            description=description,
        )
        for name, method, kwargs, description in COMMAND_TABLE
    )


def load_whitespace_commands(
    registry: CommandRegistry,
    package: "Whitespace",
    *,
    target: str = "workspace",
    include: Optional[Iterable[str]] = None,
):
    """Register the whitespace commands and return the removal handle."""

    commands = build_whitespace_commands(package)
    if include is not None:
        wanted = set(include)
        commands = tuple(command for command in commands if command.name in wanted)
    return registry.add(target, commands)


__all__ = ["COMMAND_TABLE", "build_whitespace_commands", "load_whitespace_commands"]
