"""Dataclasses describing user-invokable commands."""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Callable, Mapping

DEFAULT_TARGET = "workspace"


def split_command_name(name: str) -> tuple[str, str]:
    """``"whitespace:convert-spaces-to-tabs"`` -> ``("whitespace", "convert-spaces-to-tabs")``."""

    namespace, sep, verb = name.partition(":")
    if not sep or not namespace.strip() or not verb.strip():
        raise ValueError(f"command name '{name}' must look like 'namespace:verb'")
    return namespace.strip(), verb.strip()


@dataclass(frozen=True, slots=True)
class CommandRef:
    """Callable metadata attached to a command name."""

    name: str
    handler: Callable[..., object]
    target: str = DEFAULT_TARGET
    telemetry_name: str | None = None
    description: str = ""
    metadata: Mapping[str, object] = field(default_factory=dict)

    def __post_init__(self) -> None:
        split_command_name(self.name)
        if not self.target:
            raise ValueError("CommandRef target cannot be empty")
        if not callable(self.handler):
            raise TypeError("handler must be callable")
        object.__setattr__(self, "metadata", MappingProxyType(dict(self.metadata)))
        if self.telemetry_name is None:
            object.__setattr__(self, "telemetry_name", self.name.replace(":", "."))

    @property
    def namespace(self) -> str:
        return split_command_name(self.name)[0]

    @property
    def display_name(self) -> str:
        """``"whitespace:save-with-trailing-whitespace"`` -> ``"Whitespace: Save With Trailing Whitespace"``."""

        namespace, verb = split_command_name(self.name)
        words = " ".join(part.capitalize() for part in verb.split("-"))
        return f"{namespace.capitalize()}: {words}"

    def __call__(self, *args: object, **kwargs: object) -> object:
        return self.handler(*args, **kwargs)


__all__ = ["CommandRef", "DEFAULT_TARGET", "split_command_name"]
