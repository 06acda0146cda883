"""Command registry responsible for storing and dispatching commands."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Dict, Iterable, Iterator, Mapping, Optional, Union

from whitespace_engine.runtime.events import Disposable
from whitespace_engine.runtime.telemetry import span

from .models import CommandRef

CommandSource = Union[Mapping[str, Callable[..., object]], Iterable[CommandRef]]


@dataclass(slots=True)
class RegistryStats:
    """Lightweight snapshot describing registry state."""

    command_count: int
    targets: tuple[str, ...]
    namespaces: tuple[str, ...]


class CommandConflictError(RuntimeError):
    """Raised when a command name is registered twice without ``replace``."""

    def __init__(self, command: CommandRef, existing: CommandRef):
        super().__init__(
            f"Command '{command.name}' already registered for target '{existing.target}'"
        )
        self.command = command
        self.existing = existing


class CommandNotFoundError(KeyError):
    """Raised when dispatching a name nothing registered."""

    def __init__(self, name: str) -> None:
        super().__init__(name)
        self.name = name

    def __str__(self) -> str:
        return f"Command '{self.name}' is not registered"


class CommandRegistry:
    """Owns command references and dispatches them by name."""

    def __init__(self, *, logger_name: str | None = None) -> None:
        self._commands: Dict[str, CommandRef] = {}
        self._logger_name = logger_name
        self._revision = 0

    def revision(self) -> int:
        return self._revision

    def __contains__(self, name: object) -> bool:
        return name in self._commands

    def find(self, name: str) -> CommandRef:
        try:
            return self._commands[name]
        except KeyError:
            raise CommandNotFoundError(name) from None

    def add(
        self, target: str, commands: CommandSource, *, replace: bool = False
    ) -> Disposable:
        """Register ``commands`` under ``target``; the handle removes them again."""

        if isinstance(commands, Mapping):
            refs = [
                CommandRef(name=name, handler=handler, target=target)
                for name, handler in commands.items()
            ]
        else:
            refs = [
                ref if ref.target == target else _retarget(ref, target)
                for ref in commands
            ]

        with span(
            "commands::add",
            logger_name=self._logger_name,
            component="commands",
            metadata={"target": target, "count": len(refs)},
        ) as handle:
            for ref in refs:
                existing = self._commands.get(ref.name)
                if existing is not None and not replace:
                    handle.add_metadata("conflict", ref.name)
                    raise CommandConflictError(ref, existing)
            for ref in refs:
                self._commands[ref.name] = ref
            self._touch()

        def _release() -> None:
            for ref in refs:
                if self._commands.get(ref.name) is ref:
                    del self._commands[ref.name]
            self._touch()

        return Disposable(_release)

    def remove(self, name: str) -> Optional[CommandRef]:
        removed = self._commands.pop(name, None)
        if removed is not None:
            self._touch()
        return removed

    def dispatch(self, name: str, *args: object, **kwargs: object) -> object:
        command = self.find(name)
        with span(
            "commands::dispatch",
            logger_name=self._logger_name,
            component="commands",
            metadata={"command": command.telemetry_name, "target": command.target},
        ):
            return command(*args, **kwargs)

    def iter_commands(self, target: Optional[str] = None) -> Iterator[CommandRef]:
        for ref in self._commands.values():
            if target is None or ref.target == target:
                yield ref

    def stats(self) -> RegistryStats:
        refs = list(self.iter_commands())
        return RegistryStats(
            command_count=len(refs),
            targets=tuple(sorted({ref.target for ref in refs})),
            namespaces=tuple(sorted({ref.namespace for ref in refs})),
        )

    def _touch(self) -> None:
        self._revision += 1


def _retarget(ref: CommandRef, target: str) -> CommandRef:
    return CommandRef(
        name=ref.name,
        handler=ref.handler,
        target=target,
        telemetry_name=ref.telemetry_name,
        description=ref.description,
        metadata=ref.metadata,
    )


__all__ = [
    "CommandConflictError",
    "CommandNotFoundError",
    "CommandRegistry",
    "RegistryStats",
]
