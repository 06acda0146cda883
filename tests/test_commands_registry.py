import pytest

from whitespace_engine.commands import (
    CommandConflictError,
    CommandNotFoundError,
    CommandRef,
    CommandRegistry,
)


def make_command(name: str = "demo:run", result: object = "ran") -> CommandRef:
    return CommandRef(name=name, handler=lambda *args, **kwargs: result)


def test_add_and_dispatch() -> None:
    registry = CommandRegistry()
    registry.add("workspace", [make_command()])

    assert registry.dispatch("demo:run") == "ran"
    assert registry.stats().command_count == 1
    assert registry.stats().namespaces == ("demo",)


def test_add_from_mapping() -> None:
    registry = CommandRegistry()
    registry.add("workspace", {"demo:echo": lambda value: value})

    assert registry.dispatch("demo:echo", 42) == 42
    assert registry.find("demo:echo").target == "workspace"


def test_conflict_detection() -> None:
    registry = CommandRegistry()
    registry.add("workspace", [make_command()])

    with pytest.raises(CommandConflictError):
        registry.add("workspace", [make_command()])


def test_replace_overrides_existing() -> None:
    registry = CommandRegistry()
    registry.add("workspace", [make_command(result="first")])
    registry.add("workspace", [make_command(result="second")], replace=True)

    assert registry.dispatch("demo:run") == "second"


def test_disposable_removes_commands() -> None:
    registry = CommandRegistry()
    handle = registry.add("workspace", [make_command(), make_command("demo:other")])
    before = registry.revision()

    handle.dispose()

    assert "demo:run" not in registry
    assert registry.stats().command_count == 0
    assert registry.revision() == before + 1


def test_dispatch_unknown_command() -> None:
    with pytest.raises(CommandNotFoundError):
        CommandRegistry().dispatch("demo:missing")


def test_command_names_need_a_namespace() -> None:
    with pytest.raises(ValueError):
        make_command("run")


def test_display_name() -> None:
    command = make_command("whitespace:save-with-trailing-whitespace")
    assert command.display_name == "Whitespace: Save With Trailing Whitespace"
    assert command.telemetry_name == "whitespace.save-with-trailing-whitespace"


def test_stats_count_every_target() -> None:
    registry = CommandRegistry()
    registry.add("workspace", [make_command()])
    registry.add("editor", [make_command("other:run")])

    stats = registry.stats()

    assert stats.command_count == 2
    assert stats.targets == ("editor", "workspace")
    assert stats.namespaces == ("demo", "other")
