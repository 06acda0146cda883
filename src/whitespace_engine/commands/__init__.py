"""Command registry and the built-in whitespace commands."""

from .models import CommandRef, DEFAULT_TARGET, split_command_name
from .registry import (
    CommandConflictError,
    CommandNotFoundError,
    CommandRegistry,
    RegistryStats,
)
from .defaults import COMMAND_TABLE, build_whitespace_commands, load_whitespace_commands

__all__ = [
    "COMMAND_TABLE",
    "CommandConflictError",
    "CommandNotFoundError",
    "CommandRef",
    "CommandRegistry",
    "DEFAULT_TARGET",
    "RegistryStats",
    "build_whitespace_commands",
    "load_whitespace_commands",
    "split_command_name",
]
