"""Editor-agnostic whitespace cleanup engine."""

__all__ = [
    "adapters",
    "buffer",
    "commands",
    "config",
    "editor",
    "runtime",
    "whitespace",
]

__version__ = "0.1.0"
