"""Textual front end for the whitespace engine."""

from .controller import DEFAULT_SHORTCUTS, TextualUIHooks, TextualWhitespaceAdapter

__all__ = ["DEFAULT_SHORTCUTS", "TextualUIHooks", "TextualWhitespaceAdapter"]
