"""Text editors and the workspace that owns them."""

from .text_editor import DEFAULT_SCOPE, InsertTextEvent, TextEditor
from .workspace import SCOPES_BY_SUFFIX, Workspace, scope_for_path

__all__ = [
    "DEFAULT_SCOPE",
    "InsertTextEvent",
    "SCOPES_BY_SUFFIX",
    "TextEditor",
    "Workspace",
    "scope_for_path",
]
