"""``whitespace-engine`` console app: edit one file, clean it on save."""

from __future__ import annotations

import argparse
import os
from pathlib import Path
from typing import List, Optional, Sequence

try:  # pragma: no cover - imported only when the app is run
    from textual import events
    from textual.app import App, ComposeResult
    from textual.widgets import Footer, Static
except ModuleNotFoundError as exc:  # pragma: no cover - textual is the `tui` extra
    raise RuntimeError(
        "whitespace-engine's terminal UI needs textual: pip install 'whitespace-engine[tui]'"
    ) from exc

from whitespace_engine.buffer import BufferMirror
from whitespace_engine.config import ConfigStore, ScopeConfiguration
from whitespace_engine.editor import DEFAULT_SCOPE, Workspace, scope_for_path
from whitespace_engine.runtime import telemetry
from whitespace_engine.whitespace import Whitespace

from .controller import DEFAULT_SHORTCUTS, TextualUIHooks, TextualWhitespaceAdapter

TAB_GLYPH = "→"
SPACE_GLYPH = "·"


def create_default_package(
    path: Optional[Path],
    *,
    scope_name: Optional[str] = None,
    config: Optional[ConfigStore] = None,
) -> Whitespace:
    """Workspace with one editor (``path`` or an empty buffer) and the package attached."""

    store = config or ConfigStore.from_env()
    if scope_name is None:
        scope_name = scope_for_path(path) if path is not None else DEFAULT_SCOPE
    tab_length = store.get("editor.tabLength", scope=scope_name)

    package = Whitespace(Workspace(), store)
    if path is not None:
        package.workspace.open_file(path, scope_name=scope_name, tab_length=tab_length)
    else:
        package.workspace.open(scope_name=scope_name, tab_length=tab_length)
    return package


def render_mirror(mirror: BufferMirror, tab_length: int = 4) -> str:
    """Make whitespace visible: tabs as ``→`` padded to width, trailing blanks as ``·``."""

    tab = TAB_GLYPH.ljust(max(tab_length, 1))
    rendered = []
    for line in mirror.text.split("\n"):
        line = line.rstrip("\r")
        body = line.rstrip(" \t")
        tail = line[len(body):]
        rendered.append(
            body.replace("\t", tab) + tail.replace(" ", SPACE_GLYPH).replace("\t", tab)
        )
    return "\n".join(rendered)


def describe_config(config: ScopeConfiguration) -> str:
    flags = [
        ("trim", config.remove_trailing_whitespace),
        ("newline", config.ensure_single_trailing_newline),
        ("keep-md", config.keep_markdown_line_break_whitespace),
        ("skip-cursor", config.ignore_whitespace_on_current_line),
        ("skip-blank", config.ignore_whitespace_only_lines),
        ("skip-comment", config.ignore_comment_only_lines),
    ]
    enabled = [name for name, on in flags if on]
    return f"{config.scope} | {' '.join(enabled) or 'all off'} | tab={config.tab_length}"


class WhitespaceApp(App[None]):
    """Shows the active buffer with visible whitespace and a command legend."""

    CSS = """
    #document {
        height: 1fr;
        border: heavy $primary;
        padding: 0 1;
        overflow: auto;
    }

    #settings, #status {
        height: 1;
        padding: 0 1;
    }

    #settings {
        color: $text-muted;
    }
    """

    BINDINGS = [("ctrl+q", "quit", "Quit")]

    def __init__(
        self,
        *,
        path: Optional[Path] = None,
        scope_name: Optional[str] = None,
        config: Optional[ConfigStore] = None,
    ) -> None:
        super().__init__()
        self.package = create_default_package(path, scope_name=scope_name, config=config)
        self.adapter: Optional[TextualWhitespaceAdapter] = None
        self.messages: List[str] = []

    def compose(self) -> ComposeResult:
        yield Static("", id="settings")
        yield Static("", id="document", markup=False)
        yield Static("", id="status", markup=False)
        yield Footer()

    def on_mount(self) -> None:
        editor = self.package.workspace.active_editor
        if editor is not None:
            self.title = editor.buffer.name
            self.sub_title = "  ".join(
                f"{key}: {name.split(':', 1)[1]}" for key, name in DEFAULT_SHORTCUTS.items()
            )
        self.adapter = TextualWhitespaceAdapter(
            self.package,
            TextualUIHooks(
                update_buffer=self._show_buffer,
                update_status=self._show_status,
                handle_event=self._on_adapter_event,
                log=self.messages.append,
            ),
        )

    def on_unmount(self) -> None:
        if self.adapter is not None:
            self.adapter.dispose()
        self.package.destroy()

    def on_key(self, event: events.Key) -> None:
        if self.adapter is None or event.key == "ctrl+q":
            return
        self.adapter.handle_key(event.key, text=event.character)
        event.stop()

    def _show_buffer(self, mirror: BufferMirror) -> None:
        editor = self.package.workspace.active_editor
        tab_length = editor.tab_length if editor is not None else 4
        self.query_one("#document", Static).update(render_mirror(mirror, tab_length))
        if editor is not None:
            config = self.package.scope_config(editor)
            self.query_one("#settings", Static).update(describe_config(config))

    def _show_status(self, status: str) -> None:
        self.query_one("#status", Static).update(status)

    def _on_adapter_event(self, name: str, payload: object | None) -> None:
        if name == "buffer.saved":
            self.notify(f"saved {payload}")


def _parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="whitespace-engine",
        description="Edit a file and strip trailing whitespace on save.",
    )
    parser.add_argument("path", nargs="?", type=Path, help="file to open (empty buffer if omitted)")
    parser.add_argument(
        "--scope",
        default=os.environ.get("WHITESPACE_ENGINE_SCOPE"),
        help="scope id for config lookups, e.g. source.gfm (default: from the file suffix)",
    )
    parser.add_argument(
        "--tab-length",
        type=int,
        help="override editor.tabLength for this session",
    )
    parser.add_argument(
        "--telemetry-preset",
        choices=sorted(telemetry.PRESETS),
        help="telelog preset for this session",
    )
    return parser.parse_args(argv)


def main(argv: Optional[Sequence[str]] = None) -> None:
    args = _parse_args(argv)
    if args.telemetry_preset:
        telemetry.configure(preset=args.telemetry_preset)
    config = ConfigStore.from_env()
    if args.tab_length is not None:
        config.set("editor.tabLength", args.tab_length)
    WhitespaceApp(path=args.path, scope_name=args.scope, config=config).run()


if __name__ == "__main__":  # pragma: no cover - manual run
    main()
