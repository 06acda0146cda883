"""Logging and profiling for whitespace passes, backed by telelog.

Everything else in the package goes through four helpers:

* ``configure`` picks the active telelog config (explicit, preset, or env).
* ``get_logger`` hands out one cached ``telelog.Logger`` per name.
* ``record_event`` writes a structured ``event::<name>`` line.
* ``span`` profiles a block; its handle collects results for a closing line.

Environment variables use the ``WHITESPACE_ENGINE_`` prefix: ``LOG_LEVEL``,
``LOG_FILE``, ``LOG_JSON``, ``LOG_BUFFERED``, ``LOG_BUFFER_SIZE``,
``DISABLE_CONSOLE``, ``NO_COLOR`` and ``LOGGER``.
"""

from __future__ import annotations

import os
from contextlib import ExitStack, contextmanager
from dataclasses import dataclass, field, replace
from typing import Any, Callable, Dict, Iterable, Iterator, List, Optional, Tuple

import telelog  # type: ignore[import]

ENV_PREFIX = "WHITESPACE_ENGINE_"
_TRUTHY = frozenset({"1", "true", "yes", "on"})


def _env(name: str) -> Optional[str]:
    return os.environ.get(ENV_PREFIX + name)


def _env_bool(name: str) -> bool:
    return (_env(name) or "").strip().lower() in _TRUTHY


DEFAULT_LOGGER_NAME = _env("LOGGER") or "whitespace_engine"


@dataclass(frozen=True, slots=True)
class TelemetrySettings:
    """Plain values that ``build`` turns into a ``telelog.Config``."""

    level: str = "INFO"
    console: bool = True
    color: bool = True
    json: bool = False
    log_file: str = ""
    buffered: bool = False
    buffer_size: int = 2048

    @classmethod
    def from_env(cls) -> "TelemetrySettings":
        return cls(
            level=(_env("LOG_LEVEL") or "INFO").upper(),
            console=not _env_bool("DISABLE_CONSOLE"),
            color=not _env_bool("NO_COLOR"),
            json=_env_bool("LOG_JSON"),
            log_file=_env("LOG_FILE") or "",
            buffered=_env_bool("LOG_BUFFERED"),
            buffer_size=int(_env("LOG_BUFFER_SIZE") or 2048),
        )

    def build(self) -> Any:
        config = telelog.Config()
        config.with_min_level(self.level)
        config.with_console_output(self.console)
        if self.console:
            config.with_colored_output(self.color)
        if self.json:
            config.with_json_format(True)
        if self.log_file:
            config.with_file_output(self.log_file)
        if self.buffered:
            config.with_buffering(True)
            config.with_buffer_size(self.buffer_size)
        config.with_profiling(True)
        return config


PRESETS: Dict[str, TelemetrySettings] = {
    "development": TelemetrySettings(level="DEBUG"),
    "production": TelemetrySettings(
        console=False, log_file="whitespace_engine.log", buffered=True
    ),
    "performance": TelemetrySettings(
        level="DEBUG",
        console=False,
        json=True,
        log_file="whitespace_engine-performance.log",
        buffered=True,
    ),
}


class _State:
    config: Any = None
    loggers: Dict[str, Any] = {}


def configure(*, config: Any = None, preset: Optional[str] = None) -> None:
    """Swap the active telelog config and drop cached loggers.

    ``config`` is adopted as given (profiling is switched on). ``preset`` names
    an entry of ``PRESETS``; ``WHITESPACE_ENGINE_LOG_FILE`` still overrides its
    file. With neither, settings come from the environment.
    """

    if config is not None and preset is not None:
        raise ValueError("configure() takes either config or preset, not both")

    if preset is not None:
        settings = PRESETS.get(preset.lower())
        if settings is None:
            raise ValueError(f"unknown telemetry preset {preset!r}")
        log_file = _env("LOG_FILE")
        if log_file:
            settings = replace(settings, log_file=log_file)
        config = settings.build()
    elif config is None:
        config = TelemetrySettings.from_env().build()
    else:
        config.with_profiling(True)

    _State.config = config
    _State.loggers.clear()


def get_logger(name: Optional[str] = None) -> Any:
    name = name or DEFAULT_LOGGER_NAME
    cached = _State.loggers.get(name)
    if cached is None:
        if _State.config is None:
            configure()
        cached = _State.loggers[name] = telelog.Logger.with_config(name, _State.config)
    return cached


def _as_text(value: Any) -> str:
    if isinstance(value, (dict, list, tuple, set, frozenset)):
        return repr(value)
    return str(value)


def _pairs(data: Dict[str, Any]) -> List[Tuple[str, str]]:
    return [(str(key), _as_text(value)) for key, value in data.items()]


def _writer(logger: Any, level: str) -> Tuple[Callable[..., Any], bool]:
    level = level.lower()
    structured = getattr(logger, f"{level}_with", None)
    if structured is not None:
        return structured, True
    plain = getattr(logger, level, None)
    if plain is None:
        raise ValueError(f"unsupported log level {level!r}")
    return plain, False


def _write(logger: Any, level: str, message: str, data: Dict[str, Any]) -> None:
    write, structured = _writer(logger, level)
    if structured:
        write(message, _pairs(data))
    else:
        write(f"{message} {data}")


def record_event(
    name: str,
    *,
    level: str = "info",
    data: Optional[Dict[str, Any]] = None,
    logger_name: Optional[str] = None,
) -> None:
    _write(get_logger(logger_name), level, f"event::{name}", {"event": name, **(data or {})})


@dataclass(slots=True)
class SpanHandle:
    """Result collector for one ``span`` block."""

    name: str
    logger: Any
    component: Optional[str] = None
    results: Dict[str, str] = field(default_factory=dict)

    def add_metadata(self, key: str, value: Any) -> None:
        self.results[key] = _as_text(value)

    def _fields(self, **extra: Any) -> Dict[str, Any]:
        fields: Dict[str, Any] = {"span": self.name}
        if self.component:
            fields["component"] = self.component
        fields.update(self.results)
        fields.update(extra)
        return fields

    def fail(self, reason: str) -> None:
        _write(self.logger, "error", "span::fail", self._fields(reason=reason))

    def finish(self) -> None:
        if self.results:
            _write(self.logger, "debug", "span::done", self._fields())


@contextmanager
def _logger_context(logger: Any, pairs: Iterable[Tuple[str, str]]) -> Iterator[None]:
    keys = []
    try:
        for key, value in pairs:
            logger.add_context(key, value)
            keys.append(key)
        yield
    finally:
        for key in keys:
            logger.remove_context(key)


@contextmanager
def span(
    name: str,
    *,
    logger_name: Optional[str] = None,
    component: Optional[str] = None,
    metadata: Optional[Dict[str, Any]] = None,
) -> Iterator[SpanHandle]:
    """Profile the block under ``name``.

    ``metadata`` becomes logger context while the block runs. ``component``
    also tracks the block as a telelog component. A raised exception is logged
    as ``span::fail`` and propagates unchanged.
    """

    logger = get_logger(logger_name)
    handle = SpanHandle(name=name, logger=logger, component=component)
    with ExitStack() as stack:
        stack.enter_context(_logger_context(logger, _pairs(metadata or {})))
        if component:
            stack.enter_context(logger.track_component(component))
        stack.enter_context(logger.profile(name))
        try:
            yield handle
        except Exception as exc:
            handle.fail(str(exc))
            raise
        handle.finish()


configure()

__all__ = [
    "PRESETS",
    "SpanHandle",
    "TelemetrySettings",
    "configure",
    "get_logger",
    "record_event",
    "span",
]
