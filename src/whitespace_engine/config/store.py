"""Layered configuration store: scope overrides, then globals, then defaults."""

from __future__ import annotations

import os
from typing import Any, Dict, Mapping, MutableMapping, Optional

from whitespace_engine.runtime import telemetry

from .schema import DEFAULT_SCHEMA, NAMESPACE, OptionSpec

ENV_PREFIX = "WHITESPACE_ENGINE_"
GLOBAL_SCOPE = "*"


class UnknownConfigKeyError(KeyError):
    """Raised when a key is not declared in the store's schema."""

    def __init__(self, key: str) -> None:
        super().__init__(key)
        self.key = key

    def __str__(self) -> str:
        return f"Unknown configuration key '{self.key}'"


def normalize_scope(scope: Optional[str]) -> str:
    """``".source.gfm"`` and ``"source.gfm"`` name the same scope."""

    if scope is None:
        return GLOBAL_SCOPE
    cleaned = str(scope).strip().lstrip(".")
    return cleaned or GLOBAL_SCOPE


class ConfigStore:
    """Scoped key/value settings checked against an option schema.

    Stored values are kept as given; they are coerced on every ``get`` and a
    value that does not coerce falls back to the option default.
    """

    def __init__(
        self,
        *,
        schema: Mapping[str, OptionSpec] = DEFAULT_SCHEMA,
        logger_name: str | None = None,
    ) -> None:
        self.schema = schema
        self._layers: Dict[str, MutableMapping[str, Any]] = {GLOBAL_SCOPE: {}}
        self._logger_name = logger_name

    @classmethod
    def from_mapping(
        cls, data: Mapping[str, Any], *, schema: Mapping[str, OptionSpec] = DEFAULT_SCHEMA
    ) -> "ConfigStore":
        """Build a store from ``{scope: {namespace: {option: value}}}``.

        Top-level keys that are not scopes (``"whitespace"``, ``"editor"``)
        are read as global settings.
        """

        store = cls(schema=schema)
        namespaces = {key.split(".", 1)[0] for key in schema}
        for top_key, section in data.items():
            if top_key in namespaces:
                store._load_section({top_key: section}, GLOBAL_SCOPE)
            else:
                store._load_section(section, normalize_scope(top_key))
        return store

    @classmethod
    def from_env(
        cls,
        environ: Optional[Mapping[str, str]] = None,
        *,
        schema: Mapping[str, OptionSpec] = DEFAULT_SCHEMA,
    ) -> "ConfigStore":
        """Seed global values from ``WHITESPACE_ENGINE_<OPTION_NAME>`` variables."""

        env = os.environ if environ is None else environ
        store = cls(schema=schema)
        for option in schema.values():
            raw = env.get(f"{ENV_PREFIX}{option.env_var}")
            if raw is not None:
                store.set(option.key, raw)
        return store

    def _load_section(self, section: Mapping[str, Any], scope: str) -> None:
        for namespace, options in section.items():
            for name, value in dict(options).items():
                self.set(f"{namespace}.{name}", value, scope=scope)

    def resolve_key(self, key: str) -> str:
        if key in self.schema:
            return key
        qualified = f"{NAMESPACE}.{key}"
        if qualified in self.schema:
            return qualified
        raise UnknownConfigKeyError(key)

    def set(self, key: str, value: Any, *, scope: Optional[str] = None) -> None:
        full_key = self.resolve_key(key)
        self._layers.setdefault(normalize_scope(scope), {})[full_key] = value

    def unset(self, key: str, *, scope: Optional[str] = None) -> None:
        full_key = self.resolve_key(key)
        self._layers.get(normalize_scope(scope), {}).pop(full_key, None)

    def get(self, key: str, *, scope: Optional[str] = None) -> Any:
        full_key = self.resolve_key(key)
        option = self.schema[full_key]
        for layer_name in self._lookup_order(scope):
            layer = self._layers.get(layer_name, {})
            if full_key not in layer:
                continue
            raw = layer[full_key]
            try:
                return option.coerce(raw)
            except ValueError as exc:
                telemetry.record_event(
                    "config.fallback",
                    level="warning",
                    data={
                        "key": full_key,
                        "scope": layer_name,
                        "value": raw,
                        "reason": str(exc),
                    },
                    logger_name=self._logger_name,
                )
                return option.default
        return option.default

    def scopes(self) -> tuple[str, ...]:
        return tuple(sorted(name for name in self._layers if name != GLOBAL_SCOPE))

    def _lookup_order(self, scope: Optional[str]) -> tuple[str, ...]:
        name = normalize_scope(scope)
        if name == GLOBAL_SCOPE:
            return (GLOBAL_SCOPE,)
        return (name, GLOBAL_SCOPE)


__all__ = ["ConfigStore", "GLOBAL_SCOPE", "UnknownConfigKeyError", "normalize_scope"]
