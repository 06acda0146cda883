"""Option schema, scoped configuration store, and per-scope snapshots."""

from .schema import DEFAULT_OPTIONS, DEFAULT_SCHEMA, NAMESPACE, OptionSpec, build_schema
from .scope import ScopeConfiguration
from .store import ConfigStore, GLOBAL_SCOPE, UnknownConfigKeyError, normalize_scope

__all__ = [
    "ConfigStore",
    "DEFAULT_OPTIONS",
    "DEFAULT_SCHEMA",
    "GLOBAL_SCOPE",
    "NAMESPACE",
    "OptionSpec",
    "ScopeConfiguration",
    "UnknownConfigKeyError",
    "build_schema",
    "normalize_scope",
]
