"""
Endb adapter registry — resolves a connection string to an adapter.

Adapters are registered by NAME, either as a class or as a lazy
"module:Class" import path, so a driver package is imported only
when its adapter is actually selected.

Resolution order:
    1. explicit `adapter` option
    2. URI scheme (everything before the first ":")
    3. fallback: MemoryAdapter (logged; AdapterNotFoundError if strict)
"""

from __future__ import annotations

import importlib
import logging
import re
from typing import Any, Union

from endb.adapters.base import Adapter
from endb.core.config import EndbConfig
from endb.core.errors import AdapterError, AdapterNotFoundError

logger = logging.getLogger(__name__)

AdapterSpec = Union[str, type[Adapter]]

FALLBACK = "memory"

DEFAULT_ADAPTERS: dict[str, str] = {
    "level": "endb.adapters.leveldb:LevelDBAdapter",
    "leveldb": "endb.adapters.leveldb:LevelDBAdapter",
    "mongo": "endb.adapters.mongodb:MongoDBAdapter",
    "mongodb": "endb.adapters.mongodb:MongoDBAdapter",
    "mysql": "endb.adapters.mysql:MySQLAdapter",
    "mysql2": "endb.adapters.mysql:MySQLAdapter",
    "postgres": "endb.adapters.postgres:PostgresAdapter",
    "postgresql": "endb.adapters.postgres:PostgresAdapter",
    "redis": "endb.adapters.redis:RedisAdapter",
    "sqlite": "endb.adapters.sqlite:SQLiteAdapter",
    "sqlite3": "endb.adapters.sqlite:SQLiteAdapter",
    "memory": "endb.adapters.memory:MemoryAdapter",
}

_SCHEME = re.compile(r"^[^:]*")


def resolve_scheme(uri: str | None) -> str | None:
    """Return the part of a URI before the first ':' (None for empty URIs)."""
    if not uri:
        return None
    return _SCHEME.match(uri).group(0).lower() or None


class AdapterRegistry:
    """
    Name → adapter class lookup table.

    Usage:
        registry = AdapterRegistry()

        # Register a custom backend
        registry.register("dynamo", "my_pkg.dynamo:DynamoAdapter")

        # Resolve
        cls = registry.get("sqlite")
        adapter = registry.load(EndbConfig(uri="sqlite://db.sqlite"))
    """

    def __init__(self, adapters: dict[str, AdapterSpec] | None = None) -> None:
        self._adapters: dict[str, AdapterSpec] = dict(
            DEFAULT_ADAPTERS if adapters is None else adapters
        )

    def register(self, name: str, adapter: AdapterSpec) -> None:
        """
        Register an adapter under a name (replacing any existing one).

        Args:
            name: Adapter name, also used as URI scheme
            adapter: Adapter subclass or "module:Class" path
        """
        self._adapters[name.lower()] = adapter
        logger.debug(f"Registered adapter {name}")

    def remove(self, name: str) -> None:
        self._adapters.pop(name.lower(), None)

    def has(self, name: str | None) -> bool:
        return name is not None and name.lower() in self._adapters

    def get_names(self) -> list[str]:
        return list(self._adapters)

    def get(self, name: str) -> type[Adapter]:
        """
        Get the adapter class for a name, importing it if needed.

        Raises:
            AdapterNotFoundError: name is not registered
            AdapterError: the adapter module could not be imported
        """
        spec = self._adapters.get(name.lower())
        if spec is None:
            available = ", ".join(self._adapters)
            raise AdapterNotFoundError(
                f"Adapter '{name}' not found. Available: {available}", adapter=name
            )
        if isinstance(spec, str):
            spec = _import_adapter(name, spec)
            self._adapters[name.lower()] = spec
        return spec

    def select(self, config: EndbConfig) -> str:
        """Pick the adapter name for a config, applying the fallback rule."""
        name = config.adapter or resolve_scheme(config.uri)
        if name is None:
            return FALLBACK
        if self.has(name):
            return name.lower()
        if config.strict:
            raise AdapterNotFoundError(
                f"No adapter registered for '{name}'", adapter=name
            )
        logger.warning(
            f"Unknown adapter '{name}', falling back to non-persistent memory store"
        )
        return FALLBACK

    def load(self, config: EndbConfig) -> Adapter:
        """Instantiate the adapter selected by a config."""
        name = self.select(config)
        cls = self.get(name)
        options: dict[str, Any] = {
            "uri": config.uri,
            "table": config.table,
            "collection": config.collection,
            "key_size": config.key_size,
            "busy_timeout": config.busy_timeout,
            **config.backend_options,
        }
        adapter = cls(namespace=config.namespace, **options)
        logger.debug(f"Loaded {name} adapter for namespace '{config.namespace}'")
        return adapter


def _import_adapter(name: str, path: str) -> type[Adapter]:
    module_name, _, class_name = path.partition(":")
    try:
        module = importlib.import_module(module_name)
        cls = getattr(module, class_name)
    except (ImportError, AttributeError) as e:
        raise AdapterError(
            f"Cannot load adapter '{name}' from {path}: {e}", adapter=name
        ) from e
    if not (isinstance(cls, type) and issubclass(cls, Adapter)):
        raise AdapterError(f"{path} is not an Adapter subclass", adapter=name)
    return cls


# Shared default table used by Endb when no registry is passed
default_registry = AdapterRegistry()


def load_adapter(config: EndbConfig, registry: AdapterRegistry | None = None) -> Adapter:
    """Build the adapter for a config from `registry` (default: the shared table)."""
    return (registry or default_registry).load(config)
