"""
Endb — simple key-value database with multi adapter support.

Public API:
    from endb import Endb, EndbConfig
"""

__version__ = "0.1.0"

from endb import util
from endb.adapters.base import Adapter
from endb.core.config import EndbConfig
from endb.core.errors import (
    AdapterError,
    AdapterNotFoundError,
    ConfigError,
    EndbError,
    StorageError,
)
from endb.core.events import Event, EventType
from endb.core.registry import AdapterRegistry, default_registry
from endb.store import Endb

version = __version__

__all__ = [
    "Endb",
    "EndbConfig",
    "Adapter",
    "AdapterRegistry",
    "default_registry",
    "Event",
    "EventType",
    "EndbError",
    "ConfigError",
    "AdapterError",
    "AdapterNotFoundError",
    "StorageError",
    "util",
    "version",
]
