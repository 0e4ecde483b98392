"""
Adapter interface.

Every backend is wrapped by one Adapter subclass. The facade hands it
keys that are already namespaced ("endb:foo") and values that are
already serialized (str), so adapters only move strings in and out of
their engine.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any


class Adapter(ABC):
    """
    Abstract base class for storage backends.

    Implementations:
        MemoryAdapter — dict, default fallback
        SQLiteAdapter — aiosqlite
        PostgresAdapter — asyncpg
        MySQLAdapter — aiomysql
        MongoDBAdapter — pymongo async client
        RedisAdapter — redis.asyncio
        LevelDBAdapter — plyvel

    Subclasses connect lazily: the first operation calls connect().
    `namespace` is assigned by the facade right after construction.
    """

    name: str = "adapter"

    def __init__(self, namespace: str = "endb", **options: Any) -> None:
        self.namespace = namespace
        self.options = options

    @property
    def prefix(self) -> str:
        """Prefix shared by every key of this adapter's namespace."""
        return f"{self.namespace}:"

    async def connect(self) -> None:
        """Open the backend connection. Default: nothing to open."""

    async def close(self) -> None:
        """Release the backend connection. Default: nothing to release."""

    @abstractmethod
    async def get(self, key: str) -> str | None:
        """Get a serialized value. Returns None if not found."""
        ...

    @abstractmethod
    async def set(self, key: str, value: str) -> None:
        """Set a serialized value. Overwrites if exists."""
        ...

    @abstractmethod
    async def delete(self, key: str) -> bool:
        """Delete a key. Returns True if it existed."""
        ...

    @abstractmethod
    async def clear(self) -> None:
        """Delete every key of the current namespace."""
        ...

    @abstractmethod
    async def all(self) -> list[tuple[str, str]]:
        """All (namespaced key, serialized value) pairs of the namespace."""
        ...

    async def has(self, key: str) -> bool:
        """Check if a key exists."""
        return await self.get(key) is not None

    def __repr__(self) -> str:
        return f"{type(self).__name__}(namespace={self.namespace!r})"
