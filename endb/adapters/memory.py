"""
In-memory adapter — the fallback when no URI or adapter is given.

Simple dict-based storage. Data lost when process exits.
"""

from __future__ import annotations

from typing import Any

from endb.adapters.base import Adapter


class MemoryAdapter(Adapter):
    """
    In-memory key-value store.

    Pass `data` to let several adapters (one per namespace) share the
    same dict.

    Usage:
        adapter = MemoryAdapter()
        await adapter.set("endb:key", '"value"')
        assert await adapter.get("endb:key") == '"value"'
    """

    name = "memory"

    def __init__(
        self,
        namespace: str = "endb",
        data: dict[str, str] | None = None,
        **options: Any,
    ) -> None:
        super().__init__(namespace, **options)
        self._data: dict[str, str] = {} if data is None else data

    async def get(self, key: str) -> str | None:
        return self._data.get(key)

    async def set(self, key: str, value: str) -> None:
        self._data[key] = value

    async def delete(self, key: str) -> bool:
        if key in self._data:
            del self._data[key]
            return True
        return False

    async def clear(self) -> None:
        for key in [k for k in self._data if k.startswith(self.prefix)]:
            del self._data[key]

    async def all(self) -> list[tuple[str, str]]:
        return [(k, v) for k, v in self._data.items() if k.startswith(self.prefix)]

    async def has(self, key: str) -> bool:
        return key in self._data

    def __len__(self) -> int:
        return len(self._data)
