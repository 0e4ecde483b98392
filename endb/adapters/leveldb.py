"""
LevelDB adapter on plyvel.

URI: leveldb://path/to/database (level:// also accepted)

plyvel is synchronous; every call runs in a worker thread so the
event loop never blocks on disk.
"""

from __future__ import annotations

import asyncio
import logging
import re
from pathlib import Path
from typing import Any

from endb.adapters.base import Adapter
from endb.core.errors import StorageError

logger = logging.getLogger(__name__)

_SCHEME = re.compile(r"^(level|leveldb)://", re.IGNORECASE)


def parse_leveldb_uri(uri: str | None) -> str:
    if not uri:
        return "endb.leveldb"
    return _SCHEME.sub("", uri, count=1) or "endb.leveldb"


class LevelDBAdapter(Adapter):
    """Key-value storage in a local LevelDB directory."""

    name = "leveldb"

    def __init__(
        self,
        namespace: str = "endb",
        uri: str | None = None,
        create_if_missing: bool = True,
        db: Any = None,
        **options: Any,
    ) -> None:
        super().__init__(namespace, **options)
        self.uri = uri
        self.create_if_missing = create_if_missing
        self._db_path = str(Path(parse_leveldb_uri(uri)).expanduser())
        # LevelDB allows one open handle per directory; an injected
        # handle is shared and never closed here
        self._db = db
        self._owns_db = db is None

    async def connect(self) -> None:
        if self._db is not None:
            return
        try:
            import plyvel

            self._db = await asyncio.to_thread(
                plyvel.DB, self._db_path, create_if_missing=self.create_if_missing
            )
        except Exception as e:
            raise StorageError(
                f"Failed to open LevelDB at {self._db_path}: {e}", adapter=self.name
            ) from e
        logger.debug(f"LevelDB opened at {self._db_path}")

    async def close(self) -> None:
        if self._db is not None and self._owns_db:
            await asyncio.to_thread(self._db.close)
            self._db = None

    async def _ensure(self) -> Any:
        if self._db is None:
            await self.connect()
        return self._db

    # ━━━ Blocking helpers (run in a thread) ━━━

    def _delete_sync(self, key: bytes) -> bool:
        if self._db.get(key) is None:
            return False
        self._db.delete(key)
        return True

    def _scan_sync(self) -> list[tuple[str, str]]:
        return [
            (k.decode("utf-8"), v.decode("utf-8"))
            for k, v in self._db.iterator(prefix=self.prefix.encode("utf-8"))
        ]

    def _clear_sync(self) -> None:
        with self._db.write_batch() as batch:
            for key in self._db.iterator(prefix=self.prefix.encode("utf-8"), include_value=False):
                batch.delete(key)

    # ━━━ Operations ━━━

    async def get(self, key: str) -> str | None:
        db = await self._ensure()
        try:
            value = await asyncio.to_thread(db.get, key.encode("utf-8"))
        except Exception as e:
            raise StorageError(f"Failed to get key '{key}': {e}", adapter=self.name) from e
        return value.decode("utf-8") if value is not None else None

    async def set(self, key: str, value: str) -> None:
        db = await self._ensure()
        try:
            await asyncio.to_thread(db.put, key.encode("utf-8"), value.encode("utf-8"))
        except Exception as e:
            raise StorageError(f"Failed to set key '{key}': {e}", adapter=self.name) from e

    async def delete(self, key: str) -> bool:
        await self._ensure()
        try:
            return await asyncio.to_thread(self._delete_sync, key.encode("utf-8"))
        except Exception as e:
            raise StorageError(f"Failed to delete key '{key}': {e}", adapter=self.name) from e

    async def clear(self) -> None:
        await self._ensure()
        try:
            await asyncio.to_thread(self._clear_sync)
        except Exception as e:
            raise StorageError(
                f"Failed to clear namespace '{self.namespace}': {e}", adapter=self.name
            ) from e

    async def all(self) -> list[tuple[str, str]]:
        await self._ensure()
        try:
            return await asyncio.to_thread(self._scan_sync)
        except Exception as e:
            raise StorageError(
                f"Failed to list namespace '{self.namespace}': {e}", adapter=self.name
            ) from e
