"""
SQLite adapter.

Uses aiosqlite for async SQLite access.
WAL mode enabled for concurrent read support.

URI forms:
    sqlite://relative/path.sqlite
    sqlite:///absolute/path.sqlite
    sqlite://:memory:
"""

from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Any, Sequence

import aiosqlite

from endb.adapters.sql import SQLAdapter

logger = logging.getLogger(__name__)

_SCHEME = re.compile(r"^sqlite3?://", re.IGNORECASE)


def parse_sqlite_uri(uri: str | None) -> str:
    """Turn a sqlite:// URI (or a bare path) into a database path."""
    if not uri:
        return ":memory:"
    path = _SCHEME.sub("", uri, count=1)
    return path or ":memory:"


class SQLiteAdapter(SQLAdapter):
    """
    SQLite-based key-value storage.

    The parent directory of the database file must exist; a missing
    directory surfaces as StorageError on first use.

    Usage:
        adapter = SQLiteAdapter(uri="sqlite://data/endb.sqlite")
        await adapter.set("endb:user", '"Alex"')
        value = await adapter.get("endb:user")  # '"Alex"'
    """

    name = "sqlite"

    def __init__(
        self,
        namespace: str = "endb",
        uri: str | None = None,
        table: str = "endb",
        key_size: int = 255,
        busy_timeout: int | None = None,
        **options: Any,
    ) -> None:
        super().__init__(namespace, uri=uri, table=table, key_size=key_size, **options)
        self.busy_timeout = busy_timeout
        self._db_path = parse_sqlite_uri(uri)
        self._db: aiosqlite.Connection | None = None

    async def _open(self) -> None:
        if self._db_path != ":memory:":
            self._db_path = str(Path(self._db_path).expanduser())
        self._db = await aiosqlite.connect(self._db_path)

        if self._db_path != ":memory:":
            await self._db.execute("PRAGMA journal_mode=WAL")
            await self._db.execute("PRAGMA synchronous=NORMAL")
        if self.busy_timeout is not None:
            await self._db.execute(f"PRAGMA busy_timeout = {int(self.busy_timeout)}")
        # Namespaces are case-sensitive
        await self._db.execute("PRAGMA case_sensitive_like = ON")
        logger.debug(f"SQLite database opened at {self._db_path}")

    async def _close(self) -> None:
        db, self._db = self._db, None
        if db is not None:
            await db.close()

    async def _execute(self, sql: str, params: Sequence[Any] = ()) -> int:
        cursor = await self._db.execute(sql, tuple(params))
        await self._db.commit()
        return cursor.rowcount

    async def _fetchone(self, sql: str, params: Sequence[Any] = ()) -> tuple | None:
        async with self._db.execute(sql, tuple(params)) as cursor:
            return await cursor.fetchone()

    async def _fetchall(self, sql: str, params: Sequence[Any] = ()) -> list[tuple]:
        async with self._db.execute(sql, tuple(params)) as cursor:
            return list(await cursor.fetchall())

    def _upsert_sql(self) -> str:
        key, value = self._q("key"), self._q("value")
        return (
            f"INSERT INTO {self._q(self.table)} ({key}, {value}) VALUES (?, ?) "
            f"ON CONFLICT({key}) DO UPDATE SET {value} = excluded.{value}"
        )
