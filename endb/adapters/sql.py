"""
Shared base for the SQL adapters (SQLite, PostgreSQL, MySQL).

All three store entries in one table:

    <table> (
        key   VARCHAR(<key_size>) PRIMARY KEY,
        value TEXT
    )

Dialects differ only in identifier quoting, parameter placeholders,
the upsert statement and the driver calls, which subclasses provide.
"""

from __future__ import annotations

import logging
import re
from abc import abstractmethod
from typing import Any, Sequence

from endb.adapters.base import Adapter
from endb.core.errors import AdapterError, StorageError

logger = logging.getLogger(__name__)

_IDENTIFIER = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")

# LIKE escape character; avoids backslash quoting differences between dialects
_ESCAPE = "!"


class SQLAdapter(Adapter):
    """
    Key-value table on top of a SQL driver.

    Subclasses implement _open/_close and the three query primitives.
    """

    name = "sql"
    quote = '"'
    value_type = "TEXT"

    def __init__(
        self,
        namespace: str = "endb",
        uri: str | None = None,
        table: str = "endb",
        key_size: int = 255,
        **options: Any,
    ) -> None:
        super().__init__(namespace, **options)
        if not _IDENTIFIER.match(table):
            raise AdapterError(f"Invalid table name: {table!r}", adapter=self.name)
        self.uri = uri
        self.table = table
        self.key_size = key_size
        self._connected = False

    # ━━━ Dialect hooks ━━━

    @abstractmethod
    async def _open(self) -> None:
        """Open the driver connection or pool."""
        ...

    @abstractmethod
    async def _close(self) -> None:
        ...

    @abstractmethod
    async def _execute(self, sql: str, params: Sequence[Any] = ()) -> int:
        """Run a statement, returning the number of affected rows."""
        ...

    @abstractmethod
    async def _fetchone(self, sql: str, params: Sequence[Any] = ()) -> tuple | None:
        ...

    @abstractmethod
    async def _fetchall(self, sql: str, params: Sequence[Any] = ()) -> list[tuple]:
        ...

    def _placeholder(self, index: int) -> str:
        """Parameter marker for the 1-based parameter `index`."""
        return "?"

    @abstractmethod
    def _upsert_sql(self) -> str:
        ...

    # ━━━ SQL helpers ━━━

    def _q(self, identifier: str) -> str:
        return f"{self.quote}{identifier}{self.quote}"

    def _create_table_sql(self) -> str:
        return (
            f"CREATE TABLE IF NOT EXISTS {self._q(self.table)} ("
            f"{self._q('key')} VARCHAR({int(self.key_size)}) PRIMARY KEY, "
            f"{self._q('value')} {self.value_type})"
        )

    def _like_prefix(self) -> str:
        escaped = (
            self.prefix.replace(_ESCAPE, _ESCAPE * 2)
            .replace("%", _ESCAPE + "%")
            .replace("_", _ESCAPE + "_")
        )
        return escaped + "%"

    # ━━━ Lifecycle ━━━

    async def connect(self) -> None:
        if self._connected:
            return
        try:
            await self._open()
            await self._execute(self._create_table_sql())
        except Exception as e:
            await self._discard()
            raise StorageError(
                f"Failed to connect {self.name} adapter to {self.uri}: {e}",
                adapter=self.name,
            ) from e
        self._connected = True
        logger.debug(f"{self.name} adapter ready (table={self.table})")

    async def close(self) -> None:
        if self._connected:
            await self._close()
            self._connected = False

    async def _discard(self) -> None:
        """Release a half-opened connection after a failed connect."""
        try:
            await self._close()
        except Exception as e:
            logger.warning(f"Error closing {self.name} adapter after failed connect: {e}")

    async def _ensure(self) -> None:
        if not self._connected:
            await self.connect()

    # ━━━ Operations ━━━

    async def get(self, key: str) -> str | None:
        await self._ensure()
        try:
            row = await self._fetchone(
                f"SELECT {self._q('value')} FROM {self._q(self.table)} "
                f"WHERE {self._q('key')} = {self._placeholder(1)}",
                (key,),
            )
        except Exception as e:
            raise StorageError(f"Failed to get key '{key}': {e}", adapter=self.name) from e
        return row[0] if row else None

    async def set(self, key: str, value: str) -> None:
        await self._ensure()
        try:
            await self._execute(self._upsert_sql(), (key, value))
        except Exception as e:
            raise StorageError(f"Failed to set key '{key}': {e}", adapter=self.name) from e

    async def delete(self, key: str) -> bool:
        await self._ensure()
        try:
            count = await self._execute(
                f"DELETE FROM {self._q(self.table)} "
                f"WHERE {self._q('key')} = {self._placeholder(1)}",
                (key,),
            )
        except Exception as e:
            raise StorageError(f"Failed to delete key '{key}': {e}", adapter=self.name) from e
        return count > 0

    async def clear(self) -> None:
        await self._ensure()
        try:
            await self._execute(
                f"DELETE FROM {self._q(self.table)} "
                f"WHERE {self._q('key')} LIKE {self._placeholder(1)} ESCAPE '{_ESCAPE}'",
                (self._like_prefix(),),
            )
        except Exception as e:
            raise StorageError(
                f"Failed to clear namespace '{self.namespace}': {e}", adapter=self.name
            ) from e

    async def all(self) -> list[tuple[str, str]]:
        await self._ensure()
        try:
            rows = await self._fetchall(
                f"SELECT {self._q('key')}, {self._q('value')} FROM {self._q(self.table)} "
                f"WHERE {self._q('key')} LIKE {self._placeholder(1)} ESCAPE '{_ESCAPE}' "
                f"ORDER BY {self._q('key')}",
                (self._like_prefix(),),
            )
        except Exception as e:
            raise StorageError(
                f"Failed to list namespace '{self.namespace}': {e}", adapter=self.name
            ) from e
        return [(row[0], row[1]) for row in rows]

    async def has(self, key: str) -> bool:
        await self._ensure()
        try:
            row = await self._fetchone(
                f"SELECT 1 FROM {self._q(self.table)} "
                f"WHERE {self._q('key')} = {self._placeholder(1)}",
                (key,),
            )
        except Exception as e:
            raise StorageError(f"Failed to check key '{key}': {e}", adapter=self.name) from e
        return row is not None
