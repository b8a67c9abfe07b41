"""Key-value persistence for submitted feedback.

The intake handler only ever writes. ``KeyValueStore`` is the contract it
depends on; ``SqliteKVStore`` is the local, file-backed implementation, and
``app.clients.cloudflare.CloudflareKVClient`` targets a Cloudflare KV namespace.
"""

from __future__ import annotations

import logging
from typing import Protocol

import aiosqlite

logger = logging.getLogger(__name__)

DEFAULT_DB_PATH = "data/feedback_kv.db"


class KeyValueStore(Protocol):
    """Put-only view of a key-value store."""

    async def put(self, key: str, value: str) -> None: ...


class SqliteKVStore:
    """Async SQLite-backed key-value store.

    A put under an existing key replaces the stored value.
    """

    def __init__(self, db_path: str = DEFAULT_DB_PATH) -> None:
        self.db_path = db_path
        self._conn: aiosqlite.Connection | None = None

    async def init_db(self) -> None:
        """Create the table if it doesn't exist."""
        self._conn = await aiosqlite.connect(self.db_path)
        await self._conn.execute(
            """
            CREATE TABLE IF NOT EXISTS kv (
                key TEXT PRIMARY KEY,
                value TEXT NOT NULL
            )
            """
        )
        await self._conn.commit()

    async def _ensure_conn(self) -> aiosqlite.Connection:
        if self._conn is None:
            await self.init_db()
        assert self._conn is not None
        return self._conn

    async def put(self, key: str, value: str) -> None:
        """Write ``value`` under ``key``, overwriting any previous value."""
        conn = await self._ensure_conn()
        await conn.execute(
            """
            INSERT INTO kv (key, value) VALUES (?, ?)
            ON CONFLICT(key) DO UPDATE SET value = excluded.value
            """,
            (key, value),
        )
        await conn.commit()

    async def get(self, key: str) -> str | None:
        """Look up a value by key."""
        conn = await self._ensure_conn()
        cursor = await conn.execute("SELECT value FROM kv WHERE key = ?", (key,))
        row = await cursor.fetchone()
        if row is None:
            return None
        value: str = row[0]
        return value

    async def close(self) -> None:
        """Close the database connection."""
        if self._conn:
            await self._conn.close()
            self._conn = None
