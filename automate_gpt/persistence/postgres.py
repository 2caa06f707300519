"""PostgreSQL implementation of the key-value store."""

from __future__ import annotations

import json
from typing import Any

import asyncpg
from asyncpg.exceptions import DiskFullError, ProgramLimitExceededError

from ..errors import StorageQuotaExceeded
from .store import KeyValueStore


class PostgresKeyValueStore(KeyValueStore):
    """Persist values as JSONB rows in PostgreSQL."""

    def __init__(self, dsn: str):
        self._dsn = dsn
        self._initialized = False

    async def _connect(self) -> asyncpg.Connection:
        conn = await asyncpg.connect(self._dsn)
        if not self._initialized:
            await self._ensure_schema(conn)
            self._initialized = True
        return conn

    async def _ensure_schema(self, conn: asyncpg.Connection) -> None:
        await conn.execute(
            """
            CREATE TABLE IF NOT EXISTS kv_store (
                key TEXT PRIMARY KEY,
                value JSONB NOT NULL
            )
            """
        )

    # ------------------------------------------------------------------
    async def get(self, key: str) -> Any | None:
        conn = await self._connect()
        try:
            row = await conn.fetchrow("SELECT value FROM kv_store WHERE key = $1", key)
        finally:
            await conn.close()
        if not row:
            return None
        return json.loads(row["value"])

    async def set(self, key: str, value: Any) -> None:
        conn = await self._connect()
        try:
            await conn.execute(
                """
                INSERT INTO kv_store (key, value) VALUES ($1, $2)
                ON CONFLICT (key) DO UPDATE SET value = EXCLUDED.value
                """,
                key,
                json.dumps(value),
            )
        except (DiskFullError, ProgramLimitExceededError) as exc:
            raise StorageQuotaExceeded(str(exc)) from exc
        finally:
            await conn.close()

    async def remove(self, key: str) -> None:
        conn = await self._connect()
        try:
            await conn.execute("DELETE FROM kv_store WHERE key = $1", key)
        finally:
            await conn.close()
