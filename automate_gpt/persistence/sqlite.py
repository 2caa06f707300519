"""SQLite implementation of the key-value store."""

from __future__ import annotations

import asyncio
import json
import sqlite3
from pathlib import Path
from typing import Any

from ..errors import StorageError, StorageQuotaExceeded
from .store import KeyValueStore


class SQLiteKeyValueStore(KeyValueStore):
    """Persist values in a single SQLite table."""

    def __init__(self, db_path: str | Path):
        self.db_path = str(db_path)
        self._conn = sqlite3.connect(self.db_path, check_same_thread=False)
        self._conn.row_factory = sqlite3.Row
        self._ensure_schema()

    # ------------------------------------------------------------------
    # Schema management
    def _ensure_schema(self) -> None:
        cur = self._conn.cursor()
        cur.execute(
            """
            CREATE TABLE IF NOT EXISTS kv_store (
                key TEXT PRIMARY KEY,
                value TEXT NOT NULL
            )
            """
        )
        self._conn.commit()

    # ------------------------------------------------------------------
    # Helper methods
    def _execute(self, query: str, *params: Any) -> None:
        cur = self._conn.cursor()
        try:
            cur.execute(query, params)
            self._conn.commit()
        except sqlite3.OperationalError as exc:
            self._conn.rollback()
            if "full" in str(exc).lower():
                raise StorageQuotaExceeded(str(exc)) from exc
            raise StorageError(str(exc)) from exc

    def _fetchone(self, query: str, *params: Any) -> sqlite3.Row | None:
        cur = self._conn.cursor()
        cur.execute(query, params)
        return cur.fetchone()

    # ------------------------------------------------------------------
    # Store API
    async def get(self, key: str) -> Any | None:
        row = await asyncio.to_thread(
            self._fetchone, "SELECT value FROM kv_store WHERE key = ?", key
        )
        if not row:
            return None
        return json.loads(row["value"])

    async def set(self, key: str, value: Any) -> None:
        await asyncio.to_thread(
            self._execute,
            """
            INSERT INTO kv_store (key, value) VALUES (?, ?)
            ON CONFLICT(key) DO UPDATE SET value = excluded.value
            """,
            key,
            json.dumps(value),
        )

    async def remove(self, key: str) -> None:
        await asyncio.to_thread(
            self._execute, "DELETE FROM kv_store WHERE key = ?", key
        )

    def close(self) -> None:
        self._conn.close()
