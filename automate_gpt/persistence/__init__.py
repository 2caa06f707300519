"""Persistence layer for automate-gpt client state."""

from __future__ import annotations

import os
from typing import Optional

from ..config import AutomateConfig, load_config
from .history import HistoryStore
from .inmemory import InMemoryKeyValueStore
from .sqlite import SQLiteKeyValueStore
from .store import KeyValueStore, namespaced_key

try:  # pragma: no cover - optional dependency
    from .postgres import PostgresKeyValueStore
except ImportError:  # pragma: no cover - optional dependency
    PostgresKeyValueStore = None  # type: ignore

try:  # pragma: no cover - optional dependency
    from .redis import RedisKeyValueStore
except ImportError:  # pragma: no cover - optional dependency
    RedisKeyValueStore = None  # type: ignore

_store_instance: KeyValueStore | None = None


def get_store(
    storage_url: Optional[str] = None, config: Optional[AutomateConfig] = None
) -> KeyValueStore:
    """Factory function to obtain a key-value store.

    The backend is selected based on ``storage_url`` which can be provided
    explicitly, via environment variable ``AUTOMATE_GPT_STORAGE_URL``, or from
    loaded configuration. When no storage is configured, an in-memory store
    is returned.
    """

    global _store_instance
    if _store_instance is not None and storage_url is None and config is None:
        return _store_instance

    config = config or load_config()
    storage_url = (
        storage_url
        or os.getenv("AUTOMATE_GPT_STORAGE_URL")
        or getattr(config.storage, "url", None)
    )

    if not storage_url:
        _store_instance = InMemoryKeyValueStore()
        return _store_instance

    if storage_url.startswith("sqlite://"):
        path = storage_url.replace("sqlite://", "", 1)
        _store_instance = SQLiteKeyValueStore(path)
    elif storage_url.startswith("postgres://") or storage_url.startswith(
        "postgresql://"
    ):
        if PostgresKeyValueStore is None:
            raise RuntimeError("Postgres support not available")
        _store_instance = PostgresKeyValueStore(storage_url)
    elif storage_url.startswith("redis://"):
        if RedisKeyValueStore is None:
            raise RuntimeError("Redis support not available")
        _store_instance = RedisKeyValueStore(url=storage_url)
    else:
        raise ValueError(f"Unsupported storage backend: {storage_url}")

    return _store_instance


__all__ = [
    "KeyValueStore",
    "HistoryStore",
    "InMemoryKeyValueStore",
    "SQLiteKeyValueStore",
    "PostgresKeyValueStore",
    "RedisKeyValueStore",
    "get_store",
    "namespaced_key",
]
