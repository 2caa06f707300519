"""In-memory implementation of the key-value store."""

from __future__ import annotations

import json
from typing import Any, Dict, Optional

from ..errors import StorageQuotaExceeded
from .store import KeyValueStore


class InMemoryKeyValueStore(KeyValueStore):
    """Store values in local memory as JSON text.

    Useful for tests or when no storage is configured. Data is not
    persisted across process restarts. ``max_bytes`` emulates a capacity
    limited medium such as browser storage.
    """

    def __init__(self, max_bytes: Optional[int] = None) -> None:
        self._data: Dict[str, str] = {}
        self.max_bytes = max_bytes

    def _size_with(self, key: str, encoded: str) -> int:
        total = len(key) + len(encoded)
        for other_key, other_value in self._data.items():
            if other_key != key:
                total += len(other_key) + len(other_value)
        return total

    async def get(self, key: str) -> Any | None:
        raw = self._data.get(key)
        if raw is None:
            return None
        return json.loads(raw)

    async def set(self, key: str, value: Any) -> None:
        encoded = json.dumps(value)
        if self.max_bytes is not None and self._size_with(key, encoded) > self.max_bytes:
            raise StorageQuotaExceeded(
                f"Writing {key} would exceed the {self.max_bytes} byte quota"
            )
        self._data[key] = encoded

    async def remove(self, key: str) -> None:
        self._data.pop(key, None)
