"""Redis implementation of the key-value store."""

from __future__ import annotations

import json
from typing import Any, Optional

try:
    import redis.asyncio as redis
    from redis.exceptions import ResponseError
except ImportError:
    redis = None
    ResponseError = None

from ..errors import StorageQuotaExceeded
from .store import KeyValueStore


class RedisKeyValueStore(KeyValueStore):
    """Redis-backed store for sharing state between processes."""

    def __init__(
        self,
        host: str = "localhost",
        port: int = 6379,
        db: int = 0,
        password: Optional[str] = None,
        prefix: str = "automate_gpt:",
        url: Optional[str] = None,
    ) -> None:
        if redis is None:
            raise ImportError("redis package is required for RedisKeyValueStore")

        self.host = host
        self.port = port
        self.db = db
        self.password = password
        self.prefix = prefix
        self.url = url
        self._redis: Optional[Any] = None

    async def connect(self) -> None:
        """Connect to Redis."""
        if self.url:
            self._redis = redis.Redis.from_url(self.url, decode_responses=True)
        else:
            self._redis = redis.Redis(
                host=self.host,
                port=self.port,
                db=self.db,
                password=self.password,
                decode_responses=True,
            )
        await self._redis.ping()

    async def disconnect(self) -> None:
        """Disconnect from Redis."""
        if self._redis:
            await self._redis.aclose()
            self._redis = None

    async def get(self, key: str) -> Any | None:
        if not self._redis:
            await self.connect()
        raw = await self._redis.get(self.prefix + key)
        if raw is None:
            return None
        return json.loads(raw)

    async def set(self, key: str, value: Any) -> None:
        if not self._redis:
            await self.connect()
        try:
            await self._redis.set(self.prefix + key, json.dumps(value))
        except ResponseError as exc:
            if str(exc).startswith("OOM"):
                raise StorageQuotaExceeded(str(exc)) from exc
            raise

    async def remove(self, key: str) -> None:
        if not self._redis:
            await self.connect()
        await self._redis.delete(self.prefix + key)
