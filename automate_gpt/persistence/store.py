"""Key-value abstraction for durable client state."""

from __future__ import annotations

from typing import Any, Optional, Protocol


class KeyValueStore(Protocol):
    """Protocol for storage backends holding JSON-serializable values."""

    async def get(self, key: str) -> Any | None:
        """Return the value stored under ``key`` or ``None``."""

    async def set(self, key: str, value: Any) -> None:
        """Store ``value`` under ``key``, replacing any previous value.

        Raises:
            StorageQuotaExceeded: If the backend is out of space.
        """

    async def remove(self, key: str) -> None:
        """Delete ``key``; missing keys are ignored."""


def namespaced_key(base: str, user_id: Optional[str] = None) -> str:
    """Build the storage key for ``base``, scoped to ``user_id`` when given."""
    if not user_id:
        return base
    return f"{base}_{user_id}"
