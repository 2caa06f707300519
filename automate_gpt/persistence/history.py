"""History and settings persistence on top of a key-value store."""

from __future__ import annotations

import asyncio
import logging
from datetime import timezone
from pathlib import Path
from typing import List, Optional

from pydantic import ValidationError

from ..constants import DEFAULT_HISTORY_LIMIT, HISTORY_KEY, SETTINGS_KEY
from ..contracts import AppSettings, HistoryExport, WorkflowResult
from ..errors import StorageQuotaExceeded
from .store import KeyValueStore, namespaced_key

logger = logging.getLogger(__name__)


class HistoryStore:
    """Size-bounded result history and settings, optionally per user.

    Every mutation is a whole-list read-modify-write, serialized by a lock so
    the ordering and eviction invariants survive concurrent callers.
    """

    def __init__(
        self, kv: KeyValueStore, history_limit: int = DEFAULT_HISTORY_LIMIT
    ) -> None:
        if history_limit < 1:
            raise ValueError("history_limit must be at least 1")
        self.kv = kv
        self.history_limit = history_limit
        self._lock = asyncio.Lock()

    # ------------------------------------------------------------------
    # History
    async def save_result(
        self, record: WorkflowResult, user_id: Optional[str] = None
    ) -> None:
        """Prepend ``record`` and drop the oldest entries beyond the cap.

        When the backend runs out of space the cap is halved and the write is
        retried; if even a single entry does not fit the write is abandoned.
        """
        key = namespaced_key(HISTORY_KEY, user_id)
        async with self._lock:
            history = await self._load_history(key)
            entries = [record.model_dump(mode="json")]
            entries.extend(item.model_dump(mode="json") for item in history)

            cap = self.history_limit
            while cap >= 1:
                try:
                    await self.kv.set(key, entries[:cap])
                    return
                except StorageQuotaExceeded as exc:
                    logger.warning(
                        f"History write for {key} exceeded storage quota at {cap} entries: {exc}"
                    )
                    cap //= 2
            logger.error(f"Dropped history record {record.id}: storage is full")

    async def get_history(self, user_id: Optional[str] = None) -> List[WorkflowResult]:
        """Return stored results, newest first."""
        return await self._load_history(namespaced_key(HISTORY_KEY, user_id))

    async def clear_history(self, user_id: Optional[str] = None) -> None:
        async with self._lock:
            await self.kv.remove(namespaced_key(HISTORY_KEY, user_id))

    async def export_history(self, user_id: Optional[str] = None) -> HistoryExport:
        """Snapshot the full history into an export document."""
        history = await self.get_history(user_id)
        return HistoryExport(user_id=user_id, count=len(history), results=history)

    async def write_export(
        self, directory: str | Path, user_id: Optional[str] = None
    ) -> Path:
        """Write the export document to ``directory`` and return its path."""
        export = await self.export_history(user_id)
        stamp = export.exported_at.astimezone(timezone.utc).date().isoformat()
        path = Path(directory) / f"automate-gpt-history-{stamp}.json"
        path.parent.mkdir(parents=True, exist_ok=True)
        await asyncio.to_thread(path.write_text, export.to_json(), "utf-8")
        logger.info(f"Exported {export.count} history entries to {path}")
        return path

    async def _load_history(self, key: str) -> List[WorkflowResult]:
        raw = await self.kv.get(key)
        if not isinstance(raw, list):
            return []
        try:
            return [WorkflowResult.model_validate(item) for item in raw]
        except ValidationError as exc:
            logger.warning(f"Ignoring unreadable history under {key}: {exc}")
            return []

    # ------------------------------------------------------------------
    # Settings
    async def get_settings(self, user_id: Optional[str] = None) -> AppSettings:
        """Return stored settings, or defaults when none are usable."""
        raw = await self.kv.get(namespaced_key(SETTINGS_KEY, user_id))
        if raw is None:
            return AppSettings()
        try:
            return AppSettings.model_validate(raw)
        except ValidationError as exc:
            logger.warning(f"Stored settings are invalid, using defaults: {exc}")
            return AppSettings()

    async def save_settings(
        self, settings: AppSettings, user_id: Optional[str] = None
    ) -> None:
        await self.kv.set(
            namespaced_key(SETTINGS_KEY, user_id), settings.model_dump(mode="json")
        )
