"""Turns successful generations into persisted history records."""

from __future__ import annotations

import logging
from typing import Optional

from .constants import DEFAULT_MAX_FIELD_CHARS, TRUNCATION_SUFFIX
from .contracts import GenerationOutcome, WorkflowResult
from .errors import StorageError
from .persistence.history import HistoryStore

logger = logging.getLogger(__name__)


def truncate_text(text: str, limit: int) -> str:
    """Cut ``text`` to at most ``limit`` characters, marking the cut."""
    if len(text) <= limit:
        return text
    return text[: limit - len(TRUNCATION_SUFFIX)].rstrip() + TRUNCATION_SUFFIX


class ResultRecorder:
    """Build an immutable :class:`WorkflowResult` and append it to history."""

    def __init__(
        self, history: HistoryStore, max_field_chars: int = DEFAULT_MAX_FIELD_CHARS
    ) -> None:
        self.history = history
        self.max_field_chars = max_field_chars

    async def record(
        self,
        workflow_id: str,
        raw_input: str,
        outcome: GenerationOutcome,
        user_id: Optional[str] = None,
    ) -> WorkflowResult:
        """Persist one history entry for a successful generation.

        Storage failures are logged; the record is returned either way so a
        successful generation always reaches the caller.
        """
        record = WorkflowResult(
            workflow_id=workflow_id,
            input=truncate_text(raw_input, self.max_field_chars),
            output=truncate_text(outcome.content, self.max_field_chars),
            tokens=outcome.token_count,
        )
        try:
            await self.history.save_result(record, user_id)
        except StorageError as exc:
            logger.error(f"Failed to store history record {record.id}: {exc}")
        return record
