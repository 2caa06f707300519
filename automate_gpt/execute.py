"""Workflow execution engine and interactive session state."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from .config import AutomateConfig, load_config
from .contracts import WorkflowResult
from .orchestrator import GenerationOrchestrator
from .persistence import HistoryStore, KeyValueStore, get_store
from .providers import build_provider_chain
from .recorder import ResultRecorder
from .registry import DEFAULT_TEMPLATE_ID, get_template

logger = logging.getLogger(__name__)


class WorkflowExecutor:
    """Runs a single workflow invocation end to end."""

    def __init__(
        self,
        orchestrator: GenerationOrchestrator,
        recorder: ResultRecorder,
        history_store: HistoryStore,
    ) -> None:
        self.orchestrator = orchestrator
        self.recorder = recorder
        self.history_store = history_store

    async def run(
        self, workflow_id: str, raw_input: str, user_id: Optional[str] = None
    ) -> WorkflowResult:
        """Look up the template, generate and record the result.

        Raises:
            TemplateNotFound: ``workflow_id`` is not registered.
            InvalidInput: ``raw_input`` is blank.
            AllProvidersUnavailable: No provider produced an outcome.
        """
        template = get_template(workflow_id)
        settings = await self.history_store.get_settings(user_id)
        outcome = await self.orchestrator.run(
            template, raw_input, settings.max_tokens, model=settings.model
        )
        record = await self.recorder.record(
            template.id, raw_input, outcome, user_id=user_id
        )
        logger.info(
            f"Workflow {template.id} completed with {record.tokens} tokens"
        )
        return record

    async def aclose(self) -> None:
        """Release provider network resources."""
        await self.orchestrator.aclose()


def create_executor(
    config: Optional[AutomateConfig] = None, store: Optional[KeyValueStore] = None
) -> WorkflowExecutor:
    """Wire providers, storage and recorder from configuration."""

    config = config or load_config()
    kv = store if store is not None else get_store(config=config)
    history = HistoryStore(kv, history_limit=config.history.limit)
    orchestrator = GenerationOrchestrator(build_provider_chain(config))
    recorder = ResultRecorder(history, max_field_chars=config.history.max_field_chars)
    return WorkflowExecutor(orchestrator, recorder, history)


@dataclass(frozen=True)
class _Ticket:
    sequence: int
    workflow_id: str


class WorkflowSession:
    """Interactive state for one user: selected workflow and latest result.

    Submissions may overlap. Only the most recent submission made while the
    same workflow is still selected gets to set ``current_result`` or
    ``last_error``.
    """

    def __init__(self, executor: WorkflowExecutor, user_id: Optional[str] = None) -> None:
        self.executor = executor
        self.user_id = user_id
        self.selected_workflow_id = DEFAULT_TEMPLATE_ID
        self.current_result: Optional[WorkflowResult] = None
        self.last_error: Optional[Exception] = None
        self._sequence = 0

    def select_workflow(self, workflow_id: str) -> None:
        get_template(workflow_id)
        if workflow_id != self.selected_workflow_id:
            self.selected_workflow_id = workflow_id
            self.current_result = None
            self.last_error = None

    def _is_current(self, ticket: _Ticket) -> bool:
        return (
            ticket.sequence == self._sequence
            and ticket.workflow_id == self.selected_workflow_id
        )

    async def submit(self, raw_input: str) -> Optional[WorkflowResult]:
        """Run the selected workflow; return the result if still current."""
        self._sequence += 1
        ticket = _Ticket(self._sequence, self.selected_workflow_id)

        try:
            result = await self.executor.run(
                ticket.workflow_id, raw_input, user_id=self.user_id
            )
        except Exception as exc:
            if not self._is_current(ticket):
                logger.info(
                    f"Discarding error from superseded submission {ticket.sequence}: {exc}"
                )
                return None
            self.current_result = None
            self.last_error = exc
            raise

        if not self._is_current(ticket):
            logger.info(f"Discarding superseded result {result.id}")
            return None
        self.current_result = result
        self.last_error = None
        return result
