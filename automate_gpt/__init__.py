"""automate-gpt: template-driven text workflows with provider fallback."""

from .contracts import AppSettings, GenerationOutcome, WorkflowResult, WorkflowTemplate
from .errors import AllProvidersUnavailable, InvalidInput, TemplateNotFound
from .execute import WorkflowExecutor, WorkflowSession, create_executor
from .orchestrator import GenerationOrchestrator
from .persistence import HistoryStore, get_store
from .providers import build_provider_chain, get_provider
from .registry import WORKFLOW_TEMPLATES, get_template, list_templates

__version__ = "0.1.0"
__all__ = [
    "AllProvidersUnavailable",
    "AppSettings",
    "GenerationOrchestrator",
    "GenerationOutcome",
    "HistoryStore",
    "InvalidInput",
    "TemplateNotFound",
    "WORKFLOW_TEMPLATES",
    "WorkflowExecutor",
    "WorkflowResult",
    "WorkflowSession",
    "WorkflowTemplate",
    "build_provider_chain",
    "create_executor",
    "get_provider",
    "get_store",
    "get_template",
    "list_templates",
]
