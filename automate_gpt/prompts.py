from __future__ import annotations

from .constants import INPUT_MARKER
from .contracts import WorkflowTemplate

SYSTEM_PROMPT = (
    "You are a helpful AI assistant that provides accurate, well-structured "
    "responses. Format your responses with clear headings, bullet points, and "
    "proper structure when appropriate."
)


def compile_prompt(template: WorkflowTemplate, raw_input: str) -> str:
    """Substitute ``raw_input`` verbatim into the template's prompt pattern.

    No escaping or truncation is applied. Rejecting empty input is the
    orchestrator's job.
    """
    return template.prompt_pattern.replace(INPUT_MARKER, raw_input, 1)
