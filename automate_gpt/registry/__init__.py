"""Static registry of workflow templates."""

from __future__ import annotations

from typing import Dict, List, Sequence

from ..contracts import WorkflowTemplate
from ..errors import TemplateNotFound

WORKFLOW_TEMPLATES: tuple[WorkflowTemplate, ...] = (
    WorkflowTemplate(
        id="summarizer",
        title="PDF/Text Summarizer",
        emoji="📄",
        description="Upload or paste text to get a concise summary with key points",
        placeholder_text="Paste your text here or upload a file...",
        prompt_pattern=(
            "Summarize the following text in 3-5 key points, making it concise "
            "and easy to understand:\n\n{input}"
        ),
    ),
    WorkflowTemplate(
        id="email_writer",
        title="Email Generator",
        emoji="📨",
        description="Turn bullet points into professional, well-structured emails",
        placeholder_text="Enter bullet points for your email...",
        prompt_pattern=(
            "Write a professional email based on these points:\n{input}\n\n"
            "Make it polite, concise, and well-structured with proper greeting and closing."
        ),
    ),
    WorkflowTemplate(
        id="idea_expander",
        title="Idea Expander",
        emoji="🧠",
        description="Transform one-line ideas into detailed, actionable paragraphs",
        placeholder_text="Enter your idea...",
        prompt_pattern=(
            "Expand this idea into a detailed paragraph with actionable insights "
            "and practical steps:\n{input}"
        ),
    ),
    WorkflowTemplate(
        id="task_creator",
        title="Task List Creator",
        emoji="✅",
        description="Convert goals into specific, actionable task lists",
        placeholder_text="Enter your goal...",
        prompt_pattern=(
            "Create a numbered task list to achieve this goal:\n{input}\n\n"
            "Make tasks specific, actionable, and ordered by priority."
        ),
    ),
    WorkflowTemplate(
        id="custom_prompt",
        title="Custom Prompt",
        emoji="🔁",
        description="Use any custom prompt for flexible AI assistance",
        placeholder_text="Enter your custom prompt...",
        prompt_pattern="{input}",
    ),
)


def _build_index(templates: Sequence[WorkflowTemplate]) -> Dict[str, WorkflowTemplate]:
    index: Dict[str, WorkflowTemplate] = {}
    for template in templates:
        if template.id in index:
            raise ValueError(f"Duplicate workflow template id: {template.id}")
        index[template.id] = template
    return index


_TEMPLATE_INDEX = _build_index(WORKFLOW_TEMPLATES)

DEFAULT_TEMPLATE_ID = WORKFLOW_TEMPLATES[0].id


def list_templates() -> List[WorkflowTemplate]:
    """Return templates in display order; the first one is the default."""
    return list(WORKFLOW_TEMPLATES)


def get_template(template_id: str) -> WorkflowTemplate:
    """Look up a template by id.

    Raises:
        TemplateNotFound: If ``template_id`` is not registered.
    """
    try:
        return _TEMPLATE_INDEX[template_id]
    except KeyError:
        raise TemplateNotFound(template_id) from None


__all__ = [
    "WORKFLOW_TEMPLATES",
    "DEFAULT_TEMPLATE_ID",
    "list_templates",
    "get_template",
]
