"""Deterministic offline text synthesizer.

Used when no hosted service is reachable. The prompt is classified by
keyword and answered with a structured markdown template filled from the
user's own text, so output is stable for a given prompt.
"""

from __future__ import annotations

import asyncio
import logging
import re
from typing import List

from ..contracts import GenerationOutcome, GenerationRequest
from .base import BaseProvider, ProviderResult, estimate_tokens

logger = logging.getLogger(__name__)

_STOP_WORDS = {"the", "and", "or", "but", "in", "on", "at", "to", "for", "of", "with", "by"}

_FOCUS_KEYWORDS = (
    ("business", "Business strategy and operations"),
    ("technology", "Technology implementation and innovation"),
    ("project", "Project management and execution"),
    ("marketing", "Marketing and customer engagement"),
)


class LocalTextProvider(BaseProvider):
    """Offline provider that never fails."""

    name = "local"

    def __init__(self, delay_seconds: float = 0.0) -> None:
        self.delay_seconds = delay_seconds

    async def generate(self, request: GenerationRequest) -> ProviderResult:
        logger.info("Using local fallback response generation")
        if self.delay_seconds:
            await asyncio.sleep(self.delay_seconds)

        content = synthesize(request.prompt_text)
        # Rough cap: ~4 characters per token.
        limit = request.max_tokens * 4
        if len(content) > limit:
            content = content[:limit].rstrip()
        return GenerationOutcome(content=content, token_count=estimate_tokens(content))


def synthesize(prompt: str) -> str:
    """Render a markdown answer for ``prompt`` based on its apparent intent."""
    lowered = prompt.lower()
    if "summarize" in lowered or "summary" in lowered:
        return _summary(prompt)
    if "email" in lowered or "write" in lowered:
        return _email(prompt)
    if "expand" in lowered or "idea" in lowered:
        return _idea(prompt)
    if "task" in lowered or "goal" in lowered or "plan" in lowered:
        return _task_list(prompt)
    return _generic(prompt)


def _main_topic(content: str) -> str:
    words = [w for w in content.lower().split() if len(w) > 4 and w not in _STOP_WORDS]
    return ", ".join(words[:3]) or "General discussion"


def _primary_focus(content: str) -> str:
    lowered = content.lower()
    for keyword, focus in _FOCUS_KEYWORDS:
        if keyword in lowered:
            return focus
    return "Process improvement and optimization"


def _sentences(content: str) -> List[str]:
    return [s.strip() for s in re.split(r"[.!?]+", content) if s.strip()]


def _first_clause(prompt: str, pattern: str, default: str) -> str:
    cleaned = re.sub(pattern, "", prompt, flags=re.IGNORECASE).strip()
    lines = [line.strip() for line in cleaned.splitlines() if line.strip()]
    candidate = lines[-1] if lines else ""
    candidate = candidate.split(".")[0].strip()
    return candidate or default


def _summary(prompt: str) -> str:
    content = re.sub(
        r"summarize the following text.*?:|summarize this|please summarize",
        "",
        prompt,
        flags=re.IGNORECASE,
    ).strip()
    sentences = _sentences(content)
    details = ". ".join([s for s in sentences if len(s) > 20][:2])
    conclusions = ". ".join(sentences[-2:])
    topic = _main_topic(content)
    focus = _primary_focus(content)
    return (
        "# Document Summary\n\n"
        "## Key Points:\n"
        f"• **Main Topic**: {topic}\n"
        f"• **Primary Focus**: {focus}\n"
        f"• **Important Details**: {details or 'Key operational details and requirements'}\n"
        f"• **Conclusions**: {conclusions or 'Strategic outcomes and expected results'}\n\n"
        "## Executive Summary:\n"
        f"This document outlines important information regarding {topic}. "
        f"The content emphasizes {focus.lower()} and provides insights into the "
        "implementation process.\n\n"
        "## Action Items:\n"
        "• Review and validate the proposed approach\n"
        "• Identify required resources and budget allocation\n"
        "• Establish timeline and assign responsibilities\n"
    )


def _email(prompt: str) -> str:
    lowered = prompt.lower()
    if "meeting" in lowered:
        subject = "Meeting Follow-up and Next Steps"
    elif "project" in lowered:
        subject = "Project Update and Requirements"
    elif "proposal" in lowered:
        subject = "Proposal Review and Feedback"
    else:
        subject = "Follow-up on Our Recent Discussion"

    points = [
        re.sub(r"^[•\-*]\s*", "", line.strip())
        for line in prompt.splitlines()
        if line.strip().startswith(("•", "-", "*"))
    ] or ["Follow up on our previous discussion", "Provide requested information"]
    body = "\n".join(f"{i}. {point}" for i, point in enumerate(points, start=1))
    return (
        f"Subject: {subject}\n\n"
        "Dear [Recipient Name],\n\n"
        "I hope this email finds you well. I am writing to follow up on our "
        "recent discussion.\n\n"
        f"{body}\n\n"
        "Please let me know if you need any additional information.\n\n"
        "Best regards,\n"
        "[Your Name]"
    )


def _idea(prompt: str) -> str:
    idea = _first_clause(
        prompt,
        r"expand this idea.*?:|expand on|please expand",
        "Innovation and Development Initiative",
    )
    return (
        f"# Expanded Concept: {idea}\n\n"
        "## Overview:\n"
        f"This concept focuses on {idea.lower()}. The initiative aims to create "
        "value through innovative approaches and strategic implementation.\n\n"
        "## Implementation Strategy:\n"
        "1. **Research & Planning Phase** - feasibility study and resource assessment\n"
        "2. **Development Phase** - prototype, test and iterate\n"
        "3. **Launch Phase** - deploy, promote and monitor performance\n\n"
        "## Next Steps:\n"
        "1. Conduct detailed feasibility analysis\n"
        "2. Secure necessary funding and resources\n"
        "3. Create detailed implementation timeline\n"
    )


def _task_list(prompt: str) -> str:
    goal = _first_clause(
        prompt,
        r"create a numbered task list.*?:|create a task list|make tasks|generate tasks",
        "Achievement of Strategic Objectives",
    )
    return (
        f"# Action Plan: {goal}\n\n"
        "## Immediate Tasks (Week 1-2):\n"
        "1. **Define Objectives** - Clearly outline specific, measurable goals\n"
        "2. **Resource Assessment** - Identify required tools, budget, and personnel\n"
        "3. **Timeline Creation** - Establish realistic deadlines and milestones\n\n"
        "## Short-term Tasks (Month 1):\n"
        "4. **Research Phase** - Gather relevant information and best practices\n"
        "5. **Strategy Development** - Create detailed implementation plan\n\n"
        "## Long-term Tasks (Months 2-3):\n"
        "6. **Implementation** - Execute the main components of the plan\n"
        "7. **Monitoring & Adjustment** - Track progress and make necessary changes\n"
    )


def _generic(prompt: str) -> str:
    if len(prompt) < 50:
        context = "Brief inquiry requiring detailed explanation"
    elif len(prompt) < 200:
        context = "Moderate complexity request with specific requirements"
    else:
        context = "Comprehensive request requiring detailed analysis"
    return (
        "# AI Analysis & Response\n\n"
        "## Key Insights:\n"
        f"• **Primary Focus**: {_primary_focus(prompt)}\n"
        f"• **Context Analysis**: {context}\n"
        "• **Recommended Approach**: Systematic analysis with structured implementation plan\n\n"
        "## Recommendations:\n"
        "1. **Immediate Actions**: Define clear objectives and success criteria\n"
        "2. **Long-term Strategy**: Develop sustainable processes and continuous improvement\n"
        "3. **Best Practices**: Regular communication, documentation, and stakeholder engagement\n"
    )
