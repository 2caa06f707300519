"""Primary provider backed by an OpenAI chat model via pydantic-ai."""

from __future__ import annotations

import logging
import os
from typing import Any, Dict, Iterator, Optional

import httpx
from openai import APIConnectionError
from pydantic_ai import Agent
from pydantic_ai.exceptions import ModelHTTPError, UserError
from pydantic_ai.models import Model
from pydantic_ai.models.openai import OpenAIChatModel
from pydantic_ai.providers.openai import OpenAIProvider as OpenAIConnection

from ..constants import DEFAULT_MODEL
from ..contracts import FailureKind, GenerationFailure, GenerationOutcome, GenerationRequest
from ..prompts import SYSTEM_PROMPT
from .base import BaseProvider, ProviderResult

logger = logging.getLogger(__name__)


class MissingAPIKey(RuntimeError):
    """No OpenAI API key is configured."""


def _error_code(body: Any) -> Optional[str]:
    if not isinstance(body, dict):
        return None
    error = body.get("error", body)
    if not isinstance(error, dict):
        return None
    code = error.get("code") or error.get("type")
    return str(code) if code else None


_NETWORK_ERRORS = (APIConnectionError, httpx.TransportError, ConnectionError, TimeoutError)


def _cause_chain(exc: BaseException) -> Iterator[BaseException]:
    seen = set()
    while exc is not None and id(exc) not in seen:
        seen.add(id(exc))
        yield exc
        exc = exc.__cause__


def classify_error(exc: BaseException, provider: str = "openai") -> GenerationFailure:
    """Map an exception raised while calling OpenAI to a failure category.

    pydantic-ai wraps transport failures in its own API error, so the whole
    ``__cause__`` chain is checked for network errors.
    """
    if isinstance(exc, ModelHTTPError):
        code = _error_code(exc.body)
        status = exc.status_code
        if status == 401 or code == "invalid_api_key":
            return GenerationFailure.of(provider, FailureKind.INVALID_CREDENTIALS)
        if code == "insufficient_quota":
            return GenerationFailure.of(provider, FailureKind.QUOTA_EXCEEDED, transient=False)
        if status == 429 or code == "rate_limit_exceeded":
            return GenerationFailure.of(provider, FailureKind.RATE_LIMITED)
        return GenerationFailure.of(
            provider, FailureKind.SERVICE_ERROR, transient=status >= 500
        )
    if isinstance(exc, (MissingAPIKey, UserError)):
        return GenerationFailure.of(provider, FailureKind.INVALID_CREDENTIALS)
    if any(isinstance(link, _NETWORK_ERRORS) for link in _cause_chain(exc)):
        return GenerationFailure.of(provider, FailureKind.NETWORK_ERROR)
    return GenerationFailure.of(provider, FailureKind.SERVICE_ERROR)


class OpenAIChatProvider(BaseProvider):
    """Hosted chat completion provider with granular error reporting.

    ``llm_model`` lets callers inject any pydantic-ai model (for example a
    ``FunctionModel`` in tests); otherwise an OpenAI chat model is built per
    requested model name from ``api_key``.
    """

    name = "openai"

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: str = DEFAULT_MODEL,
        base_url: Optional[str] = None,
        temperature: float = 0.7,
        llm_model: Optional[Model] = None,
    ) -> None:
        self.api_key = api_key if api_key is not None else os.getenv("OPENAI_API_KEY", "")
        self.model = model
        self.base_url = base_url
        self.temperature = temperature
        self._llm_model = llm_model
        self._agents: Dict[str, Agent] = {}

    def _agent_for(self, model_name: str) -> Agent:
        agent = self._agents.get(model_name)
        if agent is not None:
            return agent

        if self._llm_model is not None:
            llm_model: Model = self._llm_model
        else:
            if not self.api_key:
                raise MissingAPIKey("OpenAI API key is not configured.")
            llm_model = OpenAIChatModel(
                model_name,
                provider=OpenAIConnection(api_key=self.api_key, base_url=self.base_url),
            )
        agent = Agent(llm_model, system_prompt=SYSTEM_PROMPT)
        self._agents[model_name] = agent
        return agent

    async def generate(self, request: GenerationRequest) -> ProviderResult:
        model_name = request.model or self.model
        logger.debug(
            f"Sending request to OpenAI model={model_name} max_tokens={request.max_tokens}"
        )
        try:
            agent = self._agent_for(model_name)
            result = await agent.run(
                request.prompt_text,
                model_settings={
                    "max_tokens": request.max_tokens,
                    "temperature": self.temperature,
                },
            )
        except Exception as exc:
            failure = classify_error(exc, self.name)
            logger.warning(f"OpenAI generation failed ({failure.kind.value}): {exc}")
            return failure

        content = str(result.output or "") or "No response generated"
        tokens = getattr(result.usage(), "total_tokens", None) or 0
        logger.info(f"OpenAI response received, tokens used: {tokens}")
        return GenerationOutcome(content=content, token_count=tokens)
