"""Fallback-aware generation orchestrator."""

from __future__ import annotations

import logging
from typing import List, Optional, Sequence

from .contracts import (
    FailureKind,
    GenerationFailure,
    GenerationOutcome,
    GenerationRequest,
    WorkflowTemplate,
)
from .errors import AllProvidersUnavailable, InvalidInput
from .prompts import compile_prompt
from .providers.base import BaseProvider

logger = logging.getLogger(__name__)

# Most specific first; ServiceError says the least about what went wrong.
_SPECIFICITY = [
    FailureKind.INVALID_CREDENTIALS,
    FailureKind.QUOTA_EXCEEDED,
    FailureKind.RATE_LIMITED,
    FailureKind.NETWORK_ERROR,
    FailureKind.SERVICE_ERROR,
]


def summarize_failures(failures: Sequence[GenerationFailure]) -> AllProvidersUnavailable:
    """Fold per-provider failures into the single terminal error.

    The primary provider's failure is reported unless it is a generic service
    error and a later provider saw something more specific.
    """
    chosen = failures[0]
    if chosen.kind is FailureKind.SERVICE_ERROR:
        for failure in failures[1:]:
            if _SPECIFICITY.index(failure.kind) < _SPECIFICITY.index(chosen.kind):
                chosen = failure
                break

    cause = "transient" if any(f.transient for f in failures) else "configuration"
    message = f"All AI services are unavailable. {chosen.message}"
    return AllProvidersUnavailable(message, failures=failures, cause=cause)


class GenerationOrchestrator:
    """Walk an ordered provider list until one produces an outcome.

    Providers are tried strictly one after another, each exactly once per
    invocation; later providers are never contacted once one succeeds. The
    orchestrator holds no per-invocation state.
    """

    def __init__(self, providers: Sequence[BaseProvider]) -> None:
        if not providers:
            raise ValueError("At least one provider is required")
        self.providers: List[BaseProvider] = list(providers)

    async def aclose(self) -> None:
        for provider in self.providers:
            await provider.aclose()

    async def run(
        self,
        template: WorkflowTemplate,
        raw_input: str,
        max_tokens: int,
        model: Optional[str] = None,
    ) -> GenerationOutcome:
        """Validate input, compile the prompt and execute the provider chain.

        Raises:
            InvalidInput: If ``raw_input`` is empty after trimming.
            AllProvidersUnavailable: If every provider failed.
        """
        if not raw_input or not raw_input.strip():
            raise InvalidInput()
        prompt_text = compile_prompt(template, raw_input)
        return await self.generate(prompt_text, max_tokens, model=model)

    async def generate(
        self, prompt_text: str, max_tokens: int, model: Optional[str] = None
    ) -> GenerationOutcome:
        """Execute the provider chain for an already compiled prompt."""
        request = GenerationRequest(
            prompt_text=prompt_text, max_tokens=max_tokens, model=model
        )
        failures: List[GenerationFailure] = []

        for position, provider in enumerate(self.providers):
            try:
                result = await provider.generate(request)
            except Exception as exc:
                logger.exception(f"Provider {provider.name} raised instead of reporting: {exc}")
                result = GenerationFailure.of(provider.name, FailureKind.SERVICE_ERROR)

            if isinstance(result, GenerationOutcome):
                if position > 0:
                    logger.warning(
                        f"Generation served by fallback provider {provider.name} "
                        f"after {len(failures)} failure(s)"
                    )
                return result

            failures.append(result)
            logger.warning(
                f"Provider {provider.name} failed with {result.kind.value}"
                f" (transient={result.transient})"
            )

        error = summarize_failures(failures)
        logger.error(f"All providers failed ({error.cause}): {error}")
        raise error
