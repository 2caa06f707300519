"""Base provider interface for text generation services."""

from __future__ import annotations

import abc
import math
from typing import Union

from ..contracts import GenerationFailure, GenerationOutcome, GenerationRequest

ProviderResult = Union[GenerationOutcome, GenerationFailure]


def estimate_tokens(text: str) -> int:
    """Rough token count for services that do not report usage."""
    return math.ceil(len(text) / 4)


class BaseProvider(metaclass=abc.ABCMeta):
    """Abstract text generation provider.

    Implementations report expected failures (bad credentials, exhausted
    quota, rate limits, service or network errors) as a
    :class:`GenerationFailure` value instead of raising.
    """

    name: str = "provider"

    @abc.abstractmethod
    async def generate(self, request: GenerationRequest) -> ProviderResult:
        """Generate text for ``request.prompt_text`` within ``request.max_tokens``."""
        raise NotImplementedError

    async def aclose(self) -> None:
        """Release network resources (no-op by default)."""
        pass

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name!r})"
