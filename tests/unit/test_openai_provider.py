"""Tests for the primary provider and its error classification."""

import httpx
import pytest
from openai import AsyncOpenAI
from pydantic_ai.exceptions import ModelHTTPError
from pydantic_ai.messages import ModelResponse, TextPart
from pydantic_ai.models.function import AgentInfo, FunctionModel
from pydantic_ai.models.openai import OpenAIChatModel
from pydantic_ai.providers.openai import OpenAIProvider

from automate_gpt.contracts import FailureKind, GenerationOutcome, GenerationRequest
from automate_gpt.providers.openai import (
    MissingAPIKey,
    OpenAIChatProvider,
    classify_error,
)


def _request(prompt: str = "Summarize this", max_tokens: int = 500) -> GenerationRequest:
    return GenerationRequest(prompt_text=prompt, max_tokens=max_tokens)


@pytest.mark.asyncio
async def test_generate_returns_model_output_and_passes_budget():
    seen = {}

    def reply(messages, info: AgentInfo) -> ModelResponse:
        seen["settings"] = info.model_settings
        return ModelResponse(parts=[TextPart("Three key points.")])

    provider = OpenAIChatProvider(api_key="sk-test", llm_model=FunctionModel(reply))
    result = await provider.generate(_request(max_tokens=321))

    assert isinstance(result, GenerationOutcome)
    assert result.content == "Three key points."
    assert result.token_count > 0
    assert seen["settings"]["max_tokens"] == 321
    assert seen["settings"]["temperature"] == 0.7


@pytest.mark.asyncio
async def test_http_errors_become_failures():
    def reply(messages, info):
        raise ModelHTTPError(
            status_code=429,
            model_name="gpt-3.5-turbo",
            body={"error": {"code": "insufficient_quota"}},
        )

    provider = OpenAIChatProvider(api_key="sk-test", llm_model=FunctionModel(reply))
    result = await provider.generate(_request())

    assert result.kind is FailureKind.QUOTA_EXCEEDED
    assert result.provider == "openai"
    assert result.transient is False


@pytest.mark.asyncio
async def test_missing_api_key_reports_invalid_credentials():
    provider = OpenAIChatProvider(api_key="")
    result = await provider.generate(_request())
    assert result.kind is FailureKind.INVALID_CREDENTIALS
    assert result.transient is False


@pytest.mark.parametrize(
    "exc, kind, transient",
    [
        (ModelHTTPError(401, "m", {"error": {"code": "invalid_api_key"}}), FailureKind.INVALID_CREDENTIALS, False),
        (ModelHTTPError(400, "m", {"code": "invalid_api_key"}), FailureKind.INVALID_CREDENTIALS, False),
        (ModelHTTPError(429, "m", {"error": {"code": "insufficient_quota"}}), FailureKind.QUOTA_EXCEEDED, False),
        (ModelHTTPError(429, "m", {"error": {"code": "rate_limit_exceeded"}}), FailureKind.RATE_LIMITED, True),
        (ModelHTTPError(429, "m", None), FailureKind.RATE_LIMITED, True),
        (ModelHTTPError(503, "m", None), FailureKind.SERVICE_ERROR, True),
        (ModelHTTPError(400, "m", {"error": {"code": "context_length_exceeded"}}), FailureKind.SERVICE_ERROR, False),
        (MissingAPIKey("no key"), FailureKind.INVALID_CREDENTIALS, False),
        (httpx.ConnectError("refused"), FailureKind.NETWORK_ERROR, True),
        (TimeoutError(), FailureKind.NETWORK_ERROR, True),
        (RuntimeError("boom"), FailureKind.SERVICE_ERROR, True),
    ],
)
def test_classify_error(exc, kind, transient):
    failure = classify_error(exc)
    assert failure.kind is kind
    assert failure.transient is transient
    assert failure.message


def test_classify_error_finds_network_error_behind_wrapper():
    wrapper = RuntimeError("Connection error.")
    wrapper.__cause__ = httpx.ConnectError("refused")
    failure = classify_error(wrapper)
    assert failure.kind is FailureKind.NETWORK_ERROR
    assert failure.transient is True


@pytest.mark.asyncio
async def test_unreachable_endpoint_reports_network_error():
    client = AsyncOpenAI(
        api_key="sk-test", base_url="http://127.0.0.1:9/v1", max_retries=0
    )
    model = OpenAIChatModel("gpt-3.5-turbo", provider=OpenAIProvider(openai_client=client))
    provider = OpenAIChatProvider(api_key="sk-test", llm_model=model)

    result = await provider.generate(_request())

    assert result.kind is FailureKind.NETWORK_ERROR
    assert result.message == "Network error. Please check your internet connection."
    assert result.transient is True
