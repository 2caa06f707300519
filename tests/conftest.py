"""Shared test fixtures."""

from typing import List, Sequence, Union

import pytest

import automate_gpt.persistence as persistence
from automate_gpt.contracts import (
    FailureKind,
    GenerationFailure,
    GenerationOutcome,
    GenerationRequest,
)
from automate_gpt.providers.base import BaseProvider

Scripted = Union[GenerationOutcome, GenerationFailure, FailureKind, str, Exception]


class ScriptedProvider(BaseProvider):
    """Provider replaying a fixed list of results and counting calls.

    Strings become outcomes, ``FailureKind`` values become failures and
    exceptions are raised. The last entry repeats once the script runs out.
    """

    def __init__(self, name: str, script: Sequence[Scripted]) -> None:
        self.name = name
        self.script = list(script)
        self.requests: List[GenerationRequest] = []
        self.closed = False

    @property
    def calls(self) -> int:
        return len(self.requests)

    async def generate(self, request: GenerationRequest):
        self.requests.append(request)
        item = self.script[min(len(self.requests), len(self.script)) - 1]
        if isinstance(item, Exception):
            raise item
        if isinstance(item, FailureKind):
            return GenerationFailure.of(self.name, item)
        if isinstance(item, str):
            return GenerationOutcome(content=item, token_count=len(item.split()))
        return item

    async def aclose(self) -> None:
        self.closed = True


@pytest.fixture
def scripted():
    """Factory for :class:`ScriptedProvider` instances."""

    def _make(name: str, *script: Scripted) -> ScriptedProvider:
        return ScriptedProvider(name, script)

    return _make


@pytest.fixture(autouse=True)
def _isolate_environment(monkeypatch, tmp_path):
    """Keep tests away from real credentials, config files and cached stores."""
    for var in (
        "OPENAI_API_KEY",
        "HF_API_TOKEN",
        "AUTOMATE_GPT_STORAGE_URL",
        "AUTOMATE_GPT_PROVIDERS",
    ):
        monkeypatch.delenv(var, raising=False)
    monkeypatch.setenv("AUTOMATE_GPT_CONFIG", str(tmp_path / "missing-config.yaml"))
    monkeypatch.setattr(persistence, "_store_instance", None)
