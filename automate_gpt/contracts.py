"""Core data contracts for the automate-gpt workflow pipeline."""

from __future__ import annotations

import uuid
from datetime import datetime, timezone
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .constants import (
    DEFAULT_MAX_TOKENS,
    DEFAULT_MODEL,
    INPUT_MARKER,
    MAX_MAX_TOKENS,
    MIN_MAX_TOKENS,
)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class WorkflowTemplate(BaseModel):
    """A named prompt pattern with a single input substitution point."""

    model_config = ConfigDict(frozen=True)

    id: str
    title: str
    emoji: str = ""
    description: str
    placeholder_text: str
    prompt_pattern: str

    @field_validator("id")
    @classmethod
    def _ensure_id(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("template id must be a non-empty string")
        return v

    @field_validator("prompt_pattern")
    @classmethod
    def _ensure_single_marker(cls, v: str) -> str:
        if v.count(INPUT_MARKER) != 1:
            raise ValueError(
                f"prompt_pattern must contain exactly one {INPUT_MARKER} marker"
            )
        return v


class GenerationRequest(BaseModel):
    """Prompt and token budget handed to a provider for one attempt."""

    prompt_text: str
    max_tokens: int = Field(gt=0)
    model: Optional[str] = None


class GenerationOutcome(BaseModel):
    """Successful provider response."""

    content: str
    token_count: int = Field(default=0, ge=0)


class FailureKind(str, Enum):
    INVALID_CREDENTIALS = "InvalidCredentials"
    QUOTA_EXCEEDED = "QuotaExceeded"
    RATE_LIMITED = "RateLimited"
    SERVICE_ERROR = "ServiceError"
    NETWORK_ERROR = "NetworkError"


FAILURE_MESSAGES = {
    FailureKind.INVALID_CREDENTIALS: "Invalid API key. Please check your API key in settings.",
    FailureKind.QUOTA_EXCEEDED: "API quota exceeded. Please check your account billing.",
    FailureKind.RATE_LIMITED: "Rate limit exceeded. Please try again in a moment.",
    FailureKind.SERVICE_ERROR: "The AI service returned an error. Please try again later.",
    FailureKind.NETWORK_ERROR: "Network error. Please check your internet connection.",
}


class GenerationFailure(BaseModel):
    """Categorized failure of a single provider attempt."""

    provider: str
    kind: FailureKind
    message: str
    transient: bool = False

    @classmethod
    def of(
        cls, provider: str, kind: FailureKind, transient: bool | None = None
    ) -> "GenerationFailure":
        """Build a failure carrying the standard message for ``kind``."""
        if transient is None:
            transient = kind in (
                FailureKind.RATE_LIMITED,
                FailureKind.SERVICE_ERROR,
                FailureKind.NETWORK_ERROR,
            )
        return cls(
            provider=provider,
            kind=kind,
            message=FAILURE_MESSAGES[kind],
            transient=transient,
        )


class WorkflowResult(BaseModel):
    """History record for one successful generation."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    workflow_id: str
    input: str
    output: str
    timestamp: datetime = Field(default_factory=_utcnow)
    tokens: Optional[int] = None


class AppSettings(BaseModel):
    """User adjustable generation settings."""

    model: str = DEFAULT_MODEL
    max_tokens: int = Field(
        default=DEFAULT_MAX_TOKENS, ge=MIN_MAX_TOKENS, le=MAX_MAX_TOKENS
    )


class UserAccount(BaseModel):
    """Local credential record owned by the account store."""

    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    name: str
    email: str
    password_hash: str
    created_at: datetime = Field(default_factory=_utcnow)
    last_signed_in_at: Optional[datetime] = None


class HistoryExport(BaseModel):
    """Serializable history snapshot."""

    exported_at: datetime = Field(default_factory=_utcnow)
    user_id: Optional[str] = None
    count: int
    results: List[WorkflowResult] = Field(default_factory=list)

    def to_json(self) -> str:
        """Serialize the export document to JSON."""
        return self.model_dump_json(indent=2)

    @classmethod
    def from_json(cls, data: str) -> "HistoryExport":
        """Deserialize an export document from JSON."""
        return cls.model_validate_json(data)
