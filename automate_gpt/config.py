from __future__ import annotations

import os
from typing import List, Literal, Optional

import yaml
from pydantic import BaseModel, Field

from .constants import DEFAULT_HISTORY_LIMIT, DEFAULT_MAX_FIELD_CHARS

ProviderName = Literal["openai", "huggingface", "local"]


class OpenAIConfig(BaseModel):
    """Configuration for the primary OpenAI chat provider."""

    api_key: Optional[str] = None
    base_url: Optional[str] = None
    temperature: float = 0.7


class HuggingFaceConfig(BaseModel):
    """Configuration for the Hugging Face inference provider."""

    api_token: Optional[str] = None
    model_url: str = (
        "https://api-inference.huggingface.co/models/microsoft/DialoGPT-large"
    )
    max_new_tokens_cap: int = 500
    timeout_seconds: float = 60.0


class LocalConfig(BaseModel):
    """Configuration for the offline text synthesizer."""

    delay_seconds: float = 0.0


class ProvidersConfig(BaseModel):
    """Provider chain settings, tried in order."""

    chain: List[ProviderName] = Field(default_factory=lambda: ["openai", "huggingface"])
    openai: OpenAIConfig = OpenAIConfig()
    huggingface: HuggingFaceConfig = HuggingFaceConfig()
    local: LocalConfig = LocalConfig()


class StorageConfig(BaseModel):
    url: Optional[str] = None


class HistoryConfig(BaseModel):
    limit: int = Field(default=DEFAULT_HISTORY_LIMIT, ge=1)
    max_field_chars: int = Field(default=DEFAULT_MAX_FIELD_CHARS, ge=100)


class AutomateConfig(BaseModel):
    """Top-level configuration model."""

    providers: ProvidersConfig = ProvidersConfig()
    storage: StorageConfig = StorageConfig()
    history: HistoryConfig = HistoryConfig()


def load_config(path: Optional[str] = None) -> AutomateConfig:
    """Load configuration from YAML file.

    Args:
        path: Optional path to config file. Falls back to AUTOMATE_GPT_CONFIG
            env variable or 'config.yaml' in the current directory.
    """

    config_path = path or os.getenv("AUTOMATE_GPT_CONFIG", "config.yaml")
    if os.path.exists(config_path):
        with open(config_path) as f:
            data = yaml.safe_load(f) or {}
        config = AutomateConfig(**data)
    else:
        config = AutomateConfig()

    env_storage_url = os.getenv("AUTOMATE_GPT_STORAGE_URL")
    if env_storage_url:
        config.storage.url = env_storage_url

    env_chain = os.getenv("AUTOMATE_GPT_PROVIDERS")
    if env_chain:
        names = [name.strip().lower() for name in env_chain.split(",") if name.strip()]
        config.providers = config.providers.model_copy(
            update={"chain": ProvidersConfig(chain=names).chain}
        )

    openai_key = os.getenv("OPENAI_API_KEY")
    if openai_key and not config.providers.openai.api_key:
        config.providers.openai.api_key = openai_key

    hf_token = os.getenv("HF_API_TOKEN")
    if hf_token and not config.providers.huggingface.api_token:
        config.providers.huggingface.api_token = hf_token
    return config
