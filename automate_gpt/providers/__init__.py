"""Provider factory and initialization."""

from __future__ import annotations

from typing import List, Optional

from ..config import AutomateConfig, load_config
from .base import BaseProvider, ProviderResult, estimate_tokens
from .huggingface import HuggingFaceProvider
from .local import LocalTextProvider


def get_provider(name: str, config: Optional[AutomateConfig] = None) -> BaseProvider:
    """Factory function to build a single provider by name."""

    config = config or load_config()
    name = name.lower()

    if name == "openai":
        from .openai import OpenAIChatProvider

        openai_conf = config.providers.openai
        return OpenAIChatProvider(
            api_key=openai_conf.api_key,
            base_url=openai_conf.base_url,
            temperature=openai_conf.temperature,
        )
    elif name == "huggingface":
        hf_conf = config.providers.huggingface
        return HuggingFaceProvider(
            api_token=hf_conf.api_token,
            model_url=hf_conf.model_url,
            max_new_tokens_cap=hf_conf.max_new_tokens_cap,
            timeout_seconds=hf_conf.timeout_seconds,
        )
    elif name == "local":
        return LocalTextProvider(delay_seconds=config.providers.local.delay_seconds)
    else:
        raise ValueError(f"Unsupported provider: {name}")


def build_provider_chain(config: Optional[AutomateConfig] = None) -> List[BaseProvider]:
    """Build the ordered fallback chain declared in configuration."""

    config = config or load_config()
    return [get_provider(name, config) for name in config.providers.chain]


__all__ = [
    "BaseProvider",
    "ProviderResult",
    "HuggingFaceProvider",
    "LocalTextProvider",
    "estimate_tokens",
    "get_provider",
    "build_provider_chain",
]
