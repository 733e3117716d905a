from __future__ import annotations

import os
from dataclasses import dataclass

from pydantic_ai.models.openai import OpenAIChatModel
from pydantic_ai.providers.openai import OpenAIProvider
from pydantic_ai.settings import ModelSettings

DEFAULT_BASE_URL = "http://localhost:11434/v1"
DEFAULT_API_KEY = "ollama"

DEFAULT_FAST_MODEL = "mistral-nemo"
DEFAULT_PRO_MODEL = "mistral-nemo"
DEFAULT_IMAGE_MODEL = "gpt-image-1"

LLM_TIMEOUT_SECONDS = 300.0
LLM_OUTPUT_RETRIES = 2


@dataclass(frozen=True)
class OpenAISettings:
    """Resolved OpenAI-compatible endpoint configuration."""

    base_url: str
    api_key: str
    provider: str = "openai"

    @classmethod
    def from_env(cls) -> OpenAISettings:
        """Read OpenAI-compatible configuration from the environment.

        ``TUBEKIT_LLM_PROVIDER`` picks between ``openai`` and ``ollama``; without it the
        presence of any ``OLLAMA_*`` variable selects Ollama.
        """
        provider = os.environ.get("TUBEKIT_LLM_PROVIDER")

        openai_base = os.environ.get("OPENAI_API_BASE") or os.environ.get("OPENAI_BASE_URL")
        openai_key = os.environ.get("OPENAI_API_KEY")

        ollama_base = os.environ.get("OLLAMA_BASE_URL")
        ollama_key = os.environ.get("OLLAMA_API_KEY")

        if provider:
            provider = provider.lower()
        elif ollama_base or ollama_key:
            provider = "ollama"
        else:
            provider = "openai"

        if provider == "ollama":
            base_url = ollama_base or openai_base or DEFAULT_BASE_URL
            api_key = ollama_key or openai_key or DEFAULT_API_KEY
        else:
            base_url = openai_base or DEFAULT_BASE_URL
            api_key = openai_key or DEFAULT_API_KEY

        return cls(base_url=base_url, api_key=api_key, provider=provider)

    def make_provider(self) -> OpenAIProvider:
        return OpenAIProvider(base_url=self.base_url, api_key=self.api_key)


def make_model(
    model_name: str,
    *,
    model_settings: ModelSettings,
    settings: OpenAISettings | None = None,
) -> OpenAIChatModel:
    """Return an OpenAI-compatible chat model bound to ``settings`` (or the environment)."""
    resolved = settings or OpenAISettings.from_env()
    return OpenAIChatModel(model_name, provider=resolved.make_provider(), settings=model_settings)


def apply_optional_settings(
    model_settings: ModelSettings,
    *,
    top_p: float | None = None,
    seed: int | None = None,
) -> ModelSettings:
    if top_p is not None:
        model_settings["top_p"] = top_p
    if seed is not None:
        model_settings["seed"] = seed
    return model_settings


__all__ = [
    "DEFAULT_API_KEY",
    "DEFAULT_BASE_URL",
    "DEFAULT_FAST_MODEL",
    "DEFAULT_IMAGE_MODEL",
    "DEFAULT_PRO_MODEL",
    "LLM_OUTPUT_RETRIES",
    "LLM_TIMEOUT_SECONDS",
    "OpenAISettings",
    "apply_optional_settings",
    "make_model",
]
