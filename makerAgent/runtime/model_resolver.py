"""Model resolver wiring using environment-derived settings.

Every provider is reached through an OpenAI-compatible endpoint, so a single
``ChatOpenAI`` client class covers all of them.
"""

from __future__ import annotations

from typing import Callable, Dict, Optional, TypedDict

from langchain_openai import ChatOpenAI

from makerAgent.config import Settings
from makerAgent.models import AgentRoleConfig, Provider

ModelResolver = Callable[[AgentRoleConfig], ChatOpenAI]

# Ollama ignores the key but the OpenAI client requires one
OLLAMA_PLACEHOLDER_KEY = "ollama"


class ProviderEndpoint(TypedDict):
    api_key: Optional[str]
    base_url: Optional[str]
    requires_key: bool


def resolve_provider_endpoints(settings: Settings) -> Dict[Provider, ProviderEndpoint]:
    """Credentials and base URL per provider."""
    models = settings.models
    return {
        Provider.OPENAI: {
            "api_key": models.openai_api_key,
            "base_url": models.openai_base_url,
            "requires_key": True,
        },
        Provider.DEEPSEEK: {
            "api_key": models.deepseek_api_key,
            "base_url": models.deepseek_base_url,
            "requires_key": True,
        },
        Provider.OLLAMA: {
            "api_key": OLLAMA_PLACEHOLDER_KEY,
            "base_url": models.ollama_base_url,
            "requires_key": False,
        },
    }


def _chat_kwargs(config: AgentRoleConfig, endpoint: ProviderEndpoint, temperature: float) -> Dict[str, object]:
    if endpoint["requires_key"] and not endpoint["api_key"]:
        raise RuntimeError(
            f"Missing API key for provider {config.provider.value} (model {config.model_name}). "
            f"Set {config.provider.value}_API_KEY in .env."
        )
    kwargs: Dict[str, object] = {
        "model": config.model_name,
        "api_key": endpoint["api_key"],
        "temperature": temperature,
    }
    if endpoint["base_url"]:
        kwargs["base_url"] = endpoint["base_url"]
    return kwargs


def build_model_resolver(settings: Settings) -> ModelResolver:
    """Construct a resolver that returns a ChatOpenAI client for a role config.

    Clients are created lazily, one per call.

    Raises (from the resolver):
        RuntimeError: If the provider needs an API key and none is configured

    Example:
        >>> resolver = build_model_resolver(get_settings())
        >>> chat_model = resolver(AgentRoleConfig(provider="OLLAMA", model_name="llama3"))
    """
    endpoints = resolve_provider_endpoints(settings)
    temperature = settings.models.temperature

    def resolver(config: AgentRoleConfig) -> ChatOpenAI:
        return ChatOpenAI(**_chat_kwargs(config, endpoints[config.provider], temperature))

    return resolver


__all__ = ["ModelResolver", "ProviderEndpoint", "resolve_provider_endpoints", "build_model_resolver"]
