"""Agent answer providers."""

from __future__ import annotations

from typing import TYPE_CHECKING

from chainmind.providers.base import AgentProvider, ProviderRequest
from chainmind.providers.default import DefaultAgentProvider
from chainmind.providers.openrouter import OpenRouterProvider

if TYPE_CHECKING:
    import logging

    from chainmind.config import ChainMindConfig

__all__ = [
    "AgentProvider",
    "DefaultAgentProvider",
    "OpenRouterProvider",
    "ProviderRequest",
    "get_provider",
]


def get_provider(config: ChainMindConfig, *, log: logging.Logger | None = None) -> AgentProvider:
    """Select the provider named by ``config.llm_provider``.

    Raises:
        ConfigurationError: OpenRouter selected without its configuration.
    """
    if config.llm_provider == "openrouter":
        return OpenRouterProvider(config.agent, config.require_openrouter(), log=log)
    return DefaultAgentProvider(config.agent, config.api_url, log=log)
