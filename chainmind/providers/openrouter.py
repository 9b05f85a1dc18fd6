"""OpenRouter provider - agent persona answered by an aggregated model."""

from __future__ import annotations

from typing import TYPE_CHECKING

from chainmind.providers.base import AgentProvider, ProviderRequest
from chainmind.streaming.reducer import PayloadShape

if TYPE_CHECKING:
    import logging

    import httpx

    from chainmind.config import OpenRouterConfig

REFERER = "https://chainmind.network"


def agent_persona(agent: str) -> str:
    """System prompt that makes the routed model speak as the agent."""
    return f"You are {agent}, an AI agent specialized in Solana blockchain analysis."


class OpenRouterProvider(AgentProvider):
    """Provider for the OpenRouter chat completions API (OpenAI-compatible)."""

    name = "openrouter"
    shape = PayloadShape.AGGREGATOR
    error_prefix = "OpenRouter API error"
    missing_answer = "No response from OpenRouter"

    def __init__(
        self,
        agent: str,
        config: OpenRouterConfig,
        *,
        log: logging.Logger | None = None,
    ) -> None:
        super().__init__(agent, log=log)
        self.api_key = config.api_key
        self.model = config.model
        self.base_url = config.base_url.rstrip("/")

    def build_request(self, question: str, *, stream: bool) -> ProviderRequest:
        return ProviderRequest(
            method="POST",
            url=f"{self.base_url}/chat/completions",
            headers={
                "Content-Type": "application/json",
                "Authorization": f"Bearer {self.api_key}",
                # Optional, used by OpenRouter for app rankings
                "HTTP-Referer": REFERER,
                "X-Title": f"ChainMind {self.agent}",
            },
            json={
                "model": self.model,
                "messages": [
                    {"role": "system", "content": agent_persona(self.agent)},
                    {"role": "user", "content": question},
                ],
                "stream": stream,
            },
        )

    def wants_event_stream(self, response: httpx.Response, *, stream: bool) -> bool:
        return stream
