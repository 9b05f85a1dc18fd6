"""First-party ChainMind agent API."""

from __future__ import annotations

from typing import TYPE_CHECKING

from chainmind.providers.base import EVENT_STREAM_CONTENT_TYPE, AgentProvider, ProviderRequest
from chainmind.streaming.reducer import PayloadShape

if TYPE_CHECKING:
    import logging

    import httpx


class DefaultAgentProvider(AgentProvider):
    """``POST {api_url}/ask/{agent}``.

    The endpoint may ignore the stream flag, so a streamed answer is only
    decoded as events when the response says ``text/event-stream``;
    otherwise the body is read as a regular JSON answer.
    """

    name = "default"
    shape = PayloadShape.DEFAULT
    error_prefix = "Failed to get agent response"

    def __init__(self, agent: str, api_url: str, *, log: logging.Logger | None = None) -> None:
        super().__init__(agent, log=log)
        self.api_url = api_url.rstrip("/")

    def build_request(self, question: str, *, stream: bool) -> ProviderRequest:
        return ProviderRequest(
            method="POST",
            url=f"{self.api_url}/ask/{self.agent}",
            headers={"Content-Type": "application/json"},
            json={"question": question, "stream": stream},
        )

    def wants_event_stream(self, response: httpx.Response, *, stream: bool) -> bool:
        content_type = response.headers.get("content-type", "")
        return stream and EVENT_STREAM_CONTENT_TYPE in content_type
