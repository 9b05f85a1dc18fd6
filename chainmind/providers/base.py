"""Provider abstraction for the agent question endpoints.

A provider knows how to build the outbound request for one upstream and
how to read an answer out of its responses. Executing the request is
shared: ``ask()`` for the one-shot path, ``AnswerStream`` for streaming.
"""

from __future__ import annotations

import json
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

import httpx

from chainmind.exceptions import InvalidResponseError, TransportError, UpstreamHTTPError

if TYPE_CHECKING:
    from chainmind.streaming.reducer import PayloadShape

logger = logging.getLogger(__name__)

EVENT_STREAM_CONTENT_TYPE = "text/event-stream"


@dataclass(frozen=True)
class ProviderRequest:
    """Everything needed to issue one upstream call."""

    method: str
    url: str
    json: dict[str, Any]
    headers: dict[str, str] = field(default_factory=dict)


class AgentProvider(ABC):
    """Base class for agent answer providers."""

    name: str
    shape: PayloadShape
    error_prefix: str
    # Returned by extract_answer() when the body carries no answer
    missing_answer: str = ""

    def __init__(self, agent: str, *, log: logging.Logger | None = None) -> None:
        self.agent = agent
        self._log = log or logger

    @abstractmethod
    def build_request(self, question: str, *, stream: bool) -> ProviderRequest:
        """Build the outbound request for a question."""

    @abstractmethod
    def wants_event_stream(self, response: httpx.Response, *, stream: bool) -> bool:
        """Whether the response should be consumed as an event stream."""

    def extract_answer(self, body: Any) -> str:
        """Read the complete answer out of a non-streaming body."""
        answer = self.shape.extract_answer(body)
        if not answer:
            self._log.warning("%s response carried no answer field", self.name)
            return self.missing_answer
        return answer

    def upstream_error(self, status_code: int, body: str) -> UpstreamHTTPError:
        return UpstreamHTTPError(
            f"{self.error_prefix}: {body}",
            status_code=status_code,
            body=body,
            provider=self.name,
        )

    def transport_error(self, exc: Exception) -> TransportError:
        return TransportError(f"{self.name} request failed: {exc}", provider=self.name)

    def decode_body(self, response: httpx.Response) -> Any:
        try:
            return response.json()
        except (json.JSONDecodeError, UnicodeDecodeError) as exc:
            raise InvalidResponseError(
                f"Invalid JSON response from {self.name}: {exc}",
                provider=self.name,
            ) from exc

    async def ask(self, http: httpx.AsyncClient, question: str) -> str:
        """Send a question and return the complete, non-streamed answer.

        Raises:
            TransportError: The request never got a response.
            UpstreamHTTPError: Non-success status; the body text is kept.
            InvalidResponseError: Success status but the body isn't JSON.
        """
        request = self.build_request(question, stream=False)
        self._log.debug("Sending %s question to %s", self.name, request.url)
        try:
            response = await http.request(
                request.method,
                request.url,
                headers=request.headers,
                json=request.json,
            )
        except httpx.TransportError as exc:
            raise self.transport_error(exc) from exc

        if response.is_error:
            raise self.upstream_error(response.status_code, response.text)
        return self.extract_answer(self.decode_body(response))
