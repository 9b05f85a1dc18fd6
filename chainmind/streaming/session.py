"""Streamed answer sessions.

``AnswerStream`` runs one streamed question against a provider: it opens
the HTTP response, feeds the body through the frame decoder and the token
reducer, and yields tokens as they arrive. ``stop()`` closes the response
from anywhere; no callback fires after it.
"""

from __future__ import annotations

import contextlib
import logging
from enum import Enum
from typing import TYPE_CHECKING

import httpx

from chainmind.exceptions import ChainMindError, StreamUnreadableError
from chainmind.streaming.decoder import iter_frames
from chainmind.streaming.reducer import TokenStreamReducer

if TYPE_CHECKING:
    from collections.abc import AsyncGenerator, Callable

    from chainmind.providers.base import AgentProvider

logger = logging.getLogger(__name__)


class SessionState(str, Enum):
    """Lifecycle of one stream session. CLOSED and FAILED are terminal."""

    PENDING = "pending"
    OPEN = "open"
    CLOSED = "closed"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        return self in (SessionState.CLOSED, SessionState.FAILED)


class AnswerStream:
    """One streamed question/answer exchange.

    Usage::

        stream = client.stream_answer("What is SOL doing?")
        async for token in stream:
            print(token, end="")
        print(stream.text)

    Or let it run to completion with ``await stream.run()``. A stream can
    be consumed once.
    """

    def __init__(
        self,
        http: httpx.AsyncClient,
        provider: AgentProvider,
        question: str,
        *,
        on_token: Callable[[str], object] | None = None,
        log: logging.Logger | None = None,
    ) -> None:
        self._http = http
        self._provider = provider
        self._question = question
        self._on_token = on_token
        self._log = log or logger
        self._reducer = TokenStreamReducer.for_shape(
            provider.shape, on_token=self._deliver, log=self._log
        )
        self._pending: list[str] = []
        self._response: httpx.Response | None = None
        self._consumed = False
        self._stopped = False
        self.state = SessionState.PENDING

    @property
    def text(self) -> str:
        """Everything received so far (the final answer once closed)."""
        return self._reducer.text

    @property
    def stopped(self) -> bool:
        return self._stopped

    def _deliver(self, token: str) -> None:
        if self._on_token is not None:
            self._on_token(token)
        self._pending.append(token)

    def __aiter__(self) -> AsyncGenerator[str, None]:
        if self._consumed:
            raise RuntimeError("AnswerStream can only be consumed once")
        self._consumed = True
        return self._iterate()

    async def run(self) -> str:
        """Consume the whole stream and return the accumulated answer."""
        async for _ in self:
            pass
        return self.text

    async def stop(self) -> None:
        """Close the underlying response. Safe to call more than once."""
        if self._stopped:
            return
        self._stopped = True
        if self._response is not None:
            await self._response.aclose()
        if not self.state.is_terminal:
            self.state = SessionState.CLOSED
        self._log.debug("Answer stream stopped")

    async def _iterate(self) -> AsyncGenerator[str, None]:
        if self._stopped:
            return
        request = self._provider.build_request(self._question, stream=True)
        self.state = SessionState.OPEN
        try:
            async with self._http.stream(
                request.method,
                request.url,
                headers=request.headers,
                json=request.json,
            ) as response:
                self._response = response
                if response.is_error:
                    await response.aread()
                    raise self._provider.upstream_error(response.status_code, response.text)

                if not self._provider.wants_event_stream(response, stream=True):
                    # Upstream ignored the stream flag: one complete answer
                    await response.aread()
                    answer = self._provider.extract_answer(self._provider.decode_body(response))
                    if answer and not self._stopped:
                        self._reducer.push(answer)
                    while self._pending:
                        yield self._pending.pop(0)
                else:
                    async with contextlib.aclosing(
                        iter_frames(response.aiter_bytes(), log=self._log)
                    ) as frames:
                        async for frame in frames:
                            if self._stopped:
                                break
                            keep_going = self._reducer.feed(frame)
                            while self._pending:
                                yield self._pending.pop(0)
                            if not keep_going:
                                break
        except ChainMindError:
            self.state = SessionState.FAILED
            raise
        except Exception as exc:
            if self._stopped:
                # stop() closed the response under an in-flight read
                self._log.debug("Read ended after stop: %s", exc)
                return
            self.state = SessionState.FAILED
            if isinstance(exc, httpx.StreamError):
                raise StreamUnreadableError(
                    f"Response body is not readable: {exc}"
                ) from exc
            if isinstance(exc, httpx.TransportError):
                raise self._provider.transport_error(exc) from exc
            raise
        finally:
            self._response = None
            # Terminal even when the consumer breaks out early (GeneratorExit)
            if not self.state.is_terminal:
                self.state = SessionState.CLOSED

        self._log.debug(
            "Answer stream closed (%d chars, sentinel=%s)", len(self.text), self._reducer.done
        )
