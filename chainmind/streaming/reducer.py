"""Token stream reducer: frames in, callback tokens and final text out.

The reducer interprets each frame payload as a JSON chunk, pulls the
content delta out of it, hands every non-empty delta to the caller's
``on_token`` callback and keeps the running concatenation.
"""

from __future__ import annotations

import contextlib
import json
import logging
from enum import Enum
from typing import TYPE_CHECKING, Any

from chainmind.streaming.decoder import iter_frames

if TYPE_CHECKING:
    from collections.abc import AsyncIterable, Callable

    from chainmind.streaming.decoder import Frame

logger = logging.getLogger(__name__)

DONE_SENTINEL = "[DONE]"


def _first_choice(payload: Any) -> dict[str, Any]:
    if not isinstance(payload, dict):
        return {}
    choices = payload.get("choices")
    if not isinstance(choices, list) or not choices or not isinstance(choices[0], dict):
        return {}
    return choices[0]


def _string_at(container: Any, key: str) -> str | None:
    if not isinstance(container, dict):
        return None
    value = container.get(key)
    return value if isinstance(value, str) else None


def choice_delta_content(payload: Any) -> str | None:
    """``choices[0].delta.content`` or None."""
    return _string_at(_first_choice(payload).get("delta"), "content")


def choice_message_content(payload: Any) -> str | None:
    """``choices[0].message.content`` or None."""
    return _string_at(_first_choice(payload).get("message"), "content")


def response_field(payload: Any) -> str | None:
    """Top-level ``response`` field or None."""
    return _string_at(payload, "response")


class PayloadShape(str, Enum):
    """Payload layouts of the two supported upstreams."""

    DEFAULT = "default"
    AGGREGATOR = "aggregator"

    def extract_delta(self, payload: Any) -> str | None:
        # Both upstreams stream OpenAI-style chunks
        return choice_delta_content(payload)

    def extract_answer(self, body: Any) -> str | None:
        if self is PayloadShape.AGGREGATOR:
            return choice_message_content(body)
        return response_field(body)


class TokenStreamReducer:
    """Reduce a frame sequence into tokens and an accumulated response.

    ``feed()`` returns False once the caller should stop reading more
    frames. Decode failures are expected when a provider emits a partial
    or non-JSON payload; such frames are skipped and the stream goes on.

    Usage::

        reducer = TokenStreamReducer(PayloadShape.AGGREGATOR.extract_delta, on_token=print)
        for frame in frames:
            if not reducer.feed(frame):
                break
        answer = reducer.text
    """

    def __init__(
        self,
        extract_delta: Callable[[Any], str | None],
        *,
        on_token: Callable[[str], object] | None = None,
        halt_on_done: bool = True,
        log: logging.Logger | None = None,
    ) -> None:
        self._extract_delta = extract_delta
        self._on_token = on_token
        self._halt_on_done = halt_on_done
        self._log = log or logger
        self._parts: list[str] = []
        self.done = False
        self.skipped = 0

    @classmethod
    def for_shape(
        cls,
        shape: PayloadShape,
        *,
        on_token: Callable[[str], object] | None = None,
        log: logging.Logger | None = None,
    ) -> TokenStreamReducer:
        return cls(shape.extract_delta, on_token=on_token, log=log)

    @property
    def text(self) -> str:
        """Concatenation of every token delivered so far."""
        return "".join(self._parts)

    def feed(self, frame: Frame) -> bool:
        """Consume one frame. Returns False when consumption must stop."""
        if frame.payload == DONE_SENTINEL:
            self.done = True
            return not self._halt_on_done

        try:
            payload = json.loads(frame.payload)
        except json.JSONDecodeError:
            self.skipped += 1
            self._log.debug("Skipping undecodable frame: %s", frame.payload[:200])
            return True

        token = self._extract_delta(payload)
        if token:
            self.push(token)
        return True

    def push(self, token: str) -> None:
        """Deliver one token to the callback, then append it to the response."""
        if self._on_token is not None:
            self._on_token(token)
        self._parts.append(token)


async def reduce_stream(
    chunks: AsyncIterable[str | bytes],
    *,
    shape: PayloadShape,
    on_token: Callable[[str], object] | None = None,
    log: logging.Logger | None = None,
) -> str:
    """Decode and reduce a whole chunk stream, returning the final text.

    Stops at the ``[DONE]`` sentinel or when the source is exhausted.
    Errors raised by the chunk source propagate unchanged.
    """
    reducer = TokenStreamReducer.for_shape(shape, on_token=on_token, log=log)
    async with contextlib.aclosing(iter_frames(chunks, log=log)) as frames:
        async for frame in frames:
            if not reducer.feed(frame):
                break
    return reducer.text
