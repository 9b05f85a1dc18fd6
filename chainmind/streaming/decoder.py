"""Incremental frame decoder for server-sent-event style response bodies.

Upstream chunks do not respect line boundaries: one chunk may hold many
lines, or end halfway through one. ``FrameDecoder`` buffers the trailing
fragment between ``feed()`` calls and only emits complete ``data: `` lines.
"""

from __future__ import annotations

import codecs
import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import AsyncGenerator, AsyncIterable

logger = logging.getLogger(__name__)

DATA_PREFIX = "data: "
COMMENT_MARKER = ":"


@dataclass(frozen=True)
class Frame:
    """One protocol-significant line of a streamed response.

    Attributes:
        payload: Text after the ``data: `` prefix, trailing whitespace trimmed.
    """

    payload: str

    @property
    def line(self) -> str:
        return f"{DATA_PREFIX}{self.payload}"


class FrameDecoder:
    """Turns arbitrarily split chunks into complete ``data: `` frames.

    One decoder belongs to one stream session. Feed it chunks in arrival
    order; call ``close()`` when the stream ends so the unterminated
    remainder is dropped instead of leaking into anything else.

    Usage::

        decoder = FrameDecoder()
        for chunk in chunks:
            for frame in decoder.feed(chunk):
                handle(frame.payload)
        decoder.close()
    """

    def __init__(self, *, log: logging.Logger | None = None) -> None:
        self._buf = ""
        self._closed = False
        self._utf8 = codecs.getincrementaldecoder("utf-8")(errors="replace")
        self._log = log or logger

    @property
    def pending(self) -> str:
        """Buffered text that has not been terminated by a newline yet."""
        return self._buf

    @property
    def closed(self) -> bool:
        return self._closed

    def feed(self, chunk: str | bytes) -> list[Frame]:
        """Append a chunk and return the frames it completed."""
        if self._closed:
            raise RuntimeError("FrameDecoder is closed")
        if isinstance(chunk, bytes):
            chunk = self._utf8.decode(chunk)
        self._buf += chunk

        frames: list[Frame] = []
        while True:
            newline = self._buf.find("\n")
            if newline < 0:
                break
            line = self._buf[:newline].rstrip()
            self._buf = self._buf[newline + 1 :]
            frame = self._to_frame(line)
            if frame is not None:
                frames.append(frame)
        return frames

    def close(self) -> None:
        """End the session, discarding any unterminated remainder."""
        if self._closed:
            return
        self._buf += self._utf8.decode(b"", final=True)
        if self._buf:
            self._log.debug("Discarding unterminated stream remainder: %r", self._buf[:200])
        self._buf = ""
        self._closed = True

    @staticmethod
    def _to_frame(line: str) -> Frame | None:
        if not line.startswith(DATA_PREFIX):
            return None
        payload = line[len(DATA_PREFIX) :].strip()
        # data: :... is a keep-alive / processing comment
        if payload.startswith(COMMENT_MARKER):
            return None
        return Frame(payload=payload)


async def iter_frames(
    chunks: AsyncIterable[str | bytes],
    *,
    log: logging.Logger | None = None,
) -> AsyncGenerator[Frame, None]:
    """Lazily yield frames from an async chunk source.

    The decoder is closed when the source is exhausted, when it raises,
    and when the consumer stops iterating early.
    """
    decoder = FrameDecoder(log=log)
    try:
        async for chunk in chunks:
            for frame in decoder.feed(chunk):
                yield frame
    finally:
        decoder.close()
