"""WebSocket subscriptions to the ChainMind event streams.

Each ``watch_*`` call opens its own socket and returns a ``Subscription``
handle; whoever holds the handle owns cancellation. Subscriptions are
single-shot: when the socket drops, the handle ends in ``FAILED`` and the
caller decides whether to subscribe again.
"""

from __future__ import annotations

import asyncio
import contextlib
import json
import logging
from enum import Enum
from typing import TYPE_CHECKING, Any
from urllib.parse import urlencode, urlsplit, urlunsplit

from websockets.asyncio.client import connect as ws_connect

from chainmind.callbacks import invoke
from chainmind.events import parse_stream_event
from chainmind.exceptions import ConfigurationError, StreamDecodeError, TransportError
from chainmind.streaming.session import SessionState

if TYPE_CHECKING:
    from collections.abc import Callable

    from chainmind.events import LiquidityEvent, TradeEvent
    from chainmind.exceptions import ChainMindError

__all__ = ["StreamRoute", "Subscription", "build_ws_url"]

logger = logging.getLogger(__name__)

DEFAULT_OPEN_TIMEOUT = 10.0

_SOCKET_SCHEMES = {"http": "ws", "https": "wss", "ws": "ws", "wss": "wss"}


class StreamRoute(str, Enum):
    """Socket routes exposed by the ChainMind API."""

    TOKEN_TRADES = "token-trades-stream"
    ACCOUNT_TRADES = "account-trades-stream"
    LIQUIDITY = "raydium-liquidity-stream"

    @property
    def query_param(self) -> str | None:
        return {
            StreamRoute.TOKEN_TRADES: "tokens",
            StreamRoute.ACCOUNT_TRADES: "accounts",
        }.get(self)

    @property
    def event_kind(self) -> str:
        return "liquidity" if self is StreamRoute.LIQUIDITY else "trade"


def build_ws_url(api_url: str, route: StreamRoute, agent: str, value: str | None = None) -> str:
    """Derive the socket URL for a route from the HTTP base URL.

    ``https://api.example/`` + token route ->
    ``wss://api.example/token-trades-stream/<agent>?tokens=<value>``
    """
    parts = urlsplit(api_url)
    scheme = _SOCKET_SCHEMES.get(parts.scheme)
    if scheme is None:
        raise ConfigurationError(f"Unsupported API URL scheme '{parts.scheme}' in {api_url!r}")
    base = urlunsplit((scheme, parts.netloc, parts.path.rstrip("/"), "", ""))
    url = f"{base}/{route.value}/{agent}"
    if route.query_param and value is not None:
        url = f"{url}?{urlencode({route.query_param: value})}"
    return url


class Subscription:
    """One live socket subscription.

    Usage::

        sub = await client.watch_token(address, on_data=handle)
        ...
        await sub.stop()

    or, to scope it::

        async with await client.watch_wallet(address, on_data=handle) as sub:
            await sub.wait_closed()
    """

    def __init__(
        self,
        url: str,
        route: StreamRoute,
        *,
        on_data: Callable[[TradeEvent | LiquidityEvent], Any],
        on_error: Callable[[ChainMindError], Any] | None = None,
        log: logging.Logger | None = None,
        open_timeout: float = DEFAULT_OPEN_TIMEOUT,
    ) -> None:
        self.url = url
        self.route = route
        self._on_data = on_data
        self._on_error = on_error
        self._log = log or logger
        self._open_timeout = open_timeout
        self._ws: Any | None = None
        self._task: asyncio.Task[None] | None = None
        self._stopped = False
        self.state = SessionState.PENDING

    @property
    def is_open(self) -> bool:
        return self.state is SessionState.OPEN

    async def start(self) -> Subscription:
        """Open the socket and start dispatching events.

        Raises:
            TransportError: The socket could not be opened.
        """
        if self.state is not SessionState.PENDING:
            raise RuntimeError(f"Subscription already {self.state.value}")
        try:
            self._ws = await ws_connect(self.url, open_timeout=self._open_timeout)
        except Exception as exc:
            self.state = SessionState.FAILED
            raise TransportError(f"Failed to open {self.route.value} subscription: {exc}") from exc

        self.state = SessionState.OPEN
        self._log.info("Subscribed to %s", self.route.value)
        self._task = asyncio.create_task(self._read_loop())
        return self

    async def _read_loop(self) -> None:
        """Dispatch messages until the socket closes or stop() is called."""
        try:
            async for raw_msg in self._ws:
                if self._stopped:
                    break
                await self._dispatch(raw_msg)
        except asyncio.CancelledError:
            raise
        except Exception as exc:
            if self._stopped:
                return
            self.state = SessionState.FAILED
            self._log.warning("Subscription %s dropped: %s", self.route.value, exc)
            await self._report(
                TransportError(f"Subscription {self.route.value} dropped: {exc}")
            )
            return

        if not self.state.is_terminal:
            self.state = SessionState.CLOSED
            self._log.info("Subscription %s closed", self.route.value)

    async def _dispatch(self, raw_msg: str | bytes) -> None:
        if isinstance(raw_msg, bytes):
            raw_msg = raw_msg.decode("utf-8", errors="replace")
        try:
            data = json.loads(raw_msg)
            if not isinstance(data, dict):
                raise ValueError(f"expected a JSON object, got {type(data).__name__}")
            event = parse_stream_event(self.route.event_kind, data)
        except ValueError as exc:
            self._log.warning("Failed to decode %s message: %s", self.route.value, raw_msg[:200])
            await self._report(
                StreamDecodeError(f"Undecodable {self.route.value} message: {exc}", raw=raw_msg)
            )
            return

        self._log.debug("%s event: %s", self.route.value, event)
        if self._stopped:
            return
        try:
            await invoke(self._on_data, event)
        except Exception:
            self._log.exception("Error processing %s event", self.route.value)

    async def _report(self, error: ChainMindError) -> None:
        if self._stopped:
            return
        try:
            await invoke(self._on_error, error)
        except Exception:
            self._log.exception("Error callback failed for %s", self.route.value)

    async def stop(self) -> None:
        """Close the socket and stop dispatching. Safe to call more than once."""
        if self._stopped:
            return
        self._stopped = True
        if self._ws is not None:
            with contextlib.suppress(Exception):
                await self._ws.close()
        task = self._task
        if task is not None and not task.done() and task is not asyncio.current_task():
            task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await task
        if not self.state.is_terminal:
            self.state = SessionState.CLOSED
        self._log.info("Subscription %s stopped", self.route.value)

    async def wait_closed(self) -> None:
        """Wait until the subscription reaches a terminal state."""
        if self._task is not None:
            with contextlib.suppress(asyncio.CancelledError):
                await self._task

    async def __aenter__(self) -> Subscription:
        if self.state is SessionState.PENDING:
            await self.start()
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.stop()
