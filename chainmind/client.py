"""ChainMind client facade.

Combines the socket subscriptions and the agent question providers
behind one object configured once at construction.

Usage::

    async with ChainMindClient(ChainMindConfig(agent="Stella")) as client:
        sub = await client.watch_token(mint, on_data=print)
        answer = await client.ask_agent("Is this token trending?", stream=True, on_token=print)
        await sub.stop()
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

import httpx

from chainmind.callbacks import invoke
from chainmind.config import ChainMindConfig
from chainmind.exceptions import (
    ChainMindError,
    InvalidResponseError,
    TransportError,
    UpstreamHTTPError,
)
from chainmind.providers import get_provider
from chainmind.settings import get_settings
from chainmind.streaming.session import AnswerStream
from chainmind.subscriptions import StreamRoute, Subscription, build_ws_url

if TYPE_CHECKING:
    from collections.abc import Callable

    from chainmind.events import LiquidityEvent, TradeEvent
    from chainmind.settings import Settings

__all__ = ["ChainMindClient"]

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 60.0

# Failures handed to on_error instead of raised when a callback is given
_ROUTABLE_ERRORS = (TransportError, UpstreamHTTPError, InvalidResponseError)


class ChainMindClient:
    """Client for the ChainMind event streams and agent questions.

    Args:
        config: Agent, endpoints and provider selection.
        http_client: Optional shared ``httpx.AsyncClient``; the client
            only closes clients it created itself.
        log: Optional logger receiving all client diagnostics.
        timeout: Request timeout for the owned HTTP client.

    Raises:
        ConfigurationError: OpenRouter selected without its configuration.
    """

    def __init__(
        self,
        config: ChainMindConfig,
        *,
        http_client: httpx.AsyncClient | None = None,
        log: logging.Logger | None = None,
        timeout: float = DEFAULT_TIMEOUT,
    ) -> None:
        self.config = config
        self._log = log or logger
        # Fails fast before any connection is made
        self.provider = get_provider(config, log=self._log)
        self._owns_http = http_client is None
        self._http = http_client or httpx.AsyncClient(timeout=timeout)

    @classmethod
    def from_settings(cls, settings: Settings | None = None, **kwargs: Any) -> ChainMindClient:
        """Build a client from environment settings (``CHAINMIND_*``)."""
        settings = settings or get_settings()
        kwargs.setdefault("timeout", settings.request_timeout)
        return cls(ChainMindConfig.from_settings(settings), **kwargs)

    @property
    def agent(self) -> str:
        return self.config.agent

    # ─── Subscriptions ───────────────────────────────────────────────────────

    async def watch_token(
        self,
        token_address: str,
        *,
        on_data: Callable[[TradeEvent], Any],
        on_error: Callable[[ChainMindError], Any] | None = None,
    ) -> Subscription:
        """Subscribe to trades of one token."""
        return await self._subscribe(StreamRoute.TOKEN_TRADES, token_address, on_data, on_error)

    async def watch_wallet(
        self,
        wallet_address: str,
        *,
        on_data: Callable[[TradeEvent], Any],
        on_error: Callable[[ChainMindError], Any] | None = None,
    ) -> Subscription:
        """Subscribe to trades made by one wallet."""
        return await self._subscribe(StreamRoute.ACCOUNT_TRADES, wallet_address, on_data, on_error)

    async def watch_liquidity(
        self,
        *,
        on_data: Callable[[LiquidityEvent], Any],
        on_error: Callable[[ChainMindError], Any] | None = None,
    ) -> Subscription:
        """Subscribe to the liquidity analysis stream."""
        return await self._subscribe(StreamRoute.LIQUIDITY, None, on_data, on_error)

    get_liquidity_analysis = watch_liquidity

    async def _subscribe(
        self,
        route: StreamRoute,
        value: str | None,
        on_data: Callable[[Any], Any],
        on_error: Callable[[ChainMindError], Any] | None,
    ) -> Subscription:
        url = build_ws_url(self.config.api_url, route, self.agent, value)
        subscription = Subscription(url, route, on_data=on_data, on_error=on_error, log=self._log)
        try:
            await subscription.start()
        except TransportError as exc:
            if on_error is None:
                raise
            self._log.warning("Subscription to %s failed: %s", route.value, exc)
            await invoke(on_error, exc)
        return subscription

    # ─── Agent questions ─────────────────────────────────────────────────────

    def stream_answer(
        self,
        question: str,
        *,
        on_token: Callable[[str], object] | None = None,
    ) -> AnswerStream:
        """Open a streamed answer session; iterate it for tokens."""
        return AnswerStream(self._http, self.provider, question, on_token=on_token, log=self._log)

    async def ask_agent(
        self,
        question: str,
        *,
        stream: bool = False,
        on_token: Callable[[str], object] | None = None,
        on_error: Callable[[ChainMindError], Any] | None = None,
    ) -> str:
        """Ask the agent a question and return its complete answer.

        With ``stream=True`` every token is passed to ``on_token`` as it
        arrives and the concatenation is returned at the end.

        Transport, upstream HTTP and invalid-body failures go to
        ``on_error`` when given (the call then returns ``""``) and are
        raised otherwise. ``StreamUnreadableError`` is always raised.
        """
        try:
            if stream:
                return await self.stream_answer(question, on_token=on_token).run()
            return await self.provider.ask(self._http, question)
        except _ROUTABLE_ERRORS as exc:
            if on_error is None:
                raise
            self._log.warning("Agent question failed: %s", exc)
            await invoke(on_error, exc)
            return ""

    # ─── Lifecycle ───────────────────────────────────────────────────────────

    async def aclose(self) -> None:
        """Close the owned HTTP client. Subscriptions are stopped by their holders."""
        if self._owns_http:
            await self._http.aclose()

    async def __aenter__(self) -> ChainMindClient:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()
