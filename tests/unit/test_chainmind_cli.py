"""Unit tests for the chainmind CLI."""

from unittest.mock import AsyncMock, patch

import httpx
import pytest
from typer.testing import CliRunner

from chainmind.cli.main import app
from chainmind.cli.utils import Agent, Provider, build_client, format_event
from chainmind.client import ChainMindClient
from chainmind.config import ChainMindConfig, OpenRouterConfig
from chainmind.events import LiquidityEvent, TradeEvent
from chainmind.settings import get_settings
from tests.helpers.http import delta_frame, make_http, sse_response


@pytest.fixture
def runner():
    """CLI test runner."""
    return CliRunner()


def _client(handler, provider: str = "openrouter") -> ChainMindClient:
    http, _ = make_http(handler)
    config = ChainMindConfig(
        agent="Stella",
        llm_provider=provider,
        openrouter=OpenRouterConfig(api_key="k"),
    )
    return ChainMindClient(config, http_client=http)


class TestAsk:
    def test_ask_prints_answer(self, runner):
        client = _client(lambda r: httpx.Response(200, json={"choices": [{"message": {"content": "42"}}]}))

        with patch("chainmind.cli.commands.ask.build_client", return_value=client):
            result = runner.invoke(app, ["ask", "meaning?"])

        assert result.exit_code == 0
        assert "42" in result.stdout

    def test_ask_streams_tokens(self, runner):
        client = _client(lambda r: sse_response([delta_frame("gm "), delta_frame("fren"), "data: [DONE]\n"]))

        with patch("chainmind.cli.commands.ask.build_client", return_value=client):
            result = runner.invoke(app, ["ask", "--stream", "hi"])

        assert result.exit_code == 0
        assert "gm fren" in result.stdout

    def test_ask_upstream_error_exits_nonzero(self, runner):
        client = _client(lambda r: httpx.Response(500, text="boom"))

        with patch("chainmind.cli.commands.ask.build_client", return_value=client):
            result = runner.invoke(app, ["ask", "hi"])

        assert result.exit_code == 1


class _DroppingSocket:
    """Socket that fails on the first read."""

    def __init__(self) -> None:
        self.close = AsyncMock()

    def __aiter__(self):
        return self

    async def __anext__(self):
        raise ConnectionResetError("peer reset")


class TestWatch:
    def test_watch_connect_failure_exits_nonzero(self, runner):
        client = _client(lambda r: httpx.Response(200), provider="default")

        with (
            patch("chainmind.cli.commands.watch.build_client", return_value=client),
            patch("chainmind.subscriptions.ws_connect", AsyncMock(side_effect=OSError("refused"))),
        ):
            result = runner.invoke(app, ["watch", "token", "mint1"])

        assert result.exit_code == 1
        assert "refused" in result.output
        assert "Watching" not in result.output

    def test_watch_dropped_connection_exits_nonzero(self, runner):
        client = _client(lambda r: httpx.Response(200), provider="default")

        with (
            patch("chainmind.cli.commands.watch.build_client", return_value=client),
            patch("chainmind.subscriptions.ws_connect", AsyncMock(return_value=_DroppingSocket())),
        ):
            result = runner.invoke(app, ["watch", "liquidity"])

        assert result.exit_code == 1
        assert "peer reset" in result.output

    def test_watch_requires_subcommand(self, runner):
        result = runner.invoke(app, ["watch"])
        assert result.exit_code != 0 or "token" in result.stdout


class TestUtils:
    def test_build_client_applies_overrides(self, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.delenv("CHAINMIND_AGENT", raising=False)
        monkeypatch.setenv("OPENROUTER_API_KEY", "sk-cli")
        get_settings.cache_clear()
        try:
            client = build_client(Agent.MATRIX, Provider.OPENROUTER)
        finally:
            get_settings.cache_clear()

        assert client.agent == "Matrix"
        assert client.config.llm_provider == "openrouter"

    def test_format_trade(self):
        event = TradeEvent(
            symbol="BONK", side="buy", token_amount="10", price="0.1", timestamp="t", agent_comment="nice"
        )
        line = format_event(event)
        assert "BONK" in line
        assert "BUY" in line
        assert "nice" in line

    def test_format_liquidity(self):
        event = LiquidityEvent(
            pool="p1", token_a="SOL", token_b="USDC", amount_a="1", amount_b="2", timestamp="t"
        )
        line = format_event(event)
        assert "p1" in line
        assert "SOL" in line
