"""Tests for typed stream events."""

import pytest
from pydantic import ValidationError

from chainmind.events import LiquidityEvent, TradeEvent, parse_stream_event


class TestParseStreamEvent:
    def test_trade_from_wire_payload(self):
        event = parse_stream_event(
            "trade",
            {
                "symbol": "WIF",
                "side": "sell",
                "tokenAmount": "250",
                "price": "2.41",
                "timestamp": "1714564800",
                "agentComment": "Profit taking",
            },
        )
        assert isinstance(event, TradeEvent)
        assert event.kind == "trade"
        assert event.token_amount == "250"
        assert event.agent_comment == "Profit taking"

    def test_liquidity_from_wire_payload(self):
        event = parse_stream_event(
            "liquidity",
            {
                "pool": "pool1",
                "tokenA": "SOL",
                "tokenB": "USDC",
                "amountA": "1",
                "amountB": "150",
                "timestamp": "t",
            },
        )
        assert isinstance(event, LiquidityEvent)
        assert (event.token_a, event.amount_b) == ("SOL", "150")
        assert event.agent_comment == ""

    def test_numbers_are_kept_as_strings(self):
        event = parse_stream_event(
            "trade",
            {"symbol": "JUP", "side": "buy", "tokenAmount": 12, "price": 0.91, "timestamp": 1714564800},
        )
        assert event.price == "0.91"
        assert event.timestamp == "1714564800"

    def test_unknown_fields_are_kept(self):
        event = parse_stream_event(
            "trade",
            {"symbol": "JUP", "side": "buy", "tokenAmount": "1", "price": "1", "timestamp": "t", "txHash": "abc"},
        )
        assert event.model_extra == {"txHash": "abc"}

    def test_wire_kind_cannot_override_route(self):
        event = parse_stream_event(
            "trade",
            {"kind": "liquidity", "symbol": "JUP", "side": "buy", "tokenAmount": "1", "price": "1", "timestamp": "t"},
        )
        assert isinstance(event, TradeEvent)

    def test_invalid_side(self):
        with pytest.raises(ValidationError):
            parse_stream_event(
                "trade",
                {"symbol": "JUP", "side": "hold", "tokenAmount": "1", "price": "1", "timestamp": "t"},
            )

    def test_missing_fields(self):
        with pytest.raises(ValidationError):
            parse_stream_event("liquidity", {"pool": "p"})

    def test_events_are_immutable(self):
        event = TradeEvent(symbol="X", side="buy", token_amount="1", price="1", timestamp="t")
        with pytest.raises(ValidationError):
            event.price = "2"
