"""Typed events delivered by socket subscriptions.

Each subscription route produces exactly one event kind. Wire payloads
use camelCase; the models expose snake_case and keep unknown fields.
Amounts, prices and addresses are opaque strings.
"""

from __future__ import annotations

from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter
from pydantic.alias_generators import to_camel


class _WireModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="allow",
        frozen=True,
        coerce_numbers_to_str=True,
    )


class TradeEvent(_WireModel):
    """A buy or sell observed on a token or wallet trade stream."""

    kind: Literal["trade"] = "trade"
    symbol: str
    side: Literal["buy", "sell"]
    token_amount: str
    price: str
    timestamp: str
    agent_comment: str = ""


class LiquidityEvent(_WireModel):
    """A pool liquidity change observed on the liquidity stream."""

    kind: Literal["liquidity"] = "liquidity"
    pool: str
    token_a: str
    token_b: str
    amount_a: str
    amount_b: str
    timestamp: str
    agent_comment: str = ""


StreamEvent = Annotated[TradeEvent | LiquidityEvent, Field(discriminator="kind")]

_stream_event_adapter: TypeAdapter[TradeEvent | LiquidityEvent] = TypeAdapter(StreamEvent)


def parse_stream_event(kind: str, raw: dict) -> TradeEvent | LiquidityEvent:
    """Validate a decoded socket message as the given event kind.

    Raises:
        pydantic.ValidationError: The message doesn't carry the fields of ``kind``.
    """
    return _stream_event_adapter.validate_python({**raw, "kind": kind})
