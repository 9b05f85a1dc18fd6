"""ChainMind client: blockchain event streams and agent questions."""

import logging

from chainmind.client import ChainMindClient
from chainmind.config import ChainMindConfig, OpenRouterConfig
from chainmind.events import LiquidityEvent, TradeEvent
from chainmind.exceptions import (
    ChainMindError,
    ConfigurationError,
    InvalidResponseError,
    StreamDecodeError,
    StreamUnreadableError,
    TransportError,
    UpstreamHTTPError,
)
from chainmind.streaming import AnswerStream, SessionState
from chainmind.subscriptions import StreamRoute, Subscription

# Library logging stays silent unless the application configures handlers
logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    "AnswerStream",
    "ChainMindClient",
    "ChainMindConfig",
    "ChainMindError",
    "ConfigurationError",
    "InvalidResponseError",
    "LiquidityEvent",
    "OpenRouterConfig",
    "SessionState",
    "StreamDecodeError",
    "StreamRoute",
    "StreamUnreadableError",
    "Subscription",
    "TradeEvent",
    "TransportError",
    "UpstreamHTTPError",
]
