"""Shared CLI helpers."""

from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING

from rich.console import Console

if TYPE_CHECKING:
    from chainmind.client import ChainMindClient
    from chainmind.events import LiquidityEvent, TradeEvent

console = Console()
err_console = Console(stderr=True)


class Agent(str, Enum):
    STELLA = "Stella"
    MATRIX = "Matrix"
    LUMINA = "Lumina"
    NEBULA = "Nebula"


class Provider(str, Enum):
    DEFAULT = "default"
    OPENROUTER = "openrouter"


def build_client(agent: Agent | None = None, provider: Provider | None = None) -> ChainMindClient:
    """Create a client from settings, with command-line overrides applied."""
    from chainmind.client import ChainMindClient
    from chainmind.settings import get_settings

    overrides: dict[str, str] = {}
    if agent is not None:
        overrides["agent"] = agent.value
    if provider is not None:
        overrides["llm_provider"] = provider.value
    settings = get_settings().model_copy(update=overrides)
    return ChainMindClient.from_settings(settings)


def format_event(event: TradeEvent | LiquidityEvent) -> str:
    """One-line rich markup rendering of a stream event."""
    if event.kind == "trade":
        color = "green" if event.side == "buy" else "red"
        line = (
            f"[dim]{event.timestamp}[/dim] [{color}]{event.side.upper():<4}[/{color}] "
            f"[bold]{event.symbol}[/bold] {event.token_amount} @ {event.price}"
        )
    else:
        line = (
            f"[dim]{event.timestamp}[/dim] [cyan]POOL[/cyan] [bold]{event.pool}[/bold] "
            f"{event.amount_a} {event.token_a} / {event.amount_b} {event.token_b}"
        )
    if event.agent_comment:
        line += f"\n    [italic]{event.agent_comment}[/italic]"
    return line
