"""Event stream commands."""

import asyncio
from typing import Annotated

import typer

from chainmind.cli.utils import Agent, build_client, console, err_console, format_event
from chainmind.events import LiquidityEvent, TradeEvent
from chainmind.exceptions import ChainMindError
from chainmind.streaming.session import SessionState

watch_app = typer.Typer(help="Follow live trade and liquidity streams", no_args_is_help=True)

AgentOpt = Annotated[
    Agent | None,
    typer.Option("--agent", "-a", help="Agent persona (defaults to CHAINMIND_AGENT)"),
]


@watch_app.command("token")
def watch_token(
    address: Annotated[str, typer.Argument(help="Token mint address")],
    agent: AgentOpt = None,
) -> None:
    """Follow trades of one token."""
    _run("token", address, agent)


@watch_app.command("wallet")
def watch_wallet(
    address: Annotated[str, typer.Argument(help="Wallet address")],
    agent: AgentOpt = None,
) -> None:
    """Follow trades made by one wallet."""
    _run("wallet", address, agent)


@watch_app.command("liquidity")
def watch_liquidity(agent: AgentOpt = None) -> None:
    """Follow the liquidity analysis stream."""
    _run("liquidity", None, agent)


def _run(kind: str, address: str | None, agent: Agent | None) -> None:
    try:
        asyncio.run(_watch(kind, address, agent))
    except KeyboardInterrupt:
        console.print("\n[dim]Stopped.[/dim]")
    except ChainMindError as e:
        err_console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1) from e


async def _watch(kind: str, address: str | None, agent: Agent | None) -> None:
    def _on_data(event: TradeEvent | LiquidityEvent) -> None:
        console.print(format_event(event))

    def _on_error(error: ChainMindError) -> None:
        err_console.print(f"[yellow]Warning:[/yellow] {error}")

    async with build_client(agent) as client:
        if kind == "token":
            sub = await client.watch_token(address, on_data=_on_data, on_error=_on_error)
        elif kind == "wallet":
            sub = await client.watch_wallet(address, on_data=_on_data, on_error=_on_error)
        else:
            sub = await client.watch_liquidity(on_data=_on_data, on_error=_on_error)

        if sub.state is not SessionState.FAILED:
            console.print(f"[dim]Watching {sub.route.value} (Ctrl+C to stop)[/dim]")
        try:
            await sub.wait_closed()
        finally:
            await sub.stop()

    # Connect failures and dropped sockets were reported through _on_error
    if sub.state is SessionState.FAILED:
        raise typer.Exit(1)
