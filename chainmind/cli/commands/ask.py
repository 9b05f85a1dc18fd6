"""Agent question command."""

import asyncio
from typing import Annotated

import typer

from chainmind.cli.utils import Agent, Provider, build_client, console, err_console
from chainmind.exceptions import ChainMindError


def ask(
    question: Annotated[str, typer.Argument(help="Question for the agent")],
    stream: Annotated[
        bool,
        typer.Option("--stream", "-s", help="Print tokens as they arrive"),
    ] = False,
    agent: Annotated[
        Agent | None,
        typer.Option("--agent", "-a", help="Agent persona (defaults to CHAINMIND_AGENT)"),
    ] = None,
    provider: Annotated[
        Provider | None,
        typer.Option("--provider", "-p", help="Answer provider (defaults to CHAINMIND_LLM_PROVIDER)"),
    ] = None,
) -> None:
    """Ask an agent a question.

    Examples:
        chainmind ask "What is moving on Raydium?"
        chainmind ask --stream --provider openrouter "Summarize SOL today"
    """
    try:
        asyncio.run(_ask(question, stream, agent, provider))
    except ChainMindError as e:
        err_console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1) from e


async def _ask(question: str, stream: bool, agent: Agent | None, provider: Provider | None) -> None:
    async with build_client(agent, provider) as client:
        if not stream:
            answer = await client.ask_agent(question)
            console.print(answer, markup=False, highlight=False)
            return

        def _print_token(token: str) -> None:
            console.print(token, end="", markup=False, highlight=False)

        await client.ask_agent(question, stream=True, on_token=_print_token)
        console.print()
