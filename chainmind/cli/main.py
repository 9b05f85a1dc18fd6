"""CLI entry point.

Provides the main CLI application with commands for:
- ask: Ask an agent a question, optionally streaming the answer
- watch: Follow token, wallet or liquidity event streams
"""

from typing import Annotated

import typer

from chainmind.cli.commands.ask import ask
from chainmind.cli.commands.watch import watch_app
from chainmind.logging_config import configure_logging

app = typer.Typer(
    name="chainmind",
    help="ChainMind agents and real-time Solana event streams",
    add_completion=False,
    no_args_is_help=True,
)

app.command()(ask)
app.add_typer(watch_app, name="watch")


@app.callback()
def main(
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Enable debug logging"),
    ] = False,
) -> None:
    """ChainMind command-line client."""
    configure_logging("DEBUG" if verbose else None)


# Entry point for: python -m chainmind.cli.main
if __name__ == "__main__":
    app()
