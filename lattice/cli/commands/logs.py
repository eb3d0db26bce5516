"""
Log Commands.

Stream an app's logs to the terminal.
"""

import asyncio
from typing import Optional

import typer
from rich.console import Console
from rich.markup import escape

from lattice.cli.client import get_log_reader
from lattice.core.logging import get_logger, log_with_source
from lattice.logs.tailer import LogsTailer

app = typer.Typer(help="Log streaming commands")
console = Console()
logger = get_logger(__name__)


def _is_valid_app_name(app_name: str | None) -> bool:
    return bool(app_name) and not any(c.isspace() for c in app_name)


@app.command()
def tail(
    app_name: Optional[str] = typer.Argument(None, help="App whose logs to stream"),
) -> None:
    """
    Stream an app's logs until interrupted.

    Runs until the log stream is closed or Ctrl-C is pressed.

    Examples:
        lattice logs tail my-app
    """
    if not _is_valid_app_name(app_name):
        console.print("Incorrect Usage: an app name is required")
        console.print("[dim]Usage: lattice logs tail APP_NAME[/dim]")
        return

    try:
        asyncio.run(_tail(app_name))
    except KeyboardInterrupt:
        log_with_source(logger, "cli", "debug", "Log tail interrupted", app_guid=app_name)


async def _tail(app_name: str) -> None:
    """Async implementation of tail command."""
    tailer = LogsTailer(get_log_reader(), console)

    tailing = tailer.start(app_name)
    console.print(f"[dim]Tailing logs for {escape(app_name)}. Press Ctrl-C to stop.[/dim]")

    await tailing
