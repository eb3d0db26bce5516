"""
lattice CLI.

Manage long-running processes on a Diego receptor and stream their logs.
Built with Typer for type-safe commands and Rich for formatted output.

Usage:
    lattice --help                                        # Show help

    # App lifecycle
    lattice app start my-app -i docker:///org/app -c /app/run -- arg1 arg2
    lattice app scale my-app 3
    lattice app remove my-app
    lattice app status my-app

    # Logs
    lattice logs tail my-app

Options:
    --verbose, -v     Enable verbose output
    --debug, -d       Enable debug mode (detailed logging)
    --help            Show help message
"""

import typer
from rich.console import Console
from rich.markup import escape

from lattice.cli.commands import apps_app, logs_app
from lattice.core.config import find_project_root
from lattice.core.logging import setup_logging

app = typer.Typer(
    name="lattice",
    help="lattice CLI - Start, scale and remove apps, and stream their logs.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)

console = Console()

# Register command groups
app.add_typer(apps_app, name="app")
app.add_typer(logs_app, name="logs")


def _validate_project_root() -> None:
    """Validate that configuration can be found."""
    try:
        find_project_root()
    except RuntimeError as e:
        console.print(f"[red]Error: {escape(str(e))}[/red]")
        console.print("[dim]Run from the project directory or set LATTICE_PROJECT_ROOT.[/dim]")
        raise typer.Exit(1)


@app.callback()
def main(
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Enable verbose output (INFO level logging)",
    ),
    debug: bool = typer.Option(
        False,
        "--debug",
        "-d",
        help="Enable debug mode (DEBUG level logging)",
    ),
) -> None:
    """
    lattice CLI.

    Start, scale and remove Docker apps, and tail their logs.
    """
    _validate_project_root()

    # Configure logging based on flags
    if debug:
        setup_logging(level="DEBUG", format_type="console")
        console.print("[dim]Debug mode enabled[/dim]")
    elif verbose:
        setup_logging(level="INFO", format_type="console")
    else:
        setup_logging()


if __name__ == "__main__":
    app()
