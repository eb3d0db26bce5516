"""
App Commands.

Start, scale, remove and inspect apps on the receptor.
"""

import asyncio
import os
from typing import Optional

import httpx
import typer
from rich.console import Console
from rich.markup import escape

from lattice.app_runner import AppRunner
from lattice.cli.client import close_receptor_client, get_app_runner
from lattice.core.config import get_app_config
from lattice.core.exceptions import ApplicationError
from lattice.core.logging import get_logger, log_with_source

app = typer.Typer(help="App lifecycle commands")
console = Console()
logger = get_logger(__name__)


def parse_environment_variables(pairs: list[str]) -> dict[str, str]:
    """
    Parse ``KEY=VALUE`` pairs, in order.

    A bare ``KEY`` takes its value from the local environment.

    Raises:
        typer.BadParameter: If a pair has an empty key
    """
    env: dict[str, str] = {}
    for pair in pairs:
        key, sep, value = pair.partition("=")
        if not key:
            raise typer.BadParameter(f"Invalid environment variable: {pair!r}", param_hint="'--env'")
        env[key] = value if sep else os.environ.get(key, "")
    return env


def _report_failure(error: Exception) -> None:
    """Print a command failure and exit non-zero."""
    if isinstance(error, ApplicationError):
        console.print(f"[red]Error: {escape(str(error))}[/red]")
    else:
        console.print("[red]Error: Cannot connect to the receptor[/red]")
        console.print(f"[dim]{escape(str(error))}[/dim]")
    raise typer.Exit(1)


@app.command()
def start(
    name: str = typer.Argument(..., help="App name, used as its process guid"),
    docker_image: str = typer.Option(..., "--docker-image", "-i", help="Docker image, e.g. docker:///org/image"),
    start_command: str = typer.Option(..., "--start-command", "-c", help="Executable to run in the container"),
    app_args: Optional[list[str]] = typer.Argument(None, help="Arguments for the start command (after --)"),
    env: Optional[list[str]] = typer.Option(None, "--env", "-e", help="Environment variable, KEY=VALUE"),
    privileged: bool = typer.Option(False, "--privileged", help="Run the start command privileged"),
    memory_mb: int = typer.Option(128, "--memory-mb", "-m", min=0, help="Memory limit in MB"),
    disk_mb: int = typer.Option(1024, "--disk-mb", min=0, help="Disk limit in MB"),
    port: int = typer.Option(8080, "--port", "-p", min=1, max=65535, help="Port the app listens on"),
    wait: bool = typer.Option(True, "--wait/--no-wait", help="Wait until an instance is running"),
    timeout: Optional[float] = typer.Option(None, "--timeout", "-t", min=0, help="Seconds to wait for startup"),
) -> None:
    """
    Start a Docker app with one instance.

    Examples:
        lattice app start my-app -i docker:///org/app -c /app/run -- --verbose
        lattice app start my-app -i docker:///org/app -c /app/run -e MODE=prod --no-wait
    """
    environment_variables = parse_environment_variables(env or [])
    asyncio.run(_start(
        name,
        docker_image,
        start_command,
        app_args or [],
        environment_variables,
        privileged,
        memory_mb,
        disk_mb,
        port,
        wait,
        timeout,
    ))


async def _start(
    name: str,
    docker_image: str,
    start_command: str,
    app_args: list[str],
    environment_variables: dict[str, str],
    privileged: bool,
    memory_mb: int,
    disk_mb: int,
    port: int,
    wait: bool,
    timeout: float | None,
) -> None:
    """Async implementation of start command."""
    runner = get_app_runner()

    try:
        await runner.start_docker_app(
            name,
            docker_image,
            start_command,
            app_args,
            environment_variables,
            privileged,
            memory_mb,
            disk_mb,
            port,
        )
        console.print(f"Starting App: {escape(name)}")

        if not wait:
            return

        if await _wait_until_up(runner, name, timeout):
            console.print(f"[green]App is now running at http://{escape(runner.route(name))}[/green]")
        else:
            console.print(f"[yellow]Timed out waiting for {escape(name)} to start[/yellow]")
            console.print(f"[dim]Check with: lattice app status {escape(name)}[/dim]")
            raise typer.Exit(1)

    except (ApplicationError, httpx.HTTPError) as e:
        log_with_source(logger, "cli", "debug", "Start failed", process_guid=name, error=str(e))
        _report_failure(e)

    finally:
        await close_receptor_client()


async def _wait_until_up(runner: AppRunner, name: str, timeout: float | None) -> bool:
    """Poll until an instance is running or ``timeout`` seconds pass."""
    startup = get_app_config().application.startup
    if timeout is None:
        timeout = startup.timeout

    loop = asyncio.get_running_loop()
    deadline = loop.time() + timeout

    with console.status(f"Waiting for {escape(name)} to start..."):
        while True:
            if await runner.is_app_up(name):
                return True
            if loop.time() >= deadline:
                return False
            await asyncio.sleep(startup.poll_interval)


@app.command()
def scale(
    name: str = typer.Argument(..., help="App name"),
    instances: int = typer.Argument(..., min=0, help="Desired number of instances"),
) -> None:
    """
    Scale a started app to a number of instances.

    Examples:
        lattice app scale my-app 3
    """
    asyncio.run(_scale(name, instances))


async def _scale(name: str, instances: int) -> None:
    """Async implementation of scale command."""
    runner = get_app_runner()

    try:
        await runner.scale_app(name, instances)
        console.print(f"[green]App Scaled Successfully[/green] {escape(name)} → {instances} instances")

    except (ApplicationError, httpx.HTTPError) as e:
        _report_failure(e)

    finally:
        await close_receptor_client()


@app.command()
def remove(
    name: str = typer.Argument(..., help="App name"),
) -> None:
    """
    Remove a started app.

    Examples:
        lattice app remove my-app
    """
    asyncio.run(_remove(name))


async def _remove(name: str) -> None:
    """Async implementation of remove command."""
    runner = get_app_runner()

    try:
        await runner.remove_app(name)
        console.print(f"[green]Successfully Removed {escape(name)}.[/green]")

    except (ApplicationError, httpx.HTTPError) as e:
        _report_failure(e)

    finally:
        await close_receptor_client()


@app.command()
def status(
    name: str = typer.Argument(..., help="App name"),
) -> None:
    """
    Show whether an app is desired and running.

    Examples:
        lattice app status my-app
    """
    asyncio.run(_status(name))


async def _status(name: str) -> None:
    """Async implementation of status command."""
    runner = get_app_runner()

    try:
        if not await runner.app_exists(name):
            console.print(f"[yellow]{escape(name)} is not started[/yellow]")
            raise typer.Exit(1)

        if await runner.is_app_up(name):
            console.print(f"[green]{escape(name)} is running[/green] at http://{escape(runner.route(name))}")
        else:
            console.print(f"[yellow]{escape(name)} is desired but no instance is running yet[/yellow]")

    except (ApplicationError, httpx.HTTPError) as e:
        _report_failure(e)

    finally:
        await close_receptor_client()
