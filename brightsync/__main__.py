"""CLI entry point for brightsync."""

import asyncio
import logging
import sys
from typing import Optional

import typer

from brightsync import __version__
from brightsync.cli.generate import generate_app
from brightsync.config import SyncSettings

app = typer.Typer(
    name="brightsync",
    help="Sync an external monitor's brightness to the built-in display",
    add_completion=True,
)

app.add_typer(generate_app, name="generate")


class _BelowLevel(logging.Filter):
    """Pass only records below a level."""

    def __init__(self, level: int):
        super().__init__()
        self.level = level

    def filter(self, record: logging.LogRecord) -> bool:
        return record.levelno < self.level


def setup_logging(level: str) -> None:
    """Configure logging: operational messages to stdout, problems to stderr."""
    stdout_handler = logging.StreamHandler(sys.stdout)
    stdout_handler.addFilter(_BelowLevel(logging.WARNING))
    stderr_handler = logging.StreamHandler(sys.stderr)
    stderr_handler.setLevel(logging.WARNING)

    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[stdout_handler, stderr_handler],
        force=True,
    )


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        typer.echo(f"brightsync {__version__}")
        raise typer.Exit()


def parse_brightness(value: str) -> int:
    """Parse "75" or "75%" into a 0-100 brightness, exiting on bad input."""
    try:
        brightness = int(value.rstrip("%"))
    except ValueError:
        typer.echo(f"Error: Invalid brightness value: {value}", err=True)
        raise typer.Exit(1)

    if not 0 <= brightness <= 100:
        typer.echo("Error: Brightness must be between 0 and 100", err=True)
        raise typer.Exit(1)
    return brightness


@app.callback()
def main(
    version: Optional[bool] = typer.Option(
        None,
        "--version",
        "-V",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit",
    ),
) -> None:
    """Sync an external monitor's brightness to the built-in display."""
    pass


@app.command()
def run(
    display: Optional[str] = typer.Option(
        None,
        "--display",
        "-d",
        help="m1ddc display number to control (skips auto-detection)",
    ),
    match: str = typer.Option(
        "dell",
        "--match",
        "-m",
        help="Case-insensitive name fragment identifying the external display",
    ),
    poll_interval: float = typer.Option(
        1.0,
        "--poll-interval",
        help="Seconds between built-in brightness reads",
    ),
    duration: float = typer.Option(
        1.5,
        "--duration",
        help="Seconds each eased transition takes",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Enable debug logging",
    ),
) -> None:
    """Run the brightness sync agent."""
    from pydantic import ValidationError

    from brightsync.agent import SyncAgent

    try:
        settings = SyncSettings(
            poll_interval=poll_interval,
            transition_duration=duration,
            display_match=match,
            log_level="DEBUG" if verbose else "INFO",
        )
    except ValidationError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(2)

    setup_logging(settings.log_level)

    agent = SyncAgent(settings)

    async def _run() -> None:
        display_id = display or await agent.resolve_display()
        if display_id is None:
            typer.echo("Could not find an external DDC display.", err=True)
            raise typer.Exit(1)

        await agent.run(display_id)

    try:
        asyncio.run(_run())

    except KeyboardInterrupt:
        pass


@app.command("list")
def list_displays(
    match: str = typer.Option(
        "dell",
        "--match",
        "-m",
        help="Case-insensitive name fragment identifying the external display",
    ),
) -> None:
    """List connected displays and mark the one that would be synced."""
    from brightsync.backends.display import (
        DisplayManager,
        parse_display_list,
        resolve_display_id,
    )

    async def _list() -> None:
        manager = DisplayManager(display_match=match)
        listing = await manager.list_displays()
        entries = parse_display_list(listing or "")

        if not entries:
            typer.echo("No displays found.", err=True)
            raise typer.Exit(1)

        selected = resolve_display_id(listing or "", match=match)
        for entry in entries:
            marker = "*" if entry.index == selected else " "
            typer.echo(f"{marker} [{entry.index}]  {entry.name}")

    asyncio.run(_list())


@app.command()
def get(
    display: Optional[str] = typer.Option(
        None,
        "--display",
        "-d",
        help="m1ddc display number (defaults to auto-detection)",
    ),
) -> None:
    """Show built-in and external brightness."""
    from brightsync.backends.brightness import BrightnessController
    from brightsync.backends.display import DisplayManager

    async def _get() -> None:
        controller = BrightnessController()
        display_id = display or await DisplayManager().resolve_external_display()

        internal = await controller.get_internal_brightness()
        typer.echo(f"Built-in: {'unavailable' if internal is None else f'{internal}%'}")

        if display_id is None:
            typer.echo("Could not find an external DDC display.", err=True)
            raise typer.Exit(1)

        external = await controller.get_brightness(display_id)
        typer.echo(
            f"Display {display_id}: "
            f"{'unavailable' if external is None else f'{external}%'}"
        )

    asyncio.run(_get())


@app.command("set")
def set_brightness(
    value: str = typer.Argument(
        ...,
        help="Brightness value (0-100 or 0%-100%)",
    ),
    display: Optional[str] = typer.Option(
        None,
        "--display",
        "-d",
        help="m1ddc display number (defaults to auto-detection)",
    ),
    ease: bool = typer.Option(
        False,
        "--ease/--no-ease",
        help="Ease from the current brightness instead of jumping",
    ),
) -> None:
    """Set external display brightness.

    Examples:
        brightsync set 50
        brightsync set 75% --ease
        brightsync set 30 --display 2
    """
    from brightsync.agent import SyncAgent

    brightness = parse_brightness(value)

    async def _set() -> None:
        agent = SyncAgent()
        display_id = display or await agent.display_manager.resolve_external_display()

        if display_id is None:
            typer.echo("Could not find an external DDC display.", err=True)
            raise typer.Exit(1)

        if ease:
            current = await agent.brightness.get_brightness(display_id)
            if current is not None:
                await agent.ease_brightness(
                    display_id, current, brightness, agent.settings.transition_duration
                )
                typer.echo(f"Display {display_id}: Eased brightness to {brightness}%")
                return

        success = await agent.brightness.set_brightness(display_id, brightness)
        if success:
            typer.echo(f"Display {display_id}: Set brightness to {brightness}%")
        else:
            typer.echo(f"Display {display_id}: Failed to set brightness", err=True)
            raise typer.Exit(1)

    asyncio.run(_set())


@app.command(hidden=True)
def help(ctx: typer.Context) -> None:
    """Show help message."""
    assert ctx.parent is not None
    typer.echo(ctx.parent.get_help())


if __name__ == "__main__":
    app()
