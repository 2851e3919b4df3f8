"""CLI commands for generating service files."""

import sys
from pathlib import Path
from typing import Optional

import typer

generate_app = typer.Typer(help="Generate service files")

LAUNCHD_LABEL = "com.brightsync.agent"


def _launchd_plist(python_path: str, extra_args: list[str]) -> str:
    """Render a launchd user agent plist that runs the sync agent."""
    args = [python_path, "-m", "brightsync", "run", *extra_args]
    program_args = "\n".join(f"        <string>{arg}</string>" for arg in args)
    log_dir = Path.home() / "Library" / "Logs"

    return f"""\
<?xml version="1.0" encoding="UTF-8"?>
<!DOCTYPE plist PUBLIC "-//Apple//DTD PLIST 1.0//EN" "http://www.apple.com/DTDs/PropertyList-1.0.dtd">
<plist version="1.0">
<dict>
    <key>Label</key>
    <string>{LAUNCHD_LABEL}</string>
    <key>ProgramArguments</key>
    <array>
{program_args}
    </array>
    <key>RunAtLoad</key>
    <true/>
    <key>KeepAlive</key>
    <dict>
        <key>SuccessfulExit</key>
        <false/>
    </dict>
    <key>ThrottleInterval</key>
    <integer>10</integer>
    <key>StandardOutPath</key>
    <string>{log_dir / "brightsync.log"}</string>
    <key>StandardErrorPath</key>
    <string>{log_dir / "brightsync-error.log"}</string>
</dict>
</plist>
"""


@generate_app.command("launchd")
def generate_launchd(
    output: Optional[Path] = typer.Option(
        None,
        "--output",
        "-o",
        help="Write to file instead of stdout",
    ),
    display: Optional[str] = typer.Option(
        None,
        "--display",
        "-d",
        help="Pin the agent to this m1ddc display number",
    ),
) -> None:
    """Generate a launchd user agent plist.

    Example usage:
        brightsync generate launchd -o ~/Library/LaunchAgents/com.brightsync.agent.plist
        launchctl load ~/Library/LaunchAgents/com.brightsync.agent.plist
    """
    extra_args = ["--display", display] if display else []
    plist = _launchd_plist(sys.executable, extra_args)

    if output:
        output.parent.mkdir(parents=True, exist_ok=True)
        output.write_text(plist)
        typer.echo(f"Written to {output}")
        typer.echo()
        typer.echo("To install:")
        typer.echo(f"  launchctl load {output}")
    else:
        typer.echo(plist)
        typer.echo(f"<!-- Save to: ~/Library/LaunchAgents/{LAUNCHD_LABEL}.plist -->")
        typer.echo("<!-- Then run: -->")
        typer.echo(f"<!--   launchctl load ~/Library/LaunchAgents/{LAUNCHD_LABEL}.plist -->")
