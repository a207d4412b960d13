"""
dotclaude CLI - Statusline commands.

`render` reads Claude Code's session JSON from stdin and prints the
statusline. `install` points Claude Code's settings.json at the fast
`dotclaude-statusline` entry point, which renders the same line without
loading the CLI.
"""

from pathlib import Path
from typing import Optional

import typer
from rich.console import Console

from dotclaude.core.setup.installer import get_default_claude_dir
from dotclaude.core.setup.settings import STATUSLINE_COMMAND, install_statusline
from dotclaude.core.statusline.renderer import main as render_main

app = typer.Typer(
    name="statusline",
    help="Render or install the Claude Code statusline",
    no_args_is_help=True,
)

console = Console()


@app.command(name="render")
def render() -> None:
    """
    Render the statusline from session JSON on stdin.

    Always exits 0: failures are printed as a single error line.

    Examples:
        echo '{"workspace": {"current_dir": "."}, "model": {"display_name": "Opus"}}' \\
            | dotclaude statusline render
    """
    render_main()


@app.command(name="install")
def install(
    claude_dir: Optional[Path] = typer.Option(
        None,
        "--claude-dir",
        "-d",
        help="Claude Code configuration directory (default: ~/.claude)",
    ),
    force: bool = typer.Option(
        False,
        "--force",
        "-f",
        help="Replace an existing statusLine configuration",
    ),
) -> None:
    """
    Configure Claude Code to use the dotclaude statusline.

    Writes the statusLine entry into settings.json, preserving every other
    setting. An existing statusLine is kept unless --force is given.

    Examples:
        dotclaude statusline install
        dotclaude statusline install --force
    """
    target = (claude_dir or get_default_claude_dir()).expanduser()

    try:
        written = install_statusline(target, force=force)
    except OSError as e:
        console.print(f"[red]Error: Could not write settings.json: {e}[/red]")
        raise typer.Exit(1)

    settings_file = target / "settings.json"
    if written:
        console.print(f"[green]✓[/green] statusLine now runs [bold]{STATUSLINE_COMMAND}[/bold]")
        console.print(f"  Settings file: {settings_file}")
    else:
        console.print(
            f"[yellow]⚠[/yellow] {settings_file} already has a statusLine. "
            "Use --force to replace it."
        )
