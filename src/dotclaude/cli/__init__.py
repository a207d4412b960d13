"""
dotclaude CLI - Main application entry point.

This module sets up the Typer CLI application with all subcommands.
"""

import logging
import sys

import typer
from rich.console import Console

from dotclaude import __version__
from dotclaude.cli import setup, statusline
from dotclaude.core.config.env import load_layered_env

app = typer.Typer(
    name="dotclaude",
    help="Bootstrap a Claude Code environment: settings, hooks, shortcuts and statusline",
    no_args_is_help=True,
    add_completion=True,
    context_settings={"help_option_names": ["--help", "-h"]},
)

console = Console()


def setup_logging(debug: bool = False) -> None:
    """
    Configure logging for dotclaude commands.

    Logs always go to stderr; stdout is reserved for command output and
    the statusline.
    """
    level = logging.DEBUG if debug else logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        stream=sys.stderr,
    )


@app.callback()
def main(
    ctx: typer.Context,
    debug: bool = typer.Option(
        False,
        "--debug",
        help="Enable debug output with detailed logging",
    ),
) -> None:
    """
    dotclaude - Claude Code environment bootstrapper.

    Quick Start:
        dotclaude setup                    # Install default features
        dotclaude statusline install       # Only configure the statusline
    """
    setup_logging(debug)

    # DOTCLAUDE_* overrides may live in .env files
    load_layered_env()

    ctx.obj = {"debug": debug}


app.command(name="setup")(setup.setup)
app.add_typer(statusline.app, name="statusline")


@app.command()
def version() -> None:
    """Show dotclaude version and exit."""
    console.print(f"dotclaude version {__version__}")
    raise typer.Exit(0)


def cli_main() -> None:
    """Main CLI entry point."""
    app()


__all__ = ["app", "cli_main"]
