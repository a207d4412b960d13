"""
dotclaude CLI - Setup command.

Installs configuration assets, hooks, shell shortcuts and the statusline
into the Claude Code configuration directory.
"""

from pathlib import Path
from typing import Optional

import typer
from rich.console import Console

from dotclaude.core.setup.installer import run_setup
from dotclaude.core.setup.models import SetupOptions, SetupResult

console = Console()


def print_result(result: SetupResult) -> None:
    """Print installed steps and issues for a setup run."""
    if result.source:
        console.print(f"  Source: {result.source}")
    for step in result.installed:
        console.print(f"  [green]✓[/green] {step}")

    for issue in result.issues:
        if issue.severity == "error":
            console.print(f"[red]Error:[/red] {issue.message}")
        elif issue.severity == "warning":
            console.print(f"[yellow]Warning:[/yellow] {issue.message}")
        else:
            console.print(f"[blue]Info:[/blue] {issue.message}")


def setup(
    claude_dir: Optional[Path] = typer.Option(
        None,
        "--claude-dir",
        "-d",
        help="Claude Code configuration directory (default: ~/.claude)",
    ),
    source_dir: Optional[Path] = typer.Option(
        None,
        "--source-dir",
        help="Install assets from this local directory instead of GitHub",
    ),
    codex_dir: Optional[Path] = typer.Option(None, "--codex-dir", help="Codex directory (default: ~/.codex)"),
    opencode_dir: Optional[Path] = typer.Option(
        None, "--opencode-dir", help="OpenCode directory (default: ~/.config/opencode)"
    ),
    all_features: bool = typer.Option(False, "--all", help="Install every feature"),
    shell_shortcuts: bool = typer.Option(True, help="Add cc / ccc shell aliases"),
    command_validation: bool = typer.Option(True, help="Validate Bash commands before they run"),
    statusline: bool = typer.Option(True, help="Use the dotclaude statusline"),
    commands: bool = typer.Option(True, help="Install slash command templates"),
    agents: bool = typer.Option(True, help="Install agent definitions"),
    skills: bool = typer.Option(False, help="Install skills"),
    sounds: bool = typer.Option(True, help="Play sounds on completion and notifications"),
    post_edit_typescript: bool = typer.Option(
        False, help="Format and lint TypeScript files after edits"
    ),
    codex_symlink: bool = typer.Option(False, help="Link commands into ~/.codex/prompts"),
    opencode_symlink: bool = typer.Option(
        False, help="Link commands into ~/.config/opencode/command"
    ),
    replace_statusline: bool = typer.Option(
        False, "--replace-statusline", help="Replace an existing statusLine configuration"
    ),
) -> None:
    """
    Set up the Claude Code environment.

    Assets come from a local claude-code-config/ directory when present
    (or --source-dir), otherwise they are downloaded from GitHub.
    Existing settings are preserved.

    Examples:
        dotclaude setup                         # Default features
        dotclaude setup --all                   # Everything
        dotclaude setup --no-sounds --skills    # Pick features
        dotclaude setup -d ./sandbox/.claude    # Different directory
    """
    if all_features:
        options = SetupOptions.all_features()
    else:
        options = SetupOptions(
            shell_shortcuts=shell_shortcuts,
            command_validation=command_validation,
            custom_statusline=statusline,
            commands=commands,
            agents=agents,
            skills=skills,
            notification_sounds=sounds,
            post_edit_typescript=post_edit_typescript,
            codex_symlink=codex_symlink,
            opencode_symlink=opencode_symlink,
        )

    if not options.selected():
        console.print("[yellow]Setup cancelled - no features selected[/yellow]")
        raise typer.Exit(0)

    result = run_setup(
        options,
        claude_dir,
        source_dir=source_dir,
        codex_dir=codex_dir,
        opencode_dir=opencode_dir,
        replace_statusline=replace_statusline,
    )

    console.print(f"[blue]Installing to:[/blue] {result.claude_dir}")
    print_result(result)

    if not result.success:
        console.print(f"[red]✗[/red] {result.message}")
        raise typer.Exit(1)

    console.print(f"[green]✨ {result.message}[/green]")
    if options.shell_shortcuts:
        console.print("[dim]Restart your terminal to use the cc / ccc aliases[/dim]")
