"""
Shell shortcuts for launching Claude Code.

Appends ``cc`` and ``ccc`` aliases to the user's shell startup file. The
block is delimited by a marker comment and is written at most once.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path

logger = logging.getLogger(__name__)

MARKER = "# dotclaude shortcuts"

ALIASES = {
    "cc": "claude --dangerously-skip-permissions",
    "ccc": "claude --dangerously-skip-permissions -c",
}


def get_shell_rc_path(shell: str | None = None, home: Path | None = None) -> Path:
    """
    Pick the startup file for the user's shell.

    zsh uses ~/.zshenv so the aliases exist in every zsh session; anything
    else gets ~/.bashrc.
    """
    shell = shell if shell is not None else os.environ.get("SHELL", "")
    home = home or Path.home()
    if Path(shell).name == "zsh":
        return home / ".zshenv"
    return home / ".bashrc"


def shortcuts_block() -> str:
    lines = [MARKER]
    lines.extend(f'alias {name}="{command}"' for name, command in ALIASES.items())
    return "\n".join(lines) + "\n"


def setup_shell_shortcuts(rc_path: Path | None = None) -> bool:
    """
    Append the alias block to the shell rc file.

    Returns:
        True if the block was written, False if it was already present
    """
    rc_path = rc_path or get_shell_rc_path()
    existing = (
        rc_path.read_text(encoding="utf-8", errors="replace") if rc_path.exists() else ""
    )
    if MARKER in existing:
        logger.info("Shell shortcuts already present in %s", rc_path)
        return False

    prefix = "" if not existing or existing.endswith("\n") else "\n"
    with rc_path.open("a", encoding="utf-8") as f:
        f.write(f"{prefix}\n{shortcuts_block()}")
    return True
