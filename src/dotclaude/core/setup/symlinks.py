"""
Symlinks that share installed commands with other coding assistants.

Codex reads prompts from ~/.codex/prompts and OpenCode reads commands from
~/.config/opencode/command. Both are pointed at <claude_dir>/commands.
"""

from __future__ import annotations

import logging
from pathlib import Path

logger = logging.getLogger(__name__)


class SymlinkError(Exception):
    """A symlink could not be created."""

    pass


def default_codex_dir() -> Path:
    return Path.home() / ".codex"


def default_opencode_dir() -> Path:
    return Path.home() / ".config" / "opencode"


def link_directory(source: Path, link_path: Path) -> bool:
    """
    Create link_path as a symlink to source.

    An existing symlink is replaced. An existing real file or directory is
    left untouched.

    Returns:
        True if the link was created, False if a real path was in the way

    Raises:
        SymlinkError: If the source is missing or the link cannot be created
    """
    if not source.is_dir():
        raise SymlinkError(f"Source directory does not exist: {source}")

    if not link_path.is_symlink() and link_path.exists():
        logger.warning("Not replacing existing path %s", link_path)
        return False

    try:
        if link_path.is_symlink():
            link_path.unlink()
        link_path.parent.mkdir(parents=True, exist_ok=True)
        link_path.symlink_to(source, target_is_directory=True)
    except OSError as e:
        raise SymlinkError(f"Could not link {link_path} -> {source}: {e}") from e

    logger.info("Linked %s -> %s", link_path, source)
    return True


def setup_codex_symlink(claude_dir: Path, codex_dir: Path | None = None) -> bool:
    return link_directory(claude_dir / "commands", (codex_dir or default_codex_dir()) / "prompts")


def setup_opencode_symlink(claude_dir: Path, opencode_dir: Path | None = None) -> bool:
    return link_directory(
        claude_dir / "commands", (opencode_dir or default_opencode_dir()) / "command"
    )
