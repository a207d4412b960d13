"""
Git working-tree inspection for the statusline.

Runs two read-only queries against a directory: the current branch and a
``--numstat`` summary of uncommitted changes. Any failure collapses to None
so the git segment is simply left out.
"""

from __future__ import annotations

import logging
import subprocess
from pathlib import Path

from dotclaude.core.statusline.models import GitState

logger = logging.getLogger(__name__)


def _run_git(args: list[str], cwd: Path, timeout: float) -> str:
    result = subprocess.run(
        ["git", *args],
        cwd=cwd,
        capture_output=True,
        text=True,
        check=True,
        timeout=timeout,
    )
    return result.stdout


def parse_numstat(output: str) -> tuple[int, int]:
    """
    Sum added and deleted line counts from ``git diff --numstat`` output.

    Binary files are reported as ``-`` in both columns and contribute
    nothing to either total.

    Example:
        >>> parse_numstat("3\\t1\\tsrc/a.py\\n-\\t-\\tlogo.png\\n10\\t0\\tREADME.md\\n")
        (13, 1)
    """
    added = 0
    deleted = 0
    for line in output.splitlines():
        parts = line.split("\t")
        if len(parts) < 2:
            continue
        if parts[0].isdigit():
            added += int(parts[0])
        if parts[1].isdigit():
            deleted += int(parts[1])
    return added, deleted


def get_git_state(cwd: str | Path, timeout: float = 2.0) -> GitState | None:
    """
    Get the branch and uncommitted line counts for a working tree.

    Args:
        cwd: Directory to inspect
        timeout: Timeout in seconds for each git command

    Returns:
        GitState, or None if not a git repository or git is unavailable
    """
    path = Path(cwd)
    try:
        branch = _run_git(["rev-parse", "--abbrev-ref", "HEAD"], path, timeout).strip()
        numstat = _run_git(["diff", "--numstat"], path, timeout)
    except subprocess.CalledProcessError:
        logger.debug("Not a git repository: %s", path)
        return None
    except subprocess.TimeoutExpired:
        logger.debug("git timed out after %ss in %s", timeout, path)
        return None
    except OSError as e:
        # Git not installed, or the directory is gone
        logger.debug("git unavailable in %s: %s", path, e)
        return None

    if not branch:
        return None

    added, deleted = parse_numstat(numstat)
    return GitState(branch=branch, added=added, deleted=deleted)
