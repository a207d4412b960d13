"""Environment loading helpers.

dotclaude reads its overrides from ``DOTCLAUDE_*`` variables, which may
also live in .env files:
- OS environment (highest precedence)
- Project environment files (``.env`` in the working directory)
- User environment file (``~/.config/dotclaude/.env``)

Only ``DOTCLAUDE_``-prefixed keys are imported. A project .env usually
belongs to the project being edited, and its other keys are none of our
business.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Iterable

from dotenv import dotenv_values

logger = logging.getLogger(__name__)

ENV_PREFIX = "DOTCLAUDE_"


def _read_env(path: Path) -> dict[str, str]:
    try:
        if not path.is_file():
            return {}
        values = dotenv_values(path)
    except (OSError, ValueError) as e:
        # Undecodable or unreadable .env files are ignored
        logger.debug("Could not read %s: %s", path, e)
        return {}
    out: dict[str, str] = {}
    for k, v in values.items():
        if k is None or v is None or not k.startswith(ENV_PREFIX):
            continue
        out[str(k)] = str(v)
    return out


def load_layered_env(
    *,
    project_dir: Path | None = None,
    user_env_paths: Iterable[Path] | None = None,
    project_env_paths: Iterable[Path] | None = None,
) -> None:
    """Load DOTCLAUDE_* variables from user + project .env files.

    Precedence: os.environ (pre-existing) > project .env > user .env

    Args:
        project_dir: base directory for project env paths (defaults to cwd)
        user_env_paths: explicit user env file paths
        project_env_paths: explicit project env file paths
    """
    if user_env_paths is None:
        xdg_home = Path(os.environ.get("XDG_CONFIG_HOME", str(Path.home() / ".config")))
        user_env_paths = [xdg_home / "dotclaude" / ".env"]

    if project_env_paths is None:
        try:
            project_env_paths = [(project_dir or Path.cwd()) / ".env"]
        except OSError as e:
            # Working directory was removed under us
            logger.debug("Skipping project .env: %s", e)
            project_env_paths = []

    user_set_keys: set[str] = set()
    for p in user_env_paths:
        for k, v in _read_env(Path(p)).items():
            if k not in os.environ:
                os.environ[k] = v
                user_set_keys.add(k)

    # Project values may replace user values, never pre-existing OS values
    for p in project_env_paths:
        for k, v in _read_env(Path(p)).items():
            if k not in os.environ or k in user_set_keys:
                os.environ[k] = v
