"""
Configuration loading with multi-layer merging.

Implements the configuration precedence chain:
    defaults < user config < project config < env vars

There is no module-level cache: callers build the configuration once at
process start and pass it down.
"""

import json
import logging
import os
from pathlib import Path
from typing import Any

from .models import StatuslineConfig

logger = logging.getLogger(__name__)

_TRUE_VALUES = ("1", "true", "yes", "on")
_FALSE_VALUES = ("0", "false", "no", "off", "")


def get_xdg_config_home() -> Path:
    """
    Get XDG config home directory.

    Returns:
        Path to config directory (defaults to ~/.config)
    """
    if xdg_home := os.environ.get("XDG_CONFIG_HOME"):
        return Path(xdg_home)
    return Path.home() / ".config"


def get_user_config_path() -> Path:
    """
    Get path to user configuration file.

    Returns:
        Path to ~/.config/dotclaude/config.json (or XDG equivalent)
    """
    return get_xdg_config_home() / "dotclaude" / "config.json"


def get_project_config_path(cwd: Path | None = None) -> Path:
    """
    Get path to project configuration file.

    Args:
        cwd: Working directory to search from (defaults to current directory)

    Returns:
        Path to .dotclaude.json in the given directory
    """
    if cwd is None:
        cwd = Path.cwd()
    return cwd / ".dotclaude.json"


def deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """
    Deep merge two dictionaries.

    Values in `override` take precedence over values in `base`.
    This is a recursive merge - nested dicts are merged, not replaced.

    Example:
        >>> base = {"a": 1, "b": {"x": 10, "y": 20}}
        >>> override = {"b": {"y": 30, "z": 40}, "c": 3}
        >>> deep_merge(base, override)
        {'a': 1, 'b': {'x': 10, 'y': 30, 'z': 40}, 'c': 3}
    """
    result = base.copy()

    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = deep_merge(result[key], value)
        else:
            result[key] = value

    return result


def load_json_file(path: Path) -> dict[str, Any] | None:
    """
    Load a JSON file, returning None if it doesn't exist or is invalid.

    Args:
        path: Path to JSON file

    Returns:
        Parsed JSON as dict, or None if file doesn't exist or can't be parsed
    """
    if not path.exists():
        return None

    try:
        with path.open(encoding="utf-8") as f:
            data = json.load(f)
            if isinstance(data, dict):
                return data
            logger.warning("Ignoring config at %s: top-level value is not an object", path)
            return None
    except (json.JSONDecodeError, OSError) as e:
        # stdout belongs to the statusline, so this only goes to the log
        logger.warning("Failed to parse config at %s: %s", path, e)
        return None


def _parse_bool(name: str, raw: str) -> bool | None:
    value = raw.strip().lower()
    if value in _TRUE_VALUES:
        return True
    if value in _FALSE_VALUES:
        return False
    logger.warning("Invalid %s value '%s', ignoring", name, raw)
    return None


def apply_env_overrides(config_dict: dict[str, Any]) -> dict[str, Any]:
    """
    Apply environment variable overrides to configuration.

    Env vars have the highest precedence and override all config files.

    Supported env vars:
        DOTCLAUDE_MAX_CONTEXT_TOKENS - overrides context.max_context_tokens
        DOTCLAUDE_SHOW_COST - overrides cost.show
        DOTCLAUDE_SHOW_USAGE - overrides usage.show
        DOTCLAUDE_SEPARATOR - overrides separator

    Args:
        config_dict: Configuration dictionary to override

    Returns:
        Configuration dictionary with env var overrides applied
    """
    result = config_dict.copy()

    if max_tokens_str := os.environ.get("DOTCLAUDE_MAX_CONTEXT_TOKENS"):
        try:
            max_tokens = int(max_tokens_str)
            if max_tokens < 1:
                logger.warning(
                    "DOTCLAUDE_MAX_CONTEXT_TOKENS must be >= 1, got %d, ignoring", max_tokens
                )
            else:
                result["context"] = {**result.get("context", {}), "max_context_tokens": max_tokens}
        except ValueError:
            logger.warning("Invalid DOTCLAUDE_MAX_CONTEXT_TOKENS value '%s', ignoring", max_tokens_str)

    for env_name, section in (("DOTCLAUDE_SHOW_COST", "cost"), ("DOTCLAUDE_SHOW_USAGE", "usage")):
        raw = os.environ.get(env_name)
        if raw is None:
            continue
        flag = _parse_bool(env_name, raw)
        if flag is not None:
            result[section] = {**result.get(section, {}), "show": flag}

    if separator := os.environ.get("DOTCLAUDE_SEPARATOR"):
        result["separator"] = separator

    return result


def get_default_config() -> dict[str, Any]:
    """
    Get hardcoded default configuration.

    Returns:
        Dictionary with default configuration values
    """
    return {
        "path_display_mode": "full",
        "separator": "•",
        "git": {"show": True},
        "cost": {"show": False},
        "usage": {"show": True},
        "session": {"show_tokens": True, "show_percentage": True},
        "context": {"max_context_tokens": 200_000},
        "thresholds": {"warning": 60, "critical": 80},
    }


def load_config(project_dir: Path | None = None) -> StatuslineConfig:
    """
    Load configuration with multi-layer merging.

    Configuration precedence (highest to lowest):
        1. Environment variables (DOTCLAUDE_*)
        2. Project config (.dotclaude.json)
        3. User config (~/.config/dotclaude/config.json)
        4. Hardcoded defaults

    Args:
        project_dir: Directory to load .dotclaude.json from (defaults to cwd)

    Returns:
        Validated, frozen StatuslineConfig instance

    Raises:
        ValidationError: If the merged config fails Pydantic validation
    """
    merged = get_default_config()

    if user_config := load_json_file(get_user_config_path()):
        merged = deep_merge(merged, user_config)

    if project_config := load_json_file(get_project_config_path(project_dir)):
        merged = deep_merge(merged, project_config)

    merged = apply_env_overrides(merged)

    return StatuslineConfig(**merged)
