"""
settings.json merging for Claude Code.

Updates <claude_dir>/settings.json non-destructively: existing keys are
preserved, the statusLine entry is only replaced on request, and each hook
is appended only if an equivalent entry is not already registered.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from dotclaude.core.setup.models import SetupOptions

logger = logging.getLogger(__name__)

JsonDict = dict[str, Any]

STATUSLINE_COMMAND = "dotclaude-statusline"


def statusline_entry() -> JsonDict:
    return {"type": "command", "command": STATUSLINE_COMMAND, "padding": 0}


def load_settings(settings_file: Path) -> JsonDict:
    """
    Load settings.json, returning {} if it is missing or not a JSON object.
    """
    if not settings_file.exists():
        return {}
    try:
        data = json.loads(settings_file.read_text(encoding="utf-8"))
    except (json.JSONDecodeError, OSError) as e:
        logger.warning("Could not parse %s, starting from empty settings: %s", settings_file, e)
        return {}
    return data if isinstance(data, dict) else {}


def write_settings(settings_file: Path, settings: JsonDict) -> None:
    settings_file.parent.mkdir(parents=True, exist_ok=True)
    with settings_file.open("w", encoding="utf-8") as f:
        json.dump(settings, f, indent=2, ensure_ascii=False)
        f.write("\n")


def _has_hook(entries: list[Any], marker: str, matcher: str | None = None) -> bool:
    for entry in entries:
        if not isinstance(entry, dict):
            continue
        if matcher is not None and entry.get("matcher") != matcher:
            continue
        for hook in entry.get("hooks") or []:
            if isinstance(hook, dict) and marker in str(hook.get("command", "")):
                return True
    return False


def add_hook(
    settings: JsonDict, event: str, matcher: str, command: str, marker: str
) -> bool:
    """
    Register a command hook for an event unless one containing marker exists.

    Returns:
        True if the hook was added
    """
    hooks = settings.setdefault("hooks", {})
    entries = hooks.setdefault(event, [])
    if _has_hook(entries, marker, matcher):
        return False
    entries.append({"matcher": matcher, "hooks": [{"type": "command", "command": command}]})
    return True


def merge_settings(
    settings: JsonDict,
    options: SetupOptions,
    claude_dir: Path,
    replace_statusline: bool = False,
) -> list[str]:
    """
    Merge the selected features into a settings dict in place.

    Args:
        settings: Existing settings (modified in place)
        options: Selected features
        claude_dir: Configuration directory the assets were installed to
        replace_statusline: Overwrite an existing statusLine entry

    Returns:
        Names of the settings entries that were added or replaced
    """
    changed: list[str] = []

    if options.custom_statusline:
        if "statusLine" not in settings or replace_statusline:
            settings["statusLine"] = statusline_entry()
            changed.append("statusLine")
        else:
            logger.info("Keeping existing statusLine configuration")

    settings.setdefault("hooks", {})

    if options.command_validation:
        validator = claude_dir / "scripts" / "command-validator" / "src" / "cli.ts"
        if add_hook(settings, "PreToolUse", "Bash", f"bun {validator}", "command-validator"):
            changed.append("PreToolUse:Bash")

    if options.notification_sounds:
        song_dir = claude_dir / "song"
        if add_hook(
            settings, "Stop", "", f"afplay -v 0.1 {song_dir / 'finish.mp3'}", "finish.mp3"
        ):
            changed.append("Stop")
        if add_hook(
            settings,
            "Notification",
            "",
            f"afplay -v 0.1 {song_dir / 'need-human.mp3'}",
            "need-human.mp3",
        ):
            changed.append("Notification")

    if options.post_edit_typescript:
        post_edit = claude_dir / "scripts" / "hook-post-file.ts"
        if add_hook(
            settings,
            "PostToolUse",
            "Edit|Write|MultiEdit",
            f"bun {post_edit}",
            "hook-post-file.ts",
        ):
            changed.append("PostToolUse:Edit|Write|MultiEdit")

    return changed


def update_settings(
    options: SetupOptions, claude_dir: Path, replace_statusline: bool = False
) -> tuple[Path, list[str]]:
    """
    Load, merge and write <claude_dir>/settings.json.

    Returns:
        The settings file path and the names of the entries that changed

    Raises:
        OSError: If the settings file cannot be written
    """
    settings_file = claude_dir / "settings.json"
    settings = load_settings(settings_file)
    changed = merge_settings(settings, options, claude_dir, replace_statusline)
    write_settings(settings_file, settings)
    logger.info("Wrote updated settings to %s", settings_file)
    return settings_file, changed


def install_statusline(claude_dir: Path, force: bool = False) -> bool:
    """
    Point Claude Code's statusLine at dotclaude-statusline.

    Other settings are preserved.

    Returns:
        True if settings.json was written, False if an existing statusLine
        was kept
    """
    settings_file = claude_dir / "settings.json"
    settings = load_settings(settings_file)
    if "statusLine" in settings and not force:
        return False
    settings["statusLine"] = statusline_entry()
    write_settings(settings_file, settings)
    return True
