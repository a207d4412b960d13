"""
Installer for the Claude Code configuration directory.

Copies or downloads configuration assets, merges settings.json, writes
shell shortcuts and links commands into other assistants' directories.
"""

from dotclaude.core.setup.installer import SetupError, resolve_source, run_setup
from dotclaude.core.setup.models import SetupIssue, SetupOptions, SetupResult
from dotclaude.core.setup.settings import install_statusline, update_settings

__all__ = [
    "SetupError",
    "SetupIssue",
    "SetupOptions",
    "SetupResult",
    "install_statusline",
    "resolve_source",
    "run_setup",
    "update_settings",
]
