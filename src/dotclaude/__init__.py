"""
dotclaude - Claude Code environment bootstrapper.

Installs configuration assets, settings hooks and shell shortcuts into the
Claude Code configuration directory, and ships the statusline renderer
those settings point at.
"""

__version__ = "0.4.0"

__all__ = ["__version__"]
