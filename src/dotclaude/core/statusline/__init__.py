"""
Statusline rendering.

Turns the session event Claude Code sends on stdin into a single colored
line: path, git state, model, context usage, rate-limit usage and cost.
"""

from dotclaude.core.statusline.context import get_context_snapshot
from dotclaude.core.statusline.git import get_git_state
from dotclaude.core.statusline.models import (
    ContextSnapshot,
    GitState,
    SessionEvent,
    TranscriptUsage,
    UsageLimits,
    UsageWindow,
)
from dotclaude.core.statusline.renderer import compose_line, render, render_async
from dotclaude.core.statusline.usage import get_usage_limits

__all__ = [
    "ContextSnapshot",
    "GitState",
    "SessionEvent",
    "TranscriptUsage",
    "UsageLimits",
    "UsageWindow",
    "compose_line",
    "get_context_snapshot",
    "get_git_state",
    "get_usage_limits",
    "render",
    "render_async",
]
