"""
Segment formatters for the statusline.

Each ``format_*`` function returns one complete, self-terminated segment
(every color it opens is reset before it returns) or an empty string when
the segment should be left out. Joining segments therefore never leaves a
dangling escape sequence.
"""

from __future__ import annotations

import math
import os
from datetime import datetime
from pathlib import PurePath

from dotclaude.core.config.models import SessionSegmentConfig, ThresholdsConfig
from dotclaude.core.statusline.models import ContextSnapshot, GitState, UsageLimits, UsageWindow


class Colors:
    """ANSI escape sequences used by the statusline."""

    GRAY = "\x1b[0;90m"
    LIGHT_GRAY = "\x1b[0;37m"
    BLUE = "\x1b[0;34m"
    GREEN = "\x1b[0;32m"
    RED = "\x1b[0;31m"
    YELLOW = "\x1b[0;33m"
    CYAN = "\x1b[0;36m"
    RESET = "\x1b[0m"
    BOLD = "\x1b[1m"


def severity_color(percentage: float, thresholds: ThresholdsConfig) -> str:
    """
    Map a percentage to its severity tier color.

    Low (<= warning) is green, medium (<= critical) yellow, high red.

    Example:
        >>> severity_color(30, ThresholdsConfig()) == Colors.GREEN
        True
        >>> severity_color(81, ThresholdsConfig()) == Colors.RED
        True
    """
    if percentage <= thresholds.warning:
        return Colors.GREEN
    if percentage <= thresholds.critical:
        return Colors.YELLOW
    return Colors.RED


def format_path(path: str, mode: str = "full", home: str | None = None) -> str:
    """Render the working directory, abbreviating the home directory as ~."""
    if mode == "basename":
        display = PurePath(path).name or path
    else:
        if home is None:
            home = os.path.expanduser("~")
        home = home.rstrip("/")
        display = path
        if home and (path == home or path.startswith(home + "/")):
            display = "~" + path[len(home):]
    return f"{Colors.CYAN}{display}{Colors.RESET}"


def abbreviate_tokens(tokens: int) -> tuple[str, str]:
    """
    Split a token count into its abbreviated value and unit suffix.

    Example:
        >>> abbreviate_tokens(1_250_000)
        ('1.2', 'm')
        >>> abbreviate_tokens(60_400)
        ('60', 'k')
        >>> abbreviate_tokens(999)
        ('999', '')
    """
    if tokens >= 1_000_000:
        return f"{tokens / 1_000_000:.1f}", "m"
    if tokens >= 1000:
        return str(math.floor(tokens / 1000 + 0.5)), "k"
    return str(tokens), ""


def format_tokens(tokens: int) -> str:
    value, suffix = abbreviate_tokens(tokens)
    unit = f"{Colors.GRAY}{suffix}" if suffix else ""
    return f"{Colors.BOLD}{value}{Colors.RESET}{unit}{Colors.LIGHT_GRAY} tkn{Colors.RESET}"


def format_git(git: GitState | None) -> str:
    if git is None:
        return ""

    parts = [f"{Colors.BLUE}🌿 {git.branch}{Colors.RESET}"]
    if git.added > 0 or git.deleted > 0:
        stats: list[str] = []
        if git.added > 0:
            stats.append(f"{Colors.GREEN}+{git.added}")
        if git.deleted > 0:
            stats.append(f"{Colors.RED}-{git.deleted}")
        parts.append(f"{Colors.GRAY}({' '.join(stats)}{Colors.GRAY}){Colors.RESET}")
    return " ".join(parts)


def format_model(display_name: str) -> str:
    if not display_name:
        return ""
    return f"{Colors.GRAY}{display_name}{Colors.RESET}"


def format_session(
    context: ContextSnapshot, config: SessionSegmentConfig, thresholds: ThresholdsConfig
) -> str:
    """
    Render current context usage as tokens and/or percentage.

    Returns an empty string when nothing is known about the context (zero
    tokens) or both display toggles are off.
    """
    if context.tokens == 0:
        return ""

    items: list[str] = []
    if config.show_tokens:
        items.append(format_tokens(context.tokens))
    if config.show_percentage:
        color = severity_color(context.percentage, thresholds)
        items.append(
            f"{color}{context.percentage}{Colors.RESET}"
            f"{Colors.GRAY}%{Colors.LIGHT_GRAY} ctx{Colors.RESET}"
        )
    return " ".join(items)


def format_reset_time(resets_at: datetime, now: datetime) -> str:
    """
    Render the time remaining until a usage window resets.

    Example:
        >>> from datetime import timedelta
        >>> now = datetime(2026, 1, 1)
        >>> format_reset_time(now + timedelta(minutes=42), now)
        '42m'
        >>> format_reset_time(now + timedelta(hours=3, minutes=5), now)
        '3h 5m'
        >>> format_reset_time(now + timedelta(days=2, hours=7), now)
        '2d 7h'
    """
    minutes = max(0, int((resets_at - now).total_seconds() // 60))
    if minutes < 60:
        return f"{minutes}m"
    hours, minutes = divmod(minutes, 60)
    if hours < 24:
        return f"{hours}h {minutes}m"
    days, hours = divmod(hours, 24)
    return f"{days}d {hours}h"


def _format_window(label: str, window: UsageWindow, thresholds: ThresholdsConfig, now: datetime) -> str:
    percentage = math.floor(window.utilization + 0.5)
    # Tier follows the number shown, not the raw float
    color = severity_color(percentage, thresholds)
    remaining = format_reset_time(window.resets_at, now)
    return (
        f"{Colors.LIGHT_GRAY}{label}: {color}{percentage}{Colors.RESET}{Colors.GRAY}%"
        f" ({remaining}){Colors.RESET}"
    )


def format_usage(usage: UsageLimits | None, thresholds: ThresholdsConfig, now: datetime) -> str:
    if usage is None:
        return ""
    return " ".join(
        [
            _format_window("5h", usage.five_hour, thresholds, now),
            _format_window("7d", usage.seven_day, thresholds, now),
        ]
    )


def format_cost(usd: float) -> str:
    """Render the session cost; exactly zero cost renders nothing."""
    if usd == 0:
        return ""
    return f"{Colors.YELLOW}💰 ${usd:.2f}{Colors.RESET}"


def format_error(message: str) -> str:
    """Render the single line shown instead of a statusline on failure."""
    # Keep the error on one line no matter what the exception text holds
    flat = " ".join(message.split())
    return f"{Colors.RED}Error:{Colors.LIGHT_GRAY} {flat}{Colors.RESET}"
