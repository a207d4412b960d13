"""
Statusline pipeline: session event in, one colored line out.

    stdin JSON -> SessionEvent
               -> {context snapshot, git state, usage limits}  (concurrent)
               -> compose_line
               -> stdout

The three lookups are independent and best-effort. Each one settles to a
default or None on failure, so only a malformed session event (or an
invalid configuration) can stop the render, and that is turned into a
single error line. The process always exits 0.

This module is also the ``dotclaude-statusline`` console script. It avoids
importing the Typer CLI so the statusline starts quickly on every redraw.
"""

from __future__ import annotations

import asyncio
import json
import logging
import sys
from datetime import datetime, timezone
from pathlib import Path

import httpx
from pydantic import ValidationError

from dotclaude.core.config import StatuslineConfig, load_config
from dotclaude.core.config.env import load_layered_env
from dotclaude.core.statusline.context import get_context_snapshot
from dotclaude.core.statusline.formatters import (
    Colors,
    format_cost,
    format_error,
    format_git,
    format_model,
    format_path,
    format_session,
    format_usage,
)
from dotclaude.core.statusline.git import get_git_state
from dotclaude.core.statusline.models import ContextSnapshot, GitState, SessionEvent, UsageLimits
from dotclaude.core.statusline.usage import get_usage_limits

logger = logging.getLogger(__name__)


class SessionInputError(ValueError):
    """The session event on stdin could not be parsed."""


def parse_session_event(raw: str) -> SessionEvent:
    """
    Parse the host's JSON payload into a SessionEvent.

    Raises:
        SessionInputError: If the payload is not JSON or lacks required fields
    """
    try:
        data = json.loads(raw)
    except json.JSONDecodeError as e:
        raise SessionInputError(f"invalid session JSON: {e.msg}") from e

    try:
        return SessionEvent.model_validate(data)
    except ValidationError as e:
        first = e.errors()[0]
        location = ".".join(str(part) for part in first["loc"]) or "input"
        raise SessionInputError(f"invalid session input: {location}: {first['msg']}") from e


async def collect_sources(
    event: SessionEvent,
    config: StatuslineConfig,
    *,
    client: httpx.AsyncClient | None = None,
    credentials_file: Path | None = None,
) -> tuple[ContextSnapshot, GitState | None, UsageLimits | None]:
    """
    Gather the context snapshot, git state and usage limits concurrently.

    Disabled sources are not queried. A source that raises despite its own
    guards is logged and treated as absent.
    """

    async def _none() -> None:
        return None

    context_task = asyncio.to_thread(
        get_context_snapshot, event.transcript_path, config.context.max_context_tokens
    )
    git_task = (
        asyncio.to_thread(get_git_state, event.workspace.current_dir, config.timeouts.git_seconds)
        if config.git.show
        else _none()
    )
    usage_task = (
        get_usage_limits(
            client=client,
            credentials_file=credentials_file,
            timeout=config.timeouts.usage_seconds,
        )
        if config.usage.show
        else _none()
    )

    context, git, usage = await asyncio.gather(
        context_task, git_task, usage_task, return_exceptions=True
    )

    if isinstance(context, BaseException):
        logger.debug("Context estimation failed: %s", context)
        context = ContextSnapshot()
    if isinstance(git, BaseException):
        logger.debug("Git inspection failed: %s", git)
        git = None
    if isinstance(usage, BaseException):
        logger.debug("Usage lookup failed: %s", usage)
        usage = None

    return context, git, usage


def compose_line(
    config: StatuslineConfig,
    event: SessionEvent,
    context: ContextSnapshot,
    git: GitState | None,
    usage: UsageLimits | None,
    now: datetime,
) -> str:
    """
    Join the available segments in their fixed order.

    Order: path, git, model, session, usage, cost. Empty segments are left
    out entirely.
    """
    segments = [
        format_path(event.workspace.current_dir, config.path_display_mode),
        format_git(git) if config.git.show else "",
        format_model(event.model.display_name),
        format_session(context, config.session, config.thresholds),
        format_usage(usage, config.thresholds, now) if config.usage.show else "",
        format_cost(event.cost.total_cost_usd) if config.cost.show else "",
    ]
    separator = f" {Colors.GRAY}{config.separator}{Colors.LIGHT_GRAY} "
    return separator.join(segment for segment in segments if segment)


async def render_async(
    raw: str,
    config: StatuslineConfig | None = None,
    *,
    now: datetime | None = None,
    client: httpx.AsyncClient | None = None,
    credentials_file: Path | None = None,
) -> str:
    """
    Run the whole pipeline and return the text to write to stdout.

    The result is always two lines: the statusline (or an error line)
    followed by a blank line.
    """
    try:
        event = parse_session_event(raw)
        if config is None:
            config = load_config(Path(event.workspace.current_dir))
        context, git, usage = await collect_sources(
            event, config, client=client, credentials_file=credentials_file
        )
        line = compose_line(
            config, event, context, git, usage, now or datetime.now(timezone.utc)
        )
    except Exception as e:
        logger.debug("Statusline render failed", exc_info=True)
        line = format_error(str(e) or type(e).__name__)
    return f"{line}\n\n"


def render(raw: str, config: StatuslineConfig | None = None, *, now: datetime | None = None) -> str:
    """Synchronous wrapper around render_async for the CLI entry points."""
    return asyncio.run(render_async(raw, config, now=now))


def main() -> None:
    """Console script entry point: read stdin, write the statusline."""
    load_layered_env()
    try:
        raw = sys.stdin.read()
    except (OSError, UnicodeDecodeError) as e:
        output = f"{format_error(f'could not read stdin: {e}')}\n\n"
    else:
        output = render(raw)
    sys.stdout.write(output)
    sys.stdout.flush()


if __name__ == "__main__":
    main()
