"""
Context window estimation from a Claude Code transcript.

The transcript is newline-delimited JSON, one record per turn. Assistant
turns carry a ``message.usage`` block with the token breakdown of that API
call. Context usage is a current-state gauge, so only the most recent
usage-bearing turn counts: its input, cache-read and cache-creation tokens
are what occupies the window right now. Output tokens of that turn are not
yet part of the context and are excluded.

Sub-agent turns (``isSidechain``) and synthetic API error records run in a
separate context and are skipped.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from dotclaude.core.statusline.models import ContextSnapshot, TranscriptUsage

logger = logging.getLogger(__name__)


def extract_usage(record: Any) -> TranscriptUsage | None:
    """
    Pull the usage breakdown out of one transcript record.

    Args:
        record: A decoded transcript line

    Returns:
        TranscriptUsage, or None if the record reports no usable usage
    """
    if not isinstance(record, dict):
        return None
    if record.get("isSidechain") or record.get("isApiErrorMessage"):
        return None

    message = record.get("message")
    usage = message.get("usage") if isinstance(message, dict) else None
    if usage is None:
        usage = record.get("usage")
    if not isinstance(usage, dict):
        return None

    try:
        return TranscriptUsage.model_validate(usage)
    except ValidationError:
        return None


def find_latest_usage(transcript_path: Path) -> TranscriptUsage | None:
    """
    Scan a transcript and return the last usage-bearing entry.

    Malformed lines are skipped.

    Raises:
        OSError: If the file cannot be opened or read
    """
    latest: TranscriptUsage | None = None
    skipped = 0

    with transcript_path.open(encoding="utf-8", errors="replace") as f:
        for line in f:
            line = line.strip()
            if not line:
                continue
            try:
                record = json.loads(line)
            except json.JSONDecodeError:
                skipped += 1
                continue
            usage = extract_usage(record)
            if usage is not None:
                latest = usage

    if skipped:
        logger.debug("Skipped %d malformed transcript lines in %s", skipped, transcript_path)
    return latest


def get_context_snapshot(
    transcript_path: str | Path | None, max_context_tokens: int
) -> ContextSnapshot:
    """
    Estimate current context usage from a transcript.

    Never raises: a missing or unreadable transcript, or one without any
    usage-bearing entries, yields a zero snapshot.

    Args:
        transcript_path: Path to the NDJSON transcript (may be None)
        max_context_tokens: Context budget used as the percentage denominator

    Returns:
        ContextSnapshot with tokens and percentage in [0, 100]

    Example:
        >>> get_context_snapshot(None, 200_000)
        ContextSnapshot(tokens=0, percentage=0)
    """
    if not transcript_path:
        return ContextSnapshot()

    path = Path(transcript_path)
    try:
        usage = find_latest_usage(path)
    except OSError as e:
        logger.debug("Could not read transcript %s: %s", path, e)
        return ContextSnapshot()

    if usage is None:
        return ContextSnapshot()

    return ContextSnapshot.from_tokens(usage.context_tokens, max_context_tokens)
