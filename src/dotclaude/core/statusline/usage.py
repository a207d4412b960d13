"""
Rolling rate-limit usage from the Anthropic account endpoint.

Reads the Claude Code OAuth access token (macOS Keychain first, then the
credentials file Claude Code writes on other platforms) and makes a single
bearer-authenticated request to the usage endpoint. The response must carry
both the ``five_hour`` and ``seven_day`` windows, each with a numeric
``utilization`` and a ``resets_at`` timestamp string.

Every failure (no token, network error, non-2xx status, unexpected shape)
returns None. There is no retry: the statusline is redrawn often enough
that a missed refresh is harmless.
"""

from __future__ import annotations

import asyncio
import json
import logging
import subprocess
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

import httpx

from dotclaude.core.statusline.models import UsageLimits, UsageWindow

logger = logging.getLogger(__name__)

USAGE_URL = "https://api.anthropic.com/api/oauth/usage"

# Required by the endpoint; bump when the API moves to a new revision
ANTHROPIC_BETA = "oauth-2025-04-20"

KEYCHAIN_SERVICE = "Claude Code-credentials"
DEFAULT_TIMEOUT = 3.0


def get_credentials_path() -> Path:
    """Path to the credentials file Claude Code writes outside macOS."""
    return Path.home() / ".claude" / ".credentials.json"


def _token_from_credentials(raw: str) -> str | None:
    try:
        credentials = json.loads(raw)
    except json.JSONDecodeError:
        return None
    if not isinstance(credentials, dict):
        return None
    oauth = credentials.get("claudeAiOauth")
    if not isinstance(oauth, dict):
        return None
    token = oauth.get("accessToken")
    return token if isinstance(token, str) and token else None


def _read_keychain(timeout: float) -> str | None:
    try:
        result = subprocess.run(
            ["security", "find-generic-password", "-s", KEYCHAIN_SERVICE, "-w"],
            capture_output=True,
            text=True,
            check=True,
            timeout=timeout,
        )
    except (subprocess.CalledProcessError, subprocess.TimeoutExpired, OSError) as e:
        logger.debug("Keychain lookup failed: %s", e)
        return None
    return _token_from_credentials(result.stdout.strip())


def get_oauth_token(
    credentials_file: Path | None = None, timeout: float = DEFAULT_TIMEOUT
) -> str | None:
    """
    Get the Claude Code OAuth access token.

    On macOS the Keychain is tried first. The credentials file is the
    fallback everywhere.

    Args:
        credentials_file: Override for the credentials file location
        timeout: Timeout in seconds for the Keychain lookup

    Returns:
        Access token, or None if no credential is available
    """
    if sys.platform == "darwin":
        if token := _read_keychain(timeout):
            return token

    path = credentials_file or get_credentials_path()
    try:
        raw = path.read_text(encoding="utf-8")
    except OSError:
        logger.debug("No credentials file at %s", path)
        return None
    return _token_from_credentials(raw)


def _parse_timestamp(value: str) -> datetime | None:
    try:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


def _parse_window(data: Any) -> UsageWindow | None:
    if not isinstance(data, dict):
        return None
    utilization = data.get("utilization")
    resets_at = data.get("resets_at")
    # bool is an int subclass but never a valid utilization
    if isinstance(utilization, bool) or not isinstance(utilization, (int, float)):
        return None
    if not isinstance(resets_at, str):
        return None
    reset_time = _parse_timestamp(resets_at)
    if reset_time is None:
        return None
    return UsageWindow(
        utilization=min(100.0, max(0.0, float(utilization))),
        resets_at=reset_time,
    )


def parse_usage_response(data: Any) -> UsageLimits | None:
    """
    Validate and parse the usage endpoint's JSON document.

    Example:
        >>> limits = parse_usage_response({
        ...     "five_hour": {"utilization": 35.0, "resets_at": "2026-01-01T05:00:00Z"},
        ...     "seven_day": {"utilization": 14.0, "resets_at": "2026-01-07T00:00:00Z"},
        ... })
        >>> limits.five_hour.utilization
        35.0
        >>> parse_usage_response({"five_hour": None}) is None
        True
    """
    if not isinstance(data, dict):
        return None
    five_hour = _parse_window(data.get("five_hour"))
    seven_day = _parse_window(data.get("seven_day"))
    if five_hour is None or seven_day is None:
        logger.debug("Unexpected usage response shape: %r", data)
        return None
    return UsageLimits(five_hour=five_hour, seven_day=seven_day)


async def fetch_usage_limits(
    token: str,
    *,
    client: httpx.AsyncClient | None = None,
    timeout: float = DEFAULT_TIMEOUT,
) -> UsageLimits | None:
    """
    Fetch rolling rate-limit usage with a single request.

    Args:
        token: OAuth access token
        client: Optional client to use (a short-lived one is created if None)
        timeout: Request timeout in seconds

    Returns:
        UsageLimits, or None on any transport, status or shape failure
    """
    headers = {
        "Authorization": f"Bearer {token}",
        "Content-Type": "application/json",
        "anthropic-beta": ANTHROPIC_BETA,
    }
    try:
        if client is None:
            async with httpx.AsyncClient(timeout=timeout) as owned:
                response = await owned.get(USAGE_URL, headers=headers)
        else:
            response = await client.get(USAGE_URL, headers=headers, timeout=timeout)
        response.raise_for_status()
        data = response.json()
    except httpx.HTTPStatusError as e:
        logger.debug("Usage endpoint returned HTTP %d", e.response.status_code)
        return None
    except httpx.HTTPError as e:
        logger.debug("Usage request failed: %s", e)
        return None
    except ValueError as e:
        logger.debug("Usage response is not JSON: %s", e)
        return None

    return parse_usage_response(data)


async def get_usage_limits(
    *,
    client: httpx.AsyncClient | None = None,
    credentials_file: Path | None = None,
    timeout: float = DEFAULT_TIMEOUT,
) -> UsageLimits | None:
    """
    Look up the OAuth token and fetch usage limits.

    The token lookup may shell out to the Keychain, so it runs in a worker
    thread to keep the event loop free for the other statusline sources.
    """
    token = await asyncio.to_thread(get_oauth_token, credentials_file, timeout)
    if not token:
        return None
    return await fetch_usage_limits(token, client=client, timeout=timeout)
