"""
Pytest configuration and shared fixtures.

Provides an isolated home/config environment, transcript and session
payload builders, and default configuration objects used across the suite.
"""

import json
import os
from pathlib import Path
from typing import Any, Callable

import pytest

from dotclaude.core.config.models import StatuslineConfig

# ==============================================================================
# Environment Isolation
# ==============================================================================


@pytest.fixture(autouse=True)
def isolated_home(tmp_path, monkeypatch):
    """
    Point HOME and XDG_CONFIG_HOME at a temporary directory.

    Keeps the suite away from the developer's real ~/.claude credentials
    and ~/.config/dotclaude files, and drops any DOTCLAUDE_* overrides.
    """
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.setenv("XDG_CONFIG_HOME", str(home / ".config"))
    for key in list(os.environ):
        if key.startswith("DOTCLAUDE_"):
            monkeypatch.delenv(key)
    yield home
    # load_layered_env writes to os.environ directly
    for key in list(os.environ):
        if key.startswith("DOTCLAUDE_"):
            del os.environ[key]


# ==============================================================================
# Configuration Fixtures
# ==============================================================================


@pytest.fixture
def default_config() -> StatuslineConfig:
    """Default configuration with the network-backed usage segment off."""
    return StatuslineConfig(usage={"show": False})


@pytest.fixture
def user_config_dir(isolated_home) -> Path:
    """Provide the XDG_CONFIG_HOME/dotclaude directory."""
    config_dir = isolated_home / ".config" / "dotclaude"
    config_dir.mkdir(parents=True)
    return config_dir


# ==============================================================================
# Sample Data Fixtures
# ==============================================================================


def _usage_record(
    input_tokens: int = 0,
    output_tokens: int = 0,
    cache_read: int = 0,
    cache_creation: int = 0,
    **extra: Any,
) -> dict[str, Any]:
    """Build an assistant transcript record carrying a usage block."""
    record: dict[str, Any] = {
        "type": "assistant",
        "message": {
            "role": "assistant",
            "usage": {
                "input_tokens": input_tokens,
                "output_tokens": output_tokens,
                "cache_read_input_tokens": cache_read,
                "cache_creation_input_tokens": cache_creation,
            },
        },
    }
    record.update(extra)
    return record


@pytest.fixture
def usage_record() -> Callable[..., dict[str, Any]]:
    """Builder for assistant transcript records carrying a usage block."""
    return _usage_record


@pytest.fixture
def write_transcript(tmp_path) -> Callable[..., Path]:
    """Factory writing records (dicts or raw strings) as an NDJSON transcript."""

    def _write(records: list[Any], name: str = "transcript.jsonl") -> Path:
        path = tmp_path / name
        lines = [r if isinstance(r, str) else json.dumps(r) for r in records]
        path.write_text("\n".join(lines) + ("\n" if lines else ""))
        return path

    return _write


@pytest.fixture
def session_payload() -> Callable[..., str]:
    """Factory building the JSON Claude Code sends to the statusline."""

    def _payload(
        current_dir: str = "/home/u/proj",
        display_name: str = "X",
        total_cost_usd: float = 0,
        transcript_path: str = "t.jsonl",
    ) -> str:
        return json.dumps(
            {
                "workspace": {"current_dir": current_dir},
                "model": {"display_name": display_name},
                "cost": {"total_cost_usd": total_cost_usd},
                "transcript_path": transcript_path,
            }
        )

    return _payload


@pytest.fixture
def usage_response() -> dict[str, Any]:
    """A well-formed usage endpoint response."""
    return {
        "five_hour": {"utilization": 35.0, "resets_at": "2026-01-01T14:30:00+00:00"},
        "seven_day": {"utilization": 72.0, "resets_at": "2026-01-03T12:00:00Z"},
        "seven_day_opus": None,
    }
