"""
Statusline data models.

Defines Pydantic models for the session event Claude Code sends on stdin,
the per-turn usage records found in transcripts, and the derived values
(context snapshot, git state, usage windows) the renderer composes.
All of them are recomputed per invocation and never persisted.
"""

from __future__ import annotations

import math
from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, computed_field, field_validator


class WorkspaceInfo(BaseModel):
    """Workspace block of the session event."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    current_dir: str = Field(..., min_length=1, description="Current working directory")


class ModelInfo(BaseModel):
    """Model block of the session event."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    display_name: str = Field(..., description="Human-readable model name")


class CostInfo(BaseModel):
    """Cost block of the session event."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    total_cost_usd: float = Field(default=0.0, ge=0.0, description="Cumulative session cost")


class SessionEvent(BaseModel):
    """
    One statusline invocation's input, as produced by the host process.

    Example:
        >>> event = SessionEvent.model_validate({
        ...     "workspace": {"current_dir": "/home/u/proj"},
        ...     "model": {"display_name": "Opus"},
        ...     "cost": {"total_cost_usd": 0.42},
        ...     "transcript_path": "/tmp/t.jsonl",
        ... })
        >>> event.workspace.current_dir
        '/home/u/proj'
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    workspace: WorkspaceInfo
    model: ModelInfo
    cost: CostInfo = Field(default_factory=CostInfo)
    transcript_path: str | None = Field(default=None, description="Path to the NDJSON transcript")


class TranscriptUsage(BaseModel):
    """Token usage breakdown reported by one transcript turn."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    input_tokens: int = Field(default=0, ge=0)
    output_tokens: int = Field(default=0, ge=0)
    cache_read_input_tokens: int = Field(default=0, ge=0)
    cache_creation_input_tokens: int = Field(default=0, ge=0)

    @field_validator(
        "input_tokens",
        "output_tokens",
        "cache_read_input_tokens",
        "cache_creation_input_tokens",
        mode="before",
    )
    @classmethod
    def none_as_zero(cls, v: object) -> object:
        """Treat an explicit null count as zero."""
        return 0 if v is None else v

    @computed_field
    @property
    def context_tokens(self) -> int:
        """Tokens occupying the context window (output tokens excluded)."""
        return self.input_tokens + self.cache_read_input_tokens + self.cache_creation_input_tokens


class ContextSnapshot(BaseModel):
    """Current context usage gauge."""

    model_config = ConfigDict(frozen=True)

    tokens: int = Field(default=0, ge=0, description="Tokens currently in context")
    percentage: int = Field(default=0, ge=0, le=100, description="Percent of the budget used")

    @classmethod
    def from_tokens(cls, tokens: int, max_context_tokens: int) -> ContextSnapshot:
        """
        Build a snapshot, rounding and clamping the percentage to [0, 100].

        Example:
            >>> ContextSnapshot.from_tokens(60_000, 200_000)
            ContextSnapshot(tokens=60000, percentage=30)
            >>> ContextSnapshot.from_tokens(500_000, 200_000).percentage
            100
        """
        tokens = max(0, tokens)
        if max_context_tokens <= 0:
            return cls(tokens=tokens, percentage=0)
        # Half-up rounding, so 12.5% shows as 13%
        percentage = math.floor(100 * tokens / max_context_tokens + 0.5)
        return cls(tokens=tokens, percentage=min(100, max(0, percentage)))


class GitState(BaseModel):
    """Branch name and uncommitted line counts for a working tree."""

    model_config = ConfigDict(frozen=True)

    branch: str
    added: int = Field(default=0, ge=0)
    deleted: int = Field(default=0, ge=0)


class UsageWindow(BaseModel):
    """Utilization of one rolling rate-limit window."""

    model_config = ConfigDict(frozen=True)

    utilization: float = Field(..., ge=0.0, le=100.0, description="Percent of the window used")
    resets_at: datetime = Field(..., description="When the window resets (UTC)")


class UsageLimits(BaseModel):
    """The short (5 hour) and long (7 day) rate-limit windows."""

    model_config = ConfigDict(frozen=True)

    five_hour: UsageWindow
    seven_day: UsageWindow
