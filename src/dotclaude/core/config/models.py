"""
Configuration data models for dotclaude.

These models define the structure of ~/.config/dotclaude/config.json and
.dotclaude.json files, with validation and type safety via Pydantic.
Every model is frozen: a configuration is built once per invocation and
passed explicitly to the components that need it.
"""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, model_validator


class GitSegmentConfig(BaseModel):
    """Git branch and diff summary segment."""

    model_config = ConfigDict(frozen=True)

    show: bool = Field(default=True, description="Show the git segment")


class CostSegmentConfig(BaseModel):
    """Session cost segment."""

    model_config = ConfigDict(frozen=True)

    show: bool = Field(default=False, description="Show the session cost segment")


class UsageSegmentConfig(BaseModel):
    """Rolling rate-limit usage segment (5h and 7d windows)."""

    model_config = ConfigDict(frozen=True)

    show: bool = Field(default=True, description="Show the rate-limit usage segment")


class SessionSegmentConfig(BaseModel):
    """
    Context usage segment.

    Controls whether the token count and the percentage of the context
    budget are displayed. When both are off the segment is omitted.
    """

    model_config = ConfigDict(frozen=True)

    show_tokens: bool = Field(default=True, description="Show current context tokens")
    show_percentage: bool = Field(
        default=True, description="Show percentage of the context budget in use"
    )


class ContextConfig(BaseModel):
    """Context window budget used as the denominator for percentage-used."""

    model_config = ConfigDict(frozen=True)

    max_context_tokens: int = Field(
        default=200_000,
        ge=1,
        description="Maximum number of tokens the context window holds",
    )


class ThresholdsConfig(BaseModel):
    """
    Severity thresholds for percentage-based segments.

    Values at or below ``warning`` are low severity, values at or below
    ``critical`` are medium, anything above ``critical`` is high.
    """

    model_config = ConfigDict(frozen=True)

    warning: int = Field(default=60, ge=0, le=100, description="Upper bound of the low tier")
    critical: int = Field(
        default=80, ge=0, le=100, description="Upper bound of the medium tier"
    )

    @model_validator(mode="after")
    def check_order(self) -> "ThresholdsConfig":
        """Ensure warning does not exceed critical."""
        if self.warning > self.critical:
            raise ValueError(
                f"thresholds.warning ({self.warning}) must not exceed "
                f"thresholds.critical ({self.critical})"
            )
        return self


class TimeoutsConfig(BaseModel):
    """Timeouts for the best-effort external lookups."""

    model_config = ConfigDict(frozen=True)

    git_seconds: float = Field(default=2.0, gt=0, description="Timeout per git command")
    usage_seconds: float = Field(
        default=3.0, gt=0, description="Timeout for the usage-limit request"
    )


class StatuslineConfig(BaseModel):
    """
    Main statusline configuration model.

    Combines all configuration sections into a single validated model.
    Built by ``load_config`` from defaults, user and project JSON files, and
    environment overrides.

    Example:
        >>> config = StatuslineConfig()
        >>> config.context.max_context_tokens
        200000
        >>> config.thresholds.warning
        60
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    path_display_mode: Literal["full", "basename"] = Field(
        default="full",
        description="'full' shows the ~-abbreviated path, 'basename' the last component",
    )
    separator: str = Field(default="•", min_length=1, description="Segment separator glyph")
    git: GitSegmentConfig = Field(default_factory=GitSegmentConfig)
    cost: CostSegmentConfig = Field(default_factory=CostSegmentConfig)
    usage: UsageSegmentConfig = Field(default_factory=UsageSegmentConfig)
    session: SessionSegmentConfig = Field(default_factory=SessionSegmentConfig)
    context: ContextConfig = Field(default_factory=ContextConfig)
    thresholds: ThresholdsConfig = Field(default_factory=ThresholdsConfig)
    timeouts: TimeoutsConfig = Field(default_factory=TimeoutsConfig)
