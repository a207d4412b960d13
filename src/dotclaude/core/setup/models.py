"""
Setup data models.

Defines Pydantic models for the features a setup run installs and the
result it reports back to the CLI.
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field


class SetupOptions(BaseModel):
    """Features selected for installation."""

    shell_shortcuts: bool = Field(default=True, description="cc / ccc shell aliases")
    command_validation: bool = Field(
        default=True, description="PreToolUse validator hook for Bash commands"
    )
    custom_statusline: bool = Field(default=True, description="dotclaude statusline")
    commands: bool = Field(default=True, description="Slash command templates")
    agents: bool = Field(default=True, description="Specialized agent definitions")
    skills: bool = Field(default=False, description="Skill bundles")
    notification_sounds: bool = Field(default=True, description="Stop/Notification sounds")
    post_edit_typescript: bool = Field(
        default=False, description="PostToolUse format/lint hook for TypeScript"
    )
    codex_symlink: bool = Field(default=False, description="Link commands into Codex prompts")
    opencode_symlink: bool = Field(
        default=False, description="Link commands into OpenCode commands"
    )

    @classmethod
    def all_features(cls) -> SetupOptions:
        """Options with every feature enabled."""
        return cls(**{name: True for name in cls.model_fields})

    def selected(self) -> list[str]:
        """Names of the enabled features, in declaration order."""
        return [name for name in type(self).model_fields if getattr(self, name)]


class SetupIssue(BaseModel):
    """Represents a problem encountered during setup."""

    severity: Literal["error", "warning", "info"] = Field(description="Issue severity")
    message: str = Field(description="Human-readable issue description")
    path: str | None = Field(default=None, description="Related file path if applicable")


class SetupResult(BaseModel):
    """Result of a setup run."""

    success: bool = Field(description="Whether setup completed")
    claude_dir: str = Field(description="Configuration directory that was set up")
    source: Literal["local", "github"] | None = Field(
        default=None, description="Where configuration assets came from"
    )
    installed: list[str] = Field(default_factory=list, description="Steps that completed")
    issues: list[SetupIssue] = Field(default_factory=list, description="Issues encountered")
    settings_file: str | None = Field(default=None, description="settings.json that was written")
    message: str | None = Field(default=None, description="Summary message")
