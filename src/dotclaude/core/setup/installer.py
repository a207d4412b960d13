"""
Claude Code environment installer.

Installs the selected configuration assets into the Claude Code directory
(~/.claude by default), then merges settings.json. Assets come from a local
checkout of the configuration directory when one is available, otherwise
from GitHub.

Implementation:
    - Resolve the asset source (local directory or GitHub)
    - Install each selected feature, collecting issues instead of failing
    - Create Codex / OpenCode symlinks when commands were installed
    - Merge settings.json last, so hooks only point at installed assets
"""

from __future__ import annotations

import logging
import shutil
from pathlib import Path

from dotclaude.core.setup.github import GitHubSource
from dotclaude.core.setup.models import SetupIssue, SetupOptions, SetupResult
from dotclaude.core.setup.settings import update_settings
from dotclaude.core.setup.shell import setup_shell_shortcuts
from dotclaude.core.setup.symlinks import (
    SymlinkError,
    setup_codex_symlink,
    setup_opencode_symlink,
)

logger = logging.getLogger(__name__)

LOCAL_CONFIG_DIRNAME = "claude-code-config"

SOUND_FILES = ("finish.mp3", "need-human.mp3")

# Present upstream only when the repository ships skills
SKILLS_MARKER_FILE = "skills/create-prompt/SKILL.md"


class SetupError(Exception):
    """Setup cannot proceed."""

    pass


class LocalSource:
    """Configuration assets from a directory on disk (development mode)."""

    kind = "local"

    def __init__(self, root: Path) -> None:
        self.root = root

    def has(self, relative_path: str) -> bool:
        return (self.root / relative_path).exists()

    def install_file(self, relative_path: str, target: Path) -> bool:
        source = self.root / relative_path
        if not source.is_file():
            return False
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            shutil.copy2(source, target)
        except OSError as e:
            logger.warning("Could not copy %s: %s", source, e)
            return False
        return True

    def install_dir(self, relative_path: str, target: Path) -> bool:
        source = self.root / relative_path
        if not source.is_dir():
            return False
        try:
            shutil.copytree(source, target, dirs_exist_ok=True)
        except OSError as e:
            # shutil.Error is an OSError carrying every failed file
            logger.warning("Could not copy %s: %s", source, e)
            return False
        return True


class RemoteSource:
    """Configuration assets downloaded from GitHub."""

    kind = "github"

    def __init__(self, github: GitHubSource) -> None:
        self.github = github

    def has(self, relative_path: str) -> bool:
        return self.github.exists(relative_path)

    def install_file(self, relative_path: str, target: Path) -> bool:
        return self.github.download_to(relative_path, target)

    def install_dir(self, relative_path: str, target: Path) -> bool:
        return self.github.download_directory(relative_path, target)


AssetSource = LocalSource | RemoteSource


def get_default_claude_dir() -> Path:
    return Path.home() / ".claude"


def resolve_source(
    source_dir: Path | None = None,
    cwd: Path | None = None,
    github: GitHubSource | None = None,
) -> AssetSource:
    """
    Pick where configuration assets come from.

    An explicit source_dir wins, then a claude-code-config/ directory in the
    working directory, then GitHub.

    Raises:
        SetupError: If no local directory exists and GitHub is unreachable
    """
    if source_dir is not None:
        if not source_dir.is_dir():
            raise SetupError(f"Source directory does not exist: {source_dir}")
        return LocalSource(source_dir)

    candidate = (cwd or Path.cwd()) / LOCAL_CONFIG_DIRNAME
    if candidate.is_dir():
        logger.info("Using local configuration files from %s", candidate)
        return LocalSource(candidate)

    github = github or GitHubSource()
    if github.is_available():
        return RemoteSource(github)

    raise SetupError("Could not find local configuration files and GitHub is not accessible")


def _install_assets(
    options: SetupOptions,
    source: AssetSource,
    claude_dir: Path,
    result: SetupResult,
) -> None:
    scripts_dir = claude_dir / "scripts"

    def record(ok: bool, step: str, target: Path) -> None:
        if ok:
            result.installed.append(step)
        else:
            result.issues.append(
                SetupIssue(severity="warning", message=f"Could not install {step}", path=str(target))
            )

    if options.command_validation:
        target = scripts_dir / "command-validator"
        record(source.install_dir("scripts/command-validator", target), "command-validator", target)

    if options.post_edit_typescript:
        target = scripts_dir / "hook-post-file.ts"
        record(source.install_file("scripts/hook-post-file.ts", target), "post-edit hook", target)

    if options.commands:
        target = claude_dir / "commands"
        record(source.install_dir("commands", target), "commands", target)

    if options.agents:
        target = claude_dir / "agents"
        record(source.install_dir("agents", target), "agents", target)

    if options.skills:
        target = claude_dir / "skills"
        marker = SKILLS_MARKER_FILE if isinstance(source, RemoteSource) else "skills"
        if source.has(marker):
            record(source.install_dir("skills", target), "skills", target)
        else:
            result.issues.append(
                SetupIssue(severity="info", message="Skills not available in source")
            )

    if options.notification_sounds:
        song_dir = claude_dir / "song"
        ok = all(
            [source.install_file(f"song/{name}", song_dir / name) for name in SOUND_FILES]
        )
        record(ok, "notification sounds", song_dir)


def _install_symlinks(
    options: SetupOptions,
    claude_dir: Path,
    codex_dir: Path | None,
    opencode_dir: Path | None,
    result: SetupResult,
) -> None:
    if not options.commands:
        if options.codex_symlink or options.opencode_symlink:
            result.issues.append(
                SetupIssue(severity="info", message="Symlinks skipped: commands not installed")
            )
        return

    links = []
    if options.codex_symlink:
        links.append(("codex symlink", lambda: setup_codex_symlink(claude_dir, codex_dir)))
    if options.opencode_symlink:
        links.append(("opencode symlink", lambda: setup_opencode_symlink(claude_dir, opencode_dir)))

    for step, create in links:
        try:
            if create():
                result.installed.append(step)
            else:
                result.issues.append(
                    SetupIssue(severity="warning", message=f"{step}: target exists and is not a symlink")
                )
        except SymlinkError as e:
            result.issues.append(SetupIssue(severity="warning", message=f"{step}: {e}"))


def run_setup(
    options: SetupOptions,
    claude_dir: Path | None = None,
    *,
    source_dir: Path | None = None,
    cwd: Path | None = None,
    github: GitHubSource | None = None,
    codex_dir: Path | None = None,
    opencode_dir: Path | None = None,
    rc_path: Path | None = None,
    replace_statusline: bool = False,
) -> SetupResult:
    """
    Install the selected features into the Claude Code directory.

    Individual asset failures are reported as warnings. Only an unavailable
    asset source or an unwritable settings.json fails the run.
    """
    claude_dir = (claude_dir or get_default_claude_dir()).expanduser().resolve()
    result = SetupResult(success=False, claude_dir=str(claude_dir))

    try:
        claude_dir.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        result.issues.append(SetupIssue(severity="error", message=str(e), path=str(claude_dir)))
        result.message = "Could not create configuration directory"
        return result

    needs_assets = any(
        [
            options.command_validation,
            options.post_edit_typescript,
            options.commands,
            options.agents,
            options.skills,
            options.notification_sounds,
        ]
    )
    if needs_assets:
        try:
            source = resolve_source(source_dir, cwd, github)
        except SetupError as e:
            result.issues.append(SetupIssue(severity="error", message=str(e)))
            result.message = "Setup failed"
            return result
        result.source = source.kind
        try:
            _install_assets(options, source, claude_dir, result)
        finally:
            if isinstance(source, RemoteSource) and github is None:
                source.github.close()

    if options.shell_shortcuts:
        try:
            if setup_shell_shortcuts(rc_path):
                result.installed.append("shell shortcuts")
            else:
                result.issues.append(
                    SetupIssue(severity="info", message="Shell shortcuts already configured")
                )
        except OSError as e:
            result.issues.append(SetupIssue(severity="warning", message=f"Shell shortcuts: {e}"))

    _install_symlinks(options, claude_dir, codex_dir, opencode_dir, result)

    try:
        settings_file, changed = update_settings(options, claude_dir, replace_statusline)
    except OSError as e:
        result.issues.append(
            SetupIssue(
                severity="error",
                message=f"Failed to write settings.json: {e}",
                path=str(claude_dir / "settings.json"),
            )
        )
        result.message = "Setup failed"
        return result

    result.settings_file = str(settings_file)
    result.installed.extend(f"settings:{name}" for name in changed)
    result.success = True
    result.message = "Setup complete"
    return result
