"""Tests for shell shortcuts and assistant symlinks."""

from pathlib import Path
from unittest.mock import patch

import pytest

from dotclaude.core.setup.shell import (
    MARKER,
    get_shell_rc_path,
    setup_shell_shortcuts,
    shortcuts_block,
)
from dotclaude.core.setup.symlinks import (
    SymlinkError,
    link_directory,
    setup_codex_symlink,
    setup_opencode_symlink,
)


class TestShellShortcuts:
    """Tests for shell alias installation."""

    @pytest.mark.parametrize(
        "shell,expected",
        [("/bin/zsh", ".zshenv"), ("/usr/local/bin/bash", ".bashrc"), ("", ".bashrc")],
    )
    def test_rc_path(self, tmp_path: Path, shell: str, expected: str) -> None:
        assert get_shell_rc_path(shell, home=tmp_path) == tmp_path / expected

    def test_rc_path_from_environment(self, monkeypatch, isolated_home) -> None:
        monkeypatch.setenv("SHELL", "/bin/zsh")
        assert get_shell_rc_path() == isolated_home / ".zshenv"

    def test_block_contents(self) -> None:
        block = shortcuts_block()
        assert block.startswith(MARKER)
        assert 'alias ccc="claude --dangerously-skip-permissions -c"' in block

    def test_creates_file(self, tmp_path: Path) -> None:
        rc_path = tmp_path / ".zshenv"
        assert setup_shell_shortcuts(rc_path) is True
        assert MARKER in rc_path.read_text()

    def test_appends_to_existing(self, tmp_path: Path) -> None:
        rc_path = tmp_path / ".bashrc"
        rc_path.write_text("export EDITOR=vim")
        setup_shell_shortcuts(rc_path)
        content = rc_path.read_text()
        assert content.startswith("export EDITOR=vim\n")
        assert content.endswith(shortcuts_block())

    def test_written_once(self, tmp_path: Path) -> None:
        rc_path = tmp_path / ".bashrc"
        assert setup_shell_shortcuts(rc_path) is True
        assert setup_shell_shortcuts(rc_path) is False
        assert rc_path.read_text().count(MARKER) == 1

    def test_non_utf8_rc_file(self, tmp_path: Path) -> None:
        rc_path = tmp_path / ".bashrc"
        rc_path.write_bytes(b"export PS1=\xff\xfe\n")

        assert setup_shell_shortcuts(rc_path) is True
        content = rc_path.read_bytes()
        assert content.startswith(b"export PS1=\xff\xfe\n")
        assert MARKER.encode() in content


class TestSymlinks:
    """Tests for command directory symlinks."""

    @pytest.fixture
    def claude_dir(self, tmp_path: Path) -> Path:
        commands = tmp_path / ".claude" / "commands"
        commands.mkdir(parents=True)
        (commands / "commit.md").write_text("# commit\n")
        return tmp_path / ".claude"

    def test_codex(self, tmp_path: Path, claude_dir: Path) -> None:
        assert setup_codex_symlink(claude_dir, tmp_path / ".codex") is True
        link = tmp_path / ".codex" / "prompts"
        assert link.is_symlink()
        assert link.resolve() == (claude_dir / "commands").resolve()

    def test_opencode(self, tmp_path: Path, claude_dir: Path) -> None:
        assert setup_opencode_symlink(claude_dir, tmp_path / "opencode") is True
        assert (tmp_path / "opencode" / "command" / "commit.md").read_text() == "# commit\n"

    def test_default_locations(self, isolated_home: Path, claude_dir: Path) -> None:
        setup_codex_symlink(claude_dir)
        setup_opencode_symlink(claude_dir)
        assert (isolated_home / ".codex" / "prompts").is_symlink()
        assert (isolated_home / ".config" / "opencode" / "command").is_symlink()

    def test_replaces_existing_symlink(self, tmp_path: Path, claude_dir: Path) -> None:
        other = tmp_path / "other"
        other.mkdir()
        link = tmp_path / ".codex" / "prompts"
        link.parent.mkdir()
        link.symlink_to(other, target_is_directory=True)

        assert link_directory(claude_dir / "commands", link) is True
        assert link.resolve() == (claude_dir / "commands").resolve()

    def test_real_directory_left_alone(self, tmp_path: Path, claude_dir: Path) -> None:
        link = tmp_path / ".codex" / "prompts"
        link.mkdir(parents=True)
        (link / "mine.md").write_text("keep")

        assert link_directory(claude_dir / "commands", link) is False
        assert not link.is_symlink()
        assert (link / "mine.md").read_text() == "keep"

    def test_unremovable_symlink(self, tmp_path: Path, claude_dir: Path) -> None:
        other = tmp_path / "other"
        other.mkdir()
        link = tmp_path / ".codex" / "prompts"
        link.parent.mkdir()
        link.symlink_to(other, target_is_directory=True)

        with patch.object(Path, "unlink", side_effect=PermissionError("denied")):
            with pytest.raises(SymlinkError, match="denied"):
                link_directory(claude_dir / "commands", link)

    def test_missing_source(self, tmp_path: Path) -> None:
        with pytest.raises(SymlinkError, match="does not exist"):
            link_directory(tmp_path / "missing", tmp_path / "link")
