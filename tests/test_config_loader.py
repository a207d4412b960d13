"""
Unit tests for configuration loader.

Tests multi-layer config merging, environment variable overrides,
.env loading, and XDG directory handling.
"""

import json
import logging
import os
from pathlib import Path

import pytest
from pydantic import ValidationError

from dotclaude.core.config import (
    get_project_config_path,
    get_user_config_path,
    load_config,
)
from dotclaude.core.config.env import load_layered_env
from dotclaude.core.config.loader import (
    apply_env_overrides,
    deep_merge,
    get_default_config,
    get_xdg_config_home,
    load_json_file,
)
from dotclaude.core.config.models import StatuslineConfig, ThresholdsConfig

# ==============================================================================
# Helper Functions Tests
# ==============================================================================


class TestDeepMerge:
    """Test the deep_merge helper function."""

    def test_simple_merge(self):
        """Test merging two simple dicts."""
        result = deep_merge({"a": 1, "b": 2}, {"b": 3, "c": 4})
        assert result == {"a": 1, "b": 3, "c": 4}

    def test_nested_merge(self):
        """Test merging nested dicts."""
        base = {"git": {"show": True}, "session": {"show_tokens": True, "show_percentage": True}}
        override = {"session": {"show_tokens": False}}
        result = deep_merge(base, override)
        assert result == {
            "git": {"show": True},
            "session": {"show_tokens": False, "show_percentage": True},
        }

    def test_override_replaces_non_dict(self):
        """Test that non-dict values are replaced, not merged."""
        assert deep_merge({"usage": {"show": True}}, {"usage": None}) == {"usage": None}

    def test_base_not_mutated(self):
        """Test that the base dict is left untouched."""
        base = {"context": {"max_context_tokens": 200_000}}
        deep_merge(base, {"context": {"max_context_tokens": 1}})
        assert base == {"context": {"max_context_tokens": 200_000}}


class TestLoadJsonFile:
    """Test JSON file loading."""

    def test_load_existing_file(self, tmp_path):
        """Test loading a valid JSON file."""
        config_file = tmp_path / "config.json"
        config_file.write_text(json.dumps({"separator": "|"}))
        assert load_json_file(config_file) == {"separator": "|"}

    def test_load_nonexistent_file(self, tmp_path):
        """Test loading a file that doesn't exist returns None."""
        assert load_json_file(tmp_path / "nonexistent.json") is None

    def test_load_invalid_json(self, tmp_path, caplog, capsys):
        """Test invalid JSON returns None and logs a warning, never printing."""
        config_file = tmp_path / "invalid.json"
        config_file.write_text("{ invalid json }")

        with caplog.at_level(logging.WARNING):
            assert load_json_file(config_file) is None

        assert "Failed to parse" in caplog.text
        assert capsys.readouterr().out == ""

    def test_load_non_object(self, tmp_path, caplog):
        """Test a top-level array is rejected."""
        config_file = tmp_path / "list.json"
        config_file.write_text("[1, 2]")

        with caplog.at_level(logging.WARNING):
            assert load_json_file(config_file) is None
        assert "not an object" in caplog.text


class TestPaths:
    """Test config path resolution."""

    def test_xdg_config_home_from_env(self, monkeypatch, tmp_path):
        monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "xdg"))
        assert get_xdg_config_home() == tmp_path / "xdg"

    def test_xdg_config_home_default(self, monkeypatch, isolated_home):
        monkeypatch.delenv("XDG_CONFIG_HOME")
        assert get_xdg_config_home() == isolated_home / ".config"

    def test_user_config_path(self, isolated_home):
        assert get_user_config_path() == isolated_home / ".config" / "dotclaude" / "config.json"

    def test_project_config_path(self, tmp_path):
        assert get_project_config_path(tmp_path) == tmp_path / ".dotclaude.json"


class TestApplyEnvOverrides:
    """Test environment variable override logic."""

    def test_max_context_tokens(self, monkeypatch):
        """Test DOTCLAUDE_MAX_CONTEXT_TOKENS overrides context.max_context_tokens."""
        monkeypatch.setenv("DOTCLAUDE_MAX_CONTEXT_TOKENS", "1000000")
        result = apply_env_overrides({"context": {"max_context_tokens": 200_000}})
        assert result["context"]["max_context_tokens"] == 1_000_000

    @pytest.mark.parametrize("value", ["0", "-5", "lots"])
    def test_max_context_tokens_invalid(self, monkeypatch, caplog, value):
        """Test invalid token budgets are ignored with a warning."""
        monkeypatch.setenv("DOTCLAUDE_MAX_CONTEXT_TOKENS", value)
        with caplog.at_level(logging.WARNING):
            result = apply_env_overrides({})
        assert "context" not in result
        assert "DOTCLAUDE_MAX_CONTEXT_TOKENS" in caplog.text

    @pytest.mark.parametrize("value", ["1", "true", "YES", "on"])
    def test_show_cost_true(self, monkeypatch, value):
        monkeypatch.setenv("DOTCLAUDE_SHOW_COST", value)
        assert apply_env_overrides({})["cost"]["show"] is True

    @pytest.mark.parametrize("value", ["0", "false", "No", "off"])
    def test_show_usage_false(self, monkeypatch, value):
        monkeypatch.setenv("DOTCLAUDE_SHOW_USAGE", value)
        assert apply_env_overrides({"usage": {"show": True}})["usage"]["show"] is False

    def test_invalid_bool_ignored(self, monkeypatch, caplog):
        monkeypatch.setenv("DOTCLAUDE_SHOW_COST", "sometimes")
        with caplog.at_level(logging.WARNING):
            result = apply_env_overrides({"cost": {"show": False}})
        assert result["cost"]["show"] is False
        assert "DOTCLAUDE_SHOW_COST" in caplog.text

    def test_separator(self, monkeypatch):
        monkeypatch.setenv("DOTCLAUDE_SEPARATOR", "|")
        assert apply_env_overrides({})["separator"] == "|"

    def test_no_env_overrides(self):
        """Test that config is unchanged when no env vars are set."""
        config = {"cost": {"show": False}}
        assert apply_env_overrides(config) == config


# ==============================================================================
# load_config Tests
# ==============================================================================


class TestLoadConfig:
    """Test the full layering chain."""

    def test_defaults(self, tmp_path):
        config = load_config(tmp_path)
        assert config == StatuslineConfig()
        assert config.model_dump() == get_default_config() | {
            "timeouts": {"git_seconds": 2.0, "usage_seconds": 3.0}
        }

    def test_user_config(self, tmp_path, user_config_dir):
        (user_config_dir / "config.json").write_text(json.dumps({"cost": {"show": True}}))
        config = load_config(tmp_path)
        assert config.cost.show is True
        assert config.git.show is True

    def test_project_overrides_user(self, tmp_path, user_config_dir):
        (user_config_dir / "config.json").write_text(
            json.dumps({"separator": "|", "thresholds": {"warning": 50}})
        )
        (tmp_path / ".dotclaude.json").write_text(json.dumps({"separator": "/"}))
        config = load_config(tmp_path)
        assert config.separator == "/"
        assert config.thresholds.warning == 50
        assert config.thresholds.critical == 80

    def test_env_overrides_files(self, tmp_path, monkeypatch):
        (tmp_path / ".dotclaude.json").write_text(json.dumps({"usage": {"show": True}}))
        monkeypatch.setenv("DOTCLAUDE_SHOW_USAGE", "0")
        assert load_config(tmp_path).usage.show is False

    def test_invalid_file_falls_back(self, tmp_path):
        (tmp_path / ".dotclaude.json").write_text("{broken")
        assert load_config(tmp_path) == StatuslineConfig()

    def test_unknown_keys_ignored(self, tmp_path):
        (tmp_path / ".dotclaude.json").write_text(json.dumps({"theme": "dark"}))
        assert load_config(tmp_path) == StatuslineConfig()

    def test_not_cached(self, tmp_path):
        project_file = tmp_path / ".dotclaude.json"
        project_file.write_text(json.dumps({"separator": "|"}))
        assert load_config(tmp_path).separator == "|"
        project_file.write_text(json.dumps({"separator": "/"}))
        assert load_config(tmp_path).separator == "/"

    def test_invalid_values_raise(self, tmp_path):
        (tmp_path / ".dotclaude.json").write_text(json.dumps({"path_display_mode": "short"}))
        with pytest.raises(ValidationError):
            load_config(tmp_path)

    def test_config_is_frozen(self, tmp_path):
        config = load_config(tmp_path)
        with pytest.raises(ValidationError):
            config.separator = "|"


class TestThresholdsConfig:
    """Test threshold ordering."""

    def test_warning_above_critical_rejected(self):
        with pytest.raises(ValidationError):
            ThresholdsConfig(warning=90, critical=50)

    def test_equal_thresholds_allowed(self):
        assert ThresholdsConfig(warning=70, critical=70).critical == 70


# ==============================================================================
# .env loading
# ==============================================================================


class TestLoadLayeredEnv:
    """Test DOTCLAUDE_* loading from .env files."""

    def test_only_prefixed_keys(self, tmp_path, monkeypatch):
        monkeypatch.delenv("SOME_PROJECT_SECRET", raising=False)
        env_file = tmp_path / ".env"
        env_file.write_text("DOTCLAUDE_SEPARATOR=|\nSOME_PROJECT_SECRET=shh\n")

        load_layered_env(user_env_paths=[], project_env_paths=[env_file])

        assert os.environ["DOTCLAUDE_SEPARATOR"] == "|"
        assert "SOME_PROJECT_SECRET" not in os.environ

    def test_project_beats_user(self, tmp_path):
        user_env = tmp_path / "user.env"
        project_env = tmp_path / "project.env"
        user_env.write_text("DOTCLAUDE_SHOW_COST=1\nDOTCLAUDE_SEPARATOR=|\n")
        project_env.write_text("DOTCLAUDE_SEPARATOR=/\n")

        load_layered_env(user_env_paths=[user_env], project_env_paths=[project_env])

        assert os.environ["DOTCLAUDE_SHOW_COST"] == "1"
        assert os.environ["DOTCLAUDE_SEPARATOR"] == "/"

    def test_os_environment_wins(self, tmp_path, monkeypatch):
        monkeypatch.setenv("DOTCLAUDE_SEPARATOR", "#")
        project_env = tmp_path / ".env"
        project_env.write_text("DOTCLAUDE_SEPARATOR=/\n")

        load_layered_env(user_env_paths=[], project_env_paths=[project_env])

        assert os.environ["DOTCLAUDE_SEPARATOR"] == "#"

    def test_default_locations(self, tmp_path, user_config_dir):
        (user_config_dir / ".env").write_text("DOTCLAUDE_SHOW_USAGE=0\n")
        project = tmp_path / "proj"
        project.mkdir()
        (project / ".env").write_text("DOTCLAUDE_MAX_CONTEXT_TOKENS=500000\n")

        load_layered_env(project_dir=project)

        assert os.environ["DOTCLAUDE_SHOW_USAGE"] == "0"
        assert os.environ["DOTCLAUDE_MAX_CONTEXT_TOKENS"] == "500000"
        assert load_config(project).context.max_context_tokens == 500_000

    def test_undecodable_file_ignored(self, tmp_path):
        bad_env = tmp_path / "bad.env"
        bad_env.write_bytes(b"DOTCLAUDE_SEPARATOR=\xff\xfe|\n")
        good_env = tmp_path / "good.env"
        good_env.write_text("DOTCLAUDE_SHOW_COST=1\n")

        load_layered_env(user_env_paths=[good_env], project_env_paths=[bad_env])

        assert os.environ["DOTCLAUDE_SHOW_COST"] == "1"
        assert "DOTCLAUDE_SEPARATOR" not in os.environ

    def test_missing_working_directory(self, tmp_path, monkeypatch):
        def _gone():
            raise FileNotFoundError("cwd removed")

        monkeypatch.setattr("dotclaude.core.config.env.Path.cwd", _gone)

        load_layered_env(user_env_paths=[])

        assert not any(key.startswith("DOTCLAUDE_") for key in os.environ)

    def test_missing_files(self, tmp_path):
        load_layered_env(
            user_env_paths=[tmp_path / "nope.env"], project_env_paths=[Path(tmp_path / "none.env")]
        )
