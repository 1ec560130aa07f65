"""Tests for Config"""
import json

import pytest

from worktree_keeper.config import Config
from worktree_keeper.exceptions import ConfigError


class TestConfigValidation:
    """Test Config validation in __post_init__."""

    def test_defaults(self):
        config = Config()

        assert config.remote_name == "origin"
        assert config.main_branch == "main"
        assert config.remote_timeout == 10.0
        assert config.api_timeout == 15.0
        assert config.session_marker == ".claude/settings.local.json"
        assert config.config_dir.is_absolute()
        assert config.worktrees_root.is_absolute()

    def test_expands_home(self, monkeypatch, temp_dir):
        monkeypatch.setenv("HOME", str(temp_dir))
        config = Config(worktrees_root="~/trees")

        assert str(config.worktrees_root) == str(temp_dir / "trees")

    def test_projects_file_lives_in_config_dir(self, temp_dir):
        config = Config(config_dir=temp_dir)

        assert config.projects_file == temp_dir / "projects.json"
        assert config.log_file == temp_dir / "work.log"

    @pytest.mark.parametrize("field_name", ["remote_timeout", "api_timeout"])
    def test_rejects_non_positive_timeouts(self, field_name):
        with pytest.raises(ConfigError, match=field_name):
            Config(**{field_name: 0})

    def test_rejects_non_positive_workers(self):
        with pytest.raises(ConfigError, match="workers"):
            Config(workers=0)

    def test_rejects_empty_main_branch(self):
        with pytest.raises(ConfigError, match="main_branch"):
            Config(main_branch="  ")

    @pytest.mark.parametrize("marker", ["/etc/marker.json", "../outside.json"])
    def test_rejects_session_marker_outside_worktree(self, marker):
        with pytest.raises(ConfigError, match="session_marker"):
            Config(session_marker=marker)

    def test_config_error_is_value_error(self):
        with pytest.raises(ValueError):
            Config(remote_timeout=-1)


class TestConfigLoading:
    """Test Config.load precedence."""

    def test_from_dict_ignores_unknown_keys(self):
        config = Config.from_dict({"main_branch": "trunk", "stale_days": 30})

        assert config.main_branch == "trunk"

    def test_to_dict_is_json_friendly(self, temp_dir):
        data = Config(config_dir=temp_dir).to_dict()

        assert data["config_dir"] == str(temp_dir)
        json.dumps(data)

    def test_file_then_env_then_overrides(self, temp_dir):
        (temp_dir / "config.json").write_text(
            json.dumps({"main_branch": "develop", "remote_name": "upstream", "workers": 2})
        )
        environ = {"WORK_CONFIG_DIR": str(temp_dir), "WORK_MAIN_BRANCH": "trunk"}

        config = Config.load(overrides={"workers": 4, "debug": None}, environ=environ)

        assert config.remote_name == "upstream"  # file
        assert config.main_branch == "trunk"  # env beats file
        assert config.workers == 4  # override beats file
        assert config.debug is False  # None overrides are ignored
        assert config.config_dir == temp_dir

    def test_token_from_environment(self, temp_dir):
        config = Config.load(environ={"WORK_CONFIG_DIR": str(temp_dir), "GITHUB_TOKEN": "abc"})

        assert config.github_token == "abc"

    def test_missing_file_uses_defaults(self, temp_dir):
        config = Config.load(environ={"WORK_CONFIG_DIR": str(temp_dir / "nowhere")})

        assert config.main_branch == "main"

    def test_invalid_json_raises(self, temp_dir):
        (temp_dir / "config.json").write_text("{not json")

        with pytest.raises(ConfigError, match="Could not read"):
            Config.load(environ={"WORK_CONFIG_DIR": str(temp_dir)})

    def test_non_object_json_raises(self, temp_dir):
        (temp_dir / "config.json").write_text("[]")

        with pytest.raises(ConfigError, match="JSON object"):
            Config.load(environ={"WORK_CONFIG_DIR": str(temp_dir)})
