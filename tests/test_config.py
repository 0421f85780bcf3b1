"""
Tests for the settings loader.
"""

from pathlib import Path

import pytest

from ghworkflow.core.config.loader import (
    SETTINGS_FILE,
    Settings,
    find_settings_file,
    load_settings,
    settings_for,
)
from ghworkflow.core.errors import ConfigError


class TestSettingsDefaults:
    def test_identities(self):
        settings = Settings()
        assert settings.collaborator == "claude-dev-truefrontier"
        assert settings.secret_name == "ANTHROPIC_API_KEY"
        assert settings.app_slug == "claude"
        assert settings.workflows_dir == ".github/workflows"
        assert settings.agents_dir == ".claude/agents"
        assert settings.gh_timeout == 30


class TestLoadSettings:
    def test_none_gives_defaults(self):
        assert load_settings(None) == Settings()

    def test_empty_file_gives_defaults(self, tmp_path: Path):
        path = tmp_path / SETTINGS_FILE
        path.write_text("")
        assert load_settings(path) == Settings()

    def test_overrides(self, tmp_path: Path):
        path = tmp_path / SETTINGS_FILE
        path.write_text("agents_dir: .agents\ngh_timeout: 5\n")
        settings = load_settings(path)
        assert settings.agents_dir == ".agents"
        assert settings.gh_timeout == 5
        assert settings.secret_name == "ANTHROPIC_API_KEY"

    def test_missing_file_raises(self, tmp_path: Path):
        with pytest.raises(ConfigError, match="not found"):
            load_settings(tmp_path / SETTINGS_FILE)

    def test_invalid_yaml_raises(self, tmp_path: Path):
        path = tmp_path / SETTINGS_FILE
        path.write_text(":: invalid: yaml: [")
        with pytest.raises(ConfigError, match="Invalid YAML"):
            load_settings(path)

    def test_non_mapping_raises(self, tmp_path: Path):
        path = tmp_path / SETTINGS_FILE
        path.write_text("- just\n- a\n- list\n")
        with pytest.raises(ConfigError, match="Expected a YAML mapping"):
            load_settings(path)

    def test_unknown_key_raises(self, tmp_path: Path):
        path = tmp_path / SETTINGS_FILE
        path.write_text("colaborator: typo\n")
        with pytest.raises(ConfigError, match="Invalid settings"):
            load_settings(path)

    @pytest.mark.parametrize("key", ["secret_name", "collaborator", "app_slug"])
    def test_identity_not_overridable(self, tmp_path: Path, key: str):
        path = tmp_path / SETTINGS_FILE
        path.write_text(f"{key}: custom\n")
        with pytest.raises(ConfigError, match="Invalid settings"):
            load_settings(path)

    def test_wrong_type_raises(self, tmp_path: Path):
        path = tmp_path / SETTINGS_FILE
        path.write_text("gh_timeout: soon\n")
        with pytest.raises(ConfigError, match="Invalid settings"):
            load_settings(path)


class TestFindSettingsFile:
    def test_find_in_current_dir(self, tmp_path: Path):
        (tmp_path / SETTINGS_FILE).write_text("gh_timeout: 10\n")
        assert find_settings_file(tmp_path) == (tmp_path / SETTINGS_FILE).resolve()

    def test_find_in_parent(self, tmp_path: Path):
        (tmp_path / SETTINGS_FILE).write_text("gh_timeout: 10\n")
        child = tmp_path / "a" / "b"
        child.mkdir(parents=True)
        assert find_settings_file(child) == (tmp_path / SETTINGS_FILE).resolve()

    def test_settings_for(self, tmp_path: Path):
        (tmp_path / SETTINGS_FILE).write_text("sample_issue_title: Demo\n")
        assert settings_for(tmp_path).sample_issue_title == "Demo"
