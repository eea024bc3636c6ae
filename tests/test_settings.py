"""Tests for taskfoundry.settings module."""

import pytest

from taskfoundry.global_config import save_global_config
from taskfoundry.settings import SettingsError, load_settings
from taskfoundry.user_config import save_config


class TestLoadSettings:
    """Tests for layered settings."""

    def test_defaults(self, isolated_config):
        settings = load_settings()

        assert settings.engine == "auto"
        assert settings.model is None
        assert settings.temperature is None
        assert settings.output == "markdown"
        assert settings.fallback is False
        assert settings.timeout == 60.0
        assert settings.exclude == []

    def test_global_layer(self, isolated_config):
        save_global_config({"engine": "groq", "temperature": 0.7})

        settings = load_settings()

        assert settings.engine == "groq"
        assert settings.temperature == 0.7

    def test_project_overrides_global(self, isolated_config, mock_repo_root):
        save_global_config({"engine": "groq", "model": "gpt-4o"})
        save_config(mock_repo_root, {"engine": "openai", "exclude": ["*.snap"]})

        settings = load_settings(mock_repo_root)

        assert settings.engine == "openai"
        assert settings.model == "gpt-4o"
        assert settings.exclude == ["*.snap"]

    def test_project_defaults_exclude(self, isolated_config, mock_repo_root):
        settings = load_settings(mock_repo_root)

        assert "*.lock" in settings.exclude

    def test_overrides_win_and_none_is_ignored(self, isolated_config):
        save_global_config({"engine": "groq", "detailed": True})

        settings = load_settings(overrides={"engine": "local", "detailed": None})

        assert settings.engine == "local"
        assert settings.detailed is True

    def test_null_yaml_values_mean_unset(self, isolated_config):
        save_global_config({"engine": None, "output": None})

        settings = load_settings()

        assert settings.engine == "auto"
        assert settings.output == "markdown"

    def test_unknown_keys_ignored(self, isolated_config):
        save_global_config({"colour": "blue"})

        assert load_settings().engine == "auto"

    def test_invalid_engine(self, isolated_config):
        with pytest.raises(SettingsError) as exc_info:
            load_settings(overrides={"engine": "gemini"})
        assert "Invalid configuration" in str(exc_info.value)
        assert "engine" in str(exc_info.value)

    def test_invalid_temperature(self, isolated_config):
        with pytest.raises(SettingsError) as exc_info:
            load_settings(overrides={"temperature": 3})
        assert "temperature" in str(exc_info.value)

    def test_invalid_output(self, isolated_config):
        with pytest.raises(SettingsError):
            load_settings(overrides={"output": "html"})
