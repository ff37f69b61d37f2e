"""
Unit tests for studio_agents.core.config module.
"""

from config import settings
from studio_agents.core.config import (
    ModelProfile,
    StudioConfig,
    get_config,
    load_config,
    reset_config,
)


class TestModelProfile:
    """Tests for ModelProfile."""

    def test_generation_config_empty_by_default(self):
        profile = ModelProfile(name="writer", model="gemini-2.5-flash")
        assert profile.generation_config() == {}

    def test_generation_config_fields(self):
        profile = ModelProfile(name="writer", model="m", temperature=0.7, max_output_tokens=2048)
        assert profile.generation_config() == {"temperature": 0.7, "maxOutputTokens": 2048}

    def test_from_dict_falls_back_to_default_model(self):
        profile = ModelProfile.from_dict("planner", {"temperature": 0.2}, default_model="fallback")
        assert profile.model == "fallback"
        assert profile.temperature == 0.2


class TestLoadConfig:
    """Tests for YAML profile loading."""

    def test_load_repository_profiles(self):
        config = load_config()
        assert config.planner.model == "gemini-2.5-flash"
        assert config.planner.temperature == 0.4
        assert config.writer.temperature == 0.7
        assert config.image.model == "gemini-2.5-flash-image"

    def test_missing_file_uses_settings(self, tmp_path):
        config = load_config(str(tmp_path / "missing.yaml"))
        assert config.planner.model == settings.gemini_model_text
        assert config.image.model == settings.gemini_model_image

    def test_partial_file(self, tmp_path):
        path = tmp_path / "profiles.yaml"
        path.write_text("model_profiles:\n  writer:\n    model: custom-writer\n")
        config = load_config(str(path))
        assert config.writer.model == "custom-writer"
        assert config.planner.model == settings.gemini_model_text

    def test_env_path(self, tmp_path, monkeypatch):
        path = tmp_path / "profiles.yaml"
        path.write_text("model_profiles:\n  image:\n    model: custom-image\n")
        monkeypatch.setenv("STUDIO_CONFIG_PATH", str(path))
        assert load_config().image.model == "custom-image"

    def test_get_config_caches(self):
        reset_config()
        assert get_config() is get_config()

    def test_get_model_profile(self):
        config = StudioConfig()
        assert config.get_model_profile("writer") is config.writer
        assert config.get_model_profile("unknown") is None
