"""Tests for app configuration (F1)."""

from pathlib import Path

from coursetrack.config.app_config import (
    CONFIG_FILE,
    AppConfig,
    clear_config_cache,
    load_app_config,
)


class TestLoadAppConfig:
    """Tests for load_app_config function."""

    def test_defaults_without_file(self):
        """Uses defaults when no config file exists."""
        config = load_app_config(force_reload=True)
        assert isinstance(config, AppConfig)
        assert config.storage.db_path == "db/coursetrack.db"
        assert config.course.quiz_master_threshold == 70
        assert config.identity.base_url is None
        assert config.identity.api_key_env == "SUPABASE_ANON_KEY"

    def test_config_is_cached(self):
        first = load_app_config()
        assert load_app_config() is first

    def test_loads_yaml_file(self):
        """Reads values from data/config/app_config_v1.yaml."""
        CONFIG_FILE.parent.mkdir(parents=True, exist_ok=True)
        CONFIG_FILE.write_text(
            "identity:\n"
            "  base_url: https://auth.example.test\n"
            "  timeout_seconds: 3\n"
            "storage:\n"
            "  db_path: custom/progress.db\n"
            "course:\n"
            "  quiz_master_threshold: 80\n",
            encoding="utf-8",
        )

        config = load_app_config(force_reload=True)

        assert config.identity.base_url == "https://auth.example.test"
        assert config.identity.timeout_seconds == 3.0
        assert config.storage.db_path == "custom/progress.db"
        assert config.course.quiz_master_threshold == 80

    def test_partial_yaml_keeps_defaults(self):
        """Missing sections fall back to defaults."""
        CONFIG_FILE.parent.mkdir(parents=True, exist_ok=True)
        CONFIG_FILE.write_text("storage:\n  db_path: x.db\n", encoding="utf-8")

        config = load_app_config(force_reload=True)

        assert config.storage.db_path == "x.db"
        assert config.course.quiz_master_threshold == 70

    def test_env_overrides(self, monkeypatch):
        """Environment variables win over file and defaults."""
        monkeypatch.setenv("COURSETRACK_DB_PATH", "/tmp/env.db")
        monkeypatch.setenv("SUPABASE_URL", "https://env.example.test")
        clear_config_cache()

        config = load_app_config()

        assert config.storage.db_path == "/tmp/env.db"
        assert config.identity.base_url == "https://env.example.test"

    def test_api_key_from_env(self, monkeypatch):
        monkeypatch.setenv("SUPABASE_ANON_KEY", "anon-key")
        config = load_app_config(force_reload=True)
        assert config.identity.get_api_key() == "anon-key"

    def test_config_file_path(self):
        assert CONFIG_FILE == Path("data/config/app_config_v1.yaml")
