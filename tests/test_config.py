"""Tests for settings loading."""

import pytest

from leadscore.config import DEFAULT_DATABASE_URL, ScoringConfig, Settings, get_database_url, load_config


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ("LEADSCORE_DATABASE_URL", "DATABASE_URL", "LEADSCORE_BATCH_SIZE", "LEADSCORE_MAX_WORKERS"):
        monkeypatch.delenv(name, raising=False)


class TestDefaults:
    """Test built-in defaults."""

    def test_settings_defaults(self):
        settings = Settings()
        assert settings.database_url == DEFAULT_DATABASE_URL
        assert settings.batch_size == 100
        assert settings.max_workers == 4
        assert settings.top_categories == 10

    def test_scoring_defaults(self):
        config = ScoringConfig()
        assert config.high_ticket_threshold == 60
        assert config.leadgen_threshold == 65
        assert config.quick_win_min_rating == 4.5

    def test_database_url_precedence(self, monkeypatch):
        """LEADSCORE_DATABASE_URL should win over DATABASE_URL."""
        monkeypatch.setenv("DATABASE_URL", "sqlite:///generic.db")
        assert get_database_url() == "sqlite:///generic.db"
        monkeypatch.setenv("LEADSCORE_DATABASE_URL", "sqlite:///specific.db")
        assert get_database_url() == "sqlite:///specific.db"


class TestLoadConfig:
    """Test YAML loading and environment overrides."""

    def test_no_path(self):
        assert load_config() == Settings()

    def test_missing_file_uses_defaults(self, tmp_path):
        assert load_config(str(tmp_path / "missing.yaml")) == Settings()

    def test_yaml_values(self, tmp_path):
        """Top-level and nested scoring keys should be applied."""
        path = tmp_path / "leadscore.yaml"
        path.write_text(
            "batch_size: 25\n"
            "unknown_key: ignored\n"
            "scoring:\n"
            "  high_ticket_threshold: 40\n"
            "  quick_win_min_rating: 4.0\n"
        )
        settings = load_config(str(path))
        assert settings.batch_size == 25
        assert settings.max_workers == 4
        assert settings.scoring.high_ticket_threshold == 40
        assert settings.scoring.quick_win_min_rating == 4.0
        assert settings.scoring.leadgen_threshold == 65

    def test_scalar_scoring_key_ignored(self, tmp_path):
        """A non-mapping scoring value should not replace the scoring config."""
        path = tmp_path / "leadscore.yaml"
        path.write_text("scoring: 5\n")
        assert isinstance(load_config(str(path)).scoring, ScoringConfig)

    def test_environment_wins(self, tmp_path, monkeypatch):
        """Environment variables should override the config file."""
        path = tmp_path / "leadscore.yaml"
        path.write_text("batch_size: 25\nmax_workers: 8\ndatabase_url: sqlite:///file.db\n")
        monkeypatch.setenv("LEADSCORE_BATCH_SIZE", "10")
        monkeypatch.setenv("LEADSCORE_DATABASE_URL", "sqlite:///env.db")

        settings = load_config(str(path))
        assert settings.batch_size == 10
        assert settings.max_workers == 8
        assert settings.database_url == "sqlite:///env.db"

    def test_settings_read_environment(self, monkeypatch):
        """Settings built without a config file should still see env overrides."""
        monkeypatch.setenv("LEADSCORE_BATCH_SIZE", "7")
        monkeypatch.setenv("LEADSCORE_MAX_WORKERS", "9")
        settings = Settings()
        assert settings.batch_size == 7
        assert settings.max_workers == 9
        assert load_config().batch_size == 7

    def test_invalid_environment_value_ignored(self, monkeypatch):
        """A non-integer override should fall back to the default."""
        monkeypatch.setenv("LEADSCORE_BATCH_SIZE", "lots")
        assert load_config().batch_size == 100
