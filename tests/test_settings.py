"""Tests for YAML settings."""

from __future__ import annotations

from mealplanner.config import settings as settings_module
from mealplanner.config.settings import Settings, get_settings, reload_settings


class TestSettings:
    """Tests for Settings load/save."""

    def test_missing_file_gives_defaults(self, tmp_path):
        settings = Settings.load(tmp_path / "absent.yaml")
        assert settings.solver.max_grams == 65535
        assert settings.solver.default_day_name == "Day1"
        assert settings.solver.time_limit is None
        assert settings.logging.level == "WARNING"

    def test_partial_file_overrides_given_keys(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("solver:\n  max_grams: 5000\n  time_limit: 2.5\nlogging:\n  level: debug\n")

        settings = Settings.load(path)

        assert settings.solver.max_grams == 5000
        assert settings.solver.time_limit == 2.5
        assert settings.solver.max_unit_count == 65535
        assert settings.logging.level == "DEBUG"

    def test_empty_file(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("")
        assert Settings.load(path) == Settings()

    def test_save_then_load(self, tmp_path):
        path = tmp_path / "nested" / "config.yaml"
        settings = Settings()
        settings.solver.default_day_name = "Monday"
        settings.solver.presolve = False
        settings.save(path)

        loaded = Settings.load(path)
        assert loaded.solver.default_day_name == "Monday"
        assert loaded.solver.presolve is False
        assert loaded == settings


class TestGlobalSettings:
    def test_get_settings_returns_cached_instance(self, default_settings):
        assert get_settings() is default_settings

    def test_reload_settings(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("solver:\n  default_day_name: Friday\n")

        settings = reload_settings(path)

        assert settings.solver.default_day_name == "Friday"
        assert settings_module._settings is settings
