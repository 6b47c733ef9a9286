"""Tests for settings persistence."""

import json
from pathlib import Path

from spendscope.domain.settings import AnalyticsSettings
from spendscope.state.persistence import SettingsStore


class TestSettingsStore:
    """Tests for SettingsStore."""

    def test_load_default_when_file_not_exists(self, tmp_path):
        store = SettingsStore(tmp_path / "settings.json")
        settings = store.load()

        assert isinstance(settings, AnalyticsSettings)
        assert settings.breakdown.top_n == 5
        assert not store.exists()

    def test_save_and_load(self, tmp_path):
        store = SettingsStore(tmp_path / "settings.json")

        settings = AnalyticsSettings()
        settings.breakdown.top_n = 3
        settings.charts.heatmap_min_records = 20
        settings.display.currency = "USD"
        store.save(settings)

        loaded = store.load()
        assert loaded == settings
        assert loaded.display.currency == "USD"

    def test_save_creates_directory(self, tmp_path):
        nested_path = tmp_path / "nested" / "dir" / "settings.json"
        store = SettingsStore(nested_path)
        store.save(AnalyticsSettings())
        assert nested_path.exists()

    def test_corrupted_file_falls_back_to_defaults(self, tmp_path, caplog):
        settings_path = tmp_path / "settings.json"
        settings_path.write_text("invalid json {{{")

        settings = SettingsStore(settings_path).load()

        assert settings == AnalyticsSettings()
        assert "Could not load settings" in caplog.text

    def test_invalid_values_fall_back_to_defaults(self, tmp_path):
        settings_path = tmp_path / "settings.json"
        settings_path.write_text(json.dumps({"breakdown": {"top_n": 0}}))

        assert SettingsStore(settings_path).load() == AnalyticsSettings()

    def test_unknown_keys_rejected(self, tmp_path):
        settings_path = tmp_path / "settings.json"
        settings_path.write_text(json.dumps({"theme": {"mode": "dark"}}))

        assert SettingsStore(settings_path).load() == AnalyticsSettings()

    def test_partial_file_keeps_other_defaults(self, tmp_path):
        settings_path = tmp_path / "settings.json"
        settings_path.write_text(json.dumps({"charts": {"trend_min_records": 2}}))

        loaded = SettingsStore(settings_path).load()
        assert loaded.charts.trend_min_records == 2
        assert loaded.breakdown.others_label == "Others"

    def test_delete_settings(self, tmp_path):
        settings_path = tmp_path / "settings.json"
        store = SettingsStore(settings_path)
        store.save(AnalyticsSettings())

        assert store.delete() is True
        assert not settings_path.exists()
        assert store.delete() is False

    def test_default_path(self):
        store = SettingsStore()
        assert store.path == Path.home() / ".spendscope_settings.json"
