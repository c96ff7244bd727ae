"""Tests for configuration validation (nutrio/config.py)"""
import pytest
from pathlib import Path

from nutrio import config


class TestConfigDefaults:
    """Test defaults used when the environment sets nothing"""

    def test_default_caps(self):
        assert config.MEAL_LOGGING_DAILY_XP_CAP == 200
        assert config.WATER_LOGGING_DAILY_XP_CAP == 100

    def test_default_timezone_and_retries(self):
        assert config.DEFAULT_TIMEZONE == "UTC"
        assert config.STALE_STATE_MAX_RETRIES == 3

    def test_defaults_validate(self):
        config.validate_config()


class TestConfigValidation:
    """Test validate_config() rejections"""

    def test_bad_log_level(self, monkeypatch):
        monkeypatch.setattr(config, "LOG_LEVEL", "LOUD")
        with pytest.raises(ValueError, match="LOG_LEVEL"):
            config.validate_config()

    def test_bad_timezone(self, monkeypatch):
        monkeypatch.setattr(config, "DEFAULT_TIMEZONE", "Mars/Olympus_Mons")
        with pytest.raises(ValueError, match="DEFAULT_TIMEZONE"):
            config.validate_config()

    def test_negative_cap(self, monkeypatch):
        monkeypatch.setattr(config, "MEAL_LOGGING_DAILY_XP_CAP", -1)
        with pytest.raises(ValueError, match="caps"):
            config.validate_config()

    def test_negative_retries(self, monkeypatch):
        monkeypatch.setattr(config, "STALE_STATE_MAX_RETRIES", -2)
        with pytest.raises(ValueError, match="STALE_STATE_MAX_RETRIES"):
            config.validate_config()

    def test_missing_catalog_file(self, monkeypatch, tmp_path):
        monkeypatch.setattr(config, "ACHIEVEMENT_CATALOG_PATH", Path(tmp_path / "missing.json"))
        with pytest.raises(ValueError, match="ACHIEVEMENT_CATALOG_PATH"):
            config.validate_config()
