"""Tests for config loading, env overrides and redaction."""

from pathlib import Path

import pytest
import yaml
from pydantic import ValidationError

from skyview.config.loader import API_KEY_ENV, load_config, redacted
from skyview.config.schema import AppConfig


@pytest.fixture(autouse=True)
def no_api_key_env(monkeypatch):
    monkeypatch.delenv(API_KEY_ENV, raising=False)


class TestLoadConfig:
    def test_load_from_yaml(self, config_yaml_path: Path):
        config = load_config(config_yaml_path)
        assert config.api.api_key == "from-yaml"
        assert config.search.debounce_ms == 250
        assert config.search.min_query_length == 2

    def test_missing_file_uses_defaults(self, tmp_path: Path):
        config = load_config(tmp_path / "nope.yaml")
        assert config == AppConfig()
        assert config.refresh.threshold_minutes == 10
        assert config.forecast_days == 5

    def test_empty_yaml_uses_defaults(self, tmp_path: Path):
        path = tmp_path / "empty.yaml"
        path.write_text("")
        assert load_config(path) == AppConfig()

    def test_env_overrides_api_key(self, config_yaml_path: Path, monkeypatch):
        monkeypatch.setenv(API_KEY_ENV, "from-env")
        assert load_config(config_yaml_path).api.api_key == "from-env"

    def test_env_without_file(self, monkeypatch):
        monkeypatch.setenv(API_KEY_ENV, "from-env")
        assert load_config(None).api.api_key == "from-env"

    def test_unknown_key_rejected(self, tmp_path: Path):
        path = tmp_path / "bad.yaml"
        with open(path, "w") as f:
            yaml.dump({"api": {"apikey": "typo"}}, f)
        with pytest.raises(ValidationError):
            load_config(path)

    def test_units_not_configurable(self):
        with pytest.raises(ValidationError):
            AppConfig(api={"units": "imperial"})

    def test_forecast_days_bounded(self):
        with pytest.raises(ValidationError):
            AppConfig(forecast_days=6)


class TestRedaction:
    def test_redacted_masks_key(self):
        config = AppConfig(api={"api_key": "abcdef123456"})
        text = redacted(config)
        assert "abcdef123456" not in text
        assert "abcd****" in text
        assert config.api.api_key == "abcdef123456"
