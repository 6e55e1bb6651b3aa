"""Shared test fixtures."""

import json
from pathlib import Path

import pytest
import yaml

from skyview.storage.kv_store import MemoryKeyValueStore
from skyview.storage.preference_store import PreferenceStore

FIXTURE_DIR = Path(__file__).parent / "fixtures"

# 2026-02-11T12:00:00Z
T0_MS = 1770811200 * 1000


class FakeClock:
    def __init__(self, now: int = T0_MS):
        self.now = now

    def __call__(self) -> int:
        return self.now

    def advance(self, ms: int) -> None:
        self.now += ms


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def backend() -> MemoryKeyValueStore:
    return MemoryKeyValueStore()


@pytest.fixture
def store(backend: MemoryKeyValueStore, clock: FakeClock) -> PreferenceStore:
    return PreferenceStore(backend, clock=clock)


@pytest.fixture
def fixtures_dir() -> Path:
    """Return the path to the test fixtures directory."""
    return FIXTURE_DIR


@pytest.fixture
def current_payload() -> dict:
    with open(FIXTURE_DIR / "owm_current_london.json") as f:
        return json.load(f)


@pytest.fixture
def forecast_payload() -> dict:
    with open(FIXTURE_DIR / "owm_forecast_london.json") as f:
        return json.load(f)


@pytest.fixture
def config_yaml_path(tmp_path: Path) -> Path:
    """Write a minimal valid config YAML and return its path."""
    data = {
        "api": {"api_key": "from-yaml", "base_url": "https://test-owm.example.com"},
        "search": {"debounce_ms": 250},
        "storage": {"db_path": str(tmp_path / "prefs.db")},
    }
    path = tmp_path / "test_config.yaml"
    with open(path, "w") as f:
        yaml.dump(data, f)
    return path
