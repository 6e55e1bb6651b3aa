"""YAML config loader with environment overrides and redaction."""

import logging
import os
from pathlib import Path
from typing import Any

import yaml

from skyview.config.schema import AppConfig

logger = logging.getLogger(__name__)

API_KEY_ENV = "OPENWEATHER_API_KEY"


def load_config(path: str | Path | None = None) -> AppConfig:
    """Load and validate config from a YAML file.

    A missing file yields the defaults. ``OPENWEATHER_API_KEY`` overrides
    ``api.api_key`` when set.
    """
    raw: dict[str, Any] = {}
    if path is not None:
        path = Path(path)
        if path.exists():
            with open(path) as f:
                raw = yaml.safe_load(f) or {}
        else:
            logger.info("Config %s not found, using defaults", path)

    api_key = os.environ.get(API_KEY_ENV)
    if api_key:
        raw.setdefault("api", {})["api_key"] = api_key

    return AppConfig(**raw)


def redacted(config: AppConfig) -> str:
    """Config as JSON with the API key masked."""
    data = config.model_copy(deep=True)
    if data.api.api_key:
        data.api.api_key = data.api.api_key[:4] + "****"
    return data.model_dump_json(indent=2)
