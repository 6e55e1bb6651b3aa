"""Pydantic v2 configuration schema with strict validation."""

from pydantic import BaseModel, Field


class ApiConfig(BaseModel):
    model_config = {"extra": "forbid"}

    base_url: str = "https://api.openweathermap.org/data/2.5"
    api_key: str = ""
    lang: str = "en"
    timeout_seconds: float = Field(default=10.0, gt=0.0)


class SearchConfig(BaseModel):
    model_config = {"extra": "forbid"}

    debounce_ms: int = Field(default=500, ge=0)
    min_query_length: int = Field(default=2, ge=1)


class StorageConfig(BaseModel):
    model_config = {"extra": "forbid"}

    db_path: str = "data/skyview.db"
    capacity_bytes: int | None = Field(default=5 * 1024 * 1024, gt=0)


class RefreshConfig(BaseModel):
    model_config = {"extra": "forbid"}

    threshold_minutes: int = Field(default=10, ge=0)


class AppConfig(BaseModel):
    model_config = {"extra": "forbid"}

    api: ApiConfig = ApiConfig()
    search: SearchConfig = SearchConfig()
    storage: StorageConfig = StorageConfig()
    refresh: RefreshConfig = RefreshConfig()
    forecast_days: int = Field(default=5, ge=1, le=5)
