"""OpenWeatherMap 2.5 API client for current conditions and 5-day forecasts."""

import logging
from typing import Any

import httpx

from skyview.ingest.formatters import (
    FORECAST_DAYS,
    MalformedPayloadError,
    format_city_suggestion,
    format_current_weather,
    format_forecast,
)
from skyview.models.weather import CitySuggestion, CurrentWeather, DailyForecast

logger = logging.getLogger(__name__)

OWM_BASE_URL = "https://api.openweathermap.org/data/2.5"
# Formatters assume Celsius and m/s.
UNITS = "metric"

NOT_FOUND_MESSAGE = "City not found. Please check the spelling and try again."
UNAUTHORIZED_MESSAGE = "Invalid API key. Please check your configuration."


class WeatherProviderError(Exception):
    """Raised when the weather provider cannot satisfy a lookup."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class LocationNotFoundError(WeatherProviderError):
    """The queried city or coordinates did not resolve."""


class AuthenticationError(WeatherProviderError):
    """The provider rejected the API key."""


class TransportError(WeatherProviderError):
    """Network failure or an unexpected HTTP status."""


class OpenWeatherClient:
    """Async wrapper around the /weather and /forecast endpoints.

    Current and forecast lookups are independent reads, so callers may
    await them concurrently on the same client.
    """

    def __init__(
        self,
        api_key: str,
        base_url: str = OWM_BASE_URL,
        lang: str = "en",
        timeout: float = 10.0,
        forecast_days: int = FORECAST_DAYS,
        http: httpx.AsyncClient | None = None,
    ):
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.lang = lang
        self.forecast_days = forecast_days
        self._http = http or httpx.AsyncClient(timeout=timeout)
        self._owns_http = http is None

    async def __aenter__(self) -> "OpenWeatherClient":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_http:
            await self._http.aclose()

    # --- Current conditions ---

    async def get_current_weather(self, city: str) -> CurrentWeather:
        data = await self._get("/weather", {"q": city}, what="weather")
        return format_current_weather(data)

    async def get_current_weather_by_coords(self, lat: float, lon: float) -> CurrentWeather:
        data = await self._get("/weather", {"lat": lat, "lon": lon}, what="weather")
        return format_current_weather(data)

    # --- Forecast ---

    async def get_forecast(self, city: str) -> list[DailyForecast]:
        data = await self._get("/forecast", {"q": city}, what="forecast")
        return format_forecast(data, max_days=self.forecast_days)

    async def get_forecast_by_coords(self, lat: float, lon: float) -> list[DailyForecast]:
        data = await self._get("/forecast", {"lat": lat, "lon": lon}, what="forecast")
        return format_forecast(data, max_days=self.forecast_days)

    # --- Search ---

    async def search_cities(self, query: str) -> list[CitySuggestion]:
        """Resolve a query to matching cities. Returns [] on any failure."""
        try:
            data = await self._get("/weather", {"q": query}, what="weather")
            return [format_city_suggestion(data)]
        except Exception as e:
            logger.warning("City search failed for %r: %s", query, e)
            return []

    async def _get(self, endpoint: str, params: dict[str, Any], what: str) -> dict:
        url = f"{self.base_url}{endpoint}"
        query = {**params, "units": UNITS, "lang": self.lang, "appid": self.api_key}
        try:
            resp = await self._http.get(url, params=query)
        except httpx.RequestError as e:
            logger.error("OpenWeatherMap request failed: %s %s -> %s", endpoint, params, e)
            raise TransportError(f"Failed to fetch {what} data: {e}") from e

        if resp.status_code == 404:
            raise LocationNotFoundError(NOT_FOUND_MESSAGE, resp.status_code)
        if resp.status_code == 401:
            logger.error("OpenWeatherMap rejected the API key")
            raise AuthenticationError(UNAUTHORIZED_MESSAGE, resp.status_code)
        if not resp.is_success:
            logger.error(
                "OpenWeatherMap %d: %s %s -> %s",
                resp.status_code, endpoint, params, resp.text[:200],
            )
            raise TransportError(
                f"Failed to fetch {what} data: {resp.reason_phrase}", resp.status_code
            )
        try:
            return resp.json()
        except ValueError as e:
            raise MalformedPayloadError(f"Invalid JSON from {endpoint}: {e}") from e
