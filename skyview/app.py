"""Application controller: owns UI state and wires lookups to the store."""

import asyncio
import logging
from collections.abc import Awaitable
from dataclasses import dataclass, field

from skyview.config.schema import AppConfig
from skyview.ingest.geolocation import (
    GeolocationError,
    GeolocationUnsupported,
    LocationProvider,
)
from skyview.ingest.owm_client import OpenWeatherClient
from skyview.models.preferences import Theme
from skyview.models.weather import CitySuggestion, CurrentWeather, DailyForecast
from skyview.search import SearchDebouncer
from skyview.storage.preference_store import PreferenceStore

logger = logging.getLogger(__name__)


@dataclass
class AppState:
    current: CurrentWeather | None = None
    forecast: list[DailyForecast] = field(default_factory=list)
    theme: Theme = Theme.LIGHT
    suggestions: list[CitySuggestion] = field(default_factory=list)
    error: str | None = None
    loading: bool = False


class WeatherApp:
    def __init__(
        self,
        client: OpenWeatherClient,
        store: PreferenceStore,
        config: AppConfig | None = None,
    ):
        self.client = client
        self.store = store
        self.config = config or AppConfig()
        self.state = AppState()
        self.searcher = SearchDebouncer(
            self._search_now,
            delay=self.config.search.debounce_ms / 1000,
            min_length=self.config.search.min_query_length,
        )

    # --- Theme ---

    def initialize_theme(self, prefers_dark: bool = False) -> Theme:
        """Use the saved theme, else the system preference, and persist it."""
        theme = self.store.get_theme() or (Theme.DARK if prefers_dark else Theme.LIGHT)
        self.state.theme = theme
        self.store.save_theme(theme)
        return theme

    def toggle_theme(self) -> Theme:
        self.state.theme = Theme.DARK if self.state.theme == Theme.LIGHT else Theme.LIGHT
        self.store.save_theme(self.state.theme)
        return self.state.theme

    # --- Lookups ---

    async def load_weather(self, city: str) -> CurrentWeather:
        weather = await self._load(
            self.client.get_current_weather(city),
            self.client.get_forecast(city),
        )
        self._remember(city, weather)
        return weather

    async def load_weather_by_coords(self, lat: float, lon: float) -> CurrentWeather:
        weather = await self._load(
            self.client.get_current_weather_by_coords(lat, lon),
            self.client.get_forecast_by_coords(lat, lon),
        )
        self._remember(weather.city, weather)
        return weather

    async def load_current_location(self, locator: LocationProvider | None) -> CurrentWeather:
        try:
            if locator is None:
                raise GeolocationUnsupported()
            coords = await locator.locate()
        except GeolocationError as e:
            self.state.error = str(e)
            raise
        return await self.load_weather_by_coords(coords.lat, coords.lon)

    async def restore_last_city(self) -> CurrentWeather | None:
        """Reload the last viewed city. Fresh data is refetched too."""
        last = self.store.get_last_city()
        if last is None:
            return None
        if not self.store.needs_refresh(self.config.refresh.threshold_minutes):
            logger.debug("Last update for %s is recent, refetching anyway", last.name)
        return await self.load_weather(last.name)

    async def _load(
        self,
        current_call: Awaitable[CurrentWeather],
        forecast_call: Awaitable[list[DailyForecast]],
    ) -> CurrentWeather:
        self.state.loading = True
        self.state.error = None
        try:
            weather, forecast = await asyncio.gather(current_call, forecast_call)
        except Exception as e:
            self.state.error = str(e)
            raise
        finally:
            self.state.loading = False
        self.state.current = weather
        self.state.forecast = forecast
        return weather

    def _remember(self, name: str, weather: CurrentWeather) -> None:
        self.store.save_last_city(name)
        self.store.save_last_update()
        if self.store.is_favorite_city(weather.city):
            self.store.update_favorite_city_weather(weather.city, weather)

    # --- Favorites ---

    def toggle_favorite(self) -> bool:
        """Flip favorite status of the displayed city. Returns the new status."""
        weather = self.state.current
        if weather is None:
            return False
        if self.store.is_favorite_city(weather.city):
            self.store.remove_favorite_city(weather.city)
            return False
        return self.store.add_favorite_city(
            weather.city,
            country=weather.country,
            temperature=weather.temperature,
            icon_code=weather.icon_code,
            coordinates=weather.coordinates,
        )

    # --- Search ---

    def search(self, text: str) -> None:
        """Feed search-box input; suggestions land in ``state.suggestions``."""
        if not text.strip():
            self.state.suggestions = []
        self.searcher.submit(text)

    async def _search_now(self, query: str) -> None:
        self.state.suggestions = await self.client.search_cities(query)
