"""Weather data models produced from provider payloads."""

from dataclasses import dataclass

from skyview.models.common import EpochMillis


@dataclass(frozen=True)
class Coordinates:
    lat: float
    lon: float


@dataclass(frozen=True)
class WeatherSample:
    timestamp: EpochMillis
    temperature: int
    temperature_min: int
    temperature_max: int
    humidity: int
    pressure: int
    wind_speed: int  # km/h
    description: str
    condition: str
    icon_code: str
    coordinates: Coordinates | None = None


@dataclass(frozen=True)
class DailyForecast:
    date: str  # YYYY-MM-DD, provider local calendar
    sample: WeatherSample

    @property
    def timestamp(self) -> EpochMillis:
        return self.sample.timestamp

    @property
    def temperature_min(self) -> int:
        return self.sample.temperature_min

    @property
    def temperature_max(self) -> int:
        return self.sample.temperature_max


@dataclass(frozen=True)
class CurrentWeather:
    city: str
    country: str
    temperature: int
    feels_like: int
    humidity: int
    pressure: int
    wind_speed: int  # km/h
    description: str
    condition: str
    icon_code: str
    timestamp: EpochMillis
    sunrise: EpochMillis
    sunset: EpochMillis
    coordinates: Coordinates
    utc_offset: int = 0  # seconds east of UTC


@dataclass(frozen=True)
class CitySuggestion:
    name: str
    country: str
    coordinates: Coordinates
