"""Payload formatters: raw OpenWeatherMap JSON to display-ready records."""

import logging
from collections.abc import Iterable
from datetime import UTC, datetime, timedelta

from skyview.models.common import round_half_up, seconds_to_ms
from skyview.models.weather import (
    CitySuggestion,
    Coordinates,
    CurrentWeather,
    DailyForecast,
    WeatherSample,
)

logger = logging.getLogger(__name__)

FORECAST_DAYS = 5
NOON_HOUR = 12
KMH_PER_MS = 3.6


class MalformedPayloadError(ValueError):
    """Raised when a provider payload lacks fields the formatter needs."""


def wind_kmh(speed_ms: float) -> int:
    """Convert wind speed from m/s to km/h, rounded."""
    return round_half_up(speed_ms * KMH_PER_MS)


def format_current_weather(payload: dict) -> CurrentWeather:
    """Map a /weather response to CurrentWeather."""
    try:
        main = payload["main"]
        sys = payload["sys"]
        condition = payload["weather"][0]
        return CurrentWeather(
            city=payload["name"],
            country=sys["country"],
            temperature=round_half_up(main["temp"]),
            feels_like=round_half_up(main["feels_like"]),
            humidity=main["humidity"],
            pressure=main["pressure"],
            wind_speed=wind_kmh(payload["wind"]["speed"]),
            description=condition["description"],
            condition=condition["main"],
            icon_code=condition["icon"],
            timestamp=seconds_to_ms(payload["dt"]),
            sunrise=seconds_to_ms(sys["sunrise"]),
            sunset=seconds_to_ms(sys["sunset"]),
            coordinates=_coordinates(payload["coord"]),
            utc_offset=int(payload.get("timezone", 0)),
        )
    except (KeyError, IndexError, TypeError) as e:
        raise MalformedPayloadError(f"Malformed current weather payload: {e!r}") from e


def format_city_suggestion(payload: dict) -> CitySuggestion:
    try:
        return CitySuggestion(
            name=payload["name"],
            country=payload["sys"]["country"],
            coordinates=_coordinates(payload["coord"]),
        )
    except (KeyError, TypeError) as e:
        raise MalformedPayloadError(f"Malformed city payload: {e!r}") from e


def format_forecast(payload: dict, max_days: int = FORECAST_DAYS) -> list[DailyForecast]:
    """Map a /forecast response to one DailyForecast per local calendar day."""
    try:
        city = payload.get("city") or {}
        coords = _coordinates(city["coord"]) if "coord" in city else None
        utc_offset = int(city.get("timezone", 0))
        samples = [_parse_sample(item, coords) for item in payload["list"]]
    except (KeyError, IndexError, TypeError, AttributeError) as e:
        raise MalformedPayloadError(f"Malformed forecast payload: {e!r}") from e
    return aggregate_by_day(samples, utc_offset=utc_offset, max_days=max_days)


def aggregate_by_day(
    samples: Iterable[WeatherSample],
    utc_offset: int = 0,
    max_days: int = FORECAST_DAYS,
) -> list[DailyForecast]:
    """Pick the sample closest to local noon for each calendar day.

    Samples are bucketed by date in the provider's local time (UTC shifted by
    ``utc_offset`` seconds). Within a day a later sample only replaces the
    kept one when it is strictly closer to noon, so ties keep the first seen.
    Returns at most ``max_days`` entries ordered by date.
    """
    best: dict[str, tuple[int, WeatherSample]] = {}

    for sample in samples:
        local = _local_time(sample.timestamp, utc_offset)
        date_key = local.date().isoformat()
        distance = abs(local.hour - NOON_HOUR)

        current = best.get(date_key)
        if current is None or distance < current[0]:
            best[date_key] = (distance, sample)

    days = [
        DailyForecast(date=date_key, sample=sample)
        for date_key, (_, sample) in sorted(best.items())
    ]
    if len(days) > max_days:
        logger.debug("Truncating %d forecast days to %d", len(days), max_days)
    return days[:max_days]


def _parse_sample(item: dict, coords: Coordinates | None) -> WeatherSample:
    main = item["main"]
    condition = item["weather"][0]
    return WeatherSample(
        timestamp=seconds_to_ms(item["dt"]),
        temperature=round_half_up(main["temp"]),
        temperature_min=round_half_up(main["temp_min"]),
        temperature_max=round_half_up(main["temp_max"]),
        humidity=main["humidity"],
        pressure=main["pressure"],
        wind_speed=wind_kmh(item["wind"]["speed"]),
        description=condition["description"],
        condition=condition["main"],
        icon_code=condition["icon"],
        coordinates=coords,
    )


def _coordinates(raw: dict) -> Coordinates:
    return Coordinates(lat=float(raw["lat"]), lon=float(raw["lon"]))


def _local_time(timestamp_ms: int, utc_offset: int) -> datetime:
    return datetime.fromtimestamp(timestamp_ms / 1000, tz=UTC) + timedelta(
        seconds=utc_offset
    )
