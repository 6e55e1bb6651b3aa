"""Plain text rendering of weather records for the CLI."""

import json
from datetime import UTC, date, datetime, timedelta

from skyview.ingest.icons import weather_icon
from skyview.models.common import EpochMillis, round_half_up
from skyview.models.preferences import FavoriteCity, Unit
from skyview.models.weather import CitySuggestion, CurrentWeather, DailyForecast


def to_unit(celsius: int, unit: Unit) -> int:
    if unit == Unit.FAHRENHEIT:
        return round_half_up(celsius * 9 / 5 + 32)
    return celsius


def unit_symbol(unit: Unit) -> str:
    return "°F" if unit == Unit.FAHRENHEIT else "°C"


def local_datetime(timestamp: EpochMillis, utc_offset: int = 0) -> datetime:
    return datetime.fromtimestamp(timestamp / 1000, tz=UTC) + timedelta(seconds=utc_offset)


def format_date(timestamp: EpochMillis, utc_offset: int = 0) -> str:
    """E.g. 'Tuesday, February 10, 2026 at 02:30 PM'."""
    return local_datetime(timestamp, utc_offset).strftime("%A, %B %d, %Y at %I:%M %p")


def day_name(timestamp: EpochMillis, utc_offset: int = 0, today: date | None = None) -> str:
    """'Today', 'Tomorrow', or the weekday name."""
    day = local_datetime(timestamp, utc_offset).date()
    if today is None:
        today = local_datetime(int(datetime.now(UTC).timestamp() * 1000), utc_offset).date()
    if day == today:
        return "Today"
    if day == today + timedelta(days=1):
        return "Tomorrow"
    return day.strftime("%A")


def format_current_text(w: CurrentWeather, unit: Unit = Unit.CELSIUS) -> str:
    sym = unit_symbol(unit)
    lines = [
        f"{w.city}, {w.country}",
        format_date(w.timestamp, w.utc_offset),
        f"{weather_icon(w.icon_code)}  {to_unit(w.temperature, unit)}{sym}  {w.description}",
        f"Feels like: {to_unit(w.feels_like, unit)}{sym} | Humidity: {w.humidity}% | "
        f"Wind: {w.wind_speed} km/h | Pressure: {w.pressure} hPa",
    ]
    return "\n".join(lines)


def format_forecast_text(
    days: list[DailyForecast],
    unit: Unit = Unit.CELSIUS,
    utc_offset: int = 0,
    today: date | None = None,
) -> str:
    sym = unit_symbol(unit)
    lines = []
    for d in days:
        s = d.sample
        lines.append(
            f"{day_name(s.timestamp, utc_offset, today):<10} {weather_icon(s.icon_code)}  "
            f"{to_unit(s.temperature_max, unit)}{sym} / {to_unit(s.temperature_min, unit)}{sym}  "
            f"{s.description}"
        )
    return "\n".join(lines)


def format_favorites_text(favorites: list[FavoriteCity], unit: Unit = Unit.CELSIUS) -> str:
    if not favorites:
        return "No favorite cities yet"
    sym = unit_symbol(unit)
    return "\n".join(
        f"{f.name}, {f.country}  {to_unit(f.temperature, unit)}{sym} {weather_icon(f.icon_code)}"
        for f in favorites
    )


def format_suggestions_text(cities: list[CitySuggestion]) -> str:
    if not cities:
        return "No matching cities"
    return "\n".join(
        f"{c.name}, {c.country} ({c.coordinates.lat:.2f}, {c.coordinates.lon:.2f})"
        for c in cities
    )


def format_stats_json(stats: dict) -> str:
    return json.dumps(stats, indent=2)
