"""OpenWeatherMap icon codes mapped to display symbols."""

FALLBACK_ICON = "\U0001F321️"  # thermometer

ICON_MAP: dict[str, str] = {
    "01d": "☀️",  # clear sky
    "01n": "\U0001F319",
    "02d": "⛅",  # few clouds
    "02n": "☁️",
    "03d": "☁️",  # scattered clouds
    "03n": "☁️",
    "04d": "☁️",  # broken clouds
    "04n": "☁️",
    "09d": "\U0001F327️",  # shower rain
    "09n": "\U0001F327️",
    "10d": "\U0001F326️",  # rain
    "10n": "\U0001F327️",
    "11d": "⛈️",  # thunderstorm
    "11n": "⛈️",
    "13d": "❄️",  # snow
    "13n": "❄️",
    "50d": "\U0001F32B️",  # mist
    "50n": "\U0001F32B️",
}


def weather_icon(icon_code: str | None) -> str:
    """Symbol for a provider icon code. Unknown codes get the fallback."""
    if not isinstance(icon_code, str):
        return FALLBACK_ICON
    return ICON_MAP.get(icon_code, FALLBACK_ICON)
