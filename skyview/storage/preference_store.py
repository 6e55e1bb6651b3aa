"""JSON preference store over a key/value text store.

Failures to encode, decode or write never escape this module: ``save`` and
friends return False and ``load`` returns None, so callers treat every call
as best-effort. Favorite-list updates are read-modify-write over the whole
list and assume a single writer.
"""

import dataclasses
import json
import logging
from collections.abc import Callable
from typing import Any

from skyview.models.common import EpochMillis, now_ms
from skyview.models.preferences import FavoriteCity, LastCity, Preferences, Theme, Unit
from skyview.models.weather import Coordinates, CurrentWeather
from skyview.storage.kv_store import KeyValueStore

logger = logging.getLogger(__name__)

STORAGE_KEYS: dict[str, str] = {
    "LAST_CITY": "weather_last_city",
    "FAVORITE_CITIES": "weather_favorite_cities",
    "THEME": "weather_theme",
    "UNIT": "weather_unit",
    "LAST_UPDATE": "weather_last_update",
}

DEFAULT_REFRESH_MINUTES = 10


class PreferenceStore:
    def __init__(
        self,
        backend: KeyValueStore,
        clock: Callable[[], EpochMillis] = now_ms,
    ):
        self.backend = backend
        self.clock = clock

    # --- Generic JSON access ---

    def save(self, key: str, value: Any) -> bool:
        try:
            self.backend.set_item(key, json.dumps(value))
            return True
        except Exception as e:
            logger.warning("Failed to save %s: %s", key, e)
            return False

    def load(self, key: str) -> Any | None:
        try:
            item = self.backend.get_item(key)
            return json.loads(item) if item else None
        except Exception as e:
            logger.warning("Failed to read %s: %s", key, e)
            return None

    def remove(self, key: str) -> bool:
        try:
            self.backend.remove_item(key)
            return True
        except Exception as e:
            logger.warning("Failed to remove %s: %s", key, e)
            return False

    def clear(self) -> bool:
        """Remove every key this app owns. Other keys are left alone."""
        try:
            for key in STORAGE_KEYS.values():
                self.backend.remove_item(key)
            return True
        except Exception as e:
            logger.warning("Failed to clear storage: %s", e)
            return False

    # --- Last city ---

    def save_last_city(self, name: str) -> bool:
        return self.save(
            STORAGE_KEYS["LAST_CITY"], {"name": name, "timestamp": self.clock()}
        )

    def get_last_city(self) -> LastCity | None:
        data = self.load(STORAGE_KEYS["LAST_CITY"])
        if not isinstance(data, dict) or not data.get("name"):
            return None
        return LastCity(name=data["name"], timestamp=data.get("timestamp", 0))

    # --- Favorites ---

    def get_favorite_cities(self) -> list[FavoriteCity]:
        raw = self.load(STORAGE_KEYS["FAVORITE_CITIES"])
        if not isinstance(raw, list):
            return []
        favorites = []
        for entry in raw:
            try:
                favorites.append(FavoriteCity.from_dict(entry))
            except (KeyError, TypeError, AttributeError) as e:
                logger.warning("Skipping malformed favorite %r: %s", entry, e)
        return favorites

    def is_favorite_city(self, name: str) -> bool:
        return any(fav.matches(name) for fav in self.get_favorite_cities())

    def add_favorite_city(
        self,
        name: str,
        country: str = "",
        temperature: int = 0,
        icon_code: str = "",
        coordinates: Coordinates | None = None,
    ) -> bool:
        """Pin a city. Returns False if a case-insensitive match already exists."""
        favorites = self.get_favorite_cities()
        if any(fav.matches(name) for fav in favorites):
            logger.info("%s is already a favorite", name)
            return False
        favorites.append(
            FavoriteCity(
                name=name,
                country=country,
                temperature=temperature,
                icon_code=icon_code,
                coordinates=coordinates,
                added_at=self.clock(),
            )
        )
        return self._save_favorites(favorites)

    def remove_favorite_city(self, name: str) -> bool:
        favorites = [fav for fav in self.get_favorite_cities() if not fav.matches(name)]
        return self._save_favorites(favorites)

    def update_favorite_city_weather(self, name: str, weather: CurrentWeather) -> bool:
        """Refresh a favorite's cached weather. False if it is not a favorite."""
        favorites = self.get_favorite_cities()
        for i, fav in enumerate(favorites):
            if fav.matches(name):
                favorites[i] = dataclasses.replace(
                    fav,
                    country=weather.country,
                    temperature=weather.temperature,
                    icon_code=weather.icon_code,
                    coordinates=weather.coordinates,
                    last_updated=self.clock(),
                )
                return self._save_favorites(favorites)
        return False

    def _save_favorites(self, favorites: list[FavoriteCity]) -> bool:
        return self.save(
            STORAGE_KEYS["FAVORITE_CITIES"], [fav.to_dict() for fav in favorites]
        )

    # --- Theme / unit ---

    def save_theme(self, theme: Theme | str) -> bool:
        return self.save(STORAGE_KEYS["THEME"], Theme(theme).value)

    def get_theme(self) -> Theme | None:
        value = self.load(STORAGE_KEYS["THEME"])
        try:
            return Theme(value) if value else None
        except ValueError:
            logger.warning("Ignoring unknown stored theme %r", value)
            return None

    def save_unit(self, unit: Unit | str) -> bool:
        return self.save(STORAGE_KEYS["UNIT"], Unit(unit).value)

    def get_unit(self) -> Unit:
        value = self.load(STORAGE_KEYS["UNIT"])
        try:
            return Unit(value) if value else Unit.CELSIUS
        except ValueError:
            logger.warning("Ignoring unknown stored unit %r", value)
            return Unit.CELSIUS

    # --- Refresh tracking ---

    def save_last_update(self, timestamp: EpochMillis | None = None) -> bool:
        return self.save(
            STORAGE_KEYS["LAST_UPDATE"],
            self.clock() if timestamp is None else timestamp,
        )

    def get_last_update(self) -> EpochMillis | None:
        value = self.load(STORAGE_KEYS["LAST_UPDATE"])
        return value if isinstance(value, int) else None

    def needs_refresh(self, threshold_minutes: float = DEFAULT_REFRESH_MINUTES) -> bool:
        """True if nothing was recorded or the last update is older than the threshold."""
        last_update = self.get_last_update()
        if last_update is None:
            return True
        return self.clock() - last_update > threshold_minutes * 60 * 1000

    # --- Snapshot / maintenance ---

    def preferences(self) -> Preferences:
        return Preferences(
            unit=self.get_unit(),
            theme=self.get_theme(),
            last_city=self.get_last_city(),
            last_update=self.get_last_update(),
            favorites=self.get_favorite_cities(),
        )

    def storage_stats(self) -> dict | None:
        """Byte usage per app key plus totals."""
        try:
            items = {}
            total = 0
            for name, key in STORAGE_KEYS.items():
                item = self.backend.get_item(key)
                size = len(item.encode()) if item else 0
                items[name] = {"key": key, "size": size, "size_kb": f"{size / 1024:.2f}"}
                total += size
            return {
                "items": items,
                "total_size": total,
                "total_size_kb": f"{total / 1024:.2f}",
                "total_size_mb": f"{total / 1024 / 1024:.2f}",
            }
        except Exception as e:
            logger.warning("Failed to compute storage stats: %s", e)
            return None

    def export_data(self) -> dict[str, Any]:
        return {name: self.load(key) for name, key in STORAGE_KEYS.items()}

    def import_data(self, data: dict[str, Any]) -> bool:
        """Write back every known key present in ``data``. Unknown names are ignored."""
        ok = True
        for name, key in STORAGE_KEYS.items():
            if name in data and data[name] is not None:
                ok = self.save(key, data[name]) and ok
        return ok
