"""User preference models persisted by the preference store."""

from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any

from skyview.models.common import EpochMillis
from skyview.models.weather import Coordinates


class Theme(StrEnum):
    LIGHT = "light"
    DARK = "dark"


class Unit(StrEnum):
    CELSIUS = "celsius"
    FAHRENHEIT = "fahrenheit"


@dataclass(frozen=True)
class LastCity:
    name: str
    timestamp: EpochMillis


@dataclass(frozen=True)
class FavoriteCity:
    name: str
    country: str
    temperature: int
    icon_code: str
    coordinates: Coordinates | None
    added_at: EpochMillis
    last_updated: EpochMillis | None = None

    def matches(self, name: str) -> bool:
        return self.name.lower() == name.lower()

    def to_dict(self) -> dict[str, Any]:
        coords = None
        if self.coordinates is not None:
            coords = {"lat": self.coordinates.lat, "lon": self.coordinates.lon}
        return {
            "name": self.name,
            "country": self.country,
            "temperature": self.temperature,
            "icon": self.icon_code,
            "coords": coords,
            "addedAt": self.added_at,
            "lastUpdated": self.last_updated,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "FavoriteCity":
        if not isinstance(data, dict) or not isinstance(data.get("name"), str):
            raise TypeError(f"Favorite entry needs a string name: {data!r}")
        coords = data.get("coords")
        return cls(
            name=data["name"],
            country=data.get("country", ""),
            temperature=data.get("temperature", 0),
            icon_code=data.get("icon", ""),
            coordinates=(
                Coordinates(lat=coords["lat"], lon=coords["lon"]) if coords else None
            ),
            added_at=data["addedAt"],
            last_updated=data.get("lastUpdated"),
        )


@dataclass(frozen=True)
class Preferences:
    unit: Unit = Unit.CELSIUS
    theme: Theme | None = None
    last_city: LastCity | None = None
    last_update: EpochMillis | None = None
    favorites: list[FavoriteCity] = field(default_factory=list)
