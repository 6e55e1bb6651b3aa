"""Location sensing: provider protocol and geolocation failures."""

from typing import Protocol

from skyview.models.weather import Coordinates


class GeolocationError(Exception):
    """Base class for location-sensing failures."""

    message = "Unable to retrieve your location"

    def __init__(self, message: str | None = None):
        super().__init__(message or self.message)


class GeolocationUnsupported(GeolocationError):
    message = "Geolocation is not supported on this system"


class GeolocationPermissionDenied(GeolocationError):
    message = "Location permission denied. Please enable location access."


class GeolocationUnavailable(GeolocationError):
    message = "Location information is unavailable."


class GeolocationTimeout(GeolocationError):
    message = "Location request timed out."


class LocationProvider(Protocol):
    async def locate(self) -> Coordinates: ...


class StaticLocationProvider:
    """Returns fixed coordinates, e.g. supplied on the command line."""

    def __init__(self, lat: float, lon: float):
        if not -90.0 <= lat <= 90.0 or not -180.0 <= lon <= 180.0:
            raise GeolocationUnavailable(
                f"Coordinates out of range: lat={lat}, lon={lon}"
            )
        self.coordinates = Coordinates(lat=lat, lon=lon)

    async def locate(self) -> Coordinates:
        return self.coordinates
