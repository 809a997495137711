"""Location resolution: device position, reverse geocoding, spoken overrides."""

from __future__ import annotations

import logging
from typing import Any

import httpx

from .config import Settings
from .exceptions import LocationUnresolvable
from .host import GeolocationService, ReverseGeocoder
from .models import Coordinates, Location
from .redaction import sanitize_for_logging, sanitize_text


class GoogleReverseGeocoder:
    """Reverse geocoder backed by the Google Maps Geocoding API."""

    def __init__(
        self,
        settings: Settings,
        logger: logging.Logger | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self.settings = settings
        self.logger = logger or logging.getLogger("voice_weather.location")
        self._base_url = str(settings.geocoder_base_url)
        self._client = client or httpx.AsyncClient(timeout=settings.weather_timeout_seconds)

    async def aclose(self) -> None:
        await self._client.aclose()

    async def reverse(self, latitude: float, longitude: float) -> str:
        params: dict[str, Any] = {
            "latlng": f"{latitude:.6f},{longitude:.6f}",
            "result_type": "locality",
            "location_type": "APPROXIMATE",
            "language": self.settings.geocoder_language,
        }
        if self.settings.geocoder_api_key:
            params["key"] = self.settings.geocoder_api_key
        self.logger.debug("Reverse geocoding request params=%s", sanitize_for_logging(params))

        try:
            response = await self._client.get(self._base_url, params=params)
            response.raise_for_status()
            payload = response.json()
        except httpx.HTTPError as exc:
            raise LocationUnresolvable(
                f"Reverse geocoding request failed: {sanitize_text(str(exc))}"
            ) from exc
        except ValueError as exc:
            raise LocationUnresolvable("Reverse geocoding returned non-JSON response.") from exc

        return self._extract_place_name(payload)

    @staticmethod
    def _extract_place_name(payload: Any) -> str:
        results = payload.get("results") if isinstance(payload, dict) else None
        if not isinstance(results, list) or not results:
            status = payload.get("status") if isinstance(payload, dict) else None
            raise LocationUnresolvable(f"Reverse geocoding found no locality (status={status}).")
        components = results[0].get("address_components") if isinstance(results[0], dict) else None
        if not isinstance(components, list) or not components:
            raise LocationUnresolvable("Reverse geocoding result has no address components.")
        name = components[0].get("long_name") if isinstance(components[0], dict) else None
        if not isinstance(name, str) or not name.strip():
            raise LocationUnresolvable("Reverse geocoding result has no place name.")
        return name.strip()


class DefaultLocationCache:
    """Process-wide last known device position.

    Updated only after a successful geolocation fetch; read only as a fallback
    when the device position cannot be obtained for a request.
    """

    def __init__(self, initial: Location | None = None) -> None:
        self._location = initial

    @classmethod
    def from_settings(cls, settings: Settings) -> DefaultLocationCache:
        if settings.weather_default_lat is not None and settings.weather_default_lon is not None:
            return cls(
                Location.from_coordinates(settings.weather_default_lat, settings.weather_default_lon)
            )
        if settings.weather_default_location:
            return cls(Location.from_name(settings.weather_default_location))
        return cls()

    @property
    def location(self) -> Location | None:
        return self._location

    def update(self, coordinates: Coordinates) -> None:
        self._location = Location(coordinates=coordinates)


class LocationResolver:
    """Turns a ``Location`` into the place-name key used in weather queries."""

    def __init__(
        self,
        geocoder: ReverseGeocoder,
        geolocation: GeolocationService | None = None,
        cache: DefaultLocationCache | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        self.geocoder = geocoder
        self.geolocation = geolocation
        self.cache = cache or DefaultLocationCache()
        self.logger = logger or logging.getLogger("voice_weather.location")

    async def resolve(self, location: Location) -> str:
        """Return the location key for a name or coordinates."""
        if location.name is not None:
            return location.name
        if location.coordinates is None:
            raise LocationUnresolvable("Location carries neither a name nor coordinates.")
        try:
            return await self.geocoder.reverse(
                location.coordinates.latitude, location.coordinates.longitude
            )
        except LocationUnresolvable:
            raise
        except Exception as exc:
            raise LocationUnresolvable(f"Reverse geocoding failed: {exc}") from exc

    async def current_location(self, override: str | None = None) -> Location:
        """Pick the location for a request.

        A spoken override wins unconditionally. Otherwise the device position
        is asked for; when that fails, the cached default is used.
        """
        if override is not None and override.strip():
            return Location.from_name(override)

        if self.geolocation is not None:
            try:
                coordinates = await self.geolocation.get_current_location()
            except Exception as exc:
                self.logger.warning("Geolocation unavailable (%s); using cached default", exc)
            else:
                self.cache.update(coordinates)
                return Location(coordinates=coordinates)

        cached = self.cache.location
        if cached is None:
            raise LocationUnresolvable("No device location and no default location available.")
        return cached

    async def resolve_current(self, override: str | None = None) -> str:
        return await self.resolve(await self.current_location(override))
