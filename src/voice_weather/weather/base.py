"""Provider-agnostic weather interface."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Literal

TemperatureUnit = Literal["c", "f"]


class WeatherProvider(ABC):
    """Base contract for weather providers queried by the gateway.

    Both queries return the provider's channel payload, or ``None`` when the
    provider answered with a structurally empty result.
    """

    @abstractmethod
    async def query_forecast(
        self, location_key: str, unit: TemperatureUnit
    ) -> dict[str, Any] | None:
        """Query the multi-day forecast for a location."""

    @abstractmethod
    async def query_current(
        self, location_key: str, unit: TemperatureUnit
    ) -> dict[str, Any] | None:
        """Query current conditions for a location."""

    @abstractmethod
    async def aclose(self) -> None:
        """Release provider resources."""
