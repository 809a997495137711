"""Weather data gateway: concurrent queries, empty-result retry, decoration."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from datetime import UTC, datetime
from typing import Any

from pydantic import ValidationError

from ..conditions import lookup
from ..exceptions import NoData, UnknownConditionCode, WeatherProviderError
from .base import TemperatureUnit, WeatherProvider
from .models import Astronomy, Atmosphere, CurrentReading, ForecastReading, WeatherSnapshot, Wind

# The provider only reports atmosphere/pressure correctly for Fahrenheit queries.
CURRENT_QUERY_UNIT: TemperatureUnit = "f"

_Query = Callable[[str, TemperatureUnit], Awaitable[dict[str, Any] | None]]


class WeatherGateway:
    """Fetches forecast + current conditions and returns a decorated snapshot."""

    def __init__(self, provider: WeatherProvider, logger: logging.Logger | None = None) -> None:
        self.provider = provider
        self.logger = logger or logging.getLogger("voice_weather.weather.gateway")

    async def fetch(self, location_key: str, temp_unit: TemperatureUnit) -> WeatherSnapshot:
        """Fetch and decorate weather for a resolved location key.

        Both queries run concurrently and are awaited together; nothing is
        merged or decorated until both have produced a channel.
        """
        forecast_channel, current_channel = await asyncio.gather(
            self._query_once_more_if_empty(
                self.provider.query_forecast, location_key, temp_unit, "forecast"
            ),
            self._query_once_more_if_empty(
                self.provider.query_current, location_key, CURRENT_QUERY_UNIT, "current"
            ),
        )

        merged = dict(forecast_channel)
        merged["atmosphere"] = current_channel.get("atmosphere")
        return self._decorate(merged, location_key=location_key, unit=temp_unit)

    async def _query_once_more_if_empty(
        self,
        query: _Query,
        location_key: str,
        unit: TemperatureUnit,
        context: str,
    ) -> dict[str, Any]:
        channel = await query(location_key, unit)
        if channel is None:
            self.logger.info("Empty %s result for %s; retrying once", context, location_key)
            channel = await query(location_key, unit)
        if channel is None:
            raise NoData(f"Provider returned no {context} data for {location_key!r}.")
        return channel

    def _decorate(self, channel: dict[str, Any], *, location_key: str, unit: str) -> WeatherSnapshot:
        item = channel.get("item")
        if not isinstance(item, dict):
            raise WeatherProviderError("Weather payload missing 'item' object.", category="parse")
        condition = item.get("condition")
        if not isinstance(condition, dict):
            raise WeatherProviderError(
                "Weather payload missing 'item.condition' object.", category="parse"
            )
        raw_forecasts = item.get("forecast")
        if raw_forecasts is None:
            raw_forecasts = []
        if not isinstance(raw_forecasts, list):
            raise WeatherProviderError(
                "Weather payload 'item.forecast' is not a list.", category="parse"
            )

        forecasts = self._forecast_readings(raw_forecasts, location_key)
        try:
            current = CurrentReading(
                code=int(condition.get("code")),
                condition=lookup(condition.get("code")),
                description=condition.get("text"),
                temperature=condition.get("temp"),
                wind=Wind.model_validate(channel.get("wind") or {}),
                atmosphere=Atmosphere.model_validate(channel.get("atmosphere") or {}),
                astronomy=Astronomy.model_validate(channel.get("astronomy") or {}),
            )
        except (ValidationError, UnknownConditionCode, TypeError, ValueError) as exc:
            raise WeatherProviderError(
                f"Weather payload could not be decorated: {exc}", category="parse"
            ) from exc

        return WeatherSnapshot(
            location=location_key,
            unit=unit,
            retrieval_timestamp=datetime.now(UTC),
            current=current,
            forecasts=forecasts,
        )

    def _forecast_readings(
        self, raw_forecasts: list[Any], location_key: str
    ) -> list[ForecastReading]:
        readings: list[ForecastReading] = []
        for index, entry in enumerate(raw_forecasts):
            if not isinstance(entry, dict) or entry.get("code") is None:
                continue
            try:
                readings.append(self._forecast_reading(entry))
            except (ValidationError, UnknownConditionCode, TypeError, ValueError) as exc:
                self.logger.warning(
                    "Skipping forecast row %s for %s: %s", index, location_key, exc
                )
        return readings

    @staticmethod
    def _forecast_reading(entry: dict[str, Any]) -> ForecastReading:
        return ForecastReading(
            code=int(entry["code"]),
            condition=lookup(entry["code"]),
            description=entry.get("text"),
            forecast_date=entry.get("date"),
            day=entry.get("day"),
            low=entry.get("low"),
            high=entry.get("high"),
        )
