"""Yahoo YQL weather provider implementation."""

from __future__ import annotations

import asyncio
import logging
from typing import Any

import httpx

from ..config import Settings
from ..exceptions import WeatherProviderError
from ..redaction import sanitize_text
from .base import TemperatureUnit, WeatherProvider

_FORECAST_QUERY = (
    'select * from weather.forecast where woeid in '
    '(select woeid from geo.places(1) where text="{location}") and u="{unit}"'
)


def build_query(location_key: str, unit: TemperatureUnit) -> str:
    """Build a place-name based YQL forecast query."""
    safe_location = location_key.replace('"', "").strip()
    return _FORECAST_QUERY.format(location=safe_location, unit=unit)


class YahooWeatherProvider(WeatherProvider):
    """Queries forecast and current-condition channels through YQL."""

    provider_name = "yahoo"

    def __init__(
        self,
        settings: Settings,
        logger: logging.Logger | None = None,
        max_retries: int = 1,
        retry_delay_seconds: float = 1.0,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self.settings = settings
        self.logger = logger or logging.getLogger("voice_weather.weather.yahoo")
        self._base_url = str(settings.weather_api_base_url)
        self._max_retries = max_retries
        self._retry_delay = retry_delay_seconds
        self._client = client or httpx.AsyncClient(
            timeout=settings.weather_timeout_seconds,
            headers={"Accept": "application/json"},
        )

    async def __aenter__(self) -> YahooWeatherProvider:
        return self

    async def __aexit__(self, exc_type: Any, exc: Any, exc_tb: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def query_forecast(
        self, location_key: str, unit: TemperatureUnit
    ) -> dict[str, Any] | None:
        payload = await self._request_json(build_query(location_key, unit), context="forecast")
        return self._extract_channel(payload, context="forecast")

    async def query_current(
        self, location_key: str, unit: TemperatureUnit
    ) -> dict[str, Any] | None:
        payload = await self._request_json(build_query(location_key, unit), context="current")
        return self._extract_channel(payload, context="current")

    async def _request_json(self, yql: str, context: str) -> dict[str, Any]:
        params = {"q": yql, "format": "json"}
        last_error: Exception | None = None
        for attempt in range(self._max_retries + 1):
            try:
                response = await self._client.get(self._base_url, params=params)
                response.raise_for_status()
            except httpx.HTTPStatusError as exc:
                status = exc.response.status_code
                # Don't retry 4xx client errors except 429 rate-limit.
                if 400 <= status < 500 and status != 429:
                    raise WeatherProviderError(
                        f"Weather {context} query failed with status {status}: "
                        f"{sanitize_text(exc.response.text[:300])}",
                        category="http_status",
                        status_code=status,
                    ) from exc
                last_error = exc
                if attempt < self._max_retries:
                    self.logger.warning(
                        "Weather %s query failed (HTTP %d); retrying", context, status
                    )
                    await asyncio.sleep(self._retry_delay)
                    continue
                raise WeatherProviderError(
                    f"Weather {context} query failed with status {status}: "
                    f"{sanitize_text(exc.response.text[:300])}",
                    category="http_status",
                    status_code=status,
                ) from exc
            except httpx.HTTPError as exc:
                last_error = exc
                if attempt < self._max_retries:
                    self.logger.warning(
                        "Weather %s request failed (%s); retrying",
                        context, type(exc).__name__,
                    )
                    await asyncio.sleep(self._retry_delay)
                    continue
                raise WeatherProviderError(
                    f"Weather {context} request failed: {sanitize_text(str(exc))}",
                    category="transport",
                ) from exc

            try:
                payload = response.json()
            except ValueError as exc:
                raise WeatherProviderError(
                    f"Weather {context} query returned non-JSON response.",
                    category="parse",
                ) from exc

            if not isinstance(payload, dict):
                raise WeatherProviderError(
                    f"Weather {context} query returned unexpected payload type "
                    f"{type(payload).__name__}.",
                    category="parse",
                )
            return payload

        raise WeatherProviderError(f"Weather {context} query failed after retries: {last_error}")

    @staticmethod
    def _extract_channel(payload: dict[str, Any], context: str) -> dict[str, Any] | None:
        query = payload.get("query")
        if not isinstance(query, dict):
            raise WeatherProviderError(
                f"Weather {context} payload missing 'query' object.", category="parse"
            )
        results = query.get("results")
        if not results:
            return None
        if not isinstance(results, dict):
            raise WeatherProviderError(
                f"Weather {context} payload 'query.results' is not an object.", category="parse"
            )
        channel = results.get("channel")
        # Multiple matching places come back as a list; geo.places(1) keeps the first.
        if isinstance(channel, list):
            channel = channel[0] if channel else None
        if not channel:
            return None
        if not isinstance(channel, dict):
            raise WeatherProviderError(
                f"Weather {context} payload 'channel' is not an object.", category="parse"
            )
        return channel
