"""Tests for the weather gateway: empty-result retry, merge and decoration."""

from __future__ import annotations

import logging
from datetime import date
from typing import Any

import pytest

from voice_weather.exceptions import NoData, WeatherProviderError
from voice_weather.weather.base import WeatherProvider
from voice_weather.weather.gateway import CURRENT_QUERY_UNIT, WeatherGateway


def _make_channel(**item_overrides: Any) -> dict[str, Any]:
    item = {
        "condition": {"code": "11", "temp": "12", "text": "Showers"},
        "forecast": [
            {"code": "11", "date": "19 Oct 2026", "day": "Mon", "low": "8", "high": "14"},
            {"code": "32", "date": "20 Oct 2026", "day": "Tue", "low": "6", "high": "17"},
        ],
    }
    item.update(item_overrides)
    return {
        "wind": {"chill": "50", "direction": "180", "speed": "7"},
        "atmosphere": {"humidity": "80", "pressure": "29.7", "rising": "0", "visibility": ""},
        "astronomy": {"sunrise": "7:12 am", "sunset": "6:40 pm"},
        "item": item,
    }


class _ScriptedProvider(WeatherProvider):
    """Returns queued channels per query kind and records every call."""

    def __init__(
        self,
        forecast: list[dict[str, Any] | None],
        current: list[dict[str, Any] | None],
    ) -> None:
        self.forecast = list(forecast)
        self.current = list(current)
        self.calls: list[tuple[str, str, str]] = []

    async def query_forecast(self, location_key: str, unit: str) -> dict[str, Any] | None:
        self.calls.append(("forecast", location_key, unit))
        return self.forecast.pop(0)

    async def query_current(self, location_key: str, unit: str) -> dict[str, Any] | None:
        self.calls.append(("current", location_key, unit))
        return self.current.pop(0)

    async def aclose(self) -> None:
        return None


def _make_gateway(provider: WeatherProvider) -> WeatherGateway:
    return WeatherGateway(provider, logger=logging.getLogger("test_gateway"))


@pytest.mark.asyncio
async def test_fetch_decorates_current_and_forecasts() -> None:
    provider = _ScriptedProvider([_make_channel()], [_make_channel()])

    snapshot = await _make_gateway(provider).fetch("Amsterdam", "c")

    assert snapshot.location == "Amsterdam"
    assert snapshot.unit == "c"
    assert snapshot.current.type == "shower"
    assert snapshot.current.temperature == 12
    assert snapshot.current.wind.speed == 7
    assert snapshot.current.atmosphere.visibility is None
    assert [f.forecast_date for f in snapshot.forecasts] == [date(2026, 10, 19), date(2026, 10, 20)]
    assert snapshot.forecasts[1].type == "sun"
    assert snapshot.forecast_for(date(2026, 10, 20)) is snapshot.forecasts[1]
    assert snapshot.forecast_for(date(2026, 10, 25)) is None


@pytest.mark.asyncio
async def test_current_query_always_uses_fahrenheit() -> None:
    provider = _ScriptedProvider([_make_channel()], [_make_channel()])

    await _make_gateway(provider).fetch("Amsterdam", "c")

    assert ("forecast", "Amsterdam", "c") in provider.calls
    assert ("current", "Amsterdam", CURRENT_QUERY_UNIT) in provider.calls
    assert CURRENT_QUERY_UNIT == "f"


@pytest.mark.asyncio
async def test_atmosphere_comes_from_current_query() -> None:
    current = _make_channel()
    current["atmosphere"] = {
        "humidity": "55",
        "pressure": "1021.3",
        "rising": "1",
        "visibility": "9",
    }
    provider = _ScriptedProvider([_make_channel()], [current])

    snapshot = await _make_gateway(provider).fetch("Amsterdam", "c")

    assert snapshot.current.atmosphere.pressure == 1021.3
    assert snapshot.current.atmosphere.rising == 1
    assert snapshot.current.wind.chill == 50


@pytest.mark.asyncio
async def test_empty_result_is_retried_once() -> None:
    provider = _ScriptedProvider([None, _make_channel()], [_make_channel()])

    snapshot = await _make_gateway(provider).fetch("Leiden", "c")

    assert snapshot.current.type == "shower"
    assert [call[0] for call in provider.calls].count("forecast") == 2


@pytest.mark.asyncio
async def test_two_empty_results_raise_no_data() -> None:
    provider = _ScriptedProvider([_make_channel()], [None, None])

    with pytest.raises(NoData):
        await _make_gateway(provider).fetch("Leiden", "c")

    assert [call[0] for call in provider.calls].count("current") == 2


@pytest.mark.asyncio
async def test_forecast_entries_without_code_are_skipped() -> None:
    channel = _make_channel(
        forecast=[
            {"date": "19 Oct 2026", "low": "1", "high": "2"},
            {"code": "26", "date": "20 Oct 2026", "low": "3", "high": "9"},
        ]
    )
    provider = _ScriptedProvider([channel], [_make_channel()])

    snapshot = await _make_gateway(provider).fetch("Delft", "f")

    assert len(snapshot.forecasts) == 1
    assert snapshot.forecasts[0].type == "clouds"


@pytest.mark.asyncio
async def test_malformed_forecast_rows_are_skipped(caplog: pytest.LogCaptureFixture) -> None:
    channel = _make_channel(
        forecast=[
            {"code": "11", "date": "19 Oct 2026", "low": "8", "high": "14"},
            {"code": "32", "low": "6", "high": "17"},
            {"code": "32", "date": "not a date", "low": "6", "high": "17"},
            {"code": "99", "date": "22 Oct 2026", "low": "6", "high": "17"},
        ]
    )
    provider = _ScriptedProvider([channel], [_make_channel()])

    with caplog.at_level(logging.WARNING, logger="test_gateway"):
        snapshot = await _make_gateway(provider).fetch("Delft", "c")

    assert snapshot.current.temperature == 12
    assert [f.forecast_date for f in snapshot.forecasts] == [date(2026, 10, 19)]
    assert sum("Skipping forecast row" in r.getMessage() for r in caplog.records) == 3


@pytest.mark.asyncio
async def test_unknown_condition_code_is_parse_error() -> None:
    channel = _make_channel(condition={"code": "99", "temp": "1", "text": "?"})
    provider = _ScriptedProvider([channel], [_make_channel()])

    with pytest.raises(WeatherProviderError) as exc_info:
        await _make_gateway(provider).fetch("Delft", "c")

    assert exc_info.value.category == "parse"


@pytest.mark.asyncio
async def test_unavailable_condition_code_decorates() -> None:
    channel = _make_channel(condition={"code": "3200", "temp": "4", "text": "not available"})
    provider = _ScriptedProvider([channel], [_make_channel()])

    snapshot = await _make_gateway(provider).fetch("Delft", "c")

    assert snapshot.current.code == 3200
    assert snapshot.current.type == "unavailable"


@pytest.mark.asyncio
async def test_missing_item_is_parse_error() -> None:
    channel = _make_channel()
    del channel["item"]
    provider = _ScriptedProvider([channel], [_make_channel()])

    with pytest.raises(WeatherProviderError) as exc_info:
        await _make_gateway(provider).fetch("Delft", "c")

    assert exc_info.value.category == "parse"
