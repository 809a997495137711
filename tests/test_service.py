"""Tests for service wiring: start, polling, trigger forwarding and shutdown."""

from __future__ import annotations

import asyncio
import logging
import random
from types import SimpleNamespace
from typing import Any

import pytest
from rich.console import Console

from voice_weather.host import ConsoleAutomationBus, StaticGeolocation
from voice_weather.models import Coordinates
from voice_weather.service import WeatherService
from voice_weather.weather.base import WeatherProvider


def _make_settings(**overrides: Any) -> SimpleNamespace:
    values: dict[str, Any] = {
        "weather_temp_unit": "c",
        "weather_default_lat": None,
        "weather_default_lon": None,
        "weather_default_location": "Utrecht",
        "poll_interval_seconds": 0.01,
        "polling_enabled": True,
        "response_timeout_seconds": 5.0,
    }
    values.update(overrides)
    return SimpleNamespace(**values)


def _make_channel() -> dict[str, Any]:
    return {
        "wind": {"chill": "50", "direction": "180", "speed": "7"},
        "atmosphere": {"humidity": "80", "pressure": "1015", "rising": "1"},
        "astronomy": {"sunrise": "7:12 am", "sunset": "6:40 pm"},
        "item": {
            "condition": {"code": "26", "temp": "11", "text": "Cloudy"},
            "forecast": [{"code": "26", "date": "19 Oct 2026", "low": "7", "high": "13"}],
        },
    }


class _CountingProvider(WeatherProvider):
    def __init__(self) -> None:
        self.locations: list[str] = []
        self.closed = False

    async def query_forecast(self, location_key: str, unit: str) -> dict[str, Any] | None:
        self.locations.append(location_key)
        return _make_channel()

    async def query_current(self, location_key: str, unit: str) -> dict[str, Any] | None:
        return _make_channel()

    async def aclose(self) -> None:
        self.closed = True


class _ClosableGeocoder:
    def __init__(self) -> None:
        self.calls: list[tuple[float, float]] = []
        self.closed = False

    async def reverse(self, latitude: float, longitude: float) -> str:
        self.calls.append((latitude, longitude))
        return "Amersfoort"

    async def aclose(self) -> None:
        self.closed = True


def _make_service(
    settings: SimpleNamespace,
    provider: _CountingProvider,
    geocoder: _ClosableGeocoder,
    geolocation: StaticGeolocation | None = None,
) -> tuple[WeatherService, ConsoleAutomationBus]:
    automation = ConsoleAutomationBus(Console(quiet=True))
    service = WeatherService(
        settings,  # type: ignore[arg-type]
        speech=SimpleNamespace(speak=lambda text: None),  # type: ignore[arg-type]
        automation=automation,
        geolocation=geolocation,
        provider=provider,
        geocoder=geocoder,
        rng=random.Random(1),
        logger=logging.getLogger("test_service"),
    )
    return service, automation


async def _wait_for_triggers(automation: ConsoleAutomationBus) -> None:
    for _ in range(200):
        if automation.triggers:
            return
        await asyncio.sleep(0.01)


@pytest.mark.asyncio
async def test_start_polls_and_forwards_triggers_then_aclose_shuts_down() -> None:
    provider = _CountingProvider()
    geocoder = _ClosableGeocoder()
    service, automation = _make_service(_make_settings(), provider, geocoder)

    service.start()
    await _wait_for_triggers(automation)
    task = service._poll_task
    await service.aclose()

    assert "atmosphere_rising" in automation.conditions
    assert automation.evaluate("atmosphere_rising") is True
    assert ("temperature", {"value": 11}) in automation.triggers
    assert provider.locations[0] == "Utrecht"
    assert task is not None and task.cancelled()
    assert service._poll_task is None
    assert provider.closed is True
    assert geocoder.closed is True


@pytest.mark.asyncio
async def test_start_twice_forwards_each_change_once() -> None:
    service, automation = _make_service(
        _make_settings(polling_enabled=False), _CountingProvider(), _ClosableGeocoder()
    )

    service.start()
    service.start()
    await service.poller.poll_once()
    await service.aclose()

    names = [name for name, _ in automation.triggers]
    assert names.count("temperature") == 1
    assert len(names) == len(set(names))


@pytest.mark.asyncio
async def test_polling_disabled_schedules_no_task() -> None:
    provider = _CountingProvider()
    service, automation = _make_service(
        _make_settings(polling_enabled=False), provider, _ClosableGeocoder()
    )

    service.start()
    await asyncio.sleep(0.02)

    assert service._poll_task is None
    assert provider.locations == []
    assert "temperature_rising" in automation.conditions
    await service.aclose()


@pytest.mark.asyncio
async def test_fetch_current_snapshot_geocodes_device_position() -> None:
    provider = _CountingProvider()
    geocoder = _ClosableGeocoder()
    service, _ = _make_service(
        _make_settings(polling_enabled=False),
        provider,
        geocoder,
        geolocation=StaticGeolocation(Coordinates(latitude=52.16, longitude=5.39)),
    )

    snapshot = await service.fetch_current_snapshot()
    await service.aclose()

    assert geocoder.calls == [(52.16, 5.39)]
    assert provider.locations == ["Amersfoort"]
    assert snapshot.location == "Amersfoort"
    assert snapshot.current.temperature == 11
