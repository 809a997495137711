"""Polling change detection over successive weather snapshots."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable, Iterator, Mapping
from typing import Any, Literal

from .events import ChangeEvent, EventBus
from .exceptions import WeatherError
from .weather.models import WeatherSnapshot

PollerState = Literal["idle", "fetching"]
SnapshotSource = Callable[[], Awaitable[WeatherSnapshot]]


def reduce_snapshot(snapshot: WeatherSnapshot) -> dict[str, Any]:
    """Keep only the attributes that change events are emitted for."""
    current = snapshot.current
    return {
        "wind": current.wind.model_dump(),
        "atmosphere": current.atmosphere.model_dump(),
        "astronomy": current.astronomy.model_dump(),
        "temperature": current.temperature,
        "weather_type": current.type,
    }


def _changed(previous: Mapping[str, Any], key: str, new_value: Any) -> bool:
    if key not in previous:
        return new_value is not None
    return previous[key] != new_value


def diff_snapshots(previous: Mapping[str, Any], current: Mapping[str, Any]) -> list[ChangeEvent]:
    """Diff two reduced snapshots, recursing one level into grouped records.

    A field missing from ``previous`` counts as changed when it now has a
    value, so the first cycle (empty ``previous``) reports every present field.
    """
    events: list[ChangeEvent] = []
    for key, new_value in current.items():
        old_value = previous.get(key)
        if isinstance(new_value, Mapping) or isinstance(old_value, Mapping):
            new_group: Mapping[str, Any] = new_value if isinstance(new_value, Mapping) else {}
            old_group: Mapping[str, Any] = old_value if isinstance(old_value, Mapping) else {}
            for field in _ordered_keys(new_group, old_group):
                child = new_group.get(field)
                if _changed(old_group, field, child):
                    events.append(ChangeEvent(f"{key}_{field}", old_group.get(field), child))
        elif _changed(previous, key, new_value):
            events.append(ChangeEvent(key, old_value, new_value))
    return events


def flatten_snapshot(snapshot: Mapping[str, Any]) -> dict[str, Any]:
    """Flatten a reduced snapshot to the same names change events use."""
    flat: dict[str, Any] = {}
    for key, value in snapshot.items():
        if isinstance(value, Mapping):
            for field, child in value.items():
                flat[f"{key}_{field}"] = child
        else:
            flat[key] = value
    return flat


def _ordered_keys(first: Mapping[str, Any], second: Mapping[str, Any]) -> Iterator[str]:
    yield from first
    yield from (key for key in second if key not in first)


class WeatherPoller:
    """Re-fetches weather on a fixed interval and publishes one event per changed field."""

    def __init__(
        self,
        fetch_snapshot: SnapshotSource,
        bus: EventBus,
        interval_seconds: float = 60.0,
        logger: logging.Logger | None = None,
    ) -> None:
        self.fetch_snapshot = fetch_snapshot
        self.bus = bus
        self.interval_seconds = interval_seconds
        self.logger = logger or logging.getLogger("voice_weather.poller")
        self._state: PollerState = "idle"
        self._snapshot: dict[str, Any] = {}
        self._previous: dict[str, Any] = {}

    @property
    def state(self) -> PollerState:
        return self._state

    @property
    def snapshot(self) -> dict[str, Any]:
        """Last successfully polled reduced snapshot (empty before the first success)."""
        return self._snapshot

    @property
    def previous_snapshot(self) -> dict[str, Any]:
        """The snapshot that ``snapshot`` replaced."""
        return self._previous

    def get(self, attribute: str) -> Any:
        """Read back an attribute by event name, e.g. ``wind_speed``; ``None`` if unknown."""
        return flatten_snapshot(self._snapshot).get(attribute)

    def get_previous(self, attribute: str) -> Any:
        return flatten_snapshot(self._previous).get(attribute)

    async def poll_once(self) -> list[ChangeEvent]:
        """Run one cycle; a failed fetch emits nothing and keeps the baseline."""
        self._state = "fetching"
        try:
            snapshot = await self.fetch_snapshot()
        except WeatherError as exc:
            self.logger.warning("Weather poll failed (%s): %s", type(exc).__name__, exc)
            return []
        finally:
            self._state = "idle"

        reduced = reduce_snapshot(snapshot)
        changes = diff_snapshots(self._snapshot, reduced)
        self._previous, self._snapshot = self._snapshot, reduced

        for change in changes:
            self.logger.info(
                "Change detected: %s old=%s new=%s",
                change.name,
                change.old,
                change.new,
                extra={"change_event": change.name},
            )
            self.bus.publish(change.name, change.new)
        return changes

    async def run(self, cycles: int | None = None) -> None:
        """Poll until cancelled, or for ``cycles`` cycles when given."""
        completed = 0
        while cycles is None or completed < cycles:
            try:
                await self.poll_once()
            except Exception:
                self.logger.exception("Unexpected failure during weather poll")
            completed += 1
            if cycles is not None and completed >= cycles:
                break
            await asyncio.sleep(self.interval_seconds)
