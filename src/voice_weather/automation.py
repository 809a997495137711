"""Automation conditions evaluated against the poller's last snapshot."""

from __future__ import annotations

from typing import Any

from .events import EventBus
from .host import AutomationBus, ConditionHandler
from .poller import WeatherPoller

THRESHOLD_ATTRIBUTES = (
    "temperature",
    "wind_chill",
    "wind_speed",
    "wind_direction",
    "atmosphere_humidity",
    "atmosphere_pressure",
    "atmosphere_visibility",
)

_PRESSURE_RISING = 1
_PRESSURE_FALLING = 2


def _as_number(value: Any) -> float | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, str):
        try:
            return float(value.strip())
        except ValueError:
            return None
    return None


class WeatherConditions:
    """Builds the condition handlers exposed to the host's automation flows."""

    def __init__(self, poller: WeatherPoller) -> None:
        self.poller = poller

    def handlers(self) -> dict[str, ConditionHandler]:
        handlers: dict[str, ConditionHandler] = {
            "atmosphere_rising": lambda args: self.pressure_trend() == _PRESSURE_RISING,
            "atmosphere_falling": lambda args: self.pressure_trend() == _PRESSURE_FALLING,
            "temperature_rising": lambda args: self.temperature_delta() > 0,
            "temperature_falling": lambda args: self.temperature_delta() < 0,
        }
        for attribute in THRESHOLD_ATTRIBUTES:
            handlers[f"{attribute}_above"] = (
                lambda args, name=attribute: self.compare(name, args, above=True)
            )
            handlers[f"{attribute}_below"] = (
                lambda args, name=attribute: self.compare(name, args, above=False)
            )
        return handlers

    def register(self, bus: AutomationBus) -> None:
        for name, handler in self.handlers().items():
            bus.register_condition(name, handler)

    def pressure_trend(self) -> int | None:
        value = _as_number(self.poller.get("atmosphere_rising"))
        return int(value) if value is not None else None

    def temperature_delta(self) -> float:
        """Last minus previous temperature; 0 when either is unknown."""
        current = _as_number(self.poller.get("temperature"))
        previous = _as_number(self.poller.get_previous("temperature"))
        if current is None or previous is None:
            return 0.0
        return current - previous

    def compare(self, attribute: str, args: dict[str, Any], *, above: bool) -> bool:
        current = _as_number(self.poller.get(attribute))
        threshold = _as_number(args.get("value"))
        if current is None or threshold is None:
            return False
        return current > threshold if above else current < threshold


def forward_changes(events: EventBus, bus: AutomationBus) -> None:
    """Relay every change event to the host as an automation trigger."""
    events.subscribe_all(lambda name, value: bus.emit_trigger(name, {"value": value}))
