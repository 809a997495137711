"""Host platform capabilities consumed by the service, plus console bindings."""

from __future__ import annotations

from collections.abc import Callable
from typing import Any, Protocol

from rich.console import Console

from .models import Coordinates

ConditionHandler = Callable[[dict[str, Any]], bool]


class GeolocationService(Protocol):
    async def get_current_location(self) -> Coordinates:
        """Return the device position or raise when it is unavailable."""
        ...


class ReverseGeocoder(Protocol):
    async def reverse(self, latitude: float, longitude: float) -> str:
        """Return a place name for the coordinates."""
        ...


class SpeechOutput(Protocol):
    def speak(self, text: str) -> None: ...


class AutomationBus(Protocol):
    def register_condition(self, name: str, handler: ConditionHandler) -> None: ...

    def emit_trigger(self, event_name: str, payload: dict[str, Any]) -> None: ...


class Localizer(Protocol):
    def translate(self, key: str, language: str, **params: Any) -> str: ...


class StaticGeolocation:
    """Geolocation stand-in that always reports the configured coordinates."""

    def __init__(self, coordinates: Coordinates | None) -> None:
        self.coordinates = coordinates

    async def get_current_location(self) -> Coordinates:
        if self.coordinates is None:
            raise LookupError("No device coordinates configured.")
        return self.coordinates


class ConsoleSpeechOutput:
    """Prints spoken text instead of synthesizing audio."""

    def __init__(self, console: Console | None = None) -> None:
        self.console = console or Console()
        self.spoken: list[str] = []

    def speak(self, text: str) -> None:
        self.spoken.append(text)
        self.console.print(f"[bold cyan]assistant>[/bold cyan] {text}")


class ConsoleAutomationBus:
    """Keeps registered conditions and prints emitted triggers."""

    def __init__(self, console: Console | None = None) -> None:
        self.console = console or Console()
        self.conditions: dict[str, ConditionHandler] = {}
        self.triggers: list[tuple[str, dict[str, Any]]] = []

    def register_condition(self, name: str, handler: ConditionHandler) -> None:
        self.conditions[name] = handler

    def evaluate(self, name: str, args: dict[str, Any] | None = None) -> bool:
        handler = self.conditions.get(name)
        if handler is None:
            raise KeyError(f"Unknown automation condition {name!r}.")
        return handler(args or {})

    def emit_trigger(self, event_name: str, payload: dict[str, Any]) -> None:
        self.triggers.append((event_name, payload))
        self.console.print(f"[magenta]trigger[/magenta] {event_name} {payload}")
