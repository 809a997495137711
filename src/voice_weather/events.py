"""In-process publish/subscribe registry for named weather change events."""

from __future__ import annotations

import logging
from collections import defaultdict
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

EventHandler = Callable[[Any], None]
WildcardHandler = Callable[[str, Any], None]


@dataclass(slots=True, frozen=True)
class ChangeEvent:
    """One detected attribute change, named ``<group>_<field>`` or ``<field>``."""

    name: str
    old: Any
    new: Any


class EventBus:
    """Registry of subscribers invoked synchronously on publish.

    Nothing is stored between events; a subscriber registered after a publish
    never sees it.
    """

    def __init__(self, logger: logging.Logger | None = None) -> None:
        self.logger = logger or logging.getLogger("voice_weather.events")
        self._handlers: dict[str, list[EventHandler]] = defaultdict(list)
        self._wildcard: list[WildcardHandler] = []

    def subscribe(self, event_name: str, handler: EventHandler) -> Callable[[], None]:
        """Register a handler for one event name; returns an unsubscribe callable."""
        self._handlers[event_name].append(handler)

        def unsubscribe() -> None:
            handlers = self._handlers.get(event_name, [])
            if handler in handlers:
                handlers.remove(handler)

        return unsubscribe

    def subscribe_all(self, handler: WildcardHandler) -> Callable[[], None]:
        """Register a handler that receives every event as ``(name, value)``."""
        self._wildcard.append(handler)

        def unsubscribe() -> None:
            if handler in self._wildcard:
                self._wildcard.remove(handler)

        return unsubscribe

    def publish(self, event_name: str, value: Any) -> int:
        """Invoke subscribers for ``event_name``; returns how many were called."""
        called = 0
        for handler in list(self._handlers.get(event_name, [])):
            called += self._invoke(event_name, lambda h=handler: h(value))
        for wildcard in list(self._wildcard):
            called += self._invoke(event_name, lambda w=wildcard: w(event_name, value))
        return called

    def _invoke(self, event_name: str, call: Callable[[], None]) -> int:
        # One failing subscriber must not starve the others.
        try:
            call()
        except Exception:
            self.logger.exception("Subscriber for %s raised", event_name)
        return 1
