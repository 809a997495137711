"""Rule-based intent extraction from recognized speech triggers."""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from datetime import date
from typing import Literal

from pydantic import BaseModel

from .exceptions import AmbiguousTime
from .host import Localizer
from .models import SpeechTrigger, TimeExpression

DateSentinel = Literal["current", "today"]

WEATHER_TRIGGER = "weather"
TEMPERATURE_TRIGGER = "temperature"
CURRENT_TRIGGER = "current"
TODAY_TRIGGER = "today"
LOCATION_TRIGGER = "location"

_TRAILING_PUNCTUATION = " ?!.,"


class Intent(BaseModel):
    """Structured interpretation of one utterance."""

    wants_weather: bool = False
    wants_temperature: bool = False
    target: DateSentinel | date = "current"
    date_transcript: str = ""
    location: str | None = None

    @property
    def is_current(self) -> bool:
        return self.target == "current"

    @property
    def is_today(self) -> bool:
        return self.target == "today"


class IntentParser:
    """Maps recognizer triggers and time expressions to an ``Intent``."""

    def __init__(
        self,
        localizer: Localizer,
        today: Callable[[], date] = date.today,
        logger: logging.Logger | None = None,
    ) -> None:
        self.localizer = localizer
        self.today = today
        self.logger = logger or logging.getLogger("voice_weather.intent")

    def parse(
        self,
        triggers: Sequence[SpeechTrigger],
        time_expressions: Sequence[TimeExpression],
        transcript: str,
        language: str,
    ) -> Intent:
        """Build an intent; raises ``AmbiguousTime`` for more than one time expression."""
        if len(time_expressions) > 1:
            raise AmbiguousTime(
                f"Utterance contains {len(time_expressions)} time expressions.",
                count=len(time_expressions),
            )

        intent = Intent(date_transcript=self.localizer.translate("date_current", language))
        for trigger in triggers:
            if trigger.id == WEATHER_TRIGGER:
                intent.wants_weather = True
            elif trigger.id == TEMPERATURE_TRIGGER:
                intent.wants_temperature = True
            elif trigger.id == CURRENT_TRIGGER:
                intent.target = "current"
                intent.date_transcript = self.localizer.translate("date_current", language)
            elif trigger.id == TODAY_TRIGGER:
                intent.target = "today"
                intent.date_transcript = self.localizer.translate("date_today", language)
            elif trigger.id == LOCATION_TRIGGER:
                intent.location = self._location_after(trigger, transcript, time_expressions)
            else:
                self.logger.debug("Ignoring unknown speech trigger %r", trigger.id)

        if time_expressions:
            self._apply_time(intent, time_expressions[0], language)
        return intent

    def _apply_time(self, intent: Intent, expression: TimeExpression, language: str) -> None:
        if expression.day is None or expression.month is None:
            return
        today = self.today()
        year = expression.year if expression.year is not None else today.year
        try:
            target = date(year, expression.month + 1, expression.day)
        except ValueError:
            self.logger.info("Ignoring impossible date in %r", expression.transcript)
            return

        if target == today:
            # Forecast index 0 is always today, so today is never a literal date.
            intent.target = "today"
            intent.date_transcript = self.localizer.translate("date_today", language)
        else:
            intent.target = target
            intent.date_transcript = expression.transcript.strip()

    @staticmethod
    def _location_after(
        trigger: SpeechTrigger,
        transcript: str,
        time_expressions: Sequence[TimeExpression],
    ) -> str | None:
        start = trigger.position + len(trigger.text)
        if start >= len(transcript):
            return None
        end = len(transcript)
        lowered = transcript.lower()

        for expression in time_expressions:
            phrase = expression.transcript.strip().lower()
            if not phrase:
                continue
            if expression.position is not None:
                span_start, span_end = expression.position, expression.position + len(phrase)
            else:
                found = lowered.find(phrase, max(trigger.position, 0))
                if found < 0:
                    continue
                span_start, span_end = found, found + len(phrase)
            # "in 2 hours": the trigger word itself belongs to the time phrase.
            if span_start <= trigger.position < span_end:
                return None
            if start <= span_start < end:
                end = span_start
            elif span_start < start < span_end:
                return None

        location = transcript[start:end].strip(_TRAILING_PUNCTUATION)
        return location or None
