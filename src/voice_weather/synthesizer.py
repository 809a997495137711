"""Spoken-sentence synthesis from an intent and a decorated reading."""

from __future__ import annotations

import random
from typing import Any

from .exceptions import NoData
from .host import Localizer
from .intent import Intent
from .weather.models import ConditionedReading, CurrentReading, ForecastReading

# Languages whose location clause may lead or trail the sentence.
PLACEMENT_LANGUAGES = frozenset({"en"})


def _spoken_number(value: float | None, field: str) -> str:
    if value is None:
        raise NoData(f"Reading has no {field} value to speak.")
    return str(round(value))


class ResponseSynthesizer:
    """Chooses sentence form and lexical variant, then renders the text.

    ``rng`` decides noun-vs-adjective and location placement; pass a seeded
    ``random.Random`` to make the choices reproducible.
    """

    def __init__(self, localizer: Localizer, rng: random.Random | None = None) -> None:
        self.localizer = localizer
        self.rng = rng or random.Random()

    def render(self, intent: Intent, language: str, reading: ConditionedReading | None) -> str:
        if not intent.wants_weather and not intent.wants_temperature:
            return self.localizer.translate("no_forecast", language)
        if reading is None:
            return self.localizer.translate("no_forecast", language)

        if intent.wants_weather:
            sentence = self._weather_sentence(intent, language, reading)
        else:
            sentence = self._temperature_sentence(intent, language, reading)
        return self._place_location(sentence, intent.location, language)

    def _weather_sentence(self, intent: Intent, language: str, reading: ConditionedReading) -> str:
        phrases = reading.condition.text
        noun = phrases.noun(language)
        adjective = phrases.adjective(language)
        window = "current" if intent.is_current else "forecast"
        params = self._temperature_params(intent, reading)

        if noun is not None and adjective is not None:
            use_adjective = self.rng.random() < 0.5
        else:
            use_adjective = adjective is not None

        if use_adjective:
            return self.localizer.translate(
                f"weather_{window}_adjective", language, condition=adjective, **params
            )
        if noun is not None:
            number = "plural" if noun.plural else "singular"
            return self.localizer.translate(
                f"weather_{window}_noun_{number}", language, condition=noun.text, **params
            )
        return self.localizer.translate(f"weather_{window}_generic", language, **params)

    def _temperature_sentence(
        self, intent: Intent, language: str, reading: ConditionedReading
    ) -> str:
        params = self._temperature_params(intent, reading)
        if intent.is_current:
            key = "temperature_current"
        elif intent.is_today:
            key = "temperature_today"
        else:
            key = "temperature_forecast"
        return self.localizer.translate(key, language, **params)

    @staticmethod
    def _temperature_params(intent: Intent, reading: ConditionedReading) -> dict[str, Any]:
        if intent.is_current:
            if not isinstance(reading, CurrentReading):
                raise NoData("Current weather requested without a current reading.")
            return {"temperature": _spoken_number(reading.temperature, "temperature")}
        if not isinstance(reading, ForecastReading):
            raise NoData("Forecast requested without a forecast reading.")
        return {
            "date": intent.date_transcript,
            "low": _spoken_number(reading.low, "low"),
            "high": _spoken_number(reading.high, "high"),
        }

    def _place_location(self, sentence: str, location: str | None, language: str) -> str:
        if not location:
            return sentence
        if language in PLACEMENT_LANGUAGES and self.rng.random() < 0.5:
            prefix = self.localizer.translate("location_prefix", language, location=location)
            # Keep "I" capitalized; lower a regular sentence-initial word.
            if sentence[1:2].islower():
                sentence = sentence[:1].lower() + sentence[1:]
            return prefix + sentence

        suffix = self.localizer.translate("location_suffix", language, location=location)
        body = sentence.rstrip()
        if body.endswith((".", "?", "!")):
            return body[:-1] + suffix + body[-1]
        return body + suffix
