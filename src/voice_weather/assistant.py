"""Per-utterance pipeline: parse, resolve, fetch, render, speak once."""

from __future__ import annotations

import asyncio
import logging

from .exceptions import (
    AmbiguousTime,
    LocationUnresolvable,
    NoData,
    ResponseTimeout,
    WeatherError,
)
from .host import Localizer, SpeechOutput
from .intent import Intent, IntentParser
from .location import LocationResolver
from .models import RecognizedSpeech
from .synthesizer import ResponseSynthesizer
from .weather.base import TemperatureUnit
from .weather.gateway import WeatherGateway
from .weather.models import ConditionedReading, WeatherSnapshot


def select_reading(snapshot: WeatherSnapshot, intent: Intent) -> ConditionedReading:
    """Pick the reading that answers the intent's time window."""
    if intent.is_current:
        return snapshot.current
    if intent.is_today:
        if not snapshot.forecasts:
            raise NoData("Provider returned no forecast days.")
        return snapshot.forecasts[0]
    target = intent.target
    forecast = None if isinstance(target, str) else snapshot.forecast_for(target)
    if forecast is None:
        raise NoData(f"No forecast available for {target}.")
    return forecast


class _SingleUtterance:
    """Speaks at most once; later calls return the first text unchanged."""

    def __init__(self, speech: SpeechOutput) -> None:
        self._speech = speech
        self.text: str | None = None

    def say(self, text: str) -> str:
        if self.text is None:
            self.text = text
            self._speech.speak(text)
        return self.text


class WeatherAssistant:
    """Answers recognized weather utterances with exactly one spoken sentence."""

    def __init__(
        self,
        parser: IntentParser,
        resolver: LocationResolver,
        gateway: WeatherGateway,
        synthesizer: ResponseSynthesizer,
        localizer: Localizer,
        speech: SpeechOutput,
        temp_unit: TemperatureUnit = "c",
        response_timeout_seconds: float = 10.0,
        logger: logging.Logger | None = None,
    ) -> None:
        self.parser = parser
        self.resolver = resolver
        self.gateway = gateway
        self.synthesizer = synthesizer
        self.localizer = localizer
        self.speech = speech
        self.temp_unit = temp_unit
        self.response_timeout_seconds = response_timeout_seconds
        self.logger = logger or logging.getLogger("voice_weather.assistant")

    async def handle_speech(self, speech: RecognizedSpeech) -> str:
        """Handle one recognized utterance and return the text that was spoken."""
        utterance = _SingleUtterance(self.speech)
        language = speech.language

        try:
            intent = self.parser.parse(
                speech.triggers, speech.time_expressions, speech.transcript, language
            )
        except AmbiguousTime as exc:
            self.logger.info("Asking for clarification: %s", exc)
            return utterance.say(self.localizer.translate("ambiguous_time", language))

        try:
            text = await self._answer_within_deadline(intent, language)
        except ResponseTimeout as exc:
            self.logger.warning("Weather response timed out: %s", exc)
            text = self.localizer.translate("timeout", language)
        except LocationUnresolvable as exc:
            self.logger.warning("Location unresolvable: %s", exc)
            text = self.localizer.translate("location_unresolvable", language)
        except NoData as exc:
            self.logger.warning("No weather data: %s", exc)
            text = self.localizer.translate("no_data", language)
        except WeatherError as exc:
            self.logger.error("Weather request failed: %s", exc)
            text = self.localizer.translate("generic_error", language)
        except Exception as exc:
            self.logger.exception("Unexpected weather pipeline failure: %s", exc)
            text = self.localizer.translate("generic_error", language)
        return utterance.say(text)

    async def answer(self, intent: Intent, language: str) -> str:
        """Resolve, fetch and render without speaking."""
        if not intent.wants_weather and not intent.wants_temperature:
            return self.synthesizer.render(intent, language, None)

        location_key = await self.resolver.resolve_current(intent.location)
        snapshot = await self.gateway.fetch(location_key, self.temp_unit)
        return self.synthesizer.render(intent, language, select_reading(snapshot, intent))

    async def _answer_within_deadline(self, intent: Intent, language: str) -> str:
        # wait_for cancels the pending work, so a late result can never be spoken.
        try:
            return await asyncio.wait_for(
                self.answer(intent, language), timeout=self.response_timeout_seconds
            )
        except TimeoutError as exc:
            raise ResponseTimeout(
                f"No response within {self.response_timeout_seconds:g}s."
            ) from exc
