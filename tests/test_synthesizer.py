"""Tests for spoken-sentence synthesis."""

from __future__ import annotations

import random
from collections.abc import Iterable
from datetime import date
from typing import Any

import pytest

from voice_weather.conditions import lookup
from voice_weather.exceptions import NoData
from voice_weather.intent import Intent
from voice_weather.locales import CatalogLocalizer
from voice_weather.synthesizer import ResponseSynthesizer
from voice_weather.weather.models import CurrentReading, ForecastReading


class _ScriptedRandom(random.Random):
    """Returns queued draws in order, then repeats the last one."""

    def __init__(self, draws: Iterable[float]) -> None:
        super().__init__()
        self.draws = list(draws)

    def random(self) -> float:
        if len(self.draws) > 1:
            return self.draws.pop(0)
        return self.draws[0]


def _make_synthesizer(draws: Iterable[float] = (0.9,)) -> ResponseSynthesizer:
    return ResponseSynthesizer(CatalogLocalizer(), rng=_ScriptedRandom(draws))


def _current(code: int = 11, temperature: float | None = 12.4) -> CurrentReading:
    return CurrentReading(code=code, condition=lookup(code), temperature=temperature)


def _forecast(code: int = 32, low: Any = 6, high: Any = 17) -> ForecastReading:
    return ForecastReading(
        code=code,
        condition=lookup(code),
        forecast_date=date(2026, 10, 20),
        low=low,
        high=high,
    )


def _weather_intent(**overrides: Any) -> Intent:
    values: dict[str, Any] = {"wants_weather": True, "date_transcript": "now"}
    values.update(overrides)
    return Intent(**values)


def test_no_flags_renders_no_forecast_phrase() -> None:
    text = _make_synthesizer().render(Intent(), "en", _current())
    assert text == "Sorry, there is no forecast available."


def test_missing_reading_renders_no_forecast_phrase() -> None:
    text = _make_synthesizer().render(_weather_intent(), "nl", None)
    assert text == "Sorry, er is geen weersverwachting beschikbaar."


def test_current_weather_with_plural_noun() -> None:
    text = _make_synthesizer([0.9]).render(_weather_intent(), "en", _current())
    assert text == "There are showers at the moment, with a temperature of 12 degrees."
    assert "between" not in text


def test_current_weather_with_adjective() -> None:
    text = _make_synthesizer([0.1]).render(_weather_intent(), "en", _current())
    assert text == "It is a rainy day, with a temperature of 12 degrees at the moment."


def test_singular_noun_uses_singular_copula() -> None:
    text = _make_synthesizer([0.9]).render(_weather_intent(), "en", _current(code=4))
    assert text.startswith("There is a thunderstorm at the moment")


def test_noun_only_condition_never_uses_adjective() -> None:
    synthesizer = ResponseSynthesizer(CatalogLocalizer(), rng=random.Random(3))
    texts = {synthesizer.render(_weather_intent(), "en", _current(code=4)) for _ in range(200)}
    assert texts == {
        "There is a thunderstorm at the moment, with a temperature of 12 degrees."
    }


def test_adjective_only_condition_always_uses_adjective() -> None:
    synthesizer = ResponseSynthesizer(CatalogLocalizer(), rng=random.Random(3))
    for _ in range(50):
        text = synthesizer.render(_weather_intent(), "en", _current(code=33))
        assert text.startswith("It is a fair day")


def test_noun_adjective_choice_is_roughly_even() -> None:
    synthesizer = ResponseSynthesizer(CatalogLocalizer(), rng=random.Random(7))
    runs = 2000
    adjectives = sum(
        synthesizer.render(_weather_intent(), "en", _current()).startswith("It is a rainy day")
        for _ in range(runs)
    )
    assert 0.45 * runs <= adjectives <= 0.55 * runs


def test_forecast_weather_mentions_range_and_date() -> None:
    intent = _weather_intent(target=date(2026, 10, 20), date_transcript="on Tuesday")

    text = _make_synthesizer([0.9]).render(intent, "en", _forecast())

    assert text == "There will be sun on Tuesday, with temperatures between 6 and 17 degrees."


def test_dutch_forecast_adjective() -> None:
    intent = _weather_intent(target="today", date_transcript="vandaag")

    text = _make_synthesizer([0.1]).render(intent, "nl", _forecast())

    assert text == "Het wordt vandaag een zonnige dag, met temperaturen tussen 6 en 17 graden."


def test_weather_takes_priority_over_temperature() -> None:
    intent = _weather_intent(wants_temperature=True)

    text = _make_synthesizer([0.9]).render(intent, "en", _current())

    assert text == "There are showers at the moment, with a temperature of 12 degrees."
    assert text != "It is currently 12 degrees."


def test_temperature_current() -> None:
    intent = Intent(wants_temperature=True, date_transcript="now")
    text = _make_synthesizer().render(intent, "en", _current())
    assert text == "It is currently 12 degrees."


def test_temperature_today_ranges() -> None:
    intent = Intent(wants_temperature=True, target="today", date_transcript="today")
    text = _make_synthesizer().render(intent, "en", _forecast(low="8", high="14"))
    assert text == "The temperature today ranges between 8 and 14 degrees."


def test_temperature_forecast_will_range() -> None:
    intent = Intent(
        wants_temperature=True, target=date(2026, 10, 20), date_transcript="on Tuesday"
    )
    text = _make_synthesizer().render(intent, "en", _forecast())
    assert text == "The temperature on Tuesday will range between 6 and 17 degrees."


def test_location_prefix_lowers_first_word() -> None:
    intent = Intent(wants_temperature=True, date_transcript="now", location="Paris")
    text = _make_synthesizer([0.1]).render(intent, "en", _current())
    assert text == "In Paris, it is currently 12 degrees."


def test_location_suffix_goes_before_final_punctuation() -> None:
    intent = Intent(wants_temperature=True, date_transcript="now", location="Paris")
    text = _make_synthesizer([0.9]).render(intent, "en", _current())
    assert text == "It is currently 12 degrees in Paris."


def test_dutch_location_always_trails() -> None:
    intent = Intent(wants_temperature=True, date_transcript="nu", location="Parijs")
    text = _make_synthesizer([0.1]).render(intent, "nl", _current())
    assert text == "Het is op dit moment 12 graden in Parijs."


def test_prefix_with_negative_temperature() -> None:
    intent = Intent(wants_temperature=True, date_transcript="now", location="Oslo")
    text = _make_synthesizer([0.1]).render(intent, "en", _current(temperature=-3.2))
    assert text == "In Oslo, it is currently -3 degrees."


def test_missing_temperature_raises_no_data() -> None:
    intent = Intent(wants_temperature=True, date_transcript="now")
    with pytest.raises(NoData):
        _make_synthesizer().render(intent, "en", _current(temperature=None))


def test_forecast_intent_with_current_reading_raises_no_data() -> None:
    intent = Intent(wants_temperature=True, target="today", date_transcript="today")
    with pytest.raises(NoData):
        _make_synthesizer().render(intent, "en", _current())
