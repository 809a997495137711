"""English and Dutch phrase catalogs for spoken responses."""

from __future__ import annotations

import logging
from typing import Any

FALLBACK_LANGUAGE = "en"

CATALOGS: dict[str, dict[str, str]] = {
    "en": {
        "date_current": "now",
        "date_today": "today",
        "no_forecast": "Sorry, there is no forecast available.",
        "weather_current_noun_singular": (
            "There is {condition} at the moment, with a temperature of {temperature} degrees."
        ),
        "weather_current_noun_plural": (
            "There are {condition} at the moment, with a temperature of {temperature} degrees."
        ),
        "weather_current_adjective": (
            "It is a {condition} day, with a temperature of {temperature} degrees at the moment."
        ),
        "weather_current_generic": (
            "I can't describe the weather right now, but it is {temperature} degrees."
        ),
        "weather_forecast_noun_singular": (
            "There will be {condition} {date}, with temperatures between {low} and {high} degrees."
        ),
        "weather_forecast_noun_plural": (
            "There will be {condition} {date}, with temperatures between {low} and {high} degrees."
        ),
        "weather_forecast_adjective": (
            "It will be a {condition} day {date}, with temperatures between {low} and {high} degrees."
        ),
        "weather_forecast_generic": (
            "I can't describe the weather {date}, "
            "but temperatures will be between {low} and {high} degrees."
        ),
        "temperature_current": "It is currently {temperature} degrees.",
        "temperature_today": "The temperature {date} ranges between {low} and {high} degrees.",
        "temperature_forecast": (
            "The temperature {date} will range between {low} and {high} degrees."
        ),
        "location_prefix": "In {location}, ",
        "location_suffix": " in {location}",
        "location_unresolvable": "Sorry, I couldn't figure out which location you mean.",
        "no_data": "Sorry, I couldn't get the weather for that moment.",
        "ambiguous_time": (
            "Sorry, I can only look up one moment at a time. Could you ask for a single day?"
        ),
        "timeout": "Sorry, the weather service is taking too long to respond.",
        "generic_error": "Sorry, something went wrong while fetching the weather.",
    },
    "nl": {
        "date_current": "nu",
        "date_today": "vandaag",
        "no_forecast": "Sorry, er is geen weersverwachting beschikbaar.",
        "weather_current_noun_singular": (
            "Er is op dit moment {condition}, met een temperatuur van {temperature} graden."
        ),
        "weather_current_noun_plural": (
            "Er zijn op dit moment {condition}, met een temperatuur van {temperature} graden."
        ),
        "weather_current_adjective": (
            "Het is een {condition} dag, met op dit moment een temperatuur van "
            "{temperature} graden."
        ),
        "weather_current_generic": (
            "Ik kan het weer nu niet beschrijven, maar het is {temperature} graden."
        ),
        "weather_forecast_noun_singular": (
            "Er wordt {date} {condition} verwacht, met temperaturen tussen {low} en {high} graden."
        ),
        "weather_forecast_noun_plural": (
            "Er worden {date} {condition} verwacht, met temperaturen tussen {low} en {high} graden."
        ),
        "weather_forecast_adjective": (
            "Het wordt {date} een {condition} dag, met temperaturen tussen {low} en {high} graden."
        ),
        "weather_forecast_generic": (
            "Ik kan het weer {date} niet beschrijven, "
            "maar de temperatuur ligt tussen {low} en {high} graden."
        ),
        "temperature_current": "Het is op dit moment {temperature} graden.",
        "temperature_today": "De temperatuur ligt {date} tussen {low} en {high} graden.",
        "temperature_forecast": "De temperatuur zal {date} tussen {low} en {high} graden liggen.",
        "location_suffix": " in {location}",
        "location_unresolvable": "Sorry, ik kon niet bepalen welke locatie je bedoelt.",
        "no_data": "Sorry, ik kon het weer voor dat moment niet ophalen.",
        "ambiguous_time": (
            "Sorry, ik kan maar één moment tegelijk opzoeken. Kun je naar één dag vragen?"
        ),
        "timeout": "Sorry, de weerdienst reageert te traag.",
        "generic_error": "Sorry, er ging iets mis bij het ophalen van het weer.",
    },
}


class CatalogLocalizer:
    """Looks up phrases in the in-package catalogs, falling back to English."""

    def __init__(
        self,
        catalogs: dict[str, dict[str, str]] | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        self.catalogs = catalogs or CATALOGS
        self.logger = logger or logging.getLogger("voice_weather.locales")

    def translate(self, key: str, language: str, **params: Any) -> str:
        catalog = self.catalogs.get(language)
        if catalog is None or key not in catalog:
            self.logger.debug("No %r phrase for language %r; using fallback", key, language)
            catalog = self.catalogs[FALLBACK_LANGUAGE]
        return catalog[key].format(**params)
