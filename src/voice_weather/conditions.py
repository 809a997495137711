"""Condition-code table mapping provider weather codes to spoken phrases.

The provider reports conditions as integers 0-47 plus the sentinel 3200
("not available"). Each code maps to a ``ConditionMetadata`` whose phrase set
comes in one of two shapes:

* ``NounAdjectivePhrases``: per-language noun (with plurality) and an optional
  per-language adjective, e.g. "showers"/"rainy".
* ``SingularPluralPhrases``: one language-invariant singular phrase and an
  optional plural phrase, spoken only when ``use_plural`` is set.

A missing noun or adjective for a language means that form is unavailable,
not that the table is broken.
"""

from __future__ import annotations

from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field

from .exceptions import UnknownConditionCode

UNAVAILABLE_CODE = 3200


class NounPhrase(BaseModel):
    """A noun phrase plus the plurality that drives the copula."""

    model_config = ConfigDict(frozen=True)

    text: str
    plural: bool = False


class NounAdjectivePhrases(BaseModel):
    """Per-language noun and adjective phrases."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["noun_adjective"] = "noun_adjective"
    nouns: dict[str, str] = Field(default_factory=dict)
    plural: bool = False
    adjectives: dict[str, str] = Field(default_factory=dict)

    def noun(self, language: str) -> NounPhrase | None:
        text = self.nouns.get(language)
        if not text:
            return None
        return NounPhrase(text=text, plural=self.plural)

    def adjective(self, language: str) -> str | None:
        return self.adjectives.get(language) or None


class SingularPluralPhrases(BaseModel):
    """Language-invariant singular and optional plural phrase."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["singular_plural"] = "singular_plural"
    singular: str
    plural: str | None = None
    use_plural: bool = False

    def noun(self, language: str) -> NounPhrase | None:
        if self.use_plural and self.plural:
            return NounPhrase(text=self.plural, plural=True)
        return NounPhrase(text=self.singular, plural=False)

    def adjective(self, language: str) -> str | None:
        return None


PhraseSet = Annotated[
    NounAdjectivePhrases | SingularPluralPhrases,
    Field(discriminator="kind"),
]


class ConditionMetadata(BaseModel):
    """Descriptive metadata for one provider condition code."""

    model_config = ConfigDict(frozen=True)

    code: int
    type: str
    quantity: str | None = None
    text: PhraseSet


_Noun = tuple[str | None, str, bool]
_Adjective = tuple[str, str] | None


def _entry(
    code: int,
    type_: str,
    quantity: str | None,
    noun: _Noun,
    adjective: _Adjective,
) -> ConditionMetadata:
    noun_en, noun_nl, plural = noun
    nouns = {"nl": noun_nl}
    if noun_en is not None:
        nouns["en"] = noun_en
    adjectives = {"en": adjective[0], "nl": adjective[1]} if adjective else {}
    return ConditionMetadata(
        code=code,
        type=type_,
        quantity=quantity,
        text=NounAdjectivePhrases(nouns=nouns, plural=plural, adjectives=adjectives),
    )


# (code, type, quantity, (noun en, noun nl, plural), (adjective en, adjective nl))
_ROWS: tuple[tuple[int, str, str | None, _Noun, _Adjective], ...] = (
    (0, "tornado", None, ("tornados", "tornado's", True), None),
    (1, "tropical storm", None, ("a tropical storm", "een tropische storm", False), None),
    (2, "hurricane", None, ("a hurricane", "een orkaan", False), None),
    (3, "severe thunderstorms", "severe", ("severe thunderstorms", "zware onweersbuien", True), None),
    (4, "thunderstorm", "severe", ("a thunderstorm", "onweer", False), None),
    (5, "rain and snow", "mixed", ("rain and snow", "regen en sneeuw", False), None),
    (6, "rain and sleet", "mixed", ("rain and sleet", "regen en ijzel", False), None),
    (7, "snow and sleet", "mixed", ("snow and sleet", "sneeuw en ijzel", False), None),
    (8, "freezing drizzle", None, ("freezing drizzle", "lichte ijzel", False), None),
    (9, "drizzle", None, ("drizzle", "motregen", False), ("drizzly", "licht regenachtige")),
    (10, "freezing rain", None, ("freezing rain", "ijzel", False), None),
    (11, "shower", None, ("showers", "regenbuien", True), ("rainy", "regenachtige")),
    (12, "shower", None, ("showers", "regenbuien", True), ("rainy", "regenachtige")),
    (13, "snow flurry", None, ("snow flurry", "sneeuw vlagen", False), None),
    (14, "snow shower", "light", ("snow showers", "sneeuw", True), ("snowy", "sneeuwachtige")),
    (15, "blowing snow", None, ("blowing snow", "sneeuwbuien", False), None),
    (16, "snow", None, ("snow", "sneeuw", False), ("snowy", "sneeuwachtige")),
    (17, "hail", None, ("hail", "hagel", False), None),
    (18, "sleet", None, ("sleet", "ijzel", False), ("sleety", "ijzelige")),
    (19, "dust", None, ("dust", "stof", False), ("dusty", "stoffige")),
    (20, "fog", None, ("fog", "mist", False), ("foggy", "mistige")),
    (21, "haze", None, ("haze", "mist", False), ("hazy", "mistige")),
    (22, "smoke", None, ("smoke clouds", "rookwolken", True), None),
    (23, "wind", None, ("wind", "wind", False), ("windy", "winderige")),
    (24, "wind", None, ("wind", "wind", False), ("windy", "winderige")),
    (25, "cold", None, ("cold", "kou", False), ("cold", "koude")),
    (26, "clouds", None, ("clouds", "bewolking", True), ("cloudy", "bewolkte")),
    (27, "clouds", "mostly", ("quite some clouds", "veel bewolking", True), ("mostly cloudy", "erg bewolkte")),
    (28, "clouds", "mostly", ("quite some clouds", "veel bewolking", True), ("mostly cloudy", "erg bewolkte")),
    (29, "clouds", "partly", ("some clouds", "lichte bewolking", True), ("partly cloudy", "licht bewolkte")),
    (30, "clouds", "partly", ("some clouds", "lichte bewolking", True), ("partially cloudy", "licht bewolkte")),
    (31, "clear", None, ("clear", "helder", False), ("clear", "heldere")),
    (32, "sun", None, ("sun", "zon", False), ("sunny", "zonnige")),
    (33, "fair", None, (None, "mooi", False), ("fair", "mooie")),
    (34, "fair", None, (None, "mooi", False), ("fair", "mooie")),
    (35, "rain and hail", "mixed", ("rain and hail", "regen en hagel", False), None),
    (36, "hot", None, ("hot", "warm", False), ("hot", "warme")),
    (37, "thunderstorm", None, ("thunderstorms", "zwaar onweer", True), None),
    (38, "thunderstorm", None, ("thunderstorms", "zwaar onweer", True), None),
    (39, "thunderstorm", None, ("thunderstorms", "zwaar onweer", True), None),
    (40, "shower", None, ("showers", "regenbuien", True), ("rainy", "regenachtige")),
    (41, "snow", "heavy", ("heavy snow", "zware sneeuwbuien", False), ("snowy", "sneeuwachtige")),
    (42, "snow", None, ("snow", "sneeuwbuien", False), ("snowy", "sneeuwachtige")),
    (43, "snow", "heavy", ("heavy snow", "zware sneeuwbuien", False), ("snowy", "sneeuwachtige")),
    (44, "clouds", "partly", ("some clouds", "matige bewolking", True), ("partially cloudy", "matig bewolkte")),
    (45, "thundershowers", None, ("thunderstorms", "onweer en zware regenbuien", True), None),
    (46, "snow", None, ("snow", "sneeuwbuien", False), ("snowy", "sneeuwachtige")),
    (47, "thundershowers", None, ("thunderstorms", "onweer en zware regenbuien", True), None),
    (3200, "unavailable", None, ("unavailable", "niet beschikbaar", False), None),
)

CONDITION_TABLE: tuple[ConditionMetadata, ...] = tuple(_entry(*row) for row in _ROWS)
UNAVAILABLE_SLOT = len(CONDITION_TABLE) - 1


def lookup(code: int | str) -> ConditionMetadata:
    """Return metadata for a provider condition code.

    Accepts the provider's string codes ("32") as well as integers. The
    "not available" sentinel resolves to the last table slot.
    """
    try:
        value = int(code)
    except (TypeError, ValueError) as exc:
        raise UnknownConditionCode(f"Condition code {code!r} is not an integer.") from exc

    if value == UNAVAILABLE_CODE:
        return CONDITION_TABLE[UNAVAILABLE_SLOT]
    if not (0 <= value < UNAVAILABLE_SLOT):
        raise UnknownConditionCode(f"Condition code {value} is outside the provider table.")
    return CONDITION_TABLE[value]
