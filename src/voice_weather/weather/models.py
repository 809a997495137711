"""Typed models for decorated weather readings and snapshots."""

from __future__ import annotations

from datetime import date, datetime
from typing import Any

from pydantic import BaseModel, Field, field_validator

from ..conditions import ConditionMetadata


def _blank_to_none(value: Any) -> Any:
    if isinstance(value, str) and value.strip() == "":
        return None
    return value


class _ProviderBlock(BaseModel):
    """Provider block whose values arrive as strings, blank meaning unknown."""

    @field_validator("*", mode="before")
    @classmethod
    def blank_to_none(cls, value: Any) -> Any:
        return _blank_to_none(value)


class Wind(_ProviderBlock):
    """Wind block as reported by the provider."""

    chill: float | None = None
    direction: float | None = None
    speed: float | None = None


class Atmosphere(_ProviderBlock):
    """Atmosphere block; ``rising`` is 0 steady, 1 rising, 2 falling."""

    humidity: float | None = None
    pressure: float | None = None
    rising: int | None = None
    visibility: float | None = None


class Astronomy(_ProviderBlock):
    """Sunrise/sunset as local clock strings ("7:12 am")."""

    sunrise: str | None = None
    sunset: str | None = None


class ConditionedReading(BaseModel):
    """Raw provider fields merged with their condition metadata."""

    code: int
    condition: ConditionMetadata
    description: str | None = None

    @property
    def type(self) -> str:
        return self.condition.type


class CurrentReading(ConditionedReading):
    """The "current" reading synthesized from the forecast payload."""

    temperature: float | None = None
    wind: Wind = Field(default_factory=Wind)
    atmosphere: Atmosphere = Field(default_factory=Atmosphere)
    astronomy: Astronomy = Field(default_factory=Astronomy)


class ForecastReading(ConditionedReading):
    """One forecast day."""

    forecast_date: date
    day: str | None = None
    low: float | None = None
    high: float | None = None

    @field_validator("forecast_date", mode="before")
    @classmethod
    def parse_provider_date(cls, value: Any) -> Any:
        """Accept the provider's "19 Oct 2026" format as well as ISO dates."""
        if isinstance(value, str):
            candidate = value.strip()
            try:
                return datetime.strptime(candidate, "%d %b %Y").date()
            except ValueError:
                return candidate
        return value

    @field_validator("low", "high", mode="before")
    @classmethod
    def blank_temperature(cls, value: Any) -> Any:
        return _blank_to_none(value)


class WeatherSnapshot(BaseModel):
    """All readings returned by one gateway fetch."""

    location: str
    unit: str
    retrieval_timestamp: datetime
    current: CurrentReading
    forecasts: list[ForecastReading] = Field(default_factory=list)

    def forecast_for(self, target: date) -> ForecastReading | None:
        """Return the forecast entry for a calendar date, if the provider has one."""
        for forecast in self.forecasts:
            if forecast.forecast_date == target:
                return forecast
        return None
