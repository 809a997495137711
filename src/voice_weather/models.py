"""Shared typed models for locations and recognized speech."""

from __future__ import annotations

from pydantic import BaseModel, Field, model_validator


class Coordinates(BaseModel):
    """Geographic position reported by the host's geolocation service."""

    latitude: float = Field(ge=-90, le=90)
    longitude: float = Field(ge=-180, le=180)


class Location(BaseModel):
    """Either coordinates or a place name, never both."""

    coordinates: Coordinates | None = None
    name: str | None = None

    @model_validator(mode="after")
    def exactly_one_representation(self) -> Location:
        if self.name is not None and not self.name.strip():
            self.name = None
        if (self.coordinates is None) == (self.name is None):
            raise ValueError("Location needs exactly one of coordinates or name.")
        return self

    @classmethod
    def from_coordinates(cls, latitude: float, longitude: float) -> Location:
        return cls(coordinates=Coordinates(latitude=latitude, longitude=longitude))

    @classmethod
    def from_name(cls, name: str) -> Location:
        return cls(name=name)


class SpeechTrigger(BaseModel):
    """One matched trigger from the speech recognizer."""

    id: str
    position: int = 0
    text: str = ""


class TimeExpression(BaseModel):
    """A recognized time phrase; ``month`` is a 0-based index (5 is June)."""

    transcript: str
    day: int | None = Field(default=None, ge=1, le=31)
    month: int | None = Field(default=None, ge=0, le=11)
    year: int | None = None
    position: int | None = None


class RecognizedSpeech(BaseModel):
    """Structured speech-recognition output for one utterance."""

    triggers: list[SpeechTrigger] = Field(default_factory=list)
    time_expressions: list[TimeExpression] = Field(default_factory=list)
    transcript: str = ""
    language: str = "en"
