"""Typed settings loader for the voice weather service."""

from __future__ import annotations

from typing import Any, Literal

from pydantic import AnyUrl, Field, ValidationError, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .exceptions import ConfigError

SUPPORTED_LANGUAGES = ("en", "nl")


class Settings(BaseSettings):
    """Provider endpoints, locale and polling knobs read from the environment and `.env`."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    app_env: Literal["dev", "staging", "prod"] = Field(default="dev", alias="APP_ENV")

    weather_api_base_url: AnyUrl = Field(
        default="https://query.yahooapis.com/v1/public/yql",
        validate_default=True,
        alias="WEATHER_API_BASE_URL",
    )
    weather_temp_unit: Literal["c", "f"] = Field(default="c", alias="WEATHER_TEMP_UNIT")
    weather_timeout_seconds: float = Field(default=15.0, alias="WEATHER_TIMEOUT_SECONDS")

    geocoder_base_url: AnyUrl = Field(
        default="https://maps.googleapis.com/maps/api/geocode/json",
        validate_default=True,
        alias="GEOCODER_BASE_URL",
    )
    geocoder_api_key: str | None = Field(default=None, alias="GEOCODER_API_KEY", repr=False)
    geocoder_language: str = Field(default="en", alias="GEOCODER_LANGUAGE")

    weather_default_lat: float | None = Field(default=None, alias="WEATHER_DEFAULT_LAT")
    weather_default_lon: float | None = Field(default=None, alias="WEATHER_DEFAULT_LON")
    weather_default_location: str | None = Field(default=None, alias="WEATHER_DEFAULT_LOCATION")

    poll_interval_seconds: float = Field(default=60.0, alias="POLL_INTERVAL_SECONDS")
    polling_enabled: bool = Field(default=True, alias="POLLING_ENABLED")
    response_timeout_seconds: float = Field(default=10.0, alias="RESPONSE_TIMEOUT_SECONDS")
    default_language: str = Field(default="en", alias="DEFAULT_LANGUAGE")
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="INFO", alias="LOG_LEVEL"
    )
    log_format: Literal["json", "rich"] = Field(default="json", alias="LOG_FORMAT")

    @field_validator(
        "weather_default_lat",
        "weather_default_lon",
        "weather_default_location",
        "geocoder_api_key",
        mode="before",
    )
    @classmethod
    def empty_string_to_none(cls, value: Any) -> Any:
        """Treat empty env-string values as unset."""
        if isinstance(value, str) and value.strip() == "":
            return None
        return value

    @field_validator("log_level", mode="before")
    @classmethod
    def upper_log_level(cls, value: Any) -> Any:
        if isinstance(value, str):
            return value.strip().upper()
        return value

    @model_validator(mode="after")
    def validate_ranges(self) -> Settings:
        """Validate numeric bounds and paired fields."""
        if self.weather_timeout_seconds <= 0:
            raise ValueError("WEATHER_TIMEOUT_SECONDS must be > 0.")
        if self.response_timeout_seconds <= 0:
            raise ValueError("RESPONSE_TIMEOUT_SECONDS must be > 0.")
        if not (10 <= self.poll_interval_seconds <= 3600):
            raise ValueError("POLL_INTERVAL_SECONDS must be between 10 and 3600.")
        if self.default_language not in SUPPORTED_LANGUAGES:
            raise ValueError(
                f"DEFAULT_LANGUAGE must be one of {', '.join(SUPPORTED_LANGUAGES)}."
            )
        if not self.geocoder_language.strip():
            raise ValueError("GEOCODER_LANGUAGE must not be empty.")

        has_default_lat = self.weather_default_lat is not None
        has_default_lon = self.weather_default_lon is not None
        if has_default_lat != has_default_lon:
            raise ValueError("WEATHER_DEFAULT_LAT and WEATHER_DEFAULT_LON must be set together.")
        if has_default_lat and not (-90 <= self.weather_default_lat <= 90):
            raise ValueError("WEATHER_DEFAULT_LAT must be between -90 and 90.")
        if has_default_lon and not (-180 <= self.weather_default_lon <= 180):
            raise ValueError("WEATHER_DEFAULT_LON must be between -180 and 180.")
        return self

    def safe_summary(self) -> dict[str, Any]:
        """Return config summary safe for logging (no credentials)."""
        return {
            "app_env": self.app_env,
            "weather_api_base_url": str(self.weather_api_base_url),
            "weather_temp_unit": self.weather_temp_unit,
            "weather_timeout_seconds": self.weather_timeout_seconds,
            "geocoder_base_url": str(self.geocoder_base_url),
            "geocoder_configured": self.geocoder_api_key is not None,
            "default_location_configured": (
                self.weather_default_lat is not None or self.weather_default_location is not None
            ),
            "poll_interval_seconds": self.poll_interval_seconds,
            "polling_enabled": self.polling_enabled,
            "response_timeout_seconds": self.response_timeout_seconds,
            "default_language": self.default_language,
            "log_format": self.log_format,
        }


def load_settings() -> Settings:
    """Read settings once at startup; any invalid value becomes a ConfigError."""
    try:
        return Settings()
    except ValidationError as exc:
        raise ConfigError(f"Invalid configuration: {exc}") from exc
    except OSError as exc:
        raise ConfigError(f"Failed reading environment/.env: {exc}") from exc
