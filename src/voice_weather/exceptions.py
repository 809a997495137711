"""Application exception classes."""


class ConfigError(Exception):
    """Raised when configuration is invalid or incomplete."""


class WeatherError(Exception):
    """Base class for failures that abort a single weather request."""


class LocationUnresolvable(WeatherError):
    """Raised when no location is available or geocoding fails."""


class NoData(WeatherError):
    """Raised when the provider stays empty after the retry, or a date has no forecast."""


class AmbiguousTime(WeatherError):
    """Raised when an utterance carries more than one time expression."""

    def __init__(self, message: str, *, count: int) -> None:
        super().__init__(message)
        self.count = count


class ResponseTimeout(WeatherError):
    """Raised when a spoken response is not ready within the bounded wait."""


class WeatherProviderError(WeatherError):
    """Raised for weather/geocoding transport failures or malformed payloads."""

    def __init__(
        self,
        message: str,
        *,
        category: str = "unknown",
        status_code: int | None = None,
    ) -> None:
        super().__init__(message)
        self.category = category
        self.status_code = status_code


class UnknownConditionCode(LookupError):
    """Raised when a condition code falls outside the provider's code table."""
