"""Weather provider integrations and the decorating gateway."""

from .base import TemperatureUnit, WeatherProvider
from .gateway import CURRENT_QUERY_UNIT, WeatherGateway
from .models import (
    Astronomy,
    Atmosphere,
    ConditionedReading,
    CurrentReading,
    ForecastReading,
    WeatherSnapshot,
    Wind,
)
from .yahoo import YahooWeatherProvider

__all__ = [
    "Astronomy",
    "Atmosphere",
    "CURRENT_QUERY_UNIT",
    "ConditionedReading",
    "CurrentReading",
    "ForecastReading",
    "TemperatureUnit",
    "WeatherGateway",
    "WeatherProvider",
    "WeatherSnapshot",
    "Wind",
    "YahooWeatherProvider",
]
