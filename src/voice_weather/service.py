"""Wiring of the weather service from settings and host capabilities."""

from __future__ import annotations

import asyncio
import logging
import random

from .assistant import WeatherAssistant
from .automation import WeatherConditions, forward_changes
from .config import Settings
from .events import EventBus
from .host import AutomationBus, GeolocationService, Localizer, ReverseGeocoder, SpeechOutput
from .intent import IntentParser
from .locales import CatalogLocalizer
from .location import DefaultLocationCache, GoogleReverseGeocoder, LocationResolver
from .poller import WeatherPoller
from .synthesizer import ResponseSynthesizer
from .weather.base import WeatherProvider
from .weather.gateway import WeatherGateway
from .weather.models import WeatherSnapshot
from .weather.yahoo import YahooWeatherProvider


class WeatherService:
    """Owns the shared gateway, the poller and the speech pipeline."""

    def __init__(
        self,
        settings: Settings,
        speech: SpeechOutput,
        automation: AutomationBus,
        geolocation: GeolocationService | None = None,
        provider: WeatherProvider | None = None,
        geocoder: ReverseGeocoder | None = None,
        localizer: Localizer | None = None,
        rng: random.Random | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        self.settings = settings
        self.automation = automation
        self.logger = logger or logging.getLogger("voice_weather.service")
        self.localizer = localizer or CatalogLocalizer()
        self.provider = provider or YahooWeatherProvider(settings, logger=self.logger)
        self.geocoder = geocoder or GoogleReverseGeocoder(settings, logger=self.logger)
        self.gateway = WeatherGateway(self.provider, logger=self.logger)
        self.resolver = LocationResolver(
            self.geocoder,
            geolocation=geolocation,
            cache=DefaultLocationCache.from_settings(settings),
            logger=self.logger,
        )
        self.events = EventBus(logger=self.logger)
        self.poller = WeatherPoller(
            self.fetch_current_snapshot,
            self.events,
            interval_seconds=settings.poll_interval_seconds,
            logger=self.logger,
        )
        self.conditions = WeatherConditions(self.poller)
        self.assistant = WeatherAssistant(
            parser=IntentParser(self.localizer, logger=self.logger),
            resolver=self.resolver,
            gateway=self.gateway,
            synthesizer=ResponseSynthesizer(self.localizer, rng=rng),
            localizer=self.localizer,
            speech=speech,
            temp_unit=settings.weather_temp_unit,
            response_timeout_seconds=settings.response_timeout_seconds,
            logger=self.logger,
        )
        self._poll_task: asyncio.Task[None] | None = None
        self._started = False

    async def fetch_current_snapshot(self) -> WeatherSnapshot:
        """Fetch weather for the device (or default) location."""
        location_key = await self.resolver.resolve_current()
        return await self.gateway.fetch(location_key, self.settings.weather_temp_unit)

    def start(self) -> None:
        """Register automation hooks and start polling when enabled; later calls do nothing."""
        if self._started:
            return
        self._started = True
        self.conditions.register(self.automation)
        forward_changes(self.events, self.automation)
        if self.settings.polling_enabled:
            self._poll_task = asyncio.get_running_loop().create_task(self.poller.run())
            self.logger.info(
                "Weather polling started every %ss", self.settings.poll_interval_seconds
            )

    async def aclose(self) -> None:
        if self._poll_task is not None:
            self._poll_task.cancel()
            try:
                await self._poll_task
            except asyncio.CancelledError:
                pass
            self._poll_task = None
        await self.provider.aclose()
        aclose = getattr(self.geocoder, "aclose", None)
        if aclose is not None:
            await aclose()
