"""CLI: ask a simulated weather question or watch polled weather changes."""

from __future__ import annotations

import argparse
import asyncio
import sys

from rich.console import Console
from rich.table import Table

from .config import Settings, load_settings
from .events import ChangeEvent
from .exceptions import ConfigError, WeatherError
from .host import ConsoleAutomationBus, ConsoleSpeechOutput, StaticGeolocation
from .intent import (
    CURRENT_TRIGGER,
    LOCATION_TRIGGER,
    TEMPERATURE_TRIGGER,
    TODAY_TRIGGER,
    WEATHER_TRIGGER,
)
from .log_setup import setup_logger
from .models import Coordinates, RecognizedSpeech, SpeechTrigger, TimeExpression
from .service import WeatherService


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse voice weather CLI arguments."""
    parser = argparse.ArgumentParser(
        description="Ask spoken-style weather questions or watch weather changes."
    )
    parser.add_argument("--lat", type=float, default=None, help="Device latitude.")
    parser.add_argument("--lon", type=float, default=None, help="Device longitude.")
    subparsers = parser.add_subparsers(dest="command", required=True)

    ask = subparsers.add_parser("ask", help="Simulate one recognized utterance.")
    ask.add_argument("--weather", action="store_true", help="Ask about the weather.")
    ask.add_argument("--temperature", action="store_true", help="Ask about the temperature.")
    ask.add_argument("--now", action="store_true", help="Ask about the current moment.")
    ask.add_argument("--today", action="store_true", help="Ask about today.")
    ask.add_argument("--location", type=str, default=None, help="Spoken place name.")
    ask.add_argument(
        "--time",
        action="append",
        default=[],
        metavar="D/M[/Y]",
        help="Recognized date (1-based month). Repeat to simulate an ambiguous request.",
    )
    ask.add_argument("--language", choices=["en", "nl"], default=None, help="Spoken language.")

    poll = subparsers.add_parser("poll", help="Run poll cycles and print change events.")
    poll.add_argument("--cycles", type=int, default=1, help="Number of poll cycles.")
    poll.add_argument(
        "--interval", type=float, default=None, help="Seconds between cycles (overrides config)."
    )
    return parser.parse_args(argv)


def _parse_time(value: str) -> TimeExpression:
    parts = value.split("/")
    if len(parts) not in (2, 3) or not all(part.strip().isdigit() for part in parts):
        raise WeatherError(f"Invalid --time {value!r}; expected D/M or D/M/Y.")
    day, month = int(parts[0]), int(parts[1])
    year = int(parts[2]) if len(parts) == 3 else None
    if not (1 <= day <= 31):
        raise WeatherError(f"Invalid day in --time {value!r}.")
    if not (1 <= month <= 12):
        raise WeatherError(f"Invalid month in --time {value!r}.")
    return TimeExpression(transcript=f"on {value}", day=day, month=month - 1, year=year)


def _speech_from_args(args: argparse.Namespace, language: str) -> RecognizedSpeech:
    words: list[str] = []
    triggers: list[SpeechTrigger] = []

    def add(trigger_id: str, text: str) -> None:
        position = len(" ".join(words)) + (1 if words else 0)
        words.append(text)
        triggers.append(SpeechTrigger(id=trigger_id, position=position, text=text))

    if args.weather:
        add(WEATHER_TRIGGER, "weather")
    if args.temperature:
        add(TEMPERATURE_TRIGGER, "temperature")
    if args.now:
        add(CURRENT_TRIGGER, "now")
    if args.today:
        add(TODAY_TRIGGER, "today")

    time_expressions = [_parse_time(value) for value in args.time]
    words.extend(expression.transcript for expression in time_expressions)
    if args.location:
        add(LOCATION_TRIGGER, "in")
        words.append(args.location)

    return RecognizedSpeech(
        triggers=triggers,
        time_expressions=time_expressions,
        transcript=" ".join(words),
        language=language,
    )


def _device_coordinates(args: argparse.Namespace, settings: Settings) -> Coordinates | None:
    lat = args.lat if args.lat is not None else settings.weather_default_lat
    lon = args.lon if args.lon is not None else settings.weather_default_lon
    if lat is None or lon is None:
        return None
    return Coordinates(latitude=lat, longitude=lon)


def _print_changes(console: Console, changes: list[ChangeEvent]) -> None:
    if not changes:
        console.print("No weather changes detected.")
        return
    table = Table(title="Weather Changes")
    table.add_column("Event")
    table.add_column("Old")
    table.add_column("New")
    for change in changes:
        table.add_row(
            change.name,
            "-" if change.old is None else str(change.old),
            "-" if change.new is None else str(change.new),
        )
    console.print(table)


async def _run(args: argparse.Namespace, settings: Settings, console: Console) -> int:
    service = WeatherService(
        settings,
        speech=ConsoleSpeechOutput(console),
        automation=ConsoleAutomationBus(console),
        geolocation=StaticGeolocation(_device_coordinates(args, settings)),
    )
    try:
        if args.command == "ask":
            language = args.language or settings.default_language
            await service.assistant.handle_speech(_speech_from_args(args, language))
            return 0

        if args.cycles <= 0:
            raise WeatherError("--cycles must be > 0.")
        if args.interval is not None:
            if args.interval <= 0:
                raise WeatherError("--interval must be > 0 when provided.")
            service.poller.interval_seconds = args.interval
        changes: list[ChangeEvent] = []
        for cycle in range(args.cycles):
            changes.extend(await service.poller.poll_once())
            if cycle + 1 < args.cycles:
                await asyncio.sleep(service.poller.interval_seconds)
        _print_changes(console, changes)
        return 0
    finally:
        await service.aclose()


def main(argv: list[str] | None = None) -> int:
    """Run the voice weather CLI."""
    args = parse_args(argv)
    console = Console()

    try:
        settings = load_settings()
    except ConfigError as exc:
        setup_logger().error("Configuration failure: %s", exc)
        return 2

    logger = setup_logger(level=settings.log_level, log_format=settings.log_format)
    logger.info("Starting voice weather CLI: %s", settings.safe_summary())
    try:
        return asyncio.run(_run(args, settings, console))
    except WeatherError as exc:
        logger.error("Weather failure: %s", exc)
        return 4


if __name__ == "__main__":
    sys.exit(main())
