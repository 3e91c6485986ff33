"""Management command to fetch weather for a city using the same stack as the API."""
from __future__ import annotations

import json
import sys
from dataclasses import asdict
from typing import Any

from django.core.management.base import BaseCommand, CommandError

from cityweather.core.context import build_app_context
from cityweather.core.services.weather_service import CityNotFound, UpstreamFailure


class Command(BaseCommand):
    help = "Fetch the current weather for a city"
    stealth_options = ("stdin",)

    def add_arguments(self, parser) -> None:  # noqa: D401
        parser.add_argument("--city", type=str, help="City name; prompted for when omitted")
        parser.add_argument("--json", action="store_true", help="Print the report as JSON")

    def handle(self, *args: Any, **options: Any) -> None:  # noqa: D401
        city = options.get("city")
        if city is None:
            self.stdout.write("Greetings from the Weather CLI Tool")
            self.stdout.write("Please enter the desirable location to check weather: ")
            city = options.get("stdin", sys.stdin).readline().strip()
        if not city or not city.strip():
            raise CommandError("A city name is required")

        context = build_app_context(workers=0)
        try:
            try:
                report = context.resolver.resolve_city(city)
            except CityNotFound as exc:
                raise CommandError("Sorry that place doesn't seem to exist!") from exc
            except UpstreamFailure as exc:
                raise CommandError(f"Weather lookup failed: {exc}") from exc
            context.recorder.submit(city)
        finally:
            context.close()

        if options.get("json"):
            self.stdout.write(json.dumps(asdict(report)))
            return
        self.stdout.write(f"The temperature in {report.city} is: {report.temperature:.1f}°C")
        self.stdout.write(f"The windspeed in {report.city} is: {report.windspeed:.1f} km/h")
        self.stdout.write(f"Conditions in {report.city}: {report.description}")
