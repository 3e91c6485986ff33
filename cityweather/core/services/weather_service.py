"""Weather service that turns a city name into a current weather report."""
from __future__ import annotations

import logging
from typing import Dict, Optional

from cityweather.core.abstractions import (
    ForecastClient,
    Geocoder,
    WeatherObservation,
    WeatherReport,
)
from cityweather.core.providers.base import LocationNotFound, ProviderError


logger = logging.getLogger(__name__)


UNKNOWN_CONDITION = "Unknown"

CONDITION_DESCRIPTIONS: Dict[int, str] = {
    0: "Clear Sky",
    1: "Cloudy",
    2: "Cloudy",
    3: "Cloudy",
    61: "Rain",
    63: "Rain",
    65: "Rain",
}


def describe_condition(code: Optional[int]) -> str:
    """Return the human readable description for a WMO weather code."""

    if code is None:
        return UNKNOWN_CONDITION
    return CONDITION_DESCRIPTIONS.get(code, UNKNOWN_CONDITION)


class WeatherServiceError(RuntimeError):
    """Base class for failures surfaced by :class:`WeatherResolver`."""


class CityNotFound(WeatherServiceError):
    """Raised when the geocoder knows no place with the requested name."""

    def __init__(self, city: str) -> None:
        super().__init__(f"City {city!r} was not found")
        self.city = city


class UpstreamFailure(WeatherServiceError):
    """Raised when either upstream service failed to produce usable data."""


class WeatherResolver:
    """Chain geocoding and forecast lookups into a single city query.

    Only the first geocoding candidate is used. Provider failures are
    collapsed into :class:`UpstreamFailure`; the original error is kept as
    ``__cause__`` and logged. Nothing is retried.
    """

    def __init__(self, geocoder: Geocoder, forecast_client: ForecastClient) -> None:
        self.geocoder = geocoder
        self.forecast_client = forecast_client

    def resolve_city(self, city_name: str) -> WeatherReport:
        try:
            candidates = self.geocoder.resolve(city_name)
        except LocationNotFound as exc:
            raise CityNotFound(city_name) from exc
        except ProviderError as exc:
            logger.warning("Geocoding failed for %r: %s", city_name, exc)
            raise UpstreamFailure("geocoding service failed") from exc

        if not candidates:
            raise CityNotFound(city_name)
        coordinate = candidates[0]

        try:
            observation = self.forecast_client.current_weather(coordinate)
        except ProviderError as exc:
            logger.warning(
                "Forecast failed for %r at (%s, %s): %s",
                city_name,
                coordinate.latitude,
                coordinate.longitude,
                exc,
            )
            raise UpstreamFailure("forecast service failed") from exc

        return self._build_report(city_name, observation)

    def _build_report(self, city_name: str, observation: WeatherObservation) -> WeatherReport:
        return WeatherReport(
            city=city_name,
            temperature=observation.temperature,
            windspeed=observation.windspeed,
            description=describe_condition(observation.condition_code),
        )


__all__ = [
    "CONDITION_DESCRIPTIONS",
    "CityNotFound",
    "UpstreamFailure",
    "WeatherResolver",
    "WeatherServiceError",
    "describe_condition",
]
