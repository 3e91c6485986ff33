"""Core abstractions for the city weather domain."""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional, Protocol, Tuple


@dataclass(frozen=True, slots=True)
class Coordinate:
    """A geographic point returned by the geocoder."""

    latitude: float
    longitude: float


# Candidates in upstream ranking order; the first entry is the best match.
GeocodeResult = Tuple[Coordinate, ...]


@dataclass(frozen=True, slots=True)
class WeatherObservation:
    """Point-in-time reading: temperature in Celsius, wind speed in km/h."""

    temperature: float
    windspeed: float
    condition_code: Optional[int] = None


@dataclass(frozen=True, slots=True)
class WeatherReport:
    """The answer handed back to callers of the resolver."""

    city: str
    temperature: float
    windspeed: float
    description: str


@dataclass(frozen=True, slots=True)
class HistoryEntry:
    id: int
    city: str
    searched_at: datetime


class Geocoder(Protocol):
    """Resolves free-text place names to coordinate candidates."""

    def resolve(self, city_name: str) -> GeocodeResult:
        ...


class ForecastClient(Protocol):
    """A data source capable of returning the current weather for a point."""

    def current_weather(self, coordinate: Coordinate) -> WeatherObservation:
        ...


__all__ = [
    "Coordinate",
    "ForecastClient",
    "GeocodeResult",
    "Geocoder",
    "HistoryEntry",
    "WeatherObservation",
    "WeatherReport",
]
