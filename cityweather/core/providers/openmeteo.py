from __future__ import annotations

import logging
from typing import Optional

from .base import DecodeError, HTTPProvider, LocationNotFound, require_float
from ..abstractions import Coordinate, GeocodeResult, WeatherObservation


class OpenMeteoGeocoder(HTTPProvider):
    base_url = "https://geocoding-api.open-meteo.com/v1/search"

    def __init__(self, base_url: Optional[str] = None, **kwargs) -> None:
        super().__init__(**kwargs)
        self.base_url = base_url or self.base_url
        self._log = logging.getLogger(self.__class__.__name__)

    def resolve(self, city_name: str) -> GeocodeResult:
        # requests percent-encodes the name into the query string
        params = {"name": city_name, "count": 1}
        response = self._request("GET", self.base_url, params=params)
        data = self._json(response)
        results = data.get("results")
        if results is None:
            # Open-Meteo drops the key entirely when nothing matches
            results = []
        if not isinstance(results, list):
            raise DecodeError("results must be a list")
        if not results:
            self._log.info("No geocoding candidates for %r", city_name)
            raise LocationNotFound(city_name)
        return tuple(self._coordinate(candidate) for candidate in results)

    def _coordinate(self, candidate: object) -> Coordinate:
        if not isinstance(candidate, dict):
            raise DecodeError("geocoding candidate must be an object")
        return Coordinate(
            latitude=require_float(candidate, "latitude"),
            longitude=require_float(candidate, "longitude"),
        )


class OpenMeteoForecastClient(HTTPProvider):
    base_url = "https://api.open-meteo.com/v1/forecast"

    def __init__(self, base_url: Optional[str] = None, **kwargs) -> None:
        super().__init__(**kwargs)
        self.base_url = base_url or self.base_url
        self._log = logging.getLogger(self.__class__.__name__)

    def current_weather(self, coordinate: Coordinate) -> WeatherObservation:
        params = {
            "latitude": coordinate.latitude,
            "longitude": coordinate.longitude,
            "current_weather": "true",
        }
        response = self._request("GET", self.base_url, params=params)
        data = self._json(response)
        current = data.get("current_weather")
        if not isinstance(current, dict):
            raise DecodeError("missing current weather")
        return WeatherObservation(
            temperature=require_float(current, "temperature"),
            windspeed=require_float(current, "windspeed"),
            condition_code=_condition_code(current.get("weathercode")),
        )


def _condition_code(value: Optional[object]) -> Optional[int]:
    if value is None:
        return None
    if isinstance(value, bool):
        raise DecodeError(f"weathercode must be an integer, got {value!r}")
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if isinstance(value, int):
        return value
    raise DecodeError(f"weathercode must be an integer, got {value!r}")


__all__ = ["OpenMeteoForecastClient", "OpenMeteoGeocoder"]
