from __future__ import annotations

from typing import List

import pytest

from cityweather.core.abstractions import Coordinate, GeocodeResult, WeatherObservation
from cityweather.core.providers.base import DecodeError, LocationNotFound, TransportError
from cityweather.core.services.weather_service import (
    CityNotFound,
    UpstreamFailure,
    WeatherResolver,
    describe_condition,
)


class _StubGeocoder:
    def __init__(self, result: GeocodeResult = (), error: Exception | None = None) -> None:
        self.result = result
        self.error = error
        self.calls: List[str] = []

    def resolve(self, city_name: str) -> GeocodeResult:
        self.calls.append(city_name)
        if self.error is not None:
            raise self.error
        return self.result


class _StubForecast:
    def __init__(self, observation: WeatherObservation | None = None, error: Exception | None = None) -> None:
        self.observation = observation
        self.error = error
        self.calls: List[Coordinate] = []

    def current_weather(self, coordinate: Coordinate) -> WeatherObservation:
        self.calls.append(coordinate)
        if self.error is not None:
            raise self.error
        assert self.observation is not None
        return self.observation


def test_resolve_city_builds_report_for_london() -> None:
    geocoder = _StubGeocoder((Coordinate(51.5, -0.12),))
    forecast = _StubForecast(WeatherObservation(temperature=15.0, windspeed=10.0, condition_code=0))
    resolver = WeatherResolver(geocoder, forecast)

    report = resolver.resolve_city("London")

    assert report.city == "London"
    assert report.temperature == 15.0
    assert report.windspeed == 10.0
    assert report.description == "Clear Sky"
    assert forecast.calls == [Coordinate(51.5, -0.12)]


def test_resolve_city_keeps_original_input() -> None:
    geocoder = _StubGeocoder((Coordinate(48.85, 2.35),))
    forecast = _StubForecast(WeatherObservation(temperature=9.5, windspeed=3.0, condition_code=2))
    resolver = WeatherResolver(geocoder, forecast)

    report = resolver.resolve_city("  paris ")

    assert report.city == "  paris "
    assert geocoder.calls == ["  paris "]


def test_resolve_city_uses_first_candidate() -> None:
    geocoder = _StubGeocoder((Coordinate(1.0, 2.0), Coordinate(3.0, 4.0)))
    forecast = _StubForecast(WeatherObservation(temperature=0.0, windspeed=0.0, condition_code=61))
    resolver = WeatherResolver(geocoder, forecast)

    report = resolver.resolve_city("Springfield")

    assert forecast.calls == [Coordinate(1.0, 2.0)]
    assert report.description == "Rain"


@pytest.mark.parametrize("geocoder", [_StubGeocoder(()), _StubGeocoder(error=LocationNotFound("Nonexistentville"))])
def test_unknown_city_is_city_not_found(geocoder) -> None:
    forecast = _StubForecast(WeatherObservation(temperature=1.0, windspeed=1.0))
    resolver = WeatherResolver(geocoder, forecast)

    with pytest.raises(CityNotFound) as excinfo:
        resolver.resolve_city("Nonexistentville")

    assert excinfo.value.city == "Nonexistentville"
    assert forecast.calls == []


@pytest.mark.parametrize("error", [TransportError("timeout"), DecodeError("invalid json")])
def test_geocoder_failures_collapse_to_upstream_failure(error) -> None:
    forecast = _StubForecast(WeatherObservation(temperature=1.0, windspeed=1.0))
    resolver = WeatherResolver(_StubGeocoder(error=error), forecast)

    with pytest.raises(UpstreamFailure) as excinfo:
        resolver.resolve_city("London")

    assert excinfo.value.__cause__ is error
    assert forecast.calls == []


@pytest.mark.parametrize("error", [TransportError("HTTP 500"), DecodeError("missing current weather")])
def test_forecast_failures_collapse_to_upstream_failure(error) -> None:
    resolver = WeatherResolver(_StubGeocoder((Coordinate(51.5, -0.12),)), _StubForecast(error=error))

    with pytest.raises(UpstreamFailure):
        resolver.resolve_city("London")


def test_missing_condition_code_is_unknown() -> None:
    geocoder = _StubGeocoder((Coordinate(51.5, -0.12),))
    forecast = _StubForecast(WeatherObservation(temperature=15.0, windspeed=10.0))

    report = WeatherResolver(geocoder, forecast).resolve_city("London")

    assert report.description == "Unknown"


@pytest.mark.parametrize(
    ("code", "expected"),
    [
        (0, "Clear Sky"),
        (1, "Cloudy"),
        (2, "Cloudy"),
        (3, "Cloudy"),
        (61, "Rain"),
        (63, "Rain"),
        (65, "Rain"),
        (45, "Unknown"),
        (95, "Unknown"),
        (-1, "Unknown"),
        (32767, "Unknown"),
        (-32768, "Unknown"),
        (None, "Unknown"),
    ],
)
def test_describe_condition(code, expected) -> None:
    assert describe_condition(code) == expected
