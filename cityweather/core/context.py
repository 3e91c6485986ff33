"""Construction of the long-lived collaborators shared by views and commands."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional

from django.conf import settings

from cityweather.core.models import HistoryStore
from cityweather.core.providers.base import RequestConfig
from cityweather.core.providers.openmeteo import OpenMeteoForecastClient, OpenMeteoGeocoder
from cityweather.core.services.history import HistoryRecorder
from cityweather.core.services.weather_service import WeatherResolver


@dataclass
class AppContext:
    resolver: WeatherResolver
    history: HistoryStore
    recorder: HistoryRecorder
    history_limit: int = 10

    def close(self) -> None:
        self.recorder.shutdown()
        self.history.close()
        self.resolver.geocoder.close()
        self.resolver.forecast_client.close()


def build_app_context(config: Optional[Any] = None, *, workers: Optional[int] = None) -> AppContext:
    """Wire providers, resolver and history from Django settings."""

    config = config or settings
    request_config = RequestConfig(timeout=config.UPSTREAM_TIMEOUT)
    resolver = WeatherResolver(
        geocoder=OpenMeteoGeocoder(base_url=config.GEOCODING_URL, request_config=request_config),
        forecast_client=OpenMeteoForecastClient(base_url=config.FORECAST_URL, request_config=request_config),
    )
    history = HistoryStore(config.HISTORY_DATABASE_URL, pool_size=config.HISTORY_POOL_SIZE)
    recorder = HistoryRecorder(
        history,
        workers=config.HISTORY_WORKERS if workers is None else workers,
    )
    return AppContext(
        resolver=resolver,
        history=history,
        recorder=recorder,
        history_limit=config.HISTORY_LIMIT,
    )


__all__ = ["AppContext", "build_app_context"]
