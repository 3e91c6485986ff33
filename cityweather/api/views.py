"""REST API views for city weather and search history."""
from __future__ import annotations

import logging
from dataclasses import asdict
from typing import Any, Dict, Optional

from django.conf import settings
from rest_framework import status
from rest_framework.permissions import AllowAny
from rest_framework.response import Response
from rest_framework.views import APIView

from cityweather.core.abstractions import HistoryEntry
from cityweather.core.models import HistoryStore, PersistenceError
from cityweather.core.services.history import HistoryRecorder
from cityweather.core.services.weather_service import (
    CityNotFound,
    UpstreamFailure,
    WeatherResolver,
)


logger = logging.getLogger(__name__)


def serialize_entry(entry: HistoryEntry) -> Dict[str, Any]:
    search_time = entry.searched_at.astimezone(settings.DEFAULT_TIMEZONE).isoformat().replace("+00:00", "Z")
    return {"id": entry.id, "city": entry.city, "search_time": search_time}


class WeatherView(APIView):
    """Provide the current weather for the requested city."""

    permission_classes = [AllowAny]

    resolver: Optional[WeatherResolver] = None
    recorder: Optional[HistoryRecorder] = None

    def get(self, request, *args, **kwargs):  # noqa: D401
        """Return the weather report for ``?city=``."""
        city = request.query_params.get("city", "")
        if not city.strip():
            return Response({"detail": "city query parameter is required"}, status=status.HTTP_400_BAD_REQUEST)

        try:
            report = self.resolver.resolve_city(city)
        except CityNotFound as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_404_NOT_FOUND)
        except UpstreamFailure as exc:
            logger.error("Weather lookup for %r failed: %s", city, exc)
            return Response({"detail": "weather service is unavailable"}, status=status.HTTP_502_BAD_GATEWAY)

        if self.recorder is not None:
            self.recorder.submit(city)
        return Response(asdict(report), status=status.HTTP_200_OK)


class HistoryView(APIView):
    """List the most recent successful searches, newest first."""

    permission_classes = [AllowAny]

    history: Optional[HistoryStore] = None
    max_limit = 10

    def get(self, request, *args, **kwargs):  # noqa: D401
        """Return up to ``max_limit`` history entries."""
        raw_limit = request.query_params.get("limit")
        limit = self.max_limit
        if raw_limit is not None:
            try:
                limit = int(raw_limit)
            except ValueError:
                return Response({"detail": "limit must be an integer"}, status=status.HTTP_400_BAD_REQUEST)
            if not 1 <= limit <= self.max_limit:
                return Response(
                    {"detail": f"limit must be between 1 and {self.max_limit}"},
                    status=status.HTTP_400_BAD_REQUEST,
                )

        try:
            entries = self.history.recent(limit)
        except PersistenceError:
            logger.error("Failed to read search history", exc_info=True)
            return Response({"detail": "history is unavailable"}, status=status.HTTP_503_SERVICE_UNAVAILABLE)
        return Response([serialize_entry(entry) for entry in entries], status=status.HTTP_200_OK)
