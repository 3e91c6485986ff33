"""API URL configuration."""
from __future__ import annotations

from django.urls import path

from cityweather.api.views import HistoryView, WeatherView
from cityweather.core.context import build_app_context

context = build_app_context()

urlpatterns = [
    path(
        "weather",
        WeatherView.as_view(resolver=context.resolver, recorder=context.recorder),
        name="weather",
    ),
    path(
        "history",
        HistoryView.as_view(history=context.history, max_limit=context.history_limit),
        name="history",
    ),
]
