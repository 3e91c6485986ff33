from __future__ import annotations

import os
import tempfile

import django
import pytest
import requests_mock as requests_mock_lib


_TEST_DB_DIR = tempfile.mkdtemp(prefix="cityweather-tests-")

os.environ.setdefault("DJANGO_SECRET_KEY", "test-secret")
os.environ.setdefault("DJANGO_SETTINGS_MODULE", "cityweather.settings")
os.environ.setdefault("DATABASE_URL", f"sqlite:///{os.path.join(_TEST_DB_DIR, 'history.db')}")
os.environ.setdefault("HISTORY_WORKERS", "0")
os.environ.setdefault("GEOCODING_URL", "https://geocoding.test/v1/search")
os.environ.setdefault("FORECAST_URL", "https://forecast.test/v1/forecast")

django.setup()


@pytest.fixture()
def requests_mock():
    with requests_mock_lib.Mocker() as mocker:
        yield mocker
