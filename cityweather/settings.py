"""Base Django settings for the city weather service."""
from __future__ import annotations

from pathlib import Path
import os
from datetime import timezone
from urllib.parse import quote

from django.core.exceptions import ImproperlyConfigured

BASE_DIR = Path(__file__).resolve().parent.parent


def env(name: str, default: str | None = None) -> str:
    """Fetch environment variables while allowing explicit defaults."""

    value = os.environ.get(name, default)
    if value is None:
        raise ImproperlyConfigured(f"Environment variable {name} is required")
    return value


def env_int(name: str, default: int) -> int:
    raw = os.environ.get(name)
    if raw is None or raw == "":
        return default
    try:
        return int(raw)
    except ValueError as exc:
        raise ImproperlyConfigured(f"Environment variable {name} must be an integer") from exc


def env_float(name: str, default: float) -> float:
    raw = os.environ.get(name)
    if raw is None or raw == "":
        return default
    try:
        return float(raw)
    except ValueError as exc:
        raise ImproperlyConfigured(f"Environment variable {name} must be a number") from exc


SECRET_KEY = env("DJANGO_SECRET_KEY")
DEBUG = os.environ.get("DJANGO_DEBUG", "0") == "1"
ALLOWED_HOSTS = os.environ.get("DJANGO_ALLOWED_HOSTS", "*").split(",")

INSTALLED_APPS = [
    "django.contrib.contenttypes",
    "django.contrib.auth",
    "rest_framework",
    "cityweather.api",
]

MIDDLEWARE = [
    "django.middleware.security.SecurityMiddleware",
    "django.middleware.common.CommonMiddleware",
]

ROOT_URLCONF = "cityweather.urls"

WSGI_APPLICATION = "cityweather.wsgi.application"

DEFAULT_AUTO_FIELD = "django.db.models.BigAutoField"

# Search history goes through cityweather.core.models, not the ORM.
DATABASES: dict = {}


def _history_database_url() -> str:
    url = os.environ.get("DATABASE_URL")
    if url:
        return url
    engine = os.environ.get("DB_ENGINE", "sqlite")
    if engine == "sqlite":
        return f"sqlite:///{os.environ.get('DB_NAME', str(BASE_DIR / 'cityweather.db'))}"
    if engine == "mysql":
        user = quote(env("DB_USER"), safe="")
        password = quote(env("DB_PASSWORD", ""), safe="")
        host = os.environ.get("DB_HOST", "mysql")
        port = os.environ.get("DB_PORT", "3306")
        return f"mysql://{user}:{password}@{host}:{port}/{env('DB_NAME')}"
    raise ImproperlyConfigured(f"Unsupported DB_ENGINE: {engine}")


HISTORY_DATABASE_URL = _history_database_url()
HISTORY_POOL_SIZE = env_int("HISTORY_POOL_SIZE", 5)
HISTORY_WORKERS = env_int("HISTORY_WORKERS", 2)
HISTORY_LIMIT = env_int("HISTORY_LIMIT", 10)

GEOCODING_URL = os.environ.get("GEOCODING_URL", "https://geocoding-api.open-meteo.com/v1/search")
FORECAST_URL = os.environ.get("FORECAST_URL", "https://api.open-meteo.com/v1/forecast")
UPSTREAM_TIMEOUT = env_float("UPSTREAM_TIMEOUT", 5.0)

REST_FRAMEWORK = {
    "DEFAULT_RENDERER_CLASSES": [
        "rest_framework.renderers.JSONRenderer",
    ],
    "DEFAULT_PARSER_CLASSES": [
        "rest_framework.parsers.JSONParser",
    ],
    "DEFAULT_AUTHENTICATION_CLASSES": [],
    "DEFAULT_PERMISSION_CLASSES": [
        "rest_framework.permissions.AllowAny",
    ],
    "UNAUTHENTICATED_USER": None,
}

LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO").upper()

LOGGING = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "standard": {
            "format": "%(asctime)s %(levelname)s %(name)s: %(message)s",
        },
    },
    "handlers": {
        "console": {
            "class": "logging.StreamHandler",
            "formatter": "standard",
        },
    },
    "root": {
        "handlers": ["console"],
        "level": LOG_LEVEL,
    },
    "loggers": {
        "django": {
            "handlers": ["console"],
            "level": os.environ.get("DJANGO_LOG_LEVEL", "WARNING"),
            "propagate": False,
        },
    },
}

LANGUAGE_CODE = "en-us"
TIME_ZONE = "UTC"
USE_I18N = True
USE_TZ = True
DEFAULT_TIMEZONE = timezone.utc
