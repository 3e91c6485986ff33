from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Optional

import requests
from requests import Response


class ProviderError(RuntimeError):
    """Base provider error."""


class TransportError(ProviderError):
    """The upstream could not be reached or answered with an error status."""


class DecodeError(ProviderError):
    """The upstream answered, but the body was not what we expected."""


class LocationNotFound(LookupError):
    """The geocoder returned no candidates for the requested name."""


@dataclass
class RequestConfig:
    timeout: float = 5.0


class HTTPProvider:
    """Base class that adds a shared session and timeouts for HTTP providers.

    Failures are split in two: anything that stops us from getting a response
    (connection errors, timeouts, non-2xx statuses) becomes
    :class:`TransportError`, anything wrong with the body becomes
    :class:`DecodeError`. There is deliberately no retry layer here.
    """

    def __init__(
        self,
        session: Optional[requests.Session] = None,
        request_config: Optional[RequestConfig] = None,
    ) -> None:
        self.request_config = request_config or RequestConfig()
        self.session = session or self._build_session(self.request_config)
        self._log = logging.getLogger(self.__class__.__name__)

    def _build_session(self, config: RequestConfig) -> requests.Session:
        session = requests.Session()
        session.headers.update({"Accept": "application/json"})
        return session

    def _handle_response(self, response: Response) -> Response:
        if response.status_code >= 400:
            self._log.error("Provider returned %s: %s", response.status_code, response.text)
            raise TransportError(f"HTTP {response.status_code}")
        return response

    def _request(self, method: str, url: str, **kwargs) -> Response:
        try:
            response = self.session.request(
                method,
                url,
                timeout=self.request_config.timeout,
                **kwargs,
            )
        except requests.Timeout as exc:
            self._log.error("Request timed out", exc_info=exc)
            raise TransportError("timeout") from exc
        except requests.RequestException as exc:
            self._log.error("Request failed", exc_info=exc)
            raise TransportError("request failed") from exc
        return self._handle_response(response)

    def _json(self, response: Response) -> dict:
        try:
            data = response.json()
        except ValueError as exc:
            self._log.error("Failed to decode JSON", exc_info=exc)
            raise DecodeError("invalid json") from exc
        if not isinstance(data, dict):
            raise DecodeError(f"expected a JSON object, got {type(data).__name__}")
        return data

    def close(self) -> None:
        self.session.close()


def require_float(payload: dict, key: str) -> float:
    value: Any = payload.get(key)
    # bool is an int subclass but never a valid measurement
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise DecodeError(f"{key} must be a number, got {value!r}")
    return float(value)


__all__ = [
    "DecodeError",
    "HTTPProvider",
    "LocationNotFound",
    "ProviderError",
    "RequestConfig",
    "TransportError",
    "require_float",
]
