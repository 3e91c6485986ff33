from __future__ import annotations

import responses
from django.conf import settings
from django.test import Client
from responses import matchers


def _london_geocode(rsps: responses.RequestsMock) -> None:
    rsps.add(
        "GET",
        settings.GEOCODING_URL,
        match=[matchers.query_param_matcher({"name": "London", "count": "1"})],
        json={"results": [{"name": "London", "latitude": 51.5, "longitude": -0.12}]},
        status=200,
    )


def test_weather_endpoint_end_to_end() -> None:
    client = Client()

    with responses.RequestsMock() as rsps:
        _london_geocode(rsps)
        rsps.add(
            "GET",
            settings.FORECAST_URL,
            match=[
                matchers.query_param_matcher(
                    {"latitude": "51.5", "longitude": "-0.12", "current_weather": "true"}
                )
            ],
            json={"current_weather": {"temperature": 15.0, "windspeed": 10.0, "weathercode": 0}},
            status=200,
        )
        response = client.get("/weather", {"city": "London"})
        assert len(rsps.calls) == 2

    assert response.status_code == 200
    assert response.json() == {
        "city": "London",
        "temperature": 15.0,
        "windspeed": 10.0,
        "description": "Clear Sky",
    }

    history = client.get("/history")
    assert history.status_code == 200
    payload = history.json()
    assert payload[0]["city"] == "London"
    assert payload[0]["search_time"].endswith("Z")
    assert len(payload) <= 10


def test_unknown_city_skips_forecast_and_history() -> None:
    client = Client()
    before = client.get("/history").json()

    with responses.RequestsMock(assert_all_requests_are_fired=False) as rsps:
        rsps.add("GET", settings.GEOCODING_URL, json={"generationtime_ms": 0.2}, status=200)
        forecast = rsps.add("GET", settings.FORECAST_URL, json={}, status=200)
        response = client.get("/weather", {"city": "Nonexistentville"})

    assert response.status_code == 404
    assert forecast.call_count == 0
    assert client.get("/history").json() == before


def test_missing_city_makes_no_network_calls() -> None:
    client = Client()

    with responses.RequestsMock() as rsps:
        response = client.get("/weather")
        assert len(rsps.calls) == 0

    assert response.status_code == 400
    assert "detail" in response.json()


def test_forecast_outage_is_server_error() -> None:
    client = Client()

    with responses.RequestsMock() as rsps:
        _london_geocode(rsps)
        rsps.add("GET", settings.FORECAST_URL, body="bad gateway", status=502)
        response = client.get("/weather", {"city": "London"})

    assert response.status_code == 502
