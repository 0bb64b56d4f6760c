"""
Tests for the climago HTTP routes.
Upstream clients (OpenWeather, Gemini, Overpass) are fully mocked so no
network access or API keys are needed.
"""
import pytest
from unittest.mock import AsyncMock, MagicMock, patch

import httpx
from fastapi.testclient import TestClient

# ---------------------------------------------------------------------------
# Minimal env so pydantic-settings doesn't require a real .env file
# ---------------------------------------------------------------------------
import os
os.environ.setdefault("OPENWEATHER_API_KEY", "test-key")

from climago.models import Attraction
from climago.services.advisor import AdvisorService
from climago.services.cache import ResponseCache
from climago.services.gemini import GenerativeTextUnavailable


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

SAMPLE_CURRENT = {
    "name": "London",
    "sys": {"country": "GB"},
    "coord": {"lat": 51.5074, "lon": -0.1278},
    "dt": 1700000000,
    "weather": [{"id": 800, "main": "Clear", "description": "clear sky", "icon": "01d"}],
    "main": {"temp": 22.0, "feels_like": 21.0, "temp_min": 20.0, "temp_max": 24.0, "pressure": 1013, "humidity": 45},
    "wind": {"speed": 3.5},
    "visibility": 10000,
    "cod": 200,
}

SAMPLE_STORMY = {
    "name": "Mumbai",
    "sys": {"country": "IN"},
    "coord": {"lat": 19.07, "lon": 72.87},
    "weather": [{"main": "Thunderstorm", "description": "thunderstorm with rain", "icon": "11d"}],
    "main": {"temp": 31.0, "feels_like": 38.0, "pressure": 1002, "humidity": 90},
    "wind": {"speed": 12.0},
}

SAMPLE_FORECAST = {
    "city": {"name": "London", "country": "GB", "timezone": 0},
    "list": [
        {
            "dt": 1700035200,  # 08:00 UTC
            "main": {"temp": 9.0},
            "weather": [{"main": "Clouds", "description": "overcast clouds", "icon": "04d"}],
            "pop": 0.1,
        },
        {
            "dt": 1700053200,  # 13:00 UTC
            "main": {"temp": 14.0},
            "weather": [{"main": "Rain", "description": "light rain", "icon": "10d"}],
            "pop": 0.7,
        },
    ],
    "cod": "200",
}

SAMPLE_AQI = {"list": [{"main": {"aqi": 2}}]}
SAMPLE_UV = {"current": {"uvi": 6.5}}
SAMPLE_GEO = [{"lat": 51.5074, "lon": -0.1278, "name": "London", "country": "GB"}]

ADVICE_TEXT = """PLACES:
1. Tower of London - Centuries of royal history
2. British Museum - World treasures, free entry
NEARBY:
1. Windsor - 35km, castle and riverside walks
WEAR: Light layers
EAT: Fish and chips at a local pub
ALERT: None"""

VERDICT_TEXT = """COMPARISON: London is mild and clear while Mumbai is stormy and humid.
WINNER: London
REASON: Comfortable temperatures and clean air."""


def _status_error(status: int, body: dict) -> httpx.HTTPStatusError:
    request = httpx.Request("GET", "https://api.openweathermap.org/data/2.5/weather")
    response = httpx.Response(status, json=body, request=request)
    return httpx.HTTPStatusError("error", request=request, response=response)


def _make_ow():
    mock = MagicMock()
    mock.search_cities = AsyncMock(return_value=SAMPLE_GEO)
    mock.get_current = AsyncMock(return_value=SAMPLE_CURRENT)
    mock.get_current_by_city = AsyncMock(return_value=SAMPLE_CURRENT)
    mock.get_forecast_by_city = AsyncMock(return_value=SAMPLE_FORECAST)
    mock.get_air_quality = AsyncMock(return_value=SAMPLE_AQI)
    mock.get_uv = AsyncMock(return_value=SAMPLE_UV)
    return mock


def _make_llm(text=ADVICE_TEXT):
    mock = MagicMock()
    mock.generate = AsyncMock(return_value=text)
    return mock


def _make_overpass(places=None):
    mock = MagicMock()
    mock.nearby_attractions = AsyncMock(return_value=places or [])
    return mock


@pytest.fixture()
def mocks():
    return {"ow": _make_ow(), "llm": _make_llm(), "overpass": _make_overpass()}


@pytest.fixture()
def client(mocks):
    """TestClient with mocked upstreams and a fresh AI cache."""
    advisor = AdvisorService(mocks["llm"], ResponseCache())
    with patch("climago.main.ow", mocks["ow"]), patch("climago.main.advisor", advisor), \
            patch("climago.main.overpass", mocks["overpass"]):
        from climago.main import app
        with TestClient(app) as c:
            yield c


# ---------------------------------------------------------------------------
# Health check
# ---------------------------------------------------------------------------

def test_health(client):
    resp = client.get("/health")
    assert resp.status_code == 200
    assert resp.json()["status"] == "ok"


def test_root(client):
    resp = client.get("/")
    assert resp.status_code == 200
    assert "docs" in resp.json()


# ---------------------------------------------------------------------------
# Weather proxy
# ---------------------------------------------------------------------------

def test_weather_by_city_passthrough(client, mocks):
    resp = client.get("/api/weather?city=London")
    assert resp.status_code == 200
    assert resp.json()["name"] == "London"
    mocks["ow"].get_current_by_city.assert_awaited_once_with("London")


def test_weather_by_coords(client, mocks):
    resp = client.get("/api/weather?lat=51.5&lon=-0.13")
    assert resp.status_code == 200
    mocks["ow"].get_current.assert_awaited_once_with(51.5, -0.13)


def test_weather_requires_city_or_coords(client):
    resp = client.get("/api/weather")
    assert resp.status_code == 400
    assert "required" in resp.json()["detail"].lower()


def test_weather_coord_out_of_range(client):
    resp = client.get("/api/weather?lat=999&lon=0")
    assert resp.status_code == 422


def test_weather_forwards_upstream_status(client, mocks):
    mocks["ow"].get_current_by_city.side_effect = _status_error(404, {"cod": "404", "message": "city not found"})
    resp = client.get("/api/weather?city=Nowhere")
    assert resp.status_code == 404
    assert resp.json()["detail"]["message"] == "city not found"


def test_weather_transport_failure_is_500(client, mocks):
    mocks["ow"].get_current_by_city.side_effect = httpx.ConnectError("boom")
    resp = client.get("/api/weather?city=London")
    assert resp.status_code == 500
    assert resp.json()["detail"] == "Weather API error"


def test_forecast_requires_city(client):
    assert client.get("/api/forecast").status_code == 400


def test_forecast_passthrough(client):
    resp = client.get("/api/forecast?city=London")
    assert resp.status_code == 200
    assert resp.json()["city"]["name"] == "London"


def test_aqi_requires_coords(client):
    assert client.get("/api/aqi?lat=1").status_code == 400


def test_aqi_passthrough(client):
    resp = client.get("/api/aqi?lat=51.5&lon=-0.13")
    assert resp.json() == SAMPLE_AQI


def test_search(client, mocks):
    resp = client.get("/api/search?q=Lon")
    assert resp.status_code == 200
    assert resp.json()[0]["country"] == "GB"
    mocks["ow"].search_cities.assert_awaited_once_with("Lon", limit=5)


def test_search_requires_query(client):
    assert client.get("/api/search").status_code == 400


def test_uv_passthrough(client):
    resp = client.get("/api/uv?lat=51.5&lon=-0.13")
    assert resp.json()["current"]["uvi"] == 6.5


# ---------------------------------------------------------------------------
# Generative text
# ---------------------------------------------------------------------------

def test_ai_reply(client, mocks):
    mocks["llm"].generate.return_value = "Mild and bright."
    resp = client.post("/ai", json={"prompt": "Summarize London"})
    assert resp.status_code == 200
    assert resp.json() == {"reply": "Mild and bright."}


def test_ai_requires_prompt(client):
    assert client.post("/ai", json={}).status_code == 400


def test_ai_disabled_returns_503(client, mocks):
    mocks["llm"].generate.side_effect = GenerativeTextUnavailable("AI features disabled (No API Key)")
    resp = client.post("/ai", json={"prompt": "hi"})
    assert resp.status_code == 503
    assert "disabled" in resp.json()["detail"]


def test_travel_advice_parsed_and_tips_filtered(client):
    resp = client.post("/api/travel-advice", json={"city": "London", "temp": 22, "condition": "clear sky", "airQuality": 2})
    assert resp.status_code == 200
    data = resp.json()
    assert data["advice"] == ADVICE_TEXT
    assert data["document"]["places"][0] == {"name": "Tower of London", "description": "Centuries of royal history"}
    assert data["document"]["nearby"] == [{"name": "Windsor", "description": "35km, castle and riverside walks"}]
    assert data["document"]["alert"] == "None"
    assert [t["kind"] for t in data["tips"]] == ["wear", "eat"]
    assert data["cache"]["hit"] is False


def test_travel_advice_second_call_is_cached(client, mocks):
    client.post("/api/travel-advice", json={"city": "London"})
    resp = client.post("/api/travel-advice", json={"city": "LONDON"})
    assert resp.json()["cache"]["hit"] is True
    assert mocks["llm"].generate.await_count == 1


def test_travel_advice_requires_city(client):
    assert client.post("/api/travel-advice", json={"temp": 10}).status_code == 400


def test_compare_verdict_structured(client, mocks):
    mocks["llm"].generate.return_value = VERDICT_TEXT
    body = {
        "cityA": {"name": "London", "temp": 22, "humidity": 45, "wind": 3.5, "condition": "clear sky", "aqi": 2},
        "cityB": {"name": "Mumbai", "temp": 31, "humidity": 90, "wind": 12, "condition": "thunderstorm"},
    }
    resp = client.post("/api/compare-verdict", json=body)
    assert resp.status_code == 200
    doc = resp.json()["document"]
    assert doc["mode"] == "structured"
    assert doc["winner"] == "London"
    assert doc["reason"] == "Comfortable temperatures and clean air."


def test_compare_verdict_raw_fallback(client, mocks):
    mocks["llm"].generate.return_value = "Both cities are fine today, honestly."
    body = {"cityA": {"name": "London"}, "cityB": {"name": "Paris"}}
    doc = client.post("/api/compare-verdict", json=body).json()["document"]
    assert doc["mode"] == "raw"
    assert doc["winner"] is None
    assert doc["raw"] == "Both cities are fine today, honestly."


def test_compare_verdict_requires_both_cities(client):
    resp = client.post("/api/compare-verdict", json={"cityA": {"name": "London"}})
    assert resp.status_code == 400


def test_compare_verdict_cache_is_order_sensitive(client, mocks):
    mocks["llm"].generate.return_value = VERDICT_TEXT
    a, b = {"name": "London"}, {"name": "Paris"}
    client.post("/api/compare-verdict", json={"cityA": a, "cityB": b})
    resp = client.post("/api/compare-verdict", json={"cityA": b, "cityB": a})
    assert resp.json()["cache"]["hit"] is False
    assert mocks["llm"].generate.await_count == 2


# ---------------------------------------------------------------------------
# Composed views
# ---------------------------------------------------------------------------

def test_places_with_coords(client, mocks):
    mocks["overpass"].nearby_attractions.return_value = [
        Attraction(name="Hyde Park", type="outdoor", desc="Park", dist=2.3)
    ]
    resp = client.post("/api/places", json={"lat": 51.5, "lon": -0.13, "temp": 5, "condition": "clear sky", "uv": 1})
    data = resp.json()
    assert data["places"][0]["name"] == "Hyde Park"
    assert [g["item"] for g in data["gear"]] == ["Coat/Jacket"]


def test_places_without_coords_skips_overpass(client, mocks):
    resp = client.post("/api/places", json={"temp": 20, "condition": "clear sky"})
    assert resp.json()["places"] == []
    assert resp.json()["gear"] == [{"item": "Comfortable Shoes", "reason": "Good for walking"}]
    mocks["overpass"].nearby_attractions.assert_not_awaited()


def test_insights_happy_path(client, mocks):
    mocks["llm"].generate.return_value = "A bright, pleasant day."
    resp = client.get("/api/insights?city=London")
    assert resp.status_code == 200
    data = resp.json()
    assert data["score"] == 10.0
    assert data["alerts"] == []
    assert data["aqi"] == 2
    assert data["aqi_label"] == "Fair"
    assert data["uv_label"] == "High"
    assert data["summary"] == "A bright, pleasant day."
    assert [g["item"] for g in data["gear"]] == ["Sunscreen", "Hat/Sunglasses"]


def test_insights_survives_optional_failures(client, mocks):
    mocks["ow"].get_air_quality.side_effect = httpx.ConnectError("down")
    mocks["ow"].get_uv.side_effect = _status_error(401, {"message": "onecall not in plan"})
    mocks["llm"].generate.side_effect = GenerativeTextUnavailable("quota")
    resp = client.get("/api/insights?city=London")
    assert resp.status_code == 200
    data = resp.json()
    assert data["aqi"] is None
    assert data["aqi_label"] == "Unknown"
    assert data["uv"] is None
    assert data["summary"].startswith("Current conditions in London are clear sky")


def test_insights_weather_failure_is_502(client, mocks):
    mocks["ow"].get_current_by_city.side_effect = _status_error(404, {"message": "city not found"})
    assert client.get("/api/insights?city=Nowhere").status_code == 502


def test_insights_payload_without_temperature_is_502(client, mocks):
    mocks["ow"].get_current_by_city.return_value = {"name": "London", "weather": []}
    resp = client.get("/api/insights?city=London")
    assert resp.status_code == 502
    mocks["ow"].get_air_quality.assert_not_called()


def test_compare_payload_without_temperature_is_502(client, mocks):
    mocks["ow"].get_current_by_city.side_effect = [SAMPLE_CURRENT, {"name": "Nowhere"}]
    assert client.get("/api/compare?city_a=London&city_b=Nowhere").status_code == 502


def test_gemini_client_uses_configured_timeout():
    from climago.config import settings
    from climago.main import llm
    assert llm.timeout == settings.gemini_timeout_seconds


def test_compare(client, mocks):
    mocks["ow"].get_current_by_city.side_effect = [SAMPLE_CURRENT, SAMPLE_STORMY]
    mocks["ow"].get_air_quality.side_effect = [SAMPLE_AQI, None]
    resp = client.get("/api/compare?city_a=London&city_b=Mumbai")
    assert resp.status_code == 200
    data = resp.json()
    assert data["city_a"]["weather"]["name"] == "London"
    assert data["city_b"]["aqi"] is None
    comfort = data["metrics"][-1]
    assert comfort["label"] == "Comfort Score"
    assert comfort["better"] == "A"


def test_compare_requires_both(client):
    assert client.get("/api/compare?city_a=London").status_code == 422


def test_planner(client):
    resp = client.get("/api/planner?city=London")
    assert resp.status_code == 200
    slots = resp.json()["slots"]
    assert slots["Morning"]["suggestion"] == "Bundle up."
    assert slots["Afternoon"]["suggestion"] == "Expect precipitation, stay dry."
    assert slots["Evening"] is None
