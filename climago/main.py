import logging
from typing import Any, Awaitable, Optional

import httpx
from fastapi import FastAPI, HTTPException, Query
from fastapi.responses import JSONResponse

from climago.config import settings
from climago.insights import advice_tips, parse_advice, parse_verdict, plan_day, recommend_gear
from climago.logging_config import configure_logging
from climago.models import (
    CityReport,
    CompareVerdictRequest,
    CompareVerdictResponse,
    ComparisonResponse,
    PlacesRequest,
    PlacesResponse,
    PlannerResponse,
    PromptReply,
    PromptRequest,
    TravelAdviceRequest,
    TravelAdviceResponse,
    WeatherSnapshot,
)
from climago.services.advisor import AdvisorService
from climago.services.cache import ResponseCache
from climago.services.dashboard import build_city_report, build_comparison
from climago.services.gemini import GeminiClient, GenerativeTextUnavailable
from climago.services.openweather import OpenWeatherClient
from climago.services.overpass import OverpassClient

configure_logging(settings.log_level)
logger = logging.getLogger(__name__)

app = FastAPI(title=settings.app_name)

ai_cache = ResponseCache(ttl_seconds=settings.ai_cache_ttl_seconds)
ow = OpenWeatherClient(
    settings.openweather_base_url,
    settings.openweather_api_key,
    settings.openweather_geo_url,
    timeout_seconds=settings.upstream_timeout_seconds,
)
llm = GeminiClient(
    settings.gemini_base_url,
    settings.gemini_api_key,
    settings.gemini_model,
    timeout_seconds=settings.gemini_timeout_seconds,
)
overpass = OverpassClient(settings.overpass_url, settings.overpass_radius_m, settings.places_limit)
advisor = AdvisorService(llm, ai_cache)


@app.get("/health")
def health():
    return {"status": "ok", "service": settings.app_name}


@app.get("/")
def root():
    return JSONResponse({"service": settings.app_name, "docs": "/docs"})


# ── Weather proxy ────────────────────────────────────────────────────────────

@app.get("/api/weather")
async def weather(
    city: Optional[str] = None,
    lat: Optional[float] = Query(None, ge=-90, le=90),
    lon: Optional[float] = Query(None, ge=-180, le=180),
):
    if city:
        return await _proxy(ow.get_current_by_city(city), "Weather")
    if lat is not None and lon is not None:
        return await _proxy(ow.get_current(lat, lon), "Weather")
    raise HTTPException(status_code=400, detail="City or coordinates required")


@app.get("/api/forecast")
async def forecast(city: str = Query("", description="City name, e.g. 'London'")):
    if not city:
        raise HTTPException(status_code=400, detail="City is required")
    return await _proxy(ow.get_forecast_by_city(city), "Forecast")


@app.get("/api/aqi")
async def air_quality(
    lat: Optional[float] = Query(None, ge=-90, le=90),
    lon: Optional[float] = Query(None, ge=-180, le=180),
):
    if lat is None or lon is None:
        raise HTTPException(status_code=400, detail="Coordinates required")
    return await _proxy(ow.get_air_quality(lat, lon), "AQI")


@app.get("/api/search")
async def search(q: str = ""):
    if not q:
        raise HTTPException(status_code=400, detail="Query required")
    return await _proxy(ow.search_cities(q, limit=5), "Search")


@app.get("/api/uv")
async def uv_index(
    lat: Optional[float] = Query(None, ge=-90, le=90),
    lon: Optional[float] = Query(None, ge=-180, le=180),
):
    if lat is None or lon is None:
        raise HTTPException(status_code=400, detail="Coords required")
    return await _proxy(ow.get_uv(lat, lon), "UV")


# ── Generative text ──────────────────────────────────────────────────────────

@app.post("/ai", response_model=PromptReply)
async def ai_reply(body: PromptRequest):
    if not body.prompt:
        raise HTTPException(status_code=400, detail="Missing prompt")
    text = await _generative(advisor.reply(body.prompt), "AI")
    return PromptReply(reply=text)


@app.post("/api/travel-advice", response_model=TravelAdviceResponse)
async def travel_advice(body: TravelAdviceRequest):
    if not body.city:
        raise HTTPException(status_code=400, detail="City is required")

    text, cache_info = await _generative(advisor.travel_advice(body), "Travel advice")
    document = parse_advice(text)
    return TravelAdviceResponse(advice=text, document=document, tips=advice_tips(document), cache=cache_info)


@app.post("/api/compare-verdict", response_model=CompareVerdictResponse)
async def compare_verdict(body: CompareVerdictRequest):
    if body.cityA is None or body.cityB is None:
        raise HTTPException(status_code=400, detail="Both cities required")

    text, cache_info = await _generative(advisor.compare_verdict(body.cityA, body.cityB), "Compare verdict")
    return CompareVerdictResponse(verdict=text, document=parse_verdict(text), cache=cache_info)


# ── Composed views ───────────────────────────────────────────────────────────

@app.post("/api/places", response_model=PlacesResponse)
async def places(body: PlacesRequest):
    attractions = []
    if body.lat is not None and body.lon is not None:
        attractions = await overpass.nearby_attractions(body.lat, body.lon)
    return PlacesResponse(places=attractions, gear=recommend_gear(body.temp, body.condition, body.uv))


@app.get("/api/insights", response_model=CityReport)
async def insights(
    city: Optional[str] = None,
    lat: Optional[float] = Query(None, ge=-90, le=90),
    lon: Optional[float] = Query(None, ge=-180, le=180),
):
    if city:
        payload = await _upstream(ow.get_current_by_city(city), "Weather")
    elif lat is not None and lon is not None:
        payload = await _upstream(ow.get_current(lat, lon), "Weather")
    else:
        raise HTTPException(status_code=400, detail="City or coordinates required")

    try:
        snapshot = WeatherSnapshot.from_openweather(payload)
    except ValueError as exc:
        raise HTTPException(status_code=502, detail=f"Weather error: {exc}")
    return await build_city_report(ow, advisor, snapshot)


@app.get("/api/compare", response_model=ComparisonResponse)
async def compare(
    city_a: str = Query(..., min_length=1),
    city_b: str = Query(..., min_length=1),
):
    return await _upstream(build_comparison(ow, city_a.strip(), city_b.strip()), "Compare")


@app.get("/api/planner", response_model=PlannerResponse)
async def planner(city: str = Query(..., min_length=1)):
    data = await _upstream(ow.get_forecast_by_city(city), "Forecast")
    name = (data.get("city") or {}).get("name") or city
    return PlannerResponse(city=name, slots=plan_day(data))


# ── Shared helpers ───────────────────────────────────────────────────────────

async def _proxy(call: Awaitable[Any], what: str) -> Any:
    """Pass-through: forward the upstream status code on HTTP errors."""
    try:
        return await call
    except httpx.HTTPStatusError as exc:
        raise HTTPException(status_code=exc.response.status_code, detail=_upstream_detail(exc))
    except Exception as exc:
        logger.error("%s API error: %s", what, exc)
        raise HTTPException(status_code=500, detail=f"{what} API error")


async def _upstream(call: Awaitable[Any], what: str) -> Any:
    """Composed routes: any upstream failure is a 502."""
    try:
        return await call
    except httpx.HTTPStatusError as exc:
        raise HTTPException(status_code=502, detail=f"{what} error: {_upstream_detail(exc)}")
    except httpx.HTTPError as exc:
        raise HTTPException(status_code=502, detail=f"{what} error: {exc}")
    except ValueError as exc:
        raise HTTPException(status_code=502, detail=f"{what} error: {exc}")


async def _generative(call: Awaitable[Any], what: str) -> Any:
    try:
        return await call
    except GenerativeTextUnavailable as exc:
        logger.error("%s error: %s", what, exc)
        raise HTTPException(status_code=503, detail=str(exc))
    except httpx.HTTPError as exc:
        logger.error("%s error: %s", what, exc)
        raise HTTPException(status_code=502, detail=str(exc))


def _upstream_detail(exc: httpx.HTTPStatusError) -> Any:
    try:
        return exc.response.json()
    except ValueError:
        return exc.response.text
