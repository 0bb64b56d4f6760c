"""
Request orchestration: fan out independent upstream calls, then run the
rule engines over whatever came back.
"""
import asyncio
import logging
from typing import Any, Awaitable, List, Optional

import httpx

from climago.insights import comfort_score, quick_advice, recommend_gear, smart_alerts
from climago.models import (
    CityReport,
    ComparisonResponse,
    MetricComparison,
    WeatherSnapshot,
    aqi_label,
    parse_air_quality,
    parse_uv,
    uv_label,
)
from climago.services.advisor import AdvisorService
from climago.services.openweather import OpenWeatherClient

logger = logging.getLogger(__name__)


async def _optional(call: Awaitable[Any], what: str) -> Optional[Any]:
    """Await a non-critical upstream call, substituting None on failure."""
    try:
        return await call
    except (httpx.HTTPError, ValueError) as exc:
        logger.warning("%s unavailable: %s", what, exc)
        return None


def city_report(
    snapshot: WeatherSnapshot,
    aqi: Optional[int] = None,
    uv: Optional[float] = None,
    summary: str = "",
) -> CityReport:
    score = comfort_score(snapshot)
    return CityReport(
        weather=snapshot,
        score=score,
        alerts=smart_alerts(snapshot, aqi, score),
        advice=quick_advice(snapshot, score),
        aqi=aqi,
        aqi_label=aqi_label(aqi),
        uv=uv,
        uv_label=uv_label(uv) if uv is not None else None,
        gear=recommend_gear(snapshot.temperature, snapshot.description or snapshot.condition, uv),
        summary=summary,
    )


async def build_city_report(ow: OpenWeatherClient, advisor: AdvisorService, snapshot: WeatherSnapshot) -> CityReport:
    aqi_payload, uv_payload, summary = await asyncio.gather(
        _optional(ow.get_air_quality(snapshot.lat, snapshot.lon), "Air quality"),
        _optional(ow.get_uv(snapshot.lat, snapshot.lon), "UV index"),
        advisor.summary(snapshot),
    )
    return city_report(snapshot, parse_air_quality(aqi_payload), parse_uv(uv_payload), summary)


def compare_metrics(a: CityReport, b: CityReport) -> List[MetricComparison]:
    wa, wb = a.weather, b.weather
    if a.score > b.score:
        better = "A"
    elif b.score > a.score:
        better = "B"
    else:
        better = "tie"
    return [
        MetricComparison(label="Temperature", a=wa.temperature, b=wb.temperature, unit="°C"),
        MetricComparison(label="Humidity", a=wa.humidity, b=wb.humidity, unit="%"),
        MetricComparison(label="Wind Speed", a=wa.wind_speed, b=wb.wind_speed, unit=" m/s"),
        MetricComparison(label="Pressure", a=wa.pressure, b=wb.pressure, unit=" hPa"),
        MetricComparison(label="Comfort Score", a=a.score, b=b.score, unit="/10", better=better),
    ]


async def build_comparison(ow: OpenWeatherClient, city_a: str, city_b: str) -> ComparisonResponse:
    """
    Side-by-side report for two cities.

    Weather lookups are required and their errors propagate; air quality
    for either city may be missing.
    """
    payload_a, payload_b = await asyncio.gather(
        ow.get_current_by_city(city_a),
        ow.get_current_by_city(city_b),
    )
    snap_a = WeatherSnapshot.from_openweather(payload_a)
    snap_b = WeatherSnapshot.from_openweather(payload_b)

    aqi_a, aqi_b = await asyncio.gather(
        _optional(ow.get_air_quality(snap_a.lat, snap_a.lon), f"Air quality for {snap_a.name}"),
        _optional(ow.get_air_quality(snap_b.lat, snap_b.lon), f"Air quality for {snap_b.name}"),
    )
    report_a = city_report(snap_a, parse_air_quality(aqi_a))
    report_b = city_report(snap_b, parse_air_quality(aqi_b))
    return ComparisonResponse(city_a=report_a, city_b=report_b, metrics=compare_metrics(report_a, report_b))
