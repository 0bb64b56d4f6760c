from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field


AQI_LABELS = {1: "Good", 2: "Fair", 3: "Moderate", 4: "Poor", 5: "Very Poor"}


# ── Upstream payloads ────────────────────────────────────────────────────────

class WeatherSnapshot(BaseModel):
    model_config = ConfigDict(frozen=True)

    temperature: float
    feels_like: float
    humidity: int
    wind_speed: float
    pressure: int
    condition: str = ""
    description: str = ""
    icon: Optional[str] = None
    name: str = ""
    country: Optional[str] = None
    lat: float = 0.0
    lon: float = 0.0
    visibility: Optional[int] = None

    @classmethod
    def from_openweather(cls, payload: Dict[str, Any]) -> "WeatherSnapshot":
        """
        Build a snapshot from an OpenWeather ``/weather`` response.

        Raises ValueError when the payload carries no temperature; every
        other member falls back to a neutral default.
        """
        main = payload.get("main") if isinstance(payload, dict) else None
        if not isinstance(main, dict) or main.get("temp") is None:
            raise ValueError("Weather payload has no main.temp")
        wind = payload.get("wind") or {}
        coord = payload.get("coord") or {}
        weather = (payload.get("weather") or [{}])[0]
        temp = float(main["temp"])
        feels_like = main.get("feels_like")
        return cls(
            temperature=temp,
            feels_like=float(feels_like) if feels_like is not None else temp,
            humidity=int(main.get("humidity") or 0),
            wind_speed=float(wind.get("speed") or 0.0),
            pressure=int(main.get("pressure") or 0),
            condition=weather.get("main") or "",
            description=weather.get("description") or "",
            icon=weather.get("icon"),
            name=payload.get("name") or "",
            country=(payload.get("sys") or {}).get("country"),
            lat=float(coord.get("lat", 0.0)),
            lon=float(coord.get("lon", 0.0)),
            visibility=payload.get("visibility"),
        )


def parse_air_quality(payload: Any) -> Optional[int]:
    """Return the AQI (1..5) from an air_pollution response, or None when unknown."""
    try:
        aqi = payload["list"][0]["main"]["aqi"]
    except (KeyError, IndexError, TypeError):
        return None
    if isinstance(aqi, bool) or not isinstance(aqi, int) or aqi not in AQI_LABELS:
        return None
    return aqi


def parse_uv(payload: Any) -> Optional[float]:
    """Accepts both the One Call shape ``{current: {uvi}}`` and the legacy ``{value}``."""
    if not isinstance(payload, dict):
        return None
    current = payload.get("current")
    raw = current.get("uvi") if isinstance(current, dict) else payload.get("value")
    if isinstance(raw, bool) or not isinstance(raw, (int, float)) or raw < 0:
        return None
    return float(raw)


def aqi_label(aqi: Optional[int]) -> str:
    return AQI_LABELS.get(aqi, "Unknown") if aqi is not None else "Unknown"


def uv_label(uvi: float) -> str:
    if uvi <= 2:
        return "Low"
    if uvi <= 5:
        return "Moderate"
    if uvi <= 7:
        return "High"
    return "Very High"


# ── Parsed generative text ───────────────────────────────────────────────────

class PlaceItem(BaseModel):
    name: str
    description: str = ""


class AdviceDocument(BaseModel):
    places: List[PlaceItem] = Field(default_factory=list)
    nearby: List[PlaceItem] = Field(default_factory=list)
    wear: str = ""
    eat: str = ""
    alert: str = ""


class Tip(BaseModel):
    kind: Literal["wear", "eat", "alert"]
    text: str


class VerdictDocument(BaseModel):
    comparison: Optional[str] = None
    winner: Optional[str] = None
    reason: Optional[str] = None
    raw: str = ""
    mode: Literal["structured", "raw"] = "raw"


# ── Rule outputs ─────────────────────────────────────────────────────────────

class GearItem(BaseModel):
    item: str
    reason: str


class Attraction(BaseModel):
    name: str
    type: Literal["indoor", "outdoor"]
    desc: str
    dist: Optional[float] = None


class PlannerSlot(BaseModel):
    temp: float
    desc: str
    icon: Optional[str] = None
    pop: float = 0.0
    suggestion: str


# ── HTTP models ──────────────────────────────────────────────────────────────

class CacheInfo(BaseModel):
    hit: bool
    age_seconds: Optional[int] = None
    stale: bool = False


class PromptRequest(BaseModel):
    prompt: str = ""


class PromptReply(BaseModel):
    reply: str


class TravelAdviceRequest(BaseModel):
    city: str = ""
    temp: Optional[float] = None
    humidity: Optional[int] = None
    wind: Optional[float] = None
    condition: Optional[str] = None
    airQuality: Optional[int] = None


class TravelAdviceResponse(BaseModel):
    advice: str
    document: AdviceDocument
    tips: List[Tip] = Field(default_factory=list)
    cache: CacheInfo


class CityConditions(BaseModel):
    name: str
    temp: Optional[float] = None
    humidity: Optional[int] = None
    wind: Optional[float] = None
    condition: Optional[str] = None
    aqi: Optional[int] = None


class CompareVerdictRequest(BaseModel):
    cityA: Optional[CityConditions] = None
    cityB: Optional[CityConditions] = None


class CompareVerdictResponse(BaseModel):
    verdict: str
    document: VerdictDocument
    cache: CacheInfo


class PlacesRequest(BaseModel):
    city: Optional[str] = None
    lat: Optional[float] = None
    lon: Optional[float] = None
    temp: float = 20.0
    condition: Optional[str] = None
    aqi: Optional[int] = None
    uv: Optional[float] = None


class PlacesResponse(BaseModel):
    places: List[Attraction] = Field(default_factory=list)
    gear: List[GearItem] = Field(default_factory=list)


class CityReport(BaseModel):
    weather: WeatherSnapshot
    score: float
    alerts: List[str] = Field(default_factory=list)
    advice: List[str] = Field(default_factory=list)
    aqi: Optional[int] = None
    aqi_label: str = "Unknown"
    uv: Optional[float] = None
    uv_label: Optional[str] = None
    gear: List[GearItem] = Field(default_factory=list)
    summary: str = ""


class MetricComparison(BaseModel):
    label: str
    a: float
    b: float
    unit: str
    better: Literal["A", "B", "tie"] = "tie"


class ComparisonResponse(BaseModel):
    city_a: CityReport
    city_b: CityReport
    metrics: List[MetricComparison] = Field(default_factory=list)


class PlannerResponse(BaseModel):
    city: str
    slots: Dict[str, Optional[PlannerSlot]]
