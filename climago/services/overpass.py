import logging
from typing import Any, Dict, List

import httpx

from climago.insights.geo import haversine_km
from climago.models import Attraction

logger = logging.getLogger(__name__)

INDOOR_TOKENS = ("museum", "gallery", "theatre")
UNKNOWN_NAME = "Unknown Landmark"

QUERY_TEMPLATE = """
[out:json][timeout:25];
(
  node["tourism"~"attraction|museum|viewpoint|gallery|theme_park|zoo"](around:{radius},{lat},{lon});
  way["tourism"~"attraction|museum|viewpoint|gallery|theme_park|zoo"](around:{radius},{lat},{lon});
  node["historic"~"monument|castle|ruins"](around:{radius},{lat},{lon});
  way["historic"~"monument|castle|ruins"](around:{radius},{lat},{lon});
  node["leisure"="park"](around:{radius},{lat},{lon});
);
out center 15;
"""


def build_query(lat: float, lon: float, radius_m: int) -> str:
    return QUERY_TEMPLATE.format(lat=lat, lon=lon, radius=radius_m)


def summarize_elements(elements: List[Dict[str, Any]], lat: float, lon: float, limit: int = 6) -> List[Attraction]:
    """Map raw Overpass elements to attraction cards, dropping unnamed ones."""
    places: List[Attraction] = []
    for el in elements:
        tags = el.get("tags") or {}
        name = tags.get("name") or tags.get("description") or UNKNOWN_NAME
        if name == UNKNOWN_NAME:
            continue

        type_raw = tags.get("tourism") or tags.get("historic") or tags.get("leisure") or "attraction"
        kind = "indoor" if any(token in type_raw for token in INDOOR_TOKENS) else "outdoor"
        desc = type_raw.replace("_", " ")

        center = el.get("center") or {}
        p_lat = el.get("lat", center.get("lat"))
        p_lon = el.get("lon", center.get("lon"))
        dist = None
        if p_lat is not None and p_lon is not None:
            dist = round(haversine_km(lat, lon, p_lat, p_lon), 1)

        places.append(Attraction(name=name, type=kind, desc=desc[:1].upper() + desc[1:], dist=dist))
        if len(places) >= limit:
            break
    return places


class OverpassClient:
    def __init__(self, url: str, radius_m: int = 10_000, limit: int = 6, timeout_seconds: float = 30.0):
        self.url = url
        self.radius_m = radius_m
        self.limit = limit
        self.timeout = timeout_seconds

    async def nearby_attractions(self, lat: float, lon: float) -> List[Attraction]:
        """Tourist attractions around a point; any upstream failure yields an empty list."""
        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                r = await client.post(self.url, content=build_query(lat, lon, self.radius_m))
                r.raise_for_status()
                elements = r.json().get("elements") or []
        except (httpx.HTTPError, ValueError) as exc:
            logger.warning("Overpass lookup failed for (%s, %s): %s", lat, lon, exc)
            return []
        return summarize_elements(elements, lat, lon, self.limit)
