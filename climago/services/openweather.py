from typing import Any, Dict, List

import httpx


class OpenWeatherClient:
    def __init__(
        self,
        base_url: str,
        api_key: str,
        geo_url: str = "https://api.openweathermap.org/geo/1.0",
        timeout_seconds: float = 5.0,
        units: str = "metric",
    ):
        self.base_url = base_url.rstrip("/")
        self.geo_url = geo_url.rstrip("/")
        self.api_key = api_key
        self.timeout = timeout_seconds
        self.units = units

    async def _get(self, url: str, params: Dict[str, Any]) -> Any:
        params = {**params, "appid": self.api_key}
        async with httpx.AsyncClient(timeout=self.timeout) as client:
            r = await client.get(url, params=params)
            r.raise_for_status()
            return r.json()

    async def search_cities(self, query: str, limit: int = 5) -> List[Dict[str, Any]]:
        return await self._get(f"{self.geo_url}/direct", {"q": query, "limit": limit})

    async def get_current(self, lat: float, lon: float) -> Dict[str, Any]:
        return await self._get(f"{self.base_url}/weather", {"lat": lat, "lon": lon, "units": self.units})

    async def get_current_by_city(self, city: str) -> Dict[str, Any]:
        return await self._get(f"{self.base_url}/weather", {"q": city, "units": self.units})

    async def get_forecast_by_city(self, city: str) -> Dict[str, Any]:
        # 5 day / 3 hour forecast
        return await self._get(f"{self.base_url}/forecast", {"q": city, "units": self.units})

    async def get_air_quality(self, lat: float, lon: float) -> Dict[str, Any]:
        return await self._get(f"{self.base_url}/air_pollution", {"lat": lat, "lon": lon})

    async def get_uv(self, lat: float, lon: float) -> Dict[str, Any]:
        params = {
            "lat": lat,
            "lon": lon,
            "exclude": "minutely,hourly,daily,alerts",
            "units": self.units,
        }
        return await self._get(f"{self.base_url}/onecall", params)
