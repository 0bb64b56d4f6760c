import logging
from typing import Tuple

import httpx

from climago.models import CacheInfo, CityConditions, TravelAdviceRequest, WeatherSnapshot
from climago.prompts import comparison_prompt, summary_prompt, travel_guide_prompt
from climago.services.cache import ResponseCache, advice_key, verdict_key
from climago.services.gemini import GeminiClient, GenerativeTextUnavailable

logger = logging.getLogger(__name__)


class AdvisorService:
    """Generative-text calls fronted by the response cache."""

    def __init__(self, llm: GeminiClient, cache: ResponseCache):
        self.llm = llm
        self.cache = cache

    async def _cached_generate(self, key: str, prompt: str) -> Tuple[str, CacheInfo]:
        cached = self.cache.lookup(key)
        if cached.hit and cached.value is not None:
            logger.debug("AI cache hit for %s (age %ss)", key, cached.age_seconds)
            return cached.value, CacheInfo(hit=True, age_seconds=cached.age_seconds, stale=cached.stale)

        text = await self.llm.generate(prompt)
        self.cache.set(key, text)
        return text, CacheInfo(hit=False, age_seconds=None, stale=False)

    async def travel_advice(self, req: TravelAdviceRequest) -> Tuple[str, CacheInfo]:
        return await self._cached_generate(advice_key(req.city), travel_guide_prompt(req))

    async def compare_verdict(self, city_a: CityConditions, city_b: CityConditions) -> Tuple[str, CacheInfo]:
        return await self._cached_generate(verdict_key(city_a.name, city_b.name), comparison_prompt(city_a, city_b))

    async def reply(self, prompt: str) -> str:
        return await self.llm.generate(prompt)

    async def summary(self, snapshot: WeatherSnapshot) -> str:
        """One-paragraph summary; falls back to a templated sentence when the model is unavailable."""
        try:
            text = await self.llm.generate(summary_prompt(snapshot))
            if text and "error" not in text:
                return text
        except (GenerativeTextUnavailable, httpx.HTTPError) as exc:
            logger.warning("Summary generation failed for %s: %s", snapshot.name, exc)
        return (
            f"Current conditions in {snapshot.name} are {snapshot.description} "
            f"with a temperature of {round(snapshot.temperature)}°C."
        )
