from typing import Any, Dict, Optional

import httpx

NO_CONTENT = "No content generated"


class GenerativeTextUnavailable(RuntimeError):
    """The generative-text API is disabled or returned an error."""


class GeminiClient:
    def __init__(
        self,
        base_url: str,
        api_key: Optional[str],
        model: str = "gemini-2.0-flash",
        timeout_seconds: float = 15.0,
    ):
        self.base_url = base_url.rstrip("/")
        self.api_key = api_key
        self.model = model
        self.timeout = timeout_seconds

    @property
    def enabled(self) -> bool:
        return bool(self.api_key) and not self.api_key.startswith("PLACEHOLDER")

    async def generate(self, prompt: str) -> str:
        if not self.enabled:
            raise GenerativeTextUnavailable("AI features disabled (No API Key)")

        url = f"{self.base_url}/models/{self.model}:generateContent"
        body = {"contents": [{"parts": [{"text": prompt}]}]}
        async with httpx.AsyncClient(timeout=self.timeout) as client:
            r = await client.post(url, params={"key": self.api_key}, json=body)
        try:
            data: Dict[str, Any] = r.json()
        except ValueError:
            data = {}

        if r.is_error:
            error = data.get("error") if isinstance(data, dict) else None
            message = error.get("message") if isinstance(error, dict) else None
            raise GenerativeTextUnavailable(message or "Gemini API Error")
        return extract_text(data)


def extract_text(data: Dict[str, Any]) -> str:
    try:
        text = data["candidates"][0]["content"]["parts"][0]["text"]
    except (KeyError, IndexError, TypeError):
        return NO_CONTENT
    return text or NO_CONTENT
