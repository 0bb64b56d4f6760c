from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    # App
    app_name: str = "climago"
    log_level: str = "INFO"

    # Weather provider
    openweather_api_key: str
    openweather_base_url: str = "https://api.openweathermap.org/data/2.5"
    openweather_geo_url: str = "https://api.openweathermap.org/geo/1.0"

    # Generative text
    gemini_api_key: Optional[str] = None
    gemini_base_url: str = "https://generativelanguage.googleapis.com/v1beta"
    gemini_model: str = "gemini-2.0-flash"

    # Points of interest
    overpass_url: str = "https://overpass-api.de/api/interpreter"
    overpass_radius_m: int = 10_000
    places_limit: int = 6

    # Upstream / cache tuning
    upstream_timeout_seconds: float = 5.0
    gemini_timeout_seconds: float = 15.0
    ai_cache_ttl_seconds: int = 900


settings = Settings()
