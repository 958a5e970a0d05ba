"""
Application configuration using pydantic-settings.
Nothing is required - every source has an offline-safe default.
"""
from pydantic_settings import BaseSettings
from functools import lru_cache


class Settings(BaseSettings):
    # Application
    app_env: str = "development"
    log_level: str = "INFO"

    # BrasilAPI (national holidays)
    brasil_api_base_url: str = "https://brasilapi.com.br/api/feriados/v1"
    national_timeout_seconds: float = 5.0

    # Gemini (municipal holidays, optional)
    gemini_api_key: str = ""
    gemini_api_url: str = (
        "https://generativelanguage.googleapis.com/v1beta/models/"
        "gemini-2.0-flash:generateContent"
    )
    ai_timeout_seconds: float = 10.0
    ai_augmentation_enabled: bool = True
    ai_cache_max_entries: int = 256
    ai_country: str = "Brazil"

    # Resolved holiday cache
    holiday_cache_ttl_seconds: int = 3600

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"


@lru_cache()
def get_settings() -> Settings:
    return Settings()
