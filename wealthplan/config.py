"""Configuration management using Pydantic Settings"""

from typing import List

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from WEALTHPLAN_* environment variables"""

    model_config = SettingsConfigDict(
        env_prefix="WEALTHPLAN_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Service
    service_name: str = "wealthplan"
    log_level: str = "INFO"

    # HTTP
    cors_origins: List[str] = [
        "http://localhost:3000",
        "http://localhost:5173",
        "http://127.0.0.1:3000",
        "http://127.0.0.1:5173",
    ]

    # Calendar: "today" for progress is taken in this zone
    timezone: str = "America/Sao_Paulo"

    # Currency
    currency_minor_digits: int = 2
    brl_rate: float = 4.50  # indicative USD -> BRL shown next to dollar amounts


settings = Settings()
