# apparel_store/core/settings.py
from functools import lru_cache
from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    APP_NAME: str = "apparel-store-pricing"
    APP_ENV: str = "local"  # local | development | production

    # --- Logging ---
    LOG_LEVEL: str = "INFO"
    LOG_JSON: bool = True  # False -> coloured console output for local dev

    # --- Pricing ---
    # None -> catalog bundled with the package
    PRICING_CATALOG_PATH: Optional[str] = None
    PROMO_CODES_PATH: Optional[str] = None
    CURRENCY: str = "INR"
    CURRENCY_SYMBOL: str = "₹"

    # --- HTTP ---
    ALLOWED_ORIGINS: list[str] = ["http://localhost:3000"]

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )


settings = Settings()  # reads .env


@lru_cache
def get_settings() -> Settings:
    return settings
