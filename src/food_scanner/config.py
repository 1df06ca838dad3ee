"""Application configuration."""

import os
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")

KNOWN_SOURCES = ("regional", "global")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    admin_email: str = "admin"
    admin_password: str
    off_regional_base_url: str = "https://in.openfoodfacts.org"
    off_global_base_url: str = "https://world.openfoodfacts.net"
    off_user_agent: str = "food-scanner/0.1 (+https://world.openfoodfacts.org)"
    lookup_sources: str | None = None
    http_timeout_seconds: float = 10.0
    lookup_retry_attempts: int = 1
    product_cache_ttl_seconds: int = 3600
    demo_fallback: bool = True
    max_image_bytes: int = 5_000_000
    storage_backend: Literal["file", "supabase"] = "file"
    storage_path: str = ".food_scanner/store.json"
    supabase_url: str | None = None
    supabase_service_key: str | None = None
    password_hash_rounds: int = 12
    log_level: str = "INFO"
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )


def parse_source_order(raw: str | None) -> list[str]:
    """Parse the lookup source order from env, ignoring unknown names."""
    if raw is None or not raw.strip():
        return list(KNOWN_SOURCES)
    order: list[str] = []
    for chunk in raw.split(","):
        value = chunk.strip().lower()
        if value in KNOWN_SOURCES and value not in order:
            order.append(value)
    return order or list(KNOWN_SOURCES)
