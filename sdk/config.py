# sdk/config.py
from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Client settings, read from ``INVENTORY_*`` environment variables or ``.env``."""

    model_config = SettingsConfigDict(
        env_prefix="INVENTORY_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    api_url: str = Field(default="http://localhost:8080/api", description="Base URL of the products API")
    timeout: float = Field(default=10.0, gt=0, description="Per-request timeout in seconds")
    log_level: str = Field(default="INFO", description="Logging level for the CLI")
    low_stock_threshold: int = Field(default=10, ge=0, description="Default threshold for the low-stock report")


@lru_cache()
def get_settings() -> Settings:
    return Settings()
