"""Application Configuration - environment-driven settings via pydantic-settings.

Invariants:
    - Process settings come from environment variables or .env, never from the sale file
    - get_settings() is cached (lru_cache) - single instance per process
    - The sale tables themselves live in the JSON file at sale_config_path
"""

from functools import lru_cache
from pathlib import Path

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_SALE_CONFIG = Path(__file__).resolve().parent.parent / "sale_config.json"


class Settings(BaseSettings):
    """Application settings from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False)

    # Sale configuration
    sale_config_path: Path = DEFAULT_SALE_CONFIG
    sale_network: str = "test"

    @field_validator("sale_network", mode="before")
    @classmethod
    def normalize_network(cls, v: str) -> str:
        return v.strip() if isinstance(v, str) else v

    # API
    cors_origins: list[str] = ["http://localhost:5173"]

    # Observability
    log_level: str = "INFO"
    log_format: str = "json"


@lru_cache
def get_settings() -> Settings:
    return Settings()
