"""Application configuration and settings."""

from functools import lru_cache
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from feecache.constants import BaseCurrencyNetwork


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Application
    app_name: str = "FeeCache"
    app_version: str = "1.0.0"
    debug: bool = False
    log_level: str = "INFO"

    # API
    api_prefix: str = "/api/v1"

    # Network
    base_currency_network: BaseCurrencyNetwork = BaseCurrencyNetwork.BTC_MAINNET

    # Fee provider
    fee_provider: Literal["pricenode", "static"] = "pricenode"
    pricenode_base_url: str = "https://price.bisq.wiz.biz"
    pricenode_timeout: float = 30.0
    pricenode_max_retries: int = 3
    pricenode_retry_delay: float = 1.0
    static_fee_per_byte: int = Field(default=50, ge=0)

    # Refresh schedule
    refresh_interval_seconds: float = Field(
        default=300.0,
        gt=0,
        description="Interval of the periodic fee refresh",
    )
    min_pause_between_requests_seconds: float = Field(
        default=120.0,
        ge=0,
        description="Throttle window between two provider requests",
    )

    @field_validator("log_level")
    @classmethod
    def normalize_log_level(cls, v: str) -> str:
        """Accept lower case level names."""
        return v.upper()


@lru_cache
def get_settings() -> Settings:
    """Get cached application settings."""
    return Settings()
