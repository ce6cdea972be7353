"""Application configuration."""

import os

from pydantic_settings import BaseSettings, SettingsConfigDict

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    supabase_url: str
    supabase_service_key: str
    api_token: str
    environment: str = _ENVIRONMENT
    log_level: str = "INFO"
    default_timezone: str = "UTC"
    forecast_horizon_days: int = 90
    historical_anchor_days: int = 3
    min_weight_observations: int = 3
    min_backtest_observations: int = 10
    backtest_lookback_days: int = 7
    max_history_days: int | None = 730

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )
