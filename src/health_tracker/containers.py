"""Dependency container wiring for the application."""

from dataclasses import dataclass

from supabase import create_client

from health_tracker.adapters.supabase_entry_repository import SupabaseEntryRepository
from health_tracker.config import Settings
from health_tracker.services.forecasts import EntryRepository, ForecastService


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    forecast_service: ForecastService


def build_forecast_service(
    settings: Settings, repository: EntryRepository
) -> ForecastService:
    """Create a forecast service configured from settings."""
    return ForecastService(
        repository=repository,
        horizon_days=settings.forecast_horizon_days,
        historical_anchor_days=settings.historical_anchor_days,
        min_weight_observations=settings.min_weight_observations,
        min_backtest_observations=settings.min_backtest_observations,
        lookback_days=settings.backtest_lookback_days,
        max_history_days=settings.max_history_days,
    )


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    supabase_client = create_client(
        resolved_settings.supabase_url, resolved_settings.supabase_service_key
    )
    entry_repository = SupabaseEntryRepository(supabase_client)
    return AppContainer(
        settings=resolved_settings,
        forecast_service=build_forecast_service(resolved_settings, entry_repository),
    )
