"""Forecast API endpoints with simple token auth."""

from __future__ import annotations

import math
from typing import TYPE_CHECKING
from uuid import UUID  # noqa: TC003
from zoneinfo import ZoneInfo

from fastapi import APIRouter, Depends, Header, HTTPException, Request, status

from health_tracker.services.backtest import format_backtest_summary

if TYPE_CHECKING:
    from health_tracker.containers import AppContainer
    from health_tracker.domain.forecast import (
        BacktestResult,
        ForecastPoint,
        ForecastReport,
        ForecastScenario,
    )

router = APIRouter(tags=["forecast"])

RECENT_BACKTEST_POINTS = 10


def _get_api_token(request: Request) -> str:
    container: AppContainer = request.app.state.container
    return container.settings.api_token


async def require_api_token(
    x_api_token: str | None = Header(default=None),
    api_token: str = Depends(_get_api_token),
) -> None:
    """Ensure requests include a valid API token."""
    if not x_api_token or x_api_token != api_token:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED)


@router.get("/users/{user_id}/forecast", dependencies=[Depends(require_api_token)])
async def user_forecast(
    user_id: UUID, request: Request, timezone: str | None = None
) -> dict[str, object]:
    """Return the weight forecast report for a user."""
    container: AppContainer = request.app.state.container
    timezone_name = timezone or container.settings.default_timezone
    if not _is_valid_timezone(timezone_name):
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=f"Unknown timezone: {timezone_name}",
        )
    report = container.forecast_service.get_report(user_id, timezone_name)
    return serialize_report(report)


def serialize_report(report: ForecastReport) -> dict[str, object]:
    """Convert a forecast report into a JSON-friendly payload."""
    summary = report.summary
    return {
        "status": report.status.value,
        "weight_observations": report.weight_observations,
        "summary": {
            "current": summary.current,
            "projected": summary.projected,
            "change": summary.change,
        }
        if summary
        else None,
        "backtest": _serialize_backtest(report.backtest),
        "scenarios": {
            name: _serialize_scenario(scenario)
            for name, scenario in report.scenarios.items()
        },
        "series": [
            {"date": point.date.isoformat(), "weight": point.weight}
            for point in report.series
        ],
        "notes": report.notes,
    }


def _serialize_backtest(result: BacktestResult | None) -> dict[str, object] | None:
    if result is None:
        return None
    return {
        "mae": _finite_or_none(result.mae),
        "rmse": _finite_or_none(result.rmse),
        "std": _finite_or_none(result.std),
        "samples": result.sample_count,
        "label": format_backtest_summary(result),
        "recent": [
            {
                "date": prediction.date.isoformat(),
                "actual": prediction.actual,
                "predicted": prediction.predicted,
            }
            for prediction in result.recent(RECENT_BACKTEST_POINTS)
        ],
    }


def _serialize_scenario(scenario: ForecastScenario) -> dict[str, object]:
    return {
        "start_date": scenario.start_date.isoformat(),
        "start_weight": scenario.start_weight,
        "days_ago": scenario.days_ago,
        "points": [_serialize_point(point) for point in scenario.points],
    }


def _serialize_point(point: ForecastPoint) -> dict[str, object]:
    return {
        "date": point.date.isoformat(),
        "weight": point.weight,
        "lower": point.lower,
        "upper": point.upper,
    }


def _finite_or_none(value: float) -> float | None:
    return value if math.isfinite(value) else None


def _is_valid_timezone(value: str) -> bool:
    try:
        ZoneInfo(value)
    except Exception:
        return False
    return True
