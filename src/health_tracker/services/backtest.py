"""Backtesting of the energy-balance model on a user's own history."""

import logging
import math
from collections.abc import Sequence

from health_tracker.domain.forecast import BacktestPrediction, BacktestResult
from health_tracker.domain.records import NormalizedPoint
from health_tracker.services.energy_balance import (
    DEFAULT_PARAMETERS,
    ModelParameters,
    average_drivers,
    predict_with_drivers,
)

DEFAULT_LOOKBACK_DAYS = 7

_logger = logging.getLogger(__name__)


def backtest(
    series: Sequence[NormalizedPoint],
    lookback_days: int = DEFAULT_LOOKBACK_DAYS,
    params: ModelParameters = DEFAULT_PARAMETERS,
) -> BacktestResult:
    """Predict every observed day from the preceding window and score it.

    Each prediction starts from the latest weigh-in inside the window and
    jumps straight to the evaluated day using the window's mean drivers.
    """
    predictions = []
    for index in range(lookback_days, len(series)):
        point = series[index]
        if point.weight is None:
            continue
        window = series[index - lookback_days : index]
        anchor = _latest_weighed(window)
        if anchor is None or anchor.weight is None:
            continue
        predicted = predict_with_drivers(
            anchor.weight,
            average_drivers([item.drivers() for item in window]),
            days=(point.date - anchor.date).days,
            params=params,
        )
        predictions.append(
            BacktestPrediction(
                date=point.date, actual=point.weight, predicted=predicted
            )
        )

    mae, rmse, std = error_statistics([p.error for p in predictions])
    _logger.debug(
        "Backtest evaluated %s of %s days (mae=%s)", len(predictions), len(series), mae
    )
    return BacktestResult(predictions=tuple(predictions), mae=mae, rmse=rmse, std=std)


def error_statistics(errors: Sequence[float]) -> tuple[float, float, float]:
    """Return (mae, rmse, std) of absolute errors, NaN when empty."""
    if not errors:
        return math.nan, math.nan, math.nan
    count = len(errors)
    mae = sum(errors) / count
    rmse = math.sqrt(sum(error * error for error in errors) / count)
    std = math.sqrt(sum((error - mae) ** 2 for error in errors) / count)
    return mae, rmse, std


def format_backtest_summary(result: BacktestResult | None) -> str:
    """Format the backtest error for display."""
    if result is None or not result.is_available:
        return "Backtest unavailable"
    return f"Backtest MAE: {result.mae:.2f} kg (n={result.sample_count})"


def _latest_weighed(window: Sequence[NormalizedPoint]) -> NormalizedPoint | None:
    for point in reversed(window):
        if point.weight is not None:
            return point
    return None
