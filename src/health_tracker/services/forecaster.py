"""Forward weight forecasts under several driver scenarios."""

import math
from collections.abc import Mapping, Sequence
from dataclasses import fields
from datetime import date, timedelta

from health_tracker.domain.forecast import (
    BacktestResult,
    CannotForecastError,
    ForecastPoint,
    ForecastScenario,
    ForecastSummary,
)
from health_tracker.domain.records import (
    DEFAULT_DRIVERS,
    DailyRecord,
    DriverSet,
    NormalizedPoint,
)
from health_tracker.services.energy_balance import (
    DEFAULT_PARAMETERS,
    ModelParameters,
    simulate,
)
from health_tracker.services.normalizer import interpolate_weight, sort_records

TODAY = "today"
WEEKLY_AVERAGE = "weekly-average"
DEFAULT_SCENARIOS = (TODAY, WEEKLY_AVERAGE)
PRIMARY_SCENARIO = WEEKLY_AVERAGE

DEFAULT_HORIZON_DAYS = 90
DEFAULT_HISTORICAL_ANCHOR_DAYS = 3
AVERAGE_WINDOW_DAYS = 7

Z_95 = 1.96
UNCERTAINTY_SCALE = 0.1

DriverSource = DailyRecord | NormalizedPoint


def historical_scenario_name(days_ago: int) -> str:
    """Return the scenario name for a forecast anchored `days_ago` days back."""
    return f"historical-{days_ago}d"


def forecast(  # noqa: PLR0913
    series: Sequence[NormalizedPoint],
    backtest_result: BacktestResult | None = None,
    horizon_days: int = DEFAULT_HORIZON_DAYS,
    scenarios: Sequence[str] = DEFAULT_SCENARIOS,
    *,
    records: Sequence[DailyRecord] | None = None,
    today: date | None = None,
    historical_anchor_days: int = DEFAULT_HISTORICAL_ANCHOR_DAYS,
    params: ModelParameters = DEFAULT_PARAMETERS,
) -> dict[str, ForecastScenario]:
    """Project weight forward from the latest weigh-in in `series`.

    Drivers are looked up in `records` when given, which lets the "today"
    scenario see days logged after the last weigh-in. Every scenario,
    including those re-anchored on recent past days, ends on the same date:
    `horizon_days` after the latest weigh-in.
    """
    observations = [
        (point.date, point.weight) for point in series if point.weight is not None
    ]
    if not observations:
        raise CannotForecastError("No weight observations to anchor a forecast")

    last_date, last_weight = observations[-1]
    sources = _driver_sources(series, records)
    by_date = {source.date: source for source in sources}
    std = _usable_std(backtest_result)

    results: dict[str, ForecastScenario] = {}
    for name in scenarios:
        drivers = scenario_drivers(name, sources, last_date, today)
        results[name] = _run_scenario(
            name, last_date, last_weight, drivers, horizon_days, std, params
        )

    for days_ago in range(1, historical_anchor_days + 1):
        anchor_date = last_date - timedelta(days=days_ago)
        anchor_weight = interpolate_weight(observations, anchor_date)
        if anchor_weight is None:
            continue
        drivers = DriverSet.from_record(by_date.get(anchor_date), DEFAULT_DRIVERS)
        name = historical_scenario_name(days_ago)
        results[name] = _run_scenario(
            name,
            anchor_date,
            anchor_weight,
            drivers,
            horizon_days + days_ago,
            std,
            params,
            days_ago=days_ago,
        )
    return results


def scenario_drivers(
    name: str,
    sources: Sequence[DriverSource],
    last_date: date,
    today: date | None = None,
) -> DriverSet:
    """Resolve the daily drivers assumed by a named scenario."""
    if name == TODAY:
        target = today or date.today()
        source = next((item for item in sources if item.date == target), None)
        return DriverSet.from_record(source, DEFAULT_DRIVERS)
    if name == WEEKLY_AVERAGE:
        return weekly_average_drivers(sources, last_date)
    raise ValueError(f"Unknown forecast scenario: {name}")


def weekly_average_drivers(
    sources: Sequence[DriverSource], last_date: date
) -> DriverSet:
    """Average the drivers logged in the week ending on `last_date`.

    Each field is averaged over the days that logged it. A field nobody
    logged that week falls back to its default; a logged zero stays zero.
    """
    start = last_date - timedelta(days=AVERAGE_WINDOW_DAYS - 1)
    window = [item for item in sources if start <= item.date <= last_date]
    averages: dict[str, float] = {}
    for driver in fields(DriverSet):
        values = [getattr(item, driver.name) for item in window]
        logged = [float(value) for value in values if value is not None]
        averages[driver.name] = (
            sum(logged) / len(logged)
            if logged
            else getattr(DEFAULT_DRIVERS, driver.name)
        )
    return DriverSet(**averages)


def uncertainty_bounds(
    weight: float, day_offset: int, std: float | None
) -> tuple[float | None, float | None]:
    """Return the 95% band around a projected weight.

    The band grows with the square root of the days since the anchor.
    """
    if std is None or not math.isfinite(std):
        return None, None
    uncertainty = std * math.sqrt(day_offset) * UNCERTAINTY_SCALE
    return weight - Z_95 * uncertainty, weight + Z_95 * uncertainty


def summarize(
    scenarios: Mapping[str, ForecastScenario],
    current_weight: float,
    primary: str = PRIMARY_SCENARIO,
) -> ForecastSummary | None:
    """Summarize the projected change for the primary scenario."""
    scenario = scenarios.get(primary)
    if scenario is None or not scenario.points:
        return None
    projected = scenario.points[-1].weight
    return ForecastSummary(
        current=current_weight,
        projected=projected,
        change=projected - current_weight,
    )


def _run_scenario(  # noqa: PLR0913
    name: str,
    start_date: date,
    start_weight: float,
    drivers: DriverSet,
    days: int,
    std: float | None,
    params: ModelParameters,
    days_ago: int = 0,
) -> ForecastScenario:
    points = []
    for offset, weight in enumerate(simulate(start_weight, drivers, days, params), 1):
        lower, upper = uncertainty_bounds(weight, offset, std)
        points.append(
            ForecastPoint(
                date=start_date + timedelta(days=offset),
                weight=weight,
                lower=lower,
                upper=upper,
            )
        )
    return ForecastScenario(
        name=name,
        start_date=start_date,
        start_weight=start_weight,
        drivers=drivers,
        points=tuple(points),
        days_ago=days_ago,
    )


def _driver_sources(
    series: Sequence[NormalizedPoint], records: Sequence[DailyRecord] | None
) -> list[DriverSource]:
    if records is not None:
        return sort_records(records)
    # Filled gap days carry no fields and do not count as logged days.
    return [point for point in series if point != NormalizedPoint(date=point.date)]


def _usable_std(result: BacktestResult | None) -> float | None:
    if result is None or not result.is_available:
        return None
    return result.std
