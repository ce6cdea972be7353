"""Domain models for backtests and weight forecasts."""

import math
from dataclasses import dataclass, field
from datetime import date
from enum import StrEnum

from health_tracker.domain.records import DriverSet, NormalizedPoint


class ForecastError(Exception):
    """Base error for the forecasting engine."""


class CannotForecastError(ForecastError):
    """Raised when there is no weight observation to anchor a forecast."""


class ForecastStatus(StrEnum):
    """Outcome of a forecast run."""

    OK = "ok"
    INSUFFICIENT_DATA = "insufficient_data"


@dataclass(frozen=True)
class BacktestPrediction:
    """Model prediction for an already observed day."""

    date: date
    actual: float
    predicted: float

    @property
    def error(self) -> float:
        return abs(self.predicted - self.actual)


@dataclass(frozen=True)
class BacktestResult:
    """Replay of the model against observed weights.

    The statistics are NaN when no day could be evaluated.
    """

    predictions: tuple[BacktestPrediction, ...]
    mae: float
    rmse: float
    std: float

    @property
    def sample_count(self) -> int:
        return len(self.predictions)

    @property
    def is_available(self) -> bool:
        """Return true when the statistics can be used for uncertainty."""
        return bool(self.predictions) and math.isfinite(self.std)

    def recent(self, limit: int = 10) -> tuple[BacktestPrediction, ...]:
        """Return the most recent predictions."""
        if limit <= 0:
            return ()
        return self.predictions[-limit:]


@dataclass(frozen=True)
class ForecastPoint:
    """Projected weight for a future day."""

    date: date
    weight: float
    lower: float | None = None
    upper: float | None = None


@dataclass(frozen=True)
class ForecastScenario:
    """A forward simulation under one set of drivers."""

    name: str
    start_date: date
    start_weight: float
    drivers: DriverSet
    points: tuple[ForecastPoint, ...]
    days_ago: int = 0


@dataclass(frozen=True)
class ForecastSummary:
    """Headline numbers for the primary scenario."""

    current: float
    projected: float
    change: float


@dataclass
class ForecastReport:
    """Full output of a forecasting run."""

    status: ForecastStatus
    weight_observations: int
    series: list[NormalizedPoint] = field(default_factory=list)
    backtest: BacktestResult | None = None
    scenarios: dict[str, ForecastScenario] = field(default_factory=dict)
    summary: ForecastSummary | None = None
    notes: list[str] = field(default_factory=list)
