"""Forecast pipeline over a user's logged entries."""

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Protocol
from uuid import UUID
from zoneinfo import ZoneInfo

from health_tracker.domain.forecast import (
    CannotForecastError,
    ForecastReport,
    ForecastStatus,
)
from health_tracker.domain.records import DailyRecord
from health_tracker.services.backtest import DEFAULT_LOOKBACK_DAYS, backtest
from health_tracker.services.energy_balance import DEFAULT_PARAMETERS, ModelParameters
from health_tracker.services.forecaster import (
    DEFAULT_HISTORICAL_ANCHOR_DAYS,
    DEFAULT_HORIZON_DAYS,
    DEFAULT_SCENARIOS,
    PRIMARY_SCENARIO,
    forecast,
    summarize,
)
from health_tracker.services.normalizer import (
    count_weight_observations,
    normalize,
    sort_records,
)

_logger = logging.getLogger(__name__)


class EntryRepository(Protocol):
    """Persistence interface for daily journal entries."""

    def list_daily_records(
        self, user_id: UUID, start: date | None = None
    ) -> list[DailyRecord]:
        """Return a user's daily records on or after `start`."""


@dataclass
class ForecastService:
    """Service that turns logged entries into a weight forecast report."""

    repository: EntryRepository
    horizon_days: int = DEFAULT_HORIZON_DAYS
    historical_anchor_days: int = DEFAULT_HISTORICAL_ANCHOR_DAYS
    min_weight_observations: int = 3
    min_backtest_observations: int = 10
    lookback_days: int = DEFAULT_LOOKBACK_DAYS
    max_history_days: int | None = 730
    scenarios: tuple[str, ...] = DEFAULT_SCENARIOS
    primary_scenario: str = PRIMARY_SCENARIO
    params: ModelParameters = DEFAULT_PARAMETERS

    def get_report(self, user_id: UUID, timezone_name: str = "UTC") -> ForecastReport:
        """Fetch a user's entries and build their forecast report."""
        today = datetime.now(tz=ZoneInfo(timezone_name)).date()
        start = None
        if self.max_history_days is not None:
            start = today - timedelta(days=self.max_history_days)
        records = self.repository.list_daily_records(user_id, start)
        _logger.info(
            "Building forecast: user_id=%s records=%s", user_id, len(records)
        )
        return self.build_report(records, today=today)

    def build_report(
        self, records: Sequence[DailyRecord], today: date | None = None
    ) -> ForecastReport:
        """Run normalization, backtest and forecast over a record set."""
        history = self._cap_history(sort_records(records))
        observation_count = count_weight_observations(history)
        if observation_count < self.min_weight_observations:
            _logger.info(
                "Insufficient weight data: observations=%s required=%s",
                observation_count,
                self.min_weight_observations,
            )
            return ForecastReport(
                status=ForecastStatus.INSUFFICIENT_DATA,
                weight_observations=observation_count,
                notes=[
                    f"At least {self.min_weight_observations} weight entries "
                    "are needed for a forecast."
                ],
            )

        series = normalize(history)
        report = ForecastReport(
            status=ForecastStatus.OK,
            weight_observations=observation_count,
            series=series,
        )

        if observation_count >= self.min_backtest_observations:
            result = backtest(series, self.lookback_days, self.params)
            if result.is_available:
                report.backtest = result
        if report.backtest is None:
            report.notes.append(
                "Backtest unavailable; forecast shown without confidence bounds."
            )

        try:
            report.scenarios = forecast(
                series,
                report.backtest,
                self.horizon_days,
                self.scenarios,
                records=history,
                today=today,
                historical_anchor_days=self.historical_anchor_days,
                params=self.params,
            )
        except CannotForecastError:
            _logger.warning("Forecast skipped: no anchor weight in normalized series")
            report.status = ForecastStatus.INSUFFICIENT_DATA
            report.scenarios = {}
            return report

        # The normalized series ends on the latest weigh-in.
        latest_weight = series[-1].weight
        if latest_weight is not None:
            report.summary = summarize(
                report.scenarios, latest_weight, self.primary_scenario
            )
        _logger.debug(
            "Forecast built: scenarios=%s backtest_samples=%s",
            len(report.scenarios),
            report.backtest.sample_count if report.backtest else 0,
        )
        return report

    def _cap_history(self, records: list[DailyRecord]) -> list[DailyRecord]:
        if self.max_history_days is None or not records:
            return records
        cutoff = records[-1].date - timedelta(days=self.max_history_days)
        return [record for record in records if record.date >= cutoff]
