"""Daily timeline normalization and weight interpolation."""

from collections.abc import Iterable, Sequence
from datetime import date, timedelta

from health_tracker.domain.records import DailyRecord, NormalizedPoint


def normalize(records: Iterable[DailyRecord]) -> list[NormalizedPoint]:
    """Return one point per day between the first and last weigh-in.

    Days without a record keep every field unset, so gap days never receive
    made-up intake.
    """
    by_date = _index_by_date(records)
    weight_dates = [
        day for day, record in by_date.items() if record.weight_kg is not None
    ]
    if not weight_dates:
        return []

    first_date = min(weight_dates)
    days_between = (max(weight_dates) - first_date).days
    series = []
    for offset in range(days_between + 1):
        day = first_date + timedelta(days=offset)
        record = by_date.get(day)
        if record is None:
            series.append(NormalizedPoint(date=day))
            continue
        series.append(
            NormalizedPoint(
                date=day,
                weight=record.weight_kg,
                calories=record.calories,
                protein_g=record.protein_g,
                carbs_g=record.carbs_g,
                fat_g=record.fat_g,
                exercise_minutes=record.exercise_minutes,
                steps=record.steps,
            )
        )
    return series


def sort_records(records: Iterable[DailyRecord]) -> list[DailyRecord]:
    """Return records sorted by date with one record per date."""
    by_date = _index_by_date(records)
    return [by_date[day] for day in sorted(by_date)]


def weight_observations(
    records: Iterable[DailyRecord],
) -> list[tuple[date, float]]:
    """Return (date, weight) pairs for weigh-in days, oldest first."""
    return [
        (record.date, float(record.weight_kg))
        for record in sort_records(records)
        if record.weight_kg is not None
    ]


def count_weight_observations(records: Iterable[DailyRecord]) -> int:
    """Return the number of days with a logged weight."""
    return len(weight_observations(records))


def interpolate_weight(
    observations: Sequence[tuple[date, float]], target: date
) -> float | None:
    """Linearly interpolate weight at a date from sorted observations.

    Targets outside the observed range take the nearest endpoint weight.
    """
    if not observations:
        return None

    before: tuple[date, float] | None = None
    after: tuple[date, float] | None = None
    for observed_at, weight in observations:
        if observed_at <= target:
            before = (observed_at, weight)
        if observed_at >= target and after is None:
            after = (observed_at, weight)

    if before is None:
        return after[1] if after else None
    if after is None or before[0] == after[0]:
        return before[1]

    ratio = (target - before[0]).days / (after[0] - before[0]).days
    return before[1] + (after[1] - before[1]) * ratio


def _index_by_date(records: Iterable[DailyRecord]) -> dict[date, DailyRecord]:
    # Later records for the same date replace earlier ones.
    by_date: dict[date, DailyRecord] = {}
    for record in sorted(records, key=lambda item: item.date):
        by_date[record.date] = record
    return by_date
