"""Supabase repository for daily journal entries."""

import logging
import math
from dataclasses import dataclass
from datetime import date, datetime
from uuid import UUID

from supabase import Client

from health_tracker.domain.records import DailyRecord
from health_tracker.services.forecasts import EntryRepository

KG_PER_LB = 0.45359237

_ENTRY_COLUMNS = (
    "date, weight_kg, weight_lbs, calories, protein_g, carbs_g, fat_g, "
    "exercise_minutes, steps"
)

_logger = logging.getLogger(__name__)


@dataclass
class SupabaseEntryRepository(EntryRepository):
    """Supabase implementation for entry queries."""

    client: Client

    def list_daily_records(
        self, user_id: UUID, start: date | None = None
    ) -> list[DailyRecord]:
        """Return a user's entries as daily records, oldest first."""
        query = (
            self.client.table("entries")
            .select(_ENTRY_COLUMNS)
            .eq("user_id", str(user_id))
        )
        if start is not None:
            query = query.gte("date", start.isoformat())
        response = query.order("date", desc=False).execute()
        records = []
        for row in response.data or []:
            record = _parse_row(row)
            if record is None:
                _logger.warning(
                    "Skipping entry without a valid date", extra={"user_id": user_id}
                )
                continue
            records.append(record)
        return records


def _parse_row(row: dict[str, object]) -> DailyRecord | None:
    day = _parse_date(row.get("date"))
    if day is None:
        return None
    weight_kg = _parse_weight(row.get("weight_kg"))
    if weight_kg is None:
        weight_lbs = _parse_weight(row.get("weight_lbs"))
        if weight_lbs is not None:
            weight_kg = weight_lbs * KG_PER_LB
    return DailyRecord(
        date=day,
        weight_kg=weight_kg,
        calories=_parse_float(row.get("calories")),
        protein_g=_parse_float(row.get("protein_g")),
        carbs_g=_parse_float(row.get("carbs_g")),
        fat_g=_parse_float(row.get("fat_g")),
        exercise_minutes=_parse_float(row.get("exercise_minutes")),
        steps=_parse_float(row.get("steps")),
    )


def _parse_date(raw: object) -> date | None:
    if isinstance(raw, datetime):
        return raw.date()
    if isinstance(raw, date):
        return raw
    if not isinstance(raw, str) or not raw:
        return None
    try:
        return datetime.fromisoformat(raw).date()
    except ValueError:
        return None


def _parse_weight(raw: object) -> float | None:
    # A zero weight is an unset form field, not a weigh-in.
    weight = _parse_float(raw)
    if weight is None or weight <= 0:
        return None
    return weight


def _parse_float(raw: object) -> float | None:
    if raw is None or isinstance(raw, bool):
        return None
    if isinstance(raw, int | float):
        value = float(raw)
    elif isinstance(raw, str):
        try:
            value = float(raw)
        except ValueError:
            return None
    else:
        return None
    return value if math.isfinite(value) else None
