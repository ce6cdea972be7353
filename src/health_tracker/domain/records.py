"""Domain models for daily health records."""

from dataclasses import dataclass
from datetime import date


@dataclass(frozen=True)
class DailyRecord:
    """Logged metrics for a single calendar day."""

    date: date
    weight_kg: float | None = None
    calories: float | None = None
    protein_g: float | None = None
    carbs_g: float | None = None
    fat_g: float | None = None
    exercise_minutes: float | None = None
    steps: float | None = None


@dataclass(frozen=True)
class DriverSet:
    """Daily energy-balance drivers with every field resolved."""

    calories: float
    protein_g: float
    carbs_g: float
    fat_g: float
    exercise_minutes: float
    steps: float

    @classmethod
    def from_record(
        cls, record: "DailyRecord | NormalizedPoint | None", fallback: "DriverSet"
    ) -> "DriverSet":
        """Build drivers from a record, filling absent fields from fallback."""
        if record is None:
            return fallback
        return cls(
            calories=_or(record.calories, fallback.calories),
            protein_g=_or(record.protein_g, fallback.protein_g),
            carbs_g=_or(record.carbs_g, fallback.carbs_g),
            fat_g=_or(record.fat_g, fallback.fat_g),
            exercise_minutes=_or(record.exercise_minutes, fallback.exercise_minutes),
            steps=_or(record.steps, fallback.steps),
        )


ZERO_DRIVERS = DriverSet(
    calories=0.0,
    protein_g=0.0,
    carbs_g=0.0,
    fat_g=0.0,
    exercise_minutes=0.0,
    steps=0.0,
)

# Assumed day when nothing was logged. This is a fixed baseline, not an
# estimate of the user's behaviour.
DEFAULT_DRIVERS = DriverSet(
    calories=2000.0,
    protein_g=80.0,
    carbs_g=250.0,
    fat_g=70.0,
    exercise_minutes=30.0,
    steps=8000.0,
)


@dataclass(frozen=True)
class NormalizedPoint:
    """One day of the gap-filled timeline."""

    date: date
    weight: float | None = None
    calories: float | None = None
    protein_g: float | None = None
    carbs_g: float | None = None
    fat_g: float | None = None
    exercise_minutes: float | None = None
    steps: float | None = None

    def drivers(self) -> DriverSet:
        """Return drivers with missing values counted as zero."""
        return DriverSet.from_record(self, ZERO_DRIVERS)


def _or(value: float | None, fallback: float) -> float:
    return fallback if value is None else float(value)
