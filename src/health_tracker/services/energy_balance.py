"""Energy-balance model for daily weight change."""

from collections.abc import Sequence
from dataclasses import dataclass

from health_tracker.domain.records import DriverSet


@dataclass(frozen=True)
class ModelParameters:
    """Physiological constants used by the energy-balance model."""

    calories_per_kg: float = 7700.0
    bmr_multiplier: float = 24.0  # kcal per kg per day
    exercise_calories_per_min: float = 8.0
    steps_calories_per_1000: float = 40.0
    protein_tef: float = 0.25
    carbs_tef: float = 0.10
    fat_tef: float = 0.03
    protein_kcal_per_g: float = 4.0
    carbs_kcal_per_g: float = 4.0
    fat_kcal_per_g: float = 9.0


DEFAULT_PARAMETERS = ModelParameters()


def predict_next_weight(  # noqa: PLR0913
    current_weight: float,
    calories: float,
    protein_g: float,
    carbs_g: float,
    fat_g: float,
    exercise_minutes: float,
    steps: float,
    days: float = 1,
    params: ModelParameters = DEFAULT_PARAMETERS,
) -> float:
    """Predict weight after `days` days of the given daily intake and activity.

    The daily net balance is computed once at `current_weight` and scaled by
    `days`; it is not re-simulated day by day.
    """
    bmr = current_weight * params.bmr_multiplier
    exercise_calories = exercise_minutes * params.exercise_calories_per_min
    steps_calories = (steps / 1000) * params.steps_calories_per_1000
    tef = (
        protein_g * params.protein_kcal_per_g * params.protein_tef
        + carbs_g * params.carbs_kcal_per_g * params.carbs_tef
        + fat_g * params.fat_kcal_per_g * params.fat_tef
    )
    total_expenditure = bmr + exercise_calories + steps_calories + tef
    net_calories = calories - total_expenditure
    weight_change = net_calories * days / params.calories_per_kg
    return current_weight + weight_change


def predict_with_drivers(
    current_weight: float,
    drivers: DriverSet,
    days: float = 1,
    params: ModelParameters = DEFAULT_PARAMETERS,
) -> float:
    """Predict weight from a resolved driver set."""
    return predict_next_weight(
        current_weight,
        drivers.calories,
        drivers.protein_g,
        drivers.carbs_g,
        drivers.fat_g,
        drivers.exercise_minutes,
        drivers.steps,
        days=days,
        params=params,
    )


def average_drivers(drivers: Sequence[DriverSet]) -> DriverSet:
    """Return the field-wise arithmetic mean of non-empty driver sets."""
    count = len(drivers)
    return DriverSet(
        calories=sum(d.calories for d in drivers) / count,
        protein_g=sum(d.protein_g for d in drivers) / count,
        carbs_g=sum(d.carbs_g for d in drivers) / count,
        fat_g=sum(d.fat_g for d in drivers) / count,
        exercise_minutes=sum(d.exercise_minutes for d in drivers) / count,
        steps=sum(d.steps for d in drivers) / count,
    )


def simulate(
    start_weight: float,
    drivers: DriverSet,
    days: int,
    params: ModelParameters = DEFAULT_PARAMETERS,
) -> list[float]:
    """Iterate the model one day at a time and return each day's weight."""
    weights = []
    weight = start_weight
    for _ in range(days):
        weight = predict_with_drivers(weight, drivers, days=1, params=params)
        weights.append(weight)
    return weights
