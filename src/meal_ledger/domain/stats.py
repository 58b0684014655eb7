"""Domain models for ledger statistics."""

from dataclasses import dataclass
from datetime import date


@dataclass(frozen=True)
class MealTotalsRow:
    """Totals of a single logged meal."""

    logged_date: date
    total_calories: float
    protein: float
    carbs: float
    fat: float
    fiber: float


@dataclass(frozen=True)
class DaySummary:
    """Totals for all meals logged on one date."""

    day: date
    calories: float
    protein: float
    carbs: float
    fat: float
    fiber: float
    meal_count: int
