"""Domain models for the meal ledger."""

from dataclasses import dataclass, field
from datetime import date, datetime
from uuid import UUID

from meal_ledger.domain.items import FoodItem


@dataclass(frozen=True)
class MealTotals:
    """Meal-level totals summed across food items."""

    total_calories: float
    protein: float
    carbs: float
    fat: float
    fiber: float
    micronutrients: dict[str, float] = field(default_factory=dict)


@dataclass(frozen=True)
class MealDraft:
    """A confirmed meal ready to be persisted."""

    meal_name: str
    description: str
    totals: MealTotals
    items: list[FoodItem]


@dataclass(frozen=True)
class MealRecord:
    """Meal row stored in the ledger."""

    id: UUID
    user_id: UUID
    meal_name: str
    description: str | None
    logged_date: date
    logged_at: datetime
    total_calories: float
    protein: float
    carbs: float
    fat: float
    fiber: float
    micronutrients: dict[str, float]
