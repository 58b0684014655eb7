"""Meal ledger service: aggregation and persistence of confirmed meals."""

import logging
import math
from collections.abc import Mapping
from dataclasses import dataclass
from datetime import UTC, date, datetime
from typing import Protocol
from uuid import UUID

from meal_ledger.domain.items import (
    KNOWN_FIELDS,
    NUMERIC_FIELDS,
    FoodItem,
    is_micronutrient_key,
    is_number,
)
from meal_ledger.domain.meals import MealDraft, MealRecord, MealTotals

MISSING_DETAILS_MESSAGE = "Please fill in quantity and name for each item."
OUT_OF_RANGE_MESSAGE = "Nutrition values are too large to record."

_logger = logging.getLogger(__name__)


class MealValidationError(ValueError):
    """Raised when confirmed items cannot form a meal."""


class MealRepository(Protocol):
    """Persistence interface for meals."""

    def create_meal(
        self, user_id: UUID, draft: MealDraft, logged_at: datetime
    ) -> MealRecord:
        """Insert a meal row and return it."""

    def list_meals_for_date(self, user_id: UUID, day: date) -> list[MealRecord]:
        """Return meals logged on a date, newest first."""

    def delete_meal(self, user_id: UUID, meal_id: UUID) -> bool:
        """Delete a meal and report whether a row was removed."""


@dataclass
class MealLedgerService:
    """Service that turns confirmed items into stored meals."""

    repository: MealRepository

    def build_meal(self, raw_items: list[object]) -> MealDraft:
        """Validate confirmed items and compute the meal draft."""
        items = [FoodItem.from_payload(raw) for raw in raw_items]
        if not items:
            raise MealValidationError("A meal needs at least one item.")
        if any(not _filled(item.quantity) or not _filled(item.name) for item in items):
            raise MealValidationError(MISSING_DETAILS_MESSAGE)
        if any(_has_oversized_number(raw) for raw in raw_items):
            raise MealValidationError(OUT_OF_RANGE_MESSAGE)
        meal_name = ", ".join(label for label in (i.label for i in items) if label)
        return MealDraft(
            meal_name=meal_name,
            description=meal_name,
            totals=compute_totals([item.to_payload() for item in items]),
            items=items,
        )

    def save_meal(self, user_id: UUID, raw_items: list[object]) -> MealRecord:
        """Persist confirmed items as a meal for the user."""
        draft = self.build_meal(raw_items)
        record = self.repository.create_meal(
            user_id=user_id, draft=draft, logged_at=datetime.now(tz=UTC)
        )
        _logger.info(
            "Meal saved: user_id=%s meal_id=%s items=%s",
            user_id,
            record.id,
            len(draft.items),
        )
        return record

    def list_meals(self, user_id: UUID, day: date) -> list[MealRecord]:
        """Return the user's meals for a date."""
        return self.repository.list_meals_for_date(user_id, day)

    def delete_meal(self, user_id: UUID, meal_id: UUID) -> bool:
        """Delete one of the user's meals."""
        deleted = self.repository.delete_meal(user_id, meal_id)
        if deleted:
            _logger.info("Meal deleted: user_id=%s meal_id=%s", user_id, meal_id)
        return deleted


def compute_totals(items: list[dict[str, object]]) -> MealTotals:
    """Sum macros and micronutrients across items.

    Missing or non-numeric macros count as zero.
    Raises MealValidationError when a sum overflows.
    """
    calories = protein = carbs = fat = fiber = 0.0
    micronutrients: dict[str, float] = {}
    for item in items:
        calories += _amount(item.get("cal"))
        protein += _amount(item.get("p"))
        carbs += _amount(item.get("c"))
        fat += _amount(item.get("f"))
        fiber += _amount(item.get("fib"))
        for key, value in item.items():
            if key in KNOWN_FIELDS or not is_number(value):
                continue
            micronutrients[key] = micronutrients.get(key, 0.0) + value
    if not all(
        math.isfinite(total)
        for total in (calories, protein, carbs, fat, fiber, *micronutrients.values())
    ):
        raise MealValidationError(OUT_OF_RANGE_MESSAGE)
    return MealTotals(
        total_calories=calories,
        protein=protein,
        carbs=carbs,
        fat=fat,
        fiber=fiber,
        micronutrients=micronutrients,
    )


def _amount(value: object) -> float:
    return float(value) if is_number(value) else 0.0


def _filled(value: str | None) -> bool:
    return bool(value and value.strip())


def _has_oversized_number(raw: object) -> bool:
    if not isinstance(raw, Mapping):
        return False
    return any(
        isinstance(value, int)
        and not isinstance(value, bool)
        and not is_number(value)
        and (key in NUMERIC_FIELDS or is_micronutrient_key(key))
        for key, value in raw.items()
    )
