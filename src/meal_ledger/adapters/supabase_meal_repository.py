"""Supabase repository for meals."""

from dataclasses import dataclass
from datetime import date, datetime
from uuid import UUID

from supabase import Client

from meal_ledger.domain.meals import MealDraft, MealRecord
from meal_ledger.services.meals import MealRepository

_MEAL_COLUMNS = (
    "id, user_id, meal_name, description, logged_date, logged_at, "
    "total_calories, protein, carbs, fat, fiber, micronutrients"
)


@dataclass
class SupabaseMealRepository(MealRepository):
    """Supabase implementation for the meals table."""

    client: Client

    def create_meal(
        self, user_id: UUID, draft: MealDraft, logged_at: datetime
    ) -> MealRecord:
        """Insert a meal row and return it."""
        response = (
            self.client.table("meals")
            .insert(
                {
                    "user_id": str(user_id),
                    "meal_name": draft.meal_name,
                    "description": draft.description,
                    "logged_date": logged_at.date().isoformat(),
                    "logged_at": logged_at.isoformat(),
                    "total_calories": draft.totals.total_calories,
                    "protein": draft.totals.protein,
                    "carbs": draft.totals.carbs,
                    "fat": draft.totals.fat,
                    "fiber": draft.totals.fiber,
                    "micronutrients": draft.totals.micronutrients,
                }
            )
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to create meal")
        return _parse_meal(response.data[0])

    def list_meals_for_date(self, user_id: UUID, day: date) -> list[MealRecord]:
        """Return meals logged on a date, newest first."""
        response = (
            self.client.table("meals")
            .select(_MEAL_COLUMNS)
            .eq("user_id", str(user_id))
            .eq("logged_date", day.isoformat())
            .order("logged_at", desc=True)
            .execute()
        )
        return [_parse_meal(row) for row in response.data or []]

    def delete_meal(self, user_id: UUID, meal_id: UUID) -> bool:
        """Delete a meal owned by the user."""
        response = (
            self.client.table("meals")
            .delete()
            .eq("id", str(meal_id))
            .eq("user_id", str(user_id))
            .execute()
        )
        return bool(response.data)


def _parse_meal(row: dict[str, object]) -> MealRecord:
    micronutrients = row.get("micronutrients")
    return MealRecord(
        id=UUID(str(row["id"])),
        user_id=UUID(str(row["user_id"])),
        meal_name=str(row.get("meal_name") or ""),
        description=row.get("description"),
        logged_date=date.fromisoformat(str(row["logged_date"])),
        logged_at=datetime.fromisoformat(str(row["logged_at"])),
        total_calories=_to_float(row.get("total_calories")),
        protein=_to_float(row.get("protein")),
        carbs=_to_float(row.get("carbs")),
        fat=_to_float(row.get("fat")),
        fiber=_to_float(row.get("fiber")),
        micronutrients=(
            {str(key): _to_float(value) for key, value in micronutrients.items()}
            if isinstance(micronutrients, dict)
            else {}
        ),
    )


def _to_float(value: object) -> float:
    if isinstance(value, int | float):
        return float(value)
    if isinstance(value, str):
        try:
            return float(value)
        except ValueError:
            return 0.0
    return 0.0
