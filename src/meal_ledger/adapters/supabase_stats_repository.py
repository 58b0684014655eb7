"""Supabase repository for ledger statistics."""

from dataclasses import dataclass
from datetime import date
from uuid import UUID

from supabase import Client

from meal_ledger.domain.stats import MealTotalsRow
from meal_ledger.services.stats import StatsRepository


@dataclass
class SupabaseStatsRepository(StatsRepository):
    """Supabase implementation for stats queries."""

    client: Client

    def list_meal_totals(
        self, user_id: UUID, start: date, end: date
    ) -> list[MealTotalsRow]:
        """Return meal totals logged between two dates, inclusive."""
        response = (
            self.client.table("meals")
            .select("logged_date, total_calories, protein, carbs, fat, fiber")
            .eq("user_id", str(user_id))
            .gte("logged_date", start.isoformat())
            .lte("logged_date", end.isoformat())
            .order("logged_date", desc=True)
            .execute()
        )
        return [_parse_row(row) for row in response.data or []]


def _parse_row(row: dict[str, object]) -> MealTotalsRow:
    return MealTotalsRow(
        logged_date=date.fromisoformat(str(row["logged_date"])),
        total_calories=float(row.get("total_calories") or 0.0),
        protein=float(row.get("protein") or 0.0),
        carbs=float(row.get("carbs") or 0.0),
        fat=float(row.get("fat") or 0.0),
        fiber=float(row.get("fiber") or 0.0),
    )
