"""Statistics service for the meal ledger."""

from dataclasses import dataclass
from datetime import UTC, date, datetime, timedelta
from typing import Protocol
from uuid import UUID

from meal_ledger.domain.stats import DaySummary, MealTotalsRow


class StatsRepository(Protocol):
    """Persistence interface for meal totals."""

    def list_meal_totals(
        self, user_id: UUID, start: date, end: date
    ) -> list[MealTotalsRow]:
        """Return meal totals logged from start to end, both inclusive."""


@dataclass
class StatsService:
    """Service for daily and historical summaries."""

    repository: StatsRepository

    def get_day(self, user_id: UUID, day: date | None = None) -> DaySummary:
        """Return totals for a single date, today by default."""
        resolved = day or today_utc()
        rows = self.repository.list_meal_totals(user_id, resolved, resolved)
        return _aggregate_day(resolved, rows)

    def get_history(
        self, user_id: UUID, days: int = 30, today: date | None = None
    ) -> list[DaySummary]:
        """Return one summary per date with meals, newest first."""
        end = today or today_utc()
        start = end - timedelta(days=max(days, 0))
        rows = self.repository.list_meal_totals(user_id, start, end)
        by_day: dict[date, list[MealTotalsRow]] = {}
        for row in rows:
            by_day.setdefault(row.logged_date, []).append(row)
        return [
            _aggregate_day(day, by_day[day]) for day in sorted(by_day, reverse=True)
        ]


def today_utc() -> date:
    """Return the current date in UTC."""
    return datetime.now(tz=UTC).date()


def _aggregate_day(day: date, rows: list[MealTotalsRow]) -> DaySummary:
    total = DaySummary(
        day=day, calories=0, protein=0, carbs=0, fat=0, fiber=0, meal_count=0
    )
    for row in rows:
        if row.logged_date != day:
            continue
        total = DaySummary(
            day=day,
            calories=total.calories + row.total_calories,
            protein=total.protein + row.protein,
            carbs=total.carbs + row.carbs,
            fat=total.fat + row.fat,
            fiber=total.fiber + row.fiber,
            meal_count=total.meal_count + 1,
        )
    return total
