"""Request and response models for the HTTP API."""

from dataclasses import asdict

from pydantic import BaseModel, Field

from meal_ledger.domain.meals import MealRecord
from meal_ledger.domain.models import Profile
from meal_ledger.domain.stats import DaySummary


class AnalyzeTextRequest(BaseModel):
    """Typed meal description to structure."""

    text: str = Field(max_length=4000)


class MealCreateRequest(BaseModel):
    """Items confirmed (and possibly edited) by the user."""

    items: list[dict[str, object]]


def meal_payload(record: MealRecord) -> dict[str, object]:
    """Serialize a meal row for responses."""
    return {
        "id": str(record.id),
        "user_id": str(record.user_id),
        "meal_name": record.meal_name,
        "description": record.description,
        "logged_date": record.logged_date.isoformat(),
        "logged_at": record.logged_at.isoformat(),
        "total_calories": record.total_calories,
        "protein": record.protein,
        "carbs": record.carbs,
        "fat": record.fat,
        "fiber": record.fiber,
        "micronutrients": record.micronutrients,
    }


def day_summary_payload(summary: DaySummary) -> dict[str, object]:
    """Serialize a day summary for responses."""
    payload = asdict(summary)
    payload["date"] = payload.pop("day").isoformat()
    return payload


def profile_payload(profile: Profile) -> dict[str, object]:
    """Serialize a profile for responses."""
    return {"user_id": str(profile.user_id), "display_name": profile.display_name}
