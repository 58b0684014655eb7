"""Ledger endpoints: confirm, list, delete and summarize meals."""

from __future__ import annotations

from datetime import date  # noqa: TC003
from uuid import UUID  # noqa: TC003

from fastapi import APIRouter, Depends, HTTPException, Query, Request, Response, status

from meal_ledger.api.dependencies import get_container, require_user
from meal_ledger.api.models import (
    MealCreateRequest,
    day_summary_payload,
    meal_payload,
    profile_payload,
)
from meal_ledger.domain.models import AuthenticatedUser  # noqa: TC001
from meal_ledger.services.meals import MealValidationError
from meal_ledger.services.stats import today_utc

# Plain def handlers: the Supabase client blocks, so they run in the threadpool.
router = APIRouter(tags=["ledger"])


@router.post("/meals", status_code=status.HTTP_201_CREATED)
def create_meal(
    body: MealCreateRequest,
    request: Request,
    user: AuthenticatedUser = Depends(require_user),
) -> dict[str, object]:
    """Persist confirmed items as a meal."""
    container = get_container(request)
    try:
        record = container.meal_ledger_service.save_meal(user.id, list(body.items))
    except MealValidationError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)
        ) from exc
    return meal_payload(record)


@router.get("/meals")
def list_meals(
    request: Request,
    day: date | None = Query(default=None, alias="date"),
    user: AuthenticatedUser = Depends(require_user),
) -> dict[str, object]:
    """Return the caller's meals for a date, today by default."""
    container = get_container(request)
    meals = container.meal_ledger_service.list_meals(user.id, day or today_utc())
    return {"meals": [meal_payload(meal) for meal in meals]}


@router.delete("/meals/{meal_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_meal(
    meal_id: UUID,
    request: Request,
    user: AuthenticatedUser = Depends(require_user),
) -> Response:
    """Delete one of the caller's meals."""
    container = get_container(request)
    if not container.meal_ledger_service.delete_meal(user.id, meal_id):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="Meal not found"
        )
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/summary")
def day_summary(
    request: Request,
    day: date | None = Query(default=None, alias="date"),
    user: AuthenticatedUser = Depends(require_user),
) -> dict[str, object]:
    """Return totals for a date, today by default."""
    container = get_container(request)
    return day_summary_payload(container.stats_service.get_day(user.id, day))


@router.get("/history")
def history(
    request: Request,
    days: int | None = Query(default=None, ge=1, le=366),
    user: AuthenticatedUser = Depends(require_user),
) -> dict[str, object]:
    """Return daily summaries for recent dates with meals."""
    container = get_container(request)
    summaries = container.stats_service.get_history(
        user.id, days=days or container.settings.history_days
    )
    return {"days": [day_summary_payload(summary) for summary in summaries]}


@router.get("/me")
def me(
    request: Request, user: AuthenticatedUser = Depends(require_user)
) -> dict[str, object]:
    """Return the caller's profile."""
    container = get_container(request)
    return profile_payload(container.profile_service.get_profile(user))
