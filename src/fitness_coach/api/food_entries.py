"""Food log endpoints."""

from __future__ import annotations

from dataclasses import asdict
from datetime import UTC, date, datetime
from typing import TYPE_CHECKING

from fastapi import APIRouter, Request, status

from fitness_coach.domain.food import FoodEntryCreate

if TYPE_CHECKING:
    from fitness_coach.containers import AppContainer

router = APIRouter(prefix="/food-entries", tags=["food"])


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_food_entry(
    entry: FoodEntryCreate, request: Request
) -> dict[str, object]:
    """Store a manual food entry."""
    container: AppContainer = request.app.state.container
    stored = container.food_log_service.add_entry(entry)
    return {"entry": asdict(stored)}


@router.get("/{user_id}")
async def daily_summary(
    user_id: str, request: Request, day: date | None = None
) -> dict[str, object]:
    """Return a day's entries with totals; defaults to today in UTC."""
    container: AppContainer = request.app.state.container
    resolved_day = day or datetime.now(tz=UTC).date()
    summary = container.food_log_service.daily_summary(user_id, resolved_day)
    return {"summary": asdict(summary)}
