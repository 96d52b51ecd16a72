"""Food log domain models."""

from dataclasses import dataclass
from datetime import date
from typing import Literal
from uuid import UUID

from pydantic import BaseModel, Field

MealType = Literal["breakfast", "lunch", "snacks", "dinner"]


class FoodEntryCreate(BaseModel):
    """Manual food entry submitted by the user."""

    user_id: str = Field(min_length=1)
    name: str = Field(min_length=1)
    serving_size: str
    calories: float = Field(ge=0)
    protein: float = Field(ge=0)
    carbs: float = Field(ge=0)
    fat: float = Field(ge=0)
    meal_type: MealType
    entry_date: date


@dataclass(frozen=True)
class FoodEntry:
    """Stored food entry."""

    id: UUID
    user_id: str
    name: str
    serving_size: str
    calories: float
    protein: float
    carbs: float
    fat: float
    meal_type: str
    entry_date: date


@dataclass(frozen=True)
class DailyNutrition:
    """Totals for one day of food entries."""

    day: date
    calories: float
    protein: float
    carbs: float
    fat: float
    entries: list[FoodEntry]
    calorie_goal: float | None = None
    goal_percentage: int | None = None
