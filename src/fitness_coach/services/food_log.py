"""Food logging and daily nutrition totals."""

from dataclasses import dataclass
from datetime import date
from typing import Protocol

from fitness_coach.domain.food import DailyNutrition, FoodEntry, FoodEntryCreate
from fitness_coach.services.diet_plans import DietPlanRepository


class FoodEntryRepository(Protocol):
    """Persistence interface for food entries."""

    def create_entry(self, entry: FoodEntryCreate) -> FoodEntry:
        """Store an entry and return it."""

    def list_entries(self, user_id: str, day: date) -> list[FoodEntry]:
        """Return the user's entries for a day."""


@dataclass
class FoodLogService:
    """Service for manual food entries."""

    repository: FoodEntryRepository
    plan_repository: DietPlanRepository

    def add_entry(self, entry: FoodEntryCreate) -> FoodEntry:
        """Store a validated manual entry."""
        return self.repository.create_entry(entry)

    def daily_summary(self, user_id: str, day: date) -> DailyNutrition:
        """Aggregate a day's entries and compare them with the current plan."""
        entries = self.repository.list_entries(user_id, day)
        totals = _aggregate(day, entries)
        plan = self.plan_repository.get_plan(user_id)
        if plan is None or plan.total_calories <= 0:
            return totals
        goal = plan.total_calories
        return DailyNutrition(
            day=totals.day,
            calories=totals.calories,
            protein=totals.protein,
            carbs=totals.carbs,
            fat=totals.fat,
            entries=totals.entries,
            calorie_goal=goal,
            goal_percentage=min(100, round(totals.calories / goal * 100)),
        )


def _aggregate(day: date, entries: list[FoodEntry]) -> DailyNutrition:
    total = DailyNutrition(day=day, calories=0, protein=0, carbs=0, fat=0, entries=[])
    for entry in entries:
        if entry.entry_date != day:
            continue
        total = DailyNutrition(
            day=day,
            calories=total.calories + entry.calories,
            protein=total.protein + entry.protein,
            carbs=total.carbs + entry.carbs,
            fat=total.fat + entry.fat,
            entries=[*total.entries, entry],
        )
    return total
