"""Supabase repository for food entries."""

from dataclasses import dataclass
from datetime import date
from uuid import UUID

from supabase import Client

from fitness_coach.adapters.supabase_client import execute
from fitness_coach.domain.errors import PersistenceError
from fitness_coach.domain.food import FoodEntry, FoodEntryCreate
from fitness_coach.services.food_log import FoodEntryRepository

_COLUMNS = (
    "id, user_id, name, serving_size, calories, protein, carbs, fat, "
    "meal_type, entry_date"
)


@dataclass
class SupabaseFoodEntryRepository(FoodEntryRepository):
    """Supabase implementation for food entries."""

    client: Client

    def create_entry(self, entry: FoodEntryCreate) -> FoodEntry:
        """Insert a food entry and return the stored row."""
        response = execute(
            self.client.table("food_entries").insert(entry.model_dump(mode="json")),
            "store food entry",
        )
        if not response.data:
            raise PersistenceError("Failed to store food entry")
        return _parse_row(response.data[0])

    def list_entries(self, user_id: str, day: date) -> list[FoodEntry]:
        """Return the user's entries for a day."""
        response = execute(
            self.client.table("food_entries")
            .select(_COLUMNS)
            .eq("user_id", user_id)
            .eq("entry_date", day.isoformat())
            .order("created_at", desc=False),
            "fetch food entries",
        )
        return [_parse_row(row) for row in response.data or []]


def _parse_row(row: dict[str, object]) -> FoodEntry:
    return FoodEntry(
        id=UUID(str(row["id"])),
        user_id=str(row["user_id"]),
        name=str(row.get("name", "")),
        serving_size=str(row.get("serving_size") or ""),
        calories=float(row.get("calories") or 0.0),
        protein=float(row.get("protein") or 0.0),
        carbs=float(row.get("carbs") or 0.0),
        fat=float(row.get("fat") or 0.0),
        meal_type=str(row.get("meal_type", "")),
        entry_date=date.fromisoformat(str(row["entry_date"])),
    )
