"""Supabase repository for diet plans."""

from dataclasses import dataclass
from datetime import UTC, datetime

from supabase import Client

from fitness_coach.adapters.supabase_client import execute
from fitness_coach.domain.diet import DietPlan
from fitness_coach.services.diet_plans import DietPlanRepository

_PLAN_COLUMNS = "breakfast, lunch, snacks, dinner, hydration, special_note"


@dataclass
class SupabaseDietPlanRepository(DietPlanRepository):
    """Stores one plan row per user, keyed on user_id."""

    client: Client

    def upsert_plan(self, user_id: str, plan: DietPlan) -> None:
        """Insert or overwrite the user's plan row."""
        row = {"user_id": user_id, **plan.model_dump()}
        row["updated_at"] = datetime.now(tz=UTC).isoformat()
        execute(
            self.client.table("diet_plans").upsert(row, on_conflict="user_id"),
            "store diet plan",
        )

    def get_plan(self, user_id: str) -> DietPlan | None:
        """Return the user's plan row, if any."""
        response = execute(
            self.client.table("diet_plans")
            .select(_PLAN_COLUMNS)
            .eq("user_id", user_id)
            .limit(1),
            "fetch diet plan",
        )
        if not response.data:
            return None
        return DietPlan.model_validate(response.data[0])
