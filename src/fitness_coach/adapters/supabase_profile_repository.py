"""Supabase-backed user profile repository."""

from dataclasses import dataclass
from datetime import UTC, datetime

from supabase import Client

from fitness_coach.adapters.supabase_client import execute
from fitness_coach.domain.profiles import ProfileUpdate, UserProfile
from fitness_coach.services.profiles import ProfileRepository

_COLUMNS = (
    "user_id, name, age, gender, height, weight, activity_level, "
    "medical_conditions, dietary_preferences, region"
)


@dataclass
class SupabaseProfileRepository(ProfileRepository):
    """Supabase implementation for user profiles."""

    client: Client

    def get_profile(self, user_id: str) -> UserProfile | None:
        """Return the profile row for a user, if present."""
        response = execute(
            self.client.table("user_profiles")
            .select(_COLUMNS)
            .eq("user_id", user_id)
            .limit(1),
            "fetch user profile",
        )
        if not response.data:
            return None
        return UserProfile.model_validate(response.data[0])

    def update_profile(self, user_id: str, update: ProfileUpdate) -> UserProfile | None:
        """Update the profile row and return the stored values."""
        payload = update.model_dump()
        payload["updated_at"] = datetime.now(tz=UTC).isoformat()
        response = execute(
            self.client.table("user_profiles").update(payload).eq("user_id", user_id),
            "update user profile",
        )
        if not response.data:
            return None
        return UserProfile.model_validate(response.data[0])
