"""User profile business logic."""

from dataclasses import dataclass
from typing import Protocol

from fitness_coach.domain.errors import NotFoundError
from fitness_coach.domain.profiles import ProfileUpdate, UserProfile


class ProfileRepository(Protocol):
    """Persistence interface for user profiles."""

    def get_profile(self, user_id: str) -> UserProfile | None:
        """Return the profile for a user, if present."""

    def update_profile(self, user_id: str, update: ProfileUpdate) -> UserProfile | None:
        """Apply an update and return the stored profile, if it exists."""


@dataclass
class ProfileService:
    """Application service for reading and editing profiles."""

    repository: ProfileRepository

    def get_profile(self, user_id: str) -> UserProfile:
        """Return the user's profile or raise NotFoundError."""
        profile = self.repository.get_profile(user_id)
        if profile is None:
            raise NotFoundError("User profile not found")
        return profile

    def update_profile(self, user_id: str, update: ProfileUpdate) -> UserProfile:
        """Persist a validated profile edit."""
        profile = self.repository.update_profile(user_id, update)
        if profile is None:
            raise NotFoundError("User profile not found")
        return profile
