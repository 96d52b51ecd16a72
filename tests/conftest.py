"""Shared test fixtures."""

import copy
import json
from dataclasses import dataclass, field
from datetime import date
from uuid import uuid4

import pytest

from fitness_coach.config import Settings
from fitness_coach.containers import AppContainer
from fitness_coach.domain.diet import DietPlan
from fitness_coach.domain.errors import PersistenceError
from fitness_coach.domain.food import FoodEntry, FoodEntryCreate
from fitness_coach.domain.profiles import ProfileUpdate, UserProfile
from fitness_coach.services.diet_plans import (
    DietPlanRepository,
    DietPlanRequests,
    DietPlanService,
    TextGenerationClient,
)
from fitness_coach.services.food_log import FoodEntryRepository, FoodLogService
from fitness_coach.services.pose_matcher import PoseMatcher
from fitness_coach.services.profiles import ProfileRepository, ProfileService

PLAN_PAYLOAD: dict[str, object] = {
    "breakfast": {
        "meal": "Oatmeal with blueberries and Greek yogurt",
        "calories": 450,
        "protein": 25,
        "carbs": 60,
        "fat": 12,
    },
    "lunch": {
        "meal": "Grilled chicken salad with quinoa",
        "calories": 600,
        "protein": 45,
        "carbs": 55,
        "fat": 18,
    },
    "snacks": {
        "meal": "Apple with almond butter",
        "calories": 250,
        "protein": 6,
        "carbs": 28,
        "fat": 14,
    },
    "dinner": {
        "meal": "Baked salmon with steamed vegetables",
        "calories": 700,
        "protein": 48,
        "carbs": 50,
        "fat": 26,
    },
    "hydration": {
        "amount": 2.5,
        "schedule": "One glass on waking, then every two hours until 8pm",
    },
    "special_note": "Keep sodium moderate.",
}


def plan_payload(**overrides: object) -> dict[str, object]:
    """Return a deep copy of the sample plan with top-level overrides."""
    payload = copy.deepcopy(PLAN_PAYLOAD)
    payload.update(overrides)
    return payload


@dataclass
class InMemoryProfileRepository(ProfileRepository):
    """In-memory profile repository for tests."""

    profiles: dict[str, UserProfile] = field(default_factory=dict)
    reads: list[str] = field(default_factory=list)

    def get_profile(self, user_id: str) -> UserProfile | None:
        self.reads.append(user_id)
        return self.profiles.get(user_id)

    def update_profile(self, user_id: str, update: ProfileUpdate) -> UserProfile | None:
        if user_id not in self.profiles:
            return None
        profile = UserProfile(user_id=user_id, **update.model_dump())
        self.profiles[user_id] = profile
        return profile


@dataclass
class InMemoryDietPlanRepository(DietPlanRepository):
    """In-memory plan store keyed by user id."""

    plans: dict[str, dict[str, object]] = field(default_factory=dict)
    upserts: int = 0
    fail_writes: bool = False

    def upsert_plan(self, user_id: str, plan: DietPlan) -> None:
        if self.fail_writes:
            raise PersistenceError("Failed to store diet plan", details="db down")
        self.upserts += 1
        self.plans[user_id] = plan.model_dump()

    def get_plan(self, user_id: str) -> DietPlan | None:
        row = self.plans.get(user_id)
        return DietPlan.model_validate(row) if row else None


@dataclass
class InMemoryFoodEntryRepository(FoodEntryRepository):
    """In-memory food entry repository for tests."""

    entries: list[FoodEntry] = field(default_factory=list)

    def create_entry(self, entry: FoodEntryCreate) -> FoodEntry:
        stored = FoodEntry(id=uuid4(), **entry.model_dump())
        self.entries.append(stored)
        return stored

    def list_entries(self, user_id: str, day: date) -> list[FoodEntry]:
        return [
            entry
            for entry in self.entries
            if entry.user_id == user_id and entry.entry_date == day
        ]


@dataclass
class FakeTextGenerationClient(TextGenerationClient):
    """Fake model returning queued responses and recording prompts."""

    responses: list[str] = field(
        default_factory=lambda: [f"```json\n{json.dumps(PLAN_PAYLOAD)}\n```"]
    )
    prompts: list[str] = field(default_factory=list)
    error: Exception | None = None

    async def generate(
        self, *, prompt: str, temperature: float, max_output_tokens: int
    ) -> str:
        self.prompts.append(prompt)
        if self.error is not None:
            raise self.error
        if len(self.responses) > 1:
            return self.responses.pop(0)
        return self.responses[0]


def sample_profile(user_id: str = "user-1", **overrides: object) -> UserProfile:
    """Return a complete profile."""
    values: dict[str, object] = {
        "user_id": user_id,
        "name": "Sam",
        "age": 34,
        "gender": "female",
        "height": 168,
        "weight": 62,
        "activity_level": "moderate",
        "region": "Europe",
    }
    values.update(overrides)
    return UserProfile.model_validate(values)


@pytest.fixture
def settings() -> Settings:
    return Settings(
        supabase_url="https://example.supabase.co",
        supabase_service_key="service-key",
        gemini_api_key="gemini-key",
    )


@pytest.fixture
def profile_repository() -> InMemoryProfileRepository:
    return InMemoryProfileRepository(profiles={"user-1": sample_profile()})


@pytest.fixture
def plan_repository() -> InMemoryDietPlanRepository:
    return InMemoryDietPlanRepository()


@pytest.fixture
def food_entry_repository() -> InMemoryFoodEntryRepository:
    return InMemoryFoodEntryRepository()


@pytest.fixture
def generation_client() -> FakeTextGenerationClient:
    return FakeTextGenerationClient()


@pytest.fixture
def diet_plan_service(
    profile_repository: InMemoryProfileRepository,
    plan_repository: InMemoryDietPlanRepository,
    generation_client: FakeTextGenerationClient,
) -> DietPlanService:
    return DietPlanService(
        profile_repository=profile_repository,
        plan_repository=plan_repository,
        client=generation_client,
    )


@pytest.fixture
def container(
    settings: Settings,
    profile_repository: InMemoryProfileRepository,
    plan_repository: InMemoryDietPlanRepository,
    food_entry_repository: InMemoryFoodEntryRepository,
    diet_plan_service: DietPlanService,
) -> AppContainer:
    async def close_resources() -> None:
        return None

    return AppContainer(
        settings=settings,
        pose_matcher=PoseMatcher(),
        profile_service=ProfileService(profile_repository),
        diet_plan_service=diet_plan_service,
        diet_plan_requests=DietPlanRequests(diet_plan_service),
        food_log_service=FoodLogService(
            repository=food_entry_repository,
            plan_repository=plan_repository,
        ),
        close_resources=close_resources,
    )
