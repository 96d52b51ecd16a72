"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from fitness_coach.adapters.gemini_client import HttpxGeminiClient
from fitness_coach.adapters.openai_text_client import OpenAITextClient
from fitness_coach.adapters.supabase_client import LazySupabaseClient
from fitness_coach.adapters.supabase_diet_plan_repository import (
    SupabaseDietPlanRepository,
)
from fitness_coach.adapters.supabase_food_entry_repository import (
    SupabaseFoodEntryRepository,
)
from fitness_coach.adapters.supabase_profile_repository import (
    SupabaseProfileRepository,
)
from fitness_coach.config import Settings
from fitness_coach.services.diet_plans import DietPlanRequests, DietPlanService
from fitness_coach.services.food_log import FoodLogService
from fitness_coach.services.pose_matcher import PoseMatcher
from fitness_coach.services.profiles import ProfileService


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    pose_matcher: PoseMatcher
    profile_service: ProfileService
    diet_plan_service: DietPlanService
    diet_plan_requests: DietPlanRequests
    food_log_service: FoodLogService
    close_resources: Callable[[], Awaitable[None]]


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    supabase_client = LazySupabaseClient(
        url=resolved_settings.supabase_url,
        service_key=resolved_settings.supabase_service_key,
    )
    profile_repository = SupabaseProfileRepository(supabase_client)
    plan_repository = SupabaseDietPlanRepository(supabase_client)
    food_entry_repository = SupabaseFoodEntryRepository(supabase_client)

    generation_client: HttpxGeminiClient | OpenAITextClient
    if resolved_settings.diet_plan_provider == "openai":
        generation_client = OpenAITextClient.create(
            api_key=resolved_settings.openai_api_key or "",
            model=resolved_settings.openai_model,
            timeout=resolved_settings.generation_timeout_seconds,
        )
    else:
        generation_client = HttpxGeminiClient.create(
            api_key=resolved_settings.gemini_api_key or "",
            model=resolved_settings.gemini_model,
            base_url=resolved_settings.gemini_base_url,
            timeout=resolved_settings.generation_timeout_seconds,
        )

    diet_plan_service = DietPlanService(
        profile_repository=profile_repository,
        plan_repository=plan_repository,
        client=generation_client,
        temperature=resolved_settings.generation_temperature,
        max_output_tokens=resolved_settings.generation_max_output_tokens,
        missing_credentials=resolved_settings.missing_credentials(),
    )

    async def close_resources() -> None:
        await generation_client.close()

    return AppContainer(
        settings=resolved_settings,
        pose_matcher=PoseMatcher(
            confidence_threshold=resolved_settings.pose_confidence_threshold
        ),
        profile_service=ProfileService(profile_repository),
        diet_plan_service=diet_plan_service,
        diet_plan_requests=DietPlanRequests(diet_plan_service),
        food_log_service=FoodLogService(
            repository=food_entry_repository,
            plan_repository=plan_repository,
        ),
        close_resources=close_resources,
    )
