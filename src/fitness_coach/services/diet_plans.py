"""Diet plan generation via a generative text model."""

import json
import logging
import re
from dataclasses import dataclass, field
from typing import Protocol

from pydantic import ValidationError as PydanticValidationError

from fitness_coach.domain.diet import DietPlan
from fitness_coach.domain.errors import (
    ConfigurationError,
    FitnessCoachError,
    NotFoundError,
    ParseError,
    PersistenceError,
    RequestInProgressError,
    ValidationError,
)
from fitness_coach.domain.profiles import UserProfile
from fitness_coach.services.profiles import ProfileRepository

logger = logging.getLogger(__name__)

_FENCED_JSON = re.compile(r"```json\n(.*)\n```", re.DOTALL)
_FENCED_PLAIN = re.compile(r"```\n(.*)\n```", re.DOTALL)

PLAN_SHAPE = """{
  "breakfast": {
    "meal": "Detailed breakfast description",
    "calories": 000,
    "protein": 00,
    "carbs": 00,
    "fat": 00
  },
  "lunch": {
    "meal": "Detailed lunch description",
    "calories": 000,
    "protein": 00,
    "carbs": 00,
    "fat": 00
  },
  "snacks": {
    "meal": "Detailed snacks description",
    "calories": 000,
    "protein": 00,
    "carbs": 00,
    "fat": 00
  },
  "dinner": {
    "meal": "Detailed dinner description",
    "calories": 000,
    "protein": 00,
    "carbs": 00,
    "fat": 00
  },
  "hydration": {
    "amount": 0.0,
    "schedule": "Description of when to drink water throughout the day"
  },
  "special_note": "Any special considerations based on the user's profile"
}"""


class TextGenerationClient(Protocol):
    """Interface for generative text models."""

    async def generate(
        self, *, prompt: str, temperature: float, max_output_tokens: int
    ) -> str:
        """Return the model's raw text for a prompt."""


class DietPlanRepository(Protocol):
    """Persistence interface for the current plan of each user."""

    def upsert_plan(self, user_id: str, plan: DietPlan) -> None:
        """Insert or replace the user's plan."""

    def get_plan(self, user_id: str) -> DietPlan | None:
        """Return the user's current plan, if any."""


@dataclass
class DietPlanService:
    """Builds prompts, calls the model, parses and stores the plan."""

    profile_repository: ProfileRepository
    plan_repository: DietPlanRepository
    client: TextGenerationClient
    temperature: float = 0.2
    max_output_tokens: int = 2048
    missing_credentials: tuple[str, ...] = ()

    async def generate(self, user_id: str | None) -> DietPlan:
        """Generate, persist and return a fresh plan for the user."""
        if self.missing_credentials:
            raise ConfigurationError(
                "Required credentials not configured",
                details={"missing": list(self.missing_credentials)},
            )
        if not user_id:
            raise ValidationError("User ID is required")

        profile = self.profile_repository.get_profile(user_id)
        if profile is None:
            raise NotFoundError("User profile not found")

        raw_text = await self.client.generate(
            prompt=build_prompt(profile),
            temperature=self.temperature,
            max_output_tokens=self.max_output_tokens,
        )
        plan = parse_plan(raw_text)

        try:
            self.plan_repository.upsert_plan(user_id, plan)
        except PersistenceError as exc:
            logger.exception("Failed to store diet plan", extra={"user_id": user_id})
            raise PersistenceError(
                "Error storing diet plan",
                details={"reason": exc.details, "dietPlan": plan.model_dump()},
            ) from exc
        logger.info("Diet plan generated", extra={"user_id": user_id})
        return plan

    def get_current(self, user_id: str) -> DietPlan:
        """Return the stored plan or raise NotFoundError."""
        plan = self.plan_repository.get_plan(user_id)
        if plan is None:
            raise NotFoundError("Diet plan not found")
        return plan


def build_prompt(profile: UserProfile) -> str:
    """Render the nutritionist prompt for a profile."""
    lines = [
        "You are a professional nutritionist. Based on the following user "
        "profile, create a detailed, personalized daily diet plan.",
        "",
        "User Profile:",
        f"- Age: {profile.age}",
        f"- Gender: {profile.gender}",
        f"- Weight: {profile.weight} kg",
        f"- Height: {profile.height} cm",
        f"- Activity Level: {profile.activity_level}",
    ]
    if profile.dietary_preferences:
        lines.append(f"- Dietary Preferences: {profile.dietary_preferences}")
    if profile.medical_conditions:
        lines.append(f"- Medical Conditions: {profile.medical_conditions}")
    lines.extend(
        [
            "",
            "**Output Requirements:**",
            "- Provide a detailed meal plan for Breakfast, Lunch, Snacks, and Dinner.",
            "- Include calories, protein, carbs, and fats for each meal.",
            "- Suggest hydration intake (liters of water per day) with reminder "
            "times.",
            "- Add a short note for the user regarding any special diet "
            "considerations.",
            "- Format the response in JSON structure with the following format:",
            "",
            PLAN_SHAPE,
            "",
            "Return only the JSON with no additional text before or after.",
        ]
    )
    return "\n".join(lines)


def extract_json_payload(text: str) -> str:
    """Strip a markdown code fence around the JSON, if present."""
    match = _FENCED_JSON.search(text) or _FENCED_PLAIN.search(text)
    content = match.group(1) if match else text
    return content.strip()


def parse_plan(raw_text: str) -> DietPlan:
    """Parse model output into a DietPlan or raise ParseError."""
    payload = extract_json_payload(raw_text)
    try:
        data = json.loads(payload)
    except json.JSONDecodeError as exc:
        raise ParseError(
            "Failed to parse diet plan from model response",
            raw_text=raw_text,
            details={"reason": str(exc), "response": raw_text},
        ) from exc
    try:
        return DietPlan.model_validate(data)
    except PydanticValidationError as exc:
        raise ParseError(
            "Diet plan from model response has an unexpected shape",
            raw_text=raw_text,
            details={
                "reason": exc.errors(include_url=False, include_context=False),
                "response": raw_text,
            },
        ) from exc


IDLE = "idle"
REQUESTING = "requesting"
SUCCEEDED = "succeeded"
FAILED = "failed"


@dataclass
class DietPlanRequest:
    """Tracks one user's generation flow: idle -> requesting -> done."""

    service: DietPlanService
    user_id: str | None
    status: str = IDLE
    plan: DietPlan | None = None
    error: FitnessCoachError | None = None

    async def regenerate(self) -> DietPlan:
        """Start a generation unless one is already in flight."""
        if self.status == REQUESTING:
            raise RequestInProgressError("A diet plan request is already in progress")
        self.status = REQUESTING
        self.error = None
        try:
            plan = await self.service.generate(self.user_id)
        except FitnessCoachError as exc:
            self.status = FAILED
            self.error = exc
            raise
        except BaseException:
            self.status = FAILED
            raise
        self.status = SUCCEEDED
        self.plan = plan
        return plan


@dataclass
class DietPlanRequests:
    """In-flight generations keyed by user; one at a time per user.

    A tracker only lives while its generation runs, so finished or rejected
    requests leave nothing behind.
    """

    service: DietPlanService
    active: dict[str, DietPlanRequest] = field(default_factory=dict)

    async def regenerate(self, user_id: str | None) -> DietPlan:
        """Run one generation for the user or raise RequestInProgressError."""
        key = user_id or ""
        if key in self.active:
            raise RequestInProgressError("A diet plan request is already in progress")
        request = DietPlanRequest(service=self.service, user_id=user_id)
        self.active[key] = request
        try:
            return await request.regenerate()
        finally:
            del self.active[key]
