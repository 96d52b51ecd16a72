"""Tests for diet plan generation."""

import asyncio
import json

import pytest

from fitness_coach.domain.errors import (
    ConfigurationError,
    NotFoundError,
    ParseError,
    PersistenceError,
    RequestInProgressError,
    UpstreamError,
    ValidationError,
)
from fitness_coach.services.diet_plans import (
    FAILED,
    IDLE,
    SUCCEEDED,
    DietPlanRequest,
    DietPlanRequests,
    DietPlanService,
    build_prompt,
    extract_json_payload,
    parse_plan,
)
from tests.conftest import (
    PLAN_PAYLOAD,
    FakeTextGenerationClient,
    InMemoryDietPlanRepository,
    InMemoryProfileRepository,
    plan_payload,
    sample_profile,
)


def test_extract_json_handles_every_wrapping_style() -> None:
    raw = json.dumps(PLAN_PAYLOAD, indent=2)
    variants = [f"```json\n{raw}\n```", f"```\n{raw}\n```", raw, f"  {raw}\n"]

    parsed = [parse_plan(variant) for variant in variants]

    assert all(plan == parsed[0] for plan in parsed)
    assert parsed[0].model_dump()["breakfast"]["calories"] == 450


def test_extract_json_with_surrounding_prose() -> None:
    raw = json.dumps(PLAN_PAYLOAD)
    text = f"Here is your plan:\n```json\n{raw}\n```\nEnjoy!"

    assert json.loads(extract_json_payload(text)) == PLAN_PAYLOAD


def test_parse_plan_rejects_invalid_json() -> None:
    with pytest.raises(ParseError) as excinfo:
        parse_plan("Sorry, I cannot help with that.")

    assert excinfo.value.raw_text == "Sorry, I cannot help with that."
    assert excinfo.value.details["response"] == "Sorry, I cannot help with that."


def test_parse_plan_rejects_negative_macros() -> None:
    payload = plan_payload(
        lunch={"meal": "Salad", "calories": -5, "protein": 1, "carbs": 1, "fat": 1}
    )

    with pytest.raises(ParseError):
        parse_plan(json.dumps(payload))


def test_parse_plan_rejects_non_positive_hydration() -> None:
    payload = plan_payload(hydration={"amount": 0, "schedule": "never"})

    with pytest.raises(ParseError):
        parse_plan(json.dumps(payload))


def test_special_note_is_optional() -> None:
    payload = plan_payload()
    payload.pop("special_note")

    assert parse_plan(json.dumps(payload)).special_note is None


def test_build_prompt_includes_optional_fields_only_when_present() -> None:
    bare = build_prompt(sample_profile())
    detailed = build_prompt(
        sample_profile(dietary_preferences="vegetarian", medical_conditions="asthma")
    )

    assert "- Age: 34" in bare
    assert "- Weight: 62.0 kg" in bare
    assert "Dietary Preferences" not in bare
    assert "- Dietary Preferences: vegetarian" in detailed
    assert "- Medical Conditions: asthma" in detailed
    assert "Return only the JSON" in bare


def test_generate_stores_and_returns_plan(
    diet_plan_service: DietPlanService,
    plan_repository: InMemoryDietPlanRepository,
) -> None:
    plan = asyncio.run(diet_plan_service.generate("user-1"))

    stored = plan_repository.get_plan("user-1")
    assert stored == plan
    assert plan.hydration.amount == 2.5


def test_regenerate_overwrites_previous_plan(
    diet_plan_service: DietPlanService,
    plan_repository: InMemoryDietPlanRepository,
    generation_client: FakeTextGenerationClient,
) -> None:
    second = plan_payload(special_note="Second plan")
    generation_client.responses = [
        json.dumps(PLAN_PAYLOAD),
        f"```\n{json.dumps(second)}\n```",
    ]

    asyncio.run(diet_plan_service.generate("user-1"))
    latest = asyncio.run(diet_plan_service.generate("user-1"))

    assert list(plan_repository.plans) == ["user-1"]
    assert plan_repository.get_plan("user-1") == latest
    assert latest.special_note == "Second plan"


def test_missing_credentials_fail_before_any_call(
    profile_repository: InMemoryProfileRepository,
    plan_repository: InMemoryDietPlanRepository,
    generation_client: FakeTextGenerationClient,
) -> None:
    service = DietPlanService(
        profile_repository=profile_repository,
        plan_repository=plan_repository,
        client=generation_client,
        missing_credentials=("GEMINI_API_KEY",),
    )

    with pytest.raises(ConfigurationError) as excinfo:
        asyncio.run(service.generate("user-1"))

    assert excinfo.value.details == {"missing": ["GEMINI_API_KEY"]}
    assert generation_client.prompts == []
    assert profile_repository.reads == []


@pytest.mark.parametrize("user_id", [None, ""])
def test_missing_user_id_is_validation_error(
    diet_plan_service: DietPlanService,
    generation_client: FakeTextGenerationClient,
    user_id: str | None,
) -> None:
    with pytest.raises(ValidationError):
        asyncio.run(diet_plan_service.generate(user_id))

    assert generation_client.prompts == []


def test_unknown_profile_is_not_found(
    diet_plan_service: DietPlanService,
    generation_client: FakeTextGenerationClient,
) -> None:
    with pytest.raises(NotFoundError):
        asyncio.run(diet_plan_service.generate("ghost"))

    assert generation_client.prompts == []


def test_upstream_error_propagates(
    diet_plan_service: DietPlanService,
    generation_client: FakeTextGenerationClient,
    plan_repository: InMemoryDietPlanRepository,
) -> None:
    generation_client.error = UpstreamError("Error from Gemini API", details="quota")

    with pytest.raises(UpstreamError):
        asyncio.run(diet_plan_service.generate("user-1"))

    assert plan_repository.upserts == 0


def test_persistence_failure_keeps_unsaved_plan(
    diet_plan_service: DietPlanService,
    plan_repository: InMemoryDietPlanRepository,
) -> None:
    plan_repository.fail_writes = True

    with pytest.raises(PersistenceError) as excinfo:
        asyncio.run(diet_plan_service.generate("user-1"))

    assert excinfo.value.details["dietPlan"]["lunch"]["calories"] == 600
    assert excinfo.value.details["reason"] == "db down"


def test_get_current_raises_when_absent(diet_plan_service: DietPlanService) -> None:
    with pytest.raises(NotFoundError):
        diet_plan_service.get_current("user-1")


def test_request_state_machine(
    diet_plan_service: DietPlanService,
    generation_client: FakeTextGenerationClient,
) -> None:
    request = DietPlanRequest(service=diet_plan_service, user_id="user-1")
    assert request.status == IDLE

    asyncio.run(request.regenerate())
    assert request.status == SUCCEEDED
    assert request.plan is not None

    generation_client.error = UpstreamError("Error from Gemini API")
    with pytest.raises(UpstreamError):
        asyncio.run(request.regenerate())
    assert request.status == FAILED
    assert isinstance(request.error, UpstreamError)

    generation_client.error = None
    asyncio.run(request.regenerate())
    assert request.status == SUCCEEDED
    assert request.error is None


def test_request_rejects_concurrent_generation(
    profile_repository: InMemoryProfileRepository,
    plan_repository: InMemoryDietPlanRepository,
) -> None:
    class SlowClient(FakeTextGenerationClient):
        async def generate(self, *, prompt, temperature, max_output_tokens):  # type: ignore[no-untyped-def]
            await asyncio.sleep(0.01)
            return json.dumps(PLAN_PAYLOAD)

    service = DietPlanService(
        profile_repository=profile_repository,
        plan_repository=plan_repository,
        client=SlowClient(),
    )
    request = DietPlanRequest(service=service, user_id="user-1")

    async def run_both():  # type: ignore[no-untyped-def]
        return await asyncio.gather(
            request.regenerate(), request.regenerate(), return_exceptions=True
        )

    first, second = asyncio.run(run_both())

    assert first.special_note == PLAN_PAYLOAD["special_note"]
    assert isinstance(second, RequestInProgressError)
    assert plan_repository.upserts == 1


def test_requests_track_only_running_generations(
    profile_repository: InMemoryProfileRepository,
    plan_repository: InMemoryDietPlanRepository,
) -> None:
    class SlowClient(FakeTextGenerationClient):
        async def generate(self, *, prompt, temperature, max_output_tokens):  # type: ignore[no-untyped-def]
            await asyncio.sleep(0.01)
            return json.dumps(PLAN_PAYLOAD)

    requests = DietPlanRequests(
        DietPlanService(
            profile_repository=profile_repository,
            plan_repository=plan_repository,
            client=SlowClient(),
        )
    )

    async def run_both():  # type: ignore[no-untyped-def]
        return await asyncio.gather(
            requests.regenerate("user-1"),
            requests.regenerate("user-1"),
            return_exceptions=True,
        )

    first, second = asyncio.run(run_both())

    assert first.special_note == PLAN_PAYLOAD["special_note"]
    assert isinstance(second, RequestInProgressError)
    assert requests.active == {}


def test_requests_forget_finished_and_failed_generations(
    diet_plan_service: DietPlanService,
) -> None:
    requests = DietPlanRequests(diet_plan_service)

    for user_id in [f"ghost-{index}" for index in range(20)]:
        with pytest.raises(NotFoundError):
            asyncio.run(requests.regenerate(user_id))
    with pytest.raises(ValidationError):
        asyncio.run(requests.regenerate(None))
    asyncio.run(requests.regenerate("user-1"))

    assert requests.active == {}
