"""Diet plan generation endpoint and plan lookup."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from fastapi import APIRouter, Request, status
from fastapi.responses import JSONResponse, Response
from pydantic import ValidationError as PydanticValidationError

from fitness_coach.api.responses import error_body
from fitness_coach.domain.diet import GenerateDietPlanRequest
from fitness_coach.domain.errors import FitnessCoachError, ValidationError

if TYPE_CHECKING:
    from fitness_coach.containers import AppContainer

logger = logging.getLogger(__name__)

router = APIRouter(tags=["diet-plans"])

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Headers": "authorization, x-client-info, apikey, content-type",
    "Access-Control-Allow-Methods": "POST, OPTIONS",
}


@router.options("/generate-diet-plan")
async def generate_diet_plan_preflight() -> Response:
    """Answer CORS preflight requests."""
    return Response(status_code=status.HTTP_204_NO_CONTENT, headers=CORS_HEADERS)


@router.post("/generate-diet-plan")
async def generate_diet_plan(request: Request) -> JSONResponse:
    """Generate and store a diet plan for the user in the request body."""
    container: AppContainer = request.app.state.container
    user_id: str | None = None
    try:
        user_id = await _read_user_id(request)
        plan = await container.diet_plan_requests.regenerate(user_id)
    except FitnessCoachError as exc:
        if exc.status_code >= status.HTTP_500_INTERNAL_SERVER_ERROR:
            logger.exception(
                "Diet plan generation failed", extra={"user_id": user_id}
            )
        return JSONResponse(
            status_code=exc.status_code, content=error_body(exc), headers=CORS_HEADERS
        )
    except Exception as exc:
        logger.exception("Diet plan generation crashed", extra={"user_id": user_id})
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": "Internal server error", "details": str(exc)},
            headers=CORS_HEADERS,
        )
    return JSONResponse(
        content={"success": True, "dietPlan": plan.model_dump()},
        headers=CORS_HEADERS,
    )


@router.get("/diet-plans/{user_id}")
async def get_diet_plan(user_id: str, request: Request) -> dict[str, object]:
    """Return the user's current plan."""
    container: AppContainer = request.app.state.container
    plan = container.diet_plan_service.get_current(user_id)
    return {"dietPlan": plan.model_dump()}


async def _read_user_id(request: Request) -> str | None:
    """Extract userId from the JSON body."""
    raw = await request.body()
    if not raw:
        return None
    try:
        body = GenerateDietPlanRequest.model_validate_json(raw)
    except PydanticValidationError as exc:
        raise ValidationError(
            "Request body must be a JSON object with a string userId",
            details=exc.errors(include_url=False, include_context=False),
        ) from exc
    return body.userId
