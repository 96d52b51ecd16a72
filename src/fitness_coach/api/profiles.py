"""User profile endpoints."""

from __future__ import annotations

from typing import TYPE_CHECKING

from fastapi import APIRouter, Request

from fitness_coach.domain.profiles import ProfileUpdate

if TYPE_CHECKING:
    from fitness_coach.containers import AppContainer

router = APIRouter(prefix="/profiles", tags=["profiles"])


@router.get("/{user_id}")
async def get_profile(user_id: str, request: Request) -> dict[str, object]:
    """Return the user's profile."""
    container: AppContainer = request.app.state.container
    profile = container.profile_service.get_profile(user_id)
    return {"profile": profile.model_dump()}


@router.put("/{user_id}")
async def update_profile(
    user_id: str, update: ProfileUpdate, request: Request
) -> dict[str, object]:
    """Apply a validated profile edit."""
    container: AppContainer = request.app.state.container
    profile = container.profile_service.update_profile(user_id, update)
    return {"profile": profile.model_dump()}
