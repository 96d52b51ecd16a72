"""Pose catalog and per-frame analysis endpoints."""

from __future__ import annotations

from typing import TYPE_CHECKING

from fastapi import APIRouter, Request

from fitness_coach.domain.pose import PoseAnalysisRequest, PoseVerdictResponse

if TYPE_CHECKING:
    from fitness_coach.containers import AppContainer

router = APIRouter(prefix="/poses", tags=["poses"])


@router.get("")
async def list_poses(request: Request) -> dict[str, object]:
    """Return the names of supported poses."""
    container: AppContainer = request.app.state.container
    return {"poses": container.pose_matcher.catalog.names()}


@router.post("/analyze")
async def analyze_pose(
    payload: PoseAnalysisRequest, request: Request
) -> PoseVerdictResponse:
    """Evaluate one frame of keypoints against the target pose."""
    container: AppContainer = request.app.state.container
    verdict = container.pose_matcher.evaluate(
        payload.pose, [keypoint.to_keypoint() for keypoint in payload.keypoints]
    )
    return PoseVerdictResponse(
        is_correct=verdict.is_correct, feedback_text=verdict.feedback_text
    )
