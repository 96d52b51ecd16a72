"""Pose detection domain models."""

from dataclasses import dataclass

from pydantic import BaseModel, ConfigDict, Field


@dataclass(frozen=True)
class Point:
    """2D position in frame pixels; y grows downward."""

    x: float
    y: float


@dataclass(frozen=True)
class Keypoint:
    """Named body landmark detected in a single frame."""

    part: str
    position: Point
    score: float


@dataclass(frozen=True)
class PoseVerdict:
    """Outcome of evaluating one frame against a target pose.

    ``is_correct`` is ``None`` when the pose is not in the catalog.
    """

    is_correct: bool | None
    feedback_text: str


class PositionPayload(BaseModel):
    """Keypoint position on the wire."""

    x: float
    y: float


class KeypointPayload(BaseModel):
    """Keypoint as produced by the client-side pose estimator."""

    part: str
    position: PositionPayload
    score: float

    def to_keypoint(self) -> Keypoint:
        """Convert to the domain keypoint."""
        return Keypoint(
            part=self.part,
            position=Point(x=self.position.x, y=self.position.y),
            score=self.score,
        )


class PoseAnalysisRequest(BaseModel):
    """Request body for analyzing one frame."""

    pose: str
    keypoints: list[KeypointPayload] = Field(default_factory=list)


class PoseVerdictResponse(BaseModel):
    """Verdict returned to the client."""

    model_config = ConfigDict(populate_by_name=True)

    is_correct: bool | None = Field(alias="isCorrect")
    feedback_text: str = Field(alias="feedbackText")
