"""Live pose-detection session driving camera, estimator and matcher."""

import logging
from collections.abc import Callable, Iterator
from contextlib import AbstractContextManager
from dataclasses import dataclass, field
from typing import Protocol

from fitness_coach.domain.errors import CameraPermissionError, ModelLoadError
from fitness_coach.domain.pose import Keypoint, PoseVerdict
from fitness_coach.services.pose_matcher import PoseMatcher

logger = logging.getLogger(__name__)

STARTING = "starting"
DETECTING = "detecting"
FAILED = "failed"
STOPPED = "stopped"


class FrameStream(Protocol):
    """Open camera stream."""

    def frames(self) -> Iterator[object]:
        """Yield frames until the stream ends."""


class Camera(Protocol):
    """Camera that hands out an exclusively owned stream."""

    def open(self) -> AbstractContextManager[FrameStream]:
        """Open the stream; leaving the context releases it."""


class PoseEstimator(Protocol):
    """Keypoint detection model."""

    def estimate(self, frame: object) -> list[Keypoint]:
        """Return keypoints detected in the frame."""


@dataclass
class PoseSessionState:
    """Mutable state of a running session, observed by the renderer."""

    pose_name: str
    status: str = STARTING
    feedback_text: str = "Setting up camera..."
    verdict: PoseVerdict | None = None
    frames_seen: int = 0
    frames_evaluated: int = 0

    @property
    def pose_correct(self) -> bool:
        """Return True when the last verdict was correct."""
        return bool(self.verdict and self.verdict.is_correct)

    def apply(self, verdict: PoseVerdict) -> None:
        """Record the verdict of the latest frame."""
        self.verdict = verdict
        self.feedback_text = verdict.feedback_text
        self.frames_evaluated += 1

    def fail(self, feedback_text: str) -> None:
        """Move to the terminal failed state."""
        self.status = FAILED
        self.feedback_text = feedback_text
        self.verdict = None


@dataclass
class PoseSession:
    """Runs the per-frame loop for one target pose."""

    camera: Camera
    load_estimator: Callable[[], PoseEstimator]
    matcher: PoseMatcher = field(default_factory=PoseMatcher)

    def run(
        self,
        pose_name: str,
        on_update: Callable[[PoseSessionState], None] | None = None,
        should_stop: Callable[[PoseSessionState], bool] | None = None,
    ) -> PoseSessionState:
        """Run until the stream ends or ``should_stop`` returns True."""
        state = PoseSessionState(pose_name=pose_name)
        try:
            estimator = self.load_estimator()
        except ModelLoadError:
            logger.exception("Failed to load pose estimation model")
            state.fail("Error: Could not load pose detection model")
            _notify(on_update, state)
            return state

        state.feedback_text = "Camera ready. Starting detection..."
        try:
            with self.camera.open() as stream:
                state.status = DETECTING
                state.feedback_text = "Analyzing your pose..."
                _notify(on_update, state)
                for frame in stream.frames():
                    state.frames_seen += 1
                    self._evaluate_frame(estimator, frame, state)
                    _notify(on_update, state)
                    if should_stop and should_stop(state):
                        break
        except CameraPermissionError:
            logger.exception("Failed to access camera")
            state.fail("Error: Cannot access your camera")
            _notify(on_update, state)
            return state

        state.status = STOPPED
        return state

    def _evaluate_frame(
        self, estimator: PoseEstimator, frame: object, state: PoseSessionState
    ) -> None:
        try:
            keypoints = estimator.estimate(frame)
        except Exception:
            logger.exception("Pose estimation failed for frame")
            state.feedback_text = "Error occurred during pose detection"
            return
        state.apply(self.matcher.evaluate(state.pose_name, keypoints))


def _notify(
    callback: Callable[[PoseSessionState], None] | None, state: PoseSessionState
) -> None:
    if callback is not None:
        callback(state)
