"""Run a live pose-feedback session from the local webcam.

Usage:
  fitness-coach-pose --pose "Downward Dog"
  fitness-coach-pose --pose Plank --camera 1 --model yolov8s-pose.pt
"""

import argparse
import logging
from collections.abc import Callable

from fitness_coach.app_logging import configure_logging
from fitness_coach.config import Settings
from fitness_coach.services.pose_matcher import PoseMatcher, default_catalog
from fitness_coach.services.pose_session import (
    FAILED,
    PoseSession,
    PoseSessionState,
)

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    """Return the command-line parser."""
    parser = argparse.ArgumentParser(description="Live pose feedback from a webcam")
    parser.add_argument(
        "--pose",
        default="Downward Dog",
        help=f"target pose, one of: {', '.join(default_catalog().names())}",
    )
    parser.add_argument("--camera", type=int, default=0, help="camera index")
    parser.add_argument(
        "--model", default="yolov8n-pose.pt", help="YOLOv8-Pose weights"
    )
    parser.add_argument("--device", default=None, help="cuda or cpu")
    parser.add_argument(
        "--max-frames", type=int, default=None, help="stop after N frames"
    )
    return parser


def feedback_logger() -> Callable[[PoseSessionState], None]:
    """Return an update callback that logs feedback only when it changes."""
    last_feedback: str | None = None

    def report(state: PoseSessionState) -> None:
        nonlocal last_feedback
        if state.feedback_text == last_feedback:
            return
        last_feedback = state.feedback_text
        logger.info("%s: %s", state.pose_name, state.feedback_text)

    return report


def frame_limit(max_frames: int | None) -> Callable[[PoseSessionState], bool]:
    """Return a stop predicate counting delivered frames, matched or not."""

    def should_stop(state: PoseSessionState) -> bool:
        return max_frames is not None and state.frames_seen >= max_frames

    return should_stop


def main(argv: list[str] | None = None) -> int:
    """Entry point for the ``fitness-coach-pose`` script."""
    from fitness_coach.adapters.opencv_camera import OpenCVCamera
    from fitness_coach.adapters.yolo_pose_estimator import YoloPoseEstimator

    args = build_parser().parse_args(argv)
    settings = Settings()
    configure_logging(settings.log_level)
    session = PoseSession(
        camera=OpenCVCamera(camera_id=args.camera),
        load_estimator=lambda: YoloPoseEstimator.load(args.model, args.device),
        matcher=PoseMatcher(confidence_threshold=settings.pose_confidence_threshold),
    )

    try:
        state = session.run(
            args.pose,
            on_update=feedback_logger(),
            should_stop=frame_limit(args.max_frames),
        )
    except KeyboardInterrupt:
        return 0
    return 1 if state.status == FAILED else 0


if __name__ == "__main__":
    raise SystemExit(main())
