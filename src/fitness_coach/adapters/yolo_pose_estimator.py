"""YOLOv8-Pose keypoint estimator."""

from dataclasses import dataclass

from ultralytics import YOLO

from fitness_coach.domain.errors import ModelLoadError
from fitness_coach.domain.pose import Keypoint, Point

# COCO keypoint order, named the way the pose matcher expects.
COCO_PARTS = (
    "nose",
    "leftEye",
    "rightEye",
    "leftEar",
    "rightEar",
    "leftShoulder",
    "rightShoulder",
    "leftElbow",
    "rightElbow",
    "leftWrist",
    "rightWrist",
    "leftHip",
    "rightHip",
    "leftKnee",
    "rightKnee",
    "leftAnkle",
    "rightAnkle",
)


@dataclass
class YoloPoseEstimator:
    """Returns pixel-space keypoints of the most confident person."""

    model: YOLO
    device: str | None = None

    @classmethod
    def load(
        cls, model_path: str = "yolov8n-pose.pt", device: str | None = None
    ) -> "YoloPoseEstimator":
        """Load the model weights or raise ModelLoadError."""
        try:
            model = YOLO(model_path)
        except Exception as exc:
            raise ModelLoadError(
                "Could not load pose detection model",
                details={"model_path": model_path, "reason": str(exc)},
            ) from exc
        return cls(model=model, device=device)

    def estimate(self, frame: object) -> list[Keypoint]:
        """Run inference on one frame."""
        results = self.model(frame, verbose=False, device=self.device)
        best = None
        best_confidence = -1.0
        for result in results:
            if result.keypoints is None or result.boxes is None:
                continue
            for index in range(len(result.boxes)):
                confidence = float(result.boxes.conf[index])
                if confidence > best_confidence:
                    best_confidence = confidence
                    best = result.keypoints.data[index]
        if best is None:
            return []
        return [
            Keypoint(
                part=part,
                position=Point(x=float(best[i, 0]), y=float(best[i, 1])),
                score=float(best[i, 2]),
            )
            for i, part in enumerate(COCO_PARTS)
            if i < len(best)
        ]
