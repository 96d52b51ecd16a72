"""OpenCV webcam adapter."""

from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass

import cv2

from fitness_coach.domain.errors import CameraPermissionError


@dataclass
class OpenCVFrameStream:
    """Frames read from an opened capture device."""

    capture: cv2.VideoCapture

    def frames(self) -> Iterator[object]:
        """Yield frames until the device stops delivering them."""
        while self.capture.isOpened():
            ok, frame = self.capture.read()
            if not ok:
                return
            yield frame


@dataclass
class OpenCVCamera:
    """Camera backed by ``cv2.VideoCapture``."""

    camera_id: int = 0
    width: int = 640
    height: int = 480

    @contextmanager
    def open(self) -> Iterator[OpenCVFrameStream]:
        """Open the device and release it on every exit path."""
        capture = cv2.VideoCapture(self.camera_id)
        try:
            if not capture.isOpened():
                raise CameraPermissionError(
                    "Cannot access camera", details={"camera_id": self.camera_id}
                )
            capture.set(cv2.CAP_PROP_FRAME_WIDTH, self.width)
            capture.set(cv2.CAP_PROP_FRAME_HEIGHT, self.height)
            yield OpenCVFrameStream(capture)
        finally:
            capture.release()
