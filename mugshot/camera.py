"""
Webcam frame sources.

The face backend reads BGR frames through CameraInterface so tests can feed
synthetic images; OpenCVCamera is the real webcam.
"""

from abc import ABC, abstractmethod
from typing import Optional, Tuple

import cv2
import numpy as np

from mugshot.logging import get_logger

log = get_logger('camera')

WARMUP_FRAMES = 5


class CameraInterface(ABC):
    """Source of BGR frames."""

    @abstractmethod
    def capture_frame(self) -> Optional[np.ndarray]:
        """Next frame, or None if the camera has nothing new."""

    @abstractmethod
    def get_resolution(self) -> Tuple[int, int]:
        """(width, height) of the frames this camera delivers."""

    @abstractmethod
    def release(self) -> None:
        """Give the device back."""


class OpenCVCamera(CameraInterface):
    """
    Webcam read through cv2.VideoCapture.

    Args:
        camera_id: OpenCV device index
        resolution: (width, height) to request; the driver may pick another

    Raises:
        RuntimeError: If the device cannot be opened
    """

    def __init__(self, camera_id: int = 0, resolution: Optional[Tuple[int, int]] = None):
        self.camera_id = camera_id
        self.capture = cv2.VideoCapture(camera_id)
        if not self.capture.isOpened():
            raise RuntimeError(f"Could not open camera {camera_id}")

        if resolution:
            self.capture.set(cv2.CAP_PROP_FRAME_WIDTH, resolution[0])
            self.capture.set(cv2.CAP_PROP_FRAME_HEIGHT, resolution[1])

        # Auto-exposure settles over the first frames
        for _ in range(WARMUP_FRAMES):
            self.capture.read()

        width, height = self.get_resolution()
        if resolution and (width, height) != tuple(resolution):
            log.warning("Camera %d gave %dx%d instead of %dx%d", camera_id, width, height, *resolution)
        log.info("Camera %d opened at %dx%d", camera_id, width, height)

    def capture_frame(self) -> Optional[np.ndarray]:
        ok, frame = self.capture.read()
        if not ok:
            log.trace("No frame from camera %d", self.camera_id)
            return None
        return frame

    def get_resolution(self) -> Tuple[int, int]:
        return (
            int(self.capture.get(cv2.CAP_PROP_FRAME_WIDTH)),
            int(self.capture.get(cv2.CAP_PROP_FRAME_HEIGHT)),
        )

    def release(self) -> None:
        if self.capture.isOpened():
            self.capture.release()
            log.info("Camera %d released", self.camera_id)
