"""
Detection Backend Interface for Mugshot

Defines the interface between face detectors and the game core.

Key responsibilities:
- Produce one DetectionBatch per new camera frame
- Return None when no new frame is available (the core's frame gate)
- Hand out image crops for enrollment mugshots
"""

from abc import ABC, abstractmethod
from collections import deque
from typing import Any, Deque, Iterable, Optional

from models import DetectionBatch, Rectangle, Resolution


class DetectionBackend(ABC):
    """
    Abstract base class for face detection backends.

    The backend is responsible for:
    1. Reporting face rectangles (and optional landmarks) in its frame space
    2. Tagging each batch with that frame size so the core can rescale it
    3. Signalling "no new frame" by returning None from poll()
    """

    def __init__(self, frame_width: int, frame_height: int):
        """
        Args:
            frame_width: Width of the detector's coordinate space in pixels
            frame_height: Height of the detector's coordinate space in pixels
        """
        self.frame_size = Resolution(width=frame_width, height=frame_height)
        self.detection_latency_ms = 0.0

    @abstractmethod
    def poll(self) -> Optional[DetectionBatch]:
        """
        Detect faces in the next camera frame.

        Returns:
            DetectionBatch for a new frame, or None if no new frame is available
        """
        pass

    def capture_region(self, region: Rectangle, space: Optional[Resolution] = None) -> Any:
        """
        Image of ``region`` from the most recent frame.

        Args:
            region: Area to capture
            space: Coordinate space ``region`` is expressed in (None = frame space)

        Returns:
            Backend-specific image, or None if the backend has no pixels
        """
        return None

    def release(self) -> None:
        """Release detector and camera resources."""
        pass

    def get_backend_info(self) -> dict:
        """Information about this backend for debugging."""
        return {
            'backend_type': self.__class__.__name__,
            'frame_resolution': str(self.frame_size),
            'detection_latency_ms': self.detection_latency_ms,
        }


class ScriptedDetectionBackend(DetectionBackend):
    """
    Replays a prepared sequence of batches, one per poll.

    ``None`` entries stand for frames where the camera had nothing new. Once
    the script runs out every poll returns None. Used for headless runs and
    tests.

    Usage:
        backend = ScriptedDetectionBackend(1280, 720)
        backend.queue_face(Rectangle(x=600, y=300, width=80, height=80))
        backend.queue_no_frame()
        batch = backend.poll()
    """

    def __init__(
        self,
        frame_width: int,
        frame_height: int,
        batches: Optional[Iterable[Optional[DetectionBatch]]] = None,
    ):
        super().__init__(frame_width, frame_height)
        self._script: Deque[Optional[DetectionBatch]] = deque(batches or [])
        self.polls = 0

    def queue(self, batch: Optional[DetectionBatch]) -> None:
        self._script.append(batch)

    def queue_face(self, *rectangles: Rectangle) -> None:
        """Queue a frame containing the given face rectangles."""
        self._script.append(DetectionBatch(rectangles=list(rectangles), frame_size=self.frame_size))

    def queue_no_frame(self) -> None:
        self._script.append(None)

    @property
    def remaining(self) -> int:
        return len(self._script)

    def poll(self) -> Optional[DetectionBatch]:
        self.polls += 1
        if not self._script:
            return None
        return self._script.popleft()
