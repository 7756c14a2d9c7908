"""
Haar Cascade Face Detection Backend.

Detects frontal faces in webcam frames with OpenCV's stock Haar cascades and
reports them as DetectionBatches. When eye detection is enabled, a face whose
upper half yields exactly two eyes gets two landmarks (the eye centers, left
to right); other faces get an empty landmark list.
"""

import time
from typing import List, Optional, Sequence, Tuple

import cv2
import numpy as np

from models import DetectionBatch, Point2D, Rectangle, Resolution
from mugshot.camera import CameraInterface
from mugshot.detection_backend import DetectionBackend
from mugshot.logging import get_logger

log = get_logger('face_detection')

FACE_CASCADE = 'haarcascade_frontalface_default.xml'
EYE_CASCADE = 'haarcascade_eye.xml'


def load_cascade(filename: str) -> cv2.CascadeClassifier:
    """
    Load a cascade from OpenCV's data directory (or an explicit path).

    Raises:
        RuntimeError: If the cascade file is missing or invalid
    """
    path = filename if '/' in filename or '\\' in filename else cv2.data.haarcascades + filename
    cascade = cv2.CascadeClassifier(path)
    if cascade.empty():
        raise RuntimeError(f"Could not load Haar cascade from '{path}'")
    return cascade


def crop_region(frame: np.ndarray, region: Rectangle) -> Optional[np.ndarray]:
    """
    Copy of the pixels under ``region``, clamped to the frame.

    Returns:
        The cropped image, or None if the region lies entirely outside the frame
    """
    height, width = frame.shape[:2]
    x0 = max(0, int(round(region.x)))
    y0 = max(0, int(round(region.y)))
    x1 = min(width, int(round(region.right)))
    y1 = min(height, int(round(region.bottom)))

    if x1 <= x0 or y1 <= y0:
        return None
    return frame[y0:y1, x0:x1].copy()


def eye_landmarks(eyes: Sequence[Tuple[int, int, int, int]], face_x: int, face_y: int) -> List[Point2D]:
    """
    Eye centers in frame coordinates, sorted left to right.

    Args:
        eyes: Eye rectangles relative to the face ROI
        face_x: Face ROI left edge in the frame
        face_y: Face ROI top edge in the frame

    Returns:
        Two points when exactly two eyes were found, otherwise an empty list
    """
    if len(eyes) != 2:
        return []
    centers = [
        Point2D(x=face_x + ex + ew / 2, y=face_y + ey + eh / 2)
        for (ex, ey, ew, eh) in eyes
    ]
    return sorted(centers, key=lambda p: p.x)


class HaarFaceBackend(DetectionBackend):
    """
    Webcam face detection with Haar cascades.

    Args:
        camera: Frame source
        mirror: Flip frames horizontally before detection (selfie view)
        detect_eyes: Report eye-center landmarks per face
        scale_factor: Cascade pyramid step
        min_neighbors: Cascade neighbor threshold
        min_face_size: Smallest face reported, in pixels
    """

    def __init__(
        self,
        camera: CameraInterface,
        mirror: bool = True,
        detect_eyes: bool = True,
        scale_factor: float = 1.1,
        min_neighbors: int = 5,
        min_face_size: int = 60,
    ):
        width, height = camera.get_resolution()
        super().__init__(width, height)

        self.camera = camera
        self.mirror = mirror
        self.scale_factor = scale_factor
        self.min_neighbors = min_neighbors
        self.min_face_size = min_face_size

        self.face_cascade = load_cascade(FACE_CASCADE)
        self.eye_cascade = load_cascade(EYE_CASCADE) if detect_eyes else None

        self.last_frame: Optional[np.ndarray] = None

    def poll(self) -> Optional[DetectionBatch]:
        frame = self.camera.capture_frame()
        if frame is None:
            return None

        start = time.perf_counter()
        timestamp = time.time()

        if self.mirror:
            frame = cv2.flip(frame, 1)
        self.last_frame = frame

        height, width = frame.shape[:2]
        gray = cv2.cvtColor(frame, cv2.COLOR_BGR2GRAY)
        faces = self.face_cascade.detectMultiScale(
            gray,
            scaleFactor=self.scale_factor,
            minNeighbors=self.min_neighbors,
            minSize=(self.min_face_size, self.min_face_size),
        )

        rectangles = []
        landmarks: Optional[List[List[Point2D]]] = [] if self.eye_cascade is not None else None

        for (x, y, w, h) in faces:
            rectangles.append(Rectangle(x=float(x), y=float(y), width=float(w), height=float(h)))
            if landmarks is not None:
                landmarks.append(self._find_eyes(gray, int(x), int(y), int(w), int(h)))

        self.detection_latency_ms = (time.perf_counter() - start) * 1000.0
        log.trace("%d faces in %.1fms", len(rectangles), self.detection_latency_ms)

        return DetectionBatch(
            rectangles=rectangles,
            landmarks=landmarks,
            frame_size=Resolution(width=width, height=height),
            timestamp=timestamp,
        )

    def _find_eyes(self, gray: np.ndarray, x: int, y: int, w: int, h: int) -> List[Point2D]:
        # Eyes sit in the upper half of a frontal face
        roi = gray[y:y + h // 2, x:x + w]
        eyes = self.eye_cascade.detectMultiScale(
            roi,
            scaleFactor=self.scale_factor,
            minNeighbors=self.min_neighbors,
            minSize=(max(1, int(w * 0.1)), max(1, int(h * 0.1))),
        )
        return eye_landmarks([tuple(int(v) for v in e) for e in eyes], x, y)

    def capture_region(self, region: Rectangle, space: Optional[Resolution] = None) -> Optional[np.ndarray]:
        """Crop ``region`` out of the last (mirrored) frame as a BGR image."""
        if self.last_frame is None:
            return None
        if space is not None and space != self.frame_size:
            region = region.scaled(self.frame_size.width / space.width,
                                   self.frame_size.height / space.height)
        return crop_region(self.last_frame, region)

    def release(self) -> None:
        self.camera.release()
