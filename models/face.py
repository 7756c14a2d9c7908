"""
Face detector output models.

A detection adapter reports, for each new camera frame, an unordered list of
face rectangles and (for richer detectors) one ordered landmark list per
rectangle. These models make that optional richness explicit so the game core
never has to guess what the detector produced.
"""

from typing import List, Optional, Tuple
import time

from pydantic import BaseModel, ConfigDict, Field, model_validator

from .primitives import Point2D, Rectangle, Resolution


class Detection(BaseModel):
    """One candidate face region and its landmarks (possibly empty)."""
    bounding_region: Rectangle
    landmarks: Tuple[Point2D, ...] = ()

    model_config = ConfigDict(frozen=True)

    @property
    def center(self) -> Point2D:
        return self.bounding_region.center

    @property
    def has_landmarks(self) -> bool:
        return len(self.landmarks) > 0


class DetectionBatch(BaseModel):
    """All detections for a single camera frame.

    Attributes:
        rectangles: Face bounding regions, in detector order
        landmarks: Per-rectangle landmark lists, parallel to ``rectangles``,
            or None when the detector does not report landmarks at all
        frame_size: Coordinate space of the rectangles (None = already in
            playfield coordinates)
        timestamp: Capture time (seconds since epoch)

    Examples:
        >>> batch = DetectionBatch(rectangles=[Rectangle(x=0, y=0, width=10, height=10)])
        >>> batch.detections()[0].center
        Point2D(x=5.0, y=5.0)
    """
    rectangles: List[Rectangle] = Field(default_factory=list)
    landmarks: Optional[List[List[Point2D]]] = None
    frame_size: Optional[Resolution] = None
    timestamp: float = Field(default_factory=time.time)

    model_config = ConfigDict(frozen=True)

    @model_validator(mode='after')
    def validate_parallel_landmarks(self) -> 'DetectionBatch':
        if self.landmarks is not None and len(self.landmarks) != len(self.rectangles):
            raise ValueError(
                f'landmarks must be parallel to rectangles: '
                f'{len(self.landmarks)} landmark lists for {len(self.rectangles)} rectangles'
            )
        return self

    @classmethod
    def empty(cls, frame_size: Optional[Resolution] = None) -> 'DetectionBatch':
        return cls(rectangles=[], frame_size=frame_size)

    @property
    def count(self) -> int:
        """Number of faces in this frame."""
        return len(self.rectangles)

    def detections(self) -> List[Detection]:
        """Per-rectangle views pairing each region with its landmarks."""
        result = []
        for i, rect in enumerate(self.rectangles):
            points = tuple(self.landmarks[i]) if self.landmarks is not None else ()
            result.append(Detection(bounding_region=rect, landmarks=points))
        return result

    def first(self) -> Optional[Detection]:
        """The first detection in detector order, if any."""
        if not self.rectangles:
            return None
        return self.detections()[0]

    def scaled_to(self, target: Resolution) -> 'DetectionBatch':
        """Convert rectangles and landmarks into another coordinate space.

        Returns this batch unchanged when it carries no ``frame_size`` or when
        the sizes already match.
        """
        if self.frame_size is None or self.frame_size == target:
            return self

        sx = target.width / self.frame_size.width
        sy = target.height / self.frame_size.height

        landmarks = None
        if self.landmarks is not None:
            landmarks = [[p.scaled(sx, sy) for p in points] for points in self.landmarks]

        return DetectionBatch(
            rectangles=[r.scaled(sx, sy) for r in self.rectangles],
            landmarks=landmarks,
            frame_size=target,
            timestamp=self.timestamp,
        )
