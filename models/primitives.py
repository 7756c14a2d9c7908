"""
Shared primitive data types for the game core.

This module provides the basic geometric types used throughout the codebase:
detector output, player tracking, target placement and the enrollment guide.
"""

import math

from pydantic import BaseModel, Field, field_validator, computed_field, ConfigDict


class Point2D(BaseModel):
    """Immutable 2D point for positions and landmark coordinates.

    Attributes:
        x: X coordinate (horizontal, pixels)
        y: Y coordinate (vertical, pixels)

    Examples:
        >>> a = Point2D(x=0.0, y=0.0)
        >>> a.lerp(Point2D(x=100.0, y=0.0), 0.1)
        Point2D(x=10.0, y=0.0)
    """
    x: float
    y: float

    model_config = ConfigDict(frozen=True)

    def distance_to(self, other: 'Point2D') -> float:
        """Euclidean distance to another point."""
        return math.hypot(other.x - self.x, other.y - self.y)

    def lerp(self, other: 'Point2D', alpha: float) -> 'Point2D':
        """Linear interpolation toward ``other``.

        ``alpha=0`` returns this point, ``alpha=1`` returns ``other``.
        """
        return Point2D(
            x=self.x + (other.x - self.x) * alpha,
            y=self.y + (other.y - self.y) * alpha,
        )

    def scaled(self, sx: float, sy: float) -> 'Point2D':
        """Scale both axes independently (coordinate space conversion)."""
        return Point2D(x=self.x * sx, y=self.y * sy)

    def __str__(self) -> str:
        return f"Point2D(x={self.x:.2f}, y={self.y:.2f})"


class Resolution(BaseModel):
    """Camera frame or playfield size in pixels.

    Examples:
        >>> Resolution(width=1280, height=720).aspect_ratio
        1.7777777777777777
    """
    width: int = Field(..., gt=0)
    height: int = Field(..., gt=0)

    model_config = ConfigDict(frozen=True)

    @computed_field
    @property
    def aspect_ratio(self) -> float:
        """Calculate aspect ratio (width / height)."""
        return self.width / self.height

    def __str__(self) -> str:
        return f"Resolution({self.width}x{self.height})"


class Rectangle(BaseModel):
    """Immutable axis-aligned rectangle, top-left anchored (pygame/OpenCV convention).

    Used for face bounding regions and the enrollment guide box.

    Attributes:
        x: X coordinate of top-left corner
        y: Y coordinate of top-left corner
        width: Width of rectangle (must be positive)
        height: Height of rectangle (must be positive)

    Examples:
        >>> rect = Rectangle(x=100.0, y=100.0, width=50.0, height=50.0)
        >>> rect.center
        Point2D(x=125.0, y=125.0)
        >>> rect.contains_point(Point2D(x=125.0, y=125.0))
        True
    """
    x: float
    y: float
    width: float
    height: float

    model_config = ConfigDict(frozen=True)

    @field_validator('width', 'height')
    @classmethod
    def validate_positive_dimensions(cls, v: float) -> float:
        """Validate dimensions are positive."""
        if v <= 0:
            raise ValueError(f'Rectangle dimensions must be positive, got {v}')
        return v

    @classmethod
    def centered_at(cls, center: Point2D, width: float, height: float) -> 'Rectangle':
        """Build a rectangle of the given size around a center point."""
        return cls(
            x=center.x - width / 2,
            y=center.y - height / 2,
            width=width,
            height=height,
        )

    @computed_field
    @property
    def center(self) -> Point2D:
        """Center point of the rectangle."""
        return Point2D(
            x=self.x + self.width / 2,
            y=self.y + self.height / 2
        )

    @property
    def right(self) -> float:
        return self.x + self.width

    @property
    def bottom(self) -> float:
        return self.y + self.height

    def contains_point(self, point: Point2D) -> bool:
        """Check if a point is inside the rectangle (boundary inclusive)."""
        return (self.x <= point.x <= self.right and
                self.y <= point.y <= self.bottom)

    def scaled(self, sx: float, sy: float) -> 'Rectangle':
        """Scale position and size independently on each axis."""
        return Rectangle(
            x=self.x * sx,
            y=self.y * sy,
            width=self.width * sx,
            height=self.height * sy,
        )

    def __str__(self) -> str:
        return f"Rectangle(x={self.x:.2f}, y={self.y:.2f}, w={self.width:.2f}, h={self.height:.2f})"
