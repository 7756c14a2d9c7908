"""
Unified models library for Emoji Mugshot.

This package provides the Pydantic data models used across the system:
- Primitives: Basic geometric types (Point2D, Rectangle, Resolution)
- Face: Detector output (Detection, DetectionBatch)
- Game: Phases, players and targets (GamePhase, Player, Target)

Usage:
    >>> from models import Point2D, Rectangle, DetectionBatch
    >>> from models.game import GamePhase, Player
"""

from .primitives import (
    Point2D,
    Resolution,
    Rectangle,
)

from .face import (
    Detection,
    DetectionBatch,
)

from .game import (
    GamePhase,
    LandmarkPolicy,
    Player,
    Target,
    decide_winner,
    emoji_asset_name,
)

__all__ = [
    # Primitives
    "Point2D",
    "Resolution",
    "Rectangle",
    # Face
    "Detection",
    "DetectionBatch",
    # Game
    "GamePhase",
    "LandmarkPolicy",
    "Player",
    "Target",
    "decide_winner",
    "emoji_asset_name",
]
