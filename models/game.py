"""
Game data models for Emoji Mugshot.

Phases, enrolled players and poppable targets. Players and targets are the
only mutable records in the core: they are updated in place every frame, so
they validate on assignment instead of being frozen.
"""

from enum import Enum
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .primitives import Point2D


class GamePhase(str, Enum):
    """Phases of a game session.

    Attributes:
        ENROLL_P1_AIM: Waiting for player 1 to line up and capture
        ENROLL_P2_AIM: Waiting for player 2 to line up and capture
        GAMEPLAY: Targets spawn and the active player's face pops them
        GAME_OVER: Scores are final; only a reset is accepted
    """
    ENROLL_P1_AIM = "enroll_p1_aim"
    ENROLL_P2_AIM = "enroll_p2_aim"
    GAMEPLAY = "gameplay"
    GAME_OVER = "game_over"

    @property
    def is_enrollment(self) -> bool:
        return self in (GamePhase.ENROLL_P1_AIM, GamePhase.ENROLL_P2_AIM)


class LandmarkPolicy(str, Enum):
    """What the tracker does with a player's landmarks when the matched
    detection carries none.

    Attributes:
        KEEP_LAST: Keep the previous frame's landmarks until replaced
        CLEAR_ON_MISS: Drop them so stale points are never drawn
    """
    KEEP_LAST = "keep_last"
    CLEAR_ON_MISS = "clear_on_miss"


def emoji_asset_name(player_id: int) -> str:
    """Asset naming contract for a player's emoji image."""
    return f"p{player_id}_emoji.png"


class Player(BaseModel):
    """An enrolled player.

    Attributes:
        id: 1 or 2, in enrollment order
        mugshot: Opaque image handle captured at enrollment
        emoji: Emoji asset reference (see ``emoji_asset_name``)
        smoothed_position: Temporally filtered face center
        score: Points earned so far
        landmarks: Landmarks of the latest matched detection
    """
    id: int = Field(..., ge=1, le=2)
    mugshot: Any = None
    emoji: str = ""
    smoothed_position: Point2D
    score: int = 0
    landmarks: List[Point2D] = Field(default_factory=list)

    model_config = ConfigDict(validate_assignment=True, arbitrary_types_allowed=True)

    @field_validator('score')
    @classmethod
    def validate_score(cls, v: int) -> int:
        if v < 0:
            raise ValueError(f'Score must be non-negative, got {v}')
        return v


class Target(BaseModel):
    """A poppable target."""
    position: Point2D
    radius: float = Field(default=25.0, gt=0)
    hit: bool = False

    model_config = ConfigDict(validate_assignment=True)


def decide_winner(players: List[Player]) -> Optional[int]:
    """Id of the player with the strictly highest score, None on a tie or
    when fewer than two players are enrolled."""
    if len(players) < 2:
        return None
    best = max(p.score for p in players)
    leaders = [p for p in players if p.score == best]
    if len(leaders) != 1:
        return None
    return leaders[0].id
