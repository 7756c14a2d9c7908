"""
Mugshot Command Types

Defines the discrete commands the presentation layer delivers between frames
and what the core reports back:
- Command: Capture, advance turn, end game, reset
- CommandResult: Whether a command was applied, and why not if it wasn't
- SessionSnapshot: Read-only view of the session for rendering

These types are the contract between the game core and whatever drives it.
"""

from enum import Enum
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from models import GamePhase, Player, Point2D, Rectangle, Target


class Command(str, Enum):
    """Discrete input commands."""
    CAPTURE = "capture"
    ADVANCE_TURN = "advance_turn"
    END_GAME = "end_game"
    RESET = "reset"


class CommandResult(BaseModel):
    """
    Outcome of a command.

    Rejections are normal results, never exceptions: a capture with no face in
    view is a "not yet", not an error.
    """
    command: Command
    accepted: bool = Field(..., description="Whether the command changed state")
    phase: GamePhase = Field(..., description="Phase after the command")
    message: Optional[str] = Field(default=None, description="Human-readable status")

    model_config = ConfigDict(frozen=True)


class PlayerView(BaseModel):
    """Frozen copy of a player for rendering."""
    id: int
    mugshot: Any = None
    emoji: str
    smoothed_position: Point2D
    score: int
    landmarks: List[Point2D] = Field(default_factory=list)

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    @classmethod
    def of(cls, player: Player) -> 'PlayerView':
        return cls(
            id=player.id,
            mugshot=player.mugshot,
            emoji=player.emoji,
            smoothed_position=player.smoothed_position,
            score=player.score,
            landmarks=list(player.landmarks),
        )


class TargetView(BaseModel):
    """Frozen copy of a live target."""
    position: Point2D
    radius: float

    model_config = ConfigDict(frozen=True)


class SessionSnapshot(BaseModel):
    """Read-only session state handed to the renderer once per frame."""
    phase: GamePhase
    players: List[PlayerView]
    targets: List[TargetView]
    active_player: int
    guide_rect: Optional[Rectangle] = None
    guide_aligned: bool = False
    face_count: int = 0
    status_message: Optional[str] = None
    notice: Optional[str] = None
    winner: Optional[int] = None

    model_config = ConfigDict(frozen=True)

    @property
    def active(self) -> Optional[PlayerView]:
        if 0 <= self.active_player < len(self.players):
            return self.players[self.active_player]
        return None

    @staticmethod
    def targets_of(targets: List[Target]) -> List[TargetView]:
        return [TargetView(position=t.position, radius=t.radius) for t in targets]
