"""
Game session state and presentation hooks.

A GameSession is the single owner of everything that changes during play:
enrolled players, live targets, the current phase, whose turn it is and the
spawn timer. Components receive the session explicitly; nothing in the core
keeps game state at module level.

Side effects that belong to the presentation layer (grabbing a mugshot,
music, hit sounds) go through SessionHooks so the core stays headless.
"""

from dataclasses import dataclass, field
from typing import Any, List, Optional

from models import DetectionBatch, GamePhase, Player, Rectangle, Target, decide_winner
from mugshot.logging import emit_record

NOTICE_SECONDS = 2.0


class SessionHooks:
    """
    Presentation-layer side effects the core triggers.

    The base class does nothing, which is what headless runs and tests want.
    Override the methods the presentation layer supports.
    """

    def capture_mugshot(self, region: Rectangle) -> Any:
        """Return an image of ``region`` from the current frame (opaque to the core)."""
        return None

    def start_music(self) -> None:
        pass

    def stop_music(self) -> None:
        pass

    def play_hit_sound(self) -> None:
        pass


@dataclass
class GameSession:
    """
    Mutable state of one game.

    ``status_message`` is the phase text (capture prompt, winner announcement);
    ``notice`` is a short-lived message (rejections, turn changes) that expires
    after ``notice_timer`` seconds of play without touching the phase text.

    Invariants:
        - ``players`` holds at most two entries, in enrollment order
        - ``active_player`` indexes ``players`` whenever phase is GAMEPLAY
    """
    phase: GamePhase = GamePhase.ENROLL_P1_AIM
    players: List[Player] = field(default_factory=list)
    targets: List[Target] = field(default_factory=list)
    active_player: int = 0
    spawn_timer: float = 0.0
    status_message: Optional[str] = None
    notice: Optional[str] = None
    notice_timer: float = 0.0
    last_batch: DetectionBatch = field(default_factory=DetectionBatch.empty)
    frame: int = 0

    MAX_PLAYERS = 2

    @property
    def active(self) -> Optional[Player]:
        """The player the tracker currently drives, if any."""
        if 0 <= self.active_player < len(self.players):
            return self.players[self.active_player]
        return None

    def clear(self) -> None:
        """Drop players and targets and return to the first enrollment phase."""
        self.players.clear()
        self.targets.clear()
        self.spawn_timer = 0.0
        self.active_player = 0
        self.phase = GamePhase.ENROLL_P1_AIM
        self.status_message = None
        self.clear_notice()

    def notify(self, message: str, duration: float = NOTICE_SECONDS) -> None:
        self.notice = message
        self.notice_timer = duration

    def clear_notice(self) -> None:
        self.notice = None
        self.notice_timer = 0.0

    def expire_notice(self, dt: float) -> None:
        """Count down the notice and drop it once its time is up."""
        if self.notice is None:
            return
        self.notice_timer -= dt
        if self.notice_timer <= 0:
            self.clear_notice()

    def winner(self) -> Optional[int]:
        """Id of the leading player, or None on a tie."""
        return decide_winner(self.players)

    def record(self, event_type: str, **data: Any) -> None:
        """Emit a structured session record (no-op unless a sink is registered)."""
        emit_record('session', {
            'type': event_type,
            'frame': self.frame,
            'phase': self.phase.value,
            **data,
        })
