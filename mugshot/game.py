"""
Emoji Mugshot game core.

MugshotGame wires the tracker, enrollment controller, target spawner, hit
resolver and turn manager around one GameSession. The presentation layer
calls it once per rendered frame and once per input command:

    game = MugshotGame(config, hooks=my_hooks)

    while running:
        batch = backend.poll()          # None when the camera has no new frame
        game.update(batch, dt)
        for command in commands_from_keyboard():
            game.handle_command(command)
        render(game.snapshot())
"""

import random
from typing import Optional

from models import DetectionBatch, GamePhase
from mugshot.config import GameConfig
from mugshot.enrollment import EnrollmentController, capture_prompt
from mugshot.events import Command, CommandResult, PlayerView, SessionSnapshot
from mugshot.logging import get_logger
from mugshot.session import GameSession, SessionHooks
from mugshot.targets import HitResolver, TargetSpawner
from mugshot.tracker import PlayerTracker
from mugshot.turns import TurnManager

log = get_logger('game')

TOO_MANY_FACES = "Too many faces! Player {n}'s turn."


class MugshotGame:
    """
    Frame-driven game core.

    Args:
        config: Validated game settings (defaults if None)
        hooks: Presentation side effects (no-ops if None)
        rng: Random source for target placement
    """

    def __init__(
        self,
        config: Optional[GameConfig] = None,
        hooks: Optional[SessionHooks] = None,
        rng: Optional[random.Random] = None,
    ):
        self.config = config or GameConfig()
        self.hooks = hooks or SessionHooks()
        self.session = GameSession()

        cfg = self.config
        self.tracker = PlayerTracker(alpha=cfg.smoothing_alpha, landmark_policy=cfg.landmark_policy)
        self.enrollment = EnrollmentController(
            self.hooks,
            guide_rect=cfg.guide_rect if cfg.guide_enabled else None,
        )
        self.spawner = TargetSpawner(
            cfg.playfield,
            interval=cfg.spawn_interval,
            margin=cfg.spawn_margin,
            radius=cfg.target_radius,
            rng=rng,
        )
        self.hits = HitResolver(self.hooks, reach=cfg.reach_bonus, points=cfg.hit_points)
        self.turns = TurnManager()

        # Time that passed while the camera had no new frame
        self._pending_dt = 0.0

        self.session.status_message = capture_prompt(self.session.phase)

    @property
    def phase(self) -> GamePhase:
        return self.session.phase

    def update(self, batch: Optional[DetectionBatch], dt: float) -> bool:
        """
        Run one frame.

        Args:
            batch: Detections for a new camera frame, or None if there is none
            dt: Seconds since the previous call

        Returns:
            True if a new frame was processed
        """
        if batch is None:
            self._pending_dt += dt
            return False

        elapsed = self._pending_dt + dt
        self._pending_dt = 0.0

        session = self.session
        batch = batch.scaled_to(self.config.playfield)
        session.last_batch = batch
        session.frame += 1
        session.expire_notice(elapsed)

        if session.phase != GamePhase.GAMEPLAY:
            return True

        player = session.active
        if player is not None:
            self.tracker.update(player, batch.detections())
            self._update_face_notice(batch.count, player.id)

        self.spawner.tick(session, elapsed)
        self.hits.resolve(session)
        self._check_win()
        return True

    def _update_face_notice(self, face_count: int, player_id: int) -> None:
        notice = TOO_MANY_FACES.format(n=player_id)
        if face_count > 1:
            self.session.notify(notice)
        elif self.session.notice == notice:
            self.session.clear_notice()

    def _check_win(self) -> None:
        win_score = self.config.win_score
        if win_score <= 0:
            return
        if any(p.score >= win_score for p in self.session.players):
            self.enrollment.end_game(self.session, reason="win_score")

    def handle_command(self, command: Command) -> CommandResult:
        """Apply one input command between frames."""
        session = self.session

        if command == Command.CAPTURE:
            result = self.enrollment.capture(session, session.last_batch)
        elif command == Command.ADVANCE_TURN:
            result = self.turns.advance(session)
        elif command == Command.END_GAME:
            result = self.enrollment.end_game(session, reason="command")
        elif command == Command.RESET:
            self._pending_dt = 0.0
            result = self.enrollment.reset(session)
        else:
            raise ValueError(f"Unknown command: {command!r}")

        log.debug("%s -> accepted=%s phase=%s", command.value, result.accepted, result.phase.value)
        return result

    def snapshot(self) -> SessionSnapshot:
        """Read-only view of the session for rendering."""
        session = self.session
        enrolling = session.phase.is_enrollment
        return SessionSnapshot(
            phase=session.phase,
            players=[PlayerView.of(p) for p in session.players],
            targets=SessionSnapshot.targets_of(session.targets),
            active_player=session.active_player,
            guide_rect=self.enrollment.guide_rect if enrolling else None,
            guide_aligned=enrolling and self.enrollment.is_aligned(session.last_batch),
            face_count=session.last_batch.count,
            status_message=session.status_message,
            notice=session.notice,
            winner=session.winner() if session.phase == GamePhase.GAME_OVER else None,
        )
