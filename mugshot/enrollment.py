"""
Enrollment controller.

Drives the phase machine for the commands that create and destroy players:
capture (enroll the next player), end game, and reset. Unmet preconditions
are reported through CommandResult and a short-lived session notice; they
never raise and never touch the phase text (prompt or winner).
"""

from typing import Optional

from models import DetectionBatch, GamePhase, Player, Rectangle, emoji_asset_name
from mugshot.events import Command, CommandResult
from mugshot.logging import get_logger
from mugshot.session import GameSession, SessionHooks
from mugshot.state_machine import next_phase

log = get_logger('enrollment')

MSG_NO_FACE = "No face detected"
MSG_ALIGN = "Position your face inside the box"
MSG_FULL = "Both players are already enrolled"


def capture_prompt(phase: GamePhase) -> Optional[str]:
    """Instruction shown while waiting for a capture."""
    if phase == GamePhase.ENROLL_P1_AIM:
        return "Player 1: Look at the camera.\nPress [SPACE] to take your mugshot!"
    if phase == GamePhase.ENROLL_P2_AIM:
        return "Player 2: Look at the camera.\nPress [SPACE] to take your mugshot!"
    return None


class EnrollmentController:
    """
    Capture, end-game and reset transitions.

    Args:
        hooks: Presentation side effects (mugshot capture, music)
        guide_rect: Box the first face must be centered in, or None to accept
            any position
    """

    def __init__(self, hooks: SessionHooks, guide_rect: Optional[Rectangle] = None):
        self.hooks = hooks
        self.guide_rect = guide_rect

    def _reject(self, session: GameSession, command: Command, message: str) -> CommandResult:
        session.notify(message)
        log.debug("%s rejected in %s: %s", command.value, session.phase.value, message)
        return CommandResult(command=command, accepted=False, phase=session.phase, message=message)

    def is_aligned(self, batch: DetectionBatch) -> bool:
        """True when the first face is present and (if guided) inside the guide box."""
        first = batch.first()
        if first is None:
            return False
        if self.guide_rect is None:
            return True
        return self.guide_rect.contains_point(first.center)

    def capture(self, session: GameSession, batch: DetectionBatch) -> CommandResult:
        """
        Enroll the next player from the first detection in ``batch``.

        Requires an enrollment phase, at least one face, and (when guided) the
        first face centered inside the guide box.
        """
        target_phase = next_phase(session.phase, Command.CAPTURE)
        if target_phase is None:
            return self._reject(session, Command.CAPTURE, f"Capture is not available during {session.phase.value}")

        if len(session.players) >= session.MAX_PLAYERS:
            return self._reject(session, Command.CAPTURE, MSG_FULL)

        first = batch.first()
        if first is None:
            return self._reject(session, Command.CAPTURE, MSG_NO_FACE)
        if not self.is_aligned(batch):
            return self._reject(session, Command.CAPTURE, MSG_ALIGN)

        player_id = 1 if session.phase == GamePhase.ENROLL_P1_AIM else 2
        region = first.bounding_region
        player = Player(
            id=player_id,
            mugshot=self.hooks.capture_mugshot(region),
            emoji=emoji_asset_name(player_id),
            smoothed_position=region.center,
            landmarks=list(first.landmarks),
        )
        session.players.append(player)
        session.phase = target_phase
        session.clear_notice()

        if target_phase == GamePhase.GAMEPLAY:
            session.active_player = 0
            session.spawn_timer = 0.0
            session.status_message = None
            self.hooks.start_music()
        else:
            session.status_message = capture_prompt(target_phase)

        log.info("Player %d enrolled at %s", player_id, region.center)
        session.record('enrolled', player=player_id,
                       x=region.center.x, y=region.center.y)
        return CommandResult(command=Command.CAPTURE, accepted=True, phase=session.phase,
                             message=f"Player {player_id} enrolled")

    def end_game(self, session: GameSession, reason: str = "ended") -> CommandResult:
        """Move GAMEPLAY to GAME_OVER."""
        target_phase = next_phase(session.phase, Command.END_GAME)
        if target_phase is None:
            return self._reject(session, Command.END_GAME, f"No game in progress ({session.phase.value})")

        session.phase = target_phase
        session.clear_notice()
        winner = session.winner()
        session.status_message = f"Player {winner} Wins!" if winner is not None else "It's a Tie!"
        self.hooks.stop_music()

        log.info("Game over (%s): %s", reason, session.status_message)
        session.record('game_over', reason=reason, winner=winner,
                       scores=[p.score for p in session.players])
        return CommandResult(command=Command.END_GAME, accepted=True, phase=session.phase,
                             message=session.status_message)

    def reset(self, session: GameSession) -> CommandResult:
        """Clear everything and return to player 1 enrollment (valid in any phase)."""
        session.phase = next_phase(session.phase, Command.RESET)
        session.clear()
        session.status_message = capture_prompt(session.phase)
        self.hooks.stop_music()

        log.info("Session reset")
        session.record('reset')
        return CommandResult(command=Command.RESET, accepted=True, phase=session.phase)
