"""Turn manager: hands tracking control to the next enrolled player."""

from mugshot.events import Command, CommandResult
from mugshot.logging import get_logger
from mugshot.session import GameSession
from mugshot.state_machine import is_valid

log = get_logger('turns')


class TurnManager:

    def advance(self, session: GameSession) -> CommandResult:
        """Cycle ``active_player`` (gameplay only)."""
        if not is_valid(session.phase, Command.ADVANCE_TURN) or not session.players:
            message = f"Turns only change during gameplay ({session.phase.value})"
            session.notify(message)
            log.debug(message)
            return CommandResult(command=Command.ADVANCE_TURN, accepted=False,
                                 phase=session.phase, message=message)

        session.active_player = (session.active_player + 1) % len(session.players)
        player_id = session.players[session.active_player].id
        message = f"Player {player_id}'s turn"
        session.notify(message)

        log.info("Turn passed to player %d", player_id)
        session.record('turn', player=player_id)
        return CommandResult(command=Command.ADVANCE_TURN, accepted=True,
                             phase=session.phase, message=message)
