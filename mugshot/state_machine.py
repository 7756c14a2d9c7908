"""
Phase transition table.

Every legal (phase, command) pair is listed explicitly; anything not in the
table is rejected by the caller as "not valid right now". Reset is legal from
every phase.
"""

from typing import Dict, List, Optional, Tuple

from models import GamePhase
from mugshot.events import Command


TRANSITIONS: Dict[Tuple[GamePhase, Command], GamePhase] = {
    (GamePhase.ENROLL_P1_AIM, Command.CAPTURE): GamePhase.ENROLL_P2_AIM,
    (GamePhase.ENROLL_P2_AIM, Command.CAPTURE): GamePhase.GAMEPLAY,
    (GamePhase.GAMEPLAY, Command.ADVANCE_TURN): GamePhase.GAMEPLAY,
    (GamePhase.GAMEPLAY, Command.END_GAME): GamePhase.GAME_OVER,
}

for _phase in GamePhase:
    TRANSITIONS[(_phase, Command.RESET)] = GamePhase.ENROLL_P1_AIM
del _phase


def next_phase(phase: GamePhase, command: Command) -> Optional[GamePhase]:
    """Phase reached by applying ``command`` in ``phase``, or None if illegal."""
    return TRANSITIONS.get((phase, command))


def is_valid(phase: GamePhase, command: Command) -> bool:
    return (phase, command) in TRANSITIONS


def valid_commands(phase: GamePhase) -> List[Command]:
    """Commands accepted in a phase, in declaration order."""
    return [command for command in Command if is_valid(phase, command)]
