"""
Emoji Mugshot

Face-tracking and player-assignment core for a two-player webcam target game.
The pygame front end lives in mugshot.app and is only imported by the launcher.
"""

from mugshot.config import ConfigurationError, GameConfig, load_config
from mugshot.events import Command, CommandResult, SessionSnapshot
from mugshot.game import MugshotGame
from mugshot.session import GameSession, SessionHooks

__all__ = [
    'Command',
    'CommandResult',
    'ConfigurationError',
    'GameConfig',
    'GameSession',
    'MugshotGame',
    'SessionHooks',
    'SessionSnapshot',
    'load_config',
]
