"""Pytest fixtures shared by the mugshot tests."""
import random
from unittest.mock import Mock

import pytest

from models import DetectionBatch, Point2D, Rectangle
from mugshot.config import GameConfig
from mugshot.events import Command
from mugshot.game import MugshotGame
from mugshot.logging import close_all_sinks
from mugshot.session import SessionHooks

# Default 1280x720 playfield; the guide box spans x 290..990, y 260..460
SCREEN_CENTER = Point2D(x=640.0, y=360.0)


def face_at(x: float, y: float, size: float = 100.0) -> Rectangle:
    """Face rectangle centered on (x, y)."""
    return Rectangle.centered_at(Point2D(x=x, y=y), size, size)


def batch_of(*rectangles: Rectangle) -> DetectionBatch:
    return DetectionBatch(rectangles=list(rectangles))


@pytest.fixture(autouse=True)
def no_record_sinks():
    """Keep structured record sinks from leaking between tests."""
    close_all_sinks()
    yield
    close_all_sinks()


@pytest.fixture
def hooks():
    """SessionHooks mock whose mugshot capture returns a marker value."""
    mock = Mock(spec=SessionHooks)
    mock.capture_mugshot.return_value = "mugshot-image"
    return mock


@pytest.fixture
def config():
    return GameConfig()


@pytest.fixture
def game(config, hooks):
    """Fresh game in player 1 enrollment."""
    return MugshotGame(config, hooks=hooks, rng=random.Random(1234))


@pytest.fixture
def playing_game(game):
    """Game with both players enrolled at the screen center, now in gameplay."""
    game.update(batch_of(face_at(640, 360)), 0.016)
    game.handle_command(Command.CAPTURE)
    game.update(batch_of(face_at(600, 340)), 0.016)
    game.handle_command(Command.CAPTURE)
    # Park the spawner so tests control which targets exist
    game.session.spawn_timer = 1000.0
    return game
