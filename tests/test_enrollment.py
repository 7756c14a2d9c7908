"""
Tests for enrollment, end of game and reset.

Tests cover:
- Capture preconditions (phase, face present, guide alignment)
- Player creation from the first detection
- Entering gameplay
- End game and reset
"""

import pytest

from models import DetectionBatch, GamePhase, Player, Point2D, Rectangle
from mugshot.enrollment import MSG_ALIGN, MSG_FULL, MSG_NO_FACE, EnrollmentController, capture_prompt
from mugshot.events import Command
from mugshot.session import GameSession

from conftest import batch_of, face_at

GUIDE = Rectangle.centered_at(Point2D(x=640.0, y=360.0), 700.0, 200.0)


@pytest.fixture
def controller(hooks):
    return EnrollmentController(hooks, guide_rect=GUIDE)


@pytest.fixture
def session():
    return GameSession()


def enroll_both(controller, session):
    controller.capture(session, batch_of(face_at(640, 360)))
    controller.capture(session, batch_of(face_at(700, 380)))


# ============================================================================
# Capture
# ============================================================================


class TestCapture:
    """Test capture in the enrollment phases."""

    def test_first_capture_enrolls_player_one(self, controller, session, hooks):
        result = controller.capture(session, batch_of(face_at(640, 360)))

        assert result.accepted
        assert result.command == Command.CAPTURE
        assert session.phase == GamePhase.ENROLL_P2_AIM
        assert len(session.players) == 1

        player = session.players[0]
        assert player.id == 1
        assert player.score == 0
        assert player.emoji == "p1_emoji.png"
        assert player.smoothed_position == Point2D(x=640.0, y=360.0)
        assert player.mugshot == "mugshot-image"
        hooks.capture_mugshot.assert_called_once_with(face_at(640, 360))

    def test_second_capture_starts_gameplay(self, controller, session, hooks):
        enroll_both(controller, session)

        assert session.phase == GamePhase.GAMEPLAY
        assert [p.id for p in session.players] == [1, 2]
        assert session.players[1].emoji == "p2_emoji.png"
        assert session.active_player == 0
        assert session.spawn_timer == 0.0
        assert session.status_message is None
        hooks.start_music.assert_called_once()

    def test_prompt_for_second_player(self, controller, session):
        controller.capture(session, batch_of(face_at(640, 360)))
        assert session.status_message == capture_prompt(GamePhase.ENROLL_P2_AIM)
        assert session.status_message.startswith("Player 2:")

    def test_no_face_rejected(self, controller, session, hooks):
        """Empty frame: nothing changes and the user is told why."""
        result = controller.capture(session, DetectionBatch.empty())

        assert not result.accepted
        assert result.message == MSG_NO_FACE
        assert session.notice == MSG_NO_FACE
        assert session.phase == GamePhase.ENROLL_P1_AIM
        assert session.players == []
        hooks.capture_mugshot.assert_not_called()

    def test_misaligned_face_rejected(self, controller, session):
        """A face outside the guide box is not captured."""
        result = controller.capture(session, batch_of(face_at(100, 100)))

        assert not result.accepted
        assert session.notice == MSG_ALIGN
        assert session.phase == GamePhase.ENROLL_P1_AIM
        assert session.players == []

    def test_rejection_keeps_prompt(self, controller, session):
        """A failed capture shows a notice; the capture prompt stays."""
        session.status_message = capture_prompt(GamePhase.ENROLL_P1_AIM)
        controller.capture(session, DetectionBatch.empty())
        controller.capture(session, batch_of(face_at(100, 100)))

        assert session.status_message == capture_prompt(GamePhase.ENROLL_P1_AIM)
        assert session.notice == MSG_ALIGN

    def test_success_clears_notice(self, controller, session):
        controller.capture(session, DetectionBatch.empty())
        controller.capture(session, batch_of(face_at(640, 360)))
        assert session.notice is None

    def test_capture_at_player_limit_rejected(self, controller):
        session = GameSession(
            phase=GamePhase.ENROLL_P2_AIM,
            players=[
                Player(id=1, smoothed_position=Point2D(x=0.0, y=0.0)),
                Player(id=2, smoothed_position=Point2D(x=0.0, y=0.0)),
            ],
        )
        result = controller.capture(session, batch_of(face_at(640, 360)))

        assert not result.accepted
        assert result.message == MSG_FULL
        assert len(session.players) == 2
        assert session.phase == GamePhase.ENROLL_P2_AIM

    def test_only_first_face_is_checked(self, controller, session):
        """Detector order decides: an aligned second face does not help."""
        result = controller.capture(session, batch_of(face_at(100, 100), face_at(640, 360)))
        assert not result.accepted

    def test_capture_uses_first_face(self, controller, session):
        controller.capture(session, batch_of(face_at(500, 300), face_at(800, 400)))
        assert session.players[0].smoothed_position == Point2D(x=500.0, y=300.0)

    def test_no_guide_accepts_any_position(self, hooks, session):
        controller = EnrollmentController(hooks, guide_rect=None)
        result = controller.capture(session, batch_of(face_at(50, 50)))
        assert result.accepted

    def test_capture_copies_landmarks(self, controller, session):
        eyes = [Point2D(x=620.0, y=340.0), Point2D(x=660.0, y=340.0)]
        batch = DetectionBatch(rectangles=[face_at(640, 360)], landmarks=[eyes])
        controller.capture(session, batch)
        assert session.players[0].landmarks == eyes

    @pytest.mark.parametrize("phase", [GamePhase.GAMEPLAY, GamePhase.GAME_OVER])
    def test_capture_outside_enrollment_rejected(self, controller, phase):
        session = GameSession(phase=phase)
        result = controller.capture(session, batch_of(face_at(640, 360)))

        assert not result.accepted
        assert session.phase == phase
        assert session.players == []


class TestAlignment:
    """Test the guide box check used for capture and rendering."""

    def test_center_inside_guide(self, controller):
        assert controller.is_aligned(batch_of(face_at(640, 360)))

    def test_center_on_guide_edge(self, controller):
        assert controller.is_aligned(batch_of(face_at(290, 260)))

    def test_no_face(self, controller):
        assert not controller.is_aligned(DetectionBatch.empty())


# ============================================================================
# End game and reset
# ============================================================================


class TestEndGame:
    """Test GAMEPLAY -> GAME_OVER."""

    def test_winner_announced(self, controller, session, hooks):
        enroll_both(controller, session)
        session.players[1].score = 30

        result = controller.end_game(session)

        assert result.accepted
        assert session.phase == GamePhase.GAME_OVER
        assert session.status_message == "Player 2 Wins!"
        hooks.stop_music.assert_called_once()

    def test_tie_announced(self, controller, session):
        enroll_both(controller, session)
        controller.end_game(session)
        assert session.status_message == "It's a Tie!"

    def test_end_game_during_enrollment_rejected(self, controller, session):
        result = controller.end_game(session)
        assert not result.accepted
        assert session.phase == GamePhase.ENROLL_P1_AIM


class TestReset:
    """Test reset from every phase."""

    def test_reset_from_gameplay(self, controller, session, hooks):
        enroll_both(controller, session)
        session.players[0].score = 20
        session.active_player = 1
        session.spawn_timer = 0.3

        result = controller.reset(session)

        assert result.accepted
        assert session.phase == GamePhase.ENROLL_P1_AIM
        assert session.players == []
        assert session.targets == []
        assert session.active_player == 0
        assert session.spawn_timer == 0.0
        assert session.status_message == capture_prompt(GamePhase.ENROLL_P1_AIM)
        hooks.stop_music.assert_called()

    @pytest.mark.parametrize("phase", list(GamePhase))
    def test_reset_always_accepted(self, controller, phase):
        session = GameSession(phase=phase)
        assert controller.reset(session).accepted
        assert session.phase == GamePhase.ENROLL_P1_AIM
