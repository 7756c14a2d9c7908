"""
End-to-end tests for MugshotGame.

Drives the core the way the pygame shell does: one update() per rendered
frame, commands in between, snapshot() for everything drawn.
"""

import random

import pytest

from models import GamePhase, Point2D, Rectangle, Target
from mugshot.config import GameConfig
from mugshot.detection_backend import ScriptedDetectionBackend
from mugshot.events import Command
from mugshot.game import TOO_MANY_FACES, MugshotGame

from conftest import batch_of, face_at


# ============================================================================
# Enrollment through the game facade
# ============================================================================


class TestEnrollmentFlow:
    """Test the phase sequence driven by commands."""

    def test_initial_state(self, game):
        snap = game.snapshot()
        assert snap.phase == GamePhase.ENROLL_P1_AIM
        assert snap.players == []
        assert snap.status_message.startswith("Player 1:")

    def test_capture_needs_a_frame(self, game):
        """No frame processed yet: the last batch is empty."""
        result = game.handle_command(Command.CAPTURE)
        assert not result.accepted
        assert result.message == "No face detected"

    def test_full_enrollment(self, playing_game, hooks):
        assert playing_game.phase == GamePhase.GAMEPLAY
        snap = playing_game.snapshot()
        assert [p.id for p in snap.players] == [1, 2]
        assert snap.active.id == 1
        assert snap.players[0].mugshot == "mugshot-image"
        hooks.start_music.assert_called_once()

    def test_capture_rejected_during_gameplay(self, playing_game):
        result = playing_game.handle_command(Command.CAPTURE)
        assert not result.accepted
        assert len(playing_game.session.players) == 2

    def test_prompt_survives_failed_capture(self, game):
        """After a rejected capture the prompt is still shown once a face lines up."""
        prompt = game.snapshot().status_message
        game.handle_command(Command.CAPTURE)
        game.update(batch_of(face_at(640, 360)), 0.016)

        snap = game.snapshot()
        assert snap.status_message == prompt
        assert snap.notice == "No face detected"
        assert snap.guide_aligned

        game.update(batch_of(face_at(640, 360)), 2.0)
        assert game.snapshot().notice is None
        assert game.snapshot().status_message == prompt

    def test_guide_in_snapshot(self, game):
        """The guide box is shown only while enrolling and lights up when aligned."""
        snap = game.snapshot()
        assert snap.guide_rect == Rectangle(x=290.0, y=260.0, width=700.0, height=200.0)
        assert not snap.guide_aligned

        game.update(batch_of(face_at(640, 360)), 0.016)
        assert game.snapshot().guide_aligned

        game.update(batch_of(face_at(50, 50)), 0.016)
        assert not game.snapshot().guide_aligned

    def test_no_guide_in_gameplay(self, playing_game):
        snap = playing_game.snapshot()
        assert snap.guide_rect is None
        assert not snap.guide_aligned

    def test_guide_disabled(self, hooks):
        game = MugshotGame(GameConfig(guide_enabled=False), hooks=hooks)
        game.update(batch_of(face_at(50, 50)), 0.016)

        assert game.snapshot().guide_rect is None
        assert game.handle_command(Command.CAPTURE).accepted


# ============================================================================
# Gameplay frames
# ============================================================================


class TestGameplay:
    """Test tracking, hits and notices during gameplay."""

    def test_enrollment_frames_do_not_track_or_spawn(self, game):
        game.update(batch_of(face_at(640, 360)), 5.0)
        assert game.session.targets == []
        assert game.session.players == []

    def test_active_player_follows_face(self, playing_game):
        start = playing_game.session.players[0].smoothed_position
        playing_game.update(batch_of(face_at(start.x + 100, start.y)), 0.016)

        moved = playing_game.session.players[0].smoothed_position
        assert moved.x == pytest.approx(start.x + 10.0)
        assert moved.y == pytest.approx(start.y)

    def test_inactive_player_is_frozen(self, playing_game):
        before = playing_game.session.players[1].smoothed_position
        for _ in range(10):
            playing_game.update(batch_of(face_at(100, 100)), 0.016)
        assert playing_game.session.players[1].smoothed_position == before

    def test_hit_scores_and_removes_target(self, playing_game, hooks):
        player = playing_game.session.players[0]
        playing_game.session.targets.append(Target(position=player.smoothed_position))

        playing_game.update(batch_of(face_at(player.smoothed_position.x, player.smoothed_position.y)), 0.016)

        assert playing_game.session.players[0].score == 10
        assert playing_game.snapshot().targets == []
        hooks.play_hit_sound.assert_called_once()

    def test_turn_switch_moves_scoring(self, playing_game):
        """After ADVANCE_TURN only player 2 can pop targets."""
        playing_game.handle_command(Command.ADVANCE_TURN)
        p2 = playing_game.session.players[1]
        playing_game.session.targets.append(Target(position=p2.smoothed_position))

        playing_game.update(batch_of(face_at(p2.smoothed_position.x, p2.smoothed_position.y)), 0.016)

        assert playing_game.session.players[0].score == 0
        assert playing_game.session.players[1].score == 10

    def test_too_many_faces_notice(self, playing_game):
        playing_game.update(batch_of(face_at(640, 360), face_at(200, 200)), 0.016)
        assert playing_game.snapshot().notice == TOO_MANY_FACES.format(n=1)
        assert playing_game.snapshot().face_count == 2

        playing_game.update(batch_of(face_at(640, 360)), 0.016)
        assert playing_game.snapshot().notice is None

    def test_turn_notice_expires(self, playing_game):
        """The turn message is shown briefly, then cleared."""
        playing_game.handle_command(Command.ADVANCE_TURN)
        playing_game.update(batch_of(face_at(600, 340)), 1 / 60)
        assert playing_game.snapshot().notice == "Player 2's turn"

        for _ in range(130):
            playing_game.update(batch_of(face_at(600, 340)), 1 / 60)
        assert playing_game.snapshot().notice is None

    def test_no_faces_holds_position(self, playing_game):
        before = playing_game.session.players[0].smoothed_position
        playing_game.update(batch_of(), 0.016)
        assert playing_game.session.players[0].smoothed_position == before

    def test_first_gameplay_frame_spawns(self, game):
        game.update(batch_of(face_at(640, 360)), 0.016)
        game.handle_command(Command.CAPTURE)
        game.handle_command(Command.CAPTURE)

        game.update(batch_of(face_at(640, 360)), 0.016)

        assert game.session.spawn_timer == game.config.spawn_interval


# ============================================================================
# Frame gate
# ============================================================================


class TestFrameGate:
    """Test update(None, dt): time passes but nothing else happens."""

    def test_no_frame_is_a_no_op(self, playing_game):
        session = playing_game.session
        frame = session.frame
        position = session.players[0].smoothed_position

        assert playing_game.update(None, 0.5) is False
        assert session.frame == frame
        assert session.players[0].smoothed_position == position

    def test_elapsed_time_carries_to_next_frame(self, hooks):
        """Spawn timing sees the time spent waiting for the camera."""
        game = MugshotGame(GameConfig(spawn_interval=1.0), hooks=hooks, rng=random.Random(3))
        game.update(batch_of(face_at(640, 360)), 0.0)
        game.handle_command(Command.CAPTURE)
        game.handle_command(Command.CAPTURE)
        game.update(batch_of(face_at(640, 360)), 0.0)
        assert game.session.spawn_timer == 1.0

        game.update(None, 0.5)
        assert game.session.spawn_timer == 1.0

        assert game.update(batch_of(face_at(640, 360)), 0.25) is True
        assert game.session.spawn_timer == pytest.approx(0.25)

    def test_reset_discards_pending_time(self, playing_game):
        playing_game.update(None, 3.0)
        playing_game.handle_command(Command.RESET)
        assert playing_game._pending_dt == 0.0


# ============================================================================
# End of game
# ============================================================================


class TestGameOver:
    """Test END_GAME, the win score and reset."""

    def test_end_game_command(self, playing_game, hooks):
        playing_game.session.players[1].score = 50
        result = playing_game.handle_command(Command.END_GAME)

        assert result.accepted
        snap = playing_game.snapshot()
        assert snap.phase == GamePhase.GAME_OVER
        assert snap.winner == 2
        assert snap.status_message == "Player 2 Wins!"
        hooks.stop_music.assert_called_once()

    def test_rejected_commands_keep_announcement(self, playing_game):
        """Commands that are invalid after the game ends leave the winner on screen."""
        playing_game.session.players[0].score = 30
        playing_game.handle_command(Command.END_GAME)

        for command in (Command.ADVANCE_TURN, Command.CAPTURE, Command.END_GAME):
            assert not playing_game.handle_command(command).accepted

        snap = playing_game.snapshot()
        assert snap.phase == GamePhase.GAME_OVER
        assert snap.status_message == "Player 1 Wins!"
        assert snap.winner == 1
        assert snap.notice is not None

    def test_win_score_ends_game(self, hooks):
        game = MugshotGame(GameConfig(win_score=10), hooks=hooks, rng=random.Random(5))
        game.update(batch_of(face_at(640, 360)), 0.016)
        game.handle_command(Command.CAPTURE)
        game.handle_command(Command.CAPTURE)
        game.session.spawn_timer = 1000.0

        player = game.session.players[0]
        game.session.targets.append(Target(position=player.smoothed_position))
        game.update(batch_of(face_at(player.smoothed_position.x, player.smoothed_position.y)), 0.016)

        assert game.phase == GamePhase.GAME_OVER
        assert game.snapshot().winner == 1

    def test_endless_mode(self, hooks):
        game = MugshotGame(GameConfig(win_score=0), hooks=hooks, rng=random.Random(5))
        game.update(batch_of(face_at(640, 360)), 0.016)
        game.handle_command(Command.CAPTURE)
        game.handle_command(Command.CAPTURE)
        game.session.players[0].score = 10_000

        game.update(batch_of(face_at(640, 360)), 0.016)
        assert game.phase == GamePhase.GAMEPLAY

    def test_game_over_ignores_frames_and_turns(self, playing_game):
        playing_game.handle_command(Command.END_GAME)
        playing_game.session.targets.append(Target(position=Point2D(x=640.0, y=360.0)))

        playing_game.update(batch_of(face_at(640, 360)), 5.0)
        result = playing_game.handle_command(Command.ADVANCE_TURN)

        assert not result.accepted
        assert len(playing_game.session.targets) == 1
        assert playing_game.session.players[0].score == 0

    def test_reset_after_game_over(self, playing_game):
        playing_game.handle_command(Command.END_GAME)
        result = playing_game.handle_command(Command.RESET)

        assert result.accepted
        snap = playing_game.snapshot()
        assert snap.phase == GamePhase.ENROLL_P1_AIM
        assert snap.players == []
        assert snap.targets == []
        assert snap.winner is None


# ============================================================================
# Scripted backend
# ============================================================================


class TestScriptedBackend:
    """Test driving the game from a scripted detector in camera space."""

    def test_poll_replays_script(self):
        backend = ScriptedDetectionBackend(640, 360)
        backend.queue_face(face_at(320, 180, 50))
        backend.queue_no_frame()

        assert backend.remaining == 2
        assert backend.poll().count == 1
        assert backend.poll() is None
        assert backend.poll() is None
        assert backend.polls == 3

    def test_camera_space_is_rescaled(self, hooks):
        """A face at the center of a 640x360 camera lands at the playfield center."""
        backend = ScriptedDetectionBackend(640, 360)
        backend.queue_face(face_at(320, 180, 50))
        backend.queue_no_frame()
        backend.queue_face(face_at(330, 190, 50))

        game = MugshotGame(GameConfig(), hooks=hooks)
        game.update(backend.poll(), 0.016)
        assert game.handle_command(Command.CAPTURE).accepted
        assert game.session.players[0].smoothed_position == Point2D(x=640.0, y=360.0)

        assert game.update(backend.poll(), 0.016) is False
        game.update(backend.poll(), 0.016)
        assert game.handle_command(Command.CAPTURE).accepted
        assert game.session.players[1].smoothed_position == Point2D(x=660.0, y=380.0)

    def test_backend_info(self):
        info = ScriptedDetectionBackend(640, 480).get_backend_info()
        assert info['backend_type'] == 'ScriptedDetectionBackend'
        assert '640x480' in info['frame_resolution']
