"""
Pygame front end for Emoji Mugshot.

Owns the window, clock, keyboard mapping, sounds and drawing. Everything it
shows comes from MugshotGame.snapshot(); everything it changes goes through
MugshotGame.update() and MugshotGame.handle_command().

Keys:
    SPACE   take a mugshot (enrollment)
    S       switch turns
    E       end the game
    R       restart
    ESC     quit
"""

from pathlib import Path
from typing import Dict, Optional

import cv2
import numpy as np
import pygame

from models import GamePhase, Rectangle
from mugshot.config import GameConfig
from mugshot.detection_backend import DetectionBackend
from mugshot.events import Command, SessionSnapshot
from mugshot.game import MugshotGame
from mugshot.logging import get_logger
from mugshot.session import SessionHooks

log = get_logger('app')

KEY_COMMANDS: Dict[int, Command] = {
    pygame.K_SPACE: Command.CAPTURE,
    pygame.K_s: Command.ADVANCE_TURN,
    pygame.K_e: Command.END_GAME,
    pygame.K_r: Command.RESET,
}

BACKGROUND_COLOR = (20, 20, 30)
TEXT_COLOR = (255, 255, 0)
TARGET_COLOR = (255, 0, 150)
FACE_BOX_COLOR = (0, 255, 0)
WARNING_COLOR = (255, 100, 0)
GUIDE_OK_COLOR = (0, 255, 0)
GUIDE_WAIT_COLOR = (255, 255, 255)
LANDMARK_COLOR = (0, 200, 255)

FACE_BOX_SIZE = 150
EMOJI_SIZE = 80
MUGSHOT_SIZE = 100


def frame_to_surface(frame: np.ndarray) -> pygame.Surface:
    """Convert an OpenCV BGR image to a pygame surface."""
    rgb = cv2.cvtColor(frame, cv2.COLOR_BGR2RGB)
    return pygame.surfarray.make_surface(rgb.swapaxes(0, 1))


class PygameHooks(SessionHooks):
    """Mugshot capture from the detector's last frame, music and hit sound via pygame.mixer."""

    def __init__(self, backend: DetectionBackend, config: GameConfig):
        self.backend = backend
        self.config = config
        self._asset_dir = Path(config.asset_dir)
        self._audio_enabled = config.audio_enabled
        self._music_loaded = False
        self._hit_sound: Optional[pygame.mixer.Sound] = None
        self._init_audio()

    def _init_audio(self) -> None:
        if not self._audio_enabled:
            return

        try:
            pygame.mixer.init()
        except pygame.error as e:
            log.warning("Audio disabled: %s", e)
            self._audio_enabled = False
            return

        music_path = self._asset_dir / 'bg_music.mp3'
        try:
            pygame.mixer.music.load(str(music_path))
            pygame.mixer.music.set_volume(self.config.music_volume)
            self._music_loaded = True
        except pygame.error as e:
            log.warning("No background music (%s): %s", music_path, e)

        hit_path = self._asset_dir / 'hit.mp3'
        try:
            self._hit_sound = pygame.mixer.Sound(str(hit_path))
        except (pygame.error, FileNotFoundError) as e:
            log.warning("No hit sound (%s): %s", hit_path, e)

    def capture_mugshot(self, region: Rectangle) -> Optional[pygame.Surface]:
        image = self.backend.capture_region(region, self.config.playfield)
        if image is None:
            return None
        return frame_to_surface(image)

    def start_music(self) -> None:
        if self._music_loaded:
            pygame.mixer.music.play(loops=-1)

    def stop_music(self) -> None:
        if self._music_loaded:
            pygame.mixer.music.stop()

    def play_hit_sound(self) -> None:
        if self._hit_sound is not None:
            self._hit_sound.play()


class MugshotApp:
    """Window, main loop and rendering."""

    def __init__(self, config: GameConfig, backend: DetectionBackend, screen: pygame.Surface):
        self.config = config
        self.backend = backend
        self.screen = screen
        self.hooks = PygameHooks(backend, config)
        self.game = MugshotGame(config, hooks=self.hooks)
        self.clock = pygame.time.Clock()

        self._title_font = pygame.font.Font(None, 48)
        self._body_font = pygame.font.Font(None, 30)
        self._emoji_cache: Dict[str, Optional[pygame.Surface]] = {}

    def run(self) -> int:
        running = True
        while running:
            dt = self.clock.tick(self.config.frame_rate) / 1000.0

            for event in pygame.event.get():
                if event.type == pygame.QUIT:
                    running = False
                elif event.type == pygame.KEYDOWN:
                    if event.key == pygame.K_ESCAPE:
                        running = False
                    elif event.key in KEY_COMMANDS:
                        result = self.game.handle_command(KEY_COMMANDS[event.key])
                        if result.message:
                            log.info(result.message)

            self.game.update(self.backend.poll(), dt)
            self.render(self.game.snapshot())
            pygame.display.flip()

        return 0

    # =========================================================================
    # Rendering
    # =========================================================================

    def _emoji(self, name: str) -> Optional[pygame.Surface]:
        if name not in self._emoji_cache:
            path = Path(self.config.asset_dir) / name
            try:
                image = pygame.image.load(str(path)).convert_alpha()
                self._emoji_cache[name] = pygame.transform.smoothscale(image, (EMOJI_SIZE, EMOJI_SIZE))
            except (pygame.error, FileNotFoundError) as e:
                log.warning("Missing emoji %s: %s", path, e)
                self._emoji_cache[name] = None
        return self._emoji_cache[name]

    def _text(self, text: str, font: pygame.font.Font, color, pos) -> None:
        y = pos[1]
        for line in text.split('\n'):
            surface = font.render(line, True, color)
            self.screen.blit(surface, (pos[0], y))
            y += surface.get_height() + 4

    def render(self, snap: SessionSnapshot) -> None:
        width, height = self.screen.get_size()
        frame = getattr(self.backend, 'last_frame', None)
        if frame is not None:
            self.screen.blit(pygame.transform.scale(frame_to_surface(frame), (width, height)), (0, 0))
        else:
            self.screen.fill(BACKGROUND_COLOR)

        if snap.phase.is_enrollment:
            self._render_enrollment(snap)
        elif snap.phase == GamePhase.GAMEPLAY:
            self._render_gameplay(snap)
        else:
            self._render_game_over(snap)

        for view in snap.players:
            if view.mugshot is None:
                continue
            thumb = pygame.transform.scale(view.mugshot, (MUGSHOT_SIZE, MUGSHOT_SIZE))
            x = 20 if view.id == 1 else width - MUGSHOT_SIZE - 20
            self.screen.blit(thumb, (x, height - MUGSHOT_SIZE - 20))

    def _render_notice(self, notice: Optional[str]) -> None:
        if not notice:
            return
        width, _ = self.screen.get_size()
        surface = self._body_font.render(notice, True, WARNING_COLOR)
        self.screen.blit(surface, (width // 2 - surface.get_width() // 2, 30))

    def _render_panel(self, message: Optional[str]) -> None:
        width, height = self.screen.get_size()
        panel = pygame.Rect(width // 2 - 350, height // 2 - 100, 700, 200)
        overlay = pygame.Surface(panel.size, pygame.SRCALPHA)
        overlay.fill((0, 0, 0, 150))
        self.screen.blit(overlay, panel.topleft)
        if message:
            self._text(message, self._body_font, TEXT_COLOR, (panel.x + 50, panel.y + 60))

    def _render_enrollment(self, snap: SessionSnapshot) -> None:
        self._render_panel(snap.status_message)
        self._render_notice(snap.notice)
        if snap.guide_rect is not None:
            g = snap.guide_rect
            color = GUIDE_OK_COLOR if snap.guide_aligned else GUIDE_WAIT_COLOR
            pygame.draw.rect(self.screen, color, pygame.Rect(int(g.x), int(g.y), int(g.width), int(g.height)), 3)

    def _render_gameplay(self, snap: SessionSnapshot) -> None:
        width, _ = self.screen.get_size()
        for view in snap.players:
            x = 30 if view.id == 1 else width - 200
            self._text(f"P{view.id}: {view.score}", self._title_font, TEXT_COLOR, (x, 30))

        for target in snap.targets:
            center = (int(target.position.x), int(target.position.y))
            pygame.draw.circle(self.screen, TARGET_COLOR, center, int(target.radius))

        self._render_notice(snap.notice)

        active = snap.active
        if active is None or snap.face_count == 0:
            return

        pos = active.smoothed_position
        box = pygame.Rect(int(pos.x) - FACE_BOX_SIZE // 2, int(pos.y) - FACE_BOX_SIZE // 2,
                          FACE_BOX_SIZE, FACE_BOX_SIZE)
        pygame.draw.rect(self.screen, FACE_BOX_COLOR, box, 4)

        for point in active.landmarks:
            pygame.draw.circle(self.screen, LANDMARK_COLOR, (int(point.x), int(point.y)), 4)

        emoji = self._emoji(active.emoji)
        if emoji is not None:
            self.screen.blit(emoji, (box.right + 10, box.top))

    def _render_game_over(self, snap: SessionSnapshot) -> None:
        message = snap.status_message or ""
        self._render_panel(f"{message}\nPress [R] to restart.")
        self._render_notice(snap.notice)
