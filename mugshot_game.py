#!/usr/bin/env python3
"""
Emoji Mugshot Launcher

Opens the webcam, enrolls two players by face and lets them take turns
popping targets with their head.

Usage:
    # Play with defaults (1280x720, camera 0)
    python mugshot_game.py

    # Different camera and window size
    python mugshot_game.py --camera 1 --resolution 1920x1080

    # Capture anywhere in the frame, first to 200 wins
    python mugshot_game.py --no-guide --win-score 200

Settings can also come from mugshot/.env, mugshot/.env.local or MUGSHOT_*
environment variables; command-line flags win.
"""

import argparse
import os
import sys
from typing import Optional, Tuple

# Ensure project root is on path
_project_root = os.path.dirname(os.path.abspath(__file__))
if _project_root not in sys.path:
    sys.path.insert(0, _project_root)

from mugshot.config import ConfigurationError, load_config
from mugshot.logging import close_all_sinks, configure_logging, create_sink, get_logger, register_sink

log = get_logger('launcher')


def parse_resolution(value: str) -> Tuple[int, int]:
    """Parse WIDTHxHEIGHT."""
    try:
        width, height = value.lower().split('x')
        return int(width), int(height)
    except ValueError:
        raise argparse.ArgumentTypeError(
            f"Invalid resolution '{value}', expected WIDTHxHEIGHT (e.g., 1920x1080)"
        )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description='Emoji Mugshot - two-player face-tracking target game',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Keys:
  SPACE  take a mugshot     S  switch turns
  E      end the game       R  restart       ESC  quit
        """
    )
    parser.add_argument('--resolution', '-r', type=parse_resolution, default=None,
                        help='Window resolution as WIDTHxHEIGHT (default: 1280x720)')
    parser.add_argument('--fullscreen', '-f', action='store_true',
                        help='Run in fullscreen mode')
    parser.add_argument('--camera', '-c', type=int, default=None,
                        help='OpenCV camera index (default: 0)')
    parser.add_argument('--no-mirror', action='store_true',
                        help='Do not flip the camera image horizontally')
    parser.add_argument('--no-guide', action='store_true',
                        help='Accept captures anywhere in the frame')
    parser.add_argument('--no-eyes', action='store_true',
                        help='Skip eye landmark detection')
    parser.add_argument('--win-score', type=int, default=None,
                        help='Score that ends the game (0 = endless)')
    parser.add_argument('--spawn-interval', type=float, default=None,
                        help='Seconds between targets')
    parser.add_argument('--landmark-policy', choices=['keep_last', 'clear_on_miss'], default=None,
                        help='Landmarks when the tracked face has none')
    parser.add_argument('--assets', type=str, default=None,
                        help='Directory holding bg_music.mp3, hit.mp3 and p1/p2 emoji images')
    parser.add_argument('--no-audio', action='store_true',
                        help='Disable music and sound effects')
    parser.add_argument('--log-level', type=str, default=None,
                        help='Console log level (TRACE, DEBUG, INFO, WARNING, ERROR)')
    return parser


def config_overrides(args: argparse.Namespace, screen_size: Optional[Tuple[int, int]] = None) -> dict:
    """Map parsed flags onto GameConfig fields (None = not given)."""
    size = screen_size or args.resolution
    return {
        'screen_width': size[0] if size else None,
        'screen_height': size[1] if size else None,
        'camera_id': args.camera,
        'mirror_camera': False if args.no_mirror else None,
        'guide_enabled': False if args.no_guide else None,
        'win_score': args.win_score,
        'spawn_interval': args.spawn_interval,
        'landmark_policy': args.landmark_policy,
        'asset_dir': args.assets,
        'audio_enabled': False if args.no_audio else None,
    }


def main(argv=None) -> int:
    """Main entry point."""
    args = build_parser().parse_args(argv)

    if args.log_level:
        configure_logging(level=args.log_level)

    try:
        config = load_config(**config_overrides(args))
    except ConfigurationError as e:
        log.critical("Invalid configuration: %s", e)
        return 1

    import pygame

    from mugshot.app import MugshotApp
    from mugshot.camera import OpenCVCamera
    from mugshot.face_detection_backend import HaarFaceBackend

    try:
        camera = OpenCVCamera(
            camera_id=config.camera_id,
            resolution=(config.camera_resolution.width, config.camera_resolution.height),
        )
        backend = HaarFaceBackend(camera, mirror=config.mirror_camera, detect_eyes=not args.no_eyes)
    except RuntimeError as e:
        log.critical("%s", e)
        return 1

    register_sink('session', create_sink('session'))

    pygame.init()
    try:
        if args.fullscreen:
            screen = pygame.display.set_mode((0, 0), pygame.FULLSCREEN)
            # Playfield follows the real display size
            config = load_config(**config_overrides(args, screen.get_size()))
        else:
            screen = pygame.display.set_mode((config.screen_width, config.screen_height))
        pygame.display.set_caption("Emoji MugShot")

        log.info("Resolution: %dx%d, camera %d (%s)", config.screen_width, config.screen_height,
                 config.camera_id, backend.frame_size)
        return MugshotApp(config, backend, screen).run()
    except ConfigurationError as e:
        log.critical("Invalid configuration: %s", e)
        return 1
    finally:
        backend.release()
        close_all_sinks()
        pygame.quit()


if __name__ == "__main__":
    sys.exit(main())
