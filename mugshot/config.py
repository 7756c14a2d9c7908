"""
Configuration for Emoji Mugshot.

Loads settings from .env files in the package directory, with sensible
defaults. Create a .env.local file to override settings without modifying
.env. Real environment variables always win over both files.

All keys take a ``MUGSHOT_`` prefix in the environment, e.g.
``MUGSHOT_SPAWN_INTERVAL=0.5``.
"""

import os
from pathlib import Path
from typing import Any, Dict

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator

from models import LandmarkPolicy, Point2D, Rectangle, Resolution

# Find the package directory (where this config.py lives)
PACKAGE_DIR = Path(__file__).parent

ENV_PREFIX = 'MUGSHOT_'


class ConfigurationError(Exception):
    """Raised at startup when settings cannot produce a playable game."""


def _load_env(directory: Path = PACKAGE_DIR) -> None:
    """Load environment variables from .env files.

    Real environment variables are never overwritten, and .env.local is read
    first so its values win over .env.
    """
    load_dotenv(directory / ".env.local")
    load_dotenv(directory / ".env")


# Load environment on import
_load_env()


class GameConfig(BaseModel):
    """Validated game settings.

    Gameplay constants default to the values the game was tuned with:
    0.8 s spawn cadence, 100 px spawn margin, 25 px targets with a 40 px
    reach bonus, 10 points per hit and 0.1 smoothing per frame.
    """
    # Display
    screen_width: int = Field(default=1280, gt=0)
    screen_height: int = Field(default=720, gt=0)
    frame_rate: int = Field(default=60, gt=0)

    # Targets
    spawn_interval: float = Field(default=0.8, gt=0)
    spawn_margin: float = Field(default=100.0, ge=0)
    target_radius: float = Field(default=25.0, gt=0)
    reach_bonus: float = Field(default=40.0, ge=0)
    hit_points: int = Field(default=10, ge=0)

    # Tracking
    smoothing_alpha: float = Field(default=0.1, gt=0, le=1)
    landmark_policy: LandmarkPolicy = LandmarkPolicy.KEEP_LAST

    # Enrollment guide box
    guide_enabled: bool = True
    guide_width: float = Field(default=700.0, gt=0)
    guide_height: float = Field(default=200.0, gt=0)

    # Rules
    win_score: int = Field(default=100, ge=0)  # 0 = endless

    # Camera
    camera_id: int = 0
    camera_width: int = Field(default=1280, gt=0)
    camera_height: int = Field(default=720, gt=0)
    mirror_camera: bool = True

    # Audio and assets
    audio_enabled: bool = True
    music_volume: float = Field(default=0.4, ge=0, le=1)
    asset_dir: str = "assets"

    model_config = ConfigDict(frozen=True)

    @model_validator(mode='after')
    def validate_spawn_area(self) -> 'GameConfig':
        if self.screen_width <= 2 * self.spawn_margin or self.screen_height <= 2 * self.spawn_margin:
            raise ValueError(
                f'playfield {self.screen_width}x{self.screen_height} leaves no spawn area '
                f'inside a {self.spawn_margin:g}px margin'
            )
        return self

    @property
    def playfield(self) -> Resolution:
        return Resolution(width=self.screen_width, height=self.screen_height)

    @property
    def camera_resolution(self) -> Resolution:
        return Resolution(width=self.camera_width, height=self.camera_height)

    @property
    def guide_rect(self) -> Rectangle:
        """Screen-centered enrollment guide box."""
        return Rectangle.centered_at(
            Point2D(x=self.screen_width / 2, y=self.screen_height / 2),
            self.guide_width,
            self.guide_height,
        )


def _env_overrides() -> Dict[str, str]:
    """Collect MUGSHOT_* variables that name GameConfig fields."""
    overrides = {}
    for name in GameConfig.model_fields:
        key = ENV_PREFIX + name.upper()
        if key in os.environ:
            overrides[name] = os.environ[key]
    return overrides


def load_config(**overrides: Any) -> GameConfig:
    """
    Build the game configuration.

    Precedence (lowest to highest): defaults, .env, .env.local, environment,
    keyword overrides. Keyword overrides set to None are ignored so argparse
    results can be passed straight through.

    Raises:
        ConfigurationError: If the combined settings are invalid
    """
    values: Dict[str, Any] = _env_overrides()
    values.update({k: v for k, v in overrides.items() if v is not None})

    try:
        return GameConfig.model_validate(values)
    except ValidationError as e:
        raise ConfigurationError(str(e)) from e
