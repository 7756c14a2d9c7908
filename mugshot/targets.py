"""
Target spawning and hit resolution.

Targets appear on a fixed cadence at random positions inside the playfield's
safe inset. Each gameplay tick the active player's smoothed face position pops
every target within reach; popped targets are removed the same tick.
"""

import random
from typing import List, Optional

from models import Player, Point2D, Resolution, Target
from mugshot.logging import get_logger
from mugshot.session import GameSession, SessionHooks

log = get_logger('targets')


class TargetSpawner:
    """
    Fixed-cadence random target spawner.

    Args:
        playfield: Playfield size in pixels
        interval: Seconds between spawns
        margin: Keep-out distance from every playfield edge
        radius: Radius given to spawned targets
        rng: Random source (inject a seeded Random for reproducible runs)
    """

    def __init__(
        self,
        playfield: Resolution,
        interval: float = 0.8,
        margin: float = 100.0,
        radius: float = 25.0,
        rng: Optional[random.Random] = None,
    ):
        if playfield.width <= 2 * margin or playfield.height <= 2 * margin:
            raise ValueError(f"{playfield} has no spawn area inside a {margin:g}px margin")
        self.playfield = playfield
        self.interval = interval
        self.margin = margin
        self.radius = radius
        self._rng = rng or random.Random()

    def random_position(self) -> Point2D:
        return Point2D(
            x=self._rng.uniform(self.margin, self.playfield.width - self.margin),
            y=self._rng.uniform(self.margin, self.playfield.height - self.margin),
        )

    def tick(self, session: GameSession, dt: float) -> Optional[Target]:
        """
        Advance the spawn timer by ``dt`` seconds.

        Returns:
            The target spawned this tick, if any
        """
        session.spawn_timer -= dt
        if session.spawn_timer > 0:
            return None

        target = Target(position=self.random_position(), radius=self.radius)
        session.targets.append(target)
        session.spawn_timer = self.interval
        log.debug("Spawned target at %s (%d live)", target.position, len(session.targets))
        return target


class HitResolver:
    """
    Proximity hit detection for the active player.

    A target is hit when the player's smoothed position is strictly closer
    than ``target.radius + reach``.

    Args:
        hooks: Presentation side effects (hit sound)
        reach: Bonus distance added to every target radius
        points: Score awarded per hit
    """

    def __init__(self, hooks: SessionHooks, reach: float = 40.0, points: int = 10):
        self.hooks = hooks
        self.reach = reach
        self.points = points

    def is_within_reach(self, player: Player, target: Target) -> bool:
        return player.smoothed_position.distance_to(target.position) < target.radius + self.reach

    def resolve(self, session: GameSession) -> List[Target]:
        """
        Mark and score hits for the active player, then remove hit targets.

        Returns:
            Targets popped this tick
        """
        player = session.active
        if player is None:
            return []

        popped = []
        for target in session.targets:
            if target.hit:
                continue
            if self.is_within_reach(player, target):
                target.hit = True
                player.score += self.points
                popped.append(target)
                self.hooks.play_hit_sound()
                log.debug("Player %d popped target at %s (score %d)",
                          player.id, target.position, player.score)
                session.record('hit', player=player.id, score=player.score,
                               x=target.position.x, y=target.position.y)

        session.targets[:] = [t for t in session.targets if not t.hit]
        return popped
