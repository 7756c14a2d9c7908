"""
Player tracker.

Associates the active player with the closest face in the current frame and
eases its smoothed position toward that face by a fixed fraction per frame.
"""

from typing import Optional, Sequence

from models import Detection, LandmarkPolicy, Player, Point2D
from mugshot.logging import get_logger

log = get_logger('tracker')

DEFAULT_ALPHA = 0.1


def select_best_match(position: Point2D, detections: Sequence[Detection]) -> Optional[int]:
    """
    Index of the detection whose center is closest to ``position``.

    Ties go to the earliest index. Returns None when there are no detections.
    """
    best_index = None
    best_distance = 0.0

    for i, detection in enumerate(detections):
        distance = position.distance_to(detection.center)
        if best_index is None or distance < best_distance:
            best_index = i
            best_distance = distance

    return best_index


class PlayerTracker:
    """
    Exponential smoothing tracker for the active player.

    Args:
        alpha: Fraction of the gap to the matched face closed per frame
        landmark_policy: What to do with landmarks when the match has none
    """

    def __init__(
        self,
        alpha: float = DEFAULT_ALPHA,
        landmark_policy: LandmarkPolicy = LandmarkPolicy.KEEP_LAST,
    ):
        if not 0.0 < alpha <= 1.0:
            raise ValueError(f"alpha must be in (0, 1], got {alpha}")
        self.alpha = alpha
        self.landmark_policy = landmark_policy

    def update(self, player: Player, detections: Sequence[Detection]) -> Optional[int]:
        """
        Move ``player`` toward its best-matching detection.

        With no detections the player keeps its last position and landmarks.

        Args:
            player: The active player (the only record mutated)
            detections: This frame's detections

        Returns:
            Index of the matched detection, or None if there was nothing to match
        """
        index = select_best_match(player.smoothed_position, detections)
        if index is None:
            log.trace("No faces; player %d holds at %s", player.id, player.smoothed_position)
            return None

        match = detections[index]
        player.smoothed_position = player.smoothed_position.lerp(match.center, self.alpha)

        if match.has_landmarks:
            player.landmarks = list(match.landmarks)
        elif self.landmark_policy == LandmarkPolicy.CLEAR_ON_MISS:
            player.landmarks = []

        log.trace("Player %d matched detection %d -> %s", player.id, index, player.smoothed_position)
        return index
