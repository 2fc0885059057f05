"""
Scale Estimator - Pixel to meter conversion factor
"""
from typing import List, Optional
import logging

from .walls import WallSegment

logger = logging.getLogger(__name__)


class ScaleEstimator:
    """
    Estimates meters per pixel.

    Priority:
    1. An explicit scale supplied by the caller
    2. assumed_wall_length / mean wall pixel length, corrected when the real
       area is known
    3. default_scale when there are no walls

    The result is always clamped to [min_scale, max_scale].
    """

    def __init__(
        self,
        default_scale: float = 0.01,
        min_scale: float = 0.005,
        max_scale: float = 0.05,
        assumed_wall_length: float = 4.0,
        known_area_correction: float = 0.8,
    ):
        self.default_scale = default_scale
        self.min_scale = min_scale
        self.max_scale = max_scale
        self.assumed_wall_length = assumed_wall_length
        self.known_area_correction = known_area_correction

    def clamp(self, scale: float) -> float:
        return max(self.min_scale, min(self.max_scale, scale))

    def estimate(
        self,
        walls: List[WallSegment],
        known_area: Optional[float] = None,
        explicit_scale: Optional[float] = None,
    ) -> float:
        if explicit_scale is not None and explicit_scale > 0:
            scale = explicit_scale
        elif not walls:
            scale = self.default_scale
        else:
            mean_length = sum(w.length for w in walls) / len(walls)
            if mean_length <= 0:
                scale = self.default_scale
            else:
                scale = self.assumed_wall_length / mean_length
                if known_area:
                    scale *= self.known_area_correction

        scale = self.clamp(scale)
        logger.info(f"Estimated scale: 1 pixel = {scale:.5f} m")
        return scale
