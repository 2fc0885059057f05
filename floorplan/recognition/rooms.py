"""
Room Detector - Rectangular rooms between adjacent horizontal wall levels
"""
from typing import List, Optional, Sequence
from dataclasses import dataclass, field
import logging

from ..vectorization.vectorizer import Orientation, Point
from .walls import WallSegment

logger = logging.getLogger(__name__)


def polygon_area(vertices: Sequence[Point]) -> float:
    """Shoelace area of a simple polygon"""
    area = 0.0
    for i, (x1, y1) in enumerate(vertices):
        x2, y2 = vertices[(i + 1) % len(vertices)]
        area += x1 * y2 - x2 * y1
    return abs(area) / 2


@dataclass
class RoomPolygon:
    """Detected room in pixel coordinates"""
    name: str
    vertices: List[Point]  # top-left, top-right, bottom-right, bottom-left

    @property
    def area(self) -> float:
        """Pixel area"""
        return polygon_area(self.vertices)


@dataclass
class Level:
    """Horizontal walls sharing a y-coordinate within tolerance"""
    y: float
    walls: List[WallSegment] = field(default_factory=list)


class RoomDetector:
    """
    Detects orthogonal rectangular rooms.

    Horizontal walls are grouped into ascending levels. For every pair of
    adjacent levels far enough apart, each (top, bottom) wall combination
    whose horizontal extents overlap yields a room spanning the overlap.

    Vertical walls are not consulted, so layouts with partial horizontal
    runs can produce more rooms than exist.
    """

    def __init__(
        self,
        level_tolerance: float = 5,
        min_room_height: float = 20,
        name_prefix: str = "Room",
    ):
        self.level_tolerance = level_tolerance
        self.min_room_height = min_room_height
        self.name_prefix = name_prefix

    def group_levels(self, walls: List[WallSegment]) -> List[Level]:
        """Ascending levels of horizontal walls"""
        horizontal = sorted(
            (w for w in walls if w.orientation == Orientation.HORIZONTAL),
            key=lambda w: w.fixed,
        )

        levels: List[Level] = []
        level_start = None
        for wall in horizontal:
            if level_start is None or wall.fixed - level_start >= self.level_tolerance:
                level_start = wall.fixed
                levels.append(Level(y=wall.fixed))
            levels[-1].walls.append(wall)

        for level in levels:
            level.y = sum(w.fixed for w in level.walls) / len(level.walls)
        return levels

    def detect(
        self,
        walls: List[WallSegment],
        width: Optional[int] = None,
        height: Optional[int] = None,
    ) -> List[RoomPolygon]:
        """
        Args:
            walls: Aggregated walls
            width, height: Image size, informational only

        Returns:
            Rooms in level order
        """
        rooms: List[RoomPolygon] = []
        levels = self.group_levels(walls)

        for top, bottom in zip(levels, levels[1:]):
            if bottom.y - top.y <= self.min_room_height:
                continue

            for top_wall in top.walls:
                for bottom_wall in bottom.walls:
                    left = max(top_wall.extent[0], bottom_wall.extent[0])
                    right = min(top_wall.extent[1], bottom_wall.extent[1])
                    if right <= left:
                        continue

                    rooms.append(RoomPolygon(
                        name=f"{self.name_prefix} {len(rooms) + 1}",
                        vertices=[
                            (left, top.y),
                            (right, top.y),
                            (right, bottom.y),
                            (left, bottom.y),
                        ],
                    ))

        logger.info(f"Found {len(rooms)} rooms across {len(levels)} levels")
        return rooms
