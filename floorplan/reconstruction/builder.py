"""
Scene Builder - Translates recognized walls into a mesh builder's input
"""
from typing import Dict, List, Optional, Tuple
from dataclasses import dataclass, field
import logging

from ..recognition.walls import WallSegment
from ..vectorization.vectorizer import Orientation, Point

logger = logging.getLogger(__name__)


@dataclass
class SceneOpening:
    """Door or window cut into one edge"""
    edge: int  # Index into ScenePlan.edges
    height: float
    points: Tuple[Point, Point]  # Boundary points along the edge, meters
    kind: str = "door"  # "door" or "window"


@dataclass
class ScenePlan:
    """
    Wall graph consumed by a 3D scene builder.

    vertices are metric 2D points; edges are index pairs into vertices with
    one height and one thickness per edge.
    """
    vertices: List[Point] = field(default_factory=list)
    edges: List[Tuple[int, int]] = field(default_factory=list)
    heights: List[float] = field(default_factory=list)
    thicknesses: List[float] = field(default_factory=list)
    openings: List[SceneOpening] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "vertices": [list(v) for v in self.vertices],
            "edges": [list(e) for e in self.edges],
            "heights": self.heights,
            "thicknesses": self.thicknesses,
            "openings": [
                {
                    "edge": o.edge,
                    "height": o.height,
                    "points": [list(p) for p in o.points],
                    "type": o.kind,
                }
                for o in self.openings
            ],
        }


class ScenePlanBuilder:
    """Accumulates deduplicated vertices and edges"""

    def __init__(self, precision: int = 2):
        self.precision = precision
        self.plan = ScenePlan()
        self._index: Dict[Point, int] = {}

    def vertex(self, point: Point) -> int:
        key = (round(point[0], self.precision), round(point[1], self.precision))
        if key not in self._index:
            self._index[key] = len(self.plan.vertices)
            self.plan.vertices.append(key)
        return self._index[key]

    def edge(self, start: Point, end: Point, height: float, thickness: float) -> int:
        self.plan.edges.append((self.vertex(start), self.vertex(end)))
        self.plan.heights.append(height)
        self.plan.thicknesses.append(thickness)
        return len(self.plan.edges) - 1


class SceneBuilder:
    """
    Builds a ScenePlan from walls in pixel coordinates.

    Process:
    1. Scale wall endpoints to meters
    2. Share vertices between walls meeting at the same point
    3. Give every wall one edge with the plan's wall height and its thickness
    4. Turn gaps between runs folded into one wall into door/window openings
    """

    def __init__(
        self,
        default_wall_height: float = 2.8,  # meters
        door_height: float = 2.1,
        window_height: float = 1.2,
        min_opening_width: float = 0.6,
        max_opening_width: float = 2.0,
        door_min_width: float = 0.8,
    ):
        self.default_wall_height = default_wall_height
        self.door_height = door_height
        self.window_height = window_height
        self.min_opening_width = min_opening_width
        self.max_opening_width = max_opening_width
        self.door_min_width = door_min_width

    def build(
        self,
        walls: List[WallSegment],
        scale: float,
        wall_height: Optional[float] = None,
    ) -> ScenePlan:
        """
        Args:
            walls: Recognized walls
            scale: Meters per pixel
            wall_height: Ceiling height when known, else the default

        Returns:
            ScenePlan in meters
        """
        height = wall_height or self.default_wall_height
        builder = ScenePlanBuilder()

        for wall in walls:
            start = (wall.start[0] * scale, wall.start[1] * scale)
            end = (wall.end[0] * scale, wall.end[1] * scale)
            edge = builder.edge(start, end, height, wall.thickness)

            for low, high in self.find_gaps(wall, scale):
                width = high - low
                kind = "door" if width >= self.door_min_width else "window"
                builder.plan.openings.append(SceneOpening(
                    edge=edge,
                    height=self.door_height if kind == "door" else self.window_height,
                    points=(self._along(wall, low, scale), self._along(wall, high, scale)),
                    kind=kind,
                ))

        plan = builder.plan
        logger.info(
            f"Scene: {len(plan.vertices)} vertices, {len(plan.edges)} edges, {len(plan.openings)} openings"
        )
        return plan

    def find_gaps(self, wall: WallSegment, scale: float) -> List[Tuple[float, float]]:
        """Uncovered intervals (meters along the wall) sized like an opening"""
        gaps = []
        covered_to = None
        for low, high in sorted(wall.spans):
            if covered_to is not None and low > covered_to:
                width = (low - covered_to) * scale
                if self.min_opening_width <= width <= self.max_opening_width:
                    gaps.append((covered_to * scale, low * scale))
            covered_to = high if covered_to is None else max(covered_to, high)
        return gaps

    def _along(self, wall: WallSegment, position: float, scale: float) -> Point:
        fixed = round(wall.fixed * scale, 2)
        position = round(position, 2)
        if wall.orientation == Orientation.HORIZONTAL:
            return (position, fixed)
        return (fixed, position)
