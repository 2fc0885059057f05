"""
Wall Aggregator - Folds nearby collinear line segments into walls
"""
from typing import List, Tuple
from dataclasses import dataclass, field
from enum import Enum
import logging
import math

from ..vectorization.vectorizer import LineSegment, Orientation, Point

logger = logging.getLogger(__name__)


class MergeMode(str, Enum):
    SINGLE_PASS = "single_pass"
    FIXED_POINT = "fixed_point"


@dataclass
class WallSegment:
    """Wall in pixel coordinates with a metric cross-section"""
    start: Point
    end: Point
    orientation: Orientation
    thickness: float  # meters
    load_bearing: bool = False
    spans: List[Tuple[float, float]] = field(default_factory=list)  # extents of the folded runs

    def __post_init__(self):
        if self.thickness <= 0:
            raise ValueError(f"Wall thickness must be positive, got {self.thickness}")

    @property
    def length(self) -> float:
        """Pixel length derived from the endpoints"""
        return math.hypot(self.end[0] - self.start[0], self.end[1] - self.start[1])

    @property
    def fixed(self) -> float:
        return self.start[1] if self.orientation == Orientation.HORIZONTAL else self.start[0]

    @property
    def extent(self) -> Tuple[float, float]:
        """Along-axis (low, high) bounds"""
        if self.orientation == Orientation.HORIZONTAL:
            a, b = self.start[0], self.end[0]
        else:
            a, b = self.start[1], self.end[1]
        return min(a, b), max(a, b)


@dataclass
class _Group:
    orientation: Orientation
    fixed: float
    low: float
    high: float
    spans: List[Tuple[float, float]]


class WallAggregator:
    """
    Merges segments of the same orientation whose perpendicular offset is
    below merge_distance.

    The default single pass is greedy and non-transitive: each anchor absorbs
    the later segments close to the anchor itself, and a segment absorbed by
    one anchor is never compared against a later, closer one. FIXED_POINT
    repeats the pass over the produced walls until nothing else merges.
    """

    def __init__(
        self,
        merge_distance: float = 6,
        load_bearing_length: float = 200,
        load_bearing_thickness: float = 0.4,
        partition_thickness: float = 0.12,
        mode: MergeMode = MergeMode.SINGLE_PASS,
    ):
        self.merge_distance = merge_distance
        self.load_bearing_length = load_bearing_length
        self.load_bearing_thickness = load_bearing_thickness
        self.partition_thickness = partition_thickness
        self.mode = MergeMode(mode)

    def aggregate(self, lines: List[LineSegment]) -> List[WallSegment]:
        """Walls in encounter order"""
        groups = [
            _Group(line.orientation, line.fixed, line.span[0], line.span[1], [line.span])
            for line in lines
        ]

        groups = self._merge_pass(groups)
        if self.mode == MergeMode.FIXED_POINT:
            while True:
                merged = self._merge_pass(groups)
                if len(merged) == len(groups):
                    break
                groups = merged

        walls = [self._to_wall(group) for group in groups]
        load_bearing = sum(1 for wall in walls if wall.load_bearing)
        logger.info(f"Aggregated {len(lines)} lines into {len(walls)} walls ({load_bearing} load-bearing)")
        return walls

    def _merge_pass(self, groups: List[_Group]) -> List[_Group]:
        merged: List[_Group] = []
        consumed = set()

        for i, anchor in enumerate(groups):
            if i in consumed:
                continue

            wall = _Group(anchor.orientation, anchor.fixed, anchor.low, anchor.high, list(anchor.spans))
            for j in range(i + 1, len(groups)):
                if j in consumed:
                    continue
                other = groups[j]
                if other.orientation != anchor.orientation:
                    continue
                # Offset is measured against the anchor, not the growing wall
                if abs(anchor.fixed - other.fixed) < self.merge_distance:
                    wall.low = min(wall.low, other.low)
                    wall.high = max(wall.high, other.high)
                    wall.fixed = (wall.fixed + other.fixed) / 2
                    wall.spans.extend(other.spans)
                    consumed.add(j)

            merged.append(wall)
            consumed.add(i)

        return merged

    def classify(self, length: float) -> Tuple[bool, float]:
        """(load_bearing, thickness) for a wall of the given pixel length"""
        if length > self.load_bearing_length:
            return True, self.load_bearing_thickness
        return False, self.partition_thickness

    def _to_wall(self, group: _Group) -> WallSegment:
        if group.orientation == Orientation.HORIZONTAL:
            start, end = (group.low, group.fixed), (group.high, group.fixed)
        else:
            start, end = (group.fixed, group.low), (group.fixed, group.high)

        load_bearing, thickness = self.classify(group.high - group.low)
        return WallSegment(
            start=start,
            end=end,
            orientation=group.orientation,
            thickness=thickness,
            load_bearing=load_bearing,
            spans=sorted(group.spans),
        )


def adaptive_merge_distance(width: int, height: int, fraction: float = 0.003, floor: int = 6) -> int:
    """Merge distance scaled with the larger image side"""
    return max(floor, int(max(width, height) * fraction))
