"""
Line Extractor - Finds axis-aligned line segments in an edge map
"""
from typing import Iterator, List, Set, Tuple
from dataclasses import dataclass
from enum import Enum
import logging

import numpy as np

logger = logging.getLogger(__name__)

Point = Tuple[float, float]


class Orientation(str, Enum):
    HORIZONTAL = "horizontal"
    VERTICAL = "vertical"


@dataclass(frozen=True)
class LineSegment:
    """Axis-aligned run of edge pixels"""
    orientation: Orientation
    start: Point
    end: Point
    length: int  # pixel count of the run

    @property
    def fixed(self) -> float:
        """Constant coordinate: y for horizontal, x for vertical"""
        return self.start[1] if self.orientation == Orientation.HORIZONTAL else self.start[0]

    @property
    def span(self) -> Tuple[float, float]:
        """Along-axis extent (low, high)"""
        if self.orientation == Orientation.HORIZONTAL:
            return self.start[0], self.end[0]
        return self.start[1], self.end[1]


def adaptive_min_length(width: int, height: int, fraction: float = 0.05, floor: int = 40) -> int:
    """Minimum run length scaled with the larger image side"""
    return max(floor, int(max(width, height) * fraction))


def _runs(mask: np.ndarray) -> Iterator[Tuple[int, int]]:
    """(start, length) of every run of True values in a 1-D mask"""
    # Padding closes a run still open at the end of the row/column
    padded = np.concatenate(([0], mask.astype(np.int8), [0]))
    diff = np.diff(padded)
    starts = np.flatnonzero(diff == 1)
    stops = np.flatnonzero(diff == -1)
    for start, stop in zip(starts, stops):
        yield int(start), int(stop - start)


class LineExtractor:
    """
    Scans rows and columns of an edge map for maximal runs of pixels brighter
    than the edge threshold. Runs shorter than min_length are dropped.
    """

    def __init__(self, min_length: int = 40, edge_threshold: int = 100):
        self.min_length = min_length
        self.edge_threshold = edge_threshold

    def extract(self, edges: np.ndarray) -> List[LineSegment]:
        """Horizontal segments (row by row) followed by vertical segments"""
        mask = edges > self.edge_threshold
        lines: List[LineSegment] = []
        emitted: Set[Tuple[Orientation, int, int, int]] = set()

        height, width = mask.shape
        for y in range(height):
            for start, length in _runs(mask[y, :]):
                self._emit(lines, emitted, Orientation.HORIZONTAL, y, start, length)

        for x in range(width):
            for start, length in _runs(mask[:, x]):
                self._emit(lines, emitted, Orientation.VERTICAL, x, start, length)

        logger.info(f"Found {len(lines)} lines (min length {self.min_length})")
        return lines

    def _emit(
        self,
        lines: List[LineSegment],
        emitted: Set[Tuple[Orientation, int, int, int]],
        orientation: Orientation,
        fixed: int,
        start: int,
        length: int,
    ):
        if length < self.min_length:
            return

        end = start + length - 1
        key = (orientation, fixed, start, end)
        if key in emitted:
            return
        emitted.add(key)

        if orientation == Orientation.HORIZONTAL:
            segment = LineSegment(orientation, (start, fixed), (end, fixed), length)
        else:
            segment = LineSegment(orientation, (fixed, start), (fixed, end), length)
        lines.append(segment)
