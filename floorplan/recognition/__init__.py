# Recognition module
# Heuristic detection of architectural elements from line segments:
# - Walls (merged runs, load-bearing classification)
# - Rooms (rectangles between horizontal wall levels)
# - Scale (meters per pixel)

from .walls import MergeMode, WallAggregator, WallSegment, adaptive_merge_distance
from .rooms import RoomDetector, RoomPolygon, polygon_area
from .scale import ScaleEstimator

__all__ = [
    "MergeMode",
    "WallAggregator",
    "WallSegment",
    "adaptive_merge_distance",
    "RoomDetector",
    "RoomPolygon",
    "polygon_area",
    "ScaleEstimator",
]
