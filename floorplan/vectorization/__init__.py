# Vectorization module
# Converts raster floor plans to axis-aligned line segments:
# - Sobel edge detection
# - Row/column run extraction

from .edges import EdgeDetector
from .vectorizer import LineExtractor, LineSegment, Orientation, adaptive_min_length

__all__ = ["EdgeDetector", "LineExtractor", "LineSegment", "Orientation", "adaptive_min_length"]
