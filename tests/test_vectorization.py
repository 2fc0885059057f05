"""
Tests for edge detection and line extraction
"""
import numpy as np
import pytest


class TestEdgeDetector:
    """Test Sobel edge map"""

    def test_uniform_buffer_has_no_edges(self):
        from floorplan.vectorization import EdgeDetector

        gray = np.full((30, 40), 137, dtype=np.uint8)
        edges = EdgeDetector().detect(gray)

        assert edges.shape == (30, 40)
        assert edges.dtype == np.uint8
        assert not edges.any()

    def test_step_edge_is_clamped(self):
        from floorplan.vectorization import EdgeDetector

        gray = np.zeros((10, 10), dtype=np.uint8)
        gray[:, 5:] = 255
        edges = EdgeDetector().detect(gray)

        # Columns 4 and 5 straddle the step: |gx| = 4 * 255
        assert (edges[1:-1, 4] == 255).all()
        assert (edges[1:-1, 5] == 255).all()
        assert not edges[1:-1, 1:4].any()
        assert not edges[1:-1, 6:-1].any()

    def test_border_is_zero(self):
        from floorplan.vectorization import EdgeDetector

        rng = np.random.default_rng(0)
        gray = rng.integers(0, 256, size=(20, 20), dtype=np.uint8)
        edges = EdgeDetector().detect(gray)

        assert not edges[0, :].any()
        assert not edges[-1, :].any()
        assert not edges[:, 0].any()
        assert not edges[:, -1].any()

    def test_accepts_color_buffer(self, rectangle_image):
        from floorplan.vectorization import EdgeDetector

        edges = EdgeDetector().detect(rectangle_image)
        assert edges.shape == rectangle_image.shape[:2]
        assert edges.any()

    def test_tiny_buffer(self):
        from floorplan.vectorization import EdgeDetector

        edges = EdgeDetector().detect(np.zeros((2, 5), dtype=np.uint8))
        assert edges.shape == (2, 5)
        assert not edges.any()


class TestLineExtractor:
    """Test row/column run extraction"""

    def test_single_horizontal_run(self):
        from floorplan.vectorization import LineExtractor, Orientation

        edges = np.zeros((50, 100), dtype=np.uint8)
        edges[10, 5:35] = 255

        lines = LineExtractor(min_length=20).extract(edges)

        assert len(lines) == 1
        line = lines[0]
        assert line.orientation == Orientation.HORIZONTAL
        assert line.start == (5, 10)
        assert line.end == (34, 10)
        assert line.length == 30

    def test_short_run_is_dropped(self):
        from floorplan.vectorization import LineExtractor

        edges = np.zeros((50, 100), dtype=np.uint8)
        edges[10, 5:15] = 255

        assert LineExtractor(min_length=20).extract(edges) == []

    def test_run_reaching_row_end_is_flushed(self):
        from floorplan.vectorization import LineExtractor

        edges = np.zeros((20, 100), dtype=np.uint8)
        edges[3, 80:] = 200

        lines = LineExtractor(min_length=20).extract(edges)

        assert len(lines) == 1
        assert lines[0].start == (80, 3)
        assert lines[0].end == (99, 3)
        assert lines[0].length == 20

    def test_vertical_run(self):
        from floorplan.vectorization import LineExtractor, Orientation

        edges = np.zeros((60, 30), dtype=np.uint8)
        edges[10:55, 7] = 255

        lines = LineExtractor(min_length=40).extract(edges)

        assert len(lines) == 1
        assert lines[0].orientation == Orientation.VERTICAL
        assert lines[0].start == (7, 10)
        assert lines[0].end == (7, 54)
        assert lines[0].fixed == 7
        assert lines[0].span == (10, 54)

    def test_threshold_is_strict(self):
        from floorplan.vectorization import LineExtractor

        edges = np.zeros((5, 50), dtype=np.uint8)
        edges[2, :] = 100

        assert LineExtractor(min_length=10, edge_threshold=100).extract(edges) == []
        assert len(LineExtractor(min_length=10, edge_threshold=99).extract(edges)) == 1

    def test_multiple_runs_per_row(self):
        from floorplan.vectorization import LineExtractor

        edges = np.zeros((5, 100), dtype=np.uint8)
        edges[2, 0:30] = 255
        edges[2, 40:90] = 255

        lines = LineExtractor(min_length=25).extract(edges)

        assert [(l.start, l.end) for l in lines] == [((0, 2), (29, 2)), ((40, 2), (89, 2))]

    def test_no_duplicate_segments(self, rectangle_image):
        from floorplan.vectorization import EdgeDetector, LineExtractor

        edges = EdgeDetector().detect(rectangle_image)
        lines = LineExtractor(min_length=40).extract(edges)

        keys = [(l.orientation, l.fixed, l.start, l.end) for l in lines]
        assert len(keys) == len(set(keys))

    def test_segment_invariants(self, rectangle_image):
        from floorplan.vectorization import EdgeDetector, LineExtractor, Orientation

        edges = EdgeDetector().detect(rectangle_image)
        lines = LineExtractor(min_length=40).extract(edges)

        assert len(lines) == 8
        for line in lines:
            assert line.length >= 40
            if line.orientation == Orientation.HORIZONTAL:
                assert line.start[1] == line.end[1]
            else:
                assert line.start[0] == line.end[0]

    def test_empty_edge_map(self):
        from floorplan.vectorization import LineExtractor

        assert LineExtractor().extract(np.zeros((10, 10), dtype=np.uint8)) == []


class TestAdaptiveThresholds:
    """Test size-derived defaults"""

    @pytest.mark.parametrize("size,expected", [((200, 160), 40), ((2048, 1500), 102), ((100, 900), 45)])
    def test_min_length(self, size, expected):
        from floorplan.vectorization import adaptive_min_length

        assert adaptive_min_length(*size) == expected
