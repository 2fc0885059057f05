"""
Tests for wall aggregation, room detection and scale estimation
"""
import pytest


def hline(y, x1, x2):
    from floorplan.vectorization import LineSegment, Orientation
    return LineSegment(Orientation.HORIZONTAL, (x1, y), (x2, y), x2 - x1 + 1)


def vline(x, y1, y2):
    from floorplan.vectorization import LineSegment, Orientation
    return LineSegment(Orientation.VERTICAL, (x, y1), (x, y2), y2 - y1 + 1)


def hwall(y, x1, x2, thickness=0.12):
    from floorplan.recognition import WallSegment
    from floorplan.vectorization import Orientation
    return WallSegment(start=(x1, y), end=(x2, y), orientation=Orientation.HORIZONTAL, thickness=thickness)


def vwall(x, y1, y2, thickness=0.12):
    from floorplan.recognition import WallSegment
    from floorplan.vectorization import Orientation
    return WallSegment(start=(x, y1), end=(x, y2), orientation=Orientation.VERTICAL, thickness=thickness)


class TestWallAggregator:
    """Test merging and classification"""

    def test_close_lines_merge(self):
        from floorplan.recognition import WallAggregator

        walls = WallAggregator(merge_distance=5).aggregate([hline(10, 0, 100), hline(12, 50, 150)])

        assert len(walls) == 1
        wall = walls[0]
        assert wall.start == (0, 11)
        assert wall.end == (150, 11)
        assert wall.length == 150
        assert wall.spans == [(0, 100), (50, 150)]

    def test_distant_lines_stay_apart(self):
        from floorplan.recognition import WallAggregator

        walls = WallAggregator(merge_distance=1).aggregate([hline(10, 0, 100), hline(12, 50, 150)])
        assert len(walls) == 2

    def test_orientations_never_merge(self):
        from floorplan.recognition import WallAggregator
        from floorplan.vectorization import Orientation

        walls = WallAggregator(merge_distance=50).aggregate([hline(10, 0, 100), vline(10, 0, 100)])

        assert [w.orientation for w in walls] == [Orientation.HORIZONTAL, Orientation.VERTICAL]

    def test_single_pass_is_not_transitive(self):
        from floorplan.recognition import WallAggregator

        lines = [hline(0, 0, 50), hline(3, 0, 50), hline(6, 0, 50)]
        walls = WallAggregator(merge_distance=5).aggregate(lines)

        assert len(walls) == 2
        assert walls[0].fixed == pytest.approx(1.5)
        assert walls[1].fixed == 6

    def test_fixed_point_merges_chains(self):
        from floorplan.recognition import MergeMode, WallAggregator

        lines = [hline(0, 0, 50), hline(3, 0, 50), hline(6, 0, 50)]
        walls = WallAggregator(merge_distance=5, mode=MergeMode.FIXED_POINT).aggregate(lines)

        assert len(walls) == 1
        assert walls[0].extent == (0, 50)

    def test_mode_accepts_string(self):
        from floorplan.recognition import MergeMode, WallAggregator

        assert WallAggregator(mode="fixed_point").mode == MergeMode.FIXED_POINT

    def test_load_bearing_classification(self):
        from floorplan.recognition import WallAggregator

        walls = WallAggregator().aggregate([hline(10, 0, 250), hline(100, 0, 200)])

        assert walls[0].load_bearing is True
        assert walls[0].thickness == 0.4
        # Exactly at the threshold is still a partition
        assert walls[1].load_bearing is False
        assert walls[1].thickness == 0.12

    def test_classify(self):
        from floorplan.recognition import WallAggregator

        aggregator = WallAggregator(load_bearing_length=100, load_bearing_thickness=0.3, partition_thickness=0.1)
        assert aggregator.classify(101) == (True, 0.3)
        assert aggregator.classify(100) == (False, 0.1)

    def test_thickness_must_be_positive(self):
        with pytest.raises(ValueError):
            hwall(0, 0, 10, thickness=0)

    def test_empty_input(self):
        from floorplan.recognition import WallAggregator

        assert WallAggregator().aggregate([]) == []

    def test_adaptive_merge_distance(self):
        from floorplan.recognition import adaptive_merge_distance

        assert adaptive_merge_distance(200, 160) == 6
        assert adaptive_merge_distance(4000, 3000) == 12


class TestRoomDetector:
    """Test level grouping and room rectangles"""

    def test_simple_room(self):
        from floorplan.recognition import RoomDetector

        walls = [hwall(0, 0, 6), hwall(4, 0, 6), vwall(0, 0, 4), vwall(6, 0, 4)]
        rooms = RoomDetector(level_tolerance=1, min_room_height=1).detect(walls)

        assert len(rooms) == 1
        assert rooms[0].name == "Room 1"
        assert rooms[0].vertices == [(0, 0), (6, 0), (6, 4), (0, 4)]
        assert rooms[0].area == 24

    def test_single_level_has_no_rooms(self):
        from floorplan.recognition import RoomDetector

        walls = [hwall(0, 0, 6), hwall(2, 0, 6), vwall(0, 0, 40)]
        assert RoomDetector().detect(walls) == []

    def test_no_walls(self):
        from floorplan.recognition import RoomDetector

        assert RoomDetector().detect([]) == []

    def test_levels_too_close(self):
        from floorplan.recognition import RoomDetector

        walls = [hwall(0, 0, 100), hwall(15, 0, 100)]
        assert RoomDetector(min_room_height=20).detect(walls) == []

    def test_level_grouping(self):
        from floorplan.recognition import RoomDetector

        walls = [hwall(12, 0, 10), hwall(10, 20, 30), hwall(50, 0, 30)]
        levels = RoomDetector(level_tolerance=5).group_levels(walls)

        assert len(levels) == 2
        assert levels[0].y == pytest.approx(11)
        assert len(levels[0].walls) == 2
        assert levels[1].y == 50

    def test_non_overlapping_walls_skipped(self):
        from floorplan.recognition import RoomDetector

        walls = [hwall(0, 0, 50), hwall(100, 60, 120)]
        assert RoomDetector().detect(walls) == []

    def test_partial_runs_over_report(self):
        from floorplan.recognition import RoomDetector

        walls = [hwall(0, 0, 100), hwall(0, 200, 300), hwall(100, 0, 300)]
        rooms = RoomDetector().detect(walls)

        assert [r.name for r in rooms] == ["Room 1", "Room 2"]
        assert rooms[0].vertices[0] == (0, 0)
        assert rooms[1].vertices[1] == (300, 0)

    def test_name_prefix(self):
        from floorplan.recognition import RoomDetector

        walls = [hwall(0, 0, 100), hwall(100, 0, 100)]
        rooms = RoomDetector(name_prefix="Комната").detect(walls)
        assert rooms[0].name == "Комната 1"

    def test_polygon_area(self):
        from floorplan.recognition import polygon_area

        assert polygon_area([(0, 0), (4, 0), (4, 3), (0, 3)]) == 12
        assert polygon_area([(0, 0), (0, 3), (4, 3), (4, 0)]) == 12


class TestScaleEstimator:
    """Test meters-per-pixel estimation"""

    def test_default_without_walls(self):
        from floorplan.recognition import ScaleEstimator

        assert ScaleEstimator().estimate([]) == 0.01

    def test_mean_wall_length(self):
        from floorplan.recognition import ScaleEstimator

        walls = [hwall(0, 0, 100), hwall(100, 0, 300)]
        assert ScaleEstimator().estimate(walls) == pytest.approx(4 / 200)

    def test_known_area_correction(self):
        from floorplan.recognition import ScaleEstimator

        walls = [hwall(0, 0, 160)]
        assert ScaleEstimator().estimate(walls, known_area=50) == pytest.approx(4 / 160 * 0.8)

    def test_explicit_scale_wins(self):
        from floorplan.recognition import ScaleEstimator

        assert ScaleEstimator().estimate([hwall(0, 0, 160)], explicit_scale=0.02) == 0.02

    def test_clamped(self):
        from floorplan.recognition import ScaleEstimator

        estimator = ScaleEstimator()
        assert estimator.estimate([hwall(0, 0, 10)]) == 0.05
        assert estimator.estimate([hwall(0, 0, 5000)]) == 0.005
        assert estimator.estimate([], explicit_scale=1.0) == 0.05

    def test_longer_walls_give_smaller_scale(self):
        from floorplan.recognition import ScaleEstimator

        estimator = ScaleEstimator()
        short = estimator.estimate([hwall(0, 0, 100)])
        long = estimator.estimate([hwall(0, 0, 200)])
        assert long < short
