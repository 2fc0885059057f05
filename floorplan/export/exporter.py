"""
Plan Exporter - Text rendering of recognized walls and rooms, and file export
"""
from pathlib import Path
from typing import Dict, List, NamedTuple, Optional, Union
from enum import Enum
import json
import logging

from config.settings import settings

from ..recognition.rooms import RoomPolygon
from ..recognition.walls import WallSegment

logger = logging.getLogger(__name__)

LOAD_BEARING = "load-bearing"
PARTITION = "partition"


class ParsedWall(NamedTuple):
    """Numeric fields of a formatted wall line"""
    x1: float
    y1: float
    x2: float
    y2: float
    load_bearing: bool
    thickness: float


class OutputFormatter:
    """
    Renders walls and rooms in meters.

    Wall line:  "x1,y1 -> x2,y2; <load-bearing|partition>; thickness"
    Room line:  "name:x1,y1;x2,y2;x3,y3;x4,y4"

    Every number is rendered with two decimals, records are newline separated.
    """

    def __init__(self, scale: float = 0.01):
        self.scale = scale

    def _point(self, point) -> str:
        return f"{point[0] * self.scale:.2f},{point[1] * self.scale:.2f}"

    def format_wall(self, wall: WallSegment) -> str:
        kind = LOAD_BEARING if wall.load_bearing else PARTITION
        return f"{self._point(wall.start)} -> {self._point(wall.end)}; {kind}; {wall.thickness:.2f}"

    def format_walls(self, walls: List[WallSegment]) -> str:
        return "\n".join(self.format_wall(wall) for wall in walls)

    def format_room(self, room: RoomPolygon) -> str:
        coords = ";".join(self._point(v) for v in room.vertices)
        return f"{room.name}:{coords}"

    def format_rooms(self, rooms: List[RoomPolygon]) -> str:
        return "\n".join(self.format_room(room) for room in rooms)

    def room_area(self, room: RoomPolygon) -> float:
        """Square meters"""
        return room.area * self.scale * self.scale

    def total_area(self, rooms: List[RoomPolygon]) -> float:
        return sum(self.room_area(room) for room in rooms)

    @staticmethod
    def parse_wall(line: str) -> ParsedWall:
        """Inverse of format_wall"""
        try:
            coords, kind, thickness = (part.strip() for part in line.split(";"))
            start, end = (part.strip() for part in coords.split("->"))
            x1, y1 = (float(v) for v in start.split(","))
            x2, y2 = (float(v) for v in end.split(","))
        except ValueError as e:
            raise ValueError(f"Malformed wall record: {line!r}") from e

        if kind not in (LOAD_BEARING, PARTITION):
            raise ValueError(f"Unknown wall type: {kind!r}")
        return ParsedWall(x1, y1, x2, y2, kind == LOAD_BEARING, float(thickness))


class ExportFormat(Enum):
    TEXT = "txt"            # walls and rooms records
    JSON = "json"           # recognition result contract
    SCENE = "scene.json"    # vertices/edges for a mesh builder
    PROJECT = "project.json"  # planning project request payload


def project_payload(result, source: str = "upload") -> Dict:
    """
    Planning project request for a successful result.

    Shape: plan metadata, room geometry with vertices in meters and walls
    with start/end points, load-bearing flag and thickness.
    """
    plan = result.plan
    formatter = OutputFormatter(plan.scale)
    height = plan.metadata.ceiling_height

    def point(p):
        return {"x": round(p[0] * plan.scale, 2), "y": round(p[1] * plan.scale, 2)}

    return {
        "plan": {
            "address": result.address,
            "area": result.area,
            "ceilingHeight": result.ceiling_height,
            "source": source,
            "recognitionStatus": "recognized" if result.success else "failed",
        },
        "geometry": {
            "rooms": [
                {
                    "id": f"room-{i + 1}",
                    "name": room.name,
                    "height": height,
                    "area": round(formatter.room_area(room), 2),
                    "vertices": [point(v) for v in room.vertices],
                }
                for i, room in enumerate(plan.rooms)
            ],
        },
        "walls": [
            {
                "id": f"wall-{i + 1}",
                "start": point(wall.start),
                "end": point(wall.end),
                "loadBearing": wall.load_bearing,
                "thickness": wall.thickness,
            }
            for i, wall in enumerate(plan.walls)
        ],
    }


class PlanExporter:
    """
    Writes a RecognitionResult to disk.

    Supported formats:
    - TEXT: wall and room records
    - JSON: the recognition result contract
    - SCENE: downstream scene description (vertices, edges, openings)
    - PROJECT: planning project request payload
    """

    SUPPORTED_FORMATS = {f.value for f in ExportFormat}

    def __init__(self, output_dir: Union[str, Path] = None, scene_builder=None):
        self.output_dir = Path(output_dir) if output_dir else settings.output_dir
        self.output_dir.mkdir(parents=True, exist_ok=True)
        self.scene_builder = scene_builder

    def export(
        self,
        result,
        filename: str,
        format: Union[ExportFormat, str],
        options: Optional[dict] = None,
    ) -> Path:
        """
        Export result to specified format.

        Args:
            result: RecognitionResult to export
            filename: Output filename (without extension)
            format: Target format
            options: Format-specific options

        Returns:
            Path to exported file
        """
        if isinstance(format, str):
            format = ExportFormat(format.lower())

        output_path = self.output_dir / f"{filename}.{format.value}"

        logger.info(f"Exporting to {format.value}: {output_path}")

        exporters = {
            ExportFormat.TEXT: self._export_text,
            ExportFormat.JSON: self._export_json,
            ExportFormat.SCENE: self._export_scene,
            ExportFormat.PROJECT: self._export_project,
        }

        exporters[format](result, output_path, options or {})
        return output_path

    def export_multi(
        self,
        result,
        filename: str,
        formats: List[Union[ExportFormat, str]],
    ) -> List[Path]:
        """Export to multiple formats at once"""
        return [self.export(result, filename, fmt) for fmt in formats]

    def _require_plan(self, result, format: ExportFormat):
        if not result.success or result.plan is None:
            raise ValueError(f"Cannot export {format.value}: recognition failed")

    def _export_text(self, result, path: Path, options: dict):
        self._require_plan(result, ExportFormat.TEXT)
        path.write_text(f"# walls\n{result.walls}\n\n# rooms\n{result.rooms}\n", encoding="utf-8")

    def _export_json(self, result, path: Path, options: dict):
        path.write_text(
            json.dumps(result.to_dict(), indent=options.get("indent", 2), ensure_ascii=False),
            encoding="utf-8",
        )

    def _export_scene(self, result, path: Path, options: dict):
        self._require_plan(result, ExportFormat.SCENE)
        from ..reconstruction import SceneBuilder

        builder = self.scene_builder or SceneBuilder(
            default_wall_height=settings.default_wall_height,
            door_height=settings.default_door_height,
            window_height=settings.default_window_height,
            min_opening_width=settings.min_opening_width,
            max_opening_width=settings.max_opening_width,
            door_min_width=settings.door_min_width,
        )
        scene = builder.build(
            result.plan.walls,
            result.plan.scale,
            wall_height=result.plan.metadata.ceiling_height,
        )
        path.write_text(json.dumps(scene.to_dict(), indent=options.get("indent", 2)), encoding="utf-8")

    def _export_project(self, result, path: Path, options: dict):
        self._require_plan(result, ExportFormat.PROJECT)
        payload = project_payload(result, source=options.get("source", "file"))
        path.write_text(
            json.dumps(payload, indent=options.get("indent", 2), ensure_ascii=False),
            encoding="utf-8",
        )
