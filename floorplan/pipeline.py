"""
Pipeline Orchestrator - Coordinates the full recognition workflow
"""
from pathlib import Path
from typing import Optional, Callable, List, Union
from dataclasses import dataclass, field
from enum import Enum
import logging
from datetime import datetime

import numpy as np

from config.settings import settings

from .errors import NoLinesDetectedError
from .ingestion.metadata import PlanMetadata, extract_metadata
from .recognition.rooms import RoomPolygon
from .recognition.walls import MergeMode, WallSegment

logger = logging.getLogger(__name__)


class PipelineStage(Enum):
    ACQUISITION = "acquisition"
    METADATA = "metadata"
    PREPROCESSING = "preprocessing"
    EDGE_DETECTION = "edge_detection"
    LINE_EXTRACTION = "line_extraction"
    WALL_AGGREGATION = "wall_aggregation"
    ROOM_DETECTION = "room_detection"
    SCALE_ESTIMATION = "scale_estimation"
    FORMATTING = "formatting"


@dataclass
class PipelineConfig:
    """Configuration for pipeline execution"""
    # Acquisition / preprocessing
    max_image_size: Optional[int] = field(default_factory=lambda: settings.max_image_size)
    binarize: bool = field(default_factory=lambda: settings.binarize)
    binarize_threshold: int = field(default_factory=lambda: settings.binarize_threshold)

    # Line extraction; None derives the value from the image size
    edge_threshold: int = field(default_factory=lambda: settings.edge_threshold)
    min_line_length: Optional[int] = None

    # Wall aggregation; None derives the value from the image size
    merge_distance: Optional[float] = None
    merge_mode: MergeMode = field(default_factory=lambda: MergeMode(settings.merge_mode))
    load_bearing_length: float = field(default_factory=lambda: settings.load_bearing_length)
    load_bearing_thickness: float = field(default_factory=lambda: settings.load_bearing_thickness)
    partition_thickness: float = field(default_factory=lambda: settings.partition_thickness)

    # Room detection
    level_tolerance: float = field(default_factory=lambda: settings.level_tolerance)
    min_room_height: float = field(default_factory=lambda: settings.min_room_height)
    room_name_prefix: str = field(default_factory=lambda: settings.room_name_prefix)

    # Scale
    scale: Optional[float] = None  # Auto-detect from walls if None
    known_area: Optional[float] = None  # Overrides the area found in the document


@dataclass
class RecognitionStats:
    lines_found: int = 0
    walls_found: int = 0
    rooms_found: int = 0


@dataclass
class RecognizedPlan:
    """Geometry behind a successful result, in pixel coordinates"""
    width: int
    height: int
    walls: List[WallSegment]
    rooms: List[RoomPolygon]
    scale: float  # meters per pixel
    metadata: PlanMetadata = field(default_factory=PlanMetadata)


@dataclass
class RecognitionResult:
    """Result of a recognition request"""
    success: bool
    rooms: str = ""
    walls: str = ""
    area: Optional[str] = None
    ceiling_height: Optional[str] = None
    address: Optional[str] = None
    stats: RecognitionStats = field(default_factory=RecognitionStats)
    error: Optional[str] = None
    plan: Optional[RecognizedPlan] = None
    stages_completed: List[PipelineStage] = field(default_factory=list)
    timing: Optional[dict] = None

    @classmethod
    def failure(cls, error: str, stages_completed: List[PipelineStage] = None) -> "RecognitionResult":
        return cls(success=False, error=error, stages_completed=stages_completed or [])

    def to_dict(self) -> dict:
        """Serialize to the public result contract"""
        if not self.success:
            return {"success": False, "error": self.error}
        return {
            "success": True,
            "rooms": self.rooms,
            "walls": self.walls,
            "area": self.area,
            "ceilingHeight": self.ceiling_height,
            "address": self.address,
            "stats": {
                "roomsFound": self.stats.rooms_found,
                "wallsFound": self.stats.walls_found,
                "linesFound": self.stats.lines_found,
            },
        }


def _format_number(value: float) -> str:
    """Shortest exact rendering, integral values without a trailing .0"""
    text = repr(float(value))
    return text[:-2] if text.endswith(".0") else text


class Pipeline:
    """
    Main pipeline orchestrator for floor plan recognition.

    Pipeline stages:
    1. Acquisition: decode image / render first PDF page (async)
    2. Metadata: area, ceiling height, address from document text
    3. Preprocessing: downscale, grayscale
    4. Edge detection: Sobel magnitude
    5. Line extraction: row/column runs
    6. Wall aggregation: merge and classify
    7. Room detection and scale estimation (independent of each other)
    8. Formatting: metric text records and area

    Every failure ends up in a RecognitionResult with success=False.
    """

    def __init__(self, config: Optional[PipelineConfig] = None, loader=None):
        self.config = config or PipelineConfig()
        self.loader = loader
        self._progress_callback: Optional[Callable] = None
        self._current_stage: Optional[PipelineStage] = None
        self._stages_completed: List[PipelineStage] = []
        self._timing: dict = {}

    def set_progress_callback(self, callback: Callable[[PipelineStage, float, str], None]):
        """
        Set callback for progress updates.

        Callback signature: (stage: PipelineStage, progress: float, message: str)
        """
        self._progress_callback = callback

    def _report_progress(self, progress: float, message: str):
        """Report progress to callback if set"""
        if self._progress_callback and self._current_stage:
            self._progress_callback(self._current_stage, progress, message)

    def _enter(self, stage: PipelineStage, message: str):
        self._current_stage = stage
        self._report_progress(0.0, message)

    def _complete(self, started: datetime):
        self._timing[self._current_stage.value] = (datetime.now() - started).total_seconds()
        self._stages_completed.append(self._current_stage)
        self._report_progress(1.0, f"{self._current_stage.value} complete")

    async def run(
        self,
        source: Union[str, Path],
        data: Optional[bytes] = None,
        content_type: Optional[str] = None,
    ) -> RecognitionResult:
        """
        Acquire a floor plan from a file (or uploaded bytes) and recognize it.

        Returns:
            RecognitionResult
        """
        logger.info(f"Starting recognition for: {source}")
        self._stages_completed = []
        self._timing = {}

        try:
            started = datetime.now()
            self._enter(PipelineStage.ACQUISITION, "Loading document...")
            loader = self.loader
            if loader is None:
                from .ingestion import DocumentLoader
                loader = DocumentLoader(pdf_scale=settings.pdf_render_scale, text_pages=settings.pdf_text_pages)
            document = await loader.load(source, data=data, content_type=content_type)
            self._complete(started)

            started = datetime.now()
            self._enter(PipelineStage.METADATA, "Reading document text...")
            metadata = self._run_metadata(document.text)
            self._complete(started)

            return self._recognize(document.image, metadata)

        except Exception as e:
            return self._fail(e)

    def recognize(self, image: np.ndarray, metadata: Optional[PlanMetadata] = None) -> RecognitionResult:
        """Run the synchronous stages on an already acquired pixel buffer"""
        self._stages_completed = []
        self._timing = {}
        try:
            return self._recognize(image, metadata or PlanMetadata())
        except Exception as e:
            return self._fail(e)

    def _fail(self, error: Exception) -> RecognitionResult:
        logger.error(f"Recognition failed at {self._current_stage}: {error}")
        message = str(error) or "Unknown error while recognizing the plan"
        result = RecognitionResult.failure(message, list(self._stages_completed))
        result.timing = self._timing
        return result

    def _run_metadata(self, text: str) -> PlanMetadata:
        """Fields that fail to parse stay None and never abort recognition"""
        return extract_metadata(text)

    def _recognize(self, image: np.ndarray, metadata: PlanMetadata) -> RecognitionResult:
        cfg = self.config
        start_time = datetime.now()

        started = datetime.now()
        self._enter(PipelineStage.PREPROCESSING, "Preprocessing image...")
        processed = self._run_preprocessing(image)
        height, width = processed.image.shape[:2]
        self._complete(started)

        started = datetime.now()
        self._enter(PipelineStage.EDGE_DETECTION, "Detecting edges...")
        edges = self._run_edge_detection(processed.luminance)
        self._complete(started)

        started = datetime.now()
        self._enter(PipelineStage.LINE_EXTRACTION, "Extracting lines...")
        lines = self._run_line_extraction(edges, width, height)
        if not lines:
            raise NoLinesDetectedError()
        self._complete(started)

        started = datetime.now()
        self._enter(PipelineStage.WALL_AGGREGATION, "Grouping walls...")
        walls = self._run_wall_aggregation(lines, width, height)
        self._complete(started)

        started = datetime.now()
        self._enter(PipelineStage.ROOM_DETECTION, "Detecting rooms...")
        rooms = self._run_room_detection(walls, width, height)
        self._complete(started)

        started = datetime.now()
        self._enter(PipelineStage.SCALE_ESTIMATION, "Estimating scale...")
        known_area = cfg.known_area or metadata.area
        scale = self._run_scale_estimation(walls, known_area, cfg.scale or metadata.scale)
        self._complete(started)

        started = datetime.now()
        self._enter(PipelineStage.FORMATTING, "Formatting result...")
        result = self._run_formatting(walls, rooms, scale, metadata, known_area)
        result.stats.lines_found = len(lines)
        result.plan = RecognizedPlan(
            width=width,
            height=height,
            walls=walls,
            rooms=rooms,
            scale=scale,
            metadata=metadata,
        )
        self._complete(started)

        elapsed = (datetime.now() - start_time).total_seconds()
        logger.info(
            f"Recognition completed in {elapsed:.2f}s: "
            f"{len(lines)} lines, {len(walls)} walls, {len(rooms)} rooms"
        )
        result.stages_completed = list(self._stages_completed)
        result.timing = self._timing
        return result

    def _run_preprocessing(self, image: np.ndarray):
        """Downscale and convert to grayscale"""
        from .ingestion import ImagePreprocessor, PreprocessingConfig

        preprocessor = ImagePreprocessor(PreprocessingConfig(
            max_size=self.config.max_image_size,
            binarize=self.config.binarize,
            binarize_threshold=self.config.binarize_threshold,
        ))
        return preprocessor.process(image)

    def _run_edge_detection(self, gray: np.ndarray) -> np.ndarray:
        from .vectorization import EdgeDetector

        return EdgeDetector().detect(gray)

    def _run_line_extraction(self, edges: np.ndarray, width: int, height: int):
        from .vectorization import LineExtractor, adaptive_min_length

        min_length = self.config.min_line_length or adaptive_min_length(
            width, height, settings.min_line_fraction, settings.min_line_floor
        )
        extractor = LineExtractor(min_length=min_length, edge_threshold=self.config.edge_threshold)
        return extractor.extract(edges)

    def _run_wall_aggregation(self, lines, width: int, height: int) -> List[WallSegment]:
        from .recognition import WallAggregator, adaptive_merge_distance

        merge_distance = self.config.merge_distance or adaptive_merge_distance(
            width, height, settings.merge_fraction, settings.merge_floor
        )
        aggregator = WallAggregator(
            merge_distance=merge_distance,
            load_bearing_length=self.config.load_bearing_length,
            load_bearing_thickness=self.config.load_bearing_thickness,
            partition_thickness=self.config.partition_thickness,
            mode=self.config.merge_mode,
        )
        return aggregator.aggregate(lines)

    def _run_room_detection(self, walls: List[WallSegment], width: int, height: int) -> List[RoomPolygon]:
        from .recognition import RoomDetector

        detector = RoomDetector(
            level_tolerance=self.config.level_tolerance,
            min_room_height=self.config.min_room_height,
            name_prefix=self.config.room_name_prefix,
        )
        return detector.detect(walls, width, height)

    def _run_scale_estimation(
        self,
        walls: List[WallSegment],
        known_area: Optional[float],
        explicit_scale: Optional[float],
    ) -> float:
        from .recognition import ScaleEstimator

        estimator = ScaleEstimator(
            default_scale=settings.default_scale,
            min_scale=settings.min_scale,
            max_scale=settings.max_scale,
            assumed_wall_length=settings.assumed_wall_length,
            known_area_correction=settings.known_area_correction,
        )
        return estimator.estimate(walls, known_area=known_area, explicit_scale=explicit_scale)

    def _run_formatting(
        self,
        walls: List[WallSegment],
        rooms: List[RoomPolygon],
        scale: float,
        metadata: PlanMetadata,
        known_area: Optional[float],
    ) -> RecognitionResult:
        from .export import OutputFormatter

        formatter = OutputFormatter(scale)

        area = None
        if known_area:
            area = _format_number(known_area)
        elif rooms:
            area = f"{formatter.total_area(rooms):.1f}"

        return RecognitionResult(
            success=True,
            rooms=formatter.format_rooms(rooms),
            walls=formatter.format_walls(walls),
            area=area,
            ceiling_height=_format_number(metadata.ceiling_height) if metadata.ceiling_height else None,
            address=metadata.address,
            stats=RecognitionStats(walls_found=len(walls), rooms_found=len(rooms)),
        )


async def run_recognition(
    input_path: Union[str, Path],
    data: Optional[bytes] = None,
    content_type: Optional[str] = None,
    loader=None,
    **kwargs
) -> RecognitionResult:
    """
    Convenience function to run the pipeline.

    Args:
        input_path: Path to input file (PDF or image), or the upload's filename
        data: Raw file content when already in memory
        content_type: MIME type of the upload
        loader: DocumentLoader to use instead of the default one
        **kwargs: Additional PipelineConfig options

    Returns:
        RecognitionResult
    """
    pipeline = Pipeline(PipelineConfig(**kwargs), loader=loader)
    return await pipeline.run(input_path, data=data, content_type=content_type)


def recognize_image(image: np.ndarray, metadata: Optional[PlanMetadata] = None, **kwargs) -> RecognitionResult:
    """Recognize an in-memory RGB(A) or grayscale pixel buffer"""
    pipeline = Pipeline(PipelineConfig(**kwargs))
    return pipeline.recognize(image, metadata)
