"""
Application settings and configuration
"""
from pathlib import Path
from typing import Optional
from pydantic_settings import BaseSettings
from pydantic import Field


class Settings(BaseSettings):
    """Application configuration"""

    # Paths
    output_dir: Path = Field(default_factory=lambda: Path(__file__).parent.parent / "data" / "output")

    # API Server
    api_host: str = "0.0.0.0"
    api_port: int = 7001
    cors_origins: list = ["*"]

    # Acquisition
    max_image_size: int = 2048  # Max dimension in pixels before recognition
    pdf_render_scale: float = 2.0
    pdf_text_pages: int = 3

    # Preprocessing
    binarize: bool = False
    binarize_threshold: int = 128

    # Line extraction
    edge_threshold: int = 100
    min_line_fraction: float = 0.05  # of the larger image dimension
    min_line_floor: int = 40

    # Wall aggregation
    merge_fraction: float = 0.003
    merge_floor: int = 6
    merge_mode: str = "single_pass"  # or "fixed_point"
    load_bearing_length: float = 200.0  # pixels
    load_bearing_thickness: float = 0.4  # meters
    partition_thickness: float = 0.12

    # Room detection
    level_tolerance: float = 5.0
    min_room_height: float = 20.0
    room_name_prefix: str = "Room"

    # Scale estimation
    default_scale: float = 0.01  # meters per pixel
    min_scale: float = 0.005
    max_scale: float = 0.05
    assumed_wall_length: float = 4.0  # meters
    known_area_correction: float = 0.8

    # Scene defaults
    default_wall_height: float = 2.8  # meters
    default_door_height: float = 2.1
    default_window_height: float = 1.2
    min_opening_width: float = 0.6
    max_opening_width: float = 2.0
    door_min_width: float = 0.8

    # Logging
    log_level: str = "INFO"
    log_file: Optional[Path] = None

    class Config:
        env_prefix = "PLAN_"
        env_file = ".env"


settings = Settings()
