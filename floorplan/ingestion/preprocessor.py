"""
Image Preprocessor - Prepares pixel buffers for edge detection
"""
from typing import Optional, Tuple
from dataclasses import dataclass, field
import logging

import cv2
import numpy as np

logger = logging.getLogger(__name__)

LUMA_WEIGHTS = (0.299, 0.587, 0.114)


@dataclass
class PreprocessingConfig:
    """Configuration for image preprocessing"""
    max_size: Optional[int] = 2048  # Cap on either dimension, None disables
    binarize: bool = False
    binarize_threshold: int = 128


@dataclass
class PreprocessedImage:
    """Container for preprocessed image data"""
    image: np.ndarray  # grayscale buffer, R = G = B when color
    original_size: Tuple[int, int]  # (width, height)
    processed_size: Tuple[int, int]
    scale_factor: float
    applied_transforms: list = field(default_factory=list)

    @property
    def luminance(self) -> np.ndarray:
        """Single-channel view of the grayscale buffer"""
        if self.image.ndim == 2:
            return self.image
        return self.image[:, :, 0]


class ImagePreprocessor:
    """
    Converts a color pixel buffer to luminance.

    Operations:
    - Downscaling so neither side exceeds max_size (aspect preserved)
    - Grayscale (ITU-R BT.601 luma) written back to every color channel
    - Optional binarization
    """

    def __init__(self, config: Optional[PreprocessingConfig] = None):
        self.config = config or PreprocessingConfig()

    def process(self, image: np.ndarray, config: Optional[PreprocessingConfig] = None) -> PreprocessedImage:
        """Apply preprocessing pipeline to image"""
        cfg = config or self.config
        transforms = []
        height, width = image.shape[:2]

        scale = 1.0
        if cfg.max_size:
            image, scale = self.downscale(image, cfg.max_size)
            if scale != 1.0:
                transforms.append("downscale")

        self.grayscale(image)
        transforms.append("grayscale")

        if cfg.binarize:
            self.threshold(image, cfg.binarize_threshold)
            transforms.append("binarize")

        logger.debug(f"Preprocessed {width}x{height} image: {transforms}")
        return PreprocessedImage(
            image=image,
            original_size=(width, height),
            processed_size=(image.shape[1], image.shape[0]),
            scale_factor=scale,
            applied_transforms=transforms,
        )

    def downscale(self, image: np.ndarray, max_size: int) -> Tuple[np.ndarray, float]:
        """Shrink image so neither dimension exceeds max_size"""
        height, width = image.shape[:2]
        if width <= max_size and height <= max_size:
            return image, 1.0

        scale = min(max_size / width, max_size / height)
        new_size = (max(1, int(width * scale)), max(1, int(height * scale)))
        logger.info(f"Downscaling {width}x{height} to {new_size[0]}x{new_size[1]}")
        return cv2.resize(image, new_size, interpolation=cv2.INTER_AREA), scale

    def grayscale(self, image: np.ndarray) -> np.ndarray:
        """Overwrite color channels in place with Y = 0.299R + 0.587G + 0.114B"""
        if image.ndim == 2:
            return image

        rgb = image[:, :, :3].astype(np.float64)
        luma = rgb @ np.array(LUMA_WEIGHTS)
        gray = np.clip(np.round(luma), 0, 255).astype(image.dtype)
        for channel in range(3):
            image[:, :, channel] = gray
        return image

    def threshold(self, image: np.ndarray, cutoff: int = 128) -> np.ndarray:
        """Binarize in place: above cutoff -> 255, otherwise 0"""
        if image.ndim == 2:
            image[:] = np.where(image > cutoff, 255, 0)
            return image

        binary = np.where(image[:, :, 0] > cutoff, 255, 0).astype(image.dtype)
        for channel in range(3):
            image[:, :, channel] = binary
        return image
