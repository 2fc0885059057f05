"""
Edge Detector - Sobel gradient magnitude over a grayscale buffer
"""
import logging

import cv2
import numpy as np

logger = logging.getLogger(__name__)

SOBEL_X = np.array([[-1, 0, 1], [-2, 0, 2], [-1, 0, 1]], dtype=np.float64)
SOBEL_Y = np.array([[-1, -2, -1], [0, 0, 0], [1, 2, 1]], dtype=np.float64)


class EdgeDetector:
    """
    Computes an edge-intensity map with the 3x3 Sobel kernels.

    Only interior pixels are evaluated; the one-pixel border of the output
    stays zero. Magnitudes are clamped to 255.
    """

    def __init__(self, kernel_x: np.ndarray = SOBEL_X, kernel_y: np.ndarray = SOBEL_Y):
        self.kernel_x = kernel_x
        self.kernel_y = kernel_y

    def detect(self, gray: np.ndarray) -> np.ndarray:
        """
        Args:
            gray: H x W luminance, or H x W x C buffer with R = G = B

        Returns:
            H x W uint8 edge map
        """
        if gray.ndim == 3:
            gray = gray[:, :, 0]

        height, width = gray.shape
        edges = np.zeros((height, width), dtype=np.uint8)
        if height < 3 or width < 3:
            return edges

        # filter2D correlates, which matches indexing the kernel by neighbour offset
        src = gray.astype(np.float64)
        gx = cv2.filter2D(src, cv2.CV_64F, self.kernel_x)
        gy = cv2.filter2D(src, cv2.CV_64F, self.kernel_y)

        magnitude = np.minimum(np.sqrt(gx * gx + gy * gy), 255.0)
        edges[1:-1, 1:-1] = np.rint(magnitude[1:-1, 1:-1]).astype(np.uint8)

        logger.debug(f"Edge map {width}x{height}: {int(np.count_nonzero(edges))} non-zero pixels")
        return edges
