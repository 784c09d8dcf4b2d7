"""Sobel edge detection stage."""

from typing import Tuple

import numpy as np

from codec import PGMImage
from ..kernels import sobel_gradients_numpy, sobel_numpy, sobel_opencv
from .base import FilterStage


class EdgeDetectionStage(FilterStage):
    """Computes the Sobel gradient magnitude of each interior pixel.

    Horizontal and vertical gradients use the kernels

        gx: -1  0  1      gy: -1 -2 -1
            -2  0  2           0  0  0
            -1  0  1           1  2  1

    and the output is ``min(floor(sqrt(gx^2 + gy^2)), 255)``.
    """

    name = "edge"
    kernels = {
        "numpy": sobel_numpy,
        "opencv": sobel_opencv,
    }

    def gradients(self, image: PGMImage) -> Tuple[np.ndarray, np.ndarray]:
        """Return the signed interior gradients (gx, gy) of an image.

        Args:
            image: Input PGMImage with at least 3 rows and columns

        Returns:
            Tuple of int arrays shaped (height - 2, width - 2)
        """
        if image.width < 3 or image.height < 3:
            raise ValueError(f"Image {image.width}x{image.height} has no interior pixels")
        return sobel_gradients_numpy(image.pixels)

    def calculate_edge_density(self, image: PGMImage, threshold: int = 128) -> float:
        """Calculate the fraction of pixels whose edge magnitude reaches a threshold.

        Args:
            image: Input PGMImage
            threshold: Magnitude at which a pixel counts as an edge

        Returns:
            Edge density as a float (0.0 to 1.0)
        """
        edge_map = self.process(image).pixels
        density = float(np.count_nonzero(edge_map >= threshold)) / edge_map.size

        self.logger.debug(f"Edge density: {density:.3f}")
        return density
