"""Median filter stage."""

from ..kernels import median_numpy, median_opencv
from .base import FilterStage


class MedianFilterStage(FilterStage):
    """Replaces each interior pixel with the median of its 3x3 neighborhood.

    The nine samples are sorted ascending and the fifth smallest (index 4) is
    kept, which suppresses salt-and-pepper noise without blurring edges as much
    as the box average does.
    """

    name = "median"
    kernels = {
        "numpy": median_numpy,
        "opencv": median_opencv,
    }
