"""Box-average filter stage."""

from ..kernels import average_numpy, average_opencv
from .base import FilterStage


class AverageFilterStage(FilterStage):
    """Replaces each interior pixel with the truncated mean of its 3x3 neighborhood."""

    name = "average"
    kernels = {
        "numpy": average_numpy,
        "opencv": average_opencv,
    }
