"""Common plumbing for the 3x3 filter stages."""

import logging
from typing import Callable, Dict

import numpy as np

from config.settings import SETTINGS
from codec import PGMImage
from ..kernels import BACKENDS, has_interior, with_zero_border


class FilterStage:
    """Runs a 3x3 kernel over the interior of an image and zero-fills the border.

    Subclasses provide ``name`` and ``kernels``, a mapping of backend name to
    a function returning the interior values.
    """

    name: str = ""
    kernels: Dict[str, Callable[[np.ndarray], np.ndarray]] = {}

    def __init__(self):
        self.settings = SETTINGS["processing"]
        self.logger = logging.getLogger(self.__class__.__module__)
        self.backend = None

    def process(self, image: PGMImage, **kwargs) -> PGMImage:
        """Apply the filter to an image.

        Args:
            image: Input PGMImage, left untouched
            **kwargs: Optional override parameters (``backend``)

        Returns:
            New PGMImage of the same dimensions
        """
        backend = self._resolve_backend(kwargs.get("backend"))

        if has_interior(image.pixels):
            interior = self.kernels[backend](image.pixels)
        else:
            interior = None
            self.logger.debug(f"{image.width}x{image.height} image has no interior pixels")

        result = with_zero_border(interior, image.pixels.shape)
        self.logger.debug(f"Applied {self.name} filter using {backend} backend")
        return PGMImage(image.width, image.height, result, image.max_intensity)

    def _resolve_backend(self, requested=None) -> str:
        backend = requested or self.backend or self.settings.FILTER_BACKEND
        if backend not in BACKENDS:
            self.logger.warning(f"Unknown filter backend: {backend}, using numpy")
            backend = "numpy"
        return backend

    def get_stage_name(self) -> str:
        """Get the name of this processing stage."""
        return self.name

    def configure(self, **kwargs) -> None:
        """Configure this stage with new parameters."""
        if "backend" in kwargs:
            self.backend = kwargs["backend"]
