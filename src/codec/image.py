"""In-memory grayscale raster model."""

from dataclasses import dataclass

import numpy as np
from PIL import Image

from config.settings import SETTINGS


@dataclass(eq=False)
class PGMImage:
    """8-bit grayscale raster held as a (height, width) uint8 array."""

    width: int
    height: int
    pixels: np.ndarray
    max_intensity: int = 255

    def __post_init__(self):
        if self.width <= 0 or self.height <= 0:
            raise ValueError(f"Dimensions must be positive, got {self.width}x{self.height}")
        if self.max_intensity != SETTINGS["codec"].MAX_INTENSITY:
            raise ValueError(f"Only 8-bit depth is supported, got max intensity {self.max_intensity}")

        pixels = np.asarray(self.pixels, dtype=np.uint8)
        if pixels.size != self.width * self.height:
            raise ValueError(
                f"Pixel buffer holds {pixels.size} samples, "
                f"expected {self.width * self.height}"
            )
        self.pixels = pixels.reshape(self.height, self.width)

    @classmethod
    def from_array(cls, array: np.ndarray) -> "PGMImage":
        """Build an image from a 2-D array of 0-255 samples."""
        array = np.asarray(array)
        if array.ndim != 2:
            raise ValueError(f"Expected a 2-D array, got shape {array.shape}")
        if array.size and (array.min() < 0 or array.max() > 255):
            raise ValueError("Sample values must lie in 0-255")
        height, width = array.shape
        return cls(width=width, height=height, pixels=array.astype(np.uint8))

    @classmethod
    def from_pil(cls, image: Image.Image) -> "PGMImage":
        """Build an image from a Pillow image in mode "L"."""
        if image.mode != 'L':
            raise ValueError(f"Only grayscale (L) images are supported, got mode {image.mode}")
        return cls.from_array(np.array(image, dtype=np.uint8))

    def to_pil(self) -> Image.Image:
        """Return a Pillow "L" image sharing no memory with this one."""
        return Image.fromarray(self.pixels.copy())

    def copy(self) -> "PGMImage":
        return PGMImage(self.width, self.height, self.pixels.copy(), self.max_intensity)

    @property
    def size(self):
        return (self.width, self.height)

    @property
    def flat_pixels(self) -> np.ndarray:
        """Row-major sample sequence, index ``y * width + x``."""
        return self.pixels.reshape(-1)

    def tobytes(self) -> bytes:
        return self.pixels.tobytes()

    def __eq__(self, other):
        if not isinstance(other, PGMImage):
            return NotImplemented
        return (self.width == other.width and
                self.height == other.height and
                self.max_intensity == other.max_intensity and
                np.array_equal(self.pixels, other.pixels))
