"""Testing and validation utilities for pgmfilter."""

import os
import time
import logging
import numpy as np
from typing import List, Dict, Optional, Union
from PIL import Image, ImageDraw

from config.settings import SETTINGS
from codec import PGMImage, read_pgm, write_pgm


class TestImageLoader:
    """Utility for generating and loading synthetic PGM test images."""

    def __init__(self, test_dir: str = None, seed: int = 0):
        if test_dir is None:
            test_dir = SETTINGS["system"].TEST_IMAGES_DIR

        self.test_dir = test_dir
        self.rng = np.random.default_rng(seed)
        self.logger = logging.getLogger(__name__)

    def load_image(self, filename: str) -> PGMImage:
        """Load a test image by filename.

        Raises:
            FormatError, OSError: Propagated from the codec
        """
        filepath = os.path.join(self.test_dir, filename)
        image = read_pgm(filepath)
        self.logger.debug(f"Loaded test image: {filepath}")
        return image

    def list_test_images(self) -> List[str]:
        """List all available test images."""
        if not os.path.exists(self.test_dir):
            return []

        return sorted(name for name in os.listdir(self.test_dir)
                      if name.lower().endswith('.pgm'))

    def generate_test_images(self, overwrite: bool = False) -> List[str]:
        """Generate a set of test images for development and testing.

        Returns:
            Paths of the images written
        """
        self.logger.info("Generating test images...")
        os.makedirs(self.test_dir, exist_ok=True)

        test_specs = [
            ("gradient_horizontal.pgm", self.create_horizontal_gradient),
            ("checkerboard.pgm", self.create_checkerboard),
            ("edge_test.pgm", self.create_edge_test),
            ("noise_test.pgm", self.create_noise_test),
            ("uniform.pgm", self.create_uniform),
        ]

        written = []
        for filename, generator_func in test_specs:
            filepath = os.path.join(self.test_dir, filename)
            if os.path.exists(filepath) and not overwrite:
                continue
            write_pgm(generator_func(), filepath)
            written.append(filepath)
            self.logger.debug(f"Generated test image: {filepath}")

        return written

    def create_horizontal_gradient(self, width: int = 256, height: int = 128) -> PGMImage:
        """Create a horizontal gradient test image."""
        row = (np.arange(width) * 255 // max(width - 1, 1)).astype(np.uint8)
        return PGMImage.from_array(np.tile(row, (height, 1)))

    def create_checkerboard(self, size: int = 128, square_size: int = 16) -> PGMImage:
        """Create a checkerboard test pattern."""
        y, x = np.indices((size, size))
        board = ((x // square_size + y // square_size) % 2) * 255
        return PGMImage.from_array(board)

    def create_edge_test(self, width: int = 200, height: int = 150) -> PGMImage:
        """Create an image with straight, diagonal and curved edges."""
        image = Image.new('L', (width, height), 255)
        draw = ImageDraw.Draw(image)

        draw.rectangle([20, 20, 40, 130], fill=0)
        draw.rectangle([60, 20, 80, 130], fill=128)
        draw.rectangle([100, 30, 190, 45], fill=0)
        draw.polygon([(110, 70), (150, 110), (190, 70), (150, 90)], fill=0)
        draw.ellipse([100, 100, 140, 140], fill=64)

        return PGMImage.from_pil(image)

    def create_noise_test(self, width: int = 192, height: int = 128,
                          noise_fraction: float = 0.05) -> PGMImage:
        """Create a gradient corrupted with salt-and-pepper noise."""
        column = (np.arange(height) * 255 // max(height - 1, 1)).astype(np.uint8)
        pixels = np.tile(column[:, np.newaxis], (1, width))

        mask = self.rng.random(pixels.shape) < noise_fraction
        pixels[mask] = self.rng.choice(np.array([0, 255], dtype=np.uint8), size=int(mask.sum()))
        return PGMImage.from_array(pixels)

    def create_uniform(self, width: int = 64, height: int = 64, value: int = 128) -> PGMImage:
        return PGMImage.from_array(np.full((height, width), value, dtype=np.uint8))


class ImageAnalyzer:
    """Utility for analyzing filter results during testing."""

    def __init__(self):
        self.logger = logging.getLogger(__name__)

    def analyze_image(self, image: PGMImage) -> Dict[str, Union[int, float]]:
        """Analyze image properties and statistics."""
        pixels = image.pixels
        return {
            'width': image.width,
            'height': image.height,
            'size_bytes': pixels.size,
            'mean_brightness': float(np.mean(pixels)),
            'std_brightness': float(np.std(pixels)),
            'min_value': int(np.min(pixels)),
            'max_value': int(np.max(pixels)),
            'dynamic_range': int(np.max(pixels)) - int(np.min(pixels))
        }

    def border_is_zero(self, image: PGMImage) -> bool:
        """Check that the outer rows and columns are all zero."""
        pixels = image.pixels
        return not (pixels[0, :].any() or pixels[-1, :].any() or
                    pixels[:, 0].any() or pixels[:, -1].any())

    def compare_images(self, image1: PGMImage, image2: PGMImage) -> Dict[str, float]:
        """Compare two images of the same size.

        Returns:
            Dictionary with mse and psnr
        """
        if image1.size != image2.size:
            raise ValueError(f"Image sizes differ: {image1.size} vs {image2.size}")

        array1 = image1.pixels.astype(np.float64)
        array2 = image2.pixels.astype(np.float64)
        mse = float(np.mean((array1 - array2) ** 2))

        if mse == 0:
            psnr = float('inf')
        else:
            psnr = float(20 * np.log10(255.0 / np.sqrt(mse)))

        return {'mse': mse, 'psnr': psnr}


def validate_pipeline(pipeline, test_images: List[PGMImage]) -> Dict[str, Dict]:
    """Validate processing pipeline with test images.

    Each stage result must keep the input dimensions and have a zero border.

    Args:
        pipeline: ProcessingPipeline instance
        test_images: List of test PGMImages

    Returns:
        Dictionary with validation results for each test image
    """
    logger = logging.getLogger(__name__)
    analyzer = ImageAnalyzer()
    results = {}

    for i, test_image in enumerate(test_images):
        logger.info(f"Validating with test image {i+1}/{len(test_images)}")

        stage_results = pipeline.process_image(test_image)
        checks = {}
        for stage_name, result in stage_results.items():
            checks[stage_name] = {
                'same_size': result.size == test_image.size,
                'zero_border': analyzer.border_is_zero(result),
                'analysis': analyzer.analyze_image(result)
            }

        results[f"test_image_{i+1}"] = {
            'original': analyzer.analyze_image(test_image),
            'stages': checks,
            'passed': all(c['same_size'] and c['zero_border'] for c in checks.values()),
            'processing_times': pipeline.get_stage_timings()
        }

    return results


def benchmark_processing_pipeline(pipeline, test_image: PGMImage,
                                  iterations: int = 5,
                                  parallel: Optional[bool] = None) -> Dict[str, float]:
    """Benchmark processing pipeline performance.

    Returns:
        Dictionary with benchmark results
    """
    logger = logging.getLogger(__name__)
    times = []

    for i in range(iterations):
        start_time = time.time()
        pipeline.process_image(test_image, parallel=parallel)
        iteration_time = time.time() - start_time
        times.append(iteration_time)
        logger.debug(f"Iteration {i+1}: {iteration_time:.3f}s")

    return {
        'mean_time': float(np.mean(times)),
        'std_time': float(np.std(times)),
        'min_time': float(np.min(times)),
        'max_time': float(np.max(times)),
        'iterations': iterations
    }
