"""Utility modules for pgmfilter."""

from .display import show_image, display_processing_stages, show_histogram
from .testing import (TestImageLoader, ImageAnalyzer, validate_pipeline,
                      benchmark_processing_pipeline)

__all__ = [
    "show_image", "display_processing_stages", "show_histogram",
    "TestImageLoader", "ImageAnalyzer", "validate_pipeline",
    "benchmark_processing_pipeline"
]
