"""Filter stages for the image pipeline."""

from .base import FilterStage
from .median import MedianFilterStage
from .average import AverageFilterStage
from .edges import EdgeDetectionStage

__all__ = ["FilterStage", "MedianFilterStage", "AverageFilterStage", "EdgeDetectionStage"]
