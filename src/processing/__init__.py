"""Image processing module for pgmfilter."""

from .pipeline import ProcessingPipeline

__all__ = ["ProcessingPipeline"]
