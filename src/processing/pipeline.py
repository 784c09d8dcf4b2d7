"""Image processing pipeline coordinator."""

import os
import time
import logging
from abc import abstractmethod
from concurrent.futures import ThreadPoolExecutor
from typing import List, Dict, Any, Optional, Protocol, Tuple

from config.settings import SETTINGS
from codec import PGMImage, read_pgm, write_pgm
from .stages import MedianFilterStage, AverageFilterStage, EdgeDetectionStage


class ProcessingStage(Protocol):
    """Protocol for processing stage implementations."""

    @abstractmethod
    def process(self, image: PGMImage, **kwargs) -> PGMImage:
        """Process an image through this stage."""
        ...

    @abstractmethod
    def get_stage_name(self) -> str:
        """Get the name of this processing stage."""
        ...


class ProcessingPipeline:
    """Decodes a raster once, runs every filter stage on it and writes the results."""

    def __init__(self):
        self.settings = SETTINGS["processing"]
        self.system_settings = SETTINGS["system"]
        self.logger = logging.getLogger(__name__)

        # Each stage reads the original image, never another stage's output
        self.stages: List[ProcessingStage] = [
            MedianFilterStage(),
            AverageFilterStage(),
            EdgeDetectionStage()
        ]

        self.stage_results: Dict[str, PGMImage] = {}
        self.stage_timings: Dict[str, float] = {}

    def process_image(self, image: PGMImage, parallel: Optional[bool] = None) -> Dict[str, PGMImage]:
        """Run every stage on the same input image.

        Args:
            image: Decoded input image, not modified
            parallel: Run stages on a thread pool, defaults to PARALLEL_FILTERS

        Returns:
            Dictionary mapping stage names to filtered images
        """
        if parallel is None:
            parallel = self.settings.PARALLEL_FILTERS

        self.stage_results.clear()
        self.stage_timings.clear()

        self.logger.info(f"Starting pipeline processing for image {image.size}")
        pipeline_start = time.time()

        if parallel:
            with ThreadPoolExecutor(max_workers=self.settings.MAX_WORKERS) as executor:
                futures = [executor.submit(self._run_stage, stage, image) for stage in self.stages]
                # result() re-raises the first stage failure
                outcomes = [future.result() for future in futures]
        else:
            outcomes = [self._run_stage(stage, image) for stage in self.stages]

        for stage_name, result, stage_time in outcomes:
            self.stage_results[stage_name] = result
            self.stage_timings[stage_name] = stage_time

            if self.system_settings.DISPLAY_PROCESSING_TIME:
                self.logger.info(f"{stage_name} completed in {stage_time:.3f}s")

        total_time = time.time() - pipeline_start
        self.logger.info(f"Pipeline processing completed in {total_time:.3f}s")

        return dict(self.stage_results)

    def _run_stage(self, stage: ProcessingStage, image: PGMImage) -> Tuple[str, PGMImage, float]:
        stage_name = stage.get_stage_name()
        self.logger.debug(f"Processing stage: {stage_name}")

        stage_start = time.time()
        result = stage.process(image)
        return stage_name, result, time.time() - stage_start

    def process_file(self,
                     input_path: str,
                     output_dir: str = None,
                     parallel: Optional[bool] = None,
                     save_previews: bool = None) -> Dict[str, str]:
        """Decode a PGM file, filter it and write one PGM per stage.

        Args:
            input_path: Path of the P5 input file
            output_dir: Directory for the results, defaults to OUTPUT_DIR
            parallel: Run stages on a thread pool
            save_previews: Also save PNG previews, defaults to SAVE_INTERMEDIATE_IMAGES

        Returns:
            Dictionary mapping stage names to written file paths
        """
        if output_dir is None:
            output_dir = self.system_settings.OUTPUT_DIR
        if save_previews is None:
            save_previews = self.system_settings.SAVE_INTERMEDIATE_IMAGES

        image = read_pgm(input_path)
        results = self.process_image(image, parallel=parallel)

        os.makedirs(output_dir, exist_ok=True)
        written = {}
        for stage_name, result in results.items():
            filepath = os.path.join(output_dir, self.get_output_filename(stage_name))
            write_pgm(result, filepath)
            written[stage_name] = filepath
            self.logger.info(f"Saved {stage_name} result: {filepath}")

            if save_previews:
                self._save_preview(result, stage_name, output_dir)

        return written

    def get_output_filename(self, stage_name: str) -> str:
        """Get the output file name for a stage."""
        return self.system_settings.OUTPUT_FILENAMES.get(stage_name, f"{stage_name}.pgm")

    def _save_preview(self, image: PGMImage, stage_name: str, output_dir: str) -> None:
        """Save a PNG preview of a stage result."""
        preview_dir = os.path.join(output_dir, self.system_settings.PREVIEW_DIR)
        os.makedirs(preview_dir, exist_ok=True)

        filepath = os.path.join(preview_dir, f"{stage_name}.png")
        image.to_pil().save(filepath)
        self.logger.debug(f"Saved preview: {filepath}")

    def get_stage_result(self, stage_name: str) -> Optional[PGMImage]:
        """Get the result of a specific processing stage.

        Args:
            stage_name: Name of the stage to retrieve

        Returns:
            PGMImage from that stage, or None if not found
        """
        return self.stage_results.get(stage_name)

    def get_all_stage_results(self) -> Dict[str, PGMImage]:
        """Get results from all processing stages."""
        return self.stage_results.copy()

    def get_stage_timings(self) -> Dict[str, float]:
        """Get timing information for all stages.

        Returns:
            Dictionary mapping stage names to execution times in seconds
        """
        return self.stage_timings.copy()

    def configure_stage(self, stage_name: str, **kwargs) -> bool:
        """Configure a specific processing stage.

        Args:
            stage_name: Name of the stage to configure
            **kwargs: Stage-specific configuration parameters

        Returns:
            True if stage was configured successfully
        """
        for stage in self.stages:
            if stage.get_stage_name() == stage_name:
                if hasattr(stage, 'configure'):
                    stage.configure(**kwargs)
                    self.logger.info(f"Configured stage {stage_name}")
                    return True
                else:
                    self.logger.warning(f"Stage {stage_name} does not support configuration")
                    return False

        self.logger.error(f"Stage {stage_name} not found")
        return False

    def get_pipeline_info(self) -> Dict[str, Any]:
        """Get information about the processing pipeline."""
        return {
            "stages": [stage.get_stage_name() for stage in self.stages],
            "settings": {
                "filter_backend": self.settings.FILTER_BACKEND,
                "parallel_filters": self.settings.PARALLEL_FILTERS,
                "max_workers": self.settings.MAX_WORKERS,
                "output_dir": self.system_settings.OUTPUT_DIR,
                "output_files": dict(self.system_settings.OUTPUT_FILENAMES)
            },
            "last_processing_times": self.stage_timings
        }
