"""Configuration settings for the pgmfilter project."""

from typing import Dict, Any
import os


class ProcessingSettings:
    """Filter engine settings."""

    # Kernel implementation: "numpy" (reference) or "opencv"
    FILTER_BACKEND: str = "numpy"

    # Run the three filters on a thread pool
    PARALLEL_FILTERS: bool = True
    MAX_WORKERS: int = 3


class CodecSettings:
    """Raster codec settings."""

    MAGIC: bytes = b"P5"
    MAX_INTENSITY: int = 255  # only 8-bit depth is supported

    # Upper bound on a header token, guards against reading a whole binary file
    MAX_TOKEN_LENGTH: int = 32

    # Pixel body is read in chunks of this many bytes
    READ_CHUNK_SIZE: int = 1 << 20


class SystemSettings:
    """System and debugging settings."""

    # File paths
    OUTPUT_DIR: str = "."
    PREVIEW_DIR: str = "previews"
    TEST_IMAGES_DIR: str = "test_images"

    # Output artifact per filter stage
    OUTPUT_FILENAMES: Dict[str, str] = {
        "median": "median.pgm",
        "average": "average.pgm",
        "edge": "edge.pgm",
    }

    # Debugging
    DEBUG_MODE: bool = False
    SAVE_INTERMEDIATE_IMAGES: bool = False
    DISPLAY_PROCESSING_TIME: bool = True

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: str = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


# Environment-specific overrides
def load_environment_settings() -> Dict[str, Any]:
    """Load settings from environment variables."""
    env_settings = {}

    if os.getenv("PGMFILTER_BACKEND"):
        env_settings["FILTER_BACKEND"] = os.getenv("PGMFILTER_BACKEND").lower()

    if os.getenv("PGMFILTER_OUTPUT_DIR"):
        env_settings["OUTPUT_DIR"] = os.getenv("PGMFILTER_OUTPUT_DIR")

    if os.getenv("PGMFILTER_SEQUENTIAL"):
        env_settings["PARALLEL_FILTERS"] = os.getenv("PGMFILTER_SEQUENTIAL").lower() != "true"

    # Debug mode
    if os.getenv("DEBUG_MODE"):
        env_settings["DEBUG_MODE"] = os.getenv("DEBUG_MODE").lower() == "true"

    return env_settings


def apply_environment_settings(settings: Dict[str, Any]) -> None:
    """Copy environment overrides onto the settings objects that own them."""
    for key, value in settings["env"].items():
        for section in ("processing", "codec", "system"):
            if hasattr(settings[section], key):
                setattr(settings[section], key, value)


# Global settings instance
SETTINGS = {
    "processing": ProcessingSettings(),
    "codec": CodecSettings(),
    "system": SystemSettings(),
    "env": load_environment_settings()
}

apply_environment_settings(SETTINGS)
