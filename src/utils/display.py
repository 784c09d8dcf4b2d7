"""Display utilities for image visualization and debugging."""

import logging
import numpy as np
from typing import Dict, Tuple
import matplotlib.pyplot as plt

from codec import PGMImage


def show_image(image: PGMImage,
               title: str = "Image",
               figsize: Tuple[int, int] = (10, 8),
               save_path: str = None,
               show: bool = True) -> None:
    """Display an image using matplotlib.

    Args:
        image: PGMImage to display
        title: Title for the display window
        figsize: Figure size as (width, height)
        save_path: Optional path to save the displayed image
        show: Whether to open a window
    """
    fig = plt.figure(figsize=figsize)

    # Fixed range so a mostly-black edge map is not stretched
    plt.imshow(image.pixels, cmap='gray', vmin=0, vmax=255, interpolation='nearest')
    plt.title(title)
    plt.axis('off')

    if save_path:
        plt.savefig(save_path, bbox_inches='tight', dpi=150)
        logging.getLogger(__name__).info(f"Display saved to {save_path}")

    if show:
        plt.show()
    plt.close(fig)


def display_processing_stages(stage_results: Dict[str, PGMImage],
                              save_path: str = None,
                              show: bool = True) -> None:
    """Display all filter results side by side.

    Args:
        stage_results: Dictionary mapping stage names to PGMImages
        save_path: Optional path to save the figure
        show: Whether to open a window
    """
    stages = list(stage_results.keys())
    num_stages = len(stages)

    if num_stages == 0:
        return

    fig, axes = plt.subplots(1, num_stages, figsize=(5 * num_stages, 5), squeeze=False)
    fig.suptitle('Filter Results', fontsize=16)

    for ax, stage_name in zip(axes[0], stages):
        image = stage_results[stage_name]
        ax.imshow(image.pixels, cmap='gray', vmin=0, vmax=255, interpolation='nearest')
        ax.set_title(f"{stage_name.replace('_', ' ').title()}\n{image.width}x{image.height}")
        ax.axis('off')

    plt.tight_layout()

    if save_path:
        fig.savefig(save_path, bbox_inches='tight', dpi=150)
        logging.getLogger(__name__).info(f"Stage comparison saved to {save_path}")

    if show:
        plt.show()
    plt.close(fig)


def show_histogram(image: PGMImage,
                   title: str = "Image Histogram",
                   bins: int = 256,
                   show: bool = True) -> None:
    """Display histogram of image pixel values."""
    fig = plt.figure(figsize=(10, 6))

    pixel_values = np.asarray(image.flat_pixels)
    plt.hist(pixel_values, bins=bins, range=(0, 256), color='gray', alpha=0.7)

    plt.xlabel('Pixel Value')
    plt.ylabel('Frequency')
    plt.title(title)
    plt.grid(True, alpha=0.3)
    if show:
        plt.show()
    plt.close(fig)
