"""3x3 neighborhood kernels shared by the filter stages.

Every kernel takes a (height, width) uint8 array and returns the values for
the interior pixels only, shaped (height - 2, width - 2). ``with_zero_border``
places that interior back into a zero-filled frame of the original size; the
outer rows and columns are never computed.
"""

import numpy as np
import cv2

# Neighborhood order: NW, N, NE, W, C, E, SW, S, SE
SOBEL_X = np.array([-1, 0, 1, -2, 0, 2, -1, 0, 1], dtype=np.int32)
SOBEL_Y = np.array([-1, -2, -1, 0, 0, 0, 1, 2, 1], dtype=np.int32)

BACKENDS = ("numpy", "opencv")


def has_interior(pixels: np.ndarray) -> bool:
    height, width = pixels.shape
    return height >= 3 and width >= 3


def neighborhoods(pixels: np.ndarray) -> np.ndarray:
    """Stack the nine shifted views of the interior, shape (9, h - 2, w - 2)."""
    height, width = pixels.shape
    views = [
        pixels[dy:height - 2 + dy, dx:width - 2 + dx]
        for dy in range(3)
        for dx in range(3)
    ]
    return np.stack(views).astype(np.int32)


def with_zero_border(interior: np.ndarray, shape) -> np.ndarray:
    result = np.zeros(shape, dtype=np.uint8)
    if interior is not None:
        result[1:-1, 1:-1] = interior
    return result


# numpy reference implementations

def median_numpy(pixels: np.ndarray) -> np.ndarray:
    return np.sort(neighborhoods(pixels), axis=0)[4].astype(np.uint8)


def average_numpy(pixels: np.ndarray) -> np.ndarray:
    # Sums are non-negative, so floor division truncates toward zero
    return (neighborhoods(pixels).sum(axis=0) // 9).astype(np.uint8)


def sobel_gradients_numpy(pixels: np.ndarray):
    stack = neighborhoods(pixels)
    gx = np.tensordot(SOBEL_X, stack, axes=1)
    gy = np.tensordot(SOBEL_Y, stack, axes=1)
    return gx, gy


def gradient_magnitude(gx: np.ndarray, gy: np.ndarray) -> np.ndarray:
    """floor(sqrt(gx^2 + gy^2)) clamped to 255."""
    gx = gx.astype(np.float64)
    gy = gy.astype(np.float64)
    magnitude = np.floor(np.sqrt(gx * gx + gy * gy))
    return np.minimum(magnitude, 255).astype(np.uint8)


def sobel_numpy(pixels: np.ndarray) -> np.ndarray:
    return gradient_magnitude(*sobel_gradients_numpy(pixels))


# OpenCV implementations, border rows/columns are discarded

def median_opencv(pixels: np.ndarray) -> np.ndarray:
    blurred = cv2.medianBlur(np.ascontiguousarray(pixels), 3)
    return blurred[1:-1, 1:-1]


def average_opencv(pixels: np.ndarray) -> np.ndarray:
    box = np.ones((3, 3), dtype=np.float64)
    sums = cv2.filter2D(np.ascontiguousarray(pixels), cv2.CV_64F, box)
    sums = np.rint(sums[1:-1, 1:-1]).astype(np.int64)
    return (sums // 9).astype(np.uint8)


def sobel_opencv(pixels: np.ndarray) -> np.ndarray:
    img_cv = np.ascontiguousarray(pixels)
    sobelx = cv2.Sobel(img_cv, cv2.CV_64F, 1, 0, ksize=3)
    sobely = cv2.Sobel(img_cv, cv2.CV_64F, 0, 1, ksize=3)
    return gradient_magnitude(sobelx[1:-1, 1:-1], sobely[1:-1, 1:-1])
