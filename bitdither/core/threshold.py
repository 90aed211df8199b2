"""Global median threshold.

Unlike the diffusion kernels, which always cut at 128, this cuts at the
image's own median luminance.
"""

from __future__ import annotations

import numpy as np

from bitdither.core.bitmap import Bitmap
from bitdither.core.grayscale import grayscale_plane
from bitdither.core.options import DitherOptions


def median_luminance(plane: np.ndarray) -> float:
    """Middle value, or mean of the two middle values for an even count."""
    values = np.sort(np.asarray(plane).ravel())
    n = values.size
    mid = n // 2
    if n % 2 == 1:
        return float(values[mid])
    return (float(values[mid - 1]) + float(values[mid])) / 2


def binarize(plane: np.ndarray, threshold: float | np.ndarray) -> np.ndarray:
    """0 where plane < threshold, else 255. Threshold may be a per-pixel array."""
    return np.where(plane < threshold, 0, 255).astype(np.int32)


def apply_median_threshold(bitmap: Bitmap, options: DitherOptions) -> Bitmap:
    gray = grayscale_plane(bitmap)
    bitmap.write_gray(binarize(gray, median_luminance(gray)))
    return bitmap
