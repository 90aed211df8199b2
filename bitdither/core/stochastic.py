"""Random-threshold and noise-injected quantizers.

Both draw from the generator supplied by DitherOptions; pass a seed or a
Generator to make output reproducible.
"""

from __future__ import annotations

import numpy as np

from bitdither.core.bitmap import Bitmap
from bitdither.core.grayscale import grayscale_plane
from bitdither.core.options import DitherOptions
from bitdither.core.threshold import binarize

NOISE_AMPLITUDE = 128  # noise spans [-64, 64)


def random_plane(plane: np.ndarray, rng: np.random.Generator) -> np.ndarray:
    """Compare each pixel against its own threshold drawn from [0, 255)."""
    thresholds = rng.random(plane.shape) * 255
    return binarize(plane, thresholds)


def ditherpunk_plane(plane: np.ndarray, rng: np.random.Generator) -> np.ndarray:
    """Add uniform noise in [-64, 64) then cut at 128."""
    noise = (rng.random(plane.shape) - 0.5) * NOISE_AMPLITUDE
    return binarize(plane + noise, 128)


def apply_random(bitmap: Bitmap, options: DitherOptions) -> Bitmap:
    gray = grayscale_plane(bitmap)
    bitmap.write_gray(random_plane(gray, options.generator()))
    return bitmap


def apply_ditherpunk(bitmap: Bitmap, options: DitherOptions) -> Bitmap:
    gray = grayscale_plane(bitmap)
    bitmap.write_gray(ditherpunk_plane(gray, options.generator()))
    return bitmap
