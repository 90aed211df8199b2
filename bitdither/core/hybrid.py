"""Screening/diffusion hybrids: simple even-toned and even-better screening.

Both run forward error diffusion with Floyd-Steinberg's right, down and
down-right weights (7/16, 5/16, 1/16) through two row buffers, and differ
only in how the cut-off threshold moves away from 128. Error lives in the
row buffers, never in the pixel data, and the buffers are local to each
call.
"""

from __future__ import annotations

import logging
from typing import Callable

import numpy as np

from bitdither.core.bitmap import Bitmap
from bitdither.core.grayscale import grayscale_plane
from bitdither.core.options import DitherOptions

logger = logging.getLogger(__name__)

BASE_THRESHOLD = 128
ERROR_BIAS = 0.25  # share of the incoming error added to the threshold
TM_RANGE = 20  # generated modulation offsets lie in [-20, 20]

RIGHT = 7 / 16
DOWN = 5 / 16
DOWN_RIGHT = 1 / 16

# (x, y, incoming error) -> threshold before clamping
ThresholdFn = Callable[[int, int, float], float]


def _clamp(value: float) -> float:
    return max(0.0, min(255.0, value))


def _diffuse_rows(plane: np.ndarray, threshold_at: ThresholdFn) -> np.ndarray:
    h, w = plane.shape
    rows = np.asarray(plane).tolist()
    out = np.zeros((h, w), dtype=np.int32)
    cur = [0.0] * w
    nxt = [0.0] * w

    for y in range(h):
        row = rows[y]
        has_next = y + 1 < h
        for x in range(w):
            value = row[x] + cur[x]
            threshold = _clamp(threshold_at(x, y, cur[x]))
            new = 0 if value < threshold else 255
            out[y, x] = new
            err = value - new

            if x + 1 < w:
                cur[x + 1] += err * RIGHT
            if has_next:
                nxt[x] += err * DOWN
                if x + 1 < w:
                    nxt[x + 1] += err * DOWN_RIGHT
        cur = nxt
        nxt = [0.0] * w

    return out


def simple_even_toned_plane(plane: np.ndarray) -> np.ndarray:
    """Threshold follows the error arriving at each pixel: 128 + err / 4."""
    return _diffuse_rows(
        plane, lambda x, y, err: BASE_THRESHOLD + err * ERROR_BIAS
    )


def generate_threshold_modulation(
    width: int, height: int, rng: np.random.Generator
) -> np.ndarray:
    """(height, width) integer offsets drawn uniformly from [-20, 20]."""
    return rng.integers(-TM_RANGE, TM_RANGE + 1, size=(height, width))


def even_better_plane(plane: np.ndarray, tm: np.ndarray) -> np.ndarray:
    """Threshold is 128 plus the tiled modulation offset for each pixel."""
    tm_rows = np.asarray(tm, dtype=np.float64).tolist()
    tm_height = len(tm_rows)
    tm_width = len(tm_rows[0])
    return _diffuse_rows(
        plane,
        lambda x, y, err: BASE_THRESHOLD + tm_rows[y % tm_height][x % tm_width],
    )


def apply_simple_even_toned(bitmap: Bitmap, options: DitherOptions) -> Bitmap:
    gray = grayscale_plane(bitmap)
    bitmap.write_gray(simple_even_toned_plane(gray))
    return bitmap


def apply_even_better(bitmap: Bitmap, options: DitherOptions) -> Bitmap:
    if options.levels != 2:
        logger.warning(
            "Even-better screening ignores levels=%d; output is two-level",
            options.levels,
        )
    gray = grayscale_plane(bitmap)
    tm = options.tm_matrix
    if tm is None:
        logger.debug(
            "Generating %dx%d threshold modulation matrix",
            options.tm_width,
            options.tm_height,
        )
        tm = generate_threshold_modulation(
            options.tm_width, options.tm_height, options.generator()
        )
    bitmap.write_gray(even_better_plane(gray, tm))
    return bitmap
