"""Generic error diffusion driver.

Pixels are visited in strict scan order and each one reads values already
adjusted by its predecessors, so a pass cannot be split across rows.
Intermediate values are stored as 8-bit integers after every update
(clamped, fraction truncated), matching what an 8-bit buffer would hold.
"""

from __future__ import annotations

import numpy as np

from bitdither.core.bitmap import Bitmap
from bitdither.core.grayscale import grayscale_plane
from bitdither.core.kernels import Kernel
from bitdither.core.options import DitherOptions

THRESHOLD = 128
BLACK = 0
WHITE = 255


def diffuse_plane(
    plane: np.ndarray, kernel: Kernel, serpentine: bool = False
) -> np.ndarray:
    """Binarize a (H, W) luminance plane by diffusing error through `kernel`.

    With serpentine scanning, odd rows run right-to-left with mirrored taps.

    Returns:
        New (H, W) int array of 0/255 values.
    """
    h, w = plane.shape
    rows: list[list[int]] = np.asarray(plane, dtype=np.int32).tolist()
    forward = kernel.factors()
    mirrored = kernel.factors(mirrored=True)

    for y in range(h):
        reverse = serpentine and y % 2 == 1
        taps = mirrored if reverse else forward
        xs = range(w - 1, -1, -1) if reverse else range(w)
        row = rows[y]
        for x in xs:
            old = row[x]
            new = BLACK if old < THRESHOLD else WHITE
            row[x] = new
            err = old - new
            if err == 0:
                continue
            for dx, dy, factor in taps:
                tx = x + dx
                ty = y + dy
                if tx < 0 or tx >= w or ty >= h:
                    continue
                value = rows[ty][tx] + err * factor
                if value < 0:
                    value = 0
                elif value > WHITE:
                    value = WHITE
                rows[ty][tx] = int(value)

    return np.array(rows, dtype=np.int32).reshape(h, w)


def apply_kernel(kernel: Kernel, bitmap: Bitmap, options: DitherOptions) -> Bitmap:
    """Grayscale then error-diffuse `bitmap` in place."""
    gray = grayscale_plane(bitmap)
    bitmap.write_gray(diffuse_plane(gray, kernel, options.serpentine))
    return bitmap
