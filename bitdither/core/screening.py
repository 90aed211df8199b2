"""Ordered dithering with tiled rank matrices (Bayer, even-toned).

No error is carried between pixels: each pixel is compared against the
threshold of its matrix cell, so output depends only on position and
luminance.
"""

from __future__ import annotations

import math

import numpy as np

from bitdither.core.bitmap import Bitmap
from bitdither.core.grayscale import grayscale_plane
from bitdither.core.options import DitherOptions
from bitdither.core.threshold import binarize
from bitdither.utils.cache import MatrixCache

BAYER_4X4 = np.array(
    [
        [0, 8, 2, 10],
        [12, 4, 14, 6],
        [3, 11, 1, 9],
        [15, 7, 13, 5],
    ],
    dtype=np.int32,
)
BAYER_4X4.setflags(write=False)

_matrix_cache = MatrixCache(max_size=16)


def generate_even_toned_matrix(n: int) -> np.ndarray:
    """Rank every cell of an n x n block by distance from its center.

    Ties are broken by row, then column, so the result is a permutation
    of 0..n*n-1.
    """
    center = (n - 1) / 2
    cells = []
    for i in range(n):
        for j in range(n):
            dist = math.sqrt((i - center) ** 2 + (j - center) ** 2)
            cells.append((dist, i, j))
    cells.sort()

    matrix = np.zeros((n, n), dtype=np.int32)
    for rank, (_, i, j) in enumerate(cells):
        matrix[i, j] = rank
    return matrix


def even_toned_matrix(n: int) -> np.ndarray:
    """Cached, read-only even-toned matrix of size n."""
    return _matrix_cache.get_or_build("even-toned", n, generate_even_toned_matrix)


def tile_thresholds(matrix: np.ndarray, scale: float, height: int, width: int) -> np.ndarray:
    """Per-pixel thresholds (rank + 0.5) * scale, tiled over (height, width)."""
    rows, cols = matrix.shape
    ys = np.arange(height) % rows
    xs = np.arange(width) % cols
    return (matrix[np.ix_(ys, xs)] + 0.5) * scale


def screen_plane(plane: np.ndarray, matrix: np.ndarray, scale: float) -> np.ndarray:
    """Binarize a luminance plane against a tiled rank matrix."""
    h, w = plane.shape
    return binarize(plane, tile_thresholds(matrix, scale, h, w))


def apply_ordered_bayer(bitmap: Bitmap, options: DitherOptions) -> Bitmap:
    gray = grayscale_plane(bitmap)
    size = BAYER_4X4.shape[0]
    bitmap.write_gray(screen_plane(gray, BAYER_4X4, 255 / (size * size)))
    return bitmap


def apply_even_toned(bitmap: Bitmap, options: DitherOptions) -> Bitmap:
    gray = grayscale_plane(bitmap)
    n = options.matrix_size
    # Highest rank (n*n - 1) maps to 255.
    scale = 255 / (n * n - 1)
    bitmap.write_gray(screen_plane(gray, even_toned_matrix(n), scale))
    return bitmap
