"""Luminance reduction shared by every quantizer."""

from __future__ import annotations

import numpy as np

from bitdither.core.bitmap import Bitmap

# ITU-R BT.601 luma weights
R_WEIGHT = 0.299
G_WEIGHT = 0.587
B_WEIGHT = 0.114


def luminance(pixels: np.ndarray) -> np.ndarray:
    """floor(0.299 R + 0.587 G + 0.114 B) for an (H, W, 3+) uint8 array."""
    rgb = pixels[:, :, :3].astype(np.float64)
    lum = R_WEIGHT * rgb[:, :, 0] + G_WEIGHT * rgb[:, :, 1] + B_WEIGHT * rgb[:, :, 2]
    return np.floor(lum).astype(np.int32)


def to_grayscale(bitmap: Bitmap) -> Bitmap:
    """Replace R, G and B with luminance in place. Alpha is left alone."""
    bitmap.write_gray(luminance(bitmap.pixels()))
    return bitmap


def grayscale_plane(bitmap: Bitmap) -> np.ndarray:
    """Convert in place and return the (H, W) luminance plane."""
    lum = luminance(bitmap.pixels())
    bitmap.write_gray(lum)
    return lum
