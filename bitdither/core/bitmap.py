"""RGBA pixel buffer shared between the caller and the engine.

The engine borrows the caller's buffer for one call and writes into it
through a numpy view; it never reallocates or reshapes the buffer itself.
Alpha is pass-through: no algorithm writes channel 3.
"""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from bitdither.core.errors import InvalidBitmap

CHANNELS = 4  # R, G, B, A


@dataclass
class Bitmap:
    """Decoded image: interleaved 8-bit RGBA samples, row-major."""

    width: int
    height: int
    data: bytearray | memoryview | np.ndarray

    def __post_init__(self) -> None:
        if self.width <= 0 or self.height <= 0:
            raise InvalidBitmap(
                f"Bitmap dimensions must be positive, got {self.width}x{self.height}"
            )
        expected = self.width * self.height * CHANNELS
        flat = self._flat()
        if flat.size != expected:
            raise InvalidBitmap(
                f"Buffer holds {flat.size} samples, expected {expected} "
                f"for {self.width}x{self.height} RGBA"
            )
        if not flat.flags.writeable:
            raise InvalidBitmap("Buffer is read-only")

    def _flat(self) -> np.ndarray:
        if isinstance(self.data, np.ndarray):
            if self.data.dtype != np.uint8:
                raise InvalidBitmap(f"Buffer dtype must be uint8, got {self.data.dtype}")
            if not self.data.flags.c_contiguous:
                raise InvalidBitmap("Buffer must be C-contiguous")
            return self.data.reshape(-1)
        return np.frombuffer(self.data, dtype=np.uint8)

    def pixels(self) -> np.ndarray:
        """Writable (height, width, 4) view onto the caller's buffer."""
        return self._flat().reshape(self.height, self.width, CHANNELS)

    def gray_plane(self) -> np.ndarray:
        """Copy of the red channel as an int array (equals luminance once grayscale)."""
        return self.pixels()[:, :, 0].astype(np.int32)

    def write_gray(self, plane: np.ndarray) -> None:
        """Store a (height, width) plane into R, G and B; alpha untouched."""
        self.pixels()[:, :, :3] = np.asarray(plane, dtype=np.uint8)[:, :, np.newaxis]

    def alpha(self) -> np.ndarray:
        return self.pixels()[:, :, 3].copy()

    def copy(self) -> Bitmap:
        """Independent bitmap backed by a fresh bytearray."""
        return Bitmap(self.width, self.height, bytearray(self.pixels().tobytes()))

    @classmethod
    def blank(
        cls,
        width: int,
        height: int,
        color: tuple[int, int, int, int] = (255, 255, 255, 255),
    ) -> Bitmap:
        """Solid-color bitmap, mostly useful for tests and previews."""
        return cls(width, height, bytearray(bytes(color) * (width * height)))

    @classmethod
    def from_array(cls, rgba: np.ndarray) -> Bitmap:
        """Wrap an existing (height, width, 4) uint8 array without copying."""
        if rgba.ndim != 3 or rgba.shape[2] != CHANNELS:
            raise InvalidBitmap(f"Expected shape (height, width, 4), got {rgba.shape}")
        height, width = rgba.shape[:2]
        return cls(width, height, rgba)
