"""Decode image files into RGBA bitmaps.

Decoding happens here, outside the engine: the engine itself only ever
sees an already-decoded buffer. Animated inputs contribute their first
frame.
"""

from __future__ import annotations

from pathlib import Path

from PIL import Image

from bitdither.core.bitmap import Bitmap

INPUT_SUFFIXES = (".png", ".gif", ".bmp", ".jpg", ".jpeg", ".tif", ".tiff", ".webp")


def detect_format(path: Path) -> str:
    """Detect image format from file extension."""
    suffix = path.suffix.lower()
    if suffix not in INPUT_SUFFIXES:
        raise ValueError(f"Unsupported format: {suffix}")
    if suffix == ".jpeg":
        return "jpg"
    if suffix == ".tiff":
        return "tif"
    return suffix.lstrip(".")


def bitmap_from_image(img: Image.Image) -> Bitmap:
    """Copy a PIL image into a new RGBA bytearray-backed bitmap."""
    rgba = img.convert("RGBA")
    return Bitmap(rgba.width, rgba.height, bytearray(rgba.tobytes()))


def load_bitmap(path: str | Path) -> Bitmap:
    """Open an image file and decode it into a Bitmap.

    Raises:
        FileNotFoundError: the path does not exist.
        ValueError: the extension is not a supported image format.
    """
    local_path = Path(path)
    if not local_path.exists():
        raise FileNotFoundError(f"File not found: {local_path}")
    detect_format(local_path)

    with Image.open(local_path) as img:
        img.seek(0)
        return bitmap_from_image(img)
