"""Encode bitmaps to lossless image files with Pillow."""

from __future__ import annotations

from pathlib import Path

from PIL import Image

from bitdither.core.bitmap import Bitmap

OUTPUT_FORMATS = {
    ".png": "PNG",
    ".bmp": "BMP",
    ".tif": "TIFF",
    ".tiff": "TIFF",
}


def bitmap_to_image(bitmap: Bitmap) -> Image.Image:
    """Copy a bitmap into a new RGBA PIL image."""
    return Image.frombytes(
        "RGBA", (bitmap.width, bitmap.height), bitmap.pixels().tobytes()
    )


def save_bitmap(bitmap: Bitmap, output_path: Path) -> Path:
    """Save in the format given by the output file extension.

    Only lossless formats are accepted.
    """
    output_path = Path(output_path)
    suffix = output_path.suffix.lower()
    if suffix not in OUTPUT_FORMATS:
        raise ValueError(f"Unsupported output format: {suffix}")
    bitmap_to_image(bitmap).save(str(output_path), format=OUTPUT_FORMATS[suffix])
    return output_path
