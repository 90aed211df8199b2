"""Render one source image with every built-in algorithm."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable

from bitdither.core.engine import dither
from bitdither.core.errors import DitherError
from bitdither.core.options import Algorithm, DitherOptions
from bitdither.core.reader import load_bitmap
from bitdither.core.writer import save_bitmap

logger = logging.getLogger(__name__)


@dataclass
class GalleryResult:
    written: dict[Algorithm, Path] = field(default_factory=dict)
    failed: dict[Algorithm, str] = field(default_factory=dict)


def gallery_algorithms() -> list[Algorithm]:
    """Every algorithm that needs no caller-supplied code."""
    return [a for a in Algorithm if a != Algorithm.CUSTOM]


def render_gallery(
    source: str | Path,
    output_dir: Path,
    options: DitherOptions | None = None,
    on_progress: Callable[[int, int], None] | None = None,
) -> GalleryResult:
    """Dither a fresh copy of `source` with each algorithm.

    Writes <ALGORITHM>.png into output_dir, creating it if needed. An
    algorithm that rejects the options, or whose file cannot be written,
    is recorded in `failed` and the remaining algorithms still run.

    Args:
        source: input image path.
        output_dir: directory for the rendered files.
        options: shared options for every algorithm.
        on_progress: callback(current, total) after each algorithm.

    Returns:
        GalleryResult with the files written and the per-algorithm errors.
    """
    original = load_bitmap(source)
    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)
    options = options or DitherOptions()

    algorithms = gallery_algorithms()
    result = GalleryResult()
    for i, algorithm in enumerate(algorithms):
        try:
            bitmap = dither(original.copy(), algorithm, options)
            path = save_bitmap(bitmap, output_dir / f"{algorithm.name}.png")
        except (DitherError, OSError) as e:
            logger.warning("Error generating %s: %s", algorithm.name, e)
            result.failed[algorithm] = str(e)
        else:
            logger.debug("Saved %s", path)
            result.written[algorithm] = path
        if on_progress:
            on_progress(i + 1, len(algorithms))
    return result
