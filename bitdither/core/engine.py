"""Algorithm dispatcher.

`dither()` is the single entry point: it validates the configuration,
then hands the caller's bitmap to exactly one quantizer, which mutates it
in place and returns it.

The bitmap is borrowed exclusively for the duration of the call. Built-in
algorithms cannot fail once they start writing; a CUSTOM transform may,
and then the buffer is left in whatever state it reached.
"""

from __future__ import annotations

import logging
from functools import partial
from typing import Callable

import numpy as np

from bitdither.core.bitmap import Bitmap
from bitdither.core.diffusion import apply_kernel
from bitdither.core.errors import InvalidOptions, MissingCustomHandler
from bitdither.core.grayscale import to_grayscale
from bitdither.core.hybrid import apply_even_better, apply_simple_even_toned
from bitdither.core.kernels import KERNELS
from bitdither.core.options import Algorithm, DitherOptions
from bitdither.core.screening import apply_even_toned, apply_ordered_bayer
from bitdither.core.stochastic import apply_ditherpunk, apply_random
from bitdither.core.threshold import apply_median_threshold

logger = logging.getLogger(__name__)

Handler = Callable[[Bitmap, DitherOptions], Bitmap]


def _grayscale_only(bitmap: Bitmap, options: DitherOptions) -> Bitmap:
    return to_grayscale(bitmap)


def _custom(bitmap: Bitmap, options: DitherOptions) -> Bitmap:
    return options.custom(bitmap, options)


HANDLERS: dict[Algorithm, Handler] = {
    **{algorithm: partial(apply_kernel, kernel) for algorithm, kernel in KERNELS.items()},
    Algorithm.THRESHOLD: apply_median_threshold,
    Algorithm.GRAYSCALE: _grayscale_only,
    Algorithm.ORDERED_BAYER: apply_ordered_bayer,
    Algorithm.RANDOM: apply_random,
    Algorithm.DITHERPUNK: apply_ditherpunk,
    Algorithm.EVEN_TONED_SCREENING: apply_even_toned,
    Algorithm.SIMPLE_EVEN_TONED_SCREENING: apply_simple_even_toned,
    Algorithm.EVEN_BETTER_SCREENING: apply_even_better,
    Algorithm.CUSTOM: _custom,
}


def validate_options(algorithm: Algorithm, options: DitherOptions) -> None:
    """Reject configuration the selected algorithm cannot run with.

    Raises:
        MissingCustomHandler: CUSTOM without a callable transform.
        InvalidOptions: a size or level the algorithm cannot use.
    """
    if algorithm == Algorithm.CUSTOM:
        if not callable(options.custom):
            raise MissingCustomHandler()
    elif algorithm == Algorithm.EVEN_TONED_SCREENING:
        if options.matrix_size < 2:
            raise InvalidOptions(
                f"matrix_size must be at least 2, got {options.matrix_size}"
            )
    elif algorithm == Algorithm.EVEN_BETTER_SCREENING:
        if options.levels < 2:
            raise InvalidOptions(f"levels must be at least 2, got {options.levels}")
        if options.tm_matrix is None:
            if options.tm_width <= 0 or options.tm_height <= 0:
                raise InvalidOptions(
                    "Threshold modulation size must be positive, got "
                    f"{options.tm_width}x{options.tm_height}"
                )
        else:
            tm = np.asarray(options.tm_matrix)
            if tm.ndim != 2 or tm.size == 0:
                raise InvalidOptions(
                    f"tm_matrix must be a non-empty 2D array, got shape {tm.shape}"
                )


def dither(
    bitmap: Bitmap,
    algorithm: Algorithm | str,
    options: DitherOptions | None = None,
) -> Bitmap:
    """Apply `algorithm` to `bitmap` in place and return it.

    Args:
        bitmap: caller-owned RGBA buffer; mutated in place.
        algorithm: Algorithm member, or its name/value as a string.
        options: algorithm options; defaults apply when omitted.

    Returns:
        The same bitmap (or, for CUSTOM, whatever the transform returns).

    Raises:
        UnknownAlgorithm: unrecognized tag.
        MissingCustomHandler: CUSTOM without options.custom.
        InvalidOptions: configuration the algorithm cannot run with.
    """
    selected = Algorithm.parse(algorithm)
    options = options or DitherOptions()
    validate_options(selected, options)
    logger.debug(
        "Dithering %dx%d bitmap with %s", bitmap.width, bitmap.height, selected.name
    )
    return HANDLERS[selected](bitmap, options)
