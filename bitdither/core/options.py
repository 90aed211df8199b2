"""Algorithm selector and per-call configuration."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Callable

import numpy as np

from bitdither.core.errors import UnknownAlgorithm

if TYPE_CHECKING:
    from bitdither.core.bitmap import Bitmap


class Algorithm(str, Enum):
    FLOYD_STEINBERG = "floyd-steinberg"
    ATKINSON = "atkinson"
    BURKES = "burkes"
    DIFFUSION_ROW = "diffusion-row"
    DIFFUSION_COLUMN = "diffusion-column"
    DIFFUSION_2D = "diffusion-2d"
    JARVIS_JUDICE_NINKE = "jarvis-judice-ninke"
    SIERRA2 = "sierra2"
    STUCKI = "stucki"
    THRESHOLD = "threshold"
    GRAYSCALE = "grayscale"
    ORDERED_BAYER = "ordered-bayer"
    RANDOM = "random"
    DITHERPUNK = "ditherpunk"
    EVEN_TONED_SCREENING = "even-toned-screening"
    SIMPLE_EVEN_TONED_SCREENING = "simple-even-toned-screening"
    EVEN_BETTER_SCREENING = "even-better-screening"
    CUSTOM = "custom"

    @classmethod
    def parse(cls, name: Algorithm | str) -> Algorithm:
        """Resolve a member from itself, its name or its value.

        Case-insensitive; "-" and "_" are interchangeable.
        """
        if isinstance(name, cls):
            return name
        if not isinstance(name, str):
            raise UnknownAlgorithm(name, [a.name for a in cls])
        key = name.strip().upper().replace("-", "_")
        if key not in cls.__members__:
            raise UnknownAlgorithm(name, [a.name for a in cls])
        return cls.__members__[key]

    @property
    def family(self) -> str:
        return ALGORITHM_FAMILIES[self]

    @property
    def is_stochastic(self) -> bool:
        return self in (Algorithm.RANDOM, Algorithm.DITHERPUNK)


ALGORITHM_FAMILIES: dict[Algorithm, str] = {
    Algorithm.FLOYD_STEINBERG: "error diffusion",
    Algorithm.ATKINSON: "error diffusion",
    Algorithm.BURKES: "error diffusion",
    Algorithm.DIFFUSION_ROW: "error diffusion",
    Algorithm.DIFFUSION_COLUMN: "error diffusion",
    Algorithm.DIFFUSION_2D: "error diffusion",
    Algorithm.JARVIS_JUDICE_NINKE: "error diffusion",
    Algorithm.SIERRA2: "error diffusion",
    Algorithm.STUCKI: "error diffusion",
    Algorithm.THRESHOLD: "adaptive threshold",
    Algorithm.GRAYSCALE: "conversion",
    Algorithm.ORDERED_BAYER: "ordered",
    Algorithm.RANDOM: "stochastic",
    Algorithm.DITHERPUNK: "stochastic",
    Algorithm.EVEN_TONED_SCREENING: "ordered",
    Algorithm.SIMPLE_EVEN_TONED_SCREENING: "hybrid",
    Algorithm.EVEN_BETTER_SCREENING: "hybrid",
    Algorithm.CUSTOM: "custom",
}

ALGORITHM_DESCRIPTIONS: dict[Algorithm, str] = {
    Algorithm.FLOYD_STEINBERG: "Classic 4-tap kernel, divisor 16.",
    Algorithm.ATKINSON: "Diffuses 6/8 of the error; lighter, higher contrast.",
    Algorithm.BURKES: "Two-row 7-tap kernel, divisor 32.",
    Algorithm.DIFFUSION_ROW: "Error pushed two pixels to the right only.",
    Algorithm.DIFFUSION_COLUMN: "Error pushed two pixels down only.",
    Algorithm.DIFFUSION_2D: "Small 4-tap kernel, divisor 10.",
    Algorithm.JARVIS_JUDICE_NINKE: "Three-row 12-tap kernel, divisor 48.",
    Algorithm.SIERRA2: "Three-row 10-tap kernel, divisor 12.",
    Algorithm.STUCKI: "Three-row 12-tap kernel, divisor 42.",
    Algorithm.THRESHOLD: "Binarize against the image's median luminance.",
    Algorithm.GRAYSCALE: "Luminance only, no quantization.",
    Algorithm.ORDERED_BAYER: "Tiled 4x4 Bayer threshold matrix.",
    Algorithm.RANDOM: "Uniform random threshold per pixel.",
    Algorithm.DITHERPUNK: "Fixed threshold with +/-64 noise added.",
    Algorithm.EVEN_TONED_SCREENING: "Tiled distance-ranked NxN matrix.",
    Algorithm.SIMPLE_EVEN_TONED_SCREENING: "Diffusion with error-biased threshold.",
    Algorithm.EVEN_BETTER_SCREENING: "Diffusion with a threshold modulation matrix.",
    Algorithm.CUSTOM: "Caller-supplied transform.",
}

CustomTransform = Callable[["Bitmap", "DitherOptions"], "Bitmap"]


@dataclass(frozen=True)
class DitherOptions:
    """Algorithm-specific options. Fields an algorithm does not use are ignored."""

    serpentine: bool = False  # error diffusion kernels only
    matrix_size: int = 8  # EVEN_TONED_SCREENING
    levels: int = 2  # EVEN_BETTER_SCREENING; output stays two-level
    tm_width: int = 256  # generated TM matrix size
    tm_height: int = 256
    tm_matrix: np.ndarray | None = None  # shape (rows, cols); overrides tm_width/height
    custom: CustomTransform | None = None
    seed: int | None = None
    rng: np.random.Generator | None = None  # takes precedence over seed

    def generator(self) -> np.random.Generator:
        """Random source for the stochastic algorithms."""
        if self.rng is not None:
            return self.rng
        return np.random.default_rng(self.seed)
