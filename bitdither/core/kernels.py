"""Error diffusion kernels.

Each tap is (dx, dy, weight); a pixel's quantization error is spread to
(x + dx, y + dy) in proportion weight / divisor. Most tables sum to their
divisor; Atkinson (6/8) and Sierra2 (20/12) do not and are kept as published.
"""

from __future__ import annotations

from dataclasses import dataclass

from bitdither.core.options import Algorithm


@dataclass(frozen=True)
class Kernel:
    name: str
    taps: tuple[tuple[int, int, int], ...]
    divisor: int

    def __post_init__(self) -> None:
        for dx, dy, _ in self.taps:
            if dy < 0 or (dy == 0 and dx <= 0):
                raise ValueError(
                    f"Kernel {self.name}: tap ({dx}, {dy}) points at an already visited pixel"
                )

    @property
    def weight_sum(self) -> int:
        return sum(weight for _, _, weight in self.taps)

    @property
    def conserves_energy(self) -> bool:
        """True when the whole quantization error is passed on."""
        return self.weight_sum == self.divisor

    def factors(self, mirrored: bool = False) -> list[tuple[int, int, float]]:
        """Taps as (dx, dy, weight / divisor); dx negated when mirrored."""
        sign = -1 if mirrored else 1
        return [(sign * dx, dy, weight / self.divisor) for dx, dy, weight in self.taps]


FLOYD_STEINBERG = Kernel(
    "floyd-steinberg",
    ((1, 0, 7), (-1, 1, 3), (0, 1, 5), (1, 1, 1)),
    16,
)

# Passes on 6/8 of the error.
ATKINSON = Kernel(
    "atkinson",
    ((1, 0, 1), (2, 0, 1), (-1, 1, 1), (0, 1, 1), (1, 1, 1), (0, 2, 1)),
    8,
)

BURKES = Kernel(
    "burkes",
    ((1, 0, 8), (2, 0, 4), (-2, 1, 2), (-1, 1, 4), (0, 1, 8), (1, 1, 4), (2, 1, 2)),
    32,
)

DIFFUSION_ROW = Kernel("diffusion-row", ((1, 0, 1), (2, 0, 1)), 2)

DIFFUSION_COLUMN = Kernel("diffusion-column", ((0, 1, 1), (0, 2, 1)), 2)

DIFFUSION_2D = Kernel(
    "diffusion-2d",
    ((1, 0, 3), (-1, 1, 2), (0, 1, 3), (1, 1, 2)),
    10,
)

JARVIS_JUDICE_NINKE = Kernel(
    "jarvis-judice-ninke",
    (
        (1, 0, 7), (2, 0, 5),
        (-2, 1, 3), (-1, 1, 5), (0, 1, 7), (1, 1, 5), (2, 1, 3),
        (-2, 2, 1), (-1, 2, 3), (0, 2, 5), (1, 2, 3), (2, 2, 1),
    ),
    48,
)

# Weights sum to 20 over a divisor of 12; amplifies the error.
SIERRA2 = Kernel(
    "sierra2",
    (
        (1, 0, 4), (2, 0, 3),
        (-2, 1, 1), (-1, 1, 2), (0, 1, 3), (1, 1, 2), (2, 1, 1),
        (-1, 2, 1), (0, 2, 2), (1, 2, 1),
    ),
    12,
)

STUCKI = Kernel(
    "stucki",
    (
        (1, 0, 8), (2, 0, 4),
        (-2, 1, 2), (-1, 1, 4), (0, 1, 8), (1, 1, 4), (2, 1, 2),
        (-2, 2, 1), (-1, 2, 2), (0, 2, 4), (1, 2, 2), (2, 2, 1),
    ),
    42,
)

KERNELS: dict[Algorithm, Kernel] = {
    Algorithm.FLOYD_STEINBERG: FLOYD_STEINBERG,
    Algorithm.ATKINSON: ATKINSON,
    Algorithm.BURKES: BURKES,
    Algorithm.DIFFUSION_ROW: DIFFUSION_ROW,
    Algorithm.DIFFUSION_COLUMN: DIFFUSION_COLUMN,
    Algorithm.DIFFUSION_2D: DIFFUSION_2D,
    Algorithm.JARVIS_JUDICE_NINKE: JARVIS_JUDICE_NINKE,
    Algorithm.SIERRA2: SIERRA2,
    Algorithm.STUCKI: STUCKI,
}
