"""Deterministic tab polarity matrices.

Every interior seam of a puzzle gets one polarity value in {-1, +1}. The piece on one
side of the seam uses the value as stored and the piece on the other side uses its
negation, so neighbouring pieces always receive a tab and a matching blank.

The random source is an explicit value: each draw returns the value and the next
generator state, and nothing is kept between calls.
"""

from dataclasses import dataclass
from typing import Optional, Tuple

# Linear congruential generator constants.
LCG_MULTIPLIER = 1103515245
LCG_INCREMENT = 12345
LCG_MODULUS = 2**31

PolarityGrid = Tuple[Tuple[int, ...], ...]


@dataclass(frozen=True)
class SeededRandom:
    """Immutable linear congruential generator state."""

    state: int

    @classmethod
    def from_seed(cls, seed: int) -> "SeededRandom":
        """Create a generator from any integer seed (reduced modulo 2**31)."""
        return cls(int(seed) % LCG_MODULUS)

    def next_float(self) -> Tuple[float, "SeededRandom"]:
        """Draw a value in [0, 1).

        Returns:
            Tuple of (value, next generator).
        """
        state = (self.state * LCG_MULTIPLIER + LCG_INCREMENT) % LCG_MODULUS
        return state / LCG_MODULUS, SeededRandom(state)

    def next_polarity(self) -> Tuple[int, "SeededRandom"]:
        """Draw a polarity: +1 if the next value exceeds 0.5, else -1."""
        value, rng = self.next_float()
        return (1 if value > 0.5 else -1), rng


def generate_polarity_grid(cols: int, rows: int, rng: SeededRandom) -> Tuple[PolarityGrid, SeededRandom]:
    """Draw a rows x cols grid of polarities in row-major order.

    Args:
        cols: Number of columns (may be 0).
        rows: Number of rows (may be 0).
        rng: Generator to draw from.

    Returns:
        Tuple of (grid indexed [row][col], generator after the last draw).
    """
    grid = []
    for _row in range(rows):
        row_values = []
        for _col in range(cols):
            polarity, rng = rng.next_polarity()
            row_values.append(polarity)
        grid.append(tuple(row_values))
    return tuple(grid), rng


def generate_tab_matrix(cols: int, rows: int, seed: int) -> PolarityGrid:
    """Generate one cols x rows polarity grid from a seed.

    Returns:
        Grid indexed [row][col].
    """
    grid, _rng = generate_polarity_grid(cols, rows, SeededRandom.from_seed(seed))
    return grid


@dataclass(frozen=True)
class TabMatrix:
    """Seam polarities for one puzzle.

    Rectangular puzzles use ``horizontal`` (rows x (cols-1), the seam to the right of
    each cell) and ``vertical`` ((rows-1) x cols, the seam below each cell).
    Circular puzzles use ``radial`` (rings x segments, the seam at the start angle of
    each segment; segment 0's seam is shared with the last segment).
    """

    seed: int
    horizontal: PolarityGrid = ()
    vertical: PolarityGrid = ()
    radial: PolarityGrid = ()

    @classmethod
    def rectangular(cls, cols: int, rows: int, seed: int) -> "TabMatrix":
        """Generate the seam grids for a cols x rows rectangular puzzle."""
        rng = SeededRandom.from_seed(seed)
        horizontal, rng = generate_polarity_grid(cols - 1, rows, rng)
        vertical, rng = generate_polarity_grid(cols, rows - 1, rng)
        return cls(seed=seed, horizontal=horizontal, vertical=vertical)

    @classmethod
    def circular(cls, segments: int, rings: int, seed: int) -> "TabMatrix":
        """Generate the radial seam grid for a circular puzzle."""
        radial, _rng = generate_polarity_grid(segments, rings, SeededRandom.from_seed(seed))
        return cls(seed=seed, radial=radial)

    def right_of(self, row: int, col: int) -> Optional[int]:
        """Stored polarity of the seam right of cell (row, col), None on the border."""
        if 0 <= row < len(self.horizontal) and 0 <= col < len(self.horizontal[row]):
            return self.horizontal[row][col]
        return None

    def below(self, row: int, col: int) -> Optional[int]:
        """Stored polarity of the seam below cell (row, col), None on the border."""
        if 0 <= row < len(self.vertical) and 0 <= col < len(self.vertical[row]):
            return self.vertical[row][col]
        return None

    def radial_seam(self, ring: int, segment: int) -> int:
        """Stored polarity of the radial seam at the start angle of (ring, segment).

        Segment indices wrap around.
        """
        row = self.radial[ring]
        return row[segment % len(row)]
