"""Grid dimension lookup: difficulty levels and target piece counts."""

import math
from typing import Tuple

# Aspect ratios (width / height) above which an image counts as landscape, and below
# which it counts as portrait.
DEFAULT_LANDSCAPE_THRESHOLD = 1.3
DEFAULT_PORTRAIT_THRESHOLD = 0.77

# (cols, rows) per difficulty level 1-10, landscape orientation.
DIFFICULTY_GRIDS: Tuple[Tuple[int, int], ...] = (
    (2, 2),
    (3, 2),
    (4, 3),
    (5, 4),
    (6, 4),
    (7, 5),
    (8, 6),
    (10, 7),
    (12, 8),
    (15, 10),
)

# (segments, rings) per difficulty level 1-10.
CIRCULAR_DIFFICULTY_GRIDS: Tuple[Tuple[int, int], ...] = (
    (4, 2),
    (6, 2),
    (8, 3),
    (10, 3),
    (12, 4),
    (14, 4),
    (16, 5),
    (18, 5),
    (20, 6),
    (24, 6),
)


def _level_index(level: int, count: int) -> int:
    return min(max(int(level), 1), count) - 1


def difficulty_grid(
    level: int,
    aspect_ratio: float = 1.5,
    landscape_threshold: float = DEFAULT_LANDSCAPE_THRESHOLD,
    portrait_threshold: float = DEFAULT_PORTRAIT_THRESHOLD,
) -> Tuple[int, int]:
    """Grid for a difficulty level, oriented to the image.

    Landscape images keep the table's (cols, rows) and portrait images swap them.
    Images in between get a grid of about the same piece count chosen for the most
    nearly square pieces.

    Args:
        level: Difficulty 1-10; values outside the range are clamped.
        aspect_ratio: Image width / height.
        landscape_threshold: Ratio above which the image is landscape.
        portrait_threshold: Ratio below which the image is portrait.

    Returns:
        Tuple of (cols, rows).
    """
    cols, rows = DIFFICULTY_GRIDS[_level_index(level, len(DIFFICULTY_GRIDS))]
    if aspect_ratio > landscape_threshold:
        return (cols, rows)
    if aspect_ratio < portrait_threshold:
        return (rows, cols)
    return grid_for_piece_count(aspect_ratio, 1.0, cols * rows)


def circular_difficulty_grid(level: int) -> Tuple[int, int]:
    """Grid for a circular puzzle difficulty level.

    Returns:
        Tuple of (segments, rings).
    """
    return CIRCULAR_DIFFICULTY_GRIDS[_level_index(level, len(CIRCULAR_DIFFICULTY_GRIDS))]


def _near(value: float) -> Tuple[int, int]:
    return (max(2, math.floor(value)), max(2, math.floor(value) + 1))


def grid_for_piece_count(width: float, height: float, target_pieces: int) -> Tuple[int, int]:
    """Grid of about ``target_pieces`` cells whose cells are closest to square.

    Square cells need ``width / cols == height / rows``, so the ideal real-valued grid is
    ``cols = sqrt(target * aspect)`` by ``rows = sqrt(target / aspect)``. The integer
    neighbours of that grid are scored on cell squareness, less half the relative miss
    on the piece count.

    Returns:
        Tuple of (cols, rows), never smaller than 2x2.
    """
    if target_pieces < 4:
        return (2, 2)

    aspect_ratio = width / height

    def score(grid: Tuple[int, int]) -> float:
        cols, rows = grid
        cell_ratio = (width / cols) / (height / rows)
        miss = abs(cols * rows - target_pieces) / target_pieces
        return min(cell_ratio, 1 / cell_ratio) - 0.5 * miss

    candidates = [
        (cols, rows)
        for rows in _near(math.sqrt(target_pieces / aspect_ratio))
        for cols in _near(math.sqrt(target_pieces * aspect_ratio))
    ]
    return max(candidates, key=score)
