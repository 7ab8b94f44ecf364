"""Lay out full puzzles: grid iteration, seam polarity lookup and the outer border."""

import logging
import math
import numbers
import time
from typing import List, Optional, Union

from .errors import InvalidGrid
from .flatten import DEFAULT_RESOLUTION, flatten_path
from .geometry import RADIAL_TAB_RATIO, TAB_SIZE_RATIO, add_circle_arc, build_piece_path
from .models import (
    Bounds,
    CircClassic,
    CircGrid,
    Piece,
    PieceStyle,
    PieceVariant,
    Puzzle,
    PuzzleForm,
    RectClassic,
    RectGrid,
)
from .path_ir import PathBuilder, PathIR, Point
from .tab_matrix import TabMatrix

logger = logging.getLogger(__name__)

DEFAULT_LINE_WIDTH = 1.5

# Angle zero of circular puzzles points to the top of the canvas.
CIRCULAR_ANGLE_OFFSET = -math.pi / 2

# Radial dovetails never exceed this share of the sector chord at mid-ring.
MAX_RADIAL_TAB_CHORD_RATIO = 0.3


def _check_count(value: object, name: str) -> int:
    if value is None:
        raise InvalidGrid(f"{name} is required")
    if isinstance(value, bool) or not isinstance(value, numbers.Integral):
        raise InvalidGrid(f"{name} must be a whole number, got {value!r}")
    if value <= 0:
        raise InvalidGrid(f"{name} must be at least 1, got {value}")
    return int(value)


def wall_clock_seed() -> int:
    """Seed derived from the current time in milliseconds."""
    return int(time.time() * 1000)


def _piece(variant: PieceVariant, position: tuple) -> Piece:
    path = build_piece_path(variant)
    bounds = Bounds.from_points(flatten_path(path, DEFAULT_RESOLUTION).points)
    return Piece(path=path, grid_position=position, bounds=bounds, variant=variant)


def rectangular_border(width: float, height: float, margin: float) -> PathIR:
    """Closed rectangle inset by ``margin`` on all sides."""
    return (
        PathBuilder()
        .move_to((margin, margin))
        .line_to((width - margin, margin))
        .line_to((width - margin, height - margin))
        .line_to((margin, height - margin))
        .close()
        .build()
    )


def circular_border(center: Point, radius: float) -> PathIR:
    """Closed full circle drawn as two half arcs starting at the top."""
    start = CIRCULAR_ANGLE_OFFSET
    builder = PathBuilder().move_to((center[0] + math.cos(start) * radius, center[1] + math.sin(start) * radius))
    add_circle_arc(builder, center, radius, start, start + 2 * math.pi, sweep=True)
    return builder.close().build()


def _layout_rectangular(
    form: PuzzleForm,
    style: PieceStyle,
    cols: int,
    rows: int,
    width: float,
    height: float,
    margin: float,
    line_width: float,
    seed: int,
) -> Puzzle:
    inner_width = width - 2 * margin
    inner_height = height - 2 * margin
    if inner_width <= 0 or inner_height <= 0:
        raise InvalidGrid(f"Margin {margin} leaves no room for pieces on a {width}x{height} canvas")

    piece_width = inner_width / cols
    piece_height = inner_height / rows
    tab_size = min(piece_width, piece_height) * TAB_SIZE_RATIO
    matrix = TabMatrix.rectangular(cols, rows, seed)

    pieces: List[Piece] = []
    for row in range(rows):
        for col in range(cols):
            x = margin + col * piece_width
            y = margin + row * piece_height

            variant: PieceVariant
            if style is PieceStyle.GRID:
                variant = RectGrid(x, y, piece_width, piece_height)
            else:
                # Each seam's stored value is used as-is by the piece above / left of it
                # and negated by the piece below / right of it; border edges have no seam
                top = -(matrix.below(row - 1, col) or 0)
                right = matrix.right_of(row, col) or 0
                bottom = matrix.below(row, col) or 0
                left = -(matrix.right_of(row, col - 1) or 0)
                variant = RectClassic(x, y, piece_width, piece_height, tab_size, top, right, bottom, left)

            pieces.append(_piece(variant, (row, col)))

    return Puzzle(
        form=form,
        piece_style=style,
        cols=cols,
        rows=rows,
        width=width,
        height=height,
        margin=margin,
        line_width=line_width,
        pieces=tuple(pieces),
        border_path=rectangular_border(width, height, margin),
        seed=seed,
        tab_matrix=matrix,
    )


def _layout_circular(
    style: PieceStyle,
    segments: int,
    rings: int,
    width: float,
    height: float,
    margin: float,
    line_width: float,
    seed: int,
) -> Puzzle:
    center = (width / 2.0, height / 2.0)
    max_radius = min(width, height) / 2.0 - margin
    if max_radius <= 0:
        raise InvalidGrid(f"Margin {margin} leaves no room for pieces on a {width}x{height} canvas")

    ring_width = max_radius / rings
    angle_step = 2 * math.pi / segments
    matrix = TabMatrix.circular(segments, rings, seed)

    pieces: List[Piece] = []
    for ring in range(rings):
        inner_radius = ring * ring_width
        outer_radius = (ring + 1) * ring_width
        mid_radius = (inner_radius + outer_radius) / 2.0
        chord = 2 * mid_radius * math.sin(min(angle_step, math.pi) / 2.0)
        tab_size = min(ring_width * RADIAL_TAB_RATIO, chord * MAX_RADIAL_TAB_CHORD_RATIO)

        for segment in range(segments):
            start_angle = segment * angle_step + CIRCULAR_ANGLE_OFFSET
            end_angle = (segment + 1) * angle_step + CIRCULAR_ANGLE_OFFSET

            variant: PieceVariant
            if style is PieceStyle.GRID:
                variant = CircGrid(center, inner_radius, outer_radius, start_angle, end_angle)
            else:
                # A single segment shares its only seam with itself, so it stays straight
                if segments > 1:
                    start_tab = -matrix.radial_seam(ring, segment)
                    end_tab = matrix.radial_seam(ring, segment + 1)
                else:
                    start_tab = end_tab = 0
                variant = CircClassic(
                    center,
                    inner_radius,
                    outer_radius,
                    start_angle,
                    end_angle,
                    tab_size,
                    start_tab,
                    end_tab,
                )

            pieces.append(_piece(variant, (ring, segment)))

    return Puzzle(
        form=PuzzleForm.CIRCULAR,
        piece_style=style,
        cols=segments,
        rows=rings,
        width=width,
        height=height,
        margin=margin,
        line_width=line_width,
        pieces=tuple(pieces),
        border_path=circular_border(center, max_radius),
        seed=seed,
        tab_matrix=matrix,
        center=center,
        radius=max_radius,
    )


def layout_puzzle(
    form: Union[str, PuzzleForm],
    piece_style: Union[str, PieceStyle],
    cols: int,
    rows: int,
    width: float,
    height: float,
    margin: float = 0.0,
    line_width: float = DEFAULT_LINE_WIDTH,
    seed: Optional[int] = None,
) -> Puzzle:
    """Lay out a complete puzzle.

    Args:
        form: "rectangular", "square" or "circular".
        piece_style: "grid" or "classic".
        cols: Columns (segments for circular puzzles).
        rows: Rows (rings for circular puzzles).
        width: Canvas width in pixels.
        height: Canvas height in pixels.
        margin: Inset of the puzzle from the canvas edge in pixels.
        line_width: Stroke width used by the print exporter.
        seed: Tab matrix seed; the wall clock is used when None.

    Returns:
        The puzzle, with ``cols * rows`` pieces in row-major (ring-major) order.

    Raises:
        UnsupportedShape: If ``form`` or ``piece_style`` is not recognized.
        InvalidGrid: If ``cols`` or ``rows`` is missing or not positive, or the margin
            leaves no drawable area.
    """
    puzzle_form = PuzzleForm.parse(form)
    style = PieceStyle.parse(piece_style)
    cols = _check_count(cols, "cols")
    rows = _check_count(rows, "rows")
    if seed is None:
        seed = wall_clock_seed()

    if puzzle_form is PuzzleForm.SQUARE:
        width = height = min(width, height)

    if puzzle_form is PuzzleForm.CIRCULAR:
        puzzle = _layout_circular(style, cols, rows, width, height, margin, line_width, seed)
    else:
        puzzle = _layout_rectangular(puzzle_form, style, cols, rows, width, height, margin, line_width, seed)

    logger.info(
        "Laid out %s %s puzzle: %dx%d, %d pieces, seed %d",
        puzzle_form.value,
        style.value,
        cols,
        rows,
        len(puzzle.pieces),
        seed,
    )
    return puzzle
