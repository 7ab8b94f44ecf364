"""jigcut - interlocking puzzle cut lines for print and CNC.

This package lays out rectangular and circular jigsaw puzzles as closed vector outlines,
flattens path commands into polylines and exports SVG and DXF documents.
"""

from .errors import InvalidGrid, JigcutError, MalformedPathCommand, PuzzleLayoutError, UnsupportedShape
from .exporters import to_cut_svg, to_dxf, to_print_svg
from .flatten import DEFAULT_RESOLUTION, ArcParameters, Polyline, arc_to_center, flatten_path
from .geometry import build_piece_path
from .grids import circular_difficulty_grid, difficulty_grid, grid_for_piece_count
from .layout import layout_puzzle
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
from .path_ir import ArcTo, ClosePath, CubicTo, LineTo, MoveTo, PathBuilder, PathIR, QuadTo, parse_path
from .tab_matrix import SeededRandom, TabMatrix, generate_tab_matrix
from .units import PX_PER_MM, mm_to_px, px_to_mm

__all__ = [
    # Errors
    "JigcutError",
    "PuzzleLayoutError",
    "InvalidGrid",
    "UnsupportedShape",
    "MalformedPathCommand",
    # Models
    "PuzzleForm",
    "PieceStyle",
    "Bounds",
    "RectGrid",
    "RectClassic",
    "CircGrid",
    "CircClassic",
    "PieceVariant",
    "Piece",
    "Puzzle",
    # Tab matrix
    "SeededRandom",
    "TabMatrix",
    "generate_tab_matrix",
    # Geometry and layout
    "build_piece_path",
    "layout_puzzle",
    # Path IR
    "MoveTo",
    "LineTo",
    "CubicTo",
    "QuadTo",
    "ArcTo",
    "ClosePath",
    "PathIR",
    "PathBuilder",
    "parse_path",
    # Flattening
    "DEFAULT_RESOLUTION",
    "Polyline",
    "ArcParameters",
    "arc_to_center",
    "flatten_path",
    # Export
    "to_print_svg",
    "to_cut_svg",
    "to_dxf",
    # Units and grids
    "PX_PER_MM",
    "px_to_mm",
    "mm_to_px",
    "difficulty_grid",
    "circular_difficulty_grid",
    "grid_for_piece_count",
]
