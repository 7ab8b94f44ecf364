"""Data models for puzzles, pieces and piece edge specifications."""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Iterable, Optional, Tuple, Union

from .errors import UnsupportedShape
from .path_ir import PathIR, Point
from .tab_matrix import TabMatrix


class PuzzleForm(str, Enum):
    """Overall puzzle outline."""

    RECTANGULAR = "rectangular"
    SQUARE = "square"
    CIRCULAR = "circular"

    @classmethod
    def parse(cls, value: Union[str, "PuzzleForm"]) -> "PuzzleForm":
        """Resolve a form token.

        Raises:
            UnsupportedShape: If the token is not a known form.
        """
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).lower())
        except ValueError:
            choices = ", ".join(f.value for f in cls)
            raise UnsupportedShape(f"Unsupported puzzle form {value!r}; expected one of: {choices}") from None


class PieceStyle(str, Enum):
    """Piece edge style."""

    GRID = "grid"
    CLASSIC = "classic"

    @classmethod
    def parse(cls, value: Union[str, "PieceStyle"]) -> "PieceStyle":
        """Resolve a piece style token.

        Raises:
            UnsupportedShape: If the token is not a known style.
        """
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).lower())
        except ValueError:
            choices = ", ".join(s.value for s in cls)
            raise UnsupportedShape(f"Unsupported piece style {value!r}; expected one of: {choices}") from None


@dataclass(frozen=True)
class Bounds:
    """Axis-aligned bounding box."""

    x: float
    y: float
    width: float
    height: float

    @classmethod
    def from_points(cls, points: Iterable[Point]) -> "Bounds":
        """Smallest box containing all points (zero box for no points)."""
        pts = list(points)
        if not pts:
            return cls(0.0, 0.0, 0.0, 0.0)
        xs = [p[0] for p in pts]
        ys = [p[1] for p in pts]
        return cls(min(xs), min(ys), max(xs) - min(xs), max(ys) - min(ys))

    def to_dict(self) -> Dict[str, float]:
        """Convert to dictionary for JSON serialization."""
        return {"x": self.x, "y": self.y, "width": self.width, "height": self.height}


@dataclass(frozen=True)
class RectGrid:
    """Plain rectangular cell with four straight edges."""

    x: float
    y: float
    width: float
    height: float


@dataclass(frozen=True)
class RectClassic:
    """Rectangular cell with a tab or blank on each interior edge.

    Edge polarities are relative to this piece: +1 protrudes, -1 recedes, 0 is a
    straight border edge.
    """

    x: float
    y: float
    width: float
    height: float
    tab_size: float
    top: int
    right: int
    bottom: int
    left: int

    @property
    def polarities(self) -> Tuple[int, int, int, int]:
        """Edge polarities in (top, right, bottom, left) order."""
        return (self.top, self.right, self.bottom, self.left)


@dataclass(frozen=True)
class CircGrid:
    """Annular sector (a pie wedge when the inner radius is ~0)."""

    center: Point
    inner_radius: float
    outer_radius: float
    start_angle: float
    end_angle: float


@dataclass(frozen=True)
class CircClassic:
    """Annular sector with straight-line dovetails on its two radial edges.

    ``start_tab`` belongs to the edge at ``start_angle`` and ``end_tab`` to the edge at
    ``end_angle``; both are relative to this piece.
    """

    center: Point
    inner_radius: float
    outer_radius: float
    start_angle: float
    end_angle: float
    tab_size: float
    start_tab: int
    end_tab: int


PieceVariant = Union[RectGrid, RectClassic, CircGrid, CircClassic]


@dataclass(frozen=True)
class Piece:
    """One puzzle piece.

    Attributes:
        path: Closed outline.
        grid_position: (row, col) for rectangular puzzles, (ring, segment) for circular.
        bounds: Bounding box of the outline.
        variant: Edge specification the outline was built from.
    """

    path: PathIR
    grid_position: Tuple[int, int]
    bounds: Bounds
    variant: PieceVariant


@dataclass(frozen=True)
class Puzzle:
    """A complete puzzle layout. Built in one layout call and never mutated.

    ``cols``/``rows`` are segments/rings for circular puzzles. ``center`` and ``radius``
    are only set for circular puzzles.
    """

    form: PuzzleForm
    piece_style: PieceStyle
    cols: int
    rows: int
    width: float
    height: float
    margin: float
    line_width: float
    pieces: Tuple[Piece, ...]
    border_path: PathIR
    seed: int
    tab_matrix: TabMatrix
    center: Optional[Point] = None
    radius: Optional[float] = None

    def piece_at(self, row: int, col: int) -> Piece:
        """Piece at a grid position ((ring, segment) for circular puzzles)."""
        if not (0 <= row < self.rows and 0 <= col < self.cols):
            raise IndexError(f"No piece at ({row}, {col}) in a {self.rows}x{self.cols} puzzle")
        return self.pieces[row * self.cols + col]
