"""Service for laying out puzzles and exporting them."""

import base64
import io
import logging
from enum import Enum
from typing import Optional, Tuple

from PIL import Image, UnidentifiedImageError

from app.config import Settings, settings
from app.models.puzzle_model import BoundsInfo, PieceInfo, PuzzleRequest, PuzzleResponse
from jigcut import (
    Puzzle,
    PuzzleForm,
    circular_difficulty_grid,
    difficulty_grid,
    grid_for_piece_count,
    layout_puzzle,
    to_cut_svg,
    to_dxf,
    to_print_svg,
)

logger = logging.getLogger(__name__)


class ExportFormat(str, Enum):
    """Supported export formats."""

    SVG = "svg"
    CUT_SVG = "cut-svg"
    DXF = "dxf"


MEDIA_TYPES = {
    ExportFormat.SVG: "image/svg+xml",
    ExportFormat.CUT_SVG: "image/svg+xml",
    ExportFormat.DXF: "application/dxf",
}


class PuzzleService:
    """Lays out puzzles from requests and serializes them."""

    def __init__(self, config: Settings = settings):
        """Initialize the service.

        Args:
            config: Settings providing defaults and aspect thresholds.
        """
        self.config = config

    def resolve_grid(self, request: PuzzleRequest) -> Tuple[Optional[int], Optional[int]]:
        """Pick (cols, rows) from explicit values, difficulty or target piece count.

        Returns:
            Tuple of (cols, rows); either may be None when nothing was requested, which the
            layout reports as an invalid grid.
        """
        if request.cols is not None or request.rows is not None:
            return request.cols, request.rows

        form = PuzzleForm.parse(request.form)
        if request.difficulty is not None:
            if form is PuzzleForm.CIRCULAR:
                return circular_difficulty_grid(request.difficulty)
            aspect_ratio = 1.0 if form is PuzzleForm.SQUARE else request.width / request.height
            return difficulty_grid(
                request.difficulty,
                aspect_ratio,
                landscape_threshold=self.config.LANDSCAPE_ASPECT_THRESHOLD,
                portrait_threshold=self.config.PORTRAIT_ASPECT_THRESHOLD,
            )
        if request.target_pieces is not None and form is not PuzzleForm.CIRCULAR:
            if form is PuzzleForm.SQUARE:
                return grid_for_piece_count(1.0, 1.0, request.target_pieces)
            return grid_for_piece_count(request.width, request.height, request.target_pieces)
        return None, None

    def generate(self, request: PuzzleRequest) -> Puzzle:
        """Lay out the requested puzzle.

        Raises:
            PuzzleLayoutError: If the form, style or grid is invalid.
        """
        cols, rows = self.resolve_grid(request)
        line_width = request.line_width if request.line_width is not None else self.config.DEFAULT_LINE_WIDTH
        return layout_puzzle(
            request.form,
            request.piece_style,
            cols,  # type: ignore[arg-type]
            rows,  # type: ignore[arg-type]
            request.width,
            request.height,
            margin=request.margin,
            line_width=line_width,
            seed=request.seed,
        )

    def export(self, puzzle: Puzzle, fmt: ExportFormat, raster_fill: Optional[str] = None) -> Tuple[str, str]:
        """Serialize a puzzle.

        Args:
            puzzle: The puzzle to export.
            fmt: Target format.
            raster_fill: Optional fill image reference for the print SVG.

        Returns:
            Tuple of (document text, media type).
        """
        if fmt is ExportFormat.SVG:
            content = to_print_svg(puzzle, raster_fill)
        elif fmt is ExportFormat.CUT_SVG:
            content = to_cut_svg(puzzle)
        else:
            content = to_dxf(puzzle, resolution=self.config.DXF_RESOLUTION)
        logger.info("Exported %d-piece puzzle as %s (%d bytes)", len(puzzle.pieces), fmt.value, len(content))
        return content, MEDIA_TYPES[fmt]

    @staticmethod
    def to_response(puzzle: Puzzle) -> PuzzleResponse:
        """Convert a puzzle to its API response."""
        pieces = [
            PieceInfo(
                path=piece.path.to_string(),
                row=piece.grid_position[0],
                col=piece.grid_position[1],
                bounds=BoundsInfo(**piece.bounds.to_dict()),
            )
            for piece in puzzle.pieces
        ]
        return PuzzleResponse(
            seed=puzzle.seed,
            form=puzzle.form.value,
            piece_style=puzzle.piece_style.value,
            cols=puzzle.cols,
            rows=puzzle.rows,
            width=puzzle.width,
            height=puzzle.height,
            margin=puzzle.margin,
            border_path=puzzle.border_path.to_string(),
            pieces=pieces,
        )

    def image_to_data_url(self, data: bytes) -> Tuple[str, int, int]:
        """Re-encode an uploaded image as a PNG data URL.

        Args:
            data: Raw uploaded file content.

        Returns:
            Tuple of (data URL, image width, image height).

        Raises:
            ValueError: If the data is not a readable image.
        """
        try:
            image = Image.open(io.BytesIO(data))
            image.load()
        except (UnidentifiedImageError, OSError) as e:
            raise ValueError("Uploaded file is not a readable image") from e

        if image.mode not in ("RGB", "RGBA"):
            image = image.convert("RGBA")

        buffer = io.BytesIO()
        image.save(buffer, format="PNG")
        base64_data = base64.b64encode(buffer.getvalue()).decode("utf-8")
        return f"data:image/png;base64,{base64_data}", image.width, image.height


# Singleton instance
_puzzle_service: Optional[PuzzleService] = None


def get_puzzle_service() -> PuzzleService:
    """Get the singleton PuzzleService instance."""
    global _puzzle_service
    if _puzzle_service is None:
        _puzzle_service = PuzzleService()
    return _puzzle_service
