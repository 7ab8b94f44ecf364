"""Export puzzles to SVG (print and cut) and DXF (CNC / laser cutting)."""

import io
import logging
import math
from typing import List, Optional, Tuple

import ezdxf
import svgwrite
from ezdxf import units

from .flatten import CLOSE_EPSILON, DEFAULT_RESOLUTION, flatten_path
from .models import Puzzle
from .path_ir import PathIR
from .units import flip_y_mm, px_to_mm

logger = logging.getLogger(__name__)

# Border stroke relative to the piece stroke in the print export.
BORDER_STROKE_FACTOR = 2.0

# Stroke width of the cut export, in pixels.
CUT_STROKE_WIDTH = 0.5

STROKE_COLOR = "#000000"

FILL_PATTERN_ID = "puzzleImage"
BORDER_CLIP_ID = "puzzleBorder"

CUT_LAYER = "CUT"
BORDER_LAYER = "BORDER"

# Resolution used when flattening curves for DXF output.
DXF_RESOLUTION = DEFAULT_RESOLUTION

# Decimal places kept for DXF coordinates (millimeters).
DXF_PRECISION = 4


def _new_drawing(puzzle: Puzzle) -> svgwrite.Drawing:
    drawing = svgwrite.Drawing(size=(f"{puzzle.width}px", f"{puzzle.height}px"), debug=False)
    drawing.viewbox(0, 0, puzzle.width, puzzle.height)
    return drawing


def _add_outlines(drawing: svgwrite.Drawing, puzzle: Puzzle, stroke_width: float, border_stroke_width: float) -> None:
    pieces = drawing.g(
        id="pieces",
        fill="none",
        stroke=STROKE_COLOR,
        stroke_width=stroke_width,
        stroke_linejoin="round",
    )
    for piece in puzzle.pieces:
        row, col = piece.grid_position
        pieces.add(drawing.path(d=piece.path.to_string(), id=f"piece-{row}-{col}"))
    drawing.add(pieces)

    drawing.add(
        drawing.path(
            d=puzzle.border_path.to_string(),
            id="border",
            fill="none",
            stroke=STROKE_COLOR,
            stroke_width=border_stroke_width,
        )
    )


def _to_text(drawing: svgwrite.Drawing) -> str:
    buffer = io.StringIO()
    drawing.write(buffer, pretty=True)
    return buffer.getvalue()


def to_print_svg(puzzle: Puzzle, raster_fill: Optional[str] = None) -> str:
    """Export the puzzle as a printable SVG document.

    Args:
        puzzle: The puzzle to export.
        raster_fill: Optional image reference (URL or data URL) painted inside the border
            beneath the cut lines.

    Returns:
        SVG document text sized to the puzzle canvas in pixels.
    """
    drawing = _new_drawing(puzzle)

    if raster_fill:
        pattern = drawing.pattern(
            id=FILL_PATTERN_ID,
            insert=(0, 0),
            size=(puzzle.width, puzzle.height),
            patternUnits="userSpaceOnUse",
        )
        image = drawing.image(href=raster_fill, insert=(0, 0), size=(puzzle.width, puzzle.height))
        image.fit(horiz="center", vert="middle", scale="slice")
        pattern.add(image)
        drawing.defs.add(pattern)

        clip = drawing.clipPath(id=BORDER_CLIP_ID)
        clip.add(drawing.path(d=puzzle.border_path.to_string()))
        drawing.defs.add(clip)

        drawing.add(
            drawing.path(
                d=puzzle.border_path.to_string(),
                id="fill",
                fill=f"url(#{FILL_PATTERN_ID})",
                clip_path=f"url(#{BORDER_CLIP_ID})",
                stroke="none",
            )
        )

    _add_outlines(drawing, puzzle, puzzle.line_width, puzzle.line_width * BORDER_STROKE_FACTOR)
    return _to_text(drawing)


def to_cut_svg(puzzle: Puzzle) -> str:
    """Export the puzzle outlines only, with a fixed thin stroke and no fill."""
    drawing = _new_drawing(puzzle)
    _add_outlines(drawing, puzzle, CUT_STROKE_WIDTH, CUT_STROKE_WIDTH)
    return _to_text(drawing)


def polyline_vertices_mm(
    path: PathIR,
    page_height_mm: float,
    resolution: int = DXF_RESOLUTION,
) -> List[Tuple[float, float]]:
    """Flatten a path into millimeter vertices with a bottom-left origin.

    The closing vertex is dropped when it repeats the first one, since the polyline is
    flagged as closed instead.

    Args:
        path: Path in pixel coordinates (top-left origin).
        page_height_mm: Page height used for the Y flip.
        resolution: Segments per curved command.

    Returns:
        Vertices rounded to DXF_PRECISION decimals.
    """
    points = list(flatten_path(path, resolution).points)
    if len(points) > 1:
        first, last = points[0], points[-1]
        if math.hypot(last[0] - first[0], last[1] - first[1]) < CLOSE_EPSILON:
            points.pop()

    return [
        (round(px_to_mm(x), DXF_PRECISION), round(flip_y_mm(y, page_height_mm), DXF_PRECISION)) for x, y in points
    ]


def to_dxf(puzzle: Puzzle, resolution: int = DXF_RESOLUTION) -> str:
    """Export the puzzle as DXF text for CNC and laser cutters.

    Units are millimeters. Each piece becomes one closed LWPOLYLINE on the CUT layer and
    the border one closed LWPOLYLINE on the BORDER layer.

    Args:
        puzzle: The puzzle to export.
        resolution: Segments per curved command when flattening.

    Returns:
        DXF document text.
    """
    page_height_mm = px_to_mm(puzzle.height)

    doc = ezdxf.new("R2000")
    doc.header["$INSUNITS"] = units.MM
    doc.header["$MEASUREMENT"] = 1
    doc.layers.add(CUT_LAYER, color=7, linetype="Continuous")
    doc.layers.add(BORDER_LAYER, color=1, linetype="Continuous")
    msp = doc.modelspace()

    for piece in puzzle.pieces:
        vertices = polyline_vertices_mm(piece.path, page_height_mm, resolution)
        if len(vertices) < 2:
            logger.warning("Skipping piece %s with fewer than two vertices", piece.grid_position)
            continue
        msp.add_lwpolyline(vertices, close=True, dxfattribs={"layer": CUT_LAYER})

    border = polyline_vertices_mm(puzzle.border_path, page_height_mm, resolution)
    msp.add_lwpolyline(border, close=True, dxfattribs={"layer": BORDER_LAYER})

    stream = io.StringIO()
    doc.write(stream)
    return stream.getvalue()
