"""Data models for puzzle generation and export requests."""

from typing import List, Optional

from pydantic import BaseModel, Field


class PuzzleRequest(BaseModel):
    """Request model for laying out a puzzle.

    The grid comes from ``cols``/``rows`` when given, otherwise from ``difficulty``,
    otherwise from ``target_pieces`` (rectangular and square forms only).
    """

    form: str = Field(default="rectangular", description="rectangular, square or circular")
    piece_style: str = Field(default="classic", description="classic or grid")
    cols: Optional[int] = Field(default=None, description="Columns (segments for circular puzzles)")
    rows: Optional[int] = Field(default=None, description="Rows (rings for circular puzzles)")
    difficulty: Optional[int] = Field(default=None, ge=1, le=10, description="Difficulty level 1-10")
    target_pieces: Optional[int] = Field(default=None, ge=1, description="Approximate number of pieces")
    width: float = Field(..., gt=0, description="Canvas width in pixels")
    height: float = Field(..., gt=0, description="Canvas height in pixels")
    margin: float = Field(default=0.0, ge=0, description="Inset from the canvas edge in pixels")
    line_width: Optional[float] = Field(default=None, gt=0, description="Print stroke width in pixels")
    seed: Optional[int] = Field(default=None, description="Seed for reproducible tabs")


class ExportRequest(PuzzleRequest):
    """Request model for exporting a puzzle."""

    raster_fill: Optional[str] = Field(
        default=None, description="Image URL or data URL painted inside the border (print SVG only)"
    )


class BoundsInfo(BaseModel):
    """Axis-aligned bounding box in pixels."""

    x: float
    y: float
    width: float
    height: float


class PieceInfo(BaseModel):
    """One piece of a generated puzzle."""

    path: str = Field(..., description="Closed outline in path-command syntax")
    row: int = Field(..., description="Row (ring for circular puzzles)")
    col: int = Field(..., description="Column (segment for circular puzzles)")
    bounds: BoundsInfo


class PuzzleResponse(BaseModel):
    """Response model for a generated puzzle."""

    seed: int
    form: str
    piece_style: str
    cols: int
    rows: int
    width: float
    height: float
    margin: float
    border_path: str
    pieces: List[PieceInfo]


class ImageFillResponse(BaseModel):
    """Response model for an uploaded fill image."""

    data_url: str = Field(..., description="Base64 encoded PNG data URL")
    width: int
    height: int
