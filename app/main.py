"""Main FastAPI application module for the jigsaw cutter."""

import logging
from typing import Optional

from fastapi import FastAPI, HTTPException, Request, UploadFile
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response

from app.config import settings
from app.models.puzzle_model import ExportRequest, ImageFillResponse, PuzzleRequest, PuzzleResponse
from app.services.puzzle_service import ExportFormat, get_puzzle_service
from jigcut import PuzzleLayoutError

logging.basicConfig(level=settings.LOG_LEVEL, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
logger = logging.getLogger(__name__)

# Initialize FastAPI app
app = FastAPI(title=settings.PROJECT_NAME)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.BACKEND_CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

EXPORT_EXTENSIONS = {
    ExportFormat.SVG: "svg",
    ExportFormat.CUT_SVG: "svg",
    ExportFormat.DXF: "dxf",
}


@app.exception_handler(PuzzleLayoutError)
async def puzzle_layout_error_handler(request: Request, exc: PuzzleLayoutError) -> JSONResponse:
    """Report invalid grids and unsupported shapes as client errors."""
    logger.info("Rejected puzzle request to %s: %s", request.url.path, exc)
    return JSONResponse(status_code=400, content={"detail": str(exc)})


@app.get("/health")
def health_check() -> dict[str, str]:
    """Health check endpoint."""
    return {"status": "healthy"}


@app.post(f"{settings.API_V1_STR}/puzzle", response_model=PuzzleResponse)
def generate_puzzle(request: PuzzleRequest) -> PuzzleResponse:
    """Lay out a puzzle and return its piece outlines.

    Args:
        request: Form, style, grid and canvas parameters.

    Returns:
        PuzzleResponse: Seed, border and one outline per piece.

    Raises:
        PuzzleLayoutError: If the grid, form or style is invalid (reported as 400).
    """
    service = get_puzzle_service()
    puzzle = service.generate(request)
    return service.to_response(puzzle)


@app.post(f"{settings.API_V1_STR}/puzzle/export/{{fmt}}")
def export_puzzle(fmt: ExportFormat, request: ExportRequest) -> Response:
    """Lay out a puzzle and return it as an SVG or DXF document.

    Args:
        fmt: One of ``svg``, ``cut-svg`` or ``dxf``.
        request: Puzzle parameters and an optional fill image for the print SVG.

    Returns:
        Response: The document, served as an attachment.
    """
    service = get_puzzle_service()
    puzzle = service.generate(request)
    content, media_type = service.export(puzzle, fmt, request.raster_fill)
    filename = f"puzzle-{puzzle.seed}.{EXPORT_EXTENSIONS[fmt]}"
    return Response(
        content=content,
        media_type=media_type,
        headers={"Content-Disposition": f'attachment; filename="{filename}"', "X-Puzzle-Seed": str(puzzle.seed)},
    )


@app.post(f"{settings.API_V1_STR}/image/fill", response_model=ImageFillResponse)
async def upload_fill_image(file: Optional[UploadFile] = None) -> ImageFillResponse:
    """Convert an uploaded image into a data URL usable as a print SVG fill.

    Args:
        file: The image file.

    Returns:
        ImageFillResponse: PNG data URL and image dimensions.

    Raises:
        HTTPException: If no file is given, it is too large or it is not an image.
    """
    if file is None:
        raise HTTPException(status_code=400, detail="No file provided")

    if file.size and file.size > settings.MAX_UPLOAD_SIZE:
        raise HTTPException(status_code=413, detail="File too large")

    data = await file.read()
    if len(data) > settings.MAX_UPLOAD_SIZE:
        raise HTTPException(status_code=413, detail="File too large")

    try:
        data_url, width, height = get_puzzle_service().image_to_data_url(data)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e

    return ImageFillResponse(data_url=data_url, width=width, height=height)
