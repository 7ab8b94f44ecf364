"""Pixel / millimeter conversion at 96 DPI."""

MM_PER_INCH = 25.4
CSS_DPI = 96.0

# 1 mm in pixels at 96 DPI (3.7795275591).
PX_PER_MM = CSS_DPI / MM_PER_INCH


def px_to_mm(value: float) -> float:
    """Convert pixels to millimeters."""
    return value / PX_PER_MM


def mm_to_px(value: float) -> float:
    """Convert millimeters to pixels."""
    return value * PX_PER_MM


def flip_y_mm(y_px: float, page_height_mm: float) -> float:
    """Convert a top-left-origin pixel y to a bottom-left-origin millimeter y."""
    return page_height_mm - px_to_mm(y_px)
