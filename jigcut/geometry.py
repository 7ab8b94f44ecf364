"""Geometric logic for building puzzle piece outlines.

Each piece variant is turned into one closed PathIR. Edges shared by two pieces are
drawn in the edge's local frame (unit vector along the edge, normal pointing at the
feature) and every feature is mirror-symmetric about the edge midpoint, so both
neighbours produce the same curve even though they traverse it in opposite directions.
"""

import math
from typing import Callable, Dict, Sequence, Tuple

import numpy as np

from .errors import UnsupportedShape
from .models import CircClassic, CircGrid, PieceVariant, RectClassic, RectGrid
from .path_ir import PathBuilder, PathIR, Point

# Classic tab size relative to min(piece width, piece height).
TAB_SIZE_RATIO = 0.2

# Neck width and head radius relative to tab size.
NECK_WIDTH_RATIO = 0.4
HEAD_RADIUS_RATIO = 0.7

# Height (relative to tab size) at which the neck control point sits.
NECK_RISE = 0.6

# Head equator control distance relative to head radius.
HEAD_SHOULDER = 0.55

# Control-point distance that makes one cubic approximate a half circle.
SEMICIRCLE_HANDLE = 4.0 / 3.0

# Distance from the edge to the apex of a protruding tab, relative to tab size.
TAB_REACH = 1.0 + HEAD_RADIUS_RATIO

# Radial dovetail size relative to ring width, and its half-widths relative to tab size.
RADIAL_TAB_RATIO = 0.18
DOVETAIL_BASE_RATIO = 0.35
DOVETAIL_TOP_RATIO = 0.6

# Inner radii below this build a pie wedge.
ZERO_RADIUS = 1e-9

_FULL_TURN = 2 * math.pi


def _edge_frame(
    start: Sequence[float], end: Sequence[float], outward: Sequence[float], polarity: int
) -> Callable[[float, float], np.ndarray]:
    """Return a mapping from local (along, across) coordinates to canvas coordinates.

    ``along`` is measured from the edge midpoint, ``across`` along the outward normal
    scaled by the polarity.
    """
    p0 = np.array(start, dtype=float)
    p1 = np.array(end, dtype=float)
    edge_vec = p1 - p0
    edge_unit = edge_vec / float(np.linalg.norm(edge_vec))
    feature_normal = np.array(outward, dtype=float) * polarity
    mid = (p0 + p1) * 0.5

    def at(along: float, across: float) -> np.ndarray:
        return mid + edge_unit * along + feature_normal * across

    return at


def add_classic_edge(
    builder: PathBuilder,
    start: Point,
    end: Point,
    tab_size: float,
    polarity: int,
    outward: Sequence[float],
) -> None:
    """Append one edge running from ``start`` (the current point) to ``end``.

    A zero polarity gives a straight line. Otherwise the edge gets a rounded tab made of a
    straight run, three cubic Beziers (into neck, head lobe, out of neck) and a straight run.

    Args:
        builder: Path under construction; its current point must be ``start``.
        start: Edge start.
        end: Edge end.
        tab_size: Displacement of the head centre from the edge.
        polarity: +1 protrudes along ``outward``, -1 recedes, 0 is straight.
        outward: Unit normal pointing away from the piece interior.
    """
    if polarity == 0:
        builder.line_to(end)
        return

    at = _edge_frame(start, end, outward, polarity)

    neck_half = tab_size * NECK_WIDTH_RATIO * 0.5
    head_radius = tab_size * HEAD_RADIUS_RATIO
    head_height = tab_size
    shoulder = head_height - head_radius * HEAD_SHOULDER
    handle = head_height + head_radius * SEMICIRCLE_HANDLE

    builder.line_to(at(-neck_half, 0.0))
    builder.cubic_to(at(-neck_half, head_height * NECK_RISE), at(-head_radius, shoulder), at(-head_radius, head_height))
    builder.cubic_to(at(-head_radius, handle), at(head_radius, handle), at(head_radius, head_height))
    builder.cubic_to(at(head_radius, shoulder), at(neck_half, head_height * NECK_RISE), at(neck_half, 0.0))
    builder.line_to(end)


def add_dovetail_edge(
    builder: PathBuilder,
    start: Point,
    end: Point,
    tab_size: float,
    polarity: int,
    outward: Sequence[float],
) -> None:
    """Append a straight-line dovetail edge (used on radial seams of circular puzzles).

    Args:
        builder: Path under construction; its current point must be ``start``.
        start: Edge start.
        end: Edge end.
        tab_size: Depth of the dovetail.
        polarity: +1 protrudes along ``outward``, -1 recedes, 0 is straight.
        outward: Unit normal pointing away from the piece interior.
    """
    if polarity == 0:
        builder.line_to(end)
        return

    at = _edge_frame(start, end, outward, polarity)
    base = tab_size * DOVETAIL_BASE_RATIO
    top = tab_size * DOVETAIL_TOP_RATIO

    builder.line_to(at(-base, 0.0))
    builder.line_to(at(-top, tab_size))
    builder.line_to(at(top, tab_size))
    builder.line_to(at(base, 0.0))
    builder.line_to(end)


def polar_point(center: Point, radius: float, angle: float) -> Point:
    """Point at ``radius`` and ``angle`` (radians, y-down canvas) from ``center``."""
    return (center[0] + math.cos(angle) * radius, center[1] + math.sin(angle) * radius)


def _tangent(angle: float) -> Tuple[float, float]:
    # Direction of increasing angle
    return (-math.sin(angle), math.cos(angle))


def add_circle_arc(
    builder: PathBuilder,
    center: Point,
    radius: float,
    from_angle: float,
    to_angle: float,
    sweep: bool,
) -> None:
    """Append a circular arc from the current point to the point at ``to_angle``.

    The large-arc flag is set when the subtended angle exceeds pi. A full turn is split
    into two half turns because an arc between coincident points draws nothing.
    """
    span = abs(to_angle - from_angle)
    end = polar_point(center, radius, to_angle)
    if span >= _FULL_TURN - 1e-9:
        halfway = polar_point(center, radius, (from_angle + to_angle) / 2.0)
        builder.arc_to(radius, radius, halfway, large_arc=False, sweep=sweep)
        builder.arc_to(radius, radius, end, large_arc=False, sweep=sweep)
    else:
        builder.arc_to(radius, radius, end, large_arc=span > math.pi, sweep=sweep)


def _build_rect_grid(variant: RectGrid) -> PathIR:
    x, y, w, h = variant.x, variant.y, variant.width, variant.height
    return PathBuilder().move_to((x, y)).line_to((x + w, y)).line_to((x + w, y + h)).line_to((x, y + h)).close().build()


def _build_rect_classic(variant: RectClassic) -> PathIR:
    x, y, w, h = variant.x, variant.y, variant.width, variant.height
    top_left = (x, y)
    top_right = (x + w, y)
    bottom_right = (x + w, y + h)
    bottom_left = (x, y + h)

    # Clockwise on a y-down canvas: top, right, bottom, left
    builder = PathBuilder().move_to(top_left)
    add_classic_edge(builder, top_left, top_right, variant.tab_size, variant.top, (0.0, -1.0))
    add_classic_edge(builder, top_right, bottom_right, variant.tab_size, variant.right, (1.0, 0.0))
    add_classic_edge(builder, bottom_right, bottom_left, variant.tab_size, variant.bottom, (0.0, 1.0))
    add_classic_edge(builder, bottom_left, top_left, variant.tab_size, variant.left, (-1.0, 0.0))
    return builder.close().build()


def _build_circ_grid(variant: CircGrid) -> PathIR:
    c = variant.center
    start, end = variant.start_angle, variant.end_angle
    builder = PathBuilder()

    if variant.inner_radius <= ZERO_RADIUS:
        builder.move_to(c).line_to(polar_point(c, variant.outer_radius, start))
        add_circle_arc(builder, c, variant.outer_radius, start, end, sweep=True)
        return builder.close().build()

    builder.move_to(polar_point(c, variant.inner_radius, start))
    add_circle_arc(builder, c, variant.inner_radius, start, end, sweep=True)
    builder.line_to(polar_point(c, variant.outer_radius, end))
    add_circle_arc(builder, c, variant.outer_radius, end, start, sweep=False)
    return builder.close().build()


def _build_circ_classic(variant: CircClassic) -> PathIR:
    c = variant.center
    start, end = variant.start_angle, variant.end_angle
    inner, outer = variant.inner_radius, variant.outer_radius
    start_outward = tuple(-v for v in _tangent(start))
    end_outward = _tangent(end)
    builder = PathBuilder()

    if inner <= ZERO_RADIUS:
        outer_start = polar_point(c, outer, start)
        builder.move_to(c)
        add_dovetail_edge(builder, c, outer_start, variant.tab_size, variant.start_tab, start_outward)
        add_circle_arc(builder, c, outer, start, end, sweep=True)
        add_dovetail_edge(builder, polar_point(c, outer, end), c, variant.tab_size, variant.end_tab, end_outward)
        return builder.close().build()

    inner_start = polar_point(c, inner, start)
    outer_start = polar_point(c, outer, start)
    builder.move_to(inner_start)
    add_circle_arc(builder, c, inner, start, end, sweep=True)
    add_dovetail_edge(
        builder, polar_point(c, inner, end), polar_point(c, outer, end), variant.tab_size, variant.end_tab, end_outward
    )
    add_circle_arc(builder, c, outer, end, start, sweep=False)
    add_dovetail_edge(builder, outer_start, inner_start, variant.tab_size, variant.start_tab, start_outward)
    return builder.close().build()


_BUILDERS: Dict[type, Callable] = {
    RectGrid: _build_rect_grid,
    RectClassic: _build_rect_classic,
    CircGrid: _build_circ_grid,
    CircClassic: _build_circ_classic,
}


def build_piece_path(variant: PieceVariant) -> PathIR:
    """Build the closed outline for one piece.

    Args:
        variant: Edge specification of the piece.

    Returns:
        Closed path in canvas coordinates (top-left origin, y down).

    Raises:
        UnsupportedShape: If the variant type is not one of the four known variants.
    """
    builder = _BUILDERS.get(type(variant))
    if builder is None:
        raise UnsupportedShape(f"Unsupported piece variant {type(variant).__name__}")
    return builder(variant)
