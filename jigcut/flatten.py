"""Flatten PathIR curves into polylines.

Curved commands are sampled at a fixed number of segments per command. Arcs are
converted from endpoint to centre parameterisation first.
"""

import logging
import math
from dataclasses import dataclass
from typing import List, NamedTuple, Tuple

import numpy as np

from .path_ir import ArcTo, ClosePath, CubicTo, LineTo, MoveTo, PathCommand, PathIR, Point, QuadTo

logger = logging.getLogger(__name__)

# Default number of segments per curved command.
DEFAULT_RESOLUTION = 16

# ClosePath does not emit a closing point when the current point is this close to the start.
CLOSE_EPSILON = 0.01


@dataclass(frozen=True)
class Polyline:
    """A flattened path.

    Attributes:
        points: Vertices in drawing order.
        closed: True when the source path ended with ClosePath.
    """

    points: Tuple[Point, ...]
    closed: bool = False

    def __len__(self) -> int:
        return len(self.points)


class ArcParameters(NamedTuple):
    """Centre parameterisation of an elliptical arc.

    Angles are in radians. ``rx`` and ``ry`` are the radii after out-of-range correction.
    """

    cx: float
    cy: float
    rx: float
    ry: float
    rotation: float
    theta1: float
    delta_theta: float


def _sample_t(resolution: int) -> np.ndarray:
    return np.arange(1, resolution + 1, dtype=float) / resolution


def _to_points(xs: np.ndarray, ys: np.ndarray) -> List[Point]:
    return [(float(x), float(y)) for x, y in zip(xs, ys)]


def flatten_cubic(start: Point, c1: Point, c2: Point, end: Point, resolution: int = DEFAULT_RESOLUTION) -> List[Point]:
    """Sample a cubic Bezier at t = i/N for i = 1..N."""
    t = _sample_t(resolution)
    mt = 1.0 - t
    b0 = mt**3
    b1 = 3 * mt**2 * t
    b2 = 3 * mt * t**2
    b3 = t**3
    xs = b0 * start[0] + b1 * c1[0] + b2 * c2[0] + b3 * end[0]
    ys = b0 * start[1] + b1 * c1[1] + b2 * c2[1] + b3 * end[1]
    return _to_points(xs, ys)


def flatten_quad(start: Point, c: Point, end: Point, resolution: int = DEFAULT_RESOLUTION) -> List[Point]:
    """Sample a quadratic Bezier at t = i/N for i = 1..N."""
    t = _sample_t(resolution)
    mt = 1.0 - t
    b0 = mt**2
    b1 = 2 * mt * t
    b2 = t**2
    xs = b0 * start[0] + b1 * c[0] + b2 * end[0]
    ys = b0 * start[1] + b1 * c[1] + b2 * end[1]
    return _to_points(xs, ys)


def _vector_angle(ux: float, uy: float, vx: float, vy: float) -> float:
    return math.atan2(ux * vy - uy * vx, ux * vx + uy * vy)


def arc_to_center(
    start: Point,
    rx: float,
    ry: float,
    rotation: float,
    large_arc: bool,
    sweep: bool,
    end: Point,
) -> ArcParameters:
    """Convert an endpoint-parameterised arc to centre parameterisation.

    Radii too small to span the chord are scaled up uniformly. The caller must reject
    zero radii and coincident endpoints first.

    Args:
        start: Arc start point.
        rx: Requested x radius.
        ry: Requested y radius.
        rotation: Ellipse x-axis rotation in degrees.
        large_arc: Large-arc flag.
        sweep: Sweep flag; False gives a negative angular delta, True a positive one.
        end: Arc end point.

    Returns:
        The centre, corrected radii, start angle and angular delta.
    """
    rx = abs(rx)
    ry = abs(ry)
    phi = math.radians(rotation)
    cos_phi = math.cos(phi)
    sin_phi = math.sin(phi)

    # Endpoints in the ellipse's unrotated frame, relative to the chord midpoint
    dx2 = (start[0] - end[0]) / 2.0
    dy2 = (start[1] - end[1]) / 2.0
    x1p = cos_phi * dx2 + sin_phi * dy2
    y1p = -sin_phi * dx2 + cos_phi * dy2

    lam = (x1p * x1p) / (rx * rx) + (y1p * y1p) / (ry * ry)
    if lam > 1.0:
        scale = math.sqrt(lam)
        rx *= scale
        ry *= scale

    rx2 = rx * rx
    ry2 = ry * ry
    numerator = rx2 * ry2 - rx2 * y1p * y1p - ry2 * x1p * x1p
    denominator = rx2 * y1p * y1p + ry2 * x1p * x1p
    coef = math.sqrt(max(0.0, numerator / denominator))
    if large_arc == sweep:
        coef = -coef
    cxp = coef * rx * y1p / ry
    cyp = -coef * ry * x1p / rx

    cx = cos_phi * cxp - sin_phi * cyp + (start[0] + end[0]) / 2.0
    cy = sin_phi * cxp + cos_phi * cyp + (start[1] + end[1]) / 2.0

    ux = (x1p - cxp) / rx
    uy = (y1p - cyp) / ry
    vx = (-x1p - cxp) / rx
    vy = (-y1p - cyp) / ry

    theta1 = math.atan2(uy, ux)
    delta = _vector_angle(ux, uy, vx, vy)
    if not sweep and delta > 0:
        delta -= 2 * math.pi
    elif sweep and delta < 0:
        delta += 2 * math.pi

    return ArcParameters(cx, cy, rx, ry, phi, theta1, delta)


def flatten_arc(start: Point, arc: ArcTo, resolution: int = DEFAULT_RESOLUTION) -> List[Point]:
    """Sample an elliptical arc at N points along its centre parameterisation.

    Zero or non-finite radii and coincident endpoints degrade to a straight segment to
    the end point.
    """
    radii = (arc.rx, arc.ry)
    coincident = start[0] == arc.end[0] and start[1] == arc.end[1]
    if 0 in radii or not all(map(math.isfinite, radii)) or coincident:
        logger.debug("Degenerate arc to %s replaced by a line", arc.end)
        return [arc.end]

    params = arc_to_center(start, arc.rx, arc.ry, arc.rotation, arc.large_arc, arc.sweep, arc.end)
    angles = params.theta1 + params.delta_theta * _sample_t(resolution)
    cos_phi = math.cos(params.rotation)
    sin_phi = math.sin(params.rotation)
    cos_a = np.cos(angles)
    sin_a = np.sin(angles)
    xs = params.cx + params.rx * cos_phi * cos_a - params.ry * sin_phi * sin_a
    ys = params.cy + params.rx * sin_phi * cos_a + params.ry * cos_phi * sin_a

    points = _to_points(xs, ys)
    points[-1] = arc.end
    return points


def flatten_command(
    command: PathCommand,
    current: Point,
    subpath_start: Point,
    resolution: int = DEFAULT_RESOLUTION,
) -> List[Point]:
    """Return the points emitted by one command.

    Args:
        command: The command to flatten.
        current: Current point before the command.
        subpath_start: Start point of the current subpath (used by ClosePath).
        resolution: Segments per curved command.

    Returns:
        Emitted points; the command's start point is never included.
    """
    if isinstance(command, (MoveTo, LineTo)):
        return [command.end]
    if isinstance(command, CubicTo):
        return flatten_cubic(current, command.c1, command.c2, command.end, resolution)
    if isinstance(command, QuadTo):
        return flatten_quad(current, command.c, command.end, resolution)
    if isinstance(command, ArcTo):
        return flatten_arc(current, command, resolution)
    if isinstance(command, ClosePath):
        if math.hypot(current[0] - subpath_start[0], current[1] - subpath_start[1]) < CLOSE_EPSILON:
            return []
        return [subpath_start]
    raise TypeError(f"Not a path command: {command!r}")


def flatten_path(path: PathIR, resolution: int = DEFAULT_RESOLUTION) -> Polyline:
    """Flatten a whole path into a single polyline.

    Args:
        path: The path to flatten.
        resolution: Segments per curved command.

    Returns:
        The polyline, marked closed when the path ends with ClosePath.
    """
    if resolution < 1:
        raise ValueError(f"resolution must be at least 1, got {resolution}")

    points: List[Point] = []
    current: Point = (0.0, 0.0)
    subpath_start: Point = (0.0, 0.0)

    for command in path.commands:
        points.extend(flatten_command(command, current, subpath_start, resolution))
        if isinstance(command, MoveTo):
            subpath_start = command.end
            current = command.end
        elif isinstance(command, ClosePath):
            current = subpath_start
        else:
            current = command.end

    return Polyline(tuple(points), closed=path.is_closed)
