"""Tests for flattening path commands into polylines."""

import math

import pytest

from jigcut.flatten import (
    CLOSE_EPSILON,
    DEFAULT_RESOLUTION,
    Polyline,
    arc_to_center,
    flatten_arc,
    flatten_command,
    flatten_path,
)
from jigcut.path_ir import ArcTo, ClosePath, CubicTo, LineTo, MoveTo, PathBuilder, QuadTo, parse_path


def _distance(a: tuple, b: tuple) -> float:
    return math.hypot(a[0] - b[0], a[1] - b[1])


class TestFlattenCommand:
    """Tests for per-command point emission."""

    def test_line_emits_end_point(self) -> None:
        """Straight commands emit only their end point."""
        assert flatten_command(LineTo((5.0, 6.0)), (0.0, 0.0), (0.0, 0.0)) == [(5.0, 6.0)]
        assert flatten_command(MoveTo((1.0, 2.0)), (0.0, 0.0), (0.0, 0.0)) == [(1.0, 2.0)]

    @pytest.mark.parametrize(
        "command",
        [
            CubicTo((10.0, 20.0), (30.0, 20.0), (40.0, 0.0)),
            QuadTo((20.0, 30.0), (40.0, 0.0)),
            ArcTo(20.0, 20.0, 0.0, False, True, (40.0, 0.0)),
        ],
    )
    @pytest.mark.parametrize("resolution", [1, 8, 16])
    def test_curves_emit_resolution_points(self, command: object, resolution: int) -> None:
        """Curved commands emit N points, the last one at the end point."""
        points = flatten_command(command, (0.0, 0.0), (0.0, 0.0), resolution)  # type: ignore[arg-type]
        assert len(points) == resolution
        assert _distance(points[-1], (40.0, 0.0)) < 1e-6

    def test_cubic_midpoint(self) -> None:
        """The cubic is sampled with the Bernstein form."""
        points = flatten_command(CubicTo((0.0, 10.0), (10.0, 10.0), (10.0, 0.0)), (0.0, 0.0), (0.0, 0.0), 2)
        assert points[0] == pytest.approx((5.0, 7.5))

    def test_quad_midpoint(self) -> None:
        """The quadratic midpoint lies halfway to the control point."""
        points = flatten_command(QuadTo((5.0, 10.0), (10.0, 0.0)), (0.0, 0.0), (0.0, 0.0), 2)
        assert points[0] == pytest.approx((5.0, 5.0))

    def test_close_emits_start(self) -> None:
        """ClosePath returns to the subpath start."""
        assert flatten_command(ClosePath(), (10.0, 10.0), (0.0, 0.0)) == [(0.0, 0.0)]

    def test_close_at_start_emits_nothing(self) -> None:
        """ClosePath emits nothing when already at the subpath start."""
        current = (CLOSE_EPSILON / 2, 0.0)
        assert flatten_command(ClosePath(), current, (0.0, 0.0)) == []


class TestArcToCenter:
    """Tests for the endpoint to centre arc conversion."""

    def test_half_circle_centre(self) -> None:
        """A half circle's centre is the chord midpoint."""
        params = arc_to_center((0.0, 0.0), 10.0, 10.0, 0.0, False, True, (20.0, 0.0))
        assert params.cx == pytest.approx(10.0)
        assert params.cy == pytest.approx(0.0, abs=1e-9)
        assert params.rx == pytest.approx(10.0)
        assert abs(params.delta_theta) == pytest.approx(math.pi)

    def test_sweep_sign(self) -> None:
        """Sweep 1 gives a positive delta and sweep 0 a negative one."""
        positive = arc_to_center((0.0, 0.0), 10.0, 10.0, 0.0, False, True, (10.0, 10.0))
        negative = arc_to_center((0.0, 0.0), 10.0, 10.0, 0.0, False, False, (10.0, 10.0))
        assert positive.delta_theta > 0
        assert negative.delta_theta < 0

    def test_quarter_circle_centres(self) -> None:
        """Each flag combination picks one of the two candidate centres."""
        small_cw = arc_to_center((0.0, 0.0), 10.0, 10.0, 0.0, False, True, (10.0, 10.0))
        assert (small_cw.cx, small_cw.cy) == pytest.approx((0.0, 10.0), abs=1e-9)
        assert small_cw.delta_theta == pytest.approx(math.pi / 2)

        large_cw = arc_to_center((0.0, 0.0), 10.0, 10.0, 0.0, True, True, (10.0, 10.0))
        assert (large_cw.cx, large_cw.cy) == pytest.approx((10.0, 0.0), abs=1e-9)
        assert large_cw.delta_theta == pytest.approx(3 * math.pi / 2)

    def test_radius_correction(self) -> None:
        """Radii too small to span the chord are scaled up to half the chord."""
        params = arc_to_center((0.0, 0.0), 1.0, 1.0, 0.0, False, True, (20.0, 0.0))
        assert params.rx == pytest.approx(10.0)
        assert params.ry == pytest.approx(10.0)
        assert params.cx == pytest.approx(10.0)


class TestFlattenArc:
    """Tests for arc sampling."""

    def test_half_circle_points_on_circle(self) -> None:
        """Every sample of a half circle lies on the circle."""
        arc = ArcTo(10.0, 10.0, 0.0, False, True, (20.0, 0.0))
        points = flatten_arc((0.0, 0.0), arc, 16)
        for point in points:
            assert _distance(point, (10.0, 0.0)) == pytest.approx(10.0)

    def test_half_circle_midpoint(self) -> None:
        """The middle sample of a sweep-1 half circle lies above the chord (y down)."""
        arc = ArcTo(10.0, 10.0, 0.0, False, True, (20.0, 0.0))
        points = flatten_arc((0.0, 0.0), arc, 2)
        assert points[0] == pytest.approx((10.0, -10.0))

    def test_sweep_zero_midpoint(self) -> None:
        """Sweep 0 takes the other half circle."""
        arc = ArcTo(10.0, 10.0, 0.0, False, False, (20.0, 0.0))
        points = flatten_arc((0.0, 0.0), arc, 2)
        assert points[0] == pytest.approx((10.0, 10.0))

    def test_end_point_is_exact(self) -> None:
        """The last sample is the arc end point itself."""
        arc = ArcTo(7.0, 3.0, 30.0, True, False, (12.3, -4.5))
        points = flatten_arc((1.0, 2.0), arc, 16)
        assert points[-1] == (12.3, -4.5)

    def test_rotated_ellipse_points_on_ellipse(self) -> None:
        """Samples of a rotated elliptical arc lie on that rotated ellipse."""
        start = (1.0, 2.0)
        arc = ArcTo(7.0, 3.0, 30.0, True, False, (12.3, -4.5))
        params = arc_to_center(start, arc.rx, arc.ry, arc.rotation, arc.large_arc, arc.sweep, arc.end)
        cos_phi = math.cos(params.rotation)
        sin_phi = math.sin(params.rotation)
        for x, y in flatten_arc(start, arc, 16):
            # Back into the ellipse's own axes
            dx = x - params.cx
            dy = y - params.cy
            u = cos_phi * dx + sin_phi * dy
            v = -sin_phi * dx + cos_phi * dy
            assert (u / params.rx) ** 2 + (v / params.ry) ** 2 == pytest.approx(1.0, abs=1e-6)

    def test_infinite_radius_is_a_line(self) -> None:
        """A non-finite radius degrades to a straight segment."""
        arc = ArcTo(math.inf, 5.0, 0.0, True, True, (10.0, 10.0))
        assert flatten_arc((0.0, 0.0), arc, 16) == [(10.0, 10.0)]

    def test_zero_radius_is_a_line(self) -> None:
        """A zero radius degrades to a straight segment."""
        arc = ArcTo(0.0, 10.0, 0.0, False, True, (20.0, 0.0))
        assert flatten_arc((0.0, 0.0), arc, 16) == [(20.0, 0.0)]

    def test_coincident_endpoints_is_a_line(self) -> None:
        """An arc ending where it starts degrades to its end point."""
        arc = ArcTo(10.0, 10.0, 0.0, False, True, (5.0, 5.0))
        assert flatten_arc((5.0, 5.0), arc, 16) == [(5.0, 5.0)]


class TestFlattenPath:
    """Tests for whole-path flattening."""

    def test_square(self) -> None:
        """A closed square flattens to its corners plus the closing point."""
        path = PathBuilder().move_to((0, 0)).line_to((10, 0)).line_to((10, 10)).line_to((0, 10)).close().build()
        polyline = flatten_path(path)
        assert polyline.points == ((0.0, 0.0), (10.0, 0.0), (10.0, 10.0), (0.0, 10.0), (0.0, 0.0))
        assert polyline.closed

    def test_no_duplicate_closing_point(self) -> None:
        """A path already back at its start does not repeat the start on close."""
        path = PathBuilder().move_to((0, 0)).line_to((10, 0)).line_to((0, 0)).close().build()
        assert flatten_path(path).points == ((0.0, 0.0), (10.0, 0.0), (0.0, 0.0))

    def test_open_path(self) -> None:
        """A path without ClosePath is not closed."""
        path = PathBuilder().move_to((0, 0)).quad_to((5, 5), (10, 0)).build()
        polyline = flatten_path(path, 4)
        assert len(polyline) == 5
        assert not polyline.closed

    def test_default_resolution(self) -> None:
        """The default resolution samples each curve DEFAULT_RESOLUTION times."""
        path = PathBuilder().move_to((0, 0)).cubic_to((0, 5), (5, 5), (5, 0)).build()
        assert len(flatten_path(path)) == 1 + DEFAULT_RESOLUTION

    def test_invalid_resolution(self) -> None:
        """Resolution must be positive."""
        with pytest.raises(ValueError):
            flatten_path(PathBuilder().move_to((0, 0)).build(), 0)


class TestFlattenParsedText:
    """Tests for flattening paths parsed from partial or garbled text."""

    @pytest.mark.parametrize(
        "text,expected_points,closed",
        [
            ("L 5 5 Z", ((5.0, 5.0), (0.0, 0.0)), True),  # no MoveTo
            ("A 5 5 0 1 1 0 0", ((0.0, 0.0),), False),  # arc ending at the origin
            ("M 0 0 A 1e400 5 0 1 1 10 10 Z", ((0.0, 0.0), (10.0, 10.0), (0.0, 0.0)), True),
            ("M 1 1 C 1 2 3", ((1.0, 1.0),), False),  # truncated cubic
            ("Z", (), True),
            ("M 0 0 L nan 4 Q 5", ((0.0, 0.0),), False),
            ("", (), False),
        ],
    )
    def test_garbled_text_flattens(self, text: str, expected_points: tuple, closed: bool) -> None:
        """Malformed commands are dropped and the rest flattens to finite points."""
        polyline = flatten_path(parse_path(text))
        assert isinstance(polyline, Polyline)
        assert polyline.points == expected_points
        assert polyline.closed is closed
        assert all(math.isfinite(x) and math.isfinite(y) for x, y in polyline.points)
