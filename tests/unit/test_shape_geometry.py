"""Unit tests for pme.geom (midpoints, interleave, point-in-shape)."""

import pytest

from pme.core.editing_phase import EditingPhase
from pme.core.models import LatLng
from pme.geom import compute_midpoints, interleave, midpoint, point_in_shape, segment_count


def _pts(n):
    return [LatLng(float(i), float(i * i)) for i in range(n)]


class TestSegmentCount:
    @pytest.mark.parametrize("n", [0, 1])
    def test_degenerate(self, n):
        assert segment_count(n, True) == 0
        assert segment_count(n, False) == 0

    def test_closed_and_open(self):
        assert segment_count(4, True) == 4
        assert segment_count(4, False) == 3


class TestMidpoints:
    def test_midpoint_is_average(self):
        assert midpoint(LatLng(0, 0), LatLng(2, 4)) == LatLng(1, 2)

    @pytest.mark.parametrize("n", [2, 3, 5, 8])
    def test_counts(self, n):
        pts = _pts(n)
        assert len(compute_midpoints(pts, EditingPhase.EDITING)) == n
        assert len(compute_midpoints(pts, EditingPhase.CREATING)) == n - 1

    @pytest.mark.parametrize("n", [0, 1])
    def test_empty_below_two(self, n):
        assert compute_midpoints(_pts(n), EditingPhase.EDITING) == []
        assert compute_midpoints(_pts(n), EditingPhase.CREATING) == []

    def test_closed_wraps_last_edge(self):
        tri = [LatLng(0, 0), LatLng(0, 1), LatLng(1, 1)]
        mids = compute_midpoints(tri, EditingPhase.EDITING)
        assert mids == [LatLng(0, 0.5), LatLng(0.5, 1), LatLng(0.5, 0.5)]

    def test_open_has_no_wrap(self):
        tri = [LatLng(0, 0), LatLng(0, 1), LatLng(1, 1)]
        mids = compute_midpoints(tri, EditingPhase.CREATING)
        assert mids == [LatLng(0, 0.5), LatLng(0.5, 1)]

    def test_duplicate_vertices_pass_through(self):
        same = [LatLng(1, 1), LatLng(1, 1)]
        assert compute_midpoints(same, EditingPhase.EDITING) == [LatLng(1, 1), LatLng(1, 1)]


class TestInterleave:
    @pytest.mark.parametrize("n", [2, 3, 6])
    def test_lengths(self, n):
        pts = _pts(n)
        closed = interleave(pts, compute_midpoints(pts, EditingPhase.EDITING))
        opened = interleave(pts, compute_midpoints(pts, EditingPhase.CREATING))
        assert len(closed) == 2 * n
        assert len(opened) == 2 * n - 1

    def test_order(self):
        v = [LatLng(0, 0), LatLng(0, 2)]
        m = [LatLng(0, 1)]
        assert interleave(v, m) == [LatLng(0, 0), LatLng(0, 1), LatLng(0, 2)]

    def test_empty_midpoints(self):
        v = [LatLng(0, 0), LatLng(0, 2)]
        assert interleave(v, []) == v

    @pytest.mark.parametrize("n", [0, 1])
    def test_empty_below_two(self, n):
        assert interleave(_pts(n), []) == []


class TestPointInShape:
    def test_unit_square(self, square_points):
        assert point_in_shape(LatLng(0.5, 0.5), square_points) is True
        assert point_in_shape(LatLng(2, 2), square_points) is False

    def test_outside_each_side(self, square_points):
        for p in (LatLng(-0.5, 0.5), LatLng(1.5, 0.5), LatLng(0.5, -0.5), LatLng(0.5, 1.5)):
            assert point_in_shape(p, square_points) is False

    def test_on_vertex_is_deterministic(self, square_points):
        first = point_in_shape(LatLng(0, 0), square_points)
        for _ in range(5):
            assert point_in_shape(LatLng(0, 0), square_points) is first

    def test_fewer_than_three_vertices(self):
        assert point_in_shape(LatLng(0, 0), []) is False
        assert point_in_shape(LatLng(0.5, 0.5), [LatLng(0, 0), LatLng(1, 1)]) is False

    def test_concave_shape(self):
        # "U" abierta hacia lat alta: el hueco central queda afuera.
        u = [
            LatLng(0, 0), LatLng(0, 3), LatLng(3, 3), LatLng(3, 2),
            LatLng(1, 2), LatLng(1, 1), LatLng(3, 1), LatLng(3, 0),
        ]
        assert point_in_shape(LatLng(0.5, 1.5), u) is True
        assert point_in_shape(LatLng(2, 1.5), u) is False
        assert point_in_shape(LatLng(2, 0.5), u) is True

    def test_winding_does_not_matter(self, square_points):
        assert point_in_shape(LatLng(0.5, 0.5), list(reversed(square_points))) is True
