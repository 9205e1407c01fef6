"""
Unit tests for curvekit/approximate.py.

Tests for:
- flatten_segment_count / flatten_curve
- intersect_by_flattening inkl. NumPy-Broad-Phase (Flag flatten_broadphase)
- curve_bounds für alle Kurven-Typen
- refine_pair (Newton) und coarse_pair_search (5x5-Gitter)
- intersect_by_subdivision inkl. Kandidaten-Budget
"""

import math
import re

import pytest

from config.feature_flags import set_flag
from curvekit.approximate import (
    coarse_pair_search, curve_bounds, flatten_curve, flatten_segment_count,
    intersect_by_flattening, intersect_by_subdivision, refine_pair,
)
from curvekit.curves import Arc2, Bezier2, Line2, RationalBezier2, eval_point
from curvekit.vector import Vector2

pytestmark = [pytest.mark.geometry, pytest.mark.fast]

DIAG_UP = Bezier2([(0, 0), (3, 3), (7, 7), (10, 10)])
DIAG_DOWN = Bezier2([(0, 10), (3, 7), (7, 3), (10, 0)])
WAVE_A = Bezier2([(0, 0), (3, 10), (7, -10), (10, 0)])
WAVE_B = Bezier2([(0, 1), (4, -8), (6, 9), (10, -1)])


class TestFlatten:

    @pytest.mark.parametrize("eps,expected", [
        (0.0, 64),
        (-1.0, 64),
        (1e-6, 256),
        (1e-9, 256),
        (0.1, 20),
        (0.25, 16),
    ])
    def test_segment_count(self, eps, expected):
        assert flatten_segment_count(eps) == expected

    def test_line_flattens_to_endpoints(self):
        pts, ts = flatten_curve(Line2((1, 2), (3, 4)), 64)
        assert pts.tolist() == [[1.0, 2.0], [3.0, 4.0]]
        assert ts.tolist() == [0.0, 1.0]

    def test_bezier_sample_grid(self):
        pts, ts = flatten_curve(WAVE_A, 32)
        assert pts.shape == (33, 2)
        assert ts[0] == 0.0 and ts[-1] == 1.0
        assert pts[0].tolist() == [0.0, 0.0]
        assert math.isclose(pts[-1][0], 10.0) and math.isclose(pts[-1][1], 0.0, abs_tol=1e-12)

    def test_arc_is_never_flattened(self):
        assert flatten_curve(Arc2((0, 0), 1.0), 64) is None

    def test_line_bezier_crossing(self):
        line = Line2((-2, 5), (12, 5))
        hits = intersect_by_flattening(DIAG_UP, line, 1e-4)
        assert hits
        for h in hits:
            assert eval_point(DIAG_UP, h.t0).distance_to(Vector2(5, 5)) <= 5e-3

    def test_arc_bezier_chords(self):
        arc = Arc2((0, 0), 5.0)
        flat = Bezier2([(-10, 0), (-3, 0), (3, 0), (10, 0)])
        hits = intersect_by_flattening(arc, flat, 1e-4)
        xs = sorted({round(eval_point(arc, h.t0).x, 3) for h in hits})
        assert xs == [-5.0, 5.0]
        for h in hits:
            assert eval_point(arc, h.t0).distance_to(eval_point(flat, h.t1)) <= 1e-3

    def test_broadphase_matches_full_scan(self):
        set_flag("flatten_broadphase", True)
        fast = intersect_by_flattening(WAVE_A, WAVE_B, 1e-3)
        set_flag("flatten_broadphase", False)
        full = intersect_by_flattening(WAVE_A, WAVE_B, 1e-3)
        assert len(fast) >= 3
        assert fast == full

    def test_broadphase_matches_full_scan_for_rational(self):
        rat = RationalBezier2([(0, 5), (5, -5), (5, 15), (10, 5)], (1.0, 2.0, 0.5, 1.0))
        set_flag("flatten_broadphase", True)
        fast = intersect_by_flattening(rat, WAVE_A, 1e-3)
        set_flag("flatten_broadphase", False)
        full = intersect_by_flattening(rat, WAVE_A, 1e-3)
        assert fast == full


class TestCurveBounds:

    def test_line_sub_range(self):
        box = curve_bounds(Line2((0, 0), (10, 0)), 0.2, 0.6)
        assert math.isclose(box.min.x, 2.0) and math.isclose(box.max.x, 6.0)

    def test_half_circle_includes_top(self):
        box = curve_bounds(Arc2((0, 0), 1.0, 0.0, math.pi), 0.0, 1.0)
        assert math.isclose(box.min.x, -1.0)
        assert math.isclose(box.max.x, 1.0)
        assert math.isclose(box.max.y, 1.0)
        assert math.isclose(box.min.y, 0.0, abs_tol=1e-12)

    def test_clockwise_arc_sub_range(self):
        arc = Arc2((0, 0), 2.0, math.pi, -math.pi)      # über die Oberseite nach 0
        box = curve_bounds(arc, 0.0, 0.5)
        assert math.isclose(box.max.y, 2.0)
        assert math.isclose(box.min.x, -2.0)
        assert math.isclose(box.max.x, 0.0, abs_tol=1e-12)

    @pytest.mark.parametrize("curve", [
        WAVE_A,
        RationalBezier2([(0, 0), (1, 2), (2, 0)], (1.0, 1.0, 1.0), degree=2),
    ])
    def test_bounds_cover_curve(self, curve):
        box = curve_bounds(curve, 0.25, 0.75)
        tol = 1e-3
        for k in range(11):
            p = eval_point(curve, 0.25 + 0.05 * k)
            assert box.min.x - tol <= p.x <= box.max.x + tol
            assert box.min.y - tol <= p.y <= box.max.y + tol

    def test_reversed_range_is_normalised(self):
        line = Line2((0, 0), (10, 0))
        assert curve_bounds(line, 0.6, 0.2) == curve_bounds(line, 0.2, 0.6)


class TestRefinement:

    CROSS0 = Line2((0, 0), (10, 10))
    CROSS1 = Line2((0, 10), (10, 0))

    def test_newton_converges_on_lines(self):
        hit = refine_pair(self.CROSS0, self.CROSS1, 0.4, 0.6, (0.0, 1.0), (0.0, 1.0), 1e-6)
        assert hit is not None
        assert math.isclose(hit[0], 0.5, abs_tol=1e-9)
        assert math.isclose(hit[1], 0.5, abs_tol=1e-9)

    def test_newton_gives_up_on_parallel(self):
        hit = refine_pair(Line2((0, 0), (10, 0)), Line2((0, 1), (10, 1)), 0.5, 0.5,
                          (0.0, 1.0), (0.0, 1.0), 1e-6)
        assert hit is None

    def test_coarse_grid_hits_exact_sample(self):
        hit = coarse_pair_search(self.CROSS0, self.CROSS1, (0.0, 1.0), (0.0, 1.0), 1e-6)
        assert hit == (0.5, 0.5)

    def test_coarse_grid_rejects_distant(self):
        hit = coarse_pair_search(Line2((0, 0), (1, 0)), Line2((0, 5), (1, 5)), (0.0, 1.0), (0.0, 1.0), 1e-6)
        assert hit is None


class TestSubdivision:

    def test_finds_crossing_of_diagonals(self):
        hits = intersect_by_subdivision(DIAG_UP, DIAG_DOWN, 1e-4, 32, 2048)
        assert hits
        for h in hits:
            assert eval_point(DIAG_UP, h.t0).distance_to(Vector2(5, 5)) <= 1e-2
            assert h.is_sample is False

    def test_disjoint_curves(self):
        far = Bezier2([(20, 20), (21, 22), (23, 22), (24, 20)])
        assert intersect_by_subdivision(DIAG_UP, far, 1e-4, 28, 2048) == []

    def test_zero_candidate_budget(self):
        assert intersect_by_subdivision(DIAG_UP, DIAG_DOWN, 1e-4, 32, 0) == []

    def test_candidate_budget_is_respected(self):
        hits = intersect_by_subdivision(WAVE_A, WAVE_A, 1e-3, 28, 5)
        assert len(hits) <= 5

    @staticmethod
    def _visited(log) -> int:
        stats = [m for _, m in log if m.startswith("[Subdivision]") and "Knoten" in m]
        assert len(stats) == 1
        return int(re.search(r"(\d+) Knoten", stats[0]).group(1))

    def test_depth_zero_evaluates_only_root(self, log_messages):
        set_flag("intersect_debug", True)
        hits = intersect_by_subdivision(WAVE_A, WAVE_B, 1e-9, 0, 2048)
        assert len(hits) <= 1
        assert self._visited(log_messages) == 1
        assert any("1 Knoten, 1 Blätter" in m for _, m in log_messages)

    def test_depth_zero_diagonals_hit_at_root(self):
        hits = intersect_by_subdivision(DIAG_UP, DIAG_DOWN, 1e-9, 0, 2048)
        assert len(hits) == 1
        assert math.isclose(hits[0].t0, 0.5) and math.isclose(hits[0].t1, 0.5)

    @pytest.mark.parametrize("depth", [1, 3, 5])
    def test_depth_bounds_node_count(self, depth, log_messages):
        set_flag("intersect_debug", True)
        intersect_by_subdivision(WAVE_A, WAVE_B, 1e-9, depth, 2048)
        # vollständiger Binärbaum der Tiefe depth
        assert self._visited(log_messages) <= 2 ** (depth + 1) - 1
