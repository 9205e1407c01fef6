"""
Unit tests for curvekit/analytic.py.

Tests for:
- Linie × Linie: Kreuzung, parallel, kollinear (Punkt/Überlappung)
- Linie × Bogen: Sekante, Tangente, Endpunkt-Abtastung, Sweep-Grenzen
- Bogen × Bogen: Radikal-Linie, gleicher Kreis (Überlappung, Berührung)

Shapely dient als unabhängiges Orakel für Segment-Kreuzungen.
"""

import math
import random

import pytest
from shapely.geometry import LineString, Point

from curvekit.analytic import (
    intersect_arc_arc, intersect_arc_line, intersect_line_arc, intersect_line_line,
    project_point_to_segment,
)
from curvekit.curves import Arc2, Line2, eval_point
from curvekit.results import IntersectionOverlap, IntersectionPoint
from curvekit.vector import Vector2

pytestmark = [pytest.mark.geometry, pytest.mark.fast]

EPS = 1e-6


def _points(items):
    return [it for it in items if isinstance(it, IntersectionPoint)]


class TestLineLine:
    """Tests for intersect_line_line."""

    def test_diagonals_cross_at_center(self):
        items = intersect_line_line(Line2((0, 0), (10, 10)), Line2((0, 10), (10, 0)), EPS)
        assert len(items) == 1
        hit = items[0]
        assert math.isclose(hit.t0, 0.5) and math.isclose(hit.t1, 0.5)
        assert hit.is_sample is False
        assert eval_point(Line2((0, 0), (10, 10)), hit.t0).equals(Vector2(5, 5), 1e-9)

    def test_parallel_is_empty(self):
        assert intersect_line_line(Line2((0, 0), (10, 0)), Line2((0, 1), (10, 1)), EPS) == []

    def test_out_of_range_is_empty(self):
        assert intersect_line_line(Line2((0, 0), (1, 0)), Line2((2, -1), (2, 1)), EPS) == []

    def test_touching_endpoint_within_epsilon(self):
        items = intersect_line_line(Line2((0, 0), (1, 0)), Line2((1 + 1e-8, -1), (1 + 1e-8, 1)), EPS)
        assert len(items) == 1
        assert items[0].t0 == 1.0

    def test_collinear_overlap(self):
        l0 = Line2((0, 0), (10, 0))
        l1 = Line2((5, 0), (15, 0))
        items = intersect_line_line(l0, l1, EPS)
        assert len(items) == 1
        ov = items[0]
        assert isinstance(ov, IntersectionOverlap)
        assert math.isclose(ov.t0[0], 0.5) and math.isclose(ov.t0[1], 1.0)
        assert math.isclose(ov.t1[0], 0.0, abs_tol=1e-12) and math.isclose(ov.t1[1], 0.5)
        assert ov.is_sample == (True, True)
        assert eval_point(l0, ov.t0[0]).equals(Vector2(5, 0), 1e-9)
        assert eval_point(l0, ov.t0[1]).equals(Vector2(10, 0), 1e-9)

    def test_collinear_opposite_direction(self):
        l0 = Line2((0, 0), (10, 0))
        l1 = Line2((8, 0), (2, 0))
        ov = intersect_line_line(l0, l1, EPS)[0]
        assert math.isclose(ov.t0[0], 0.2) and math.isclose(ov.t0[1], 0.8)
        # t1 folgt t0: absteigend bei gegenläufigen Linien
        assert math.isclose(ov.t1[0], 1.0) and math.isclose(ov.t1[1], 0.0, abs_tol=1e-12)

    def test_collinear_touching_gives_sample_point(self):
        items = intersect_line_line(Line2((0, 0), (10, 0)), Line2((10, 0), (20, 0)), EPS)
        assert len(items) == 1
        hit = items[0]
        assert isinstance(hit, IntersectionPoint)
        assert hit.is_sample is True
        assert math.isclose(hit.t0, 1.0) and math.isclose(hit.t1, 0.0, abs_tol=1e-12)

    def test_collinear_disjoint(self):
        assert intersect_line_line(Line2((0, 0), (1, 0)), Line2((2, 0), (3, 0)), EPS) == []

    def test_matches_shapely_oracle(self):
        rng = random.Random(1234)
        for _ in range(200):
            c = [rng.uniform(-10, 10) for _ in range(8)]
            l0 = Line2((c[0], c[1]), (c[2], c[3]))
            l1 = Line2((c[4], c[5]), (c[6], c[7]))
            oracle = LineString([(c[0], c[1]), (c[2], c[3])]).intersection(
                LineString([(c[4], c[5]), (c[6], c[7])])
            )
            items = intersect_line_line(l0, l1, 0.0)
            if oracle.is_empty:
                assert items == []
                continue
            assert len(items) == 1
            p = eval_point(l0, items[0].t0)
            assert Point(p.x, p.y).distance(oracle) < 1e-9

    def test_projection(self):
        seg = Line2((0, 0), (10, 0))
        assert project_point_to_segment(Vector2(3, 5), seg) == 0.3
        assert project_point_to_segment(Vector2(-3, 5), seg) == 0.0
        assert project_point_to_segment(Vector2(13, 5), seg) == 1.0


class TestLineArc:
    """Tests for intersect_line_arc."""

    def test_secant_through_circle(self):
        line = Line2((-10, 0), (10, 0))
        circle = Arc2((0, 0), 5.0)
        hits = _points(intersect_line_arc(line, circle, EPS))
        xs = sorted(eval_point(line, h.t0).x for h in hits)
        assert len(xs) == 2
        assert math.isclose(xs[0], -5.0, abs_tol=1e-9)
        assert math.isclose(xs[1], 5.0, abs_tol=1e-9)
        for h in hits:
            assert eval_point(line, h.t0).distance_to(eval_point(circle, h.t1)) <= 4 * EPS

    def test_sweep_filters_hits(self):
        line = Line2((-10, 0), (10, 0))
        upper = Arc2((0, 0), 5.0, 0.0, math.pi / 2)
        hits = _points(intersect_line_arc(line, upper, EPS))
        assert len(hits) == 1
        assert math.isclose(eval_point(line, hits[0].t0).x, 5.0, abs_tol=1e-9)
        assert hits[0].t1 == 0.0

    def test_tangent_line(self):
        line = Line2((-10, 5), (10, 5))
        circle = Arc2((0, 0), 5.0)
        hits = _points(intersect_line_arc(line, circle, EPS))
        assert len(hits) >= 1
        for h in hits:
            assert eval_point(line, h.t0).equals(Vector2(0, 5), 1e-6)

    def test_endpoint_on_circle_is_sampled(self):
        line = Line2((5, 0), (20, 0))
        circle = Arc2((0, 0), 5.0)
        samples = [h for h in intersect_line_arc(line, circle, EPS) if h.is_sample]
        assert len(samples) == 1
        assert samples[0].t0 == 0.0

    def test_miss(self):
        assert intersect_line_arc(Line2((-10, 6), (10, 6)), Arc2((0, 0), 5.0), EPS) == []

    def test_zero_length_chord_on_circle(self):
        assert intersect_line_arc(Line2((5, 0), (5, 0)), Arc2((0, 0), 5.0), EPS) == []

    def test_arc_line_is_swapped(self):
        line = Line2((-10, 1), (10, 1))
        arc = Arc2((0, 0), 5.0, 0.0, math.pi)
        forward = sorted((h.t0, h.t1) for h in intersect_line_arc(line, arc, EPS))
        backward = sorted((h.t1, h.t0) for h in intersect_arc_line(arc, line, EPS))
        assert forward == backward


class TestArcArc:
    """Tests for intersect_arc_arc."""

    def test_two_circles(self):
        c0 = Arc2((0, 0), 5.0)
        c1 = Arc2((6, 0), 5.0)
        hits = _points(intersect_arc_arc(c0, c1, EPS))
        pts = sorted((eval_point(c0, h.t0).as_tuple() for h in hits), key=lambda p: p[1])
        assert len(pts) == 2
        assert math.isclose(pts[0][0], 3.0, abs_tol=1e-9) and math.isclose(pts[0][1], -4.0, abs_tol=1e-9)
        assert math.isclose(pts[1][0], 3.0, abs_tol=1e-9) and math.isclose(pts[1][1], 4.0, abs_tol=1e-9)
        for h in hits:
            assert eval_point(c0, h.t0).distance_to(eval_point(c1, h.t1)) <= 4 * EPS

    def test_external_tangent_single_point(self):
        hits = intersect_arc_arc(Arc2((0, 0), 5.0), Arc2((10, 0), 5.0), EPS)
        assert len(hits) == 1
        assert eval_point(Arc2((0, 0), 5.0), hits[0].t0).equals(Vector2(5, 0), 1e-6)

    def test_far_apart_and_nested(self):
        assert intersect_arc_arc(Arc2((0, 0), 1.0), Arc2((5, 0), 1.0), EPS) == []
        assert intersect_arc_arc(Arc2((0, 0), 5.0), Arc2((0.5, 0), 1.0), EPS) == []

    def test_concentric_different_radius(self):
        assert intersect_arc_arc(Arc2((0, 0), 5.0), Arc2((0, 0), 3.0), EPS) == []

    def test_sweep_rejects_candidate(self):
        upper = Arc2((0, 0), 5.0, 0.0, math.pi)
        hits = intersect_arc_arc(upper, Arc2((6, 0), 5.0), EPS)
        assert len(hits) == 1
        assert eval_point(upper, hits[0].t0).equals(Vector2(3, 4), 1e-9)

    def test_same_circle_overlap(self):
        a = Arc2((0, 0), 2.0, 0.0, math.pi)
        b = Arc2((0, 0), 2.0, math.pi / 2, math.pi)
        items = intersect_arc_arc(a, b, EPS)
        assert len(items) == 1
        ov = items[0]
        assert isinstance(ov, IntersectionOverlap)
        assert math.isclose(ov.t0[0], 0.5) and math.isclose(ov.t0[1], 1.0)
        assert math.isclose(ov.t1[0], 0.0, abs_tol=1e-12) and math.isclose(ov.t1[1], 0.5)

    def test_same_circle_opposite_direction(self):
        a = Arc2((0, 0), 2.0, 0.0, math.pi)
        b = Arc2((0, 0), 2.0, math.pi, -math.pi / 2)   # von π zurück nach π/2
        ov = intersect_arc_arc(a, b, EPS)[0]
        assert isinstance(ov, IntersectionOverlap)
        assert math.isclose(ov.t0[0], 0.5) and math.isclose(ov.t0[1], 1.0)
        assert math.isclose(ov.t1[0], 1.0) and math.isclose(ov.t1[1], 0.0, abs_tol=1e-12)
        for k in range(2):
            assert eval_point(a, ov.t0[k]).distance_to(eval_point(b, ov.t1[k])) <= 1e-9

    def test_same_circle_touching_end_to_start(self):
        a = Arc2((0, 0), 2.0, 0.0, math.pi / 2)
        b = Arc2((0, 0), 2.0, math.pi / 2, math.pi / 2)
        items = intersect_arc_arc(a, b, EPS)
        assert len(items) == 1
        hit = items[0]
        assert isinstance(hit, IntersectionPoint)
        assert hit.is_sample is True
        assert math.isclose(hit.t0, 1.0) and math.isclose(hit.t1, 0.0, abs_tol=1e-9)

    def test_same_circle_disjoint(self):
        a = Arc2((0, 0), 2.0, 0.0, 1.0)
        b = Arc2((0, 0), 2.0, 2.0, 1.0)
        assert intersect_arc_arc(a, b, EPS) == []

    def test_identical_full_circles_single_overlap(self):
        items = intersect_arc_arc(Arc2((0, 0), 3.0), Arc2((0, 0), 3.0), EPS)
        assert len(items) == 1
        ov = items[0]
        assert ov.t0 == (0.0, 1.0)
        assert ov.t1 == (0.0, 1.0)
