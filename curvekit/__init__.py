"""
CurveKit - 2D-Kurvenschnitt
===========================

Schnittpunkte und Überlappungen zwischen Linien, Kreisbögen, Bézier- und
rationalen Bézier-Kurven.

Verwendung:
    from curvekit import Line2, intersect

    hits = intersect(Line2((0, 0), (10, 10)), Line2((0, 10), (10, 0)))
    for p in hits.points:
        print(p.t0, p.t1)
"""

from config.version import VERSION as __version__

from .vector import Vector2, ORIGIN
from .box import Box2
from .curves import (
    CurveType, Curve2, Line2, Arc2, Bezier2, RationalBezier2,
    is_singular, eval_point, curve_from_dict,
)
from .results import (
    IntersectionPoint, IntersectionOverlap, IntersectionItem,
    CurveCurveIntersections, IntersectOptions,
)
from .intersect import intersect
from .shapes import (
    circle_curve, arc_from_angles, polyline_to_lines, cubic_bezier,
    rotated_rect_lines, capsule_boundary_curves, capsule_from_center,
)

__all__ = [
    "__version__",
    "Vector2", "ORIGIN", "Box2",
    "CurveType", "Curve2", "Line2", "Arc2", "Bezier2", "RationalBezier2",
    "is_singular", "eval_point", "curve_from_dict",
    "IntersectionPoint", "IntersectionOverlap", "IntersectionItem",
    "CurveCurveIntersections", "IntersectOptions",
    "intersect",
    "circle_curve", "arc_from_angles", "polyline_to_lines", "cubic_bezier",
    "rotated_rect_lines", "capsule_boundary_curves", "capsule_from_center",
]
