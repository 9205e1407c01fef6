"""
CurveKit - Schnittpunkt-Dispatcher
==================================

Einstiegspunkt intersect(curve0, curve1, options).

Ablauf:
1. Optionen begrenzen (epsilon >= 0, Budgets >= 0)
2. Singularitäts-Gate: entartete Kurven -> leeres Ergebnis mit Flags
3. Dispatch nach Kurven-Paar:
   - Linie/Bogen untereinander: analytisch
   - Paare mit (rationaler) Bézier: Flattening, bei 0 Treffern Subdivision
4. Deduplizierung und Sortierung

Wirft nie. Symmetrie: intersect(b, a) liefert dieselben Orte mit
vertauschten Parametern.
"""

from typing import List, Optional

from loguru import logger

from config.feature_flags import is_enabled

from .analytic import intersect_arc_arc, intersect_arc_line, intersect_line_arc, intersect_line_line
from .approximate import intersect_by_flattening, intersect_by_subdivision
from .curves import Arc2, Line2, is_singular
from .merge import dedupe_items
from .results import CurveCurveIntersections, IntersectionItem, IntersectOptions


def intersect(curve0, curve1, options: Optional[IntersectOptions] = None) -> CurveCurveIntersections:
    """
    Berechnet alle Schnittpunkte und Überlappungen zweier Kurven.

    Args:
        curve0: Erste Kurve (Line2, Arc2, Bezier2, RationalBezier2)
        curve1: Zweite Kurve
        options: Toleranz und Budgets (Default: IntersectOptions())

    Returns:
        CurveCurveIntersections mit sortierten, deduplizierten Items
    """
    opts = (options or IntersectOptions()).sanitized()
    eps = opts.distance_epsilon

    singular0 = is_singular(curve0)
    singular1 = is_singular(curve1)
    if singular0 or singular1:
        logger.debug(
            f"[Intersect] Singuläre Eingabe: curve0={singular0}, curve1={singular1} "
            f"({type(curve0).__name__} x {type(curve1).__name__})"
        )
        return CurveCurveIntersections(is_singularity0=singular0, is_singularity1=singular1, items=[])

    items, solver = _solve(curve0, curve1, eps, opts)
    merged = dedupe_items(items, curve0, curve1, eps)

    if is_enabled("intersect_debug"):
        logger.debug(
            f"[Intersect] {curve0.kind.name} x {curve1.kind.name} via {solver}: "
            f"{len(items)} roh, {len(merged)} nach Merge (eps={eps:g})"
        )

    return CurveCurveIntersections(is_singularity0=False, is_singularity1=False, items=merged)


def _solve(curve0, curve1, eps: float, opts: IntersectOptions):
    """Wählt den Solver für das Kurven-Paar. Returns: (items, solver_name)"""
    if isinstance(curve0, Line2) and isinstance(curve1, Line2):
        return intersect_line_line(curve0, curve1, eps), "line_line"

    if isinstance(curve0, Line2) and isinstance(curve1, Arc2):
        return intersect_line_arc(curve0, curve1, eps), "line_arc"

    if isinstance(curve0, Arc2) and isinstance(curve1, Line2):
        return intersect_arc_line(curve0, curve1, eps), "arc_line"

    if isinstance(curve0, Arc2) and isinstance(curve1, Arc2):
        return intersect_arc_arc(curve0, curve1, eps), "arc_arc"

    # Mindestens eine (rationale) Bézier-Kurve
    items: List[IntersectionItem] = list(intersect_by_flattening(curve0, curve1, eps))
    if items:
        return items, "flatten"

    items = list(intersect_by_subdivision(curve0, curve1, eps, opts.max_depth, opts.max_candidates))
    return items, "subdivision"
