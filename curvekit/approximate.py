"""
CurveKit - Approximative Schnitt-Solver
Flattening (Polylinien-Schnitt), rekursive Subdivision mit Newton-Verfeinerung
und grober Gitter-Suche als Rückfall.

Wird für alle Paare mit (rationaler) Bézier-Kurve verwendet. Meldet im
Zweifel weniger Treffer statt falscher.
"""

from typing import List, Optional, Tuple
import math

import numpy as np
from loguru import logger

from config.feature_flags import is_enabled
from config.tolerances import Tolerances

from .analytic import intersect_line_arc, intersect_line_line
from .angles import arc_extrema_angles
from .bezier import sample_bezier, sub_bezier
from .box import Box2
from .curves import Arc2, Bezier2, Line2, RationalBezier2, clamp, clamp01, eval_point
from .results import IntersectionPoint
from .vector import Vector2


# ==================== FLATTENING ====================

def flatten_segment_count(eps: float) -> int:
    """Anzahl Sehnen je Kurve: ceil(1/ε)·2, begrenzt auf 16..256; 64 bei ε <= 0."""
    if eps <= 0.0:
        return Tolerances.FLATTEN_DEFAULT_SEGMENTS
    n = math.ceil(1.0 / max(eps, Tolerances.FLATTEN_EPSILON_FLOOR)) * 2
    return max(Tolerances.FLATTEN_MIN_SEGMENTS, min(Tolerances.FLATTEN_MAX_SEGMENTS, n))


def flatten_curve(curve, segments: int) -> Optional[Tuple[np.ndarray, np.ndarray]]:
    """
    Polylinie einer Kurve.

    Returns:
        (points (N, 2), ts (N,)) oder None für Bögen (werden nie geflattet)
    """
    if isinstance(curve, Line2):
        points = np.array([[curve.a.x, curve.a.y], [curve.b.x, curve.b.y]], dtype=float)
        return points, np.array([0.0, 1.0])

    if isinstance(curve, Bezier2):
        ts = np.linspace(0.0, 1.0, segments + 1)
        return sample_bezier(curve.control_points, ts), ts

    if isinstance(curve, RationalBezier2):
        ts = np.linspace(0.0, 1.0, segments + 1)
        return sample_bezier(curve.control_points, ts, curve.weights), ts

    return None


def _chord_pairs(pts0: np.ndarray, pts1: np.ndarray, eps: float) -> List[Tuple[int, int]]:
    """
    Broad-Phase: alle Sehnenpaare, die der Linie×Linie-Solver annehmen
    könnte (Cramer-Parameter in [−ε, 1+ε] oder parallel), in Zeilenfolge.

    Die Grenzen sind leicht gepolstert, damit die Auswahl eine Obermenge
    der skalaren Entscheidung bleibt.
    """
    a0 = pts0[:-1]
    r = pts0[1:] - a0
    b0 = pts1[:-1]
    s = pts1[1:] - b0

    rxs = r[:, None, 0] * s[None, :, 1] - r[:, None, 1] * s[None, :, 0]
    qp = b0[None, :, :] - a0[:, None, :]
    qpxs = qp[..., 0] * s[None, :, 1] - qp[..., 1] * s[None, :, 0]
    qpxr = qp[..., 0] * r[:, None, 1] - qp[..., 1] * r[:, None, 0]

    parallel = np.abs(rxs) <= 2.0 * Tolerances.EPSILON_SINGULAR
    pad = Tolerances.BROADPHASE_PADDING
    lo = -eps - pad
    hi = 1.0 + eps + pad
    with np.errstate(divide="ignore", invalid="ignore"):
        t = qpxs / rxs
        u = qpxr / rxs
    inside = (t >= lo) & (t <= hi) & (u >= lo) & (u <= hi)

    rows, cols = np.nonzero(parallel | inside)
    return list(zip(rows.tolist(), cols.tolist()))


def _to_vectors(points: np.ndarray) -> List[Vector2]:
    return [Vector2(x, y) for x, y in points.tolist()]


def _chord_range(ts: List[float], i: int) -> Tuple[float, float]:
    # Sehne i plus je eine Nachbarsehne
    return ts[max(i - 1, 0)], ts[min(i + 2, len(ts) - 1)]


def _polish(c0, c1, t0: float, t1: float, range0: Tuple[float, float],
            range1: Tuple[float, float], eps: float) -> Tuple[float, float]:
    """Zieht einen Sehnen-Treffer per Newton auf die echten Kurven; bleibt sonst unverändert."""
    if not is_enabled("flatten_refine"):
        return t0, t1
    hit = refine_pair(c0, c1, t0, t1, range0, range1, eps)
    return hit if hit is not None else (t0, t1)


def intersect_by_flattening(c0, c1, eps: float) -> List[IntersectionPoint]:
    """
    Schnitt über Polylinien.

    Beide Kurven flattenbar: alle Sehnenpaare durch den Linie×Linie-Solver
    (nur Punkte), lokale Parameter linear auf den Sehnen-Bereich abgebildet.
    Bogen + Bézier: Sehnen der Bézier-Seite gegen den Bogen (Linie×Bogen).
    Treffer werden anschließend per Newton auf die Kurven nachgezogen
    (Flag flatten_refine).
    """
    segments = flatten_segment_count(eps)
    flat0 = flatten_curve(c0, segments)
    flat1 = flatten_curve(c1, segments)
    out: List[IntersectionPoint] = []

    if flat0 is not None and flat1 is not None:
        pts0, ts0 = flat0
        pts1, ts1 = flat1
        n0 = len(pts0) - 1
        n1 = len(pts1) - 1

        if is_enabled("flatten_broadphase"):
            pairs = _chord_pairs(pts0, pts1, eps)
        else:
            pairs = [(i, j) for i in range(n0) for j in range(n1)]

        v0 = _to_vectors(pts0)
        v1 = _to_vectors(pts1)
        ts0 = ts0.tolist()
        ts1 = ts1.tolist()
        for i, j in pairs:
            chord0 = Line2(v0[i], v0[i + 1])
            chord1 = Line2(v1[j], v1[j + 1])
            for item in intersect_line_line(chord0, chord1, eps):
                if not isinstance(item, IntersectionPoint):
                    continue
                t0 = ts0[i] + (ts0[i + 1] - ts0[i]) * item.t0
                t1 = ts1[j] + (ts1[j + 1] - ts1[j]) * item.t1
                t0, t1 = _polish(c0, c1, clamp01(t0), clamp01(t1),
                                 _chord_range(ts0, i), _chord_range(ts1, j), eps)
                out.append(IntersectionPoint(t0, t1, item.is_sample))

        if is_enabled("intersect_debug"):
            logger.debug(f"[Flatten] {n0}x{n1} Sehnen, {len(pairs)} Kandidaten-Paare, {len(out)} Treffer")
        if out:
            return out

    arc_first = isinstance(c0, Arc2)
    if arc_first == isinstance(c1, Arc2):
        return out

    arc = c0 if arc_first else c1
    flat = flat1 if arc_first else flat0
    if flat is None:
        return out

    pts, ts = flat
    verts = _to_vectors(pts)
    ts = ts.tolist()
    for i in range(len(verts) - 1):
        chord = Line2(verts[i], verts[i + 1])
        for item in intersect_line_arc(chord, arc, eps):
            t_curve = clamp01(ts[i] + (ts[i + 1] - ts[i]) * item.t0)
            if arc_first:
                t0, t1 = _polish(c0, c1, item.t1, t_curve, (0.0, 1.0), _chord_range(ts, i), eps)
            else:
                t0, t1 = _polish(c0, c1, t_curve, item.t1, _chord_range(ts, i), (0.0, 1.0), eps)
            out.append(IntersectionPoint(t0, t1, item.is_sample))

    if is_enabled("intersect_debug"):
        logger.debug(f"[Flatten] Bogen gegen {len(verts) - 1} Sehnen: {len(out)} Treffer")
    return out


# ==================== BOUNDS ====================

def curve_bounds(curve, t0: float, t1: float) -> Box2:
    """
    Konservative Bounding-Box des Kurvenstücks [t0, t1].

    Linie: Endpunkte. Bogen: Endpunkte plus Kardinal-Extrema im Teil-Sweep.
    Bézier: Kontrollpolygon der Teilkurve. Rational: 5 Stützstellen.
    """
    lo = clamp01(min(t0, t1))
    hi = clamp01(max(t0, t1))

    if isinstance(curve, Line2):
        return Box2.bounds_of([eval_point(curve, lo), eval_point(curve, hi)])

    if isinstance(curve, Arc2):
        a0 = curve.start_angle + curve.delta * lo
        a1 = curve.start_angle + curve.delta * hi
        cx, cy, r = curve.center.x, curve.center.y, curve.radius
        return Box2.bounds_of(
            Vector2(cx + r * math.cos(a), cy + r * math.sin(a)) for a in arc_extrema_angles(a0, a1)
        )

    if isinstance(curve, Bezier2):
        return Box2.bounds_of(sub_bezier(curve.control_points, lo, hi))

    if isinstance(curve, RationalBezier2):
        mid = 0.5 * (lo + hi)
        samples = (lo, hi, mid, 0.5 * (lo + mid), 0.5 * (mid + hi))
        return Box2.bounds_of(eval_point(curve, t) for t in samples)

    return Box2.bounds_of([])


# ==================== NEWTON / GRID ====================

def refine_pair(c0, c1, t0: float, t1: float,
                range0: Tuple[float, float], range1: Tuple[float, float],
                eps: float) -> Optional[Tuple[float, float]]:
    """
    Newton-Raphson auf F(t0, t1) = P0(t0) − P1(t1).

    Jacobi-Matrix über zentrale Differenzen, Parameter bleiben im Knoten.

    Returns:
        (t0, t1) bei Fehler <= 2ε, sonst None
    """
    t0 = clamp(t0, range0[0], range0[1])
    t1 = clamp(t1, range1[0], range1[1])
    step = max(eps * Tolerances.NEWTON_STEP_FACTOR, Tolerances.NEWTON_STEP_MIN)
    accept = eps * Tolerances.NEWTON_ACCEPT_FACTOR

    for _ in range(Tolerances.NEWTON_MAX_ITERATIONS):
        p0 = eval_point(c0, t0)
        p1 = eval_point(c1, t1)
        fx = p0.x - p1.x
        fy = p0.y - p1.y
        if math.hypot(fx, fy) <= accept:
            return clamp01(t0), clamp01(t1)

        p0a = eval_point(c0, clamp(t0 + step, 0.0, 1.0))
        p0b = eval_point(c0, clamp(t0 - step, 0.0, 1.0))
        p1a = eval_point(c1, clamp(t1 + step, 0.0, 1.0))
        p1b = eval_point(c1, clamp(t1 - step, 0.0, 1.0))
        dx0 = (p0a.x - p0b.x) / (2.0 * step)
        dy0 = (p0a.y - p0b.y) / (2.0 * step)
        dx1 = (p1a.x - p1b.x) / (2.0 * step)
        dy1 = (p1a.y - p1b.y) / (2.0 * step)

        # J = [[dx0, -dx1], [dy0, -dy1]]
        det = dx0 * (-dy1) - (-dx1) * dy0
        if not math.isfinite(det) or abs(det) <= Tolerances.EPSILON_JACOBIAN:
            break

        dt0 = ((-dy1) * (-fx) - (-dx1) * (-fy)) / det
        dt1 = (-dy0 * (-fx) + dx0 * (-fy)) / det
        if not (math.isfinite(dt0) and math.isfinite(dt1)):
            break

        t0 = clamp(t0 + dt0, range0[0], range0[1])
        t1 = clamp(t1 + dt1, range1[0], range1[1])

    if eval_point(c0, t0).distance_to(eval_point(c1, t1)) <= accept:
        return clamp01(t0), clamp01(t1)
    return None


def coarse_pair_search(c0, c1, range0: Tuple[float, float], range1: Tuple[float, float],
                       eps: float) -> Optional[Tuple[float, float]]:
    """
    Grobe 5×5-Gittersuche im Knoten; nächstes Paar bei Fehler <= 4ε.
    Bei Gleichstand gewinnt das erste Paar in Zeilenfolge.
    """
    fractions = np.linspace(0.0, 1.0, Tolerances.COARSE_GRID_SAMPLES)
    ts0 = range0[0] + (range0[1] - range0[0]) * fractions
    ts1 = range1[0] + (range1[1] - range1[0]) * fractions

    pts0 = np.array([eval_point(c0, t).as_tuple() for t in ts0.tolist()])
    pts1 = np.array([eval_point(c1, t).as_tuple() for t in ts1.tolist()])
    dist = np.hypot(pts0[:, None, 0] - pts1[None, :, 0], pts0[:, None, 1] - pts1[None, :, 1])

    i, j = np.unravel_index(int(np.argmin(dist)), dist.shape)
    if dist[i, j] <= eps * Tolerances.COARSE_ACCEPT_FACTOR:
        return clamp01(float(ts0[i])), clamp01(float(ts1[j]))
    return None


# ==================== SUBDIVISION ====================

def intersect_by_subdivision(c0, c1, eps: float, max_depth: int, max_candidates: int) -> List[IntersectionPoint]:
    """
    Rekursive Subdivision des Parameter-Quadrats mit explizitem LIFO-Stack.

    Knoten werden verworfen, wenn sich die Boxen der Teilkurven (mit ε)
    nicht überlappen. Blätter (Tiefe >= max_depth oder beide Boxen <= ε)
    werden per Newton verfeinert, sonst per Gittersuche. Sonst wird die
    Kurve mit der größeren Box halbiert.
    """
    stack = [((0.0, 1.0), (0.0, 1.0), 0)]
    results: List[IntersectionPoint] = []
    visited = 0
    leaves = 0

    while stack:
        if len(results) >= max_candidates:
            logger.warning(
                f"[Subdivision] Kandidaten-Budget erreicht ({max_candidates}), {len(stack)} Knoten verworfen"
            )
            break

        range0, range1, depth = stack.pop()
        visited += 1
        box0 = curve_bounds(c0, range0[0], range0[1])
        box1 = curve_bounds(c1, range1[0], range1[1])
        if not box0.intersects(box1, eps):
            continue

        size0 = box0.max_extent
        size1 = box1.max_extent

        if depth >= max_depth or (size0 <= eps and size1 <= eps):
            leaves += 1
            t0m = 0.5 * (range0[0] + range0[1])
            t1m = 0.5 * (range1[0] + range1[1])
            hit = refine_pair(c0, c1, t0m, t1m, range0, range1, eps)
            if hit is None:
                hit = coarse_pair_search(c0, c1, range0, range1, eps)
            if hit is not None:
                results.append(IntersectionPoint(hit[0], hit[1], False))
            continue

        if size0 >= size1:
            mid = 0.5 * (range0[0] + range0[1])
            stack.append(((range0[0], mid), range1, depth + 1))
            stack.append(((mid, range0[1]), range1, depth + 1))
        else:
            mid = 0.5 * (range1[0] + range1[1])
            stack.append((range0, (range1[0], mid), depth + 1))
            stack.append((range0, (mid, range1[1]), depth + 1))

    if is_enabled("intersect_debug"):
        logger.debug(f"[Subdivision] {visited} Knoten, {leaves} Blätter, {len(results)} Kandidaten")
    return results
