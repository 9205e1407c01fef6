"""
CurveKit - Analytische Schnitt-Solver
Linie×Linie, Linie×Bogen, Bogen×Bogen in geschlossener Form.

Alle Solver sind rein und werfen nie; Rückgabe ist eine (unsortierte,
nicht deduplizierte) Liste von Schnitt-Items.
"""

from typing import List
import math

from config.tolerances import Tolerances

from .angles import AngleInterval, arc_t_for_point
from .curves import Arc2, Line2, clamp01, eval_point
from .results import IntersectionItem, IntersectionOverlap, IntersectionPoint
from .vector import Vector2


def project_point_to_segment(p: Vector2, seg: Line2) -> float:
    """Parameter der orthogonalen Projektion von p auf seg, begrenzt auf [0, 1]."""
    ab = seg.b - seg.a
    den = ab.dot(ab)
    if den <= Tolerances.EPSILON_SINGULAR:
        return 0.0
    return clamp01((p - seg.a).dot(ab) / den)


def _param_slack(eps: float) -> float:
    return max(eps, Tolerances.ARC_PARAM_SLACK)


# ==================== LINIE × LINIE ====================

def intersect_line_line(l0: Line2, l1: Line2, eps: float) -> List[IntersectionItem]:
    """
    Schnitt zweier Liniensegmente.

    Nicht parallel: Cramersche Regel für (t, u), beide in [−ε, 1+ε].
    Parallel: leer. Kollinear: Projektion von l1 auf l0, geschnitten mit
    [0, 1]; ein (fast) punktförmiger Bereich ergibt einen Punkt, sonst eine
    Überlappung.
    """
    p = l0.a
    r = l0.b - l0.a
    q = l1.a
    s = l1.b - l1.a
    rxs = r.cross(s)
    qp = q - p
    qpxr = qp.cross(r)
    eps0 = Tolerances.EPSILON_SINGULAR

    if abs(rxs) <= eps0:
        if abs(qpxr) > eps0:
            return []
        return _collinear_line_line(l0, l1, eps)

    t = qp.cross(s) / rxs
    u = qpxr / rxs
    if t < -eps or t > 1.0 + eps or u < -eps or u > 1.0 + eps:
        return []
    return [IntersectionPoint(clamp01(t), clamp01(u), False)]


def _collinear_line_line(l0: Line2, l1: Line2, eps: float) -> List[IntersectionItem]:
    r = l0.b - l0.a
    rr = r.dot(r)
    if rr <= Tolerances.EPSILON_SINGULAR:
        return []

    ta = (l1.a - l0.a).dot(r) / rr
    tb = (l1.b - l0.a).dot(r) / rr
    lo = max(0.0, min(ta, tb))
    hi = min(1.0, max(ta, tb))
    if hi < lo - eps:
        return []

    if abs(hi - lo) <= eps:
        t = clamp01((lo + hi) / 2)
        u = project_point_to_segment(eval_point(l0, t), l1)
        return [IntersectionPoint(t, u, True)]

    lo = clamp01(lo)
    hi = clamp01(hi)
    u_lo = project_point_to_segment(eval_point(l0, lo), l1)
    u_hi = project_point_to_segment(eval_point(l0, hi), l1)
    return [IntersectionOverlap((lo, hi), (u_lo, u_hi), (True, True))]


# ==================== LINIE × BOGEN ====================

def intersect_line_arc(line: Line2, arc: Arc2, eps: float) -> List[IntersectionItem]:
    """
    Schnitt Linie × Bogen über die quadratische Gleichung
    |a + d·t − c|² = r².

    Zusätzlich werden Linien-Endpunkte, die auf dem Kreis liegen, als
    Abtastpunkte (is_sample=True) gemeldet.
    """
    d = line.b - line.a
    f = line.a - arc.center
    r = arc.radius

    qa = d.dot(d)
    if qa <= Tolerances.EPSILON_SINGULAR:
        # Punkt-Sehne (z.B. konstante Bézier)
        return []
    qb = 2.0 * f.dot(d)
    qc = f.dot(f) - r * r

    disc = qb * qb - 4.0 * qa * qc
    if disc < -eps:
        return []

    inv2a = 1.0 / (2.0 * qa)
    if disc <= 0.0:
        roots = [-qb * inv2a]
    else:
        sq = math.sqrt(disc)
        roots = [(-qb - sq) * inv2a, (-qb + sq) * inv2a]

    slack = _param_slack(eps)
    out: List[IntersectionItem] = []
    for t in roots:
        if t < -eps or t > 1.0 + eps:
            continue
        p = Vector2(line.a.x + d.x * t, line.a.y + d.y * t)
        u = arc_t_for_point(arc, p, slack)
        if u is None:
            continue
        out.append(IntersectionPoint(clamp01(t), clamp01(u), False))

    for t, p in ((0.0, line.a), (1.0, line.b)):
        if abs(p.distance_to(arc.center) - r) > eps:
            continue
        u = arc_t_for_point(arc, p, slack)
        if u is not None:
            out.append(IntersectionPoint(t, clamp01(u), True))

    return out


def intersect_arc_line(arc: Arc2, line: Line2, eps: float) -> List[IntersectionItem]:
    """Bogen × Linie: Linie × Bogen mit vertauschten Rollen."""
    return [item.swapped() for item in intersect_line_arc(line, arc, eps)]


# ==================== BOGEN × BOGEN ====================

def intersect_arc_arc(a0: Arc2, a1: Arc2, eps: float) -> List[IntersectionItem]:
    """
    Schnitt zweier Bögen.

    Gleicher Kreis: Schnitt der Winkel-Intervalle (Punkte und
    Überlappungen). Sonst: Radikal-Linie, bis zu zwei Kandidaten, die in
    beiden Sweeps liegen müssen.
    """
    c0, c1 = a0.center, a1.center
    r0, r1 = a0.radius, a1.radius
    dc = c1 - c0
    d = dc.length

    if d <= eps and abs(r0 - r1) <= eps:
        return _same_circle_arcs(a0, a1, eps)

    if d > r0 + r1 + eps:
        return []
    if d < abs(r0 - r1) - eps:
        return []
    if d <= Tolerances.EPSILON_SINGULAR:
        return []

    a = (r0 * r0 - r1 * r1 + d * d) / (2.0 * d)
    h2 = r0 * r0 - a * a
    if h2 < -eps:
        return []
    h = math.sqrt(h2) if h2 > 0.0 else 0.0

    e = dc / d
    base = c0 + e * a
    offset = Vector2(-e.y * h, e.x * h)
    candidates = [base + offset]
    second = base - offset
    if second.distance_to(candidates[0]) > eps:
        candidates.append(second)

    slack = _param_slack(eps)
    out: List[IntersectionItem] = []
    for p in candidates:
        t0 = arc_t_for_point(a0, p, slack)
        if t0 is None:
            continue
        t1 = arc_t_for_point(a1, p, slack)
        if t1 is None:
            continue
        out.append(IntersectionPoint(clamp01(t0), clamp01(t1), False))
    return out


def _arc_t_from_offset(arc: Arc2, rho: float) -> float:
    """Bogen-Parameter für eine Position rho relativ zum Intervall-Start."""
    span = abs(arc.delta)
    if arc.delta >= 0.0:
        return clamp01(rho / span)
    # CW: Intervall beginnt am Endwinkel
    return clamp01(1.0 - rho / span)


def _same_circle_arcs(a0: Arc2, a1: Arc2, eps: float) -> List[IntersectionItem]:
    radius = 0.5 * (a0.radius + a1.radius)
    slack = eps / radius
    i0 = AngleInterval.from_arc(a0)
    i1 = AngleInterval.from_arc(a1)

    out: List[IntersectionItem] = []
    for piece in i0.intersect(i1, slack):
        if piece.span <= slack:
            mid_a = 0.5 * (piece.a_lo + piece.a_hi)
            mid_b = 0.5 * (piece.b_lo + piece.b_hi)
            out.append(IntersectionPoint(_arc_t_from_offset(a0, mid_a), _arc_t_from_offset(a1, mid_b), True))
            continue

        t0 = (_arc_t_from_offset(a0, piece.a_lo), _arc_t_from_offset(a0, piece.a_hi))
        t1 = (_arc_t_from_offset(a1, piece.b_lo), _arc_t_from_offset(a1, piece.b_hi))
        if t0[0] > t0[1]:
            t0 = (t0[1], t0[0])
            t1 = (t1[1], t1[0])
        out.append(IntersectionOverlap(t0, t1, (True, True)))
    return out
