"""
CurveKit - Bézier-Arithmetik
De Casteljau Auswertung, Teilung und Teilkurven für (rationale) Bézier-Kurven.

Alle Funktionen arbeiten auf Sequenzen von Vector2 und sind rein (keine
Mutation der Eingaben).
"""

from math import comb
from typing import List, Optional, Sequence, Tuple

import numpy as np

from config.tolerances import Tolerances

from .vector import Vector2


def eval_bezier(cp: Sequence[Vector2], t: float) -> Vector2:
    """Punkt auf der Bézier-Kurve bei t (De Casteljau)"""
    n = len(cp)
    if n == 0:
        return Vector2(0.0, 0.0)
    xs = [p.x for p in cp]
    ys = [p.y for p in cp]
    for r in range(1, n):
        for i in range(n - r):
            xs[i] += (xs[i + 1] - xs[i]) * t
            ys[i] += (ys[i + 1] - ys[i]) * t
    return Vector2(xs[0], ys[0])


def eval_rational_bezier(cp: Sequence[Vector2], weights: Sequence[float], t: float) -> Vector2:
    """
    Punkt auf der rationalen Bézier-Kurve bei t.

    De Casteljau in homogenen Koordinaten (w·x, w·y, w), danach Division
    durch das resultierende Gewicht. Fast verschwindendes Gewicht -> Ursprung.
    """
    n = len(cp)
    if n == 0:
        return Vector2(0.0, 0.0)
    hx = [p.x * w for p, w in zip(cp, weights)]
    hy = [p.y * w for p, w in zip(cp, weights)]
    hw = [float(w) for w in weights]
    for r in range(1, n):
        for i in range(n - r):
            hx[i] += (hx[i + 1] - hx[i]) * t
            hy[i] += (hy[i + 1] - hy[i]) * t
            hw[i] += (hw[i + 1] - hw[i]) * t
    if abs(hw[0]) <= Tolerances.EPSILON_SINGULAR:
        return Vector2(0.0, 0.0)
    return Vector2(hx[0] / hw[0], hy[0] / hw[0])


def split_bezier(cp: Sequence[Vector2], t: float) -> Tuple[List[Vector2], List[Vector2]]:
    """Teilt die Kurve bei t in linke und rechte Kontrollpolygone."""
    n = len(cp)
    work = list(cp)
    left = [work[0]]
    right = [work[n - 1]]
    for r in range(1, n):
        for i in range(n - r):
            work[i] = work[i].lerp(work[i + 1], t)
        left.append(work[0])
        right.append(work[n - r - 1])
    right.reverse()
    return left, right


def sub_bezier(cp: Sequence[Vector2], t0: float, t1: float) -> List[Vector2]:
    """
    Kontrollpolygon des Kurvenstücks [t0, t1].

    Die konvexe Hülle dieses Polygons enthält das Teilstück, daher taugt
    dessen Bounding-Box als konservative Schranke für die Subdivision.
    """
    a = min(max(t0, 0.0), 1.0)
    b = min(max(t1, 0.0), 1.0)
    lo, hi = min(a, b), max(a, b)
    if lo <= 0.0 and hi >= 1.0:
        return list(cp)
    if hi <= Tolerances.EPSILON_SINGULAR:
        return [cp[0]] * len(cp)
    left, _ = split_bezier(cp, hi)
    if lo <= Tolerances.EPSILON_SINGULAR:
        return left
    # lo relativ zum linken Teilstück [0, hi]
    _, middle = split_bezier(left, lo / hi)
    return middle


def bernstein_matrix(degree: int, ts: np.ndarray) -> np.ndarray:
    """Bernstein-Basis B[i, k] = C(n,k) t_i^k (1-t_i)^(n-k)"""
    ks = np.arange(degree + 1)
    coeffs = np.array([comb(degree, int(k)) for k in ks], dtype=float)
    t = ts[:, None]
    return coeffs * np.power(t, ks) * np.power(1.0 - t, degree - ks)


def sample_bezier(cp: Sequence[Vector2], ts: np.ndarray, weights: Optional[Sequence[float]] = None) -> np.ndarray:
    """
    Vektorisierte Auswertung an allen Parametern ts.

    Returns:
        Array der Form (len(ts), 2)
    """
    points = np.array([[p.x, p.y] for p in cp], dtype=float)
    basis = bernstein_matrix(len(cp) - 1, ts)
    if weights is None:
        return basis @ points

    w = np.asarray(weights, dtype=float)
    weighted = basis * w
    denom = weighted.sum(axis=1)
    numer = weighted @ points
    out = np.zeros_like(numer)
    # Fast verschwindendes Gewicht -> Ursprung (wie eval_rational_bezier)
    valid = np.abs(denom) > Tolerances.EPSILON_SINGULAR
    out[valid] = numer[valid] / denom[valid, None]
    return out
