"""
CurveKit - Winkel-Arithmetik
Intervalle auf dem Kreis und Umkehrung Winkel -> Bogen-Parameter.

Alle Winkel in Radiant. Intervalle laufen intern immer gegen den
Uhrzeigersinn: ein CW-Bogen wird als CCW-Intervall ab seinem Endwinkel
dargestellt.
"""

from dataclasses import dataclass
from typing import List, Optional
import math

from config.tolerances import Tolerances

from .vector import Vector2

TWO_PI = 2.0 * math.pi
HALF_PI = 0.5 * math.pi


def normalize_angle(a: float) -> float:
    """Normalisiert auf [0, 2π)."""
    if not math.isfinite(a):
        return 0.0
    x = a % TWO_PI
    # a % 2π kann für winzige negative a genau 2π liefern
    if x >= TWO_PI:
        x = 0.0
    return x


def angle_delta_signed(frm: float, to: float, ccw: bool) -> float:
    """
    Vorzeichenbehafteter Weg von frm nach to.

    CCW: positiver Weg in [0, 2π). CW: negativer Weg in (−2π, 0].
    """
    if ccw:
        return normalize_angle(to - frm)
    d = normalize_angle(frm - to)
    return -d if d > 0.0 else 0.0


def is_full_circle(delta: float) -> bool:
    """|delta| ≈ 2π (oder größer) gilt als Vollkreis."""
    ad = abs(delta)
    return abs(ad - TWO_PI) <= Tolerances.ARC_FULL_CIRCLE or ad >= TWO_PI


def arc_t_from_angle(arc, angle: float, slack: float = Tolerances.ARC_PARAM_SLACK) -> Optional[float]:
    """
    Bogen-Parameter t für einen Winkel.

    Vollkreise liefern immer ein Ergebnis. Bei Teilbögen wird t innerhalb
    [−slack, 1+slack] akzeptiert; liegt der Winkel knapp vor dem Start,
    wird die um eine Umdrehung verschobene Alternative versucht.

    Returns:
        t ∈ [0, 1] oder None wenn der Winkel außerhalb des Sweeps liegt
    """
    delta = arc.delta
    ad = abs(delta)
    if not math.isfinite(delta) or ad <= Tolerances.EPSILON_SINGULAR:
        return None

    rel = angle_delta_signed(arc.start_angle, angle, delta >= 0.0)
    t = rel / delta

    if is_full_circle(delta):
        return min(max(t, 0.0), 1.0)

    if t <= 1.0 + slack:
        return min(t, 1.0)

    t_wrapped = t - TWO_PI / ad
    if t_wrapped >= -slack:
        return max(t_wrapped, 0.0)
    return None


def arc_t_for_point(arc, p: Vector2, slack: float = Tolerances.ARC_PARAM_SLACK) -> Optional[float]:
    """Bogen-Parameter für einen Punkt (nur dessen Winkel zählt)."""
    vx = p.x - arc.center.x
    vy = p.y - arc.center.y
    d = math.hypot(vx, vy)
    if not math.isfinite(d) or d <= Tolerances.EPSILON_SINGULAR:
        return None
    return arc_t_from_angle(arc, math.atan2(vy, vx), slack)


def arc_extrema_angles(a0: float, a1: float) -> List[float]:
    """
    Winkel, deren Punkte die Bounding-Box des Teilbogens a0..a1 bestimmen:
    die beiden Enden plus alle Kardinalwinkel (Vielfache von π/2) dazwischen.

    a0/a1 sind nicht normalisierte Winkel (start + delta·t), die Richtung
    spielt daher keine Rolle.
    """
    lo, hi = min(a0, a1), max(a0, a1)
    angles = [a0, a1]
    if hi - lo >= TWO_PI:
        angles.extend((0.0, HALF_PI, math.pi, 3.0 * HALF_PI))
        return angles
    eps = Tolerances.EPSILON_SINGULAR
    k = math.ceil((lo - eps) / HALF_PI)
    while k * HALF_PI <= hi + eps:
        angles.append(k * HALF_PI)
        k += 1
    return angles


@dataclass(frozen=True)
class AnglePiece:
    """
    Gemeinsames Stück zweier Intervalle.

    a_lo/a_hi: Position relativ zum Start von Intervall A,
    b_lo/b_hi: dieselben Stellen relativ zum Start von Intervall B.
    """
    a_lo: float
    a_hi: float
    b_lo: float
    b_hi: float

    @property
    def span(self) -> float:
        return self.a_hi - self.a_lo


@dataclass(frozen=True)
class AngleInterval:
    """CCW-Intervall [start, start + span] auf dem Kreis, span ∈ [0, 2π]"""
    start: float
    span: float

    def __post_init__(self):
        object.__setattr__(self, "start", normalize_angle(self.start))
        object.__setattr__(self, "span", min(max(float(self.span), 0.0), TWO_PI))

    @classmethod
    def from_arc(cls, arc) -> 'AngleInterval':
        span = TWO_PI if is_full_circle(arc.delta) else abs(arc.delta)
        if arc.delta >= 0.0:
            return cls(arc.start_angle, span)
        return cls(arc.start_angle + arc.delta, span)

    def contains(self, angle: float, slack: float = 0.0) -> bool:
        rel = normalize_angle(angle - self.start)
        return rel <= self.span + slack or rel >= TWO_PI - slack

    def intersect(self, other: 'AngleInterval', slack: float = 0.0) -> List[AnglePiece]:
        """
        Schnitt zweier Intervalle auf dem Kreis.

        Höchstens zwei Stücke: eines ab dem Start von other (ohne Umlauf),
        eines ab dem eigenen Start (other läuft über 2π hinaus). Stücke,
        die in beiden Parametrisierungen aneinander grenzen, werden
        zusammengeführt.
        """
        d = normalize_angle(other.start - self.start)
        pieces = []

        # other beginnt innerhalb von self
        if d <= self.span + slack:
            lo = min(d, self.span)
            hi = max(lo, min(self.span, d + other.span))
            pieces.append(AnglePiece(lo, hi, _clamp_span(lo - d, other.span), _clamp_span(hi - d, other.span)))

        # other läuft über den eigenen Start hinweg
        wrap_end = d + other.span - TWO_PI
        if wrap_end >= -slack:
            hi = min(self.span, max(wrap_end, 0.0))
            shift = TWO_PI - d
            pieces.append(AnglePiece(0.0, hi, _clamp_span(shift, other.span), _clamp_span(hi + shift, other.span)))

        return merge_pieces(pieces, slack)


def _clamp_span(v: float, span: float) -> float:
    return min(max(v, 0.0), span)


def merge_pieces(pieces: List[AnglePiece], slack: float = 0.0) -> List[AnglePiece]:
    """
    Führt Stücke zusammen, die in beiden Parametrisierungen aneinander
    grenzen. Entartete Stücke (Länge <= slack) gehen in einem Nachbarn auf,
    der ihre Position bereits abdeckt.
    """
    ordered = sorted(pieces, key=lambda p: (p.a_lo, p.a_hi))
    merged: List[AnglePiece] = []
    for piece in ordered:
        if merged:
            last = merged[-1]
            if abs(piece.a_lo - last.a_hi) <= slack and abs(piece.b_lo - last.b_hi) <= slack:
                merged[-1] = AnglePiece(last.a_lo, max(last.a_hi, piece.a_hi), last.b_lo, max(last.b_hi, piece.b_hi))
                continue
        merged.append(piece)

    solid = [p for p in merged if p.span > slack]
    out = list(solid)
    for piece in merged:
        if piece.span > slack:
            continue
        # Position 0 und 2π sind derselbe Punkt
        covered = any(
            s.a_lo - slack <= piece.a_lo <= s.a_hi + slack
            or s.a_lo - slack <= piece.a_lo + TWO_PI <= s.a_hi + slack
            for s in solid
        )
        duplicate = any(abs(o.a_lo - piece.a_lo) <= slack for o in out if o.span <= slack)
        if not covered and not duplicate:
            out.append(piece)
    out.sort(key=lambda p: p.a_lo)
    return out
