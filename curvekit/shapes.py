"""
CurveKit - Form-Helfer
Erzeugt Curve2-Listen aus Editor-Formen (Vias, Pads, Tracks).

Koordinaten sind mathematisch (y nach oben): "clockwise" bedeutet
negativen Sweep.
"""

from typing import List, Sequence
import math

from config.tolerances import Tolerances

from .angles import TWO_PI, normalize_angle
from .curves import Arc2, Bezier2, Line2
from .vector import Vector2


def circle_curve(center, radius: float) -> Arc2:
    """Vollkreis (Via) als Bogen ab Winkel 0, gegen den Uhrzeigersinn."""
    return Arc2(Vector2.of(center), radius, 0.0, TWO_PI)


def arc_from_angles(center, radius: float, start_angle: float, end_angle: float,
                    clockwise: bool = False) -> Arc2:
    """
    Bogen aus Start-/Endwinkel und Richtung (Arc-Track).

    Der Sweep ist der Weg von start nach end in der gewählten Richtung;
    gleicher Start- und Endwinkel ergibt einen Vollkreis.
    """
    start = normalize_angle(start_angle)
    end = normalize_angle(end_angle)
    if clockwise:
        sweep = normalize_angle(start - end)
    else:
        sweep = normalize_angle(end - start)

    if sweep <= Tolerances.EPSILON_SINGULAR:
        sweep = TWO_PI
    delta = -sweep if clockwise else sweep
    return Arc2(Vector2.of(center), radius, start_angle, delta)


def polyline_to_lines(points: Sequence) -> List[Line2]:
    """Zerlegt eine Polylinie (Track) in Segmente; Nullsegmente entfallen."""
    verts = [Vector2.of(p) for p in points]
    lines = []
    for a, b in zip(verts, verts[1:]):
        if a.distance_sq(b) <= Tolerances.EPSILON_SINGULAR:
            continue
        lines.append(Line2(a, b))
    return lines


def cubic_bezier(p0, p1, p2, p3) -> Bezier2:
    """Kubische Bézier aus vier Kontrollpunkten (Bézier-Track)."""
    return Bezier2((p0, p1, p2, p3), degree=3)


def rotated_rect_lines(center, width: float, height: float, rotation: float = 0.0) -> List[Line2]:
    """
    Rand eines gedrehten Rechtecks (rechteckiges Pad) als 4 Linien,
    gegen den Uhrzeigersinn ab der Ecke (−w/2, −h/2).
    """
    c = Vector2.of(center)
    hw = width / 2
    hh = height / 2
    local = [Vector2(-hw, -hh), Vector2(hw, -hh), Vector2(hw, hh), Vector2(-hw, hh)]
    corners = [c + p.rotated(rotation) for p in local]
    return [Line2(corners[i], corners[(i + 1) % 4]) for i in range(4)]


def capsule_boundary_curves(a, b, radius: float) -> list:
    """
    Rand einer Kapsel um die Achse a-b (ovales Pad, Track-Kontur).

    Reihenfolge: linke Linie a->b, Halbkreis um b, rechte Linie b->a,
    Halbkreis um a. Eine entartete Achse ergibt einen Vollkreis um a.
    """
    pa = Vector2.of(a)
    pb = Vector2.of(b)
    axis = pb - pa
    length = axis.length
    if not math.isfinite(length) or length <= Tolerances.EPSILON_SINGULAR:
        return [circle_curve(pa, radius)]

    u = axis / length
    n = Vector2(-u.y, u.x) * radius

    theta = math.atan2(u.y, u.x)
    return [
        Line2(pa + n, pb + n),
        Arc2(pb, radius, theta + math.pi / 2, -math.pi),
        Line2(pb - n, pa - n),
        Arc2(pa, radius, theta - math.pi / 2, -math.pi),
    ]


def capsule_from_center(center, width: float, height: float, rotation: float = 0.0) -> list:
    """Kapsel aus Mittelpunkt und Außenmaßen; die längere Seite ist die Achse."""
    c = Vector2.of(center)
    major = max(width, height)
    minor = min(width, height)
    half = max(0.0, (major - minor) / 2)
    angle = rotation + (0.0 if width >= height else math.pi / 2)
    offset = Vector2(math.cos(angle), math.sin(angle)) * half
    return capsule_boundary_curves(c - offset, c + offset, minor / 2)
