"""
CurveKit - Kurven-Primitives
Linie, Kreisbogen, Bézier und rationale Bézier über t ∈ [0, 1].

Curve2 ist eine geschlossene Menge von Typen. Auswertung und Dispatch
prüfen die Typen explizit nacheinander (kein Subclassing, keine virtuellen
Methoden).
"""

from dataclasses import dataclass
from enum import Enum, auto
from typing import Tuple, Union
import math

from loguru import logger

from config.tolerances import Tolerances

from .angles import TWO_PI, is_full_circle
from .bezier import eval_bezier, eval_rational_bezier
from .vector import Vector2


class CurveType(Enum):
    """Kurven-Typen"""
    LINE = auto()
    ARC = auto()
    BEZIER = auto()
    RATIONAL_BEZIER = auto()


@dataclass(frozen=True)
class Line2:
    """Liniensegment von a (t=0) nach b (t=1)"""
    a: Vector2
    b: Vector2

    def __post_init__(self):
        object.__setattr__(self, "a", Vector2.of(self.a))
        object.__setattr__(self, "b", Vector2.of(self.b))

    @property
    def kind(self) -> CurveType:
        return CurveType.LINE

    @property
    def direction(self) -> Vector2:
        """Nicht normierter Richtungsvektor b - a"""
        return self.b - self.a

    @property
    def length(self) -> float:
        return self.a.distance_to(self.b)

    def to_dict(self) -> dict:
        """Serialisiert zu Dictionary für JSON."""
        return {"type": "Line2", "a": self.a.to_dict(), "b": self.b.to_dict()}

    def __repr__(self):
        return f"Line({self.a} -> {self.b})"


@dataclass(frozen=True)
class Arc2:
    """
    Kreisbogen mit Mittelpunkt, Radius, Startwinkel und vorzeichenbehaftetem
    Sweep (Radiant).

    delta > 0 läuft gegen den Uhrzeigersinn, delta < 0 im Uhrzeigersinn.
    |delta| ≈ 2π ist ein Vollkreis.
    """
    center: Vector2
    radius: float
    start_angle: float = 0.0
    delta: float = TWO_PI

    def __post_init__(self):
        object.__setattr__(self, "center", Vector2.of(self.center))
        object.__setattr__(self, "radius", float(self.radius))
        object.__setattr__(self, "start_angle", float(self.start_angle))
        object.__setattr__(self, "delta", float(self.delta))

    @property
    def kind(self) -> CurveType:
        return CurveType.ARC

    @property
    def end_angle(self) -> float:
        return self.start_angle + self.delta

    @property
    def is_ccw(self) -> bool:
        return self.delta >= 0.0

    @property
    def is_full_circle(self) -> bool:
        """Sweep deckt den ganzen Kreis ab (Toleranz ARC_FULL_CIRCLE)"""
        return is_full_circle(self.delta)

    @property
    def start_point(self) -> Vector2:
        return Vector2(
            self.center.x + self.radius * math.cos(self.start_angle),
            self.center.y + self.radius * math.sin(self.start_angle),
        )

    @property
    def end_point(self) -> Vector2:
        a = self.end_angle
        return Vector2(
            self.center.x + self.radius * math.cos(a),
            self.center.y + self.radius * math.sin(a),
        )

    @property
    def arc_length(self) -> float:
        return self.radius * abs(self.delta)

    def to_dict(self) -> dict:
        """Serialisiert zu Dictionary für JSON."""
        return {
            "type": "Arc2",
            "center": self.center.to_dict(),
            "radius": self.radius,
            "start_angle": self.start_angle,
            "delta": self.delta,
        }

    def __repr__(self):
        return (
            f"Arc(center={self.center}, r={self.radius:.4g}, "
            f"start={math.degrees(self.start_angle):.1f}°, delta={math.degrees(self.delta):.1f}°)"
        )


@dataclass(frozen=True)
class Bezier2:
    """Bézier-Kurve vom Grad degree (Standard: kubisch, 4 Kontrollpunkte)"""
    control_points: Tuple[Vector2, ...]
    degree: int = 3

    def __post_init__(self):
        object.__setattr__(self, "control_points", tuple(Vector2.of(p) for p in self.control_points))
        object.__setattr__(self, "degree", int(self.degree))

    @property
    def kind(self) -> CurveType:
        return CurveType.BEZIER

    def to_dict(self) -> dict:
        """Serialisiert zu Dictionary für JSON."""
        return {
            "type": "Bezier2",
            "degree": self.degree,
            "control_points": [p.to_dict() for p in self.control_points],
        }

    def __repr__(self):
        return f"Bezier(deg={self.degree}, {len(self.control_points)} pts)"


@dataclass(frozen=True)
class RationalBezier2:
    """Rationale Bézier-Kurve (Kontrollpunkte mit Gewichten)"""
    control_points: Tuple[Vector2, ...]
    weights: Tuple[float, ...]
    degree: int = 3

    def __post_init__(self):
        object.__setattr__(self, "control_points", tuple(Vector2.of(p) for p in self.control_points))
        object.__setattr__(self, "weights", tuple(float(w) for w in self.weights))
        object.__setattr__(self, "degree", int(self.degree))

    @property
    def kind(self) -> CurveType:
        return CurveType.RATIONAL_BEZIER

    def to_dict(self) -> dict:
        """Serialisiert zu Dictionary für JSON."""
        return {
            "type": "RationalBezier2",
            "degree": self.degree,
            "control_points": [p.to_dict() for p in self.control_points],
            "weights": list(self.weights),
        }

    def __repr__(self):
        return f"RationalBezier(deg={self.degree}, {len(self.control_points)} pts)"


Curve2 = Union[Line2, Arc2, Bezier2, RationalBezier2]

CURVE_TYPES = (Line2, Arc2, Bezier2, RationalBezier2)


# === Utility-Funktionen ===

def clamp01(v: float) -> float:
    """Begrenzt auf [0, 1]; NaN wird zu 0."""
    if v != v:
        return 0.0
    return 0.0 if v < 0.0 else 1.0 if v > 1.0 else v


def clamp(v: float, lo: float, hi: float) -> float:
    return lo if v < lo else hi if v > hi else v


def _bezier_shape_invalid(degree: int, control_points) -> bool:
    if degree < Tolerances.BEZIER_MIN_DEGREE or degree > Tolerances.BEZIER_MAX_DEGREE:
        return True
    if len(control_points) != degree + 1:
        return True
    return not all(p.is_finite() for p in control_points)


def is_singular(curve) -> bool:
    """
    Prüft ob eine Kurve entartet ist und weder ausgewertet noch geschnitten
    werden darf.

    - Linie: Länge² <= EPSILON_SINGULAR oder nicht-endliche Endpunkte
    - Bogen: Radius nicht endlich oder <= EPSILON_SINGULAR, |delta| zu klein
    - Bézier: Grad außerhalb 1..15, Anzahl Kontrollpunkte != Grad + 1
    - Rational: zusätzlich Gewichtsanzahl, nicht-endliche oder ~0 Gewichte

    Alles was kein Curve2 ist, gilt ebenfalls als singulär.
    """
    eps = Tolerances.EPSILON_SINGULAR

    if isinstance(curve, Line2):
        if not (curve.a.is_finite() and curve.b.is_finite()):
            return True
        return (curve.b - curve.a).length_sq <= eps

    if isinstance(curve, Arc2):
        if not (math.isfinite(curve.radius) and curve.radius > eps):
            return True
        if not (math.isfinite(curve.delta) and abs(curve.delta) > eps):
            return True
        return not (curve.center.is_finite() and math.isfinite(curve.start_angle))

    if isinstance(curve, Bezier2):
        return _bezier_shape_invalid(curve.degree, curve.control_points)

    if isinstance(curve, RationalBezier2):
        if _bezier_shape_invalid(curve.degree, curve.control_points):
            return True
        if len(curve.weights) != curve.degree + 1:
            return True
        return any(not math.isfinite(w) or abs(w) <= eps for w in curve.weights)

    return True


def eval_point(curve: Curve2, t: float) -> Vector2:
    """
    Punkt auf der Kurve bei Parameter t (0=Start, 1=Ende).

    t wird auf [0, 1] begrenzt. Total: wirft nie.
    """
    tt = clamp01(t)

    if isinstance(curve, Line2):
        return Vector2(
            curve.a.x + (curve.b.x - curve.a.x) * tt,
            curve.a.y + (curve.b.y - curve.a.y) * tt,
        )

    if isinstance(curve, Arc2):
        angle = curve.start_angle + curve.delta * tt
        return Vector2(
            curve.center.x + curve.radius * math.cos(angle),
            curve.center.y + curve.radius * math.sin(angle),
        )

    if isinstance(curve, Bezier2):
        return eval_bezier(curve.control_points, tt)

    if isinstance(curve, RationalBezier2):
        return eval_rational_bezier(curve.control_points, curve.weights, tt)

    logger.warning(f"[Curve] eval_point mit unbekanntem Typ {type(curve).__name__}")
    return Vector2(0.0, 0.0)


def curve_from_dict(data: dict) -> Curve2:
    """
    Deserialisiert eine Kurve aus to_dict()-Daten.

    Raises:
        ValueError: bei unbekanntem Typ oder fehlenden Feldern
    """
    curve_type = data.get("type") if isinstance(data, dict) else None
    try:
        if curve_type == "Line2":
            return Line2(Vector2.from_dict(data["a"]), Vector2.from_dict(data["b"]))
        if curve_type == "Arc2":
            return Arc2(
                center=Vector2.from_dict(data["center"]),
                radius=data["radius"],
                start_angle=data.get("start_angle", 0.0),
                delta=data.get("delta", TWO_PI),
            )
        if curve_type == "Bezier2":
            return Bezier2(
                control_points=tuple(Vector2.from_dict(p) for p in data["control_points"]),
                degree=data.get("degree", 3),
            )
        if curve_type == "RationalBezier2":
            return RationalBezier2(
                control_points=tuple(Vector2.from_dict(p) for p in data["control_points"]),
                weights=tuple(data["weights"]),
                degree=data.get("degree", 3),
            )
    except (KeyError, TypeError) as e:
        raise ValueError(f"Unvollständige Kurven-Daten für {curve_type}: {e}") from e

    raise ValueError(f"Unbekannter Kurven-Typ: {curve_type!r}")
