"""
CurveKit - 2D-Vektor
Unveränderlicher Punkt/Vektor mit Grundarithmetik
"""

from dataclasses import dataclass
from typing import Tuple
import math


def _coerce_scalar(value) -> float:
    """Wandelt NumPy-Skalare und Zahlen-Wrapper in native Floats um."""
    item_attr = getattr(value, "item", None)
    if callable(item_attr):
        value = item_attr()
    return float(value)


@dataclass(frozen=True)
class Vector2:
    """2D-Punkt bzw. -Vektor (unveränderlich)"""
    x: float = 0.0
    y: float = 0.0

    def __post_init__(self):
        """
        FIREWALL: Wandelt alles sofort in native Python-Floats um.
        Schützt vor gemischten NumPy-Typen in den Solver-Ergebnissen.
        """
        object.__setattr__(self, "x", _coerce_scalar(self.x))
        object.__setattr__(self, "y", _coerce_scalar(self.y))

    def __add__(self, other: 'Vector2') -> 'Vector2':
        return Vector2(self.x + other.x, self.y + other.y)

    def __sub__(self, other: 'Vector2') -> 'Vector2':
        return Vector2(self.x - other.x, self.y - other.y)

    def __mul__(self, s: float) -> 'Vector2':
        return Vector2(self.x * s, self.y * s)

    __rmul__ = __mul__

    def __truediv__(self, s: float) -> 'Vector2':
        return Vector2(self.x / s, self.y / s)

    def __neg__(self) -> 'Vector2':
        return Vector2(-self.x, -self.y)

    def dot(self, other: 'Vector2') -> float:
        return self.x * other.x + self.y * other.y

    def cross(self, other: 'Vector2') -> float:
        """2D-Kreuzprodukt (Skalar, z-Komponente)"""
        return self.x * other.y - self.y * other.x

    @property
    def length(self) -> float:
        return math.hypot(self.x, self.y)

    @property
    def length_sq(self) -> float:
        return self.x * self.x + self.y * self.y

    def distance_to(self, other: 'Vector2') -> float:
        return math.hypot(self.x - other.x, self.y - other.y)

    def distance_sq(self, other: 'Vector2') -> float:
        dx = self.x - other.x
        dy = self.y - other.y
        return dx * dx + dy * dy

    def normalized(self) -> 'Vector2':
        """Einheitsvektor; der Nullvektor bleibt Nullvektor."""
        length = self.length
        if length == 0.0:
            return Vector2(0.0, 0.0)
        return Vector2(self.x / length, self.y / length)

    def rotated(self, angle: float) -> 'Vector2':
        """Rotation um den Ursprung (Radiant, gegen den Uhrzeigersinn)"""
        c = math.cos(angle)
        s = math.sin(angle)
        return Vector2(self.x * c - self.y * s, self.x * s + self.y * c)

    def lerp(self, other: 'Vector2', t: float) -> 'Vector2':
        return Vector2(self.x + (other.x - self.x) * t, self.y + (other.y - self.y) * t)

    def equals(self, other: 'Vector2', epsilon: float = 0.0) -> bool:
        """Komponentenweiser Vergleich; epsilon == 0 bedeutet exakt."""
        if epsilon == 0.0:
            return self.x == other.x and self.y == other.y
        return abs(self.x - other.x) <= epsilon and abs(self.y - other.y) <= epsilon

    def is_finite(self) -> bool:
        return math.isfinite(self.x) and math.isfinite(self.y)

    def as_tuple(self) -> Tuple[float, float]:
        return (self.x, self.y)

    def to_dict(self) -> dict:
        """Serialisiert zu Dictionary für JSON."""
        return {"x": self.x, "y": self.y}

    @classmethod
    def from_dict(cls, data: dict) -> 'Vector2':
        """Deserialisiert von Dictionary."""
        try:
            return cls(data["x"], data["y"])
        except (KeyError, TypeError) as e:
            raise ValueError(f"Ungültige Vektor-Daten: {data!r}") from e

    @classmethod
    def of(cls, value) -> 'Vector2':
        """Akzeptiert Vector2 oder (x, y)-Tupel."""
        if isinstance(value, Vector2):
            return value
        x, y = value
        return cls(x, y)

    def __repr__(self):
        return f"V({self.x:.4g}, {self.y:.4g})"


ORIGIN = Vector2(0.0, 0.0)
