"""
CurveKit - Achsenparallele Bounding-Box
Schnelle Zurückweisung in Subdivision und Flattening
"""

from dataclasses import dataclass
from typing import Iterable
import math

from .vector import Vector2

_INF = float("inf")


@dataclass(frozen=True)
class Box2:
    """
    Achsenparallele Box {min, max}.

    Die leere Box nutzt +∞/−∞ als Sentinels und schneidet nie etwas,
    weil min > max auf beiden Achsen gilt.
    """
    min: Vector2
    max: Vector2

    @classmethod
    def empty(cls) -> 'Box2':
        return cls(Vector2(_INF, _INF), Vector2(-_INF, -_INF))

    @classmethod
    def from_points(cls, points: Iterable[Vector2]) -> 'Box2':
        """Box über alle Punkte; ohne Punkte die leere Box."""
        min_x = min_y = _INF
        max_x = max_y = -_INF
        for p in points:
            if p.x < min_x:
                min_x = p.x
            if p.y < min_y:
                min_y = p.y
            if p.x > max_x:
                max_x = p.x
            if p.y > max_y:
                max_y = p.y
        return cls(Vector2(min_x, min_y), Vector2(max_x, max_y))

    @classmethod
    def bounds_of(cls, points: Iterable[Vector2]) -> 'Box2':
        """
        Bounds für die Solver: nicht-endliche Extrema (leere Liste,
        NaN-Auswertung) kollabieren zur Ursprungs-Box statt zu ±∞.
        """
        box = cls.from_points(points)
        if not all(math.isfinite(v) for v in (box.min.x, box.min.y, box.max.x, box.max.y)):
            return cls(Vector2(0.0, 0.0), Vector2(0.0, 0.0))
        return box

    @property
    def is_empty(self) -> bool:
        return self.min.x > self.max.x or self.min.y > self.max.y

    def expand(self, p: Vector2) -> 'Box2':
        return Box2(
            Vector2(min(self.min.x, p.x), min(self.min.y, p.y)),
            Vector2(max(self.max.x, p.x), max(self.max.y, p.y)),
        )

    def union(self, other: 'Box2') -> 'Box2':
        return Box2(
            Vector2(min(self.min.x, other.min.x), min(self.min.y, other.min.y)),
            Vector2(max(self.max.x, other.max.x), max(self.max.y, other.max.y)),
        )

    def intersects(self, other: 'Box2', epsilon: float = 0.0) -> bool:
        """Inklusiver Test: Berührung an Kante oder Ecke zählt als Schnitt."""
        return not (
            self.max.x < other.min.x - epsilon
            or self.min.x > other.max.x + epsilon
            or self.max.y < other.min.y - epsilon
            or self.min.y > other.max.y + epsilon
        )

    def contains(self, p: Vector2) -> bool:
        return self.min.x <= p.x <= self.max.x and self.min.y <= p.y <= self.max.y

    @property
    def width(self) -> float:
        return self.max.x - self.min.x

    @property
    def height(self) -> float:
        return self.max.y - self.min.y

    @property
    def max_extent(self) -> float:
        """Größte Kantenlänge (Kriterium für Subdivision)"""
        return max(self.width, self.height)

    @property
    def center(self) -> Vector2:
        return Vector2((self.min.x + self.max.x) / 2, (self.min.y + self.max.y) / 2)

    def __repr__(self):
        return f"Box({self.min} .. {self.max})"
