"""
CurveKit - Ergebnis-Typen
Schnittpunkte, Überlappungen und Optionen des Schnitt-Solvers.
"""

from dataclasses import dataclass, field, replace
from typing import List, Tuple, Union
import math

from config.tolerances import Tolerances


@dataclass(frozen=True)
class IntersectionPoint:
    """
    Einzelner Schnittpunkt.

    t0/t1: Parameter auf Kurve 0 bzw. Kurve 1.
    is_sample: True wenn der Punkt aus einer direkten Abtastung stammt
    (Endpunkt, Kollinearität) statt aus einer Gleichungslösung.
    """
    t0: float
    t1: float
    is_sample: bool = False

    def swapped(self) -> 'IntersectionPoint':
        return IntersectionPoint(self.t1, self.t0, self.is_sample)

    @property
    def sort_key(self) -> float:
        return self.t0

    def to_dict(self) -> dict:
        return {"kind": "point", "t0": self.t0, "t1": self.t1, "is_sample": self.is_sample}


@dataclass(frozen=True)
class IntersectionOverlap:
    """
    Gemeinsamer Abschnitt zweier Kurven.

    t0 ist aufsteigend. t1[k] ist der Parameter auf Kurve 1, der t0[k]
    entspricht; laufen die Kurven gegenläufig, ist t1 absteigend.
    """
    t0: Tuple[float, float]
    t1: Tuple[float, float]
    is_sample: Tuple[bool, bool] = (True, True)

    def swapped(self) -> 'IntersectionOverlap':
        """Rollen der Kurven tauschen; t0 bleibt aufsteigend."""
        t0, t1, flags = self.t1, self.t0, self.is_sample
        if t0[0] > t0[1]:
            t0 = (t0[1], t0[0])
            t1 = (t1[1], t1[0])
            flags = (flags[1], flags[0])
        return IntersectionOverlap(tuple(t0), tuple(t1), tuple(flags))

    @property
    def sort_key(self) -> float:
        return self.t0[0]

    def to_dict(self) -> dict:
        return {
            "kind": "overlap",
            "t0": list(self.t0),
            "t1": list(self.t1),
            "is_sample": list(self.is_sample),
        }


IntersectionItem = Union[IntersectionPoint, IntersectionOverlap]


@dataclass
class CurveCurveIntersections:
    """Ergebnis von intersect()"""
    is_singularity0: bool = False
    is_singularity1: bool = False
    items: List[IntersectionItem] = field(default_factory=list)

    @property
    def points(self) -> List[IntersectionPoint]:
        return [it for it in self.items if isinstance(it, IntersectionPoint)]

    @property
    def overlaps(self) -> List[IntersectionOverlap]:
        return [it for it in self.items if isinstance(it, IntersectionOverlap)]

    @property
    def is_empty(self) -> bool:
        return not self.items

    @property
    def is_singular(self) -> bool:
        return self.is_singularity0 or self.is_singularity1

    def to_dict(self) -> dict:
        return {
            "is_singularity0": self.is_singularity0,
            "is_singularity1": self.is_singularity1,
            "items": [it.to_dict() for it in self.items],
        }

    def __len__(self):
        return len(self.items)


@dataclass(frozen=True)
class IntersectOptions:
    """
    Optionen für intersect().

    distance_epsilon: Distanz-Toleranz (Modell-Einheiten)
    max_depth: maximale Subdivisions-Tiefe
    max_candidates: maximale Anzahl gesammelter Subdivisions-Kandidaten
    """
    distance_epsilon: float = Tolerances.INTERSECT_DISTANCE
    max_depth: int = Tolerances.INTERSECT_MAX_DEPTH
    max_candidates: int = Tolerances.INTERSECT_MAX_CANDIDATES

    def sanitized(self) -> 'IntersectOptions':
        """
        Begrenzte Kopie: epsilon >= 0 (nicht endlich -> 0), Budgets >= 0.
        """
        eps = self.distance_epsilon
        try:
            eps = float(eps)
        except (TypeError, ValueError):
            eps = 0.0
        if not math.isfinite(eps) or eps < 0.0:
            eps = 0.0
        return replace(
            self,
            distance_epsilon=eps,
            max_depth=_budget(self.max_depth, Tolerances.INTERSECT_MAX_DEPTH),
            max_candidates=_budget(self.max_candidates, Tolerances.INTERSECT_MAX_CANDIDATES),
        )


def _budget(value, default: int) -> int:
    """Ganzzahliges Budget >= 0; None oder Unsinn -> Standardwert."""
    if value is None:
        return default
    try:
        return max(0, int(value))
    except (TypeError, ValueError, OverflowError):
        return default
