"""
CurveKit - Deduplizierung der Schnitt-Ergebnisse
"""

from typing import List

from config.tolerances import Tolerances

from .curves import eval_point
from .results import IntersectionItem, IntersectionOverlap, IntersectionPoint


def dedupe_items(items: List[IntersectionItem], c0, c1, eps: float) -> List[IntersectionItem]:
    """
    Fasst nahe beieinander liegende Punkte zusammen und sortiert.

    - Punkte, deren Position auf Kurve 0 höchstens eps auseinander liegt,
      bilden einen Cluster (paarweiser Scan in Eingabereihenfolge)
    - Repräsentant: erstes Mitglied mit is_sample=True, sonst das erste
    - Repräsentanten mit Kreuz-Kurven-Fehler > 4·eps werden verworfen
    - Überlappungen bleiben unverändert
    - Stabile Sortierung nach Parameter auf Kurve 0 (Überlappung: t0[0])
    """
    points = [it for it in items if isinstance(it, IntersectionPoint)]
    overlaps = [it for it in items if isinstance(it, IntersectionOverlap)]

    positions = [eval_point(c0, p.t0) for p in points]
    eps_sq = eps * eps
    max_error = eps * Tolerances.MERGE_ERROR_FACTOR

    out: List[IntersectionItem] = []
    used = [False] * len(points)
    for i, first in enumerate(points):
        if used[i]:
            continue
        used[i] = True
        best = first
        best_pos = positions[i]
        for j in range(i + 1, len(points)):
            if used[j] or positions[i].distance_sq(positions[j]) > eps_sq:
                continue
            used[j] = True
            if not best.is_sample and points[j].is_sample:
                best = points[j]
                best_pos = positions[j]

        if best_pos.distance_to(eval_point(c1, best.t1)) <= max_error:
            out.append(best)

    out.extend(overlaps)
    out.sort(key=lambda it: it.sort_key)
    return out
