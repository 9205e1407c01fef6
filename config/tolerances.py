"""
CurveKit - Zentralisierte Toleranz-Konfiguration
================================================

Alle Toleranzen und Rechenbudgets der Schnittpunkt-Engine an einem Ort.

Toleranz-Philosophie:
- Distanz-Epsilon (vom Aufrufer): 1e-6 Default - Punkt-Vergleich
- Singularität: 1e-12 - nur echt entartete Kurven ablehnen
- Jacobi-Determinante: 1e-14 - Newton bricht bei fast singulärer Matrix ab
- Budgets (Tiefe/Kandidaten): harte Obergrenzen, keine Hinweise!

Verwendung:
    from config.tolerances import Tolerances

    # Direkt als Klassenvariablen
    depth = Tolerances.INTERSECT_MAX_DEPTH

    # Oder via Convenience-Funktionen
    from config.tolerances import intersect_tolerance
    eps = intersect_tolerance()
"""


class Tolerances:
    """
    Zentrale Toleranz-Konstanten für CurveKit.

    Kategorien:
    - INTERSECT_*: Defaults für IntersectOptions
    - EPSILON_*: Numerische Stabilität
    - ARC_*: Winkel-/Bogen-Arithmetik
    - FLATTEN_*: Polylinien-Approximation
    - NEWTON_* / COARSE_*: Verfeinerung in der Subdivision
    - MERGE_*: Deduplizierung der Ergebnisse
    """

    # =========================================================================
    # Intersection-Defaults
    # =========================================================================

    # Distanz-Toleranz wenn der Aufrufer keine angibt
    INTERSECT_DISTANCE = 1e-6

    # Maximale Rekursionstiefe der Subdivision (harte Grenze)
    INTERSECT_MAX_DEPTH = 28

    # Maximale Anzahl gesammelter Kandidaten (harte Grenze)
    INTERSECT_MAX_CANDIDATES = 2048

    # =========================================================================
    # Mathematische Epsilon-Werte (Numerische Stabilität)
    # =========================================================================

    # Kurve gilt als entartet (Länge², Radius, Sweep, Gewicht)
    EPSILON_SINGULAR = 1e-12

    # Newton: Jacobi-Determinante unterhalb -> Abbruch
    EPSILON_JACOBIAN = 1e-14

    # =========================================================================
    # Bögen / Winkel
    # =========================================================================

    # |delta| so nah an 2π gilt als Vollkreis
    ARC_FULL_CIRCLE = 1e-9

    # Mindest-Schlupf (Parameter-Einheiten) bei der Bogen-Inversion
    ARC_PARAM_SLACK = 1e-9

    # =========================================================================
    # Flattening (Polylinien-Approximation)
    # =========================================================================

    FLATTEN_MIN_SEGMENTS = 16
    FLATTEN_MAX_SEGMENTS = 256

    # Segmentzahl bei distance_epsilon <= 0
    FLATTEN_DEFAULT_SEGMENTS = 64

    # Untergrenze für 1/eps (verhindert riesige Segmentzahlen)
    FLATTEN_EPSILON_FLOOR = 1e-6

    # Polster der NumPy-Broad-Phase auf [−eps, 1+eps] (Obermenge der Einzelprüfung)
    BROADPHASE_PADDING = 1e-9

    # =========================================================================
    # Subdivision-Verfeinerung
    # =========================================================================

    NEWTON_MAX_ITERATIONS = 8

    # Schrittweite der Finite-Differenzen: max(eps * FACTOR, MIN)
    NEWTON_STEP_FACTOR = 0.1
    NEWTON_STEP_MIN = 1e-6

    # Akzeptanz: Fehler <= eps * FACTOR
    NEWTON_ACCEPT_FACTOR = 2.0
    COARSE_ACCEPT_FACTOR = 4.0

    # Stützstellen pro Kurve im Grob-Raster (5 x 5)
    COARSE_GRID_SAMPLES = 5

    # =========================================================================
    # Merge / Dedup
    # =========================================================================

    # Punkte mit Kreuz-Kurven-Fehler > eps * FACTOR werden verworfen
    MERGE_ERROR_FACTOR = 4.0

    # =========================================================================
    # Bézier
    # =========================================================================

    BEZIER_MIN_DEGREE = 1
    BEZIER_MAX_DEGREE = 15


# =============================================================================
# Convenience-Funktionen
# =============================================================================

def intersect_tolerance() -> float:
    """Gibt die Standard-Distanztoleranz zurück."""
    return Tolerances.INTERSECT_DISTANCE


def max_depth() -> int:
    """Gibt die Standard-Subdivisionstiefe zurück."""
    return Tolerances.INTERSECT_MAX_DEPTH


def max_candidates() -> int:
    """Gibt das Standard-Kandidatenbudget zurück."""
    return Tolerances.INTERSECT_MAX_CANDIDATES


# =============================================================================
# Toleranz-Validierung (für Debugging)
# =============================================================================

def validate_tolerances():
    """
    Validiert dass alle Toleranzen sinnvolle Werte haben.
    Nützlich für Tests und Debugging.
    """
    issues = []

    if not (Tolerances.INTERSECT_DISTANCE >= 0.0):
        issues.append(f"INTERSECT_DISTANCE negativ: {Tolerances.INTERSECT_DISTANCE}")

    if Tolerances.INTERSECT_MAX_DEPTH < 1:
        issues.append(f"INTERSECT_MAX_DEPTH zu klein: {Tolerances.INTERSECT_MAX_DEPTH}")

    if Tolerances.INTERSECT_MAX_CANDIDATES < 1:
        issues.append(f"INTERSECT_MAX_CANDIDATES zu klein: {Tolerances.INTERSECT_MAX_CANDIDATES}")

    # Flattening-Grenzen müssen eine gültige Spanne bilden
    if not (1 <= Tolerances.FLATTEN_MIN_SEGMENTS <= Tolerances.FLATTEN_MAX_SEGMENTS):
        issues.append(
            f"FLATTEN_MIN_SEGMENTS ({Tolerances.FLATTEN_MIN_SEGMENTS}) > "
            f"FLATTEN_MAX_SEGMENTS ({Tolerances.FLATTEN_MAX_SEGMENTS})"
        )

    # Grobsuche darf nicht strenger sein als Newton
    if Tolerances.COARSE_ACCEPT_FACTOR < Tolerances.NEWTON_ACCEPT_FACTOR:
        issues.append(
            f"COARSE_ACCEPT_FACTOR ({Tolerances.COARSE_ACCEPT_FACTOR}) strenger als "
            f"NEWTON_ACCEPT_FACTOR ({Tolerances.NEWTON_ACCEPT_FACTOR})"
        )

    if Tolerances.COARSE_GRID_SAMPLES < 2:
        issues.append(f"COARSE_GRID_SAMPLES zu klein: {Tolerances.COARSE_GRID_SAMPLES}")

    if not (1 <= Tolerances.BEZIER_MIN_DEGREE <= Tolerances.BEZIER_MAX_DEGREE):
        issues.append(
            f"Bézier-Gradbereich ungültig: {Tolerances.BEZIER_MIN_DEGREE}..{Tolerances.BEZIER_MAX_DEGREE}"
        )

    return issues


# Automatische Validierung beim Import (nur Warnung, kein Fehler)
_validation_issues = validate_tolerances()
if _validation_issues:
    from loguru import logger
    for issue in _validation_issues:
        logger.warning(f"Toleranz-Validierung: {issue}")
