"""
CurveKit - Feature Flags
========================

Feature Flags ermöglichen inkrementelle Rollouts und einfaches Rollback.
Diese Datei enthält nur aktive Debug-Flags und Performance-Schalter der
Schnittpunkt-Engine. Flags werden während eines intersect()-Aufrufs nur
gelesen, nie geschrieben.
"""

from typing import Dict

# Feature Flag Registry
# =====================
FEATURE_FLAGS: Dict[str, bool] = {
    # Debug-Modi
    "intersect_debug": False,  # Solver-Wahl, Knotenzahlen, Flattening-Statistik (sehr verbose)

    # Performance
    "flatten_broadphase": True,  # NumPy-Vorfilter für Sehnenpaare statt vollständigem Scan

    # Genauigkeit
    "flatten_refine": True,  # Sehnen-Treffer per Newton auf die echten Kurven nachziehen
}


def is_enabled(flag: str) -> bool:
    """
    Prüft ob ein Feature-Flag aktiviert ist.

    Args:
        flag: Name des Feature-Flags

    Returns:
        True wenn aktiviert, False wenn nicht aktiviert oder unbekannt
    """
    return FEATURE_FLAGS.get(flag, False)


def set_flag(flag: str, value: bool) -> None:
    """
    Setzt ein Feature-Flag zur Laufzeit.
    Nützlich für Tests und Debugging.

    Args:
        flag: Name des Feature-Flags
        value: Neuer Wert
    """
    FEATURE_FLAGS[flag] = value


def get_all_flags() -> Dict[str, bool]:
    """Gibt alle Feature-Flags zurück."""
    return FEATURE_FLAGS.copy()
