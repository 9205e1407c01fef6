from pathlib import Path

import pytest
from loguru import logger

from config.feature_flags import set_flag


# Command-line options for randomized stress tests
def pytest_addoption(parser):
    """Register custom command-line options for pytest."""
    parser.addoption(
        "--iterations",
        action="store",
        default=100,
        type=int,
        help="Number of random curve pairs for property tests"
    )


@pytest.fixture
def iterations(request):
    """Get iteration count from command line."""
    return request.config.getoption("--iterations")


# Global Feature Flag Defaults - Single Source of Truth for Test Isolation
# ========================================================================
# WICHTIG: Jeder Test muss mit sauberen Feature-Flags starten.
# Diese Defaults müssen mit config/feature_flags.py synchron gehalten werden.
FEATURE_FLAG_DEFAULTS = {
    # Debug-Modi
    "intersect_debug": False,

    # Performance
    "flatten_broadphase": True,

    # Genauigkeit
    "flatten_refine": True,
}


def _is_debug_suite_test(node: pytest.Item) -> bool:
    """Enable solver debug logging only for dedicated debug test modules."""
    try:
        return Path(str(node.fspath)).name.startswith("test_debug_")
    except Exception:
        return "test_debug_" in str(getattr(node, "nodeid", ""))


@pytest.fixture(autouse=True)
def _global_feature_flag_isolation():
    """
    Globale Feature-Flag-Isolation.

    Stellt sicher, dass jeder Test mit sauberen, deterministischen
    Feature-Flags startet. Verhindert Leakage von Flag-Mutationen
    (z.B. flatten_broadphase=False) in andere Module.
    """
    # Pre-Test: Alle Flags auf Defaults zurücksetzen
    for key, value in FEATURE_FLAG_DEFAULTS.items():
        set_flag(key, value)

    yield

    # Post-Test: Alle Flags auf Defaults zurücksetzen (cleanup)
    for key, value in FEATURE_FLAG_DEFAULTS.items():
        set_flag(key, value)


@pytest.fixture(autouse=True)
def _intersect_debug_only_for_debug_suite(request: pytest.FixtureRequest, _global_feature_flag_isolation):
    """
    Enable intersect_debug only for dedicated debug test modules.

    HINWEIS: Dieses Fixture setzt nur intersect_debug, alle anderen
    Flags werden von _global_feature_flag_isolation verwaltet.
    """
    if _is_debug_suite_test(request.node):
        set_flag("intersect_debug", True)
    yield


@pytest.fixture
def log_messages():
    """Sammelt loguru-Ausgaben (ab DEBUG) als Liste von (level, message)."""
    messages = []
    sink_id = logger.add(
        lambda msg: messages.append((msg.record["level"].name, msg.record["message"])),
        level="DEBUG",
    )
    yield messages
    logger.remove(sink_id)
