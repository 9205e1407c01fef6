"""
CurveKit - Version
Import: from config.version import VERSION, VERSION_STRING, APP_NAME
"""

APP_NAME = "CurveKit"

# Semantic Versioning; muss zu pyproject.toml passen
VERSION = "0.1.0"

# "alpha", "beta", "rc1", "" (leer für stable release)
VERSION_SUFFIX = "alpha"

VERSION_STRING = f"{VERSION}-{VERSION_SUFFIX}" if VERSION_SUFFIX else VERSION
