"""
Import helpers for optional dependencies.

The property estimation backend (CoolProp) is probed once at import time. When
it is missing, estimation reports a failure outcome and the resolver falls
back to manual properties; nothing is substituted for the library.
"""

import logging

logger = logging.getLogger("pipeflow-mcp.imports")

# CoolProp availability check
COOLPROP_AVAILABLE = False
CP = None

try:
    import CoolProp.CoolProp as _CP
    COOLPROP_AVAILABLE = True
    CP = _CP
    logger.info("CoolProp package successfully imported")
except ImportError:
    logger.warning("CoolProp module not available. IF97 property estimation will be disabled.")

# Backend strings understood by CoolProp.PropsSI
IF97_WATER = "IF97::Water"
HEOS_AIR = "Air"


def get_coolprop_version():
    """Return the CoolProp version string, or None if CoolProp is unavailable."""
    if not COOLPROP_AVAILABLE:
        return None
    try:
        return CP.get_global_param_string("version")
    except ValueError as e:
        logger.error("Error getting CoolProp version: %s", e)
        return None
