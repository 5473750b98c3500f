"""
Helper functions shared by the front-end tools.
"""

import logging
from typing import Optional, Tuple

import fluids.piping
from fluids.friction import _roughness

from utils.constants import DEFAULT_ROUGHNESS

logger = logging.getLogger("pipeflow-mcp.helpers")

# The fluids table lists "Steel" as drawn steel (1.52e-6 m); plain steel names mean commercial pipe
COMMERCIAL_STEEL_NAMES = {"steel", "carbon steel", "commercial steel", "commercial_steel", "carbon_steel"}


def get_pipe_roughness(material: Optional[str] = None, pipe_roughness: Optional[float] = None,
                       default: float = DEFAULT_ROUGHNESS) -> Tuple[float, str]:
    """Get pipe roughness based on material or default.

    Args:
        material: Optional pipe material name (see fluids.friction roughness table)
        pipe_roughness: Optional explicit roughness value in m
        default: Roughness used when neither is given or the material is unknown

    Returns:
        Tuple of (roughness value in m, source description)
    """
    if pipe_roughness is not None:
        return pipe_roughness, "Provided"

    if material is not None:
        if material.strip().lower() in COMMERCIAL_STEEL_NAMES:
            return DEFAULT_ROUGHNESS, f"Material Lookup '{material}' (commercial steel)"
        mat_lower = {k.lower(): k for k in _roughness.keys()}
        if material.lower() in mat_lower:
            actual_key = mat_lower[material.lower()]
            return _roughness[actual_key], f"Material Lookup '{actual_key}'"
        logger.warning(f"Material '{material}' not found, using default roughness {default}")
        return default, f"Default (Material '{material}' Not Found)"

    return default, "Default"


def lookup_nominal_pipe(nominal_size_in: float, schedule: str = "40") -> dict:
    """Inner diameter and dimensions of a standard pipe.

    Raises:
        ValueError: No such NPS/schedule combination
    """
    try:
        NPS, Di, Do, t = fluids.piping.nearest_pipe(NPS=nominal_size_in, schedule=schedule)
    except KeyError:
        raise ValueError(f"Unknown pipe schedule '{schedule}'")
    return {"NPS_in": NPS, "schedule": schedule, "Di_m": Di, "Do_m": Do, "t_m": t}
