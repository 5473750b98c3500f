"""
Fluid name aliases mapping user input to the calculator's fluid classes.
"""

import logging
from typing import Optional

from pipecore.models import FluidClass, PhaseHint

logger = logging.getLogger("pipeflow-mcp.fluid_aliases")

# Mapping of common aliases to fluid classes
FLUID_NAME_MAP = {
    # Steam
    'steam': FluidClass.STEAM,
    'vapor': FluidClass.STEAM,
    'vapour': FluidClass.STEAM,
    'saturated steam': FluidClass.STEAM,
    'superheated steam': FluidClass.STEAM,
    'sat steam': FluidClass.STEAM,

    # Water
    'water': FluidClass.WATER,
    'h2o': FluidClass.WATER,
    'cooling water': FluidClass.WATER,
    'feedwater': FluidClass.WATER,
    'feed water': FluidClass.WATER,
    'hot water': FluidClass.WATER,

    # Condensate
    'condensate': FluidClass.CONDENSATE,
    'steam condensate': FluidClass.CONDENSATE,
    'drain': FluidClass.CONDENSATE,

    # Air
    'air': FluidClass.AIR,
    'compressed air': FluidClass.AIR,
    'compressed_air': FluidClass.AIR,
    'instrument air': FluidClass.AIR,

    # Generic gas (manual properties only)
    'gas': FluidClass.GAS,
    'natural gas': FluidClass.GAS,
    'naturalgas': FluidClass.GAS,
    'natural_gas': FluidClass.GAS,
    'ng': FluidClass.GAS,
    'lng': FluidClass.GAS,
    'lpg': FluidClass.GAS,
    'fuel gas': FluidClass.GAS,
    'biogas': FluidClass.GAS,
    'nitrogen': FluidClass.GAS,
    'n2': FluidClass.GAS,
}

# Aliases that imply a phase
PHASE_FROM_NAME = {
    'saturated steam': PhaseHint.SATURATED,
    'sat steam': PhaseHint.SATURATED,
    'superheated steam': PhaseHint.SUPERHEATED,
}


def normalize_fluid_name(name: str) -> str:
    """Lowercase, strip and collapse separators of a raw fluid name."""
    if not name:
        return name
    return " ".join(name.lower().strip().replace("-", " ").split())


def map_fluid_name(name: str) -> Optional[FluidClass]:
    """
    Map a fluid name or alias to a fluid class.

    Args:
        name: Input fluid name (can be an alias or a class value)

    Returns:
        FluidClass, or None when the name is not recognised
    """
    if not name:
        return None
    normalized = normalize_fluid_name(name)
    if normalized in FLUID_NAME_MAP:
        fluid_class = FLUID_NAME_MAP[normalized]
        if fluid_class is FluidClass.GAS and normalized != 'gas':
            logger.info(
                f"'{name}' has no property model and is treated as generic gas; "
                "density and viscosity must be supplied."
            )
        return fluid_class
    return None


def phase_hint_for_name(name: str) -> Optional[PhaseHint]:
    """Phase implied by the fluid name, e.g. 'superheated steam'."""
    if not name:
        return None
    return PHASE_FROM_NAME.get(normalize_fluid_name(name))
