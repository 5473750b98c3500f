"""Unified property lookup for fluids, saturation states and pipes."""

import logging
import math
from typing import Literal, Optional

from pipecore import PipeCalcError, resolve
from pipecore import units
from pipecore.errors import PropertyUnavailable
from pipecore.models import FluidClass, PropertySource
from pipecore.properties import ideal_gas_density, saturation_pressure, saturation_temperature
from utils.constants import MW_AIR
from utils.input_resolver import InputResolver
from utils.helpers import get_pipe_roughness, lookup_nominal_pipe
from utils.import_helpers import COOLPROP_AVAILABLE, get_coolprop_version
from utils.json_helpers import error_json, safe_json_dumps

logger = logging.getLogger("pipeflow-mcp.tools.properties")


def _ideal_gas_hint(fluid, thermo, gas_molar_mass):
    """Ideal-gas density suggestion where the property model did not apply, else None."""
    if not thermo.has_state:
        return None
    molar_mass = {FluidClass.AIR: MW_AIR, FluidClass.GAS: gas_molar_mass}.get(fluid.fluid_class)
    if fluid.fluid_class is not FluidClass.STEAM and molar_mass is None:
        return None
    return ideal_gas_density(thermo.pressure_pa, thermo.temperature_k, molar_mass=molar_mass)


def _fluid_lookup(resolver, fluid_name, phase, pressure, pressure_unit, pressure_mode,
                  temperature, temperature_unit, density, density_unit, viscosity, viscosity_unit,
                  gas_molar_mass):
    fluid = resolver.resolve_fluid(fluid_name, phase)
    thermo = resolver.resolve_thermo(pressure, pressure_unit, pressure_mode, temperature,
                                     temperature_unit, density, density_unit, viscosity, viscosity_unit)
    if resolver.has_errors:
        return error_json("Input resolution failed", errors=resolver.error_log, log=resolver.results_log)

    try:
        props = resolve(fluid, thermo)
    except PropertyUnavailable as e:
        return error_json(e, ideal_gas_density_kg_m3=_ideal_gas_hint(fluid, thermo, gas_molar_mass),
                          log=resolver.results_log)
    config = resolver.config
    rho_unit = config.unit_for("density")
    mu_unit = config.unit_for("viscosity")

    result = {
        "fluid": fluid.fluid_class.value,
        "phase_hint": fluid.phase_hint.value,
        "source": props.source.value,
        "state": props.state,
        "density_kg_m3": props.density,
        "viscosity_pa_s": props.viscosity,
        "kinematic_viscosity_m2_s": props.viscosity / props.density,
        "density": units.density_from_si(props.density, rho_unit),
        "density_unit": rho_unit,
        "viscosity": units.viscosity_from_si(props.viscosity, mu_unit),
        "viscosity_unit": mu_unit,
        "estimation_error": props.estimation_error,
        "inputs_resolved": resolver.results_log,
    }
    if props.saturation_temperature_k is not None:
        t_unit = config.unit_for("temperature")
        result["saturation_temperature_k"] = props.saturation_temperature_k
        result["saturation_temperature"] = units.temperature_from_si(props.saturation_temperature_k, t_unit)
        result["temperature_unit"] = t_unit

    if props.source is not PropertySource.ESTIMATED:
        result["ideal_gas_density_kg_m3"] = _ideal_gas_hint(fluid, thermo, gas_molar_mass)
    return safe_json_dumps(result)


def _saturation_lookup(resolver, pressure, pressure_unit, pressure_mode, temperature, temperature_unit):
    thermo = resolver.resolve_thermo(pressure, pressure_unit, pressure_mode, temperature, temperature_unit)
    if resolver.has_errors:
        return error_json("Input resolution failed", errors=resolver.error_log, log=resolver.results_log)
    if (thermo.pressure_pa is None) == (thermo.temperature_k is None):
        return error_json("Provide exactly one of pressure or temperature for a saturation lookup")

    config = resolver.config
    p_unit = config.unit_for("pressure")
    t_unit = config.unit_for("temperature")
    if thermo.pressure_pa is not None:
        p_sat = thermo.pressure_pa
        t_sat = saturation_temperature(p_sat)
    else:
        t_sat = thermo.temperature_k
        p_sat = saturation_pressure(t_sat)

    return safe_json_dumps({
        "fluid": "water",
        "saturation_pressure_pa": p_sat,
        "saturation_pressure": units.pressure_from_si(p_sat, p_unit),
        "pressure_unit": f"{p_unit} abs",
        "saturation_temperature_k": t_sat,
        "saturation_temperature": units.temperature_from_si(t_sat, t_unit),
        "temperature_unit": t_unit,
        "inputs_resolved": resolver.results_log,
    })


def _pipe_lookup(nominal_size, schedule, material):
    pipe = lookup_nominal_pipe(nominal_size, schedule)
    roughness, source = get_pipe_roughness(material)
    pipe.update({
        "Di_mm": pipe["Di_m"] * 1000.0,
        "Do_mm": pipe["Do_m"] * 1000.0,
        "flow_area_m2": math.pi * pipe["Di_m"] ** 2 / 4.0,
        "roughness_m": roughness,
        "roughness_source": source,
    })
    return safe_json_dumps(pipe)


def properties(
    lookup_type: Literal["fluid", "saturation", "pipe", "status"] = "fluid",

    # Fluid and saturation parameters
    fluid_name: Optional[str] = None,
    phase: Optional[Literal["saturated", "superheated", "liquid", "unspecified"]] = None,
    pressure: Optional[float] = None,
    pressure_unit: Optional[str] = None,
    pressure_mode: Optional[Literal["gauge", "absolute"]] = None,
    temperature: Optional[float] = None,
    temperature_unit: Optional[str] = None,
    density: Optional[float] = None,
    density_unit: Optional[str] = None,
    viscosity: Optional[float] = None,
    viscosity_unit: Optional[str] = None,
    gas_molar_mass: Optional[float] = None,

    # Pipe parameters
    nominal_size: Optional[float] = None,
    schedule: Optional[str] = None,
    material: Optional[str] = None,
) -> str:
    """Unified property lookup for fluids, water saturation and pipes.

    - lookup_type='fluid': resolve density and viscosity exactly as the pipe
      flow calculation does (estimated, manual or manual-fallback)
    - lookup_type='saturation': water saturation temperature for a pressure,
      or saturation pressure for a temperature (IF97)
    - lookup_type='pipe': pipe dimensions for an NPS and schedule, plus roughness
    - lookup_type='status': property backend availability

    Examples:
        >>> properties(lookup_type="fluid", fluid_name="steam", pressure=10,
        ...            temperature=200)
        >>> properties(lookup_type="saturation", pressure=10, pressure_unit="bar")
        >>> properties(lookup_type="pipe", nominal_size=2, schedule="40")
    """
    resolver = InputResolver("properties")
    try:
        if lookup_type == "fluid":
            return _fluid_lookup(resolver, fluid_name, phase, pressure, pressure_unit, pressure_mode,
                                 temperature, temperature_unit, density, density_unit,
                                 viscosity, viscosity_unit, gas_molar_mass)
        elif lookup_type == "saturation":
            return _saturation_lookup(resolver, pressure, pressure_unit, pressure_mode,
                                      temperature, temperature_unit)
        elif lookup_type == "pipe":
            if nominal_size is None:
                return error_json("nominal_size required for pipe lookup")
            return _pipe_lookup(nominal_size, schedule or resolver.config.default_schedule, material)
        elif lookup_type == "status":
            return safe_json_dumps({
                "coolprop_available": COOLPROP_AVAILABLE,
                "coolprop_version": get_coolprop_version(),
                "unit_system": resolver.config.unit_system.value,
                "pressure_mode": resolver.config.pressure_mode.value,
            })
        else:
            return error_json(f"Invalid lookup_type: {lookup_type}")
    except (PipeCalcError, ValueError) as e:
        logger.info("properties lookup failed: %s", e)
        return error_json(e, log=resolver.results_log)
    except Exception as e:
        logger.error(f"Error in properties: {e}", exc_info=True)
        return error_json(f"Lookup error: {e}", log=resolver.results_log)
