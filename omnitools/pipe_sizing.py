"""Pipe sizing for a target velocity."""

import logging
from typing import Literal, Optional

from pipecore import PipeCalcError, size_by_velocity
from pipecore import units
from utils.input_resolver import InputResolver
from utils.json_helpers import error_json, safe_json_dumps

logger = logging.getLogger("pipeflow-mcp.pipe_sizing")


def pipe_sizing(
    target_velocity: float,
    target_velocity_unit: Optional[str] = None,
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
    mass_flow: Optional[float] = None,
    mass_flow_unit: Optional[str] = None,
    volumetric_flow: Optional[float] = None,
    volumetric_flow_unit: Optional[str] = None,
    schedule: Optional[str] = None,
) -> str:
    """Find the pipe inner diameter that carries a flow at a target velocity.

    Typical design velocities: saturated steam 25-35 m/s, superheated steam
    35-50 m/s, compressed air 6-10 m/s, water 1-3 m/s, condensate return 0.5-1 m/s.

    Args:
        target_velocity: Design velocity (velocity unit from configuration, m/s by default)
        fluid_name: Fluid name; properties resolved as for pipe_flow
        mass_flow: Mass flow rate
        volumetric_flow: Volumetric flow rate at line conditions
        schedule: Schedule for the nearest standard pipe (default from configuration)

    Returns:
        JSON string with the exact inner diameter, the nearest standard pipe at
        least that large and the velocity and Reynolds number in both

    Examples:
        >>> pipe_sizing(target_velocity=30, fluid_name="saturated steam",
        ...             pressure=10, pressure_unit="bar", temperature=180,
        ...             mass_flow=2000, mass_flow_unit="kg/h")
    """
    resolver = InputResolver("pipe_sizing")

    try:
        fluid = resolver.resolve_fluid(fluid_name, phase)
        thermo = resolver.resolve_thermo(pressure, pressure_unit, pressure_mode, temperature,
                                         temperature_unit, density, density_unit, viscosity,
                                         viscosity_unit)
        flow = resolver.resolve_flow(mass_flow, mass_flow_unit, volumetric_flow, volumetric_flow_unit)
        velocity = resolver.resolve_quantity("Target velocity", "velocity", target_velocity, target_velocity_unit)

        if resolver.has_errors:
            return error_json("Input resolution failed", errors=resolver.error_log, log=resolver.results_log)

        result = size_by_velocity(fluid, thermo, flow, velocity,
                                  schedule=schedule or resolver.config.default_schedule)
    except PipeCalcError as e:
        logger.info("pipe_sizing rejected input: %s", e)
        return error_json(e, log=resolver.results_log)
    except Exception as e:
        logger.error(f"Error in pipe_sizing: {e}", exc_info=True)
        return error_json(f"Sizing error: {e}", log=resolver.results_log)

    d_unit = resolver.config.unit_for("diameter")
    output = {
        "fluid": result.fluid.fluid_class.value,
        "properties": {
            "source": result.properties.source.value,
            "state": result.properties.state,
            "density_kg_m3": result.properties.density,
            "viscosity_pa_s": result.properties.viscosity,
            "estimation_error": result.properties.estimation_error,
        },
        "mass_flow_kg_s": result.mass_flow_kg_s,
        "volumetric_flow_m3_s": result.volumetric_flow_m3_s,
        "target_velocity_m_s": result.target_velocity_m_s,
        "required_inner_diameter_m": result.inner_diameter_m,
        "required_inner_diameter": units.length_from_si(result.inner_diameter_m, d_unit),
        "diameter_unit": d_unit,
        "velocity_m_s": result.velocity_m_s,
        "reynolds_number": result.reynolds,
        "warnings": result.warnings,
        "inputs_resolved": resolver.results_log,
    }
    if result.nominal_size_in is not None:
        output["standard_pipe"] = {
            "nominal_size_in": result.nominal_size_in,
            "schedule": result.schedule,
            "inner_diameter_m": result.standard_inner_diameter_m,
            "inner_diameter": units.length_from_si(result.standard_inner_diameter_m, d_unit),
            "velocity_m_s": result.standard_velocity_m_s,
        }
    return safe_json_dumps(output)
