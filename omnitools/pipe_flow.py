"""
Pipe flow pressure drop for steam, air, gas and water.
"""

import logging
from typing import Any, Dict, List, Literal, Optional

from pipecore import PipeCalcError, SolveResult, solve
from pipecore import units
from utils.config import CalculatorConfig
from utils.input_resolver import InputResolver
from utils.json_helpers import error_json, safe_json_dumps

logger = logging.getLogger("pipeflow-mcp.pipe_flow")


def render_solve_result(result: SolveResult, config: CalculatorConfig) -> Dict[str, Any]:
    """Flatten a SolveResult into the tool envelope, adding display-unit values."""
    dp_unit = config.unit_for("pressure_difference")
    v_unit = config.unit_for("velocity")
    props = result.properties

    envelope = {
        "fluid": result.fluid.fluid_class.value,
        "phase_hint": result.fluid.phase_hint.value,
        "properties": {
            "source": props.source.value,
            "state": props.state,
            "density_kg_m3": props.density,
            "viscosity_pa_s": props.viscosity,
            "saturation_temperature_k": props.saturation_temperature_k,
            "estimation_error": props.estimation_error,
        },
        "mass_flow_kg_s": result.mass_flow_kg_s,
        "volumetric_flow_m3_s": result.volumetric_flow_m3_s,
        "pipe_diameter_m": result.geometry.diameter_m,
        "pipe_length_m": result.geometry.length_m,
        "pipe_roughness_m": result.geometry.roughness_m,
        "flow_area_m2": result.area_m2,
        "flow_velocity_m_s": result.velocity_m_s,
        "flow_velocity": units.velocity_from_si(result.velocity_m_s, v_unit),
        "velocity_unit": v_unit,
        "reynolds_number": result.reynolds,
        "relative_roughness": result.relative_roughness,
        "flow_regime": result.regime.value,
        "correlation": result.correlation.value,
        "friction_factor": result.friction_factor,
        "fittings_k_sum": result.fittings_k_sum,
        "fittings_equivalent_length_m": result.fittings_equivalent_length_m,
        "total_equivalent_length_m": result.total_length_m,
        "pressure_drop_straight_pipe_pa": result.pressure_drop_straight_pa,
        "pressure_drop_fittings_pa": result.pressure_drop_fittings_pa,
        "pressure_drop_total_pa": result.pressure_drop_pa,
        "pressure_drop_total_bar": units.pressure_difference_from_si(result.pressure_drop_pa, "bar"),
        "pressure_drop_total": units.pressure_difference_from_si(result.pressure_drop_pa, dp_unit),
        "pressure_drop_unit": dp_unit,
        "head_loss_m": result.head_loss_m,
        "fitting_details": result.fitting_details,
        "warnings": result.warnings,
    }
    if result.mach is not None:
        envelope["speed_of_sound_m_s"] = result.speed_of_sound_m_s
        envelope["mach_number"] = result.mach
    return envelope


def pipe_flow(
    fluid_name: Optional[str] = None,
    phase: Optional[Literal["saturated", "superheated", "liquid", "unspecified"]] = None,

    # State point for property estimation
    pressure: Optional[float] = None,
    pressure_unit: Optional[str] = None,
    pressure_mode: Optional[Literal["gauge", "absolute"]] = None,
    temperature: Optional[float] = None,
    temperature_unit: Optional[str] = None,

    # Manual properties (used alone, or as fallback when estimation fails)
    density: Optional[float] = None,
    density_unit: Optional[str] = None,
    viscosity: Optional[float] = None,
    viscosity_unit: Optional[str] = None,

    # Flow, exactly one
    mass_flow: Optional[float] = None,
    mass_flow_unit: Optional[str] = None,
    volumetric_flow: Optional[float] = None,
    volumetric_flow_unit: Optional[str] = None,

    # Pipe
    pipe_diameter: Optional[float] = None,
    pipe_diameter_unit: Optional[str] = None,
    nominal_size_in: Optional[float] = None,
    schedule: Optional[str] = None,
    pipe_length: Optional[float] = None,
    pipe_length_unit: Optional[str] = None,
    pipe_roughness: Optional[float] = None,
    pipe_roughness_unit: Optional[str] = None,
    material: Optional[str] = None,
    fittings: Optional[List[Dict[str, Any]]] = None,

    speed_of_sound: Optional[float] = None,
    correlation: Optional[Literal["haaland", "petukhov", "colebrook"]] = None,
) -> str:
    """Calculate single-phase pressure drop through a pipe run with fittings.

    Properties are estimated from pressure and temperature (IF97 for steam,
    water and condensate; Air via CoolProp). When estimation fails or is not
    possible (generic gas) the manual density and viscosity are used and the
    result reports ``properties.source = "manual-fallback"``.

    Units default to the configured unit system (bar, °C, mm, kg/h, m3/h
    for the built-in ``si_bar`` preset). Pass ``*_unit`` to override per call.

    Args:
        fluid_name: "steam", "saturated steam", "water", "condensate", "air", "gas", ...
        phase: Phase hint; overrides the one implied by the fluid name
        pressure: Line pressure (gauge or absolute per pressure_mode)
        temperature: Line temperature
        density: Manual density
        viscosity: Manual dynamic viscosity
        mass_flow: Mass flow rate
        volumetric_flow: Volumetric flow rate at line conditions
        pipe_diameter: Pipe inner diameter
        nominal_size_in: Nominal pipe size in inches, with schedule (instead of pipe_diameter)
        schedule: Pipe schedule (default from configuration, "40")
        pipe_length: Straight pipe length
        pipe_roughness: Absolute roughness (m unless pipe_roughness_unit is given)
        material: Pipe material for roughness lookup (e.g. "Steel", "Cast iron", "Glass")
        fittings: List of {"type": ..., "quantity": n} catalogue fittings,
            {"K_value": k} or {"equivalent_length_m": L} entries
        speed_of_sound: Speed of sound in m/s for the Mach number
            (defaults to the configured value per fluid class)
        correlation: Turbulent friction correlation; automatic when omitted

    Returns:
        JSON string with properties, velocity, Reynolds number, regime,
        friction factor, pressure drop breakdown and warnings

    Examples:
        >>> pipe_flow(fluid_name="steam", pressure=10, pressure_unit="bar",
        ...           temperature=200, temperature_unit="c", mass_flow=1, mass_flow_unit="kg/s",
        ...           pipe_diameter=0.2, pipe_diameter_unit="m", pipe_length=100, pipe_length_unit="m")
    """
    resolver = InputResolver("pipe_flow")

    try:
        fluid = resolver.resolve_fluid(fluid_name, phase)
        thermo = resolver.resolve_thermo(pressure, pressure_unit, pressure_mode, temperature,
                                         temperature_unit, density, density_unit, viscosity,
                                         viscosity_unit)
        geometry = resolver.resolve_geometry(pipe_diameter, pipe_diameter_unit, nominal_size_in,
                                             schedule, pipe_length, pipe_length_unit,
                                             pipe_roughness, pipe_roughness_unit, material)
        flow = resolver.resolve_flow(mass_flow, mass_flow_unit, volumetric_flow, volumetric_flow_unit)
        fitting_entries = resolver.resolve_fittings(fittings)
        sound_speed = resolver.resolve_sound_speed(fluid, speed_of_sound)

        if resolver.has_errors:
            return error_json("Input resolution failed", errors=resolver.error_log, log=resolver.results_log)

        result = solve(fluid, thermo, geometry, flow, fittings=fitting_entries,
                       speed_of_sound=sound_speed, correlation=correlation)
    except PipeCalcError as e:
        logger.info("pipe_flow rejected input: %s", e)
        return error_json(e, log=resolver.results_log)
    except Exception as e:
        logger.error(f"Error in pipe_flow: {e}", exc_info=True)
        return error_json(f"Calculation error: {e}", log=resolver.results_log)

    envelope = render_solve_result(result, resolver.config)
    envelope["inputs_resolved"] = resolver.results_log
    return safe_json_dumps(envelope)
