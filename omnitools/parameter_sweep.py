"""Parameter sweep over the pipe flow calculation."""

import inspect
import json
import logging
from typing import Any, Dict, List, Literal, Optional

import numpy as np

from omnitools.pipe_flow import pipe_flow
from utils.json_helpers import error_json, safe_json_dumps

logger = logging.getLogger("pipeflow-mcp.parameter_sweep")

# Envelope keys reported for every sweep point
SWEEP_COLUMNS = (
    "mass_flow_kg_s",
    "volumetric_flow_m3_s",
    "pipe_diameter_m",
    "pipe_length_m",
    "flow_velocity_m_s",
    "reynolds_number",
    "flow_regime",
    "friction_factor",
    "pressure_drop_total_pa",
    "pressure_drop_total",
    "head_loss_m",
    "mach_number",
)

MAX_POINTS = 200


def parameter_sweep(
    variable: Literal["mass_flow", "volumetric_flow", "pipe_diameter", "pipe_length"],
    start: float,
    stop: float,
    n: int,

    # Base pipe_flow parameters
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
    """Sweep one pipe flow input over a linear range.

    Every point is an independent pipe_flow calculation; a point that fails
    carries its error instead of aborting the sweep. Sweep values use the
    unit given for the swept variable (e.g. ``mass_flow_unit``), or the
    configured default.

    Args:
        variable: Input to sweep ('mass_flow', 'volumetric_flow', 'pipe_diameter', 'pipe_length')
        start: Start value for sweep
        stop: Stop value for sweep
        n: Number of points in sweep (max 200)
        **other_params: All other parameters from pipe_flow

    Returns:
        JSON string with one row per sweep point and a summary

    Examples:
        >>> parameter_sweep(variable="pipe_diameter", start=50, stop=200, n=7,
        ...                 fluid_name="steam", pressure=10, temperature=200,
        ...                 mass_flow=3600, pipe_length=100)
    """
    params = locals().copy()
    for key in ("variable", "start", "stop", "n"):
        params.pop(key)

    if n < 1 or n > MAX_POINTS:
        return error_json(f"n must be between 1 and {MAX_POINTS}", field="n", value=n)

    # The swept variable replaces the base value; a sweep over one flow excludes the other
    params[variable] = None
    if variable == "mass_flow":
        params["volumetric_flow"] = None
    elif variable == "volumetric_flow":
        params["mass_flow"] = None
    elif variable == "pipe_diameter":
        params["nominal_size_in"] = None

    allowed = set(inspect.signature(pipe_flow).parameters)
    base_kwargs = {k: v for k, v in params.items() if k in allowed and v is not None}

    results = []
    for value in np.linspace(start, stop, n):
        value = float(value)
        result = json.loads(pipe_flow(**base_kwargs, **{variable: value}))

        row = {variable: value}
        if "error" in result:
            row["error"] = result["error"]
            if result.get("errors"):
                row["error"] = f"{result['error']}: {'; '.join(result['errors'])}"
        else:
            row.update({key: result.get(key) for key in SWEEP_COLUMNS})
            row["warnings"] = [w["code"] for w in result.get("warnings") or []]
        results.append(row)

    failed = len([r for r in results if "error" in r])
    if failed:
        logger.info("Sweep over %s: %d of %d points failed", variable, failed, len(results))

    return safe_json_dumps({
        "sweep_variable": variable,
        "sweep_range": {"start": start, "stop": stop, "n": n},
        "results": results,
        "summary": {
            "total_points": len(results),
            "successful_points": len(results) - failed,
            "failed_points": failed,
        },
    })
