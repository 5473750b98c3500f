"""
Pipe sizing by target velocity.

Finds the inner diameter that carries the flow at a target velocity and
suggests the smallest standard pipe (NPS/schedule) at least that large.
"""

import logging
import math
from typing import Optional

import fluids.core
import fluids.piping

from utils.json_helpers import is_valid_number

from .errors import InvalidInput
from .models import (
    FlowInput, FluidSpec, OutOfDomainWarning, SizingResult, ThermodynamicInput,
)
from .properties import PropertyEstimator, resolve
from .solver import validate_flow

logger = logging.getLogger("pipeflow-mcp.sizing")


def size_by_velocity(
    fluid: FluidSpec,
    thermo: ThermodynamicInput,
    flow: FlowInput,
    target_velocity: float,
    schedule: Optional[str] = "40",
    estimator: Optional[PropertyEstimator] = None,
) -> SizingResult:
    """Size a pipe for a target velocity.

    Args:
        fluid: Fluid class and phase hint
        thermo: State point and/or manual properties
        flow: Mass or volumetric flow, must be > 0
        target_velocity: Design velocity in m/s, must be > 0
        schedule: Pipe schedule for the standard size lookup; None skips the lookup
        estimator: Replacement for the property estimation dependency

    Raises:
        FlowError: Flow missing, ambiguous, negative or zero
        InvalidInput: Target velocity not positive
    """
    validate_flow(flow)
    if not is_valid_number(target_velocity) or target_velocity <= 0:
        raise InvalidInput(f"Target velocity must be > 0, got {target_velocity}",
                           field="target_velocity", value=target_velocity, bound="> 0")

    props = resolve(fluid, thermo, estimator=estimator)

    if flow.volumetric_flow_m3_s is not None:
        volumetric_flow = float(flow.volumetric_flow_m3_s)
        mass_flow = volumetric_flow * props.density
    else:
        mass_flow = float(flow.mass_flow_kg_s)
        volumetric_flow = mass_flow / props.density
    if volumetric_flow <= 0:
        raise InvalidInput("Flow must be > 0 to size a pipe", field="flow",
                           value=volumetric_flow, bound="> 0")

    area = volumetric_flow / target_velocity
    diameter = math.sqrt(4.0 * area / math.pi)
    velocity = volumetric_flow / (math.pi * diameter ** 2 / 4.0)
    Re = float(fluids.core.Reynolds(V=velocity, D=diameter, rho=props.density, mu=props.viscosity))

    nps = Di = v_std = None
    warnings = []
    if schedule is not None:
        try:
            nps, Di, _, _ = fluids.piping.nearest_pipe(Di=diameter, schedule=schedule)
            v_std = volumetric_flow / (math.pi * Di ** 2 / 4.0)
        except (ValueError, KeyError) as e:
            logger.warning("No standard pipe for Di=%.4f m, schedule %s: %s", diameter, schedule, e)
            warnings.append(OutOfDomainWarning(
                code="no_standard_pipe",
                message=f"No schedule {schedule} pipe with inner diameter >= {diameter:.4f} m",
                field="inner_diameter_m",
                value=diameter,
            ))

    return SizingResult(
        fluid=fluid,
        properties=props,
        mass_flow_kg_s=mass_flow,
        volumetric_flow_m3_s=volumetric_flow,
        target_velocity_m_s=target_velocity,
        inner_diameter_m=diameter,
        velocity_m_s=velocity,
        reynolds=Re,
        nominal_size_in=nps,
        schedule=schedule if nps is not None else None,
        standard_inner_diameter_m=Di,
        standard_velocity_m_s=v_std,
        warnings=warnings,
    )
