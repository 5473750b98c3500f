"""
Pressure drop solver.

Single entry point used by the front-ends. Resolves fluid properties, derives
velocity and Reynolds number, selects the friction factor, aggregates the
fittings into an equivalent length and applies Darcy-Weisbach:

    dP = f · (L_total / D) · (rho · v² / 2)

Every call is a pure function of its inputs.
"""

import logging
import math
from typing import List, Optional, Union

import fluids.core

from utils.constants import G_GRAVITY

from .errors import FlowError, GeometryError, InvalidInput
from .fittings import aggregate, validate_fittings
from .friction import friction_factor
from .models import (
    Correlation, FittingEntry, FlowInput, FluidSpec, PipeGeometry, SolveResult,
    ThermodynamicInput,
)
from .properties import PropertyEstimator, resolve

logger = logging.getLogger("pipeflow-mcp.solver")


def _finite(value) -> bool:
    return isinstance(value, (int, float)) and not math.isnan(value) and not math.isinf(value)


def validate_geometry(geometry: PipeGeometry) -> None:
    """Raises GeometryError for a non-positive diameter, negative length or roughness, or roughness >= diameter."""
    if not _finite(geometry.diameter_m) or geometry.diameter_m <= 0:
        raise GeometryError(f"Pipe diameter must be > 0, got {geometry.diameter_m}",
                            field="diameter_m", value=geometry.diameter_m, bound="> 0")
    if not _finite(geometry.length_m) or geometry.length_m < 0:
        raise GeometryError(f"Pipe length must be >= 0, got {geometry.length_m}",
                            field="length_m", value=geometry.length_m, bound=">= 0")
    if not _finite(geometry.roughness_m) or geometry.roughness_m < 0:
        raise GeometryError(f"Pipe roughness must be >= 0, got {geometry.roughness_m}",
                            field="roughness_m", value=geometry.roughness_m, bound=">= 0")
    if geometry.roughness_m >= geometry.diameter_m:
        raise GeometryError(f"Pipe roughness {geometry.roughness_m} m must be smaller than the diameter "
                            f"{geometry.diameter_m} m", field="roughness_m", value=geometry.roughness_m,
                            bound="< diameter_m")


def validate_flow(flow: FlowInput) -> None:
    """Raises FlowError unless exactly one finite, non-negative flow is given."""
    given = [(name, value) for name, value in (("mass_flow_kg_s", flow.mass_flow_kg_s),
                                               ("volumetric_flow_m3_s", flow.volumetric_flow_m3_s))
             if value is not None]
    if not given:
        raise FlowError("Provide a mass flow or a volumetric flow", field="flow")
    if len(given) > 1:
        raise FlowError("Provide either mass flow or volumetric flow, not both", field="flow")
    name, value = given[0]
    if not _finite(value) or value < 0:
        raise FlowError(f"Flow must be >= 0, got {value}", field=name, value=value, bound=">= 0")


def solve(
    fluid: FluidSpec,
    thermo: ThermodynamicInput,
    geometry: PipeGeometry,
    flow: FlowInput,
    fittings: Optional[List[FittingEntry]] = None,
    speed_of_sound: Optional[float] = None,
    correlation: Optional[Union[Correlation, str]] = None,
    estimator: Optional[PropertyEstimator] = None,
) -> SolveResult:
    """Calculate single-phase pressure drop through a pipe run.

    Args:
        fluid: Fluid class and phase hint
        thermo: State point (Pa abs, K) and/or manual density (kg/m³) and viscosity (Pa·s)
        geometry: Inner diameter, length and absolute roughness in m
        flow: Mass flow (kg/s) or volumetric flow (m³/s)
        fittings: K-factor, equivalent-length or catalogue fitting entries
        speed_of_sound: Speed of sound in m/s; Mach is reported only when given
        correlation: Turbulent correlation override ("haaland", "petukhov", "colebrook")
        estimator: Replacement for the property estimation dependency

    Returns:
        SolveResult echoing the properties and every intermediate value

    Raises:
        GeometryError: Diameter <= 0, negative length or roughness
        FlowError: Flow missing, ambiguous or negative
        InvalidInput: Other contract violations (fittings, speed of sound, properties)
        PropertyUnavailable: Estimation failed and no manual properties were given
    """
    fittings = list(fittings or [])
    validate_geometry(geometry)
    validate_flow(flow)
    validate_fittings(fittings)
    if speed_of_sound is not None and (not _finite(speed_of_sound) or speed_of_sound <= 0):
        raise InvalidInput(f"Speed of sound must be > 0, got {speed_of_sound}",
                           field="speed_of_sound", value=speed_of_sound, bound="> 0")

    props = resolve(fluid, thermo, estimator=estimator)
    rho = props.density
    mu = props.viscosity

    if flow.volumetric_flow_m3_s is not None:
        volumetric_flow = float(flow.volumetric_flow_m3_s)
        mass_flow = volumetric_flow * rho
    else:
        mass_flow = float(flow.mass_flow_kg_s)
        volumetric_flow = mass_flow / rho

    D = geometry.diameter_m
    area = geometry.area_m2
    velocity = volumetric_flow / area
    eD = geometry.relative_roughness

    if velocity == 0:
        # No flow: skip the Reynolds number formula entirely
        Re = 0.0
    else:
        Re = float(fluids.core.Reynolds(V=velocity, D=D, rho=rho, mu=mu))

    regime = friction_factor(Re, eD, correlation)
    fd = regime.friction_factor

    fitting_totals = aggregate(fittings, D, fd, Re=Re, flow_rate=volumetric_flow)
    fittings_length = fitting_totals.equivalent_length_m
    total_length = geometry.length_m + fittings_length

    dynamic_pressure = rho * velocity ** 2 / 2.0
    dP = fd * (total_length / D) * dynamic_pressure
    dP_straight = fd * (geometry.length_m / D) * dynamic_pressure
    dP_fittings = fd * (fittings_length / D) * dynamic_pressure
    head_loss = dP / (rho * G_GRAVITY)

    mach = velocity / speed_of_sound if speed_of_sound is not None else None

    logger.debug("%s: v=%.4g m/s, Re=%.4g (%s), f=%.5g, L_total=%.4g m, dP=%.6g Pa",
                 fluid.fluid_class.value, velocity, Re, regime.regime.value, fd, total_length, dP)

    return SolveResult(
        fluid=fluid,
        geometry=geometry,
        properties=props,
        mass_flow_kg_s=mass_flow,
        volumetric_flow_m3_s=volumetric_flow,
        area_m2=area,
        velocity_m_s=velocity,
        reynolds=Re,
        relative_roughness=eD,
        friction_factor=fd,
        regime=regime.regime,
        correlation=regime.correlation,
        fittings_k_sum=fitting_totals.k_sum,
        fittings_equivalent_length_m=fittings_length,
        fitting_details=fitting_totals.details,
        total_length_m=total_length,
        pressure_drop_straight_pa=dP_straight,
        pressure_drop_fittings_pa=dP_fittings,
        pressure_drop_pa=dP,
        head_loss_m=head_loss,
        speed_of_sound_m_s=speed_of_sound,
        mach=mach,
        warnings=regime.warnings,
    )
