"""
Fitting loss aggregator.

Converts a list of fitting entries into an additional equivalent pipe length.
K-factor entries (given directly or computed for catalogue fittings) convert
through Leq = K·D/f; equivalent-length entries add directly. Entry order does
not matter.
"""

import logging
from typing import Iterable, List, Optional

import fluids.fittings
import fluids.friction

from .errors import InvalidInput
from .models import (
    EquivalentLengthFitting, FittingAggregate, FittingDetail, KFactorFitting,
    NamedFitting,
)

logger = logging.getLogger("pipeflow-mcp.fittings")


def _elbow(angle):
    return lambda D, Re, Q: fluids.fittings.bend_rounded(Di=D, angle=angle, Re=Re, method='Crane')


def _miter(angle):
    return lambda D, Re, Q: fluids.fittings.bend_miter(Di=D, angle=angle, Re=Re)


# Catalogue of fittings: name -> K(D, Re, Q). Crane TP-410 correlations via fluids.fittings.
FITTING_CATALOGUE = {
    # Bends
    "90_elbow": _elbow(90),
    "45_elbow": _elbow(45),
    "30_elbow": _elbow(30),
    "miter_bend_90": _miter(90),
    "miter_bend_45": _miter(45),
    # Valves
    "gate_valve": lambda D, Re, Q: fluids.fittings.K_gate_valve_Crane(D1=D, D2=D, angle=0),
    "globe_valve": lambda D, Re, Q: fluids.fittings.K_globe_valve_Crane(D1=D, D2=D),
    "angle_valve": lambda D, Re, Q: fluids.fittings.K_angle_valve_Crane(D1=D, D2=D),
    "ball_valve": lambda D, Re, Q: fluids.fittings.K_ball_valve_Crane(D1=D, D2=D, angle=0),
    "butterfly_valve": lambda D, Re, Q: fluids.fittings.K_butterfly_valve_Crane(D=D),
    "plug_valve": lambda D, Re, Q: fluids.fittings.K_plug_valve_Crane(D1=D, D2=D, angle=0),
    "diaphragm_valve": lambda D, Re, Q: fluids.fittings.K_diaphragm_valve_Crane(D=D),
    "check_valve_swing": lambda D, Re, Q: fluids.fittings.K_swing_check_valve_Crane(D=D),
    "check_valve_lift": lambda D, Re, Q: fluids.fittings.K_lift_check_valve_Crane(D1=D, D2=D),
    "check_valve_tilting": lambda D, Re, Q: fluids.fittings.K_tilting_disk_check_valve_Crane(D=D, angle=5),
    # Tees, Crane flow-through-run and flow-through-branch values
    "tee_run": lambda D, Re, Q: 20.0 * fluids.friction.ft_Crane(D),
    "tee_branch": lambda D, Re, Q: 60.0 * fluids.friction.ft_Crane(D),
    # Entrances and exits
    "entrance_sharp": lambda D, Re, Q: fluids.fittings.entrance_sharp(),
    "entrance_rounded": lambda D, Re, Q: fluids.fittings.entrance_rounded(Di=D, rc=0.1 * D),
    "exit_normal": lambda D, Re, Q: fluids.fittings.exit_normal(),
    # Specialty
    "y_strainer": lambda D, Re, Q: 0.5 * fluids.fittings.K_globe_valve_Crane(D1=D, D2=D),
}

FITTING_ALIASES = {
    "elbow_90": "90_elbow",
    "elbow_45": "45_elbow",
    "elbow_30": "30_elbow",
    "check_valve": "check_valve_swing",
    "swing_check_valve": "check_valve_swing",
    "tee_run_through": "tee_run",
    "tee_branch_flow": "tee_branch",
    "entrance": "entrance_sharp",
    "exit": "exit_normal",
    "strainer": "y_strainer",
}


def canonical_fitting_name(fitting_type: str) -> str:
    """Normalise a catalogue fitting name.

    Raises:
        InvalidInput: The name is not in the catalogue
    """
    name = fitting_type.lower().strip().replace(" ", "_")
    name = FITTING_ALIASES.get(name, name)
    if name not in FITTING_CATALOGUE:
        raise InvalidInput(
            f"Unknown fitting type: '{fitting_type}'. Valid types: {', '.join(sorted(FITTING_CATALOGUE))}. "
            f"Alternatively, provide a K value or an equivalent length.",
            field="fitting_type", value=fitting_type,
        )
    return name


def fitting_k(fitting_type: str, diameter: float, Re: float, flow_rate: float) -> float:
    """K value of one catalogue fitting at the given conditions."""
    name = canonical_fitting_name(fitting_type)
    k = float(FITTING_CATALOGUE[name](diameter, Re, flow_rate))
    logger.debug("%s: K=%.4g (D=%.4g m, Re=%.4g)", name, k, diameter, Re)
    return k


def validate_fittings(fittings: Iterable) -> None:
    """Check every fitting entry against its contract.

    Raises:
        InvalidInput: Negative K, length or quantity, or an unknown catalogue name
    """
    for i, fitting in enumerate(fittings):
        if fitting.quantity < 0:
            raise InvalidInput(f"Fitting #{i + 1} quantity must be >= 0", field="quantity",
                               value=fitting.quantity, bound=">= 0")
        if isinstance(fitting, KFactorFitting) and not fitting.k >= 0:
            raise InvalidInput(f"Fitting #{i + 1} K value must be >= 0", field="k",
                               value=fitting.k, bound=">= 0")
        elif isinstance(fitting, EquivalentLengthFitting) and not fitting.length_m >= 0:
            raise InvalidInput(f"Fitting #{i + 1} equivalent length must be >= 0", field="length_m",
                               value=fitting.length_m, bound=">= 0")
        elif isinstance(fitting, NamedFitting):
            canonical_fitting_name(fitting.fitting_type)


def aggregate(fittings: Optional[List], diameter: float, friction_factor: float,
              Re: float = 0.0, flow_rate: float = 0.0) -> FittingAggregate:
    """Sum fitting losses into an additional equivalent length.

    Args:
        fittings: Validated fitting entries (see ``validate_fittings``)
        diameter: Pipe inner diameter in m
        friction_factor: Darcy friction factor of the pipe; K entries contribute
            nothing when it is zero (no flow)
        Re: Reynolds number, for catalogue fittings
        flow_rate: Volumetric flow in m³/s, for catalogue tees

    Returns:
        FittingAggregate with K sum, direct equivalent length and length from K
    """
    k_sum = 0.0
    direct_length = 0.0
    details = []

    for fitting in fittings or []:
        if isinstance(fitting, EquivalentLengthFitting):
            direct_length += fitting.length_m * fitting.quantity
            details.append(FittingDetail(kind=fitting.kind, label=fitting.label, quantity=fitting.quantity,
                                         length_each_m=fitting.length_m))
        elif isinstance(fitting, KFactorFitting):
            k_sum += fitting.k * fitting.quantity
            details.append(FittingDetail(kind=fitting.kind, label=fitting.label, quantity=fitting.quantity,
                                         k_each=fitting.k))
        elif isinstance(fitting, NamedFitting):
            if friction_factor > 0 and Re > 0:
                k_each = fitting_k(fitting.fitting_type, diameter, Re, flow_rate)
            else:
                k_each = 0.0
            k_sum += k_each * fitting.quantity
            details.append(FittingDetail(kind=fitting.kind, label=canonical_fitting_name(fitting.fitting_type),
                                         quantity=fitting.quantity, k_each=k_each, k_source="calculated"))

    length_from_k = k_sum * diameter / friction_factor if friction_factor > 0 else 0.0

    return FittingAggregate(k_sum=k_sum, direct_length_m=direct_length,
                            length_from_k_m=length_from_k, details=details)
