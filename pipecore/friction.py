"""
Friction factor engine.

Returns the Darcy friction factor and flow regime for a Reynolds number and
relative roughness:

- Re = 0                 -> f = 0 (no flow)
- 0 < Re <= 2300         -> laminar, f = 64/Re
- 2300 < Re < 4000       -> transitional, turbulent correlation at Re plus a
                            warning; no interpolation across the band
- Re >= 4000             -> turbulent, Haaland by default

Turbulent correlations: Haaland (explicit), Petukhov (smooth pipe,
3000 < Re < 5e6) and Colebrook (implicit reference, solved by ``fluids``).
Relative roughness outside [0, 0.05] is accepted and flagged.
"""

import logging
import math
from typing import List, Optional, Union

import fluids.friction

from utils.constants import (
    RE_LAMINAR_MAX, RE_TURBULENT_MIN, PETUKHOV_RE_MIN, PETUKHOV_RE_MAX,
    SMOOTH_PIPE_EPS, RELATIVE_ROUGHNESS_MAX,
)
from utils.json_helpers import is_valid_number

from .errors import InvalidInput
from .models import Correlation, FlowRegime, FlowRegimeResult, OutOfDomainWarning

logger = logging.getLogger("pipeflow-mcp.friction")


def haaland(Re: float, eD: float) -> float:
    """Haaland friction factor, 1/sqrt(f) = -1.8 log10(eD/3.7 + 6.9/Re).

    Raises:
        InvalidInput: The log argument is >= 1, where the correlation has no positive root
    """
    arg = eD / 3.7 + 6.9 / Re
    if arg >= 1.0:
        raise InvalidInput(f"Haaland is undefined for eD/3.7 + 6.9/Re = {arg:.4g} (must be < 1)",
                           field="relative_roughness", value=eD, bound="eD/3.7 + 6.9/Re < 1")
    inv_sqrt_f = -1.8 * math.log10(arg)
    return 1.0 / inv_sqrt_f ** 2


def petukhov(Re: float) -> float:
    """Petukhov smooth-pipe friction factor, f = (0.79 ln Re - 1.64)^-2."""
    return (0.79 * math.log(Re) - 1.64) ** -2


def colebrook(Re: float, eD: float) -> float:
    """Colebrook-White friction factor (exact solution via fluids)."""
    return float(fluids.friction.Colebrook(Re=Re, eD=eD))


def classify_regime(Re: float) -> FlowRegime:
    if Re <= RE_LAMINAR_MAX:
        return FlowRegime.LAMINAR
    if Re < RE_TURBULENT_MIN:
        return FlowRegime.TRANSITIONAL
    return FlowRegime.TURBULENT


def roughness_warnings(eD: float) -> List[OutOfDomainWarning]:
    """Flag relative roughness outside the nominal [0, 0.05] correlation domain."""
    if eD > RELATIVE_ROUGHNESS_MAX:
        logger.warning("Relative roughness %.4g outside correlation domain", eD)
        return [OutOfDomainWarning(
            code="relative_roughness_out_of_domain",
            message=(f"Relative roughness {eD:.4g} exceeds {RELATIVE_ROUGHNESS_MAX}; "
                     f"turbulent correlations are extrapolated"),
            field="relative_roughness",
            value=eD,
            bound=f"<= {RELATIVE_ROUGHNESS_MAX}",
        )]
    return []


def _turbulent(Re: float, eD: float, correlation: Optional[Correlation],
               warnings: List[OutOfDomainWarning]):
    if correlation is None:
        # Auto: an effectively smooth wall selects Petukhov, substitution included
        if eD >= SMOOTH_PIPE_EPS:
            return haaland(Re, eD), Correlation.HAALAND
        correlation = Correlation.PETUKHOV

    if correlation is Correlation.PETUKHOV:
        if PETUKHOV_RE_MIN < Re < PETUKHOV_RE_MAX:
            return petukhov(Re), Correlation.PETUKHOV
        logger.warning("Re=%.4g outside Petukhov band; substituting Haaland", Re)
        warnings.append(OutOfDomainWarning(
            code="correlation_substituted",
            message=(f"Petukhov is valid for {PETUKHOV_RE_MIN:g} < Re < {PETUKHOV_RE_MAX:g}; "
                     f"Haaland used at Re={Re:.4g}"),
            field="reynolds",
            value=Re,
            bound=f"{PETUKHOV_RE_MIN:g} < Re < {PETUKHOV_RE_MAX:g}",
        ))
        return haaland(Re, eD), Correlation.HAALAND

    if correlation is Correlation.COLEBROOK:
        return colebrook(Re, eD), Correlation.COLEBROOK

    if correlation is Correlation.HAALAND:
        return haaland(Re, eD), Correlation.HAALAND

    raise InvalidInput(f"'{correlation.value}' is not a turbulent correlation",
                       field="correlation", value=correlation.value)


def friction_factor(Re: float, eD: float,
                    correlation: Optional[Union[Correlation, str]] = None) -> FlowRegimeResult:
    """Darcy friction factor and flow regime.

    Args:
        Re: Reynolds number, >= 0
        eD: Relative roughness (epsilon/D), >= 0
        correlation: Turbulent correlation ("haaland", "petukhov", "colebrook");
            None selects automatically

    Returns:
        FlowRegimeResult with friction factor, regime, correlation used and warnings

    Raises:
        InvalidInput: Re or eD negative or not a finite number
    """
    if not is_valid_number(Re) or Re < 0:
        raise InvalidInput(f"Reynolds number must be a finite value >= 0, got {Re}",
                           field="reynolds", value=Re, bound=">= 0")
    if not is_valid_number(eD) or eD < 0:
        raise InvalidInput(f"Relative roughness must be a finite value >= 0, got {eD}",
                           field="relative_roughness", value=eD, bound=">= 0")
    if isinstance(correlation, str):
        try:
            correlation = Correlation(correlation.lower())
        except ValueError:
            raise InvalidInput(f"Unknown correlation '{correlation}'", field="correlation",
                               value=correlation, bound="haaland, petukhov, colebrook")

    warnings = roughness_warnings(eD)

    if Re == 0:
        return FlowRegimeResult(reynolds=0.0, friction_factor=0.0, regime=FlowRegime.LAMINAR,
                                correlation=Correlation.NONE, warnings=warnings)

    regime = classify_regime(Re)
    if regime is FlowRegime.LAMINAR:
        fd = float(fluids.friction.friction_laminar(Re))
        return FlowRegimeResult(reynolds=Re, friction_factor=fd, regime=regime,
                                correlation=Correlation.LAMINAR, warnings=warnings)

    fd, used = _turbulent(Re, eD, correlation, warnings)

    if regime is FlowRegime.TRANSITIONAL:
        warnings.append(OutOfDomainWarning(
            code="transitional_flow",
            message=(f"Re={Re:.0f} is in the transitional band "
                     f"({RE_LAMINAR_MAX:g}-{RE_TURBULENT_MIN:g}); turbulent correlation applied"),
            field="reynolds",
            value=Re,
            bound=f"<= {RE_LAMINAR_MAX:g} or >= {RE_TURBULENT_MIN:g}",
        ))

    logger.debug("Re=%.4g eD=%.4g -> %s, f=%.6f (%s)", Re, eD, regime.value, fd, used.value)
    return FlowRegimeResult(reynolds=Re, friction_factor=fd, regime=regime,
                            correlation=used, warnings=warnings)
