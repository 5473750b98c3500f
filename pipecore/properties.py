"""
Fluid property resolver.

Resolves density and dynamic viscosity for a calculation from either a
pressure/temperature state point (IAPWS-IF97 for water, steam and condensate;
CoolProp's Air model for air) or manual overrides supplied by the caller.

Estimation never raises: ``estimate_properties`` returns an
``EstimationOutcome`` that either carries the properties or the reason it
failed, and ``resolve`` decides the property source from it:

- PT only, estimation ok        -> source "estimated"
- PT + manual, estimation ok    -> source "estimated"
- PT + manual, estimation fails -> manual values, source "manual-fallback"
- PT only, estimation fails     -> PropertyUnavailable
- manual only                   -> source "manual", no estimation attempted
"""

import logging
from typing import Callable, NamedTuple, Optional

from utils.constants import (
    R_STEAM, R_UNIV, SATURATION_TOLERANCE_K,
)
from utils.import_helpers import COOLPROP_AVAILABLE, CP, IF97_WATER, HEOS_AIR
from utils.json_helpers import is_valid_number

from .errors import InvalidInput, PropertyEstimationError, PropertyUnavailable
from .models import (
    FluidClass, FluidSpec, PhaseHint, PropertySource, ResolvedProperties,
    ThermodynamicInput,
)

logger = logging.getLogger("pipeflow-mcp.properties")

# IF97 region 4 upper limit (critical point)
P_CRITICAL_PA = 22.064e6
T_CRITICAL_K = 647.096


class EstimationOutcome(NamedTuple):
    """Result of one estimation attempt: properties on success, error text on failure."""

    density: Optional[float] = None
    viscosity: Optional[float] = None
    state: Optional[str] = None
    saturation_temperature_k: Optional[float] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def failure(cls, error: str, saturation_temperature_k: Optional[float] = None):
        return cls(error=error, saturation_temperature_k=saturation_temperature_k)


PropertyEstimator = Callable[[FluidSpec, float, float], EstimationOutcome]


def _props_si(output: str, name1: str, value1: float, name2: str, value2: float,
              backend: str) -> float:
    """Call CoolProp.PropsSI and reject invalid numbers.

    Raises:
        PropertyEstimationError: CoolProp failed or returned inf/nan/_HUGE
    """
    if not COOLPROP_AVAILABLE:
        raise PropertyEstimationError("CoolProp is not installed; property estimation unavailable")
    try:
        value = CP.PropsSI(output, name1, value1, name2, value2, backend)
    except ValueError as e:
        raise PropertyEstimationError(f"{backend} {output}({name1}={value1:g}, {name2}={value2:g}) failed: {e}")
    if not is_valid_number(value) or value <= 0:
        raise PropertyEstimationError(
            f"{backend} returned invalid {output}={value} at {name1}={value1:g}, {name2}={value2:g}"
        )
    return float(value)


def saturation_temperature(pressure_pa: float) -> float:
    """Saturation temperature of water in K at ``pressure_pa`` (IF97 region 4).

    Raises:
        PropertyEstimationError: Pressure is outside the saturation line (<= 0 or >= critical)
    """
    if pressure_pa <= 0 or pressure_pa >= P_CRITICAL_PA:
        raise PropertyEstimationError(
            f"Pressure {pressure_pa:g} Pa is outside the IF97 saturation line (0, {P_CRITICAL_PA:g})",
            fluid="water", pressure_pa=pressure_pa,
        )
    return _props_si("T", "P", pressure_pa, "Q", 0, IF97_WATER)


def saturation_pressure(temperature_k: float) -> float:
    """Saturation pressure of water in Pa at ``temperature_k`` (IF97 region 4)."""
    if temperature_k < 273.16 or temperature_k >= T_CRITICAL_K:
        raise PropertyEstimationError(
            f"Temperature {temperature_k:g} K is outside the IF97 saturation line (273.16, {T_CRITICAL_K:g})",
            fluid="water", temperature_k=temperature_k,
        )
    return _props_si("P", "T", temperature_k, "Q", 0, IF97_WATER)


def ideal_gas_density(pressure_pa: float, temperature_k: float,
                      molar_mass: Optional[float] = None,
                      r_specific: float = R_STEAM) -> float:
    """Ideal-gas density rho = P / (R T).

    Args:
        pressure_pa: Absolute pressure in Pa
        temperature_k: Temperature in K
        molar_mass: Molar mass in kg/kmol; overrides ``r_specific`` when given
        r_specific: Specific gas constant in J/(kg·K), water vapour by default

    Returns:
        Density in kg/m³
    """
    if pressure_pa <= 0:
        raise InvalidInput("Pressure must be positive", field="pressure_pa", value=pressure_pa, bound="> 0")
    if temperature_k <= 0:
        raise InvalidInput("Temperature must be above absolute zero", field="temperature_k",
                           value=temperature_k, bound="> 0")
    if molar_mass is not None:
        if molar_mass <= 0:
            raise InvalidInput("Molar mass must be positive", field="molar_mass", value=molar_mass, bound="> 0")
        r_specific = R_UNIV / molar_mass
    return pressure_pa / (r_specific * temperature_k)


def _water_state(fluid: FluidSpec, temperature_k: float, t_sat: Optional[float]):
    """Pick the property model for water-family fluids.

    Returns ``(state, error)``; exactly one of them is None.
    """
    hint = fluid.phase_hint
    if fluid.fluid_class is FluidClass.STEAM:
        if hint is PhaseHint.LIQUID:
            return None, "phase hint 'liquid' is inconsistent with steam"
        if hint is PhaseHint.SATURATED:
            if t_sat is None:
                return None, "no saturation line above the critical pressure"
            return "saturated_vapor", None
        if t_sat is None:
            return "superheated", None
        if temperature_k > t_sat + SATURATION_TOLERANCE_K:
            return "superheated", None
        if hint is PhaseHint.SUPERHEATED:
            return None, (f"temperature {temperature_k:.2f} K is not above the saturation "
                          f"temperature {t_sat:.2f} K")
        return "saturated_vapor", None

    # water and condensate are liquids
    if hint is PhaseHint.SUPERHEATED:
        return None, f"phase hint 'superheated' is inconsistent with {fluid.fluid_class.value}"
    if t_sat is None:
        if hint is PhaseHint.SATURATED:
            return None, "no saturation line above the critical pressure"
        return "liquid", None
    if hint is PhaseHint.SATURATED:
        return "saturated_liquid", None
    if temperature_k < t_sat - SATURATION_TOLERANCE_K:
        return "liquid", None
    if temperature_k <= t_sat + SATURATION_TOLERANCE_K:
        return "saturated_liquid", None
    return None, (f"temperature {temperature_k:.2f} K is above the saturation temperature "
                  f"{t_sat:.2f} K; the {fluid.fluid_class.value} would flash to steam")


def estimate_properties(fluid: FluidSpec, pressure_pa: float, temperature_k: float) -> EstimationOutcome:
    """Estimate density and viscosity from a state point.

    Dispatches on the fluid class: water-family fluids use IF97 (region chosen
    from the saturation temperature), air uses CoolProp's Air model and generic
    gas has no property model. Failures are returned, not raised.
    """
    fluid_class = fluid.fluid_class

    if fluid_class is FluidClass.GAS:
        return EstimationOutcome.failure("generic gas has no property model; supply density and viscosity")

    if not COOLPROP_AVAILABLE:
        return EstimationOutcome.failure("CoolProp is not installed; property estimation unavailable")

    try:
        if fluid_class is FluidClass.AIR:
            density = _props_si("D", "P", pressure_pa, "T", temperature_k, HEOS_AIR)
            viscosity = _props_si("V", "P", pressure_pa, "T", temperature_k, HEOS_AIR)
            return EstimationOutcome(density=density, viscosity=viscosity, state="gas")

        t_sat = None
        if pressure_pa < P_CRITICAL_PA:
            t_sat = saturation_temperature(pressure_pa)

        state, error = _water_state(fluid, temperature_k, t_sat)
        if error is not None:
            return EstimationOutcome.failure(error, saturation_temperature_k=t_sat)

        if state == "saturated_vapor":
            density = _props_si("D", "P", pressure_pa, "Q", 1, IF97_WATER)
            viscosity = _props_si("V", "P", pressure_pa, "Q", 1, IF97_WATER)
        elif state == "saturated_liquid":
            density = _props_si("D", "P", pressure_pa, "Q", 0, IF97_WATER)
            viscosity = _props_si("V", "P", pressure_pa, "Q", 0, IF97_WATER)
        else:
            density = _props_si("D", "P", pressure_pa, "T", temperature_k, IF97_WATER)
            viscosity = _props_si("V", "P", pressure_pa, "T", temperature_k, IF97_WATER)
    except PropertyEstimationError as e:
        return EstimationOutcome.failure(str(e))

    logger.debug("Estimated %s (%s) at P=%.0f Pa, T=%.2f K: rho=%.4g, mu=%.4g",
                 fluid_class.value, state, pressure_pa, temperature_k, density, viscosity)
    return EstimationOutcome(density=density, viscosity=viscosity, state=state,
                             saturation_temperature_k=t_sat)


def _check_manual(thermo: ThermodynamicInput):
    if (thermo.density is None) != (thermo.viscosity is None):
        missing = "viscosity" if thermo.viscosity is None else "density"
        raise InvalidInput(f"Manual properties need both density and viscosity; {missing} is missing",
                           field=missing)
    if thermo.density is not None and not thermo.density > 0:
        raise InvalidInput("Manual density must be positive", field="density",
                           value=thermo.density, bound="> 0")
    if thermo.viscosity is not None and not thermo.viscosity > 0:
        raise InvalidInput("Manual viscosity must be positive", field="viscosity",
                           value=thermo.viscosity, bound="> 0")


def _check_state(thermo: ThermodynamicInput):
    if (thermo.pressure_pa is None) != (thermo.temperature_k is None):
        missing = "temperature_k" if thermo.temperature_k is None else "pressure_pa"
        raise InvalidInput(f"State point needs both pressure and temperature; {missing} is missing",
                           field=missing)
    if thermo.pressure_pa is not None and not thermo.pressure_pa > 0:
        raise InvalidInput("Absolute pressure must be positive", field="pressure_pa",
                           value=thermo.pressure_pa, bound="> 0")
    if thermo.temperature_k is not None and not thermo.temperature_k > 0:
        raise InvalidInput("Temperature must be above absolute zero", field="temperature_k",
                           value=thermo.temperature_k, bound="> 0 K")


def resolve(fluid: FluidSpec, thermo: ThermodynamicInput,
            estimator: Optional[PropertyEstimator] = None) -> ResolvedProperties:
    """Resolve density and viscosity for a calculation.

    Args:
        fluid: Fluid class and phase hint
        thermo: State point and/or manual overrides
        estimator: Replaceable estimation dependency, ``estimate_properties`` by default

    Returns:
        ResolvedProperties tagged with the property source

    Raises:
        InvalidInput: Neither branch is populated, or a populated branch is out of contract
        PropertyUnavailable: Estimation failed and no manual values exist
    """
    _check_state(thermo)
    _check_manual(thermo)

    if not thermo.has_state and not thermo.has_manual:
        raise InvalidInput(
            "Provide either pressure and temperature or manual density and viscosity",
            field="thermodynamic_input",
        )

    if not thermo.has_state:
        return ResolvedProperties(density=thermo.density, viscosity=thermo.viscosity,
                                  source=PropertySource.MANUAL)

    estimator = estimator or estimate_properties
    outcome = estimator(fluid, thermo.pressure_pa, thermo.temperature_k)

    if outcome.ok:
        return ResolvedProperties(
            density=outcome.density,
            viscosity=outcome.viscosity,
            source=PropertySource.ESTIMATED,
            state=outcome.state,
            saturation_temperature_k=outcome.saturation_temperature_k,
        )

    if thermo.has_manual:
        logger.warning("Property estimation for %s failed (%s); using manual values",
                       fluid.fluid_class.value, outcome.error)
        return ResolvedProperties(
            density=thermo.density,
            viscosity=thermo.viscosity,
            source=PropertySource.MANUAL_FALLBACK,
            saturation_temperature_k=outcome.saturation_temperature_k,
            estimation_error=outcome.error,
        )

    raise PropertyUnavailable(
        f"Cannot estimate {fluid.fluid_class.value} properties: {outcome.error}. "
        f"Supply manual density and viscosity.",
        fluid=fluid.fluid_class.value,
        pressure_pa=thermo.pressure_pa,
        temperature_k=thermo.temperature_k,
    )
