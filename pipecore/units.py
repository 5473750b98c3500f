"""
Unit conversion primitives.

Pure functions converting between the solver's canonical SI units and the
display units used by the front-ends. Each quantity has a factor table of the
form ``unit -> multiplier to SI``; temperature and gauge pressure carry
offsets and are handled explicitly.
"""

from typing import Dict

from utils.constants import (
    GPM_to_M3S, INCH_to_M, FT_to_M, PSI_to_PA, BAR_to_PA, KGFCM2_to_PA,
    MMHG_to_PA, ATM_to_PA, CENTIPOISE_to_PAS, LBFT3_to_KGM3, LBH_to_KGS,
    DEG_C_to_K, P_ATM,
)

from .errors import UnitError

PRESSURE_UNITS: Dict[str, float] = {
    "pa": 1.0,
    "kpa": 1000.0,
    "mpa": 1.0e6,
    "bar": BAR_to_PA,
    "mbar": BAR_to_PA / 1000.0,
    "kgf/cm2": KGFCM2_to_PA,
    "psi": PSI_to_PA,
    "atm": ATM_to_PA,
    "mmhg": MMHG_to_PA,
}

LENGTH_UNITS: Dict[str, float] = {
    "m": 1.0,
    "mm": 0.001,
    "cm": 0.01,
    "in": INCH_to_M,
    "ft": FT_to_M,
}

VOLUMETRIC_FLOW_UNITS: Dict[str, float] = {
    "m3/s": 1.0,
    "m3/h": 1.0 / 3600.0,
    "l/s": 0.001,
    "l/min": 0.001 / 60.0,
    "gpm": GPM_to_M3S,
}

MASS_FLOW_UNITS: Dict[str, float] = {
    "kg/s": 1.0,
    "kg/h": 1.0 / 3600.0,
    "t/h": 1000.0 / 3600.0,
    "lb/h": LBH_to_KGS,
}

VISCOSITY_UNITS: Dict[str, float] = {
    "pa.s": 1.0,
    "cp": CENTIPOISE_to_PAS,
    "mpa.s": 0.001,
}

DENSITY_UNITS: Dict[str, float] = {
    "kg/m3": 1.0,
    "g/cm3": 1000.0,
    "lb/ft3": LBFT3_to_KGM3,
}

VELOCITY_UNITS: Dict[str, float] = {
    "m/s": 1.0,
    "m/min": 1.0 / 60.0,
    "ft/s": FT_to_M,
}

TEMPERATURE_UNITS = ("k", "c", "f", "r")

# Spellings accepted from user input, normalised to the table keys above
_ALIASES = {
    "pascal": "pa",
    "bara": "bar",
    "bar(a)": "bar",
    "kg/cm²": "kgf/cm2",
    "kg/cm2": "kgf/cm2",
    "m³/s": "m3/s",
    "m³/h": "m3/h",
    "kg/m³": "kg/m3",
    "pa·s": "pa.s",
    "pas": "pa.s",
    "mpa·s": "mpa.s",
    "centipoise": "cp",
    "°c": "c",
    "degc": "c",
    "celsius": "c",
    "°f": "f",
    "degf": "f",
    "fahrenheit": "f",
    "kelvin": "k",
    "°r": "r",
    "rankine": "r",
    "inch": "in",
    "lpm": "l/min",
}


def normalize_unit(unit: str) -> str:
    key = unit.strip().lower()
    return _ALIASES.get(key, key)


def _factor(table: Dict[str, float], unit: str, quantity: str) -> float:
    key = normalize_unit(unit)
    if key not in table:
        raise UnitError(
            f"Unknown {quantity} unit '{unit}'. Valid units: {', '.join(table)}"
        )
    return table[key]


def _to_si(table, quantity):
    def to_si(value: float, unit: str) -> float:
        return value * _factor(table, unit, quantity)
    to_si.__doc__ = f"Convert a {quantity} value from ``unit`` to SI."
    return to_si


def _from_si(table, quantity):
    def from_si(value: float, unit: str) -> float:
        return value / _factor(table, unit, quantity)
    from_si.__doc__ = f"Convert an SI {quantity} value to ``unit``."
    return from_si


length_to_si = _to_si(LENGTH_UNITS, "length")
length_from_si = _from_si(LENGTH_UNITS, "length")
volumetric_flow_to_si = _to_si(VOLUMETRIC_FLOW_UNITS, "volumetric flow")
volumetric_flow_from_si = _from_si(VOLUMETRIC_FLOW_UNITS, "volumetric flow")
mass_flow_to_si = _to_si(MASS_FLOW_UNITS, "mass flow")
mass_flow_from_si = _from_si(MASS_FLOW_UNITS, "mass flow")
viscosity_to_si = _to_si(VISCOSITY_UNITS, "viscosity")
viscosity_from_si = _from_si(VISCOSITY_UNITS, "viscosity")
density_to_si = _to_si(DENSITY_UNITS, "density")
density_from_si = _from_si(DENSITY_UNITS, "density")
velocity_to_si = _to_si(VELOCITY_UNITS, "velocity")
velocity_from_si = _from_si(VELOCITY_UNITS, "velocity")


def pressure_to_si(value: float, unit: str, gauge: bool = False) -> float:
    """Convert a pressure to absolute Pa.

    Args:
        value: Pressure in ``unit``
        unit: Pressure unit (Pa, kPa, MPa, bar, mbar, kgf/cm2, psi, atm, mmHg)
        gauge: True when ``value`` is a gauge reading (adds one atmosphere)

    Returns:
        Absolute pressure in Pa
    """
    pa = value * _factor(PRESSURE_UNITS, unit, "pressure")
    return pa + P_ATM if gauge else pa


def pressure_from_si(value_pa: float, unit: str, gauge: bool = False) -> float:
    """Convert an absolute pressure in Pa to ``unit`` (gauge if requested)."""
    pa = value_pa - P_ATM if gauge else value_pa
    return pa / _factor(PRESSURE_UNITS, unit, "pressure")


def pressure_difference_to_si(value: float, unit: str) -> float:
    """Convert a pressure difference to Pa (no gauge offset)."""
    return value * _factor(PRESSURE_UNITS, unit, "pressure")


def pressure_difference_from_si(value_pa: float, unit: str) -> float:
    return value_pa / _factor(PRESSURE_UNITS, unit, "pressure")


def temperature_to_si(value: float, unit: str) -> float:
    """Convert a temperature to Kelvin."""
    key = normalize_unit(unit)
    if key == "k":
        return value
    if key == "c":
        return value + DEG_C_to_K
    if key == "f":
        return (value + 459.67) * 5.0 / 9.0
    if key == "r":
        return value * 5.0 / 9.0
    raise UnitError(
        f"Unknown temperature unit '{unit}'. Valid units: {', '.join(TEMPERATURE_UNITS)}"
    )


def temperature_from_si(value_k: float, unit: str) -> float:
    """Convert a temperature in Kelvin to ``unit``."""
    key = normalize_unit(unit)
    if key == "k":
        return value_k
    if key == "c":
        return value_k - DEG_C_to_K
    if key == "f":
        return value_k * 9.0 / 5.0 - 459.67
    if key == "r":
        return value_k * 9.0 / 5.0
    raise UnitError(
        f"Unknown temperature unit '{unit}'. Valid units: {', '.join(TEMPERATURE_UNITS)}"
    )


def temperature_difference_to_si(value: float, unit: str) -> float:
    """Convert a temperature difference to K (offsets do not apply)."""
    key = normalize_unit(unit)
    if key in ("k", "c"):
        return value
    if key in ("f", "r"):
        return value * 5.0 / 9.0
    raise UnitError(f"Unknown temperature unit '{unit}'.")


def temperature_difference_from_si(value_k: float, unit: str) -> float:
    key = normalize_unit(unit)
    if key in ("k", "c"):
        return value_k
    if key in ("f", "r"):
        return value_k * 9.0 / 5.0
    raise UnitError(f"Unknown temperature unit '{unit}'.")


CONVERTERS = {
    "pressure": (pressure_to_si, pressure_from_si),
    "pressure_difference": (pressure_difference_to_si, pressure_difference_from_si),
    "temperature": (temperature_to_si, temperature_from_si),
    "temperature_difference": (temperature_difference_to_si, temperature_difference_from_si),
    "length": (length_to_si, length_from_si),
    "volumetric_flow": (volumetric_flow_to_si, volumetric_flow_from_si),
    "mass_flow": (mass_flow_to_si, mass_flow_from_si),
    "viscosity": (viscosity_to_si, viscosity_from_si),
    "density": (density_to_si, density_from_si),
    "velocity": (velocity_to_si, velocity_from_si),
}


def convert(quantity: str, value: float, from_unit: str, to_unit: str) -> float:
    """Convert ``value`` of ``quantity`` between two display units.

    Gauge pressure is not handled here; use ``pressure_to_si`` with
    ``gauge=True`` for gauge readings.
    """
    if quantity not in CONVERTERS:
        raise UnitError(
            f"Unsupported quantity '{quantity}'. Valid quantities: {', '.join(CONVERTERS)}"
        )
    to_si, from_si = CONVERTERS[quantity]
    return from_si(to_si(value, from_unit), to_unit)


_TABLES = {
    "pressure": PRESSURE_UNITS,
    "pressure_difference": PRESSURE_UNITS,
    "length": LENGTH_UNITS,
    "volumetric_flow": VOLUMETRIC_FLOW_UNITS,
    "mass_flow": MASS_FLOW_UNITS,
    "viscosity": VISCOSITY_UNITS,
    "density": DENSITY_UNITS,
    "velocity": VELOCITY_UNITS,
}


def is_known_unit(quantity: str, unit: str) -> bool:
    """True when ``unit`` is a valid display unit for ``quantity``."""
    key = normalize_unit(unit)
    if quantity in ("temperature", "temperature_difference"):
        return key in TEMPERATURE_UNITS
    table = _TABLES.get(quantity)
    return table is not None and key in table
