#!/usr/bin/env python3
"""
Tests for the unit conversion primitives.
"""

import pytest

from pipecore import UnitError
from pipecore import units
from utils.constants import P_ATM


class TestPressure:
    """Pressure conversions, absolute and gauge."""

    @pytest.mark.parametrize("value,unit,expected_pa", [
        (1.0, "bar", 1.0e5),
        (1.0, "kPa", 1000.0),
        (1.0, "MPa", 1.0e6),
        (1.0, "psi", 6894.757),
        (1.0, "kgf/cm2", 98066.5),
        (1.0, "atm", 101325.0),
        (760.0, "mmHg", 101325.0),
    ])
    def test_to_si(self, value, unit, expected_pa):
        assert units.pressure_to_si(value, unit) == pytest.approx(expected_pa, rel=1e-5)

    def test_gauge_adds_one_atmosphere(self):
        assert units.pressure_to_si(0.0, "bar", gauge=True) == pytest.approx(P_ATM)
        assert units.pressure_to_si(9.0, "bar", gauge=True) == pytest.approx(9.0e5 + P_ATM)

    def test_gauge_reading_back(self):
        pa = units.pressure_to_si(7.0, "kgf/cm2", gauge=True)
        assert units.pressure_from_si(pa, "kgf/cm2", gauge=True) == pytest.approx(7.0)

    def test_difference_ignores_gauge_offset(self):
        assert units.pressure_difference_to_si(0.5, "bar") == pytest.approx(5.0e4)
        assert units.pressure_difference_from_si(6894.757, "psi") == pytest.approx(1.0, rel=1e-6)


class TestTemperature:
    """Temperature and temperature-difference conversions."""

    @pytest.mark.parametrize("value,unit,expected_k", [
        (300.0, "K", 300.0),
        (0.0, "C", 273.15),
        (100.0, "°C", 373.15),
        (32.0, "F", 273.15),
        (491.67, "R", 273.15),
    ])
    def test_to_si(self, value, unit, expected_k):
        assert units.temperature_to_si(value, unit) == pytest.approx(expected_k)

    def test_from_si(self):
        assert units.temperature_from_si(373.15, "c") == pytest.approx(100.0)
        assert units.temperature_from_si(373.15, "f") == pytest.approx(212.0)

    def test_difference_has_no_offset(self):
        assert units.temperature_difference_to_si(10.0, "c") == pytest.approx(10.0)
        assert units.temperature_difference_to_si(18.0, "f") == pytest.approx(10.0)
        assert units.temperature_difference_from_si(10.0, "r") == pytest.approx(18.0)


class TestOtherQuantities:
    """Factor-table quantities and the generic convert()."""

    def test_flow(self):
        assert units.volumetric_flow_to_si(36.0, "m3/h") == pytest.approx(0.01)
        assert units.volumetric_flow_to_si(1.0, "gpm") == pytest.approx(6.309e-5, rel=1e-3)
        assert units.mass_flow_to_si(3.6, "t/h") == pytest.approx(1.0)
        assert units.mass_flow_from_si(1.0, "kg/h") == pytest.approx(3600.0)

    def test_viscosity_and_density(self):
        assert units.viscosity_to_si(1.0, "cP") == pytest.approx(0.001)
        assert units.viscosity_to_si(1.0, "mPa·s") == pytest.approx(0.001)
        assert units.density_to_si(1.0, "g/cm3") == pytest.approx(1000.0)
        assert units.density_to_si(62.4, "lb/ft3") == pytest.approx(999.6, rel=1e-3)

    def test_length_and_velocity(self):
        assert units.length_to_si(4.0, "in") == pytest.approx(0.1016)
        assert units.length_from_si(0.1, "mm") == pytest.approx(100.0)
        assert units.velocity_to_si(1.0, "ft/s") == pytest.approx(0.3048)

    def test_convert(self):
        assert units.convert("pressure", 14.5038, "psi", "bar") == pytest.approx(1.0, rel=1e-5)
        assert units.convert("temperature", 212.0, "f", "c") == pytest.approx(100.0)

    def test_known_unit(self):
        assert units.is_known_unit("pressure", "Bar")
        assert units.is_known_unit("temperature", "celsius")
        assert not units.is_known_unit("length", "furlong")


class TestUnknownUnits:
    """Unknown units raise UnitError, which is also a ValueError."""

    @pytest.mark.parametrize("fn,unit", [
        (units.pressure_to_si, "torrr"),
        (units.length_to_si, "furlong"),
        (units.temperature_to_si, "X"),
        (units.mass_flow_to_si, "slug/s"),
    ])
    def test_raises(self, fn, unit):
        with pytest.raises(UnitError):
            fn(1.0, unit)

    def test_unknown_quantity(self):
        with pytest.raises(ValueError):
            units.convert("energy", 1.0, "j", "kj")
