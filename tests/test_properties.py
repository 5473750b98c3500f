#!/usr/bin/env python3
"""
Tests for the fluid property resolver.

Validates source tagging (estimated, manual, manual-fallback), the
saturation-based state selection for steam and water, and IF97 reference
values.
"""

import pytest

from pipecore import (
    EstimationOutcome, FluidClass, FluidSpec, InvalidInput, PhaseHint,
    PropertyEstimationError, PropertySource, PropertyUnavailable,
    ThermodynamicInput, estimate_properties, resolve,
)
from pipecore import properties as props_module
from pipecore.properties import ideal_gas_density, saturation_pressure, saturation_temperature

STEAM = FluidSpec(fluid_class=FluidClass.STEAM)
WATER = FluidSpec(fluid_class=FluidClass.WATER)
GAS = FluidSpec(fluid_class=FluidClass.GAS)


class TestSourceSelection:
    """Which branch the resolver takes for each input combination."""

    def test_manual_only_skips_estimation(self, failing_estimator):
        thermo = ThermodynamicInput(density=997.0, viscosity=0.001)
        result = resolve(WATER, thermo, estimator=failing_estimator)
        assert result.source is PropertySource.MANUAL
        assert (result.density, result.viscosity) == (997.0, 0.001)
        assert failing_estimator.calls == [], "Estimation must not run without a state point"

    def test_estimated_wins_over_manual(self):
        def estimator(fluid, p, t):
            return EstimationOutcome(density=5.0, viscosity=1.5e-5, state="superheated")

        thermo = ThermodynamicInput(pressure_pa=1e6, temperature_k=473.15, density=4.0, viscosity=1e-5)
        result = resolve(STEAM, thermo, estimator=estimator)
        assert result.source is PropertySource.ESTIMATED
        assert result.density == 5.0
        assert result.estimation_error is None

    def test_fallback_to_manual(self, failing_estimator):
        thermo = ThermodynamicInput(pressure_pa=1e6, temperature_k=473.15, density=4.8, viscosity=1.6e-5)
        result = resolve(STEAM, thermo, estimator=failing_estimator)
        assert result.source is PropertySource.MANUAL_FALLBACK
        assert (result.density, result.viscosity) == (4.8, 1.6e-5)
        assert "forced" in result.estimation_error
        assert len(failing_estimator.calls) == 1

    def test_no_manual_values_is_unavailable(self, failing_estimator):
        thermo = ThermodynamicInput(pressure_pa=1e6, temperature_k=473.15)
        with pytest.raises(PropertyUnavailable) as exc:
            resolve(STEAM, thermo, estimator=failing_estimator)
        assert isinstance(exc.value, PropertyEstimationError)
        assert exc.value.fluid == "steam"
        assert exc.value.pressure_pa == 1e6

    def test_gas_always_needs_manual(self):
        thermo = ThermodynamicInput(pressure_pa=5e5, temperature_k=300.0, density=4.0, viscosity=1.1e-5)
        result = resolve(GAS, thermo)
        assert result.source is PropertySource.MANUAL_FALLBACK
        assert "generic gas" in result.estimation_error

        with pytest.raises(PropertyUnavailable):
            resolve(GAS, ThermodynamicInput(pressure_pa=5e5, temperature_k=300.0))

    def test_monkeypatched_estimation_failure(self, monkeypatch):
        """Replacing the default estimator at module level also drives the fallback."""
        monkeypatch.setattr(props_module, "estimate_properties",
                            lambda fluid, p, t: EstimationOutcome.failure("backend offline"))
        thermo = ThermodynamicInput(pressure_pa=1e5, temperature_k=300.0, density=997.0, viscosity=1e-3)
        result = props_module.resolve(WATER, thermo)
        assert result.source is PropertySource.MANUAL_FALLBACK
        assert result.estimation_error == "backend offline"


class TestInputContract:
    """Half-filled or non-physical branches are rejected."""

    def test_empty_input(self):
        with pytest.raises(InvalidInput):
            resolve(WATER, ThermodynamicInput())

    @pytest.mark.parametrize("thermo,field", [
        (ThermodynamicInput(pressure_pa=1e5), "temperature_k"),
        (ThermodynamicInput(temperature_k=300.0), "pressure_pa"),
        (ThermodynamicInput(density=997.0), "viscosity"),
        (ThermodynamicInput(pressure_pa=-1.0, temperature_k=300.0), "pressure_pa"),
        (ThermodynamicInput(pressure_pa=1e5, temperature_k=0.0), "temperature_k"),
        (ThermodynamicInput(density=0.0, viscosity=1e-3), "density"),
        (ThermodynamicInput(density=997.0, viscosity=-1e-3), "viscosity"),
    ])
    def test_rejected(self, thermo, field):
        with pytest.raises(InvalidInput) as exc:
            resolve(WATER, thermo)
        assert exc.value.field == field


class TestIF97Estimation:
    """Reference values from IAPWS-IF97 via CoolProp."""

    def test_superheated_steam(self):
        result = resolve(STEAM, ThermodynamicInput(pressure_pa=1.0e6, temperature_k=473.15))
        assert result.source is PropertySource.ESTIMATED
        assert result.state == "superheated"
        assert result.density == pytest.approx(4.854, rel=0.01)
        assert 1.0e-5 < result.viscosity < 2.5e-5
        assert result.saturation_temperature_k == pytest.approx(453.03, abs=0.1)

    def test_saturated_steam_uses_saturation_line(self):
        steam = FluidSpec(fluid_class=FluidClass.STEAM, phase_hint=PhaseHint.SATURATED)
        result = resolve(steam, ThermodynamicInput(pressure_pa=1.0e6, temperature_k=453.0))
        assert result.state == "saturated_vapor"
        assert result.density == pytest.approx(5.147, rel=0.01)

    def test_superheated_hint_below_saturation_fails(self):
        steam = FluidSpec(fluid_class=FluidClass.STEAM, phase_hint=PhaseHint.SUPERHEATED)
        outcome = estimate_properties(steam, 1.0e6, 440.0)
        assert not outcome.ok
        assert "saturation" in outcome.error

    def test_cold_water(self):
        result = resolve(WATER, ThermodynamicInput(pressure_pa=1.0e5, temperature_k=300.0))
        assert result.state == "liquid"
        assert result.density == pytest.approx(996.5, rel=0.002)
        assert result.viscosity == pytest.approx(8.5e-4, rel=0.03)

    def test_water_above_saturation_would_flash(self):
        outcome = estimate_properties(WATER, 1.0e5, 423.15)
        assert not outcome.ok
        assert "flash" in outcome.error

    def test_water_above_saturation_falls_back(self):
        thermo = ThermodynamicInput(pressure_pa=1.0e5, temperature_k=423.15, density=917.0, viscosity=1.8e-4)
        result = resolve(WATER, thermo)
        assert result.source is PropertySource.MANUAL_FALLBACK
        assert result.density == 917.0

    def test_air(self):
        result = resolve(FluidSpec(fluid_class=FluidClass.AIR),
                         ThermodynamicInput(pressure_pa=101325.0, temperature_k=293.15))
        assert result.density == pytest.approx(1.204, rel=0.005)
        assert result.viscosity == pytest.approx(1.81e-5, rel=0.03)


class TestHelpers:
    """Saturation line and ideal-gas density helpers."""

    def test_saturation_temperature(self):
        assert saturation_temperature(101325.0) == pytest.approx(373.12, abs=0.05)

    def test_saturation_pressure(self):
        assert saturation_pressure(453.03) == pytest.approx(1.0e6, rel=0.002)

    def test_saturation_outside_line(self):
        with pytest.raises(PropertyEstimationError):
            saturation_temperature(3.0e7)

    def test_ideal_gas_steam(self):
        assert ideal_gas_density(1.0e6, 473.15) == pytest.approx(1.0e6 / (461.5 * 473.15))

    def test_ideal_gas_molar_mass(self):
        assert ideal_gas_density(101325.0, 293.15, molar_mass=28.96) == pytest.approx(1.204, rel=0.002)

    def test_ideal_gas_rejects_bad_state(self):
        with pytest.raises(InvalidInput):
            ideal_gas_density(0.0, 300.0)
