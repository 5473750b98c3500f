#!/usr/bin/env python3
"""
Tests for the friction factor engine.

Validates regime selection, the closed-form correlations and the warning
records attached for transitional flow, rough pipe and Petukhov substitution.
"""

import math

import pytest

from pipecore import Correlation, FlowRegime, InvalidInput
from pipecore.friction import classify_regime, colebrook, friction_factor, haaland, petukhov


class TestLaminar:
    """0 < Re <= 2300 gives exactly 64/Re."""

    @pytest.mark.parametrize("Re", [1e-3, 1.0, 100.0, 1000.0, 2299.9, 2300.0])
    def test_64_over_re(self, Re):
        result = friction_factor(Re, 0.001)
        assert result.regime is FlowRegime.LAMINAR
        assert result.correlation is Correlation.LAMINAR
        assert result.friction_factor == pytest.approx(64.0 / Re, rel=1e-12)

    def test_roughness_does_not_matter(self):
        assert friction_factor(1000, 0.0).friction_factor == friction_factor(1000, 0.04).friction_factor


class TestTurbulent:
    """Re >= 4000 uses Haaland by default."""

    @pytest.mark.parametrize("Re", [4000, 1e4, 1e5, 1e6, 1e8])
    @pytest.mark.parametrize("eD", [1e-6, 1e-4, 1e-3, 0.01, 0.05])
    def test_haaland_identity(self, Re, eD):
        result = friction_factor(Re, eD)
        f = result.friction_factor
        assert result.regime is FlowRegime.TURBULENT
        assert result.correlation is Correlation.HAALAND
        residual = 1.0 / math.sqrt(f) + 1.8 * math.log10(eD / 3.7 + 6.9 / Re)
        assert abs(residual) < 1e-6, f"Haaland residual {residual} at Re={Re}, eD={eD}"

    def test_haaland_close_to_colebrook_for_smooth_pipe(self):
        """Without the roughness exponent Haaland tracks Colebrook closely only near smooth wall."""
        for Re, eD in [(1e5, 1e-6), (1e6, 1e-7)]:
            assert haaland(Re, eD) == pytest.approx(colebrook(Re, eD), rel=0.03)

    def test_haaland_conservative_for_rough_pipe(self):
        assert haaland(1e5, 4.5e-4) > colebrook(1e5, 4.5e-4)

    def test_smooth_pipe_auto_selects_petukhov(self):
        result = friction_factor(1e5, 0.0)
        assert result.correlation is Correlation.PETUKHOV
        assert result.friction_factor == pytest.approx((0.79 * math.log(1e5) - 1.64) ** -2)

    def test_smooth_pipe_outside_petukhov_band_flags_substitution(self):
        result = friction_factor(1e7, 0.0)
        assert result.correlation is Correlation.HAALAND
        assert result.friction_factor == pytest.approx(haaland(1e7, 0.0))
        assert [w.code for w in result.warnings] == ["correlation_substituted"]

    def test_smooth_pipe_transitional_below_petukhov_band(self):
        result = friction_factor(2500.0, 0.0)
        assert result.regime is FlowRegime.TRANSITIONAL
        assert result.correlation is Correlation.HAALAND
        assert [w.code for w in result.warnings] == ["correlation_substituted", "transitional_flow"]

    def test_explicit_colebrook(self):
        result = friction_factor(1e5, 1e-4, correlation="colebrook")
        assert result.correlation is Correlation.COLEBROOK
        assert result.friction_factor == pytest.approx(colebrook(1e5, 1e-4))

    def test_petukhov_substitution_is_flagged(self):
        result = friction_factor(1e7, 1e-5, correlation=Correlation.PETUKHOV)
        assert result.correlation is Correlation.HAALAND
        assert result.friction_factor == pytest.approx(haaland(1e7, 1e-5))
        assert [w.code for w in result.warnings] == ["correlation_substituted"]

    def test_petukhov_inside_band(self):
        result = friction_factor(5e4, 1e-5, correlation="petukhov")
        assert result.correlation is Correlation.PETUKHOV
        assert result.friction_factor == pytest.approx(petukhov(5e4))
        assert result.warnings == []


class TestTransitional:
    """2300 < Re < 4000 uses the turbulent correlation and carries a warning."""

    @pytest.mark.parametrize("Re", [2300.5, 3000, 3999.9])
    def test_warning_and_turbulent_value(self, Re):
        result = friction_factor(Re, 1e-3)
        assert result.regime is FlowRegime.TRANSITIONAL
        assert result.friction_factor == pytest.approx(haaland(Re, 1e-3))
        assert "transitional_flow" in [w.code for w in result.warnings]

    def test_boundaries(self):
        assert classify_regime(2300) is FlowRegime.LAMINAR
        assert classify_regime(2301) is FlowRegime.TRANSITIONAL
        assert classify_regime(4000) is FlowRegime.TURBULENT


class TestDegenerateAndInvalid:
    """Zero Reynolds number, bad inputs and out-of-domain roughness."""

    def test_zero_reynolds(self):
        result = friction_factor(0.0, 1e-3)
        assert result.friction_factor == 0.0
        assert result.correlation is Correlation.NONE

    @pytest.mark.parametrize("Re", [-1.0, float("nan"), float("inf"), None, True])
    def test_invalid_reynolds(self, Re):
        with pytest.raises(InvalidInput) as exc:
            friction_factor(Re, 1e-3)
        assert exc.value.field == "reynolds"

    def test_negative_roughness(self):
        with pytest.raises(InvalidInput) as exc:
            friction_factor(1e5, -1e-4)
        assert exc.value.field == "relative_roughness"

    def test_unknown_correlation(self):
        with pytest.raises(InvalidInput):
            friction_factor(1e5, 1e-4, correlation="blasius")

    def test_rough_pipe_is_flagged_not_rejected(self):
        result = friction_factor(1e5, 0.08)
        assert result.friction_factor > 0
        warning = result.warnings[0]
        assert warning.code == "relative_roughness_out_of_domain"
        assert warning.value == pytest.approx(0.08)

    def test_boolean_roughness_rejected(self):
        with pytest.raises(InvalidInput):
            friction_factor(1e5, False)

    def test_haaland_undefined_raises_invalid_input(self):
        """eD/3.7 + 6.9/Re = 1 puts the log at zero; no friction factor exists."""
        eD = 3.7 * (1 - 6.9 / 6900.0)
        with pytest.raises(InvalidInput) as exc:
            friction_factor(6900.0, eD)
        assert exc.value.field == "relative_roughness"

    def test_haaland_log_argument_above_one(self):
        with pytest.raises(InvalidInput):
            haaland(1e5, 5.0)
