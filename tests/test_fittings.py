#!/usr/bin/env python3
"""
Tests for the fitting loss aggregator.
"""

import pytest

from pipecore import EquivalentLengthFitting, InvalidInput, KFactorFitting, NamedFitting, aggregate
from pipecore.fittings import FITTING_CATALOGUE, canonical_fitting_name, fitting_k, validate_fittings


class TestAggregate:
    """Equivalent length from K factors and direct lengths."""

    def test_single_k_entry(self):
        result = aggregate([KFactorFitting(k=1.0)], diameter=0.1, friction_factor=0.02)
        assert result.k_sum == 1.0
        assert result.equivalent_length_m == pytest.approx(5.0)

    def test_empty_list(self):
        result = aggregate([], diameter=0.1, friction_factor=0.02)
        assert result.equivalent_length_m == 0.0
        assert result.details == []

    def test_equivalent_length_adds_directly(self):
        fittings = [EquivalentLengthFitting(length_m=3.0, quantity=2), KFactorFitting(k=0.5, quantity=4)]
        result = aggregate(fittings, diameter=0.05, friction_factor=0.025)
        assert result.direct_length_m == pytest.approx(6.0)
        assert result.length_from_k_m == pytest.approx(2.0 * 0.05 / 0.025)
        assert result.equivalent_length_m == pytest.approx(6.0 + 4.0)

    def test_order_does_not_matter(self):
        fittings = [KFactorFitting(k=0.3), EquivalentLengthFitting(length_m=1.5), KFactorFitting(k=2.0, quantity=3)]
        forward = aggregate(fittings, 0.1, 0.02)
        backward = aggregate(list(reversed(fittings)), 0.1, 0.02)
        assert forward.equivalent_length_m == pytest.approx(backward.equivalent_length_m)

    def test_zero_friction_factor(self):
        """No flow: K entries add no length, direct lengths still count."""
        fittings = [KFactorFitting(k=10.0), EquivalentLengthFitting(length_m=2.0)]
        result = aggregate(fittings, diameter=0.1, friction_factor=0.0)
        assert result.length_from_k_m == 0.0
        assert result.equivalent_length_m == pytest.approx(2.0)


class TestCatalogue:
    """Named fittings computed with Crane correlations."""

    @pytest.mark.parametrize("name", sorted(FITTING_CATALOGUE))
    def test_every_fitting_has_positive_k(self, name):
        k = fitting_k(name, diameter=0.1, Re=1e5, flow_rate=0.01)
        assert k > 0, f"{name} returned K={k}"

    def test_elbow_k_is_typical(self):
        assert 0.1 < fitting_k("90_elbow", 0.1, 1e5, 0.01) < 1.0

    def test_aliases(self):
        assert canonical_fitting_name("Elbow 90") == "90_elbow"
        assert canonical_fitting_name("check_valve") == "check_valve_swing"

    def test_named_fitting_aggregates_like_k(self):
        k = fitting_k("gate_valve", 0.1, 1e5, 0.01)
        result = aggregate([NamedFitting(fitting_type="gate_valve", quantity=2)], 0.1, 0.02,
                           Re=1e5, flow_rate=0.01)
        assert result.k_sum == pytest.approx(2 * k)
        assert result.details[0].k_source == "calculated"

    def test_unknown_name(self):
        with pytest.raises(InvalidInput) as exc:
            canonical_fitting_name("flux_capacitor")
        assert "Valid types" in str(exc.value)


class TestValidation:
    """Fitting entries violating their contract."""

    @pytest.mark.parametrize("fitting", [
        KFactorFitting(k=-0.5),
        EquivalentLengthFitting(length_m=-1.0),
        KFactorFitting(k=1.0, quantity=-1),
        NamedFitting(fitting_type="unobtainium_valve"),
    ])
    def test_rejected(self, fitting):
        with pytest.raises(InvalidInput):
            validate_fittings([fitting])
