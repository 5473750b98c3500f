#!/usr/bin/env python3
"""
Tests for configuration loading.
"""

import pytest

from utils.config import (
    CONFIG_ENV_VAR, CalculatorConfig, ConfigError, PressureMode, UnitSystem,
    default_config, load_config,
)


class TestDefaults:
    """Built-in defaults without a configuration file."""

    def test_no_file(self):
        config = load_config()
        assert config.unit_system is UnitSystem.SI_BAR
        assert config.pressure_mode is PressureMode.ABSOLUTE
        assert config.unit_for("pressure") == "bar"
        assert config.unit_for("diameter") == "mm"
        assert config.default_roughness_m == pytest.approx(4.5e-5)

    def test_sound_speed_defaults(self):
        config = CalculatorConfig()
        assert config.sound_speed_for("steam") == 450
        assert config.sound_speed_for("water") is None

    def test_imperial_preset(self):
        config = CalculatorConfig(unit_system="imperial")
        assert config.unit_for("pressure") == "psi"
        assert config.unit_for("temperature") == "f"


class TestYamlFile:
    """Loading YAML from a path or the environment variable."""

    def test_explicit_path(self, tmp_path):
        path = tmp_path / "pipeflow.yaml"
        path.write_text(
            "unit_system: mks\n"
            "default_units:\n"
            "  pressure: psi\n"
            "pressure_mode: gauge\n"
            "default_material: Steel\n"
            "default_sound_speed_m_s:\n"
            "  steam: 470\n"
        )
        config = load_config(path)
        assert config.unit_system is UnitSystem.MKS
        assert config.unit_for("pressure") == "psi", "Override wins over the preset"
        assert config.unit_for("mass_flow") == "t/h"
        assert config.gauge_pressure
        assert config.sound_speed_for("steam") == 470

    def test_env_var(self, tmp_path, monkeypatch):
        path = tmp_path / "env.yaml"
        path.write_text("default_fluid: water\n")
        monkeypatch.setenv(CONFIG_ENV_VAR, str(path))
        assert load_config().default_fluid == "water"
        assert default_config().default_fluid == "water"

    def test_empty_file(self, tmp_path):
        path = tmp_path / "empty.yaml"
        path.write_text("")
        assert load_config(path) == CalculatorConfig()

    @pytest.mark.parametrize("content", [
        "unit_system: cubits\n",
        "default_units:\n  pressure: furlongs\n",
        "default_units:\n  energy: kj\n",
        "default_roughness_m: -1\n",
        "default_sound_speed_m_s:\n  steam: 0\n",
        "unexpected: [unclosed\n",
        "- just\n- a list\n",
        "default_roughnes_m: 1e-4\n",
    ])
    def test_invalid(self, tmp_path, content):
        path = tmp_path / "bad.yaml"
        path.write_text(content)
        with pytest.raises(ConfigError):
            load_config(path)

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigError):
            load_config(tmp_path / "nope.yaml")
