"""
Calculator configuration.

Default display units, roughness, fluid and speed-of-sound values are loaded
once by a front-end and passed into the solver as plain numbers. The core
(`pipecore`) never reads configuration.

Configuration is a YAML file, located by explicit path or the
``PIPEFLOW_CONFIG`` environment variable; without one the built-in defaults
apply. Example::

    unit_system: si_bar
    default_units:
      pressure: bar
      temperature: c
    pressure_mode: gauge
    default_material: Steel
    default_sound_speed_m_s:
      steam: 450
"""

import logging
import os
from enum import Enum
from functools import lru_cache
from pathlib import Path
from typing import Dict, Optional, Union

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from pipecore.errors import PipeCalcError
from pipecore.units import CONVERTERS, is_known_unit
from utils.constants import DEFAULT_ROUGHNESS, DEFAULT_SOUND_SPEED

logger = logging.getLogger("pipeflow-mcp.config")

CONFIG_ENV_VAR = "PIPEFLOW_CONFIG"


class ConfigError(PipeCalcError):
    """The configuration file cannot be read or does not validate."""


class UnitSystem(str, Enum):
    SI_BAR = "si_bar"
    SI = "si"
    MKS = "mks"
    IMPERIAL = "imperial"


class PressureMode(str, Enum):
    GAUGE = "gauge"
    ABSOLUTE = "absolute"


UNIT_PRESETS: Dict[UnitSystem, Dict[str, str]] = {
    UnitSystem.SI_BAR: {
        "pressure": "bar", "pressure_difference": "bar", "temperature": "c",
        "length": "m", "diameter": "mm", "volumetric_flow": "m3/h", "mass_flow": "kg/h",
        "viscosity": "pa.s", "density": "kg/m3", "velocity": "m/s",
    },
    UnitSystem.SI: {
        "pressure": "pa", "pressure_difference": "pa", "temperature": "k",
        "length": "m", "diameter": "m", "volumetric_flow": "m3/s", "mass_flow": "kg/s",
        "viscosity": "pa.s", "density": "kg/m3", "velocity": "m/s",
    },
    UnitSystem.MKS: {
        "pressure": "kgf/cm2", "pressure_difference": "kgf/cm2", "temperature": "c",
        "length": "m", "diameter": "mm", "volumetric_flow": "m3/h", "mass_flow": "t/h",
        "viscosity": "cp", "density": "kg/m3", "velocity": "m/s",
    },
    UnitSystem.IMPERIAL: {
        "pressure": "psi", "pressure_difference": "psi", "temperature": "f",
        "length": "ft", "diameter": "in", "volumetric_flow": "gpm", "mass_flow": "lb/h",
        "viscosity": "cp", "density": "lb/ft3", "velocity": "ft/s",
    },
}

# Config keys that map onto a unit quantity with a different name
_QUANTITY_FOR_KEY = {"diameter": "length"}


class CalculatorConfig(BaseModel):
    """Defaults injected into front-end calls."""

    model_config = ConfigDict(extra="forbid")

    unit_system: UnitSystem = UnitSystem.SI_BAR
    default_units: Dict[str, str] = Field(default_factory=dict)
    pressure_mode: PressureMode = PressureMode.ABSOLUTE
    default_fluid: str = "steam"
    default_material: Optional[str] = None
    default_roughness_m: float = Field(DEFAULT_ROUGHNESS, ge=0)
    default_schedule: str = "40"
    default_sound_speed_m_s: Dict[str, float] = Field(default_factory=lambda: dict(DEFAULT_SOUND_SPEED))

    @field_validator("default_units")
    @classmethod
    def validate_units(cls, v):
        for key, unit in v.items():
            quantity = _QUANTITY_FOR_KEY.get(key, key)
            if quantity not in CONVERTERS:
                raise ValueError(f"Unknown quantity '{key}' in default_units")
            if not is_known_unit(quantity, unit):
                raise ValueError(f"Unknown {quantity} unit '{unit}'")
        return v

    @field_validator("default_sound_speed_m_s")
    @classmethod
    def validate_sound_speed(cls, v):
        for fluid, speed in v.items():
            if speed <= 0:
                raise ValueError(f"Speed of sound for '{fluid}' must be > 0")
        return v

    def unit_for(self, quantity: str) -> str:
        """Display unit for ``quantity``: explicit override, else the unit-system preset."""
        if quantity in self.default_units:
            return self.default_units[quantity]
        return UNIT_PRESETS[self.unit_system][quantity]

    @property
    def gauge_pressure(self) -> bool:
        return self.pressure_mode is PressureMode.GAUGE

    def sound_speed_for(self, fluid_class: str) -> Optional[float]:
        return self.default_sound_speed_m_s.get(fluid_class)


def load_config(path: Optional[Union[str, Path]] = None) -> CalculatorConfig:
    """Load configuration from YAML.

    Args:
        path: Config file path; defaults to $PIPEFLOW_CONFIG

    Returns:
        CalculatorConfig (built-in defaults when no file is configured)

    Raises:
        ConfigError: The file is missing, unreadable or invalid
    """
    if path is None:
        path = os.environ.get(CONFIG_ENV_VAR)
    if path is None:
        logger.debug("No configuration file configured, using defaults")
        return CalculatorConfig()

    path = Path(path)
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except OSError as e:
        raise ConfigError(f"Cannot read configuration file {path}: {e}")
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}")

    if not isinstance(data, dict):
        raise ConfigError(f"Configuration file {path} must contain a mapping")

    try:
        config = CalculatorConfig(**data)
    except ValidationError as e:
        raise ConfigError(f"Invalid configuration in {path}: {e}")

    logger.info("Loaded configuration from %s (unit system %s)", path, config.unit_system.value)
    return config


@lru_cache(maxsize=1)
def default_config() -> CalculatorConfig:
    """Configuration shared by all tool calls, loaded on first use."""
    return load_config()
