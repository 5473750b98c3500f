"""
Shared input resolution for the front-end tools.

Converts display-unit inputs into the pipecore input models using the active
configuration for default units, roughness and speed of sound. Every
resolution step is recorded in ``results_log``; problems are collected in
``error_log`` so a tool can report all missing inputs at once.
"""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field, model_validator

from pipecore.errors import UnitError
from pipecore.models import (
    EquivalentLengthFitting, FlowInput, FluidClass, FluidSpec, KFactorFitting,
    NamedFitting, PhaseHint, PipeGeometry, ThermodynamicInput,
)
from pipecore import units
from utils.config import CalculatorConfig, default_config
from utils.fluid_aliases import map_fluid_name, phase_hint_for_name
from utils.helpers import get_pipe_roughness, lookup_nominal_pipe


class FittingInput(BaseModel):
    """One fitting as supplied by a user.

    Exactly one of ``K_value``, ``equivalent_length_m`` or ``type`` describes the loss.
    """

    type: Optional[str] = Field(None, description="Catalogue fitting name, e.g. 90_elbow")
    K_value: Optional[float] = Field(None, description="Loss coefficient per fitting")
    equivalent_length_m: Optional[float] = Field(None, description="Equivalent length per fitting in m")
    quantity: int = Field(1, description="Number of identical fittings")

    @model_validator(mode="after")
    def check_one_loss(self):
        given = [v for v in (self.K_value, self.equivalent_length_m) if v is not None]
        if not given and self.type is None:
            raise ValueError("fitting needs 'type', 'K_value' or 'equivalent_length_m'")
        if len(given) > 1:
            raise ValueError("fitting takes either 'K_value' or 'equivalent_length_m', not both")
        return self

    def to_entry(self):
        if self.K_value is not None:
            return KFactorFitting(k=self.K_value, quantity=self.quantity, label=self.type)
        if self.equivalent_length_m is not None:
            return EquivalentLengthFitting(length_m=self.equivalent_length_m, quantity=self.quantity,
                                           label=self.type)
        return NamedFitting(fitting_type=self.type, quantity=self.quantity)


class InputResolver:
    """
    Centralized input resolution with consistent logging and error handling.
    """

    def __init__(self, tool_name: str, config: Optional[CalculatorConfig] = None):
        self.tool_name = tool_name
        self.config = config or default_config()
        self.results_log: List[str] = []
        self.error_log: List[str] = []

    def resolve_quantity(self, name: str, quantity: str, value: Optional[float], unit: Optional[str],
                 config_key: Optional[str] = None) -> Optional[float]:
        if value is None:
            return None
        unit = unit or self.config.unit_for(config_key or quantity)
        try:
            converted = units.CONVERTERS[quantity][0](value, unit)
        except UnitError as e:
            self.error_log.append(f"{name}: {e}")
            return None
        self.results_log.append(f"{name}: {value} {unit} -> {converted:.6g} SI")
        return converted

    def resolve_fluid(self, fluid_name: Optional[str], phase: Optional[str] = None) -> Optional[FluidSpec]:
        """Resolve fluid name (or config default) and phase hint."""
        name = fluid_name or self.config.default_fluid
        fluid_class = map_fluid_name(name)
        if fluid_class is None:
            valid = ", ".join(c.value for c in FluidClass)
            self.error_log.append(f"Unknown fluid '{name}'. Valid fluid classes: {valid}")
            return None

        hint = phase_hint_for_name(name) or PhaseHint.UNSPECIFIED
        if phase is not None:
            try:
                hint = PhaseHint(phase.lower())
            except ValueError:
                valid = ", ".join(p.value for p in PhaseHint)
                self.error_log.append(f"Unknown phase '{phase}'. Valid phases: {valid}")
                return None
        source = "provided" if fluid_name else "config default"
        self.results_log.append(f"Fluid: {fluid_class.value} ({hint.value}), {source}")
        return FluidSpec(fluid_class=fluid_class, phase_hint=hint)

    def resolve_thermo(
        self,
        pressure: Optional[float] = None,
        pressure_unit: Optional[str] = None,
        pressure_mode: Optional[str] = None,
        temperature: Optional[float] = None,
        temperature_unit: Optional[str] = None,
        density: Optional[float] = None,
        density_unit: Optional[str] = None,
        viscosity: Optional[float] = None,
        viscosity_unit: Optional[str] = None,
    ) -> ThermodynamicInput:
        """Resolve state point (absolute Pa, K) and manual properties to SI."""
        pressure_pa = None
        if pressure is not None:
            unit = pressure_unit or self.config.unit_for("pressure")
            gauge = self.config.gauge_pressure if pressure_mode is None else pressure_mode.lower() == "gauge"
            try:
                pressure_pa = units.pressure_to_si(pressure, unit, gauge=gauge)
                mode = "gauge" if gauge else "abs"
                self.results_log.append(f"Pressure: {pressure} {unit} ({mode}) -> {pressure_pa:.1f} Pa abs")
            except UnitError as e:
                self.error_log.append(f"Pressure: {e}")

        temperature_k = self.resolve_quantity("Temperature", "temperature", temperature, temperature_unit)
        density_si = self.resolve_quantity("Density", "density", density, density_unit)
        viscosity_si = self.resolve_quantity("Viscosity", "viscosity", viscosity, viscosity_unit)

        return ThermodynamicInput(pressure_pa=pressure_pa, temperature_k=temperature_k,
                                  density=density_si, viscosity=viscosity_si)

    def resolve_geometry(
        self,
        pipe_diameter: Optional[float] = None,
        pipe_diameter_unit: Optional[str] = None,
        nominal_size_in: Optional[float] = None,
        schedule: Optional[str] = None,
        pipe_length: Optional[float] = None,
        pipe_length_unit: Optional[str] = None,
        pipe_roughness: Optional[float] = None,
        pipe_roughness_unit: Optional[str] = None,
        material: Optional[str] = None,
    ) -> Optional[PipeGeometry]:
        """Resolve diameter (direct or NPS lookup), length and roughness."""
        diameter = None
        if pipe_diameter is not None:
            diameter = self.resolve_quantity("Pipe diameter", "length", pipe_diameter, pipe_diameter_unit,
                                     config_key="diameter")
        elif nominal_size_in is not None:
            schedule = schedule or self.config.default_schedule
            try:
                pipe = lookup_nominal_pipe(nominal_size_in, schedule)
                diameter = pipe["Di_m"]
                self.results_log.append(
                    f"Pipe diameter: NPS {pipe['NPS_in']} Sch {schedule} -> Di {diameter:.5f} m")
            except ValueError as e:
                self.error_log.append(f"Failed to look up pipe NPS {nominal_size_in} Sch {schedule}: {e}")
        else:
            self.error_log.append("Missing required input: pipe_diameter or nominal_size_in.")

        length = 0.0
        if pipe_length is not None:
            length = self.resolve_quantity("Pipe length", "length", pipe_length, pipe_length_unit)
        else:
            self.results_log.append("Pipe length not given, fittings only (0 m straight pipe).")

        if pipe_roughness is not None:
            roughness = self.resolve_quantity("Pipe roughness", "length", pipe_roughness, pipe_roughness_unit or "m")
        else:
            roughness, source = get_pipe_roughness(material or self.config.default_material,
                                                   default=self.config.default_roughness_m)
            self.results_log.append(f"Pipe roughness: {roughness:.3g} m ({source})")

        if diameter is None or length is None or roughness is None:
            return None
        return PipeGeometry(diameter_m=diameter, length_m=length, roughness_m=roughness)

    def resolve_flow(
        self,
        mass_flow: Optional[float] = None,
        mass_flow_unit: Optional[str] = None,
        volumetric_flow: Optional[float] = None,
        volumetric_flow_unit: Optional[str] = None,
    ) -> Optional[FlowInput]:
        if mass_flow is None and volumetric_flow is None:
            self.error_log.append("Missing required input: mass_flow or volumetric_flow.")
            return None
        mass = self.resolve_quantity("Mass flow", "mass_flow", mass_flow, mass_flow_unit)
        volume = self.resolve_quantity("Volumetric flow", "volumetric_flow", volumetric_flow, volumetric_flow_unit)
        if (mass_flow is not None and mass is None) or (volumetric_flow is not None and volume is None):
            return None
        return FlowInput(mass_flow_kg_s=mass, volumetric_flow_m3_s=volume)

    def resolve_fittings(self, fittings: Optional[List[Dict[str, Any]]]) -> list:
        entries = []
        for i, fitting in enumerate(fittings or []):
            try:
                entries.append(FittingInput(**fitting).to_entry())
            except (ValueError, TypeError) as e:
                self.error_log.append(f"Fitting #{i + 1}: {e}")
        if entries:
            self.results_log.append(f"Fittings: {len(entries)} entries")
        return entries

    def resolve_sound_speed(self, fluid: Optional[FluidSpec], speed_of_sound: Optional[float],
                            use_default: bool = True) -> Optional[float]:
        """Speed of sound in m/s: provided value, else the configured default for the fluid class."""
        if speed_of_sound is not None:
            self.results_log.append(f"Speed of sound: {speed_of_sound} m/s (provided)")
            return speed_of_sound
        if not use_default or fluid is None:
            return None
        default = self.config.sound_speed_for(fluid.fluid_class.value)
        if default is not None:
            self.results_log.append(f"Speed of sound: {default} m/s (config default for {fluid.fluid_class.value})")
        return default

    @property
    def has_errors(self) -> bool:
        return bool(self.error_log)

    def get_logs(self) -> Dict[str, List[str]]:
        """Get accumulated logs."""
        return {
            "log": self.results_log.copy(),
            "errors": self.error_log.copy()
        }
