"""
Data model for the pipe pressure drop core.

All models are immutable pydantic models constructed fresh for every
calculation. Numeric contract checks (diameter > 0, flow >= 0, ...) are made
by the resolver and the solver so that they surface as the pipecore error
taxonomy rather than as pydantic validation errors.
"""

from enum import Enum
from typing import List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field


class FluidClass(str, Enum):
    STEAM = "steam"
    AIR = "air"
    GAS = "gas"
    WATER = "water"
    CONDENSATE = "condensate"


class PhaseHint(str, Enum):
    SATURATED = "saturated"
    SUPERHEATED = "superheated"
    LIQUID = "liquid"
    UNSPECIFIED = "unspecified"


class PropertySource(str, Enum):
    ESTIMATED = "estimated"
    MANUAL = "manual"
    MANUAL_FALLBACK = "manual-fallback"


class FlowRegime(str, Enum):
    LAMINAR = "laminar"
    TRANSITIONAL = "transitional"
    TURBULENT = "turbulent"


class Correlation(str, Enum):
    NONE = "none"            # zero flow, no correlation evaluated
    LAMINAR = "laminar"      # 64/Re
    HAALAND = "haaland"
    PETUKHOV = "petukhov"
    COLEBROOK = "colebrook"


class _Frozen(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")


class FluidSpec(_Frozen):
    """Fluid selection for one calculation."""

    fluid_class: FluidClass
    phase_hint: PhaseHint = PhaseHint.UNSPECIFIED


class ThermodynamicInput(_Frozen):
    """State point (pressure/temperature) and/or manual property overrides.

    At least one branch must be populated; the resolver enforces this.
    """

    pressure_pa: Optional[float] = Field(None, description="Absolute pressure in Pa")
    temperature_k: Optional[float] = Field(None, description="Temperature in K")
    density: Optional[float] = Field(None, description="Manual density in kg/m³")
    viscosity: Optional[float] = Field(None, description="Manual dynamic viscosity in Pa·s")

    @property
    def has_state(self) -> bool:
        return self.pressure_pa is not None and self.temperature_k is not None

    @property
    def has_manual(self) -> bool:
        return self.density is not None and self.viscosity is not None


class PipeGeometry(_Frozen):
    diameter_m: float = Field(..., description="Internal diameter in m")
    length_m: float = Field(0.0, description="Straight pipe length in m")
    roughness_m: float = Field(0.0, description="Absolute roughness in m")

    @property
    def area_m2(self) -> float:
        return 3.141592653589793 * self.diameter_m ** 2 / 4.0

    @property
    def relative_roughness(self) -> float:
        return self.roughness_m / self.diameter_m


class FlowInput(_Frozen):
    """Exactly one of mass or volumetric flow."""

    mass_flow_kg_s: Optional[float] = None
    volumetric_flow_m3_s: Optional[float] = None


class KFactorFitting(_Frozen):
    kind: Literal["k_factor"] = "k_factor"
    k: float = Field(..., description="Dimensionless loss coefficient per fitting")
    quantity: int = 1
    label: Optional[str] = None


class EquivalentLengthFitting(_Frozen):
    kind: Literal["equivalent_length"] = "equivalent_length"
    length_m: float = Field(..., description="Equivalent pipe length per fitting in m")
    quantity: int = 1
    label: Optional[str] = None


class NamedFitting(_Frozen):
    """Catalogue fitting whose K is computed from Crane correlations at solve time."""

    kind: Literal["named"] = "named"
    fitting_type: str
    quantity: int = 1


FittingEntry = Union[KFactorFitting, EquivalentLengthFitting, NamedFitting]


class OutOfDomainWarning(_Frozen):
    """Non-fatal concern attached to a successful result."""

    code: str
    message: str
    field: Optional[str] = None
    value: Optional[float] = None
    bound: Optional[str] = None


class ResolvedProperties(_Frozen):
    density: float
    viscosity: float
    source: PropertySource
    state: Optional[str] = Field(
        None, description="Property model used: liquid, saturated_liquid, saturated_vapor, superheated, gas"
    )
    saturation_temperature_k: Optional[float] = None
    estimation_error: Optional[str] = Field(
        None, description="Why estimation failed when source is manual-fallback"
    )


class FlowRegimeResult(_Frozen):
    reynolds: float
    friction_factor: float
    regime: FlowRegime
    correlation: Correlation
    warnings: List[OutOfDomainWarning] = Field(default_factory=list)


class FittingDetail(_Frozen):
    kind: str
    label: Optional[str] = None
    quantity: int
    k_each: Optional[float] = None
    length_each_m: Optional[float] = None
    k_source: str = "provided"


class FittingAggregate(_Frozen):
    k_sum: float = 0.0
    direct_length_m: float = 0.0
    length_from_k_m: float = 0.0
    details: List[FittingDetail] = Field(default_factory=list)

    @property
    def equivalent_length_m(self) -> float:
        return self.direct_length_m + self.length_from_k_m


class SolveResult(_Frozen):
    """Result envelope: every property and intermediate value used by the solve."""

    fluid: FluidSpec
    geometry: PipeGeometry
    properties: ResolvedProperties
    mass_flow_kg_s: float
    volumetric_flow_m3_s: float
    area_m2: float
    velocity_m_s: float
    reynolds: float
    relative_roughness: float
    friction_factor: float
    regime: FlowRegime
    correlation: Correlation
    fittings_k_sum: float
    fittings_equivalent_length_m: float
    fitting_details: List[FittingDetail] = Field(default_factory=list)
    total_length_m: float
    pressure_drop_straight_pa: float
    pressure_drop_fittings_pa: float
    pressure_drop_pa: float
    head_loss_m: float
    speed_of_sound_m_s: Optional[float] = None
    mach: Optional[float] = None
    warnings: List[OutOfDomainWarning] = Field(default_factory=list)


class SizingResult(_Frozen):
    """Inner diameter meeting a target velocity, with the nearest standard pipe."""

    fluid: FluidSpec
    properties: ResolvedProperties
    mass_flow_kg_s: float
    volumetric_flow_m3_s: float
    target_velocity_m_s: float
    inner_diameter_m: float
    velocity_m_s: float
    reynolds: float
    nominal_size_in: Optional[float] = None
    schedule: Optional[str] = None
    standard_inner_diameter_m: Optional[float] = None
    standard_velocity_m_s: Optional[float] = None
    warnings: List[OutOfDomainWarning] = Field(default_factory=list)
