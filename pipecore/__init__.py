"""
Pipe pressure drop and fluid property core.

The front-ends build the input models, call ``solve`` and render the returned
``SolveResult``.
"""

from .errors import (
    PipeCalcError, InvalidInput, GeometryError, FlowError,
    PropertyEstimationError, PropertyUnavailable, UnitError,
)
from .models import (
    FluidClass, PhaseHint, PropertySource, FlowRegime, Correlation,
    FluidSpec, ThermodynamicInput, PipeGeometry, FlowInput,
    KFactorFitting, EquivalentLengthFitting, NamedFitting, FittingEntry,
    OutOfDomainWarning, ResolvedProperties, FlowRegimeResult, FittingAggregate,
    SolveResult, SizingResult,
)
from .properties import resolve, estimate_properties, EstimationOutcome
from .friction import friction_factor, haaland, petukhov, colebrook
from .fittings import aggregate
from .solver import solve
from .sizing import size_by_velocity

__all__ = [
    'PipeCalcError', 'InvalidInput', 'GeometryError', 'FlowError',
    'PropertyEstimationError', 'PropertyUnavailable', 'UnitError',
    'FluidClass', 'PhaseHint', 'PropertySource', 'FlowRegime', 'Correlation',
    'FluidSpec', 'ThermodynamicInput', 'PipeGeometry', 'FlowInput',
    'KFactorFitting', 'EquivalentLengthFitting', 'NamedFitting', 'FittingEntry',
    'OutOfDomainWarning', 'ResolvedProperties', 'FlowRegimeResult', 'FittingAggregate',
    'SolveResult', 'SizingResult',
    'resolve', 'estimate_properties', 'EstimationOutcome',
    'friction_factor', 'haaland', 'petukhov', 'colebrook',
    'aggregate',
    'solve',
    'size_by_velocity',
]
