"""
Error taxonomy for the pipe pressure drop core.

Fatal contract violations derive from ``InvalidInput``; property estimation
problems derive from ``PropertyEstimationError``. Non-fatal domain concerns are
not exceptions, they are ``OutOfDomainWarning`` records attached to results
(see ``pipecore.models``).
"""

from typing import Any, Optional


class PipeCalcError(Exception):
    """Base class for every error raised by pipecore."""


class InvalidInput(PipeCalcError, ValueError):
    """An input violates the calculation contract and must not be corrected.

    Args:
        message: Human readable explanation
        field: Name of the offending input (e.g. "diameter_m")
        value: The rejected value
        bound: Description of the violated bound (e.g. "> 0")
    """

    def __init__(self, message: str, field: Optional[str] = None,
                 value: Any = None, bound: Optional[str] = None):
        super().__init__(message)
        self.field = field
        self.value = value
        self.bound = bound

    def to_dict(self):
        return {
            "error": str(self),
            "error_type": type(self).__name__,
            "field": self.field,
            "value": self.value,
            "bound": self.bound,
        }


class GeometryError(InvalidInput):
    """Pipe geometry is physically impossible (diameter <= 0, negative length or roughness)."""


class FlowError(InvalidInput):
    """Flow input is missing, ambiguous or negative."""


class PropertyEstimationError(PipeCalcError):
    """Property estimation from pressure/temperature failed."""

    def __init__(self, message: str, fluid: Optional[str] = None,
                 pressure_pa: Optional[float] = None,
                 temperature_k: Optional[float] = None):
        super().__init__(message)
        self.fluid = fluid
        self.pressure_pa = pressure_pa
        self.temperature_k = temperature_k

    def to_dict(self):
        return {
            "error": str(self),
            "error_type": type(self).__name__,
            "fluid": self.fluid,
            "pressure_pa": self.pressure_pa,
            "temperature_k": self.temperature_k,
        }


class PropertyUnavailable(PropertyEstimationError):
    """Estimation failed and no manual density/viscosity were supplied."""


class UnitError(PipeCalcError, ValueError):
    """Unknown or unsupported display unit."""
