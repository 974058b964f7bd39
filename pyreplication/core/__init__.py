"""
Core infrastructure for pyreplication.

Shared abstractions used by all domain subpackages (distributions,
hypothesis, montecarlo, power).

Key components:
    protocols: Backend protocol
    result: Generic Result[P] envelope
    exceptions: Exception hierarchy
    validation: Input validators
    compute: Device detection, timing, solver tolerances
"""

from pyreplication.core.protocols import Backend
from pyreplication.core.result import Result
from pyreplication.core.exceptions import (
    PyReplicationError,
    ValidationError,
    InvalidParameterError,
    DimensionError,
    NumericalError,
    DegenerateSampleError,
    ConvergenceError,
    SimulationError,
)

__all__ = [
    "Backend",
    "Result",
    "PyReplicationError",
    "ValidationError",
    "InvalidParameterError",
    "DimensionError",
    "NumericalError",
    "DegenerateSampleError",
    "ConvergenceError",
    "SimulationError",
]
