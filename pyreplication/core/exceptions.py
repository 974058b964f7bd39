"""
Exception hierarchy for pyreplication.

All exceptions inherit from PyReplicationError to allow catching any
library-specific error. Domain-specific exceptions should inherit from
the appropriate base class here.

Design principles:
    - Exceptions carry diagnostic information as attributes
    - Error messages are actionable with actual vs expected values
    - Never catch and re-raise with less information
"""


class PyReplicationError(Exception):
    """Base exception for all pyreplication errors."""
    pass


class ValidationError(PyReplicationError):
    """
    Input validation failed.

    Raised when user-provided inputs fail validation checks.
    """
    pass


class InvalidParameterError(ValidationError):
    """
    A scalar parameter is outside its valid domain.

    Raised for malformed shape parameters, sample sizes, trimming
    fractions, probabilities and similar caller errors, always before
    any sampling starts.

    Attributes:
        parameter: Name of the offending parameter
        value: The value that was rejected
    """

    def __init__(
        self,
        message: str,
        parameter: str | None = None,
        value: object = None
    ):
        super().__init__(message)
        self.parameter = parameter
        self.value = value


class DimensionError(ValidationError):
    """
    Array dimensions are incorrect or inconsistent.

    Raised when array shapes don't match expected dimensions or
    when multiple arrays have inconsistent shapes.
    """
    pass


class NumericalError(PyReplicationError):
    """
    Numerical computation failed.

    Base class for errors arising from numerical issues during computation.
    """
    pass


class DegenerateSampleError(NumericalError):
    """
    Sample cannot support the requested trimmed statistic.

    Raised when trimming leaves one observation or fewer, or when the
    winsorized variance is exactly zero so the standard error vanishes.
    Usually a configuration mismatch between sample size and trimming.

    Attributes:
        n: Sample size
        trim: Trimming fraction applied to each tail
        n_kept: Number of observations left after trimming
        index: Row (trial) index of the failing sample, if known
    """

    def __init__(
        self,
        message: str,
        n: int | None = None,
        trim: float | None = None,
        n_kept: int | None = None,
        index: int | None = None
    ):
        super().__init__(message)
        self.n = n
        self.trim = trim
        self.n_kept = n_kept
        self.index = index


class ConvergenceError(PyReplicationError):
    """
    Iterative algorithm failed to converge.

    Raised when a root finder or an adaptive quadrature fails to meet
    its tolerance within the iteration budget.

    Attributes:
        iterations: Number of iterations completed
        final_change: Final error estimate or bracket width
        reason: Why convergence failed (e.g., 'max_iterations', 'roundoff')
        threshold: The convergence threshold that was not met
    """

    def __init__(
        self,
        message: str,
        iterations: int,
        final_change: float | None = None,
        reason: str | None = None,
        threshold: float | None = None
    ):
        super().__init__(message)
        self.iterations = iterations
        self.final_change = final_change
        self.reason = reason
        self.threshold = threshold


class SimulationError(PyReplicationError):
    """
    A Monte Carlo run was aborted.

    Wraps the underlying error (available as __cause__) with the cell
    that failed. A run never continues past a failed cell, since dropping
    trials would bias the empirical rates.

    Attributes:
        g: Skewness parameter of the failing shape
        h: Tail parameter of the failing shape
        trim: Trimming fraction of the failing cell
        trial: Trial index, or None if the failure is not trial specific
    """

    def __init__(
        self,
        message: str,
        g: float | None = None,
        h: float | None = None,
        trim: float | None = None,
        trial: int | None = None
    ):
        super().__init__(message)
        self.g = g
        self.h = h
        self.trim = trim
        self.trial = trial
