"""
Tests for the pyreplication exception hierarchy.

Validates:
    - Inheritance chain (all exceptions catchable via PyReplicationError)
    - Diagnostic attributes on InvalidParameterError, DegenerateSampleError,
      ConvergenceError, SimulationError
    - Default attribute values (None for optional attributes)
    - Exceptions survive pickling, as they cross process boundaries
"""

import pickle

import pytest

from pyreplication.core.exceptions import (
    ConvergenceError,
    DegenerateSampleError,
    DimensionError,
    InvalidParameterError,
    NumericalError,
    PyReplicationError,
    SimulationError,
    ValidationError,
)


# ═══════════════════════════════════════════════════════════════════════
# Inheritance hierarchy
# ═══════════════════════════════════════════════════════════════════════


class TestInheritance:
    """Every exception is catchable via PyReplicationError."""

    def test_invalid_parameter_is_validation_error(self):
        with pytest.raises(ValidationError):
            raise InvalidParameterError("h must be >= 0")

    def test_dimension_error_is_validation_error(self):
        with pytest.raises(ValidationError):
            raise DimensionError("wrong shape")

    def test_degenerate_sample_is_numerical_error(self):
        with pytest.raises(NumericalError):
            raise DegenerateSampleError("too few left")

    def test_convergence_error_is_not_numerical_error(self):
        err = ConvergenceError("did not converge", iterations=200)
        assert isinstance(err, PyReplicationError)
        assert not isinstance(err, NumericalError)

    def test_simulation_error_is_pyreplication_error(self):
        with pytest.raises(PyReplicationError):
            raise SimulationError("cell failed")

    def test_simulation_error_is_not_validation_error(self):
        assert not isinstance(SimulationError("x"), ValidationError)


# ═══════════════════════════════════════════════════════════════════════
# Diagnostic attributes
# ═══════════════════════════════════════════════════════════════════════


class TestInvalidParameterError:

    def test_attributes(self):
        err = InvalidParameterError("h must be >= 0, got -1", parameter="h", value=-1.0)
        assert str(err) == "h must be >= 0, got -1"
        assert err.parameter == "h"
        assert err.value == -1.0

    def test_defaults_are_none(self):
        err = InvalidParameterError("bad")
        assert err.parameter is None
        assert err.value is None


class TestDegenerateSampleError:

    def test_attributes(self):
        err = DegenerateSampleError("n - 2k <= 1", n=3, trim=0.4, n_kept=1, index=7)
        assert err.n == 3
        assert err.trim == 0.4
        assert err.n_kept == 1
        assert err.index == 7

    def test_defaults_are_none(self):
        err = DegenerateSampleError("constant")
        assert err.n is None
        assert err.index is None


class TestConvergenceError:

    def test_all_attributes(self):
        err = ConvergenceError(
            "quadrature did not converge",
            iterations=200,
            final_change=1e-5,
            reason="roundoff",
            threshold=1e-10,
        )
        assert err.iterations == 200
        assert err.final_change == 1e-5
        assert err.reason == "roundoff"
        assert err.threshold == 1e-10

    def test_iterations_required(self):
        with pytest.raises(TypeError):
            ConvergenceError("no iterations")


class TestSimulationError:

    def test_attributes(self):
        err = SimulationError("trial 12 failed", g=0.3, h=0.1, trim=0.2, trial=12)
        assert err.g == 0.3
        assert err.h == 0.1
        assert err.trim == 0.2
        assert err.trial == 12

    def test_chained_cause(self):
        cause = DegenerateSampleError("zero variance", index=3)
        with pytest.raises(SimulationError) as exc_info:
            try:
                raise cause
            except DegenerateSampleError as exc:
                raise SimulationError("cell failed", trial=3) from exc
        assert exc_info.value.__cause__ is cause

    def test_pickle_round_trip(self):
        err = SimulationError("trial 5 failed", g=0.5, h=0.0, trim=0.1, trial=5)
        restored = pickle.loads(pickle.dumps(err))
        assert str(restored) == "trial 5 failed"
        assert (restored.g, restored.h, restored.trim, restored.trial) == (0.5, 0.0, 0.1, 5)
