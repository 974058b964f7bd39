"""
Tests for input validation utilities.

Validates every function in core/validation.py:
    - check_array: conversion, dtype coercion, object rejection
    - check_finite / check_1d / check_min_samples
    - scalar validators: positive ints, reals, trims, probabilities
"""

import numpy as np
import pytest

from pyreplication.core.exceptions import (
    DimensionError,
    InvalidParameterError,
    ValidationError,
)
from pyreplication.core.validation import (
    check_1d,
    check_array,
    check_finite,
    check_min_samples,
    check_nonnegative,
    check_open_unit,
    check_positive_int,
    check_probability,
    check_real,
    check_trim,
)


# ═══════════════════════════════════════════════════════════════════════
# Arrays
# ═══════════════════════════════════════════════════════════════════════


class TestCheckArray:

    def test_list_to_float_array(self):
        result = check_array([1, 2, 3], "x")
        assert np.issubdtype(result.dtype, np.floating)
        np.testing.assert_array_equal(result, [1.0, 2.0, 3.0])

    def test_rejects_strings(self):
        with pytest.raises(ValidationError, match="x"):
            check_array(["a", "b"], "x")

    def test_rejects_complex(self):
        with pytest.raises(ValidationError, match="non-numeric"):
            check_array([1 + 2j], "x")

    def test_rejects_ragged(self):
        with pytest.raises(ValidationError):
            check_array([[1, 2], [3]], "x")


class TestArrayShape:

    def test_finite_passes(self):
        check_finite(np.array([1.0, 2.0]), "x")

    def test_nan_reported(self):
        with pytest.raises(ValidationError, match="1 NaN"):
            check_finite(np.array([1.0, np.nan]), "x")

    def test_1d_rejects_2d(self):
        with pytest.raises(DimensionError, match="expected 1D"):
            check_1d(np.zeros((2, 2)), "x")

    def test_min_samples_last_axis(self):
        check_min_samples(np.zeros((5, 3)), 3, "x")
        with pytest.raises(ValidationError, match="at least 4"):
            check_min_samples(np.zeros((5, 3)), 4, "x")


# ═══════════════════════════════════════════════════════════════════════
# Scalars
# ═══════════════════════════════════════════════════════════════════════


class TestScalars:

    def test_positive_int(self):
        assert check_positive_int(np.int64(5), "n") == 5

    @pytest.mark.parametrize("value", [0, -3, 2.5, True, "3"])
    def test_positive_int_rejects(self, value):
        with pytest.raises(InvalidParameterError) as exc_info:
            check_positive_int(value, "n")
        assert exc_info.value.parameter == "n"

    def test_real_rejects_inf(self):
        with pytest.raises(InvalidParameterError, match="finite"):
            check_real(np.inf, "g")

    def test_nonnegative(self):
        assert check_nonnegative(0, "h") == 0.0
        with pytest.raises(InvalidParameterError):
            check_nonnegative(-0.1, "h")

    @pytest.mark.parametrize("value", [0.0, 1.0, -0.5])
    def test_open_unit_rejects(self, value):
        with pytest.raises(InvalidParameterError):
            check_open_unit(value, "alpha")

    def test_trim_range(self):
        assert check_trim(0.0) == 0.0
        assert check_trim(0.2) == 0.2
        with pytest.raises(InvalidParameterError):
            check_trim(0.5)
        with pytest.raises(InvalidParameterError):
            check_trim(-0.01)


class TestCheckProbability:

    def test_scalar_is_0d(self):
        assert check_probability(0.3, "p").ndim == 0

    def test_bounds_inclusive(self):
        np.testing.assert_array_equal(check_probability([0, 1], "p"), [0.0, 1.0])

    def test_rejects_outside(self):
        with pytest.raises(InvalidParameterError, match=r"\[0, 1\]"):
            check_probability([0.5, 1.2], "p")

    def test_rejects_nan(self):
        with pytest.raises(InvalidParameterError):
            check_probability(np.nan, "p")
