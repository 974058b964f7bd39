"""
Input validation utilities for pyreplication.

These validators follow the "fail fast, fail loud" principle. They raise
immediately with clear error messages rather than silently correcting
or making assumptions about user intent.

Design principles:
    - No silent type coercion (except np.asarray on array-likes)
    - Clear, actionable error messages with actual values
    - Each function validates ONE thing
    - Parameter names included in all error messages
"""

import math
import numbers

import numpy as np
from numpy.typing import ArrayLike, NDArray
from typing import Any

from pyreplication.core.exceptions import (
    DimensionError,
    InvalidParameterError,
    ValidationError,
)


def check_array(
    array: ArrayLike,
    name: str,
) -> NDArray[np.floating[Any]]:
    """
    Validate and convert input to a float64 numpy array.

    Args:
        array: Input to validate
        name: Parameter name for error messages

    Returns:
        numpy.ndarray with floating dtype

    Raises:
        ValidationError: If input cannot be converted to numeric array
    """
    try:
        result = np.asarray(array)
    except (ValueError, TypeError) as e:
        raise ValidationError(f"{name}: cannot convert to array: {e}") from e

    if result.dtype == object:
        raise ValidationError(
            f"{name}: converted to object dtype, indicating mixed types or non-numeric data"
        )

    if not np.issubdtype(result.dtype, np.number) or np.issubdtype(result.dtype, np.complexfloating):
        raise ValidationError(
            f"{name}: non-numeric dtype {result.dtype}, expected real numeric data"
        )

    if not np.issubdtype(result.dtype, np.floating):
        result = result.astype(np.float64)

    return result


def check_finite(array: NDArray[np.floating[Any]], name: str) -> None:
    """
    Verify array contains no NaN or Inf values.

    Raises:
        ValidationError: If array contains non-finite values
    """
    if not np.all(np.isfinite(array)):
        n_nan = int(np.sum(np.isnan(array)))
        n_inf = int(np.sum(np.isinf(array)))
        raise ValidationError(
            f"{name}: contains non-finite values ({n_nan} NaN, {n_inf} Inf)"
        )


def check_ndim(array: NDArray[np.floating[Any]], ndim: int, name: str) -> None:
    """
    Verify array has exactly the specified number of dimensions.

    Raises:
        DimensionError: If array has wrong number of dimensions
    """
    if array.ndim != ndim:
        raise DimensionError(
            f"{name}: expected {ndim}D array, got {array.ndim}D with shape {array.shape}"
        )


def check_1d(array: NDArray[np.floating[Any]], name: str) -> None:
    """Verify array is 1-dimensional."""
    check_ndim(array, 1, name)


def check_min_samples(array: NDArray[np.floating[Any]], min_samples: int, name: str) -> None:
    """
    Verify array has at least the minimum number of samples along its last axis.

    Raises:
        ValidationError: If array has fewer than min_samples
    """
    n = array.shape[-1] if array.ndim > 0 else 0
    if n < min_samples:
        raise ValidationError(
            f"{name}: requires at least {min_samples} samples, got {n}"
        )


def check_positive_int(value: Any, name: str) -> int:
    """
    Verify value is an integer >= 1 (bools rejected).

    Returns:
        The value as a Python int

    Raises:
        InvalidParameterError: If value is not a positive integer
    """
    if isinstance(value, bool) or not isinstance(value, numbers.Integral):
        raise InvalidParameterError(
            f"{name} must be an integer, got {value!r}",
            parameter=name, value=value,
        )
    if value < 1:
        raise InvalidParameterError(
            f"{name} must be >= 1, got {value}",
            parameter=name, value=value,
        )
    return int(value)


def check_real(value: Any, name: str) -> float:
    """
    Verify value is a finite real number.

    Raises:
        InvalidParameterError: If value is not a finite real
    """
    if isinstance(value, bool) or not isinstance(value, numbers.Real):
        raise InvalidParameterError(
            f"{name} must be a real number, got {value!r}",
            parameter=name, value=value,
        )
    value = float(value)
    if not math.isfinite(value):
        raise InvalidParameterError(
            f"{name} must be finite, got {value}",
            parameter=name, value=value,
        )
    return value


def check_nonnegative(value: Any, name: str) -> float:
    """Verify value is a finite real >= 0."""
    value = check_real(value, name)
    if value < 0:
        raise InvalidParameterError(
            f"{name} must be >= 0, got {value}",
            parameter=name, value=value,
        )
    return value


def check_open_unit(value: Any, name: str) -> float:
    """Verify value is a finite real strictly inside (0, 1)."""
    value = check_real(value, name)
    if not (0.0 < value < 1.0):
        raise InvalidParameterError(
            f"{name} must be in (0, 1), got {value}",
            parameter=name, value=value,
        )
    return value


def check_trim(value: Any, name: str = "trim") -> float:
    """
    Verify value is a valid per-tail trimming fraction in [0, 0.5).

    Raises:
        InvalidParameterError: If value is outside [0, 0.5)
    """
    value = check_real(value, name)
    if not (0.0 <= value < 0.5):
        raise InvalidParameterError(
            f"{name} must be in [0, 0.5), got {value}",
            parameter=name, value=value,
        )
    return value


def check_probability(
    array: ArrayLike,
    name: str,
) -> NDArray[np.floating[Any]]:
    """
    Verify every element lies in [0, 1].

    Returns:
        float64 array (0-d for scalar input)

    Raises:
        InvalidParameterError: If any element is outside [0, 1] or NaN
    """
    arr = check_array(array, name)
    if np.any(np.isnan(arr)) or np.any((arr < 0.0) | (arr > 1.0)):
        bad = arr[np.isnan(arr) | (arr < 0.0) | (arr > 1.0)]
        raise InvalidParameterError(
            f"{name} must lie in [0, 1], got {bad.tolist()}",
            parameter=name, value=bad,
        )
    return arr
