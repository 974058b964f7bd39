"""
HypothesisDesign: validated inputs for one-sample location tests.

Immutable after construction. Use the factory classmethod.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any
import numpy as np
from numpy.typing import NDArray, ArrayLike

from pyreplication.core.exceptions import ValidationError
from pyreplication.core.validation import (
    check_array,
    check_open_unit,
    check_real,
    check_trim,
)
from pyreplication.hypothesis._common import VALID_ALTERNATIVES


def _validate_alternative(alternative: str) -> str:
    if alternative not in VALID_ALTERNATIVES:
        raise ValidationError(
            f"alternative must be one of {VALID_ALTERNATIVES}, got {alternative!r}"
        )
    return alternative


def _to_float64_1d(x: ArrayLike, name: str = "x") -> NDArray[np.floating[Any]]:
    """Convert to 1D float64 array, removing NaN values (R's na.rm)."""
    arr = check_array(x, name).astype(np.float64, copy=True).ravel()
    return arr[~np.isnan(arr)]


@dataclass(frozen=True)
class HypothesisDesign:
    """
    Design for a one-sample test of location.

    test_type is "t_one_sample" when trim == 0 and "trimmed_t" otherwise;
    both run through the same trimmed-mean computation.

    Do not construct directly; use for_trimmed_t_test().
    """
    test_type: str
    x: NDArray[np.floating[Any]]
    trim: float
    mu: float
    alternative: str
    conf_level: float
    data_name: str = "x"

    @classmethod
    def for_trimmed_t_test(
        cls,
        x: ArrayLike,
        *,
        trim: float = 0.2,
        mu: float = 0.0,
        alternative: str = "two.sided",
        conf_level: float = 0.95,
        data_name: str = "x",
    ) -> HypothesisDesign:
        """
        Build a validated design for the trimmed mean one-sample test.

        Raises:
            ValidationError: On non-numeric or infinite data, a bad
                alternative, or out-of-range trim / mu / conf_level.
        """
        arr = _to_float64_1d(x)
        if np.any(np.isinf(arr)):
            raise ValidationError("x: contains infinite values")
        trim = check_trim(trim)
        return cls(
            test_type="t_one_sample" if trim == 0.0 else "trimmed_t",
            x=arr,
            trim=trim,
            mu=check_real(mu, "mu"),
            alternative=_validate_alternative(alternative),
            conf_level=check_open_unit(conf_level, "conf_level"),
            data_name=data_name,
        )

    @property
    def n_observations(self) -> int:
        return int(self.x.shape[0])
