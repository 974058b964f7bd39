"""
Common data structures for Monte Carlo simulations.

SimulationParams is the parameter payload wrapped by Result[P] and exposed
through SimulationSolution. Its indicator arrays are indexed
(trial, shape, trim) and are read-only once the payload is built.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

import numpy as np
from numpy.typing import NDArray

from pyreplication.core.exceptions import DimensionError, ValidationError

FALSE_POSITIVE = "false_positive"
TRUE_POSITIVE = "true_positive"
CONDITIONS = (FALSE_POSITIVE, TRUE_POSITIVE)


def trim_label(trim: float) -> str:
    """Plot label for a trimming level: 'mean' or 'N% trimmed mean'."""
    if trim == 0.0:
        return "mean"
    return f"{trim * 100:g}% trimmed mean"


@dataclass(frozen=True)
class SimulationParams:
    """
    Parameter payload for a Monte Carlo run.

    - false_positive: rejections with H0 true, shape (n_trials, n_shapes, n_trims)
    - true_positive: rejections with the mean shifted by effect_size, same shape
    - g_values: skewness grid, shape (n_shapes,); h is shared by every shape
    - trims: trimming levels, shape (n_trims,)
    - population_targets: null values, shape (n_shapes, n_trims)
    - seed: root of every random sub-stream used by the run
    """
    false_positive: NDArray[np.bool_]
    true_positive: NDArray[np.bool_]
    g_values: NDArray[np.floating[Any]]
    h: float
    trims: NDArray[np.floating[Any]]
    population_targets: NDArray[np.floating[Any]]
    alpha: float
    n: int
    effect_size: float
    seed: int
    block_size: int

    def __post_init__(self):
        n_shapes = self.g_values.shape[0]
        n_trims = self.trims.shape[0]
        for name in ("false_positive", "true_positive"):
            arr = getattr(self, name)
            if arr.ndim != 3 or arr.shape[1:] != (n_shapes, n_trims):
                raise DimensionError(
                    f"{name}: expected shape (n_trials, {n_shapes}, {n_trims}), "
                    f"got {arr.shape}"
                )
            if arr.dtype != np.bool_:
                raise DimensionError(f"{name}: expected bool dtype, got {arr.dtype}")
        if self.false_positive.shape != self.true_positive.shape:
            raise DimensionError(
                f"false_positive {self.false_positive.shape} and true_positive "
                f"{self.true_positive.shape} must have the same shape"
            )
        if self.population_targets.shape != (n_shapes, n_trims):
            raise DimensionError(
                f"population_targets: expected shape ({n_shapes}, {n_trims}), "
                f"got {self.population_targets.shape}"
            )
        for arr in (self.false_positive, self.true_positive, self.g_values,
                    self.trims, self.population_targets):
            arr.setflags(write=False)

    @property
    def n_trials(self) -> int:
        return int(self.false_positive.shape[0])

    @property
    def n_shapes(self) -> int:
        return int(self.g_values.shape[0])

    @property
    def n_trims(self) -> int:
        return int(self.trims.shape[0])

    def indicators(self, condition: str) -> NDArray[np.bool_]:
        """Indicator array for 'false_positive' or 'true_positive'."""
        if condition == FALSE_POSITIVE:
            return self.false_positive
        if condition == TRUE_POSITIVE:
            return self.true_positive
        raise ValidationError(
            f"condition must be one of {CONDITIONS}, got {condition!r}"
        )
