"""
Empirical rates from simulation indicator arrays.

All functions are pure over SimulationParams. A rate is the fraction of
trials that rejected, so with T trials it lies on the grid {0, 1/T, ..., 1}.
"""

from __future__ import annotations

from typing import Any

import numpy as np
import pandas as pd
from numpy.typing import NDArray
from scipy import stats as sp_stats

from pyreplication.core.exceptions import ValidationError
from pyreplication.core.validation import check_open_unit
from pyreplication.montecarlo._common import SimulationParams, trim_label
from pyreplication.power._consistency import OUTCOME_LABELS, outcome_probabilities


def _check_index(index: int, size: int, name: str) -> int:
    if isinstance(index, bool) or not isinstance(index, (int, np.integer)):
        raise ValidationError(f"{name}: expected an integer index, got {index!r}")
    if not -size <= index < size:
        raise ValidationError(f"{name}: index {index} out of range for size {size}")
    return int(index) % size


def empirical_rate(
    params: SimulationParams,
    shape_index: int,
    trim_index: int,
    condition: str,
) -> float:
    """Fraction of trials rejecting in one (shape, trim) cell."""
    indicators = params.indicators(condition)
    i = _check_index(shape_index, params.n_shapes, "shape_index")
    j = _check_index(trim_index, params.n_trims, "trim_index")
    return float(np.count_nonzero(indicators[:, i, j]) / params.n_trials)


def rate_table(params: SimulationParams, condition: str) -> NDArray[np.floating[Any]]:
    """Rates for every cell, shape (n_shapes, n_trims)."""
    indicators = params.indicators(condition)
    return np.count_nonzero(indicators, axis=0) / params.n_trials


def wilson_interval(
    rate: NDArray[np.floating[Any]] | float,
    n_trials: int,
    conf_level: float = 0.95,
) -> tuple[NDArray[np.floating[Any]], NDArray[np.floating[Any]]]:
    """
    Wilson score interval for a binomial proportion.

    Stays inside [0, 1] and keeps positive width at rates of 0 and 1,
    where the Wald interval collapses.
    A rate of 0 has lower bound exactly 0 and a rate of 1 upper bound
    exactly 1.
    """
    conf_level = check_open_unit(conf_level, "conf_level")
    z = sp_stats.norm.ppf(0.5 + conf_level / 2.0)
    p = np.asarray(rate, dtype=np.float64)
    z2n = z * z / n_trials
    center = (p + z2n / 2.0) / (1.0 + z2n)
    half = z / (1.0 + z2n) * np.sqrt(p * (1.0 - p) / n_trials + z2n / (4.0 * n_trials))
    lo = np.where(p == 0.0, 0.0, np.clip(center - half, 0.0, 1.0))
    hi = np.where(p == 1.0, 1.0, np.clip(center + half, 0.0, 1.0))
    return lo, hi


def rates_frame(params: SimulationParams, condition: str) -> pd.DataFrame:
    """
    Tidy rate table: one row per (shape, trim) with columns g,
    probability, label. Rows are ordered by trim, then g.
    """
    rates = rate_table(params, condition)
    labels = [trim_label(float(t)) for t in params.trims]
    return pd.DataFrame({
        "g": np.tile(params.g_values, params.n_trims),
        "probability": rates.T.ravel(),
        "label": np.repeat(labels, params.n_shapes),
    })


def replication_frame(
    params: SimulationParams,
    power: NDArray[np.floating[Any]],
    trim_index: int | None = None,
) -> pd.DataFrame:
    """
    Replication outcome probabilities per shape, using the empirical
    power of each cell.

    Columns: g, trim, power, probability, label. When trim_index is None
    every trimming level is included.
    """
    if trim_index is None:
        trim_indices = range(params.n_trims)
    else:
        trim_indices = [_check_index(trim_index, params.n_trims, "trim_index")]

    frames = []
    for j in trim_indices:
        p = np.clip(power[:, j], 0.0, 1.0)
        probs = outcome_probabilities(p)
        frames.append(pd.DataFrame({
            "g": np.tile(params.g_values, len(OUTCOME_LABELS)),
            "trim": float(params.trims[j]),
            "power": np.tile(p, len(OUTCOME_LABELS)),
            "probability": np.concatenate(
                [np.atleast_1d(probs[label]) for label in OUTCOME_LABELS]
            ),
            "label": np.repeat(OUTCOME_LABELS, params.n_shapes),
        }))
    return pd.concat(frames, ignore_index=True)
