"""
Outcomes of two independent replications of the same study.

Each study rejects H0 with probability equal to its power, independently
of the other, so the pair of decisions falls into three mutually exclusive
outcomes:

    both significant          power^2
    neither significant       (1 - power)^2
    exactly one significant   2 power (1 - power)

The three probabilities sum to one, and the inconsistent outcome is
symmetric under power <-> 1 - power. With 80% power a pair of exact
replications disagrees a third of the time.
"""

from __future__ import annotations

from typing import Any

import numpy as np
import pandas as pd
from numpy.typing import ArrayLike, NDArray

from pyreplication.core.validation import check_probability

CONSISTENT_POSITIVE = "consistent positive"
CONSISTENT_NEGATIVE = "consistent negative"
INCONSISTENT = "inconsistent"

OUTCOME_LABELS = (CONSISTENT_POSITIVE, CONSISTENT_NEGATIVE, INCONSISTENT)


def _unwrap(value: NDArray[np.floating[Any]]):
    return float(value) if value.ndim == 0 else value


def consistent_positive_prob(power: ArrayLike):
    """P(both studies significant) = power^2."""
    p = check_probability(power, "power")
    return _unwrap(p * p)


def consistent_negative_prob(power: ArrayLike):
    """P(neither study significant) = (1 - power)^2."""
    p = check_probability(power, "power")
    return _unwrap((1.0 - p) * (1.0 - p))


def inconsistent_prob(power: ArrayLike):
    """P(exactly one study significant) = 2 power (1 - power)."""
    p = check_probability(power, "power")
    return _unwrap(2.0 * p * (1.0 - p))


def outcome_probabilities(power: ArrayLike) -> dict[str, Any]:
    """All three outcome probabilities, keyed by OUTCOME_LABELS."""
    return {
        CONSISTENT_POSITIVE: consistent_positive_prob(power),
        CONSISTENT_NEGATIVE: consistent_negative_prob(power),
        INCONSISTENT: inconsistent_prob(power),
    }


def consistency_frame(powers: ArrayLike | None = None) -> pd.DataFrame:
    """
    Tidy table of outcome probabilities over a grid of power values.

    Columns: power, probability, label. One row per (power, outcome),
    ready for a line plot with one line per label. Defaults to power
    0, 0.01, ..., 1.
    """
    if powers is None:
        powers = np.linspace(0.0, 1.0, 101)
    p = np.atleast_1d(check_probability(powers, "powers")).ravel()
    probs = outcome_probabilities(p)
    return pd.DataFrame({
        "power": np.tile(p, len(OUTCOME_LABELS)),
        "probability": np.concatenate([probs[label] for label in OUTCOME_LABELS]),
        "label": np.repeat(OUTCOME_LABELS, len(p)),
    })
