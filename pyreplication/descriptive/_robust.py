"""
Trimmed and winsorized summaries along the last axis.

Trimming and winsorizing are symmetric: k = floor(trim * n) order
statistics are handled in each tail. Arrays of shape (..., n) are reduced
to shape (...), which lets the Monte Carlo backends process a whole block
of trials, one sample per row, in a single call.
"""

from __future__ import annotations

import math
from typing import Any

import numpy as np
from numpy.typing import ArrayLike, NDArray

from pyreplication.core.exceptions import DegenerateSampleError
from pyreplication.core.validation import check_array, check_min_samples, check_trim


def n_trimmed(n: int, trim: float) -> int:
    """Number of order statistics removed from each tail: floor(trim * n)."""
    return int(math.floor(trim * n))


def check_trimmed_size(n: int, trim: float) -> int:
    """
    Observations left after trimming, n - 2 floor(trim * n).

    Raises:
        DegenerateSampleError: If one observation or fewer would remain.
    """
    k = n_trimmed(n, trim)
    n_kept = n - 2 * k
    if n_kept <= 1:
        raise DegenerateSampleError(
            f"trimming {trim:g} from each tail of n={n} observations leaves "
            f"{n_kept}; at least 2 are required",
            n=n, trim=trim, n_kept=n_kept,
        )
    return n_kept


def _sorted_last_axis(x: ArrayLike, presorted: bool) -> NDArray[np.floating[Any]]:
    arr = check_array(x, "x")
    check_min_samples(arr, 1, "x")
    return arr if presorted else np.sort(arr, axis=-1)


def trimmed_mean(
    x: ArrayLike,
    trim: float = 0.2,
    *,
    presorted: bool = False,
) -> NDArray[np.floating[Any]] | float:
    """
    Mean of the observations left after removing floor(trim * n) from each tail.

    Returns a float for 1-D input, an array of shape x.shape[:-1] otherwise.
    """
    trim = check_trim(trim)
    xs = _sorted_last_axis(x, presorted)
    n = xs.shape[-1]
    k = n_trimmed(n, trim)
    result = np.mean(xs[..., k:n - k], axis=-1)
    return float(result) if xs.ndim == 1 else result


def winsorize(
    x: ArrayLike,
    trim: float = 0.2,
    *,
    presorted: bool = False,
) -> NDArray[np.floating[Any]]:
    """
    Replace the k lowest values by the (k+1)-th order statistic and the k
    highest by the (n-k)-th. The result is sorted along the last axis.
    """
    trim = check_trim(trim)
    xs = _sorted_last_axis(x, presorted)
    n = xs.shape[-1]
    k = n_trimmed(n, trim)
    xw = xs.copy()
    if k > 0:
        xw[..., :k] = xs[..., k:k + 1]
        xw[..., n - k:] = xs[..., n - k - 1:n - k]
    return xw


def winsorized_variance(
    x: ArrayLike,
    trim: float = 0.2,
    *,
    presorted: bool = False,
) -> NDArray[np.floating[Any]] | float:
    """Sample variance (ddof=1) of the winsorized observations."""
    xw = winsorize(x, trim, presorted=presorted)
    result = np.var(xw, axis=-1, ddof=1)
    return float(result) if xw.ndim == 1 else result
