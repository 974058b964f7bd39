"""
Solver dispatch for one-sample location tests.

Provides trimmed_t_test(), its trim = 0 special case t_test(), and the
scalar trimmed_test_pvalue() used when only the decision matters.
"""

from __future__ import annotations

from typing import Literal
from numpy.typing import ArrayLike

from pyreplication.core.exceptions import ValidationError
from pyreplication.core.validation import check_1d, check_array, check_finite
from pyreplication.hypothesis.design import HypothesisDesign
from pyreplication.hypothesis.solution import HTestSolution
from pyreplication.hypothesis.backends.cpu import CPUHypothesisBackend
from pyreplication.hypothesis.backends._trimmed_test import (
    trimmed_t_batch,
    two_sided_pvalue,
)


def _get_backend(backend: str = 'cpu'):
    """Hypothesis tests are scalar computations and run on the CPU."""
    if backend in ('cpu', 'auto'):
        return CPUHypothesisBackend()
    raise ValidationError(
        f"Unknown backend: {backend!r}. Use 'cpu'."
    )


def trimmed_t_test(
    x: ArrayLike | HypothesisDesign,
    *,
    trim: float = 0.2,
    mu: float = 0.0,
    alternative: Literal["two.sided", "less", "greater"] = "two.sided",
    conf_level: float = 0.95,
    backend: str = 'cpu',
) -> HTestSolution:
    """
    One-sample test of a trimmed mean (Tukey-McLaughlin).

    Parameters
    ----------
    x : array-like or HypothesisDesign
        Sample data. NaN values are removed.
    trim : float
        Fraction trimmed from each tail, in [0, 0.5). Default 0.2.
        0 gives Student's one-sample t-test.
    mu : float
        Hypothesized population trimmed mean. Default 0.
    alternative : str
        "two.sided" (default), "less", or "greater".
    conf_level : float
        Confidence level for the interval. Default 0.95.
    backend : str
        'cpu' (default).

    Returns
    -------
    HTestSolution

    Raises
    ------
    DegenerateSampleError
        If trimming leaves fewer than two observations.
    """
    if isinstance(x, HypothesisDesign):
        design = x
    else:
        design = HypothesisDesign.for_trimmed_t_test(
            x,
            trim=trim,
            mu=mu,
            alternative=alternative,
            conf_level=conf_level,
        )

    be = _get_backend(backend)
    result = be.solve(design)
    return HTestSolution(_result=result, _design=design)


def t_test(
    x: ArrayLike,
    *,
    mu: float = 0.0,
    alternative: Literal["two.sided", "less", "greater"] = "two.sided",
    conf_level: float = 0.95,
    backend: str = 'cpu',
) -> HTestSolution:
    """Student's one-sample t-test. Matches R t.test(x, mu=mu)."""
    return trimmed_t_test(
        x, trim=0.0, mu=mu, alternative=alternative,
        conf_level=conf_level, backend=backend,
    )


def trimmed_test_pvalue(sample: ArrayLike, trim: float, null_value: float) -> float:
    """
    Two-sided p-value of the trimmed mean test for one sample.

    Unlike trimmed_t_test(), a constant sample is an error here rather
    than a NaN p-value.

    Raises
    ------
    DegenerateSampleError
        If trimming leaves fewer than two observations or the winsorized
        variance is zero.
    ValidationError
        If sample is not one-dimensional numeric data.
    """
    arr = check_array(sample, "sample")
    check_1d(arr, "sample")
    check_finite(arr, "sample")
    t, df = trimmed_t_batch(arr, trim, null_value)
    return float(two_sided_pvalue(t, df))
