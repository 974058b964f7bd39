"""
Closed-form power of the two-sided one-sample t-test.

Follows R's power.t.test(type = "one.sample"): with df = n - 1,
ncp = sqrt(n) * delta / sd and critical value q = qt(1 - alpha/2, df),

    power = P(T'(df, ncp) > q)                         (strict = False)
    power = P(T'(df, ncp) > q) + P(T'(df, ncp) < -q)   (strict = True)

effect_size_for_power() inverts this to calibrate the mean shift that
gives a target power for normal data.
"""

from __future__ import annotations

import math

from scipy import optimize
from scipy import stats as sp_stats

from pyreplication.core.compute.tolerances import ROOT_FINDING
from pyreplication.core.exceptions import ConvergenceError, InvalidParameterError
from pyreplication.core.validation import (
    check_nonnegative,
    check_open_unit,
    check_positive_int,
    check_real,
)


def _check_n(n: int) -> int:
    n = check_positive_int(n, "n")
    if n < 2:
        raise InvalidParameterError(
            f"n must be >= 2 for a t-test, got {n}", parameter="n", value=n,
        )
    return n


def _check_sd(sd: float) -> float:
    sd = check_real(sd, "sd")
    if sd <= 0:
        raise InvalidParameterError(
            f"sd must be > 0, got {sd}", parameter="sd", value=sd,
        )
    return sd


def one_sample_power(
    effect_size: float,
    n: int,
    alpha: float = 0.05,
    *,
    sd: float = 1.0,
    strict: bool = False,
) -> float:
    """
    Power of the two-sided one-sample t-test against a mean shift.

    Parameters
    ----------
    effect_size : float
        Shift of the population mean away from the null value, >= 0.
    n : int
        Sample size, >= 2.
    alpha : float
        Significance level in (0, 1).
    sd : float
        Population standard deviation. Default 1.
    strict : bool
        Include rejections in the wrong tail (R's strict = TRUE).
    """
    effect_size = check_nonnegative(effect_size, "effect_size")
    n = _check_n(n)
    alpha = check_open_unit(alpha, "alpha")
    sd = _check_sd(sd)

    df = n - 1
    ncp = math.sqrt(n) * effect_size / sd
    q = sp_stats.t.ppf(1.0 - alpha / 2.0, df)
    power = sp_stats.nct.sf(q, df, ncp)
    if strict:
        power += sp_stats.nct.cdf(-q, df, ncp)
    return float(power)


def effect_size_for_power(
    n: int,
    alpha: float = 0.05,
    power: float = 0.80,
    *,
    sd: float = 1.0,
) -> float:
    """
    Mean shift at which the one-sample t-test reaches the target power.

    For n = 20, alpha = 0.05, power = 0.8 this is about 0.6604 sd, the
    effect used to make the normal-population simulations run at 80%
    power.

    Raises
    ------
    InvalidParameterError
        If power is not in (alpha / 2, 1), the range reachable by a
        shift in one direction.
    ConvergenceError
        If the root finder fails.
    """
    n = _check_n(n)
    alpha = check_open_unit(alpha, "alpha")
    power = check_open_unit(power, "power")
    sd = _check_sd(sd)
    if power <= alpha / 2.0:
        raise InvalidParameterError(
            f"power must exceed alpha/2 = {alpha / 2.0:g}, got {power}",
            parameter="power", value=power,
        )

    def gap(delta: float) -> float:
        return one_sample_power(delta, n, alpha, sd=sd) - power

    hi = sd
    while gap(hi) < 0.0:
        hi *= 2.0
        if hi > 1e7 * sd:
            raise ConvergenceError(
                f"no effect size below {hi:g} reaches power {power}",
                iterations=0, reason='bracket', threshold=power,
            )

    root, info = optimize.brentq(
        gap, 0.0, hi,
        xtol=ROOT_FINDING.atol,
        rtol=ROOT_FINDING.rtol,
        maxiter=ROOT_FINDING.max_iter,
        full_output=True,
        disp=False,
    )
    if not info.converged:
        raise ConvergenceError(
            f"effect size calibration did not converge: {info.flag}",
            iterations=info.iterations,
            reason=info.flag,
            threshold=ROOT_FINDING.atol,
        )
    return float(root)
