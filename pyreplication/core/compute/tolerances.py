"""
Tolerance tiers for the numerical solvers.

Population parameters of the g-and-h family are computed by adaptive
quadrature and by bracketing root finding. Both are run well inside the
documented guarantee: population means, trimmed means and CDF values are
accurate to an absolute error of at most 1e-7.

Used by the distributions package and by the test suite.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class SolverTolerance:
    """Tolerance and iteration budget for one numerical solver."""
    atol: float
    rtol: float
    max_iter: int
    name: str
    description: str


# scipy.integrate.quad: epsabs / epsrel / limit (subintervals)
QUADRATURE = SolverTolerance(
    atol=1e-10,
    rtol=1e-10,
    max_iter=200,
    name='quadrature',
    description='Adaptive Gauss-Kronrod quadrature of truncated moments',
)

# scipy.optimize.brentq: xtol / rtol / maxiter
ROOT_FINDING = SolverTolerance(
    atol=1e-12,
    rtol=4 * 2.220446049250313e-16,
    max_iter=200,
    name='root_finding',
    description='Brent root finding on the g-and-h transform',
)

# Guarantee on any population parameter returned to the caller
POPULATION_ATOL = 1e-7

# Bracket for the standard-normal argument of the transform. Phi(-40)
# underflows to 0 in double precision, so no CDF value is lost outside it.
Z_BRACKET_LIMIT = 40.0
