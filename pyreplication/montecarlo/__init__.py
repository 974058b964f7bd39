"""
Monte Carlo replication-power simulations.

Estimates the false and true positive rates of one-sample tests on the
mean and on trimmed means when data come from skewed g-and-h populations,
with CPU and GPU backends and an on-disk store for finished runs.

Usage:
    from pyreplication.montecarlo import simulate, ResultStore

    solution = simulate(g_values=[0.0, 0.5, 1.0], n_trials=20_000, seed=1)
    solution.false_positive_rate        # (n_shapes, n_trims)
    solution.rates_frame("true_positive")

    # Persisted, reloaded on the next call with the same design
    solution = simulate_reference("gh_h0", store=ResultStore("results"))
"""

from pyreplication.montecarlo._common import (
    CONDITIONS,
    FALSE_POSITIVE,
    TRUE_POSITIVE,
    SimulationParams,
    trim_label,
)
from pyreplication.montecarlo._aggregate import (
    empirical_rate,
    rate_table,
    wilson_interval,
)
from pyreplication.montecarlo.design import REFERENCE_RUNS, SimulationDesign
from pyreplication.montecarlo.solution import SimulationSolution
from pyreplication.montecarlo.store import ResultStore
from pyreplication.montecarlo.solvers import simulate, simulate_reference

__all__ = [
    "simulate",
    "simulate_reference",
    "SimulationDesign",
    "SimulationParams",
    "SimulationSolution",
    "ResultStore",
    "REFERENCE_RUNS",
    "empirical_rate",
    "rate_table",
    "wilson_interval",
    "trim_label",
    "FALSE_POSITIVE",
    "TRUE_POSITIVE",
    "CONDITIONS",
]
