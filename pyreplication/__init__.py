"""
PyReplication: how often do well-powered studies replicate?

Simulates one-sample tests of the mean and of trimmed means on skewed
g-and-h populations and turns the empirical false and true positive
rates into probabilities that two exact replications agree.

Submodules:
    distributions: g-and-h sampler and population parameters
    descriptive: Trimmed means and winsorized variances
    hypothesis: Trimmed mean one-sample t-test
    montecarlo: Replication-power simulations and result store
    power: t-test power and replication consistency probabilities
"""

__version__ = "0.1.0"

from pyreplication import distributions
from pyreplication import descriptive
from pyreplication import hypothesis
from pyreplication import montecarlo
from pyreplication import power

__all__ = [
    "__version__",
    "distributions",
    "descriptive",
    "hypothesis",
    "montecarlo",
    "power",
]
