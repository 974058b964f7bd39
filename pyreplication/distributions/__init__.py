"""
Skewed and heavy-tailed populations: the g-and-h family.

Public API:
    GHShape                      - (g, h) shape parameters
    rgh(n, g, h, seed)           - random sample
    gh_transform(z, g, h)        - normal -> g-and-h transform
    qgh / pgh / dgh              - quantile, CDF, density
    gh_mean(g, h)                - population mean
    gh_moments(g, h)             - population mean and variance
    gh_trimmed_mean(trim, g, h)  - population trimmed mean
"""

from pyreplication.distributions._common import GHShape
from pyreplication.distributions.gh import (
    dgh,
    gh_mean,
    gh_moments,
    gh_transform,
    gh_trimmed_mean,
    pgh,
    qgh,
    rgh,
)

__all__ = [
    "GHShape",
    "rgh",
    "gh_transform",
    "qgh",
    "pgh",
    "dgh",
    "gh_mean",
    "gh_moments",
    "gh_trimmed_mean",
]
