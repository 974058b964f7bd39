"""
Robust descriptive statistics.

Public API:
    trimmed_mean(x, trim)          - symmetric trimmed mean
    winsorize(x, trim)             - symmetric winsorizing
    winsorized_variance(x, trim)   - variance of the winsorized sample
    n_trimmed(n, trim)             - observations removed per tail
"""

from pyreplication.descriptive._robust import (
    n_trimmed,
    trimmed_mean,
    winsorize,
    winsorized_variance,
)

__all__ = [
    "trimmed_mean",
    "winsorize",
    "winsorized_variance",
    "n_trimmed",
]
