"""
Statistical power and two-study replication outcomes.

Public API:
    consistent_positive_prob(power)    - both studies significant
    consistent_negative_prob(power)    - neither significant
    inconsistent_prob(power)           - exactly one significant
    outcome_probabilities(power)       - all three, by label
    consistency_frame(powers)          - tidy table for plotting
    one_sample_power(delta, n, alpha)  - power of the one-sample t-test
    effect_size_for_power(n, alpha, power)
"""

from pyreplication.power._consistency import (
    CONSISTENT_NEGATIVE,
    CONSISTENT_POSITIVE,
    INCONSISTENT,
    OUTCOME_LABELS,
    consistency_frame,
    consistent_negative_prob,
    consistent_positive_prob,
    inconsistent_prob,
    outcome_probabilities,
)
from pyreplication.power._ttest import effect_size_for_power, one_sample_power

__all__ = [
    "consistent_positive_prob",
    "consistent_negative_prob",
    "inconsistent_prob",
    "outcome_probabilities",
    "consistency_frame",
    "one_sample_power",
    "effect_size_for_power",
    "CONSISTENT_POSITIVE",
    "CONSISTENT_NEGATIVE",
    "INCONSISTENT",
    "OUTCOME_LABELS",
]
