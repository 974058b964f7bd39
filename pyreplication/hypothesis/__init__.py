"""
Hypothesis testing module.

Public API:
    trimmed_t_test(x, trim, mu)            - one-sample trimmed mean test
    t_test(x, mu)                          - Student's one-sample t-test
    trimmed_test_pvalue(x, trim, mu)       - two-sided p-value only
    trimmed_t_batch(samples, trim, mu)     - t statistics, one sample per row
"""

from pyreplication.hypothesis.solvers import (
    t_test,
    trimmed_t_test,
    trimmed_test_pvalue,
)
from pyreplication.hypothesis.backends._trimmed_test import (
    trimmed_t_batch,
    two_sided_pvalue,
)
from pyreplication.hypothesis.design import HypothesisDesign
from pyreplication.hypothesis._common import HTestParams
from pyreplication.hypothesis.solution import HTestSolution

__all__ = [
    "trimmed_t_test",
    "t_test",
    "trimmed_test_pvalue",
    "trimmed_t_batch",
    "two_sided_pvalue",
    "HypothesisDesign",
    "HTestParams",
    "HTestSolution",
]
