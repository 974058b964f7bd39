"""
CPU reference backend for one-sample location tests.

Dispatches on design.test_type. The classical t-test is the trim = 0
case of the trimmed mean test and shares its implementation.
"""

from __future__ import annotations

from pyreplication.core.result import Result
from pyreplication.core.compute.timing import Timer
from pyreplication.hypothesis._common import HTestParams
from pyreplication.hypothesis.design import HypothesisDesign
from pyreplication.hypothesis.backends._trimmed_test import trimmed_t_one_sample


class CPUHypothesisBackend:
    """CPU reference backend for hypothesis tests."""

    @property
    def name(self) -> str:
        return 'cpu_hypothesis'

    def solve(self, design: HypothesisDesign) -> Result[HTestParams]:
        """Run the test selected by design.test_type."""
        timer = Timer()
        timer.start()

        test_type = design.test_type

        with timer.section(test_type):
            if test_type in ("t_one_sample", "trimmed_t"):
                params, warnings_list = trimmed_t_one_sample(design)
            else:
                raise ValueError(f"Unknown test_type: {test_type!r}")

        timer.stop()

        return Result(
            params=params,
            info={'test_type': test_type, 'n': design.n_observations},
            timing=timer.result(),
            backend_name=self.name,
            warnings=tuple(warnings_list),
        )
