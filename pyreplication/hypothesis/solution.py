"""
Hypothesis test solution types.

HTestSolution wraps Result[HTestParams] and provides R's print.htest format.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, TYPE_CHECKING
import numpy as np
from numpy.typing import NDArray

from pyreplication.core.result import Result
from pyreplication.hypothesis._common import HTestParams

if TYPE_CHECKING:
    from pyreplication.hypothesis.design import HypothesisDesign


@dataclass
class HTestSolution:
    """
    User-facing hypothesis test results.

    Wraps Result[HTestParams] and provides R's print.htest output format
    via summary().
    """
    _result: Result[HTestParams]
    _design: 'HypothesisDesign | None'

    @property
    def statistic(self) -> float:
        """Test statistic value."""
        return self._result.params.statistic

    @property
    def statistic_name(self) -> str:
        return self._result.params.statistic_name

    @property
    def parameter(self) -> dict[str, float] | None:
        """Distribution parameters (e.g. {'df': 11.0})."""
        return self._result.params.parameter

    @property
    def df(self) -> float:
        return self._result.params.parameter["df"]

    @property
    def p_value(self) -> float:
        return self._result.params.p_value

    @property
    def conf_int(self) -> NDArray[np.floating[Any]] | None:
        """Confidence interval, shape (2,)."""
        return self._result.params.conf_int

    @property
    def conf_level(self) -> float:
        return self._result.params.conf_level

    @property
    def estimate(self) -> dict[str, float] | None:
        return self._result.params.estimate

    @property
    def null_value(self) -> dict[str, float] | None:
        return self._result.params.null_value

    @property
    def alternative(self) -> str:
        return self._result.params.alternative

    @property
    def method(self) -> str:
        return self._result.params.method

    @property
    def data_name(self) -> str:
        return self._result.params.data_name

    # --- Trimming details ---

    @property
    def extras(self) -> dict[str, Any] | None:
        return self._result.params.extras

    @property
    def trim(self) -> float:
        return self._result.params.extras["trim"]

    @property
    def se(self) -> float:
        """Standard error of the trimmed mean."""
        return self._result.params.extras["se"]

    @property
    def winsorized_variance(self) -> float:
        return self._result.params.extras["winsorized_variance"]

    # --- Metadata ---

    @property
    def info(self) -> dict[str, Any]:
        return self._result.info

    @property
    def timing(self) -> dict[str, float] | None:
        return self._result.timing

    @property
    def backend_name(self) -> str:
        return self._result.backend_name

    @property
    def warnings(self) -> tuple[str, ...]:
        return self._result.warnings

    # --- Formatting ---

    def summary(self) -> str:
        """
        Format as R's print.htest output.

            One Sample Trimmed Mean t-test

        data:  x
        t = 4.8023, df = 5, p-value = 0.004873
        alternative hypothesis: true trimmed mean is not equal to 0
        95 percent confidence interval:
         2.555893  8.444107
        sample estimates:
        20% trimmed mean of x
                          5.5
        """
        p = self._result.params
        lines = [f"\t{p.method}", "", f"data:  {p.data_name}"]

        parts = [f"{p.statistic_name} = {p.statistic:.5g}"]
        if p.parameter is not None:
            for name, val in p.parameter.items():
                parts.append(f"{name} = {val:.5g}")
        parts.append(f"p-value = {_format_pvalue(p.p_value)}")
        lines.append(", ".join(parts))

        if p.null_value:
            nv_name, nv_val = next(iter(p.null_value.items()))
            relation = {
                "two.sided": "is not equal to",
                "less": "is less than",
                "greater": "is greater than",
            }[p.alternative]
            lines.append(
                f"alternative hypothesis: true {nv_name} {relation} {nv_val:g}"
            )

        if p.conf_int is not None:
            pct = int(round(p.conf_level * 100))
            lines.append(f"{pct} percent confidence interval:")
            lo, hi = p.conf_int
            lines.append(f" {_format_number(lo)}  {_format_number(hi)}")

        if p.estimate is not None:
            lines.append("sample estimates:")
            names = list(p.estimate.keys())
            vals = list(p.estimate.values())
            width = max(14, *(len(n) for n in names))
            lines.append(" ".join(f"{n:>{width}s}" for n in names))
            lines.append(" ".join(f"{v:{width}.7g}" for v in vals))

        if self.warnings:
            lines.append("Warnings: " + "; ".join(self.warnings))

        lines.append("")
        return "\n".join(lines)

    def __repr__(self) -> str:
        p = self._result.params
        return (
            f"HTestSolution(method={p.method!r}, "
            f"{p.statistic_name}={p.statistic:.4g}, p_value={p.p_value:.4g})"
        )


def _format_pvalue(p: float) -> str:
    """Format p-value like R does."""
    if np.isnan(p):
        return "NA"
    if p < 2.2e-16:
        return "< 2.2e-16"
    if p < 0.001:
        return f"{p:.4e}"
    return f"{p:.4g}"


def _format_number(x: float) -> str:
    if np.isnan(x):
        return "NA"
    if np.isinf(x):
        return "-Inf" if x < 0 else "Inf"
    return f"{x:.7g}"
