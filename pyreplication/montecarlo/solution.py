"""
Solution wrapper for replication-power simulations.

SimulationSolution wraps Result[SimulationParams] and provides the raw
indicator arrays, empirical rates, tidy tables for plotting and a
text summary.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, TYPE_CHECKING

import numpy as np
import pandas as pd
from numpy.typing import NDArray

from pyreplication.core.result import Result
from pyreplication.montecarlo._aggregate import (
    empirical_rate,
    rate_table,
    rates_frame,
    replication_frame,
    wilson_interval,
)
from pyreplication.montecarlo._common import (
    FALSE_POSITIVE,
    TRUE_POSITIVE,
    SimulationParams,
    trim_label,
)

if TYPE_CHECKING:
    from pyreplication.montecarlo.design import SimulationDesign


@dataclass
class SimulationSolution:
    """
    User-facing simulation results.

    Rates are derived on demand from the indicator arrays, which are the
    persisted record of the run. _design is None for runs loaded from a
    ResultStore without a design.
    """
    _result: Result[SimulationParams]
    _design: 'SimulationDesign | None' = None

    # --- Raw outcomes ---

    @property
    def params(self) -> SimulationParams:
        return self._result.params

    @property
    def false_positive(self) -> NDArray[np.bool_]:
        """Rejections under H0, shape (n_trials, n_shapes, n_trims)."""
        return self._result.params.false_positive

    @property
    def true_positive(self) -> NDArray[np.bool_]:
        """Rejections with a true effect, shape (n_trials, n_shapes, n_trims)."""
        return self._result.params.true_positive

    @property
    def g_values(self) -> NDArray[np.floating[Any]]:
        return self._result.params.g_values

    @property
    def h(self) -> float:
        return self._result.params.h

    @property
    def trims(self) -> NDArray[np.floating[Any]]:
        return self._result.params.trims

    @property
    def population_targets(self) -> NDArray[np.floating[Any]]:
        """Population trimmed means, shape (n_shapes, n_trims)."""
        return self._result.params.population_targets

    @property
    def n_trials(self) -> int:
        return self._result.params.n_trials

    @property
    def effect_size(self) -> float:
        return self._result.params.effect_size

    @property
    def seed(self) -> int:
        return self._result.params.seed

    # --- Rates ---

    @property
    def false_positive_rate(self) -> NDArray[np.floating[Any]]:
        """Empirical type I error per cell, shape (n_shapes, n_trims)."""
        return rate_table(self._result.params, FALSE_POSITIVE)

    @property
    def true_positive_rate(self) -> NDArray[np.floating[Any]]:
        """Empirical power per cell, shape (n_shapes, n_trims)."""
        return rate_table(self._result.params, TRUE_POSITIVE)

    def empirical_rate(self, shape_index: int, trim_index: int, condition: str) -> float:
        """Rejection rate of one cell for 'false_positive' or 'true_positive'."""
        return empirical_rate(self._result.params, shape_index, trim_index, condition)

    def rate_conf_int(
        self,
        condition: str,
        conf_level: float = 0.95,
    ) -> tuple[NDArray[np.floating[Any]], NDArray[np.floating[Any]]]:
        """Wilson (lower, upper) bounds per cell, each (n_shapes, n_trims)."""
        rates = rate_table(self._result.params, condition)
        return wilson_interval(rates, self.n_trials, conf_level)

    def rates_frame(self, condition: str) -> pd.DataFrame:
        """Tidy (g, probability, label) table for one condition."""
        return rates_frame(self._result.params, condition)

    def replication_frame(self, trim_index: int | None = None) -> pd.DataFrame:
        """Consistency probabilities of two replications at the empirical power."""
        return replication_frame(
            self._result.params, self.true_positive_rate, trim_index,
        )

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

    # --- Display ---

    def summary(self) -> str:
        """
        Rate table, one row per shape.

        Produces:
            REPLICATION POWER SIMULATION

            100000 trials per cell, n = 20, alpha = 0.05, effect size = 0.6604
            h = 0, seed = 21

            False positive rate:
                 g        mean  10% trimmed mean  20% trimmed mean
              0.00     0.05012           0.05034           0.04987
            ...
        """
        p = self._result.params
        labels = [trim_label(float(t)) for t in p.trims]
        width = max(12, *(len(label) + 2 for label in labels))

        lines = [
            "\nREPLICATION POWER SIMULATION",
            "",
            f"{p.n_trials} trials per cell, n = {p.n}, alpha = {p.alpha:g}, "
            f"effect size = {p.effect_size:.4f}",
            f"h = {p.h:g}, seed = {p.seed}",
        ]
        header = f"{'g':>6s}" + "".join(f"{label:>{width}s}" for label in labels)

        for title, rates in (
            ("False positive rate:", self.false_positive_rate),
            ("True positive rate:", self.true_positive_rate),
        ):
            lines.append("")
            lines.append(title)
            lines.append(header)
            for i, g in enumerate(p.g_values):
                row = "".join(f"{rates[i, j]:>{width}.5f}" for j in range(p.n_trims))
                lines.append(f"{g:>6.2f}{row}")

        return "\n".join(lines)

    def __repr__(self) -> str:
        p = self._result.params
        return (
            f"SimulationSolution(n_trials={p.n_trials}, n_shapes={p.n_shapes}, "
            f"n_trims={p.n_trims}, backend={self.backend_name!r})"
        )
