"""
Design for Monte Carlo power simulations.

SimulationDesign encapsulates every input a backend needs: the shape
grid, trimming levels, trial count, sample size, significance level,
effect size and seed. Immutable, validated at construction, so a bad
configuration is rejected before any sampling starts.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable

import numpy as np
from numpy.typing import ArrayLike, NDArray

from pyreplication.core.exceptions import InvalidParameterError, ValidationError
from pyreplication.core.validation import (
    check_1d,
    check_array,
    check_finite,
    check_nonnegative,
    check_open_unit,
    check_positive_int,
    check_real,
    check_trim,
)
from pyreplication.distributions._common import GHShape
from pyreplication.descriptive._robust import check_trimmed_size
from pyreplication.montecarlo._common import SimulationParams
from pyreplication.power._ttest import effect_size_for_power


DEFAULT_G_VALUES = tuple(np.round(np.linspace(0.0, 1.0, 11), 1).tolist())
DEFAULT_TRIMS = (0.0, 0.1, 0.2)
DEFAULT_N_TRIALS = 100_000
DEFAULT_N = 20
DEFAULT_ALPHA = 0.05
DEFAULT_TARGET_POWER = 0.80
DEFAULT_BLOCK_SIZE = 10_000

# Named runs of the study. Both sweep g over DEFAULT_G_VALUES; they differ
# in tail heaviness.
REFERENCE_RUNS: dict[str, dict[str, Any]] = {
    "gh_h0": {"h": 0.0, "seed": 21},
    "gh_h01": {"h": 0.1, "seed": 21},
}


def _check_seed(seed: Any) -> int:
    """Resolve a seed to a non-negative int, drawing fresh entropy for None."""
    if seed is None:
        return int(np.random.SeedSequence().generate_state(1, np.uint64)[0])
    if isinstance(seed, bool) or not isinstance(seed, (int, np.integer)):
        raise InvalidParameterError(
            f"seed must be a non-negative integer or None, got {seed!r}",
            parameter="seed", value=seed,
        )
    if seed < 0:
        raise InvalidParameterError(
            f"seed must be non-negative, got {seed}",
            parameter="seed", value=seed,
        )
    return int(seed)


def _check_g_values(g_values: ArrayLike) -> NDArray[np.floating[Any]]:
    arr = check_array(g_values, "g_values").astype(np.float64, copy=True)
    check_1d(arr, "g_values")
    check_finite(arr, "g_values")
    if arr.shape[0] < 1:
        raise ValidationError("g_values: at least one shape is required")
    arr.setflags(write=False)
    return arr


def _check_trims(trims: Iterable[float], n: int) -> tuple[float, ...]:
    values = tuple(check_trim(t, "trims") for t in trims)
    if not values:
        raise ValidationError("trims: at least one trimming level is required")
    if len(set(values)) != len(values):
        raise ValidationError(f"trims: duplicate trimming levels in {values}")
    for trim in values:
        check_trimmed_size(n, trim)
    return values


@dataclass(frozen=True)
class SimulationDesign:
    """
    Frozen design for a power simulation.

    Attributes:
        g_values: Skewness grid, one simulated population per value.
        h: Tail heaviness shared by every population.
        trims: Trimming levels tested on every sample.
        n_trials: Independent trials per population.
        n: Sample size of every simulated study.
        alpha: Significance level; a trial rejects when p <= alpha.
        effect_size: Constant added to every observation in the
            true-effect condition.
        target_power: Power the effect size was calibrated to, or None if
            effect_size was given explicitly.
        seed: Root seed; resolved to an int so every run is reproducible.
        block_size: Trials per random sub-stream. Changing it changes the
            draws; changing n_jobs does not.
        n_jobs: Worker processes for the CPU backend.
    """
    g_values: NDArray[np.floating[Any]]
    h: float
    trims: tuple[float, ...]
    n_trials: int
    n: int
    alpha: float
    effect_size: float
    target_power: float | None
    seed: int
    block_size: int
    n_jobs: int = 1

    @classmethod
    def for_simulation(
        cls,
        g_values: ArrayLike = DEFAULT_G_VALUES,
        h: float = 0.0,
        trims: Iterable[float] = DEFAULT_TRIMS,
        *,
        n_trials: int = DEFAULT_N_TRIALS,
        n: int = DEFAULT_N,
        alpha: float = DEFAULT_ALPHA,
        target_power: float = DEFAULT_TARGET_POWER,
        effect_size: float | None = None,
        seed: int | None = None,
        block_size: int = DEFAULT_BLOCK_SIZE,
        n_jobs: int = 1,
    ) -> SimulationDesign:
        """
        Create a simulation design with validation.

        When effect_size is None it is calibrated so that Student's t-test
        on normal data (g = h = 0, sd = 1) has power target_power at this
        n and alpha.

        Raises:
            InvalidParameterError: Malformed shape, size, level or seed.
            DegenerateSampleError: A trimming level leaves fewer than two
                observations of n.
        """
        n = check_positive_int(n, "n")
        if n < 2:
            raise InvalidParameterError(
                f"n must be >= 2, got {n}", parameter="n", value=n,
            )
        g_arr = _check_g_values(g_values)
        h = check_nonnegative(h, "h")
        trim_values = _check_trims(trims, n)
        if 0.0 in trim_values and h >= 1.0:
            raise InvalidParameterError(
                f"the untrimmed mean does not exist for h >= 1, got h={h}",
                parameter="h", value=h,
            )
        n_trials = check_positive_int(n_trials, "n_trials")
        alpha = check_open_unit(alpha, "alpha")
        block_size = check_positive_int(block_size, "block_size")
        n_jobs = check_positive_int(n_jobs, "n_jobs")

        if effect_size is None:
            target_power = check_open_unit(target_power, "target_power")
            effect_size = effect_size_for_power(n, alpha, target_power)
        else:
            effect_size = check_real(effect_size, "effect_size")
            target_power = None

        return cls(
            g_values=g_arr,
            h=h,
            trims=trim_values,
            n_trials=n_trials,
            n=n,
            alpha=alpha,
            effect_size=effect_size,
            target_power=target_power,
            seed=_check_seed(seed),
            block_size=block_size,
            n_jobs=n_jobs,
        )

    @classmethod
    def for_reference_run(cls, run_id: str, **overrides: Any) -> SimulationDesign:
        """
        Design of a named run in REFERENCE_RUNS, with optional overrides
        (e.g. a smaller n_trials or more n_jobs).
        """
        if run_id not in REFERENCE_RUNS:
            raise ValidationError(
                f"unknown reference run {run_id!r}; "
                f"expected one of {sorted(REFERENCE_RUNS)}"
            )
        kwargs = dict(REFERENCE_RUNS[run_id])
        kwargs.update(overrides)
        return cls.for_simulation(**kwargs)

    # --- Derived layout ---

    @property
    def shapes(self) -> tuple[GHShape, ...]:
        return GHShape.grid(self.g_values, self.h)

    @property
    def n_shapes(self) -> int:
        return int(self.g_values.shape[0])

    @property
    def n_trims(self) -> int:
        return len(self.trims)

    @property
    def n_blocks(self) -> int:
        return -(-self.n_trials // self.block_size)

    def block_bounds(self) -> list[tuple[int, int]]:
        """(start, stop) trial ranges, one per random sub-stream."""
        return [
            (start, min(start + self.block_size, self.n_trials))
            for start in range(0, self.n_trials, self.block_size)
        ]

    def matches(self, params: SimulationParams, *, compare_seed: bool = True) -> bool:
        """
        True if params could have been produced by this design. With
        compare_seed=False any seed is accepted.
        """
        return (
            params.n_trials == self.n_trials
            and np.array_equal(params.g_values, self.g_values)
            and params.h == self.h
            and tuple(params.trims.tolist()) == self.trims
            and params.n == self.n
            and params.alpha == self.alpha
            and params.effect_size == self.effect_size
            and (not compare_seed or params.seed == self.seed)
            and params.block_size == self.block_size
        )
