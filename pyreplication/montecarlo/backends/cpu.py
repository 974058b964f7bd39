"""
CPU backend for replication-power simulations.

Every (shape, block) pair owns a SeedSequence child of the design seed,
and every block splits into independent null and shifted sub-streams.
Blocks are therefore independent units of work: running them in one
process or across a pool yields the same indicator arrays.
"""

from __future__ import annotations

from multiprocessing import get_context
from typing import Any

import numpy as np
from numpy.typing import NDArray

from pyreplication.core.result import Result
from pyreplication.core.compute.timing import Timer
from pyreplication.core.exceptions import (
    ConvergenceError,
    DegenerateSampleError,
    SimulationError,
)
from pyreplication.distributions.gh import gh_transform, gh_trimmed_mean
from pyreplication.hypothesis.backends._trimmed_test import (
    trimmed_t_batch,
    two_sided_pvalue,
)
from pyreplication.montecarlo._common import (
    FALSE_POSITIVE,
    TRUE_POSITIVE,
    SimulationParams,
)
from pyreplication.montecarlo.design import SimulationDesign


def population_targets(
    g_values: NDArray[np.floating[Any]],
    h: float,
    trims: tuple[float, ...],
) -> NDArray[np.floating[Any]]:
    """
    Population trimmed mean for every (shape, trim) cell.

    Raises:
        SimulationError: If a target cannot be computed to tolerance. The
            originating ConvergenceError is chained as __cause__.
    """
    targets = np.empty((len(g_values), len(trims)), dtype=np.float64)
    for i, g in enumerate(g_values):
        for j, trim in enumerate(trims):
            try:
                targets[i, j] = gh_trimmed_mean(trim, float(g), h)
            except ConvergenceError as exc:
                raise SimulationError(
                    f"population trimmed mean failed for g={g:g}, h={h:g}, "
                    f"trim={trim:g}: {exc}",
                    g=float(g), h=h, trim=trim, trial=None,
                ) from exc
    return targets


def block_seeds(
    seed: int,
    n_shapes: int,
    n_blocks: int,
) -> list[list[tuple[np.random.SeedSequence, np.random.SeedSequence]]]:
    """
    (null, shifted) SeedSequence pairs indexed [shape][block].

    Depends only on seed and the grid layout, never on how blocks are
    scheduled.
    """
    root = np.random.SeedSequence(seed)
    out = []
    for shape_seq in root.spawn(n_shapes):
        out.append([tuple(b.spawn(2)) for b in shape_seq.spawn(n_blocks)])
    return out


def _decide(
    sorted_samples: NDArray[np.floating[Any]],
    trims: tuple[float, ...],
    targets: NDArray[np.floating[Any]],
    alpha: float,
) -> NDArray[np.bool_]:
    """Reject indicators, shape (m, n_trims), for presorted samples."""
    out = np.empty((sorted_samples.shape[0], len(trims)), dtype=np.bool_)
    for j, trim in enumerate(trims):
        t, df = trimmed_t_batch(sorted_samples, trim, targets[j], presorted=True)
        out[:, j] = two_sided_pvalue(t, df) <= alpha
    return out


def _run_block(task: tuple) -> tuple[int, int, NDArray[np.bool_], NDArray[np.bool_]]:
    """
    Simulate one block of trials for one shape.

    Module level so it pickles into spawned worker processes.
    """
    (shape_index, start, stop, null_seq, alt_seq,
     g, h, trims, targets, n, alpha, effect_size) = task
    m = stop - start

    rejections = {}
    for condition, seq, shift in (
        (FALSE_POSITIVE, null_seq, 0.0),
        (TRUE_POSITIVE, alt_seq, effect_size),
    ):
        rng = np.random.Generator(np.random.PCG64(seq))
        x = gh_transform(rng.standard_normal((m, n)), g, h) + shift
        x.sort(axis=-1)
        try:
            rejections[condition] = _decide(x, trims, targets, alpha)
        except DegenerateSampleError as exc:
            trial = None if exc.index is None else start + exc.index
            raise SimulationError(
                f"{condition.replace('_', ' ')} trial {trial} failed for "
                f"g={g:g}, h={h:g}, trim={exc.trim:g}: {exc}",
                g=g, h=h, trim=exc.trim, trial=trial,
            ) from exc

    return shape_index, start, rejections[FALSE_POSITIVE], rejections[TRUE_POSITIVE]


class CPUSimulationBackend:
    """
    CPU backend for replication-power simulations.

    Runs blocks in-process for n_jobs == 1, otherwise across a pool of
    spawned worker processes.
    """

    @property
    def name(self) -> str:
        return 'cpu_simulation'

    def solve(self, design: SimulationDesign) -> Result[SimulationParams]:
        """Run every trial of the design and return Result[SimulationParams]."""
        timer = Timer()
        timer.start()

        shape = (design.n_trials, design.n_shapes, design.n_trims)
        false_positive = np.zeros(shape, dtype=np.bool_)
        true_positive = np.zeros(shape, dtype=np.bool_)

        with timer.section('population_targets'):
            targets = population_targets(design.g_values, design.h, design.trims)

        seeds = block_seeds(design.seed, design.n_shapes, design.n_blocks)
        bounds = design.block_bounds()
        tasks = [
            (i, start, stop, *seeds[i][b],
             float(design.g_values[i]), design.h, design.trims, targets[i],
             design.n, design.alpha, design.effect_size)
            for i in range(design.n_shapes)
            for b, (start, stop) in enumerate(bounds)
        ]

        with timer.section('trials'):
            if design.n_jobs == 1:
                blocks = map(_run_block, tasks)
                self._collect(blocks, false_positive, true_positive)
            else:
                ctx = get_context("spawn")
                with ctx.Pool(processes=design.n_jobs) as pool:
                    blocks = pool.imap(_run_block, tasks, chunksize=1)
                    self._collect(blocks, false_positive, true_positive)

        timer.stop()

        params = SimulationParams(
            false_positive=false_positive,
            true_positive=true_positive,
            g_values=np.array(design.g_values, dtype=np.float64),
            h=design.h,
            trims=np.array(design.trims, dtype=np.float64),
            population_targets=targets,
            alpha=design.alpha,
            n=design.n,
            effect_size=design.effect_size,
            seed=design.seed,
            block_size=design.block_size,
        )

        return Result(
            params=params,
            info={
                'n_blocks': design.n_blocks,
                'block_size': design.block_size,
                'n_jobs': design.n_jobs,
                'seed': design.seed,
                'device': 'cpu',
            },
            timing=timer.result(),
            backend_name=self.name,
        )

    @staticmethod
    def _collect(blocks, false_positive, true_positive) -> None:
        for i, start, fp, tp in blocks:
            stop = start + fp.shape[0]
            false_positive[start:stop, i, :] = fp
            true_positive[start:stop, i, :] = tp
