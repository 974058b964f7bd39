"""
Solver dispatch for replication-power simulations.

simulate() runs (or reloads) a simulation; simulate_reference() runs one
of the named study configurations in REFERENCE_RUNS.
"""

from __future__ import annotations

from dataclasses import replace
from typing import Any, Literal

from pyreplication.core.exceptions import ValidationError
from pyreplication.core.compute.device import select_device
from pyreplication.montecarlo.design import SimulationDesign
from pyreplication.montecarlo.solution import SimulationSolution
from pyreplication.montecarlo.store import ResultStore
from pyreplication.montecarlo.backends.cpu import CPUSimulationBackend

BackendChoice = Literal['cpu', 'gpu', 'auto']


def _get_backend(backend: BackendChoice):
    """Select backend based on preference."""
    if backend == 'cpu':
        return CPUSimulationBackend()

    if backend == 'auto':
        device = select_device('auto')
        if device.device_type in ('cuda', 'mps'):
            try:
                from pyreplication.montecarlo.backends.gpu import GPUSimulationBackend
                return GPUSimulationBackend(device=device)
            except ImportError:
                return CPUSimulationBackend()
        return CPUSimulationBackend()

    if backend == 'gpu':
        device = select_device('gpu')
        from pyreplication.montecarlo.backends.gpu import GPUSimulationBackend
        return GPUSimulationBackend(device=device)

    raise ValidationError(f"Unknown backend: {backend!r}")


def simulate(
    design: SimulationDesign | None = None,
    *,
    backend: BackendChoice = 'cpu',
    store: ResultStore | None = None,
    run_id: str | None = None,
    **kwargs: Any,
) -> SimulationSolution:
    """
    Estimate false and true positive rates of trimmed mean tests.

    For every g in the design's grid and every trial, one sample is drawn
    with H0 true and one with the mean shifted by effect_size; each is
    tested at every trimming level against the population trimmed mean.

    Parameters
    ----------
    design : SimulationDesign, optional
        Prepared design. If None, one is built from kwargs with
        SimulationDesign.for_simulation.
    backend : str
        'cpu' (default, bit-reproducible for any n_jobs), 'gpu', or 'auto'.
    store : ResultStore, optional
        Where to look up and persist the run. Requires run_id.
    run_id : str, optional
        Name of the run in store.
    **kwargs
        Passed to SimulationDesign.for_simulation when design is None.

    Returns
    -------
    SimulationSolution

    Raises
    ------
    ValidationError
        If a stored run_id was produced by a different design, or only
        one of store/run_id is given.
    SimulationError
        If any cell fails. Nothing is persisted in that case.

    Notes
    -----
    When the design is built from kwargs without a seed, a stored run is
    reused whatever its seed, and the returned solution carries the
    stored seed. Pass a seed (or a design) to require an exact match.
    """
    seed_given = design is not None or kwargs.get('seed') is not None
    if design is None:
        design = SimulationDesign.for_simulation(**kwargs)
    elif kwargs:
        raise ValidationError(
            f"design given together with design options {sorted(kwargs)}"
        )

    if (store is None) != (run_id is None):
        raise ValidationError("store and run_id must be given together")

    if store is not None and run_id in store:
        solution = store.load(run_id)
        if not design.matches(solution.params, compare_seed=seed_given):
            raise ValidationError(
                f"stored run {run_id!r} at {store.path_for(run_id)} was "
                f"produced by a different design; use another run_id or "
                f"remove the bundle"
            )
        if not seed_given:
            design = replace(design, seed=solution.params.seed)
        return SimulationSolution(solution._result, design)

    result = _get_backend(backend).solve(design)
    solution = SimulationSolution(result, design)

    if store is not None:
        store.save(run_id, solution)
    return solution


def simulate_reference(
    run_id: str,
    *,
    backend: BackendChoice = 'cpu',
    store: ResultStore | None = None,
    **overrides: Any,
) -> SimulationSolution:
    """
    Run a named configuration from REFERENCE_RUNS, stored under its own
    name when a store is given.
    """
    design = SimulationDesign.for_reference_run(run_id, **overrides)
    return simulate(
        design,
        backend=backend,
        store=store,
        run_id=run_id if store is not None else None,
    )
