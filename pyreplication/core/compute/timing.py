"""
Execution timing utilities.

Accumulates wall-clock time per named section of a computation. The
Monte Carlo backends report population-target precomputation and trial
blocks separately; the GPU backend synchronizes CUDA before reading the
clock so queued kernels are counted.
"""

import time
from contextlib import contextmanager
from typing import Iterator


class Timer:
    """
    Accumulating timer with optional CUDA synchronization.

    Usage:
        timer = Timer()
        timer.start()

        with timer.section('population_targets'):
            targets = compute_targets(design)

        with timer.section('trials'):
            run_blocks(design, targets)

        timer.stop()
        timer.result()
        # {'total_seconds': 1.52, 'population_targets': 0.04, 'trials': 1.48}
    """

    def __init__(self, sync_cuda: bool = False):
        """
        Args:
            sync_cuda: If True, synchronize CUDA before timing measurements.
        """
        self._sync_cuda = sync_cuda
        self._sections: dict[str, float] = {}
        self._start_time: float | None = None
        self._total: float | None = None

    def _sync(self) -> None:
        if self._sync_cuda:
            import torch
            if torch.cuda.is_available():
                torch.cuda.synchronize()

    def start(self) -> None:
        """Start the overall timer."""
        self._sync()
        self._start_time = time.perf_counter()

    def stop(self) -> None:
        """Stop the overall timer."""
        self._sync()
        if self._start_time is None:
            raise RuntimeError("Timer.stop() called before start()")
        self._total = time.perf_counter() - self._start_time

    @contextmanager
    def section(self, name: str) -> Iterator[None]:
        """
        Time a named section. Repeated sections accumulate.

        Args:
            name: Section identifier (used as key in result dict)
        """
        self._sync()
        start = time.perf_counter()
        try:
            yield
        finally:
            self._sync()
            elapsed = time.perf_counter() - start
            self._sections[name] = self._sections.get(name, 0.0) + elapsed

    def result(self) -> dict[str, float]:
        """
        Get timing results.

        Returns:
            Dictionary with 'total_seconds' and all section timings

        Raises:
            RuntimeError: If called before stop()
        """
        if self._total is None:
            raise RuntimeError("Timer.result() called before stop()")

        result = {'total_seconds': self._total}
        result.update(self._sections)
        return result
